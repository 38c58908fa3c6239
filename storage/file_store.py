# storage/file_store.py
import re
import json
import logging
from pathlib import Path
from datetime import datetime
from typing import Any, Dict, List, Union

logger = logging.getLogger(__name__)


class FileStore:
    """Keep CVs, job postings and matrices as plain files under one root"""

    ID_PATTERN = re.compile(r'[A-Za-z0-9_-][A-Za-z0-9._-]*')

    def __init__(self, root: Union[str, Path] = "data"):
        self.root = Path(root)
        self.cv_dir = self.root / "cvs"
        self.job_dir = self.root / "jobs"
        self.matrix_dir = self.root / "matrices"
        self._ensure_directories()

    def _ensure_directories(self):
        for directory in (self.cv_dir, self.job_dir, self.matrix_dir):
            directory.mkdir(parents=True, exist_ok=True)
        logger.debug(f"File store ready: {self.root}")

    def _safe_id(self, entity_id: str) -> str:
        """Reject identifiers that could escape the store directory"""
        if not isinstance(entity_id, str) or not self.ID_PATTERN.fullmatch(entity_id):
            raise ValueError(f"Invalid identifier: {entity_id!r}")
        return entity_id

    @staticmethod
    def _read(path: Path, kind: str) -> str:
        if not path.exists():
            raise FileNotFoundError(f"{kind} not found: {path.stem}")
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()

    @staticmethod
    def _write(path: Path, content: str):
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)

    # ========== CVs ==========

    def store_cv(self, cv_id: str, content: str) -> Path:
        path = self.cv_dir / f"{self._safe_id(cv_id)}.md"
        self._write(path, content)
        logger.info(f"Stored CV: {cv_id}")
        return path

    def load_cv(self, cv_id: str) -> str:
        return self._read(self.cv_dir / f"{self._safe_id(cv_id)}.md", "CV")

    def list_cvs(self) -> List[str]:
        return sorted(path.stem for path in self.cv_dir.glob("*.md"))

    # ========== Jobs ==========

    def store_job(self, job_id: str, job: Dict[str, Any]) -> Dict[str, Any]:
        """Save a job posting stamped with storedAt; returns the stored record"""
        record = dict(job)
        record['storedAt'] = datetime.now().isoformat()

        path = self.job_dir / f"{self._safe_id(job_id)}.json"
        self._write(path, json.dumps(record, indent=2))

        logger.info(f"Stored job: {job_id} ({record.get('title', 'untitled')})")
        return record

    def load_job(self, job_id: str) -> Dict[str, Any]:
        return json.loads(self._read(self.job_dir / f"{self._safe_id(job_id)}.json", "Job"))

    def list_jobs(self) -> List[Dict[str, Any]]:
        """Id, title, company and storedAt of every stored job"""
        jobs = []
        for path in sorted(self.job_dir.glob("*.json")):
            try:
                record = json.loads(self._read(path, "Job"))
            except json.JSONDecodeError as e:
                logger.warning(f"Skipping unreadable job file {path.name}: {e}")
                continue

            jobs.append({
                'id': path.stem,
                'title': record.get('title', ''),
                'company': record.get('company', ''),
                'storedAt': record.get('storedAt'),
            })
        return jobs

    # ========== Matrices ==========

    def store_matrix(self, matrix_id: str, matrix: Dict[str, Any]) -> Path:
        path = self.matrix_dir / f"{self._safe_id(matrix_id)}.json"
        self._write(path, json.dumps(matrix, indent=2))
        logger.info(f"Stored matrix: {matrix_id}")
        return path

    def load_matrix(self, matrix_id: str) -> Dict[str, Any]:
        return json.loads(self._read(self.matrix_dir / f"{self._safe_id(matrix_id)}.json", "Matrix"))

    def list_matrices(self) -> List[str]:
        return sorted(path.stem for path in self.matrix_dir.glob("*.json"))
