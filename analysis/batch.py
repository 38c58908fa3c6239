# analysis/batch.py
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from analysis.matrix_generator import MatrixGenerator
from analysis.models import JobAnalysis, JobMatrix, JobPosting

logger = logging.getLogger(__name__)


@dataclass
class ProgressEvent:
    """Progress notification for a long-running operation"""
    operation: str
    event: str                 # start | update | complete | error
    current_step: int
    total_steps: int
    message: str = ""
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def percentage(self) -> int:
        if self.total_steps <= 0:
            return 0
        return round(self.current_step / self.total_steps * 100)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'operation': self.operation,
            'event': self.event,
            'currentStep': self.current_step,
            'totalSteps': self.total_steps,
            'percentage': self.percentage,
            'message': self.message,
            'timestamp': self.timestamp,
        }


ProgressCallback = Callable[[ProgressEvent], None]


def log_progress(event: ProgressEvent):
    """Default progress callback"""
    if event.event == 'error':
        logger.error(f"[{event.operation}] {event.message}")
    else:
        logger.info(f"[{event.operation}] {event.percentage}% {event.message}")


@dataclass
class BatchAnalysisResult:
    """Per-job analyses plus the comparison matrix built from them"""
    batch_analysis: List[Tuple[str, JobAnalysis]]
    comparison_matrix: JobMatrix
    total_jobs: int
    processed_at: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return {
            'batchAnalysis': [
                {'jobId': job_id, 'analysis': analysis.to_dict()}
                for job_id, analysis in self.batch_analysis
            ],
            'comparisonMatrix': self.comparison_matrix.to_dict(),
            'summary': {
                'totalJobs': self.total_jobs,
                'processedAt': self.processed_at,
            },
        }


class BatchJobAnalyzer:
    """Analyze jobs one after another, reporting progress after each"""

    OPERATION = 'batch_job_analysis'

    def __init__(self, matrix_generator: Optional[MatrixGenerator] = None):
        self.matrix_generator = matrix_generator or MatrixGenerator()

    def analyze_jobs(
        self,
        jobs: List[Tuple[str, Union[JobPosting, Dict[str, Any]]]],
        progress_callback: Optional[ProgressCallback] = None
    ) -> BatchAnalysisResult:
        """
        Analyze (job_id, job) pairs in input order

        Args:
            jobs: Job identifiers with their postings
            progress_callback: Receives ProgressEvents; defaults to logging

        Returns:
            BatchAnalysisResult
        """
        report = progress_callback or log_progress
        total = len(jobs)
        results: List[Tuple[str, JobAnalysis]] = []

        report(ProgressEvent(self.OPERATION, 'start', 0, total, f"Starting batch analysis of {total} jobs"))

        try:
            for index, (job_id, job) in enumerate(jobs, 1):
                report(ProgressEvent(self.OPERATION, 'update', index, total, f"Analyzing job {job_id}"))

                posting = job if isinstance(job, JobPosting) else JobPosting.from_dict(job)
                if not posting.job_id:
                    posting = replace(posting, job_id=job_id)

                results.append((job_id, self.matrix_generator.job_analyzer.analyze_job(posting)))

                report(ProgressEvent(self.OPERATION, 'update', index, total, f"Completed analysis for {job_id}"))

            matrix = self.matrix_generator.build_job_matrix([analysis for _, analysis in results])
        except Exception as e:
            report(ProgressEvent(self.OPERATION, 'error', len(results), total, str(e)))
            raise

        report(ProgressEvent(self.OPERATION, 'complete', total, total, f"Processed {total} jobs"))

        return BatchAnalysisResult(
            batch_analysis=results,
            comparison_matrix=matrix,
            total_jobs=total
        )
