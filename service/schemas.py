# service/schemas.py

from pydantic import BaseModel
from typing import Any, Dict, List, Optional


class JobRequest(BaseModel):
    title: str = ""
    company: str = ""
    description: str = ""
    location: Optional[str] = None
    job_id: Optional[str] = None

    def to_posting(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'company': self.company,
            'description': self.description,
            'location': self.location,
            'jobId': self.job_id,
        }


class CVRequest(BaseModel):
    cv_content: str = ""
    cv_id: str = "cv"


class JobMatrixRequest(BaseModel):
    jobs: List[JobRequest] = []


class MatchRequest(BaseModel):
    job_matrix: Dict[str, Any]
    cv_matrix: Dict[str, Any]


class ClusterRequest(BaseModel):
    job_matches: List[Dict[str, Any]] = []


class OptimizeRequest(BaseModel):
    cv_content: str
    cluster: Dict[str, Any]
    optimization_level: str = "moderate"


class SummaryRequest(BaseModel):
    cv_content: str
    target_jobs: List[Dict[str, Any]] = []


class EnhanceExperienceRequest(BaseModel):
    experience_section: str
    target_skills: List[str] = []
    job_context: str = "general"


class VariantsRequest(BaseModel):
    cv_content: str
    clusters: List[Dict[str, Any]] = []
    seed: Optional[int] = None
    always_modify: bool = False


class StoreCVRequest(BaseModel):
    content: str
