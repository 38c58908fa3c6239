# analysis/models.py
import math
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class ParameterCategory(Enum):
    """Category of an extracted job or CV parameter"""
    TECHNICAL = "technical"
    LEADERSHIP = "leadership"
    DOMAIN = "domain"
    SOFT = "soft"
    LOCATION = "location"       # job side only
    COMPANY = "company"         # job side only
    EXPERIENCE = "experience"   # CV side only
    EDUCATION = "education"     # CV side only


# Categories that are averaged into MatchResult.category_scores
SCORED_CATEGORIES = [
    ParameterCategory.TECHNICAL,
    ParameterCategory.LEADERSHIP,
    ParameterCategory.DOMAIN,
    ParameterCategory.SOFT,
]


class SeniorityLevel(Enum):
    """Fixed six-step seniority ladder, lowest first"""
    JUNIOR = "junior"
    MID = "mid"
    SENIOR = "senior"
    LEAD = "lead"
    DIRECTOR = "director"
    EXECUTIVE = "executive"

    @property
    def rank(self) -> int:
        return list(SeniorityLevel).index(self)

    @classmethod
    def from_rank(cls, rank: int) -> 'SeniorityLevel':
        levels = list(cls)
        return levels[max(0, min(len(levels) - 1, rank))]

    @classmethod
    def parse(cls, value: Any, default: 'SeniorityLevel' = None) -> 'SeniorityLevel':
        """Parse a JSON value, falling back to default (mid) when unknown"""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return default or cls.MID


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return min(high, max(low, value))


def _as_float(value: Any, default: float = 0.0) -> float:
    if isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    return number if math.isfinite(number) else default


def _as_years(value: Any) -> Optional[int]:
    """Whole years, None when missing or not a finite number"""
    if value is None:
        return None
    years = _as_float(value, default=math.nan)
    return int(years) if math.isfinite(years) else None


def _as_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value)


def _as_str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _parse_category(value: Any) -> Optional[ParameterCategory]:
    try:
        return ParameterCategory(value)
    except ValueError:
        return None


@dataclass
class JobPosting:
    """Raw job posting handed to the job analyzer"""
    title: str = ""
    company: str = ""
    description: str = ""
    location: Optional[str] = None
    job_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> 'JobPosting':
        if not isinstance(data, dict):
            logger.warning(f"Job data is not an object ({type(data).__name__}), using empty posting")
            data = {}

        location = data.get('location')
        job_id = data.get('jobId', data.get('job_id'))

        return cls(
            title=_as_str(data.get('title')),
            company=_as_str(data.get('company')),
            description=_as_str(data.get('description')),
            location=_as_str(location) if location else None,
            job_id=_as_str(job_id) if job_id else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'title': self.title,
            'company': self.company,
            'description': self.description,
        }
        if self.location:
            data['location'] = self.location
        if self.job_id:
            data['jobId'] = self.job_id
        return data


@dataclass
class JobParameter:
    """A weighted requirement extracted from a job posting"""
    name: str
    category: ParameterCategory
    weight: float              # 0-1 importance
    value: str
    confidence: float          # 0-1

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'category': self.category.value,
            'weight': self.weight,
            'value': self.value,
            'confidence': self.confidence,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Optional['JobParameter']:
        """Returns None for entries that cannot be used (no name, unknown category)"""
        if not isinstance(data, dict) or not data.get('name'):
            return None

        category = _parse_category(data.get('category'))
        if category is None:
            logger.warning(f"Dropping job parameter {data.get('name')}: unknown category {data.get('category')}")
            return None

        return cls(
            name=_as_str(data['name']),
            category=category,
            weight=clamp(_as_float(data.get('weight'))),
            value=_as_str(data.get('value')),
            confidence=clamp(_as_float(data.get('confidence'))),
        )


@dataclass
class CVParameter:
    """A skill or trait found in a CV with a proficiency strength"""
    name: str
    category: ParameterCategory
    strength: float            # 0-1 proficiency
    value: str
    evidence: List[str] = field(default_factory=list)
    years_of_experience: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'name': self.name,
            'category': self.category.value,
            'strength': self.strength,
            'value': self.value,
            'evidence': list(self.evidence),
        }
        if self.years_of_experience is not None:
            data['yearsOfExperience'] = self.years_of_experience
        return data

    @classmethod
    def from_dict(cls, data: Any) -> Optional['CVParameter']:
        if not isinstance(data, dict) or not data.get('name'):
            return None

        category = _parse_category(data.get('category'))
        if category is None:
            logger.warning(f"Dropping CV parameter {data.get('name')}: unknown category {data.get('category')}")
            return None

        years = data.get('yearsOfExperience')
        return cls(
            name=_as_str(data['name']),
            category=category,
            strength=clamp(_as_float(data.get('strength'))),
            value=_as_str(data.get('value')),
            evidence=_as_str_list(data.get('evidence')),
            years_of_experience=_as_years(years),
        )


def _unique_by_name(parameters: list, kind: str) -> list:
    seen = set()
    unique = []
    for param in parameters:
        if param.name in seen:
            logger.warning(f"Dropping duplicate {kind} parameter: {param.name}")
            continue
        seen.add(param.name)
        unique.append(param)
    return unique


@dataclass
class JobAnalysis:
    """Result of analyzing one job posting"""
    title: str
    company: str
    parameters: List[JobParameter]
    key_requirements: List[str]
    seniority_level: SeniorityLevel
    job_id: Optional[str] = None
    analysis_metadata: Dict[str, Any] = field(default_factory=dict)

    def get_parameter(self, name: str) -> Optional[JobParameter]:
        for param in self.parameters:
            if param.name == name:
                return param
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'jobId': self.job_id,
            'title': self.title,
            'company': self.company,
            'parameters': [p.to_dict() for p in self.parameters],
            'keyRequirements': list(self.key_requirements),
            'seniorityLevel': self.seniority_level.value,
            'analysisMetadata': dict(self.analysis_metadata),
        }

    @classmethod
    def from_dict(cls, data: Any) -> 'JobAnalysis':
        data = _as_dict(data)
        raw_params = data.get('parameters') if isinstance(data.get('parameters'), list) else []
        parameters = [p for p in (JobParameter.from_dict(item) for item in raw_params) if p]
        job_id = data.get('jobId')

        return cls(
            title=_as_str(data.get('title')),
            company=_as_str(data.get('company')),
            parameters=_unique_by_name(parameters, 'job'),
            key_requirements=_as_str_list(data.get('keyRequirements')),
            seniority_level=SeniorityLevel.parse(data.get('seniorityLevel')),
            job_id=_as_str(job_id) if job_id else None,
            analysis_metadata=_as_dict(data.get('analysisMetadata')),
        )


@dataclass
class CVAnalysis:
    """Result of analyzing one CV"""
    cv_id: str
    total_experience: float
    parameters: List[CVParameter]
    key_strengths: List[str]
    seniority_level: SeniorityLevel
    current_role: Optional[str] = None
    analysis_metadata: Dict[str, Any] = field(default_factory=dict)

    def get_parameter(self, name: str) -> Optional[CVParameter]:
        for param in self.parameters:
            if param.name == name:
                return param
        return None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'cvId': self.cv_id,
            'totalExperience': self.total_experience,
            'parameters': [p.to_dict() for p in self.parameters],
            'keyStrengths': list(self.key_strengths),
            'seniorityLevel': self.seniority_level.value,
            'analysisMetadata': dict(self.analysis_metadata),
        }
        if self.current_role:
            data['currentRole'] = self.current_role
        return data

    @classmethod
    def from_dict(cls, data: Any) -> 'CVAnalysis':
        data = _as_dict(data)
        raw_params = data.get('parameters') if isinstance(data.get('parameters'), list) else []
        parameters = [p for p in (CVParameter.from_dict(item) for item in raw_params) if p]
        current_role = data.get('currentRole')

        return cls(
            cv_id=_as_str(data.get('cvId')),
            total_experience=max(0.0, _as_float(data.get('totalExperience'))),
            parameters=_unique_by_name(parameters, 'CV'),
            key_strengths=_as_str_list(data.get('keyStrengths')),
            seniority_level=SeniorityLevel.parse(data.get('seniorityLevel')),
            current_role=_as_str(current_role) if current_role else None,
            analysis_metadata=_as_dict(data.get('analysisMetadata')),
        )


@dataclass
class JobMatrix:
    """
    Jobs x parameters weight table

    weight_matrix[i][k] is the weight job i gives parameters[k], 0 when
    the job's analysis did not emit that parameter.
    """
    matrix_id: str
    jobs: List[JobAnalysis]
    parameters: List[str]
    weight_matrix: List[List[float]]
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'matrixId': self.matrix_id,
            'jobs': [job.to_dict() for job in self.jobs],
            'parameters': list(self.parameters),
            'weightMatrix': [list(row) for row in self.weight_matrix],
            'metadata': dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: Any) -> 'JobMatrix':
        """Rebuild a matrix, re-sorting the axis and fixing row lengths"""
        data = _as_dict(data)
        raw_jobs = data.get('jobs') if isinstance(data.get('jobs'), list) else []
        jobs = [JobAnalysis.from_dict(job) for job in raw_jobs]

        names = _as_str_list(data.get('parameters'))
        raw_rows = data.get('weightMatrix') if isinstance(data.get('weightMatrix'), list) else []

        # Cells are re-keyed by name so an unsorted or padded axis still lines up
        row_maps = []
        for i in range(len(jobs)):
            row = raw_rows[i] if i < len(raw_rows) and isinstance(raw_rows[i], list) else []
            cells = {}
            for k, name in enumerate(names):
                if name not in cells:
                    cells[name] = clamp(_as_float(row[k])) if k < len(row) else 0.0
            row_maps.append(cells)

        axis = sorted(set(names))
        weight_matrix = [[cells.get(name, 0.0) for name in axis] for cells in row_maps]

        return cls(
            matrix_id=_as_str(data.get('matrixId')),
            jobs=jobs,
            parameters=axis,
            weight_matrix=weight_matrix,
            metadata=_as_dict(data.get('metadata')),
        )


@dataclass
class CVMatrix:
    """A single CV's strength vector aligned to its parameter names"""
    matrix_id: str
    cv_analysis: CVAnalysis
    parameters: List[str]
    strength_vector: List[float]
    metadata: Dict[str, Any] = field(default_factory=dict)

    def strength_of(self, name: str) -> float:
        """CV strength for a parameter, 0 when the CV does not have it"""
        try:
            index = self.parameters.index(name)
        except ValueError:
            return 0.0
        if index >= len(self.strength_vector):
            return 0.0
        return self.strength_vector[index]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'matrixId': self.matrix_id,
            'cvAnalysis': self.cv_analysis.to_dict(),
            'parameters': list(self.parameters),
            'strengthVector': list(self.strength_vector),
            'metadata': dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: Any) -> 'CVMatrix':
        data = _as_dict(data)
        names = _as_str_list(data.get('parameters'))
        raw_vector = data.get('strengthVector') if isinstance(data.get('strengthVector'), list) else []

        parameters = []
        strengths = []
        for k, name in enumerate(names):
            if name in parameters:
                continue
            parameters.append(name)
            strengths.append(clamp(_as_float(raw_vector[k])) if k < len(raw_vector) else 0.0)

        return cls(
            matrix_id=_as_str(data.get('matrixId')),
            cv_analysis=CVAnalysis.from_dict(data.get('cvAnalysis')),
            parameters=parameters,
            strength_vector=strengths,
            metadata=_as_dict(data.get('metadata')),
        )


@dataclass
class ParameterMatch:
    """Match of one job parameter against the CV"""
    parameter: str
    job_weight: float
    cv_strength: float
    match_score: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'parameter': self.parameter,
            'jobWeight': self.job_weight,
            'cvStrength': self.cv_strength,
            'matchScore': self.match_score,
        }


@dataclass
class MatchResult:
    """Match report for one (job, CV) pair"""
    job_id: str
    job_title: str
    company: str
    overall_score: float
    category_scores: Dict[str, float]
    strengths: List[str] = field(default_factory=list)        # max 5
    gaps: List[str] = field(default_factory=list)             # max 5
    recommendations: List[str] = field(default_factory=list)  # max 3
    parameter_matches: List[ParameterMatch] = field(default_factory=list)  # top 10

    def to_dict(self) -> Dict[str, Any]:
        return {
            'jobId': self.job_id,
            'jobTitle': self.job_title,
            'company': self.company,
            'overallScore': self.overall_score,
            'categoryScores': dict(self.category_scores),
            'strengths': list(self.strengths),
            'gaps': list(self.gaps),
            'recommendations': list(self.recommendations),
            'details': {
                'parameterMatches': [m.to_dict() for m in self.parameter_matches],
            },
        }


@dataclass
class MatchSummary:
    """Cross-job statistics for one CV"""
    average_score: float
    best_match: Optional[MatchResult]
    top_skills: List[str] = field(default_factory=list)
    common_gaps: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'averageScore': self.average_score,
            'bestMatch': self.best_match.to_dict() if self.best_match else None,
            'topSkills': list(self.top_skills),
            'commonGaps': list(self.common_gaps),
            'recommendations': list(self.recommendations),
        }


@dataclass
class ComprehensiveMatch:
    """All match results of one CV against N jobs"""
    cv_id: str
    total_jobs: int
    matches: List[MatchResult]
    summary: MatchSummary
    generated_at: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return {
            'cvId': self.cv_id,
            'totalJobs': self.total_jobs,
            'matches': [m.to_dict() for m in self.matches],
            'summary': self.summary.to_dict(),
            'generatedAt': self.generated_at,
        }
