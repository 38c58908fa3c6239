# tailoring/models.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from analysis.models import MatchResult


class Impact(Enum):
    """Expected effect of a CV change on match scores"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Estimated match-score gain per change
IMPACT_GAINS = {
    Impact.HIGH: 0.15,
    Impact.MEDIUM: 0.08,
    Impact.LOW: 0.03,
}


class OptimizationLevel(Enum):
    """How extensively a CV is rewritten"""
    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"

    @classmethod
    def parse(cls, value: Any) -> 'OptimizationLevel':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.MODERATE


def _float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


@dataclass
class ClusterJob:
    """Match summary of one job, the unit the cluster analyzer groups"""
    job_id: str
    job_title: str
    company: str = ""
    overall_score: float = 0.0
    strengths: List[str] = field(default_factory=list)
    gaps: List[str] = field(default_factory=list)

    @classmethod
    def from_match(cls, match: MatchResult) -> 'ClusterJob':
        return cls(
            job_id=match.job_id,
            job_title=match.job_title,
            company=match.company,
            overall_score=match.overall_score,
            strengths=list(match.strengths),
            gaps=list(match.gaps),
        )

    @classmethod
    def from_dict(cls, data: Any) -> 'ClusterJob':
        data = data if isinstance(data, dict) else {}
        title = str(data.get('jobTitle') or data.get('title') or '')
        return cls(
            job_id=str(data.get('jobId') or title),
            job_title=title,
            company=str(data.get('company') or ''),
            overall_score=_float(data.get('overallScore')),
            strengths=_str_list(data.get('strengths')),
            gaps=_str_list(data.get('gaps')),
        )


@dataclass
class ClusterJobRef:
    """Job listed inside a cluster"""
    job_id: str
    title: str
    company: str
    score: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'jobId': self.job_id,
            'title': self.title,
            'company': self.company,
            'score': self.score,
        }


@dataclass
class ClusterCharacteristics:
    """Qualitative profile of a job cluster"""
    seniority_level: str
    industry_focus: str
    technical_depth: str          # high | medium | low
    leadership_emphasis: str      # high | medium | low
    customer_facing: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            'seniorityLevel': self.seniority_level,
            'industryFocus': self.industry_focus,
            'technicalDepth': self.technical_depth,
            'leadershipEmphasis': self.leadership_emphasis,
            'customerFacing': self.customer_facing,
        }


@dataclass
class JobCluster:
    """A group of similar jobs targeted by one CV variant"""
    id: str
    name: str
    description: str = ""
    jobs: List[ClusterJobRef] = field(default_factory=list)
    common_requirements: List[str] = field(default_factory=list)
    key_skills: List[str] = field(default_factory=list)
    average_score: float = 0.0
    cluster_size: int = 0
    characteristics: Optional[ClusterCharacteristics] = None
    optimization_potential: float = 0.5     # 0-1, how much CV work could help

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'jobs': [job.to_dict() for job in self.jobs],
            'commonRequirements': list(self.common_requirements),
            'keySkills': list(self.key_skills),
            'averageScore': self.average_score,
            'clusterSize': self.cluster_size,
            'characteristics': self.characteristics.to_dict() if self.characteristics else None,
            'optimizationPotential': self.optimization_potential,
        }

    @classmethod
    def from_dict(cls, data: Any) -> 'JobCluster':
        """Accepts analyzer output as well as hand-written cluster descriptions"""
        data = data if isinstance(data, dict) else {}

        jobs = []
        for job in data.get('jobs') or []:
            if isinstance(job, dict):
                title = str(job.get('title') or job.get('jobTitle') or '')
                jobs.append(ClusterJobRef(
                    job_id=str(job.get('jobId') or title),
                    title=title,
                    company=str(job.get('company') or ''),
                    score=_float(job.get('score')),
                ))
            elif job is not None:
                jobs.append(ClusterJobRef(job_id=str(job), title=str(job), company='', score=0.0))

        name = str(data.get('name') or data.get('id') or 'General Technical Roles')
        size = data.get('clusterSize')

        return cls(
            id=str(data.get('id') or name.lower().replace(' ', '_')),
            name=name,
            description=str(data.get('description') or ''),
            jobs=jobs,
            common_requirements=_str_list(data.get('commonRequirements') or data.get('requiredSkills')),
            key_skills=_str_list(data.get('keySkills')),
            average_score=_float(data.get('averageScore')),
            cluster_size=int(_float(size)) if size is not None else len(jobs),
            optimization_potential=_float(data.get('optimizationPotential'), 0.5),
        )


@dataclass
class ClusterAnalysis:
    """Clusters found in a set of job matches"""
    clusters: List[JobCluster]
    total_jobs: int
    recommended_strategy: str
    priority_order: List[str]      # cluster ids, highest optimization priority first
    insights: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'clusters': [cluster.to_dict() for cluster in self.clusters],
            'totalJobs': self.total_jobs,
            'recommendedStrategy': self.recommended_strategy,
            'priorityOrder': list(self.priority_order),
            'insights': list(self.insights),
        }


@dataclass
class OptimizationChange:
    """One change applied to a CV"""
    section: str
    type: str
    description: str
    impact: Impact

    def to_dict(self) -> Dict[str, Any]:
        return {
            'section': self.section,
            'type': self.type,
            'description': self.description,
            'impact': self.impact.value,
        }


def estimate_gain(changes: List[OptimizationChange]) -> float:
    """Summed score gain of a list of changes (uncapped)"""
    return sum(IMPACT_GAINS[change.impact] for change in changes)


def change_quality(changes: List[OptimizationChange], default: float = 0.0) -> float:
    """Share of high-impact changes, medium/low counting half"""
    if not changes:
        return default
    return sum(1.0 if c.impact == Impact.HIGH else 0.5 for c in changes) / len(changes)


@dataclass
class OptimizationResult:
    """CV optimized for one cluster"""
    optimized_cv: str
    changes: List[OptimizationChange]
    target_score: float            # estimated improvement in match score
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'optimizedCV': self.optimized_cv,
            'changes': [change.to_dict() for change in self.changes],
            'targetScore': self.target_score,
            'confidence': self.confidence,
        }


@dataclass
class TargetJob:
    """Job a targeted summary is written for"""
    title: str = ""
    company: str = ""
    key_requirements: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> 'TargetJob':
        data = data if isinstance(data, dict) else {}
        return cls(
            title=str(data.get('title') or ''),
            company=str(data.get('company') or ''),
            key_requirements=_str_list(data.get('keyRequirements')),
        )


@dataclass
class TargetedSummary:
    summary: str
    key_points: List[str]
    emphasized_skills: List[str]
    reasoning: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'summary': self.summary,
            'keyPoints': list(self.key_points),
            'emphasizedSkills': list(self.emphasized_skills),
            'reasoning': self.reasoning,
        }


@dataclass
class CVVariant:
    """A CV rewritten for one job cluster"""
    id: str
    name: str
    target_cluster: str
    description: str
    cv_content: str
    optimizations: List[OptimizationChange]
    target_jobs: List[str]
    estimated_improvement: float
    confidence: float
    optimization_level: OptimizationLevel
    generated_at: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'targetCluster': self.target_cluster,
            'description': self.description,
            'cvContent': self.cv_content,
            'optimizations': [opt.to_dict() for opt in self.optimizations],
            'targetJobs': list(self.target_jobs),
            'estimatedImprovement': self.estimated_improvement,
            'confidence': self.confidence,
            'metadata': {
                'generatedAt': self.generated_at,
                'optimizationLevel': self.optimization_level.value,
                'basedOn': 'cluster-analysis',
            },
        }


@dataclass
class VariantRecommendation:
    variant: str                   # variant id
    job_cluster: str               # cluster id
    reasoning: str
    priority: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'variant': self.variant,
            'jobCluster': self.job_cluster,
            'reasoning': self.reasoning,
            'priority': self.priority,
        }


@dataclass
class VariantGenerationResult:
    variants: List[CVVariant]
    recommendations: List[VariantRecommendation]
    estimated_total_improvement: float
    primary_recommendation: str
    next_steps: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'variants': [variant.to_dict() for variant in self.variants],
            'recommendations': [rec.to_dict() for rec in self.recommendations],
            'summary': {
                'totalVariants': len(self.variants),
                'estimatedTotalImprovement': self.estimated_total_improvement,
                'primaryRecommendation': self.primary_recommendation,
                'nextSteps': list(self.next_steps),
            },
        }


@dataclass
class VariantGenerationConfig:
    """Configuration for variant generation"""
    # Seed for the optional-rewrite decisions (None = unseeded)
    seed: Optional[int] = None

    # Apply every optional rewrite regardless of level probabilities
    always_modify: bool = False

    # Clusters smaller than this get no variant
    min_cluster_size: int = 1
