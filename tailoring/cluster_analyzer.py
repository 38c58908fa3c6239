# tailoring/cluster_analyzer.py
import math
import logging
from typing import Any, Dict, List, Tuple, Union

from analysis.models import MatchResult
from tailoring.models import (
    ClusterAnalysis, ClusterCharacteristics, ClusterJob, ClusterJobRef, JobCluster
)

logger = logging.getLogger(__name__)


class JobClusterAnalyzer:
    """
    Group job matches into clusters worth a dedicated CV variant

    Jobs are classified by keyword patterns over title, company and the
    match's strengths/gaps, then each cluster is profiled and ranked by
    how much a tailored CV could improve its scores.
    """

    JOB_PATTERNS = {
        'ai_innovation': {
            'title': ['ai', 'ml', 'genai', 'machine learning', 'data science', 'artificial intelligence'],
            'company': ['scale', 'openai', 'anthropic', 'ai', 'data', 'analytics'],
            'requirements': ['python', 'tensorflow', 'pytorch', 'nlp', 'computer vision', 'deep learning'],
        },
        'ecommerce_technical': {
            'title': ['ecommerce', 'e-commerce', 'retail', 'marketplace', 'commerce'],
            'company': ['shopify', 'amazon', 'ebay', 'commerce', 'retail'],
            'requirements': ['microservices', 'kubernetes', 'aws', 'apis', 'scalability', 'cloud'],
        },
        'enterprise_leadership': {
            'title': ['director', 'head of', 'vp', 'chief', 'executive'],
            'company': ['enterprise', 'consulting', 'corporation', 'group'],
            'requirements': ['leadership', 'strategy', 'transformation', 'scaling', 'budget', 'vision'],
        },
        'technical_leadership': {
            'title': ['technical lead', 'architect', 'principal', 'staff engineer'],
            'company': ['tech', 'software', 'engineering'],
            'requirements': ['architecture', 'system design', 'technical vision', 'mentoring'],
        },
        'startup_growth': {
            'title': ['startup', 'growth', 'scale', 'founding'],
            'company': ['startup', 'series', 'venture', 'early stage'],
            'requirements': ['agility', 'mvp', 'rapid development', 'resource constraints'],
        },
    }

    # Keyword weights in the classification score
    TITLE_WEIGHT = 0.4
    COMPANY_WEIGHT = 0.3
    REQUIREMENT_WEIGHT = 0.3

    CLUSTER_INFO = {
        'ai_innovation': (
            'AI/ML Innovation',
            'Roles focused on artificial intelligence, machine learning, and generative AI applications'
        ),
        'ecommerce_technical': (
            'E-commerce Technical Leadership',
            'Technical leadership roles in e-commerce platforms and scalable commerce systems'
        ),
        'enterprise_leadership': (
            'Enterprise Leadership',
            'Senior leadership positions in large enterprises focused on strategic transformation'
        ),
        'technical_leadership': (
            'Technical Leadership',
            'Technical leadership roles focused on architecture, system design, and engineering excellence'
        ),
        'startup_growth': (
            'Startup Growth',
            'Growth-stage startup roles requiring agility, rapid development, and scaling'
        ),
        'uncategorized': (
            'General Technical Roles',
            "Technical roles that don't fit clearly into other categories"
        ),
    }

    INDUSTRY_PATTERNS = {
        'technology': ['tech', 'software', 'platform', 'saas', 'ai', 'data'],
        'finance': ['bank', 'finance', 'fintech', 'payment', 'trading'],
        'healthcare': ['health', 'medical', 'pharma', 'biotech', 'clinical'],
        'retail': ['retail', 'commerce', 'shopping', 'marketplace', 'consumer'],
        'consulting': ['consulting', 'advisory', 'services', 'professional'],
    }

    SENIORITY_KEYWORDS = [
        ('Executive', ['cto', 'vp', 'chief', 'executive']),
        ('Director', ['director', 'head of']),
        ('Manager', ['manager', 'lead manager']),
        ('Lead', ['lead', 'principal', 'staff']),
        ('Senior', ['senior', 'sr.']),
    ]

    TECHNICAL_TERMS = ['architecture', 'system design', 'algorithms', 'performance', 'scalability']
    LEADERSHIP_TERMS = ['team', 'lead', 'manage', 'mentor', 'strategy', 'vision']
    CUSTOMER_KEYWORDS = ['customer', 'client', 'deployed', 'forward deployed', 'field']

    def identify_clusters(self, job_matches: List[Union[ClusterJob, MatchResult, Dict[str, Any]]]) -> ClusterAnalysis:
        """
        Cluster job matches

        Args:
            job_matches: MatchResults, ClusterJobs or their JSON dicts

        Returns:
            ClusterAnalysis with clusters ordered largest first
        """
        jobs = [self._to_cluster_job(match) for match in job_matches]
        logger.info(f"Clustering {len(jobs)} job matches")

        groups: Dict[str, List[ClusterJob]] = {}
        for job in jobs:
            classifications = self.classify_job(job)
            primary = classifications[0] if classifications else None
            cluster_id = primary[0] if primary and primary[1] > 0.3 else 'uncategorized'
            groups.setdefault(cluster_id, []).append(job)

        clusters = [
            self._analyze_cluster(cluster_id, members)
            for cluster_id, members in groups.items()
        ]
        clusters = [cluster for cluster in clusters if cluster.cluster_size >= 1]

        priority_order = [cluster.id for cluster in sorted(clusters, key=self._priority, reverse=True)]
        strategy = self._recommended_strategy(clusters, len(jobs))
        insights = self._generate_insights(clusters, jobs)

        for cluster in clusters:
            logger.debug(f"Cluster {cluster.id}: {cluster.cluster_size} jobs, potential {cluster.optimization_potential:.2f}")

        return ClusterAnalysis(
            clusters=sorted(clusters, key=lambda c: c.cluster_size, reverse=True),
            total_jobs=len(jobs),
            recommended_strategy=strategy,
            priority_order=priority_order,
            insights=insights
        )

    @staticmethod
    def _to_cluster_job(match) -> ClusterJob:
        if isinstance(match, ClusterJob):
            return match
        if isinstance(match, MatchResult):
            return ClusterJob.from_match(match)
        return ClusterJob.from_dict(match)

    def classify_job(self, job: ClusterJob) -> List[Tuple[str, float]]:
        """(cluster_id, confidence) pairs above 0.1, most confident first"""
        title = job.job_title.lower()
        company = job.company.lower()
        requirements = [r.lower() for r in job.gaps + job.strengths]

        classifications = []
        for cluster_id, pattern in self.JOB_PATTERNS.items():
            title_hits = sum(1 for kw in pattern['title'] if kw in title)
            company_hits = sum(1 for kw in pattern['company'] if kw in company)
            requirement_hits = sum(
                1 for req in pattern['requirements'] if any(req in r for r in requirements)
            )

            score = (
                title_hits * self.TITLE_WEIGHT
                + company_hits * self.COMPANY_WEIGHT
                + requirement_hits * self.REQUIREMENT_WEIGHT
            )
            total_possible = (
                len(pattern['title']) * self.TITLE_WEIGHT
                + len(pattern['company']) * self.COMPANY_WEIGHT
                + len(pattern['requirements']) * self.REQUIREMENT_WEIGHT
            )

            confidence = score / total_possible if total_possible > 0 else 0.0
            if confidence > 0.1:
                classifications.append((cluster_id, confidence))

        classifications.sort(key=lambda item: item[1], reverse=True)
        return classifications

    def _analyze_cluster(self, cluster_id: str, jobs: List[ClusterJob]) -> JobCluster:
        name, description = self.CLUSTER_INFO.get(cluster_id, (cluster_id, 'Specialized technical roles'))

        requirement_counts = self._count(r for job in jobs for r in job.gaps + job.strengths)
        threshold = math.ceil(len(jobs) * 0.5)
        common_requirements = [
            req for req, count in self._by_count(requirement_counts) if count >= threshold
        ][:8]

        strength_counts = self._count(s for job in jobs for s in job.strengths)
        key_skills = [skill for skill, _ in self._by_count(strength_counts)][:6]

        average_score = sum(job.overall_score for job in jobs) / len(jobs)

        return JobCluster(
            id=cluster_id,
            name=name,
            description=description,
            jobs=[
                ClusterJobRef(job_id=job.job_id, title=job.job_title, company=job.company, score=job.overall_score)
                for job in jobs
            ],
            common_requirements=common_requirements,
            key_skills=key_skills,
            average_score=average_score,
            cluster_size=len(jobs),
            characteristics=self._characteristics(jobs),
            optimization_potential=self._optimization_potential(jobs, average_score, common_requirements)
        )

    @staticmethod
    def _count(items) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for item in items:
            normalized = item.lower().strip()
            counts[normalized] = counts.get(normalized, 0) + 1
        return counts

    @staticmethod
    def _by_count(counts: Dict[str, int]) -> List[Tuple[str, int]]:
        return sorted(counts.items(), key=lambda item: item[1], reverse=True)

    def _characteristics(self, jobs: List[ClusterJob]) -> ClusterCharacteristics:
        titles = [job.job_title.lower() for job in jobs]
        companies = [job.company.lower() for job in jobs]
        requirements = [r for job in jobs for r in job.gaps + job.strengths]

        return ClusterCharacteristics(
            seniority_level=self._seniority(titles),
            industry_focus=self._industry(companies),
            technical_depth=self._emphasis(requirements, self.TECHNICAL_TERMS, high=0.4, medium=0.2),
            leadership_emphasis=self._emphasis(requirements, self.LEADERSHIP_TERMS, high=0.3, medium=0.15),
            customer_facing=self._is_customer_facing(jobs)
        )

    def _seniority(self, titles: List[str]) -> str:
        for level, keywords in self.SENIORITY_KEYWORDS:
            if any(kw in title for title in titles for kw in keywords):
                return level
        return 'Senior'

    def _industry(self, companies: List[str]) -> str:
        for industry, keywords in self.INDUSTRY_PATTERNS.items():
            if any(kw in company for company in companies for kw in keywords):
                return industry
        return 'technology'

    @staticmethod
    def _emphasis(requirements: List[str], terms: List[str], high: float, medium: float) -> str:
        hits = sum(1 for req in requirements if any(term in req.lower() for term in terms))
        ratio = hits / max(len(requirements), 1)

        if ratio > high:
            return 'high'
        if ratio > medium:
            return 'medium'
        return 'low'

    def _is_customer_facing(self, jobs: List[ClusterJob]) -> bool:
        text = ' '.join(
            f"{job.job_title} {job.company} {' '.join(job.gaps)} {' '.join(job.strengths)}"
            for job in jobs
        ).lower()
        return any(keyword in text for keyword in self.CUSTOMER_KEYWORDS)

    @staticmethod
    def _optimization_potential(jobs: List[ClusterJob], average_score: float, requirements: List[str]) -> float:
        """Low scores, clear requirements and many jobs all raise the potential"""
        score_potential = max(0.0, (0.7 - average_score) / 0.7)
        requirement_clarity = min(1.0, len(requirements) / 5)
        size_factor = min(1.0, len(jobs) / 3)

        return score_potential * 0.5 + requirement_clarity * 0.3 + size_factor * 0.2

    @staticmethod
    def _priority(cluster: JobCluster) -> float:
        return cluster.optimization_potential * cluster.cluster_size + (1 - cluster.average_score)

    def _recommended_strategy(self, clusters: List[JobCluster], total_jobs: int) -> str:
        if not clusters:
            return 'Focus on general CV improvements targeting technical leadership roles.'

        top = max(clusters, key=lambda c: c.optimization_potential)
        clustered = sum(cluster.cluster_size for cluster in clusters)

        if clustered / total_jobs > 0.7:
            return (
                f"Strong clustering detected. Recommend creating {len(clusters)} targeted CV variants, "
                f"starting with \"{top.name}\" cluster ({top.cluster_size} jobs, "
                f"{top.optimization_potential * 100:.0f}% optimization potential)."
            )
        return (
            f"Mixed job landscape. Focus on optimizing for \"{top.name}\" cluster first, "
            f"then create a general-purpose variant for remaining positions."
        )

    def _generate_insights(self, clusters: List[JobCluster], jobs: List[ClusterJob]) -> List[str]:
        insights = []
        if not jobs:
            return insights

        if len(clusters) > 3:
            insights.append(
                f"Job opportunities span {len(clusters)} distinct clusters, suggesting diverse career options."
            )
        elif len(clusters) <= 2:
            insights.append(
                f"Jobs concentrate in {len(clusters)} main areas, allowing for focused CV optimization."
            )

        average = sum(job.overall_score for job in jobs) / len(jobs)
        if average < 0.4:
            insights.append("Current CV scores below 40% average - significant optimization opportunity exists.")
        elif average > 0.7:
            insights.append(f"Strong CV alignment ({average * 100:.0f}% average) - minor optimizations needed.")

        largest = max(clusters, key=lambda c: c.cluster_size)
        insights.append(
            f"\"{largest.name}\" represents {largest.cluster_size} jobs "
            f"({largest.cluster_size / len(jobs) * 100:.0f}%) - highest optimization impact."
        )

        gap_counts = self._by_count(self._count(gap for job in jobs for gap in job.gaps))
        if gap_counts and gap_counts[0][1] > len(jobs) * 0.4:
            top_gap, count = gap_counts[0]
            insights.append(f"\"{top_gap}\" appears as a gap in {count} jobs - priority skill for CV enhancement.")

        return insights[:5]
