# tailoring/cv_optimizer.py
import re
import logging
from typing import Any, Dict, List, Optional, Union

from tailoring.cv_sections import CVSectionExtractor, ExperienceRole, SkillCategory, relevance
from tailoring.models import (
    Impact, JobCluster, OptimizationChange, OptimizationLevel, OptimizationResult,
    TargetJob, TargetedSummary, change_quality, estimate_gain
)

logger = logging.getLogger(__name__)


class CVOptimizer:
    """Rewrite a markdown CV towards one job cluster"""

    # Upper bound of the estimated score improvement
    MAX_TARGET_SCORE = 0.4

    BASE_CONFIDENCE = {
        OptimizationLevel.CONSERVATIVE: 0.85,
        OptimizationLevel.MODERATE: 0.75,
        OptimizationLevel.AGGRESSIVE: 0.65,
    }

    VALUE_PROPOSITIONS = {
        OptimizationLevel.CONSERVATIVE: 'Dedicated to driving operational excellence and sustainable growth',
        OptimizationLevel.MODERATE: 'Passionate about transforming organizations through innovative technology solutions',
        OptimizationLevel.AGGRESSIVE: (
            'Visionary leader specializing in disruptive technology adoption and exponential business growth'
        ),
    }

    # Extra terms that make an achievement relevant to a cluster
    SKILL_ENHANCEMENTS = {
        'ai_innovation': ['ai', 'machine learning', 'generative ai', 'llm', 'data-driven', 'analytics',
                          'data science', 'automation'],
        'ecommerce_technical': ['cloud-native', 'cloud', 'microservice', 'containerization', 'scalability',
                                'high-performance', 'performance'],
        'enterprise_leadership': ['strategic leadership', 'transformation', 'team scaling', 'operational excellence',
                                  'budget', 'cost optimization'],
    }

    # Lower number = listed earlier; unlisted categories rank 5
    SKILL_CATEGORY_PRIORITIES = {
        'ai_innovation': {'programming': 1, 'ai/ml': 2, 'cloud': 3, 'leadership': 4},
        'ecommerce_technical': {'cloud': 1, 'architecture': 2, 'databases': 3, 'programming': 4},
        'enterprise_leadership': {'leadership': 1, 'architecture': 2, 'cloud': 3, 'programming': 4},
    }

    IDENTITY_PATTERN = re.compile(r'^([^,]+)')
    YEARS_PATTERN = re.compile(r'(\d+)\+?\s*years?', re.IGNORECASE)

    def __init__(self, extractor: Optional[CVSectionExtractor] = None):
        self.extractor = extractor or CVSectionExtractor()

    def optimize_for_cluster(
        self,
        cv_content: str,
        cluster: Union[JobCluster, Dict[str, Any]],
        optimization_level: Union[OptimizationLevel, str] = OptimizationLevel.MODERATE
    ) -> OptimizationResult:
        """
        Tailor summary, experience and skills sections to a cluster

        Args:
            cv_content: Markdown CV
            cluster: JobCluster or its JSON dict
            optimization_level: conservative, moderate or aggressive

        Returns:
            OptimizationResult with the rewritten CV and the applied changes
        """
        if not isinstance(cluster, JobCluster):
            cluster = JobCluster.from_dict(cluster)
        level = OptimizationLevel.parse(optimization_level)

        logger.info(f"Optimizing CV for cluster {cluster.id} ({level.value})")

        sections = self.extractor.parse_sections(cv_content)
        replacements: Dict[int, str] = {}
        changes: List[OptimizationChange] = []

        summary_index = self.extractor.find_section(sections, 'summary')
        if summary_index is not None:
            summary = self.optimize_summary(sections[summary_index].content, cluster, level)
            if summary:
                replacements[summary_index] = summary
                changes.append(OptimizationChange(
                    section='Summary',
                    type='summarize',
                    description=f"Tailored summary to emphasize {', '.join(cluster.key_skills[:3])}",
                    impact=Impact.HIGH
                ))

        experience_index = self.extractor.find_section(sections, 'experience')
        if experience_index is not None:
            replacements[experience_index] = self._enhance_experience_for_cluster(
                sections[experience_index].content, cluster
            )
            changes.append(OptimizationChange(
                section='Experience',
                type='enhance',
                description=f"Enhanced experience descriptions to highlight {cluster.name} relevant skills",
                impact=Impact.HIGH
            ))

        skills_index = self.extractor.find_section(sections, 'technical', 'expertise')
        if skills_index is not None and skills_index not in replacements:
            skills = self._optimize_skills_section(sections[skills_index].content, cluster)
            if skills:
                replacements[skills_index] = skills
                changes.append(OptimizationChange(
                    section='Technical Skills',
                    type='emphasize',
                    description='Reordered skills to prioritize cluster-relevant technologies',
                    impact=Impact.MEDIUM
                ))

        optimized_cv = ''
        for index, section in enumerate(sections):
            optimized_cv += f"### {section.title}\n\n"
            if index in replacements:
                optimized_cv += replacements[index] + '\n\n'
            else:
                optimized_cv += section.content + '\n'

        target_score = min(self.MAX_TARGET_SCORE, estimate_gain(changes))
        confidence = min(0.95, self.BASE_CONFIDENCE[level] + change_quality(changes) * 0.1)

        logger.info(f"Applied {len(changes)} changes, estimated improvement {target_score:.2f}")

        return OptimizationResult(
            optimized_cv=optimized_cv,
            changes=changes,
            target_score=target_score,
            confidence=confidence
        )

    def optimize_summary(self, summary: str, cluster: JobCluster, level: OptimizationLevel) -> Optional[str]:
        """Rebuild a summary around the cluster's skills; None for an empty summary"""
        summary = summary.strip()
        if not summary:
            return None

        identity_match = self.IDENTITY_PATTERN.match(summary)
        enhanced = identity_match.group(1).strip() if identity_match else 'Experienced technology leader'

        if cluster.key_skills:
            enhanced += f" with deep expertise in {', '.join(cluster.key_skills[:4])}"

        years_match = self.YEARS_PATTERN.search(summary)
        if years_match and cluster.common_requirements:
            enhanced += (
                f". {years_match.group(1)}+ years of proven success in "
                f"{', '.join(cluster.common_requirements[:3])}"
            )

        return f"{enhanced}. {self.VALUE_PROPOSITIONS[level]}"

    def generate_targeted_summary(
        self,
        cv_content: str,
        target_jobs: List[Union[TargetJob, Dict[str, Any]]]
    ) -> TargetedSummary:
        """
        Write a fresh summary aimed at a set of target jobs

        Args:
            cv_content: Markdown CV
            target_jobs: Jobs with title, company and keyRequirements

        Returns:
            TargetedSummary
        """
        jobs = [job if isinstance(job, TargetJob) else TargetJob.from_dict(job) for job in target_jobs]

        requirements = list(dict.fromkeys(req for job in jobs for req in job.key_requirements))
        emphasized = requirements[:6]

        years_match = self.YEARS_PATTERN.search(cv_content or '')
        experience = f"{years_match.group(1)}+ years" if years_match else ''

        summary = f"Seasoned {self._seniority_from_jobs(jobs)} with "
        summary += f"{experience} of progressive leadership" if experience else 'progressive leadership'
        summary += f" in {self._industry_from_jobs(jobs)}"
        if emphasized:
            summary += f", specializing in {', '.join(emphasized[:3])}"
        summary += (
            '. Proven track record of driving organizational transformation '
            'and delivering measurable business impact through technology excellence.'
        )

        key_points = [part.strip() for part in summary.split('.') if len(part.strip()) > 10]

        return TargetedSummary(
            summary=summary,
            key_points=key_points,
            emphasized_skills=emphasized,
            reasoning=(
                f"Tailored for {len(jobs)} target positions emphasizing "
                f"{', '.join(emphasized[:3])}"
            )
        )

    def enhance_experience_section(
        self,
        experience_section: str,
        target_skills: List[str],
        job_context: str = 'general'
    ) -> str:
        """Move achievements mentioning target skills to the top of each role"""
        terms = list(target_skills) + self.SKILL_ENHANCEMENTS.get(job_context, [])
        roles = self.extractor.parse_experience_roles(experience_section)
        return self.extractor.rebuild_experience([self._prioritize_achievements(role, terms) for role in roles])

    @staticmethod
    def _prioritize_achievements(role: ExperienceRole, terms: List[str]) -> ExperienceRole:
        ordered = sorted(role.achievements, key=lambda line: relevance(line, terms), reverse=True)
        return role.with_achievements(ordered)

    def _enhance_experience_for_cluster(self, experience: str, cluster: JobCluster) -> str:
        terms = cluster.key_skills + cluster.common_requirements
        return self.enhance_experience_section(experience, terms, cluster.id)

    def _optimize_skills_section(self, skills: str, cluster: JobCluster) -> Optional[str]:
        categories = self.extractor.parse_skill_categories(skills)
        if not categories:
            return None

        priorities = self.SKILL_CATEGORY_PRIORITIES.get(cluster.id, {})
        required = {skill.lower() for skill in cluster.common_requirements + cluster.key_skills}

        ordered = sorted(categories, key=lambda c: priorities.get(c.name.lower(), 5))
        prioritized = [
            SkillCategory(
                name=category.name,
                skills=sorted(category.skills, key=lambda s: s.lower() not in required)
            )
            for category in ordered
        ]
        return self.extractor.rebuild_skills(prioritized)

    @staticmethod
    def _seniority_from_jobs(jobs: List[TargetJob]) -> str:
        titles = [job.title.lower() for job in jobs]
        if any('director' in t or 'head' in t for t in titles):
            return 'Director'
        if any('manager' in t or 'lead' in t for t in titles):
            return 'Engineering Manager'
        return 'Senior Technical Leader'

    @staticmethod
    def _industry_from_jobs(jobs: List[TargetJob]) -> str:
        companies = [job.company.lower() for job in jobs]
        if any('ai' in c or 'scale' in c for c in companies):
            return 'AI/ML technology'
        if any('commerce' in c or 'retail' in c for c in companies):
            return 'e-commerce technology'
        return 'enterprise technology'
