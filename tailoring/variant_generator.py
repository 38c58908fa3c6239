# tailoring/variant_generator.py
import re
import time
import random
import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from tailoring.cv_sections import CVSectionExtractor, SkillCategory, relevance
from tailoring.models import (
    CVVariant, Impact, JobCluster, OptimizationChange, OptimizationLevel,
    VariantGenerationConfig, VariantGenerationResult, VariantRecommendation,
    change_quality, estimate_gain
)

logger = logging.getLogger(__name__)


class ModificationPolicy:
    """Decides whether an optional rewrite is applied"""

    def __init__(self, seed: Optional[int] = None, always: bool = False):
        self.always = always
        self._random = random.Random(seed)

    def should_apply(self, probability: float) -> bool:
        if self.always:
            return True
        return self._random.random() < probability


class CVVariantGenerator:
    """
    Generate one tailored CV variant per job cluster

    Each variant rewrites the summary, experience and skills sections for
    its cluster. How much gets rewritten depends on the cluster's
    optimization potential, and the individual rewrites are drawn from a
    ModificationPolicy so runs are reproducible with a fixed seed.
    """

    VARIANT_NAMES = {
        'ai_innovation': 'AI Leadership Specialist',
        'ecommerce_technical': 'E-commerce Technology Director',
        'enterprise_leadership': 'Enterprise Transformation Leader',
        'technical_leadership': 'Technical Architecture Leader',
        'startup_growth': 'Startup Growth Engineering Leader',
        'uncategorized': 'Senior Technology Executive',
    }

    # Probability of each optional rewrite per optimization level
    OPTIMIZATION_LEVELS = {
        OptimizationLevel.CONSERVATIVE: {
            'summary_modification': 0.3,
            'experience_reordering': 0.2,
            'skills_reordering': 0.2,
            'content_enhancement': 0.1,
        },
        OptimizationLevel.MODERATE: {
            'summary_modification': 0.6,
            'experience_reordering': 0.5,
            'skills_reordering': 0.3,
            'content_enhancement': 0.4,
        },
        OptimizationLevel.AGGRESSIVE: {
            'summary_modification': 0.9,
            'experience_reordering': 0.8,
            'skills_reordering': 0.4,
            'content_enhancement': 0.7,
        },
    }

    BASE_CONFIDENCE = {
        OptimizationLevel.CONSERVATIVE: 0.85,
        OptimizationLevel.MODERATE: 0.75,
        OptimizationLevel.AGGRESSIVE: 0.65,
    }

    CLUSTER_FOCUS = {
        'ai_innovation': 'AI/ML innovation and generative AI applications',
        'ecommerce_technical': 'e-commerce platform development and cloud-native architectures',
        'enterprise_leadership': 'enterprise transformation and strategic technology leadership',
        'technical_leadership': 'technical architecture and engineering excellence',
        'startup_growth': 'startup scaling and rapid product development',
    }

    CLUSTER_TERMINOLOGY = {
        'ai_innovation': ['AI', 'machine learning', 'generative AI', 'LLMs', 'data science'],
        'ecommerce_technical': ['e-commerce', 'microservices', 'cloud-native', 'scalable systems', 'APIs'],
        'enterprise_leadership': ['transformation', 'strategic vision', 'organizational scaling',
                                  'executive leadership'],
        'technical_leadership': ['architecture', 'system design', 'engineering excellence', 'technical vision'],
        'startup_growth': ['agile development', 'rapid scaling', 'MVP', 'growth engineering'],
    }

    CLUSTER_SKILL_PRIORITY = {
        'ai_innovation': {'programming': 1, 'ai/ml': 2, 'cloud': 3, 'databases': 4},
        'ecommerce_technical': {'cloud': 1, 'architecture': 2, 'databases': 3, 'devops': 4},
        'enterprise_leadership': {'leadership': 1, 'architecture': 2, 'cloud': 3, 'programming': 4},
    }

    AI_ML_REPLACEMENTS = [
        (re.compile(r'data-driven', re.IGNORECASE), 'AI-driven'),
        (re.compile(r'automation', re.IGNORECASE), 'intelligent automation'),
        (re.compile(r'analytics', re.IGNORECASE), 'AI-powered analytics'),
    ]

    GERMAN_FLUENT_PATTERN = re.compile(r'German \(Fluent\)', re.IGNORECASE)

    def __init__(
        self,
        config: Optional[VariantGenerationConfig] = None,
        policy: Optional[ModificationPolicy] = None,
        extractor: Optional[CVSectionExtractor] = None
    ):
        self.config = config or VariantGenerationConfig()
        self.policy = policy or ModificationPolicy(seed=self.config.seed, always=self.config.always_modify)
        self.extractor = extractor or CVSectionExtractor()

    def generate_variants(
        self,
        cv_content: str,
        clusters: List[Union[JobCluster, Dict[str, Any]]]
    ) -> VariantGenerationResult:
        """
        Generate variants for every cluster with at least one job

        Args:
            cv_content: Base markdown CV
            clusters: JobClusters or their JSON dicts

        Returns:
            VariantGenerationResult with variants, ranked recommendations
            and next steps
        """
        clusters = [c if isinstance(c, JobCluster) else JobCluster.from_dict(c) for c in clusters]
        logger.info(f"Generating CV variants for {len(clusters)} clusters")

        variants = [
            self.generate_variant(cv_content, cluster)
            for cluster in clusters
            if cluster.cluster_size >= self.config.min_cluster_size
        ]

        by_id = {cluster.id: cluster for cluster in clusters}
        recommendations = sorted(
            (self._recommend(variant, by_id.get(variant.target_cluster)) for variant in variants),
            key=lambda rec: rec.priority,
            reverse=True
        )

        total_improvement = (
            sum(v.estimated_improvement for v in variants) / len(variants) if variants else 0.0
        )

        top_variant = None
        if recommendations:
            top_variant = next(v for v in variants if v.id == recommendations[0].variant)

        primary = (
            f"Start with \"{top_variant.name}\" variant targeting {len(top_variant.target_jobs)} positions"
            if top_variant else 'No specific recommendation available'
        )

        logger.info(f"Generated {len(variants)} variants")

        return VariantGenerationResult(
            variants=variants,
            recommendations=recommendations,
            estimated_total_improvement=total_improvement,
            primary_recommendation=primary,
            next_steps=self._next_steps(top_variant, len(recommendations))
        )

    def generate_variant(self, cv_content: str, cluster: JobCluster) -> CVVariant:
        """Build the variant for a single cluster"""
        level = self.optimization_level(cluster)
        probabilities = self.OPTIMIZATION_LEVELS[level]
        optimizations: List[OptimizationChange] = []
        optimized_cv = cv_content

        logger.debug(f"Cluster {cluster.id}: {level.value} optimization")

        summary = self.extractor.extract_section(optimized_cv, 'SUMMARY')
        if summary and self.policy.should_apply(probabilities['summary_modification']):
            optimized_cv = self.extractor.replace_section(
                optimized_cv, 'SUMMARY', self._enhance_summary(summary, cluster)
            )
            optimizations.append(OptimizationChange(
                section='Summary',
                type='targeted_rewrite',
                description=f"Tailored summary to emphasize {cluster.name} requirements",
                impact=Impact.HIGH
            ))

        experience = self.extractor.extract_section(optimized_cv, 'EXPERIENCE')
        if experience:
            optimized_cv = self.extractor.replace_section(
                optimized_cv, 'EXPERIENCE', self._optimize_experience(experience, cluster, probabilities)
            )
            optimizations.append(OptimizationChange(
                section='Experience',
                type='content_enhancement',
                description=f"Enhanced role descriptions to highlight {', '.join(cluster.key_skills[:3])} experience",
                impact=Impact.HIGH
            ))

        skills = self.extractor.extract_section(optimized_cv, 'TECHNICAL EXPERTISE')
        optimized_skills = self._optimize_skills(skills, cluster, probabilities) if skills else None
        if optimized_skills:
            optimized_cv = self.extractor.replace_section(optimized_cv, 'TECHNICAL EXPERTISE', optimized_skills)
            optimizations.append(OptimizationChange(
                section='Technical Skills',
                type='priority_reordering',
                description=f"Reordered skills to prioritize {cluster.name} technologies",
                impact=Impact.MEDIUM
            ))

        optimized_cv, extra = self._cluster_specific_enhancements(optimized_cv, cluster)
        optimizations.extend(extra)

        # a zero potential counts as the neutral 0.5
        improvement = min(0.5, estimate_gain(optimizations) * (1 + (cluster.optimization_potential or 0.5)))
        clarity = min(1.0, (cluster.cluster_size or 1) / 3)
        confidence = min(
            0.95,
            self.BASE_CONFIDENCE[level] + change_quality(optimizations, default=0.5) * 0.1 + clarity * 0.05
        )

        return CVVariant(
            id=f"cv-{cluster.id}-{int(time.time() * 1000)}",
            name=self.VARIANT_NAMES.get(cluster.id, cluster.name),
            target_cluster=cluster.id,
            description=(
                f"CV optimized for {cluster.name} roles, targeting {cluster.cluster_size} positions "
                f"with emphasis on {' and '.join(cluster.key_skills[:2])}"
            ),
            cv_content=optimized_cv,
            optimizations=optimizations,
            target_jobs=[job.job_id for job in cluster.jobs],
            estimated_improvement=improvement,
            confidence=confidence,
            optimization_level=level
        )

    @staticmethod
    def optimization_level(cluster: JobCluster) -> OptimizationLevel:
        if cluster.optimization_potential > 0.7:
            return OptimizationLevel.AGGRESSIVE
        if cluster.optimization_potential > 0.4:
            return OptimizationLevel.MODERATE
        return OptimizationLevel.CONSERVATIVE

    def _enhance_summary(self, summary: str, cluster: JobCluster) -> str:
        focus = self.CLUSTER_FOCUS.get(cluster.id, 'technical leadership')
        terminology = self.CLUSTER_TERMINOLOGY.get(cluster.id, ['technical leadership', 'engineering'])

        enhanced = re.sub(
            r'technical expertise',
            lambda _: f"expertise in {' and '.join(terminology[:2])}",
            summary,
            flags=re.IGNORECASE
        )
        return re.sub(r'leadership', lambda _: f"leadership in {focus}", enhanced, flags=re.IGNORECASE)

    def _cluster_terms(self, cluster: JobCluster) -> List[str]:
        return cluster.key_skills + cluster.common_requirements + self.CLUSTER_TERMINOLOGY.get(cluster.id, [])

    def _optimize_experience(self, experience: str, cluster: JobCluster, probabilities: Dict[str, float]) -> str:
        terms = self._cluster_terms(cluster)
        roles = self.extractor.parse_experience_roles(experience)

        enhanced = []
        for role in roles:
            if self.policy.should_apply(probabilities['content_enhancement']):
                achievements = sorted(role.achievements, key=lambda a: relevance(a, terms), reverse=True)
                role = role.with_achievements(achievements)
            enhanced.append(role)

        if self.policy.should_apply(probabilities['experience_reordering']):
            enhanced = sorted(enhanced, key=lambda r: relevance(r.content, terms), reverse=True)

        return self.extractor.rebuild_experience(enhanced)

    def _optimize_skills(self, skills: str, cluster: JobCluster, probabilities: Dict[str, float]) -> Optional[str]:
        categories = self.extractor.parse_skill_categories(skills)
        if not categories:
            return None

        priority = self.CLUSTER_SKILL_PRIORITY.get(cluster.id, {})
        key_skills = {skill.lower() for skill in cluster.key_skills}

        ordered = []
        for category in sorted(categories, key=lambda c: priority.get(c.name.lower(), 5)):
            if self.policy.should_apply(probabilities['skills_reordering']):
                category = SkillCategory(
                    name=category.name,
                    skills=sorted(category.skills, key=lambda s: s.lower() not in key_skills)
                )
            ordered.append(category)

        return self.extractor.rebuild_skills(ordered)

    def _cluster_specific_enhancements(
        self,
        cv_content: str,
        cluster: JobCluster
    ) -> Tuple[str, List[OptimizationChange]]:
        optimizations = []

        if cluster.id == 'ecommerce_technical' and self._german_market_focus(cluster):
            languages = self.extractor.extract_section(cv_content, 'LANGUAGES')
            if 'German' in languages:
                emphasized = self.GERMAN_FLUENT_PATTERN.sub(
                    'German (Fluent - Native-level business proficiency)', languages, count=1
                )
                cv_content = self.extractor.replace_section(cv_content, 'LANGUAGES', emphasized)
                optimizations.append(OptimizationChange(
                    section='Languages',
                    type='emphasis_enhancement',
                    description='Emphasized German language proficiency for German market roles',
                    impact=Impact.MEDIUM
                ))

        if cluster.id == 'ai_innovation':
            for pattern, replacement in self.AI_ML_REPLACEMENTS:
                cv_content = pattern.sub(replacement, cv_content)
            optimizations.append(OptimizationChange(
                section='Multiple',
                type='contextual_enhancement',
                description='Added AI/ML context to relevant achievements and experience',
                impact=Impact.MEDIUM
            ))

        return cv_content, optimizations

    @staticmethod
    def _german_market_focus(cluster: JobCluster) -> bool:
        return any('german' in job.company.lower() or 'german' in job.title.lower() for job in cluster.jobs)

    def _recommend(self, variant: CVVariant, cluster: Optional[JobCluster]) -> VariantRecommendation:
        potential = cluster.optimization_potential if cluster else 0.5
        job_count = len(variant.target_jobs)
        priority = (
            variant.estimated_improvement * 0.3
            + variant.confidence * 0.2
            + job_count * 0.3
            + potential * 0.2
        )

        high_impact = sum(1 for opt in variant.optimizations if opt.impact == Impact.HIGH)
        reasoning = (
            f"Targets {job_count} {cluster.name if cluster else 'relevant'} positions with "
            f"{round(variant.estimated_improvement * 100)}% estimated improvement "
            f"({round(variant.confidence * 100)}% confidence). "
            f"{high_impact} high-impact optimizations applied."
        )

        return VariantRecommendation(
            variant=variant.id,
            job_cluster=variant.target_cluster,
            reasoning=reasoning,
            priority=priority
        )

    @staticmethod
    def _next_steps(top_variant: Optional[CVVariant], recommendation_count: int) -> List[str]:
        steps = []
        if top_variant:
            steps.append(f"Review and refine the \"{top_variant.name}\" variant")
            steps.append('Test the optimized variant against target job requirements')
        if recommendation_count > 1:
            steps.append('Consider developing the secondary variant for broader job coverage')
        steps.append('Monitor application performance and iterate based on feedback')

        return [f"{index}. {step}" for index, step in enumerate(steps, 1)]
