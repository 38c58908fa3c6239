# analysis/matrix_generator.py
import math
import time
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from analysis.config import AnalysisConfig, get_config
from analysis.cv_analyzer import CVAnalyzer
from analysis.job_analyzer import JobAnalyzer
from analysis.models import (
    CVAnalysis, CVMatrix, ComprehensiveMatch, JobAnalysis, JobMatrix, JobPosting,
    MatchResult, MatchSummary, ParameterMatch, SCORED_CATEGORIES, SeniorityLevel
)

logger = logging.getLogger(__name__)


COMMON_GAPS_RECOMMENDATION = (
    "Consider adding experience with: {gaps} - these skills are frequently "
    "required but missing from your CV"
)
SENIORITY_RECOMMENDATION = (
    "Consider emphasizing leadership experience and strategic initiatives to "
    "match the seniority level of target positions"
)
WEAKEST_CATEGORY_RECOMMENDATION = "Focus on strengthening {category} skills to improve overall job matches"
LOW_SCORE_RECOMMENDATION = (
    "Consider targeting roles that better align with your current skillset, "
    "or focus on developing the most commonly required skills"
)
JOB_GAPS_RECOMMENDATION = "For this role, prioritize gaining experience in: {gaps}"
JOB_SENIORITY_RECOMMENDATION = (
    "This role requires more senior experience - consider highlighting "
    "leadership achievements and strategic impact"
)


def match_score(job_weight: float, cv_strength: float) -> float:
    """
    Compatibility of a CV strength with a job requirement

    Args:
        job_weight: How important the parameter is for the job (0-1)
        cv_strength: How strong the CV is in the parameter (0-1)

    Returns:
        Score in [0, 1]. A parameter the job ignores always matches, a
        meaningful requirement with no CV evidence never does, and
        exceeding the requirement earns a small capped bonus.
    """
    if job_weight == 0:
        return 1.0

    if cv_strength == 0 and job_weight > 0.3:
        return 0.0

    base = min(cv_strength / job_weight, 1.0)
    bonus = 0.1 if cv_strength > job_weight else 0.0
    return min(1.0, base + bonus)


def average_seniority(jobs: List[JobAnalysis]) -> SeniorityLevel:
    """Ladder level at the rounded mean rank of the jobs (mid when empty)"""
    if not jobs:
        return SeniorityLevel.MID

    mean_rank = sum(job.seniority_level.rank for job in jobs) / len(jobs)
    # Half-up rounding
    return SeniorityLevel.from_rank(int(math.floor(mean_rank + 0.5)))


def _timestamp_ms() -> int:
    return int(time.time() * 1000)


class MatrixGenerator:
    """
    Build job/CV matrices and score CVs against jobs

    Jobs and the CV are aligned on parameter names. A parameter a job
    does not mention has weight 0, one the CV lacks has strength 0.
    """

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        job_analyzer: Optional[JobAnalyzer] = None,
        cv_analyzer: Optional[CVAnalyzer] = None
    ):
        self.config = config or get_config()
        self.job_analyzer = job_analyzer or JobAnalyzer(self.config)
        self.cv_analyzer = cv_analyzer or CVAnalyzer(self.config)

    # ============= Matrices =============

    def generate_job_matrix(self, jobs: List[Union[JobPosting, Dict[str, Any]]]) -> JobMatrix:
        """Analyze raw job postings and build their weight matrix"""
        logger.info(f"Generating job matrix for {len(jobs)} jobs")
        analyses = [self.job_analyzer.analyze_job(job) for job in jobs]
        return self.build_job_matrix(analyses)

    def build_job_matrix(self, analyses: List[JobAnalysis]) -> JobMatrix:
        """Build the jobs x parameters matrix from existing analyses"""
        parameters = sorted({param.name for job in analyses for param in job.parameters})

        weight_matrix = []
        for job in analyses:
            weights = {param.name: param.weight for param in job.parameters}
            weight_matrix.append([weights.get(name, 0.0) for name in parameters])

        return JobMatrix(
            matrix_id=f"job-matrix-{_timestamp_ms()}",
            jobs=analyses,
            parameters=parameters,
            weight_matrix=weight_matrix,
            metadata={
                'generatedAt': datetime.now().isoformat(),
                'jobCount': len(analyses),
                'parameterCount': len(parameters),
                'averageSeniority': average_seniority(analyses).value,
            }
        )

    def generate_cv_matrix(self, cv_content: str, cv_id: str) -> CVMatrix:
        """Analyze a CV and build its strength vector"""
        analysis = self.cv_analyzer.analyze_cv(cv_content, cv_id=cv_id)
        return self.build_cv_matrix(analysis)

    def build_cv_matrix(self, analysis: CVAnalysis) -> CVMatrix:
        parameters = [param.name for param in analysis.parameters]
        strength_vector = [param.strength for param in analysis.parameters]

        return CVMatrix(
            matrix_id=f"cv-matrix-{analysis.cv_id}-{_timestamp_ms()}",
            cv_analysis=analysis,
            parameters=parameters,
            strength_vector=strength_vector,
            metadata={
                'generatedAt': datetime.now().isoformat(),
                'parameterCount': len(parameters),
                'totalExperience': analysis.total_experience,
            }
        )

    # ============= Matching =============

    def calculate_match(self, job_matrix: JobMatrix, cv_matrix: CVMatrix) -> ComprehensiveMatch:
        """
        Score one CV against every job in the matrix

        Returns:
            ComprehensiveMatch with matches sorted best first and a
            cross-job summary (top skills, common gaps, recommendations)
        """
        cv_id = cv_matrix.cv_analysis.cv_id
        logger.info(f"Matching CV {cv_id} against {len(job_matrix.jobs)} jobs")

        matches = []
        for index, job in enumerate(job_matrix.jobs):
            weights = job_matrix.weight_matrix[index] if index < len(job_matrix.weight_matrix) else []
            matches.append(self.calculate_job_match(job, weights, job_matrix.parameters, cv_matrix))

        matches.sort(key=lambda m: m.overall_score, reverse=True)

        average_score = sum(m.overall_score for m in matches) / len(matches) if matches else 0.0
        common_gaps = self._identify_common_gaps(matches)

        summary = MatchSummary(
            average_score=average_score,
            best_match=matches[0] if matches else None,
            top_skills=self._identify_top_skills(matches, cv_matrix),
            common_gaps=common_gaps,
            recommendations=self._generate_recommendations(
                matches, job_matrix, cv_matrix, common_gaps, average_score
            )
        )

        if matches:
            logger.info(
                f"Best match for {cv_id}: {matches[0].job_title or matches[0].job_id} "
                f"({matches[0].overall_score:.2f}), average {average_score:.2f}"
            )

        return ComprehensiveMatch(
            cv_id=cv_id,
            total_jobs=len(job_matrix.jobs),
            matches=matches,
            summary=summary
        )

    def calculate_job_match(
        self,
        job: JobAnalysis,
        job_weights: List[float],
        parameters: List[str],
        cv_matrix: CVMatrix
    ) -> MatchResult:
        """Score one job row against the CV vector"""
        parameter_matches: List[ParameterMatch] = []
        total_weighted = 0.0
        total_weight = 0.0

        category_totals = {category.value: 0.0 for category in SCORED_CATEGORIES}
        category_counts = {category.value: 0 for category in SCORED_CATEGORIES}

        for index, name in enumerate(parameters):
            job_weight = job_weights[index] if index < len(job_weights) else 0.0
            if job_weight == 0:
                continue

            cv_strength = cv_matrix.strength_of(name)
            score = match_score(job_weight, cv_strength)

            parameter_matches.append(ParameterMatch(
                parameter=name,
                job_weight=job_weight,
                cv_strength=cv_strength,
                match_score=score
            ))

            total_weighted += score * job_weight
            total_weight += job_weight

            job_param = job.get_parameter(name)
            if job_param and job_param.category.value in category_totals:
                category_totals[job_param.category.value] += score
                category_counts[job_param.category.value] += 1

        overall_score = total_weighted / total_weight if total_weight > 0 else 0.0

        category_scores = {
            category: (category_totals[category] / count if count > 0 else 0.0)
            for category, count in category_counts.items()
        }

        strengths = [
            pm.parameter for pm in parameter_matches
            if pm.match_score > 0.7 and pm.job_weight > 0.5
        ][:5]
        gaps = [
            pm.parameter for pm in parameter_matches
            if pm.match_score < 0.3 and pm.job_weight > 0.6
        ][:5]

        recommendations = self._job_recommendations(parameter_matches, job, cv_matrix.cv_analysis)
        top_matches = sorted(parameter_matches, key=lambda pm: pm.match_score, reverse=True)[:10]

        return MatchResult(
            job_id=job.job_id or job.title,
            job_title=job.title,
            company=job.company,
            overall_score=overall_score,
            category_scores=category_scores,
            strengths=strengths,
            gaps=gaps,
            recommendations=recommendations,
            parameter_matches=top_matches
        )

    def _job_recommendations(
        self,
        parameter_matches: List[ParameterMatch],
        job: JobAnalysis,
        cv_analysis: CVAnalysis
    ) -> List[str]:
        recommendations = []

        high_value_gaps = sorted(
            (pm for pm in parameter_matches if pm.job_weight > 0.7 and pm.cv_strength < 0.3),
            key=lambda pm: pm.job_weight,
            reverse=True
        )[:3]
        if high_value_gaps:
            recommendations.append(JOB_GAPS_RECOMMENDATION.format(
                gaps=', '.join(pm.parameter for pm in high_value_gaps)
            ))

        if job.seniority_level.rank > cv_analysis.seniority_level.rank + 1:
            recommendations.append(JOB_SENIORITY_RECOMMENDATION)

        return recommendations[:3]

    # ============= Cross-job summary =============

    def _identify_top_skills(self, matches: List[MatchResult], cv_matrix: CVMatrix) -> List[str]:
        """Skills averaging > 0.6 across jobs' top matches, backed by CV strength > 0.5"""
        scores: Dict[str, List[float]] = {}
        for match in matches:
            for pm in match.parameter_matches:
                scores.setdefault(pm.parameter, []).append(pm.match_score)

        candidates = []
        for skill, skill_scores in scores.items():
            average = sum(skill_scores) / len(skill_scores)
            if average > 0.6 and cv_matrix.strength_of(skill) > 0.5:
                candidates.append((skill, average))

        candidates.sort(key=lambda item: item[1], reverse=True)
        return [skill for skill, _ in candidates[:8]]

    def _identify_common_gaps(self, matches: List[MatchResult]) -> List[str]:
        """Gaps shared by at least 30% of the jobs, most frequent first"""
        counts: Dict[str, int] = {}
        for match in matches:
            for gap in match.gaps:
                counts[gap] = counts.get(gap, 0) + 1

        # Integer comparison keeps exactly 30% (e.g. 3 of 10) in
        common = [(gap, count) for gap, count in counts.items() if count * 10 >= len(matches) * 3]
        common.sort(key=lambda item: item[1], reverse=True)
        return [gap for gap, _ in common[:6]]

    def _generate_recommendations(
        self,
        matches: List[MatchResult],
        job_matrix: JobMatrix,
        cv_matrix: CVMatrix,
        common_gaps: List[str],
        average_score: float
    ) -> List[str]:
        if not matches:
            return []

        recommendations = []

        if common_gaps:
            recommendations.append(COMMON_GAPS_RECOMMENDATION.format(gaps=', '.join(common_gaps[:3])))

        target_seniority = average_seniority(job_matrix.jobs)
        if target_seniority.rank > cv_matrix.cv_analysis.seniority_level.rank:
            recommendations.append(SENIORITY_RECOMMENDATION)

        weakest = self._weakest_category(matches)
        if weakest:
            recommendations.append(WEAKEST_CATEGORY_RECOMMENDATION.format(category=weakest))

        if average_score < 0.6:
            recommendations.append(LOW_SCORE_RECOMMENDATION)

        return recommendations[:5]

    def _weakest_category(self, matches: List[MatchResult]) -> Optional[str]:
        averages = {}
        for category in SCORED_CATEGORIES:
            key = category.value
            averages[key] = sum(m.category_scores.get(key, 0.0) for m in matches) / len(matches)

        weakest, score = min(averages.items(), key=lambda item: item[1])
        return weakest if score < 0.5 else None
