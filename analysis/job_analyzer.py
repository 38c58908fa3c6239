# analysis/job_analyzer.py
import re
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from analysis.config import AnalysisConfig, get_config
from analysis.models import (
    JobAnalysis, JobParameter, JobPosting, ParameterCategory, SeniorityLevel, clamp
)
from analysis.text_utils import word_pattern

logger = logging.getLogger(__name__)


def frequency_multiplier(frequency: int) -> float:
    """More mentions raise importance with diminishing returns, capped at 1.2x"""
    return min(1.2, 1 + (frequency - 1) * 0.1)


class JobAnalyzer:
    """
    Extract weighted parameters from a job posting

    Each parameter is a named skill or trait with a category and a weight
    in [0, 1]. Weights come from static tables, are boosted by repeated
    mentions and finally scaled by the posting's seniority level.
    """

    # Technical skills with relative importance weights
    TECHNICAL_SKILLS = {
        # Programming languages
        'javascript': 0.8, 'typescript': 0.85, 'python': 0.8, 'java': 0.7, 'golang': 0.75,
        'c#': 0.7, 'c++': 0.7, 'php': 0.6, 'ruby': 0.6, 'scala': 0.6, 'kotlin': 0.6,

        # Cloud & infrastructure
        'aws': 0.9, 'azure': 0.9, 'gcp': 0.85, 'kubernetes': 0.9, 'docker': 0.85,
        'terraform': 0.8, 'helm': 0.7, 'ansible': 0.7,

        # Databases
        'mongodb': 0.7, 'postgresql': 0.75, 'mysql': 0.7, 'redis': 0.6, 'elasticsearch': 0.7,

        # Frameworks & tools
        'react': 0.8, 'angular': 0.7, 'vue': 0.7, 'node.js': 0.8, 'express': 0.6,
        'gitlab': 0.7, 'jenkins': 0.7, 'grafana': 0.6, 'prometheus': 0.6,

        # Architecture
        'microservices': 0.85, 'api': 0.8, 'rest': 0.7, 'graphql': 0.6, 'oauth2': 0.6,
        'ci/cd': 0.85, 'devops': 0.8,
    }

    LEADERSHIP_TERMS = {
        'lead': 0.9, 'manage': 0.85, 'mentor': 0.8, 'coach': 0.7, 'supervise': 0.75,
        'team building': 0.8, 'hiring': 0.7, 'performance management': 0.75,
        'strategic': 0.85, 'vision': 0.8, 'roadmap': 0.75,
    }

    DOMAIN_TERMS = {
        'adtech': 0.8, 'medtech': 0.8, 'fintech': 0.8, 'e-commerce': 0.7,
        'healthcare': 0.8, 'education': 0.7, 'automotive': 0.7, 'gaming': 0.6,
    }

    SOFT_SKILLS = {
        'communication': 0.7, 'collaboration': 0.6, 'problem solving': 0.7,
        'analytical': 0.7, 'creative': 0.5, 'agile': 0.8, 'scrum': 0.7,
    }

    # Checked against the title in this order, first hit wins
    SENIORITY_KEYWORDS = [
        (SeniorityLevel.EXECUTIVE, ['cto', 'ceo', 'vp', 'vice president']),
        (SeniorityLevel.DIRECTOR, ['director', 'head of']),
        (SeniorityLevel.LEAD, ['lead', 'principal', 'staff', 'architect']),
        (SeniorityLevel.SENIOR, ['senior', 'sr.', 'expert']),
        (SeniorityLevel.MID, ['mid', 'intermediate']),
        (SeniorityLevel.JUNIOR, ['junior', 'jr.', 'entry', 'graduate']),
    ]

    # (technical, leadership) weight multipliers
    SENIORITY_ADJUSTMENTS = {
        SeniorityLevel.JUNIOR: (1.1, 0.7),
        SeniorityLevel.MID: (1.0, 0.8),
        SeniorityLevel.SENIOR: (0.9, 0.9),
        SeniorityLevel.LEAD: (0.8, 1.1),
        SeniorityLevel.DIRECTOR: (0.7, 1.2),
        SeniorityLevel.EXECUTIVE: (0.6, 1.3),
    }

    TEAM_SIZE_PATTERN = re.compile(r'(\d+)\+?\s*(?:member|people|developer|engineer)', re.IGNORECASE)
    EXPERIENCE_YEARS_PATTERN = re.compile(r'(\d+)\+?\s*years?\s*(?:of\s*)?experience', re.IGNORECASE)

    # Requirement extraction
    BULLET_PATTERN = re.compile(r'[•·▪▫-]\s*([^\n•·▪▫-]+)')
    MUST_HAVE_PATTERN = re.compile(
        r'(?:must have|required|essential)[:\s]*(.*?)(?:\n\n|\n[A-Z]|\Z)',
        re.IGNORECASE | re.DOTALL
    )

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or get_config()

        self._technical_patterns = {
            skill: word_pattern(skill) for skill in self.TECHNICAL_SKILLS
        }
        self._leadership_patterns = {
            term: word_pattern(term) for term in self.LEADERSHIP_TERMS
        }

    def analyze_job(self, job_data: Union[JobPosting, Dict[str, Any]]) -> JobAnalysis:
        """
        Analyze a job posting

        Args:
            job_data: JobPosting or a dict with title, company, description,
                optional location and jobId. Missing fields default to empty.

        Returns:
            JobAnalysis with parameters sorted by weight (descending)
        """
        job = job_data if isinstance(job_data, JobPosting) else JobPosting.from_dict(job_data)
        text = f"{job.title} {job.description}".lower()

        logger.info(f"Analyzing job: {job.title or '(untitled)'} at {job.company or '(unknown company)'}")

        parameters: List[JobParameter] = []
        parameters.extend(self._extract_technical_parameters(text))
        parameters.extend(self._extract_leadership_parameters(text))
        parameters.extend(self._extract_domain_parameters(text))
        parameters.extend(self._extract_soft_skills(text))

        if job.location:
            parameters.append(JobParameter(
                name='location',
                category=ParameterCategory.LOCATION,
                weight=self._location_weight(job.location),
                value=job.location,
                confidence=1.0
            ))

        parameters.append(JobParameter(
            name='company_size',
            category=ParameterCategory.COMPANY,
            weight=self._company_weight(job.company),
            value=job.company,
            confidence=0.7
        ))

        seniority = self.determine_seniority_level(text, job.title)
        key_requirements = self.extract_key_requirements(job.description)

        self._adjust_weights_for_seniority(parameters, seniority)
        parameters.sort(key=lambda p: p.weight, reverse=True)

        logger.debug(f"Extracted {len(parameters)} parameters, seniority={seniority.value}")

        return JobAnalysis(
            job_id=job.job_id,
            title=job.title,
            company=job.company,
            parameters=parameters,
            key_requirements=key_requirements,
            seniority_level=seniority,
            analysis_metadata={
                'analyzedAt': datetime.now().isoformat(),
                'parameterCount': len(parameters),
                'primaryCategory': self._primary_category(parameters),
            }
        )

    def _extract_technical_parameters(self, text: str) -> List[JobParameter]:
        parameters = []

        for skill, base_weight in self.TECHNICAL_SKILLS.items():
            frequency = len(self._technical_patterns[skill].findall(text))
            if not frequency:
                continue

            parameters.append(JobParameter(
                name=skill,
                category=ParameterCategory.TECHNICAL,
                weight=base_weight * frequency_multiplier(frequency),
                value=skill,
                confidence=min(0.9, 0.6 + frequency * 0.1)
            ))

        return parameters

    def _extract_leadership_parameters(self, text: str) -> List[JobParameter]:
        parameters = []

        for term, base_weight in self.LEADERSHIP_TERMS.items():
            if self._leadership_patterns[term].search(text):
                parameters.append(JobParameter(
                    name=term.replace(' ', '_', 1),
                    category=ParameterCategory.LEADERSHIP,
                    weight=base_weight,
                    value=term,
                    confidence=0.8
                ))

        # Larger teams weigh more
        team_match = self.TEAM_SIZE_PATTERN.search(text)
        if team_match:
            team_size = int(team_match.group(1))
            parameters.append(JobParameter(
                name='team_size',
                category=ParameterCategory.LEADERSHIP,
                weight=min(0.9, 0.6 + team_size / 50),
                value=f"{team_size}+ team members",
                confidence=0.9
            ))

        return parameters

    def _extract_domain_parameters(self, text: str) -> List[JobParameter]:
        return [
            JobParameter(
                name=domain,
                category=ParameterCategory.DOMAIN,
                weight=weight,
                value=domain,
                confidence=0.8
            )
            for domain, weight in self.DOMAIN_TERMS.items()
            if domain in text
        ]

    def _extract_soft_skills(self, text: str) -> List[JobParameter]:
        return [
            JobParameter(
                name=skill.replace(' ', '_', 1),
                category=ParameterCategory.SOFT,
                weight=weight,
                value=skill,
                confidence=0.6
            )
            for skill, weight in self.SOFT_SKILLS.items()
            if skill in text
        ]

    def determine_seniority_level(self, text: str, title: str) -> SeniorityLevel:
        """Title keywords first, then an "N years experience" ladder, default mid"""
        title_lower = (title or '').lower()

        for level, keywords in self.SENIORITY_KEYWORDS:
            if any(keyword in title_lower for keyword in keywords):
                return level

        years_match = self.EXPERIENCE_YEARS_PATTERN.search(text)
        if years_match:
            years = int(years_match.group(1))
            if years >= 10:
                return SeniorityLevel.DIRECTOR
            if years >= 7:
                return SeniorityLevel.LEAD
            if years >= 4:
                return SeniorityLevel.SENIOR
            if years >= 2:
                return SeniorityLevel.MID
            return SeniorityLevel.JUNIOR

        return SeniorityLevel.MID

    def extract_key_requirements(self, description: str) -> List[str]:
        """Bulleted lines plus the lines of a "must have / required" block"""
        requirements = []

        for match in self.BULLET_PATTERN.finditer(description or ''):
            requirement = match.group(1).strip()
            if 10 < len(requirement) < 200:
                requirements.append(requirement)

        must_have = self.MUST_HAVE_PATTERN.search(description or '')
        if must_have:
            lines = [line.strip() for line in must_have.group(1).split('\n')]
            requirements.extend(line for line in lines if len(line) > 10)

        unique = list(dict.fromkeys(requirements))
        return unique[:self.config.max_key_requirements]

    def _location_weight(self, location: str) -> float:
        location_lower = location.lower()

        if 'remote' in location_lower:
            return 0.9
        if 'berlin' in location_lower:
            return 0.8
        if 'germany' in location_lower:
            return 0.7
        return 0.5

    def _company_weight(self, company: str) -> float:
        company_lower = (company or '').lower()

        if 'startup' in company_lower:
            return 0.6
        if 'gmbh' in company_lower:
            return 0.7
        if len(company_lower) > 20:
            return 0.5
        return 0.6

    def _adjust_weights_for_seniority(self, parameters: List[JobParameter], seniority: SeniorityLevel):
        technical, leadership = self.SENIORITY_ADJUSTMENTS[seniority]

        for param in parameters:
            if param.category == ParameterCategory.TECHNICAL:
                param.weight *= technical
            elif param.category == ParameterCategory.LEADERSHIP:
                param.weight *= leadership

            param.weight = clamp(param.weight)

    def _primary_category(self, parameters: List[JobParameter]) -> str:
        totals: Dict[str, float] = {}
        for param in parameters:
            totals[param.category.value] = totals.get(param.category.value, 0.0) + param.weight

        if not totals:
            return ParameterCategory.TECHNICAL.value
        return max(totals.items(), key=lambda item: item[1])[0]
