# analysis/cv_analyzer.py
import re
import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from analysis.config import AnalysisConfig, get_config
from analysis.models import CVAnalysis, CVParameter, ParameterCategory, SeniorityLevel
from analysis.text_utils import (
    count_term, extract_section, find_contexts, first_years, word_pattern
)

logger = logging.getLogger(__name__)


DATE_RANGE_PATTERN = re.compile(r'(\d{4})\s*[-–]\s*(\d{4}|present)', re.IGNORECASE)


class CVAnalyzer:
    """
    Extract skill strengths from CV markdown

    Strength reflects how often a skill is mentioned and how strongly the
    surrounding text claims it ("architected" beats "used").
    """

    # Canonical skill -> spelling variants searched in the CV
    TECHNICAL_SKILLS = {
        # Programming languages
        'javascript': ['js', 'javascript', 'node.js', 'nodejs'],
        'typescript': ['typescript', 'ts'],
        'python': ['python', 'django', 'flask', 'pandas'],
        'java': ['java', 'spring', 'hibernate'],
        'golang': ['golang', 'go'],
        'c#': ['c#', 'csharp', '.net', 'dotnet'],
        'c++': ['c++', 'cpp'],
        'php': ['php', 'laravel', 'symfony'],

        # Cloud & infrastructure
        'aws': ['aws', 'amazon web services', 'ec2', 's3', 'lambda'],
        'azure': ['azure', 'az', 'azure kubernetes service', 'aks'],
        'gcp': ['gcp', 'google cloud', 'gke'],
        'kubernetes': ['kubernetes', 'k8s', 'kubectl'],
        'docker': ['docker', 'containerization'],
        'terraform': ['terraform', 'tf', 'infrastructure as code'],
        'helm': ['helm', 'helm charts'],

        # Databases
        'mongodb': ['mongodb', 'mongo', 'mongoose'],
        'postgresql': ['postgresql', 'postgres', 'psql'],
        'mysql': ['mysql'],
        'mssql': ['mssql', 'sql server'],
        'redis': ['redis'],

        # DevOps & tools
        'gitlab': ['gitlab', 'gitlab ci'],
        'jenkins': ['jenkins'],
        'git': ['git', 'version control'],
        'grafana': ['grafana'],
        'jira': ['jira'],
        'confluence': ['confluence'],
    }

    STRONG_CONTEXT_WORDS = ['implemented', 'architected', 'built', 'designed', 'led', 'expertise']
    MEDIUM_CONTEXT_WORDS = ['used', 'worked with', 'experience', 'knowledge']

    LEADERSHIP_INDICATORS = [
        'led', 'managed', 'supervised', 'mentored', 'coached', 'directed',
        'spearheaded', 'orchestrated', 'oversaw', 'guided', 'built team',
        'scaled team', 'hired', 'recruited', 'performance management',
        'team lead', 'head of', 'director', 'cto', 'vp',
    ]

    SENIOR_TITLES = ['director', 'head of', 'cto', 'vp', 'chief']

    DOMAIN_EXPERIENCE = {
        'adtech': ['adtech', 'advertising technology', 'programmatic', 'rtb', 'vast', 'vpaid'],
        'medtech': ['medtech', 'healthcare', 'medical', 'fhir', 'hl7', 'hipaa'],
        'fintech': ['fintech', 'financial', 'banking', 'payment', 'blockchain'],
        'ecommerce': ['e-commerce', 'ecommerce', 'retail', 'shopping', 'marketplace'],
    }

    SOFT_SKILLS = {
        'communication': ['communication', 'stakeholder', 'collaboration', 'alignment'],
        'problem_solving': ['problem solving', 'optimization', 'troubleshooting', 'debugging'],
        'mentoring': ['mentored', 'coaching', 'guided', 'developed'],
        'agile': ['agile', 'scrum', 'kanban', 'sprint'],
    }

    TEAM_SIZE_PATTERN = re.compile(r'(\d+)\+?\s*(?:employees|people|developers|engineers|members)', re.IGNORECASE)
    LEADERSHIP_ROLE_PATTERN = re.compile(
        r'(?:director|head of|lead|manager|cto).*?(\d{4})\s*[-–]\s*(\d{4}|present)',
        re.IGNORECASE | re.DOTALL
    )
    DEGREE_PATTERN = re.compile(
        r'\b(m\.?s\.?c?\.?|masters?|b\.?s\.?c?\.?|bachelor|phd|doctorate)\b', re.IGNORECASE
    )
    MASTER_PATTERN = re.compile(r'm\.?s\.?c?\.?|masters?', re.IGNORECASE)
    FIELD_PATTERN = re.compile(r'(computer science|engineering|mathematics|physics)', re.IGNORECASE)

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or get_config()

    def analyze_cv(self, cv_content: str, cv_id: str = 'cv') -> CVAnalysis:
        """
        Analyze CV content

        Args:
            cv_content: CV in markdown (### section headings)
            cv_id: Identifier carried into the analysis and CV matrix

        Returns:
            CVAnalysis with parameters sorted by strength (descending)
        """
        cv_content = cv_content or ''
        logger.info(f"Analyzing CV {cv_id} ({len(cv_content)} chars)")

        parameters: List[CVParameter] = []
        parameters.extend(self._extract_technical_parameters(cv_content))
        parameters.extend(self._extract_leadership_parameters(cv_content))
        parameters.extend(self._extract_domain_parameters(cv_content))
        parameters.extend(self._extract_soft_skills(cv_content))
        parameters.extend(self._extract_education(cv_content))

        total_experience = self.calculate_total_experience(cv_content)
        current_role = self.extract_current_role(cv_content)
        seniority = self.determine_seniority_level(current_role, total_experience)

        # Taken in extraction order, before sorting
        key_strengths = [p.value for p in parameters if p.strength > 0.7][:8]

        parameters.sort(key=lambda p: p.strength, reverse=True)

        logger.debug(
            f"CV {cv_id}: {len(parameters)} parameters, "
            f"{total_experience} years, seniority={seniority.value}"
        )

        return CVAnalysis(
            cv_id=cv_id,
            total_experience=total_experience,
            parameters=parameters,
            key_strengths=key_strengths,
            seniority_level=seniority,
            current_role=current_role,
            analysis_metadata={
                'analyzedAt': datetime.now().isoformat(),
                'parameterCount': len(parameters),
                'strongestCategory': self._strongest_category(parameters),
            }
        )

    def _extract_technical_parameters(self, cv_content: str) -> List[CVParameter]:
        parameters = []
        lower_content = cv_content.lower()

        for skill, variants in self.TECHNICAL_SKILLS.items():
            evidence: List[str] = []
            max_strength = 0.0
            years = 0

            for variant in variants:
                frequency = count_term(lower_content, variant)
                if not frequency:
                    continue

                contexts = find_contexts(cv_content, variant, 50)
                evidence.extend(contexts)

                strength = min(1.0, frequency * 0.2 + self.assess_context_strength(contexts))
                max_strength = max(max_strength, strength)
                years = max(years, first_years(contexts) or 0)

            # A single bare mention (0.2) is not enough evidence
            if max_strength > 0.2:
                parameters.append(CVParameter(
                    name=skill,
                    category=ParameterCategory.TECHNICAL,
                    strength=max_strength,
                    value=skill,
                    evidence=evidence[:3],
                    years_of_experience=years or None
                ))

        return parameters

    def assess_context_strength(self, contexts: List[str]) -> float:
        """+0.3 per strong-verb context, +0.1 per medium one, capped at 0.8"""
        strength = 0.0

        for context in contexts:
            lower_context = context.lower()
            if any(word in lower_context for word in self.STRONG_CONTEXT_WORDS):
                strength += 0.3
            elif any(word in lower_context for word in self.MEDIUM_CONTEXT_WORDS):
                strength += 0.1

        return min(0.8, strength)

    def _extract_leadership_parameters(self, cv_content: str) -> List[CVParameter]:
        parameters = []
        evidence: List[str] = []

        for indicator in self.LEADERSHIP_INDICATORS:
            if word_pattern(indicator).search(cv_content):
                evidence.extend(find_contexts(cv_content, indicator, 100))

        if evidence:
            leadership_years = self._extract_leadership_years(cv_content)
            parameters.append(CVParameter(
                name='team_leadership',
                category=ParameterCategory.LEADERSHIP,
                strength=min(1.0, 0.5 + len(evidence) * 0.1),
                value='Team Leadership',
                evidence=evidence[:5],
                years_of_experience=leadership_years or None
            ))

            team_sizes = [
                int(size) for size in self.TEAM_SIZE_PATTERN.findall(cv_content) if int(size) > 0
            ]
            if team_sizes:
                max_team = max(team_sizes)
                parameters.append(CVParameter(
                    name='team_management',
                    category=ParameterCategory.LEADERSHIP,
                    strength=min(1.0, 0.6 + max_team / 50),
                    value=f"Team Management (up to {max_team} people)",
                    evidence=[f"Managed teams of up to {max_team} people"]
                ))

        for index, (line, years) in enumerate(self._extract_senior_roles(cv_content)):
            # Names stay unique within one analysis
            name = 'senior_leadership' if index == 0 else f'senior_leadership_{index + 1}'
            parameters.append(CVParameter(
                name=name,
                category=ParameterCategory.LEADERSHIP,
                strength=0.9,
                value=line.strip(),
                evidence=[line],
                years_of_experience=years
            ))

        return parameters

    def _extract_senior_roles(self, cv_content: str) -> List[Tuple[str, Optional[int]]]:
        """Distinct lines naming a senior title, in title order"""
        roles = []
        seen = set()

        for title in self.SENIOR_TITLES:
            pattern = re.compile(rf'([^\n]*{re.escape(title)}[^\n]*)', re.IGNORECASE)
            for line in pattern.findall(cv_content):
                key = line.strip()
                if key in seen:
                    continue
                seen.add(key)
                roles.append((line, first_years([line])))

        return roles

    def _extract_leadership_years(self, cv_content: str) -> int:
        current_year = self.config.resolve_current_year()
        total = 0

        for start, end in self.LEADERSHIP_ROLE_PATTERN.findall(cv_content):
            end_year = current_year if end.lower() == 'present' else int(end)
            total += end_year - int(start)

        return total

    def _extract_domain_parameters(self, cv_content: str) -> List[CVParameter]:
        parameters = []
        lower_content = cv_content.lower()

        for domain, indicators in self.DOMAIN_EXPERIENCE.items():
            evidence: List[str] = []
            strength = 0.0

            for indicator in indicators:
                if indicator in lower_content:
                    evidence.extend(find_contexts(cv_content, indicator, 80))
                    strength += 0.2

            if strength > 0:
                parameters.append(CVParameter(
                    name=domain,
                    category=ParameterCategory.DOMAIN,
                    strength=min(1.0, strength),
                    value=domain,
                    evidence=evidence[:3]
                ))

        return parameters

    def _extract_soft_skills(self, cv_content: str) -> List[CVParameter]:
        parameters = []
        lower_content = cv_content.lower()

        for skill, indicators in self.SOFT_SKILLS.items():
            evidence: List[str] = []
            strength = 0.0

            for indicator in indicators:
                if indicator in lower_content:
                    evidence.extend(find_contexts(cv_content, indicator, 60))
                    strength += 0.15

            if strength > 0.2:
                parameters.append(CVParameter(
                    name=skill,
                    category=ParameterCategory.SOFT,
                    strength=min(0.8, strength),
                    value=skill.replace('_', ' '),
                    evidence=evidence[:2]
                ))

        return parameters

    def _extract_education(self, cv_content: str) -> List[CVParameter]:
        section = extract_section(cv_content, 'education')
        if not section:
            return []

        degrees = [m.group(1) for m in self.DEGREE_PATTERN.finditer(section)]
        fields = [m.group(1) for m in self.FIELD_PATTERN.finditer(section)]
        if not degrees or not fields:
            return []

        degree = max(degrees, key=self._degree_rank)
        strength = {3: 0.8, 2: 0.7}.get(self._degree_rank(degree), 0.6)

        return [CVParameter(
            name='education',
            category=ParameterCategory.EDUCATION,
            strength=strength,
            value=f"{degree} in {fields[0]}",
            evidence=[section[:100]]
        )]

    @classmethod
    def _degree_rank(cls, degree: str) -> int:
        degree_lower = degree.lower()
        if degree_lower in ('phd', 'doctorate'):
            return 3
        if cls.MASTER_PATTERN.fullmatch(degree_lower):
            return 2
        return 1

    def calculate_total_experience(self, cv_content: str) -> float:
        """
        Years covered by the date ranges of the Experience section

        With the 'sum' overlap policy concurrent roles are counted once
        per role; 'union' merges overlapping ranges first.
        """
        section = extract_section(cv_content, 'experience')
        if not section:
            return 0

        current_year = self.config.resolve_current_year()
        ranges = []
        for start, end in DATE_RANGE_PATTERN.findall(section):
            end_year = current_year if end.lower() == 'present' else int(end)
            ranges.append((int(start), end_year))

        if self.config.experience_overlap == 'union':
            return self._union_years(ranges)
        return sum(end - start for start, end in ranges)

    @staticmethod
    def _union_years(ranges: List[Tuple[int, int]]) -> int:
        merged: List[List[int]] = []

        for start, end in sorted(r for r in ranges if r[1] >= r[0]):
            if merged and start <= merged[-1][1]:
                merged[-1][1] = max(merged[-1][1], end)
            else:
                merged.append([start, end])

        return sum(end - start for start, end in merged)

    def extract_current_role(self, cv_content: str) -> Optional[str]:
        """Text of the Experience section up to the first '|'"""
        section = extract_section(cv_content, 'experience')
        if not section:
            return None

        match = re.match(r'([^|]+)', section)
        return match.group(1).strip() if match else None

    def determine_seniority_level(self, current_role: Optional[str], total_experience: float) -> SeniorityLevel:
        title = (current_role or '').lower()

        if 'cto' in title or 'vp' in title:
            return SeniorityLevel.EXECUTIVE
        if 'director' in title or 'head of' in title:
            return SeniorityLevel.DIRECTOR
        if 'lead' in title or 'principal' in title:
            return SeniorityLevel.LEAD
        if 'senior' in title or 'sr.' in title:
            return SeniorityLevel.SENIOR

        if total_experience >= 15:
            return SeniorityLevel.DIRECTOR
        if total_experience >= 10:
            return SeniorityLevel.LEAD
        if total_experience >= 7:
            return SeniorityLevel.SENIOR
        if total_experience >= 3:
            return SeniorityLevel.MID
        return SeniorityLevel.JUNIOR

    def _strongest_category(self, parameters: List[CVParameter]) -> str:
        totals: Dict[str, float] = {}
        for param in parameters:
            totals[param.category.value] = totals.get(param.category.value, 0.0) + param.strength

        if not totals:
            return ParameterCategory.TECHNICAL.value
        return max(totals.items(), key=lambda item: item[1])[0]
