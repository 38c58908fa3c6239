# tailoring/cv_sections.py
import re
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from analysis.text_utils import extract_section

logger = logging.getLogger(__name__)


@dataclass
class MarkdownSection:
    """A markdown heading and the text under it"""
    level: int          # number of '#' characters
    title: str
    content: str


@dataclass
class ExperienceRole:
    """One role block of an Experience section"""
    title: str
    lines: List[str]
    achievement_indexes: List[int] = field(default_factory=list)

    @property
    def achievements(self) -> List[str]:
        return [self.lines[i] for i in self.achievement_indexes]

    @property
    def content(self) -> str:
        return '\n'.join(self.lines)

    def with_achievements(self, achievements: List[str]) -> 'ExperienceRole':
        """Same role with its achievement lines replaced slot by slot"""
        lines = list(self.lines)
        for index, achievement in zip(self.achievement_indexes, achievements):
            lines[index] = achievement
        return ExperienceRole(title=self.title, lines=lines, achievement_indexes=list(self.achievement_indexes))


@dataclass
class SkillCategory:
    """A `Category: skill, skill` line of a skills section"""
    name: str
    skills: List[str]

    def render(self) -> str:
        return f"{self.name}: {', '.join(self.skills)}"


def relevance(text: str, terms: List[str]) -> int:
    """Number of terms mentioned in text (case-insensitive)"""
    text_lower = text.lower()
    return sum(1 for term in terms if term and term.lower() in text_lower)


class CVSectionExtractor:
    """
    Split markdown CVs into sections, roles and skill categories

    Handles the `### Heading` layout the analyzers expect.
    """

    HEADING_PATTERN = re.compile(r'^(#+)\s*(.+)$')
    ROLE_SPLIT_PATTERN = re.compile(r'\n\n(?=[A-Z])')
    ACHIEVEMENT_MARKERS = ('*', '-', '•')
    SKILL_LINE_PATTERN = re.compile(r'^[\s*\-•]*(?:\*\*)?([^:*]+?)(?:\*\*)?\s*:\s*(.+)$')

    def parse_sections(self, cv_content: str) -> List[MarkdownSection]:
        """All headed sections in document order; text before the first heading is skipped"""
        sections = []
        current: Optional[MarkdownSection] = None

        for line in (cv_content or '').split('\n'):
            match = self.HEADING_PATTERN.match(line)
            if match:
                if current:
                    sections.append(current)
                current = MarkdownSection(level=len(match.group(1)), title=match.group(2).strip(), content='')
            elif current:
                current.content += line + '\n'

        if current:
            sections.append(current)

        logger.debug(f"Parsed {len(sections)} CV sections")
        return sections

    def find_section(self, sections: List[MarkdownSection], *fragments: str) -> Optional[int]:
        """Index of the first section whose title contains any fragment"""
        for index, section in enumerate(sections):
            title = section.title.lower()
            if any(fragment in title for fragment in fragments):
                return index
        return None

    def extract_section(self, cv_content: str, section_name: str) -> str:
        return extract_section(cv_content, section_name)

    def replace_section(self, cv_content: str, section_name: str, new_content: str) -> str:
        """Replace a `### name` section (heading included) with fresh content"""
        pattern = re.compile(rf'(###\s*{re.escape(section_name)}.*?)(?=###|\Z)', re.IGNORECASE | re.DOTALL)
        replacement = f"### {section_name.upper()}\n\n{new_content}\n\n"
        return pattern.sub(lambda _: replacement, cv_content, count=1)

    def parse_experience_roles(self, experience: str) -> List[ExperienceRole]:
        """Roles are blank-line separated blocks starting with a capital letter"""
        roles = []

        for block in self.ROLE_SPLIT_PATTERN.split(experience.strip()):
            block = block.strip()
            if not block:
                continue

            lines = block.split('\n')
            achievement_indexes = [
                i for i, line in enumerate(lines)
                if i > 0 and line.strip().startswith(self.ACHIEVEMENT_MARKERS)
            ]
            roles.append(ExperienceRole(title=lines[0], lines=lines, achievement_indexes=achievement_indexes))

        return roles

    def rebuild_experience(self, roles: List[ExperienceRole]) -> str:
        return '\n\n'.join(role.content for role in roles)

    def parse_skill_categories(self, skills: str) -> List[SkillCategory]:
        categories = []

        for line in skills.split('\n'):
            match = self.SKILL_LINE_PATTERN.match(line.strip())
            if not match:
                continue

            names = [s.strip(' *') for s in match.group(2).split(',') if s.strip(' *')]
            categories.append(SkillCategory(name=match.group(1).strip(), skills=names))

        return categories

    def rebuild_skills(self, categories: List[SkillCategory]) -> str:
        return '\n'.join(category.render() for category in categories)
