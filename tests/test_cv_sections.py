# tests/test_cv_sections.py
"""Tests for markdown CV section handling"""

import pytest

from tailoring import CVSectionExtractor
from tailoring.cv_sections import relevance


@pytest.fixture
def extractor():
    return CVSectionExtractor()


def test_parse_sections(extractor, sample_cv):
    sections = extractor.parse_sections(sample_cv)

    assert [s.title for s in sections] == ['SUMMARY', 'EXPERIENCE', 'TECHNICAL EXPERTISE', 'EDUCATION', 'LANGUAGES']
    assert all(s.level == 3 for s in sections)
    assert 'M.Sc. in Computer Science' in sections[3].content


def test_text_before_first_heading_skipped(extractor):
    sections = extractor.parse_sections("Jane Doe\n## Profile\nBuilder")

    assert len(sections) == 1
    assert sections[0].level == 2
    assert sections[0].title == 'Profile'
    assert sections[0].content == 'Builder\n'


def test_find_section(extractor, sample_cv):
    sections = extractor.parse_sections(sample_cv)

    assert extractor.find_section(sections, 'technical', 'expertise') == 2
    assert extractor.find_section(sections, 'summary') == 0
    assert extractor.find_section(sections, 'projects') is None


def test_extract_section(extractor, sample_cv):
    assert extractor.extract_section(sample_cv, 'LANGUAGES') == 'English (Fluent), German (Fluent)'
    assert extractor.extract_section(sample_cv, 'PROJECTS') == ''


def test_replace_section(extractor, sample_cv):
    updated = extractor.replace_section(sample_cv, 'Education', 'PhD in Physics')

    assert '### EDUCATION\n\nPhD in Physics\n\n### LANGUAGES' in updated
    assert 'M.Sc.' not in updated


def test_replace_missing_section(extractor, sample_cv):
    assert extractor.replace_section(sample_cv, 'PROJECTS', 'x') == sample_cv


def test_parse_experience_roles(extractor, sample_cv):
    roles = extractor.parse_experience_roles(extractor.extract_section(sample_cv, 'EXPERIENCE'))

    assert [r.title for r in roles] == [
        'Head of Engineering | Acme GmbH | 2018 - present',
        'Senior Developer | Beta AG | 2012 - 2018',
    ]
    assert roles[1].achievements == ['* Mentored junior developers', '* Built Python services on Docker']


def test_with_achievements_keeps_other_lines(extractor):
    role = extractor.parse_experience_roles("CTO | X | 2020\nRemote team\n- Shipped A\n- Shipped B")[0]
    reordered = role.with_achievements(['- Shipped B', '- Shipped A'])

    assert reordered.content == "CTO | X | 2020\nRemote team\n- Shipped B\n- Shipped A"
    assert role.content == "CTO | X | 2020\nRemote team\n- Shipped A\n- Shipped B"


def test_rebuild_experience(extractor, sample_cv):
    experience = extractor.extract_section(sample_cv, 'EXPERIENCE')
    roles = extractor.parse_experience_roles(experience)

    assert extractor.rebuild_experience(roles) == experience


@pytest.mark.parametrize('line,name', [
    ('Cloud: AWS, GCP', 'Cloud'),
    ('- Cloud: AWS, GCP', 'Cloud'),
    ('* **Cloud**: AWS, GCP', 'Cloud'),
])
def test_parse_skill_categories(extractor, line, name):
    categories = extractor.parse_skill_categories(line)

    assert len(categories) == 1
    assert categories[0].name == name
    assert categories[0].skills == ['AWS', 'GCP']


def test_rebuild_skills(extractor):
    categories = extractor.parse_skill_categories("Programming: Python, Go\n\nCloud: AWS")
    assert extractor.rebuild_skills(categories) == "Programming: Python, Go\nCloud: AWS"


def test_relevance_counts_terms():
    assert relevance('Built Python and python tooling', ['python', 'go', 'tooling']) == 2
    assert relevance('anything', []) == 0
