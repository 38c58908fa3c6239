# tests/test_cv_analyzer.py
"""Tests for CV analysis"""

import pytest

from analysis import AnalysisConfig, CVAnalyzer, ParameterCategory, SeniorityLevel
from analysis.text_utils import count_term


OVERLAPPING_CV = """### Experience

Lead Engineer | Alpha | 2015 - 2020
Advisor | Beta | 2018 - 2020
"""


def test_sample_cv_overview(cv_analyzer, sample_cv):
    """Test experience, current role and seniority"""
    analysis = cv_analyzer.analyze_cv(sample_cv, cv_id='jane')

    assert analysis.cv_id == 'jane'
    assert analysis.total_experience == 12
    assert analysis.current_role == 'Head of Engineering'
    assert analysis.seniority_level == SeniorityLevel.DIRECTOR


def test_technical_strength_from_context(cv_analyzer, sample_cv):
    """Test frequency plus strong-verb context"""
    analysis = cv_analyzer.analyze_cv(sample_cv)

    python = analysis.get_parameter('python')
    assert python.category == ParameterCategory.TECHNICAL
    assert python.strength == pytest.approx(1.0)
    assert len(python.evidence) == 3

    assert analysis.get_parameter('kubernetes').strength == pytest.approx(0.7)


def test_single_bare_mention_dropped(cv_analyzer, sample_cv):
    """Test a lone mention without context is not evidence enough"""
    analysis = cv_analyzer.analyze_cv(sample_cv)
    assert analysis.get_parameter('java') is None
    assert analysis.get_parameter('typescript') is None


def test_leadership_parameters(cv_analyzer, sample_cv):
    """Test team leadership, team size and senior role parameters"""
    analysis = cv_analyzer.analyze_cv(sample_cv)

    leadership = analysis.get_parameter('team_leadership')
    assert leadership.strength == pytest.approx(0.8)

    management = analysis.get_parameter('team_management')
    assert management.strength == 1.0
    assert management.value == 'Team Management (up to 25 people)'

    senior = analysis.get_parameter('senior_leadership')
    assert senior.strength == 0.9
    assert senior.value == 'Head of Engineering | Acme GmbH | 2018 - present'
    assert analysis.get_parameter('senior_leadership_2') is None


def test_senior_roles_get_unique_names(cv_analyzer):
    """Test several senior roles become distinct parameters"""
    cv = "### Experience\n\nDirector of Data | A | 2019 - 2022\nVP Engineering | B | 2015 - 2019\n"
    names = [p.name for p in cv_analyzer.analyze_cv(cv).parameters if p.name.startswith('senior_leadership')]

    assert sorted(names) == ['senior_leadership', 'senior_leadership_2']


def test_education_highest_degree(cv_analyzer):
    """Test the highest degree decides the strength"""
    cv = "### Education\n\nBSc and PhD in Physics\n"
    education = cv_analyzer.analyze_cv(cv).get_parameter('education')

    assert education.strength == 0.8
    assert education.value == 'PhD in Physics'


def test_education_master(cv_analyzer, sample_cv):
    education = cv_analyzer.analyze_cv(sample_cv).get_parameter('education')
    assert education.strength == 0.7
    assert education.category == ParameterCategory.EDUCATION


def test_education_ignores_degree_letters_inside_words(cv_analyzer):
    """Test 'Systems' does not read as an MS degree"""
    cv = "### Education\n\nBachelor of Engineering in Information Systems\n"
    education = cv_analyzer.analyze_cv(cv).get_parameter('education')

    assert education.strength == 0.6
    assert education.value == 'Bachelor in Engineering'


def test_experience_sum_policy(config):
    """Test overlapping ranges are added as written by default"""
    assert CVAnalyzer(config).calculate_total_experience(OVERLAPPING_CV) == 7


def test_experience_union_policy():
    """Test the union policy counts overlapping years once"""
    analyzer = CVAnalyzer(AnalysisConfig(experience_overlap='union', current_year=2024))
    assert analyzer.calculate_total_experience(OVERLAPPING_CV) == 5


def test_present_uses_configured_year():
    cv = "### Experience\n\nEngineer | A | 2020 - present\n"
    analyzer = CVAnalyzer(AnalysisConfig(current_year=2030))
    assert analyzer.calculate_total_experience(cv) == 10


@pytest.mark.parametrize("role,years,expected", [
    ('CTO', 0, SeniorityLevel.EXECUTIVE),
    ('Engineering Director', 0, SeniorityLevel.EXECUTIVE),
    ('Head of Data', 0, SeniorityLevel.DIRECTOR),
    ('Principal Engineer', 0, SeniorityLevel.LEAD),
    ('Sr. Developer', 0, SeniorityLevel.SENIOR),
    ('Engineer', 15, SeniorityLevel.DIRECTOR),
    ('Engineer', 12, SeniorityLevel.LEAD),
    ('Engineer', 7, SeniorityLevel.SENIOR),
    ('Engineer', 3, SeniorityLevel.MID),
    ('Engineer', 1, SeniorityLevel.JUNIOR),
    (None, 0, SeniorityLevel.JUNIOR),
])
def test_seniority_levels(cv_analyzer, role, years, expected):
    """Test role keywords first, then years thresholds"""
    assert cv_analyzer.determine_seniority_level(role, years) == expected


def test_key_strengths_in_extraction_order(cv_analyzer, sample_cv):
    """Test key strengths keep extraction order"""
    strengths = cv_analyzer.analyze_cv(sample_cv).key_strengths

    assert strengths[0] == 'python'
    assert 'Team Leadership' in strengths
    assert len(strengths) <= 8


def test_parameters_sorted_by_strength(cv_analyzer, sample_cv):
    strengths = [p.strength for p in cv_analyzer.analyze_cv(sample_cv).parameters]
    assert strengths == sorted(strengths, reverse=True)


def test_regex_special_terms(cv_analyzer):
    """Test terms like node.js are searched literally"""
    assert count_term('node.js or nodexjs', 'node.js') == 1

    names = {p.name for p in cv_analyzer.analyze_cv("Built Node.js services. Expertise in node.js.").parameters}
    assert 'javascript' in names
    # a trailing word boundary after '++' never matches before a space
    assert 'c++' not in {p.name for p in cv_analyzer.analyze_cv("Wrote C++ and C++ code.").parameters}


def test_empty_cv(cv_analyzer):
    """Test empty input degrades to an empty analysis"""
    analysis = cv_analyzer.analyze_cv('')

    assert analysis.parameters == []
    assert analysis.total_experience == 0
    assert analysis.current_role is None
    assert analysis.seniority_level == SeniorityLevel.JUNIOR
    assert 'currentRole' not in analysis.to_dict()


def test_years_of_experience_omitted_when_unknown(cv_analyzer, sample_cv):
    data = cv_analyzer.analyze_cv(sample_cv).get_parameter('kubernetes').to_dict()
    assert 'yearsOfExperience' not in data


def test_years_of_experience_from_context(cv_analyzer):
    cv = "Built Python services for 6 years and designed Python tooling."
    assert cv_analyzer.analyze_cv(cv).get_parameter('python').years_of_experience == 6
