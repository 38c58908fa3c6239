# tests/conftest.py
"""Shared fixtures for the matching engine and tailoring tests"""

import pytest

from analysis import (
    AnalysisConfig, CVAnalysis, CVAnalyzer, CVMatrix, CVParameter, JobAnalysis, JobAnalyzer,
    JobMatrix, JobParameter, MatrixGenerator, ParameterCategory, SeniorityLevel
)


SAMPLE_CV = """### SUMMARY

Engineering leader, with 15 years of technical expertise and leadership in cloud platforms.

### EXPERIENCE

Head of Engineering | Acme GmbH | 2018 - present
* Led a team of 25 engineers across three products
* Architected AWS microservices platform with Python and Kubernetes
* Introduced data-driven analytics for release planning

Senior Developer | Beta AG | 2012 - 2018
* Mentored junior developers
* Built Python services on Docker

### TECHNICAL EXPERTISE

Programming: Python, Java, TypeScript
Cloud: AWS, Kubernetes, Docker

### EDUCATION

M.Sc. in Computer Science, TU Berlin

### LANGUAGES

English (Fluent), German (Fluent)
"""

SENIOR_BACKEND_JOB = {
    'title': 'Senior Backend Engineer',
    'company': 'Acme',
    'description': 'We build backend services with Python on AWS for a team of 12 engineers.',
}


@pytest.fixture
def config():
    """Deterministic configuration ('present' = 2024)"""
    return AnalysisConfig(current_year=2024)


@pytest.fixture
def job_analyzer(config):
    return JobAnalyzer(config)


@pytest.fixture
def cv_analyzer(config):
    return CVAnalyzer(config)


@pytest.fixture
def generator(config):
    return MatrixGenerator(config)


@pytest.fixture
def sample_cv():
    return SAMPLE_CV


@pytest.fixture
def senior_job():
    return dict(SENIOR_BACKEND_JOB)


def make_job(job_id, weights, seniority=SeniorityLevel.SENIOR, category=ParameterCategory.TECHNICAL):
    """JobAnalysis with one parameter per (name, weight)"""
    return JobAnalysis(
        title=f"Job {job_id}",
        company='Acme',
        parameters=[
            JobParameter(name=name, category=category, weight=weight, value=name, confidence=0.8)
            for name, weight in weights.items()
        ],
        key_requirements=[],
        seniority_level=seniority,
        job_id=job_id,
    )


def make_cv_matrix(strengths, seniority=SeniorityLevel.SENIOR, category=ParameterCategory.TECHNICAL):
    """CVMatrix with one parameter per (name, strength)"""
    analysis = CVAnalysis(
        cv_id='test-cv',
        total_experience=8,
        parameters=[
            CVParameter(name=name, category=category, strength=strength, value=name)
            for name, strength in strengths.items()
        ],
        key_strengths=[],
        seniority_level=seniority,
    )
    return CVMatrix(
        matrix_id='cv-matrix-test',
        cv_analysis=analysis,
        parameters=list(strengths),
        strength_vector=list(strengths.values()),
    )
