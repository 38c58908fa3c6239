# tests/test_cluster_analyzer.py
"""Tests for job match clustering"""

import pytest

from analysis import MatchResult
from tailoring import JobClusterAnalyzer


JOB_MATCHES = [
    {
        'jobId': 'a1', 'jobTitle': 'Senior AI Engineer', 'company': 'Scale AI',
        'overallScore': 0.3, 'strengths': ['python'], 'gaps': ['pytorch', 'nlp'],
    },
    {
        'jobId': 'a2', 'jobTitle': 'ML Engineer, GenAI', 'company': 'OpenAI',
        'overallScore': 0.4, 'strengths': ['python', 'pytorch'], 'gaps': ['deep learning'],
    },
    {
        'jobId': 'u1', 'jobTitle': 'Backend Engineer', 'company': 'Globex',
        'overallScore': 0.8, 'strengths': ['java'], 'gaps': [],
    },
]


@pytest.fixture
def analysis():
    return JobClusterAnalyzer().identify_clusters(JOB_MATCHES)


def test_jobs_grouped_by_pattern(analysis):
    """Test AI jobs cluster together and the rest is uncategorized"""
    assert [c.id for c in analysis.clusters] == ['ai_innovation', 'uncategorized']
    assert [j.job_id for j in analysis.clusters[0].jobs] == ['a1', 'a2']
    assert analysis.clusters[1].name == 'General Technical Roles'
    assert analysis.total_jobs == 3


def test_cluster_profile(analysis):
    ai = analysis.clusters[0]

    assert ai.cluster_size == 2
    assert ai.average_score == pytest.approx(0.35)
    assert ai.common_requirements == ['pytorch', 'python', 'nlp', 'deep learning']
    assert ai.key_skills == ['python', 'pytorch']
    assert ai.characteristics.seniority_level == 'Senior'
    assert ai.characteristics.industry_focus == 'technology'
    assert ai.characteristics.technical_depth == 'low'
    assert ai.characteristics.customer_facing is False


def test_optimization_potential(analysis):
    """Test low scores and clear requirements raise the potential"""
    ai, general = analysis.clusters
    assert ai.optimization_potential == pytest.approx(0.25 + 0.24 + 0.2 * 2 / 3)
    assert general.optimization_potential == pytest.approx(0.06 + 0.2 / 3)


def test_priority_and_strategy(analysis):
    assert analysis.priority_order == ['ai_innovation', 'uncategorized']
    assert analysis.recommended_strategy == (
        'Strong clustering detected. Recommend creating 2 targeted CV variants, '
        'starting with "AI/ML Innovation" cluster (2 jobs, 62% optimization potential).'
    )


def test_insights(analysis):
    assert analysis.insights == [
        'Jobs concentrate in 2 main areas, allowing for focused CV optimization.',
        '"AI/ML Innovation" represents 2 jobs (67%) - highest optimization impact.',
    ]


def test_frequent_gap_insight():
    matches = [
        {'jobId': str(i), 'jobTitle': 'Engineer', 'company': 'Globex', 'overallScore': 0.2, 'gaps': ['Kubernetes']}
        for i in range(3)
    ]
    insights = JobClusterAnalyzer().identify_clusters(matches).insights

    assert 'Current CV scores below 40% average - significant optimization opportunity exists.' in insights
    assert '"kubernetes" appears as a gap in 3 jobs - priority skill for CV enhancement.' in insights


def test_accepts_match_results():
    match = MatchResult(
        job_id='x', job_title='Head of Engineering', company='Enterprise Group',
        overall_score=0.5, category_scores={}, strengths=['leadership'], gaps=['strategy', 'budget'],
    )
    analysis = JobClusterAnalyzer().identify_clusters([match])

    assert analysis.clusters[0].id == 'enterprise_leadership'
    assert analysis.clusters[0].characteristics.seniority_level == 'Director'


def test_empty_input():
    analysis = JobClusterAnalyzer().identify_clusters([])

    assert analysis.clusters == []
    assert analysis.insights == []
    assert analysis.recommended_strategy == 'Focus on general CV improvements targeting technical leadership roles.'


def test_to_dict_shape(analysis):
    data = analysis.to_dict()

    assert data['totalJobs'] == 3
    assert data['clusters'][0]['clusterSize'] == 2
    assert data['clusters'][0]['characteristics']['seniorityLevel'] == 'Senior'
    assert data['clusters'][0]['jobs'][0] == {'jobId': 'a1', 'title': 'Senior AI Engineer', 'company': 'Scale AI', 'score': 0.3}
