# tests/test_models.py
"""Tests for tolerant JSON loading of the engine models"""

import pytest

from analysis import CVMatrix, CVParameter, JobParameter


@pytest.mark.parametrize('years', [1e400, float('nan'), 'nan', 'abc', 10 ** 400])
def test_unusable_years_dropped(years):
    """Test non-finite or non-numeric years default to unknown"""
    param = CVParameter.from_dict({'name': 'python', 'category': 'technical', 'yearsOfExperience': years})
    assert param.years_of_experience is None


def test_years_truncated():
    param = CVParameter.from_dict({'name': 'python', 'category': 'technical', 'yearsOfExperience': '4.7'})
    assert param.years_of_experience == 4


def test_non_finite_numbers_default():
    param = JobParameter.from_dict({'name': 'aws', 'category': 'technical', 'weight': float('inf'),
                                    'confidence': 'nan'})

    assert param.weight == 0.0
    assert param.confidence == 0.0


def test_cv_matrix_with_huge_years():
    matrix = CVMatrix.from_dict({
        'cvAnalysis': {
            'cvId': 'jane',
            'totalExperience': 1e400,
            'parameters': [{'name': 'python', 'category': 'technical', 'strength': 0.9,
                            'yearsOfExperience': 1e400}],
        },
        'parameters': ['python'],
        'strengthVector': [0.9],
    })

    assert matrix.strength_vector == [0.9]
    assert matrix.cv_analysis.total_experience == 0.0
    assert matrix.cv_analysis.parameters[0].years_of_experience is None
