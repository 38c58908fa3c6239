# tests/test_batch.py
"""Tests for sequential batch analysis with progress events"""

import pytest

from analysis import BatchJobAnalyzer, JobPosting, ProgressEvent


JOBS = [
    ('job-1', {'title': 'Senior Backend Engineer', 'description': 'Python on AWS'}),
    ('job-2', JobPosting(title='Junior Developer', description='Docker and Python')),
]


def test_progress_events(generator):
    """Test start, two updates per job, then complete"""
    events = []
    result = BatchJobAnalyzer(generator).analyze_jobs(JOBS, progress_callback=events.append)

    assert [e.event for e in events] == ['start', 'update', 'update', 'update', 'update', 'complete']
    assert [e.percentage for e in events] == [0, 50, 50, 100, 100, 100]
    assert result.total_jobs == 2


def test_results_keep_input_order(generator):
    result = BatchJobAnalyzer(generator).analyze_jobs(JOBS, progress_callback=lambda e: None)

    assert [job_id for job_id, _ in result.batch_analysis] == ['job-1', 'job-2']
    assert [a.job_id for _, a in result.batch_analysis] == ['job-1', 'job-2']
    assert len(result.comparison_matrix.jobs) == 2


def test_to_dict_shape(generator):
    data = BatchJobAnalyzer(generator).analyze_jobs(JOBS, progress_callback=lambda e: None).to_dict()

    assert data['batchAnalysis'][0]['jobId'] == 'job-1'
    assert data['summary']['totalJobs'] == 2
    assert 'weightMatrix' in data['comparisonMatrix']


def test_empty_batch(generator):
    events = []
    result = BatchJobAnalyzer(generator).analyze_jobs([], progress_callback=events.append)

    assert result.batch_analysis == []
    assert [e.percentage for e in events] == [0, 0]


def test_error_reported_and_raised(generator, monkeypatch):
    """Test a failing analysis emits an error event and re-raises"""
    def broken(job):
        raise RuntimeError("analysis failed")

    monkeypatch.setattr(generator.job_analyzer, 'analyze_job', broken)
    events = []

    with pytest.raises(RuntimeError):
        BatchJobAnalyzer(generator).analyze_jobs(JOBS, progress_callback=events.append)

    assert [e.event for e in events] == ['start', 'update', 'error']
    assert events[-1].message == 'analysis failed'


def test_progress_event_dict():
    event = ProgressEvent('batch_job_analysis', 'update', 1, 3, 'Analyzing job a')
    data = event.to_dict()

    assert data['percentage'] == 33
    assert data['currentStep'] == 1
    assert data['totalSteps'] == 3
