# tests/test_api.py
"""Tests for the HTTP service"""

import pytest
from fastapi.testclient import TestClient

from analysis import AnalysisConfig, MatrixGenerator
from service.app import app
from service.api import analysis as analysis_api
from service.api.analysis import get_matrix_generator
from service.api.storage import get_store
from storage import FileStore
from tests.conftest import SAMPLE_CV, SENIOR_BACKEND_JOB


@pytest.fixture
def client(tmp_path):
    app.dependency_overrides[get_store] = lambda: FileStore(tmp_path)
    app.dependency_overrides[get_matrix_generator] = lambda: MatrixGenerator(AnalysisConfig(current_year=2024))
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()['status'] == 'healthy'


def test_analyze_job(client):
    response = client.post("/api/analysis/analyze-job", json=SENIOR_BACKEND_JOB)
    data = response.json()

    assert response.status_code == 200
    assert data['seniorityLevel'] == 'senior'
    assert [p['name'] for p in data['parameters']] == ['aws', 'team_size', 'python', 'company_size']
    assert data['jobId'] is None


def test_analyze_cv(client):
    response = client.post("/api/analysis/analyze-cv", json={'cv_content': SAMPLE_CV, 'cv_id': 'jane'})

    assert response.status_code == 200
    assert response.json()['cvId'] == 'jane'


def test_matrices_and_match(client):
    job_matrix = client.post("/api/analysis/job-matrix", json={'jobs': [SENIOR_BACKEND_JOB]}).json()
    cv_matrix = client.post("/api/analysis/cv-matrix", json={'cv_content': SAMPLE_CV, 'cv_id': 'jane'}).json()

    response = client.post("/api/analysis/match", json={'job_matrix': job_matrix, 'cv_matrix': cv_matrix})
    data = response.json()

    assert response.status_code == 200
    assert data['cvId'] == 'jane'
    assert data['totalJobs'] == 1
    assert 0.0 <= data['summary']['averageScore'] <= 1.0


def test_batch_runs_to_completion(client):
    response = client.post("/api/analysis/batch", json={'jobs': [SENIOR_BACKEND_JOB, {'title': 'CTO'}]})
    task_id = response.json()['task_id']

    status = client.get(f"/api/analysis/batch/status/{task_id}").json()

    assert status['status'] == 'completed'
    assert status['progress'] == 100
    assert status['result']['summary']['totalJobs'] == 2
    assert [item['jobId'] for item in status['result']['batchAnalysis']] == ['job-1', 'job-2']


def test_unknown_batch(client):
    assert client.get("/api/analysis/batch/status/missing").status_code == 404


def test_clusters(client):
    matches = [
        {'jobId': 'a1', 'jobTitle': 'Senior AI Engineer', 'company': 'Scale AI', 'overallScore': 0.3,
         'strengths': ['python'], 'gaps': ['pytorch']},
    ]
    data = client.post("/api/tailoring/clusters", json={'job_matches': matches}).json()

    assert data['totalJobs'] == 1
    assert len(data['clusters']) == 1


def test_optimize(client):
    cluster = {'id': 'ai_innovation', 'name': 'AI/ML Innovation', 'keySkills': ['python']}
    response = client.post("/api/tailoring/optimize", json={'cv_content': SAMPLE_CV, 'cluster': cluster})
    data = response.json()

    assert response.status_code == 200
    assert [c['section'] for c in data['changes']] == ['Summary', 'Experience', 'Technical Skills']
    assert '### SUMMARY' in data['optimizedCV']


def test_summary(client):
    response = client.post("/api/tailoring/summary", json={
        'cv_content': SAMPLE_CV,
        'target_jobs': [{'title': 'Head of Data', 'company': 'Shop', 'keyRequirements': ['sql']}],
    })

    assert response.json()['emphasizedSkills'] == ['sql']


def test_enhance_experience(client):
    response = client.post("/api/tailoring/enhance-experience", json={
        'experience_section': "Engineer | A | 2020\n* Wrote docs\n* Tuned Postgres",
        'target_skills': ['postgres'],
    })

    assert response.json() == {'experienceSection': "Engineer | A | 2020\n* Tuned Postgres\n* Wrote docs"}


def test_variants(client):
    cluster = {'id': 'ai_innovation', 'name': 'AI/ML Innovation', 'keySkills': ['python'],
               'jobs': [{'jobId': 'a1', 'title': 'AI Lead', 'company': 'Scale AI'}]}
    response = client.post("/api/tailoring/variants", json={
        'cv_content': SAMPLE_CV, 'clusters': [cluster], 'always_modify': True
    })
    data = response.json()

    assert data['summary']['totalVariants'] == 1
    assert data['variants'][0]['name'] == 'AI Leadership Specialist'
    assert data['variants'][0]['targetJobs'] == ['a1']


def test_store_and_load_cv(client):
    response = client.put("/api/storage/cvs/main", json={'content': SAMPLE_CV})
    assert response.json() == {'success': True, 'id': 'main'}

    assert client.get("/api/storage/cvs").json() == ['main']
    assert client.get("/api/storage/cvs/main").json()['content'] == SAMPLE_CV


def test_store_and_list_jobs(client):
    stored = client.put("/api/storage/jobs/job-1", json=SENIOR_BACKEND_JOB).json()

    jobs = client.get("/api/storage/jobs").json()
    assert jobs == [{'id': 'job-1', 'title': 'Senior Backend Engineer', 'company': 'Acme',
                     'storedAt': stored['storedAt']}]


def test_store_matrix(client):
    client.put("/api/storage/matrices/m1", json={'parameters': ['python']})

    assert client.get("/api/storage/matrices").json() == ['m1']
    assert client.get("/api/storage/matrices/m1").json() == {'parameters': ['python']}


def test_storage_errors(client):
    assert client.get("/api/storage/cvs/nope").status_code == 404
    assert client.get("/api/storage/jobs/nope").status_code == 404
    assert client.get("/api/storage/matrices/nope").status_code == 404
    assert client.put("/api/storage/cvs/.hidden", json={'content': 'x'}).status_code == 400


def test_match_tolerates_non_finite_numbers(client):
    body = (
        '{"job_matrix": {"jobs": [], "parameters": [], "weightMatrix": []},'
        ' "cv_matrix": {"cvAnalysis": {"cvId": "jane", "parameters": [{"name": "python",'
        ' "category": "technical", "strength": 0.9, "yearsOfExperience": 1e400}]},'
        ' "parameters": ["python"], "strengthVector": [0.9]}}'
    )
    response = client.post(
        "/api/analysis/match", content=body, headers={'Content-Type': 'application/json'}
    )

    assert response.status_code == 200
    assert response.json()['totalJobs'] == 0


def test_finished_batches_evicted(client, monkeypatch):
    monkeypatch.setattr(analysis_api, 'MAX_FINISHED_TASKS', 1)

    task_ids = [
        client.post("/api/analysis/batch", json={'jobs': [{'title': f"Job {n}"}]}).json()['task_id']
        for n in range(3)
    ]

    assert client.get(f"/api/analysis/batch/status/{task_ids[0]}").status_code == 404
    assert client.get(f"/api/analysis/batch/status/{task_ids[1]}").json()['status'] == 'completed'
    assert client.get(f"/api/analysis/batch/status/{task_ids[2]}").json()['status'] == 'completed'
