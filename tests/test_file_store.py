# tests/test_file_store.py
"""Tests for the file-backed store"""

import pytest

from storage import FileStore


@pytest.fixture
def store(tmp_path):
    return FileStore(tmp_path)


def test_directories_created(tmp_path):
    FileStore(tmp_path / 'data')

    for name in ('cvs', 'jobs', 'matrices'):
        assert (tmp_path / 'data' / name).is_dir()


def test_cv_roundtrip(store, sample_cv):
    path = store.store_cv('main', sample_cv)

    assert path.name == 'main.md'
    assert store.load_cv('main') == sample_cv
    assert store.list_cvs() == ['main']


def test_job_stamped_and_listed(store):
    record = store.store_job('job-1', {'title': 'CTO', 'company': 'Acme', 'description': 'Lead'})

    assert 'storedAt' in record
    assert store.load_job('job-1')['description'] == 'Lead'
    assert store.list_jobs() == [
        {'id': 'job-1', 'title': 'CTO', 'company': 'Acme', 'storedAt': record['storedAt']}
    ]


def test_unreadable_job_skipped(store):
    (store.job_dir / 'broken.json').write_text('{not json', encoding='utf-8')
    store.store_job('ok', {'title': 'Engineer'})

    assert [job['id'] for job in store.list_jobs()] == ['ok']


def test_matrices(store):
    store.store_matrix('m2', {'parameters': ['python']})
    store.store_matrix('m1', {'parameters': []})

    assert store.list_matrices() == ['m1', 'm2']
    assert store.load_matrix('m2') == {'parameters': ['python']}


@pytest.mark.parametrize('bad_id', ['../x', '.hidden', 'a/b', ''])
def test_invalid_ids_rejected(store, bad_id):
    with pytest.raises(ValueError):
        store.store_cv(bad_id, 'x')
    with pytest.raises(ValueError):
        store.load_job(bad_id)


def test_missing_entries(store):
    with pytest.raises(FileNotFoundError):
        store.load_cv('nope')
    with pytest.raises(FileNotFoundError):
        store.load_job('nope')
    with pytest.raises(FileNotFoundError):
        store.load_matrix('nope')
