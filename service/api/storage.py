# service/api/storage.py

from fastapi import APIRouter, Body, Depends, HTTPException
from typing import Any, Dict, List

from storage import FileStore
from service.config import settings
from service.schemas import StoreCVRequest

router = APIRouter()


def get_store() -> FileStore:
    return FileStore(settings.data_path)


def _invalid(e: ValueError) -> HTTPException:
    return HTTPException(status_code=400, detail=str(e))


# ============= CVs =============

@router.get("/cvs")
async def list_cvs(store: FileStore = Depends(get_store)) -> List[str]:
    return store.list_cvs()


@router.put("/cvs/{cv_id}")
async def store_cv(cv_id: str, request: StoreCVRequest, store: FileStore = Depends(get_store)) -> Dict:
    try:
        store.store_cv(cv_id, request.content)
    except ValueError as e:
        raise _invalid(e)
    return {"success": True, "id": cv_id}


@router.get("/cvs/{cv_id}")
async def load_cv(cv_id: str, store: FileStore = Depends(get_store)) -> Dict:
    try:
        content = store.load_cv(cv_id)
    except ValueError as e:
        raise _invalid(e)
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail="CV not found")
    return {"id": cv_id, "content": content}


# ============= Jobs =============

@router.get("/jobs")
async def list_jobs(store: FileStore = Depends(get_store)) -> List[Dict]:
    return store.list_jobs()


@router.put("/jobs/{job_id}")
async def store_job(
    job_id: str,
    job: Dict[str, Any] = Body(...),
    store: FileStore = Depends(get_store)
) -> Dict:
    try:
        record = store.store_job(job_id, job)
    except ValueError as e:
        raise _invalid(e)
    return {"success": True, "id": job_id, "storedAt": record['storedAt']}


@router.get("/jobs/{job_id}")
async def load_job(job_id: str, store: FileStore = Depends(get_store)) -> Dict:
    try:
        return store.load_job(job_id)
    except ValueError as e:
        raise _invalid(e)
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail="Job not found")


# ============= Matrices =============

@router.get("/matrices")
async def list_matrices(store: FileStore = Depends(get_store)) -> List[str]:
    return store.list_matrices()


@router.put("/matrices/{matrix_id}")
async def store_matrix(
    matrix_id: str,
    matrix: Dict[str, Any] = Body(...),
    store: FileStore = Depends(get_store)
) -> Dict:
    try:
        store.store_matrix(matrix_id, matrix)
    except ValueError as e:
        raise _invalid(e)
    return {"success": True, "id": matrix_id}


@router.get("/matrices/{matrix_id}")
async def load_matrix(matrix_id: str, store: FileStore = Depends(get_store)) -> Dict:
    try:
        return store.load_matrix(matrix_id)
    except ValueError as e:
        raise _invalid(e)
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail="Matrix not found")
