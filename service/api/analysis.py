# service/api/analysis.py

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from typing import Dict, List, Tuple
from datetime import datetime
import uuid
import logging

from analysis import BatchJobAnalyzer, CVMatrix, JobMatrix, MatrixGenerator
from analysis.batch import ProgressEvent
from service.schemas import CVRequest, JobMatrixRequest, JobRequest, MatchRequest

router = APIRouter()
logger = logging.getLogger(__name__)

# Batch progress by task id
batch_status = {}

# Completed or failed statuses kept for polling
MAX_FINISHED_TASKS = 50


def get_matrix_generator() -> MatrixGenerator:
    return MatrixGenerator()


def evict_finished_tasks():
    """Drop the oldest finished statuses beyond MAX_FINISHED_TASKS"""
    finished = [task_id for task_id, status in batch_status.items() if status["status"] != "running"]
    for task_id in finished[:max(0, len(finished) - MAX_FINISHED_TASKS)]:
        del batch_status[task_id]
        logger.debug(f"Evicted batch status {task_id}")


@router.post("/analyze-job")
async def analyze_job(request: JobRequest, generator: MatrixGenerator = Depends(get_matrix_generator)) -> Dict:
    """Extract weighted parameters from a job posting"""
    analysis = generator.job_analyzer.analyze_job(request.to_posting())
    return analysis.to_dict()


@router.post("/analyze-cv")
async def analyze_cv(request: CVRequest, generator: MatrixGenerator = Depends(get_matrix_generator)) -> Dict:
    """Extract evidence-based parameters from a CV"""
    analysis = generator.cv_analyzer.analyze_cv(request.cv_content, cv_id=request.cv_id)
    return analysis.to_dict()


@router.post("/job-matrix")
async def job_matrix(
    request: JobMatrixRequest,
    generator: MatrixGenerator = Depends(get_matrix_generator)
) -> Dict:
    """Analyze several jobs and align them in one weight matrix"""
    matrix = generator.generate_job_matrix([job.to_posting() for job in request.jobs])
    return matrix.to_dict()


@router.post("/cv-matrix")
async def cv_matrix(request: CVRequest, generator: MatrixGenerator = Depends(get_matrix_generator)) -> Dict:
    """Analyze a CV into its strength vector"""
    matrix = generator.generate_cv_matrix(request.cv_content, request.cv_id)
    return matrix.to_dict()


@router.post("/match")
async def match(request: MatchRequest, generator: MatrixGenerator = Depends(get_matrix_generator)) -> Dict:
    """Score a CV matrix against every job of a job matrix"""
    result = generator.calculate_match(
        JobMatrix.from_dict(request.job_matrix),
        CVMatrix.from_dict(request.cv_matrix)
    )
    return result.to_dict()


def run_batch_task(task_id: str, jobs: List[Tuple[str, Dict]], generator: MatrixGenerator):
    """Background task running a batch analysis"""

    def on_progress(event: ProgressEvent):
        batch_status[task_id].update({
            "progress": event.percentage,
            "message": event.message,
            "last_event": event.to_dict(),
        })

    try:
        result = BatchJobAnalyzer(generator).analyze_jobs(jobs, progress_callback=on_progress)
        batch_status[task_id].update({
            "status": "completed",
            "progress": 100,
            "result": result.to_dict(),
            "completed_at": datetime.now().isoformat()
        })
    except Exception as e:
        logger.error(f"Batch {task_id} failed: {e}")
        batch_status[task_id].update({
            "status": "failed",
            "message": f"Error: {str(e)}",
            "error": str(e),
            "failed_at": datetime.now().isoformat()
        })


@router.post("/batch")
async def start_batch(
    background_tasks: BackgroundTasks,
    request: JobMatrixRequest,
    generator: MatrixGenerator = Depends(get_matrix_generator)
) -> Dict:
    """Start a batch job analysis"""
    evict_finished_tasks()
    task_id = str(uuid.uuid4())[:8]
    jobs = [
        (job.job_id or f"job-{index}", job.to_posting())
        for index, job in enumerate(request.jobs, 1)
    ]

    batch_status[task_id] = {
        "task_id": task_id,
        "status": "running",
        "progress": 0,
        "total_jobs": len(jobs),
        "message": "Starting batch analysis...",
        "started_at": datetime.now().isoformat()
    }

    background_tasks.add_task(run_batch_task, task_id=task_id, jobs=jobs, generator=generator)

    return {
        "success": True,
        "task_id": task_id,
        "message": "Batch analysis started"
    }


@router.get("/batch/status/{task_id}")
async def get_batch_status(task_id: str) -> Dict:
    """Get batch analysis status"""
    if task_id not in batch_status:
        raise HTTPException(status_code=404, detail="Task not found")

    return batch_status[task_id]
