# service/api/tailoring.py

from fastapi import APIRouter
from typing import Dict
import logging

from tailoring import (
    CVOptimizer, CVVariantGenerator, JobClusterAnalyzer, VariantGenerationConfig
)
from service.config import settings
from service.schemas import (
    ClusterRequest, EnhanceExperienceRequest, OptimizeRequest, SummaryRequest, VariantsRequest
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/clusters")
async def identify_clusters(request: ClusterRequest) -> Dict:
    """Group job matches into clusters"""
    analysis = JobClusterAnalyzer().identify_clusters(request.job_matches)
    return analysis.to_dict()


@router.post("/optimize")
async def optimize_cv(request: OptimizeRequest) -> Dict:
    """Optimize a CV for one job cluster"""
    result = CVOptimizer().optimize_for_cluster(
        request.cv_content, request.cluster, request.optimization_level
    )
    return result.to_dict()


@router.post("/summary")
async def targeted_summary(request: SummaryRequest) -> Dict:
    """Write a summary aimed at specific jobs"""
    summary = CVOptimizer().generate_targeted_summary(request.cv_content, request.target_jobs)
    return summary.to_dict()


@router.post("/enhance-experience")
async def enhance_experience(request: EnhanceExperienceRequest) -> Dict:
    """Put achievements mentioning the target skills first"""
    section = CVOptimizer().enhance_experience_section(
        request.experience_section, request.target_skills, request.job_context
    )
    return {"experienceSection": section}


@router.post("/variants")
async def generate_variants(request: VariantsRequest) -> Dict:
    """Generate one CV variant per cluster"""
    seed = request.seed if request.seed is not None else settings.variant_seed
    config = VariantGenerationConfig(seed=seed, always_modify=request.always_modify)

    result = CVVariantGenerator(config=config).generate_variants(request.cv_content, request.clusters)
    logger.info(f"Generated {len(result.variants)} variants")
    return result.to_dict()
