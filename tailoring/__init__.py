# tailoring/__init__.py
"""
CV tailoring

Clusters job matches and rewrites a markdown CV into variants aimed at
each cluster.
"""

from tailoring.models import (
    Impact,
    OptimizationLevel,
    ClusterJob,
    JobCluster,
    ClusterAnalysis,
    OptimizationChange,
    OptimizationResult,
    TargetJob,
    TargetedSummary,
    CVVariant,
    VariantRecommendation,
    VariantGenerationResult,
    VariantGenerationConfig,
)
from tailoring.cv_sections import CVSectionExtractor
from tailoring.cluster_analyzer import JobClusterAnalyzer
from tailoring.cv_optimizer import CVOptimizer
from tailoring.variant_generator import CVVariantGenerator, ModificationPolicy

__all__ = [
    'Impact',
    'OptimizationLevel',
    'ClusterJob',
    'JobCluster',
    'ClusterAnalysis',
    'OptimizationChange',
    'OptimizationResult',
    'TargetJob',
    'TargetedSummary',
    'CVVariant',
    'VariantRecommendation',
    'VariantGenerationResult',
    'VariantGenerationConfig',
    'CVSectionExtractor',
    'JobClusterAnalyzer',
    'CVOptimizer',
    'CVVariantGenerator',
    'ModificationPolicy',
]
