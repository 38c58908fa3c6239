# analysis/__init__.py
"""
Job/CV matching engine

Extracts weighted parameters from job postings and CVs, aligns them in
matrices and scores CVs against jobs.
"""

from analysis.models import (
    ParameterCategory,
    SeniorityLevel,
    JobPosting,
    JobParameter,
    CVParameter,
    JobAnalysis,
    CVAnalysis,
    JobMatrix,
    CVMatrix,
    ParameterMatch,
    MatchResult,
    MatchSummary,
    ComprehensiveMatch,
)
from analysis.config import AnalysisConfig, get_config
from analysis.job_analyzer import JobAnalyzer, frequency_multiplier
from analysis.cv_analyzer import CVAnalyzer
from analysis.matrix_generator import MatrixGenerator, match_score
from analysis.batch import BatchJobAnalyzer, BatchAnalysisResult, ProgressEvent

__all__ = [
    'ParameterCategory',
    'SeniorityLevel',
    'JobPosting',
    'JobParameter',
    'CVParameter',
    'JobAnalysis',
    'CVAnalysis',
    'JobMatrix',
    'CVMatrix',
    'ParameterMatch',
    'MatchResult',
    'MatchSummary',
    'ComprehensiveMatch',
    'AnalysisConfig',
    'get_config',
    'JobAnalyzer',
    'frequency_multiplier',
    'CVAnalyzer',
    'MatrixGenerator',
    'match_score',
    'BatchJobAnalyzer',
    'BatchAnalysisResult',
    'ProgressEvent',
]
