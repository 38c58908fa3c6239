# analysis/config.py
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
import yaml


EXPERIENCE_OVERLAP_POLICIES = ('sum', 'union')


@dataclass
class AnalysisConfig:
    """Configuration for the job/CV matching engine"""

    # How overlapping date ranges in an Experience section are combined:
    # 'sum' adds every range as written, 'union' merges overlapping ranges first
    experience_overlap: str = 'sum'

    # Year used in place of "present" in date ranges (None = current year)
    current_year: Optional[int] = None

    # Key requirement extraction
    max_key_requirements: int = 10

    def __post_init__(self):
        if self.experience_overlap not in EXPERIENCE_OVERLAP_POLICIES:
            raise ValueError(
                f"Unknown experience_overlap policy: {self.experience_overlap} "
                f"(expected one of {', '.join(EXPERIENCE_OVERLAP_POLICIES)})"
            )

    def resolve_current_year(self) -> int:
        """Year substituted for open-ended ranges"""
        return self.current_year or datetime.now().year

    @classmethod
    def from_yaml(cls, path: str):
        """Load configuration from YAML file"""
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
        return cls(**data.get('analysis', {}))


def get_config() -> AnalysisConfig:
    """Get analysis configuration"""
    config_path = os.getenv('ANALYSIS_CONFIG', 'config/analysis.yaml')

    if os.path.exists(config_path):
        return AnalysisConfig.from_yaml(config_path)
    return AnalysisConfig()
