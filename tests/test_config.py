# tests/test_config.py
"""Tests for the YAML-backed analysis configuration"""

import pytest

from analysis.config import AnalysisConfig, get_config


def test_defaults():
    """Test default configuration values"""
    config = AnalysisConfig()
    assert config.experience_overlap == 'sum'
    assert config.max_key_requirements == 10
    assert config.current_year is None


def test_invalid_overlap_policy():
    """Test that unknown overlap policies are rejected"""
    with pytest.raises(ValueError):
        AnalysisConfig(experience_overlap='average')


def test_resolve_current_year():
    """Test the year used for 'present'"""
    assert AnalysisConfig(current_year=2020).resolve_current_year() == 2020
    assert AnalysisConfig().resolve_current_year() >= 2024


def test_from_yaml(tmp_path):
    """Test loading the analysis section of a YAML file"""
    path = tmp_path / "analysis.yaml"
    path.write_text("analysis:\n  experience_overlap: union\n  current_year: 2023\n")

    config = AnalysisConfig.from_yaml(str(path))
    assert config.experience_overlap == 'union'
    assert config.current_year == 2023


def test_get_config_reads_env_path(tmp_path, monkeypatch):
    """Test that ANALYSIS_CONFIG points get_config at a file"""
    path = tmp_path / "custom.yaml"
    path.write_text("analysis:\n  max_key_requirements: 3\n")
    monkeypatch.setenv('ANALYSIS_CONFIG', str(path))

    assert get_config().max_key_requirements == 3


def test_get_config_missing_file(tmp_path, monkeypatch):
    """Test fallback to defaults when the file does not exist"""
    monkeypatch.setenv('ANALYSIS_CONFIG', str(tmp_path / "missing.yaml"))
    assert get_config() == AnalysisConfig()
