"""Configuration management: profiles, TOML loading, and config models.

Usage:
    >>> from schema_diff.config import load_diff_config, DatabaseProfile, DiffConfig
"""

from schema_diff.config.loader import load_diff_config
from schema_diff.config.models import CompareSettings, DatabaseProfile, DiffConfig

__all__ = ["load_diff_config", "CompareSettings", "DatabaseProfile", "DiffConfig"]
