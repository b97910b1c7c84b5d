"""Configuration management: profiles, TOML loading, and config models.

Usage:
    >>> from form_drafts.config import load_config, EngineConfig, ProfileConfig
"""

from form_drafts.config.loader import load_config
from form_drafts.config.models import EngineConfig, ProfileConfig, SlugSettings, TableNames

__all__ = ["load_config", "EngineConfig", "ProfileConfig", "SlugSettings", "TableNames"]
