"""
Configuration module for Skillkeeper.

Uses pydantic-settings for environment variable loading.
"""

from skillkeeper.config.settings import Settings
from skillkeeper.config.sources import ConfigFileError

__all__ = ["ConfigFileError", "Settings"]
