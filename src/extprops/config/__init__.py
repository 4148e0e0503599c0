"""
Configuration module for extprops.

Uses pydantic-settings for environment variable loading.
"""

from extprops.config.settings import Settings

__all__ = ["Settings"]
