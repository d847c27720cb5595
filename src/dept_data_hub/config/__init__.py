"""Configuration management for DeptDataHub.

Usage:
    >>> from dept_data_hub.config import get_settings
    >>> settings = get_settings()
    >>> settings.fuzzy_match_threshold
    0.8
"""

from dept_data_hub.config.settings import (
    DEFAULT_DATE_FORMATS,
    PACKAGED_DEFINITIONS_DIR,
    Settings,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "DEFAULT_DATE_FORMATS",
    "PACKAGED_DEFINITIONS_DIR",
]
