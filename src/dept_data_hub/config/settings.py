"""
Configuration management for DeptDataHub.

Environment-based configuration using Pydantic BaseSettings. Settings are read
once per process through ``get_settings()`` and treated as immutable.

Environment variables use the ``DDH_`` prefix (``DDH_FUZZY_MATCH_THRESHOLD``),
except ``LOG_LEVEL`` which is shared with the logging setup.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import List

import structlog
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_ENV_FILE = PROJECT_ROOT / ".env"
ENV_FILE_OVERRIDE = os.getenv("DDH_ENV_FILE")
if ENV_FILE_OVERRIDE:
    env_file_candidate = Path(ENV_FILE_OVERRIDE).expanduser()
    if not env_file_candidate.is_absolute():
        env_file_candidate = PROJECT_ROOT / env_file_candidate
    SETTINGS_ENV_FILE = env_file_candidate
else:
    SETTINGS_ENV_FILE = DEFAULT_ENV_FILE

# Packaged department definitions shipped with the library.
PACKAGED_DEFINITIONS_DIR = (
    Path(__file__).resolve().parents[1] / "infrastructure" / "schema" / "definitions"
)

# strptime patterns, tried in order; ISO first so unambiguous input wins.
DEFAULT_DATE_FORMATS = [
    "%Y-%m-%d",
    "%d/%m/%Y",
    "%Y/%m/%d",
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%Y%m%d",
    "%d %b %Y",
    "%b %d, %Y",
]


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Fields:
    - LOG_LEVEL: Logging level (uppercase), no prefix
    - definitions_dir: Directory holding the department ``*.yml`` files
    - fuzzy_match_threshold: Minimum similarity for a fuzzy header match
    - date_formats: strptime patterns accepted by the date validator
    - failure_rate_threshold: Failed-row rate at which a batch is rejected
    """

    LOG_LEVEL: str = Field(
        default="INFO",
        validation_alias=AliasChoices("LOG_LEVEL", "DDH_LOG_LEVEL"),
        description="Logging level (uppercase)",
    )

    definitions_dir: Path = Field(
        default=PACKAGED_DEFINITIONS_DIR,
        description="Directory with department schema definitions",
    )

    fuzzy_match_threshold: float = Field(
        default=0.8,
        gt=0.0,
        le=1.0,
        description="Minimum similarity (0-1] for a fuzzy header match",
    )

    date_formats: List[str] = Field(
        default_factory=lambda: list(DEFAULT_DATE_FORMATS),
        min_length=1,
        description="Accepted date formats (strptime patterns)",
    )

    failure_rate_threshold: float = Field(
        default=0.10,
        ge=0.0,
        le=1.0,
        description="Failed-row rate at which an import batch is rejected",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        return v.upper()

    @field_validator("date_formats")
    @classmethod
    def _require_directives(cls, v: List[str]) -> List[str]:
        for fmt in v:
            if "%" not in fmt:
                raise ValueError(f"Date format '{fmt}' has no strptime directive")
        return v

    model_config = SettingsConfigDict(
        env_prefix="DDH_",
        env_file=str(SETTINGS_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance with loaded configuration
    """
    settings = Settings()
    logger.debug(
        "configuration.loaded",
        definitions_dir=str(settings.definitions_dir),
        fuzzy_match_threshold=settings.fuzzy_match_threshold,
        date_format_count=len(settings.date_formats),
    )
    return settings
