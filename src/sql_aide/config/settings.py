"""
Configuration management for SQL Aide.

This module provides environment-based configuration using Pydantic BaseSettings,
so the default dialect, identifier quoting and lint governance can be changed
per project without touching schema code.

Environment variables are loaded with the SQLA_ prefix, e.g. SQLA_DIALECT=postgresql.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import List, Literal, Optional

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger(__name__)

# Determine project root for resolving .env by default
PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_ENV_FILE = PROJECT_ROOT / ".env"
ENV_FILE_OVERRIDE = os.getenv("SQLA_ENV_FILE")
if ENV_FILE_OVERRIDE:
    env_file_candidate = Path(ENV_FILE_OVERRIDE).expanduser()
    if not env_file_candidate.is_absolute():
        env_file_candidate = PROJECT_ROOT / env_file_candidate
    SETTINGS_ENV_FILE = env_file_candidate
else:
    SETTINGS_ENV_FILE = DEFAULT_ENV_FILE


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Fields:
    - dialect: Default SQL dialect used by emission contexts
    - quote_mode: "always" quotes every identifier, "if_needed" only non-simple ones
    - log_level: Logging level (uppercase)
    - disabled_lint_rules: Lint rule codes that should never raise diagnostics
    - lint_config: Optional YAML file with lint rule overrides
    - erd_title: Name given to generated PlantUML diagrams
    """

    dialect: Literal["sqlite", "postgresql"] = Field(
        default="sqlite", description="Default SQL dialect"
    )
    quote_mode: Literal["always", "if_needed"] = Field(
        default="always", description="Identifier quoting mode"
    )
    log_level: str = Field(default="INFO", description="Logging level")
    disabled_lint_rules: List[str] = Field(
        default_factory=list,
        description="Lint rule codes to disable (e.g. wildcard-select)",
    )
    lint_config: Optional[str] = Field(
        default=None, description="Path to YAML lint configuration file"
    )
    erd_title: str = Field(default="IE", description="PlantUML diagram name")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        """Uppercase the level so it matches logging constants."""
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return level

    model_config = SettingsConfigDict(
        env_prefix="SQLA_",
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
        dialect=settings.dialect,
        quote_mode=settings.quote_mode,
        disabled_lint_rules=settings.disabled_lint_rules,
    )
    return settings
