"""Configuration management for SQL Aide.

Usage:
    >>> from sql_aide.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.dialect)
"""

from sql_aide.config.lint_config import (
    LintConfig,
    LintConfigError,
    LintRuleConfig,
    load_lint_config,
)
from sql_aide.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "LintConfig",
    "LintConfigError",
    "LintRuleConfig",
    "load_lint_config",
]
