"""
YAML lint configuration for SQL Aide.

A lint config file lets a project turn rules off or change their severity:

    rules:
      wildcard-select:
        enabled: false
      missing-primary-key:
        severity: error

The file is validated with Pydantic so typos fail fast.
"""

import logging
from pathlib import Path
from typing import Dict, Literal, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)


class LintConfigError(Exception):
    """Raised when a lint configuration file is missing or invalid."""

    pass


class LintRuleConfig(BaseModel):
    """Override for a single lint rule."""

    enabled: bool = Field(True, description="Whether the rule raises diagnostics")
    severity: Optional[Literal["info", "warning", "error"]] = Field(
        None, description="Severity override"
    )


class LintConfig(BaseModel):
    """Schema for the lint configuration file."""

    rules: Dict[str, LintRuleConfig] = Field(default_factory=dict)

    def disabled_rules(self) -> list[str]:
        return [code for code, rule in self.rules.items() if not rule.enabled]

    def severity_overrides(self) -> Dict[str, str]:
        return {
            code: rule.severity
            for code, rule in self.rules.items()
            if rule.severity is not None
        }


def load_lint_config(path: Union[str, Path]) -> LintConfig:
    """
    Load and validate a lint configuration file.

    Args:
        path: Path to the YAML file

    Returns:
        Validated LintConfig

    Raises:
        LintConfigError: If the file is missing, not YAML, or fails validation
    """
    config_path = Path(path)
    if not config_path.exists():
        raise LintConfigError(f"Lint configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw_config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise LintConfigError(f"Invalid YAML in lint configuration file: {e}") from e

    try:
        config = LintConfig(**raw_config)
    except (TypeError, ValidationError) as e:
        raise LintConfigError(f"Lint configuration validation failed: {e}") from e

    logger.info(
        "Loaded lint configuration from %s (%d rule overrides)",
        config_path,
        len(config.rules),
    )
    return config
