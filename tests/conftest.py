"""Pytest configuration: isolated settings and shared emission contexts.

Every test starts from default settings. SQLA_* variables from the calling
shell are removed, the .env file is ignored and the cached Settings instance
is cleared, so a developer's local configuration cannot change generated SQL.
"""

from __future__ import annotations

import os
from typing import Generator

import pytest

from sql_aide.config import Settings, get_settings
from sql_aide.infrastructure.emit import EmissionContext, SqlLintManager
from sql_aide.infrastructure.schema import GovernedModel
from sql_aide.infrastructure.sql.dialects import PostgreSQLDialect, SQLiteDialect


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Default settings for every test."""
    for name in list(os.environ):
        if name.startswith("SQLA_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setitem(Settings.model_config, "env_file", None)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sqlite_ctx() -> EmissionContext:
    return EmissionContext(dialect=SQLiteDialect(), lint_manager=SqlLintManager.typical())


@pytest.fixture
def pg_ctx() -> EmissionContext:
    return EmissionContext(
        dialect=PostgreSQLDialect(), lint_manager=SqlLintManager.typical()
    )


@pytest.fixture
def gm() -> GovernedModel:
    return GovernedModel.typical(dialect=SQLiteDialect())
