"""
PostgreSQL-specific SQL dialect implementation.

Provides PostgreSQL-specific syntax for autoincrement keys, idempotent
views, boolean literals and the CREATE DOMAIN extension.
"""

from typing import List

from .base import ANSI_RESERVED_WORDS, DialectDomainExtensions, SqlDialect


class PostgreSQLDialect(SqlDialect):
    """PostgreSQL SQL dialect implementation."""

    name = "postgresql"
    boolean_style = "keyword"
    reserved_words = ANSI_RESERVED_WORDS | frozenset(
        {"ANALYSE", "ANALYZE", "ARRAY", "ASYMMETRIC", "DO", "OFFSET", "RETURNING"}
    )

    def primary_key_decorators(self, auto_increment: bool) -> List[str]:
        return ["PRIMARY KEY"]

    def auto_increment_column_type(self, canonical: str) -> str:
        if canonical == "BIGINT":
            return "BIGSERIAL"
        return "SERIAL"

    def create_view_prefix(self) -> str:
        # PostgreSQL has no CREATE VIEW IF NOT EXISTS
        return "CREATE OR REPLACE VIEW"

    @property
    def domain_extensions(self) -> DialectDomainExtensions:  # type: ignore[override]
        from sql_aide.infrastructure.schema.pg_domains import (
            PostgreSQLDomainExtensions,
        )

        return PostgreSQLDomainExtensions()
