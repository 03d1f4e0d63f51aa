"""
SQL module for centralized SQL generation.

This module provides reusable utilities for building SQL statements with
proper identifier quoting, literal escaping, and dialect-specific syntax.
"""

from .core.identifier import quote_identifier
from .core.literals import quoted_literal
from .core.naming import IdentifierKind, SqlNamingStrategy
from .dialects import PostgreSQLDialect, SQLiteDialect, SqlDialect, get_dialect
from .operations.insert import InsertBuilder
from .operations.select import SelectBuilder

__all__ = [
    "quote_identifier",
    "quoted_literal",
    "IdentifierKind",
    "SqlNamingStrategy",
    "SqlDialect",
    "SQLiteDialect",
    "PostgreSQLDialect",
    "get_dialect",
    "InsertBuilder",
    "SelectBuilder",
]
