"""
SQLite SQL dialect implementation.

SQLite is the default dialect: it has no native JSON column types and
stores booleans as integers.
"""

from .base import SqlDialect


class SQLiteDialect(SqlDialect):
    """SQLite SQL dialect implementation."""

    name = "sqlite"
    boolean_style = "numeric"
    type_overrides = {
        "JSONB": "TEXT",
        "BOOLEAN": "INTEGER",
        "DOUBLE PRECISION": "REAL",
    }
