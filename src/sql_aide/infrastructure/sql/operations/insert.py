"""
SQL INSERT statement builders.

Provides high-level builders for constructing INSERT statements
with upsert (INSERT ... ON CONFLICT) support.
"""

from typing import Sequence

from ..dialects.base import SqlDialect


class InsertBuilder:
    """
    High-level builder for INSERT statements.

    Example:
        >>> from sql_aide.infrastructure.sql import InsertBuilder, SQLiteDialect
        >>> builder = InsertBuilder(SQLiteDialect())
        >>> print(builder.insert('"host_type"', ['"code"', '"value"'], ["0", "'linux'"]))
        INSERT INTO "host_type" ("code", "value") VALUES (0, 'linux')
    """

    def __init__(self, dialect: SqlDialect):
        """
        Initialize the InsertBuilder.

        Args:
            dialect: SQL dialect to use for statement generation
        """
        self.dialect = dialect

    def insert(
        self,
        table: str,
        columns: Sequence[str],
        values: Sequence[str],
    ) -> str:
        """
        Build a simple INSERT statement.

        Args:
            table: Rendered table identifier
            columns: Rendered column identifiers
            values: Rendered literals

        Returns:
            INSERT SQL statement
        """
        if len(columns) != len(values):
            raise ValueError(
                f"INSERT into {table} has {len(columns)} columns but {len(values)} values"
            )
        return self.dialect.build_insert(table, columns, values)

    def upsert(
        self,
        table: str,
        columns: Sequence[str],
        values: Sequence[str],
        conflict_columns: Sequence[str],
    ) -> str:
        """
        Build an INSERT that leaves an existing row untouched.

        Args:
            conflict_columns: Columns for conflict detection
        """
        return self.dialect.build_insert_on_conflict_do_nothing(
            table, columns, values, conflict_columns
        )
