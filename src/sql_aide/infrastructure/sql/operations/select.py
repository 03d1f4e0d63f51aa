"""
SQL SELECT statement builders.
"""

from typing import Sequence, Tuple

from ..dialects.base import SqlDialect


class SelectBuilder:
    """
    Builder for equality-filtered SELECT statements.

    Example:
        >>> builder = SelectBuilder(SQLiteDialect())
        >>> print(builder.select('"publ_host"', ['"publ_host_id"'], [('"mutation_count"', "0")]))
        SELECT "publ_host_id" FROM "publ_host" WHERE "mutation_count" = 0
    """

    def __init__(self, dialect: SqlDialect):
        self.dialect = dialect

    def select(
        self,
        table: str,
        columns: Sequence[str],
        criteria: Sequence[Tuple[str, str]] = (),
    ) -> str:
        """Build SELECT columns FROM table WHERE criteria AND-ed together."""
        if not columns:
            raise ValueError(f"SELECT from {table} needs at least one column")
        return self.dialect.build_select(table, columns, criteria)
