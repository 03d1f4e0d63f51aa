"""
Base SQL dialect.

A dialect supplies the emission-context defaults (quote style, literal
escaping, keyword set) plus the statement shapes that differ between
engines: autoincrement keys, idempotent views and upserts.
"""

from typing import Any, Dict, List, Optional, Protocol, Sequence

from ..core.identifier import QuoteStyle
from ..core.literals import BooleanStyle, quoted_literal
from ..core.naming import QuoteMode, SqlNamingStrategy

ANSI_RESERVED_WORDS = frozenset(
    {
        "ALL", "AND", "AS", "BETWEEN", "BY", "CASE", "CHECK", "COLUMN",
        "CONSTRAINT", "CREATE", "DEFAULT", "DELETE", "DISTINCT", "DROP",
        "ELSE", "END", "EXISTS", "FOREIGN", "FROM", "GROUP", "HAVING", "IN",
        "INDEX", "INSERT", "INTO", "IS", "JOIN", "KEY", "LIKE", "LIMIT",
        "NOT", "NULL", "ON", "OR", "ORDER", "PRIMARY", "REFERENCES",
        "SELECT", "SET", "TABLE", "THEN", "TO", "UNION", "UNIQUE", "UPDATE",
        "USER", "VALUES", "VIEW", "WHEN", "WHERE", "WITH",
    }
)


class DialectDomainExtensions(Protocol):
    """Capability interface for dialect-only domain kinds."""

    def domain_definition(
        self,
        domain: Any,
        domain_name: str,
        is_idempotent: bool = False,
        warn_on_duplicate: Optional[Any] = None,
        indent: Optional[str] = None,
    ) -> Any: ...


class SqlDialect:
    """Dialect defaults shared by SQLite and PostgreSQL."""

    name = "ansi"
    quote_style: QuoteStyle = "double"
    boolean_style: BooleanStyle = "numeric"
    reserved_words = ANSI_RESERVED_WORDS
    type_overrides: Dict[str, str] = {}
    domain_extensions: Optional[DialectDomainExtensions] = None

    def naming_strategy(self, quote_mode: QuoteMode = "always") -> SqlNamingStrategy:
        """Build the naming strategy used by emission contexts of this dialect."""
        return SqlNamingStrategy(
            quote_style=self.quote_style,
            quote_mode=quote_mode,
            reserved_words=self.reserved_words,
        )

    def sql_type(self, canonical: str) -> str:
        """Map a canonical column type (e.g. JSONB) to this dialect's spelling."""
        return self.type_overrides.get(canonical, canonical)

    def literal(self, value: Any) -> str:
        """Render a Python value as a SQL literal."""
        return quoted_literal(value, self.boolean_style)

    def primary_key_decorators(self, auto_increment: bool) -> List[str]:
        """Column decorators for a primary key column."""
        if auto_increment:
            return ["PRIMARY KEY AUTOINCREMENT"]
        return ["PRIMARY KEY"]

    def auto_increment_column_type(self, canonical: str) -> str:
        """Column type of an autoincrement primary key."""
        return self.sql_type(canonical)

    def create_table_prefix(self) -> str:
        return "CREATE TABLE IF NOT EXISTS"

    def create_view_prefix(self) -> str:
        return "CREATE VIEW IF NOT EXISTS"

    def build_insert(
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
            values: Rendered literals, one per column

        Returns:
            INSERT SQL statement (without trailing semicolon)
        """
        cols = ", ".join(columns)
        vals = ", ".join(values)
        return f"INSERT INTO {table} ({cols}) VALUES ({vals})"

    def build_insert_on_conflict_do_nothing(
        self,
        table: str,
        columns: Sequence[str],
        values: Sequence[str],
        conflict_columns: Sequence[str],
    ) -> str:
        """Build INSERT ... ON CONFLICT (...) DO NOTHING."""
        base_insert = self.build_insert(table, columns, values)
        conflict_cols = ", ".join(conflict_columns)
        return f"{base_insert} ON CONFLICT ({conflict_cols}) DO NOTHING"

    def build_select(
        self,
        table: str,
        columns: Sequence[str],
        criteria: Sequence[tuple],
    ) -> str:
        """
        Build SELECT cols FROM table WHERE a = x AND b = y.

        Args:
            criteria: (rendered column, rendered literal) pairs
        """
        sql = f"SELECT {', '.join(columns)} FROM {table}"
        if criteria:
            predicates = [
                f"{col} IS NULL" if literal == "NULL" else f"{col} = {literal}"
                for col, literal in criteria
            ]
            sql = f"{sql} WHERE {' AND '.join(predicates)}"
        return sql
