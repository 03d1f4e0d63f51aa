"""
SQL identifier handling utilities.

Provides functions for proper quoting of SQL identifiers
(table names, column names, domain names).
"""

import re
from typing import FrozenSet, Literal

QuoteStyle = Literal["double", "backtick"]

SIMPLE_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]*$")


def quote_identifier(name: str, quote_style: QuoteStyle = "double") -> str:
    """
    Quote a SQL identifier (table or column name).

    Args:
        name: The identifier to quote
        quote_style: "double" (ANSI, SQLite, PostgreSQL) or "backtick" (MySQL)

    Returns:
        Properly quoted identifier

    Examples:
        >>> quote_identifier("publ_host")
        '"publ_host"'
        >>> quote_identifier('odd"name')
        '"odd""name"'
        >>> quote_identifier("table", quote_style="backtick")
        '`table`'
    """
    if not name:
        raise ValueError("SQL identifier must be a non-empty string")
    if quote_style == "backtick":
        escaped = name.replace("`", "``")
        return f"`{escaped}`"
    escaped = name.replace('"', '""')
    return f'"{escaped}"'


def needs_quoting(name: str, reserved_words: FrozenSet[str] = frozenset()) -> bool:
    """
    Decide whether an identifier must be quoted to survive the parser.

    Lowercase ASCII identifiers that are not keywords can stay bare.

    Examples:
        >>> needs_quoting("publ_host")
        False
        >>> needs_quoting("Host")
        True
        >>> needs_quoting("order", frozenset({"ORDER"}))
        True
    """
    if not name:
        raise ValueError("SQL identifier must be a non-empty string")
    if not SIMPLE_IDENTIFIER.match(name):
        return True
    return name.upper() in reserved_words
