"""
SQL literal rendering utilities.

Turns Python values into SQL literal text for generated DML. Escaping is a
pure function of the value and the boolean style, never of runtime state.
"""

import json
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Literal

BooleanStyle = Literal["numeric", "keyword"]


def quote_text(text: str) -> str:
    """
    Single-quote a string literal, doubling embedded quotes.

    Examples:
        >>> quote_text("my_host")
        "'my_host'"
        >>> quote_text("it's")
        "'it''s'"
    """
    escaped = text.replace("'", "''")
    return f"'{escaped}'"


def quoted_literal(value: Any, boolean_style: BooleanStyle = "numeric") -> str:
    """
    Render a Python value as a SQL literal.

    Args:
        value: Value to render
        boolean_style: "numeric" renders 1/0, "keyword" renders TRUE/FALSE

    Returns:
        SQL literal text

    Examples:
        >>> quoted_literal(None)
        'NULL'
        >>> quoted_literal(0)
        '0'
        >>> quoted_literal("testHI")
        "'testHI'"
        >>> quoted_literal(True, boolean_style="keyword")
        'TRUE'
    """
    if value is None:
        return "NULL"
    if isinstance(value, Enum):
        return quoted_literal(value.value, boolean_style)
    if isinstance(value, bool):
        if boolean_style == "keyword":
            return "TRUE" if value else "FALSE"
        return "1" if value else "0"
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, (datetime, date)):
        return quote_text(value.isoformat())
    if isinstance(value, (dict, list, tuple)):
        return quote_text(json.dumps(value, ensure_ascii=False, default=str))
    return quote_text(str(value))
