"""Core SQL utilities package."""

from .identifier import needs_quoting, quote_identifier
from .literals import quote_text, quoted_literal
from .naming import IdentifierKind, SqlNamingStrategy

__all__ = [
    "quote_identifier",
    "needs_quoting",
    "quote_text",
    "quoted_literal",
    "IdentifierKind",
    "SqlNamingStrategy",
]
