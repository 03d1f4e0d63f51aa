"""
Naming strategy: logical names to physical SQL identifiers.

A naming strategy is a pure mapping from ``(kind, logical name, quote option)``
to identifier text. It carries configuration only, so one instance can be
shared by every emission context that uses the same dialect.
"""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Literal

from .identifier import QuoteStyle, needs_quoting, quote_identifier

QuoteMode = Literal["always", "if_needed"]


class IdentifierKind(str, Enum):
    """Kinds of schema objects a naming strategy can name."""

    TABLE = "table"
    VIEW = "view"
    COLUMN = "column"
    DOMAIN = "domain"
    CONSTRAINT = "constraint"


@dataclass(frozen=True)
class SqlNamingStrategy:
    """Deterministic identifier rendering for one dialect configuration."""

    quote_style: QuoteStyle = "double"
    quote_mode: QuoteMode = "always"
    reserved_words: FrozenSet[str] = frozenset()

    def identifier(
        self, kind: IdentifierKind, name: str, quote_identifiers: bool = True
    ) -> str:
        """
        Render a logical name as a SQL identifier.

        Args:
            kind: What the identifier names
            name: Logical name (must be non-empty)
            quote_identifiers: False returns the bare logical name

        Returns:
            Identifier text, quoted according to quote_mode
        """
        if not name:
            raise ValueError(f"Cannot name a {kind.value} with an empty identifier")
        if not quote_identifiers:
            return name
        if self.quote_mode == "if_needed" and not needs_quoting(
            name, self.reserved_words
        ):
            return name
        return quote_identifier(name, self.quote_style)

    def table_name(self, name: str, quote_identifiers: bool = True) -> str:
        return self.identifier(IdentifierKind.TABLE, name, quote_identifiers)

    def view_name(self, name: str, quote_identifiers: bool = True) -> str:
        return self.identifier(IdentifierKind.VIEW, name, quote_identifiers)

    def column_name(self, name: str, quote_identifiers: bool = True) -> str:
        return self.identifier(IdentifierKind.COLUMN, name, quote_identifiers)

    def domain_name(self, name: str, quote_identifiers: bool = True) -> str:
        return self.identifier(IdentifierKind.DOMAIN, name, quote_identifiers)
