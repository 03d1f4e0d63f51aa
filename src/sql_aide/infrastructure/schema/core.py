"""Core schema types for SQL Aide.

Typed field descriptors are the input of the domain registry. A base
descriptor names a ``TypeKind`` plus structural traits (primary key,
uniqueness, foreign-key reference); wrapper descriptors add an OPTIONAL or
DEFAULT layer around an inner descriptor. Descriptors compare by identity:
the same object shared by several columns is the same field.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, List, Optional

if TYPE_CHECKING:  # pragma: no cover - imported only for typing
    from .domain import SqlDomain


class TypeKind(str, Enum):
    """Supported base types of a field descriptor."""

    TEXT = "text"
    VARCHAR = "varchar"
    INTEGER = "integer"
    FLOAT = "float"
    BIG_FLOAT = "big_float"
    FLOAT_ARRAY = "float_array"
    DATE = "date"
    DATETIME = "datetime"
    BOOLEAN = "boolean"
    JSON_TEXT = "json_text"
    JSONB = "jsonb"
    ANY = "any"


class WrapperKind(str, Enum):
    """Layers that can wrap a descriptor."""

    OPTIONAL = "optional"
    DEFAULT = "default"


class PrimaryKeyStyle(str, Enum):
    """How a primary key column gets its values."""

    NATURAL = "natural"
    AUTO_INCREMENT = "auto_increment"


@dataclass(frozen=True)
class SqlExpression:
    """Raw SQL used verbatim as a column default (e.g. CURRENT_TIMESTAMP)."""

    text: str


@dataclass(frozen=True, eq=False)
class ForeignKeyRef:
    """Target of a foreign key column.

    ``table`` is None for a self-reference; the target column is then the
    column of the owning table that holds ``target_descriptor``.
    """

    table: Any
    column: Optional[str]
    target_descriptor: Optional["FieldDescriptor"] = None

    @property
    def is_self_reference(self) -> bool:
        return self.table is None


@dataclass(eq=False)
class FieldDescriptor:
    """A typed field: either a base type or a wrapper around another descriptor."""

    kind: Optional[TypeKind] = None
    wrapper: Optional[WrapperKind] = None
    inner: Optional["FieldDescriptor"] = None
    default_value: Any = None
    max_length: Optional[int] = None
    primary_key: Optional[PrimaryKeyStyle] = None
    unique: bool = False
    references: Optional[ForeignKeyRef] = None
    exclude_from_insert: bool = False
    description: str = ""
    sql_domain: Optional["SqlDomain"] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.wrapper is None and self.kind is None:
            raise ValueError("A base FieldDescriptor needs a kind")
        if self.wrapper is not None and self.inner is None:
            raise ValueError(f"A {self.wrapper.value} wrapper needs an inner descriptor")

    @property
    def is_wrapper(self) -> bool:
        return self.wrapper is not None

    def optional(self) -> "FieldDescriptor":
        return FieldDescriptor(wrapper=WrapperKind.OPTIONAL, inner=self)

    def default(self, value: Any) -> "FieldDescriptor":
        return FieldDescriptor(wrapper=WrapperKind.DEFAULT, inner=self, default_value=value)

    def layers(self) -> List["FieldDescriptor"]:
        """All descriptors from this one down to the base, outermost first."""
        chain = [self]
        current = self
        while current.inner is not None:
            current = current.inner
            chain.append(current)
        return chain

    def base(self) -> "FieldDescriptor":
        return self.layers()[-1]

    def is_optional(self) -> bool:
        return any(layer.wrapper == WrapperKind.OPTIONAL for layer in self.layers())

    def default_layer(self) -> Optional["FieldDescriptor"]:
        for layer in self.layers():
            if layer.wrapper == WrapperKind.DEFAULT:
                return layer
        return None

    def evolve(self, **changes: Any) -> "FieldDescriptor":
        """Copy the chain with ``changes`` applied to the base descriptor."""
        wrappers = self.layers()[:-1]
        result = replace(self.base(), sql_domain=None, **changes)
        for layer in reversed(wrappers):
            result = replace(layer, inner=result, sql_domain=None)
        return result


__all__ = [
    "TypeKind",
    "WrapperKind",
    "PrimaryKeyStyle",
    "SqlExpression",
    "ForeignKeyRef",
    "FieldDescriptor",
]
