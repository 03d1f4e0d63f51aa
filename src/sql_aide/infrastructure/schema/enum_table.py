"""Enumeration-backed lookup tables.

An ``EnumTable`` derives a ``code`` / ``value`` table from a Python ``Enum``
and generates one seed INSERT per member, in declaration order.

Two shapes are supported:

- ordinal (``IntEnum`` or an ``Enum`` whose values are all ints): ``code`` is
  the INTEGER value, ``value`` is the member name
- textual (an ``Enum`` whose values are all strings): ``code`` is the member
  name, ``value`` is the member value
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Type

from sql_aide.infrastructure.exceptions import SqlConstructionError
from sql_aide.utils.logging import get_logger

from .core import FieldDescriptor, PrimaryKeyStyle, TypeKind
from .domain_registry import SqlDomainRegistry
from .table import InsertDML, Table

logger = get_logger(__name__)


def enum_shape(enum_type: Type[Enum]) -> str:
    """Return 'ordinal' or 'textual' for an enumeration type."""
    values = [member.value for member in enum_type]
    if not values:
        raise SqlConstructionError(
            "Enumeration has no members", subject=enum_type.__name__
        )
    if all(isinstance(v, int) and not isinstance(v, bool) for v in values):
        return "ordinal"
    if all(isinstance(v, str) for v in values):
        return "textual"
    raise SqlConstructionError(
        "Enumeration values must be all ints or all strings",
        subject=enum_type.__name__,
    )


class EnumTable(Table):
    """Lookup table whose rows mirror the members of an enumeration."""

    def __init__(
        self,
        table_name: str,
        enum_type: Type[Enum],
        housekeeping: Optional[Mapping[str, FieldDescriptor]] = None,
        registry: Optional[SqlDomainRegistry] = None,
        is_idempotent: bool = False,
    ) -> None:
        self.enum_type = enum_type
        self.shape = enum_shape(enum_type)
        # recorded only; seeds that skip existing codes come from idempotent_seed_dml
        self.is_idempotent = is_idempotent

        code_kind = TypeKind.INTEGER if self.shape == "ordinal" else TypeKind.TEXT
        columns: Dict[str, FieldDescriptor] = {
            "code": FieldDescriptor(kind=code_kind, primary_key=PrimaryKeyStyle.NATURAL),
            "value": FieldDescriptor(kind=TypeKind.TEXT),
        }
        columns.update(housekeeping or {})
        super().__init__(table_name, columns, registry=registry)

    def code_of(self, value: Any) -> Any:
        """Stored code for a member (or a member's value); other values pass through."""
        member = value
        if not isinstance(value, self.enum_type):
            try:
                member = self.enum_type(value)
            except ValueError:
                return value
        if self.shape == "ordinal":
            return member.value
        return member.name

    def value_of(self, member: Enum) -> str:
        if self.shape == "ordinal":
            return member.name
        return member.value

    @property
    def seed_rows(self) -> List[Dict[str, Any]]:
        return [
            {"code": self.code_of(member), "value": self.value_of(member)}
            for member in self.enum_type
        ]

    @property
    def seed_dml(self) -> List[InsertDML]:
        """One plain INSERT per member, in declaration order."""
        return [self.insert_dml(row) for row in self.seed_rows]

    @property
    def idempotent_seed_dml(self) -> List[InsertDML]:
        """Seed inserts that skip rows whose code already exists."""
        return [self.insert_dml(row, on_conflict_ignore=True) for row in self.seed_rows]


__all__ = ["EnumTable", "enum_shape"]
