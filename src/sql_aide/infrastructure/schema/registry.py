"""Domain builder registry: one builder per base type kind.

Builders are registered per ``TypeKind``. Kinds without a builder (ANY,
or anything a dialect has not added) fail resolution loudly with
``UnsupportedTypeError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from sql_aide.infrastructure.exceptions import UnsupportedTypeError

from .core import FieldDescriptor, TypeKind
from .domain import InsertValueTransform, SqlDomain

if TYPE_CHECKING:  # pragma: no cover - imported only for typing
    from sql_aide.infrastructure.emit.context import EmissionContext


@dataclass
class DomainInit:
    """What the registry knows about a descriptor while unwrapping it."""

    identity: Optional[str] = None
    is_optional: bool = False
    parents: List[FieldDescriptor] = field(default_factory=list)
    insert_value_transform: Optional[InsertValueTransform] = None


DomainBuilder = Callable[[FieldDescriptor, FieldDescriptor, DomainInit], SqlDomain]

_DOMAIN_BUILDERS: Dict[TypeKind, DomainBuilder] = {}


def register_domain_builder(kind: TypeKind, builder: DomainBuilder) -> None:
    """Register the builder for a base type kind."""
    if kind in _DOMAIN_BUILDERS:
        raise ValueError(
            f"Domain builder for '{kind.value}' is already registered. "
            "Use a different kind instead."
        )
    _DOMAIN_BUILDERS[kind] = builder


def get_domain_builder(kind: TypeKind) -> DomainBuilder:
    """Retrieve the builder for a kind or fail with UnsupportedTypeError."""
    if kind not in _DOMAIN_BUILDERS:
        raise UnsupportedTypeError(kind.value)
    return _DOMAIN_BUILDERS[kind]


def list_domain_kinds() -> List[TypeKind]:
    """List all kinds that have a builder."""
    return sorted(_DOMAIN_BUILDERS.keys(), key=lambda k: k.value)


def _canonical(sql_type: str) -> Callable[[str, "EmissionContext"], str]:
    def data_type(purpose: str, ctx: "EmissionContext") -> str:
        return ctx.dialect.sql_type(sql_type)

    return data_type


def _simple_builder(sql_type: str) -> DomainBuilder:
    def build(
        descriptor: FieldDescriptor, base: FieldDescriptor, init: DomainInit
    ) -> SqlDomain:
        return SqlDomain(
            descriptor,
            _canonical(sql_type),
            identity=init.identity,
            is_optional=init.is_optional,
            parents=init.parents,
            insert_value_transform=init.insert_value_transform,
        )

    return build


def _varchar_builder(
    descriptor: FieldDescriptor, base: FieldDescriptor, init: DomainInit
) -> SqlDomain:
    sql_type = f"VARCHAR({base.max_length})" if base.max_length else "VARCHAR"
    return SqlDomain(
        descriptor,
        _canonical(sql_type),
        identity=init.identity,
        is_optional=init.is_optional,
        parents=init.parents,
        insert_value_transform=init.insert_value_transform,
    )


def _register_typical_builders() -> None:
    register_domain_builder(TypeKind.TEXT, _simple_builder("TEXT"))
    register_domain_builder(TypeKind.VARCHAR, _varchar_builder)
    register_domain_builder(TypeKind.INTEGER, _simple_builder("INTEGER"))
    register_domain_builder(TypeKind.FLOAT, _simple_builder("REAL"))
    register_domain_builder(TypeKind.BIG_FLOAT, _simple_builder("DOUBLE PRECISION"))
    register_domain_builder(TypeKind.FLOAT_ARRAY, _simple_builder("REAL[]"))
    register_domain_builder(TypeKind.DATE, _simple_builder("DATE"))
    register_domain_builder(TypeKind.DATETIME, _simple_builder("TIMESTAMP"))
    register_domain_builder(TypeKind.BOOLEAN, _simple_builder("BOOLEAN"))
    register_domain_builder(TypeKind.JSON_TEXT, _simple_builder("TEXT"))
    register_domain_builder(TypeKind.JSONB, _simple_builder("JSONB"))


_register_typical_builders()


__all__ = [
    "DomainInit",
    "DomainBuilder",
    "register_domain_builder",
    "get_domain_builder",
    "list_domain_kinds",
]
