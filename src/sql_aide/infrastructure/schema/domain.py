"""SQL domains: render-capable wrappers around one field's type information.

A domain knows its nullability, its SQL type for each rendering purpose, an
optional default-value renderer, an optional insert-value transform and the
structural decorations its column needs.

Identity is a small state machine. A domain starts unassigned (one of the
two sentinels below) and may be assigned a real name exactly once; rebuilding
a domain for a second identity goes through the registry's force-create path,
never through mutation. Rendering a symbol while the identity is still a
sentinel is a construction error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, List, Literal, Optional, Sequence

from sql_aide.infrastructure.exceptions import SqlConstructionError

from .core import FieldDescriptor, ForeignKeyRef, PrimaryKeyStyle, SqlExpression, TypeKind

if TYPE_CHECKING:  # pragma: no cover - imported only for typing
    from sql_aide.infrastructure.emit.context import EmissionContext

SQL_DOMAIN_NOT_IN_COLLECTION = "SQL_DOMAIN_NOT_IN_COLLECTION"
SQL_DOMAIN_HAS_NO_IDENTITY_FROM_SHAPE = "SQL_DOMAIN_HAS_NO_IDENTITY_FROM_SHAPE"
UNASSIGNED_IDENTITIES = frozenset(
    {SQL_DOMAIN_NOT_IN_COLLECTION, SQL_DOMAIN_HAS_NO_IDENTITY_FROM_SHAPE}
)

SqlDataTypePurpose = Literal[
    "create table column",
    "stored routine arg",
    "stored function returns scalar",
    "stored function returns table column",
    "type field",
    "table foreign key ref",
    "diagram",
    "PostgreSQL domain",
]

SqlPartialDestination = Literal[
    "create table, full column defn",
    "create table, column defn decorators",
    "create table, after all column definitions",
]

DataTypeRenderer = Callable[[str, "EmissionContext"], str]
InsertValueTransform = Callable[[Any], Any]


class SqlDomain:
    """Domain built from one (possibly wrapped) field descriptor."""

    def __init__(
        self,
        descriptor: FieldDescriptor,
        data_type: DataTypeRenderer,
        identity: Optional[str] = None,
        is_optional: bool = False,
        parents: Sequence[FieldDescriptor] = (),
        insert_value_transform: Optional[InsertValueTransform] = None,
    ) -> None:
        self.descriptor = descriptor
        self.base = descriptor.base()
        self.kind: TypeKind = self.base.kind  # type: ignore[assignment]
        self.parents: List[FieldDescriptor] = list(parents)
        self._identity = identity or SQL_DOMAIN_NOT_IN_COLLECTION
        self._is_optional = is_optional
        self._data_type = data_type
        self._insert_value_transform = insert_value_transform

    def __repr__(self) -> str:
        return f"SqlDomain(identity={self._identity!r}, kind={self.kind.value!r})"

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def identity(self) -> str:
        return self._identity

    @property
    def is_identity_assigned(self) -> bool:
        return self._identity not in UNASSIGNED_IDENTITIES

    def mark_shape_without_identity(self) -> None:
        """Record that the caller supplied no identity for this shape."""
        if not self.is_identity_assigned:
            self._identity = SQL_DOMAIN_HAS_NO_IDENTITY_FROM_SHAPE

    def assign_identity(self, identity: str) -> None:
        """Move from an unassigned sentinel to a real name, exactly once."""
        if identity in UNASSIGNED_IDENTITIES or not identity:
            raise SqlConstructionError("Cannot assign a sentinel identity", subject=identity)
        if self.is_identity_assigned:
            raise SqlConstructionError(
                f"Domain identity already assigned to '{self._identity}'",
                subject=identity,
            )
        self._identity = identity

    def require_identity(self) -> str:
        if not self.is_identity_assigned:
            raise SqlConstructionError(
                "SQL domain rendered with an unresolved identity", subject=self._identity
            )
        return self._identity

    def sql_symbol(self, ctx: "EmissionContext") -> str:
        return ctx.naming.domain_name(self.require_identity())

    # ------------------------------------------------------------------
    # Traits
    # ------------------------------------------------------------------

    @property
    def is_primary_key(self) -> bool:
        return self.base.primary_key is not None

    @property
    def is_auto_increment(self) -> bool:
        return self.base.primary_key == PrimaryKeyStyle.AUTO_INCREMENT

    @property
    def is_unique(self) -> bool:
        return self.base.unique

    @property
    def references(self) -> Optional[ForeignKeyRef]:
        return self.base.references

    @property
    def has_default(self) -> bool:
        return self.descriptor.default_layer() is not None

    @property
    def is_excluded_from_insert(self) -> bool:
        return self.is_auto_increment or self.base.exclude_from_insert

    def is_nullable(self) -> bool:
        return self._is_optional or self.is_auto_increment

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def sql_data_type(self, purpose: SqlDataTypePurpose, ctx: "EmissionContext") -> str:
        if purpose == "create table column" and self.is_auto_increment:
            return ctx.dialect.auto_increment_column_type(self._data_type(purpose, ctx))
        return self._data_type(purpose, ctx)

    def sql_default_value(
        self, purpose: SqlDataTypePurpose, ctx: "EmissionContext"
    ) -> Optional[str]:
        layer = self.descriptor.default_layer()
        if layer is None:
            return None
        value = layer.default_value
        if isinstance(value, SqlExpression):
            return value.text
        return ctx.literal(value)

    def transform_insert_value(self, value: Any) -> Any:
        if self._insert_value_transform is None:
            return value
        return self._insert_value_transform(value)

    def sql_partial(
        self, destination: SqlPartialDestination, ctx: "EmissionContext"
    ) -> List[str]:
        if destination != "create table, column defn decorators":
            return []
        decorators: List[str] = []
        if self.is_primary_key:
            decorators.extend(ctx.dialect.primary_key_decorators(self.is_auto_increment))
        if self.is_unique:
            decorators.append("/* UNIQUE COLUMN */")
        return decorators


__all__ = [
    "SQL_DOMAIN_NOT_IN_COLLECTION",
    "SQL_DOMAIN_HAS_NO_IDENTITY_FROM_SHAPE",
    "UNASSIGNED_IDENTITIES",
    "SqlDataTypePurpose",
    "SqlPartialDestination",
    "SqlDomain",
]
