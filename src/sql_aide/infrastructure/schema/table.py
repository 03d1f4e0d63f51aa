"""Table construction: named domains assembled into governed relational entities.

A ``Table`` is itself a SQL text supplier. Rendering produces idempotent
``CREATE TABLE IF NOT EXISTS`` text; the emission engine then calls
``declare_symbol`` (symbol table and foreign-key edges) and
``report_diagnostics`` (lint rules) on it.

Usage:
    >>> publ_host = Table("publ_host", {
    ...     "publ_host_id": keys.text_primary_key(),
    ...     "host": constraints.unique(domains.text()),
    ... })
    >>> publ_host.insert_dml({"publ_host_id": "a", "host": "example"})
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from functools import cached_property
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, create_model

from sql_aide.infrastructure.emit.context import EmissionContext, ForeignKeyEdge
from sql_aide.infrastructure.exceptions import SqlConstructionError
from sql_aide.infrastructure.sql.operations.insert import InsertBuilder
from sql_aide.infrastructure.sql.operations.select import SelectBuilder
from sql_aide.utils.logging import get_logger

from .core import FieldDescriptor, ForeignKeyRef, TypeKind
from .domain import SqlDomain
from .domain_registry import SqlDomainRegistry, default_registry

logger = get_logger(__name__)

PYTHON_TYPES: Dict[TypeKind, Any] = {
    TypeKind.TEXT: str,
    TypeKind.VARCHAR: str,
    TypeKind.JSON_TEXT: str,
    TypeKind.INTEGER: int,
    TypeKind.FLOAT: float,
    TypeKind.BIG_FLOAT: float,
    TypeKind.FLOAT_ARRAY: List[float],
    TypeKind.DATE: date,
    TypeKind.DATETIME: datetime,
    TypeKind.BOOLEAN: bool,
    TypeKind.JSONB: Any,
}


@dataclass(frozen=True)
class ForeignKeySpec:
    """``column`` of the owning table references ``target_table.target_column``."""

    column: str
    target_table: "Table"
    target_column: str


class Column:
    """Reference to one column; renders as its quoted identifier."""

    def __init__(self, table: "Table", name: str, domain: SqlDomain) -> None:
        self.table = table
        self.name = name
        self.domain = domain

    def __repr__(self) -> str:
        return f"Column({self.table.table_name}.{self.name})"

    def render(self, ctx: EmissionContext) -> str:
        return ctx.naming.column_name(self.name)


class ColumnList:
    """Comma-separated quoted column names, for explicit SELECT lists."""

    def __init__(self, names: List[str]) -> None:
        self.names = names

    def render(self, ctx: EmissionContext) -> str:
        return ", ".join(ctx.naming.column_name(name) for name in self.names)


class TableReferences:
    """``table.references.<column>()`` builds a foreign-key descriptor."""

    def __init__(self, table: "Table") -> None:
        self._table = table

    def __getattr__(self, column: str) -> Callable[[], FieldDescriptor]:
        if column.startswith("_"):
            raise AttributeError(column)
        self._table.require_key_column(column)
        return lambda: self._table.reference(column)


class Table:
    """Relational table built from an ordered mapping of column name to descriptor."""

    target = "table"

    def __init__(
        self,
        table_name: str,
        columns: Mapping[str, FieldDescriptor],
        registry: Optional[SqlDomainRegistry] = None,
        rows_mutable: bool = False,
        rows_deletable: bool = False,
        description: str = "",
    ) -> None:
        if not table_name:
            raise SqlConstructionError("Table name must be non-empty")
        if not columns:
            raise SqlConstructionError("Table has no columns", subject=table_name)

        self.table_name = table_name
        self.registry = registry or default_registry
        self.rows_mutable = rows_mutable
        self.rows_deletable = rows_deletable
        self.description = description
        self.descriptors: Dict[str, FieldDescriptor] = dict(columns)

        self.domains: Dict[str, SqlDomain] = {}
        for name, descriptor in self.descriptors.items():
            domain = self.registry.resolve_cached(descriptor, identity=name)
            if domain.identity != name:
                domain = self.registry.resolve_cached(
                    descriptor, identity=name, force_create=True
                )
            self.domains[name] = domain

        self.columns: Dict[str, Column] = {
            name: Column(self, name, domain) for name, domain in self.domains.items()
        }
        self.primary_key = self._find_primary_key()
        self.unique_columns: List[str] = [
            name for name, domain in self.domains.items() if domain.is_unique
        ]
        self.foreign_keys: List[ForeignKeySpec] = [
            self._foreign_key(name, domain.references)
            for name, domain in self.domains.items()
            if domain.references is not None
        ]
        self.references = TableReferences(self)

    @property
    def columns_all(self) -> ColumnList:
        return ColumnList(list(self.domains.keys()))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.table_name!r})"

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def _find_primary_key(self) -> Optional[str]:
        keys = [name for name, domain in self.domains.items() if domain.is_primary_key]
        if len(keys) > 1:
            raise SqlConstructionError(
                f"Table declares more than one primary key: {keys}",
                subject=self.table_name,
            )
        return keys[0] if keys else None

    def _foreign_key(self, column: str, ref: ForeignKeyRef) -> ForeignKeySpec:
        if ref.is_self_reference:
            target_column = next(
                (
                    name
                    for name, descriptor in self.descriptors.items()
                    if descriptor is ref.target_descriptor
                ),
                None,
            )
            if target_column is None:
                raise SqlConstructionError(
                    f"Self reference in column '{column}' does not point at a column of this table",
                    subject=self.table_name,
                )
            self.require_key_column(target_column)
            return ForeignKeySpec(column, self, target_column)

        target: Table = ref.table
        target.require_key_column(ref.column)  # type: ignore[arg-type]
        return ForeignKeySpec(column, target, ref.column)  # type: ignore[arg-type]

    def is_key_column(self, column: str) -> bool:
        domain = self.domains.get(column)
        return domain is not None and (domain.is_primary_key or domain.is_unique)

    def require_key_column(self, column: str) -> None:
        if column not in self.domains:
            raise SqlConstructionError(
                f"Column '{column}' does not exist", subject=self.table_name
            )
        if not self.is_key_column(column):
            raise SqlConstructionError(
                f"Column '{column}' is not a primary or unique key and cannot be referenced",
                subject=self.table_name,
            )

    def reference(self, column: str) -> FieldDescriptor:
        """Descriptor for a foreign key column pointing at ``column``."""
        self.require_key_column(column)
        base = self.descriptors[column].base()
        return FieldDescriptor(
            kind=base.kind,
            max_length=base.max_length,
            references=ForeignKeyRef(table=self, column=column),
        )

    @cached_property
    def row_model(self) -> Type[BaseModel]:
        """Pydantic model describing one row of this table."""
        fields: Dict[str, Any] = {}
        for name, domain in self.domains.items():
            python_type = PYTHON_TYPES.get(domain.kind, Any)
            if domain.is_nullable() or domain.is_excluded_from_insert or domain.has_default:
                fields[name] = (Optional[python_type], None)
            else:
                fields[name] = (python_type, ...)
        model_name = "".join(part.title() for part in self.table_name.split("_")) + "Row"
        return create_model(
            model_name,
            __config__=ConfigDict(protected_namespaces=()),
            **fields,
        )

    # ------------------------------------------------------------------
    # SQL text supplier hooks
    # ------------------------------------------------------------------

    def column_definition(self, domain: SqlDomain, ctx: EmissionContext) -> str:
        parts = [
            ctx.naming.column_name(domain.require_identity()),
            domain.sql_data_type("create table column", ctx),
        ]
        parts.extend(domain.sql_partial("create table, column defn decorators", ctx))
        if not domain.is_nullable():
            parts.append("NOT NULL")
        default = domain.sql_default_value("create table column", ctx)
        if default is not None:
            parts.append(f"DEFAULT {default}")
        return " ".join(parts)

    def render(self, ctx: EmissionContext) -> str:
        naming = ctx.naming
        definitions = [
            self.column_definition(domain, ctx) for domain in self.domains.values()
        ]
        for fk in self.foreign_keys:
            definitions.append(
                f"FOREIGN KEY({naming.column_name(fk.column)}) "
                f"REFERENCES {naming.table_name(fk.target_table.table_name)}"
                f"({naming.column_name(fk.target_column)})"
            )
        for column in self.unique_columns:
            definitions.append(f"UNIQUE({naming.column_name(column)})")

        body = ",\n".join(f"    {definition}" for definition in definitions)
        prefix = ctx.dialect.create_table_prefix()
        return f"{prefix} {naming.table_name(self.table_name)} (\n{body}\n);"

    def declare_symbol(self, ctx: EmissionContext) -> None:
        if not ctx.declare_table(self.table_name, self):
            return
        for fk in self.foreign_keys:
            ctx.add_foreign_key(
                ForeignKeyEdge(
                    source_table=self.table_name,
                    source_column=fk.column,
                    target_table=fk.target_table.table_name,
                    target_column=fk.target_column,
                )
            )

    def lint_metadata(self, ctx: EmissionContext) -> Dict[str, Any]:
        return {
            "columns": list(self.domains.keys()),
            "primary_key": self.primary_key,
            "rows_mutable": self.rows_mutable,
            "rows_deletable": self.rows_deletable,
            "undeclared_references": [
                fk.target_table.table_name
                for fk in self.foreign_keys
                if fk.target_table.table_name not in ctx.declared_tables
            ],
        }

    def report_diagnostics(self, ctx: EmissionContext, text: str) -> None:
        if ctx.mark_reported(self.target, self.table_name):
            ctx.lint(self.target, self.table_name, text, self.lint_metadata(ctx))

    # ------------------------------------------------------------------
    # DML
    # ------------------------------------------------------------------

    def _row_values(self, row: Union[Mapping[str, Any], BaseModel]) -> Dict[str, Any]:
        if isinstance(row, BaseModel):
            values = row.model_dump(exclude_unset=True)
        else:
            values = dict(row)
        unknown = [name for name in values if name not in self.domains]
        if unknown:
            raise SqlConstructionError(
                f"Unknown columns in row: {unknown}", subject=self.table_name
            )
        return values

    def insert_dml(
        self,
        row: Union[Mapping[str, Any], BaseModel],
        on_conflict_ignore: bool = False,
    ) -> "InsertDML":
        """
        INSERT statement for one row.

        Missing optional columns render as NULL, columns excluded from inserts
        (autoincrement keys, server-stamped timestamps) are left out unless given.
        Omitted NOT NULL columns with a DEFAULT are left out as well, so the
        database applies the default.

        Raises:
            SqlConstructionError: For unknown columns or missing required values
        """
        values = self._row_values(row)
        missing = [
            name
            for name, domain in self.domains.items()
            if name not in values
            and not domain.is_nullable()
            and not domain.is_excluded_from_insert
            and not domain.has_default
        ]
        if missing:
            raise SqlConstructionError(
                f"Row is missing required columns: {missing}", subject=self.table_name
            )
        return InsertDML(self, values, on_conflict_ignore)

    def select(self, criteria: Mapping[str, Any]) -> "SelectDML":
        """``SELECT <primary key> FROM table WHERE`` equality criteria AND-ed."""
        values = self._row_values(criteria)
        return SelectDML(self, values)


class InsertDML:
    """Renders one INSERT statement for a table row."""

    def __init__(
        self, table: Table, values: Mapping[str, Any], on_conflict_ignore: bool = False
    ) -> None:
        self.table = table
        self.values = dict(values)
        self.on_conflict_ignore = on_conflict_ignore

    def render(self, ctx: EmissionContext) -> str:
        naming = ctx.naming
        columns: List[str] = []
        literals: List[str] = []
        for name, domain in self.table.domains.items():
            if name in self.values:
                value = domain.transform_insert_value(self.values[name])
            elif domain.is_excluded_from_insert:
                continue
            elif domain.has_default and not domain.is_nullable():
                continue
            else:
                value = None
            columns.append(naming.column_name(domain.require_identity()))
            literals.append(ctx.literal(value))

        builder = InsertBuilder(ctx.dialect)
        table_name = naming.table_name(self.table.table_name)
        if self.on_conflict_ignore and self.table.primary_key:
            statement = builder.upsert(
                table_name,
                columns,
                literals,
                conflict_columns=[naming.column_name(self.table.primary_key)],
            )
        else:
            statement = builder.insert(table_name, columns, literals)
        return f"{statement};"


class SelectDML:
    """Renders a primary-key lookup for equality criteria."""

    def __init__(self, table: Table, criteria: Mapping[str, Any]) -> None:
        self.table = table
        self.criteria = dict(criteria)

    def render(self, ctx: EmissionContext) -> str:
        naming = ctx.naming
        if self.table.primary_key:
            selected = [naming.column_name(self.table.primary_key)]
        else:
            selected = [naming.column_name(name) for name in self.table.domains]
        predicates: List[Tuple[str, str]] = []
        for name, value in self.criteria.items():
            domain = self.table.domains[name]
            predicates.append(
                (naming.column_name(name), ctx.literal(domain.transform_insert_value(value)))
            )
        statement = SelectBuilder(ctx.dialect).select(
            naming.table_name(self.table.table_name), selected, predicates
        )
        return f"{statement};"


__all__ = [
    "Column",
    "ColumnList",
    "ForeignKeySpec",
    "Table",
    "TableReferences",
    "InsertDML",
    "SelectDML",
]
