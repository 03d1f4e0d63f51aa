"""Governed information model: the typical way to declare a schema.

A ``GovernedModel`` bundles a domain factory, key and constraint helpers,
dialect-configured housekeeping columns and table/view factories that apply
the governance conventions (single primary key, audit columns, explicit view
columns). Its ``template_state`` renders scripts and the derived ERD.

Usage:
    >>> gm = GovernedModel.typical()
    >>> sd, keys = gm.domains, gm.keys
    >>> host_type = gm.ordinal_enum_table("host_type", HostType)
    >>> publ_host = gm.text_pk_table("publ_host", {
    ...     "publ_host_id": keys.text_primary_key(),
    ...     "host_type_code": host_type.references.code(),
    ...     **gm.housekeeping.columns,
    ... })
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Type, Union

from sql_aide.infrastructure.emit.context import EmissionContext, PersistHook
from sql_aide.infrastructure.emit.lint import Diagnostic, SqlLintManager
from sql_aide.infrastructure.emit.template import SqlTemplate
from sql_aide.infrastructure.exceptions import SqlConstructionError
from sql_aide.infrastructure.sql.dialects import SqlDialect
from sql_aide.utils.logging import get_logger

from .core import FieldDescriptor, ForeignKeyRef, PrimaryKeyStyle, SqlExpression, TypeKind
from .domain_registry import SqlDomainRegistry, default_registry
from .enum_table import EnumTable, enum_shape
from .table import Table
from .view import View, ViewShape

logger = get_logger(__name__)


class DomainFactory:
    """Descriptor constructors for the common column types."""

    def text(self) -> FieldDescriptor:
        return FieldDescriptor(kind=TypeKind.TEXT)

    def text_nullable(self) -> FieldDescriptor:
        return self.text().optional()

    def varchar(self, max_length: int) -> FieldDescriptor:
        return FieldDescriptor(kind=TypeKind.VARCHAR, max_length=max_length)

    def varchar_nullable(self, max_length: int) -> FieldDescriptor:
        return self.varchar(max_length).optional()

    def integer(self) -> FieldDescriptor:
        return FieldDescriptor(kind=TypeKind.INTEGER)

    def integer_nullable(self) -> FieldDescriptor:
        return self.integer().optional()

    def float(self) -> FieldDescriptor:
        return FieldDescriptor(kind=TypeKind.FLOAT)

    def big_float(self) -> FieldDescriptor:
        return FieldDescriptor(kind=TypeKind.BIG_FLOAT)

    def float_array(self) -> FieldDescriptor:
        return FieldDescriptor(kind=TypeKind.FLOAT_ARRAY)

    def float_array_nullable(self) -> FieldDescriptor:
        return self.float_array().optional()

    def date(self) -> FieldDescriptor:
        return FieldDescriptor(kind=TypeKind.DATE)

    def date_time(self) -> FieldDescriptor:
        return FieldDescriptor(kind=TypeKind.DATETIME)

    def date_time_nullable(self) -> FieldDescriptor:
        return self.date_time().optional()

    def boolean(self) -> FieldDescriptor:
        return FieldDescriptor(kind=TypeKind.BOOLEAN)

    def json_text(self) -> FieldDescriptor:
        return FieldDescriptor(kind=TypeKind.JSON_TEXT)

    def json_text_nullable(self) -> FieldDescriptor:
        return self.json_text().optional()

    def jsonb_nullable(self) -> FieldDescriptor:
        return FieldDescriptor(kind=TypeKind.JSONB).optional()

    def self_ref(self, primary_key: FieldDescriptor) -> FieldDescriptor:
        """Foreign key back to ``primary_key`` of the table being declared."""
        return FieldDescriptor(
            kind=primary_key.base().kind,
            references=ForeignKeyRef(table=None, column=None, target_descriptor=primary_key),
        )


class Keys:
    """Primary key descriptors."""

    def text_primary_key(self) -> FieldDescriptor:
        return FieldDescriptor(kind=TypeKind.TEXT, primary_key=PrimaryKeyStyle.NATURAL)

    def auto_inc_primary_key(self) -> FieldDescriptor:
        return FieldDescriptor(
            kind=TypeKind.INTEGER, primary_key=PrimaryKeyStyle.AUTO_INCREMENT
        )


class Constraints:
    def unique(self, descriptor: FieldDescriptor) -> FieldDescriptor:
        return descriptor.evolve(unique=True)


class Housekeeping:
    """Audit columns appended to governed tables.

    The descriptor objects are shared by every table of a model, so each
    housekeeping column resolves to a single domain.
    """

    def __init__(self, auditable: bool = False) -> None:
        self.auditable = auditable
        self.created_at = (
            FieldDescriptor(kind=TypeKind.DATETIME, exclude_from_insert=True)
            .optional()
            .default(SqlExpression("CURRENT_TIMESTAMP"))
        )
        columns: Dict[str, FieldDescriptor] = {
            "created_at": self.created_at,
            "created_by": FieldDescriptor(kind=TypeKind.TEXT).optional().default("UNKNOWN"),
        }
        if auditable:
            columns.update(
                {
                    "updated_at": FieldDescriptor(kind=TypeKind.DATETIME).optional(),
                    "updated_by": FieldDescriptor(kind=TypeKind.TEXT).optional(),
                    "deleted_at": FieldDescriptor(kind=TypeKind.DATETIME).optional(),
                    "deleted_by": FieldDescriptor(kind=TypeKind.TEXT).optional(),
                    "activity_log": FieldDescriptor(kind=TypeKind.TEXT).optional(),
                }
            )
        self.columns = columns

    @property
    def enum_columns(self) -> Dict[str, FieldDescriptor]:
        """Enum lookup tables only carry the creation timestamp."""
        return {"created_at": self.created_at}


class PersistRequest:
    """Hands a rendered fragment to the persist hook and leaves a marker comment."""

    def __init__(self, supplier: Any, logical_tag: str) -> None:
        self.supplier = supplier
        self.logical_tag = logical_tag

    def render(self, ctx: EmissionContext) -> str:
        fragment = self.supplier.render(ctx)
        tag = ctx.persistence_request(fragment, self.logical_tag)
        return f"-- encountered persistence request for {tag}"


class LintSummary:
    """Deferred comment block listing the diagnostics of the whole render."""

    is_deferred = True

    def __init__(self, channel: str) -> None:
        if channel not in ("sql", "engine"):
            raise ValueError(f"Unknown lint summary channel: {channel}")
        self.channel = channel

    def issues(self, ctx: EmissionContext) -> List[Diagnostic]:
        return ctx.lint_issues if self.channel == "sql" else ctx.engine_issues

    def render(self, ctx: EmissionContext) -> str:
        issues = self.issues(ctx)
        if not issues:
            manager = f"{ctx.lint_manager.name} lint manager"
            if self.channel == "sql":
                return f"-- no SQL lint issues ({manager})"
            return f"-- no template engine lint issues ({manager})"
        return "\n".join(issue.as_sql_comment() for issue in issues)


class SqlTemplateState:
    """Per-model rendering state: contexts, lint summaries, persistence and ERD."""

    def __init__(
        self,
        dialect: Optional[SqlDialect] = None,
        lint_manager: Optional[SqlLintManager] = None,
        persist: Optional[PersistHook] = None,
    ) -> None:
        self.dialect = dialect
        self.lint_manager = lint_manager
        self.persist = persist
        self.lint_summary = LintSummary("sql")
        self.engine_lint_summary = LintSummary("engine")
        self.last_context: Optional[EmissionContext] = None

    def context(self) -> EmissionContext:
        """A fresh context for one top-level render."""
        ctx = EmissionContext(
            dialect=self.dialect, lint_manager=self.lint_manager, persist=self.persist
        )
        self.last_context = ctx
        return ctx

    def _require_context(self) -> EmissionContext:
        if self.last_context is None:
            raise SqlConstructionError("No script has been rendered yet")
        return self.last_context

    @property
    def tables_declared(self) -> List[str]:
        return list(self._require_context().declared_tables)

    @property
    def views_declared(self) -> List[str]:
        return list(self._require_context().declared_views)

    def persist_sql(self, supplier: Any, logical_tag: str) -> PersistRequest:
        return PersistRequest(supplier, logical_tag)

    def erd(self, ctx: Optional[EmissionContext] = None, title: Optional[str] = None):
        """PlantUML IE diagram of everything declared in ``ctx``."""
        from sql_aide.infrastructure.diagram import ErdOptions, plantuml_ie_erd

        options = ErdOptions(title=title) if title else None
        return plantuml_ie_erd(ctx or self._require_context(), options)


class GovernedModel:
    """Factories that apply governance conventions to tables and views."""

    def __init__(
        self,
        housekeeping: Housekeeping,
        dialect: Optional[SqlDialect] = None,
        registry: Optional[SqlDomainRegistry] = None,
        lint_manager: Optional[SqlLintManager] = None,
        persist: Optional[PersistHook] = None,
    ) -> None:
        self.domains = DomainFactory()
        self.keys = Keys()
        self.constraints = Constraints()
        self.housekeeping = housekeeping
        self.registry = registry or default_registry
        self.template_state = SqlTemplateState(dialect, lint_manager, persist)

    @classmethod
    def typical(cls, **kwargs: Any) -> "GovernedModel":
        return cls(Housekeeping(auditable=False), **kwargs)

    @classmethod
    def auditable(cls, **kwargs: Any) -> "GovernedModel":
        return cls(Housekeeping(auditable=True), **kwargs)

    def table(
        self,
        table_name: str,
        columns: Mapping[str, FieldDescriptor],
        rows_mutable: bool = False,
        rows_deletable: bool = False,
    ) -> Table:
        table = Table(
            table_name,
            columns,
            registry=self.registry,
            rows_mutable=rows_mutable,
            rows_deletable=rows_deletable,
        )
        logger.debug("table.built", table=table_name, columns=len(table.domains))
        return table

    def _keyed_table(
        self,
        table_name: str,
        columns: Mapping[str, FieldDescriptor],
        style: PrimaryKeyStyle,
        **kwargs: Any,
    ) -> Table:
        keys = [
            name
            for name, descriptor in columns.items()
            if descriptor.base().primary_key is not None
        ]
        if len(keys) != 1 or columns[keys[0]].base().primary_key != style:
            raise SqlConstructionError(
                f"Table must declare exactly one {style.value} primary key", subject=table_name
            )
        return self.table(table_name, columns, **kwargs)

    def text_pk_table(
        self, table_name: str, columns: Mapping[str, FieldDescriptor], **kwargs: Any
    ) -> Table:
        return self._keyed_table(table_name, columns, PrimaryKeyStyle.NATURAL, **kwargs)

    def auto_inc_pk_table(
        self, table_name: str, columns: Mapping[str, FieldDescriptor], **kwargs: Any
    ) -> Table:
        return self._keyed_table(
            table_name, columns, PrimaryKeyStyle.AUTO_INCREMENT, **kwargs
        )

    def _enum_table(
        self, table_name: str, enum_type: Type[Enum], shape: str, is_idempotent: bool
    ) -> EnumTable:
        if enum_shape(enum_type) != shape:
            raise SqlConstructionError(
                f"{enum_type.__name__} values are not {shape}", subject=table_name
            )
        return EnumTable(
            table_name,
            enum_type,
            housekeeping=self.housekeeping.enum_columns,
            registry=self.registry,
            is_idempotent=is_idempotent,
        )

    def ordinal_enum_table(
        self, table_name: str, enum_type: Type[Enum], is_idempotent: bool = False
    ) -> EnumTable:
        return self._enum_table(table_name, enum_type, "ordinal", is_idempotent)

    def text_enum_table(
        self, table_name: str, enum_type: Type[Enum], is_idempotent: bool = False
    ) -> EnumTable:
        return self._enum_table(table_name, enum_type, "textual", is_idempotent)

    def safe_view(
        self, view_name: str, shape: ViewShape, body: Union[SqlTemplate, str]
    ) -> View:
        return View(view_name, shape, body)


__all__ = [
    "DomainFactory",
    "Keys",
    "Constraints",
    "Housekeeping",
    "PersistRequest",
    "LintSummary",
    "SqlTemplateState",
    "GovernedModel",
]
