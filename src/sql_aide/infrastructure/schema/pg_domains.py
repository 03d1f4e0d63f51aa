"""PostgreSQL-only domain kinds: ``CREATE DOMAIN`` definitions and serials.

Usage:
    >>> ext = PostgreSQLDialect().domain_extensions
    >>> defn = ext.domain_definition(domains.text(), "person_name", is_idempotent=True)
    >>> SqlTemplate("{defn}", defn=defn).sql(EmissionContext(dialect=PostgreSQLDialect()))
    'DO $$ BEGIN CREATE DOMAIN "person_name" AS TEXT; EXCEPTION WHEN DUPLICATE_OBJECT THEN NULL; END $$;'
"""

from __future__ import annotations

from typing import Callable, Optional, Union

from sql_aide.infrastructure.emit.context import EmissionContext
from sql_aide.utils.logging import get_logger

from .core import FieldDescriptor, TypeKind
from .domain import SqlDomain
from .domain_registry import SqlDomainRegistry, default_registry

logger = get_logger(__name__)

DuplicateWarning = Callable[[str, EmissionContext], str]


class PgDomainDefinition:
    """Renders ``CREATE DOMAIN`` for one named domain."""

    def __init__(
        self,
        domain: SqlDomain,
        domain_name: str,
        is_idempotent: bool = False,
        warn_on_duplicate: Optional[DuplicateWarning] = None,
        indent: Optional[str] = None,
    ) -> None:
        self.domain = domain
        self.domain_name = domain_name
        self.is_idempotent = is_idempotent
        self.warn_on_duplicate = warn_on_duplicate
        self.indent = indent

    def render(self, ctx: EmissionContext) -> str:
        identifier = ctx.naming.domain_name(self.domain_name)
        as_type = self.domain.sql_data_type("PostgreSQL domain", ctx)
        create = f"CREATE DOMAIN {identifier} AS {as_type};"
        if not self.is_idempotent:
            return create

        hffi = self.indent
        if self.warn_on_duplicate is not None:
            warning = ctx.literal(self.warn_on_duplicate(identifier, ctx))
            handler = f"RAISE NOTICE {warning};"
        elif hffi:
            handler = "NULL; -- ignore error without warning"
        else:
            handler = "NULL;"

        if not hffi:
            return (
                f"DO $$ BEGIN {create} "
                f"EXCEPTION WHEN DUPLICATE_OBJECT THEN {handler} END $$;"
            )
        return "\n".join(
            [
                "DO $$",
                "BEGIN",
                f"{hffi}{create}",
                "EXCEPTION",
                f"{hffi}WHEN DUPLICATE_OBJECT THEN",
                f"{hffi}{hffi}{handler}",
                "END",
                "$$;",
            ]
        )

    def declare_symbol(self, ctx: EmissionContext) -> None:
        if ctx.declare_domain(self.domain_name, self.domain):
            logger.debug("domain.declared", domain=self.domain_name)


class PostgreSQLDomainExtensions:
    """``DialectDomainExtensions`` implementation for PostgreSQL."""

    def __init__(self, registry: Optional[SqlDomainRegistry] = None) -> None:
        self.registry = registry or default_registry

    def domain_definition(
        self,
        domain: Union[SqlDomain, FieldDescriptor],
        domain_name: str,
        is_idempotent: bool = False,
        warn_on_duplicate: Optional[DuplicateWarning] = None,
        indent: Optional[str] = None,
    ) -> PgDomainDefinition:
        """
        Build a ``CREATE DOMAIN`` supplier.

        Args:
            domain: Domain, or a descriptor resolved under ``domain_name``
            domain_name: Name of the server-side domain
            is_idempotent: Wrap the statement so an existing domain is not an error
            warn_on_duplicate: Produces the NOTICE text raised for an existing domain
            indent: When given, render over several lines using this indent
        """
        if isinstance(domain, FieldDescriptor):
            resolved = self.registry.resolve_cached(domain, identity=domain_name)
            if resolved.identity != domain_name:
                resolved = self.registry.resolve_cached(
                    domain, identity=domain_name, force_create=True
                )
            domain = resolved
        return PgDomainDefinition(
            domain, domain_name, is_idempotent, warn_on_duplicate, indent
        )

    def serial(self) -> FieldDescriptor:
        return FieldDescriptor(kind=TypeKind.INTEGER)

    def serial_nullable(self) -> FieldDescriptor:
        return FieldDescriptor(kind=TypeKind.INTEGER).optional()


__all__ = ["PgDomainDefinition", "PostgreSQLDomainExtensions", "DuplicateWarning"]
