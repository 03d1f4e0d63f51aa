"""Domain registry: typed field descriptors to SQL domains.

``resolve`` peels OPTIONAL/DEFAULT wrapper layers in a loop, recording each
peeled layer in ``parents``, then dispatches on the base ``TypeKind``.

``resolve_cached`` memoizes the domain on the descriptor itself so a
descriptor shared by several columns yields one domain instance. The first
use with an identity upgrades the cached domain's identity; ``force_create``
discards the cached domain and builds a fresh one for a second identity.

``detach`` removes cached domains from every layer of a descriptor chain.
Wrapper layers are shared decoration points, so a stale attachment would
otherwise leak into unrelated columns.
"""

from __future__ import annotations

from typing import Optional, Sequence

from sql_aide.utils.logging import get_logger

from .core import FieldDescriptor, WrapperKind
from .domain import SqlDomain
from .registry import DomainInit, get_domain_builder

logger = get_logger(__name__)


class SqlDomainRegistry:
    """Resolves field descriptors into (optionally cached) SQL domains."""

    def resolve(
        self,
        descriptor: FieldDescriptor,
        identity: Optional[str] = None,
        is_optional: bool = False,
        parents: Optional[Sequence[FieldDescriptor]] = None,
    ) -> SqlDomain:
        """
        Build a new domain for ``descriptor``.

        Args:
            descriptor: Possibly wrapped field descriptor
            identity: Explicit identity (column or domain name)
            is_optional: Optionality override
            parents: Wrapper layers already peeled by the caller

        Raises:
            UnsupportedTypeError: If no builder exists for the base type
        """
        init = DomainInit(
            identity=identity, is_optional=is_optional, parents=list(parents or [])
        )
        current = descriptor
        while current.wrapper is not None:
            if current.wrapper == WrapperKind.OPTIONAL:
                init.is_optional = True
            init.parents.append(current)
            current = current.inner  # type: ignore[assignment]

        ref = current.references
        if ref is not None and ref.table is not None:
            init.insert_value_transform = getattr(ref.table, "code_of", None)

        builder = get_domain_builder(current.kind)  # type: ignore[arg-type]
        return builder(descriptor, current, init)

    def resolve_cached(
        self,
        descriptor: FieldDescriptor,
        identity: Optional[str] = None,
        force_create: bool = False,
    ) -> SqlDomain:
        """Return the domain attached to ``descriptor``, creating it if needed."""
        domain = descriptor.sql_domain
        if domain is not None:
            if not force_create:
                if not domain.is_identity_assigned:
                    if identity:
                        domain.assign_identity(identity)
                    else:
                        domain.mark_shape_without_identity()
                return domain
            logger.debug(
                "domain.recreated",
                previous_identity=domain.identity,
                identity=identity,
            )
            self.detach(descriptor)

        domain = self.resolve(descriptor, identity)
        if not identity:
            domain.mark_shape_without_identity()
        descriptor.sql_domain = domain
        return domain

    def detach(self, descriptor: FieldDescriptor) -> None:
        """Remove any attached domain from every layer of the chain."""
        for layer in descriptor.layers():
            layer.sql_domain = None


default_registry = SqlDomainRegistry()


__all__ = ["SqlDomainRegistry", "default_registry"]
