"""Per-render emission context.

An ``EmissionContext`` is created for one top-level render call and owned by
it exclusively. Besides the dialect and naming strategy it collects the side
channels populated while suppliers render: declared tables, views and
domains, foreign-key edges, lint diagnostics and persistence requests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Set, Tuple

from sql_aide.infrastructure.sql.core.naming import QuoteMode, SqlNamingStrategy
from sql_aide.infrastructure.sql.dialects import SqlDialect, get_dialect
from sql_aide.utils.logging import get_logger

from .lint import Diagnostic, Severity, SqlLintManager

logger = get_logger(__name__)

PersistHook = Callable[[str, str], None]


@dataclass(frozen=True)
class ForeignKeyEdge:
    """One foreign key in the post-render symbol table."""

    source_table: str
    source_column: str
    target_table: str
    target_column: str


class EmissionContext:
    """State threaded through a single render pass."""

    def __init__(
        self,
        dialect: Optional[SqlDialect] = None,
        naming: Optional[SqlNamingStrategy] = None,
        lint_manager: Optional[SqlLintManager] = None,
        persist: Optional[PersistHook] = None,
        quote_mode: Optional[QuoteMode] = None,
    ) -> None:
        if dialect is None or quote_mode is None:
            from sql_aide.config import get_settings

            settings = get_settings()
            dialect = dialect or get_dialect(settings.dialect)
            quote_mode = quote_mode or settings.quote_mode
        self.dialect = dialect
        self.naming = naming or dialect.naming_strategy(quote_mode)
        self.lint_manager = lint_manager or SqlLintManager.from_settings()
        self.persist = persist

        self.declared_tables: Dict[str, Any] = {}
        self.declared_views: Dict[str, Any] = {}
        self.declared_domains: Dict[str, Any] = {}
        self.foreign_keys: List[ForeignKeyEdge] = []
        self.lint_issues: List[Diagnostic] = []
        self.engine_issues: List[Diagnostic] = []
        self.persisted: List[Tuple[str, str]] = []

        self._reported: Set[Tuple[str, str]] = set()
        self._deferred: Dict[str, Any] = {}

    # ------------------------------------------------------------------
    # Symbol table
    # ------------------------------------------------------------------

    def declare_table(self, name: str, table: Any) -> bool:
        """Register a table; returns False when it was already declared."""
        if name in self.declared_tables:
            return False
        self.declared_tables[name] = table
        logger.debug("table.declared", table=name)
        return True

    def declare_view(self, name: str, view: Any) -> bool:
        if name in self.declared_views:
            return False
        self.declared_views[name] = view
        logger.debug("view.declared", view=name)
        return True

    def declare_domain(self, name: str, domain: Any) -> bool:
        if name in self.declared_domains:
            return False
        self.declared_domains[name] = domain
        return True

    def add_foreign_key(self, edge: ForeignKeyEdge) -> None:
        self.foreign_keys.append(edge)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def mark_reported(self, target: str, subject: str) -> bool:
        """True the first time (target, subject) reports in this render pass."""
        key = (target, subject)
        if key in self._reported:
            return False
        self._reported.add(key)
        return True

    def lint(
        self, target: str, subject: str, fragment: str, metadata: Mapping[str, Any]
    ) -> List[Diagnostic]:
        """Run the lint rules for ``target`` and collect their diagnostics."""
        issues = self.lint_manager.inspect(target, subject, fragment, metadata)
        self.lint_issues.extend(issues)
        return issues

    def raise_lint_issue(self, *issues: Diagnostic) -> None:
        self.lint_issues.extend(issues)

    def raise_engine_issue(
        self, code: str, message: str, subject: Optional[str] = None
    ) -> None:
        self.engine_issues.append(
            Diagnostic(code=code, message=message, severity=Severity.WARNING, subject=subject)
        )

    @property
    def diagnostics(self) -> List[Diagnostic]:
        """All diagnostics of this render, SQL text issues first."""
        return [*self.lint_issues, *self.engine_issues]

    # ------------------------------------------------------------------
    # Literals and persistence
    # ------------------------------------------------------------------

    def literal(self, value: Any) -> str:
        return self.dialect.literal(value)

    def persistence_request(self, fragment: str, logical_tag: str) -> str:
        """Record an out-of-band write request and hand it to the persist hook."""
        indexed_tag = f"{len(self.persisted) + 1}_{logical_tag}"
        self.persisted.append((indexed_tag, fragment))
        if self.persist is not None:
            self.persist(fragment, indexed_tag)
        logger.debug("persistence.requested", tag=indexed_tag, fragment=fragment)
        return indexed_tag
