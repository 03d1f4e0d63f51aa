"""Template emission engine, emission context and lint pass."""

from .context import EmissionContext, ForeignKeyEdge
from .lint import (
    Diagnostic,
    MissingAuditColumnRule,
    MissingPrimaryKeyRule,
    Severity,
    SqlLintManager,
    SqlLintRule,
    UndeclaredReferenceRule,
    WildcardSelectRule,
)
from .template import SqlTemplate, SqlTextSupplier, emit, render_script, unindent_whitespace

__all__ = [
    "EmissionContext",
    "ForeignKeyEdge",
    "Diagnostic",
    "Severity",
    "SqlLintRule",
    "SqlLintManager",
    "WildcardSelectRule",
    "MissingPrimaryKeyRule",
    "MissingAuditColumnRule",
    "UndeclaredReferenceRule",
    "SqlTemplate",
    "SqlTextSupplier",
    "emit",
    "render_script",
    "unindent_whitespace",
]
