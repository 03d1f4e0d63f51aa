"""Nested SQL template emission engine.

Templates are ``str.format``-style text whose placeholders are filled by
SQL text suppliers: any object exposing ``render(ctx) -> str`` and, optionally,
``declare_symbol(ctx)`` and ``report_diagnostics(ctx, text)`` hooks.

Rendering is depth-first, left to right and single pass. A supplier's symbols
and diagnostics are merged into the shared context before the parent template
moves on to the next placeholder, so later fragments can observe earlier
declarations. Deferred suppliers (lint summaries) are the one exception: they
leave a marker that is replaced once the whole pass has finished.

Literal braces in SQL must be doubled (``'{{}}'``).

Usage:
    >>> script = SqlTemplate('''
    ...     {host_type}
    ...
    ...     {host_type_seed}''', host_type=host_type, host_type_seed=host_type.seed_dml)
    >>> text = render_script(script, EmissionContext())
"""

from __future__ import annotations

import textwrap
from decimal import Decimal
from string import Formatter
from typing import Any, Optional, Protocol

from sql_aide.infrastructure.exceptions import SqlConstructionError
from sql_aide.utils.logging import get_logger

from .context import EmissionContext

logger = get_logger(__name__)

_formatter = Formatter()


class SqlTextSupplier(Protocol):
    """Anything that can render itself into SQL text."""

    def render(self, ctx: EmissionContext) -> str: ...


def unindent_whitespace(text: str) -> str:
    """Drop a leading blank line, common indentation and trailing whitespace."""
    if text.startswith("\n"):
        text = text[1:]
    return textwrap.dedent(text).rstrip()


def emit(value: Any, ctx: EmissionContext, subject: Optional[str] = None) -> str:
    """Render one interpolated value and merge its side channels into ``ctx``."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return str(value)
    if getattr(value, "is_deferred", False):
        marker = f"\x00deferred-{len(ctx._deferred)}\x00"
        ctx._deferred[marker] = value
        return marker
    if hasattr(value, "render"):
        text = value.render(ctx)
        declare = getattr(value, "declare_symbol", None)
        if callable(declare):
            declare(ctx)
        report = getattr(value, "report_diagnostics", None)
        if callable(report):
            report(ctx, text)
        return text
    if isinstance(value, (list, tuple)):
        return "\n".join(emit(item, ctx, subject) for item in value)

    ctx.raise_engine_issue(
        "unexpected-interpolation",
        f"value of type {type(value).__name__} is not a SQL text supplier",
        subject,
    )
    return str(value)


class SqlTemplate:
    """Literal text with nested SQL text suppliers."""

    def __init__(self, text: str, /, **suppliers: Any) -> None:
        self.text = unindent_whitespace(text)
        self.suppliers = suppliers

    def render(self, ctx: EmissionContext) -> str:
        try:
            parsed = list(_formatter.parse(self.text))
        except ValueError as e:
            raise SqlConstructionError(f"Malformed SQL template: {e}") from e

        parts = []
        for literal, field_name, _format_spec, _conversion in parsed:
            parts.append(literal)
            if field_name is None:
                continue
            if not field_name or field_name.isdigit():
                raise SqlConstructionError(
                    "SQL templates only support named placeholders", subject=self.text[:40]
                )
            try:
                value, _ = _formatter.get_field(field_name, (), self.suppliers)
            except (KeyError, AttributeError, IndexError) as e:
                raise SqlConstructionError(
                    f"Template placeholder '{field_name}' has no supplier",
                    subject=field_name,
                ) from e
            parts.append(emit(value, ctx, field_name))
        return "".join(parts)

    def sql(self, ctx: Optional[EmissionContext] = None) -> str:
        """Render as a complete script in a fresh (or the given) context."""
        return render_script(self, ctx if ctx is not None else EmissionContext())


def render_script(supplier: Any, ctx: EmissionContext) -> str:
    """Top-level render: one pass over the tree, then deferred suppliers."""
    text = emit(supplier, ctx)
    for marker, deferred in ctx._deferred.items():
        text = text.replace(marker, deferred.render(ctx))
    ctx._deferred.clear()
    logger.info(
        "render.completed",
        dialect=ctx.dialect.name,
        tables_declared=len(ctx.declared_tables),
        views_declared=len(ctx.declared_views),
        lint_issues=len(ctx.lint_issues),
        engine_issues=len(ctx.engine_issues),
    )
    return text
