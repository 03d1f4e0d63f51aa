"""Views with explicit output column lists."""

from __future__ import annotations

from typing import Any, List, Mapping, Sequence, Type, Union

from pydantic import BaseModel

from sql_aide.infrastructure.emit.context import EmissionContext
from sql_aide.infrastructure.emit.template import SqlTemplate, emit
from sql_aide.infrastructure.exceptions import SqlConstructionError

from .table import Table

ViewShape = Union[Table, Mapping[str, Any], Type[BaseModel], Sequence[str]]


def shape_columns(shape: ViewShape) -> List[str]:
    """Column names of a row shape, in declaration order."""
    if isinstance(shape, Table):
        return list(shape.domains.keys())
    if isinstance(shape, type) and issubclass(shape, BaseModel):
        return list(shape.model_fields.keys())
    if isinstance(shape, Mapping):
        return list(shape.keys())
    if isinstance(shape, str):
        raise SqlConstructionError("View shape must be a collection of columns", subject=shape)
    return list(shape)


class View:
    """``CREATE VIEW`` over a caller-supplied query body."""

    target = "view"

    def __init__(
        self, view_name: str, shape: ViewShape, body: Union[SqlTemplate, str]
    ) -> None:
        if not view_name:
            raise SqlConstructionError("View name must be non-empty")
        self.view_name = view_name
        self.column_names = shape_columns(shape)
        if not self.column_names:
            raise SqlConstructionError(
                "View needs an explicit, non-empty column list", subject=view_name
            )
        self.body = SqlTemplate(body) if isinstance(body, str) else body

    def __repr__(self) -> str:
        return f"View({self.view_name!r})"

    def render(self, ctx: EmissionContext) -> str:
        naming = ctx.naming
        columns = ", ".join(naming.column_name(name) for name in self.column_names)
        body = emit(self.body, ctx, self.view_name)
        return (
            f"{ctx.dialect.create_view_prefix()} {naming.view_name(self.view_name)}"
            f"({columns}) AS\n    {body};"
        )

    def declare_symbol(self, ctx: EmissionContext) -> None:
        ctx.declare_view(self.view_name, self)

    def report_diagnostics(self, ctx: EmissionContext, text: str) -> None:
        if not ctx.mark_reported(self.target, self.view_name):
            return
        _, _, body = text.partition(" AS\n")
        ctx.lint(
            self.target,
            self.view_name,
            text,
            {"body": body, "columns": list(self.column_names)},
        )


__all__ = ["View", "ViewShape", "shape_columns"]
