"""PlantUML information-engineering (IE) diagrams from a rendered script.

The diagram is a projection of the emission context's symbol table: one
entity per declared table and one relationship line per foreign key edge,
both in declaration order. Nothing is recomputed from the schema objects
beyond column types and nullability.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from sql_aide.infrastructure.emit.context import EmissionContext, ForeignKeyEdge
from sql_aide.infrastructure.exceptions import SqlConstructionError
from sql_aide.utils.logging import get_logger

logger = get_logger(__name__)

SKIN_PARAMS = [
    "hide circle",
    "skinparam linetype ortho",
    "skinparam roundcorner 20",
    "skinparam class {",
    "  BackgroundColor White",
    "  ArrowColor Silver",
    "  BorderColor Silver",
    "  FontColor Black",
    "  FontSize 12",
    "}",
]


@dataclass(frozen=True)
class ErdOptions:
    """Diagram options.

    Attributes:
        title: Name after ``@startuml``
        relationship: IE notation used for every foreign key edge
        indent: Indentation unit of the generated text
    """

    title: str = "IE"
    relationship: str = "|o..o{"
    indent: str = "  "


@dataclass(frozen=True)
class ErdContent:
    name: str
    content: str


def _entity(table, ctx: EmissionContext, indent: str) -> List[str]:
    lines = [f'{indent}entity "{table.table_name}" as {table.table_name} {{']
    body = indent * 2
    for name, domain in table.domains.items():
        marker = "  " if domain.is_nullable() else "* "
        data_type = domain.sql_data_type("diagram", ctx)
        if name == table.primary_key:
            lines.insert(1, f"{body}{marker}**{name}**: {data_type}")
            lines.insert(2, f"{body}--")
        else:
            lines.append(f"{body}{marker}{name}: {data_type}")
    lines.append(f"{indent}}}")
    return lines


def _check_edge(edge: ForeignKeyEdge, ctx: EmissionContext) -> None:
    target = ctx.declared_tables.get(edge.target_table)
    if target is None:
        raise SqlConstructionError(
            f"Foreign key {edge.source_table}.{edge.source_column} references "
            f"undeclared table {edge.target_table}",
            subject=edge.source_table,
        )
    if not target.is_key_column(edge.target_column):
        raise SqlConstructionError(
            f"Foreign key {edge.source_table}.{edge.source_column} references "
            f"{edge.target_table}.{edge.target_column}, which is not a key column",
            subject=edge.source_table,
        )


def plantuml_ie_erd(
    ctx: EmissionContext, options: Optional[ErdOptions] = None
) -> ErdContent:
    """
    Render the declared tables and foreign keys of ``ctx`` as PlantUML.

    Args:
        ctx: Context of a completed render
        options: Diagram options; the title defaults to the configured erd_title

    Returns:
        ErdContent with the diagram name and text

    Raises:
        SqlConstructionError: If a foreign key edge points at an undeclared table
            or a non-key column
    """
    if options is None:
        from sql_aide.config import get_settings

        options = ErdOptions(title=get_settings().erd_title)
    indent = options.indent

    for edge in ctx.foreign_keys:
        _check_edge(edge, ctx)

    lines = [f"@startuml {options.title}"]
    lines.extend(f"{indent}{param}" for param in SKIN_PARAMS)
    for table in ctx.declared_tables.values():
        lines.append("")
        lines.extend(_entity(table, ctx, indent))
    if ctx.foreign_keys:
        lines.append("")
        lines.extend(
            f"{indent}{edge.target_table} {options.relationship} {edge.source_table}"
            for edge in ctx.foreign_keys
        )
    lines.append("@enduml")

    logger.info(
        "erd.generated",
        title=options.title,
        entities=len(ctx.declared_tables),
        relationships=len(ctx.foreign_keys),
    )
    return ErdContent(name=options.title, content="\n".join(lines))
