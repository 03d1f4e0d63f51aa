"""Field descriptors from pydantic models.

Lets a pydantic v2 model act as the schema description of a table:

    >>> class PublHost(BaseModel):
    ...     publ_host_id: str
    ...     host_identity: Optional[str] = None
    ...     notes: Annotated[str, Field(max_length=39)] = "none"
    >>> table = Table("publ_host", descriptors_from_model(PublHost))

``Optional[...]`` becomes an OPTIONAL wrapper, a field default becomes a
DEFAULT wrapper, and ``max_length`` metadata selects VARCHAR. Annotations
with no SQL counterpart map to ``TypeKind.ANY`` and fail when resolved.
"""

from __future__ import annotations

import types
import typing
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Type, Union

from pydantic import BaseModel
from pydantic.fields import FieldInfo
from pydantic_core import PydanticUndefined

from .core import FieldDescriptor, TypeKind

_SCALAR_KINDS: Dict[Any, TypeKind] = {
    bool: TypeKind.BOOLEAN,
    int: TypeKind.INTEGER,
    float: TypeKind.FLOAT,
    Decimal: TypeKind.FLOAT,
    str: TypeKind.TEXT,
    datetime: TypeKind.DATETIME,
    date: TypeKind.DATE,
}


def _unwrap_optional(annotation: Any) -> Tuple[Any, bool]:
    origin = typing.get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0], True
    return annotation, False


def _max_length(field_info: Optional[FieldInfo]) -> Optional[int]:
    if field_info is None:
        return None
    for item in field_info.metadata:
        value = getattr(item, "max_length", None)
        if value is not None:
            return value
    return None


def _kind_of(annotation: Any) -> TypeKind:
    origin = typing.get_origin(annotation)
    if origin is typing.Annotated:
        return _kind_of(typing.get_args(annotation)[0])
    if origin in (list, tuple):
        args = typing.get_args(annotation)
        if args and args[0] is float:
            return TypeKind.FLOAT_ARRAY
        return TypeKind.JSON_TEXT
    if origin is dict or annotation in (dict, list):
        return TypeKind.JSON_TEXT
    if isinstance(annotation, type) and issubclass(annotation, Enum):
        if issubclass(annotation, int):
            return TypeKind.INTEGER
        return TypeKind.TEXT
    for python_type, kind in _SCALAR_KINDS.items():
        if annotation is python_type:
            return kind
    return TypeKind.ANY


def descriptor_from_annotation(
    annotation: Any, field_info: Optional[FieldInfo] = None
) -> FieldDescriptor:
    """Build a (possibly wrapped) descriptor for one annotated field."""
    inner, is_optional = _unwrap_optional(annotation)
    kind = _kind_of(inner)
    max_length = _max_length(field_info)
    if kind == TypeKind.TEXT and max_length:
        kind = TypeKind.VARCHAR

    description = (field_info.description or "") if field_info is not None else ""
    descriptor = FieldDescriptor(kind=kind, max_length=max_length, description=description)

    has_default = field_info is not None and not field_info.is_required()
    default = field_info.default if has_default else None
    # default_factory values have no SQL counterpart
    if is_optional or (has_default and default in (None, PydanticUndefined)):
        descriptor = descriptor.optional()
    if default is not PydanticUndefined and default is not None:
        descriptor = descriptor.default(default)
    return descriptor


def descriptors_from_model(model: Type[BaseModel]) -> Dict[str, FieldDescriptor]:
    """Ordered column descriptors for every field of a pydantic model."""
    return {
        name: descriptor_from_annotation(info.annotation, info)
        for name, info in model.model_fields.items()
    }


__all__ = ["descriptor_from_annotation", "descriptors_from_model"]
