"""
Schema layer: field descriptors, SQL domains and governed entities.

Usage:
    >>> from sql_aide.infrastructure.schema import GovernedModel
    >>> gm = GovernedModel.typical()
    >>> host_type = gm.ordinal_enum_table("host_type", HostType)
"""

from .core import (
    FieldDescriptor,
    ForeignKeyRef,
    PrimaryKeyStyle,
    SqlExpression,
    TypeKind,
    WrapperKind,
)
from .domain import (
    SQL_DOMAIN_HAS_NO_IDENTITY_FROM_SHAPE,
    SQL_DOMAIN_NOT_IN_COLLECTION,
    SqlDomain,
)
from .domain_registry import SqlDomainRegistry, default_registry
from .enum_table import EnumTable
from .governed import (
    Constraints,
    DomainFactory,
    GovernedModel,
    Housekeeping,
    Keys,
    LintSummary,
    PersistRequest,
    SqlTemplateState,
)
from .pydantic_adapter import descriptor_from_annotation, descriptors_from_model
from .registry import get_domain_builder, list_domain_kinds, register_domain_builder
from .table import Column, ColumnList, InsertDML, SelectDML, Table
from .view import View

__all__ = [
    "FieldDescriptor",
    "ForeignKeyRef",
    "PrimaryKeyStyle",
    "SqlExpression",
    "TypeKind",
    "WrapperKind",
    "SQL_DOMAIN_HAS_NO_IDENTITY_FROM_SHAPE",
    "SQL_DOMAIN_NOT_IN_COLLECTION",
    "SqlDomain",
    "SqlDomainRegistry",
    "default_registry",
    "register_domain_builder",
    "get_domain_builder",
    "list_domain_kinds",
    "Table",
    "Column",
    "ColumnList",
    "InsertDML",
    "SelectDML",
    "EnumTable",
    "View",
    "DomainFactory",
    "Keys",
    "Constraints",
    "Housekeeping",
    "PersistRequest",
    "LintSummary",
    "SqlTemplateState",
    "GovernedModel",
    "descriptor_from_annotation",
    "descriptors_from_model",
]
