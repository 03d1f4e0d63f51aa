"""SQL dialects and dialect lookup."""

from typing import Dict, List

from .base import DialectDomainExtensions, SqlDialect
from .postgresql import PostgreSQLDialect
from .sqlite import SQLiteDialect

_DIALECTS: Dict[str, SqlDialect] = {
    "sqlite": SQLiteDialect(),
    "postgresql": PostgreSQLDialect(),
}


def get_dialect(name: str) -> SqlDialect:
    """Retrieve a dialect by name."""
    if name not in _DIALECTS:
        available = list(_DIALECTS.keys())
        raise KeyError(f"Dialect '{name}' not found. Available: {available}")
    return _DIALECTS[name]


def list_dialects() -> List[str]:
    """List all registered dialect names."""
    return sorted(_DIALECTS.keys())


__all__ = [
    "SqlDialect",
    "DialectDomainExtensions",
    "SQLiteDialect",
    "PostgreSQLDialect",
    "get_dialect",
    "list_dialects",
]
