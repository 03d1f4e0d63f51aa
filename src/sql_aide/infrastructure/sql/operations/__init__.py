"""Statement builders."""

from .insert import InsertBuilder
from .select import SelectBuilder

__all__ = ["InsertBuilder", "SelectBuilder"]
