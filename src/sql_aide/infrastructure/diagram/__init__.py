"""Diagram derivation from the emission symbol table."""

from .erd import ErdContent, ErdOptions, plantuml_ie_erd

__all__ = ["ErdContent", "ErdOptions", "plantuml_ie_erd"]
