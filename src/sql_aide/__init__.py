"""
SQL Aide - typed schema descriptions to SQL artifacts.

Generates idempotent DDL, enum seed DML, insert/select statements, dialect
domain definitions and entity-relationship diagrams from one set of typed
field descriptors, with a lint pass over the generated text.
"""

__version__ = "0.1.0"
