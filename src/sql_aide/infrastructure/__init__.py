"""
Infrastructure Layer

Components:
- sql: identifier quoting, literals, naming strategy, dialects, statement builders
- emit: emission context, nested template engine and lint manager
- schema: field descriptors, SQL domains, tables, enum tables, views
- diagram: ERD derivation from the post-render symbol table

Usage:
    from sql_aide.infrastructure.schema import GovernedModel
    from sql_aide.infrastructure.emit import SqlTemplate
"""

__all__: list[str] = []
