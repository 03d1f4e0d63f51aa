"""Construction errors raised while building or rendering SQL artifacts.

Construction errors are fatal: the builder operation that detects them
raises immediately and no partial SQL is returned. Non-fatal findings are
lint diagnostics instead (see ``sql_aide.infrastructure.emit.lint``).
"""

from typing import Dict, Optional


class SqlConstructionError(Exception):
    """Structured error for schema construction and render failures."""

    def __init__(self, message: str, subject: Optional[str] = None):
        self.subject = subject
        super().__init__(message)

    def __str__(self) -> str:
        if self.subject:
            return f"{self.args[0]} (subject: {self.subject})"
        return self.args[0]

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Convert to structured dict for logging."""
        return {
            "error_type": type(self).__name__,
            "subject": self.subject,
            "message": self.args[0],
        }


class UnsupportedTypeError(SqlConstructionError):
    """Raised when no domain builder exists for a field's base type."""

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(
            f"Unable to map type {type_name} to SQL domain", subject=type_name
        )
