"""SQL lint diagnostics and pluggable quality rules.

Rules inspect rendered text and structural metadata and return diagnostics
instead of raising. Suppliers call ``SqlLintManager.inspect`` while they are
being emitted, so diagnostics accumulate in the emission context in render
order and surface both as SQL comments and as a structured list.

Usage:
    >>> manager = SqlLintManager.typical()
    >>> issues = manager.inspect("view", "publ_host_vw", "SELECT * FROM t", {})
    >>> issues[0].code
    'wildcard-select'
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import (
    Any,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Mapping,
    Optional,
    Protocol,
    Sequence,
)

from sql_aide.utils.logging import get_logger

logger = get_logger(__name__)


class Severity(str, Enum):
    """Diagnostic severities."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    """A single lint finding.

    Attributes:
        code: Stable rule code (e.g. 'wildcard-select')
        message: Human-readable description
        severity: info, warning or error
        subject: Name of the table/view/template that produced it
    """

    code: str
    message: str
    severity: Severity = Severity.WARNING
    subject: Optional[str] = None

    def as_sql_comment(self) -> str:
        subject = f" ({self.subject})" if self.subject else ""
        return f"-- [{self.severity.value}] {self.code}{subject}: {self.message}"


class SqlLintRule(Protocol):
    """A rule is ``(rendered fragment, structural metadata) -> diagnostics``."""

    code: str
    targets: FrozenSet[str]

    def check(
        self, subject: str, fragment: str, metadata: Mapping[str, Any]
    ) -> List[Diagnostic]: ...


WILDCARD_SELECT = re.compile(
    r"\bSELECT\s+(?:DISTINCT\s+)?(?:[\w\"]+\.)?\*", re.IGNORECASE
)


class WildcardSelectRule:
    """Flag ``SELECT *`` in view bodies; views must list their columns."""

    code = "wildcard-select"
    targets = frozenset({"view"})

    def check(
        self, subject: str, fragment: str, metadata: Mapping[str, Any]
    ) -> List[Diagnostic]:
        body = metadata.get("body", fragment)
        if not WILDCARD_SELECT.search(body):
            return []
        return [
            Diagnostic(
                code=self.code,
                message="SELECT * is not allowed in a view body, list the columns explicitly",
                subject=subject,
            )
        ]


class MissingPrimaryKeyRule:
    """Flag tables declared without a primary key."""

    code = "missing-primary-key"
    targets = frozenset({"table"})

    def check(
        self, subject: str, fragment: str, metadata: Mapping[str, Any]
    ) -> List[Diagnostic]:
        if metadata.get("primary_key"):
            return []
        return [
            Diagnostic(
                code=self.code,
                message="table has no primary key",
                subject=subject,
            )
        ]


class MissingAuditColumnRule:
    """Flag mutable/deletable tables that lack the matching audit column."""

    targets = frozenset({"table"})

    def __init__(self, code: str, governance_flag: str, audit_column: str):
        self.code = code
        self.governance_flag = governance_flag
        self.audit_column = audit_column

    def check(
        self, subject: str, fragment: str, metadata: Mapping[str, Any]
    ) -> List[Diagnostic]:
        if not metadata.get(self.governance_flag):
            return []
        if self.audit_column in metadata.get("columns", ()):
            return []
        return [
            Diagnostic(
                code=self.code,
                message=(
                    f"rows are declared {self.governance_flag.replace('rows_', '')} "
                    f"but the table has no {self.audit_column} column"
                ),
                subject=subject,
            )
        ]


class UndeclaredReferenceRule:
    """Flag foreign keys whose target table was not declared earlier in the render."""

    code = "undeclared-reference"
    targets = frozenset({"table"})

    def check(
        self, subject: str, fragment: str, metadata: Mapping[str, Any]
    ) -> List[Diagnostic]:
        return [
            Diagnostic(
                code=self.code,
                message=f"foreign key references {target}, which is not declared before this table",
                subject=subject,
            )
            for target in metadata.get("undeclared_references", ())
        ]


def typical_rules() -> List[SqlLintRule]:
    """Built-in governance rules."""
    return [
        WildcardSelectRule(),
        MissingPrimaryKeyRule(),
        MissingAuditColumnRule("missing-update-audit", "rows_mutable", "updated_at"),
        MissingAuditColumnRule("missing-delete-audit", "rows_deletable", "deleted_at"),
        UndeclaredReferenceRule(),
    ]


class SqlLintManager:
    """Registry of lint rules applied to suppliers while they are emitted."""

    def __init__(
        self,
        rules: Optional[Iterable[SqlLintRule]] = None,
        disabled: Sequence[str] = (),
        severity_overrides: Optional[Mapping[str, str]] = None,
        name: str = "custom",
    ) -> None:
        self.name = name
        self._rules: Dict[str, SqlLintRule] = {}
        self.disabled = set(disabled)
        self.severity_overrides = {
            code: Severity(value) for code, value in (severity_overrides or {}).items()
        }
        for rule in rules or ():
            self.register(rule)

    @classmethod
    def typical(
        cls,
        disabled: Sequence[str] = (),
        severity_overrides: Optional[Mapping[str, str]] = None,
    ) -> "SqlLintManager":
        return cls(typical_rules(), disabled, severity_overrides, name="typical")

    @classmethod
    def from_settings(cls) -> "SqlLintManager":
        """Build the typical manager honouring settings and the YAML lint config."""
        from sql_aide.config import get_settings, load_lint_config

        settings = get_settings()
        disabled = list(settings.disabled_lint_rules)
        overrides: Dict[str, str] = {}
        if settings.lint_config:
            lint_config = load_lint_config(settings.lint_config)
            disabled.extend(lint_config.disabled_rules())
            overrides.update(lint_config.severity_overrides())
        return cls.typical(disabled, overrides)

    def register(self, rule: SqlLintRule) -> None:
        if rule.code in self._rules:
            raise ValueError(f"Lint rule '{rule.code}' is already registered.")
        self._rules[rule.code] = rule

    def rule_codes(self) -> List[str]:
        return list(self._rules.keys())

    def inspect(
        self,
        target: str,
        subject: str,
        fragment: str,
        metadata: Mapping[str, Any],
    ) -> List[Diagnostic]:
        """Run every enabled rule that applies to ``target`` ('table', 'view')."""
        issues: List[Diagnostic] = []
        for code, rule in self._rules.items():
            if code in self.disabled or target not in rule.targets:
                continue
            for issue in rule.check(subject, fragment, metadata):
                if issue.code in self.severity_overrides:
                    issue = replace(issue, severity=self.severity_overrides[issue.code])
                issues.append(issue)
        if issues:
            logger.debug(
                "lint.issue_raised",
                target=target,
                subject=subject,
                codes=[i.code for i in issues],
                fragment=fragment,
            )
        return issues
