"""Audit rule and finding models."""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Pattern

from ..config.models import AuditRuleConfig, Severity


@dataclass(frozen=True)
class AuditRule:
    """A textual risk pattern paired with a severity.

    Patterns are literal substrings unless ``regex`` is set.
    """

    id: str
    pattern: str
    severity: Severity = Severity.WARNING
    message: Optional[str] = None
    regex: bool = False
    _compiled: Optional[Pattern[str]] = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        if self.regex:
            object.__setattr__(self, "_compiled", re.compile(self.pattern))

    @classmethod
    def from_config(cls, config: AuditRuleConfig) -> "AuditRule":
        return cls(
            id=config.id,
            pattern=config.pattern,
            severity=config.severity,
            message=config.message,
            regex=config.regex,
        )

    def matches(self, line: str) -> bool:
        if self._compiled is not None:
            return self._compiled.search(line) is not None
        return self.pattern in line

    @property
    def description(self) -> str:
        return self.message or f"'{self.pattern}' occurrences detected."


@dataclass(frozen=True, order=True)
class AuditFinding:
    """A single line matching an audit rule."""

    path: str
    line: int
    rule_id: str
    severity: Severity = field(default=Severity.WARNING, compare=False)
    text: str = field(default="", compare=False)

    @property
    def location(self) -> str:
        return f"{self.path}:{self.line}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rule": self.rule_id,
            "path": self.path,
            "line": self.line,
            "severity": self.severity.value,
            "text": self.text,
        }


def rules_from_config(configs: Iterable[AuditRuleConfig]) -> List[AuditRule]:
    return [AuditRule.from_config(c) for c in configs]


def group_by_rule(
    findings: Iterable[AuditFinding], rules: Iterable[AuditRule]
) -> Dict[str, List[AuditFinding]]:
    """Group findings by rule id, keeping rule order and only matched rules."""
    grouped: Dict[str, List[AuditFinding]] = {rule.id: [] for rule in rules}
    for finding in findings:
        grouped.setdefault(finding.rule_id, []).append(finding)
    return {rule_id: items for rule_id, items in grouped.items() if items}
