"""Audit scanning for compliance-oriented risk patterns."""

from .rules import AuditFinding, AuditRule, group_by_rule, rules_from_config
from .scanner import AuditScanner

__all__ = [
    "AuditFinding",
    "AuditRule",
    "AuditScanner",
    "group_by_rule",
    "rules_from_config",
]
