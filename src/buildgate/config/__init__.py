"""Configuration management for buildgate."""

from .defaults import DEFAULT_AUDIT_RULES, default_config
from .environment import EnvironmentSubstitutionError, substitute_environment_variables
from .harness import (
    BrowserProject,
    HarnessConfig,
    HarnessSettings,
    ReportEmitter,
    WebServerConfig,
)
from .loader import find_config_file, load_config, resolve_config
from .models import (
    AuditConfig,
    AuditRuleConfig,
    GateConfig,
    Severity,
    StepConfig,
    StepKind,
)

__all__ = [
    # Main configuration
    "GateConfig",
    "StepConfig",
    "StepKind",
    # Audit
    "AuditConfig",
    "AuditRuleConfig",
    "Severity",
    "DEFAULT_AUDIT_RULES",
    # Browser harness
    "HarnessConfig",
    "HarnessSettings",
    "BrowserProject",
    "ReportEmitter",
    "WebServerConfig",
    # Loaders
    "default_config",
    "find_config_file",
    "load_config",
    "resolve_config",
    "substitute_environment_variables",
    "EnvironmentSubstitutionError",
]
