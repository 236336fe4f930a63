"""Built-in pipeline used when no configuration file is present."""

from .models import (
    AuditConfig,
    AuditRuleConfig,
    GateConfig,
    StepConfig,
    StepKind,
)

DEFAULT_TITLE = "QMS Medical Device Quality Management System"
DEFAULT_SUBTITLE = "CI Build Pipeline"

DEFAULT_AUDIT_RULES = [
    AuditRuleConfig(
        id="unsafe-code",
        pattern="unsafe",
        message="Unsafe code detected. Review for regulatory compliance.",
    ),
    AuditRuleConfig(
        id="unchecked-unwrap",
        pattern=".unwrap()",
        message="unwrap() calls detected. Consider using proper error handling.",
    ),
]


def default_steps() -> list:
    """Return the observed toolchain, format, lint and test steps."""
    return [
        StepConfig(
            name="Checking Rust installation",
            kind=StepKind.TOOLCHAIN,
            command=["rustc", "--version"],
            success_message="Rust installation verified",
            failure_message="Rust is not installed or not in PATH",
        ),
        StepConfig(
            name="Code formatting check",
            kind=StepKind.FORMAT,
            command=["cargo", "fmt", "--", "--check"],
            success_message="Code formatting check passed",
            failure_message="Code formatting issues detected. Run 'cargo fmt' to fix.",
        ),
        StepConfig(
            name="Linting with Clippy",
            kind=StepKind.LINT,
            command=[
                "cargo",
                "clippy",
                "--all-targets",
                "--all-features",
                "--",
                "-D",
                "warnings",
            ],
            success_message="Clippy linting passed",
            failure_message="Clippy linting failed. Fix warnings before proceeding.",
        ),
        StepConfig(
            name="Running unit tests",
            kind=StepKind.UNIT_TEST,
            command=["cargo", "test", "--lib"],
            success_message="Unit tests passed",
            failure_message="Unit tests failed",
        ),
        StepConfig(
            name="Running integration tests",
            kind=StepKind.INTEGRATION_TEST,
            command=["cargo", "test", "--test", "*"],
            success_message="Integration tests passed",
            failure_message="Integration tests failed",
        ),
    ]


def default_config() -> GateConfig:
    """Build a fresh default configuration."""
    return GateConfig(
        title=DEFAULT_TITLE,
        subtitle=DEFAULT_SUBTITLE,
        steps=default_steps(),
        audit=AuditConfig(
            root="src",
            rules=[rule.model_copy() for rule in DEFAULT_AUDIT_RULES],
        ),
    )
