"""Exception hierarchy and failure classification for buildgate."""

from enum import Enum
from typing import Optional

# Process exit code for configuration errors and an unreadable audit tree
EXIT_OPERATIONAL_ERROR = 2


class FailureKind(str, Enum):
    """Why a pipeline step failed."""

    TOOL_MISSING = "ToolMissing"
    FORMAT_VIOLATION = "FormatViolation"
    LINT_VIOLATION = "LintViolation"
    UNIT_TEST_FAILURE = "UnitTestFailure"
    INTEGRATION_TEST_FAILURE = "IntegrationTestFailure"
    HARNESS_FAILURE = "HarnessFailure"
    COMMAND_FAILURE = "CommandFailure"
    AUDIT_REJECTED = "AuditRejected"


class BuildGateError(Exception):
    """Base exception for buildgate errors."""

    pass


class ConfigError(BuildGateError):
    """Pipeline configuration could not be loaded or validated."""

    pass


class AuditScanError(BuildGateError):
    """The audit source tree could not be read at all."""

    pass


class StepError(BuildGateError):
    """Base exception for a failing pipeline step."""

    kind: FailureKind = FailureKind.COMMAND_FAILURE

    def __init__(
        self, message: str, exit_code: Optional[int] = None, output: str = ""
    ):
        super().__init__(message)
        self.exit_code = exit_code
        self.output = output


class ToolMissing(StepError):
    """A required external tool cannot be located or started."""

    kind = FailureKind.TOOL_MISSING


class FormatViolation(StepError):
    """The formatting checker reported unformatted sources."""

    kind = FailureKind.FORMAT_VIOLATION


class LintViolation(StepError):
    """The static-analysis linter reported findings."""

    kind = FailureKind.LINT_VIOLATION


class UnitTestFailure(StepError):
    """The unit test runner reported failures."""

    kind = FailureKind.UNIT_TEST_FAILURE


class IntegrationTestFailure(StepError):
    """The integration test runner reported failures."""

    kind = FailureKind.INTEGRATION_TEST_FAILURE


class HarnessFailure(StepError):
    """The browser-test harness reported failures."""

    kind = FailureKind.HARNESS_FAILURE


class CommandFailure(StepError):
    """A generic command step exited non-zero."""

    kind = FailureKind.COMMAND_FAILURE
