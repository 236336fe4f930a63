"""Checkers that run a command and trust its exit status."""

import logging
import shlex
from pathlib import Path
from typing import Dict, List, Optional, Type

from ..config.models import StepKind
from ..errors import (
    CommandFailure,
    FormatViolation,
    IntegrationTestFailure,
    LintViolation,
    StepError,
    UnitTestFailure,
)
from .base import CheckOutcome, Checker, OutputSink, discard_output, run_streaming

logger = logging.getLogger(__name__)


class CommandChecker(Checker):
    """Runs one external process; exit status 0 is a pass."""

    kind = StepKind.COMMAND
    error_class: Type[StepError] = CommandFailure

    def __init__(
        self,
        command: List[str],
        cwd: Optional[Path] = None,
        env: Optional[Dict[str, str]] = None,
    ):
        if not command:
            raise ValueError("CommandChecker needs a non-empty command")
        self.command = list(command)
        self.cwd = cwd
        self.env = dict(env or {})

    def check(self, sink: OutputSink = discard_output) -> CheckOutcome:
        exit_code, output = run_streaming(self.command, sink, self.cwd, self.env)
        if exit_code != 0:
            raise self.error_class(
                f"{self.describe()} exited with code {exit_code}",
                exit_code=exit_code,
                output=output,
            )
        return CheckOutcome(output=output, exit_code=exit_code)

    def describe(self) -> str:
        return shlex.join(self.command)


class FormatChecker(CommandChecker):
    """Formatting check, e.g. ``cargo fmt -- --check``."""

    kind = StepKind.FORMAT
    error_class = FormatViolation


class LintChecker(CommandChecker):
    """Static analysis, e.g. ``cargo clippy -- -D warnings``."""

    kind = StepKind.LINT
    error_class = LintViolation


class UnitTestChecker(CommandChecker):
    kind = StepKind.UNIT_TEST
    error_class = UnitTestFailure


class IntegrationTestChecker(CommandChecker):
    kind = StepKind.INTEGRATION_TEST
    error_class = IntegrationTestFailure
