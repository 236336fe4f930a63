"""Toolchain presence probe."""

import logging
import shutil

from ..config.models import StepKind
from ..errors import ToolMissing
from .base import CheckOutcome, OutputSink, discard_output, run_streaming
from .command import CommandChecker

logger = logging.getLogger(__name__)


class ToolchainChecker(CommandChecker):
    """Verifies the toolchain executable is on PATH and answers its version probe.

    Both a missing executable and a failing probe are reported as ToolMissing.
    """

    kind = StepKind.TOOLCHAIN
    error_class = ToolMissing

    def check(self, sink: OutputSink = discard_output) -> CheckOutcome:
        executable = self.command[0]
        located = shutil.which(executable)
        if located is None:
            raise ToolMissing(f"{executable} is not installed or not in PATH")

        logger.debug(f"Found {executable} at {located}")
        exit_code, output = run_streaming(self.command, sink, self.cwd, self.env)
        if exit_code != 0:
            raise ToolMissing(
                f"{self.describe()} exited with code {exit_code}",
                exit_code=exit_code,
                output=output,
            )
        return CheckOutcome(
            output=output, exit_code=exit_code, details={"executable": located}
        )
