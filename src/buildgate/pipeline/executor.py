"""Step executor: runs one checker and reduces it to a StepResult."""

import logging
import time

from ..checkers.base import OutputSink, discard_output
from ..errors import StepError
from .models import Outcome, PipelineStep, StepResult

logger = logging.getLogger(__name__)


class StepExecutor:
    """Executes individual pipeline steps.

    Only the tool's own success signal is interpreted. Failures of any kind
    come back as a Fail result; the executor does not raise for them.
    """

    def __init__(self, clock=time.monotonic):
        self._clock = clock

    def execute(
        self, step: PipelineStep, sink: OutputSink = discard_output
    ) -> StepResult:
        """Execute a single pipeline step.

        Args:
            step: Step to execute
            sink: Receives tool output lines as they are produced

        Returns:
            StepResult with the outcome and the unmodified tool output
        """
        logger.info(f"Executing step {step.ordinal}: {step.name} ({step.action.describe()})")
        start = self._clock()

        try:
            outcome = step.action.check(sink)
        except StepError as e:
            duration = self._clock() - start
            logger.error(
                f"Step {step.ordinal} ({step.name}) failed with {e.kind.value}: {e}"
            )
            return StepResult(
                step_name=step.name,
                ordinal=step.ordinal,
                outcome=Outcome.FAIL,
                diagnostics=e.output,
                message=step.failure_message or f"{step.name} failed",
                required=step.required,
                failure_kind=e.kind,
                error=str(e),
                exit_code=e.exit_code,
                duration=duration,
            )

        duration = self._clock() - start
        logger.info(f"Step {step.ordinal} ({step.name}) passed in {duration:.2f}s")
        return StepResult(
            step_name=step.name,
            ordinal=step.ordinal,
            outcome=Outcome.PASS,
            diagnostics=outcome.output,
            message=step.success_message or f"{step.name} passed",
            required=step.required,
            exit_code=outcome.exit_code,
            duration=duration,
            details=outcome.details,
        )
