"""Machine-readable JSON reporter."""

import json
import sys
from typing import TYPE_CHECKING, Optional, TextIO

from ..audit.rules import AuditFinding
from ..errors import EXIT_OPERATIONAL_ERROR
from .base import Reporter

if TYPE_CHECKING:
    from ..pipeline.models import PipelineRun, StepResult, Verdict


class JsonReporter(Reporter):
    """Emits the finished run as one JSON document.

    Streamed tool output goes to a separate stream (stderr by default) so
    the document on ``stream`` stays parseable.
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        output_stream: Optional[TextIO] = None,
        indent: int = 2,
    ):
        self.stream = stream or sys.stdout
        self.output_stream = output_stream or sys.stderr
        self.indent = indent

    def format_result(self, result: "StepResult") -> str:
        return json.dumps(result.to_dict())

    def format_finding(self, finding: AuditFinding) -> str:
        return json.dumps(finding.to_dict())

    def format_verdict(self, verdict: "Verdict") -> str:
        return json.dumps(
            {
                "verdict": str(verdict),
                "status": verdict.status.value,
                "exit_code": verdict.exit_code,
                "failed_step": verdict.failed_step,
                "failed_ordinal": verdict.failed_ordinal,
            }
        )

    def step_output(self, line: str) -> None:
        self.output_stream.write(line)
        self.output_stream.flush()

    def run_finished(self, run: "PipelineRun") -> None:
        json.dump(run.get_summary(), self.stream, indent=self.indent)
        self.stream.write("\n")
        self.stream.flush()

    def run_aborted(
        self, run: "PipelineRun", ordinal: int, name: str, error: Exception
    ) -> None:
        summary = run.get_summary()
        summary.update(
            status="error",
            exit_code=EXIT_OPERATIONAL_ERROR,
            failed_step=name,
            failed_ordinal=ordinal,
            error=str(error),
        )
        json.dump(summary, self.stream, indent=self.indent)
        self.stream.write("\n")
        self.stream.flush()
