"""Deterministic stand-ins for checkers and reporters."""

from typing import List, Type

from buildgate.checkers.base import CheckOutcome, Checker, OutputSink, discard_output
from buildgate.errors import CommandFailure, StepError
from buildgate.reporting.base import Reporter


class FakeChecker(Checker):
    """Deterministic checker that records every invocation."""

    def __init__(
        self,
        name: str,
        calls: List[str],
        passes: bool = True,
        output: str = "",
        error_class: Type[StepError] = CommandFailure,
    ):
        self.name = name
        self.calls = calls
        self.passes = passes
        self.output = output
        self.error_class = error_class

    def check(self, sink: OutputSink = discard_output) -> CheckOutcome:
        self.calls.append(self.name)
        for line in self.output.splitlines(keepends=True):
            sink(line)
        if not self.passes:
            raise self.error_class(
                f"{self.name} reported failure", exit_code=1, output=self.output
            )
        return CheckOutcome(output=self.output, exit_code=0)

    def describe(self) -> str:
        return f"fake {self.name}"


class RecordingReporter(Reporter):
    """Reporter that records the lifecycle events it receives."""

    def __init__(self):
        self.events: List[tuple] = []
        self.output: List[str] = []

    def format_result(self, result) -> str:
        return f"{result.step_name}:{result.outcome.value}"

    def format_finding(self, finding) -> str:
        return finding.location

    def format_verdict(self, verdict) -> str:
        return str(verdict)

    def pipeline_started(self, title, subtitle, total):
        self.events.append(("pipeline_started", title, total))

    def step_started(self, ordinal, total, name):
        self.events.append(("step_started", ordinal, total, name))

    def step_output(self, line):
        self.output.append(line)

    def step_finished(self, result):
        self.events.append(("step_finished", result.step_name, result.outcome.value))

    def audit_started(self, ordinal, total, name):
        self.events.append(("audit_started", ordinal, total, name))

    def audit_finished(self, findings, rules):
        self.events.append(("audit_finished", len(findings)))

    def run_finished(self, run):
        self.events.append(("run_finished", str(run.verdict)))

    def run_aborted(self, run, ordinal, name, error):
        self.events.append(("run_aborted", ordinal, name))

    def names(self) -> List[str]:
        return [event[0] for event in self.events]

