"""Tests for the step executor."""

from itertools import count

from buildgate.checkers.command import LintChecker
from buildgate.checkers.toolchain import ToolchainChecker
from buildgate.errors import FailureKind
from buildgate.pipeline.executor import StepExecutor
from buildgate.pipeline.models import Outcome, PipelineStep

from .fixtures.config_builders import python_command
from .helpers.fakes import FakeChecker


def make_step(action, **overrides):
    params = dict(name="Step", ordinal=1, action=action)
    params.update(overrides)
    return PipelineStep(**params)


class TestStepExecutor:
    def test_pass_result(self, calls):
        step = make_step(
            FakeChecker("a", calls, output="fine\n"), success_message="All good"
        )
        result = StepExecutor().execute(step)

        assert result.outcome == Outcome.PASS
        assert result.passed
        assert result.diagnostics == "fine\n"
        assert result.message == "All good"
        assert result.failure_kind is None

    def test_fail_result_keeps_diagnostics(self, calls):
        step = make_step(
            FakeChecker("a", calls, passes=False, output="E001 bad\n"),
            failure_message="Lint failed",
        )
        result = StepExecutor().execute(step)

        assert result.outcome == Outcome.FAIL
        assert result.diagnostics == "E001 bad\n"
        assert result.message == "Lint failed"
        assert result.exit_code == 1
        assert result.error == "a reported failure"

    def test_default_messages(self, calls):
        passed = StepExecutor().execute(make_step(FakeChecker("a", calls), name="Fmt"))
        failed = StepExecutor().execute(
            make_step(FakeChecker("b", calls, passes=False), name="Fmt")
        )
        assert passed.message == "Fmt passed"
        assert failed.message == "Fmt failed"

    def test_missing_tool_becomes_fail_result(self):
        step = make_step(ToolchainChecker(["definitely-not-a-real-tool-4821"]))
        result = StepExecutor().execute(step)

        assert result.outcome == Outcome.FAIL
        assert result.failure_kind == FailureKind.TOOL_MISSING

    def test_real_tool_output_passes_through_unmodified(self):
        seen = []
        step = make_step(LintChecker(python_command("print('  warning: x  ')")))
        result = StepExecutor().execute(step, seen.append)

        assert seen == ["  warning: x  \n"]
        assert result.diagnostics == "  warning: x  \n"

    def test_carriage_returns_are_kept(self):
        seen = []
        step = make_step(
            LintChecker(python_command("import sys; sys.stdout.write('a\\r\\nb\\rc\\n')"))
        )
        result = StepExecutor().execute(step, seen.append)

        assert seen == ["a\r\n", "b\rc\n"]
        assert result.diagnostics == "a\r\nb\rc\n"

    def test_duration_uses_clock(self, calls):
        ticks = count(start=10, step=2)
        executor = StepExecutor(clock=lambda: next(ticks))
        result = executor.execute(make_step(FakeChecker("a", calls)))
        assert result.duration == 2

    def test_required_flag_is_recorded(self, calls):
        step = make_step(FakeChecker("a", calls, passes=False), required=False)
        assert StepExecutor().execute(step).required is False
