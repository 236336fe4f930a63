"""Stage sequencer with fail-fast aggregation."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from ..audit.rules import AuditRule
from ..audit.scanner import AuditScanner
from ..errors import AuditScanError, FailureKind
from ..reporting.base import Reporter
from .executor import StepExecutor
from .models import PipelineRun, PipelineStep, Verdict

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditStage:
    """The audit scan that closes a fully passing pipeline."""

    root: Path
    rules: List[AuditRule] = field(default_factory=list)
    name: str = "Security audit check"
    fail_on_findings: bool = False


class StageSequencer:
    """Runs steps in declared order and stops at the first required failure.

    When every required step passes the audit scan always runs. Its findings
    are added to the run without touching the verdict unless the audit stage
    opts into ``fail_on_findings``.
    """

    def __init__(
        self,
        reporter: Reporter,
        executor: Optional[StepExecutor] = None,
        scanner: Optional[AuditScanner] = None,
        audit: Optional[AuditStage] = None,
        title: str = "Build Validation Pipeline",
        subtitle: Optional[str] = None,
    ):
        self.reporter = reporter
        self.executor = executor or StepExecutor()
        self.scanner = scanner or AuditScanner()
        self.audit = audit
        self.title = title
        self.subtitle = subtitle

    def run(self, steps: Sequence[PipelineStep]) -> PipelineRun:
        """Run the pipeline.

        Args:
            steps: Steps with ordinals 1..n in declared order

        Returns:
            The finalized PipelineRun

        Raises:
            ValueError: If the step ordinals are not 1..n in order
            AuditScanError: If the audit source tree cannot be read
        """
        steps = list(steps)
        _validate_order(steps)

        total = len(steps) + (1 if self.audit is not None else 0)
        run = PipelineRun(title=self.title, total_stages=total)
        self.reporter.pipeline_started(self.title, self.subtitle, total)

        for step in steps:
            self.reporter.step_started(step.ordinal, total, step.name)
            result = self.executor.execute(step, self.reporter.step_output)
            run.record(result)
            self.reporter.step_finished(result)

            if result.failed and step.required:
                run.finalize(
                    Verdict.failed_at(step.name, step.ordinal, result.failure_kind)
                )
                self.reporter.run_finished(run)
                return run
            if result.failed:
                logger.warning(f"Optional step '{step.name}' failed, continuing")

        verdict = Verdict.all_passed()
        if self.audit is not None:
            verdict = self._run_audit(run, len(steps) + 1, total)

        run.finalize(verdict)
        self.reporter.run_finished(run)
        return run

    def _run_audit(self, run: PipelineRun, ordinal: int, total: int) -> Verdict:
        audit = self.audit
        self.reporter.audit_started(ordinal, total, audit.name)
        try:
            findings = self.scanner.scan(audit.root, audit.rules)
        except AuditScanError as e:
            logger.info(f"Audit stage aborted: {e}")
            self.reporter.run_aborted(run, ordinal, audit.name, e)
            raise
        run.add_findings(findings)
        self.reporter.audit_finished(findings, audit.rules)

        if audit.fail_on_findings and findings:
            logger.warning(
                f"Strict audit mode: {len(findings)} finding(s) fail the pipeline"
            )
            return Verdict.failed_at(audit.name, ordinal, FailureKind.AUDIT_REJECTED)
        return Verdict.all_passed()


def _validate_order(steps: List[PipelineStep]) -> None:
    ordinals = [step.ordinal for step in steps]
    expected = list(range(1, len(steps) + 1))
    if ordinals != expected:
        raise ValueError(
            f"Step ordinals must run 1..{len(steps)} in declared order, got {ordinals}"
        )
