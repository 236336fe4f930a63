"""Data models for pipeline execution."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from ..audit.rules import AuditFinding
from ..checkers.base import Checker
from ..errors import FailureKind

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    PASS = "pass"
    FAIL = "fail"


class VerdictStatus(str, Enum):
    ALL_PASSED = "all_passed"
    FAILED = "failed"


@dataclass(frozen=True)
class PipelineStep:
    """A single ordered step of the pipeline."""

    name: str
    ordinal: int
    action: Checker
    required: bool = True
    success_message: Optional[str] = None
    failure_message: Optional[str] = None

    @property
    def kind(self) -> str:
        return self.action.kind.value


@dataclass(frozen=True)
class StepResult:
    """Outcome of executing one pipeline step.

    ``diagnostics`` holds the tool output exactly as the tool produced it.
    """

    step_name: str
    ordinal: int
    outcome: Outcome
    diagnostics: str = ""
    message: str = ""
    required: bool = True
    failure_kind: Optional[FailureKind] = None
    error: Optional[str] = None
    exit_code: Optional[int] = None
    duration: float = 0.0
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def passed(self) -> bool:
        return self.outcome == Outcome.PASS

    @property
    def failed(self) -> bool:
        return self.outcome == Outcome.FAIL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step": self.step_name,
            "ordinal": self.ordinal,
            "outcome": self.outcome.value,
            "required": self.required,
            "message": self.message,
            "failure_kind": self.failure_kind.value if self.failure_kind else None,
            "error": self.error,
            "exit_code": self.exit_code,
            "duration": round(self.duration, 3),
            "diagnostics": self.diagnostics,
        }


@dataclass(frozen=True)
class Verdict:
    """Final verdict of a run: AllPassed or FailedAt(step)."""

    status: VerdictStatus
    failed_step: Optional[str] = None
    failed_ordinal: Optional[int] = None
    failure_kind: Optional[FailureKind] = None

    @classmethod
    def all_passed(cls) -> "Verdict":
        return cls(status=VerdictStatus.ALL_PASSED)

    @classmethod
    def failed_at(
        cls,
        step_name: str,
        ordinal: int,
        failure_kind: Optional[FailureKind] = None,
    ) -> "Verdict":
        return cls(
            status=VerdictStatus.FAILED,
            failed_step=step_name,
            failed_ordinal=ordinal,
            failure_kind=failure_kind,
        )

    @property
    def passed(self) -> bool:
        return self.status == VerdictStatus.ALL_PASSED

    @property
    def exit_code(self) -> int:
        return 0 if self.passed else 1

    def __str__(self) -> str:
        if self.passed:
            return "AllPassed"
        return f"FailedAt({self.failed_ordinal}: {self.failed_step})"


@dataclass
class PipelineRun:
    """Accumulated record of one pipeline invocation.

    Only the sequencer appends to a run; it is finalized exactly once.
    """

    title: str = ""
    total_stages: int = 0
    results: List[StepResult] = field(default_factory=list)
    findings: List[AuditFinding] = field(default_factory=list)
    verdict: Optional[Verdict] = None
    audit_ran: bool = False

    execution_id: str = field(
        default_factory=lambda: datetime.now().strftime("%Y%m%d_%H%M%S")
    )
    start_time: datetime = field(default_factory=datetime.now)
    end_time: Optional[datetime] = None
    total_duration: Optional[float] = None

    def record(self, result: StepResult) -> None:
        if self.is_finalized:
            raise RuntimeError("Cannot record a step on a finalized run")
        self.results.append(result)

    def add_findings(self, findings: List[AuditFinding]) -> None:
        if self.is_finalized:
            raise RuntimeError("Cannot add findings to a finalized run")
        self.findings.extend(findings)
        self.audit_ran = True

    def finalize(self, verdict: Verdict, end_time: Optional[datetime] = None) -> None:
        """Fix the verdict and timing of the run.

        Args:
            verdict: Final verdict
            end_time: Optional end time (defaults to now)
        """
        if self.is_finalized:
            raise RuntimeError(f"Run {self.execution_id} is already finalized")
        self.verdict = verdict
        self.end_time = end_time or datetime.now()
        self.total_duration = (self.end_time - self.start_time).total_seconds()

        logger.info(
            f"Pipeline {self.execution_id} finished in {self.total_duration:.2f}s: "
            f"{verdict} ({len(self.results)} step(s), {len(self.findings)} finding(s))"
        )

    @property
    def is_finalized(self) -> bool:
        return self.verdict is not None

    @property
    def passed(self) -> bool:
        return self.verdict is not None and self.verdict.passed

    @property
    def exit_code(self) -> int:
        if self.verdict is None:
            raise RuntimeError("Run has not been finalized")
        return self.verdict.exit_code

    @property
    def terminal_result(self) -> Optional[StepResult]:
        return self.results[-1] if self.results else None

    def get_summary(self) -> Dict[str, Any]:
        """Machine-readable summary of the run."""
        verdict = self.verdict
        return {
            "execution_id": self.execution_id,
            "title": self.title,
            "verdict": str(verdict) if verdict else None,
            "status": verdict.status.value if verdict else None,
            "exit_code": verdict.exit_code if verdict else None,
            "failed_step": verdict.failed_step if verdict else None,
            "failed_ordinal": verdict.failed_ordinal if verdict else None,
            "total_stages": self.total_stages,
            "steps": [result.to_dict() for result in self.results],
            "audit_ran": self.audit_ran,
            "findings": [finding.to_dict() for finding in self.findings],
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "execution_time": self.total_duration,
        }
