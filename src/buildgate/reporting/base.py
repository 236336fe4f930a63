"""Reporter interface shared by the console and JSON renderers."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional, Sequence, Union

from ..audit.rules import AuditFinding, AuditRule

if TYPE_CHECKING:
    from ..pipeline.models import PipelineRun, StepResult, Verdict


class Reporter(ABC):
    """Renders pipeline progress. Holds no pipeline state and makes no decisions."""

    def render(self, item: Union["StepResult", AuditFinding, "Verdict"]) -> str:
        """Render a step result, an audit finding or a verdict as text."""
        from ..pipeline.models import StepResult, Verdict

        if isinstance(item, StepResult):
            return self.format_result(item)
        if isinstance(item, AuditFinding):
            return self.format_finding(item)
        if isinstance(item, Verdict):
            return self.format_verdict(item)
        raise TypeError(f"Cannot render {type(item).__name__}")

    @abstractmethod
    def format_result(self, result: "StepResult") -> str:
        pass

    @abstractmethod
    def format_finding(self, finding: AuditFinding) -> str:
        pass

    @abstractmethod
    def format_verdict(self, verdict: "Verdict") -> str:
        pass

    # Lifecycle hooks called by the sequencer

    def pipeline_started(self, title: str, subtitle: Optional[str], total: int) -> None:
        pass

    def step_started(self, ordinal: int, total: int, name: str) -> None:
        pass

    def step_output(self, line: str) -> None:
        pass

    def step_finished(self, result: "StepResult") -> None:
        pass

    def audit_started(self, ordinal: int, total: int, name: str) -> None:
        pass

    def audit_finished(
        self, findings: List[AuditFinding], rules: Sequence[AuditRule]
    ) -> None:
        pass

    def run_finished(self, run: "PipelineRun") -> None:
        pass

    def run_aborted(
        self, run: "PipelineRun", ordinal: int, name: str, error: Exception
    ) -> None:
        """Called instead of run_finished when a stage cannot be carried out."""
        pass
