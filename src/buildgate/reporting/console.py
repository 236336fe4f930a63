"""Human-readable console reporter built on rich."""

from typing import TYPE_CHECKING, List, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from ..audit.rules import AuditFinding, AuditRule, group_by_rule
from .base import Reporter

if TYPE_CHECKING:
    from ..pipeline.models import PipelineRun, StepResult, Verdict

BANNER_WIDTH = 45


class ConsoleReporter(Reporter):
    """Renders the pipeline as colored console output.

    Success markers and audit warnings go to stdout; fatal errors go to
    stderr. Tool output is written through untouched.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
        show_diagnostics_on_failure: bool = False,
    ):
        """Initialize console reporter.

        Args:
            console: Console for regular output (creates new if None)
            err_console: Console for fatal errors (stderr console if None)
            show_diagnostics_on_failure: Repeat the captured tool output after
                a failure, for tools whose streamed output scrolled away
        """
        self.console = console or Console(highlight=False)
        self.err_console = err_console or Console(stderr=True, highlight=False)
        self.show_diagnostics_on_failure = show_diagnostics_on_failure

    def format_result(self, result: "StepResult") -> str:
        if result.passed:
            return f"[green]✓ {escape(result.message)}[/green]"
        label = "ERROR" if result.required else "WARNING"
        color = "red" if result.required else "yellow"
        lines = [f"[bold {color}]{label}: {escape(result.message)}[/bold {color}]"]
        if result.error and result.error != result.message:
            kind = result.failure_kind.value if result.failure_kind else "Failure"
            lines.append(f"[{color}]  {kind}: {escape(result.error)}[/{color}]")
        return "\n".join(lines)

    def format_finding(self, finding: AuditFinding) -> str:
        text = f"  {escape(finding.location)}"
        if finding.text:
            text += f"  [dim]{escape(finding.text)}[/dim]"
        return text

    def format_verdict(self, verdict: "Verdict") -> str:
        rule = "=" * BANNER_WIDTH
        if verdict.passed:
            return (
                f"{rule}\n[bold green]BUILD SUCCESSFUL[/bold green]\n"
                f"All checks passed. Ready for deployment.\n{rule}"
            )
        return (
            f"{rule}\n[bold red]BUILD FAILED[/bold red]\n"
            f"Stopped at step {verdict.failed_ordinal}: "
            f"{escape(verdict.failed_step or '')}\n{rule}"
        )

    def pipeline_started(self, title: str, subtitle: Optional[str], total: int) -> None:
        rule = "=" * BANNER_WIDTH
        self.console.print(rule)
        self.console.print(f"[bold]{escape(title)}[/bold]")
        if subtitle:
            self.console.print(escape(subtitle))
        self.console.print(rule)

    def step_started(self, ordinal: int, total: int, name: str) -> None:
        self.console.print()
        self.console.print(escape(f"[Step {ordinal}/{total}] {name}..."))

    def step_output(self, line: str) -> None:
        self.console.file.write(line)
        self.console.file.flush()

    def step_finished(self, result: "StepResult") -> None:
        if result.passed:
            self.console.print(self.format_result(result))
            return
        self.err_console.print(self.format_result(result))
        if self.show_diagnostics_on_failure and result.diagnostics:
            self.err_console.print(escape(result.diagnostics.rstrip("\n")))

    def audit_started(self, ordinal: int, total: int, name: str) -> None:
        self.step_started(ordinal, total, name)

    def audit_finished(
        self, findings: List[AuditFinding], rules: Sequence[AuditRule]
    ) -> None:
        by_id = {rule.id: rule for rule in rules}
        for rule_id, items in group_by_rule(findings, rules).items():
            rule = by_id.get(rule_id)
            description = rule.description if rule else rule_id
            self.console.print(f"[yellow]WARNING: {escape(description)}[/yellow]")
            self.console.print(
                f"Listing {escape(rule_id)} locations ({len(items)}):"
            )
            for finding in items:
                self.console.print(self.format_finding(finding))
        if not findings:
            self.console.print("No audit findings.")
        self.console.print("[green]✓ Security audit completed[/green]")

    def run_finished(self, run: "PipelineRun") -> None:
        self.console.print()
        target = self.console if run.passed else self.err_console
        target.print(self.format_verdict(run.verdict))

    def run_aborted(
        self, run: "PipelineRun", ordinal: int, name: str, error: Exception
    ) -> None:
        rule = "=" * BANNER_WIDTH
        self.err_console.print(f"[bold red]ERROR: {escape(str(error))}[/bold red]")
        self.err_console.print()
        self.err_console.print(
            f"{rule}\n[bold red]BUILD FAILED[/bold red]\n"
            f"Stopped at step {ordinal}: {escape(name)}\n{rule}"
        )
