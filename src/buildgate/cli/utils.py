"""CLI utility functions for buildgate."""

import logging
import shlex

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..config.models import GateConfig, StepKind


def setup_logging(verbose: bool = False) -> None:
    """Route library logging through rich on stderr."""
    level = logging.DEBUG if verbose else logging.WARNING
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=verbose,
        rich_tracebacks=True,
    )
    root = logging.getLogger("buildgate")
    root.handlers[:] = [handler]
    root.setLevel(level)
    root.propagate = False


def describe_step_command(step) -> str:
    if step.kind == StepKind.BROWSER_TEST:
        return shlex.join(step.harness.command)
    return shlex.join(step.command)


def create_steps_table(config: GateConfig) -> Table:
    """Create a rich table listing the configured pipeline stages.

    Args:
        config: Pipeline configuration

    Returns:
        Rich table with one row per stage, audit included
    """
    table = Table(title=escape(config.title))
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Step", style="bold")
    table.add_column("Kind", style="magenta")
    table.add_column("Required", justify="center")
    table.add_column("Runs")

    for ordinal, step in enumerate(config.steps, 1):
        table.add_row(
            str(ordinal),
            escape(step.name),
            step.kind.value,
            "yes" if step.required else "no",
            escape(describe_step_command(step)),
        )

    if config.audit.enabled:
        rules = ", ".join(rule.id for rule in config.audit.rules) or "none"
        table.add_row(
            str(len(config.steps) + 1),
            escape(config.audit.name),
            "audit",
            "strict" if config.audit.fail_on_findings else "advisory",
            escape(f"scan {config.audit.root}/ ({rules})"),
        )

    return table
