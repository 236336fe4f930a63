"""buildgate command-line entry point."""

import json
from pathlib import Path

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax

from .. import __version__
from ..audit.rules import rules_from_config
from ..config import load_config, resolve_config
from ..errors import EXIT_OPERATIONAL_ERROR, AuditScanError, BuildGateError
from ..pipeline.builder import build_scanner, build_sequencer, build_steps
from ..reporting import ConsoleReporter, JsonReporter
from .utils import create_steps_table, setup_logging

console = Console(highlight=False)


class GateUsageError(click.ClickException):
    """Operational error: bad configuration or unreadable audit tree."""

    exit_code = EXIT_OPERATIONAL_ERROR


def _load(ctx: click.Context):
    options = ctx.obj
    try:
        return resolve_config(options["config"], options["root"])
    except BuildGateError as e:
        raise GateUsageError(str(e))


def _make_reporter(ctx: click.Context):
    if ctx.obj["format"] == "json":
        return JsonReporter()
    return ConsoleReporter(show_diagnostics_on_failure=ctx.obj["verbose"])


@click.group(invoke_without_command=True)
@click.version_option(__version__, prog_name="buildgate")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Pipeline configuration (default: buildgate.yaml in the project root)",
)
@click.option(
    "--root",
    "-r",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    show_default=True,
    help="Project root; tools run from here",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["console", "json"]),
    default="console",
    show_default=True,
    help="Report format",
)
@click.option(
    "--strict-audit",
    is_flag=True,
    help="Fail the pipeline when the audit scan reports any finding",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def buildgate(ctx, config_path, root, output_format, strict_audit, verbose):
    """buildgate - fail-fast quality gate for regulated builds.

    Without a subcommand the full pipeline runs.
    """
    setup_logging(verbose)
    ctx.obj = {
        "config": config_path,
        "root": Path(root).resolve(),
        "format": output_format,
        "strict_audit": strict_audit,
        "verbose": verbose,
    }
    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


@buildgate.command()
@click.pass_context
def run(ctx):
    """Run every step in order, stopping at the first required failure."""
    config = _load(ctx)
    root = ctx.obj["root"]
    sequencer = build_sequencer(
        config,
        root,
        _make_reporter(ctx),
        strict_audit=ctx.obj["strict_audit"],
    )
    try:
        result = sequencer.run(build_steps(config, root))
    except AuditScanError:
        # already reported by the reporter
        ctx.exit(EXIT_OPERATIONAL_ERROR)
    except BuildGateError as e:
        raise GateUsageError(str(e))
    ctx.exit(result.exit_code)


@buildgate.command()
@click.pass_context
def audit(ctx):
    """Run only the audit scan and list its findings."""
    config = _load(ctx)
    root = ctx.obj["root"]
    rules = rules_from_config(config.audit.rules)
    scanner = build_scanner(config, root)
    reporter = ConsoleReporter()

    try:
        findings = scanner.scan(root / config.audit.root, rules)
    except BuildGateError as e:
        raise GateUsageError(str(e))

    if ctx.obj["format"] == "json":
        click.echo(
            json.dumps({"findings": [f.to_dict() for f in findings]}, indent=2)
        )
    else:
        reporter.audit_finished(findings, rules)

    strict = ctx.obj["strict_audit"] or config.audit.fail_on_findings
    ctx.exit(1 if strict and findings else 0)


@buildgate.command()
@click.pass_context
def steps(ctx):
    """List the configured pipeline stages."""
    config = _load(ctx)
    console.print(create_steps_table(config))


@buildgate.command()
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False))
def validate(config_file):
    """Validate a pipeline configuration file."""
    try:
        config = load_config(config_file)
    except BuildGateError as e:
        raise GateUsageError(str(e))

    content = yaml.safe_dump(config.model_dump(mode="json"), sort_keys=False)
    console.print(f"[green]✓ {escape(config_file)} is valid[/green]")
    console.print(Syntax(content, "yaml", theme="monokai", line_numbers=True))


if __name__ == "__main__":
    buildgate()
