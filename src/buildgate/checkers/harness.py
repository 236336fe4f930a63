"""Browser-test harness step."""

import json
import logging
import os
import shlex
from contextlib import nullcontext
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from ..config.harness import HarnessConfig, HarnessSettings
from ..config.models import StepKind
from ..errors import HarnessFailure
from .base import CheckOutcome, Checker, OutputSink, discard_output, run_streaming
from .server import ServerBootstrap

logger = logging.getLogger(__name__)

_FALSY = {"", "0", "false", "no"}


def is_ci(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Detect a CI execution context from the CI environment variable."""
    env = os.environ if environ is None else environ
    return env.get("CI", "").strip().lower() not in _FALSY


class HarnessChecker(Checker):
    """Runs the browser-test harness as one external step.

    The harness manages its own workers; this checker only passes the
    resolved settings on the command line, brings up the application server
    when configured, and trusts the harness exit status.
    """

    kind = StepKind.BROWSER_TEST
    error_class = HarnessFailure

    def __init__(
        self,
        config: HarnessConfig,
        project_root: Path,
        env: Optional[Dict[str, str]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.config = config
        self.project_root = Path(project_root)
        self.env = dict(env or {})
        self.settings: HarnessSettings = config.resolve(is_ci(environ))

    @property
    def working_dir(self) -> Path:
        return self.project_root / self.config.working_dir

    def build_command(self) -> List[str]:
        """Translate the resolved settings into harness command-line flags."""
        settings = self.settings
        command = list(self.config.command)
        if self.config.test_dir:
            command.append(self.config.test_dir)
        if settings.workers is not None:
            command.append(f"--workers={settings.workers}")
        if settings.fully_parallel:
            command.append("--fully-parallel")
        command.append(f"--retries={settings.retries}")
        command.append(f"--timeout={self.config.timeout_ms}")
        command.append(
            "--reporter=" + ",".join(r.kind for r in self.config.reporters)
        )
        for project in self.config.projects:
            command.append(f"--project={project.name}")
        return command

    def describe(self) -> str:
        return shlex.join(self.build_command())

    def build_env(self) -> Dict[str, str]:
        """Environment handed to the harness: report locations and base URL."""
        env = dict(self.env)
        for reporter in self.config.reporters:
            if reporter.output is None:
                continue
            if reporter.kind == "html":
                env["PLAYWRIGHT_HTML_OUTPUT_DIR"] = reporter.output
                env["PLAYWRIGHT_HTML_OPEN"] = "never"
            elif reporter.kind == "json":
                env["PLAYWRIGHT_JSON_OUTPUT_FILE"] = reporter.output
            elif reporter.kind == "junit":
                env["PLAYWRIGHT_JUNIT_OUTPUT_FILE"] = reporter.output
        if self.config.base_url:
            env["BASE_URL"] = self.config.base_url
        env["EXPECT_TIMEOUT"] = str(self.config.expect_timeout_ms)
        return env

    def check(self, sink: OutputSink = discard_output) -> CheckOutcome:
        command = self.build_command()
        logger.info(
            f"Running browser harness (ci={self.settings.ci}, "
            f"workers={self.settings.workers}, retries={self.settings.retries})"
        )

        bootstrap = (
            ServerBootstrap(self.config.web_server, cwd=self.working_dir)
            if self.config.web_server is not None
            else nullcontext()
        )
        with bootstrap:
            exit_code, output = run_streaming(
                command, sink, self.working_dir, self.build_env()
            )

        details = {"report": self.read_report_stats()}
        if exit_code != 0:
            raise HarnessFailure(
                f"Browser harness exited with code {exit_code}",
                exit_code=exit_code,
                output=output,
            )
        return CheckOutcome(output=output, exit_code=exit_code, details=details)

    def read_report_stats(self) -> Optional[Dict[str, Any]]:
        """Read the stats block of the structured JSON report, if one was written."""
        relative = self.config.json_report_path()
        if relative is None:
            return None
        path = self.working_dir / relative
        try:
            with open(path, "r", encoding="utf-8") as f:
                report = json.load(f)
        except FileNotFoundError:
            logger.debug(f"No harness report at {path}")
            return None
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Cannot read harness report {path}: {e}")
            return None

        stats = report.get("stats") if isinstance(report, dict) else None
        if isinstance(stats, dict):
            logger.info(
                f"Harness report: {stats.get('expected', 0)} passed, "
                f"{stats.get('unexpected', 0)} failed, "
                f"{stats.get('flaky', 0)} flaky, {stats.get('skipped', 0)} skipped"
            )
        return stats
