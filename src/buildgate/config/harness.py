"""Configuration models for the browser-test harness step."""

from dataclasses import dataclass
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator


class BrowserProject(BaseModel):
    """A named browser/device profile the harness runs against."""

    name: str = Field(..., min_length=1, description="Profile name, e.g. 'chromium'")
    device: Optional[str] = Field(
        None, description="Device descriptor, e.g. 'Desktop Chrome' or 'Pixel 5'"
    )


class ReportEmitter(BaseModel):
    """A report the harness writes, e.g. an html folder or a json file."""

    kind: Literal["html", "json", "junit", "line", "list", "dot"]
    output: Optional[str] = Field(
        None, description="Output file or folder, relative to the harness directory"
    )

    @property
    def is_structured(self) -> bool:
        return self.kind in {"json", "junit"}


class WebServerConfig(BaseModel):
    """How to bring up the application server before browser tests run."""

    command: List[str] = Field(..., min_length=1, description="Server start command")
    url: str = Field(..., description="URL polled until the server answers")
    timeout_ms: int = Field(
        default=120_000, gt=0, description="Readiness timeout in milliseconds"
    )
    reuse_existing_server: bool = Field(
        default=True,
        description="Reuse a server already answering on url instead of starting one",
    )


@dataclass(frozen=True)
class HarnessSettings:
    """Harness settings after resolving CI-dependent values."""

    fully_parallel: bool
    workers: Optional[int]
    retries: int
    ci: bool


class HarnessConfig(BaseModel):
    """Browser-test harness configuration consumed by the browser_test step.

    Mirrors the settings of the observed Playwright setup: a single worker
    and positive retries under CI, fully parallel with no retries locally.

    ``base_url`` and ``expect_timeout_ms`` reach the harness only as the
    ``BASE_URL`` and ``EXPECT_TIMEOUT`` environment variables. Playwright does
    not read these itself; the harness config (``playwright.config.ts``) must
    pass them to ``use.baseURL`` and ``expect.timeout``.
    """

    command: List[str] = Field(
        default_factory=lambda: ["npx", "playwright", "test"],
        min_length=1,
        description="Harness invocation",
    )
    working_dir: str = Field(
        default="tests/e2e", description="Directory the harness is run from"
    )
    test_dir: str = Field(default="./tests", description="Test root directory")
    base_url: Optional[str] = Field(
        default="http://127.0.0.1:8080",
        description="Exported as BASE_URL for the harness config to read",
    )
    fully_parallel: bool = Field(
        default=True, description="Run test files in parallel outside CI"
    )
    workers: Optional[int] = Field(
        default=None, ge=1, description="Worker count outside CI (harness default if unset)"
    )
    ci_workers: int = Field(default=1, ge=1, description="Worker count under CI")
    retries: int = Field(default=0, ge=0, description="Retries outside CI")
    ci_retries: int = Field(default=2, ge=1, description="Retries under CI")
    projects: List[BrowserProject] = Field(
        default_factory=lambda: [
            BrowserProject(name="chromium", device="Desktop Chrome"),
            BrowserProject(name="firefox", device="Desktop Firefox"),
            BrowserProject(name="webkit", device="Desktop Safari"),
            BrowserProject(name="Mobile Chrome", device="Pixel 5"),
        ]
    )
    reporters: List[ReportEmitter] = Field(
        default_factory=lambda: [
            ReportEmitter(kind="html", output="test-results/html-report"),
            ReportEmitter(kind="json", output="test-results/results.json"),
            ReportEmitter(kind="line"),
        ]
    )
    web_server: Optional[WebServerConfig] = None
    timeout_ms: int = Field(default=60_000, gt=0, description="Per-test timeout")
    expect_timeout_ms: int = Field(
        default=10_000,
        gt=0,
        description="Per-assertion timeout, exported as EXPECT_TIMEOUT",
    )

    @model_validator(mode="after")
    def validate_reporters(self) -> "HarnessConfig":
        """Require at least one human-readable and one structured report."""
        if not any(r.is_structured for r in self.reporters):
            raise ValueError(
                "Harness needs a machine-readable reporter (json or junit)"
            )
        if all(r.is_structured for r in self.reporters):
            raise ValueError(
                "Harness needs a human-readable reporter (html, line, list or dot)"
            )
        names = [p.name for p in self.projects]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate browser project names: {names}")
        return self

    def resolve(self, ci: bool) -> HarnessSettings:
        """Resolve parallelism and retries for the given execution context."""
        if ci:
            return HarnessSettings(
                fully_parallel=False,
                workers=self.ci_workers,
                retries=self.ci_retries,
                ci=True,
            )
        return HarnessSettings(
            fully_parallel=self.fully_parallel,
            workers=self.workers,
            retries=self.retries,
            ci=False,
        )

    def json_report_path(self) -> Optional[str]:
        for reporter in self.reporters:
            if reporter.kind == "json" and reporter.output:
                return reporter.output
        return None
