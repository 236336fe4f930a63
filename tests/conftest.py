"""Shared pytest fixtures and configuration."""

from pathlib import Path
from typing import Callable, List, Optional

from pytest import fixture

from buildgate.audit.rules import AuditRule
from buildgate.pipeline.models import PipelineStep

from .fixtures.config_builders import ConfigBuilder
from .helpers.fakes import FakeChecker, RecordingReporter


@fixture
def calls() -> List[str]:
    """Invocation log shared by fake checkers."""
    return []


@fixture
def make_steps(calls) -> Callable[..., List[PipelineStep]]:
    """Build ordered steps backed by FakeChecker.

    ``fail_at`` is the 1-based ordinal of the step that fails, if any.
    """

    def _make(
        names: List[str],
        fail_at: Optional[int] = None,
        optional: tuple = (),
        output: str = "",
    ) -> List[PipelineStep]:
        return [
            PipelineStep(
                name=name,
                ordinal=ordinal,
                action=FakeChecker(
                    name, calls, passes=(ordinal != fail_at), output=output
                ),
                required=ordinal not in optional,
            )
            for ordinal, name in enumerate(names, 1)
        ]

    return _make


@fixture
def recording_reporter() -> RecordingReporter:
    return RecordingReporter()


@fixture
def default_rules() -> List[AuditRule]:
    return [
        AuditRule(id="unsafe-code", pattern="unsafe"),
        AuditRule(id="unchecked-unwrap", pattern=".unwrap()"),
    ]


@fixture
def source_tree(tmp_path) -> Callable[[dict], Path]:
    """Write a {relative path: content} mapping under tmp_path/src."""

    def _create(files: dict) -> Path:
        root = tmp_path / "src"
        root.mkdir(exist_ok=True)
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content)
        return root

    return _create


@fixture
def config_builder():
    """Provide a ConfigBuilder instance for test configuration creation."""
    return ConfigBuilder()
