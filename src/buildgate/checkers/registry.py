"""Registry mapping step kinds to checker implementations."""

import logging
from pathlib import Path
from typing import Callable, Dict, Optional

from ..config.models import StepConfig, StepKind
from .base import Checker
from .command import (
    CommandChecker,
    FormatChecker,
    IntegrationTestChecker,
    LintChecker,
    UnitTestChecker,
)
from .harness import HarnessChecker
from .toolchain import ToolchainChecker

logger = logging.getLogger(__name__)

CheckerFactory = Callable[[StepConfig, Path], Checker]


def _command_factory(checker_class) -> CheckerFactory:
    def create(step: StepConfig, project_root: Path) -> Checker:
        cwd = project_root / step.working_dir if step.working_dir else project_root
        return checker_class(step.command, cwd=cwd, env=step.env)

    return create


def _harness_factory(step: StepConfig, project_root: Path) -> Checker:
    return HarnessChecker(step.harness, project_root, env=step.env)


class CheckerRegistry:
    """Registry for checker factories keyed by step kind."""

    def __init__(self):
        self._factories: Dict[str, CheckerFactory] = {}
        self._register_builtin_checkers()

    def _register_builtin_checkers(self) -> None:
        self.register(StepKind.TOOLCHAIN.value, _command_factory(ToolchainChecker))
        self.register(StepKind.FORMAT.value, _command_factory(FormatChecker))
        self.register(StepKind.LINT.value, _command_factory(LintChecker))
        self.register(StepKind.UNIT_TEST.value, _command_factory(UnitTestChecker))
        self.register(
            StepKind.INTEGRATION_TEST.value, _command_factory(IntegrationTestChecker)
        )
        self.register(StepKind.COMMAND.value, _command_factory(CommandChecker))
        self.register(StepKind.BROWSER_TEST.value, _harness_factory)

    def register(self, kind: str, factory: CheckerFactory) -> None:
        """Register (or replace) the factory for a step kind."""
        if kind in self._factories:
            logger.debug(f"Replacing checker factory for '{kind}'")
        self._factories[kind] = factory

    def create(self, step: StepConfig, project_root: Path) -> Checker:
        kind = step.kind.value
        if kind not in self._factories:
            raise ValueError(
                f"Unknown step kind '{kind}'. Available: {', '.join(self.list_kinds())}"
            )
        return self._factories[kind](step, Path(project_root))

    def list_kinds(self) -> list:
        return sorted(self._factories)


_registry: Optional[CheckerRegistry] = None


def get_registry() -> CheckerRegistry:
    global _registry
    if _registry is None:
        _registry = CheckerRegistry()
    return _registry


def create_checker(
    step: StepConfig,
    project_root: Path,
    registry: Optional[CheckerRegistry] = None,
) -> Checker:
    """Create the checker for a configured step."""
    return (registry or get_registry()).create(step, project_root)
