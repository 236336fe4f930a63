"""Assemble pipeline steps and the sequencer from configuration."""

from pathlib import Path
from typing import List, Optional, Union

from ..audit.rules import rules_from_config
from ..audit.scanner import AuditScanner
from ..checkers.registry import CheckerRegistry, create_checker
from ..config.models import GateConfig
from ..reporting.base import Reporter
from .executor import StepExecutor
from .models import PipelineStep
from .sequencer import AuditStage, StageSequencer


def build_steps(
    config: GateConfig,
    project_root: Union[str, Path],
    registry: Optional[CheckerRegistry] = None,
) -> List[PipelineStep]:
    """Create one PipelineStep per configured step, numbered from 1."""
    root = Path(project_root)
    return [
        PipelineStep(
            name=step.name,
            ordinal=ordinal,
            action=create_checker(step, root, registry),
            required=step.required,
            success_message=step.success_message,
            failure_message=step.failure_message,
        )
        for ordinal, step in enumerate(config.steps, 1)
    ]


def build_audit_stage(
    config: GateConfig, project_root: Union[str, Path], strict: bool = False
) -> Optional[AuditStage]:
    audit = config.audit
    if not audit.enabled:
        return None
    return AuditStage(
        root=Path(project_root) / audit.root,
        rules=rules_from_config(audit.rules),
        name=audit.name,
        fail_on_findings=audit.fail_on_findings or strict,
    )


def build_scanner(config: GateConfig, project_root: Union[str, Path]) -> AuditScanner:
    return AuditScanner(
        exclude=config.audit.exclude,
        include_hidden=config.audit.include_hidden,
        relative_to=project_root,
    )


def build_sequencer(
    config: GateConfig,
    project_root: Union[str, Path],
    reporter: Reporter,
    strict_audit: bool = False,
    executor: Optional[StepExecutor] = None,
) -> StageSequencer:
    """Create a sequencer wired to the configured audit stage."""
    return StageSequencer(
        reporter=reporter,
        executor=executor,
        scanner=build_scanner(config, project_root),
        audit=build_audit_stage(config, project_root, strict_audit),
        title=config.title,
        subtitle=config.subtitle,
    )
