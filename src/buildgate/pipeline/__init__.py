"""Pipeline sequencing and step execution for buildgate."""

from .models import (
    Outcome,
    PipelineRun,
    PipelineStep,
    StepResult,
    Verdict,
    VerdictStatus,
)
from .executor import StepExecutor
from .sequencer import AuditStage, StageSequencer
from .builder import build_audit_stage, build_scanner, build_sequencer, build_steps

__all__ = [
    "Outcome",
    "PipelineRun",
    "PipelineStep",
    "StepResult",
    "Verdict",
    "VerdictStatus",
    "StepExecutor",
    "AuditStage",
    "StageSequencer",
    "build_audit_stage",
    "build_scanner",
    "build_sequencer",
    "build_steps",
]
