"""Pipeline configuration models."""

import re
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .harness import HarnessConfig


class StepKind(str, Enum):
    """Supported step kinds, one checker variant each."""

    TOOLCHAIN = "toolchain"
    FORMAT = "format"
    LINT = "lint"
    UNIT_TEST = "unit_test"
    INTEGRATION_TEST = "integration_test"
    BROWSER_TEST = "browser_test"
    COMMAND = "command"


class Severity(str, Enum):
    """Severity attached to an audit rule."""

    INFO = "info"
    WARNING = "warning"


class StepConfig(BaseModel):
    """Configuration for a single pipeline step.

    Attributes:
        name: Label printed as ``[Step i/N] <name>...``.
        kind: Which checker variant runs this step.
        command: Process argv. For toolchain steps the first element is the
            executable looked up on PATH.
        required: A failing required step stops the pipeline.
        success_message: Printed after the step passes.
        failure_message: Printed after the step fails.
        working_dir: Directory the command runs in, relative to the project root.
        env: Extra environment variables for the command.
        harness: Browser-test harness settings (browser_test steps only).
    """

    name: str = Field(..., min_length=1)
    kind: StepKind
    command: List[str] = Field(default_factory=list)
    required: bool = True
    success_message: Optional[str] = None
    failure_message: Optional[str] = None
    working_dir: Optional[str] = None
    env: Dict[str, str] = Field(default_factory=dict)
    harness: Optional[HarnessConfig] = None

    @model_validator(mode="after")
    def validate_kind_fields(self) -> "StepConfig":
        """Ensure each kind gets the fields it needs."""
        if self.kind == StepKind.BROWSER_TEST:
            if self.harness is None:
                self.harness = HarnessConfig()
        elif not self.command:
            raise ValueError(f"Step '{self.name}' ({self.kind.value}) needs a command")
        elif self.harness is not None:
            raise ValueError(
                f"Step '{self.name}': harness settings are only valid for browser_test"
            )
        return self


class AuditRuleConfig(BaseModel):
    """A single audit rule: a textual pattern paired with a severity."""

    id: str = Field(..., pattern=r"^[A-Za-z0-9_.-]+$")
    pattern: str = Field(..., min_length=1)
    regex: bool = Field(
        default=False, description="Treat pattern as a regular expression"
    )
    severity: Severity = Severity.WARNING
    message: Optional[str] = None

    @model_validator(mode="after")
    def validate_regex(self) -> "AuditRuleConfig":
        if self.regex:
            try:
                re.compile(self.pattern)
            except re.error as e:
                raise ValueError(f"Rule '{self.id}' has an invalid regex: {e}")
        return self


class AuditConfig(BaseModel):
    """Configuration for the audit scan that closes the pipeline."""

    enabled: bool = True
    name: str = "Security audit check"
    root: str = Field(default="src", description="Source tree to scan")
    rules: List[AuditRuleConfig] = Field(default_factory=list)
    exclude: List[str] = Field(
        default_factory=list, description="Glob patterns of paths to skip"
    )
    include_hidden: bool = False
    fail_on_findings: bool = Field(
        default=False,
        description="Strict compliance mode: any finding fails the pipeline",
    )

    @field_validator("rules")
    @classmethod
    def validate_unique_rules(cls, v: List[AuditRuleConfig]) -> List[AuditRuleConfig]:
        ids = [rule.id for rule in v]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Duplicate audit rule ids: {', '.join(duplicates)}")
        return v


class GateConfig(BaseModel):
    """Top-level pipeline configuration."""

    title: str = "Build Validation Pipeline"
    subtitle: Optional[str] = None
    steps: List[StepConfig] = Field(..., min_length=1)
    audit: AuditConfig = Field(default_factory=AuditConfig)

    @field_validator("steps")
    @classmethod
    def validate_unique_names(cls, v: List[StepConfig]) -> List[StepConfig]:
        names = [step.name for step in v]
        if len(names) != len(set(names)):
            raise ValueError(f"Step names must be unique, got {names}")
        return v

    @property
    def total_stages(self) -> int:
        """Number of stages shown in ``[Step i/N]``, audit included."""
        return len(self.steps) + (1 if self.audit.enabled else 0)
