"""Checker implementations wrapping external quality tools."""

from .base import CheckOutcome, Checker, OutputSink, discard_output, run_streaming
from .command import (
    CommandChecker,
    FormatChecker,
    IntegrationTestChecker,
    LintChecker,
    UnitTestChecker,
)
from .harness import HarnessChecker, is_ci
from .registry import CheckerRegistry, create_checker, get_registry
from .server import ServerBootstrap, is_server_ready
from .toolchain import ToolchainChecker

__all__ = [
    # Interface
    "Checker",
    "CheckOutcome",
    "OutputSink",
    "discard_output",
    "run_streaming",
    # Variants
    "ToolchainChecker",
    "CommandChecker",
    "FormatChecker",
    "LintChecker",
    "UnitTestChecker",
    "IntegrationTestChecker",
    "HarnessChecker",
    "ServerBootstrap",
    "is_ci",
    "is_server_ready",
    # Registry
    "CheckerRegistry",
    "create_checker",
    "get_registry",
]
