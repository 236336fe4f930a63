"""Checker capability interface for external tool invocations."""

import logging
import os
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Type

from ..config.models import StepKind
from ..errors import CommandFailure, StepError, ToolMissing

logger = logging.getLogger(__name__)

OutputSink = Callable[[str], None]


def discard_output(line: str) -> None:
    pass


@dataclass
class CheckOutcome:
    """Output of a tool that reported success."""

    output: str = ""
    exit_code: Optional[int] = 0
    details: Dict[str, Any] = field(default_factory=dict)


class Checker(ABC):
    """One external quality check.

    ``check`` returns a CheckOutcome when the tool signals success and raises
    a StepError subclass when it signals failure or cannot be started.
    """

    kind: StepKind = StepKind.COMMAND
    error_class: Type[StepError] = CommandFailure

    @abstractmethod
    def check(self, sink: OutputSink = discard_output) -> CheckOutcome:
        """Run the check, streaming tool output lines to sink."""
        pass

    @abstractmethod
    def describe(self) -> str:
        """Human-readable description of what the check runs."""
        pass


def run_streaming(
    command: List[str],
    sink: OutputSink,
    cwd: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Tuple[int, str]:
    """Run command, forwarding combined stdout/stderr to sink line by line.

    Args:
        command: Process argv
        sink: Called with each output line as soon as it is read
        cwd: Working directory
        env: Extra environment variables layered over os.environ

    Returns:
        Tuple of (exit code, full output text)

    Raises:
        ToolMissing: If the executable or working directory cannot be found
            or the process cannot be started
    """
    if cwd is not None and not Path(cwd).is_dir():
        raise ToolMissing(f"Working directory does not exist: {cwd}")

    process_env = None
    if env:
        process_env = dict(os.environ)
        process_env.update(env)

    logger.debug(f"Running {' '.join(command)} in {cwd or os.getcwd()}")
    try:
        process = subprocess.Popen(
            command,
            cwd=cwd,
            env=process_env,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
        )
    except FileNotFoundError as e:
        raise ToolMissing(f"{command[0]}: command not found") from e
    except PermissionError as e:
        raise ToolMissing(f"{command[0]}: permission denied") from e
    except OSError as e:
        raise ToolMissing(f"{command[0]}: cannot be started ({e})") from e

    lines: List[str] = []
    # Decoded per line; \r and \r\n are kept as written
    with process:
        for raw in iter(process.stdout.readline, b""):
            line = raw.decode("utf-8", errors="replace")
            sink(line)
            lines.append(line)
        exit_code = process.wait()

    logger.debug(f"{command[0]} exited with code {exit_code}")
    return exit_code, "".join(lines)
