"""Pattern-based audit scan over a source tree."""

import fnmatch
import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Union

from ..errors import AuditScanError
from .rules import AuditFinding, AuditRule

logger = logging.getLogger(__name__)

# Bytes sniffed for a NUL to decide a file is binary
BINARY_SNIFF_BYTES = 8192


class AuditScanner:
    """Walks a source tree and reports every line matching an audit rule.

    The walk is sequential and sorted, so the same tree always yields the
    same findings in the same order. Matches never stop the scan; only a
    root that cannot be read at all raises.
    """

    def __init__(
        self,
        exclude: Sequence[str] = (),
        include_hidden: bool = False,
        relative_to: Optional[Union[str, Path]] = None,
    ):
        """Initialize the scanner.

        Args:
            exclude: Glob patterns matched against relative paths and names
            include_hidden: Whether to descend into dot-files and dot-directories
            relative_to: Report finding paths relative to this directory
        """
        self.exclude = list(exclude)
        self.include_hidden = include_hidden
        self.relative_to = Path(relative_to) if relative_to is not None else None
        self.skipped: List[str] = []

    def scan(
        self, root: Union[str, Path], rules: Iterable[AuditRule]
    ) -> List[AuditFinding]:
        """Scan root recursively for rule matches.

        Args:
            root: Source tree to walk
            rules: Audit rules to apply to every line

        Returns:
            All findings, ordered by file path, line and rule order

        Raises:
            AuditScanError: If root is missing or is not a readable directory
        """
        root = Path(root)
        rules = list(rules)
        self.skipped = []

        if not root.exists():
            raise AuditScanError(f"Audit source tree does not exist: {root}")
        if not root.is_dir():
            raise AuditScanError(f"Audit source tree is not a directory: {root}")
        if not os.access(root, os.R_OK | os.X_OK):
            raise AuditScanError(f"Permission denied reading audit source tree: {root}")

        findings: List[AuditFinding] = []
        if not rules:
            logger.debug("No audit rules configured, skipping walk")
            return findings

        scanned = 0
        for path in self._iter_files(root):
            scanned += 1
            findings.extend(self._scan_file(path, rules))

        logger.info(
            f"Audit scanned {scanned} file(s) under {root}: "
            f"{len(findings)} finding(s), {len(self.skipped)} skipped"
        )
        return findings

    def _iter_files(self, root: Path) -> Iterator[Path]:
        def on_error(error: OSError) -> None:
            logger.warning(f"Cannot read directory {error.filename}: {error.strerror}")
            self.skipped.append(str(error.filename))

        for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
            current = Path(dirpath)
            dirnames[:] = sorted(
                d for d in dirnames if self._wanted(current / d, root)
            )
            for name in sorted(filenames):
                path = current / name
                if self._wanted(path, root):
                    yield path

    def _wanted(self, path: Path, root: Path) -> bool:
        if not self.include_hidden and path.name.startswith("."):
            return False
        relative = path.relative_to(root).as_posix()
        for pattern in self.exclude:
            if fnmatch.fnmatch(relative, pattern) or fnmatch.fnmatch(path.name, pattern):
                return False
        return True

    def _scan_file(self, path: Path, rules: List[AuditRule]) -> List[AuditFinding]:
        try:
            data = path.read_bytes()
        except OSError as e:
            logger.warning(f"Skipping unreadable file {path}: {e}")
            self.skipped.append(str(path))
            return []

        if b"\0" in data[:BINARY_SNIFF_BYTES]:
            logger.debug(f"Skipping binary file {path}")
            return []

        display = self._display_path(path)
        findings = []
        text = data.decode("utf-8", errors="replace")
        lines = text.split("\n") if text else []
        if text.endswith("\n"):
            lines.pop()
        for number, line in enumerate(lines, 1):
            line = line.rstrip("\r")
            for rule in rules:
                if rule.matches(line):
                    findings.append(
                        AuditFinding(
                            path=display,
                            line=number,
                            rule_id=rule.id,
                            severity=rule.severity,
                            text=line.strip(),
                        )
                    )
        return findings

    def _display_path(self, path: Path) -> str:
        if self.relative_to is not None:
            try:
                return path.relative_to(self.relative_to).as_posix()
            except ValueError:
                pass
        return path.as_posix()
