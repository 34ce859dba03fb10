"""External process invocation behind a small injectable interface."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from matte_maker.logger import get_logger

_logger = get_logger("process_runner")


@dataclass(frozen=True, slots=True)
class ProcessResult:
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ProcessRunner(Protocol):
    def run(self, argv: Sequence[str]) -> ProcessResult:
        """Run ``argv`` to completion; raise OSError if it cannot be started."""
        ...


class SubprocessRunner:
    """Runs commands with ``subprocess.run``, arguments passed as a list (no shell)."""

    def __init__(self, timeout: float | None = None) -> None:
        self._timeout = timeout

    def run(self, argv: Sequence[str]) -> ProcessResult:
        _logger.debug("exec: %s (%d args)", argv[0] if argv else "", max(0, len(argv) - 1))
        res = subprocess.run(
            list(argv),
            capture_output=True,
            text=True,
            check=False,
            timeout=self._timeout,
        )
        return ProcessResult(res.returncode, res.stdout or "", res.stderr or "")
