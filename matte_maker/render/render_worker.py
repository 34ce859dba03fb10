"""Background rendering of the matte with ImageMagick.

One render runs at a time per controller: the export is a single blocking
``convert`` call with no partial results and no cancellation, so overlapping
requests are rejected rather than queued.
"""

from __future__ import annotations

from collections.abc import Sequence

from PySide6.QtCore import QObject, QThread, Signal

from matte_maker.logger import get_logger

from .process_runner import ProcessRunner

_logger = get_logger("render_worker")


class RenderWorker(QThread):
    """Worker thread running one ``convert`` invocation."""

    finished_ok = Signal(str, str)  # output_path, stderr warnings
    failed = Signal(str, str)  # output_path, message

    def __init__(self, runner: ProcessRunner, argv: Sequence[str], output_path: str):
        super().__init__()
        self.runner = runner
        self.argv = list(argv)
        self.output_path = output_path

    def run(self) -> None:
        try:
            res = self.runner.run(self.argv)
        except Exception as ex:
            _logger.error("render failed to start: %s", ex)
            self.failed.emit(self.output_path, f"Error running convert command: {ex}")
            return

        if not res.ok:
            detail = res.stderr.strip() or f"exit status {res.returncode}"
            _logger.error("render exited with %d: %s", res.returncode, detail)
            self.failed.emit(self.output_path, f"Error running convert command: {detail}")
            return

        if res.stderr.strip():
            _logger.warning("render finished with warnings: %s", res.stderr.strip())
        self.finished_ok.emit(self.output_path, res.stderr.strip())


class RenderController(QObject):
    """Starts renders and forwards worker outcomes; rejects overlapping requests."""

    started = Signal(str)
    finished = Signal(str, str)
    failed = Signal(str, str)

    def __init__(self, runner: ProcessRunner, parent: QObject | None = None):
        super().__init__(parent)
        self._runner = runner
        self._worker: RenderWorker | None = None

    @property
    def busy(self) -> bool:
        return self._worker is not None

    def start(self, argv: Sequence[str], output_path: str) -> bool:
        """Start rendering; returns False when a render is already in flight."""
        if self._worker is not None:
            _logger.info("render request for %s rejected: another render is running", output_path)
            return False

        worker = RenderWorker(self._runner, argv, output_path)
        worker.finished_ok.connect(self.finished)
        worker.failed.connect(self.failed)
        worker.finished.connect(self._on_worker_finished)

        self._worker = worker
        self.started.emit(output_path)
        worker.start()
        return True

    def wait(self, msecs: int = 30000) -> bool:
        """Block until the current render ends (used at shutdown and in tests)."""
        worker = self._worker
        if worker is None:
            return True
        return bool(worker.wait(msecs))

    def _on_worker_finished(self) -> None:
        """Clean up worker after completion."""
        worker, self._worker = self._worker, None
        if worker is not None:
            # finished fires from the worker thread before it has fully exited.
            worker.wait()
