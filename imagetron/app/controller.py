"""PipelineController: glue between the clipboard, the pipeline and the UI.

Clipboard reads and writes happen on the thread that owns the controller (the
GUI thread). Pipeline runs execute on a single worker thread, so at most one
run writes to the cache at a time. A trigger that arrives while a run is in
flight is coalesced into one follow-up run.
"""

from __future__ import annotations

from concurrent.futures import Executor, Future, ThreadPoolExecutor
from pathlib import Path

from PySide6.QtCore import QObject, Signal, Slot

from imagetron.logger import get_logger
from imagetron.pasteboard.base import ClipboardBackend
from imagetron.pasteboard.monitor import ChangeMonitor
from imagetron.pasteboard.publisher import ClipboardPublisher
from imagetron.photo_engine.optimizer import INSTALL_HINT
from imagetron.photo_engine.pipeline import PhotoPipeline, PipelineResult

_logger = get_logger("controller")

DEFAULT_RECENT_LIMIT = 20


class PipelineController(QObject):
    cache_changed = Signal(list)  # recent paths, most recent first
    run_finished = Signal(object)  # PipelineResult
    optimizer_missing = Signal(str)  # user-facing message, emitted at most once
    error = Signal(str, str)  # where, message

    _run_done = Signal(object)  # PipelineResult | None, crosses from the worker thread

    def __init__(
        self,
        backend: ClipboardBackend,
        pipeline: PhotoPipeline,
        recent_limit: int = DEFAULT_RECENT_LIMIT,
        poll_interval_ms: int = 1000,
        executor: Executor | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._backend = backend
        self._pipeline = pipeline
        self._cache = pipeline.cache
        self._recent_limit = int(recent_limit)
        self._publisher = ClipboardPublisher(backend)

        self._monitor = ChangeMonitor(backend, poll_interval_ms, self)
        self._monitor.changed.connect(self._on_clipboard_changed)

        self._owns_executor = executor is None
        self._executor: Executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="imagetron-pipeline"
        )
        self._in_flight = False
        self._rerun_requested = False
        self._missing_reported = False
        self._run_done.connect(self._on_run_done)

    # ---- lifecycle -------------------------------------------------
    @property
    def monitor(self) -> ChangeMonitor:
        return self._monitor

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def pipeline(self) -> PhotoPipeline:
        return self._pipeline

    def check_optimizer(self) -> bool:
        """Probe PATH for the optimizer; reports the missing tool once."""
        if self._pipeline.optimizer.locate(refresh=True) is None:
            self._report_optimizer_missing()
            return False
        return True

    def start(self) -> bool:
        """Start watching the clipboard. False (and nothing started) without the optimizer."""
        if not self.check_optimizer():
            return False
        self._monitor.start()
        return True

    def shutdown(self) -> None:
        self._monitor.stop()
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)

    def _report_optimizer_missing(self) -> None:
        if self._missing_reported:
            return
        self._missing_reported = True
        message = (
            f"{self._pipeline.optimizer.executable} not found. "
            f"It is required to optimize images. {INSTALL_HINT}"
        )
        _logger.error(message)
        self.optimizer_missing.emit(message)

    # ---- pipeline runs --------------------------------------------
    @Slot(int)
    def _on_clipboard_changed(self, _change_count: int) -> None:
        self.trigger()

    def trigger(self) -> bool:
        """Schedule a run for the current clipboard. False when coalesced or unreadable."""
        if self._in_flight:
            self._rerun_requested = True
            _logger.debug("run in flight; trigger coalesced")
            return False

        try:
            urls = self._backend.file_urls()
        except Exception as exc:
            _logger.warning("reading clipboard failed: %s", exc)
            return False

        self._in_flight = True
        future = self._executor.submit(self._pipeline.process, urls)
        future.add_done_callback(self._on_future_done)
        return True

    def _on_future_done(self, future: Future) -> None:
        # Runs on the worker thread; hand the result to the owning thread.
        result: PipelineResult | None
        try:
            result = future.result()
        except Exception:
            _logger.exception("pipeline run failed")
            result = None
        self._run_done.emit(result)

    @Slot(object)
    def _on_run_done(self, result: PipelineResult | None) -> None:
        self._in_flight = False
        if result is None:
            self.error.emit("pipeline", "pipeline run failed")
        else:
            self._finish_run(result)

        if self._rerun_requested:
            self._rerun_requested = False
            self.trigger()

    def _finish_run(self, result: PipelineResult) -> None:
        if result.optimizer_missing:
            self._report_optimizer_missing()
        if result.saved:
            self.copy_to_clipboard()
        self.run_finished.emit(result)
        if result.saved:
            self.cache_changed.emit(self.recent_files())

    def run_once(self) -> PipelineResult | None:
        """Process the current clipboard synchronously on the calling thread."""
        if self._in_flight:
            return None
        try:
            urls = self._backend.file_urls()
        except Exception as exc:
            _logger.warning("reading clipboard failed: %s", exc)
            return None
        result = self._pipeline.process(urls)
        self._finish_run(result)
        return result

    # ---- presentation-layer API -----------------------------------
    def recent_files(self) -> list[Path]:
        return self._cache.list_recent(self._recent_limit)

    def cached_count(self) -> int:
        return self._cache.count()

    def copy_to_clipboard(self) -> bool:
        """Put the recent set on the clipboard. False when there is nothing to copy."""
        try:
            return self._publisher.publish(self.recent_files())
        except Exception as exc:
            _logger.error("copy to clipboard failed: %s", exc)
            self.error.emit("copy_to_clipboard", str(exc))
            return False

    def clear_cache(self) -> int | None:
        try:
            removed = self._cache.clear()
        except OSError as exc:
            _logger.error("failed to clear cache: %s", exc)
            self.error.emit("clear_cache", str(exc))
            self.cache_changed.emit(self.recent_files())
            return None
        self.cache_changed.emit(self.recent_files())
        return removed
