"""Clipboard change monitor.

Polls the backend's change counter on a QTimer and emits `changed` once per
observed transition. Any difference counts, so a counter that resets or wraps
still triggers.
"""

from __future__ import annotations

from PySide6.QtCore import QObject, QTimer, Signal

from imagetron.logger import get_logger

from .base import ClipboardBackend

_logger = get_logger("monitor")


class ChangeMonitor(QObject):
    changed = Signal(int)  # new change count

    def __init__(self, backend: ClipboardBackend, interval_ms: int = 1000, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._backend = backend
        self._last_seen: int | None = None
        self._timer = QTimer(self)
        self._timer.setInterval(int(interval_ms))
        self._timer.timeout.connect(self.poll)

    @property
    def last_seen(self) -> int | None:
        return self._last_seen

    @property
    def interval_ms(self) -> int:
        return self._timer.interval()

    def is_running(self) -> bool:
        return self._timer.isActive()

    def start(self) -> None:
        """Start polling and emit once for whatever is already on the clipboard."""
        if self._timer.isActive():
            return
        self._last_seen = self._backend.change_count()
        self._timer.start()
        _logger.debug("monitor started: count=%s interval=%dms", self._last_seen, self._timer.interval())
        self.changed.emit(self._last_seen)

    def stop(self) -> None:
        self._timer.stop()

    def poll(self) -> bool:
        """Check the counter once. Returns True when a change was emitted."""
        current = self._backend.change_count()
        if current == self._last_seen:
            return False
        self._last_seen = current
        _logger.info("clipboard changed: %s", current)
        self.changed.emit(current)
        return True
