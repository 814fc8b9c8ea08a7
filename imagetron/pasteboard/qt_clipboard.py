"""Clipboard backend on top of QClipboard.

Qt exposes no change counter, so one is kept here and bumped on every
`dataChanged` notification. Must be used from the GUI thread.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from PySide6.QtCore import QMimeData, QUrl
from PySide6.QtGui import QGuiApplication

from imagetron.logger import get_logger

from .base import ClipboardBackend

_logger = get_logger("qt_clipboard")


class QtClipboard(ClipboardBackend):
    def __init__(self, clipboard: Any | None = None) -> None:
        cb = clipboard if clipboard is not None else QGuiApplication.clipboard()
        if cb is None:
            raise RuntimeError("clipboard unavailable (no QGuiApplication?)")
        self._cb = cb
        self._change_count = 0
        self._cb.dataChanged.connect(self._on_data_changed)

    def _on_data_changed(self) -> None:
        self._change_count += 1

    def change_count(self) -> int:
        return self._change_count

    def file_urls(self) -> list[str]:
        mime = self._cb.mimeData()
        if mime is None or not mime.hasUrls():
            return []

        refs: list[str] = []
        for url in mime.urls():
            if url.isLocalFile():
                refs.append(url.toLocalFile())
            else:
                refs.append(url.toString())
        return refs

    def clear(self) -> None:
        self._cb.clear()

    def write_file_urls(self, paths: Sequence[str | Path]) -> None:
        mime = QMimeData()
        mime.setUrls([QUrl(Path(p).resolve().as_uri()) for p in paths])
        self._cb.setMimeData(mime)
        _logger.debug("wrote %d file urls", len(paths))
