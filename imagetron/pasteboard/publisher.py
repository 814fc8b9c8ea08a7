from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from imagetron.logger import get_logger

from .base import ClipboardBackend

_logger = get_logger("publisher")


class ClipboardPublisher:
    """Replace clipboard contents with file references to cached images."""

    def __init__(self, backend: ClipboardBackend) -> None:
        self._backend = backend

    def publish(self, paths: Sequence[str | Path]) -> bool:
        # Nothing to offer: keep whatever the user had on the clipboard.
        if not paths:
            return False
        self._backend.clear()
        self._backend.write_file_urls(list(paths))
        _logger.info("copied %d image(s) to clipboard", len(paths))
        return True
