from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from AppKit import NSPasteboard
from Foundation import NSURL

from imagetron.logger import get_logger

from .base import ClipboardBackend

_logger = get_logger("macos_pasteboard")


class MacPasteboard(ClipboardBackend):
    """General pasteboard through AppKit; uses the pasteboard's own change counter."""

    def __init__(self) -> None:
        self._pasteboard = NSPasteboard.generalPasteboard()

    def change_count(self) -> int:
        return int(self._pasteboard.changeCount())

    def file_urls(self) -> list[str]:
        urls = self._pasteboard.readObjectsForClasses_options_([NSURL], None)
        if not urls:
            return []

        refs: list[str] = []
        for url in urls:
            if url.isFileURL():
                refs.append(str(url.path()))
            else:
                refs.append(str(url.absoluteString()))
        return refs

    def clear(self) -> None:
        self._pasteboard.clearContents()

    def write_file_urls(self, paths: Sequence[str | Path]) -> None:
        urls = [NSURL.fileURLWithPath_(str(Path(p).resolve())) for p in paths]
        if not self._pasteboard.writeObjects_(urls):
            _logger.warning("pasteboard rejected %d file urls", len(urls))
