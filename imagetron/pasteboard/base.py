from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path


class ClipboardBackend(ABC):
    """System clipboard as seen by the pipeline: a change counter plus file references."""

    @abstractmethod
    def change_count(self) -> int:
        pass

    @abstractmethod
    def file_urls(self) -> list[str]:
        """File references currently on the clipboard (local paths or URL strings)."""

    @abstractmethod
    def clear(self) -> None:
        pass

    @abstractmethod
    def write_file_urls(self, paths: Sequence[str | Path]) -> None:
        pass
