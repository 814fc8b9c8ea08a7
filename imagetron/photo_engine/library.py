"""Photo library client interface.

The pipeline only needs two calls: an authorization check and a batch resolve
from asset identifiers to decoded images plus capture metadata.
"""

from __future__ import annotations

import platform
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from imagetron.logger import get_logger

_logger = get_logger("library")


@dataclass(frozen=True)
class ResolvedAsset:
    identifier: str
    image: Any  # pyvips.Image
    creation_date: datetime | None
    pixel_width: int
    pixel_height: int


class AssetLibrary(ABC):
    @abstractmethod
    def authorize(self) -> bool:
        """Obtain read access, prompting if needed. False when denied."""

    @abstractmethod
    def resolve(self, references: Sequence[str]) -> list[ResolvedAsset]:
        """Fetch full-resolution images for the given identifiers.

        Unknown identifiers are dropped; result order is not tied to input order.
        """


class UnavailableLibrary(AssetLibrary):
    """Stand-in for platforms without a system photo library: access is always denied."""

    def __init__(self, reason: str = "no photo library on this platform") -> None:
        self.reason = reason
        self._warned = False

    def authorize(self) -> bool:
        if not self._warned:
            _logger.warning("photo library unavailable: %s", self.reason)
            self._warned = True
        return False

    def resolve(self, references: Sequence[str]) -> list[ResolvedAsset]:
        return []


def get_asset_library() -> AssetLibrary:
    system = platform.system()
    if system == "Darwin":
        from .photokit import PhotoKitLibrary

        return PhotoKitLibrary()
    return UnavailableLibrary(f"Photos library is not available on {system}")
