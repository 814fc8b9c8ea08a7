"""One pipeline run: clipboard references -> resolved photos -> optimized cache files.

Steps are strictly sequential within a run. Only "no access" and "nothing to
do" end a run early; every per-image failure is logged and that image skipped.
No unoptimized JPEG is ever written to the cache.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import pyvips  # type: ignore

from imagetron.logger import get_logger
from imagetron.pasteboard.references import extract_asset_references

from .disk_cache import DiskCache
from .library import AssetLibrary, ResolvedAsset
from .optimizer import JpegOptimizer, OptimizerError, OptimizerNotFound
from .transformer import DEFAULT_JPEG_QUALITY, DEFAULT_MAX_WIDTH, EncodeError, encode_jpeg, resize_image

_logger = get_logger("pipeline")


class PipelineStatus(enum.Enum):
    COMPLETED = "completed"
    NO_REFERENCES = "no_references"
    UNAUTHORIZED = "unauthorized"
    RESOLVE_FAILED = "resolve_failed"
    NO_ASSETS = "no_assets"


@dataclass
class PipelineResult:
    status: PipelineStatus
    references: list[str] = field(default_factory=list)
    resolved: int = 0
    saved: list[Path] = field(default_factory=list)
    failed: int = 0
    optimizer_missing: bool = False


class PhotoPipeline:
    def __init__(
        self,
        library: AssetLibrary,
        cache: DiskCache,
        optimizer: JpegOptimizer,
        max_width: int = DEFAULT_MAX_WIDTH,
        jpeg_quality: float = DEFAULT_JPEG_QUALITY,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.library = library
        self.cache = cache
        self.optimizer = optimizer
        self.max_width = int(max_width)
        self.jpeg_quality = float(jpeg_quality)
        self._clock = clock

    def process(self, urls: Sequence[str]) -> PipelineResult:
        references = extract_asset_references(urls)
        if not references:
            _logger.debug("no photo references among %d clipboard item(s)", len(urls))
            return PipelineResult(PipelineStatus.NO_REFERENCES)

        if not self.library.authorize():
            _logger.info("photo library access not granted; skipping run")
            return PipelineResult(PipelineStatus.UNAUTHORIZED, references=references)

        try:
            assets = self.library.resolve(references)
        except Exception as exc:
            _logger.warning("resolving %d reference(s) failed: %s", len(references), exc, exc_info=True)
            return PipelineResult(PipelineStatus.RESOLVE_FAILED, references=references)

        if not assets:
            _logger.debug("none of %d reference(s) resolved", len(references))
            return PipelineResult(PipelineStatus.NO_ASSETS, references=references)

        result = PipelineResult(PipelineStatus.COMPLETED, references=references, resolved=len(assets))
        for index, asset in enumerate(assets, start=1):
            try:
                path = self.save_asset(asset, index)
            except OptimizerNotFound as exc:
                _logger.error("not saving %s: %s", asset.identifier, exc)
                result.optimizer_missing = True
                path = None
            if path is None:
                result.failed += 1
            else:
                result.saved.append(path)

        _logger.info("saved %d photo(s) to cache", len(result.saved))
        return result

    def save_asset(self, asset: ResolvedAsset, index: int) -> Path | None:
        """Resize, encode, optimize and store one asset. None when any step fails.

        Raises OptimizerNotFound when the optimizer is not installed.
        """
        try:
            image = resize_image(asset.image, self.max_width)
            jpeg = encode_jpeg(image, self.jpeg_quality)
        except (pyvips.Error, EncodeError) as exc:
            _logger.warning("transform failed for %s: %s", asset.identifier, exc)
            return None

        try:
            optimized = self.optimizer.optimize(jpeg)
        except OptimizerNotFound:
            raise
        except OptimizerError as exc:
            _logger.warning("failed to optimize %s, not saving: %s", asset.identifier, exc)
            return None

        timestamp = asset.creation_date or self._clock()
        try:
            return self.cache.store(optimized, timestamp, index)
        except OSError as exc:
            _logger.error("failed to write %s: %s", asset.identifier, exc)
            return None
