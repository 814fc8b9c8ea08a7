"""Photo Engine - resolve, transform, optimize and cache photos.

This package provides the non-GUI processing functionality:
- Photo library access (library, photokit)
- Resize and JPEG encoding (transformer)
- External jpegoptim pass (optimizer)
- Recency-ordered disk cache (disk_cache)
- One end-to-end run (pipeline)

Usage:
    from imagetron.photo_engine import DiskCache, JpegOptimizer, PhotoPipeline
    from imagetron.photo_engine.library import get_asset_library

    pipeline = PhotoPipeline(get_asset_library(), DiskCache(), JpegOptimizer())
    result = pipeline.process(clipboard.file_urls())
"""

from .disk_cache import DiskCache, default_cache_dir
from .library import AssetLibrary, ResolvedAsset
from .optimizer import JpegOptimizer, OptimizerError, OptimizerNotFound
from .pipeline import PhotoPipeline, PipelineResult, PipelineStatus

__all__ = [
    "AssetLibrary",
    "DiskCache",
    "JpegOptimizer",
    "OptimizerError",
    "OptimizerNotFound",
    "PhotoPipeline",
    "PipelineResult",
    "PipelineStatus",
    "ResolvedAsset",
    "default_cache_dir",
]
