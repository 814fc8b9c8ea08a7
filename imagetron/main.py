from __future__ import annotations

import argparse
import os
import signal
import sys
from collections.abc import Sequence

from imagetron.logger import get_logger
from imagetron.photo_engine.disk_cache import DiskCache
from imagetron.photo_engine.optimizer import JpegOptimizer
from imagetron.photo_engine.pipeline import PhotoPipeline
from imagetron.settings_manager import SettingsManager, default_settings_path

logger = get_logger("main")

EXIT_OK = 0
EXIT_OPTIMIZER_MISSING = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="imagetron",
        description="Turn photos copied from Photos into optimized JPEG files on the clipboard.",
    )
    parser.add_argument("--log-level", help="Set log level (debug, info, warning, error)")
    parser.add_argument("--log-cats", help="Comma separated log categories, e.g. pipeline,optimizer")
    parser.add_argument("--settings", help="Settings JSON file")
    parser.add_argument("--cache-dir", help="Override the cache directory")
    action = parser.add_mutually_exclusive_group()
    action.add_argument("--once", action="store_true", help="Process the current clipboard once and exit")
    action.add_argument("--list", action="store_true", help="Print cached files, most recent first")
    action.add_argument("--clear-cache", action="store_true", help="Delete all cached files")
    return parser


def _apply_logging_options(args: argparse.Namespace) -> None:
    # Reflect CLI logging options in env so every get_logger() call picks them up.
    if args.log_level:
        os.environ["IMAGETRON_LOG_LEVEL"] = args.log_level
    if args.log_cats:
        os.environ["IMAGETRON_LOG_CATS"] = args.log_cats
    get_logger()


def build_cache(settings: SettingsManager, cache_dir: str | None = None) -> DiskCache:
    return DiskCache(cache_dir or settings.cache_dir)


def build_pipeline(settings: SettingsManager, cache: DiskCache) -> PhotoPipeline:
    from imagetron.photo_engine.library import get_asset_library

    optimizer = JpegOptimizer(
        executable=settings.optimizer_executable,
        max_quality=settings.optimizer_max_quality,
        timeout=settings.optimizer_timeout,
    )
    return PhotoPipeline(
        get_asset_library(),
        cache,
        optimizer,
        max_width=settings.max_width,
        jpeg_quality=settings.jpeg_quality,
    )


def run(args: argparse.Namespace) -> int:
    settings = SettingsManager(args.settings or default_settings_path())
    cache = build_cache(settings, args.cache_dir)

    if args.list:
        for path in cache.list_recent(settings.recent_limit):
            print(path)
        return EXIT_OK

    if args.clear_cache:
        try:
            removed = cache.clear()
        except OSError as exc:
            logger.error("failed to clear cache: %s", exc)
            return EXIT_ERROR
        print(f"Cleared cache: {removed} file(s) deleted")
        return EXIT_OK

    from PySide6.QtGui import QGuiApplication

    from imagetron.app.controller import PipelineController
    from imagetron.pasteboard.factory import get_clipboard_backend

    app = QGuiApplication.instance() or QGuiApplication(sys.argv[:1])
    app.setApplicationName("imagetron")
    app.setQuitOnLastWindowClosed(False)

    controller = PipelineController(
        get_clipboard_backend(),
        build_pipeline(settings, cache),
        recent_limit=settings.recent_limit,
        poll_interval_ms=settings.poll_interval_ms,
    )
    try:
        # Both modes need the optimizer; nothing unoptimized is ever cached.
        if args.once:
            if not controller.check_optimizer():
                return EXIT_OPTIMIZER_MISSING
            return EXIT_OK if controller.run_once() is not None else EXIT_ERROR

        if not controller.start():
            return EXIT_OPTIMIZER_MISSING

        logger.info("imagetron started; cache: %s", cache.cache_dir)
        signal.signal(signal.SIGINT, signal.SIG_DFL)
        return app.exec()
    finally:
        controller.shutdown()


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _apply_logging_options(args)
    return run(args)


if __name__ == "__main__":
    raise SystemExit(main())
