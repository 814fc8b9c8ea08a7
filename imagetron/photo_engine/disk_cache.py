"""Recency-ordered disk cache of optimized JPEGs.

The directory listing plus file modification times is the whole persisted
state: there is no manifest and no in-memory index, every query rescans.
"""

from __future__ import annotations

import os
import shutil
import tempfile
import threading
from datetime import datetime
from pathlib import Path

from imagetron.logger import get_logger

_logger = get_logger("disk_cache")

CACHE_DIR_NAME = "com.imagetron"
CACHE_SUFFIX = ".jpg"
TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


def default_cache_dir() -> Path:
    return Path(tempfile.gettempdir()) / CACHE_DIR_NAME


def cache_filename(timestamp: datetime, index: int) -> str:
    return f"{timestamp.strftime(TIMESTAMP_FORMAT)}_{int(index)}{CACHE_SUFFIX}"


def _name_key(name: str) -> tuple[str, int]:
    # "<timestamp>_<index>.jpg" sorts by timestamp, then by numeric index
    stem, _sep, index = name[: -len(CACHE_SUFFIX)].rpartition("_")
    if stem and index.isdigit():
        return stem, int(index)
    return name, -1


class DiskCache:
    """Flat directory of `<yyyy-MM-dd_HH-mm-ss>_<index>.jpg` entries.

    All access is serialized with one lock so pipeline writes on the worker
    thread never interleave with listings or clears from the GUI thread.
    """

    def __init__(self, cache_dir: Path | str | None = None) -> None:
        self.cache_dir = Path(cache_dir) if cache_dir is not None else default_cache_dir()
        self._lock = threading.RLock()

    def store(self, data: bytes, timestamp: datetime, index: int) -> Path:
        """Write `data` as `<timestamp>_<index>.jpg` and return its path.

        An existing entry is never overwritten: the index is bumped until the
        name is free, so photos from separate runs sharing a second both survive.
        """
        with self._lock:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            index = int(index)
            target = self.cache_dir / cache_filename(timestamp, index)
            while target.exists():
                index += 1
                target = self.cache_dir / cache_filename(timestamp, index)
            # Write under a hidden name so a half-written file is never listed.
            fd, tmp_name = tempfile.mkstemp(prefix=".", suffix=".tmp", dir=self.cache_dir)
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                os.replace(tmp_name, target)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        _logger.info("saved: %s", target)
        return target

    def _scan(self) -> list[tuple[int, tuple[str, int], Path]]:
        entries: list[tuple[int, tuple[str, int], Path]] = []
        try:
            with os.scandir(self.cache_dir) as it:
                for entry in it:
                    if entry.name.startswith(".") or not entry.name.lower().endswith(CACHE_SUFFIX):
                        continue
                    try:
                        if not entry.is_file():
                            continue
                        mtime_ns = entry.stat().st_mtime_ns
                    except OSError:
                        # removed between listing and stat
                        continue
                    entries.append((mtime_ns, _name_key(entry.name), Path(entry.path)))
        except FileNotFoundError:
            return []
        return entries

    def list_recent(self, limit: int) -> list[Path]:
        """Most recently modified entries first, at most `limit`.

        Entries with the same mtime are ordered by name timestamp, then by the
        numeric index suffix, highest first.
        """
        if limit <= 0:
            return []
        with self._lock:
            entries = self._scan()
        entries.sort(key=lambda e: (e[0], e[1]), reverse=True)
        return [path for _mtime, _key, path in entries[:limit]]

    def count(self) -> int:
        with self._lock:
            return len(self._scan())

    def clear(self) -> int:
        """Delete every entry in the cache directory and return how many were removed.

        Not transactional: on an OSError the entries removed so far stay removed.
        """
        removed = 0
        with self._lock:
            try:
                children = list(self.cache_dir.iterdir())
            except FileNotFoundError:
                children = []
            for child in children:
                if child.is_dir() and not child.is_symlink():
                    shutil.rmtree(child)
                else:
                    child.unlink(missing_ok=True)
                removed += 1
        _logger.info("cleared cache: %d file(s) deleted", removed)
        return removed
