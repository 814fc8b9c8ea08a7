"""JPEG optimization through an external `jpegoptim` process.

The optimizer fails closed: when the executable is missing or a run fails,
callers get an exception rather than the unoptimized input back.
"""

from __future__ import annotations

import shutil
import subprocess

from imagetron.logger import get_logger

_logger = get_logger("optimizer")

DEFAULT_EXECUTABLE = "jpegoptim"
DEFAULT_MAX_QUALITY = 70
INSTALL_HINT = "Install with: brew install jpegoptim (or: sudo port install jpegoptim)"


class OptimizerError(RuntimeError):
    pass


class OptimizerNotFound(OptimizerError):
    pass


def find_optimizer(name: str = DEFAULT_EXECUTABLE) -> str | None:
    """Resolve `name` on PATH; None when it is not installed."""
    return shutil.which(name)


class JpegOptimizer:
    def __init__(
        self,
        executable: str = DEFAULT_EXECUTABLE,
        max_quality: int = DEFAULT_MAX_QUALITY,
        timeout: float = 60.0,
    ) -> None:
        self.executable = executable
        self.max_quality = int(max_quality)
        self.timeout = float(timeout)
        self._path: str | None = None
        self._probed = False

    def locate(self, refresh: bool = False) -> str | None:
        if refresh or not self._probed:
            self._path = find_optimizer(self.executable)
            self._probed = True
            if self._path is None:
                _logger.warning("%s not found in PATH. %s", self.executable, INSTALL_HINT)
            else:
                _logger.debug("using optimizer: %s", self._path)
        return self._path

    @property
    def available(self) -> bool:
        return self.locate() is not None

    def command(self, path: str) -> list[str]:
        # read stdin, write stdout, drop all metadata, cap quality
        return [path, "--stdin", "--stdout", "--strip-all", f"-m{self.max_quality}"]

    def optimize(self, data: bytes) -> bytes:
        path = self.locate()
        if path is None:
            raise OptimizerNotFound(f"{self.executable} not found in PATH")

        try:
            proc = subprocess.run(
                self.command(path),
                input=data,
                capture_output=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise OptimizerError(f"{self.executable} timed out after {self.timeout:g}s") from exc
        except OSError as exc:
            raise OptimizerError(f"failed to run {self.executable}: {exc}") from exc

        if proc.returncode != 0 or not proc.stdout:
            stderr = proc.stderr.decode("utf-8", errors="replace").strip() or "unknown error"
            raise OptimizerError(f"{self.executable} failed (exit {proc.returncode}): {stderr}")

        _logger.debug("optimized %d -> %d bytes", len(data), len(proc.stdout))
        return proc.stdout
