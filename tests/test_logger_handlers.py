import logging
import sys

from imagetron import logger as im_logger


def _stderr_handlers(base: logging.Logger) -> list[logging.Handler]:
    return [
        h
        for h in base.handlers
        if isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stderr
    ]


def test_setup_logger_idempotent_handlers(monkeypatch):
    """Calling setup_logger() repeatedly should leave exactly one stderr StreamHandler."""
    monkeypatch.delenv("IMAGETRON_LOG_LEVEL", raising=False)
    monkeypatch.delenv("IMAGETRON_LOG_CATS", raising=False)
    base = im_logger.setup_logger(level=logging.DEBUG)
    _ = im_logger.setup_logger(level=logging.DEBUG)

    assert len(_stderr_handlers(base)) == 1
    assert base.propagate is False


def test_env_level_overrides_argument(monkeypatch):
    monkeypatch.setenv("IMAGETRON_LOG_LEVEL", "error")
    base = im_logger.setup_logger(level=logging.DEBUG)
    assert base.level == logging.ERROR

    monkeypatch.setenv("IMAGETRON_LOG_LEVEL", "nonsense")
    base = im_logger.setup_logger(level=logging.WARNING)
    assert base.level == logging.WARNING


def test_category_filter_limits_output(monkeypatch):
    monkeypatch.delenv("IMAGETRON_LOG_LEVEL", raising=False)
    monkeypatch.setenv("IMAGETRON_LOG_CATS", "pipeline, optimizer")
    base = im_logger.setup_logger(level=logging.DEBUG)

    (handler,) = _stderr_handlers(base)
    record = base.getChild("pipeline").makeRecord(
        "imagetron.pipeline", logging.INFO, __file__, 1, "saved", None, None
    )
    other = base.getChild("disk_cache").makeRecord(
        "imagetron.disk_cache", logging.INFO, __file__, 1, "saved", None, None
    )
    assert handler.filter(record)
    assert not handler.filter(other)

    monkeypatch.delenv("IMAGETRON_LOG_CATS")
    im_logger.setup_logger(level=logging.DEBUG)
    assert handler.filters == []


def test_get_logger_returns_children():
    assert im_logger.get_logger("pipeline").name == "imagetron.pipeline"
    assert im_logger.get_logger().name == "imagetron"
