from __future__ import annotations

import pytest

pytest.importorskip("PySide6")

from imagetron.pasteboard.monitor import ChangeMonitor  # noqa: E402
from tests.helpers.fakes import FakeClipboard  # noqa: E402


def _collect(monitor: ChangeMonitor) -> list[int]:
    seen: list[int] = []
    monitor.changed.connect(lambda count: seen.append(count))
    return seen


def test_start_emits_once_unconditionally() -> None:
    cb = FakeClipboard(change_count=5)
    monitor = ChangeMonitor(cb, interval_ms=1000)
    seen = _collect(monitor)
    try:
        monitor.start()
        assert seen == [5]
        assert monitor.is_running()
        # starting again is a no-op
        monitor.start()
        assert seen == [5]
    finally:
        monitor.stop()
    assert not monitor.is_running()


def test_poll_emits_only_on_change() -> None:
    cb = FakeClipboard(change_count=1)
    monitor = ChangeMonitor(cb)
    seen = _collect(monitor)
    monitor.start()
    monitor.stop()

    assert monitor.poll() is False
    cb.copy(["/tmp/x.jpg"])
    assert monitor.poll() is True
    assert monitor.poll() is False
    assert seen == [1, 2]


def test_counter_going_backwards_still_counts_as_change() -> None:
    cb = FakeClipboard(change_count=100)
    monitor = ChangeMonitor(cb)
    seen = _collect(monitor)
    monitor.start()
    monitor.stop()

    cb.count = 3  # reset / wrap
    assert monitor.poll() is True
    assert seen == [100, 3]
    assert monitor.last_seen == 3


def test_interval_is_configurable() -> None:
    monitor = ChangeMonitor(FakeClipboard(), interval_ms=250)
    assert monitor.interval_ms == 250
