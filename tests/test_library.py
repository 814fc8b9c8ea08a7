from __future__ import annotations

import logging
import platform

import pytest

from imagetron.photo_engine.library import UnavailableLibrary, get_asset_library


def test_unavailable_library_denies_and_warns_once(caplog: pytest.LogCaptureFixture) -> None:
    lib = UnavailableLibrary("no Photos here")
    base = logging.getLogger("imagetron")
    base.addHandler(caplog.handler)
    try:
        with caplog.at_level(logging.WARNING, logger="imagetron"):
            assert lib.authorize() is False
            assert lib.authorize() is False
    finally:
        base.removeHandler(caplog.handler)

    warnings = [r for r in caplog.records if "photo library unavailable" in r.getMessage()]
    assert len(warnings) == 1
    assert lib.resolve(["3F2504E0-4F89-11D3-9A0C-0305E82C3301"]) == []


@pytest.mark.skipif(platform.system() == "Darwin", reason="macOS uses PhotoKit")
def test_other_platforms_get_the_unavailable_library() -> None:
    assert isinstance(get_asset_library(), UnavailableLibrary)
