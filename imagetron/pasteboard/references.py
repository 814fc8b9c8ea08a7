"""Extract photo-library identifiers from clipboard file references.

Photos puts temporary files on the clipboard whose names embed the asset UUID,
e.g. ``/var/folders/.../3F2504E0-4F89-11D3-9A0C-0305E82C3301_1_105_c.jpeg``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from urllib.parse import unquote, urlsplit

UUID_PATTERN = re.compile(
    r"[0-9A-F]{8}-[0-9A-F]{4}-[0-9A-F]{4}-[0-9A-F]{4}-[0-9A-F]{12}",
    re.IGNORECASE,
)


def last_path_component(reference: str) -> str:
    """Filename part of a path or URL string; empty for a bare root."""
    ref = str(reference)
    if "://" in ref:
        ref = unquote(urlsplit(ref).path)
    ref = ref.replace("\\", "/").rstrip("/")
    return ref.rsplit("/", 1)[-1]


def extract_asset_references(references: Iterable[str]) -> list[str]:
    """Return the first UUID found in each reference's filename, in input order.

    References without a match are skipped.
    """
    found: list[str] = []
    for ref in references:
        match = UUID_PATTERN.search(last_path_component(ref))
        if match:
            found.append(match.group(0))
    return found
