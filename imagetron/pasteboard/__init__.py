"""Clipboard access: backends, change monitoring, reference parsing, publishing."""

from .base import ClipboardBackend
from .factory import get_clipboard_backend
from .publisher import ClipboardPublisher
from .references import extract_asset_references

__all__ = [
    "ClipboardBackend",
    "ClipboardPublisher",
    "extract_asset_references",
    "get_clipboard_backend",
]
