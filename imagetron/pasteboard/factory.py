import platform

from .base import ClipboardBackend


def get_clipboard_backend() -> ClipboardBackend:
    system = platform.system()

    if system == "Darwin":
        from .macos import MacPasteboard

        return MacPasteboard()

    from .qt_clipboard import QtClipboard

    return QtClipboard()
