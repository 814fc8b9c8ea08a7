"""Watch the clipboard for photos copied out of Photos and republish them as optimized JPEG files."""

__version__ = "0.1.0"
