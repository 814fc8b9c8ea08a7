"""Image decode, resize and JPEG encode using pyvips."""

from __future__ import annotations

import contextlib

import pyvips  # type: ignore

from imagetron.logger import get_logger

_logger = get_logger("transformer")

DEFAULT_MAX_WIDTH = 1600
DEFAULT_JPEG_QUALITY = 0.85
_MAX_ALPHA = {"uchar": 255, "ushort": 65535}


class EncodeError(RuntimeError):
    """The JPEG encoder produced no output for an image."""


def decode_image(data: bytes) -> pyvips.Image:
    """Decode encoded image bytes (JPEG/HEIC/PNG/...) and apply EXIF orientation."""
    image = pyvips.Image.new_from_buffer(data, "")
    with contextlib.suppress(pyvips.Error):
        image = image.autorot()
    return image


def scaled_size(width: int, height: int, max_width: int) -> tuple[int, int]:
    """Target size for `resize_image`; never larger than the input."""
    if width <= max_width:
        return width, height
    ratio = max_width / width
    return max_width, max(1, int(height * ratio))


def resize_image(image: pyvips.Image, max_width: int = DEFAULT_MAX_WIDTH) -> pyvips.Image:
    """Shrink to `max_width` keeping the aspect ratio; smaller images are returned as-is."""
    if image.width <= max_width:
        return image

    new_w, new_h = scaled_size(image.width, image.height, max_width)
    # FORCE pins the exact output size; thumbnail_image keeps alpha and uses lanczos3.
    resized = image.thumbnail_image(new_w, height=new_h, size=pyvips.Size.FORCE)
    _logger.debug("resized %dx%d -> %dx%d", image.width, image.height, resized.width, resized.height)
    return resized


def encode_jpeg(image: pyvips.Image, quality: float = DEFAULT_JPEG_QUALITY) -> bytes:
    """Encode as baseline sRGB JPEG. `quality` is a compression factor in [0, 1]."""
    q = max(1, min(100, round(max(0.0, min(1.0, float(quality))) * 100)))
    try:
        # 16-bit sources (rgb16, grey16) become 8-bit here, alpha included
        with contextlib.suppress(pyvips.Error):
            image = image.colourspace("srgb")
        if image.hasalpha():
            max_alpha = _MAX_ALPHA.get(image.format, 255)
            image = image.flatten(background=[max_alpha] * (image.bands - 1), max_alpha=max_alpha)
        if image.format == "ushort":
            image = image >> 8
        if image.format != "uchar":
            image = image.cast("uchar")
        data = image.jpegsave_buffer(Q=q)
    except pyvips.Error as exc:
        raise EncodeError(f"jpeg encode failed: {exc}") from exc
    if not data:
        raise EncodeError("jpeg encode produced no data")
    return bytes(data)
