import pytest

pyvips = pytest.importorskip("pyvips")
np = pytest.importorskip("numpy")

from imagetron.photo_engine.transformer import (  # noqa: E402
    EncodeError,
    decode_image,
    encode_jpeg,
    resize_image,
    scaled_size,
)


def _rgb(width: int, height: int, bands: int = 3):
    arr = np.zeros((height, width, bands), dtype=np.uint8)
    arr[:, :, 0] = np.linspace(0, 255, width, dtype=np.uint8)[None, :]
    if bands == 4:
        arr[:, :, 3] = 128
    return pyvips.Image.new_from_array(arr).copy(interpretation="srgb")


def test_resize_never_upscales() -> None:
    img = _rgb(800, 600)
    out = resize_image(img, 1600)
    assert out is img
    assert (out.width, out.height) == (800, 600)


def test_resize_exact_width_keeps_aspect_ratio() -> None:
    img = _rgb(4000, 3000)
    out = resize_image(img, 1600)
    assert (out.width, out.height) == (1600, 1200)


def test_resize_truncates_height() -> None:
    assert scaled_size(3000, 1999, 1600) == (1600, 1066)
    out = resize_image(_rgb(3000, 1999), 1600)
    assert (out.width, out.height) == (1600, 1066)


def test_resize_is_idempotent() -> None:
    once = resize_image(_rgb(2400, 900), 1600)
    twice = resize_image(once, 1600)
    assert twice is once


def test_resize_preserves_alpha() -> None:
    out = resize_image(_rgb(2000, 1000, bands=4), 500)
    assert out.hasalpha()
    assert (out.width, out.height) == (500, 250)


def test_encode_jpeg_produces_jpeg_bytes() -> None:
    data = encode_jpeg(_rgb(64, 32))
    assert data.startswith(b"\xff\xd8")
    decoded = decode_image(data)
    assert (decoded.width, decoded.height) == (64, 32)
    assert decoded.bands == 3


def test_encode_jpeg_flattens_alpha() -> None:
    data = encode_jpeg(_rgb(40, 20, bands=4), 0.85)
    decoded = decode_image(data)
    assert not decoded.hasalpha()


def _rgba16_png(alpha: int) -> bytes:
    arr = np.zeros((20, 40, 4), dtype=np.uint16)
    arr[:, :, 3] = alpha
    img = pyvips.Image.new_from_array(arr).copy(interpretation="rgb16")
    return img.pngsave_buffer()


def test_transparent_16bit_png_flattens_to_white() -> None:
    src = decode_image(_rgba16_png(alpha=0))
    assert src.format == "ushort"

    # narrower than max_width, so it reaches the encoder unresized
    out = resize_image(src, 1600)
    assert out is src

    pixel = decode_image(encode_jpeg(out)).getpoint(5, 5)
    assert len(pixel) == 3
    assert all(v > 200 for v in pixel)


def test_half_transparent_16bit_png_blends_with_white() -> None:
    src = decode_image(_rgba16_png(alpha=32768))

    pixel = decode_image(encode_jpeg(src)).getpoint(5, 5)
    assert all(100 < v < 160 for v in pixel)


def test_quality_controls_size() -> None:
    rng = np.random.default_rng(0)
    noisy = pyvips.Image.new_from_array(rng.integers(0, 255, size=(128, 128, 3), dtype=np.uint8))
    assert len(encode_jpeg(noisy, 0.2)) < len(encode_jpeg(noisy, 0.95))


def test_out_of_range_quality_is_clamped() -> None:
    img = _rgb(16, 16)
    assert encode_jpeg(img, 5.0).startswith(b"\xff\xd8")
    assert encode_jpeg(img, -1.0).startswith(b"\xff\xd8")


def test_encoder_failure_is_an_encode_error(monkeypatch: pytest.MonkeyPatch) -> None:
    img = _rgb(16, 16)

    def _boom(self, **kwargs):  # noqa: ANN001, ARG001
        raise pyvips.Error("no encoder")

    monkeypatch.setattr(pyvips.Image, "jpegsave_buffer", _boom, raising=False)
    with pytest.raises(EncodeError):
        encode_jpeg(img)


def test_decode_rejects_garbage() -> None:
    with pytest.raises(pyvips.Error):
        decode_image(b"not an image")
