# tests/test_codec.py
import io

import pytest
from PIL import Image

from complexobs.vision.codec import ImageDecodeError, PillowImageCodec


def _png_bytes(size=(20, 10), color="red"):
    buf = io.BytesIO()
    Image.new("RGB", size, color=color).save(buf, format="PNG")
    return buf.getvalue()


def test_supported_write_formats_contains_common_formats():
    formats = PillowImageCodec().supported_write_formats()
    for name in ("png", "jpeg", "jpg", "bmp", "gif"):
        assert name in formats


def test_pillow_format_mapping():
    codec = PillowImageCodec()
    assert codec.pillow_format("png") == "PNG"
    assert codec.pillow_format("JPG") == "JPEG"
    assert codec.pillow_format(".jpeg") == "JPEG"
    assert codec.pillow_format("notaformat") is None


def test_decode_stream_bytes_and_path(tmp_path):
    codec = PillowImageCodec()
    data = _png_bytes()

    img = codec.decode(io.BytesIO(data))
    assert img.size == (20, 10)
    assert codec.is_image(img)

    assert codec.decode(data).size == (20, 10)

    p = tmp_path / "a.png"
    p.write_bytes(data)
    assert codec.decode(p).size == (20, 10)


def test_decode_invalid_data_raises():
    codec = PillowImageCodec()
    with pytest.raises(ImageDecodeError):
        codec.decode(io.BytesIO(b"definitely not an image"))


def test_decode_missing_file_raises(tmp_path):
    with pytest.raises(ImageDecodeError):
        PillowImageCodec().decode(tmp_path / "missing.png")


def test_encode_to_path_and_stream(tmp_path):
    codec = PillowImageCodec()
    img = Image.new("RGB", (8, 6), color="blue")

    p = tmp_path / "out.bmp"
    codec.encode(img, "bmp", p)
    with Image.open(p) as reread:
        assert reread.format == "BMP"
        assert reread.size == (8, 6)

    buf = io.BytesIO()
    codec.encode(img, "jpg", buf)
    buf.seek(0)
    with Image.open(buf) as reread:
        assert reread.format == "JPEG"


def test_encode_unknown_format_raises(tmp_path):
    img = Image.new("RGB", (4, 4))
    with pytest.raises(ValueError, match="no image writer"):
        PillowImageCodec().encode(img, "notaformat", tmp_path / "x.notaformat")


def test_decode_oversized_image_raises(monkeypatch):
    data = _png_bytes(size=(100, 100))
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    with pytest.raises(ImageDecodeError):
        PillowImageCodec().decode(data)
