import io
from pathlib import Path

import pytest
from PIL import Image

from repairflow.services.photo_store import (
    InvalidImageError,
    content_type_for,
    make_thumbnail,
    read_photo,
    save_photo,
)


def _png(width=1200, height=900, mode="RGB") -> bytes:
    buf = io.BytesIO()
    Image.new(mode, (width, height), color=(120, 60, 30, 255)[: len(mode)]).save(buf, "PNG")
    return buf.getvalue()


def test_thumbnail_fits_bounds():
    thumb = make_thumbnail(_png(), size=(320, 240))
    img = Image.open(io.BytesIO(thumb))
    assert img.format == "JPEG"
    assert img.width <= 320 and img.height <= 240


def test_thumbnail_converts_alpha():
    thumb = make_thumbnail(_png(400, 400, mode="RGBA"), size=(100, 100))
    assert Image.open(io.BytesIO(thumb)).mode == "RGB"


def test_thumbnail_rejects_garbage():
    with pytest.raises(InvalidImageError):
        make_thumbnail(b"definitely not an image")


async def test_save_and_read_photo(tmp_path):
    data = _png()
    storage_path, thumb_path = await save_photo(data, "session-1", ".PNG", base_dir=str(tmp_path))

    assert Path(storage_path).parent == tmp_path / "session-1" / "originals"
    assert Path(storage_path).suffix == ".png"
    assert Path(thumb_path).parent == tmp_path / "session-1" / "thumbnails"
    assert await read_photo(storage_path) == data


async def test_save_rejects_unsupported_extension(tmp_path):
    with pytest.raises(InvalidImageError, match="Unsupported"):
        await save_photo(_png(), "session-1", ".gif", base_dir=str(tmp_path))


async def test_invalid_upload_leaves_no_files(tmp_path):
    with pytest.raises(InvalidImageError):
        await save_photo(b"\x00\x01", "session-2", ".jpg", base_dir=str(tmp_path))
    assert not (tmp_path / "session-2").exists()


async def test_read_missing_photo(tmp_path):
    with pytest.raises(FileNotFoundError):
        await read_photo(str(tmp_path / "nope.jpg"))


def test_content_type_for():
    assert content_type_for("a/b/photo.PNG") == "image/png"
    assert content_type_for("photo.webp") == "image/webp"
    assert content_type_for("photo") == "image/jpeg"
