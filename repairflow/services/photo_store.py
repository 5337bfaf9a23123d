"""Photo storage: originals plus JPEG thumbnails on the local filesystem.

Layout: {base_dir}/{work_session_id}/originals/{photo_key}{ext}
        {base_dir}/{work_session_id}/thumbnails/{photo_key}.jpg
Only the returned path strings are kept on the Photo rows.
"""

from __future__ import annotations

import asyncio
import io
from pathlib import Path

from PIL import Image, UnidentifiedImageError
from ulid import ULID

from repairflow.config import get_settings

_settings = get_settings()

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp"}
CONTENT_TYPES = {".jpg": "image/jpeg", ".jpeg": "image/jpeg", ".png": "image/png", ".webp": "image/webp"}


class InvalidImageError(ValueError):
    pass


def max_upload_bytes() -> int:
    return _settings.photo_store.max_upload_bytes


def _base_dir(base_dir: str | None = None) -> Path:
    return Path(base_dir or _settings.photo_store.base_dir)


def _ensure_dirs(session_id: str, base_dir: str | None = None) -> tuple[Path, Path]:
    base = _base_dir(base_dir) / session_id
    orig_dir = base / "originals"
    thumb_dir = base / "thumbnails"
    orig_dir.mkdir(parents=True, exist_ok=True)
    thumb_dir.mkdir(parents=True, exist_ok=True)
    return orig_dir, thumb_dir


def make_thumbnail(data: bytes, size: tuple[int, int] | None = None) -> bytes:
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise InvalidImageError("Upload is not a readable image") from e

    if img.mode not in ("RGB", "L"):
        img = img.convert("RGB")
    img.thumbnail(size or tuple(_settings.photo_store.thumbnail_size))
    buf = io.BytesIO()
    img.save(buf, "JPEG", quality=85)
    return buf.getvalue()


def _save_sync(data: bytes, session_id: str, ext: str, base_dir: str | None) -> tuple[str, str]:
    ext = ext.lower() if ext else ".jpg"
    if ext not in ALLOWED_EXTENSIONS:
        raise InvalidImageError(f"Unsupported image type: {ext}")

    thumb_bytes = make_thumbnail(data)
    orig_dir, thumb_dir = _ensure_dirs(session_id, base_dir)
    key = str(ULID())

    orig_path = orig_dir / f"{key}{ext}"
    thumb_path = thumb_dir / f"{key}.jpg"
    orig_path.write_bytes(data)
    thumb_path.write_bytes(thumb_bytes)
    return str(orig_path), str(thumb_path)


async def save_photo(
    data: bytes, session_id: str, ext: str = ".jpg", base_dir: str | None = None,
) -> tuple[str, str]:
    """Save original photo and create thumbnail. Returns (storage_path, thumbnail_path)."""
    return await asyncio.to_thread(_save_sync, data, session_id, ext, base_dir)


def read_photo_sync(path: str) -> bytes:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Photo not found: {path}")
    return p.read_bytes()


async def read_photo(path: str) -> bytes:
    return await asyncio.to_thread(read_photo_sync, path)


def content_type_for(path: str) -> str:
    return CONTENT_TYPES.get(Path(path).suffix.lower(), "image/jpeg")
