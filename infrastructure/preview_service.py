"""Display URIs for uploaded photos backed by a disk thumbnail cache.

Thumbnails are rendered with Pillow (EXIF orientation applied) and stored
under a cache directory keyed by path, mtime, size and requested side.
"""

from __future__ import annotations

import hashlib
import os
from pathlib import Path

from PIL import Image, ImageOps
from loguru import logger

from infrastructure.metadata_extractor import file_uri

DEFAULT_THUMBNAIL_SIDE = 512


def default_cache_dir() -> str:
    return str(Path.home() / "AppData" / "Local" / "DamageReview" / "thumbs")


def _compute_cache_key(path: str, size_key: int) -> str:
    """Compute a stable cache key from path, mtime, size, and requested side."""
    try:
        st = os.stat(path)
        sig = f"{path}|{int(st.st_mtime_ns)}|{int(st.st_size)}|{int(size_key)}".encode(
            "utf-8", errors="ignore"
        )
    except (OSError, ValueError):
        sig = f"{path}|0|0|{int(size_key)}".encode("utf-8", errors="ignore")
    return hashlib.sha1(sig).hexdigest()


class PreviewService:
    """Produces display URIs, preferring a cached thumbnail."""

    def __init__(self, settings: object | None = None) -> None:
        """Read `preview.thumbnail_side` and `preview.cache_dir` from settings."""
        self._side = DEFAULT_THUMBNAIL_SIDE
        cache_dir = default_cache_dir()
        if settings is not None:
            try:
                self._side = int(settings.get("preview.thumbnail_side", self._side) or self._side)
            except (ValueError, TypeError):
                self._side = DEFAULT_THUMBNAIL_SIDE
            raw_dir = settings.get("preview.cache_dir", cache_dir)
            if isinstance(raw_dir, str) and raw_dir:
                cache_dir = os.path.expandvars(os.path.expanduser(raw_dir))
        self._cache_path = Path(cache_dir)
        self._cache_path.mkdir(parents=True, exist_ok=True)

    @property
    def cache_path(self) -> Path:
        return self._cache_path

    def get_preview_uri(self, path: str) -> str:
        """Return a URI for a thumbnail of `path`, or the file URI if none can be made."""
        target = self._cache_path / f"{_compute_cache_key(path, self._side)}.jpg"
        if target.exists():
            return target.resolve().as_uri()
        try:
            with Image.open(path) as im:
                thumb = ImageOps.exif_transpose(im)
                thumb.thumbnail((self._side, self._side))
                thumb.convert("RGB").save(target, "JPEG", quality=85)
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.debug("Thumbnail failed for {}: {}", path, ex)
            return file_uri(path)
        return target.resolve().as_uri()

    def clear(self) -> int:
        """Delete cached thumbnails; returns how many were removed."""
        removed = 0
        for p in self._cache_path.glob("*.jpg"):
            try:
                p.unlink()
                removed += 1
            except OSError as ex:
                logger.warning("Could not remove thumbnail {}: {}", p, ex)
        return removed
