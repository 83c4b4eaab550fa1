"""Turns a selected directory into the flat upload list the builder expects."""

from __future__ import annotations

from datetime import datetime
import mimetypes
import os
from pathlib import Path

from loguru import logger

from core.models import UploadedFile

# Not every platform's mimetypes table knows these
_EXTRA_IMAGE_TYPES = {
    ".heic": "image/heic",
    ".heif": "image/heif",
    ".webp": "image/webp",
    ".dng": "image/x-adobe-dng",
}


def guess_mime_type(path: str) -> str:
    ext = Path(path).suffix.lower()
    if ext in _EXTRA_IMAGE_TYPES:
        return _EXTRA_IMAGE_TYPES[ext]
    mime, _ = mimetypes.guess_type(path)
    return mime or "application/octet-stream"


def scan_upload(root: str | Path) -> list[UploadedFile]:
    """Walk `root` and return its files in a stable order.

    Relative paths start with the name of `root` itself, so a file at
    ``<root>/Site001/Damage/a.jpg`` becomes ``"<rootname>/Site001/Damage/a.jpg"``.
    """
    root_path = Path(root).expanduser().resolve()
    if not root_path.is_dir():
        raise NotADirectoryError(f"Upload folder not found: {root_path}")

    uploads: list[UploadedFile] = []
    for dirpath, dirnames, filenames in os.walk(root_path):
        dirnames.sort()
        for filename in sorted(filenames):
            full = Path(dirpath) / filename
            rel = full.relative_to(root_path.parent).as_posix()
            try:
                modified = datetime.fromtimestamp(full.stat().st_mtime)
            except OSError as ex:
                logger.debug("stat failed for {}: {}", full, ex)
                modified = None
            uploads.append(
                UploadedFile(
                    path=str(full),
                    relative_path=rel,
                    mime_type=guess_mime_type(filename),
                    modified_at=modified,
                )
            )
    logger.info("Scanned {} file(s) under {}", len(uploads), root_path)
    return uploads
