"""EXIF metadata extraction (GPS, orientation, capture time) via Pillow.

Extraction is best-effort and never raises: a file that cannot be parsed
still yields a `PhotoRecord`, with its optional fields empty and the capture
time taken from the filesystem modification time.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime
import math
import os
from pathlib import Path
from typing import Any

from PIL import ExifTags, Image
from loguru import logger
from pillow_heif import register_heif_opener

from core.models import ExtractionResult, PhotoLocation, PhotoRecord, UploadedFile

register_heif_opener()

EXIF_DT_FMT = "%Y:%m:%d %H:%M:%S"


def file_uri(path: str) -> str:
    """Default display URI: the file itself."""
    try:
        return Path(path).resolve().as_uri()
    except (OSError, ValueError):
        return Path(os.path.abspath(path)).as_uri()


def _to_float(value: Any) -> float | None:
    try:
        result = float(value)
    except (TypeError, ValueError, ZeroDivisionError):
        return None
    return None if math.isnan(result) else result


def _clean_ref(ref: Any) -> str:
    if isinstance(ref, bytes):
        ref = ref.decode("ascii", errors="ignore")
    return str(ref or "").strip("\x00 ").upper()


def dms_to_decimal(dms: Any, ref: Any) -> float | None:
    """Convert an EXIF (degrees, minutes, seconds) triple plus N/S/E/W ref."""
    if dms is None:
        return None
    if not isinstance(dms, (tuple, list)):
        return _to_float(dms)
    parts = [_to_float(v) for v in dms]
    if not parts or any(p is None for p in parts):
        return None
    parts = (parts + [0.0, 0.0])[:3]
    value = parts[0] + parts[1] / 60 + parts[2] / 3600
    if _clean_ref(ref) in {"S", "W"}:
        value = -value
    return value


def _location_from(latitude: Any, longitude: Any) -> PhotoLocation | None:
    lat = _to_float(latitude)
    lon = _to_float(longitude)
    if lat is None or lon is None:
        return None
    return PhotoLocation(latitude=lat, longitude=lon)


def resolve_location(tags: Mapping[str, Any] | None) -> PhotoLocation | None:
    """Resolve a location from parsed tags.

    Tries the flattened ``latitude``/``longitude`` pair first, then the nested
    ``GPS`` group (decimal fields, or raw degree-minute-second tags).
    """
    if not tags:
        return None

    location = _location_from(tags.get("latitude"), tags.get("longitude"))
    if location is not None:
        logger.debug("GPS data found (flattened): {}", location)
        return location

    gps = tags.get("GPS")
    if not isinstance(gps, Mapping):
        return None
    location = _location_from(gps.get("latitude"), gps.get("longitude"))
    if location is None:
        location = _location_from(
            dms_to_decimal(gps.get("GPSLatitude"), gps.get("GPSLatitudeRef")),
            dms_to_decimal(gps.get("GPSLongitude"), gps.get("GPSLongitudeRef")),
        )
    if location is not None:
        logger.debug("GPS data found (GPS group): {}", location)
    return location


def parse_exif_datetime(value: Any) -> datetime | None:
    """Parse an EXIF timestamp like ``"2024:05:01 13:45:10"``; None on failure."""
    if not value:
        return None
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="ignore")
    val_str = str(value).strip("\x00 ")
    try:
        if len(val_str) >= 19 and val_str[4] == ":" and val_str[7] == ":":
            return datetime.strptime(val_str[:19], EXIF_DT_FMT)
        return datetime.fromisoformat(val_str.replace("/", "-"))
    except ValueError:
        logger.debug("Unparseable EXIF datetime: {}", val_str)
        return None


def _to_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def read_tags(path: str) -> dict[str, Any]:
    """Read base, Exif and GPS IFD tags from `path` as a name-keyed dict.

    The GPS IFD is kept as a nested ``GPS`` group; when its coordinates decode
    cleanly they are also flattened into ``latitude``/``longitude``.
    """
    with Image.open(path) as im:
        exif = im.getexif()
        tags: dict[str, Any] = {ExifTags.TAGS.get(k, k): v for k, v in exif.items()}
        for k, v in exif.get_ifd(ExifTags.IFD.Exif).items():
            tags[ExifTags.TAGS.get(k, k)] = v
        gps = {ExifTags.GPSTAGS.get(k, k): v for k, v in exif.get_ifd(ExifTags.IFD.GPSInfo).items()}

    if gps:
        tags["GPS"] = gps
        lat = dms_to_decimal(gps.get("GPSLatitude"), gps.get("GPSLatitudeRef"))
        lon = dms_to_decimal(gps.get("GPSLongitude"), gps.get("GPSLongitudeRef"))
        if lat is not None and lon is not None:
            tags["latitude"] = lat
            tags["longitude"] = lon
    return tags


def _modified_time(upload: UploadedFile) -> datetime | None:
    if upload.modified_at is not None:
        return upload.modified_at
    try:
        return datetime.fromtimestamp(os.path.getmtime(upload.path))
    except (OSError, ValueError) as ex:
        logger.debug("getmtime failed for {}: {}", upload.path, ex)
        return None


class MetadataExtractor:
    """Turns one uploaded image into a `PhotoRecord`."""

    def __init__(
        self,
        preview_provider: Callable[[str], str] | None = None,
        tag_reader: Callable[[str], Mapping[str, Any]] = read_tags,
    ) -> None:
        """Create an extractor.

        Args:
            preview_provider: Maps a source path to a display URI
                (defaults to the file URI).
            tag_reader: Parses tags from a path; replaceable for other decoders.
        """
        self._preview = preview_provider or file_uri
        self._read_tags = tag_reader

    def extract(self, upload: UploadedFile) -> ExtractionResult:
        """Extract metadata for `upload`; never raises for unreadable images."""
        name = Path(upload.relative_path or upload.path).name
        preview_uri = self._preview_uri(upload.path)
        fallback_time = _modified_time(upload)

        try:
            tags = self._read_tags(upload.path)
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.warning("Failed to extract EXIF data from {}: {}", name, ex)
            record = PhotoRecord(
                source_path=upload.path,
                display_name=name,
                preview_uri=preview_uri,
                captured_at=fallback_time,
            )
            return ExtractionResult(record=record, note=f"EXIF unreadable: {ex}")

        logger.debug("EXIF tags for {}: {}", name, sorted(str(k) for k in tags))
        record = PhotoRecord(
            source_path=upload.path,
            display_name=name,
            preview_uri=preview_uri,
            location=resolve_location(tags),
            orientation=_to_int(tags.get("Orientation")),
            captured_at=parse_exif_datetime(tags.get("DateTimeOriginal")) or fallback_time,
        )
        return ExtractionResult(record=record)

    def _preview_uri(self, path: str) -> str:
        try:
            return self._preview(path)
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.warning("Preview failed for {}, using file URI: {}", path, ex)
            return file_uri(path)

    def extract_record(self, upload: UploadedFile) -> PhotoRecord:
        return self.extract(upload).record
