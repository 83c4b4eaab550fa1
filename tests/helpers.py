from __future__ import annotations

from datetime import datetime

from core.models import PhotoLocation, PhotoRecord, UploadedFile


def make_record(name: str, lat: float | None = None, lon: float | None = None) -> PhotoRecord:
    location = PhotoLocation(lat, lon) if lat is not None and lon is not None else None
    return PhotoRecord(
        source_path=f"/uploads/{name}",
        display_name=name,
        preview_uri=f"file:///uploads/{name}",
        location=location,
        captured_at=datetime(2024, 1, 1, 12, 0, 0),
    )


def make_upload(relative_path: str, mime_type: str = "image/jpeg") -> UploadedFile:
    return UploadedFile(
        path=f"/uploads/{relative_path}",
        relative_path=relative_path,
        mime_type=mime_type,
        modified_at=datetime(2024, 1, 1, 12, 0, 0),
    )


class FakeExtractor:
    """Returns preset records keyed by file name; unknown names get no GPS."""

    def __init__(self, gps: dict[str, tuple[float, float]] | None = None) -> None:
        self._gps = gps or {}
        self.calls: list[str] = []

    def __call__(self, upload: UploadedFile) -> PhotoRecord:
        name = upload.relative_path.rsplit("/", 1)[-1]
        self.calls.append(name)
        lat, lon = self._gps.get(name, (None, None))
        return make_record(name, lat, lon)
