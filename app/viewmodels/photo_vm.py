"""Lightweight view model wrapper around `PhotoRecord`."""

from __future__ import annotations

from dataclasses import dataclass

from core.models import PhotoRecord, PhotoRole

CAPTURE_FMT = "%Y-%m-%d %H:%M:%S"


@dataclass
class PhotoVM:
    """Expose convenient properties for bindings/templates."""

    record: PhotoRecord
    role: PhotoRole

    @property
    def file_name(self) -> str:
        return self.record.display_name

    @property
    def preview_uri(self) -> str:
        return self.record.preview_uri

    @property
    def captured_text(self) -> str:
        """Capture time formatted for display; empty when unknown."""
        return self.record.captured_at.strftime(CAPTURE_FMT) if self.record.captured_at else ""

    @property
    def location_text(self) -> str:
        """Coordinates as ``"lat, lon"`` with 6 decimals, or ``"No GPS"``."""
        loc = self.record.location
        if loc is None:
            return "No GPS"
        return f"{loc.latitude:.6f}, {loc.longitude:.6f}"
