"""Map marker data for a photo set: points, roles, popup labels and bounds."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from core.models import PhotoLocation, PhotoRole, PhotoSet

MARKER_COLORS = {
    PhotoRole.DAMAGE: "#ef4444",
    PhotoRole.PRECONDITION: "#22c55e",
    PhotoRole.COMPLETION: "#eab308",
}


@dataclass(frozen=True)
class MapMarker:
    location: PhotoLocation
    role: PhotoRole
    label: str

    @property
    def color(self) -> str:
        return MARKER_COLORS[self.role]


@dataclass(frozen=True)
class MapBounds:
    south: float
    west: float
    north: float
    east: float


def build_map_markers(photo_set: PhotoSet) -> list[MapMarker]:
    """Return one marker per located photo, damage first, then precondition, completion."""
    markers: list[MapMarker] = []
    for role in (PhotoRole.DAMAGE, PhotoRole.PRECONDITION, PhotoRole.COMPLETION):
        for photo in photo_set.photos_for(role):
            if photo.location is None:
                continue
            markers.append(
                MapMarker(
                    location=photo.location,
                    role=role,
                    label=f"{role.label} Photo: {photo.display_name}",
                )
            )
    return markers


def marker_bounds(markers: Sequence[MapMarker], pad: float = 0.1) -> MapBounds | None:
    """Bounding box around `markers`, grown by `pad` of its span on each side.

    Returns None when there are no markers.
    """
    if not markers:
        return None
    lats = [m.location.latitude for m in markers]
    lons = [m.location.longitude for m in markers]
    lat_pad = (max(lats) - min(lats)) * pad
    lon_pad = (max(lons) - min(lons)) * pad
    return MapBounds(
        south=min(lats) - lat_pad,
        west=min(lons) - lon_pad,
        north=max(lats) + lat_pad,
        east=max(lons) + lon_pad,
    )
