"""Nearest-photo selection around a site's reference location.

Photos carrying GPS are ranked by great-circle distance to the reference and
capped; photos without GPS are kept and appended after the ranked ones.
"""

from __future__ import annotations

from collections.abc import Sequence

from core.geo import haversine_meters
from core.models import PhotoLocation, PhotoRecord

DEFAULT_NEAREST_LIMIT = 10


class ProximityService:
    """Trims role buckets down to the photos closest to a reference point."""

    def __init__(self, limit: int = DEFAULT_NEAREST_LIMIT) -> None:
        if limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")
        self._limit = limit

    @property
    def limit(self) -> int:
        return self._limit

    def select_nearest(
        self,
        photos: Sequence[PhotoRecord],
        reference: PhotoLocation | None,
    ) -> tuple[PhotoRecord, ...]:
        """Return the `limit` nearest GPS photos followed by all non-GPS photos.

        Args:
            photos: Bucket in encounter order.
            reference: Origin for ranking. When None the bucket is returned
                unchanged.
        """
        if reference is None:
            return tuple(photos)

        with_gps = [p for p in photos if p.location is not None]
        without_gps = [p for p in photos if p.location is None]

        # sorted() is stable, so equal distances keep encounter order
        ranked = sorted(with_gps, key=lambda p: haversine_meters(reference, p.location))
        return tuple(ranked[: self._limit]) + tuple(without_gps)
