"""Tests for map marker data."""

import pytest

from core.models import PhotoRole, PhotoSet
from core.services.map_service import build_map_markers, marker_bounds
from tests.helpers import make_record


def _photo_set() -> PhotoSet:
    return PhotoSet(
        site_id="Site001",
        damage_photos=(make_record("d.jpg", 10.0, 10.0), make_record("d_nogps.jpg")),
        precondition_photos=(make_record("p.jpg", 12.0, 10.0),),
        completion_photos=(make_record("c.jpg", 10.0, 14.0),),
    )


class TestMapMarkers:
    def test_markers_per_located_photo(self):
        markers = build_map_markers(_photo_set())
        assert [m.role for m in markers] == [
            PhotoRole.DAMAGE,
            PhotoRole.PRECONDITION,
            PhotoRole.COMPLETION,
        ]
        assert markers[0].label == "Damage Photo: d.jpg"
        assert markers[1].label == "Precondition Photo: p.jpg"
        assert markers[0].color == "#ef4444"

    def test_no_locations(self):
        photo_set = PhotoSet(site_id="S", damage_photos=(make_record("x.jpg"),))
        markers = build_map_markers(photo_set)
        assert markers == []
        assert marker_bounds(markers) is None

    def test_bounds_are_padded(self):
        bounds = marker_bounds(build_map_markers(_photo_set()))
        assert bounds.south == pytest.approx(9.8)
        assert bounds.north == pytest.approx(12.2)
        assert bounds.west == pytest.approx(9.6)
        assert bounds.east == pytest.approx(14.4)
