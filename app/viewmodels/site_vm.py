from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from app.viewmodels.photo_vm import PhotoVM
from core.models import PhotoRole, PhotoSet
from core.services.map_service import MapMarker, build_map_markers


@dataclass
class SiteVM:
    site_id: str
    galleries: dict[PhotoRole, List[PhotoVM]] = field(default_factory=dict)
    markers: List[MapMarker] = field(default_factory=list)

    @classmethod
    def from_photo_set(cls, photo_set: PhotoSet) -> "SiteVM":
        galleries = {
            role: [PhotoVM(record=r, role=role) for r in photo_set.photos_for(role)]
            for role in PhotoRole
        }
        return cls(
            site_id=photo_set.site_id,
            galleries=galleries,
            markers=build_map_markers(photo_set),
        )
