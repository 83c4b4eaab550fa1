"""Core domain models for damage-site photo records and sets."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class PhotoRole(str, Enum):
    """Role of a photo within a damage site, inferred from its folder name."""

    DAMAGE = "damage"
    PRECONDITION = "precondition"
    COMPLETION = "completion"

    @property
    def label(self) -> str:
        """Human-readable role name, e.g. ``"Precondition"``."""
        return self.value.capitalize()


@dataclass(frozen=True)
class PhotoLocation:
    """A GPS point in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class UploadedFile:
    """One file of an upload batch.

    `relative_path` is slash-delimited and includes the selected root folder,
    e.g. ``"upload/Site001/Damage/a.jpg"``.
    """

    path: str
    relative_path: str
    mime_type: str
    modified_at: datetime | None = None


@dataclass(frozen=True)
class PhotoRecord:
    """A single uploaded image with its best-effort metadata."""

    source_path: str
    display_name: str
    preview_uri: str
    location: PhotoLocation | None = None
    orientation: int | None = None
    captured_at: datetime | None = None

    @property
    def has_location(self) -> bool:
        return self.location is not None


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of reading one file's metadata.

    Attributes:
        record: The record, populated as far as extraction succeeded.
        note: Diagnostic describing a degraded parse, or None when clean.
    """

    record: PhotoRecord
    note: str | None = None


@dataclass(frozen=True)
class PhotoSet:
    """All photos of one damage site, split by role."""

    site_id: str
    damage_photos: tuple[PhotoRecord, ...] = ()
    precondition_photos: tuple[PhotoRecord, ...] = ()
    completion_photos: tuple[PhotoRecord, ...] = ()
    reference_location: PhotoLocation | None = None

    def photos_for(self, role: PhotoRole) -> tuple[PhotoRecord, ...]:
        """Return the bucket for `role`."""
        if role is PhotoRole.DAMAGE:
            return self.damage_photos
        if role is PhotoRole.PRECONDITION:
            return self.precondition_photos
        return self.completion_photos

    @property
    def total_count(self) -> int:
        return len(self.damage_photos) + len(self.precondition_photos) + len(self.completion_photos)


@dataclass(frozen=True)
class SkippedFile:
    """A file left out of the batch because its path did not fit the layout."""

    relative_path: str
    reason: str


@dataclass
class IngestResult:
    """Photo sets produced by one ingest plus per-file skip diagnostics."""

    photo_sets: list[PhotoSet] = field(default_factory=list)
    skipped: list[SkippedFile] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.photo_sets
