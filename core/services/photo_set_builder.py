"""Grouping of uploaded files into per-site `PhotoSet` objects.

The builder walks the batch once in upload order, classifies each image by its
role folder, and then trims the precondition/completion buckets of every site
around that site's reference location.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
import locale
import unicodedata

from loguru import logger

from core.models import (
    IngestResult,
    PhotoLocation,
    PhotoRecord,
    PhotoRole,
    PhotoSet,
    SkippedFile,
    UploadedFile,
)
from core.rules.engine import RuleEngine
from core.services.proximity_service import ProximityService

MIN_PATH_SEGMENTS = 3


@dataclass
class _SiteBuckets:
    damage: list[PhotoRecord] = field(default_factory=list)
    precondition: list[PhotoRecord] = field(default_factory=list)
    completion: list[PhotoRecord] = field(default_factory=list)

    def add(self, role: PhotoRole, record: PhotoRecord) -> None:
        getattr(self, role.value).append(record)

    def reference_location(self) -> PhotoLocation | None:
        for photo in self.damage:
            if photo.location is not None:
                return photo.location
        return None


def is_image(upload: UploadedFile) -> bool:
    return (upload.mime_type or "").startswith("image/")


def split_upload_path(relative_path: str) -> tuple[str, str] | None:
    """Return ``(site_id, role_folder)`` or None when the path is too shallow."""
    parts = relative_path.split("/")
    if len(parts) < MIN_PATH_SEGMENTS:
        return None
    return parts[1], parts[2]


def _strip_accents(text: str) -> str:
    return "".join(c for c in unicodedata.normalize("NFKD", text) if not unicodedata.combining(c))


def site_sort_key(site_id: str) -> tuple[str, str, str]:
    """Locale-aware, case-insensitive ordering.

    Primary key ignores accents and case; accents then case break ties, with
    lower case first, so the order matches a browser's ``localeCompare``.
    """
    folded = site_id.casefold()
    return (locale.strxfrm(_strip_accents(folded)), folded, site_id.swapcase())



def accepted_uploads(
    uploads: Iterable[UploadedFile],
) -> tuple[list[UploadedFile], list[SkippedFile]]:
    """Filter a batch down to images with a usable path.

    Non-image files are dropped silently; shallow paths are reported.
    """
    accepted: list[UploadedFile] = []
    skipped: list[SkippedFile] = []
    for upload in uploads:
        if not is_image(upload):
            continue
        if split_upload_path(upload.relative_path) is None:
            logger.warning("Skipping file with unexpected path structure: {}", upload.relative_path)
            skipped.append(
                SkippedFile(
                    relative_path=upload.relative_path,
                    reason="expected root/site/role-folder/file",
                )
            )
            continue
        accepted.append(upload)
    return accepted, skipped


class PhotoSetBuilder:
    """Builds sorted `PhotoSet` lists from uploads and their extracted records."""

    def __init__(
        self,
        rule_engine: RuleEngine | None = None,
        proximity: ProximityService | None = None,
    ) -> None:
        self._rules = rule_engine or RuleEngine()
        self._proximity = proximity or ProximityService()

    def build(
        self,
        uploads: Sequence[UploadedFile],
        records: Sequence[PhotoRecord],
        skipped: Sequence[SkippedFile] = (),
    ) -> IngestResult:
        """Group `records` by site and role.

        Args:
            uploads: Accepted uploads in encounter order.
            records: One extracted record per upload, same order.
            skipped: Diagnostics collected while filtering the batch.
        """
        if len(uploads) != len(records):
            raise ValueError(f"{len(uploads)} uploads but {len(records)} records")

        sites: dict[str, _SiteBuckets] = {}
        for upload, record in zip(uploads, records):
            split = split_upload_path(upload.relative_path)
            if split is None:
                continue
            site_id, role_folder = split
            buckets = sites.setdefault(site_id, _SiteBuckets())
            buckets.add(self._rules.classify(role_folder), record)

        photo_sets = [self._finish_site(site_id, b) for site_id, b in sites.items()]
        photo_sets.sort(key=lambda s: site_sort_key(s.site_id))
        logger.info(
            "Built {} photo set(s) from {} file(s); {} skipped",
            len(photo_sets),
            len(records),
            len(skipped),
        )
        return IngestResult(photo_sets=photo_sets, skipped=list(skipped))

    def build_from_uploads(
        self,
        uploads: Iterable[UploadedFile],
        extract: Callable[[UploadedFile], PhotoRecord],
    ) -> IngestResult:
        """Filter, extract sequentially, and build in one call."""
        accepted, skipped = accepted_uploads(uploads)
        records = [extract(upload) for upload in accepted]
        return self.build(accepted, records, skipped)

    def _finish_site(self, site_id: str, buckets: _SiteBuckets) -> PhotoSet:
        reference = buckets.reference_location()
        if reference is None:
            logger.info("Site {} has no GPS-tagged damage photo; no proximity trim", site_id)
        return PhotoSet(
            site_id=site_id,
            damage_photos=tuple(buckets.damage),
            precondition_photos=self._proximity.select_nearest(buckets.precondition, reference),
            completion_photos=self._proximity.select_nearest(buckets.completion, reference),
            reference_location=reference,
        )
