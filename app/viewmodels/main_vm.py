"""ViewModel for orchestrating ingest, navigation, review state and reports."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime
from pathlib import Path

from loguru import logger

from app.viewmodels.site_vm import SiteVM
from core.models import IngestResult, PhotoSet, SkippedFile, UploadedFile
from core.services.report_service import build_report_rows, default_report_filename
from infrastructure.report_exporter import CsvReportExporter, XlsxReportExporter, exporter_for
from infrastructure.review_store import JsonReviewStore

NO_VALID_STRUCTURE_MESSAGE = (
    "No valid folder structure found. Expected: root/<damage id>/<photo type folder>/<image>"
)


class NoValidStructureError(Exception):
    """Raised when an upload produced no photo sets at all."""

    def __init__(self, skipped: list[SkippedFile] | None = None) -> None:
        super().__init__(NO_VALID_STRUCTURE_MESSAGE)
        self.skipped = skipped or []


class MainVM:
    """Main application view-model.

    Holds the current photo sets and mediates between the ingest service,
    the review store and the report exporter.
    """

    def __init__(
        self,
        ingest,
        review_store: JsonReviewStore,
        scanner: Callable[[str], list[UploadedFile]] | None = None,
        exporter: XlsxReportExporter | CsvReportExporter | None = None,
    ) -> None:
        """Create a MainVM.

        Args:
            ingest: Service with `ingest(uploads) -> IngestResult`.
            review_store: Per-site approvals, measurements and report status.
            scanner: Maps a folder path to uploads (used by `load_folder`).
            exporter: Report writer; when omitted it is chosen by the
                output suffix (`.csv` or a workbook).
        """
        self._ingest = ingest
        self._store = review_store
        self._scanner = scanner
        self._exporter = exporter
        self.photo_sets: list[PhotoSet] = []
        self.skipped: list[SkippedFile] = []
        self.current_index = 0
        self.search_term = ""

    def load_uploads(self, uploads: Iterable[UploadedFile]) -> IngestResult:
        """Ingest `uploads`, replacing any previous result.

        Raises:
            NoValidStructureError: When no photo set could be built.
        """
        result = self._ingest.ingest(uploads)
        self.photo_sets = list(result.photo_sets)
        self.skipped = list(result.skipped)
        self.current_index = 0
        self.search_term = ""
        if result.is_empty:
            logger.warning("No valid structure found ({} skipped)", len(result.skipped))
            raise NoValidStructureError(result.skipped)
        logger.info("Loaded {} photo set(s)", len(self.photo_sets))
        return result

    def load_folder(self, folder: str) -> IngestResult:
        """Scan `folder` and ingest it."""
        if self._scanner is None:
            raise RuntimeError("No folder scanner configured")
        return self.load_uploads(self._scanner(folder))

    @property
    def filtered_sets(self) -> list[PhotoSet]:
        """Photo sets whose site id contains the search term (case-insensitive)."""
        term = self.search_term.strip().lower()
        if not term:
            return list(self.photo_sets)
        return [s for s in self.photo_sets if term in s.site_id.lower()]

    def set_search_term(self, term: str) -> None:
        self.search_term = term or ""
        self.current_index = 0

    @property
    def current_set(self) -> PhotoSet | None:
        sets = self.filtered_sets
        if not sets:
            return None
        return sets[min(self.current_index, len(sets) - 1)]

    @property
    def current_site_vm(self) -> SiteVM | None:
        photo_set = self.current_set
        return SiteVM.from_photo_set(photo_set) if photo_set else None

    def next_set(self) -> PhotoSet | None:
        sets = self.filtered_sets
        if self.current_index < len(sets) - 1:
            self.current_index += 1
        return self.current_set

    def previous_set(self) -> PhotoSet | None:
        if self.current_index > 0:
            self.current_index -= 1
        return self.current_set

    def select_site(self, site_id: str) -> PhotoSet | None:
        """Jump to `site_id` within the filtered list; None if not present."""
        for index, photo_set in enumerate(self.filtered_sets):
            if photo_set.site_id == site_id:
                self.current_index = index
                return photo_set
        return None

    def set_approval(self, site_id: str, status: str, comments: str = "") -> None:
        self._store.set_approval(site_id, status, comments)

    def export_report(self, output: str | Path, now: datetime | None = None) -> Path:
        """Write the report for all loaded sets.

        `output` may be a file path or a directory; for a directory the
        default dated filename is used.
        """
        path = Path(output)
        if path.is_dir():
            path = path / default_report_filename(now)
        rows = build_report_rows(
            self.photo_sets, self._store.report_entries(), self._store.global_comments, now
        )
        exporter = self._exporter or exporter_for(path)
        return exporter.export(rows, path)

    @property
    def set_count(self) -> int:
        """Number of photo sets currently loaded."""
        return len(self.photo_sets)
