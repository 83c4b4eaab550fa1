"""Concurrent ingest: extract every file on a Qt thread pool, then group.

Each file's extraction is an independent `QRunnable` writing only its own
result slot. `QThreadPool.waitForDone()` is the barrier before the
sequential grouping step.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from PySide6.QtCore import QRunnable, QThreadPool
from loguru import logger

from core.models import ExtractionResult, IngestResult, PhotoRecord, UploadedFile
from core.services.photo_set_builder import PhotoSetBuilder, accepted_uploads

DEFAULT_MAX_WORKERS = 4


class _ExtractTask(QRunnable):
    """Extracts one upload into `slots[index]`."""

    def __init__(
        self,
        *,
        index: int,
        upload: UploadedFile,
        extract: Callable[[UploadedFile], ExtractionResult],
        slots: list[ExtractionResult | None],
    ) -> None:
        super().__init__()
        self._index = index
        self._upload = upload
        self._extract = extract
        self._slots = slots

    def run(self) -> None:  # type: ignore[override]
        try:
            self._slots[self._index] = self._extract(self._upload)
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.error("Extract task failed for {}: {}", self._upload.relative_path, ex)


class IngestService:
    """Runs extraction for a whole batch and builds the photo sets."""

    def __init__(
        self,
        extract: Callable[[UploadedFile], ExtractionResult],
        builder: PhotoSetBuilder | None = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        """Create the service.

        Args:
            extract: Per-file extractor, e.g. `MetadataExtractor.extract`.
            builder: Grouping/trimming stage (defaults to `PhotoSetBuilder`).
            max_workers: Thread pool size.
        """
        self._extract = extract
        self._builder = builder or PhotoSetBuilder()
        self._pool = QThreadPool()
        self._pool.setMaxThreadCount(max(1, int(max_workers)))

    @property
    def active_tasks(self) -> int:
        """Number of extraction tasks currently running on the pool."""
        return self._pool.activeThreadCount()

    def extract_all(self, uploads: list[UploadedFile]) -> list[ExtractionResult | None]:
        """Extract `uploads` concurrently; result order matches input order.

        A slot stays None when its task raised.
        """
        slots: list[ExtractionResult | None] = [None] * len(uploads)
        for index, upload in enumerate(uploads):
            task = _ExtractTask(index=index, upload=upload, extract=self._extract, slots=slots)
            self._pool.start(task)
        self._pool.waitForDone()
        return slots

    def ingest(self, uploads: Iterable[UploadedFile]) -> IngestResult:
        """Filter, extract and group one upload batch."""
        accepted, skipped = accepted_uploads(uploads)
        logger.info("Ingesting {} image(s); {} skipped for path shape", len(accepted), len(skipped))

        kept_uploads: list[UploadedFile] = []
        records: list[PhotoRecord] = []
        degraded = 0
        for upload, result in zip(accepted, self.extract_all(accepted)):
            if result is None:
                continue
            if result.note:
                degraded += 1
            kept_uploads.append(upload)
            records.append(result.record)
        if degraded:
            logger.info("{} file(s) had unreadable metadata", degraded)

        return self._builder.build(kept_uploads, records, skipped)
