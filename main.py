from __future__ import annotations

import locale
from pathlib import Path
import sys

from loguru import logger

from app.viewmodels.main_vm import MainVM, NoValidStructureError
from core.rules.engine import RuleEngine
from core.services.photo_set_builder import PhotoSetBuilder
from core.services.proximity_service import DEFAULT_NEAREST_LIMIT, ProximityService
from infrastructure.ingest_service import DEFAULT_MAX_WORKERS, IngestService
from infrastructure.logging import get_log_directory, init_logging
from infrastructure.metadata_extractor import MetadataExtractor
from infrastructure.preview_service import PreviewService
from infrastructure.review_store import JsonReviewStore
from infrastructure.settings import JsonSettings
from infrastructure.upload_scanner import scan_upload

BASE_DIR = Path(__file__).parent

USAGE = "usage: damage-review <upload folder> [report.xlsx | report.csv | report dir]"


def build_vm(settings: JsonSettings) -> MainVM:
    """Wire services from `settings` into a ready MainVM."""
    previews = PreviewService(settings)
    extractor = MetadataExtractor(preview_provider=previews.get_preview_uri)
    builder = PhotoSetBuilder(
        RuleEngine(),
        ProximityService(settings.get_int("ingest.nearest_limit", DEFAULT_NEAREST_LIMIT)),
    )
    ingest = IngestService(
        extractor.extract,
        builder,
        max_workers=settings.get_int("ingest.max_workers", DEFAULT_MAX_WORKERS),
    )
    store_path = settings.get_path("review.store_path", BASE_DIR / "review_state.json")
    return MainVM(ingest, JsonReviewStore(store_path), scanner=scan_upload)


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    settings = JsonSettings(BASE_DIR / "settings.json")
    init_logging(str(settings.get_path("logging.dir", get_log_directory())))
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as ex:
        logger.warning("System collation locale unavailable, using default: {}", ex)

    if not args:
        print(USAGE, file=sys.stderr)
        return 2

    vm = build_vm(settings)
    try:
        vm.load_folder(args[0])
    except NotADirectoryError as ex:
        print(str(ex), file=sys.stderr)
        return 2
    except NoValidStructureError as ex:
        print(str(ex), file=sys.stderr)
        return 1

    for photo_set in vm.photo_sets:
        logger.info(
            "{}: damage={} precondition={} completion={} reference={}",
            photo_set.site_id,
            len(photo_set.damage_photos),
            len(photo_set.precondition_photos),
            len(photo_set.completion_photos),
            photo_set.reference_location,
        )
        print(
            f"{photo_set.site_id}\t{len(photo_set.damage_photos)}\t"
            f"{len(photo_set.precondition_photos)}\t{len(photo_set.completion_photos)}"
        )
    for skipped in vm.skipped:
        print(f"skipped: {skipped.relative_path} ({skipped.reason})", file=sys.stderr)

    if len(args) > 1:
        report_target = args[1]
    else:
        report_target = settings.get("report.output_dir")
    if report_target:
        written = vm.export_report(report_target)
        print(f"report: {written}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
