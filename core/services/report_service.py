"""Report view model: one summary row plus one row per photo set."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from core.models import PhotoSet
from core.services.interfaces import ReportEntry

REPORT_COLUMNS = [
    "Report ID",
    "Folder Path",
    "Status",
    "Precondition Photos",
    "Damage Photos",
    "Completion Photos",
    "Total Photos",
    "Comments",
    "Generated Date",
    "Generated Time",
]

STATUS_LABELS = {
    "pending": "Pending",
    "checked": "Checked",
    "needs-review": "Needs Review",
}


def completion_stats(
    photo_sets: Sequence[PhotoSet], entries: Mapping[str, ReportEntry]
) -> dict[str, int]:
    """Count sites per report status; sites without an entry count as pending."""
    total = len(photo_sets)
    checked = sum(1 for s in photo_sets if _entry(entries, s.site_id).status == "checked")
    review = sum(1 for s in photo_sets if _entry(entries, s.site_id).status == "needs-review")
    return {
        "total": total,
        "checked": checked,
        "review": review,
        "pending": total - checked - review,
    }


def build_report_rows(
    photo_sets: Sequence[PhotoSet],
    entries: Mapping[str, ReportEntry],
    global_comments: str = "",
    now: datetime | None = None,
) -> list[dict[str, Any]]:
    """Return report rows keyed by `REPORT_COLUMNS`, summary row first."""
    now = now or datetime.now()
    stats = completion_stats(photo_sets, entries)

    rows: list[dict[str, Any]] = [
        {
            "Report ID": "SUMMARY",
            "Folder Path": f"Total Reports: {stats['total']}",
            "Status": (
                f"Checked: {stats['checked']}, Review: {stats['review']}, "
                f"Pending: {stats['pending']}"
            ),
            "Precondition Photos": 0,
            "Damage Photos": 0,
            "Completion Photos": 0,
            "Total Photos": 0,
            "Comments": global_comments,
            "Generated Date": "",
            "Generated Time": "",
        }
    ]
    for photo_set in photo_sets:
        entry = _entry(entries, photo_set.site_id)
        rows.append(
            {
                "Report ID": photo_set.site_id,
                "Folder Path": photo_set.site_id,
                "Status": STATUS_LABELS[entry.status],
                "Precondition Photos": len(photo_set.precondition_photos),
                "Damage Photos": len(photo_set.damage_photos),
                "Completion Photos": len(photo_set.completion_photos),
                "Total Photos": photo_set.total_count,
                "Comments": entry.comments,
                "Generated Date": now.strftime("%Y-%m-%d"),
                "Generated Time": now.strftime("%H:%M:%S"),
            }
        )
    return rows


def default_report_filename(now: datetime | None = None, extension: str = "xlsx") -> str:
    now = now or datetime.now()
    return f"damage_assessment_report_{now.strftime('%Y-%m-%d')}.{extension}"


def _entry(entries: Mapping[str, ReportEntry], site_id: str) -> ReportEntry:
    return entries.get(site_id) or ReportEntry()
