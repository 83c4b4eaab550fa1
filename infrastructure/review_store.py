"""JSON persistence for per-site review state.

Approvals, measurements, report statuses and assessments are kept in one
JSON document keyed by site id and written through on every change.
"""

from __future__ import annotations

from dataclasses import asdict, replace
from datetime import datetime
import json
from pathlib import Path
from typing import Any
import uuid

from loguru import logger

from core.services.interfaces import (
    Approval,
    Assessment,
    AssessmentConditions,
    AssessmentMetrics,
    AssessorInfo,
    Measurement,
    PropertyDetails,
    RepairEstimate,
    ReportEntry,
    SiteReview,
)

_TS_FMT = "%Y-%m-%dT%H:%M:%S"


def _ts_from(value: str | None) -> datetime | None:
    return datetime.strptime(value, _TS_FMT) if value else None


def _ts_to(value: datetime | None) -> str | None:
    return value.strftime(_TS_FMT) if value else None


def _approval_from(raw: dict[str, Any]) -> Approval:
    return Approval(
        status=raw["status"],
        comments=raw.get("comments", "") or "",
        timestamp=_ts_from(raw.get("timestamp")),
    )


def _approval_to(approval: Approval) -> dict[str, Any]:
    return {
        "status": approval.status,
        "comments": approval.comments,
        "timestamp": _ts_to(approval.timestamp),
    }


def _assessment_from(raw: dict[str, Any]) -> Assessment:
    fields = dict(raw)
    fields["assessment_date"] = _ts_from(fields.get("assessment_date"))
    fields["follow_up_date"] = _ts_from(fields.get("follow_up_date"))
    fields["property_details"] = PropertyDetails(**(fields.get("property_details") or {}))
    fields["conditions"] = AssessmentConditions(**(fields.get("conditions") or {}))
    fields["assessor"] = AssessorInfo(**(fields.get("assessor") or {}))
    fields["metrics"] = AssessmentMetrics(**(fields.get("metrics") or {}))
    fields["repair_estimates"] = [RepairEstimate(**e) for e in fields.get("repair_estimates", [])]
    return Assessment(**fields)


def _assessment_to(assessment: Assessment) -> dict[str, Any]:
    payload = asdict(assessment)
    payload["assessment_date"] = _ts_to(assessment.assessment_date)
    payload["follow_up_date"] = _ts_to(assessment.follow_up_date)
    return payload


class JsonReviewStore:
    """Review state for all sites, backed by a single JSON file."""

    def __init__(self, store_path: str | Path) -> None:
        self._path = Path(store_path)
        self._sites: dict[str, SiteReview] = {}
        self.global_comments = ""
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            with self._path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            self.global_comments = str(data.get("global_comments", "") or "")
            for site_id, raw in (data.get("sites") or {}).items():
                self._sites[site_id] = SiteReview(
                    approval=_approval_from(raw["approval"]) if raw.get("approval") else None,
                    measurements=[Measurement(**m) for m in raw.get("measurements", [])],
                    report=ReportEntry(**(raw.get("report") or {})),
                    assessment=(
                        _assessment_from(raw["assessment"]) if raw.get("assessment") else None
                    ),
                )
        except (OSError, ValueError, TypeError, KeyError, AttributeError) as ex:
            logger.error("Review store unreadable, starting empty: {} ({})", self._path, ex)
            self._sites = {}
            self.global_comments = ""

    def save(self) -> None:
        """Write the whole store to disk."""
        payload = {
            "global_comments": self.global_comments,
            "sites": {
                site_id: {
                    "approval": _approval_to(r.approval) if r.approval else None,
                    "measurements": [asdict(m) for m in r.measurements],
                    "report": asdict(r.report),
                    "assessment": _assessment_to(r.assessment) if r.assessment else None,
                }
                for site_id, r in self._sites.items()
            },
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)

    def review(self, site_id: str) -> SiteReview:
        """Return the review for `site_id`, creating an empty one if needed."""
        return self._sites.setdefault(site_id, SiteReview())

    def get_approval(self, site_id: str) -> Approval | None:
        review = self._sites.get(site_id)
        return review.approval if review else None

    def set_approval(self, site_id: str, status: str, comments: str = "") -> Approval:
        approval = Approval(status=status, comments=comments, timestamp=datetime.now())
        self.review(site_id).approval = approval
        self.save()
        logger.info("Site {} marked {}", site_id, status)
        return approval

    def update_approval_comments(self, site_id: str, comments: str) -> Approval | None:
        """Change comments on an existing approval; no-op when there is none."""
        current = self.get_approval(site_id)
        if current is None:
            return None
        return self.set_approval(site_id, current.status, comments)

    def measurements(self, site_id: str) -> list[Measurement]:
        review = self._sites.get(site_id)
        return list(review.measurements) if review else []

    def add_measurement(
        self, site_id: str, type_: str, value: float, description: str, unit: str = "m"
    ) -> Measurement:
        measurement = Measurement(
            id=uuid.uuid4().hex, type=type_, value=value, description=description, unit=unit
        )
        self.review(site_id).measurements.append(measurement)
        self.save()
        return measurement

    def remove_measurement(self, site_id: str, measurement_id: str) -> bool:
        review = self._sites.get(site_id)
        if review is None:
            return False
        before = len(review.measurements)
        review.measurements = [m for m in review.measurements if m.id != measurement_id]
        if len(review.measurements) == before:
            return False
        self.save()
        return True

    def set_report_entry(
        self, site_id: str, status: str | None = None, comments: str | None = None
    ) -> ReportEntry:
        """Update report status and/or comments, keeping whichever is not given."""
        current = self.review(site_id).report
        entry = ReportEntry(
            status=current.status if status is None else status,
            comments=current.comments if comments is None else comments,
        )
        self.review(site_id).report = entry
        self.save()
        return entry

    def report_entries(self) -> dict[str, ReportEntry]:
        return {site_id: r.report for site_id, r in self._sites.items()}

    def get_assessment(self, site_id: str) -> Assessment | None:
        review = self._sites.get(site_id)
        return review.assessment if review else None

    def save_assessment(self, assessment: Assessment) -> Assessment:
        """Store `assessment` under its site id, stamping the date when unset."""
        if assessment.assessment_date is None:
            assessment = replace(assessment, assessment_date=datetime.now().replace(microsecond=0))
        self.review(assessment.site_id).assessment = assessment
        self.save()
        logger.info("Assessment saved for site {}", assessment.site_id)
        return assessment

    def add_repair_estimate(self, site_id: str, estimate: RepairEstimate | None = None) -> int:
        """Append a repair line (a blank medium-priority one by default); returns its index."""
        assessment = self._require_assessment(site_id)
        assessment.repair_estimates.append(estimate or RepairEstimate())
        self.save()
        return len(assessment.repair_estimates) - 1

    def update_repair_estimate(self, site_id: str, index: int, **changes: Any) -> RepairEstimate:
        """Change fields of one repair line; the total follows the cost fields.

        Raises:
            KeyError: When the site has no assessment.
            IndexError: When `index` is out of range.
        """
        assessment = self._require_assessment(site_id)
        estimate = replace(assessment.repair_estimates[index], **changes)
        assessment.repair_estimates[index] = estimate
        self.save()
        return estimate

    def remove_repair_estimate(self, site_id: str, index: int) -> None:
        assessment = self._require_assessment(site_id)
        del assessment.repair_estimates[index]
        self.save()

    def _require_assessment(self, site_id: str) -> Assessment:
        assessment = self.get_assessment(site_id)
        if assessment is None:
            raise KeyError(f"No assessment recorded for site {site_id}")
        return assessment
