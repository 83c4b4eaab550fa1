"""Tests for the JSON review store."""

from datetime import datetime

import pytest

from core.services.interfaces import (
    Assessment,
    AssessmentConditions,
    AssessmentMetrics,
    AssessorInfo,
    PropertyDetails,
    RepairEstimate,
)
from infrastructure.review_store import JsonReviewStore


class TestJsonReviewStore:
    def test_approval_persists(self, tmp_path):
        path = tmp_path / "review.json"
        store = JsonReviewStore(path)
        store.set_approval("Site001", "approved", "looks fine")

        reloaded = JsonReviewStore(path)
        approval = reloaded.get_approval("Site001")
        assert approval.status == "approved"
        assert approval.comments == "looks fine"
        assert approval.timestamp is not None
        assert reloaded.get_approval("Site002") is None

    def test_unknown_status_rejected(self, tmp_path):
        store = JsonReviewStore(tmp_path / "review.json")
        with pytest.raises(ValueError):
            store.set_approval("Site001", "maybe")

    def test_update_comments_requires_existing_approval(self, tmp_path):
        store = JsonReviewStore(tmp_path / "review.json")
        assert store.update_approval_comments("Site001", "x") is None
        store.set_approval("Site001", "query")
        updated = store.update_approval_comments("Site001", "why?")
        assert updated.status == "query"
        assert updated.comments == "why?"

    def test_measurements(self, tmp_path):
        path = tmp_path / "review.json"
        store = JsonReviewStore(path)
        crack = store.add_measurement("Site001", "distance", 1.25, "crack length")
        store.add_measurement("Site001", "area", 3.0, "spalling", unit="m²")

        reloaded = JsonReviewStore(path)
        assert [m.description for m in reloaded.measurements("Site001")] == [
            "crack length",
            "spalling",
        ]
        assert reloaded.remove_measurement("Site001", crack.id)
        assert not reloaded.remove_measurement("Site001", "missing")
        assert [m.unit for m in JsonReviewStore(path).measurements("Site001")] == ["m²"]

    @pytest.mark.parametrize(
        "type_, value, description",
        [("distance", 0, "x"), ("distance", 1.0, "  "), ("volume", 1.0, "x")],
    )
    def test_invalid_measurements(self, tmp_path, type_, value, description):
        store = JsonReviewStore(tmp_path / "review.json")
        with pytest.raises(ValueError):
            store.add_measurement("Site001", type_, value, description)

    def test_report_entries(self, tmp_path):
        path = tmp_path / "review.json"
        store = JsonReviewStore(path)
        store.set_report_entry("Site001", status="checked")
        store.set_report_entry("Site001", comments="done")
        store.global_comments = "batch 7"
        store.save()

        reloaded = JsonReviewStore(path)
        entry = reloaded.report_entries()["Site001"]
        assert (entry.status, entry.comments) == ("checked", "done")
        assert reloaded.global_comments == "batch 7"

    def test_corrupt_file_starts_empty(self, tmp_path):
        path = tmp_path / "review.json"
        path.write_text("{not json", encoding="utf-8")
        store = JsonReviewStore(path)
        assert store.report_entries() == {}
        assert store.global_comments == ""

    def test_sites_of_wrong_shape_start_empty(self, tmp_path):
        path = tmp_path / "review.json"
        path.write_text('{"global_comments": "x", "sites": ["Site001"]}', encoding="utf-8")
        store = JsonReviewStore(path)
        assert store.report_entries() == {}
        assert store.global_comments == ""


class TestAssessments:
    """Per-site professional assessment with costed repair lines."""

    def test_assessment_persists(self, tmp_path):
        path = tmp_path / "review.json"
        store = JsonReviewStore(path)
        saved = store.save_assessment(
            Assessment(
                site_id="Site001",
                property_details=PropertyDetails(address="1 Main St", property_type="commercial"),
                assessor=AssessorInfo(name="J. Doe", company="Acme", qualifications=["CPEng"]),
                damage_description="Cracked facade",
                repair_estimates=[RepairEstimate(priority="urgent", materials_cost=100.0)],
                metrics=AssessmentMetrics(urgency_score=5, area_square_meters=12.5),
                follow_up_date=datetime(2024, 4, 1, 9, 0, 0),
                recommendations=["Brace wall", "Re-inspect"],
            )
        )
        assert saved.assessment_date is not None

        loaded = JsonReviewStore(path).get_assessment("Site001")
        assert loaded == saved
        assert loaded.repair_estimates[0].total_estimate == 100.0
        assert JsonReviewStore(path).get_assessment("Site002") is None

    def test_total_follows_cost_fields(self, tmp_path):
        path = tmp_path / "review.json"
        store = JsonReviewStore(path)
        store.save_assessment(Assessment(site_id="Site001"))
        index = store.add_repair_estimate("Site001")

        store.update_repair_estimate("Site001", index, materials_cost=120.0)
        store.update_repair_estimate("Site001", index, labour_cost=80.0)
        updated = store.update_repair_estimate("Site001", index, equipment_cost=50.0)

        assert updated.total_estimate == 250.0
        reloaded = JsonReviewStore(path).get_assessment("Site001")
        assert reloaded.repair_estimates[index].total_estimate == 250.0
        assert reloaded.total_repair_cost == 250.0

    def test_total_kept_when_no_costs_given(self):
        assert RepairEstimate(total_estimate=900.0).total_estimate == 900.0
        assert RepairEstimate(labour_cost=10.0, total_estimate=900.0).total_estimate == 10.0

    def test_remove_repair_estimate(self, tmp_path):
        store = JsonReviewStore(tmp_path / "review.json")
        store.save_assessment(Assessment(site_id="S"))
        store.add_repair_estimate("S", RepairEstimate(description="roof"))
        store.add_repair_estimate("S", RepairEstimate(description="wall"))
        store.remove_repair_estimate("S", 0)
        assert [e.description for e in store.get_assessment("S").repair_estimates] == ["wall"]

    def test_estimate_needs_assessment(self, tmp_path):
        store = JsonReviewStore(tmp_path / "review.json")
        with pytest.raises(KeyError):
            store.add_repair_estimate("Site001")

    @pytest.mark.parametrize(
        "build",
        [
            lambda: AssessmentMetrics(urgency_score=6),
            lambda: AssessmentMetrics(urgency_score=0),
            lambda: RepairEstimate(priority="whenever"),
            lambda: RepairEstimate(category="garden"),
            lambda: PropertyDetails(property_type="castle"),
            lambda: AssessmentConditions(visibility="foggy"),
        ],
    )
    def test_invalid_values_rejected(self, build):
        with pytest.raises(ValueError):
            build()
