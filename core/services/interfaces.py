"""Review-state data structures shared by the store, report and UI layers.

These are plain records keyed by site id; persistence lives in
`infrastructure.review_store`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

APPROVAL_STATUSES = ("approved", "rejected", "query")
REPORT_STATUSES = ("pending", "checked", "needs-review")
MEASUREMENT_TYPES = ("distance", "area", "perimeter")
PROPERTY_TYPES = ("residential", "commercial", "industrial", "other")
OCCUPANCY_TYPES = ("owner", "tenant", "vacant")
WEATHER_CONDITIONS = ("clear", "cloudy", "rainy", "windy", "storm", "other")
VISIBILITY_LEVELS = ("excellent", "good", "fair", "poor")
REPAIR_PRIORITIES = ("urgent", "high", "medium", "low")
REPAIR_CATEGORIES = ("structural", "cosmetic", "electrical", "plumbing", "roofing", "other")


@dataclass
class Approval:
    """Reviewer decision for one site.

    Attributes:
        status: One of `APPROVAL_STATUSES`.
        comments: Free-form reviewer note.
        timestamp: When the decision was last changed.
    """

    status: str
    comments: str = ""
    timestamp: datetime | None = None

    def __post_init__(self) -> None:
        if self.status not in APPROVAL_STATUSES:
            raise ValueError(f"Unknown approval status: {self.status}")


@dataclass
class Measurement:
    """A damage measurement recorded against a site.

    Attributes:
        id: Identifier unique within the site.
        type: One of `MEASUREMENT_TYPES`.
        value: Positive measured value.
        unit: Unit label, meters by default.
        description: What was measured.
    """

    id: str
    type: str
    value: float
    description: str
    unit: str = "m"

    def __post_init__(self) -> None:
        if self.type not in MEASUREMENT_TYPES:
            raise ValueError(f"Unknown measurement type: {self.type}")
        if not self.value or self.value <= 0:
            raise ValueError("Measurement value must be positive")
        if not self.description.strip():
            raise ValueError("Measurement description is required")


@dataclass
class ReportEntry:
    """Report status and comments for one site."""

    status: str = "pending"
    comments: str = ""

    def __post_init__(self) -> None:
        if self.status not in REPORT_STATUSES:
            raise ValueError(f"Unknown report status: {self.status}")


def _check_choice(value: str | None, choices: tuple[str, ...], what: str) -> None:
    if value is not None and value not in choices:
        raise ValueError(f"Unknown {what}: {value}")


@dataclass
class PropertyDetails:
    address: str = ""
    property_type: str = "residential"
    building_age: int | None = None
    construction_type: str | None = None
    floor_area: float | None = None
    storeys: int | None = None
    occupancy: str | None = None

    def __post_init__(self) -> None:
        _check_choice(self.property_type, PROPERTY_TYPES, "property type")
        _check_choice(self.occupancy, OCCUPANCY_TYPES, "occupancy")


@dataclass
class AssessmentConditions:
    """Site conditions at the time of the visit."""

    weather_conditions: str = "clear"
    visibility: str = "excellent"
    temperature: float | None = None
    humidity: float | None = None
    wind_speed: float | None = None
    accessibility_issues: str | None = None

    def __post_init__(self) -> None:
        _check_choice(self.weather_conditions, WEATHER_CONDITIONS, "weather")
        _check_choice(self.visibility, VISIBILITY_LEVELS, "visibility")


@dataclass
class AssessorInfo:
    name: str = ""
    company: str = ""
    contact_number: str = ""
    email: str = ""
    license_number: str | None = None
    qualifications: list[str] = field(default_factory=list)


@dataclass
class RepairEstimate:
    """One line of the repair costing.

    Attributes:
        priority: One of `REPAIR_PRIORITIES`.
        category: One of `REPAIR_CATEGORIES`.
        description: Work to be done.
        materials_cost: Materials component of the estimate.
        labour_cost: Labour component of the estimate.
        equipment_cost: Equipment hire component of the estimate.
        total_estimate: Sum of the cost components whenever any of them is
            set; otherwise whatever total was entered directly.
        timeline_weeks: Expected duration.
        recommended_contractors: Contractor names, free-form.
        insurance_claim: Whether the repair goes through insurance.
    """

    priority: str = "medium"
    category: str = "other"
    description: str = ""
    materials_cost: float | None = None
    labour_cost: float | None = None
    equipment_cost: float | None = None
    total_estimate: float | None = None
    timeline_weeks: int | None = 1
    recommended_contractors: list[str] = field(default_factory=list)
    insurance_claim: bool = False

    def __post_init__(self) -> None:
        _check_choice(self.priority, REPAIR_PRIORITIES, "repair priority")
        _check_choice(self.category, REPAIR_CATEGORIES, "repair category")
        costs = (self.materials_cost, self.labour_cost, self.equipment_cost)
        if any(c is not None for c in costs):
            self.total_estimate = sum(c or 0 for c in costs)


@dataclass
class AssessmentMetrics:
    """Headline numbers; `urgency_score` runs from 1 (low) to 5 (critical)."""

    urgency_score: int = 3
    distance_meters: float | None = None
    area_square_meters: float | None = None
    perimeter: float | None = None
    cost_aud: float | None = None

    def __post_init__(self) -> None:
        if self.urgency_score not in (1, 2, 3, 4, 5):
            raise ValueError(f"Urgency score must be 1-5, got {self.urgency_score}")


@dataclass
class Assessment:
    """Professional assessment written up for one site.

    Attributes:
        site_id: Damage identifier the assessment belongs to.
        assessment_date: When the assessment was made.
        property_details: Address and building facts.
        conditions: Weather and access on the day.
        assessor: Who carried out the assessment.
        damage_description: Free-form description of the damage.
        repair_estimates: Costed repair lines.
        metrics: Urgency and summary measurements.
        follow_up_required: Whether another visit is needed.
        recommendations: Free-form recommendations, in order.
    """

    site_id: str
    assessment_date: datetime | None = None
    property_details: PropertyDetails = field(default_factory=PropertyDetails)
    conditions: AssessmentConditions = field(default_factory=AssessmentConditions)
    assessor: AssessorInfo = field(default_factory=AssessorInfo)
    damage_description: str = ""
    cause_of_damage: str | None = None
    repair_estimates: list[RepairEstimate] = field(default_factory=list)
    metrics: AssessmentMetrics = field(default_factory=AssessmentMetrics)
    follow_up_required: bool = False
    follow_up_date: datetime | None = None
    insurance_claim_number: str | None = None
    risk_assessment: str | None = None
    recommendations: list[str] = field(default_factory=list)
    completion_certificate: bool = False

    @property
    def total_repair_cost(self) -> float:
        return sum(e.total_estimate or 0 for e in self.repair_estimates)


@dataclass
class SiteReview:
    """Everything a reviewer recorded for one site."""

    approval: Approval | None = None
    measurements: list[Measurement] = field(default_factory=list)
    report: ReportEntry = field(default_factory=ReportEntry)
    assessment: Assessment | None = None
