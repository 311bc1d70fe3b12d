"""
Data structures for itinerary validation, adaptation planning and trip buckets.

Flight legs and layovers are immutable inputs produced upstream. Everything
else is an output value built by the validator, the planner or the bucket
policy.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from .timezone_math import parse_instant

# =============================================================================
# Enumerations
# =============================================================================

Direction = Literal["east", "west", "none"]

Severity = Literal[
    "BLOCK",  # Physically impossible - prevents journey construction
    "ERROR",  # Highly problematic - requires confirmation
    "WARNING",  # Unusual but possible - requires confirmation
    "INFO",  # Separate-trip detection - offer to split
]

IssueCategory = Literal["time", "geography", "logistics", "separation"]

EdgeCaseType = Literal["positioning", "mileage_run", "multi_city", "open_jaw", "normal"]

Confidence = Literal["high", "medium", "low"]

OverallValidity = Literal["valid", "needs_confirmation", "invalid"]

RecommendedAction = Literal["single_journey", "split_trips", "fix_errors", "confirm_unusual"]

AdaptationStrategy = Literal[
    "progressive",  # Gradually shift toward final destination
    "anchor_sleep",  # Hold origin sleep timing (short layovers)
]

RecoveryProtocol = Literal["aggressive", "conservative"]

BucketStatus = Literal["draft", "locked", "active", "completed"]

TripTier = Literal["free", "pro", "business"]

ConflictType = Literal["insufficient_recovery", "timezone_accumulation", "overlapping_dates"]

ConflictSeverity = Literal["low", "medium", "high"]

ConflictAction = Literal["merge", "separate", "add_buffer"]

# Confirmation given by the user between proposing and committing a journey.
# "confirmed" accepts unusual connections, "forced" also accepts blocking ones.
Confirmation = Literal["confirmed", "forced"]


# =============================================================================
# Flight Types
# =============================================================================


@dataclass(frozen=True)
class FlightLeg:
    """Single flight segment with timezone-aware departure/arrival instants."""

    origin_airport_code: str  # IATA code (e.g., "JFK")
    origin_city: str
    origin_tz: str  # IANA timezone (e.g., "America/New_York")
    destination_airport_code: str
    destination_city: str
    destination_tz: str
    departure: datetime  # Aware instant
    arrival: datetime  # Aware instant
    duration_hours: float
    flight_number: str | None = None
    airline: str | None = None

    @property
    def label(self) -> str:
        """Flight number when known, otherwise the route."""
        return self.flight_number or f"{self.origin_airport_code}-{self.destination_airport_code}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FlightLeg":
        """
        Build a leg from a JSON-style dict.

        Naive departure/arrival strings are read as local time at the
        origin/destination respectively. Duration defaults to the elapsed
        time between the two instants.
        """
        departure = parse_instant(data["departure"], data["origin_tz"])
        arrival = parse_instant(data["arrival"], data["destination_tz"])
        duration = data.get("duration_hours")
        if duration is None:
            duration = (arrival - departure).total_seconds() / 3600

        return cls(
            origin_airport_code=data["origin_airport_code"],
            origin_city=data.get("origin_city", data["origin_airport_code"]),
            origin_tz=data["origin_tz"],
            destination_airport_code=data["destination_airport_code"],
            destination_city=data.get("destination_city", data["destination_airport_code"]),
            destination_tz=data["destination_tz"],
            departure=departure,
            arrival=arrival,
            duration_hours=float(duration),
            flight_number=data.get("flight_number"),
            airline=data.get("airline"),
        )


@dataclass(frozen=True)
class Layover:
    """Time on the ground between two connected legs."""

    city: str
    airport_code: str
    timezone: str
    duration_hours: float  # Always >= 0
    arrival: datetime
    departure: datetime

    @property
    def days(self) -> float:
        return self.duration_hours / 24


# =============================================================================
# Validation Types
# =============================================================================


@dataclass
class ValidationIssue:
    """One problem found between two chronologically-adjacent legs."""

    severity: Severity
    category: IssueCategory
    message: str
    suggestion: str
    affected_legs: tuple[FlightLeg, FlightLeg]
    gap_hours: float


@dataclass
class EdgeCaseDetection:
    """Shape of the whole itinerary."""

    type: EdgeCaseType
    confidence: Confidence
    explanation: str
    recommendation: str = ""


@dataclass
class FlightValidationResult:
    """Output of the connection validator."""

    overall_validity: OverallValidity
    edge_case: EdgeCaseDetection
    issues: list[ValidationIssue]
    recommended_action: RecommendedAction
    suggested_groups: list[list[FlightLeg]] | None = None

    def issues_with_severity(self, severity: Severity) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == severity]

    @property
    def has_blocking(self) -> bool:
        return any(issue.severity == "BLOCK" for issue in self.issues)

    @property
    def has_separation(self) -> bool:
        return any(
            issue.severity == "INFO" and issue.category == "separation" for issue in self.issues
        )


# =============================================================================
# Journey / Plan Types
# =============================================================================


@dataclass
class UserPreferences:
    """
    Traveler profile.

    Only recovery_mode and the normal sleep hours change any numbers; the
    remaining fields feed advisories.
    """

    age: int | None = None
    sleep_quality: Literal["poor", "fair", "good", "excellent"] | None = None
    adaptability_level: Literal["low", "medium", "high"] | None = None
    exercise_frequency: Literal["sedentary", "light", "moderate", "active"] | None = None
    chronotype: Literal["morning_lark", "night_owl", "intermediate"] | None = None
    recovery_mode: RecoveryProtocol = "conservative"
    normal_bedtime: int = 22  # Hour of day (0-23)
    normal_wake_time: int = 6  # Hour of day (0-23)


@dataclass
class MultiLegJourney:
    """Ordered legs plus derived layovers. Built only after validation."""

    legs: list[FlightLeg]
    layovers: list[Layover] = field(default_factory=list)
    user_preferences: UserPreferences | None = None


@dataclass
class SleepWindow:
    """A target sleep opportunity."""

    bedtime: datetime
    wake_time: datetime
    duration_hours: float
    notes: str
    quality: Literal["target", "nap", "avoid"] = "target"


@dataclass
class LegAdaptation:
    """Adaptation plan for one stop (-1 = origin before departure)."""

    leg_index: int
    location: str
    timezone: str
    strategy: AdaptationStrategy
    cumulative_shift_hours: float  # Shifted from origin so far
    remaining_shift: float  # Left to adapt at the final destination
    sleep_schedule: SleepWindow
    recommendations: list[str]
    reasoning: str


@dataclass
class DayPlan:
    """One day of recovery at the final destination."""

    date: datetime
    day: int  # 0 = arrival day
    phase: Literal["Arrival Day", "Active Recovery", "Final Adjustment"]
    sleep_schedules: list[SleepWindow]
    key_goals: list[str] = field(default_factory=list)


@dataclass
class SafetyInformation:
    disclaimer: str
    melatonin_contraindications: list[str]
    melatonin_interactions: list[str]
    melatonin_starting_dosage: str
    light_therapy_contraindications: list[str]
    light_therapy_warnings: list[str]
    seek_medical_advice: list[str]
    important_notes: list[str]


@dataclass
class EnvironmentOptimization:
    bedroom: dict[str, str]
    morning_light_timing: str
    morning_light_sources: list[str]
    light_box_guidance: str
    evening_light_timing: str
    evening_light_recommendations: list[str]
    evening_light_technology: list[str]


@dataclass
class MultiLegJetlagPlan:
    """Output of the multi-leg adaptation planner."""

    total_journey_days: int
    final_recovery_days: int
    total_timezone_shift: float  # Origin -> final destination only
    direction: Direction
    progression_rate: float  # Hours adapted per day en route
    leg_adaptations: list[LegAdaptation]
    day_plans: list[DayPlan]
    safety_information: SafetyInformation
    environment_optimization: EnvironmentOptimization


@dataclass
class JourneyCreationResult:
    """
    Result of journey construction.

    Exactly one of journey / journeys is set on success. On failure,
    can_proceed tells the caller whether a confirmed commit may succeed.
    """

    success: bool
    validation: FlightValidationResult | None = None
    journey: MultiLegJourney | None = None
    journeys: list[MultiLegJourney] | None = None
    split_reason: str | None = None
    group_validations: list[FlightValidationResult] | None = None
    can_proceed: bool = False


# =============================================================================
# Trip Bucket Types
# =============================================================================


@dataclass
class TripBucket:
    """A group of flights planned and recovered from as one unit."""

    flights: list[FlightLeg]
    departure: datetime
    arrival: datetime
    bucket_status: BucketStatus = "draft"
    recovery_protocol: RecoveryProtocol = "aggressive"
    tier_at_creation: TripTier = "free"
    is_return_trip: bool = False
    parent_trip_id: int | None = None
    id: int | None = None
    owner_id: str | None = None
    name: str | None = None
    recovery_complete_at: datetime | None = None
    total_timezone_shift_hours: float | None = None
    jetlag_difficulty_score: float | None = None

    @classmethod
    def from_flights(cls, flights: list[FlightLeg], **kwargs: Any) -> "TripBucket":
        """Bucket spanning the first departure to the last arrival."""
        ordered = sorted(flights, key=lambda leg: leg.departure)
        return cls(
            flights=ordered,
            departure=ordered[0].departure,
            arrival=ordered[-1].arrival,
            **kwargs,
        )


@dataclass
class TripSeparationResult:
    should_merge: bool
    reason: str
    days_between: int
    confidence: Confidence


@dataclass
class TripConflict:
    trip_id_1: int | None
    trip_id_2: int | None
    conflict_type: ConflictType
    severity: ConflictSeverity
    days_between: int
    recommended_action: ConflictAction
    message: str


@dataclass
class BucketCreationCheck:
    """Structured allow/refuse answer so a UI can render an upgrade prompt."""

    allowed: bool
    reason: str | None = None


@dataclass
class BucketCreationResult:
    check: BucketCreationCheck
    bucket: TripBucket | None = None

