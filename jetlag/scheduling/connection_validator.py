"""
Flight connection validation.

Checks every chronologically-adjacent pair of legs and grades problems by
severity instead of failing:

- BLOCK: physically impossible (departs before arrival, no time to travel
  between cities). Prevents journey construction.
- ERROR: below minimum connection time. Needs confirmation.
- WARNING: unusually long layover at one airport. Needs confirmation.
- INFO (separation): legs that look like separate trips. Offer to split.

A detected separate-trip situation takes precedence over BLOCK issues:
disconnected flights are split into journeys regardless of other problems.
"""

import math
from dataclasses import dataclass
from typing import Literal

from ..reference.airports import DEFAULT_AIRPORTS, AirportDirectory
from ..timezone_math import hours_between
from ..types import EdgeCaseDetection, FlightLeg, FlightValidationResult, ValidationIssue
from .grouping import ConnectivityGrouping

# Minimum connection times (minutes)
SAME_AIRPORT_MCT_MINUTES = 60
SAME_AIRPORT_TYPICAL_MINUTES = 120
METRO_TRANSFER_MCT_MINUTES = 180
METRO_TRANSFER_TYPICAL_MINUTES = 240
# Metro transfers longer than this scale the MCT proportionally
METRO_TRANSFER_REFERENCE_MILES = 30

# Layover thresholds (hours)
LONG_LAYOVER_HOURS = 24
SEPARATE_STAY_HOURS = 168  # 7 days

# Edge case thresholds (hours)
POSITIONING_SHORT_LEG_HOURS = 3
POSITIONING_LONG_LEG_HOURS = 8
MULTI_CITY_MIN_STAY_HOURS = 48  # 2 days
MULTI_CITY_MAX_STAY_HOURS = 336  # 14 days

# Assumed cruise speed and airport overhead for inter-city connections
CRUISE_SPEED_MPH = 500
AIRPORT_OVERHEAD_HOURS = 3

Relationship = Literal["same_airport", "same_metro", "different_city"]


@dataclass
class ConnectionRequirements:
    minimum_minutes: int
    typical_minutes: int
    reasoning: str


def estimate_minimum_travel_time(distance_miles: float) -> float:
    """Minimum hours to get between two cities by ground or air."""
    if distance_miles < 50:
        return 1.5  # Urban transfer
    elif distance_miles < 200:
        return 3.0  # Regional
    elif distance_miles < 500:
        return 5.0  # Longer regional
    return distance_miles / CRUISE_SPEED_MPH + AIRPORT_OVERHEAD_HOURS


class ConnectionValidator:
    """
    Severity-graded feasibility checks over an ordered leg sequence.

    Never raises: every problem becomes a ValidationIssue and the caller
    decides fatality from overall_validity.
    """

    def __init__(self, airports: AirportDirectory = DEFAULT_AIRPORTS):
        self.airports = airports
        self.grouping = ConnectivityGrouping(airports)

    def relationship(self, arrival_code: str, departure_code: str) -> Relationship:
        if arrival_code == departure_code:
            return "same_airport"
        if self.airports.same_metro(arrival_code, departure_code):
            return "same_metro"
        return "different_city"

    def minimum_connection_time(
        self, arrival_code: str, departure_code: str
    ) -> ConnectionRequirements:
        """
        Minimum/typical connection time between an arrival and a departure airport.
        """
        relationship = self.relationship(arrival_code, departure_code)

        if relationship == "same_airport":
            return ConnectionRequirements(
                minimum_minutes=SAME_AIRPORT_MCT_MINUTES,
                typical_minutes=SAME_AIRPORT_TYPICAL_MINUTES,
                reasoning="Connection at same airport",
            )

        if relationship == "same_metro":
            scale = 1.0
            if self.airports.has_coordinates(arrival_code, departure_code):
                distance = self.airports.distance_miles(arrival_code, departure_code)
                scale = max(1.0, distance / METRO_TRANSFER_REFERENCE_MILES)
            return ConnectionRequirements(
                minimum_minutes=math.ceil(METRO_TRANSFER_MCT_MINUTES * scale),
                typical_minutes=math.ceil(METRO_TRANSFER_TYPICAL_MINUTES * scale),
                reasoning=(
                    f"Ground transfer between {arrival_code} and {departure_code} "
                    "in same metro area"
                ),
            )

        distance = self.airports.distance_miles(arrival_code, departure_code)
        travel_hours = estimate_minimum_travel_time(distance)
        return ConnectionRequirements(
            minimum_minutes=math.ceil(travel_hours * 60),
            typical_minutes=math.ceil(travel_hours * 60 * 1.5),
            reasoning=f"{distance:.0f} miles between cities - requires ground/air transport",
        )

    def validate(self, legs: list[FlightLeg]) -> FlightValidationResult:
        """
        Validate an itinerary.

        Args:
            legs: Flight legs in any order (sorted by departure here)

        Returns:
            FlightValidationResult with ordered issues and a recommended action
        """
        if not legs:
            return FlightValidationResult(
                overall_validity="invalid",
                edge_case=EdgeCaseDetection(
                    type="normal", confidence="high", explanation="No flights"
                ),
                issues=[],
                recommended_action="fix_errors",
            )

        if len(legs) == 1:
            return FlightValidationResult(
                overall_validity="valid",
                edge_case=EdgeCaseDetection(
                    type="normal",
                    confidence="high",
                    explanation="Single flight",
                    recommendation="Process as single-leg journey",
                ),
                issues=[],
                recommended_action="single_journey",
            )

        ordered = sorted(legs, key=lambda leg: leg.departure)

        issues = []
        for curr, next_leg in zip(ordered, ordered[1:]):
            issues.extend(self._check_connection(curr, next_leg))

        edge_case = self.detect_edge_case(ordered)
        return self._decide(ordered, edge_case, issues)

    def _check_connection(self, curr: FlightLeg, next_leg: FlightLeg) -> list[ValidationIssue]:
        """Issues for one adjacent pair. Hard failures short-circuit the rest."""
        gap = hours_between(curr.arrival, next_leg.departure)
        pair = (curr, next_leg)

        if gap < 0:
            return [
                ValidationIssue(
                    severity="BLOCK",
                    category="time",
                    message=(
                        f"Flight {next_leg.label} departs {abs(gap):.1f}h BEFORE "
                        f"flight {curr.label} arrives"
                    ),
                    suggestion="This is physically impossible. Check your flight dates and times.",
                    affected_legs=pair,
                    gap_hours=gap,
                )
            ]

        arrival_code = curr.destination_airport_code
        departure_code = next_leg.origin_airport_code
        relationship = self.relationship(arrival_code, departure_code)

        if relationship == "different_city":
            distance = self.airports.distance_miles(arrival_code, departure_code)
            needed = estimate_minimum_travel_time(distance)
            if gap < needed:
                return [
                    ValidationIssue(
                        severity="BLOCK",
                        category="geography",
                        message=(
                            f"Only {gap:.1f}h between {arrival_code} and {departure_code} "
                            f"({distance:.0f} miles, need {needed:.1f}h minimum)"
                        ),
                        suggestion=(
                            "Not enough time to travel between these airports. "
                            "Missing a connecting flight?"
                        ),
                        affected_legs=pair,
                        gap_hours=gap,
                    )
                ]
        else:
            mct = self.minimum_connection_time(arrival_code, departure_code)
            if gap < mct.minimum_minutes / 60:
                if relationship == "same_airport":
                    message = (
                        f"Only {gap * 60:.0f} minute connection at {arrival_code} - "
                        "below airline MCT"
                    )
                    suggestion = (
                        "This connection is too tight. You risk missing your flight "
                        "if there are any delays."
                    )
                else:
                    message = (
                        f"Only {gap:.1f}h for ground transfer from {arrival_code} "
                        f"to {departure_code}"
                    )
                    suggestion = (
                        f"This inter-airport connection is very tight. Consider allowing "
                        f"{mct.typical_minutes / 60:.0f}+ hours for ground transfer."
                    )
                return [
                    ValidationIssue(
                        severity="ERROR",
                        category="logistics",
                        message=message,
                        suggestion=suggestion,
                        affected_legs=pair,
                        gap_hours=gap,
                    )
                ]

        issues = []
        days = math.floor(gap / 24)

        if relationship == "same_airport" and LONG_LAYOVER_HOURS <= gap < SEPARATE_STAY_HOURS:
            issues.append(
                ValidationIssue(
                    severity="WARNING",
                    category="logistics",
                    message=f"{days} day layover at {curr.destination_city} ({arrival_code})",
                    suggestion=(
                        "Very long layover detected. Is this intentional, "
                        "or are there missing flights?"
                    ),
                    affected_legs=pair,
                    gap_hours=gap,
                )
            )

        if relationship == "different_city" and gap >= LONG_LAYOVER_HOURS:
            issues.append(
                ValidationIssue(
                    severity="INFO",
                    category="separation",
                    message=(
                        f"Flights don't connect: {arrival_code} → {departure_code} "
                        f"with {days} day gap"
                    ),
                    suggestion=(
                        "These appear to be separate trips. "
                        "Create individual jetlag recovery plans?"
                    ),
                    affected_legs=pair,
                    gap_hours=gap,
                )
            )

        if relationship == "same_airport" and gap >= SEPARATE_STAY_HOURS:
            issues.append(
                ValidationIssue(
                    severity="INFO",
                    category="separation",
                    message=f"{days} day stay in {curr.destination_city} between flights",
                    suggestion="Long stay detected. Treat as separate outbound and return trips?",
                    affected_legs=pair,
                    gap_hours=gap,
                )
            )

        return issues

    def detect_edge_case(self, ordered: list[FlightLeg]) -> EdgeCaseDetection:
        """Classify the itinerary shape, independent of per-pair issues."""
        if len(ordered) < 2:
            return EdgeCaseDetection(
                type="normal",
                confidence="high",
                explanation="Single flight",
                recommendation="Process as single-leg journey",
            )

        # Positioning: short hop to a hub, then long-haul
        if len(ordered) == 2:
            first, second = ordered
            if (
                first.duration_hours < POSITIONING_SHORT_LEG_HOURS
                and second.duration_hours > POSITIONING_LONG_LEG_HOURS
                and first.destination_airport_code == second.origin_airport_code
            ):
                return EdgeCaseDetection(
                    type="positioning",
                    confidence="high",
                    explanation=(
                        "Short positioning flight to hub, followed by long-haul international"
                    ),
                    recommendation=(
                        "Treat as single connected journey with intermediate layover"
                    ),
                )

        pairs = list(zip(ordered, ordered[1:]))

        long_stays = [
            (curr, next_leg)
            for curr, next_leg in pairs
            if MULTI_CITY_MIN_STAY_HOURS
            <= hours_between(curr.arrival, next_leg.departure)
            < MULTI_CITY_MAX_STAY_HOURS
        ]
        if len(long_stays) >= 2:
            return EdgeCaseDetection(
                type="multi_city",
                confidence="high",
                explanation="Multiple destinations with multi-day stays",
                recommendation=(
                    "Plan jetlag adaptation for each city, accounting for cumulative fatigue"
                ),
            )

        if any(
            not self.airports.is_connected(curr.destination_airport_code, next_leg.origin_airport_code)
            for curr, next_leg in pairs
        ):
            return EdgeCaseDetection(
                type="open_jaw",
                confidence="high",
                explanation=(
                    "Flights don't connect - likely ground transportation between segments"
                ),
                recommendation="Treat as separate trips with ground travel in between",
            )

        return EdgeCaseDetection(
            type="normal",
            confidence="high",
            explanation="Standard connected itinerary",
            recommendation="Process as single multi-leg journey",
        )

    def _decide(
        self,
        ordered: list[FlightLeg],
        edge_case: EdgeCaseDetection,
        issues: list[ValidationIssue],
    ) -> FlightValidationResult:
        severities = {issue.severity for issue in issues}
        has_separation = any(
            issue.severity == "INFO" and issue.category == "separation" for issue in issues
        )

        # Separate trips are split before BLOCK issues are considered
        if has_separation:
            return FlightValidationResult(
                overall_validity="needs_confirmation",
                edge_case=edge_case,
                issues=issues,
                recommended_action="split_trips",
                suggested_groups=self.grouping.group(ordered),
            )

        if "BLOCK" in severities:
            validity, action = "invalid", "fix_errors"
        elif "ERROR" in severities or "WARNING" in severities:
            validity, action = "needs_confirmation", "confirm_unusual"
        else:
            validity, action = "valid", "single_journey"

        return FlightValidationResult(
            overall_validity=validity,
            edge_case=edge_case,
            issues=issues,
            recommended_action=action,
        )


def validate_flight_connections(
    legs: list[FlightLeg], airports: AirportDirectory = DEFAULT_AIRPORTS
) -> FlightValidationResult:
    """Convenience wrapper around ConnectionValidator.validate."""
    return ConnectionValidator(airports).validate(legs)
