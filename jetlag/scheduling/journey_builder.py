"""
Journey construction from raw flight legs.

The connection validator gates construction:
- split_trips: one journey per suggested group (checked before BLOCK issues)
- invalid: failure, cannot proceed without a forced commit
- needs_confirmation: failure, may proceed once the user confirms
- valid: one journey

Confirmation is a two-phase interaction: propose_journey() returns the
validation result to show the user, commit_journey() re-validates and
builds the journey under the confirmation the user gave.
"""

import logging

from ..reference.airports import DEFAULT_AIRPORTS, AirportDirectory
from ..timezone_math import hours_between
from ..types import (
    Confirmation,
    FlightLeg,
    FlightValidationResult,
    JourneyCreationResult,
    Layover,
    MultiLegJourney,
    UserPreferences,
)
from .connection_validator import ConnectionValidator

logger = logging.getLogger(__name__)


def calculate_layovers(
    legs: list[FlightLeg], airports: AirportDirectory = DEFAULT_AIRPORTS
) -> list[Layover]:
    """
    Layovers between chronologically-adjacent connected legs.

    A pair connects at the same airport or across airports of one metro
    area. Disconnected pairs are skipped, not rejected.
    """
    ordered = sorted(legs, key=lambda leg: leg.departure)
    layovers = []

    for curr, next_leg in zip(ordered, ordered[1:]):
        if not airports.is_connected(curr.destination_airport_code, next_leg.origin_airport_code):
            logger.warning(
                "Disconnected flights detected: %s -> %s. Treating as separate travel segments.",
                curr.destination_airport_code,
                next_leg.origin_airport_code,
            )
            continue

        duration = hours_between(curr.arrival, next_leg.departure)
        if duration < 0:
            continue

        layovers.append(
            Layover(
                city=curr.destination_city,
                airport_code=curr.destination_airport_code,
                timezone=curr.destination_tz,
                duration_hours=duration,
                arrival=curr.arrival,
                departure=next_leg.departure,
            )
        )

    return layovers


class JourneyBuilder:
    """Validate legs and turn them into one or more MultiLegJourneys."""

    def __init__(self, airports: AirportDirectory = DEFAULT_AIRPORTS):
        self.airports = airports
        self.validator = ConnectionValidator(airports)

    def build_journey(
        self, legs: list[FlightLeg], user_preferences: UserPreferences | None = None
    ) -> MultiLegJourney:
        ordered = sorted(legs, key=lambda leg: leg.departure)
        return MultiLegJourney(
            legs=ordered,
            layovers=calculate_layovers(ordered, self.airports),
            user_preferences=user_preferences,
        )

    def propose(self, legs: list[FlightLeg]) -> FlightValidationResult:
        """Phase one: validation result for the user to review."""
        return self.validator.validate(legs)

    def create(
        self, legs: list[FlightLeg], user_preferences: UserPreferences | None = None
    ) -> JourneyCreationResult:
        """Build without any user confirmation."""
        return self._build(legs, user_preferences, confirmation=None)

    def commit(
        self,
        legs: list[FlightLeg],
        confirmation: Confirmation,
        user_preferences: UserPreferences | None = None,
    ) -> JourneyCreationResult:
        """
        Phase two: build after the user reviewed the proposal.

        "confirmed" accepts unusual connections; "forced" also accepts
        itineraries with blocking issues.
        """
        return self._build(legs, user_preferences, confirmation=confirmation)

    def _build(
        self,
        legs: list[FlightLeg],
        user_preferences: UserPreferences | None,
        confirmation: Confirmation | None,
    ) -> JourneyCreationResult:
        validation = self.validator.validate(legs)

        # Separate trips take precedence over BLOCK issues
        if validation.recommended_action == "split_trips" and validation.suggested_groups:
            return self._split(validation, user_preferences)

        if validation.overall_validity == "invalid" and confirmation != "forced":
            return JourneyCreationResult(success=False, validation=validation, can_proceed=False)

        if validation.overall_validity == "needs_confirmation" and confirmation is None:
            return JourneyCreationResult(success=False, validation=validation, can_proceed=True)

        if confirmation is not None and validation.overall_validity != "valid":
            logger.warning(
                "Building journey past %s validation (%s): %s",
                validation.overall_validity,
                confirmation,
                [issue.message for issue in validation.issues],
            )
        else:
            notices = [
                issue.message for issue in validation.issues if issue.severity in ("WARNING", "INFO")
            ]
            if notices:
                logger.warning("Flight connection warnings: %s", notices)

        return JourneyCreationResult(
            success=True,
            validation=validation,
            journey=self.build_journey(legs, user_preferences),
        )

    def _split(
        self, validation: FlightValidationResult, user_preferences: UserPreferences | None
    ) -> JourneyCreationResult:
        groups = validation.suggested_groups
        group_validations = []
        for group in groups:
            group_validation = self.validator.validate(group)
            if group_validation.overall_validity != "valid":
                logger.warning(
                    "Split trip %s is %s: %s",
                    " -> ".join(leg.label for leg in group),
                    group_validation.overall_validity,
                    [issue.message for issue in group_validation.issues],
                )
            group_validations.append(group_validation)

        return JourneyCreationResult(
            success=True,
            validation=validation,
            journeys=[self.build_journey(group, user_preferences) for group in groups],
            split_reason=(
                f"Detected {len(groups)} separate trips - creating individual recovery plans"
            ),
            group_validations=group_validations,
        )


def create_multi_leg_journey(
    legs: list[FlightLeg],
    user_preferences: UserPreferences | None = None,
    airports: AirportDirectory = DEFAULT_AIRPORTS,
) -> JourneyCreationResult:
    """Validate and build journeys, failing on anything that needs the user."""
    return JourneyBuilder(airports).create(legs, user_preferences)


def propose_journey(
    legs: list[FlightLeg], airports: AirportDirectory = DEFAULT_AIRPORTS
) -> FlightValidationResult:
    return JourneyBuilder(airports).propose(legs)


def commit_journey(
    legs: list[FlightLeg],
    confirmation: Confirmation,
    user_preferences: UserPreferences | None = None,
    airports: AirportDirectory = DEFAULT_AIRPORTS,
) -> JourneyCreationResult:
    return JourneyBuilder(airports).commit(legs, confirmation, user_preferences)
