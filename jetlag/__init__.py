"""
Jet Lag Itinerary Engine

Validates multi-leg flight itineraries, plans progressive circadian
adaptation across layovers toward the final destination, and groups
flights into trip buckets by recovery science.

Main entry points: create_multi_leg_journey, MultiLegAdaptationPlanner
"""

from .scheduling import (
    ConnectionValidator,
    EmptyJourneyError,
    MultiLegAdaptationPlanner,
    calculate_multi_leg_plan,
    commit_journey,
    create_multi_leg_journey,
    propose_journey,
    validate_flight_connections,
)
from .timezone_math import TimezoneShift, UnknownTimezoneError, calculate_timezone_shift
from .trips import TripBucketPolicy
from .types import (
    FlightLeg,
    FlightValidationResult,
    JourneyCreationResult,
    Layover,
    MultiLegJetlagPlan,
    MultiLegJourney,
    TripBucket,
    UserPreferences,
)

__all__ = [
    # Types
    "FlightLeg",
    "Layover",
    "UserPreferences",
    "MultiLegJourney",
    "FlightValidationResult",
    "JourneyCreationResult",
    "MultiLegJetlagPlan",
    "TripBucket",
    # Timezones
    "TimezoneShift",
    "UnknownTimezoneError",
    "calculate_timezone_shift",
    # Validation and journeys
    "ConnectionValidator",
    "validate_flight_connections",
    "create_multi_leg_journey",
    "propose_journey",
    "commit_journey",
    # Planning
    "MultiLegAdaptationPlanner",
    "EmptyJourneyError",
    "calculate_multi_leg_plan",
    # Trip buckets
    "TripBucketPolicy",
]
