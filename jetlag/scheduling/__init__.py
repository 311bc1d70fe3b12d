"""
Scheduling Layer.

Travel-aware orchestration over the science layer: validates itineraries,
groups legs into trips, builds journeys and plans adaptation across layovers.

Modules:
- connection_validator: Severity-graded connection checks and edge cases
- grouping: Connectivity and recovery-buffer grouping strategies
- journey_builder: Layover derivation and two-phase journey construction
- adaptation_planner: Progressive adaptation toward the final destination
"""

from .adaptation_planner import (
    EmptyJourneyError,
    MultiLegAdaptationPlanner,
    calculate_multi_leg_plan,
)
from .connection_validator import ConnectionValidator, validate_flight_connections
from .grouping import (
    ConnectivityGrouping,
    ItineraryGrouping,
    RecoveryBufferGrouping,
    detect_trip_groups,
)
from .journey_builder import (
    JourneyBuilder,
    calculate_layovers,
    commit_journey,
    create_multi_leg_journey,
    propose_journey,
)

__all__ = [
    "ConnectionValidator",
    "validate_flight_connections",
    "ItineraryGrouping",
    "ConnectivityGrouping",
    "RecoveryBufferGrouping",
    "detect_trip_groups",
    "JourneyBuilder",
    "calculate_layovers",
    "create_multi_leg_journey",
    "propose_journey",
    "commit_journey",
    "MultiLegAdaptationPlanner",
    "EmptyJourneyError",
    "calculate_multi_leg_plan",
]
