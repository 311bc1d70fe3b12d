"""
Itinerary grouping strategies.

Two strategies share one interface but answer different questions, so they
are kept apart on purpose:

- ConnectivityGrouping (pre-flight validation): legs belong together only
  when they physically connect - same airport or same metro area - within
  48 hours.
- RecoveryBufferGrouping (trip-bucket suggestions): legs also belong
  together when the traveler would still be inside the recovery buffer,
  even if the legs do not connect.
"""

from typing import Protocol

from ..reference.airports import DEFAULT_AIRPORTS, AirportDirectory
from ..timezone_math import days_between, hours_between
from ..types import FlightLeg

CONNECTION_WINDOW_HOURS = 48


class ItineraryGrouping(Protocol):
    def group(self, legs: list[FlightLeg]) -> list[list[FlightLeg]]:
        ...


def _greedy_groups(legs: list[FlightLeg], same_group) -> list[list[FlightLeg]]:
    """Chronological scan starting a new group whenever same_group(prev, curr) is False."""
    if not legs:
        return []

    ordered = sorted(legs, key=lambda leg: leg.departure)
    groups = []
    current = [ordered[0]]

    for prev, curr in zip(ordered, ordered[1:]):
        if same_group(prev, curr):
            current.append(curr)
        else:
            groups.append(current)
            current = [curr]

    groups.append(current)
    return groups


class ConnectivityGrouping:
    """Split wherever adjacent legs do not connect within 48 hours."""

    def __init__(self, airports: AirportDirectory = DEFAULT_AIRPORTS):
        self.airports = airports

    def is_connected(self, prev: FlightLeg, curr: FlightLeg) -> bool:
        gap = hours_between(prev.arrival, curr.departure)
        return (
            self.airports.is_connected(prev.destination_airport_code, curr.origin_airport_code)
            and 0 <= gap < CONNECTION_WINDOW_HOURS
        )

    def group(self, legs: list[FlightLeg]) -> list[list[FlightLeg]]:
        return _greedy_groups(legs, self.is_connected)


class RecoveryBufferGrouping:
    """
    Keep legs together while connected or still inside the recovery buffer.

    Args:
        buffer_days: Days needed for full re-entrainment (protocol-specific)
    """

    def __init__(self, buffer_days: int, airports: AirportDirectory = DEFAULT_AIRPORTS):
        self.buffer_days = buffer_days
        self.airports = airports

    def is_same_trip(self, prev: FlightLeg, curr: FlightLeg) -> bool:
        connected = (
            self.airports.is_connected(prev.destination_airport_code, curr.origin_airport_code)
            and hours_between(prev.arrival, curr.departure) < CONNECTION_WINDOW_HOURS
        )
        within_buffer = days_between(prev.arrival, curr.departure) - self.buffer_days < 0
        return connected or within_buffer

    def group(self, legs: list[FlightLeg]) -> list[list[FlightLeg]]:
        return _greedy_groups(legs, self.is_same_trip)


def detect_trip_groups(
    legs: list[FlightLeg], airports: AirportDirectory = DEFAULT_AIRPORTS
) -> list[list[FlightLeg]]:
    """Connectivity-only grouping used by the connection validator."""
    return ConnectivityGrouping(airports).group(legs)
