"""
Test helpers for building legs, journeys and trips.

Legs are built from a UTC departure instant plus a flight duration so the
gaps between legs can be read straight off the test.
"""

import sys
from datetime import datetime, timedelta
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from jetlag.timezone_math import TimezoneShift, parse_instant
from jetlag.types import FlightLeg, TripBucket

AIRPORT_TZ = {
    "JFK": "America/New_York",
    "LGA": "America/New_York",
    "EWR": "America/New_York",
    "BOS": "America/New_York",
    "ORD": "America/Chicago",
    "LAX": "America/Los_Angeles",
    "SFO": "America/Los_Angeles",
    "LHR": "Europe/London",
    "LGW": "Europe/London",
    "CDG": "Europe/Paris",
    "FRA": "Europe/Berlin",
    "DXB": "Asia/Dubai",
    "NRT": "Asia/Tokyo",
    "HND": "Asia/Tokyo",
    "SIN": "Asia/Singapore",
    "SYD": "Australia/Sydney",
    "ZZZ": "Pacific/Auckland",  # Not in the coordinate table
}

AIRPORT_CITY = {
    "JFK": "New York",
    "LGA": "New York",
    "EWR": "Newark",
    "BOS": "Boston",
    "LHR": "London",
    "LGW": "London",
    "CDG": "Paris",
    "NRT": "Tokyo",
    "HND": "Tokyo",
    "SIN": "Singapore",
    "SYD": "Sydney",
    "LAX": "Los Angeles",
}


def make_leg(
    origin: str,
    destination: str,
    departure: str | datetime,
    duration_hours: float,
    flight_number: str | None = None,
) -> FlightLeg:
    """
    Build a leg between two known airports.

    Args:
        origin: Origin IATA code (must be in AIRPORT_TZ)
        destination: Destination IATA code
        departure: Aware datetime or ISO string (naive strings are UTC)
        duration_hours: Block time; arrival = departure + duration
        flight_number: Optional flight number
    """
    departure = parse_instant(departure)
    return FlightLeg(
        origin_airport_code=origin,
        origin_city=AIRPORT_CITY.get(origin, origin),
        origin_tz=AIRPORT_TZ[origin],
        destination_airport_code=destination,
        destination_city=AIRPORT_CITY.get(destination, destination),
        destination_tz=AIRPORT_TZ[destination],
        departure=departure,
        arrival=departure + timedelta(hours=duration_hours),
        duration_hours=duration_hours,
        flight_number=flight_number,
    )


def leg_after(
    previous: FlightLeg,
    destination: str,
    gap_hours: float,
    duration_hours: float,
    origin: str | None = None,
) -> FlightLeg:
    """Next leg departing gap_hours after previous arrives (from the same airport by default)."""
    return make_leg(
        origin or previous.destination_airport_code,
        destination,
        previous.arrival + timedelta(hours=gap_hours),
        duration_hours,
    )


def make_trip(flights: list[FlightLeg], **kwargs) -> TripBucket:
    return TripBucket.from_flights(flights, **kwargs)


def fixed_shift(hours: float, direction: str):
    """Timezone shift resolver that ignores its inputs."""

    def resolver(origin_tz: str, dest_tz: str, at: datetime | None = None) -> TimezoneShift:
        return TimezoneShift(hours=hours, direction=direction)

    return resolver
