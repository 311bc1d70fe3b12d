"""
Pytest fixtures for itinerary validation, planning and trip bucket tests.
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from jetlag.scheduling.adaptation_planner import MultiLegAdaptationPlanner
from jetlag.scheduling.connection_validator import ConnectionValidator
from jetlag.trips.bucket_policy import TripBucketPolicy

from helpers import fixed_shift, leg_after, make_leg


@pytest.fixture
def validator():
    """ConnectionValidator over the shipped airport tables."""
    return ConnectionValidator()


@pytest.fixture
def planner():
    """Planner with the default timezone resolver and science primitives."""
    return MultiLegAdaptationPlanner()


@pytest.fixture
def policy():
    """TripBucketPolicy with the aggressive protocol."""
    return TripBucketPolicy()


@pytest.fixture
def jfk_lhr_leg():
    """JFK → LHR departing 22:00 EST, 7h (lands 10:00 GMT next morning)."""
    return make_leg("JFK", "LHR", "2026-02-11T03:00:00", 7, flight_number="BA178")


@pytest.fixture
def pacific_legs():
    """LAX → NRT (12h layover) → SIN (18h layover) → SYD."""
    leg1 = make_leg("LAX", "NRT", "2026-02-10T19:00:00", 11.5)
    leg2 = leg_after(leg1, "SIN", gap_hours=12, duration_hours=7)
    leg3 = leg_after(leg2, "SYD", gap_hours=18, duration_hours=8)
    return [leg1, leg2, leg3]


@pytest.fixture
def westward_19h_planner():
    """Planner whose resolver always reports a 19h westward shift."""
    return MultiLegAdaptationPlanner(shift_resolver=fixed_shift(19.0, "west"))
