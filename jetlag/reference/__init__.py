"""
Static reference tables (airport coordinates, metro airport groups).
"""

from .airports import (
    AIRPORT_COORDS,
    DEFAULT_AIRPORTS,
    DEFAULT_DISTANCE_MILES,
    METRO_AIRPORT_GROUPS,
    AirportDirectory,
    haversine_miles,
)

__all__ = [
    "AIRPORT_COORDS",
    "METRO_AIRPORT_GROUPS",
    "DEFAULT_AIRPORTS",
    "DEFAULT_DISTANCE_MILES",
    "AirportDirectory",
    "haversine_miles",
]
