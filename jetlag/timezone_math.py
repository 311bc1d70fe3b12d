"""
Timezone and instant calculations.

Provides the default timezone shift resolver (origin -> destination shift
and direction of travel) plus the small time helpers shared by the
validator, the planner and the bucket policy. All instants are
timezone-aware; local wall-clock times are produced with pytz.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Literal, Protocol

import pytz
from pytz.exceptions import UnknownTimeZoneError

SECONDS_PER_HOUR = 3600
HOURS_PER_DAY = 24


class UnknownTimezoneError(UnknownTimeZoneError):
    """Raised when an IANA timezone name cannot be resolved."""


@dataclass(frozen=True)
class TimezoneShift:
    """Shift magnitude plus the direction of travel."""

    hours: float
    direction: Literal["east", "west", "none"]


class TimezoneShiftResolver(Protocol):
    def __call__(self, origin_tz: str, dest_tz: str, at: datetime | None = None) -> TimezoneShift:
        ...


def get_timezone(tz_name: str) -> pytz.BaseTzInfo:
    """Resolve an IANA name, trimming stray whitespace."""
    try:
        return pytz.timezone(tz_name.strip())
    except UnknownTimeZoneError as e:
        raise UnknownTimezoneError(tz_name) from e


def get_utc_offset_hours(tz_name: str, at: datetime) -> float:
    """
    UTC offset of a timezone at a given instant.

    Args:
        tz_name: IANA timezone name (e.g., "America/New_York")
        at: Aware instant (naive values are treated as UTC)

    Returns:
        Offset in hours (e.g., -5.0 for EST, -4.0 for EDT)
    """
    if at.tzinfo is None:
        at = pytz.UTC.localize(at)
    local = at.astimezone(get_timezone(tz_name))
    return local.utcoffset().total_seconds() / SECONDS_PER_HOUR


def calculate_timezone_shift(
    origin_tz: str, dest_tz: str, at: datetime | None = None
) -> TimezoneShift:
    """
    Calculate the circadian shift between two timezones at an instant.

    The body only cares about the smaller clock adjustment, so raw
    differences beyond 12 hours take the shorter path around the dateline
    and flip direction.

    Args:
        origin_tz: Origin IANA timezone
        dest_tz: Destination IANA timezone
        at: Instant used for DST-aware offsets (defaults to now)

    Returns:
        TimezoneShift with non-negative hours and east/west/none direction
    """
    if at is None:
        at = datetime.now(pytz.UTC)

    raw_diff = get_utc_offset_hours(dest_tz, at) - get_utc_offset_hours(origin_tz, at)

    if raw_diff == 0:
        return TimezoneShift(hours=0.0, direction="none")

    if abs(raw_diff) > 12:
        # Crossing the dateline - shorter path runs the other way
        return TimezoneShift(
            hours=HOURS_PER_DAY - abs(raw_diff),
            direction="west" if raw_diff > 0 else "east",
        )

    if raw_diff > 0:
        return TimezoneShift(hours=raw_diff, direction="east")
    return TimezoneShift(hours=abs(raw_diff), direction="west")


def parse_instant(value: str | datetime, tz_name: str | None = None) -> datetime:
    """
    Parse an ISO 8601 instant.

    Naive values are localized to tz_name (or UTC when no zone is given).
    A trailing "Z" is accepted.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))

    if parsed.tzinfo is not None:
        return parsed
    if tz_name is None:
        return pytz.UTC.localize(parsed)
    return get_timezone(tz_name).localize(parsed)


def hours_between(start: datetime, end: datetime) -> float:
    """Signed hours from start to end."""
    return (end - start).total_seconds() / SECONDS_PER_HOUR


def days_between(start: datetime, end: datetime) -> int:
    """Signed whole days from start to end, halves rounded up."""
    return math.floor(hours_between(start, end) / HOURS_PER_DAY + 0.5)


def normalize_hour(hour: float) -> float:
    """Wrap an hour-of-day into [0, 24)."""
    return hour % HOURS_PER_DAY


def local_date(instant: datetime, tz_name: str) -> date:
    """Calendar date of an instant in the given timezone."""
    return instant.astimezone(get_timezone(tz_name)).date()


def at_local_hour(day: date, hour: float, tz_name: str) -> datetime:
    """
    Aware datetime for a wall-clock hour on a local calendar date.

    Fractional hours are rounded to the minute.
    """
    naive = datetime(day.year, day.month, day.day) + timedelta(minutes=round(hour * 60))
    return get_timezone(tz_name).localize(naive)
