"""
Sleep window generation.

Base schedule is 22:00 -> 06:00 (8 hours). Shifting follows the direction
of travel: westward travel delays the clock (later bedtime), eastward
travel advances it (earlier bedtime).
"""

from datetime import date, datetime, timedelta
from typing import Literal

from ..timezone_math import at_local_hour, get_timezone, local_date, normalize_hour
from ..types import SleepWindow, UserPreferences

BASE_BEDTIME_HOUR = 22
BASE_WAKE_HOUR = 6
SLEEP_DURATION_HOURS = 8


def _night_notes(day_index: int) -> str:
    if day_index <= 0:
        return "Anchor night - keep to the planned bedtime even if you feel wired."
    elif day_index == 1:
        return (
            "May be difficult - stay in bed even if awake. "
            "Your body needs time to adjust to this schedule."
        )
    elif day_index <= 3:
        return "Acute adjustment phase - strict adherence critical. Keep same schedule every day."
    elif day_index <= 7:
        return (
            "Should feel more natural - your circadian rhythm is adapting. Maintain consistency."
        )
    return "Maintenance phase - body is fully adjusted. Continue healthy sleep habits."


def generate_day_sleep_schedule(
    day: date | datetime,
    direction: Literal["east", "west", "none"],
    day_index: int,
    total_shift: float,
    timezone: str,
    preferences: UserPreferences | None = None,
) -> list[SleepWindow]:
    """
    Target sleep for one night.

    Bedtime is the user's normal bedtime on `day` in `timezone`; wake is the
    normal wake hour the following morning.

    Args:
        day: Local calendar date (datetimes are converted to `timezone` first)
        direction: Direction of travel, used for the notes
        day_index: Day number (0 = arrival/anchor night)
        total_shift: Hours still to adapt
        timezone: IANA timezone the window is expressed in
        preferences: Optional normal bedtime/wake hours

    Returns:
        Single-element list with the night's target window
    """
    if isinstance(day, datetime):
        day = local_date(day, timezone)

    bedtime_hour = preferences.normal_bedtime if preferences else BASE_BEDTIME_HOUR
    wake_hour = preferences.normal_wake_time if preferences else BASE_WAKE_HOUR

    bedtime = at_local_hour(day, bedtime_hour, timezone)
    wake_day = day + timedelta(days=1) if wake_hour <= bedtime_hour else day
    wake_time = at_local_hour(wake_day, wake_hour, timezone)

    notes = _night_notes(day_index)
    if day_index > 0 and total_shift >= 1 and direction != "none":
        verb = "earlier" if direction == "east" else "later"
        notes = f"{notes} Your body clock is still running {total_shift:.1f}h {verb} than local."

    return [
        SleepWindow(
            bedtime=bedtime,
            wake_time=wake_time,
            duration_hours=(wake_time - bedtime).total_seconds() / 3600,
            notes=notes,
        )
    ]


def pre_departure_sleep_window(departure: datetime, origin_tz: str) -> SleepWindow:
    """
    Last full night at origin before departure.

    Window is 22:00 -> 06:00 ending the morning of departure. For departures
    before 06:00 local that morning has not finished, so the window moves one
    night further back.
    """
    departure_local = departure.astimezone(get_timezone(origin_tz))
    wake_day = departure_local.date()
    if departure_local.hour < BASE_WAKE_HOUR:
        wake_day -= timedelta(days=1)

    bedtime = at_local_hour(wake_day - timedelta(days=1), BASE_BEDTIME_HOUR, origin_tz)
    wake_time = at_local_hour(wake_day, BASE_WAKE_HOUR, origin_tz)

    return SleepWindow(
        bedtime=bedtime,
        wake_time=wake_time,
        duration_hours=SLEEP_DURATION_HOURS,
        notes="Get good rest before departure",
    )


def progressive_sleep_window(
    arrival: datetime,
    timezone: str,
    cumulative_shift: float,
    direction: Literal["east", "west", "none"],
) -> SleepWindow:
    """
    Intermediate sleep window at a long layover.

    The base 22:00 bedtime is offset by the shift achieved so far (later for
    westward travel, earlier for eastward) and wrapped into [0, 24). Bedtime
    is the first occurrence of that hour at or after arrival.
    """
    multiplier = 1 if direction == "west" else -1
    bedtime_hour = normalize_hour(BASE_BEDTIME_HOUR + cumulative_shift * multiplier)

    arrival_day = local_date(arrival, timezone)
    bedtime = at_local_hour(arrival_day, bedtime_hour, timezone)
    if bedtime < arrival:
        bedtime = at_local_hour(arrival_day + timedelta(days=1), bedtime_hour, timezone)

    wake_time = get_timezone(timezone).normalize(bedtime + timedelta(hours=SLEEP_DURATION_HOURS))

    return SleepWindow(
        bedtime=bedtime,
        wake_time=wake_time,
        duration_hours=SLEEP_DURATION_HOURS,
        notes=f"Progressive adaptation: {cumulative_shift:.1f}h shifted from origin",
    )
