"""
Recovery-day estimates at the final destination.

Scientific basis:
- Conservative (passive) adaptation: ~0.9 days per hour eastward, ~0.6
  days per hour westward (advancing the clock is harder than delaying it)
- Aggressive protocols (Burgess & Eastman 2005) reach 2-3h/day shifts with
  intensive light/melatonin timing; capped at 3 days for compliance

Age and chronotype are NOT used for adjustments. Individual variation is
20-40%, so they only surface as advisory notes.
"""

import logging
import math
from typing import Literal

from ..types import UserPreferences

logger = logging.getLogger(__name__)

# Days of recovery per hour of shift (conservative mode)
CONSERVATIVE_RECOVERY_RATES: dict[Literal["east", "west", "none"], float] = {
    "east": 0.9,
    "west": 0.6,
    "none": 0.75,
}

# Never estimate more than 1.2 days per hour of shift
MAX_DAYS_PER_SHIFT_HOUR = 1.2

# Aggressive protocol cap
AGGRESSIVE_MAX_DAYS = 3


def _aggressive_recovery_days(shift_hours: float) -> int:
    if shift_hours < 2:
        return 1
    elif shift_hours < 4:
        return 2
    return AGGRESSIVE_MAX_DAYS


def _conservative_recovery_days(
    shift_hours: float, direction: Literal["east", "west", "none"]
) -> int:
    base_days = math.ceil(shift_hours * CONSERVATIVE_RECOVERY_RATES[direction])

    # Research minimums for noticeable shifts
    if shift_hours < 2:
        estimated = max(1, base_days)
    elif shift_hours < 3:
        estimated = max(2, base_days)
    else:
        estimated = max(3, base_days)

    max_reasonable = math.ceil(shift_hours * MAX_DAYS_PER_SHIFT_HOUR)
    if estimated > max_reasonable:
        logger.warning(
            "Recovery days (%d) exceeds maximum reasonable (%d), capping value",
            estimated,
            max_reasonable,
        )
        estimated = max_reasonable

    return estimated


def calculate_personalized_recovery_days(
    shift_hours: float,
    direction: Literal["east", "west", "none"],
    preferences: UserPreferences | None = None,
) -> int:
    """
    Estimate days needed at the destination to finish adapting.

    Args:
        shift_hours: Hours still to adapt (absolute value)
        direction: "east", "west" or "none"
        preferences: Optional profile; only recovery_mode is used

    Returns:
        Whole recovery days (0 for shifts under an hour)
    """
    shift_hours = abs(shift_hours)
    if shift_hours < 1:
        return 0

    mode = preferences.recovery_mode if preferences else "conservative"
    if mode == "aggressive":
        return _aggressive_recovery_days(shift_hours)
    return _conservative_recovery_days(shift_hours, direction)
