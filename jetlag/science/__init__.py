"""
Circadian Science Layer.

Pure circadian functions without itinerary awareness. The planner consumes
them through injectable callables; these are the defaults.

Modules:
- recovery: Recovery-day estimates at the final destination
- sleep: Target, pre-departure and progressive sleep windows
- advisories: Safety and sleep-environment guidance blocks
"""

from .advisories import generate_environment_optimization, generate_safety_information
from .recovery import calculate_personalized_recovery_days
from .sleep import (
    generate_day_sleep_schedule,
    pre_departure_sleep_window,
    progressive_sleep_window,
)

__all__ = [
    "calculate_personalized_recovery_days",
    "generate_day_sleep_schedule",
    "pre_departure_sleep_window",
    "progressive_sleep_window",
    "generate_safety_information",
    "generate_environment_optimization",
]
