"""
Multi-leg adaptation planning.

Only the origin -> final destination shift matters. Layovers are chances to
adapt progressively toward the final destination, not separate jet lag
events:

1. Total shift: first origin -> last destination (intermediate legs ignored)
2. Progression rate: total shift / days en route, capped at the
   physiological ceiling for the direction of travel
3. Layovers >= 24h shift the clock at that rate; shorter ones anchor sleep
   to the origin
4. Final destination: recover whatever shift remains

Example: LAX -> NRT (12h) -> SIN (18h) -> SYD
- Days en route: 0.5 + 0.75 = 1.25
- Theoretical rate 19h / 1.25d = 15.2h/day, capped at 1.8h/day westbound
- Both layovers are short, so all 19h are recovered at SYD
"""

import math
from collections.abc import Callable
from datetime import datetime, timedelta

from ..science.advisories import generate_environment_optimization, generate_safety_information
from ..science.recovery import calculate_personalized_recovery_days
from ..science.sleep import (
    generate_day_sleep_schedule,
    pre_departure_sleep_window,
    progressive_sleep_window,
)
from ..timezone_math import (
    HOURS_PER_DAY,
    TimezoneShiftResolver,
    calculate_timezone_shift,
    get_timezone,
    local_date,
)
from ..types import (
    DayPlan,
    Direction,
    Layover,
    LegAdaptation,
    MultiLegJetlagPlan,
    MultiLegJourney,
    SleepWindow,
    UserPreferences,
)

# Maximum circadian shift rates (hours per day).
# Advancing the clock (eastward) is harder than delaying it (westward).
EASTWARD_MAX_SHIFT_PER_DAY = 1.2
WESTWARD_MAX_SHIFT_PER_DAY = 1.8

# Layovers at least this long allow progressive adaptation
PROGRESSIVE_LAYOVER_HOURS = 24

PRE_DEPARTURE_LEG_INDEX = -1

RecoveryDaysFn = Callable[[float, Direction, UserPreferences | None], int]
SleepScheduleFn = Callable[..., list[SleepWindow]]


class EmptyJourneyError(ValueError):
    """Raised when planning a journey with no legs."""


def max_shift_per_day(direction: Direction) -> float:
    return EASTWARD_MAX_SHIFT_PER_DAY if direction == "east" else WESTWARD_MAX_SHIFT_PER_DAY


def calculate_progression_rate(total_shift: float, days_en_route: float, direction: Direction) -> float:
    """
    Hours to adapt per day en route.

    Uses the minimum of the rate needed to fully adapt in transit and the
    physiological ceiling, so short layovers with large shifts under-adapt
    and push the rest to the final destination.
    """
    theoretical = total_shift / days_en_route if days_en_route > 0 else 0.0
    return min(theoretical, max_shift_per_day(direction))


class MultiLegAdaptationPlanner:
    """
    Build a MultiLegJetlagPlan from a validated journey.

    The timezone resolver, recovery estimate and daily sleep schedule are
    injectable; the defaults come from timezone_math and science/.
    """

    def __init__(
        self,
        shift_resolver: TimezoneShiftResolver = calculate_timezone_shift,
        recovery_days: RecoveryDaysFn = calculate_personalized_recovery_days,
        sleep_schedule: SleepScheduleFn = generate_day_sleep_schedule,
    ):
        self.shift_resolver = shift_resolver
        self.recovery_days = recovery_days
        self.sleep_schedule = sleep_schedule

    def plan(self, journey: MultiLegJourney) -> MultiLegJetlagPlan:
        """
        Plan adaptation across layovers and recovery at the final destination.

        Raises:
            EmptyJourneyError: journey has no legs
        """
        if not journey.legs:
            raise EmptyJourneyError("Journey must have at least one leg")

        legs = journey.legs
        preferences = journey.user_preferences
        first_leg, last_leg = legs[0], legs[-1]

        # 1. Total shift, endpoints only
        shift = self.shift_resolver(first_leg.origin_tz, last_leg.destination_tz, first_leg.departure)
        total_shift = shift.hours
        direction = shift.direction

        # 2-3. Time en route and progression rate
        days_en_route = sum(layover.duration_hours for layover in journey.layovers) / HOURS_PER_DAY
        progression_rate = calculate_progression_rate(total_shift, days_en_route, direction)

        # 4. Adaptation timeline
        leg_adaptations = [self._pre_departure(journey, total_shift, direction)]
        cumulative = 0.0
        for index, layover in enumerate(journey.layovers):
            adaptation = self._layover_adaptation(
                index,
                layover,
                origin_tz=first_leg.origin_tz,
                cumulative=cumulative,
                total_shift=total_shift,
                direction=direction,
                progression_rate=progression_rate,
                preferences=preferences,
            )
            cumulative = adaptation.cumulative_shift_hours
            leg_adaptations.append(adaptation)

        # 5. Remaining shift at the final destination
        remaining = total_shift - cumulative
        final_recovery_days = self.recovery_days(remaining, direction, preferences)

        # 6. Day-by-day recovery plan
        day_plans = self._day_plans(
            last_leg.arrival,
            last_leg.destination_tz,
            final_recovery_days,
            remaining,
            direction,
            preferences,
        )

        return MultiLegJetlagPlan(
            total_journey_days=math.ceil(days_en_route) + final_recovery_days,
            final_recovery_days=final_recovery_days,
            total_timezone_shift=total_shift,
            direction=direction,
            progression_rate=progression_rate,
            leg_adaptations=leg_adaptations,
            day_plans=day_plans,
            safety_information=generate_safety_information(preferences),
            environment_optimization=generate_environment_optimization(),
        )

    def _pre_departure(
        self, journey: MultiLegJourney, total_shift: float, direction: Direction
    ) -> LegAdaptation:
        origin_leg = journey.legs[0]
        bedtime_tip = (
            "Consider going to bed 1-2 hours earlier than usual"
            if direction == "east"
            else "Consider going to bed 1-2 hours later than usual"
        )
        return LegAdaptation(
            leg_index=PRE_DEPARTURE_LEG_INDEX,
            location=origin_leg.origin_city,
            timezone=origin_leg.origin_tz,
            strategy="anchor_sleep",
            cumulative_shift_hours=0.0,
            remaining_shift=total_shift,
            sleep_schedule=pre_departure_sleep_window(origin_leg.departure, origin_leg.origin_tz),
            recommendations=[
                "Get 7-8 hours of quality sleep before departure",
                "Begin hydration 24 hours before flight",
                "Avoid alcohol the night before",
                bedtime_tip,
            ],
            reasoning="Pre-flight preparation at origin location",
        )

    def _layover_adaptation(
        self,
        index: int,
        layover: Layover,
        origin_tz: str,
        cumulative: float,
        total_shift: float,
        direction: Direction,
        progression_rate: float,
        preferences: UserPreferences | None,
    ) -> LegAdaptation:
        if layover.duration_hours < PROGRESSIVE_LAYOVER_HOURS:
            # Anchor sleep: hold the origin schedule, no shift
            schedule = self.sleep_schedule(
                local_date(layover.arrival, origin_tz),
                direction,
                0,
                total_shift,
                origin_tz,
                preferences,
            )
            return LegAdaptation(
                leg_index=index,
                location=layover.city,
                timezone=layover.timezone,
                strategy="anchor_sleep",
                cumulative_shift_hours=cumulative,
                remaining_shift=total_shift - cumulative,
                sleep_schedule=schedule[0],
                recommendations=[
                    "Keep your origin timezone sleep schedule",
                    "Avoid trying to adapt - you'll be leaving soon",
                    "Use 20-30 minute naps if needed for alertness",
                    "Stay in dim light during your origin bedtime",
                    "Seek bright light during your origin wake hours",
                ],
                reasoning=(
                    f"Short layover ({layover.duration_hours:.1f}h). "
                    "Maintain origin sleep schedule to avoid disruption."
                ),
            )

        shift_here = progression_rate * layover.days
        # Never adapt past the total shift
        if cumulative + shift_here > total_shift:
            shift_here = total_shift - cumulative
            cumulative = total_shift
        else:
            cumulative += shift_here

        percent = cumulative / total_shift * 100 if total_shift > 0 else 100.0
        light_tip = (
            "Seek bright morning light to advance your clock"
            if direction == "east"
            else "Seek bright evening light to delay your clock"
        )

        return LegAdaptation(
            leg_index=index,
            location=layover.city,
            timezone=layover.timezone,
            strategy="progressive",
            cumulative_shift_hours=cumulative,
            remaining_shift=total_shift - cumulative,
            sleep_schedule=progressive_sleep_window(
                layover.arrival, layover.timezone, cumulative, direction
            ),
            recommendations=[
                f"Shift sleep schedule {shift_here:.1f} hours toward final destination",
                f"You've now adapted {cumulative:.1f}h of {total_shift:.1f}h total ({percent:.0f}%)",
                light_tip,
                "Eat meals at intermediate schedule times",
                "Light exercise helps reinforce new rhythm",
            ],
            reasoning=(
                f"Layover of {layover.duration_hours:.1f}h allows progressive adaptation. "
                f"Shifting {shift_here:.1f}h toward final destination "
                f"(rate: {progression_rate:.1f}h/day)."
            ),
        )

    def _day_plans(
        self,
        final_arrival: datetime,
        destination_tz: str,
        final_recovery_days: int,
        remaining: float,
        direction: Direction,
        preferences: UserPreferences | None,
    ) -> list[DayPlan]:
        tz = get_timezone(destination_tz)
        arrival_local = final_arrival.astimezone(tz)

        day_plans = []
        for day in range(final_recovery_days + 1):
            current = tz.normalize(arrival_local + timedelta(days=day))
            if day == 0:
                phase = "Arrival Day"
            elif day < final_recovery_days / 2:
                phase = "Active Recovery"
            else:
                phase = "Final Adjustment"

            day_plans.append(
                DayPlan(
                    date=current,
                    day=day,
                    phase=phase,
                    sleep_schedules=self.sleep_schedule(
                        current.date(), direction, day, remaining, destination_tz, preferences
                    ),
                    key_goals=[
                        "Follow sleep schedule",
                        "Get appropriate light exposure",
                        "Stay hydrated and eat at local mealtimes",
                    ],
                )
            )
        return day_plans


def calculate_multi_leg_plan(journey: MultiLegJourney) -> MultiLegJetlagPlan:
    """Plan a journey with the default primitives."""
    return MultiLegAdaptationPlanner().plan(journey)
