"""
Trip bucket policy: scientific trip separation.

Separate two trips only when there is enough time between them for complete
circadian re-entrainment.

Thresholds:
- Aggressive protocol: 3 days minimum recovery, 7 day buffer (2x recovery)
- Conservative protocol: 8 days minimum recovery, 14 day buffer

Decision matrix (aggressive):
- < 7 days apart: merge (incomplete recovery, optimize together)
- 7-10 days apart: borderline, leave to the user
- beyond that: separate (full recovery achieved)
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Iterable

from ..reference.airports import DEFAULT_AIRPORTS, AirportDirectory
from ..scheduling.grouping import RecoveryBufferGrouping
from ..timezone_math import TimezoneShiftResolver, calculate_timezone_shift, days_between
from ..types import (
    BucketCreationCheck,
    BucketCreationResult,
    BucketStatus,
    Direction,
    FlightLeg,
    RecoveryProtocol,
    TripBucket,
    TripConflict,
    TripSeparationResult,
    TripTier,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class RecoveryThresholds:
    min_days: int  # Minimum recovery time
    buffer_days: int  # 2x recovery time for full stability


@dataclass(frozen=True)
class TierLimits:
    max_active_buckets: int
    max_flights_per_bucket: int


RECOVERY_THRESHOLDS: dict[RecoveryProtocol, RecoveryThresholds] = {
    "aggressive": RecoveryThresholds(min_days=3, buffer_days=7),
    "conservative": RecoveryThresholds(min_days=8, buffer_days=14),
}

TIER_LIMITS: dict[TripTier, TierLimits] = {
    "free": TierLimits(max_active_buckets=1, max_flights_per_bucket=4),
    "pro": TierLimits(max_active_buckets=5, max_flights_per_bucket=10),
    "business": TierLimits(max_active_buckets=5, max_flights_per_bucket=10),
}

# Borderline window runs from buffer to buffer x 1.5
BORDERLINE_BUFFER_MULTIPLIER = 1.5
MULTI_CITY_MAX_GAP_DAYS = 3
TIMEZONE_ACCUMULATION_HOURS = 12

# Statuses counted against the active-bucket limit
COUNTED_STATUSES: frozenset[BucketStatus] = frozenset({"active", "locked"})


def get_recovery_thresholds(protocol: RecoveryProtocol) -> RecoveryThresholds:
    return RECOVERY_THRESHOLDS[protocol]


def get_tier_limits(tier: TripTier) -> TierLimits:
    return TIER_LIMITS[tier]


# =============================================================================
# Trip helpers
# =============================================================================


def is_return_flight(outbound: list[FlightLeg], potential_return: list[FlightLeg]) -> bool:
    """True when potential_return flies the outbound route in reverse."""
    if not outbound or not potential_return:
        return False

    outbound_origin = outbound[0].origin_airport_code
    outbound_dest = outbound[-1].destination_airport_code
    return_origin = potential_return[0].origin_airport_code
    return_dest = potential_return[-1].destination_airport_code

    return outbound_dest == return_origin and outbound_origin == return_dest


def is_connecting_destination(trip1: TripBucket, trip2: TripBucket) -> bool:
    """trip2 starts where trip1 ends (multi-city continuation)."""
    if not trip1.flights or not trip2.flights:
        return False
    return trip1.flights[-1].destination_airport_code == trip2.flights[0].origin_airport_code


def calculate_recovery_complete_at(
    arrival: datetime, protocol: RecoveryProtocol = "aggressive"
) -> datetime:
    return arrival + timedelta(days=get_recovery_thresholds(protocol).buffer_days)


def calculate_jetlag_difficulty(shift_hours: float, direction: Direction, num_legs: int) -> float:
    """
    Jet lag difficulty on a 0-10 scale.

    Args:
        shift_hours: Timezone shift (hours)
        direction: Eastward travel scores 1.2x harder
        num_legs: Each extra leg adds 0.5, up to +2

    Returns:
        Score capped at 10
    """
    score = min(shift_hours / 12, 1) * 10
    if direction == "east":
        score *= 1.2

    score += min((num_legs - 1) * 0.5, 2)
    return min(score, 10)


def can_create_trip_bucket(current_active_buckets: int, tier: TripTier) -> BucketCreationCheck:
    limits = get_tier_limits(tier)

    if current_active_buckets >= limits.max_active_buckets:
        if tier == "free":
            reason = (
                f"Free tier allows only {limits.max_active_buckets} active trip bucket. "
                f"Upgrade to Pro for up to {TIER_LIMITS['pro'].max_active_buckets} active buckets."
            )
        else:
            reason = f"You've reached your limit of {limits.max_active_buckets} active trip buckets."
        return BucketCreationCheck(allowed=False, reason=reason)

    return BucketCreationCheck(allowed=True)


def check_bucket_size(num_flights: int, tier: TripTier) -> BucketCreationCheck:
    limits = get_tier_limits(tier)

    if num_flights > limits.max_flights_per_bucket:
        owner = "Free" if tier == "free" else "Your"
        return BucketCreationCheck(
            allowed=False,
            reason=(
                f"Too many flights ({num_flights}). {owner} tier allows "
                f"{limits.max_flights_per_bucket} flights per bucket."
            ),
        )

    return BucketCreationCheck(allowed=True)


# =============================================================================
# Active bucket aggregate
# =============================================================================


@dataclass(frozen=True)
class ActiveBucketLedger:
    """
    Per-user count of buckets counted against the tier limit.

    Immutable; the persistence layer stores the value returned by each
    status change inside the same transaction as the bucket update.
    """

    owner_id: str
    tier: TripTier
    active_buckets: int = 0

    def can_create(self) -> BucketCreationCheck:
        return can_create_trip_bucket(self.active_buckets, self.tier)

    def apply_status_change(
        self, old_status: BucketStatus | None, new_status: BucketStatus | None
    ) -> "ActiveBucketLedger":
        """
        Ledger after a bucket moves between statuses.

        None stands for "no bucket": old_status=None is a creation,
        new_status=None is a deletion.
        """
        was_counted = old_status in COUNTED_STATUSES
        is_counted = new_status in COUNTED_STATUSES

        if was_counted and not is_counted:
            return replace(self, active_buckets=max(self.active_buckets - 1, 0))
        if is_counted and not was_counted:
            return replace(self, active_buckets=self.active_buckets + 1)
        return self


# =============================================================================
# Policy
# =============================================================================


class TripBucketPolicy:
    """
    Merge/separate decisions and conflict detection across a user's trips.

    Args:
        protocol: Default recovery protocol for merge decisions and grouping
        airports: Reference tables for connectivity
        shift_resolver: Timezone shift used when building buckets
    """

    def __init__(
        self,
        protocol: RecoveryProtocol = "aggressive",
        airports: AirportDirectory = DEFAULT_AIRPORTS,
        shift_resolver: TimezoneShiftResolver = calculate_timezone_shift,
    ):
        self.protocol = protocol
        self.airports = airports
        self.shift_resolver = shift_resolver

    def should_merge_trips(
        self,
        trip1: TripBucket,
        trip2: TripBucket,
        protocol: RecoveryProtocol | None = None,
    ) -> TripSeparationResult:
        """Decide whether trip2 belongs in the same bucket as trip1. First matching rule wins."""
        thresholds = get_recovery_thresholds(protocol or self.protocol)

        trip1_end = trip1.recovery_complete_at or trip1.arrival
        days = days_between(trip1_end, trip2.departure)

        if is_return_flight(trip1.flights, trip2.flights):
            return TripSeparationResult(
                should_merge=True,
                reason="Return flight for existing trip",
                days_between=days,
                confidence="high",
            )

        if days < thresholds.buffer_days:
            return TripSeparationResult(
                should_merge=True,
                reason=(
                    f"Only {days} days between trips - you won't fully re-entrain to "
                    "home timezone. Optimize together."
                ),
                days_between=days,
                confidence="high",
            )

        if thresholds.buffer_days <= days < thresholds.buffer_days * BORDERLINE_BUFFER_MULTIPLIER:
            return TripSeparationResult(
                should_merge=False,
                reason=(
                    f"{days} days apart - borderline recovery possible. "
                    "Consider your adaptability."
                ),
                days_between=days,
                confidence="medium",
            )

        # Only reachable with a buffer under 3 days
        if days < MULTI_CITY_MAX_GAP_DAYS and is_connecting_destination(trip1, trip2):
            return TripSeparationResult(
                should_merge=True,
                reason="Part of multi-city itinerary",
                days_between=days,
                confidence="high",
            )

        return TripSeparationResult(
            should_merge=False,
            reason=f"{days} days apart - full recovery possible between trips",
            days_between=days,
            confidence="high",
        )

    def can_create_trip_bucket(self, current_active_buckets: int, tier: TripTier) -> BucketCreationCheck:
        return can_create_trip_bucket(current_active_buckets, tier)

    def check_bucket_size(self, num_flights: int, tier: TripTier) -> BucketCreationCheck:
        return check_bucket_size(num_flights, tier)

    def calculate_jetlag_difficulty(
        self, shift_hours: float, direction: Direction, num_legs: int
    ) -> float:
        return calculate_jetlag_difficulty(shift_hours, direction, num_legs)

    def detect_trip_conflicts(self, trips: Iterable[TripBucket]) -> list[TripConflict]:
        """
        Conflicts between chronologically-adjacent trips.

        One pair may produce several conflicts. Thresholds come from the
        earlier trip's recovery protocol.
        """
        ordered = sorted(trips, key=lambda trip: trip.departure)
        conflicts = []

        for trip1, trip2 in zip(ordered, ordered[1:]):
            trip1_end = trip1.recovery_complete_at or trip1.arrival
            days = days_between(trip1_end, trip2.departure)
            thresholds = get_recovery_thresholds(trip1.recovery_protocol)

            if 0 <= days < thresholds.buffer_days:
                conflicts.append(
                    TripConflict(
                        trip_id_1=trip1.id,
                        trip_id_2=trip2.id,
                        conflict_type="insufficient_recovery",
                        severity="high" if days < thresholds.min_days else "medium",
                        days_between=days,
                        recommended_action="merge",
                        message=(
                            f"Only {days} days between trips. You won't fully recover to home "
                            "timezone. Consider merging into one bucket for optimal jet lag "
                            "management."
                        ),
                    )
                )

            total_shift = (trip1.total_timezone_shift_hours or 0) + (
                trip2.total_timezone_shift_hours or 0
            )
            if total_shift > TIMEZONE_ACCUMULATION_HOURS and days < thresholds.buffer_days:
                conflicts.append(
                    TripConflict(
                        trip_id_1=trip1.id,
                        trip_id_2=trip2.id,
                        conflict_type="timezone_accumulation",
                        severity="high",
                        days_between=days,
                        recommended_action="merge",
                        message=(
                            f"Cumulative timezone shifts: {total_shift:.1f} hours. High jet lag "
                            "risk. Merge trips for unified recovery plan."
                        ),
                    )
                )

            if days < 0:
                conflicts.append(
                    TripConflict(
                        trip_id_1=trip1.id,
                        trip_id_2=trip2.id,
                        conflict_type="overlapping_dates",
                        severity="high",
                        days_between=days,
                        recommended_action="separate",
                        message=(
                            "Trips overlap! Trip 2 departs before Trip 1's recovery completes. "
                            "Check your dates."
                        ),
                    )
                )

        return conflicts

    def suggest_trip_groups(
        self, flights: list[FlightLeg], protocol: RecoveryProtocol | None = None
    ) -> list[list[FlightLeg]]:
        """Groups that should become separate buckets (connectivity or recovery buffer)."""
        buffer_days = get_recovery_thresholds(protocol or self.protocol).buffer_days
        return RecoveryBufferGrouping(buffer_days, self.airports).group(flights)

    def build_trip_bucket(
        self,
        flights: list[FlightLeg],
        tier: TripTier,
        protocol: RecoveryProtocol | None = None,
        status: BucketStatus = "draft",
        active_bucket_count: int = 0,
        existing_trips: Iterable[TripBucket] = (),
        owner_id: str | None = None,
        name: str | None = None,
    ) -> BucketCreationResult:
        """
        Assemble a new bucket, refusing when tier limits would be exceeded.

        Fills in total shift (first origin -> last destination), recovery
        completion, difficulty and the return-trip link to the first existing
        trip this bucket flies back from.
        """
        if not flights:
            return BucketCreationResult(
                check=BucketCreationCheck(
                    allowed=False, reason="A trip bucket needs at least one flight."
                )
            )

        check = can_create_trip_bucket(active_bucket_count, tier)
        if not check.allowed:
            return BucketCreationResult(check=check)

        check = check_bucket_size(len(flights), tier)
        if not check.allowed:
            return BucketCreationResult(check=check)

        protocol = protocol or self.protocol
        ordered = sorted(flights, key=lambda leg: leg.departure)
        first, last = ordered[0], ordered[-1]
        shift = self.shift_resolver(first.origin_tz, last.destination_tz, first.departure)

        parent = next(
            (trip for trip in existing_trips if is_return_flight(trip.flights, ordered)),
            None,
        )
        if parent is not None:
            logger.debug("Bucket to %s returns from trip %s", last.destination_city, parent.id)

        bucket = TripBucket.from_flights(
            ordered,
            bucket_status=status,
            recovery_protocol=protocol,
            tier_at_creation=tier,
            is_return_trip=parent is not None,
            parent_trip_id=parent.id if parent is not None else None,
            owner_id=owner_id,
            name=name or f"Trip to {last.destination_city}",
            recovery_complete_at=calculate_recovery_complete_at(last.arrival, protocol),
            total_timezone_shift_hours=shift.hours,
            jetlag_difficulty_score=calculate_jetlag_difficulty(
                shift.hours, shift.direction, len(ordered)
            ),
        )
        return BucketCreationResult(check=check, bucket=bucket)


def should_merge_trips(
    trip1: TripBucket, trip2: TripBucket, protocol: RecoveryProtocol = "aggressive"
) -> TripSeparationResult:
    return TripBucketPolicy(protocol).should_merge_trips(trip1, trip2)


def detect_trip_conflicts(trips: Iterable[TripBucket]) -> list[TripConflict]:
    return TripBucketPolicy().detect_trip_conflicts(trips)


def suggest_trip_groups(
    flights: list[FlightLeg], protocol: RecoveryProtocol = "aggressive"
) -> list[list[FlightLeg]]:
    return TripBucketPolicy(protocol).suggest_trip_groups(flights)
