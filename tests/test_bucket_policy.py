"""
Tests for trip bucket merge decisions, tier limits and conflict detection.
"""

import sys
from datetime import timedelta
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))
sys.path.insert(0, str(Path(__file__).parent.parent))

from helpers import fixed_shift, leg_after, make_leg, make_trip
from jetlag.scheduling.grouping import detect_trip_groups
from jetlag.timezone_math import parse_instant
from jetlag.trips.bucket_policy import (
    ActiveBucketLedger,
    TripBucketPolicy,
    calculate_jetlag_difficulty,
    calculate_recovery_complete_at,
    can_create_trip_bucket,
    check_bucket_size,
    detect_trip_conflicts,
    get_recovery_thresholds,
    get_tier_limits,
    is_connecting_destination,
    is_return_flight,
    should_merge_trips,
    suggest_trip_groups,
)

DAY_ZERO = "2026-04-01T12:00:00"


def trip(origin, destination, departs_day, duration_hours=8, **kwargs):
    """Single-leg trip departing N days after DAY_ZERO."""
    departure = parse_instant(DAY_ZERO) + timedelta(days=departs_day)
    return make_trip([make_leg(origin, destination, departure, duration_hours)], **kwargs)


class TestConfiguration:
    def test_recovery_thresholds(self):
        assert get_recovery_thresholds("aggressive").min_days == 3
        assert get_recovery_thresholds("aggressive").buffer_days == 7
        assert get_recovery_thresholds("conservative").min_days == 8
        assert get_recovery_thresholds("conservative").buffer_days == 14

    def test_tier_limits(self):
        assert get_tier_limits("free").max_active_buckets == 1
        assert get_tier_limits("free").max_flights_per_bucket == 4
        assert get_tier_limits("pro").max_active_buckets == 5
        assert get_tier_limits("business").max_flights_per_bucket == 10


class TestShouldMergeTrips:
    def test_inside_recovery_buffer_merges(self):
        """Scenario E: recovery completes day 10, next trip departs day 15."""
        first = trip("JFK", "LHR", 0)
        first.recovery_complete_at = first.arrival + timedelta(days=10) - timedelta(hours=8)
        second = trip("LHR", "CDG", 15)

        result = should_merge_trips(first, second)

        assert result.should_merge
        assert result.days_between == 5
        assert result.confidence == "high"
        assert "won't fully re-entrain" in result.reason

    def test_return_flight_merges_regardless_of_gap(self):
        """Scenario F: reversed airports 30 days apart."""
        outbound = trip("JFK", "LHR", 0)
        inbound = trip("LHR", "JFK", 30)

        result = should_merge_trips(outbound, inbound)

        assert result.should_merge
        assert result.reason == "Return flight for existing trip"
        assert result.confidence == "high"
        assert result.days_between == 30

    def test_borderline_gap_is_medium_confidence(self):
        first = trip("JFK", "LHR", 0, duration_hours=0)
        second = trip("LHR", "CDG", 8)

        result = should_merge_trips(first, second)

        assert not result.should_merge
        assert result.confidence == "medium"
        assert "borderline" in result.reason

    def test_borderline_upper_edge(self):
        """10 days is still under 7 * 1.5; 11 is not."""
        first = trip("JFK", "LHR", 0, duration_hours=0)

        assert should_merge_trips(first, trip("LHR", "CDG", 10)).confidence == "medium"
        assert should_merge_trips(first, trip("LHR", "CDG", 11)).confidence == "high"

    def test_full_recovery_separates(self):
        first = trip("JFK", "LHR", 0, duration_hours=0)
        result = should_merge_trips(first, trip("LHR", "CDG", 30))

        assert not result.should_merge
        assert result.confidence == "high"
        assert result.reason == "30 days apart - full recovery possible between trips"

    def test_half_days_round_up(self):
        """6.5 days rounds to 7, which is outside the aggressive buffer."""
        first = trip("JFK", "LHR", 0, duration_hours=0)
        second = make_trip(
            [make_leg("LHR", "CDG", first.arrival + timedelta(days=6, hours=12), 1)]
        )
        result = should_merge_trips(first, second)

        assert result.days_between == 7
        assert not result.should_merge

    def test_conservative_buffer_is_longer(self):
        first = trip("JFK", "LHR", 0, duration_hours=0)
        second = trip("LHR", "CDG", 10)

        assert should_merge_trips(first, second, "conservative").should_merge
        assert not should_merge_trips(first, second, "aggressive").should_merge

    def test_policy_default_protocol(self):
        first = trip("JFK", "LHR", 0, duration_hours=0)
        second = trip("LHR", "CDG", 10)
        assert TripBucketPolicy("conservative").should_merge_trips(first, second).should_merge


class TestReturnFlights:
    @pytest.mark.parametrize(
        "a,b",
        [
            (("JFK", "LHR"), ("LHR", "JFK")),
            (("JFK", "LHR"), ("LHR", "CDG")),
            (("JFK", "LHR"), ("CDG", "JFK")),
            (("LAX", "NRT"), ("LAX", "NRT")),
        ],
    )
    def test_symmetry(self, a, b):
        trip_a = trip(*a, 0)
        trip_b = trip(*b, 20)
        assert is_return_flight(trip_a.flights, trip_b.flights) == is_return_flight(
            trip_b.flights, trip_a.flights
        )

    def test_multi_leg_return(self, pacific_legs):
        back = make_leg("SYD", "LAX", "2026-03-10T00:00:00", 13)
        assert is_return_flight(pacific_legs, [back])

    def test_empty_is_never_a_return(self, jfk_lhr_leg):
        assert not is_return_flight([], [jfk_lhr_leg])

    def test_connecting_destination(self):
        assert is_connecting_destination(trip("JFK", "LHR", 0), trip("LHR", "CDG", 2))
        assert not is_connecting_destination(trip("JFK", "LHR", 0), trip("CDG", "JFK", 2))


class TestTierLimits:
    def test_free_tier_allows_one_active_bucket(self):
        assert can_create_trip_bucket(0, "free").allowed

        refused = can_create_trip_bucket(1, "free")
        assert not refused.allowed
        assert "Upgrade to Pro for up to 5 active buckets" in refused.reason

    def test_pro_tier_limit(self):
        assert can_create_trip_bucket(4, "pro").allowed

        refused = can_create_trip_bucket(5, "pro")
        assert not refused.allowed
        assert refused.reason == "You've reached your limit of 5 active trip buckets."

    def test_bucket_size(self):
        assert check_bucket_size(4, "free").allowed
        assert check_bucket_size(10, "business").allowed

        refused = check_bucket_size(5, "free")
        assert not refused.allowed
        assert refused.reason == "Too many flights (5). Free tier allows 4 flights per bucket."
        assert check_bucket_size(11, "pro").reason.startswith("Too many flights (11). Your tier")


class TestConflicts:
    def test_close_trips_with_large_shifts(self):
        first = trip("JFK", "LHR", 0, duration_hours=0, id=1, total_timezone_shift_hours=8)
        second = trip("LHR", "NRT", 2, id=2, total_timezone_shift_hours=6)

        conflicts = detect_trip_conflicts([second, first])

        assert [c.conflict_type for c in conflicts] == [
            "insufficient_recovery",
            "timezone_accumulation",
        ]
        insufficient, accumulation = conflicts
        assert insufficient.severity == "high"
        assert insufficient.recommended_action == "merge"
        assert (insufficient.trip_id_1, insufficient.trip_id_2) == (1, 2)
        assert accumulation.severity == "high"
        assert "14.0 hours" in accumulation.message

    def test_gap_between_min_and_buffer_is_medium(self):
        first = trip("JFK", "LHR", 0, duration_hours=0)
        second = trip("LHR", "CDG", 5)

        (conflict,) = detect_trip_conflicts([first, second])
        assert conflict.conflict_type == "insufficient_recovery"
        assert conflict.severity == "medium"
        assert conflict.days_between == 5

    def test_overlap_is_only_reported_as_overlap(self):
        first = trip("JFK", "LHR", 0, duration_hours=0)
        first.recovery_complete_at = calculate_recovery_complete_at(first.arrival)
        second = trip("LHR", "CDG", 3)

        (conflict,) = detect_trip_conflicts([first, second])
        assert conflict.conflict_type == "overlapping_dates"
        assert conflict.recommended_action == "separate"
        assert conflict.days_between == -4

    def test_earlier_trip_protocol_applies(self):
        first = trip("JFK", "LHR", 0, duration_hours=0, recovery_protocol="conservative")
        second = trip("LHR", "CDG", 10)

        (conflict,) = detect_trip_conflicts([first, second])
        assert conflict.severity == "medium"

    def test_well_separated_trips(self):
        first = trip("JFK", "LHR", 0, duration_hours=0, total_timezone_shift_hours=10)
        second = trip("LHR", "NRT", 30, total_timezone_shift_hours=9)
        assert detect_trip_conflicts([first, second]) == []

    def test_only_adjacent_pairs(self):
        trips = [trip("JFK", "LHR", day, duration_hours=0) for day in (0, 20, 40)]
        assert detect_trip_conflicts(trips) == []


class TestSuggestTripGroups:
    def test_recovery_buffer_keeps_disconnected_legs_together(self, jfk_lhr_leg):
        later = leg_after(jfk_lhr_leg, "JFK", gap_hours=72, duration_hours=8, origin="CDG")
        legs = [jfk_lhr_leg, later]

        assert suggest_trip_groups(legs) == [legs]
        assert detect_trip_groups(legs) == [[jfk_lhr_leg], [later]]

    def test_far_apart_flights_split(self, jfk_lhr_leg):
        later = leg_after(jfk_lhr_leg, "JFK", gap_hours=30 * 24, duration_hours=8)
        assert suggest_trip_groups([later, jfk_lhr_leg]) == [[jfk_lhr_leg], [later]]

    def test_protocol_buffer(self, jfk_lhr_leg):
        later = leg_after(jfk_lhr_leg, "JFK", gap_hours=10 * 24, duration_hours=8, origin="CDG")
        assert len(suggest_trip_groups([jfk_lhr_leg, later], "aggressive")) == 2
        assert len(suggest_trip_groups([jfk_lhr_leg, later], "conservative")) == 1

    def test_empty_and_single(self, jfk_lhr_leg):
        assert suggest_trip_groups([]) == []
        assert suggest_trip_groups([jfk_lhr_leg]) == [[jfk_lhr_leg]]


class TestDifficulty:
    @pytest.mark.parametrize(
        "shift,direction,legs,expected",
        [
            (6, "west", 1, 5.0),
            (6, "east", 1, 6.0),
            (6, "west", 2, 5.5),
            (0, "none", 1, 0.0),
            (12, "east", 3, 10.0),
            (18, "west", 10, 10.0),
        ],
    )
    def test_formula(self, shift, direction, legs, expected):
        assert calculate_jetlag_difficulty(shift, direction, legs) == pytest.approx(expected)

    def test_leg_bonus_is_capped(self):
        assert calculate_jetlag_difficulty(3, "west", 5) == calculate_jetlag_difficulty(
            3, "west", 9
        )


class TestBuildTripBucket:
    def test_bucket_fields(self, jfk_lhr_leg):
        policy = TripBucketPolicy(shift_resolver=fixed_shift(5.0, "east"))
        result = policy.build_trip_bucket([jfk_lhr_leg], "free", owner_id="user-1")

        assert result.check.allowed
        bucket = result.bucket
        assert bucket.name == "Trip to London"
        assert bucket.owner_id == "user-1"
        assert bucket.bucket_status == "draft"
        assert bucket.tier_at_creation == "free"
        assert bucket.departure == jfk_lhr_leg.departure
        assert bucket.arrival == jfk_lhr_leg.arrival
        assert bucket.recovery_complete_at == jfk_lhr_leg.arrival + timedelta(days=7)
        assert bucket.total_timezone_shift_hours == 5.0
        assert bucket.jetlag_difficulty_score == pytest.approx(5.0)
        assert not bucket.is_return_trip

    def test_return_trip_links_parent(self, jfk_lhr_leg, policy):
        outbound = make_trip([jfk_lhr_leg], id=42)
        back = leg_after(jfk_lhr_leg, "JFK", gap_hours=10 * 24, duration_hours=8)

        result = policy.build_trip_bucket([back], "pro", existing_trips=[outbound])

        assert result.bucket.is_return_trip
        assert result.bucket.parent_trip_id == 42

    def test_conservative_recovery_window(self, jfk_lhr_leg, policy):
        result = policy.build_trip_bucket([jfk_lhr_leg], "pro", protocol="conservative")
        assert result.bucket.recovery_complete_at == jfk_lhr_leg.arrival + timedelta(days=14)
        assert result.bucket.recovery_protocol == "conservative"

    def test_active_limit_refuses(self, jfk_lhr_leg, policy):
        result = policy.build_trip_bucket([jfk_lhr_leg], "free", active_bucket_count=1)

        assert not result.check.allowed
        assert result.bucket is None

    def test_size_limit_refuses(self, pacific_legs, jfk_lhr_leg, policy):
        flights = pacific_legs + [jfk_lhr_leg, leg_after(jfk_lhr_leg, "CDG", 3, 1.2)]
        result = policy.build_trip_bucket(flights, "free")

        assert not result.check.allowed
        assert "Too many flights (5)" in result.check.reason

    def test_no_flights_refuses(self, policy):
        result = policy.build_trip_bucket([], "pro")
        assert not result.check.allowed


class TestActiveBucketLedger:
    def test_creation_and_completion(self):
        ledger = ActiveBucketLedger(owner_id="user-1", tier="free")

        active = ledger.apply_status_change(None, "active")
        assert active.active_buckets == 1
        assert ledger.active_buckets == 0
        assert not active.can_create().allowed

        done = active.apply_status_change("active", "completed")
        assert done.active_buckets == 0
        assert done.can_create().allowed

    def test_locked_counts_as_active(self):
        ledger = ActiveBucketLedger(owner_id="user-1", tier="pro")
        locked = ledger.apply_status_change("draft", "locked")
        assert locked.active_buckets == 1
        assert locked.apply_status_change("locked", "active").active_buckets == 1

    def test_deletion_never_goes_negative(self):
        ledger = ActiveBucketLedger(owner_id="user-1", tier="pro")
        assert ledger.apply_status_change("active", None).active_buckets == 0

    def test_draft_changes_are_free(self):
        ledger = ActiveBucketLedger(owner_id="user-1", tier="pro", active_buckets=2)
        assert ledger.apply_status_change(None, "draft") is ledger
        assert ledger.apply_status_change("draft", "completed") is ledger
