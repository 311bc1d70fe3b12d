"""
Trip buckets: grouping flights into trips planned and recovered from as one unit.
"""

from .bucket_policy import (
    RECOVERY_THRESHOLDS,
    TIER_LIMITS,
    ActiveBucketLedger,
    RecoveryThresholds,
    TierLimits,
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

__all__ = [
    "RECOVERY_THRESHOLDS",
    "TIER_LIMITS",
    "RecoveryThresholds",
    "TierLimits",
    "get_recovery_thresholds",
    "get_tier_limits",
    "TripBucketPolicy",
    "ActiveBucketLedger",
    "should_merge_trips",
    "can_create_trip_bucket",
    "check_bucket_size",
    "detect_trip_conflicts",
    "suggest_trip_groups",
    "calculate_jetlag_difficulty",
    "calculate_recovery_complete_at",
    "is_return_flight",
    "is_connecting_destination",
]
