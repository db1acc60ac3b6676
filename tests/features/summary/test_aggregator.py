"""
Tests for the summary aggregator.

Covers year filtering, totals, type/month grouping, top-N rankings
and the purity of compute_summary.
"""

from datetime import datetime, timedelta, timezone

import pytest

from activity_stats.features.summary import (
    ALL_TIME,
    TOP_N,
    MonthBucket,
    compute_summary,
    filter_by_year,
    local_start,
    top_by,
)

from conftest import build_activity


# =============================================================================
# Test Data
# =============================================================================

def two_activities():
    return [
        build_activity(1, "2024-01-05T08:00:00Z", type="Run", distance=1000, elevation=10),
        build_activity(2, "2024-02-10T08:00:00Z", type="Ride", distance=5000, elevation=50),
    ]


def mixed_year_activities():
    return [
        build_activity(1, "2023-12-30T10:00:00Z", type="Run", distance=8000, moving_time=2400),
        build_activity(2, "2024-01-02T10:00:00Z", type="Run", distance=5000, moving_time=1500),
        build_activity(3, "2024-01-20T10:00:00Z", type="Hike", distance=12000, moving_time=7200),
        build_activity(4, "2024-07-04T10:00:00Z", type="Ride", distance=40000, moving_time=5400),
        build_activity(5, "2024-07-05T10:00:00Z", type="Run", distance=10000, moving_time=3000),
        build_activity(6, "2025-03-01T10:00:00Z", type="Swim", distance=1500, moving_time=1800),
    ]


# =============================================================================
# End-to-end scenarios
# =============================================================================

class TestScenarios:
    """Two activities summarized for a matching and a non-matching year."""

    def test_matching_year(self):
        summary = compute_summary(two_activities(), 2024)

        assert summary.total_count == 2
        assert summary.total_distance == 6000
        assert summary.total_elevation == 60
        assert summary.by_type["Run"].count == 1
        assert summary.by_type["Run"].distance == 1000
        assert summary.by_type["Ride"].count == 1
        assert summary.by_type["Ride"].distance == 5000
        assert summary.by_month[0].count == 1
        assert summary.by_month[1].count == 1

    def test_non_matching_year(self):
        """Zero matches is a zeroed summary, not an error."""
        summary = compute_summary(two_activities(), 2023)

        assert summary.total_count == 0
        assert summary.total_distance == 0
        assert summary.total_time == 0
        assert summary.total_elevation == 0
        assert len(summary.by_type) == 0
        assert summary.by_month.active() == {}
        assert summary.top_distance == ()
        assert summary.top_elevation == ()

    def test_empty_collection(self):
        summary = compute_summary([], ALL_TIME)

        assert summary.total_count == 0
        assert summary.is_all_time
        assert len(summary.by_month) == 12


# =============================================================================
# Year Filter
# =============================================================================

class TestYearFilter:
    """Tests for year filtering."""

    def test_only_selected_year(self):
        filtered = filter_by_year(mixed_year_activities(), 2024)
        assert [a.id for a in filtered] == [2, 3, 4, 5]

    def test_all_time_keeps_everything(self):
        activities = mixed_year_activities()
        filtered = filter_by_year(activities, ALL_TIME)
        assert filtered == activities

    def test_summary_year_recorded(self):
        assert compute_summary(mixed_year_activities(), 2025).year == 2025
        assert compute_summary(mixed_year_activities(), ALL_TIME).year == ALL_TIME

    def test_year_boundary_uses_time_reference(self):
        """New Year's Eve in UTC is already next year in Tokyo."""
        activity = build_activity(1, "2023-12-31T20:00:00Z")
        tokyo = timezone(timedelta(hours=9))

        assert compute_summary([activity], 2023).total_count == 1
        assert compute_summary([activity], 2024, tz=tokyo).total_count == 1
        assert compute_summary([activity], 2024, tz=tokyo).by_month[0].count == 1

    def test_naive_timestamp_is_utc(self):
        activity = build_activity(1, "2024-05-01T00:30:00")
        assert local_start(activity) == datetime(2024, 5, 1, 0, 30, tzinfo=timezone.utc)

    def test_offset_timestamp_converted(self):
        activity = build_activity(1, "2024-01-01T01:00:00+02:00")
        # 2023-12-31T23:00Z
        assert compute_summary([activity], 2023).total_count == 1


# =============================================================================
# Totals and Groupings
# =============================================================================

class TestGroupings:
    """Tests for type and month buckets."""

    def test_type_sums_match_totals(self):
        summary = compute_summary(mixed_year_activities(), ALL_TIME)

        assert sum(b.distance for b in summary.by_type.values()) == pytest.approx(
            summary.total_distance
        )
        assert sum(b.time for b in summary.by_type.values()) == pytest.approx(
            summary.total_time
        )
        assert sum(b.count for b in summary.by_type.values()) == summary.total_count

    def test_month_counts_match_total(self):
        summary = compute_summary(mixed_year_activities(), 2024)
        assert sum(b.count for b in summary.by_month) == summary.total_count

    def test_month_buckets(self):
        summary = compute_summary(mixed_year_activities(), 2024)

        assert summary.by_month[0].count == 2
        assert summary.by_month[0].distance == 17000
        assert summary.by_month[6].count == 2
        assert summary.by_month[6].time == 8400
        assert set(summary.by_month.active()) == {0, 6}

    def test_every_month_addressable(self):
        summary = compute_summary(mixed_year_activities(), 2024)
        for month in range(12):
            assert isinstance(summary.by_month[month], MonthBucket)
        assert summary.by_month[11] == MonthBucket()

    def test_month_out_of_range(self):
        summary = compute_summary([], 2024)
        with pytest.raises(IndexError):
            summary.by_month[12]
        with pytest.raises(IndexError):
            summary.by_month[-1]

    def test_type_order_by_count(self):
        summary = compute_summary(mixed_year_activities(), 2024)
        labels = [label for label, _ in summary.by_type.ordered()]
        assert labels[0] == "Run"
        # Hike and Ride tie on count; first seen comes first
        assert labels[1:] == ["Hike", "Ride"]

    def test_missing_fields_default(self):
        activity = build_activity(
            1, type=None, distance=None, moving_time=None, elevation=None
        )
        summary = compute_summary([activity], 2024)

        assert summary.by_type["Other"].count == 1
        assert summary.total_distance == 0
        assert summary.total_time == 0
        assert summary.total_elevation == 0


# =============================================================================
# Top-N Rankings
# =============================================================================

class TestTopN:
    """Tests for top-10 by distance and elevation."""

    def test_length_capped(self):
        activities = [
            build_activity(i, distance=1000 * i, elevation=i) for i in range(1, 16)
        ]
        summary = compute_summary(activities, 2024)

        assert len(summary.top_distance) == TOP_N
        assert len(summary.top_elevation) == TOP_N
        assert summary.top_distance[0].id == 15
        assert summary.top_distance[-1].id == 6

    def test_length_when_fewer(self):
        summary = compute_summary(two_activities(), 2024)
        assert len(summary.top_distance) == 2

    def test_non_increasing(self):
        summary = compute_summary(mixed_year_activities(), ALL_TIME)
        distances = [a.distance_m for a in summary.top_distance]
        elevations = [a.elevation_gain_m for a in summary.top_elevation]

        assert distances == sorted(distances, reverse=True)
        assert elevations == sorted(elevations, reverse=True)

    def test_independent_rankings(self):
        activities = [
            build_activity(1, distance=42000, elevation=100),
            build_activity(2, distance=10000, elevation=1500),
        ]
        summary = compute_summary(activities, 2024)

        assert [a.id for a in summary.top_distance] == [1, 2]
        assert [a.id for a in summary.top_elevation] == [2, 1]

    def test_ties_keep_original_order(self):
        activities = [build_activity(i, distance=5000) for i in (7, 3, 9)]
        assert [a.id for a in top_by(activities, "distance_m")] == [7, 3, 9]


# =============================================================================
# Purity
# =============================================================================

class TestPurity:
    """compute_summary is deterministic and leaves its input alone."""

    def test_idempotent(self):
        activities = mixed_year_activities()
        first = compute_summary(activities, 2024)
        second = compute_summary(activities, 2024)

        assert first.total_count == second.total_count
        assert first.by_month == second.by_month
        assert dict(first.by_type) == dict(second.by_type)
        assert first.top_distance == second.top_distance

    def test_input_not_mutated(self):
        activities = mixed_year_activities()
        before = [a.model_dump() for a in activities]
        ids = [a.id for a in activities]

        compute_summary(activities, 2024)

        assert [a.id for a in activities] == ids
        assert [a.model_dump() for a in activities] == before

    def test_accepts_generator(self):
        summary = compute_summary((a for a in two_activities()), 2024)
        assert summary.total_count == 2

    def test_large_collection(self):
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        activities = [
            build_activity(i, (start + timedelta(hours=i)).isoformat(), distance=i)
            for i in range(2000)
        ]
        summary = compute_summary(activities, 2024)
        assert summary.total_count == 2000
        assert summary.top_distance[0].id == 1999
