"""Yearly / all-time aggregation of an activity collection.

Pure functions: inputs are never mutated and equal inputs give equal
summaries. Year filtering and month bucketing read the start timestamp in
the same time reference (`tz`, UTC unless told otherwise); naive
timestamps are taken to be UTC.
"""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from typing import Iterable, Sequence

from activity_stats.features.activities.schemas import Activity

from .models import (
    ALL_TIME,
    TOP_N,
    MonthBucket,
    MonthBuckets,
    Summary,
    TypeBucket,
    TypeBuckets,
    YearSelector,
)


def local_start(activity: Activity, tz: tzinfo = timezone.utc) -> datetime:
    """Activity start expressed in `tz`."""
    start = activity.start_date
    if start.tzinfo is None:
        start = start.replace(tzinfo=timezone.utc)
    return start.astimezone(tz)


def filter_by_year(
    activities: Iterable[Activity],
    year: YearSelector,
    tz: tzinfo = timezone.utc,
) -> list[Activity]:
    """Activities whose start year equals `year`; everything for ALL_TIME."""
    if year == ALL_TIME:
        return list(activities)
    return [a for a in activities if local_start(a, tz).year == year]


def top_by(
    activities: Sequence[Activity],
    key: str,
    n: int = TOP_N,
) -> tuple[Activity, ...]:
    """The `n` highest activities by a numeric property, descending.

    Stable: ties keep their original order.
    """
    ranked = sorted(activities, key=lambda a: getattr(a, key), reverse=True)
    return tuple(ranked[:n])


def compute_summary(
    activities: Iterable[Activity],
    year: YearSelector,
    tz: tzinfo = timezone.utc,
) -> Summary:
    """Build the Summary for `year` (an int or ALL_TIME).

    Zero matching activities is a valid result: a zeroed Summary with empty
    groupings and rankings.
    """
    filtered = filter_by_year(activities, year, tz)

    total_distance = 0.0
    total_time = 0.0
    total_elevation = 0.0
    by_type: dict[str, TypeBucket] = {}
    by_month: dict[int, MonthBucket] = {}

    for activity in filtered:
        total_distance += activity.distance_m
        total_time += activity.moving_time_s
        total_elevation += activity.elevation_gain_m

        label = activity.activity_type
        by_type[label] = by_type.get(label, TypeBucket()).plus(activity)

        month = local_start(activity, tz).month - 1
        by_month[month] = by_month.get(month, MonthBucket()).plus(activity)

    return Summary(
        year=year,
        total_count=len(filtered),
        total_distance=total_distance,
        total_time=total_time,
        total_elevation=total_elevation,
        by_type=TypeBuckets(by_type),
        by_month=MonthBuckets(by_month),
        top_distance=top_by(filtered, "distance_m"),
        top_elevation=top_by(filtered, "elevation_gain_m"),
        activities=tuple(filtered),
    )
