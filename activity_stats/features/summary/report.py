"""Display-ready views of a Summary.

Shapes summary data for charts, tables and stat cards. No rendering here.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import timezone, tzinfo
from typing import Iterable

from activity_stats.features.activities.schemas import Activity
from activity_stats.shared.formatters import format_distance, format_duration

from .aggregator import local_start
from .models import Summary

EVEREST_HEIGHT_M = 8848


@dataclass(frozen=True)
class MonthRow:
    """One point of the monthly chart."""

    name: str  # "Jan"
    activities: int
    distance_km: int
    elevation_m: int
    time_hours: float  # one decimal


@dataclass(frozen=True)
class TypeRow:
    """One slice of the activity-type breakdown."""

    name: str
    count: int
    distance_km: int


@dataclass(frozen=True)
class Headline:
    """Values for the headline stat cards."""

    period_label: str  # "All Time" / "2024 Year"
    total_activities: int
    distance_km: str
    avg_distance_km: str
    duration: str  # "12h 30m"
    hours_active: int
    elevation_m: int
    everest_multiple: float


def available_years(
    activities: Iterable[Activity],
    tz: tzinfo = timezone.utc,
) -> list[int]:
    """Distinct start years, newest first."""
    return sorted({local_start(a, tz).year for a in activities}, reverse=True)


def monthly_series(summary: Summary) -> list[MonthRow]:
    """Twelve rows, January first, zero-filled."""
    rows = []
    for idx, bucket in enumerate(summary.by_month):
        rows.append(MonthRow(
            name=calendar.month_abbr[idx + 1],
            activities=bucket.count,
            distance_km=round(bucket.distance / 1000),
            elevation_m=round(bucket.elevation),
            time_hours=round(bucket.time / 3600, 1),
        ))
    return rows


def type_breakdown(summary: Summary) -> list[TypeRow]:
    """Activity types by descending count."""
    return [
        TypeRow(name=label, count=bucket.count, distance_km=round(bucket.distance / 1000))
        for label, bucket in summary.by_type.ordered()
    ]


def headline(summary: Summary) -> Headline:
    if summary.is_all_time:
        period_label = "All Time"
    else:
        period_label = f"{summary.year} Year"

    if summary.total_count > 0:
        avg_distance = format_distance(summary.total_distance / summary.total_count)
    else:
        avg_distance = format_distance(0)

    return Headline(
        period_label=period_label,
        total_activities=summary.total_count,
        distance_km=format_distance(summary.total_distance),
        avg_distance_km=avg_distance,
        duration=format_duration(summary.total_time),
        hours_active=round(summary.total_time / 3600),
        elevation_m=round(summary.total_elevation),
        everest_multiple=round(summary.total_elevation / EVEREST_HEIGHT_M, 1),
    )
