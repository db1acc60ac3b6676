"""Data models for activity summaries (dataclasses, no DB dependency)."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Literal, Union

from activity_stats.features.activities.schemas import Activity

ALL_TIME: Literal["all"] = "all"
MONTHS_IN_YEAR = 12
TOP_N = 10

YearSelector = Union[int, Literal["all"]]


def parse_year_selector(value: str | int) -> YearSelector:
    """Parse '2024' / 2024 / 'all' into a year selector.

    Raises:
        ValueError: Anything that is not a year or 'all'
    """
    if isinstance(value, int):
        return value
    text = value.strip().lower()
    if text in (ALL_TIME, "all-time", "all_time"):
        return ALL_TIME
    if not text.isdigit():
        raise ValueError(f"Invalid year selector: {value!r}")
    return int(text)


@dataclass(frozen=True)
class TypeBucket:
    """Per activity-type totals."""

    count: int = 0
    distance: float = 0.0
    time: float = 0.0

    def plus(self, activity: Activity) -> TypeBucket:
        return TypeBucket(
            count=self.count + 1,
            distance=self.distance + activity.distance_m,
            time=self.time + activity.moving_time_s,
        )


@dataclass(frozen=True)
class MonthBucket:
    """Per calendar-month totals."""

    count: int = 0
    distance: float = 0.0
    time: float = 0.0
    elevation: float = 0.0

    def plus(self, activity: Activity) -> MonthBucket:
        return MonthBucket(
            count=self.count + 1,
            distance=self.distance + activity.distance_m,
            time=self.time + activity.moving_time_s,
            elevation=self.elevation + activity.elevation_gain_m,
        )


class TypeBuckets(Mapping[str, TypeBucket]):
    """Activity type label -> bucket.

    Open domain: labels appear in first-encountered order.
    """

    def __init__(self, buckets: Mapping[str, TypeBucket] | None = None):
        self._buckets: dict[str, TypeBucket] = dict(buckets or {})

    def __getitem__(self, label: str) -> TypeBucket:
        return self._buckets[label]

    def __iter__(self) -> Iterator[str]:
        return iter(self._buckets)

    def __len__(self) -> int:
        return len(self._buckets)

    def __repr__(self) -> str:
        return f"TypeBuckets({self._buckets!r})"

    def ordered(self) -> list[tuple[str, TypeBucket]]:
        """Buckets by descending count; ties keep first-encountered order."""
        return sorted(self._buckets.items(), key=lambda item: item[1].count, reverse=True)


class MonthBuckets(Sequence[MonthBucket]):
    """Month index (0 = January ... 11 = December) -> bucket.

    Total domain: every month is addressable and months without activities
    read as an empty bucket.
    """

    def __init__(self, buckets: Mapping[int, MonthBucket] | None = None):
        months = [MonthBucket()] * MONTHS_IN_YEAR
        for month, bucket in (buckets or {}).items():
            self._check(month)
            months[month] = bucket
        self._months: tuple[MonthBucket, ...] = tuple(months)

    @staticmethod
    def _check(month: int) -> None:
        if not 0 <= month < MONTHS_IN_YEAR:
            raise IndexError(f"Month index out of range: {month}")

    def __getitem__(self, month):  # type: ignore[override]
        if isinstance(month, slice):
            return self._months[month]
        self._check(month)
        return self._months[month]

    def __len__(self) -> int:
        return MONTHS_IN_YEAR

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MonthBuckets):
            return NotImplemented
        return self._months == other._months

    def __hash__(self) -> int:
        return hash(self._months)

    def __repr__(self) -> str:
        return f"MonthBuckets({self.active()!r})"

    def active(self) -> dict[int, MonthBucket]:
        """Only the months that had at least one activity."""
        return {m: b for m, b in enumerate(self._months) if b.count > 0}


@dataclass(frozen=True)
class Summary:
    """Statistics for one year (or all time) of activities."""

    year: YearSelector
    total_count: int = 0
    total_distance: float = 0.0  # meters
    total_time: float = 0.0  # seconds
    total_elevation: float = 0.0  # meters
    by_type: TypeBuckets = field(default_factory=TypeBuckets)
    by_month: MonthBuckets = field(default_factory=MonthBuckets)
    top_distance: tuple[Activity, ...] = ()
    top_elevation: tuple[Activity, ...] = ()
    activities: tuple[Activity, ...] = ()  # the filtered set

    @property
    def is_all_time(self) -> bool:
        return self.year == ALL_TIME
