"""
Summary schemas.

Pydantic response models for summary endpoints.
"""

from datetime import datetime
from typing import Literal, Optional, Union

from pydantic import BaseModel

from activity_stats.features.activities.schemas import Activity
from activity_stats.shared import errors
from .report import available_years
from .session import SessionState


class TypeBucketResponse(BaseModel):
    type: str
    count: int
    distance: float
    time: float


class MonthBucketResponse(BaseModel):
    month: int  # 0 = January
    count: int
    distance: float
    time: float
    elevation: float


class CacheInfoResponse(BaseModel):
    last_updated: Optional[datetime]
    count: int


class SyncErrorResponse(BaseModel):
    kind: str  # AuthError, TransportError, CacheUnavailable...
    message: str


class SummaryResponse(BaseModel):
    """Summary for one athlete and year selector."""

    athlete_id: str
    year: Union[int, Literal["all"]]
    source: str
    total_count: int
    total_distance: float
    total_time: float
    total_elevation: float
    by_type: list[TypeBucketResponse]
    by_month: list[MonthBucketResponse]
    top_distance: list[Activity]
    top_elevation: list[Activity]
    available_years: list[int]
    cache_info: Optional[CacheInfoResponse] = None
    sync_error: Optional[SyncErrorResponse] = None
    warning: Optional[str] = None

    @classmethod
    def from_state(cls, state: SessionState, source: str) -> "SummaryResponse":
        summary = state.summary
        if summary is None:
            raise ValueError("Session has no summary; recompute first")

        sync_error = None
        if state.sync_error is not None:
            sync_error = SyncErrorResponse(
                kind=_error_kind(state.sync_error),
                message=str(state.sync_error),
            )

        cache_info = None
        if state.cache_info is not None:
            cache_info = CacheInfoResponse(
                last_updated=state.cache_info.last_updated,
                count=state.cache_info.count,
            )

        return cls(
            athlete_id=state.athlete_id,
            year=summary.year,
            source=source,
            total_count=summary.total_count,
            total_distance=summary.total_distance,
            total_time=summary.total_time,
            total_elevation=summary.total_elevation,
            by_type=[
                TypeBucketResponse(type=label, count=b.count, distance=b.distance, time=b.time)
                for label, b in summary.by_type.ordered()
            ],
            by_month=[
                MonthBucketResponse(
                    month=idx,
                    count=b.count,
                    distance=b.distance,
                    time=b.time,
                    elevation=b.elevation,
                )
                for idx, b in enumerate(summary.by_month)
            ],
            top_distance=list(summary.top_distance),
            top_elevation=list(summary.top_elevation),
            available_years=available_years(state.activities, state.tz),
            cache_info=cache_info,
            sync_error=sync_error,
            warning=state.warning,
        )


def _error_kind(error: Exception) -> str:
    """Taxonomy name of a sync error (StravaAPIError -> TransportError)."""
    for kind in (
        errors.AuthError,
        errors.CacheUnavailable,
        errors.SyncCancelledError,
        errors.TransportError,
    ):
        if isinstance(error, kind):
            return kind.__name__
    return type(error).__name__
