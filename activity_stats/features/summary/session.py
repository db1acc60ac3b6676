"""
Athlete session state.

One immutable record holds everything a viewing session knows: who the
athlete is, their activity collection, the selected year, cache metadata,
the current summary and the last sync problem. Transitions return a new
record. Any transition that changes the activities or the year recomputes
the summary before returning, so a state in phase AGGREGATED always carries
a summary that matches its inputs.

Phases:
    IDLE -> FILTERING -> AGGREGATED
"""

from dataclasses import dataclass, replace
from datetime import datetime, timezone, tzinfo
from enum import Enum
from typing import Optional

from activity_stats.features.activities.schemas import Activity
from activity_stats.features.sync.coordinator import SyncResult
from activity_stats.shared.errors import SyncError

from .aggregator import compute_summary
from .models import Summary, YearSelector


class SessionPhase(str, Enum):
    IDLE = "idle"
    FILTERING = "filtering"
    AGGREGATED = "aggregated"


@dataclass(frozen=True)
class CacheInfo:
    """What the cache store reported for the current collection."""

    last_updated: Optional[datetime]
    count: int


@dataclass(frozen=True)
class SessionState:
    athlete_id: Optional[str] = None
    activities: tuple[Activity, ...] = ()
    year: Optional[YearSelector] = None
    tz: tzinfo = timezone.utc
    cache_info: Optional[CacheInfo] = None
    summary: Optional[Summary] = None
    sync_error: Optional[SyncError] = None
    warning: Optional[str] = None
    phase: SessionPhase = SessionPhase.IDLE


def current_year(tz: tzinfo = timezone.utc) -> int:
    return datetime.now(tz).year


def start_session(
    athlete_id: str,
    year: Optional[YearSelector] = None,
    tz: tzinfo = timezone.utc,
) -> SessionState:
    """New session for an athlete; the year defaults to the current one."""
    return SessionState(
        athlete_id=athlete_id,
        year=year if year is not None else current_year(tz),
        tz=tz,
    )


def recompute(state: SessionState) -> SessionState:
    """Run the aggregator for the state's activities and year."""
    year = state.year if state.year is not None else current_year(state.tz)
    filtering = replace(state, year=year, phase=SessionPhase.FILTERING, summary=None)
    summary = compute_summary(filtering.activities, filtering.year, filtering.tz)
    return replace(filtering, summary=summary, phase=SessionPhase.AGGREGATED)


def with_sync_result(state: SessionState, result: SyncResult) -> SessionState:
    """Adopt the activities from a sync call.

    A fallback result still carries the previous cache, so the session keeps
    showing it alongside the error.
    """
    cache_info = state.cache_info
    if result.last_updated is not None:
        cache_info = CacheInfo(last_updated=result.last_updated, count=result.count)

    updated = replace(
        state,
        activities=result.activities,
        cache_info=cache_info,
        sync_error=result.error,
        warning=result.warning,
    )
    return recompute(updated)


def with_sync_error(state: SessionState, error: SyncError) -> SessionState:
    """Record a sync failure that produced no result; data is unchanged."""
    return replace(state, sync_error=error, warning=None)


def with_year(state: SessionState, year: YearSelector) -> SessionState:
    return recompute(replace(state, year=year))


def cleared(state: SessionState) -> SessionState:
    """State after the athlete's cache was cleared."""
    return replace(
        state,
        activities=(),
        cache_info=None,
        summary=None,
        sync_error=None,
        warning=None,
        phase=SessionPhase.IDLE,
    )


def logged_out(state: SessionState) -> SessionState:
    """Blank state; nothing from the previous athlete survives."""
    return SessionState(tz=state.tz)
