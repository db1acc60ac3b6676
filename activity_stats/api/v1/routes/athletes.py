"""
Athlete Summary Routes

Endpoints:
- GET    /athletes/me/summary          - Summary for the credential's athlete
- GET    /athletes/{athlete_id}/summary - Cached-or-synced summary
- POST   /athletes/{athlete_id}/sync    - Force a full refresh, then summarize
- DELETE /athletes/{athlete_id}/cache   - Clear cache, cancel running sync

Sync problems that leave usable data (transport failure with a fallback,
cache write failure) are returned in the body; a rejected credential is 401.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from activity_stats.config import settings
from activity_stats.features.strava import StravaClient
from activity_stats.features.summary import (
    parse_year_selector,
    start_session,
    with_sync_result,
)
from activity_stats.features.summary.schemas import SummaryResponse
from activity_stats.features.sync import SyncCoordinator, SyncResult
from activity_stats.shared.errors import (
    AuthError,
    CacheUnavailable,
    SyncCancelledError,
    TransportError,
)
from activity_stats.api.deps import get_access_token, get_coordinator, get_strava_client

logger = logging.getLogger(__name__)

router = APIRouter()


def _year_param(year: str | None):
    if year is None:
        return None
    try:
        return parse_year_selector(year)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


def _to_response(athlete_id: str, year: str | None, result: SyncResult) -> SummaryResponse:
    state = start_session(athlete_id, _year_param(year), tz=settings.summary_tz)
    state = with_sync_result(state, result)
    return SummaryResponse.from_state(state, source=result.source.value)


async def _run(call, athlete_id: str) -> SyncResult:
    try:
        return await call
    except AuthError as e:
        logger.warning(f"Strava rejected credential for athlete {athlete_id}: {e}")
        raise HTTPException(status_code=401, detail="Strava credential rejected")
    except SyncCancelledError:
        raise HTTPException(status_code=409, detail="Sync was cancelled")


@router.get("/athletes/me/summary", response_model=SummaryResponse)
async def my_summary(
    year: str | None = Query(None, description="Year (e.g. 2024) or 'all'"),
    access_token: str = Depends(get_access_token),
    strava: StravaClient = Depends(get_strava_client),
    coordinator: SyncCoordinator = Depends(get_coordinator),
):
    """Resolve the athlete from the credential, then load-or-sync."""
    _year_param(year)
    try:
        athlete = await strava.get_athlete(access_token)
    except AuthError:
        raise HTTPException(status_code=401, detail="Strava credential rejected")
    except TransportError as e:
        logger.error(f"Failed to fetch athlete: {e}")
        raise HTTPException(status_code=502, detail="Could not reach Strava")

    athlete_id = str(athlete["id"])
    result = await _run(coordinator.load_or_sync(athlete_id, access_token), athlete_id)
    return _to_response(athlete_id, year, result)


@router.get("/athletes/{athlete_id}/summary", response_model=SummaryResponse)
async def athlete_summary(
    athlete_id: str,
    year: str | None = Query(None, description="Year (e.g. 2024) or 'all'"),
    access_token: str = Depends(get_access_token),
    coordinator: SyncCoordinator = Depends(get_coordinator),
):
    """Summary from the cache, syncing first if nothing is cached."""
    _year_param(year)
    result = await _run(coordinator.load_or_sync(athlete_id, access_token), athlete_id)
    return _to_response(athlete_id, year, result)


@router.post("/athletes/{athlete_id}/sync", response_model=SummaryResponse)
async def athlete_sync(
    athlete_id: str,
    year: str | None = Query(None, description="Year (e.g. 2024) or 'all'"),
    access_token: str = Depends(get_access_token),
    coordinator: SyncCoordinator = Depends(get_coordinator),
):
    """Full refresh from Strava, replacing the cache."""
    _year_param(year)
    result = await _run(coordinator.force_sync(access_token, athlete_id), athlete_id)
    return _to_response(athlete_id, year, result)


@router.delete("/athletes/{athlete_id}/cache")
async def athlete_clear(
    athlete_id: str,
    coordinator: SyncCoordinator = Depends(get_coordinator),
):
    """Drop the athlete's cache; the next summary request re-syncs."""
    try:
        deleted = await coordinator.clear(athlete_id)
    except CacheUnavailable as e:
        logger.error(f"Failed to clear cache for athlete {athlete_id}: {e}")
        raise HTTPException(status_code=503, detail="Cache store unavailable")
    return {"deleted": deleted}
