"""
Activity Cache Routes

Cache-store contract, one snapshot per athlete:
- GET    /activities/{athlete_id} - Read snapshot
- POST   /activities/{athlete_id} - Replace snapshot
- DELETE /activities/{athlete_id} - Delete snapshot
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from activity_stats.db.session import get_async_db
from activity_stats.features.activities import (
    Activity,
    AthleteCacheRepository,
    CacheDeleteResult,
    CacheSnapshot,
    CacheWriteRequest,
    CacheWriteResult,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/activities/{athlete_id}", response_model=CacheSnapshot)
async def read_cache(
    athlete_id: str,
    db: AsyncSession = Depends(get_async_db)
):
    """
    Get the cached activity set.

    Returns an empty set with lastUpdated=null when nothing is cached.
    """
    entry = await AthleteCacheRepository(db).get_by_athlete_id(athlete_id)
    if not entry:
        return CacheSnapshot()

    return CacheSnapshot(
        activities=[Activity.model_validate(a) for a in entry.activities],
        last_updated=entry.last_updated_utc,
    )


@router.post("/activities/{athlete_id}", response_model=CacheWriteResult)
async def write_cache(
    athlete_id: str,
    body: CacheWriteRequest,
    db: AsyncSession = Depends(get_async_db)
):
    """Replace the cached activity set (no merge)."""
    payload = [a.model_dump(mode="json") for a in body.activities]
    entry = await AthleteCacheRepository(db).replace(athlete_id, payload)
    result = CacheWriteResult(
        last_updated=entry.last_updated_utc,
        count=entry.activity_count,
    )
    await db.commit()

    logger.info(f"Stored {result.count} activities for athlete {athlete_id}")
    return result


@router.delete("/activities/{athlete_id}", response_model=CacheDeleteResult)
async def delete_cache(
    athlete_id: str,
    db: AsyncSession = Depends(get_async_db)
):
    """Delete the cached activity set."""
    deleted = await AthleteCacheRepository(db).delete_for_athlete(athlete_id)
    await db.commit()
    return CacheDeleteResult(deleted=deleted)
