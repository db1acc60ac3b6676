"""
Activity cache repository.

Data access layer for athlete cache snapshots.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from activity_stats.shared.repository import BaseRepository
from .models import AthleteCache, utcnow


class AthleteCacheRepository(BaseRepository[AthleteCache]):
    """Repository for athlete activity snapshots."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, AthleteCache)

    async def get_by_athlete_id(self, athlete_id: str) -> AthleteCache | None:
        """
        Get cached snapshot for athlete.

        Args:
            athlete_id: Strava athlete ID

        Returns:
            AthleteCache if found, None otherwise
        """
        return await self.get_by(athlete_id=athlete_id)

    async def replace(
        self,
        athlete_id: str,
        activities: list[dict[str, Any]]
    ) -> AthleteCache:
        """
        Store a full activity set, discarding any previous one.

        Args:
            athlete_id: Strava athlete ID
            activities: Serialized activities in listing order

        Returns:
            The stored snapshot
        """
        existing = await self.get_by_athlete_id(athlete_id)
        if existing:
            return await self.update(
                existing,
                activities=activities,
                activity_count=len(activities),
                last_updated=utcnow(),
            )
        return await self.create(
            athlete_id=athlete_id,
            activities=activities,
            activity_count=len(activities),
            last_updated=utcnow(),
        )

    async def delete_for_athlete(self, athlete_id: str) -> bool:
        """
        Delete snapshot for athlete.

        Returns True if a snapshot was deleted.
        """
        existing = await self.get_by_athlete_id(athlete_id)
        if not existing:
            return False
        await self.delete(existing)
        return True
