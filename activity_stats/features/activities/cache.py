"""
Activity cache clients.

The sync engine talks to the cache store only through `CacheClient`:
read, full-replace write and delete of one athlete's activity set.

Implementations:
- DatabaseCacheClient: the service's own SQLAlchemy store
- HttpCacheClient: a remote cache server exposing /api/activities/{athlete_id}

Store failures surface as CacheUnavailable.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Sequence

import httpx
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from activity_stats.config import settings
from activity_stats.shared.errors import CacheUnavailable
from .repository import AthleteCacheRepository
from .schemas import Activity, CacheSnapshot, CacheWriteResult

logger = logging.getLogger(__name__)


class CacheClient(ABC):
    """Cache-store contract used by the sync coordinator."""

    @abstractmethod
    async def read(self, athlete_id: str) -> Optional[CacheSnapshot]:
        """Return the cached snapshot, or None if the athlete has none."""

    @abstractmethod
    async def write(
        self,
        athlete_id: str,
        activities: Sequence[Activity]
    ) -> CacheWriteResult:
        """Replace the athlete's cached activity set."""

    @abstractmethod
    async def delete(self, athlete_id: str) -> bool:
        """Delete the athlete's cache entry. Returns True if one existed."""

    async def close(self) -> None:
        """Release resources held by the client."""


# =============================================================================
# Database-backed cache
# =============================================================================

class DatabaseCacheClient(CacheClient):
    """
    Cache client backed by the local database.

    Opens one session per call so a single client can be shared
    across requests.

    Usage:
        cache = DatabaseCacheClient(AsyncSessionLocal)
        snapshot = await cache.read("12345")
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def read(self, athlete_id: str) -> Optional[CacheSnapshot]:
        try:
            async with self._session_factory() as db:
                entry = await AthleteCacheRepository(db).get_by_athlete_id(athlete_id)
                if not entry:
                    return None
                return CacheSnapshot(
                    activities=[Activity.model_validate(a) for a in entry.activities],
                    last_updated=entry.last_updated_utc,
                )
        except (SQLAlchemyError, ValidationError) as e:
            logger.error(f"Cache read failed for athlete {athlete_id}: {e}")
            raise CacheUnavailable(f"Cache read failed: {e}") from e

    async def write(
        self,
        athlete_id: str,
        activities: Sequence[Activity]
    ) -> CacheWriteResult:
        payload = [a.model_dump(mode="json") for a in activities]
        try:
            async with self._session_factory() as db:
                entry = await AthleteCacheRepository(db).replace(athlete_id, payload)
                result = CacheWriteResult(
                    last_updated=entry.last_updated_utc,
                    count=entry.activity_count,
                )
                await db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Cache write failed for athlete {athlete_id}: {e}")
            raise CacheUnavailable(f"Cache write failed: {e}") from e

        logger.info(f"Cached {result.count} activities for athlete {athlete_id}")
        return result

    async def delete(self, athlete_id: str) -> bool:
        try:
            async with self._session_factory() as db:
                deleted = await AthleteCacheRepository(db).delete_for_athlete(athlete_id)
                await db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Cache delete failed for athlete {athlete_id}: {e}")
            raise CacheUnavailable(f"Cache delete failed: {e}") from e

        if deleted:
            logger.info(f"Cleared cache for athlete {athlete_id}")
        return deleted


# =============================================================================
# Remote cache server
# =============================================================================

class HttpCacheClient(CacheClient):
    """
    Cache client for a remote cache server.

    Endpoints:
    - GET    /api/activities/{athlete_id} -> {activities, lastUpdated}
    - POST   /api/activities/{athlete_id} <- {activities} -> {lastUpdated, count}
    - DELETE /api/activities/{athlete_id}
    """

    def __init__(
        self,
        api_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None
    ):
        self.api_url = api_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.api_url,
            timeout=timeout,
            transport=transport,
        )

    def _path(self, athlete_id: str) -> str:
        return f"/api/activities/{athlete_id}"

    async def _request(self, method: str, athlete_id: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, self._path(athlete_id), **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPError as e:
            logger.warning(f"Cache server {method} failed for athlete {athlete_id}: {e}")
            raise CacheUnavailable(f"Cache server {method} failed: {e}") from e

    async def read(self, athlete_id: str) -> Optional[CacheSnapshot]:
        response = await self._request("GET", athlete_id)
        try:
            snapshot = CacheSnapshot.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise CacheUnavailable(f"Malformed cache response: {e}") from e
        if snapshot.last_updated is None and snapshot.is_empty:
            return None
        return snapshot

    async def write(
        self,
        athlete_id: str,
        activities: Sequence[Activity]
    ) -> CacheWriteResult:
        body = {"activities": [a.model_dump(mode="json") for a in activities]}
        response = await self._request("POST", athlete_id, json=body)
        try:
            return CacheWriteResult.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise CacheUnavailable(f"Malformed cache response: {e}") from e

    async def delete(self, athlete_id: str) -> bool:
        response = await self._request("DELETE", athlete_id)
        if not response.content:
            return True
        try:
            return bool(response.json().get("deleted", True))
        except ValueError:
            return True

    async def close(self) -> None:
        await self._client.aclose()


# =============================================================================
# Factory
# =============================================================================

def create_cache_client(
    session_factory: async_sessionmaker[AsyncSession] | None = None
) -> CacheClient:
    """Build the cache client selected by settings.cache_backend."""
    if settings.cache_backend == "http":
        if not settings.cache_api_url:
            raise ValueError("cache_api_url must be set when cache_backend is 'http'")
        logger.info("Using remote cache server: %s", settings.cache_api_url)
        return HttpCacheClient(settings.cache_api_url)

    if session_factory is None:
        from activity_stats.db.session import AsyncSessionLocal
        session_factory = AsyncSessionLocal
    return DatabaseCacheClient(session_factory)
