"""
Sync orchestration.

Keeps an athlete's activity collection complete and current while avoiding
redundant remote pulls.

Sync Flow:
1. load_or_sync: serve the cached set if one exists, else full sync
2. force_sync: always full sync
3. Full sync: fetch every page -> replace the cache wholesale
   - any failing page aborts; the previous cache stays as the fallback
   - a failed cache write still returns the fresh set, with a warning

At most one full sync runs per athlete. Concurrent callers for the same
athlete await the running one instead of starting another pull.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from activity_stats.features.activities.cache import CacheClient
from activity_stats.features.activities.schemas import Activity
from activity_stats.shared.errors import (
    CacheUnavailable,
    SyncCancelledError,
    SyncError,
    TransportError,
)
from .fetcher import PageFetcher

logger = logging.getLogger(__name__)


class SyncSource(str, Enum):
    """Where a SyncResult's activities came from."""
    CACHE = "cache"
    REMOTE = "remote"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class SyncResult:
    """Outcome of load_or_sync / force_sync."""

    athlete_id: str
    activities: tuple[Activity, ...]
    source: SyncSource
    last_updated: Optional[datetime] = None
    error: Optional[SyncError] = None
    warning: Optional[str] = None

    @property
    def count(self) -> int:
        return len(self.activities)

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class _InFlight:
    task: Optional["asyncio.Task[SyncResult]"] = None
    cancelled: bool = field(default=False)


class SyncCoordinator:
    """
    Orchestrates PageFetcher and CacheClient per athlete.

    Usage:
        coordinator = SyncCoordinator(PageFetcher(strava), DatabaseCacheClient(factory))
        result = await coordinator.load_or_sync(athlete_id, access_token)
        result = await coordinator.force_sync(access_token, athlete_id)
        await coordinator.clear(athlete_id)
    """

    def __init__(self, fetcher: PageFetcher, cache: CacheClient):
        self.fetcher = fetcher
        self.cache = cache
        self._in_flight: dict[str, _InFlight] = {}

    # -------------------------------------------------------------------------
    # Public operations
    # -------------------------------------------------------------------------

    async def load_or_sync(self, athlete_id: str, access_token: str) -> SyncResult:
        """
        Return the cached collection, or run a full sync if there is none.

        A present, non-empty cache is returned as-is; there is no freshness
        check. A cache read failure counts as "no cache".

        Raises:
            AuthError: Credential rejected during the sync
            SyncCancelledError: The sync was cancelled by clear()/close()
        """
        if athlete_id in self._in_flight:
            logger.debug(f"Joining in-flight sync for athlete {athlete_id}")
            return await self._join(athlete_id)

        try:
            snapshot = await self.cache.read(athlete_id)
        except CacheUnavailable as e:
            logger.warning(f"Cache unavailable for athlete {athlete_id}, syncing: {e}")
            snapshot = None

        if snapshot is not None and not snapshot.is_empty:
            logger.info(
                f"Loaded {len(snapshot.activities)} cached activities "
                f"for athlete {athlete_id}"
            )
            return SyncResult(
                athlete_id=athlete_id,
                activities=tuple(snapshot.activities),
                source=SyncSource.CACHE,
                last_updated=snapshot.last_updated,
            )

        return await self._start_or_join(athlete_id, access_token)

    async def force_sync(self, access_token: str, athlete_id: str) -> SyncResult:
        """
        Run a full sync regardless of cache state.

        Raises:
            AuthError: Credential rejected during the sync
            SyncCancelledError: The sync was cancelled by clear()/close()
        """
        return await self._start_or_join(athlete_id, access_token)

    async def clear(self, athlete_id: str) -> bool:
        """
        Delete the athlete's cache entry and cancel any running sync.

        Pages arriving for a cancelled sync are discarded.

        Returns:
            True if a cache entry was deleted

        Raises:
            CacheUnavailable: The cache store could not delete the entry
        """
        self.cancel(athlete_id)
        return await self.cache.delete(athlete_id)

    def cancel(self, athlete_id: str) -> bool:
        """Cancel the athlete's running sync, if any."""
        entry = self._in_flight.pop(athlete_id, None)
        if entry is None:
            return False
        entry.cancelled = True
        entry.task.cancel()
        logger.info(f"Cancelled in-flight sync for athlete {athlete_id}")
        return True

    def is_syncing(self, athlete_id: str) -> bool:
        return athlete_id in self._in_flight

    async def close(self) -> None:
        """Cancel all running syncs and wait for them to unwind."""
        tasks = []
        for athlete_id in list(self._in_flight):
            tasks.append(self._in_flight[athlete_id].task)
            self.cancel(athlete_id)
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    # -------------------------------------------------------------------------
    # Coalescing
    # -------------------------------------------------------------------------

    async def _start_or_join(self, athlete_id: str, access_token: str) -> SyncResult:
        if athlete_id not in self._in_flight:
            entry = _InFlight()
            entry.task = asyncio.create_task(
                self._full_sync(athlete_id, access_token, entry)
            )
            entry.task.add_done_callback(lambda t: self._forget(athlete_id, t))
            self._in_flight[athlete_id] = entry
            logger.info(f"Started full sync for athlete {athlete_id}")
        else:
            logger.debug(f"Joining in-flight sync for athlete {athlete_id}")
        return await self._join(athlete_id)

    async def _join(self, athlete_id: str) -> SyncResult:
        task = self._in_flight[athlete_id].task
        try:
            # shield: a caller giving up must not cancel the shared sync
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            if task.cancelled():
                raise SyncCancelledError(
                    f"Sync for athlete {athlete_id} was cancelled"
                ) from None
            raise

    def _forget(self, athlete_id: str, task: asyncio.Task) -> None:
        entry = self._in_flight.get(athlete_id)
        if entry is not None and entry.task is task:
            del self._in_flight[athlete_id]

    # -------------------------------------------------------------------------
    # Full sync
    # -------------------------------------------------------------------------

    async def _full_sync(
        self,
        athlete_id: str,
        access_token: str,
        entry: _InFlight
    ) -> SyncResult:
        try:
            activities = await self.fetcher.fetch_all(
                access_token,
                is_cancelled=lambda: entry.cancelled
            )
        except TransportError as e:
            logger.warning(f"Sync aborted for athlete {athlete_id}: {e}")
            return await self._fallback(athlete_id, e)

        if entry.cancelled:
            raise SyncCancelledError(f"Sync for athlete {athlete_id} was cancelled")

        try:
            written = await self.cache.write(athlete_id, activities)
        except CacheUnavailable as e:
            logger.warning(
                f"Synced {len(activities)} activities for athlete {athlete_id} "
                f"but could not persist them: {e}"
            )
            return SyncResult(
                athlete_id=athlete_id,
                activities=tuple(activities),
                source=SyncSource.REMOTE,
                error=e,
                warning="Activities were refreshed but could not be saved to the cache",
            )

        logger.info(f"Sync complete for athlete {athlete_id}: {written.count} activities")
        return SyncResult(
            athlete_id=athlete_id,
            activities=tuple(activities),
            source=SyncSource.REMOTE,
            last_updated=written.last_updated,
        )

    async def _fallback(self, athlete_id: str, error: TransportError) -> SyncResult:
        """Report the untouched previous cache alongside the sync error."""
        try:
            snapshot = await self.cache.read(athlete_id)
        except CacheUnavailable as e:
            logger.warning(f"Fallback cache read failed for athlete {athlete_id}: {e}")
            snapshot = None

        return SyncResult(
            athlete_id=athlete_id,
            activities=tuple(snapshot.activities) if snapshot else (),
            source=SyncSource.FALLBACK,
            last_updated=snapshot.last_updated if snapshot else None,
            error=error,
        )
