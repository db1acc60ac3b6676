"""
Tests for SyncCoordinator.

Cache-or-sync selection, fallback on failure, per-athlete coalescing
and cancellation through clear()/close().
"""

import asyncio

import pytest

from activity_stats.features.sync import PageFetcher, SyncCoordinator, SyncSource
from activity_stats.shared.errors import (
    AuthError,
    CacheUnavailable,
    SyncCancelledError,
    TransportError,
)

from conftest import FakeCache, FakeListing, build_activity, raw_page


async def spin(times: int = 10) -> None:
    """Let scheduled tasks run up to their next suspension point."""
    for _ in range(times):
        await asyncio.sleep(0)


def coordinator_for(listing: FakeListing, cache: FakeCache) -> SyncCoordinator:
    return SyncCoordinator(PageFetcher(listing), cache)


# =============================================================================
# load_or_sync
# =============================================================================

class TestLoadOrSync:
    """Tests for cache-or-sync selection."""

    @pytest.mark.asyncio
    async def test_cache_hit_skips_remote(self, fake_cache):
        fake_cache.seed("42", [build_activity(1), build_activity(2)])
        listing = FakeListing([raw_page(100, 5)])

        result = await coordinator_for(listing, fake_cache).load_or_sync("42", "token")

        assert result.source == SyncSource.CACHE
        assert [a.id for a in result.activities] == [1, 2]
        assert result.last_updated is not None
        assert listing.calls == []

    @pytest.mark.asyncio
    async def test_no_cache_syncs(self, fake_cache):
        listing = FakeListing([raw_page(1, 200), raw_page(201, 50)])

        result = await coordinator_for(listing, fake_cache).load_or_sync("42", "token")

        assert result.source == SyncSource.REMOTE
        assert result.count == 250
        assert result.ok
        assert result.last_updated is not None
        assert len(fake_cache.entries["42"].activities) == 250

    @pytest.mark.asyncio
    async def test_empty_cache_syncs(self, fake_cache):
        fake_cache.seed("42", [])
        listing = FakeListing([raw_page(1, 3)])

        result = await coordinator_for(listing, fake_cache).load_or_sync("42", "token")

        assert result.source == SyncSource.REMOTE
        assert result.count == 3

    @pytest.mark.asyncio
    async def test_unreadable_cache_counts_as_missing(self, fake_cache):
        fake_cache.fail_read = True
        listing = FakeListing([raw_page(1, 3)])

        result = await coordinator_for(listing, fake_cache).load_or_sync("42", "token")

        assert result.source == SyncSource.REMOTE
        assert fake_cache.writes == 1

    @pytest.mark.asyncio
    async def test_athletes_isolated(self, fake_cache):
        fake_cache.seed("1", [build_activity(1)])
        listing = FakeListing([raw_page(50, 2)])

        result = await coordinator_for(listing, fake_cache).load_or_sync("2", "token")

        assert result.source == SyncSource.REMOTE
        assert [a.id for a in fake_cache.entries["1"].activities] == [1]


# =============================================================================
# force_sync
# =============================================================================

class TestForceSync:
    """Tests for forced refresh and its failure modes."""

    @pytest.mark.asyncio
    async def test_overwrites_cache(self, fake_cache):
        fake_cache.seed("42", [build_activity(1)])
        listing = FakeListing([raw_page(100, 4)])

        result = await coordinator_for(listing, fake_cache).force_sync("token", "42")

        assert result.source == SyncSource.REMOTE
        assert [a.id for a in fake_cache.entries["42"].activities] == [100, 101, 102, 103]

    @pytest.mark.asyncio
    async def test_page_failure_falls_back_to_cache(self, fake_cache):
        """Cache holds 10; page 2 fails; the original 10 are reported with the error."""
        cached = [build_activity(i) for i in range(10)]
        fake_cache.seed("42", cached)
        before = fake_cache.entries["42"]
        listing = FakeListing([raw_page(100, 200), raw_page(300, 200)], fail_on=2)

        result = await coordinator_for(listing, fake_cache).force_sync("token", "42")

        assert result.source == SyncSource.FALLBACK
        assert list(result.activities) == cached
        assert isinstance(result.error, TransportError)
        assert not result.ok
        assert fake_cache.entries["42"] is before
        assert fake_cache.writes == 0

    @pytest.mark.asyncio
    async def test_page_failure_without_cache(self, fake_cache):
        listing = FakeListing([], fail_on=1)

        result = await coordinator_for(listing, fake_cache).force_sync("token", "42")

        assert result.source == SyncSource.FALLBACK
        assert result.activities == ()
        assert isinstance(result.error, TransportError)

    @pytest.mark.asyncio
    async def test_auth_error_raised(self, fake_cache):
        fake_cache.seed("42", [build_activity(1)])
        listing = FakeListing([raw_page(1, 5)], fail_on=1)
        listing.error = AuthError("expired")

        with pytest.raises(AuthError):
            await coordinator_for(listing, fake_cache).force_sync("token", "42")
        assert [a.id for a in fake_cache.entries["42"].activities] == [1]

    @pytest.mark.asyncio
    async def test_write_failure_returns_fresh_data(self, fake_cache):
        fake_cache.fail_write = True
        listing = FakeListing([raw_page(1, 7)])

        result = await coordinator_for(listing, fake_cache).force_sync("token", "42")

        assert result.source == SyncSource.REMOTE
        assert result.count == 7
        assert isinstance(result.error, CacheUnavailable)
        assert result.warning
        assert result.last_updated is None


# =============================================================================
# Coalescing
# =============================================================================

class TestCoalescing:
    """Concurrent requests for one athlete share a single pull."""

    @pytest.mark.asyncio
    async def test_second_request_joins(self, fake_cache):
        listing = FakeListing([raw_page(1, 3)])
        listing.gate = asyncio.Event()
        coordinator = coordinator_for(listing, fake_cache)

        first = asyncio.create_task(coordinator.load_or_sync("42", "token"))
        second = asyncio.create_task(coordinator.force_sync("token", "42"))
        await spin()
        assert coordinator.is_syncing("42")

        listing.gate.set()
        results = await asyncio.gather(first, second)

        assert len(listing.calls) == 2  # one page of data, one empty page
        assert fake_cache.writes == 1
        assert results[0] is results[1]
        assert not coordinator.is_syncing("42")

    @pytest.mark.asyncio
    async def test_different_athletes_run_separately(self, fake_cache):
        listing = FakeListing([raw_page(1, 3)])
        coordinator = coordinator_for(listing, fake_cache)

        await asyncio.gather(
            coordinator.force_sync("token", "1"),
            coordinator.force_sync("token", "2"),
        )

        assert len(listing.calls) == 4
        assert fake_cache.writes == 2


# =============================================================================
# Cancellation
# =============================================================================

class TestCancellation:
    """Tests for clear() and close() during a running sync."""

    @pytest.mark.asyncio
    async def test_clear_cancels_in_flight(self, fake_cache):
        fake_cache.seed("42", [build_activity(1)])
        listing = FakeListing([raw_page(100, 3)])
        listing.gate = asyncio.Event()
        coordinator = coordinator_for(listing, fake_cache)

        waiter = asyncio.create_task(coordinator.force_sync("token", "42"))
        await spin()

        deleted = await coordinator.clear("42")
        listing.gate.set()

        assert deleted is True
        with pytest.raises(SyncCancelledError):
            await waiter
        assert "42" not in fake_cache.entries
        assert fake_cache.writes == 0
        assert not coordinator.is_syncing("42")

    @pytest.mark.asyncio
    async def test_sync_after_clear(self, fake_cache):
        fake_cache.seed("42", [build_activity(1)])
        listing = FakeListing([raw_page(100, 2)])
        coordinator = coordinator_for(listing, fake_cache)

        assert await coordinator.clear("42") is True
        result = await coordinator.load_or_sync("42", "token")

        assert result.source == SyncSource.REMOTE
        assert [a.id for a in result.activities] == [100, 101]

    @pytest.mark.asyncio
    async def test_clear_without_entry(self, fake_cache):
        coordinator = coordinator_for(FakeListing(), fake_cache)
        assert await coordinator.clear("42") is False

    @pytest.mark.asyncio
    async def test_clear_store_failure(self, fake_cache):
        fake_cache.fail_delete = True
        coordinator = coordinator_for(FakeListing(), fake_cache)

        with pytest.raises(CacheUnavailable):
            await coordinator.clear("42")

    @pytest.mark.asyncio
    async def test_close_cancels_all(self, fake_cache):
        listing = FakeListing([raw_page(1, 3)])
        listing.gate = asyncio.Event()
        coordinator = coordinator_for(listing, fake_cache)

        waiters = [
            asyncio.create_task(coordinator.force_sync("token", athlete_id))
            for athlete_id in ("1", "2")
        ]
        await spin()

        await coordinator.close()

        for waiter in waiters:
            with pytest.raises(SyncCancelledError):
                await waiter
        assert fake_cache.writes == 0
        assert not coordinator.is_syncing("1")

    def test_cancel_without_sync(self, fake_cache):
        assert SyncCoordinator(PageFetcher(FakeListing()), fake_cache).cancel("42") is False
