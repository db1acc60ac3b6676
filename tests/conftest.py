"""Pytest configuration and shared fixtures for Activity Stats tests."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Optional, Sequence

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from activity_stats.db.session import create_engine_for, init_db
from activity_stats.features.activities import (
    Activity,
    CacheClient,
    CacheSnapshot,
    CacheWriteResult,
)
from activity_stats.shared.errors import CacheUnavailable, TransportError


# =============================================================================
# Activity factories
# =============================================================================

def build_activity(
    id: int,
    start: str = "2024-01-05T08:00:00Z",
    type: Optional[str] = "Run",
    distance: Optional[float] = 1000.0,
    moving_time: Optional[float] = 600.0,
    elevation: Optional[float] = 10.0,
    name: Optional[str] = None,
) -> Activity:
    """Activity as the remote listing would return it."""
    return Activity.model_validate({
        "id": id,
        "name": name or f"Activity {id}",
        "type": type,
        "distance": distance,
        "moving_time": moving_time,
        "total_elevation_gain": elevation,
        "start_date": start,
    })


def raw_page(start_id: int, size: int) -> list[dict]:
    """One listing page of raw activity records."""
    return [
        {
            "id": start_id + i,
            "name": f"Activity {start_id + i}",
            "type": "Run",
            "distance": 5000.0,
            "moving_time": 1800,
            "total_elevation_gain": 50.0,
            "start_date": "2024-03-10T07:30:00Z",
        }
        for i in range(size)
    ]


# =============================================================================
# Fakes
# =============================================================================

class FakeListing:
    """
    In-memory activity listing.

    Pages are served by number; pages past the configured ones are empty.
    `fail_on` makes that page raise; `gate` blocks every request until set.
    """

    def __init__(self, pages: Sequence[list[dict]] = (), fail_on: Optional[int] = None):
        self.pages = list(pages)
        self.fail_on = fail_on
        self.error: Exception = TransportError("connection reset")
        self.calls: list[tuple[str, int, int]] = []
        self.gate: Optional[asyncio.Event] = None

    async def list_activities(self, access_token: str, page: int = 1, per_page: int = 200):
        self.calls.append((access_token, page, per_page))
        if self.gate is not None:
            await self.gate.wait()
        if page == self.fail_on:
            raise self.error
        if page <= len(self.pages):
            return self.pages[page - 1]
        return []


class FakeCache(CacheClient):
    """In-memory cache store with switchable failures."""

    def __init__(self):
        self.entries: dict[str, CacheSnapshot] = {}
        self.fail_read = False
        self.fail_write = False
        self.fail_delete = False
        self.writes = 0

    def seed(self, athlete_id: str, activities: Sequence[Activity]) -> None:
        self.entries[athlete_id] = CacheSnapshot(
            activities=list(activities),
            last_updated=datetime(2024, 6, 1, tzinfo=timezone.utc),
        )

    async def read(self, athlete_id: str) -> Optional[CacheSnapshot]:
        if self.fail_read:
            raise CacheUnavailable("store down")
        return self.entries.get(athlete_id)

    async def write(self, athlete_id: str, activities: Sequence[Activity]) -> CacheWriteResult:
        if self.fail_write:
            raise CacheUnavailable("disk full")
        self.writes += 1
        now = datetime.now(timezone.utc)
        self.entries[athlete_id] = CacheSnapshot(activities=list(activities), last_updated=now)
        return CacheWriteResult(last_updated=now, count=len(activities))

    async def delete(self, athlete_id: str) -> bool:
        if self.fail_delete:
            raise CacheUnavailable("store down")
        return self.entries.pop(athlete_id, None) is not None


@pytest.fixture
def fake_cache():
    return FakeCache()


# =============================================================================
# Database
# =============================================================================

@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """Session factory bound to a fresh SQLite file with tables created."""
    engine = create_engine_for(f"sqlite:///{tmp_path}/test.db")
    await init_db(engine)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield factory
    await engine.dispose()
