"""
Activity schemas.

Pydantic models for activities and the cache-store contract.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_ACTIVITY_TYPE = "Other"


class Activity(BaseModel):
    """
    One recorded exercise session as returned by the activity listing.

    Numeric fields stay optional so the cached payload mirrors the remote
    record; the `*_m` / `*_s` properties resolve absent values to zero.
    Fields not declared here are kept as extras.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    id: int
    name: Optional[str] = None
    type: Optional[str] = None
    distance: Optional[float] = None  # meters
    moving_time: Optional[float] = None  # seconds
    total_elevation_gain: Optional[float] = None  # meters
    start_date: datetime
    start_date_local: Optional[datetime] = None

    @property
    def activity_type(self) -> str:
        return self.type or DEFAULT_ACTIVITY_TYPE

    @property
    def distance_m(self) -> float:
        return self.distance or 0.0

    @property
    def moving_time_s(self) -> float:
        return self.moving_time or 0.0

    @property
    def elevation_gain_m(self) -> float:
        return self.total_elevation_gain or 0.0


class CacheSnapshot(BaseModel):
    """Cache read response: the athlete's full activity set."""

    model_config = ConfigDict(populate_by_name=True)

    activities: list[Activity] = Field(default_factory=list)
    last_updated: Optional[datetime] = Field(default=None, alias="lastUpdated")

    @property
    def is_empty(self) -> bool:
        return not self.activities


class CacheWriteRequest(BaseModel):
    """Cache write request body."""

    activities: list[Activity]


class CacheWriteResult(BaseModel):
    """Cache write response."""

    model_config = ConfigDict(populate_by_name=True)

    last_updated: datetime = Field(alias="lastUpdated")
    count: int


class CacheDeleteResult(BaseModel):
    """Cache delete response."""

    deleted: bool
