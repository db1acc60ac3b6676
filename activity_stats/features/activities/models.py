"""
Activity cache database models.

Models:
- AthleteCache: Full activity snapshot per athlete
"""

from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Integer, JSON

from activity_stats.models.base import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AthleteCache(Base):
    """
    Per-athlete persisted activity snapshot.

    One row per athlete. A refresh replaces `activities` wholesale;
    rows are never merged or partially updated.
    """

    __tablename__ = "athlete_caches"

    athlete_id = Column(String(20), primary_key=True)

    # Ordered list of activity payloads as received from the listing
    activities = Column(JSON, nullable=False, default=list)
    activity_count = Column(Integer, nullable=False, default=0)

    last_updated = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self):
        return f"<AthleteCache athlete_id={self.athlete_id} count={self.activity_count}>"

    @property
    def last_updated_utc(self) -> datetime:
        """Last update as an aware UTC datetime (SQLite drops tzinfo)."""
        if self.last_updated.tzinfo is None:
            return self.last_updated.replace(tzinfo=timezone.utc)
        return self.last_updated.astimezone(timezone.utc)
