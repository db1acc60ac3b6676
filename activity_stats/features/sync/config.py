"""
Sync configuration constants.
"""

from activity_stats.config import settings


class SyncConfig:
    """Configuration for sync behavior."""

    # Listing pages are 1-based
    FIRST_PAGE = 1

    # How many activities to request per listing call (Strava max is 200)
    ACTIVITIES_PER_PAGE = settings.sync_page_size
