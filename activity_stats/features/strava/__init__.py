"""
Strava integration module.

Usage:
    from activity_stats.features.strava import StravaClient

Components:
- StravaClient: API client (athlete profile, activity listing)
- StravaRateLimiter: Client-side quota guard
"""

from .client import (
    StravaClient,
    StravaAPIError,
    StravaAuthError,
    StravaRateLimitError,
    StravaRateLimiter,
)

__all__ = [
    "StravaClient",
    "StravaAPIError",
    "StravaAuthError",
    "StravaRateLimitError",
    "StravaRateLimiter",
]
