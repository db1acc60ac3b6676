"""
Strava API client.

Provides the two remote calls the sync engine needs:
- GET /athlete              (identity for a bearer credential)
- GET /athlete/activities   (paginated activity listing)

Strava API Limits:
- 200 requests per 15 minutes
- 2,000 requests per day

Errors are classified for the sync engine:
- 401/403             -> StravaAuthError (AuthError)
- 429, local limiter  -> StravaRateLimitError (TransportError)
- other non-200, I/O  -> StravaAPIError (TransportError)
"""

import asyncio
import logging
from collections import defaultdict, deque
from datetime import date, datetime, timedelta
from typing import Any, Optional

import httpx

from activity_stats.config import settings
from activity_stats.shared.errors import AuthError, TransportError

logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================

class StravaAPIError(TransportError):
    """Strava API error."""
    pass


class StravaAuthError(AuthError):
    """Authentication/authorization error."""
    pass


class StravaRateLimitError(StravaAPIError):
    """Rate limit exceeded."""
    pass


# =============================================================================
# Rate Limiter
# =============================================================================

class StravaRateLimiter:
    """
    Client-side guard for Strava's two request quotas.

    A sliding 15-minute window plus a calendar-day counter, tracked per key.
    """

    def __init__(
        self,
        short_limit: int = 200,
        short_window_minutes: int = 15,
        daily_limit: int = 2000
    ):
        self.short_limit = short_limit
        self.short_window = timedelta(minutes=short_window_minutes)
        self.daily_limit = daily_limit

        self._recent: dict[str, deque[datetime]] = defaultdict(deque)
        self._today: dict[str, int] = defaultdict(int)
        self._day = date.today()
        self._lock = asyncio.Lock()

    def _roll(self, now: datetime) -> None:
        if now.date() != self._day:
            self._today.clear()
            self._day = now.date()
            logger.info("Strava daily request counters reset")

        cutoff = now - self.short_window
        for stamps in self._recent.values():
            while stamps and stamps[0] <= cutoff:
                stamps.popleft()

    async def check_and_increment(self, key: str = "global") -> bool:
        """Record one request for `key`; False when either quota is used up."""
        async with self._lock:
            now = datetime.now()
            self._roll(now)

            recent = self._recent[key]
            if len(recent) >= self.short_limit:
                logger.warning(
                    f"Strava 15-min quota reached for {key}: "
                    f"{len(recent)}/{self.short_limit}"
                )
                return False
            if self._today[key] >= self.daily_limit:
                logger.warning(
                    f"Strava daily quota reached for {key}: "
                    f"{self._today[key]}/{self.daily_limit}"
                )
                return False

            recent.append(now)
            self._today[key] += 1
            return True

    def get_usage(self, key: str = "global") -> dict:
        self._roll(datetime.now())
        return {
            "short_term": {
                "used": len(self._recent[key]),
                "limit": self.short_limit,
                "window_minutes": int(self.short_window.total_seconds() // 60),
            },
            "daily": {
                "used": self._today[key],
                "limit": self.daily_limit,
            },
        }


# =============================================================================
# Strava Client
# =============================================================================

class StravaClient:
    """
    Async client for Strava API.

    Holds one pooled httpx client; call `close()` when done.

    Usage:
        client = StravaClient()
        athlete = await client.get_athlete(token)
        page = await client.list_activities(token, page=1, per_page=200)
    """

    MAX_PER_PAGE = 200

    def __init__(
        self,
        api_url: str | None = None,
        timeout: float | None = None,
        rate_limiter: StravaRateLimiter | None = None,
        transport: httpx.AsyncBaseTransport | None = None
    ):
        self.api_url = (api_url or settings.strava_api_url).rstrip("/")
        self.rate_limiter = rate_limiter or StravaRateLimiter(
            short_limit=settings.strava_rate_limit_short,
            daily_limit=settings.strava_rate_limit_daily,
        )
        self._client = httpx.AsyncClient(
            base_url=self.api_url,
            timeout=timeout if timeout is not None else settings.strava_timeout_seconds,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _api_request(
        self,
        method: str,
        endpoint: str,
        access_token: str,
        params: Optional[dict] = None
    ) -> Any:
        """
        Make an authenticated API request with rate limiting.

        Raises:
            StravaRateLimitError: If rate limit exceeded
            StravaAuthError: If authentication fails
            StravaAPIError: If API returns error or the request fails
        """
        if not await self.rate_limiter.check_and_increment():
            raise StravaRateLimitError("Rate limit exceeded")

        try:
            response = await self._client.request(
                method=method,
                url=endpoint,
                headers={"Authorization": f"Bearer {access_token}"},
                params=params
            )
        except httpx.HTTPError as e:
            raise StravaAPIError(f"Request to {endpoint} failed: {e}") from e

        if "X-RateLimit-Limit" in response.headers:
            logger.debug(
                f"Strava rate limit: {response.headers.get('X-RateLimit-Usage')} "
                f"/ {response.headers.get('X-RateLimit-Limit')}"
            )

        if response.status_code in (401, 403):
            raise StravaAuthError("Invalid or expired token")
        elif response.status_code == 429:
            raise StravaRateLimitError("Strava rate limit exceeded")
        elif response.status_code != 200:
            raise StravaAPIError(
                f"API error: {response.status_code} - {response.text[:200]}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise StravaAPIError(f"Malformed response from {endpoint}") from e

    async def get_athlete(self, access_token: str) -> dict:
        """Get authenticated athlete profile."""
        return await self._api_request("GET", "/athlete", access_token)

    async def list_activities(
        self,
        access_token: str,
        page: int = 1,
        per_page: int = MAX_PER_PAGE
    ) -> list[dict]:
        """
        Get one page of the athlete's activities.

        Args:
            access_token: Valid access token
            page: Page number, 1-based
            per_page: Results per page (max 200)

        Returns:
            Activity summaries in listing order; empty past the last page.
        """
        params = {"page": page, "per_page": min(per_page, self.MAX_PER_PAGE)}
        data = await self._api_request(
            "GET",
            "/athlete/activities",
            access_token,
            params
        )
        if not isinstance(data, list):
            raise StravaAPIError("Activity listing did not return a list")
        return data
