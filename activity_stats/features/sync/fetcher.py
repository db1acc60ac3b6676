"""
Paginated activity retrieval.

Walks the remote activity listing one page at a time until a page comes
back empty. Pages are requested strictly in sequence so the resulting
order matches the listing and only one request is outstanding.
"""

import logging
from typing import Callable, Optional, Protocol

from pydantic import ValidationError

from activity_stats.features.activities.schemas import Activity
from activity_stats.shared.errors import SyncCancelledError, TransportError
from .config import SyncConfig

logger = logging.getLogger(__name__)


class ActivityListing(Protocol):
    """Remote activity listing: (credential, page, page size) -> records."""

    async def list_activities(
        self,
        access_token: str,
        page: int = 1,
        per_page: int = 200
    ) -> list[dict]:
        ...


class PageFetcher:
    """
    Sequential page-by-page retrieval of an athlete's activities.

    Usage:
        fetcher = PageFetcher(StravaClient())
        activities = await fetcher.fetch_all(access_token)
    """

    def __init__(
        self,
        listing: ActivityListing,
        page_size: int = SyncConfig.ACTIVITIES_PER_PAGE
    ):
        self.listing = listing
        self.page_size = page_size

    async def fetch_all(
        self,
        access_token: str,
        is_cancelled: Optional[Callable[[], bool]] = None
    ) -> list[Activity]:
        """
        Fetch every activity, page 1 onwards, until an empty page.

        Only a page with zero items ends the loop; a short page does not.
        Any failing page aborts the whole fetch, nothing partial is returned.

        Args:
            access_token: Bearer credential
            is_cancelled: Checked after every response; when it returns True
                the response is dropped and SyncCancelledError is raised

        Raises:
            AuthError: Credential rejected
            TransportError: A page request failed or returned bad records
            SyncCancelledError: The owning session went away mid-fetch
        """
        activities: list[Activity] = []
        page = SyncConfig.FIRST_PAGE

        while True:
            items = await self.listing.list_activities(
                access_token,
                page=page,
                per_page=self.page_size
            )

            if is_cancelled and is_cancelled():
                logger.info(f"Discarding page {page}: sync cancelled")
                raise SyncCancelledError("Sync cancelled")

            if len(items) == 0:
                break

            try:
                activities.extend(Activity.model_validate(item) for item in items)
            except ValidationError as e:
                raise TransportError(f"Malformed activity on page {page}: {e}") from e

            logger.debug(f"Page {page}: {len(items)} activities ({len(activities)} total)")
            page += 1

        logger.info(f"Fetched {len(activities)} activities in {page} requests")
        return activities
