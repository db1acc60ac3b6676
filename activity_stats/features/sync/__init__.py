"""
Activity sync services.

Provides:
- PageFetcher: Sequential paginated retrieval
- SyncCoordinator: Cache-or-sync orchestration with per-athlete coalescing
- SyncResult / SyncSource: Outcome of a sync call
"""

from .config import SyncConfig
from .fetcher import ActivityListing, PageFetcher
from .coordinator import SyncCoordinator, SyncResult, SyncSource

__all__ = [
    "SyncConfig",
    "ActivityListing",
    "PageFetcher",
    "SyncCoordinator",
    "SyncResult",
    "SyncSource",
]
