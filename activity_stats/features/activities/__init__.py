"""
Activity cache module.

Usage:
    from activity_stats.features.activities import Activity, DatabaseCacheClient

Models:
- AthleteCache: Persisted activity snapshot per athlete

Clients:
- CacheClient: Cache-store contract used by sync
- DatabaseCacheClient: Local database store
- HttpCacheClient: Remote cache server
"""

from .models import AthleteCache
from .schemas import (
    Activity,
    CacheSnapshot,
    CacheWriteRequest,
    CacheWriteResult,
    CacheDeleteResult,
    DEFAULT_ACTIVITY_TYPE,
)
from .repository import AthleteCacheRepository
from .cache import (
    CacheClient,
    DatabaseCacheClient,
    HttpCacheClient,
    create_cache_client,
)

__all__ = [
    # Models
    "AthleteCache",
    # Schemas
    "Activity",
    "CacheSnapshot",
    "CacheWriteRequest",
    "CacheWriteResult",
    "CacheDeleteResult",
    "DEFAULT_ACTIVITY_TYPE",
    # Repositories
    "AthleteCacheRepository",
    # Clients
    "CacheClient",
    "DatabaseCacheClient",
    "HttpCacheClient",
    "create_cache_client",
]
