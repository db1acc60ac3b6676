"""
Sync error taxonomy.

Every failure of the sync engine is reported as one of these classes so the
session boundary can react to each condition separately. None of them is
fatal to the process.
"""


class SyncError(Exception):
    """Base sync error."""
    pass


class AuthError(SyncError):
    """Credential rejected by the remote service. Not retried."""
    pass


class TransportError(SyncError):
    """Page request or cache call failed at the network/transport layer."""
    pass


class CacheUnavailable(SyncError):
    """Cache store read/write failed."""
    pass


class SyncCancelledError(SyncError):
    """Synchronization was cancelled because its session ended."""
    pass
