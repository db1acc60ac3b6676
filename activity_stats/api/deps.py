"""
Shared route dependencies.

The Strava client and sync coordinator live on app.state for the lifetime
of the application (see main.lifespan).
"""

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from activity_stats.features.strava import StravaClient
from activity_stats.features.sync import SyncCoordinator

bearer_scheme = HTTPBearer(auto_error=False)


def get_coordinator(request: Request) -> SyncCoordinator:
    return request.app.state.coordinator


def get_strava_client(request: Request) -> StravaClient:
    return request.app.state.strava


def get_access_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Bearer credential for Strava, passed through untouched."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Missing bearer token")
    return credentials.credentials
