"""
API Router v1

Combines all route modules.
"""

from fastapi import APIRouter

from activity_stats.api.v1.routes import athletes

api_router = APIRouter()

api_router.include_router(athletes.router, tags=["Athletes"])
