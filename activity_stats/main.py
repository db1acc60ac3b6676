"""
Activity Stats API

FastAPI application for Strava activity sync and yearly summaries.
"""

from contextlib import asynccontextmanager
import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from activity_stats.config import settings
from activity_stats.db.session import init_db, AsyncSessionLocal
from activity_stats.api.v1.routes import cache
from activity_stats.api.v1.router import api_router
from activity_stats.features.activities import create_cache_client
from activity_stats.features.strava import StravaClient
from activity_stats.features.sync import PageFetcher, SyncCoordinator


# === Logging Setup ===
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)
logger = logging.getLogger(__name__)


# === Lifespan ===
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    logger.info("Starting Activity Stats API...")
    await init_db()
    logger.info("Database initialized")

    strava = StravaClient()
    cache_client = create_cache_client(AsyncSessionLocal)
    app.state.strava = strava
    app.state.coordinator = SyncCoordinator(PageFetcher(strava), cache_client)
    logger.info(f"Sync coordinator ready (cache backend: {settings.cache_backend})")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await app.state.coordinator.close()
    await cache_client.close()
    await strava.close()


# === App Creation ===
app = FastAPI(
    title="Activity Stats API",
    description="Strava activity sync and yearly summaries",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# === Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# === Routes ===
app.include_router(cache.router, prefix="/api", tags=["Cache"])
app.include_router(api_router, prefix="/api/v1")


# === Health Check ===
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}
