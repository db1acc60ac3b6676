"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

from datetime import timezone, tzinfo
from pathlib import Path
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator, ConfigDict

# Project root: activity-stats/
PROJECT_ROOT = Path(__file__).parent.parent


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # === Database ===
    database_url: str = Field(
        default="sqlite:///./activity_stats.db",
        description="Database connection URL"
    )

    # === CORS ===
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins"
    )

    # === Strava ===
    strava_api_url: str = Field(default="https://www.strava.com/api/v3")
    strava_timeout_seconds: float = Field(
        default=30.0,
        description="Per-request timeout for Strava API calls"
    )
    strava_rate_limit_short: int = Field(
        default=200,
        description="Requests allowed per 15 minutes"
    )
    strava_rate_limit_daily: int = Field(default=2000)

    # === Sync ===
    sync_page_size: int = Field(
        default=200,
        description="Activities requested per listing page (Strava max is 200)"
    )

    # === Cache store ===
    cache_backend: str = Field(
        default="database",
        description="'database' for the local store, 'http' for a remote cache server"
    )
    cache_api_url: Optional[str] = Field(
        default=None,
        description="Base URL of the remote cache server (cache_backend=http)"
    )

    # === Summary ===
    summary_timezone: str = Field(
        default="UTC",
        description="IANA zone used for year filtering and month bucketing"
    )

    @field_validator('database_url')
    @classmethod
    def fix_postgres_url(cls, v: str) -> str:
        """Fix Render/Railway postgres:// URL to postgresql://"""
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',')]
        return v

    @field_validator('cache_backend')
    @classmethod
    def check_cache_backend(cls, v: str) -> str:
        v = v.lower()
        if v not in ("database", "http"):
            raise ValueError("cache_backend must be 'database' or 'http'")
        return v

    @field_validator('sync_page_size')
    @classmethod
    def check_page_size(cls, v: int) -> int:
        if not 1 <= v <= 200:
            raise ValueError("sync_page_size must be between 1 and 200")
        return v

    @field_validator('summary_timezone')
    @classmethod
    def check_timezone(cls, v: str) -> str:
        if v.upper() == "UTC":
            return "UTC"
        try:
            ZoneInfo(v)
        except ZoneInfoNotFoundError as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @property
    def summary_tz(self) -> tzinfo:
        """Time reference shared by year filtering and month bucketing."""
        if self.summary_timezone == "UTC":
            return timezone.utc
        return ZoneInfo(self.summary_timezone)

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
