"""
Shared utilities (NOT business logic).

Usage:
    from activity_stats.shared import format_distance, format_duration
    from activity_stats.shared.errors import AuthError
"""
from .formatters import (
    format_distance,
    format_duration,
    format_elevation,
)
from .repository import BaseRepository

__all__ = [
    "format_distance",
    "format_duration",
    "format_elevation",
    "BaseRepository",
]
