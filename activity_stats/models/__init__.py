"""
Database Models

Feature models live in their feature packages and register against Base.
"""

from activity_stats.models.base import Base

__all__ = ["Base"]
