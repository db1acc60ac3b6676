"""
Activity summary module.

Usage:
    from activity_stats.features.summary import compute_summary, ALL_TIME

Components:
- compute_summary: Pure yearly / all-time aggregation
- SessionState: Immutable session record with recompute-on-change transitions
- report helpers: Monthly series, type breakdown, headline values
"""

from .models import (
    ALL_TIME,
    TOP_N,
    MonthBucket,
    MonthBuckets,
    Summary,
    TypeBucket,
    TypeBuckets,
    YearSelector,
    parse_year_selector,
)
from .aggregator import compute_summary, filter_by_year, local_start, top_by
from .session import (
    CacheInfo,
    SessionPhase,
    SessionState,
    cleared,
    logged_out,
    recompute,
    start_session,
    with_sync_error,
    with_sync_result,
    with_year,
)
from .report import (
    Headline,
    MonthRow,
    TypeRow,
    available_years,
    headline,
    monthly_series,
    type_breakdown,
)

__all__ = [
    # Models
    "ALL_TIME",
    "TOP_N",
    "MonthBucket",
    "MonthBuckets",
    "Summary",
    "TypeBucket",
    "TypeBuckets",
    "YearSelector",
    "parse_year_selector",
    # Aggregation
    "compute_summary",
    "filter_by_year",
    "local_start",
    "top_by",
    # Session
    "CacheInfo",
    "SessionPhase",
    "SessionState",
    "cleared",
    "logged_out",
    "recompute",
    "start_session",
    "with_sync_error",
    "with_sync_result",
    "with_year",
    # Report
    "Headline",
    "MonthRow",
    "TypeRow",
    "available_years",
    "headline",
    "monthly_series",
    "type_breakdown",
]
