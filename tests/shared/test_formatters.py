"""
Tests for display formatters.
"""

from activity_stats.shared.formatters import (
    format_distance,
    format_duration,
    format_elevation,
)


# =============================================================================
# Test Distance
# =============================================================================

class TestFormatDistance:
    """Tests for format_distance."""

    def test_one_decimal_km(self):
        assert format_distance(12500) == "12.5"

    def test_rounds(self):
        assert format_distance(1049) == "1.0"
        assert format_distance(1051) == "1.1"

    def test_zero(self):
        assert format_distance(0) == "0.0"


# =============================================================================
# Test Duration
# =============================================================================

class TestFormatDuration:
    """Tests for format_duration."""

    def test_hours_and_minutes(self):
        assert format_duration(9000) == "2h 30m"

    def test_under_an_hour(self):
        assert format_duration(59 * 60) == "0h 59m"

    def test_seconds_truncated(self):
        assert format_duration(3600 + 59) == "1h 0m"

    def test_many_hours(self):
        assert format_duration(250 * 3600 + 5 * 60) == "250h 5m"


# =============================================================================
# Test Elevation
# =============================================================================

class TestFormatElevation:
    """Tests for format_elevation."""

    def test_thousands_separator(self):
        assert format_elevation(12480.4) == "12,480 m"

    def test_small(self):
        assert format_elevation(87) == "87 m"
