"""
Formatting utilities for display.
"""


def format_distance(meters: float) -> str:
    """
    Format meters as kilometers with one decimal.

    Args:
        meters: Distance in meters

    Returns:
        Formatted string (e.g., '12.5')
    """
    return f"{meters / 1000:.1f}"


def format_duration(seconds: float) -> str:
    """
    Format seconds as 'Xh Ym'.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted string (e.g., '2h 30m')
    """
    total = int(seconds)
    hours = total // 3600
    minutes = (total % 3600) // 60
    return f"{hours}h {minutes}m"


def format_elevation(meters: float) -> str:
    """
    Format elevation with thousands separators.

    Args:
        meters: Elevation in meters

    Returns:
        Formatted string (e.g., '12,480 m')
    """
    return f"{round(meters):,} m"
