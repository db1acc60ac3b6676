"""Activity Stats: Strava activity sync and yearly summaries."""

__version__ = "0.1.0"
