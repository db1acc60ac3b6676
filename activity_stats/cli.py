"""
CLI interface for activity sync and summaries.

Usage:
    activity-stats sync --athlete-id <id> --token <token>
    activity-stats summary --athlete-id <id> --token <token> --year 2024
    activity-stats summary --athlete-id <id> --token <token> --year all
    activity-stats clear --athlete-id <id>
"""

import asyncio
import logging
import sys

import click

from activity_stats.config import settings
from activity_stats.db.session import init_db
from activity_stats.features.activities import create_cache_client
from activity_stats.features.strava import StravaClient
from activity_stats.features.summary import (
    SessionState,
    headline,
    monthly_series,
    parse_year_selector,
    start_session,
    type_breakdown,
    with_sync_result,
)
from activity_stats.features.sync import PageFetcher, SyncCoordinator, SyncResult
from activity_stats.shared.errors import AuthError, CacheUnavailable, SyncError
from activity_stats.shared.formatters import (
    format_distance,
    format_duration,
    format_elevation,
)

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, settings.log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def _parse_year(ctx, param, value):
    if value is None:
        return None
    try:
        return parse_year_selector(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
def cli(verbose):
    """Strava activity sync and yearly summaries."""
    _setup_logging(verbose)


@cli.command()
@click.option("--athlete-id", required=True, help="Strava athlete ID")
@click.option("--token", required=True, envvar="STRAVA_ACCESS_TOKEN", help="Strava access token")
def sync(athlete_id, token):
    """Force a full sync, replacing the cached activities."""
    asyncio.run(_run(athlete_id, token, year=None, force=True, show_summary=False))


@cli.command()
@click.option("--athlete-id", required=True, help="Strava athlete ID")
@click.option("--token", required=True, envvar="STRAVA_ACCESS_TOKEN", help="Strava access token")
@click.option(
    "--year",
    default=None,
    callback=_parse_year,
    help="Year to summarize (e.g. 2024) or 'all'. Defaults to the current year."
)
@click.option("--refresh", is_flag=True, help="Sync from Strava even if cached")
def summary(athlete_id, token, year, refresh):
    """
    Print the summary for one year or all time.

    Uses the cached activities when present, otherwise syncs first.
    """
    asyncio.run(_run(athlete_id, token, year=year, force=refresh, show_summary=True))


@cli.command()
@click.option("--athlete-id", required=True, help="Strava athlete ID")
def clear(athlete_id):
    """Delete the athlete's cached activities."""
    asyncio.run(_clear(athlete_id))


async def _run(athlete_id: str, token: str, year, force: bool, show_summary: bool):
    """Async implementation of sync / summary commands."""
    await init_db()

    strava = StravaClient()
    cache_client = create_cache_client()
    coordinator = SyncCoordinator(PageFetcher(strava), cache_client)

    try:
        if force:
            click.echo(f"Syncing activities for athlete {athlete_id}...")
            result = await coordinator.force_sync(token, athlete_id)
        else:
            result = await coordinator.load_or_sync(athlete_id, token)
    except AuthError:
        click.echo("Strava rejected the access token. Re-authenticate and try again.", err=True)
        sys.exit(1)
    except SyncError as e:
        click.echo(f"Sync failed: {e}", err=True)
        sys.exit(1)
    finally:
        await coordinator.close()
        await cache_client.close()
        await strava.close()

    _print_result(result)

    if show_summary:
        state = with_sync_result(start_session(athlete_id, year, tz=settings.summary_tz), result)
        _print_summary(state)


async def _clear(athlete_id: str):
    await init_db()
    strava = StravaClient()
    cache_client = create_cache_client()
    coordinator = SyncCoordinator(PageFetcher(strava), cache_client)
    try:
        deleted = await coordinator.clear(athlete_id)
    except CacheUnavailable as e:
        click.echo(f"Could not clear cache: {e}", err=True)
        sys.exit(1)
    finally:
        await strava.close()
        await cache_client.close()

    if deleted:
        click.echo(f"Cleared cached activities for athlete {athlete_id}")
    else:
        click.echo(f"No cached activities for athlete {athlete_id}")


def _print_result(result: SyncResult) -> None:
    click.echo(f"Source: {result.source.value} ({result.count} activities)")
    if result.last_updated:
        click.echo(f"Last updated: {result.last_updated:%Y-%m-%d %H:%M:%S %Z}")
    if result.error:
        click.echo(f"Sync error: {result.error}", err=True)
    if result.warning:
        click.echo(f"Warning: {result.warning}", err=True)


def _print_summary(state: SessionState) -> None:
    s = state.summary
    h = headline(s)

    click.echo()
    click.echo("=" * 50)
    click.echo(f"  {h.period_label}")
    click.echo("=" * 50)
    click.echo(f"  Activities:      {h.total_activities}")
    click.echo(f"  Distance:        {h.distance_km} km (avg {h.avg_distance_km} km)")
    click.echo(f"  Moving time:     {h.duration}")
    click.echo(f"  Elevation gain:  {format_elevation(h.elevation_m)} ({h.everest_multiple}x Everest)")

    rows = type_breakdown(s)
    if rows:
        click.echo()
        click.echo("  By type:")
        for row in rows:
            click.echo(f"    {row.name:<16} {row.count:>5}  {row.distance_km:>7} km")

    if not s.is_all_time and s.total_count:
        click.echo()
        click.echo("  By month:")
        for row in monthly_series(s):
            click.echo(
                f"    {row.name}  {row.activities:>4}  {row.distance_km:>6} km  "
                f"{row.time_hours:>6} h  {row.elevation_m:>6} m"
            )

    if s.top_distance:
        click.echo()
        click.echo("  Longest:")
        for a in s.top_distance:
            click.echo(
                f"    {format_distance(a.distance_m):>7} km  "
                f"{format_duration(a.moving_time_s):>8}  {a.name or a.id}"
            )

    if s.top_elevation:
        click.echo()
        click.echo("  Most climbing:")
        for a in s.top_elevation:
            click.echo(f"    {format_elevation(a.elevation_gain_m):>9}  {a.name or a.id}")


if __name__ == "__main__":
    cli()
