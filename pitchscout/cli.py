"""
PitchScout CLI
==============

Command-line interface for operating the service and talking to the API.

Usage:
    pitchscout <command> [options]
    python -m pitchscout <command> [options]

Commands:
    db:init                        Create database tables
    clubs:seed                     Load the reference clubs
    usage:show                     Show a user's counters for today
    usage:prune                    Delete old usage counters
    video:upload                   Upload a match video through the API
    coach:chat                     Stream a reply from the AI coach

Examples:
    pitchscout db:init
    pitchscout clubs:seed --force
    pitchscout usage:show --user-id 6f1c...
    pitchscout usage:prune --days 30
    pitchscout video:upload match.mp4 --token $TOKEN
    pitchscout coach:chat "How can I improve my weak foot?" --intent improvement --token $TOKEN
"""

import asyncio
import sys
from datetime import date
from pathlib import Path
from typing import Optional
from uuid import UUID

import click
from rich.console import Console
from rich.table import Table

from pitchscout.errors import PitchScoutError
from pitchscout.models import AIEndpoint, ChatIntent

console = Console()


def parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError:
        raise click.BadParameter(f"Invalid user id: {value}. Expected a UUID")


def parse_day(value: Optional[str]) -> Optional[date]:
    """Parse a YYYY-MM-DD date."""
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"Invalid date: {value}. Use YYYY-MM-DD")


def fail(error: PitchScoutError) -> None:
    console.print(f"[bold red]Error ({error.status_code}):[/bold red] {error.message}")
    sys.exit(1)


@click.group()
@click.version_option(version="1.0.0")
def cli():
    """PitchScout - AI scouting for youth football."""
    pass


# =============================================================================
# DATABASE COMMANDS
# =============================================================================

@cli.command("db:init")
def cmd_db_init():
    """Create every table from the ORM metadata."""
    from pitchscout.database import create_all, engine

    async def run():
        try:
            await create_all()
        finally:
            await engine.dispose()

    console.print("\n[bold]PitchScout - Database Init[/bold]\n")
    asyncio.run(run())
    console.print("[green]Tables created.[/green]")


@cli.command("clubs:seed")
@click.option("--force", is_flag=True, help="Delete existing clubs and matches before loading")
def cmd_clubs_seed(force: bool):
    """Load or refresh the reference clubs (idempotent)."""
    from pitchscout.database import async_session_factory, engine
    from pitchscout.seed_data import seed_clubs

    async def run():
        try:
            async with async_session_factory() as session:
                return await seed_clubs(session, force=force)
        finally:
            await engine.dispose()

    console.print("\n[bold]PitchScout - Club Seed[/bold]\n")
    counts = asyncio.run(run())
    console.print(f"[green]Created {counts['created']}, updated {counts['updated']} clubs.[/green]")


# =============================================================================
# USAGE COMMANDS
# =============================================================================

@cli.command("usage:show")
@click.option("--user-id", required=True, help="User id (UUID)")
@click.option("--day", type=str, default=None, help="UTC day (YYYY-MM-DD), default today")
def cmd_usage_show(user_id: str, day: Optional[str]):
    """Show a user's AI request counters for one day."""
    from pitchscout.database import async_session_factory, engine
    from pitchscout.rate_limit import default_limits, get_usage_for_day, utc_today

    uid = parse_uuid(user_id)
    usage_day = parse_day(day) or utc_today()

    async def run():
        try:
            async with async_session_factory() as session:
                return await get_usage_for_day(session, uid, usage_day)
        finally:
            await engine.dispose()

    rows = {row.endpoint: row for row in asyncio.run(run())}
    limits = default_limits()

    table = Table(title=f"Usage for {uid} on {usage_day.isoformat()} (UTC)")
    table.add_column("Endpoint", style="cyan")
    table.add_column("Requests", justify="right")
    table.add_column("Limit", justify="right")
    table.add_column("Last request")

    for endpoint in AIEndpoint:
        row = rows.get(endpoint.value)
        count = row.request_count if row else 0
        limit = limits[endpoint]
        style = "red" if count >= limit else "green"
        table.add_row(
            endpoint.value,
            f"[{style}]{count}[/]",
            str(limit),
            row.last_request_at.strftime("%H:%M:%S") if row and row.last_request_at else "-",
        )

    console.print(table)


@cli.command("usage:prune")
@click.option("--days", type=int, default=30, help="Keep counters from the last N days")
def cmd_usage_prune(days: int):
    """Delete usage counters older than the given number of days."""
    from pitchscout.database import async_session_factory, engine
    from pitchscout.rate_limit import prune_usage

    if days < 1:
        raise click.BadParameter("--days must be at least 1")

    async def run():
        try:
            async with async_session_factory() as session:
                return await prune_usage(session, days)
        finally:
            await engine.dispose()

    removed = asyncio.run(run())
    console.print(f"[green]Removed {removed} usage rows older than {days} days.[/green]")


# =============================================================================
# CLIENT COMMANDS
# =============================================================================

@cli.command("video:upload")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--title", type=str, default=None, help="Video title (default: file name)")
@click.option("--token", type=str, default=None, envvar="API_TOKEN", help="Bearer access token")
@click.option("--base-url", type=str, default=None, help="API base URL")
def cmd_video_upload(path: Path, title: Optional[str], token: Optional[str], base_url: Optional[str]):
    """Upload a match video. Files are checked locally before sending."""
    from pitchscout.client import PitchScoutClient

    async def run():
        async with PitchScoutClient(base_url=base_url, token=token) as api:
            return await api.upload_video(path, title=title)

    try:
        video = asyncio.run(run())
    except PitchScoutError as e:
        fail(e)
        return

    table = Table(title="Uploaded Video")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for field in ("id", "title", "content_type", "size_bytes", "video_url"):
        table.add_row(field, str(video.get(field)))
    console.print(table)


@cli.command("coach:chat")
@click.argument("message")
@click.option(
    "--intent",
    type=click.Choice([i.value for i in ChatIntent]),
    default=ChatIntent.GENERAL.value,
    help="Coaching mode",
)
@click.option("--token", type=str, default=None, envvar="API_TOKEN", help="Bearer access token")
@click.option("--base-url", type=str, default=None, help="API base URL")
def cmd_coach_chat(message: str, intent: str, token: Optional[str], base_url: Optional[str]):
    """Ask the AI coach and print the reply as it streams in."""
    from pitchscout.client import PitchScoutClient

    async def run():
        async with PitchScoutClient(base_url=base_url, token=token) as api:
            async for fragment in api.stream_chat(message, intent=intent):
                console.print(fragment, end="", markup=False, highlight=False, soft_wrap=True)
        console.print()

    try:
        asyncio.run(run())
    except PitchScoutError as e:
        fail(e)


if __name__ == "__main__":
    cli()
