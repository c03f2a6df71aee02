"""Command line entry points for the local activity store."""

import asyncio

import typer
import uvicorn
from loguru import logger
from rich.console import Console
from rich.table import Table

from . import ingest, models
from .config import settings
from .db import engine, session_scope
from .logger import setup_logger
from .models import Activity, StravaToken
from .oauth import AuthorizationError
from .rollup import get_weekly_summaries
from .schemas import StravaActivityIn
from .strava import StravaAPIError
from .tokens import TokenCache, TokenManager, scope_list, token_status
from .utils_time import format_duration, format_time_from_hours

console = Console()

app = typer.Typer(
    name="runlog",
    help="Runlog - Strava activity sync and weekly training summaries",
    add_completion=False,
)

@app.callback()
def main(debug: bool = typer.Option(False, "--debug", help="Enable debug logging")) -> None:
    setup_logger("DEBUG" if debug else settings.LOG_LEVEL, settings.LOG_FILE)
    models.Base.metadata.create_all(bind=engine)

def _run(coro) -> None:
    try:
        asyncio.run(coro)
    except (StravaAPIError, AuthorizationError) as e:
        logger.error(str(e))
        raise typer.Exit(code=1)

def print_activities(activities: list[StravaActivityIn]) -> None:
    table = Table(title=f"Found {len(activities)} activities")
    for col in ("#", "Name", "Type", "Distance", "Moving", "Elapsed", "Elev. Gain", "Start", "Kudos", "Location"):
        table.add_column(col)
    for i, a in enumerate(activities, start=1):
        location = ", ".join(p for p in (a.location_city, a.location_state, a.location_country) if p)
        table.add_row(
            str(i),
            a.name or "",
            a.type or "",
            f"{(a.distance or 0) / 1000:.2f} km",
            format_duration(a.moving_time or 0),
            format_duration(a.elapsed_time or 0),
            f"{a.total_elevation_gain or 0} m",
            a.start_date_local.strftime("%Y-%m-%d %H:%M") if a.start_date_local else "",
            str(a.kudos_count or 0),
            location,
        )
    console.print(table)

@app.command()
def fetch(
    page: int = typer.Option(1, "--page", help="Page of activities to fetch"),
    per_page: int = typer.Option(settings.FETCH_PER_PAGE, "--per-page", help="Activities per page"),
    summary_only: bool = typer.Option(False, "--summary-only", help="Skip the per-activity detail requests"),
) -> None:
    """Fetch activities from Strava, store them and print them."""

    async def run():
        with session_scope() as db:
            tokens = TokenManager(db, TokenCache())
            activities = await ingest.fetch_activities(tokens, page=page, per_page=per_page)
            if not activities:
                console.print("No activities found.")
                return
            saved = await ingest.save_activities(db, tokens, activities, detailed=not summary_only)
            print_activities(activities)
            console.print(f"Saved {saved} of {len(activities)} activities")
            console.print(f"Total activities in database: [bold]{ingest.activity_count(db)}[/bold]")

    _run(run())

@app.command()
def weekly() -> None:
    """Print the summary of every week with activities."""
    with session_scope() as db:
        reports = get_weekly_summaries(ingest.list_activities(db, settings.PRIMARY_ACTIVITY_TYPE))

    if not reports:
        console.print("No activity data available for weekly breakdown.")
        return

    table = Table(title="Weekly Training")
    for col in ("Week", "Dates", "Runs", "Miles", "Time", "Avg Pace", "Calories", "Avg HR"):
        table.add_column(col)
    for r in reports:
        s = r.summary
        hr = s.average_heart_rate
        table.add_row(
            str(r.week_number),
            r.label,
            str(s.total_runs),
            f"{s.total_miles:.2f}",
            format_time_from_hours(s.total_time_hours) if s.total_time else "",
            f"{s.average_pace} /mi" if s.average_pace else "",
            f"{round(s.total_calories):,}" if s.total_calories else "",
            f"{round(hr)} bpm" if hr is not None else "",
        )
    console.print(table)

@app.command()
def authorize() -> None:
    """Connect a Strava account through the browser."""

    async def run():
        with session_scope() as db:
            tokens = TokenManager(db, TokenCache(), interactive=True)
            await tokens.authorize()
            console.print(f"[green]Authorization successful[/green] (scopes: {', '.join(scope_list(tokens.cache.scope)) or 'none'})")

    _run(run())

@app.command("token-status")
def show_token_status() -> None:
    """Show the stored token's scopes and expiry."""
    with session_scope() as db:
        status = token_status(db)
    if not status.has_token:
        console.print("[yellow]No Strava token stored.[/yellow] Run `runlog authorize`.")
        return
    console.print(f"Scopes: {', '.join(status.scopes) or 'none'}")
    console.print(f"Read access: {'yes' if status.has_read_scope else 'no'}")
    console.print(f"Write access: {'yes' if status.has_write_scope else 'no'}")
    console.print(f"Expires at: {status.expires_at:%Y-%m-%d %H:%M:%S %Z}")

@app.command()
def truncate(yes: bool = typer.Option(False, "--yes", help="Confirm deletion")) -> None:
    """Delete every stored activity and token."""
    if not yes:
        console.print("[red]Refusing to truncate without --yes[/red]")
        raise typer.Exit(code=1)
    with session_scope() as db:
        activities = db.query(Activity).delete()
        tokens = db.query(StravaToken).delete()
        db.commit()
    console.print(f"Deleted {activities} activities")
    console.print(f"Deleted {tokens} tokens")

@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(3001, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
) -> None:
    """Run the API server."""
    logger.info(f"Starting API server on {host}:{port} (reload={reload})")
    uvicorn.run("runlog.main:app", host=host, port=port, reload=reload)

if __name__ == "__main__":
    app()
