"""Command-line interface using Typer."""

from collections.abc import Awaitable, Callable
from typing import Optional, TypeVar

import typer
from rich.console import Console
from rich.table import Table

from video_atlas import __version__
from video_atlas.deps import (
    build_cache_coordinator,
    build_query_facade,
    get_geocoding_backend,
    get_store,
)
from video_atlas.domain.enums import SortOption
from video_atlas.domain.models import FilterOptions, Video
from video_atlas.domain.state import Empty, Error, Result, Success, state_from_result
from video_atlas.logging import setup_logging
from video_atlas.services.cache import CacheCoordinator
from video_atlas.services.geocoder import Geocoder
from video_atlas.utils.async_utils import run_async
from video_atlas.utils.dates import format_date_for_display

T = TypeVar("T")

app = typer.Typer(
    name="video-atlas",
    help="Video Atlas - aggregate, enrich and browse channel videos",
    add_completion=False,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"Video Atlas v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Video Atlas - aggregate, enrich and browse channel videos."""
    setup_logging()


def render_videos(videos: list[Video], title: str) -> Table:
    """Build a table of videos for display."""
    table = Table(title=title)
    table.add_column("Published", style="cyan", no_wrap=True)
    table.add_column("Channel", style="magenta")
    table.add_column("Title")
    table.add_column("Location", style="green")
    table.add_column("Recorded", style="dim")
    table.add_column("Tags", style="dim")

    for video in videos:
        location = ", ".join(part for part in (video.location_city, video.location_country) if part)
        table.add_row(
            format_date_for_display(video.published_at),
            video.channel_name,
            video.title[:60],
            location,
            format_date_for_display(video.recording_date),
            ", ".join(video.tags[:3]),
        )
    return table


def _run_with_coordinator(action: Callable[[CacheCoordinator], Awaitable[T]]) -> T:
    store = get_store()
    coordinator = build_cache_coordinator(store)

    async def _run() -> T:
        try:
            return await action(coordinator)
        finally:
            await coordinator.pipeline.close()

    return run_async(_run())


def _print_result(result: Result[list[Video]], title: str) -> None:
    state = state_from_result(result)
    if isinstance(state, Error):
        console.print(f"[bold red]✗ {state.message}[/bold red]")
        raise typer.Exit(code=1)
    if isinstance(state, Empty):
        console.print("[yellow]No videos found.[/yellow]")
        return
    if isinstance(state, Success):
        console.print(render_videos(state.videos, title))
        console.print(f"[dim]{len(state.videos)} videos[/dim]")


@app.command()
def latest() -> None:
    """Show the latest videos, fetching only when the cache is stale."""
    result = _run_with_coordinator(lambda coordinator: coordinator.get_latest())
    _print_result(result, "Latest Videos")


@app.command()
def refresh() -> None:
    """Fetch and enrich videos from every channel, ignoring the cache."""
    console.print("[bold blue]Refreshing videos...[/bold blue]")
    result = _run_with_coordinator(lambda coordinator: coordinator.refresh())
    _print_result(result, "Refreshed Videos")


@app.command("list")
def list_videos(
    channel: Optional[str] = typer.Option(None, "--channel", "-c", help="Exact channel name"),
    country: Optional[str] = typer.Option(None, "--country", help="Exact recording country"),
    sort: SortOption = typer.Option(
        SortOption.PUBLICATION_DATE_NEWEST,
        "--sort",
        "-s",
        help="Sort order",
    ),
) -> None:
    """List cached videos with optional filters, without fetching."""
    facade = build_query_facade(get_store())
    videos = facade.snapshot(FilterOptions(channel_name=channel, country=country), sort)
    if not videos:
        console.print("[yellow]No videos match.[/yellow]")
        return
    console.print(render_videos(videos, "Videos"))
    console.print(f"[dim]{len(videos)} of {facade.total_count()} videos[/dim]")


@app.command()
def facets() -> None:
    """Show the channels and countries available for filtering."""
    facade = build_query_facade(get_store())

    table = Table(title="Filter Options")
    table.add_column("Facet", style="cyan")
    table.add_column("Values")
    table.add_row("Channels", ", ".join(sorted(facade.distinct_channels())) or "-")
    table.add_row("Countries", ", ".join(sorted(facade.distinct_countries())) or "-")
    console.print(table)


@app.command()
def count() -> None:
    """Show the number of cached videos."""
    console.print(build_query_facade(get_store()).total_count())


@app.command()
def purge() -> None:
    """Delete cached videos older than the cache TTL."""
    store = get_store()
    removed = build_cache_coordinator(store).purge_expired()
    console.print(f"[green]Removed {removed} expired videos[/green]")


@app.command("geocode-check")
def geocode_check() -> None:
    """Resolve a known coordinate to verify reverse geocoding works."""
    geocoder = Geocoder(get_geocoding_backend())

    async def _check():
        try:
            return await geocoder.self_test()
        finally:
            await geocoder.close()

    place = run_async(_check())
    if place.is_empty:
        console.print("[bold yellow]Geocoder returned no location[/bold yellow]")
        raise typer.Exit(code=1)
    console.print(f"[bold green]✓ {place.city}, {place.country}[/bold green]")


if __name__ == "__main__":
    app()
