"""Tidefinder CLI - Main application entry point and commands."""

from importlib.metadata import PackageNotFoundError, version
from typing import Annotated

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
import typer

from src.config import get_logger, settings, setup_loguru_logger
from src.domain.entities.conversion import ConversionResult
from src.infrastructure.cli.async_helpers import async_command
from src.infrastructure.cli.ui import (
    display_conversion,
    display_resolution,
    display_search_results,
)
from src.infrastructure.factories import create_engine

try:
    VERSION = version("tidefinder")
except PackageNotFoundError:
    VERSION = "0.0.0"

console = Console(width=100)
logger = get_logger(__name__)

app = typer.Typer(
    help=f"🎵 Tidefinder v{VERSION} - Catalog search and link resolution",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
    pretty_exceptions_enable=True,
    pretty_exceptions_short=True,
    pretty_exceptions_show_locals=False,
)

LimitOption = Annotated[
    int | None,
    typer.Option("--limit", "-l", min=1, help="Results per facet"),
]
BaseUrlOption = Annotated[
    str | None,
    typer.Option("--base-url", envvar="CATALOG_BASE_URL", help="Catalog endpoint"),
]


@app.command(name="search", rich_help_panel="🔎 Catalog")
@async_command
async def search_command(
    query: Annotated[str, typer.Argument(help="Free-text query")],
    limit: LimitOption = None,
    base_url: BaseUrlOption = None,
) -> None:
    """Search tracks, artists, albums and playlists."""
    async with create_engine(base_url=base_url) as engine:
        items = await engine.aggregator.search(query, limit=limit)
    display_search_results(items, query)


@app.command(name="resolve", rich_help_panel="🔎 Catalog")
@async_command
async def resolve_command(
    link: Annotated[str, typer.Argument(help="Share link or free-text query")],
    base_url: BaseUrlOption = None,
) -> None:
    """Resolve a share link (or query) to a track, page or candidates."""
    async with create_engine(base_url=base_url) as engine:
        resolution = await engine.resolver.execute(link)
    display_resolution(resolution)


@app.command(name="convert", rich_help_panel="🎵 Playlists")
@async_command
async def convert_command(
    playlist: Annotated[str, typer.Argument(help="Foreign playlist URL or id")],
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-l", min=1, help="Convert only the first N tracks"),
    ] = None,
    base_url: BaseUrlOption = None,
) -> None:
    """Match a foreign playlist's tracks against the catalog."""
    async with create_engine(base_url=base_url) as engine:
        engine.catalog.ensure_configured()
        sources = await engine.converter.load_playlist(playlist)
        if limit is not None:
            sources = sources[:limit]
        if not sources:
            console.print(f"[yellow]No tracks found in playlist {playlist}[/yellow]")
            raise typer.Exit(code=1)

        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Matching tracks", total=len(sources))

            def on_progress(done: int, total: int, result: ConversionResult) -> None:
                progress.update(
                    task, completed=done, description=result.source_track.label[:40]
                )

            results = await engine.converter.execute(sources, progress=on_progress)

    display_conversion(results)


@app.command(name="version", rich_help_panel="⚙️ System")
def version_command() -> None:
    """Show version information."""
    console.print(
        f"[bold bright_blue]🎵 Tidefinder[/bold bright_blue] [dim]v{VERSION}[/dim]"
    )


@app.callback()
def init_cli(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output"),
    ] = False,
) -> None:
    """Initialize Tidefinder CLI."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_loguru_logger(verbose)
    logger.debug("CLI initialized", catalog=settings.catalog.base_url or None)


def main() -> int:
    """Application entry point."""
    try:
        return app() or 0
    except Exception:
        logger.exception("Unhandled exception")
        return 1
