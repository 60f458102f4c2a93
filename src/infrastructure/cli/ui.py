"""UI helpers for CLI interaction.

Rendering of search results, link resolutions and conversion reports, plus
the shared error handling for commands. Presentation only: nothing here
talks to the catalog.
"""

from collections.abc import Callable
import functools

from rich.console import Console
from rich.table import Table
import typer

from src.config import get_logger
from src.domain.entities.catalog import Album, Artist, CatalogItem, Playlist, Track
from src.domain.entities.conversion import ConversionResult, ConversionSummary
from src.domain.entities.links import LinkResolution, ResolutionOutcome

console = Console()
logger = get_logger(__name__)

_KIND_STYLES = {
    "track": "cyan",
    "artist": "magenta",
    "album": "green",
    "playlist": "yellow",
}


def command_error_handler[**P, R](func: Callable[P, R]) -> Callable[P, R]:
    """Decorator to standardize error handling for CLI commands.

    Logs the failure with the command name as context, prints a short
    message and exits with code 1. ``typer.Exit`` and ``typer.Abort`` pass
    through untouched.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        operation = func.__name__.replace("_", " ")

        with logger.contextualize(operation=operation):
            try:
                logger.debug(f"Executing {operation}")
                return func(*args, **kwargs)

            except typer.Exit:
                raise

            except typer.Abort:
                logger.info(f"Operation {operation} aborted by user")
                raise

            except Exception as e:
                logger.exception(f"Error during {operation}")
                console.print(f"\n[bold red]✗ Error during {operation}:[/bold red] {e}")
                raise typer.Exit(code=1) from e

    return wrapper


def _format_duration(seconds: int | None) -> str:
    if not seconds:
        return ""
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}:{secs:02d}"


def _describe(item: CatalogItem) -> tuple[str, str]:
    """Secondary text and duration column for a catalog item."""
    match item:
        case Track():
            detail = " · ".join(p for p in (item.artist_name, item.album_title) if p)
            return detail, _format_duration(item.duration)
        case Album():
            return item.artist_name, ""
        case Artist():
            return "", ""
        case Playlist():
            tracks = f"{item.number_of_tracks} tracks" if item.number_of_tracks else ""
            detail = " · ".join(p for p in (item.creator_name or "", tracks) if p)
            return detail, ""


def render_search_results(items: list[CatalogItem], title: str) -> Table:
    table = Table(title=title, show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Kind")
    table.add_column("Name", style="bold")
    table.add_column("Details")
    table.add_column("Length", justify="right")
    table.add_column("ID", style="dim")

    for position, item in enumerate(items, start=1):
        style = _KIND_STYLES.get(str(item.kind), "white")
        detail, length = _describe(item)
        table.add_row(
            str(position),
            f"[{style}]{item.kind}[/{style}]",
            item.display_name,
            detail,
            length,
            item.id,
        )
    return table


def display_search_results(items: list[CatalogItem], query: str) -> None:
    if not items:
        console.print(f"[yellow]No results for '{query}'[/yellow]")
        return
    console.print(render_search_results(items, f"Results for '{query}'"))


def display_resolution(resolution: LinkResolution) -> None:
    """Print what a link resolved to."""
    via = (
        f" [dim](via {resolution.resolved_via})[/dim]"
        if resolution.resolved_via
        else ""
    )

    match resolution.outcome:
        case ResolutionOutcome.PLAY:
            name = resolution.track.display_name if resolution.track else ""
            stream_url = (resolution.stream or {}).get("url")
            console.print(
                f"[bold green]▶ Play track {resolution.target_id}[/bold green] "
                f"{name}{via}"
            )
            if stream_url:
                console.print(f"[dim]{stream_url[:120]}[/dim]")
            elif resolution.stream is None:
                console.print("[yellow]No playable stream available[/yellow]")
        case ResolutionOutcome.NAVIGATE:
            console.print(
                f"[bold blue]→ Open {resolution.entity} "
                f"{resolution.target_id}[/bold blue]{via}"
            )
        case ResolutionOutcome.CANDIDATES:
            query = resolution.query or resolution.link.text
            if resolution.candidates:
                table = render_search_results(
                    list(resolution.candidates), f"Candidates for '{query}'"
                )
                console.print(table)
            else:
                console.print(f"[yellow]Nothing found for '{query}'[/yellow]{via}")


def render_conversion(results: list[ConversionResult]) -> Table:
    table = Table(title="Playlist conversion")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Source")
    table.add_column("Match")
    table.add_column("ID", style="dim")

    for position, result in enumerate(results, start=1):
        if result.resolved_track is not None:
            track = result.resolved_track
            match_text = f"[green]{track.artist_name} - {track.title}[/green]"
            track_id = track.id
        elif result.error is not None:
            match_text = f"[red]{result.error}[/red]"
            track_id = ""
        else:
            match_text = "[dim]pending[/dim]"
            track_id = ""
        table.add_row(str(position), result.source_track.label, match_text, track_id)
    return table


def display_conversion(results: list[ConversionResult]) -> None:
    console.print(render_conversion(results))
    summary = ConversionSummary.from_results(results)
    console.print(
        f"[bold]{summary.found}/{summary.total}[/bold] found, "
        f"[red]{summary.failed}[/red] failed, "
        f"[dim]{summary.pending} pending[/dim]"
    )
