"""
Shared CLI utilities and base functionality.

Rendering helpers for content/episode records and access to the aggregator
stored on the click context.
"""
import json
from typing import Any, Callable, List, Sequence

import click
from rich import box
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ..config import get_config
from ..logging import console, get_logger
from ..mock_data import is_mock_content, is_mock_episode
from ..models import ContentItem, EpisodeItem
from ..service import ContentAggregator

logger = get_logger(__name__)


def get_aggregator(ctx: click.Context) -> ContentAggregator:
    """
    Returns the aggregator the `cli` group placed on the context, building
    one from the global configuration when a command runs on its own.
    """
    root = ctx.find_root()
    if not isinstance(root.obj, ContentAggregator):
        root.obj = ContentAggregator(get_config().aggregator)
    return root.obj


def run_with_spinner(description: str, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Runs a (slow, network bound) call behind a transient spinner."""
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    )
    with progress:
        progress.add_task(description, total=None)
        return func(*args, **kwargs)


def echo_json(records: Sequence[Any]) -> None:
    """Prints records as a JSON array of camelCase objects."""
    payload = [r.to_dict() if hasattr(r, "to_dict") else r for r in records]
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def warn_if_limited(records: Sequence[Any]) -> None:
    """Flags placeholder data so it is never mistaken for live results."""
    if not records:
        return
    first = records[0]
    limited = is_mock_content(first) if isinstance(first, ContentItem) else is_mock_episode(first)
    if limited:
        console.print("[yellow]Limited availability: all sources failed, showing built-in data.[/yellow]")


def content_table(items: List[ContentItem], title: str) -> Table:
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("ID", style="dim", overflow="fold")
    table.add_column("Title", style="bold cyan")
    table.add_column("Year", justify="right")
    table.add_column("Eps", justify="right")
    table.add_column("Rating", justify="right", style="green")
    table.add_column("Status")
    table.add_column("Genres", style="magenta")

    for item in items:
        table.add_row(
            item.id,
            item.title,
            str(item.year) if item.year else "-",
            str(item.total_episodes) if item.total_episodes else "?",
            item.rating,
            item.status,
            ", ".join(item.genres[:3]),
        )
    return table


def episode_table(episodes: List[EpisodeItem], title: str) -> Table:
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("#", justify="right", style="bold")
    table.add_column("ID", style="dim", overflow="fold")
    table.add_column("Title", style="cyan")
    table.add_column("Anime", style="dim")
    table.add_column("Lang")
    table.add_column("Released")

    for ep in episodes:
        table.add_row(
            str(ep.number),
            ep.id,
            ep.title,
            ep.anime_id,
            ep.sub_or_dub.value,
            ep.release_date or "-",
        )
    return table
