"""
Info and episodes commands for AnimePulse CLI.

Shows the details of a single anime and lists its episodes.
"""
import json

import click
from rich.panel import Panel
from rich.table import Table
from rich import box

from .base import console, echo_json, episode_table, get_aggregator, run_with_spinner, warn_if_limited
from ..logging import get_logger

logger = get_logger(__name__)


@click.command()
@click.argument("content_id")
@click.option("--json", "as_json", is_flag=True, help="Print the record as JSON.")
@click.pass_context
def info(ctx: click.Context, content_id: str, as_json: bool) -> None:
    """Shows details for the anime with id CONTENT_ID."""
    logger.info(f"Info command started (content_id={content_id})")
    aggregator = get_aggregator(ctx)

    if as_json:
        item = aggregator.get_content_by_id(content_id)
        click.echo(json.dumps(item.to_dict() if item else None, indent=2, ensure_ascii=False))
        return

    item = run_with_spinner(f"[bold cyan]Looking up '{content_id}'...", aggregator.get_content_by_id, content_id)
    if item is None:
        console.print(f"[red]No source has details for '{content_id}'[/red]")
        return

    details = Table.grid(padding=(0, 2))
    details.add_column(style="bold")
    details.add_column()
    details.add_row("ID", item.id)
    details.add_row("Type", f"{item.type} ({item.sub_or_dub.value})")
    details.add_row("Studio", item.studio or "-")
    details.add_row("Released", item.release_date or (str(item.year) if item.year else "-"))
    details.add_row("Status", item.status)
    details.add_row("Episodes", str(item.total_episodes))
    details.add_row("Rating", item.rating)
    details.add_row("Genres", ", ".join(item.genres) or "-")
    if item.url:
        details.add_row("URL", item.url)

    console.print(Panel(details, title=f"[bold cyan]{item.title}[/bold cyan]", box=box.ROUNDED))
    console.print(Panel(item.synopsis, title="Synopsis", box=box.ROUNDED, style="dim"))


@click.command()
@click.argument("content_id")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON.")
@click.pass_context
def episodes(ctx: click.Context, content_id: str, as_json: bool) -> None:
    """Lists the episodes of the anime with id CONTENT_ID."""
    logger.info(f"Episodes command started (content_id={content_id})")
    aggregator = get_aggregator(ctx)

    if as_json:
        echo_json(aggregator.get_episodes_for_content(content_id))
        return

    found = run_with_spinner(
        f"[bold cyan]Fetching episodes for '{content_id}'...", aggregator.get_episodes_for_content, content_id
    )
    warn_if_limited(found)
    console.print(episode_table(found, f"Episodes: {content_id}"))
