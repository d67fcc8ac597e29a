"""
Search command for AnimePulse CLI.

Searches the configured sources for anime by title.
"""
import click

from .base import console, content_table, echo_json, get_aggregator, run_with_spinner, warn_if_limited
from ..logging import get_logger

logger = get_logger(__name__)


@click.command()
@click.argument("query")
@click.option("--page", default=1, type=click.IntRange(min=1), help="Result page to fetch.")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON.")
@click.pass_context
def search(ctx: click.Context, query: str, page: int, as_json: bool) -> None:
    """Searches for anime whose title matches QUERY."""
    logger.info(f"Search command started (query={query}, page={page})")
    aggregator = get_aggregator(ctx)

    if as_json:
        echo_json(aggregator.search_content(query, page))
        return

    results = run_with_spinner(f"[bold cyan]Searching for '{query}'...", aggregator.search_content, query, page)
    if not results:
        console.print(f"[red]No anime found matching '{query}'[/red]")
        return

    warn_if_limited(results)
    console.print(content_table(results, f"Search: {query} (page {page})"))
