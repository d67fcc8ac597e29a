"""
Trending command for AnimePulse CLI.
"""
import click

from .base import console, content_table, echo_json, get_aggregator, run_with_spinner, warn_if_limited
from ..logging import get_logger

logger = get_logger(__name__)


@click.command()
@click.option("--page", default=1, type=click.IntRange(min=1), help="Result page to fetch.")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON.")
@click.pass_context
def trending(ctx: click.Context, page: int, as_json: bool) -> None:
    """Lists trending and popular anime."""
    logger.info(f"Trending command started (page={page})")
    aggregator = get_aggregator(ctx)

    if as_json:
        echo_json(aggregator.get_trending_content(page))
        return

    results = run_with_spinner("[bold cyan]Fetching trending anime...", aggregator.get_trending_content, page)
    warn_if_limited(results)
    console.print(content_table(results, f"Trending (page {page})"))
