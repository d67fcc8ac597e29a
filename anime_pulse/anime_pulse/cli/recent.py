"""
Recent episodes command for AnimePulse CLI.
"""
import click

from .base import console, echo_json, episode_table, get_aggregator, run_with_spinner, warn_if_limited
from ..constants import RECENT_KIND_DUB, RECENT_KIND_SUB
from ..logging import get_logger

logger = get_logger(__name__)


@click.command()
@click.option("--page", default=1, type=click.IntRange(min=1), help="Result page to fetch.")
@click.option("--dub", is_flag=True, help="Use the dubbed release feed instead of the subbed one.")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON.")
@click.pass_context
def recent(ctx: click.Context, page: int, dub: bool, as_json: bool) -> None:
    """Lists the most recently released episodes."""
    kind = RECENT_KIND_DUB if dub else RECENT_KIND_SUB
    logger.info(f"Recent command started (page={page}, kind={kind})")
    aggregator = get_aggregator(ctx)

    if as_json:
        echo_json(aggregator.get_recent_episodes(page, kind))
        return

    episodes = run_with_spinner("[bold cyan]Fetching recent episodes...", aggregator.get_recent_episodes, page, kind)
    warn_if_limited(episodes)
    console.print(episode_table(episodes, f"Recent {'DUB' if dub else 'SUB'} episodes (page {page})"))
