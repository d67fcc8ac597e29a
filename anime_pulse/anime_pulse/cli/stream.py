"""
Stream command for AnimePulse CLI.

Resolves the best playable stream URL for an episode.
"""
import json

import click

from .base import console, get_aggregator, run_with_spinner
from ..logging import get_logger

logger = get_logger(__name__)


@click.command()
@click.argument("episode_id")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
@click.pass_context
def stream(ctx: click.Context, episode_id: str, as_json: bool) -> None:
    """Prints the best stream URL for EPISODE_ID (1080p, then 720p, then anything)."""
    logger.info(f"Stream command started (episode_id={episode_id})")
    aggregator = get_aggregator(ctx)

    if as_json:
        url = aggregator.resolve_stream_url(episode_id)
        click.echo(json.dumps({"episodeId": episode_id, "streamingUrl": url}))
        return

    url = run_with_spinner(f"[bold cyan]Resolving stream for '{episode_id}'...", aggregator.resolve_stream_url, episode_id)
    if url is None:
        console.print(f"[yellow]Stream unavailable for '{episode_id}'[/yellow]")
        return

    click.echo(url)
