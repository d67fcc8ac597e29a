from typing import Optional

import click
from dotenv import load_dotenv, find_dotenv

# Load environment variables immediately
load_dotenv(find_dotenv())

from pydantic import ValidationError

from .config import get_config, setup_config
from .logging import ConfigError, console, get_logger, set_log_level, setup_logging
from .service import ContentAggregator
from .cli.info import episodes, info
from .cli.recent import recent
from .cli.search import search
from .cli.sources import sources
from .cli.stream import stream
from .cli.trending import trending

logger = get_logger(__name__)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Show source attempts and fallbacks on the console.")
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    help="JSON configuration file (overrides environment).",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_file: Optional[str]) -> None:
    """AnimePulse: browse anime from multiple upstream sources."""
    try:
        config = setup_config(config_file=config_file) if config_file else get_config()
    except (ConfigError, ValidationError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise SystemExit(1)

    setup_logging(config.logging.log_file)
    set_log_level(config.logging.file_level, "file")
    set_log_level("INFO" if verbose else config.logging.console_level, "console")

    logger.info(f"Loaded {len(config.aggregator.sources)} sources (timeout={config.aggregator.timeout_ms}ms)")
    if not isinstance(ctx.obj, ContentAggregator):
        ctx.obj = ContentAggregator(config.aggregator)


cli.add_command(search)
cli.add_command(trending)
cli.add_command(recent)
cli.add_command(info)
cli.add_command(episodes)
cli.add_command(stream)
cli.add_command(sources)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
