"""
Sources command for AnimePulse CLI.

Shows the configured upstream sources in the order they are tried.
"""
import click
from rich import box
from rich.table import Table

from .base import console, get_aggregator
from ..constants import OPERATIONS


@click.command()
@click.pass_context
def sources(ctx: click.Context) -> None:
    """Lists configured sources in priority order."""
    aggregator = get_aggregator(ctx)

    table = Table(
        title="Configured Sources",
        box=box.ROUNDED,
        caption=f"[dim]Timeout per source: {aggregator.config.timeout_ms} ms[/dim]",
    )
    table.add_column("#", justify="right")
    table.add_column("Name", style="bold cyan")
    table.add_column("Kind")
    for op in OPERATIONS:
        table.add_column(op.title(), justify="center")

    for idx, source in enumerate(aggregator.sources, start=1):
        marks = ["[green]✓[/green]" if source.template_for(op) else "[dim]-[/dim]" for op in OPERATIONS]
        table.add_row(str(idx), source.name, source.kind, *marks)

    console.print(table)
