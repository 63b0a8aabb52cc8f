"""ggo cleanup -- prune and compact the usage database."""

from __future__ import annotations

import click

from ggo.constants import DEFAULT_CLEANUP_AGE_DAYS


def _human_size(size: int) -> str:
    value = float(size)
    for unit in ("B", "KB", "MB"):
        if value < 1024:
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GB"


@click.command()
@click.option("--deleted", is_flag=True, help="Remove records of branches that no longer exist.")
@click.option(
    "--older-than",
    type=click.IntRange(min=0),
    default=None,
    metavar="DAYS",
    help=f"Remove records unused for DAYS days (default with --optimize: {DEFAULT_CLEANUP_AGE_DAYS}).",
)
@click.option("--optimize", is_flag=True, help="Prune old records, then VACUUM and ANALYZE.")
@click.option("--size", is_flag=True, help="Show the database size.")
@click.pass_context
def cleanup(
    ctx: click.Context,
    deleted: bool,
    older_than: int | None,
    optimize: bool,
    size: bool,
) -> None:
    """Remove stale usage records and compact the database."""
    from ggo.cli import _navigator_session

    if not (deleted or older_than is not None or optimize or size):
        click.echo(ctx.get_help())
        return

    with _navigator_session(ctx) as (nav, console):
        store = nav.store
        if size:
            console.print(f"Database size: [cyan]{_human_size(store.get_database_size())}[/cyan]")

        if deleted:
            removed = store.cleanup_deleted_branches(nav.git)
            console.print(f"Removed [green]{removed}[/green] records of deleted branches")

        if older_than is not None or optimize:
            days = DEFAULT_CLEANUP_AGE_DAYS if older_than is None else older_than
            removed = store.cleanup_old_records(days)
            console.print(f"Removed [green]{removed}[/green] records unused for {days} days")

        if optimize:
            before = store.get_database_size()
            store.optimize_database()
            after = store.get_database_size()
            console.print(
                f"Optimized database: {_human_size(before)} -> {_human_size(after)}"
            )
