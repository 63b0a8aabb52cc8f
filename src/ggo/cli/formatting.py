"""Rich formatting helpers for the ggo CLI.

Rich auto-detects TTY and degrades gracefully when piped (no ANSI codes).
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Callable, Sequence

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.prompt import Prompt
from rich.table import Table

from ggo.exceptions import UserCancelledError
from ggo.frecency import format_relative_time

if TYPE_CHECKING:
    from ggo.models.records import AliasInfo, ScoredBranch, UsageRecord
    from ggo.navigator import StatsReport, SwitchResult
    from ggo.protocols import BranchPicker


def get_console() -> Console:
    return Console(stderr=False)


def configure_logging(verbosity: int) -> None:
    """Send the ``ggo`` loggers to stderr through rich.

    WARNING by default; ``GGO_LOG_LEVEL`` or ``-v`` / ``-vv`` lower it.
    """
    if verbosity >= 2:
        level: int | str = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = os.environ.get("GGO_LOG_LEVEL", "WARNING").upper()

    logger = logging.getLogger("ggo")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    try:
        logger.setLevel(level)
    except ValueError:
        logger.setLevel(logging.WARNING)


def format_error(message: str, console: Console) -> None:
    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False, soft_wrap=True)


def format_warning(message: str, console: Console) -> None:
    console.print(f"[yellow]Warning:[/yellow] {escape(message)}", highlight=False, soft_wrap=True)


def _last_used(last_used: int | None, now: int) -> str:
    if last_used is None:
        return "never"
    return format_relative_time(last_used, now)


def format_switch(result: SwitchResult, console: Console) -> None:
    name = escape(result.branch)
    if not result.changed:
        console.print(f"Already on [green]{name}[/green]")
    elif result.via_alias:
        console.print(f"Switched to branch [green]{name}[/green] [dim](alias)[/dim]")
    else:
        console.print(f"Switched to branch [green]{name}[/green]")


def format_matches(
    ranked: Sequence[ScoredBranch],
    aliases: dict[str, list[str]],
    target: str | None,
    console: Console,
    now: int,
) -> None:
    """Ranked candidates, with their aliases; ``*`` marks what ggo would check out."""
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column(" ", width=1)
    table.add_column("Branch", style="green", no_wrap=True)
    table.add_column("Score", justify="right", style="cyan")
    table.add_column("Switches", justify="right")
    table.add_column("Last used", style="dim", no_wrap=True)
    table.add_column("Aliases", style="yellow")

    for entry in ranked:
        table.add_row(
            "*" if entry.name == target else "",
            escape(entry.name),
            f"{entry.score:.1f}",
            str(entry.switch_count or 0),
            _last_used(entry.last_used, now),
            escape(", ".join(aliases.get(entry.name, []))),
        )
    console.print(table)


def format_stats(report: StatsReport, console: Console, now: int) -> None:
    stats = report.stats
    console.print("[bold]ggo statistics[/bold]")
    console.print(f"  Total switches:  {stats.total_switches}")
    console.print(f"  Unique branches: {stats.unique_branches}")
    console.print(f"  Repositories:    {stats.unique_repos}")
    location = str(stats.db_path) if stats.db_path else ":memory:"
    console.print(f"  Database:        [dim]{escape(location)}[/dim]")

    if not report.top:
        console.print("\n[dim]No branch history yet.[/dim]")
        return

    console.print()
    console.print("[bold]Top branches by frecency:[/bold]")
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Branch", style="green", no_wrap=True)
    table.add_column("Score", justify="right", style="cyan")
    table.add_column("Switches", justify="right")
    table.add_column("Last used", style="dim", no_wrap=True)
    table.add_column("Repository", style="dim", overflow="fold")
    for i, (record, score) in enumerate(report.top, start=1):
        table.add_row(
            str(i),
            escape(record.branch_name),
            f"{score:.2f}",
            str(record.switch_count),
            format_relative_time(record.last_used, now),
            escape(record.repo_path),
        )
    console.print(table)


def format_aliases(aliases: Sequence[AliasInfo], console: Console) -> None:
    if not aliases:
        console.print("[dim]No aliases defined in this repository.[/dim]")
        return
    for info in aliases:
        console.print(
            f"  [yellow]{escape(info.alias)}[/yellow] -> [green]{escape(info.branch_name)}[/green]"
        )


def make_picker(console: Console, clock: Callable[[], int]) -> BranchPicker:
    """Numbered-table picker. Enter a number to choose, ``q`` to cancel."""

    def pick(candidates: Sequence[ScoredBranch], records: Sequence[UsageRecord]) -> str:
        now = clock()
        by_name = {r.branch_name: r for r in records}

        table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
        table.add_column("#", justify="right", style="dim")
        table.add_column("Branch", style="green", no_wrap=True)
        table.add_column("Score", justify="right", style="cyan")
        table.add_column("Switches", justify="right")
        table.add_column("Last used", style="dim", no_wrap=True)
        for i, entry in enumerate(candidates, start=1):
            record = by_name.get(entry.name)
            table.add_row(
                str(i),
                escape(entry.name),
                f"{entry.score:.1f}",
                str(record.switch_count if record else 0),
                _last_used(record.last_used if record else None, now),
            )
        console.print(table)

        choices = [str(i) for i in range(1, len(candidates) + 1)] + ["q"]
        try:
            answer = Prompt.ask(
                "Select branch", console=console, choices=choices, default="1",
                show_choices=False,
            )
        except (EOFError, KeyboardInterrupt):
            raise UserCancelledError() from None
        if answer == "q":
            raise UserCancelledError()
        return candidates[int(answer) - 1].name

    return pick
