"""ggo CLI -- jump to git branches by fuzzy pattern, ranked by frecency.

This module is NEVER imported from ggo/__init__.py.
It is only loaded via the ``ggo`` entry point defined in pyproject.toml.

``ggo PATTERN`` is routed to the ``go`` command, so subcommand names
(``alias``, ``cleanup``) take precedence over patterns.
"""

from __future__ import annotations

import warnings
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

import click

from ggo._version import __version__
from ggo.cli.formatting import configure_logging, format_error, format_warning, get_console
from ggo.exceptions import AliasStaleWarning, GgoError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from rich.console import Console

    from ggo.navigator import Navigator

_VALUE_OPTIONS = ("--db", "--config")
_FLAG_OPTIONS = ("-v", "--verbose", "-vv", "--help", "--version")


class GgoGroup(click.Group):
    """Group that treats an unknown first argument as a branch pattern."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        i = 0
        while i < len(args):
            arg = args[i]
            if arg in _VALUE_OPTIONS:
                i += 2
            elif arg in _FLAG_OPTIONS or arg.startswith(tuple(f"{o}=" for o in _VALUE_OPTIONS)):
                i += 1
            else:
                break
        if i < len(args) and args[i] not in self.commands:
            args = [*args[:i], "go", *args[i:]]
        return super().parse_args(ctx, args)


@click.group(cls=GgoGroup)
@click.option(
    "--db",
    default=None,
    envvar="GGO_DB_PATH",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to the usage database.",
)
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to config.toml.",
)
@click.option("-v", "--verbose", count=True, help="Log more (-vv for debug).")
@click.version_option(__version__, prog_name="ggo")
@click.pass_context
def cli(ctx: click.Context, db: Path | None, config_path: Path | None, verbose: int) -> None:
    """ggo: jump to git branches by pattern, ranked by how often and how
    recently you use them.

    \b
      ggo feat          switch to the best match for "feat"
      ggo -             switch back to the previous branch
      ggo -l feat       list matches without switching
      ggo --stats       usage statistics
      ggo alias m main  create an alias
    """
    configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["db_path"] = db
    ctx.obj["config_path"] = config_path


def _get_navigator(ctx: click.Context, console: Console) -> Navigator:
    """Open the store and build a Navigator for the current directory."""
    from ggo.cli.formatting import make_picker
    from ggo.git import SubprocessGit
    from ggo.models.config import default_db_path, load_config
    from ggo.navigator import Navigator
    from ggo.store import UsageStore

    config = load_config(ctx.obj["config_path"])
    store = UsageStore.open(ctx.obj["db_path"] or default_db_path())
    return Navigator(
        store,
        SubprocessGit(),
        config,
        picker=make_picker(console, store.now),
    )


@contextmanager
def _navigator_session(ctx: click.Context) -> Iterator[tuple[Navigator, Console]]:
    """Open a Navigator, yield (navigator, console), and handle cleanup.

    Closes the store on exit, prints ggo errors and exits 1. Warnings
    raised by the operation are shown as warning lines.
    """
    console = get_console()
    error: GgoError | None = None
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", AliasStaleWarning)
        try:
            nav = _get_navigator(ctx, console)
            try:
                yield nav, console
            finally:
                nav.store.close()
        except GgoError as e:
            error = e

    for w in caught:
        if issubclass(w.category, AliasStaleWarning):
            format_warning(str(w.message), console)
        else:
            warnings.showwarning(w.message, w.category, w.filename, w.lineno, w.file, w.line)
    if error is not None:
        format_error(str(error), console)
        raise SystemExit(1)


def main() -> None:
    cli(prog_name="ggo")


# Register subcommands after cli group is defined
from ggo.cli.commands.go import go  # noqa: E402
from ggo.cli.commands.alias import alias  # noqa: E402
from ggo.cli.commands.cleanup import cleanup  # noqa: E402

cli.add_command(go)
cli.add_command(alias)
cli.add_command(cleanup)
