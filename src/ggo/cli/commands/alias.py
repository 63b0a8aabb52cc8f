"""ggo alias -- manage repository-scoped branch aliases."""

from __future__ import annotations

import click
from rich.markup import escape

from ggo.cli.formatting import format_aliases


@click.command()
@click.argument("name", required=False)
@click.argument("branch", required=False)
@click.option("-l", "--list", "list_all", is_flag=True, help="List aliases in this repository.")
@click.option("-r", "--remove", is_flag=True, help="Remove alias NAME.")
@click.pass_context
def alias(
    ctx: click.Context,
    name: str | None,
    branch: str | None,
    list_all: bool,
    remove: bool,
) -> None:
    """Create, show or remove an alias.

    \b
      ggo alias m main      create (or repoint) alias "m"
      ggo alias m           show where "m" points
      ggo alias -r m        remove "m"
      ggo alias --list      list all aliases here
    """
    from ggo.cli import _navigator_session

    if not list_all and name is None:
        raise click.UsageError("Missing alias NAME (or use --list).", ctx=ctx)

    with _navigator_session(ctx) as (nav, console):
        if list_all:
            format_aliases(nav.list_aliases(), console)
        elif remove:
            nav.remove_alias(name)
            console.print(f"Removed alias [yellow]{escape(name)}[/yellow]")
        elif branch is None:
            target = nav.show_alias(name)
            console.print(f"[yellow]{escape(name)}[/yellow] -> [green]{escape(target)}[/green]")
        else:
            nav.create_alias(name, branch)
            console.print(
                f"Created alias [yellow]{escape(name)}[/yellow] -> [green]{escape(branch)}[/green]"
            )
