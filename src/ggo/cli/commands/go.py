"""ggo PATTERN -- switch to the best-ranked matching branch."""

from __future__ import annotations

import click

from ggo.cli.formatting import format_matches, format_stats, format_switch


@click.command(hidden=True)
@click.argument("pattern", required=False)
@click.option("-l", "--list", "list_only", is_flag=True, help="List matches without switching.")
@click.option("-i", "--ignore-case", is_flag=True, default=None, help="Case-insensitive matching.")
@click.option(
    "--fuzzy/--no-fuzzy",
    "use_fuzzy",
    default=None,
    help="Fuzzy subsequence matching (default) or exact substring matching.",
)
@click.option("--interactive", is_flag=True, help="Always choose from a list.")
@click.option("--stats", is_flag=True, help="Show usage statistics.")
@click.pass_context
def go(
    ctx: click.Context,
    pattern: str | None,
    list_only: bool,
    ignore_case: bool | None,
    use_fuzzy: bool | None,
    interactive: bool,
    stats: bool,
) -> None:
    """Switch to the branch best matching PATTERN ("-" for the previous branch)."""
    from ggo.cli import _navigator_session
    from ggo.selection import Resolved, select_branch

    if pattern is None and not stats:
        raise click.UsageError("Missing PATTERN.", ctx=ctx)

    with _navigator_session(ctx) as (nav, console):
        if stats:
            format_stats(nav.stats(), console, nav.store.now())
            return

        if pattern == "-":
            format_switch(nav.checkout_previous(), console)
            return

        if list_only:
            ranked = nav.list_matches(pattern, ignore_case=ignore_case, use_fuzzy=use_fuzzy)
            selection = select_branch(
                ranked,
                pattern=pattern,
                fuzzy=nav.config.behavior.default_fuzzy if use_fuzzy is None else use_fuzzy,
                threshold=nav.config.behavior.auto_select_threshold,
            )
            target = selection.branch if isinstance(selection, Resolved) else None
            aliases = {entry.name: nav.aliases_for_branch(entry.name) for entry in ranked}
            format_matches(ranked, aliases, target, console, nav.store.now())
            return

        result = nav.switch(
            pattern,
            ignore_case=ignore_case,
            use_fuzzy=use_fuzzy,
            force_interactive=interactive,
        )
        format_switch(result, console)
