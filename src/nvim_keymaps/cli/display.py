"""Rendering of keymap results for the terminal."""

import json
from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from nvim_keymaps.models import KeymapItem


def build_table(keymaps: Sequence[KeymapItem], title: str | None = None) -> Table:
    """Build a Rich table with one row per keymap.

    Args:
        keymaps: Keymaps to render, already ordered
        title: Optional table title

    Returns:
        Table ready to print
    """
    table = Table(title=title, show_lines=False, header_style="bold cyan")
    table.add_column("Mode", style="magenta", no_wrap=True)
    table.add_column("Keys", style="bold", no_wrap=True)
    table.add_column("Description")
    table.add_column("Action", style="dim")

    for item in keymaps:
        # Keys such as [d would otherwise be parsed as Rich markup
        table.add_row(
            escape(item.mode_name),
            escape(item.lhs),
            escape(item.description),
            escape(item.rhs),
        )
    return table


def print_keymaps(
    keymaps: Sequence[KeymapItem],
    console: Console,
    limit: int | None = None,
    title: str | None = None,
) -> None:
    """Print keymaps as a table, noting how many were cut off by the limit."""
    shown = list(keymaps) if limit is None else list(keymaps)[:limit]
    if not shown:
        console.print("[yellow]No matching keymaps[/yellow]")
        return

    console.print(build_table(shown, title=title))
    hidden = len(keymaps) - len(shown)
    if hidden > 0:
        console.print(f"[dim]… {hidden} more, refine the query to narrow results[/dim]")


def keymaps_to_json(keymaps: Sequence[KeymapItem]) -> str:
    """Serialize keymaps as a JSON array for scripting."""
    return json.dumps([item.model_dump() for item in keymaps], indent=2, ensure_ascii=False)
