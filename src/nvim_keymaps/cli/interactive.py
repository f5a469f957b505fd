"""Interactive keymap picker.

This module handles:
- Loading keymaps before the first prompt (with the retry grace delay)
- Live fuzzy completions while typing
- Printing matches on Enter and the selected keymap summary
- ESC to clear the query, Ctrl+R to reload keymaps from Neovim
"""

import logging
from collections.abc import Callable, Iterable

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document
from rich.console import Console

from nvim_keymaps.cli.constants import DEFAULT_RESULT_LIMIT, PROMPT, Commands, ExitCodes
from nvim_keymaps.cli.display import print_keymaps
from nvim_keymaps.models import format_detail, format_keymap
from nvim_keymaps.search import SearchIndex
from nvim_keymaps.store import KeymapStore
from nvim_keymaps.utils.keybindings import (
    REFRESH_COMMAND,
    ClearQueryHandler,
    KeybindingManager,
    RefreshHandler,
)

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = (
    "Neovim not accessible. Run from a Neovim terminal, pass --address, "
    "or use --transport direct."
)
EMPTY_MESSAGE = "No custom keymaps found. Make sure Neovim is running and configured."


class KeymapCompleter(Completer):
    """Offer the best matching keymaps as completions for the typed query.

    Example:
        >>> completer = KeymapCompleter(lambda: store.index)
        >>> session = PromptSession(completer=completer, complete_while_typing=True)
    """

    def __init__(self, get_index: Callable[[], SearchIndex], limit: int = DEFAULT_RESULT_LIMIT):
        """Initialize completer.

        Args:
            get_index: Returns the current index (changes after a refresh)
            limit: Maximum completions shown
        """
        self._get_index = get_index
        self.limit = limit

    def get_completions(
        self, document: Document, complete_event: CompleteEvent
    ) -> Iterable[Completion]:
        query = document.text
        if not query.strip():
            return

        for item in self._get_index().search(query)[: self.limit]:
            yield Completion(
                item.lhs,
                start_position=-len(query),
                display=item.lhs,
                display_meta=f"{item.description} {format_detail(item)}".strip(),
            )


def create_keybinding_manager() -> KeybindingManager:
    """Register the picker's key handlers."""
    manager = KeybindingManager()
    manager.register_handler(ClearQueryHandler())
    manager.register_handler(RefreshHandler())
    return manager


def show_help(console: Console, manager: KeybindingManager) -> None:
    console.print("[bold]Type to search keymaps; Enter lists matches.[/bold]")
    for line in manager.help_lines():
        console.print(f"  {line}", markup=False)
    console.print(f"  {', '.join(Commands.EXIT):<8} Quit", markup=False)


async def load_or_report(store: KeymapStore, console: Console) -> int:
    """Load keymaps and report why the picker cannot start, if it cannot.

    Returns:
        ExitCodes.SUCCESS, or the code explaining the failure
    """
    with console.status("Loading keymaps from Neovim..."):
        loaded = await store.ensure_keymaps_loaded()

    if not await store.is_external_editor_available():
        console.print(f"[red]{UNAVAILABLE_MESSAGE}[/red]")
        return ExitCodes.UNAVAILABLE
    if not loaded:
        console.print(f"[yellow]{EMPTY_MESSAGE}[/yellow]")
        return ExitCodes.NO_KEYMAPS
    return ExitCodes.SUCCESS


async def run_picker(
    store: KeymapStore,
    console: Console,
    limit: int = DEFAULT_RESULT_LIMIT,
    session: PromptSession | None = None,
) -> int:
    """Run the interactive lookup loop.

    Args:
        store: Keymap store to query
        console: Console for output
        limit: Maximum rows per result table
        session: Prompt session (created with completer and keybindings if omitted)

    Returns:
        Exit code
    """
    status = await load_or_report(store, console)
    if status != ExitCodes.SUCCESS:
        return status

    manager = create_keybinding_manager()
    if session is None:
        session = PromptSession(
            completer=KeymapCompleter(lambda: store.index, limit=limit),
            complete_while_typing=True,
            key_bindings=manager.create_keybindings(),
        )

    keymaps = await store.get_keymaps()
    console.print(f"[bold cyan]Search {len(keymaps)} keymaps[/bold cyan] [dim](? for help)[/dim]")

    while True:
        try:
            query = await session.prompt_async(PROMPT)
        except EOFError:
            break
        except KeyboardInterrupt:
            console.print("\n[yellow]Interrupted[/yellow]")
            return ExitCodes.INTERRUPTED

        query = (query or "").strip()
        if query in Commands.EXIT:
            break
        if query in Commands.HELP:
            show_help(console, manager)
            continue
        if query == REFRESH_COMMAND:
            with console.status("Reloading keymaps..."):
                refreshed = await store.refresh_keymaps()
            if refreshed:
                count = len(await store.get_keymaps())
                console.print(f"[green]Reloaded {count} keymaps[/green]")
            else:
                console.print(f"[yellow]{EMPTY_MESSAGE}[/yellow]")
            continue

        results = await store.search_keymaps(query)
        exact = [item for item in results if item.lhs == query]
        if len(exact) == 1:
            # A completion was accepted: show that keymap on its own
            console.print(format_keymap(exact[0]), markup=False)
            continue
        print_keymaps(results, console, limit=limit)

    return ExitCodes.SUCCESS
