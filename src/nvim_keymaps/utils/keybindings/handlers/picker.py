"""Keybinding handlers for the interactive keymap picker."""

from typing import Any

from nvim_keymaps.utils.keybindings.handler import KeybindingHandler

REFRESH_COMMAND = "/refresh"


class ClearQueryHandler(KeybindingHandler):
    """ESC clears the current query text."""

    @property
    def trigger_key(self) -> str:
        return "escape"

    @property
    def description(self) -> str:
        return "Clear the query"

    def handle(self, event: Any) -> None:
        event.app.current_buffer.text = ""


class RefreshHandler(KeybindingHandler):
    """Ctrl+R ends the prompt with the refresh command.

    The picker loop sees the command and re-fetches keymaps from Neovim.
    """

    @property
    def trigger_key(self) -> str:
        return "c-r"

    @property
    def description(self) -> str:
        return "Reload keymaps from Neovim"

    def handle(self, event: Any) -> None:
        event.app.exit(result=REFRESH_COMMAND)
