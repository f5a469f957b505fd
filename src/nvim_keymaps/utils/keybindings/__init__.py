"""Keybinding system for prompt_toolkit integration."""

from nvim_keymaps.utils.keybindings.handler import KeybindingHandler
from nvim_keymaps.utils.keybindings.handlers.picker import (
    REFRESH_COMMAND,
    ClearQueryHandler,
    RefreshHandler,
)
from nvim_keymaps.utils.keybindings.manager import KeybindingManager

__all__ = [
    "REFRESH_COMMAND",
    "ClearQueryHandler",
    "KeybindingHandler",
    "KeybindingManager",
    "RefreshHandler",
]
