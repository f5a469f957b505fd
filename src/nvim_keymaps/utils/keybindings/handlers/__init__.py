"""Built-in keybinding handlers."""
