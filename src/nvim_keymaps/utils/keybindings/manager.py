"""Keybinding manager for registering handlers with prompt_toolkit."""

from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.key_binding.key_processor import KeyPressEvent

from nvim_keymaps.utils.keybindings.handler import KeybindingHandler


class KeybindingManager:
    """Manages keybinding handlers and creates prompt_toolkit KeyBindings.

    Example:
        >>> manager = KeybindingManager()
        >>> manager.register_handler(ClearQueryHandler())
        >>> session = PromptSession(key_bindings=manager.create_keybindings())
    """

    def __init__(self) -> None:
        self._handlers: list[KeybindingHandler] = []

    @property
    def handlers(self) -> list[KeybindingHandler]:
        return list(self._handlers)

    def register_handler(self, handler: KeybindingHandler) -> None:
        """Register a keybinding handler."""
        self._handlers.append(handler)

    def create_keybindings(self) -> KeyBindings:
        """Create prompt_toolkit KeyBindings from registered handlers.

        Returns:
            KeyBindings instance with all registered handlers
        """
        kb = KeyBindings()
        for handler in self._handlers:
            self._bind(kb, handler)
        return kb

    @staticmethod
    def _bind(kb: KeyBindings, handler: KeybindingHandler) -> None:
        def run(event: KeyPressEvent) -> None:
            handler.handle(event)

        kb.add(handler.trigger_key)(run)

    def help_lines(self) -> list[str]:
        """Describe registered keys, one line per handler."""
        return [f"{h.trigger_key:<8} {h.description}" for h in self._handlers]
