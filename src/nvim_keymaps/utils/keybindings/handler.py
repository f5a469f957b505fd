"""Abstract base class for keybinding handlers used by the interactive picker."""

from abc import ABC, abstractmethod
from typing import Any


class KeybindingHandler(ABC):
    """Abstract base class for keybinding handlers.

    Handlers define:
    - trigger_key: Which key activates this handler
    - description: Human-readable description
    - handle: What happens when key is pressed

    Example:
        >>> class QuitHandler(KeybindingHandler):
        ...     @property
        ...     def trigger_key(self) -> str:
        ...         return "c-q"
        ...     @property
        ...     def description(self) -> str:
        ...         return "Leave the picker"
        ...     def handle(self, event: Any) -> None:
        ...         event.app.exit()
    """

    @property
    @abstractmethod
    def trigger_key(self) -> str:
        """prompt_toolkit key name (e.g., 'escape', 'c-r', 'f5')."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what this handler does."""
        pass

    @abstractmethod
    def handle(self, event: Any) -> None:
        """Handle the key press event.

        Args:
            event: prompt_toolkit key event
        """
        pass
