"""Clipboard relay transport.

The enumeration script writes the tagged payload to Neovim's ``+`` register,
which Neovim's clipboard provider mirrors to the system clipboard. The user
owns that clipboard, so its prior contents are restored on every exit path.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import pyperclip

from nvim_keymaps.config.schema import KeymapsSettings
from nvim_keymaps.decoder import PAYLOAD_TAG
from nvim_keymaps.exceptions import TransportError
from nvim_keymaps.transports.base import ScriptRelay
from nvim_keymaps.transports.host import EditorHost

logger = logging.getLogger(__name__)

CLIPBOARD_SINK = "vim.fn.setreg('+', payload)"


class Clipboard(ABC):
    """Minimal read/write clipboard interface."""

    @abstractmethod
    def read(self) -> str:
        """Return the current clipboard text."""
        pass

    @abstractmethod
    def write(self, text: str) -> None:
        """Replace the clipboard text."""
        pass


class SystemClipboard(Clipboard):
    """System clipboard backed by pyperclip."""

    def read(self) -> str:
        try:
            return pyperclip.paste() or ""
        except pyperclip.PyperclipException as e:
            raise TransportError(f"Cannot read clipboard: {e}", original_error=e) from e

    def write(self, text: str) -> None:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            raise TransportError(f"Cannot write clipboard: {e}", original_error=e) from e


class ClipboardRelay(ScriptRelay):
    """Relay keymaps through the shared clipboard.

    Example:
        >>> relay = ClipboardRelay(NvimHost(address), SystemClipboard())
        >>> records = await relay.fetch_records()
    """

    name = "clipboard"

    def __init__(
        self,
        host: EditorHost,
        clipboard: Clipboard | None = None,
        settings: KeymapsSettings | None = None,
    ):
        """Initialize clipboard relay.

        Args:
            host: Editor host running the enumeration script
            clipboard: Clipboard to relay through (system clipboard by default)
            settings: Timing settings
        """
        super().__init__(host, settings)
        self.clipboard = clipboard or SystemClipboard()

    async def _read_clipboard(self) -> str | None:
        return await asyncio.to_thread(self.clipboard.read)

    @asynccontextmanager
    async def _relay(self) -> AsyncIterator[tuple[str, None, object]]:
        original = await asyncio.to_thread(self.clipboard.read)
        try:
            if original.startswith(PAYLOAD_TAG):
                # Left over from an interrupted fetch; must not pass for the new payload
                await asyncio.to_thread(self.clipboard.write, "")
            yield CLIPBOARD_SINK, None, self._read_clipboard
        finally:
            await asyncio.to_thread(self.clipboard.write, original)
            logger.debug("Restored original clipboard contents")
