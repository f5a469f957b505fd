"""Editor host: runs Lua inside an already running Neovim.

Neovim exports its RPC address as $NVIM to jobs started from its terminal,
so the default host attaches to that instance over pynvim.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any

import pynvim

from nvim_keymaps.exceptions import TransportError, UnavailableError

logger = logging.getLogger(__name__)


class EditorHost(ABC):
    """Interface for executing scripts inside the target editor."""

    @abstractmethod
    async def activate(self) -> None:
        """Make sure the editor can be reached.

        Raises:
            UnavailableError: If there is no editor to talk to
        """
        pass

    @abstractmethod
    async def exec_lua(self, code: str, *args: Any) -> Any:
        """Run Lua code in the editor.

        Args:
            code: Lua source; arguments are available as ``...``
            *args: Arguments passed to the chunk

        Returns:
            Whatever the chunk returns

        Raises:
            TransportError: If execution fails
        """
        pass


def _attach(address: str) -> pynvim.Nvim:
    """Attach to a socket path or ``host:port`` address."""
    host, sep, port = address.rpartition(":")
    if sep and host and port.isdigit():
        return pynvim.attach("tcp", address=host, port=int(port))
    return pynvim.attach("socket", path=address)


def _close(nvim: pynvim.Nvim) -> None:
    try:
        nvim.close()
    except Exception as e:
        logger.debug(f"Failed to close Neovim session: {e}")


class NvimHost(EditorHost):
    """Editor host attached to a running Neovim over its RPC address.

    Each call attaches, works and detaches inside one worker thread, since a
    pynvim session must not be shared across threads.

    Example:
        >>> host = NvimHost("/run/user/1000/nvim.1234.0")
        >>> await host.exec_lua("return 1 + 1")
        2
    """

    def __init__(self, address: str | None):
        """Initialize Neovim host.

        Args:
            address: Socket path or host:port; None means no running instance
        """
        self.address = address

    async def activate(self) -> None:
        if not self.address:
            raise UnavailableError(
                "No running Neovim address. Start from a Neovim terminal or pass --address."
            )
        try:
            await asyncio.to_thread(self._probe, self.address)
        except Exception as e:
            raise UnavailableError(
                f"Cannot attach to Neovim at {self.address}: {e}", original_error=e
            ) from e

    @staticmethod
    def _probe(address: str) -> None:
        nvim = _attach(address)
        try:
            nvim.api.get_api_info()
        finally:
            _close(nvim)

    async def exec_lua(self, code: str, *args: Any) -> Any:
        if not self.address:
            raise UnavailableError("No running Neovim address")
        try:
            return await asyncio.to_thread(self._run, self.address, code, args)
        except Exception as e:
            raise TransportError(f"Failed to execute Lua in Neovim: {e}", original_error=e) from e

    @staticmethod
    def _run(address: str, code: str, args: tuple[Any, ...]) -> Any:
        nvim = _attach(address)
        try:
            return nvim.exec_lua(code, *args)
        finally:
            _close(nvim)
