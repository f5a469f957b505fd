"""Abstract base classes for keymap transports.

A transport triggers keymap enumeration inside Neovim and carries the result
back across the process boundary. Script relays share the enumeration script,
the settle wait and the payload polling; they differ only in the medium the
script writes to.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from nvim_keymaps.config.schema import KeymapsSettings
from nvim_keymaps.decoder import PAYLOAD_TAG, decode_payload, split_tagged_payload
from nvim_keymaps.exceptions import TransportError, UnavailableError
from nvim_keymaps.models import MODES
from nvim_keymaps.transports.host import EditorHost

logger = logging.getLogger(__name__)

# Receives the relay target as its first argument (``...``) and leaves the
# tagged JSON in ``payload`` for the medium-specific sink statement.
ENUMERATION_SCRIPT = """\
local target = ...
local result = {{}}
local modes = {{{modes}}}

for _, mode in ipairs(modes) do
  local ok, maps = pcall(vim.api.nvim_get_keymap, mode)
  if ok and maps then
    for _, map in ipairs(maps) do
      table.insert(result, {{
        lhs = map.lhs or '',
        rhs = map.rhs or '',
        mode = mode,
        desc = map.desc or '',
        silent = map.silent == 1,
        noremap = map.noremap == 1,
        has_callback = map.callback ~= nil,
      }})
    end
  end
end

local payload = '{tag}' .. vim.fn.json_encode(result)
{sink}
"""


def build_enumeration_script(sink: str, tag: str = PAYLOAD_TAG) -> str:
    """Render the Lua enumeration script with a medium-specific sink.

    Args:
        sink: Lua statement that writes ``payload`` (may use ``target``)
        tag: Prefix identifying a keymap payload

    Returns:
        Lua source ready for ``exec_lua``
    """
    modes = ", ".join(f"'{mode}'" for mode in MODES)
    return ENUMERATION_SCRIPT.format(modes=modes, tag=tag, sink=sink)


class TransportStrategy(ABC):
    """Interface for retrieving raw keymap records from Neovim.

    Example:
        >>> class StaticTransport(TransportStrategy):
        ...     name = "static"
        ...     async def ensure_available(self):
        ...         pass
        ...     async def fetch_records(self):
        ...         return [{"lhs": "gd", "mode": "n", "desc": "Definition"}]
    """

    name = "base"

    def __init__(self, settings: KeymapsSettings | None = None):
        """Initialize transport with settings.

        Args:
            settings: Timing and path settings (defaults if omitted)
        """
        self.settings = settings or KeymapsSettings()

    @abstractmethod
    async def ensure_available(self) -> None:
        """Check that Neovim can be reached.

        Raises:
            UnavailableError: If Neovim is not installed or not reachable
        """
        pass

    @abstractmethod
    async def fetch_records(self) -> list[dict[str, Any]]:
        """Enumerate keymaps for every mode and return raw records.

        Returns:
            Raw binding records in enumeration order

        Raises:
            UnavailableError: If Neovim cannot be reached
            TransportError: If the payload never arrives
            DecodeError: If the payload is malformed
        """
        pass

    async def is_available(self) -> bool:
        """Return True if Neovim can be reached by this transport."""
        try:
            await self.ensure_available()
            return True
        except UnavailableError as e:
            logger.debug(f"{self.name} transport unavailable: {e}")
            return False

    async def _settle(self) -> None:
        await asyncio.sleep(self.settings.settle_delay)

    async def _poll(
        self,
        read: Callable[[], Awaitable[str | None]],
        ready: Callable[[str], bool],
    ) -> str | None:
        """Wait the settle delay, then poll until ready or the timeout elapses.

        Args:
            read: Coroutine function reading the medium (None if empty)
            ready: Predicate telling whether the value is complete

        Returns:
            The ready value, or None if the timeout elapsed first
        """
        await self._settle()
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.settings.ready_timeout

        while True:
            value = await read()
            if value is not None and ready(value):
                return value
            if loop.time() >= deadline:
                return None
            await asyncio.sleep(self.settings.poll_interval)


class ScriptRelay(TransportStrategy):
    """Transport that runs the enumeration script inside a running Neovim.

    Subclasses provide the relay medium as an async context manager yielding
    ``(sink, target, read)``: the Lua sink statement, the value passed to the
    script as ``target``, and a coroutine function reading the medium. The
    context manager must release the medium on every exit path.
    """

    def __init__(self, host: EditorHost, settings: KeymapsSettings | None = None):
        """Initialize script relay.

        Args:
            host: Editor host able to run Lua in the target Neovim
            settings: Timing settings
        """
        super().__init__(settings)
        self.host = host

    async def ensure_available(self) -> None:
        await self.host.activate()

    @abstractmethod
    def _relay(
        self,
    ) -> AbstractAsyncContextManager[tuple[str, Any, Callable[[], Awaitable[str | None]]]]:
        pass

    async def fetch_records(self) -> list[dict[str, Any]]:
        await self.ensure_available()

        async with self._relay() as (sink, target, read):
            script = build_enumeration_script(sink)
            logger.debug(f"Running enumeration script via {self.name} relay")
            await self.host.exec_lua(script, target)
            text = await self._poll(read, lambda value: value.startswith(PAYLOAD_TAG))

        if text is None:
            raise TransportError(
                f"Keymap data not found in {self.name} relay after "
                f"{self.settings.settle_delay + self.settings.ready_timeout:.2f}s",
                transport=self.name,
            )

        try:
            return decode_payload(split_tagged_payload(text))
        except TransportError as e:
            e.transport = self.name
            raise
