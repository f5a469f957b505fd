"""Direct-process transport.

Spawns a headless Neovim child, attaches pynvim over its standard streams
and calls ``nvim_get_keymap`` once per mode. Nothing is injected into a user
session and no shared medium is touched.
"""

import asyncio
import logging
import shutil
from typing import Any

import pynvim

from nvim_keymaps.config.schema import KeymapsSettings
from nvim_keymaps.decoder import tag_records
from nvim_keymaps.exceptions import TransportError, UnavailableError
from nvim_keymaps.models import MODES
from nvim_keymaps.transports.base import TransportStrategy

logger = logging.getLogger(__name__)


def _terminate(nvim: Any) -> None:
    """Best-effort shutdown of the child; failures are logged, never raised."""
    try:
        nvim.quit()
    except Exception as e:
        logger.debug(f"Neovim child did not quit cleanly: {e}")
    try:
        nvim.close()
    except Exception as e:
        logger.debug(f"Failed to close Neovim child session: {e}")


class DirectProcess(TransportStrategy):
    """Enumerate keymaps from a freshly spawned headless Neovim.

    The child loads the user's normal configuration, so its keymaps match
    what an interactive session would define.

    Example:
        >>> transport = DirectProcess(KeymapsSettings(transport="direct"))
        >>> records = await transport.fetch_records()
    """

    name = "direct"

    def __init__(self, settings: KeymapsSettings | None = None):
        super().__init__(settings)
        self.executable: str | None = None

    async def ensure_available(self) -> None:
        self.executable = shutil.which(self.settings.nvim_path)
        if self.executable is None:
            raise UnavailableError(
                f"Neovim executable '{self.settings.nvim_path}' not found on PATH",
                transport=self.name,
            )

    def argv(self) -> list[str]:
        """Command line used to spawn the child."""
        return [self.executable or self.settings.nvim_path, "--embed", "--headless"]

    async def fetch_records(self) -> list[dict[str, Any]]:
        await self.ensure_available()
        return await asyncio.to_thread(self._enumerate)

    def _spawn(self) -> Any:
        try:
            return pynvim.attach("child", argv=self.argv())
        except Exception as e:
            raise TransportError(
                f"Failed to spawn Neovim: {e}", transport=self.name, original_error=e
            ) from e

    def _enumerate(self) -> list[dict[str, Any]]:
        nvim = self._spawn()
        try:
            records: list[dict[str, Any]] = []
            for mode in MODES:
                try:
                    maps = nvim.api.get_keymap(mode)
                except Exception as e:
                    logger.warning(f"Skipping mode '{mode}': keymap enumeration failed: {e}")
                    continue
                records.extend(tag_records(mode, maps))
            logger.debug(f"Enumerated {len(records)} raw keymaps from Neovim child")
            return records
        finally:
            _terminate(nvim)
