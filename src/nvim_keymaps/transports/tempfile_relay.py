"""Temp-file relay transport.

Like the clipboard relay, but the script writes the tagged payload to a
scratch file, leaving the user's clipboard untouched. The file is written
under a temporary name and renamed, so a reader never sees a partial payload.
"""

import asyncio
import logging
import os
import tempfile
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from nvim_keymaps.config.schema import KeymapsSettings
from nvim_keymaps.exceptions import DecodeError
from nvim_keymaps.transports.base import ScriptRelay
from nvim_keymaps.transports.host import EditorHost

logger = logging.getLogger(__name__)

TEMPFILE_SINK = "vim.fn.writefile({payload}, target .. '.part')\nos.rename(target .. '.part', target)"


def scratch_path(directory: Path | None = None) -> Path:
    """Build a unique timestamp-qualified scratch file path."""
    directory = directory or Path(tempfile.gettempdir())
    return directory / f"nvim-keymaps-{time.time_ns()}-{os.getpid()}.json"


class TempFileRelay(ScriptRelay):
    """Relay keymaps through a scratch file in the temp directory."""

    name = "tempfile"

    def __init__(
        self,
        host: EditorHost,
        settings: KeymapsSettings | None = None,
        directory: Path | None = None,
    ):
        """Initialize temp-file relay.

        Args:
            host: Editor host running the enumeration script
            settings: Timing settings
            directory: Scratch directory (system temp dir by default)
        """
        super().__init__(host, settings)
        self.directory = directory

    @asynccontextmanager
    async def _relay(self) -> AsyncIterator[tuple[str, str, object]]:
        path = scratch_path(self.directory)
        partial = path.with_name(path.name + ".part")

        async def read() -> str | None:
            return await asyncio.to_thread(self._read_file, path, self.name)

        try:
            yield TEMPFILE_SINK, str(path), read
        finally:
            for leftover in (path, partial):
                leftover.unlink(missing_ok=True)
            logger.debug(f"Removed scratch file {path}")

    @staticmethod
    def _read_file(path: Path, transport: str) -> str | None:
        try:
            return path.read_text(encoding="utf-8").rstrip("\n")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            raise DecodeError(
                f"Scratch file {path} is not valid UTF-8: {e}",
                transport=transport,
                original_error=e,
            ) from e
