"""Health check for nvim-keymaps.

Shows the active configuration, whether Neovim can be reached through the
selected transport, and how many keymaps a fetch returns.
"""

import logging
import platform
import shutil
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from nvim_keymaps import __version__
from nvim_keymaps.cli.constants import ExitCodes
from nvim_keymaps.config import get_config_path
from nvim_keymaps.config.schema import KeymapsSettings
from nvim_keymaps.store import KeymapStore

logger = logging.getLogger(__name__)


def _status(ok: bool, detail: str) -> str:
    mark = "[green]✓[/green]" if ok else "[red]✗[/red]"
    return f"{mark} {escape(detail)}"


async def run_health_check(
    store: KeymapStore,
    settings: KeymapsSettings,
    console: Console,
    config_path: Path | None = None,
) -> int:
    """Print configuration and connectivity status.

    Args:
        store: Store wired to the configured transport
        settings: Loaded settings
        console: Console for output
        config_path: Settings file in use (default location if omitted)

    Returns:
        ExitCodes.SUCCESS when keymaps could be loaded, otherwise a failure code
    """
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()

    table.add_row("Version", __version__)
    table.add_row("Python", f"{sys.version.split()[0]} ({platform.system()})")

    config_path = config_path or get_config_path()
    table.add_row("Config", f"{config_path}{'' if config_path.exists() else ' (defaults)'}")
    table.add_row("Transport", settings.transport)

    if settings.transport == "direct":
        executable = shutil.which(settings.nvim_path)
        found = executable or f"{settings.nvim_path} not found"
        table.add_row("Neovim", _status(executable is not None, found))
    else:
        address = settings.nvim_address
        table.add_row("Address", _status(bool(address), address or "not set ($NVIM)"))

    with console.status("Contacting Neovim..."):
        loaded = await store.ensure_keymaps_loaded()
        available = await store.is_external_editor_available()
        keymaps = await store.get_keymaps()

    table.add_row("Reachable", _status(available, "yes" if available else "no"))
    detail = f"{len(keymaps)} loaded"
    if store.last_error is not None:
        detail += f" ({store.last_error})"
    table.add_row("Keymaps", _status(loaded, detail))
    degraded = store.index.is_degraded
    table.add_row("Search", _status(not degraded, "substring fallback" if degraded else "fuzzy"))

    console.print(table)

    if not available:
        return ExitCodes.UNAVAILABLE
    if not loaded:
        return ExitCodes.NO_KEYMAPS
    return ExitCodes.SUCCESS
