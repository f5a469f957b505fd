"""CLI entry point for nvim-keymaps."""

import asyncio
import logging
from pathlib import Path

import typer
from rich.markup import escape

from nvim_keymaps import __version__
from nvim_keymaps.cli.constants import DEFAULT_RESULT_LIMIT, ExitCodes
from nvim_keymaps.cli.display import keymaps_to_json, print_keymaps
from nvim_keymaps.cli.health import run_health_check
from nvim_keymaps.cli.interactive import load_or_report, run_picker
from nvim_keymaps.cli.utils import get_console, setup_logging
from nvim_keymaps.config import ConfigurationError, KeymapsSettings, load_settings
from nvim_keymaps.store import KeymapStore
from nvim_keymaps.transports import create_transport

app = typer.Typer(help="nvim-keymaps - Fuzzy search the keymaps defined in Neovim")

console = get_console()

logger = logging.getLogger(__name__)


def build_store(settings: KeymapsSettings) -> KeymapStore:
    """Wire a store to the transport selected in settings."""
    return KeymapStore(create_transport(settings), settings)


@app.command()
def main(
    query: str = typer.Option(None, "-q", "--query", help="Search once, print matches and exit"),
    json_output: bool = typer.Option(False, "--json", help="Print matches as JSON (with --query)"),
    transport: str = typer.Option(
        None, "-t", "--transport", help="Transport: clipboard, tempfile, or direct"
    ),
    nvim: str = typer.Option(None, "--nvim", help="Neovim executable for the direct transport"),
    address: str = typer.Option(
        None, "--address", help="Socket path or host:port of a running Neovim"
    ),
    config: Path = typer.Option(None, "--config", help="Path to settings.json"),
    limit: int = typer.Option(DEFAULT_RESULT_LIMIT, "--limit", help="Maximum results to show"),
    check: bool = typer.Option(False, "--check", help="Show configuration and connectivity status"),
    version_flag: bool = typer.Option(False, "--version", help="Show version"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Search the keymaps defined in a running or headless Neovim.

    \b
    Examples:
        nvim-keymaps                              # Interactive picker
        nvim-keymaps -q "find file"               # One-shot search
        nvim-keymaps -q git --json                # JSON output for scripting
        nvim-keymaps --transport direct           # Spawn a headless Neovim
        nvim-keymaps --address /tmp/nvim.sock     # Attach to a specific Neovim
        nvim-keymaps --check                      # Show connectivity status
    """
    if version_flag:
        console.print(f"nvim-keymaps version {__version__}")
        return

    overrides = {"transport": transport, "nvim_path": nvim, "nvim_address": address}
    try:
        settings = load_settings(config, overrides)
    except ConfigurationError as e:
        console.print("[red]Configuration error:[/red]", escape(str(e)))
        raise typer.Exit(ExitCodes.GENERAL_ERROR) from e

    setup_logging(settings, verbose=verbose)
    store = build_store(settings)

    if check:
        code = asyncio.run(run_health_check(store, settings, console, config_path=config))
    elif query is not None:
        code = asyncio.run(_run_query(store, query, json_output, limit))
    else:
        code = asyncio.run(run_picker(store, console, limit=limit))

    if code != ExitCodes.SUCCESS:
        raise typer.Exit(code)


async def _run_query(store: KeymapStore, query: str, json_output: bool, limit: int) -> int:
    """Load keymaps, search once and print the results.

    Args:
        store: Store wired to the configured transport
        query: Search text
        json_output: Print JSON instead of a table
        limit: Maximum results (JSON output is not limited)

    Returns:
        Exit code
    """
    status = await load_or_report(store, console)
    if status != ExitCodes.SUCCESS:
        return status

    results = await store.search_keymaps(query)
    if json_output:
        typer.echo(keymaps_to_json(results))
    else:
        title = f"Keymaps matching {escape(repr(query))}"
        print_keymaps(results, console, limit=limit, title=title)
    return ExitCodes.SUCCESS
