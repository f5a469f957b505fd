"""Transports for retrieving keymaps from Neovim.

Key Components:
    - TransportStrategy: Abstract base for all transports
    - ClipboardRelay: Script writes to the shared clipboard
    - TempFileRelay: Script writes to a scratch file
    - DirectProcess: Headless Neovim child queried over RPC

Example:
    >>> from nvim_keymaps.transports import create_transport
    >>> transport = create_transport(settings)
    >>> records = await transport.fetch_records()
"""

import logging

from nvim_keymaps.config.schema import KeymapsSettings
from nvim_keymaps.transports.base import ScriptRelay, TransportStrategy
from nvim_keymaps.transports.clipboard import Clipboard, ClipboardRelay, SystemClipboard
from nvim_keymaps.transports.direct import DirectProcess
from nvim_keymaps.transports.host import EditorHost, NvimHost
from nvim_keymaps.transports.tempfile_relay import TempFileRelay

logger = logging.getLogger(__name__)

__all__ = [
    "Clipboard",
    "ClipboardRelay",
    "DirectProcess",
    "EditorHost",
    "NvimHost",
    "ScriptRelay",
    "SystemClipboard",
    "TempFileRelay",
    "TransportStrategy",
    "create_transport",
]


def create_transport(
    settings: KeymapsSettings,
    host: EditorHost | None = None,
    clipboard: Clipboard | None = None,
) -> TransportStrategy:
    """Factory function to create a transport based on settings.

    Routes on settings.transport:
    - "clipboard": ClipboardRelay through the system clipboard
    - "tempfile": TempFileRelay through a scratch file
    - "direct": DirectProcess spawning a headless Neovim

    Args:
        settings: KeymapsSettings instance
        host: Editor host for script relays (NvimHost on settings.nvim_address by default)
        clipboard: Clipboard for the clipboard relay (system clipboard by default)

    Returns:
        TransportStrategy instance
    """
    logger.debug(f"Creating {settings.transport} transport")

    if settings.transport == "direct":
        return DirectProcess(settings)

    host = host or NvimHost(settings.nvim_address)
    if settings.transport == "tempfile":
        return TempFileRelay(host, settings)
    return ClipboardRelay(host, clipboard, settings)
