"""Command line interface for nvim-keymaps."""

from nvim_keymaps.cli.app import app

__all__ = ["app"]
