"""Shared utilities for nvim-keymaps."""
