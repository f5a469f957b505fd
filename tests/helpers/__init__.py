"""Test helpers for nvim-keymaps."""

from tests.helpers.builders import build_item, build_record

__all__ = ["build_item", "build_record"]
