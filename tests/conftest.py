"""Shared test fixtures for all tests.

This file imports and re-exports fixtures from the fixtures/ module so they
are discovered by pytest while staying organized by component.
"""

from tests.fixtures.config import clean_env, fast_settings  # noqa: F401
from tests.fixtures.keymaps import (  # noqa: F401
    fake_clipboard,
    normalized_keymaps,
    sample_keymaps,
    sample_records,
)
