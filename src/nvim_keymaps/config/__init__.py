"""Configuration package for nvim-keymaps."""

from .constants import DEFAULT_CONFIG_PATH, DEFAULT_TRANSPORT
from .manager import (
    ConfigurationError,
    get_config_path,
    load_config,
    load_settings,
    merge_with_env,
)
from .schema import VALID_TRANSPORTS, KeymapsSettings

__all__ = [
    # Constants
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_TRANSPORT",
    "VALID_TRANSPORTS",
    # Schema
    "KeymapsSettings",
    # Manager
    "ConfigurationError",
    "get_config_path",
    "load_config",
    "load_settings",
    "merge_with_env",
]
