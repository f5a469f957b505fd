"""Configuration loading for nvim-keymaps settings."""

import json
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .constants import DEFAULT_CONFIG_PATH
from .schema import KeymapsSettings


class ConfigurationError(Exception):
    """Raised when configuration operations fail."""

    pass


def get_config_path() -> Path:
    """Get the path to the configuration file.

    Honors NVIM_KEYMAPS_CONFIG when set.

    Returns:
        Path to ~/.nvim-keymaps/settings.json
    """
    override = os.getenv("NVIM_KEYMAPS_CONFIG")
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_PATH


def load_config(config_path: Path | None = None) -> KeymapsSettings:
    """Read settings.json, falling back to defaults when there is none.

    Args:
        config_path: Settings file (get_config_path() when omitted)

    Raises:
        ConfigurationError: If the file is unreadable, not a JSON object, or
            holds invalid values
    """
    path = config_path or get_config_path()
    if not path.is_file():
        return KeymapsSettings()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration file {path}: {e}") from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Invalid JSON in configuration file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a JSON object")

    try:
        return KeymapsSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Configuration validation failed for {path}:\n{e}") from e


def merge_with_env() -> dict[str, Any]:
    """Collect environment variable overrides.

    Neovim exports $NVIM to processes started from its terminal, so running
    inside a Neovim terminal picks up that instance automatically.

    Returns:
        Dictionary of setting overrides

    Example:
        >>> os.environ["NVIM_KEYMAPS_TRANSPORT"] = "direct"
        >>> merge_with_env()
        {'transport': 'direct'}
    """
    env_overrides: dict[str, Any] = {}

    if os.getenv("NVIM_KEYMAPS_TRANSPORT"):
        env_overrides["transport"] = os.getenv("NVIM_KEYMAPS_TRANSPORT")

    if os.getenv("NVIM_KEYMAPS_NVIM_PATH"):
        env_overrides["nvim_path"] = os.getenv("NVIM_KEYMAPS_NVIM_PATH")

    address = (
        os.getenv("NVIM_KEYMAPS_ADDRESS") or os.getenv("NVIM") or os.getenv("NVIM_LISTEN_ADDRESS")
    )
    if address:
        env_overrides["nvim_address"] = address

    log_level = os.getenv("NVIM_KEYMAPS_LOG_LEVEL") or os.getenv("LOG_LEVEL")
    if log_level:
        env_overrides["log_level"] = log_level

    return env_overrides


def load_settings(
    config_path: Path | None = None, overrides: dict[str, Any] | None = None
) -> KeymapsSettings:
    """Load settings from file, then apply environment and explicit overrides.

    Precedence (highest first): overrides, environment, file, defaults.

    Args:
        config_path: Optional path to config file
        overrides: Values from CLI flags; None values are ignored

    Returns:
        Validated KeymapsSettings

    Raises:
        ConfigurationError: If the merged settings fail validation
    """
    settings = load_config(config_path)

    data = settings.model_dump()
    data.update(merge_with_env())
    if overrides:
        data.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return KeymapsSettings(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings:\n{e}") from e
