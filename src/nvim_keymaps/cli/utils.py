"""Utility functions for CLI module."""

import logging
import sys
from pathlib import Path

from rich.console import Console

from nvim_keymaps.config.schema import KeymapsSettings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_console() -> Console:
    """Create the Rich console used for all CLI output.

    Automatic highlighting is off so digits and brackets inside key sequences
    such as <leader>1 or [d keep one style.
    """
    return Console(highlight=False)


def setup_logging(settings: KeymapsSettings, verbose: bool = False) -> None:
    """Configure the root logger from settings.

    --verbose forces DEBUG. Logs go to settings.log_file when set, otherwise
    to stderr so they never mix with result output.

    Args:
        settings: Loaded settings (log_level, log_file)
        verbose: Force debug logging
    """
    log_level = "DEBUG" if verbose else settings.log_level
    numeric_level = getattr(logging, log_level, logging.WARNING)

    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logging.basicConfig(
            level=numeric_level,
            format=LOG_FORMAT,
            filename=str(log_path),
            filemode="a",
            force=True,
        )
    else:
        logging.basicConfig(level=numeric_level, format=LOG_FORMAT, stream=sys.stderr, force=True)

    logger.debug(f"Logging configured at {log_level}")
