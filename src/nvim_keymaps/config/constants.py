"""Default values for nvim-keymaps settings."""

from pathlib import Path

# Default paths
DEFAULT_DATA_DIR = Path.home() / ".nvim-keymaps"
DEFAULT_CONFIG_PATH = DEFAULT_DATA_DIR / "settings.json"

# Transport selection
DEFAULT_TRANSPORT = "clipboard"
DEFAULT_NVIM_EXECUTABLE = "nvim"

# Timing (seconds)
DEFAULT_SETTLE_DELAY = 0.1  # wait after running the enumeration script
DEFAULT_READY_TIMEOUT = 1.0  # upper bound for polling the relay medium
DEFAULT_POLL_INTERVAL = 0.05
DEFAULT_READINESS_GRACE = 0.5  # wait before retrying an empty fetch

# Filtering
DEFAULT_REQUIRE_DESCRIPTION = True

# Logging
DEFAULT_LOG_LEVEL = "WARNING"
