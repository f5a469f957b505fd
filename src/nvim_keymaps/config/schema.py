"""Pydantic models for nvim-keymaps configuration schema."""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator

from nvim_keymaps.config.constants import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_NVIM_EXECUTABLE,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_READINESS_GRACE,
    DEFAULT_READY_TIMEOUT,
    DEFAULT_REQUIRE_DESCRIPTION,
    DEFAULT_SETTLE_DELAY,
    DEFAULT_TRANSPORT,
)

# Module-level constants for validation
VALID_TRANSPORTS = {"clipboard", "tempfile", "direct"}
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class KeymapsSettings(BaseModel):
    """Settings for retrieving and searching Neovim keymaps.

    Example:
        >>> settings = KeymapsSettings(transport="direct")
        >>> settings.nvim_path
        'nvim'
    """

    transport: str = Field(
        default=DEFAULT_TRANSPORT,
        description="How to reach Neovim: clipboard, tempfile, or direct",
    )
    nvim_path: str = Field(
        default=DEFAULT_NVIM_EXECUTABLE,
        description="Executable name or path spawned by the direct transport",
    )
    nvim_address: str | None = Field(
        default=None,
        description="Socket path or host:port of a running Neovim for script transports",
    )
    settle_delay: float = Field(
        default=DEFAULT_SETTLE_DELAY,
        description="Seconds to wait after running the enumeration script",
    )
    ready_timeout: float = Field(
        default=DEFAULT_READY_TIMEOUT,
        description="Maximum seconds to poll for the relayed payload",
    )
    poll_interval: float = Field(
        default=DEFAULT_POLL_INTERVAL,
        description="Seconds between polls of the relay medium",
    )
    readiness_grace: float = Field(
        default=DEFAULT_READINESS_GRACE,
        description="Seconds to wait for Neovim startup before retrying an empty fetch",
    )
    require_description: bool = Field(
        default=DEFAULT_REQUIRE_DESCRIPTION,
        description="Drop keymaps that have no description",
    )
    log_level: str = Field(default=DEFAULT_LOG_LEVEL, description="Logging level")
    log_file: str | None = Field(
        default=None, description="Write logs to this file instead of stderr"
    )

    @field_validator("transport")
    @classmethod
    def validate_transport(cls, v: str) -> str:
        """Validate the transport name."""
        v = v.strip().lower()
        if v not in VALID_TRANSPORTS:
            raise ValueError(f"Invalid transport: {v!r}. Valid transports: {VALID_TRANSPORTS}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the log level name."""
        v = v.strip().upper()
        if v not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v!r}. Valid levels: {VALID_LOG_LEVELS}")
        return v

    @field_validator("settle_delay", "ready_timeout", "poll_interval", "readiness_grace")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        """Reject negative delays."""
        if v < 0:
            raise ValueError("Delays must be non-negative")
        return v

    @model_validator(mode="after")
    def expand_paths(self) -> "KeymapsSettings":
        """Expand user home directory in paths after validation."""
        if self.log_file and "~" in self.log_file:
            self.log_file = str(Path(self.log_file).expanduser())
        if self.nvim_path.startswith("~"):
            self.nvim_path = str(Path(self.nvim_path).expanduser())
        return self
