"""Constants for CLI module."""


class Commands:
    """Interactive picker command aliases."""

    EXIT = ["exit", "quit", "q", ":q"]
    HELP = ["help", "?", "/help"]


class ExitCodes:
    """Standard exit codes."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    UNAVAILABLE = 2
    NO_KEYMAPS = 3
    INTERRUPTED = 130


DEFAULT_RESULT_LIMIT = 20
PROMPT = "keymaps> "
