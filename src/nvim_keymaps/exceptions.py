"""Custom exceptions for keymap retrieval errors.

This module provides a hierarchy of exception classes for the fetch pipeline.

Exception Hierarchy:
    KeymapError (base)
    ├── UnavailableError
    ├── TransportError
    │   └── DecodeError
    └── IndexBuildError
"""


class KeymapError(Exception):
    """Base exception for all keymap errors.

    Attributes:
        transport: Name of the transport that raised the error (optional)
        original_error: Underlying exception (optional)
    """

    def __init__(
        self,
        message: str,
        transport: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize KeymapError.

        Args:
            message: Error message
            transport: Transport name (clipboard, tempfile, direct)
            original_error: Underlying exception that caused this error
        """
        self.transport = transport
        self.original_error = original_error
        super().__init__(message)


class UnavailableError(KeymapError):
    """Neovim cannot be reached at all.

    Raised when no executable is on the search path or no running instance
    can be attached to. Terminal for the session until an explicit refresh.

    Example:
        >>> raise UnavailableError("nvim executable not found", transport="direct")
    """

    pass


class TransportError(KeymapError):
    """Binding payload never arrived.

    Raised when the tag prefix is missing, the scratch file never appears,
    or the child process cannot be spawned.
    """

    pass


class DecodeError(TransportError):
    """Payload arrived but is malformed.

    Subclasses TransportError so callers that only care about "fetch failed"
    can catch one type, while still telling "no data yet" from "corrupt data".
    """

    pass


class IndexBuildError(KeymapError):
    """Fuzzy index could not be built.

    Never surfaced to callers: the search index switches to degraded
    substring matching instead.
    """

    pass
