"""
Exception classes for playlist-mangler.

This module defines all custom exceptions used throughout the library.
Each exception is designed to provide clear, actionable error messages
and to distinguish between different failure modes.

Exception Hierarchy:
    PlaylistManglerError (base)
        ConfigError - Configuration file issues
        ResourceError - Playlist file/URI could not be read or written
        FormatError - Text violates the active dialect's grammar
        ContentionError - A guarded operation could not be serialized

Out-of-range positions passed to the container raise the built-in
IndexError, like any Python sequence.
"""


class PlaylistManglerError(Exception):
    """
    Base exception for all playlist-mangler errors.

    All custom exceptions in this project inherit from this class,
    allowing callers to catch all playlist-mangler errors with a single
    except clause if desired.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (e.g., reference, line).

    Example:
        try:
            playlist = ExtM3UFormat().from_path("mix.m3u8")
        except PlaylistManglerError as e:
            logger.error(f"Operation failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description that will be shown to the user.
            details: Optional dictionary containing additional context about the error.
                     Common keys include:
                     - 'reference': Playlist filename or URI involved in the error
                     - 'line_number': 1-based line number of the offending text
                     - 'original_error': The underlying exception if wrapping another error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(PlaylistManglerError):
    """
    Raised when there's an issue with the configuration file.

    Common causes:
        - An explicitly given config file does not exist
        - The file has invalid YAML syntax
        - Invalid field values (e.g., negative guard timeout)

    Example:
        raise ConfigError(
            "'guard.timeout' must be a positive number or null",
            details={'field': 'guard.timeout', 'value': -1}
        )
    """
    pass


class ResourceError(PlaylistManglerError):
    """
    Raised when a playlist resource cannot be opened, read or written.

    The library never retries; callers decide whether to try again.

    Common causes:
        - File not found or permission denied
        - Undecodable bytes for the configured encoding
        - HTTP error or timeout when fetching a remote playlist
        - Disk full while saving (the destination is left untouched)

    Attributes:
        reference: The filename or URI that failed.

    Example:
        raise ResourceError(
            "Failed to read playlist: permission denied",
            reference="/music/mix.m3u",
            details={'original_error': str(e)}
        )
    """

    def __init__(
        self,
        message: str,
        reference: str | None = None,
        details: dict | None = None
    ) -> None:
        """
        Initialize resource error.

        Args:
            message: Human-readable error description.
            reference: Filename or URI of the resource that failed.
            details: Optional dictionary with additional context.
        """
        details = dict(details or {})
        if reference is not None:
            details.setdefault("reference", reference)
        super().__init__(message, details)
        self.reference = reference


class FormatError(PlaylistManglerError):
    """
    Raised when playlist text violates the grammar of the active dialect.

    Parsing never guesses past malformed input. The error carries the
    offending line so that the problem can be diagnosed.

    Common causes:
        - '#EXTINF' without an integer duration
        - A '#EXTINF' line that is not followed by a reference line
        - An extended M3U document missing its '#EXTM3U' header

    Attributes:
        line_number: 1-based line number, or None when parsing a lone unit.
        line: The offending text.
        reason: The description alone, without the line suffix that is
                appended to message.

    Example:
        raise FormatError(
            "EXTINF duration is not an integer",
            line_number=3,
            line="#EXTINF:abc,Song"
        )
    """

    def __init__(
        self,
        message: str,
        line_number: int | None = None,
        line: str | None = None,
        details: dict | None = None
    ) -> None:
        """
        Initialize format error.

        Args:
            message: Human-readable error description.
            line_number: 1-based line number of the offending text, if known.
            line: The offending text itself.
            details: Optional dictionary with additional context.
        """
        details = dict(details or {})
        if line_number is not None:
            details.setdefault("line_number", line_number)
        if line is not None:
            details.setdefault("line", line)

        reason = message
        if line_number is not None:
            message = f"{message} (line {line_number}: {line!r})"
        elif line is not None:
            message = f"{message} ({line!r})"

        super().__init__(message, details)
        self.line_number = line_number
        self.line = line
        self.reason = reason


class ContentionError(PlaylistManglerError):
    """
    Raised when a guarded read or write could not be serialized.

    With a fail-fast guard this is raised as soon as the guard is busy.
    With a blocking guard it is raised when the configured timeout expires,
    or when a thread holding a read asks to write (which would otherwise
    wait forever on itself).

    Attributes:
        operation: Name of the container operation that was refused.
        mode: 'read' or 'write'.

    Example:
        raise ContentionError(
            "Playlist is being modified by another holder",
            operation="add_entry",
            mode="write"
        )
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        mode: str | None = None,
        details: dict | None = None
    ) -> None:
        """
        Initialize contention error.

        Args:
            message: Human-readable error description.
            operation: The operation that could not acquire the guard.
            mode: Requested access mode ('read' or 'write').
            details: Optional dictionary with additional context.
        """
        details = dict(details or {})
        if operation is not None:
            details.setdefault("operation", operation)
        if mode is not None:
            details.setdefault("mode", mode)
        super().__init__(message, details)
        self.operation = operation
        self.mode = mode
