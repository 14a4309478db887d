"""
Logging configuration for playlist-mangler.

This module sets up the logging system with multiple outputs:
    - Console: Real-time messages with tqdm-compatible formatting
    - log_full_*.log: Complete log of all events (DEBUG and above)
    - log_errors_*.log: Only ERROR and CRITICAL level messages
    - format_failures_*.log: Playlists that could not be parsed, with the
      offending line

File outputs are only created when a log directory is given, either to
setup_logging() directly or through the 'logging.directory' config field.

Usage:
    from playlist_mangler.core.logger import setup_logging, get_logger

    setup_logging(log_dir)  # Call once at startup (CLI does this)
    logger = get_logger(__name__)  # Get logger for each module

    logger.info("Merged 3 playlists")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

from tqdm import tqdm


FORMAT_FAILURES_FILENAME = "format_failures"

# Log format for file output (detailed with timestamp)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


# ANSI escape sequences used on terminals
class Colors:
    RESET = "\033[0m"
    DIM = "\033[2m"
    BOLD = "\033[1m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Short console format: "LEVEL: message".

    The level name is colored when the output is a terminal. DEBUG records
    also show the module they came from (without the package prefix), which
    is what -v is for.

    Args:
        use_color: Force colors on or off. None decides per record from
                   whether stderr is a TTY.
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.DIM,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def __init__(self, use_color: bool | None = None) -> None:
        super().__init__()
        self.use_color = use_color

    def _colored(self) -> bool:
        if self.use_color is not None:
            return self.use_color
        return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        if self._colored():
            level = f"{self.LEVEL_COLORS.get(record.levelno, '')}{level}{Colors.RESET}"

        message = record.getMessage()
        if record.levelno <= logging.DEBUG:
            source = record.name.removeprefix("playlist_mangler.")
            message = f"[{source}] {message}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return f"{level}: {message}"


class TqdmLoggingHandler(logging.Handler):
    """
    Logging handler that writes to console without breaking tqdm progress bars.

    The CLI shows a tqdm bar while merging many playlists. Plain stderr
    logging would tear the bar apart; tqdm.write() prints above it instead.

    Attributes:
        stream: The output stream. None means whatever sys.stderr is at
                emit time.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream or sys.stderr)
        except Exception:
            self.handleError(record)


class FormatFailureHandler(logging.Handler):
    """
    Handler that captures playlist parse failures for the failures report.

    Records are written in a simple, human-readable format:

        /music/broken.m3u8
        line 4: #EXTINF:abc,Song
        EXTINF duration is not an integer

    The handler looks for specific extra fields in log records:
        - 'format_failed_reference': Filename or URI of the playlist
        - 'format_failed_line_number': 1-based line number (optional)
        - 'format_failed_line': The offending text (optional)

    Only records containing these fields are written to the report.
    Use log_format_failure() to emit such records.

    Attributes:
        report_path: Path to the format_failures log file.
        report_file: Open file handle (None until open() is called).
    """

    def __init__(self, report_path: Path) -> None:
        super().__init__()
        self.report_path = report_path
        self.report_file: TextIO | None = None

    def open(self) -> None:
        """
        Open the report file for writing.

        Called by setup_logging() after handler is created.
        File is opened in write mode (overwrites existing content).
        """
        self.report_file = open(self.report_path, "w", encoding="utf-8")

    def emit(self, record: logging.LogRecord) -> None:
        if not hasattr(record, "format_failed_reference"):
            return

        if self.report_file is None:
            return

        try:
            reference = getattr(record, "format_failed_reference", "")
            line_number = getattr(record, "format_failed_line_number", None)
            line = getattr(record, "format_failed_line", None)

            self.report_file.write(f"{reference}\n")
            if line_number is not None:
                self.report_file.write(f"line {line_number}: {line}\n")
            self.report_file.write(f"{record.getMessage()}\n\n")
            self.report_file.flush()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        """
        Close the report file handle.

        Safe to call multiple times.
        """
        if self.report_file is not None:
            self.report_file.close()
            self.report_file = None
        super().close()


class ErrorOnlyFilter(logging.Filter):
    """
    Filter that only allows ERROR and CRITICAL level records.

    Used by the error log file handler to exclude DEBUG, INFO, and WARNING.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def setup_logging(log_dir: Path | None = None, level: str = "INFO") -> None:
    """
    Configure the logging system for the application.

    This function should be called ONCE at application startup, after
    the configuration is loaded. Library users who do their own logging
    setup do not need to call it.

    Args:
        log_dir: Directory where log files will be created, or None for
                 console-only logging.
        level: Console log level name (e.g. "INFO", "DEBUG").

    Behavior:
        1. Configure root logger level to DEBUG and drop existing handlers
        2. Add console handler (TqdmLoggingHandler) at the given level
        3. If log_dir is given:
           - Create it if it doesn't exist
           - Add log_full_{timestamp}.log (DEBUG, full format)
           - Add log_errors_{timestamp}.log (filtered to ERROR+)
           - Add format_failures_{timestamp}.log (FormatFailureHandler)

    Thread Safety:
        This function is NOT thread-safe. Call it once from the main
        thread before sharing playlists between threads.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Remove any existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
    console_handler.setFormatter(ColoredConsoleFormatter())
    root_logger.addHandler(console_handler)

    if log_dir is None:
        return

    log_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    full_handler = logging.FileHandler(
        log_dir / f"log_full_{timestamp}.log", mode="w", encoding="utf-8"
    )
    full_handler.setLevel(logging.DEBUG)
    full_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    root_logger.addHandler(full_handler)

    error_handler = logging.FileHandler(
        log_dir / f"log_errors_{timestamp}.log", mode="w", encoding="utf-8"
    )
    error_handler.setLevel(logging.DEBUG)  # Filter handles the level restriction
    error_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    error_handler.addFilter(ErrorOnlyFilter())
    root_logger.addHandler(error_handler)

    failures_handler = FormatFailureHandler(
        log_dir / f"{FORMAT_FAILURES_FILENAME}_{timestamp}.log"
    )
    failures_handler.open()
    root_logger.addHandler(failures_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The logger name, typically __name__ of the calling module.

    Returns:
        logging.Logger: A logger instance configured by setup_logging().
    """
    return logging.getLogger(name)


def log_format_failure(
    logger: logging.Logger,
    reference: str,
    message: str,
    line_number: int | None = None,
    line: str | None = None
) -> None:
    """
    Log a playlist that could not be parsed.

    Logs a WARNING and attaches the extra fields FormatFailureHandler
    uses to write format_failures_*.log.

    Args:
        logger: The logger to use for the message.
        reference: Filename or URI of the playlist.
        message: Description of the grammar violation.
        line_number: 1-based line number, if known.
        line: Offending line text, if known.

    Example:
        try:
            open_playlist(path)
        except FormatError as e:
            log_format_failure(logger, str(path), e.reason, e.line_number, e.line)
    """
    logger.warning(
        f"Could not parse {reference}: {message}",
        extra={
            "format_failed_reference": reference,
            "format_failed_line_number": line_number,
            "format_failed_line": line,
        }
    )


def shutdown_logging() -> None:
    """
    Flush and close all handlers on the root logger, then remove them.

    Typically called in a finally block at CLI exit.
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        handler.flush()
        handler.close()
        root_logger.removeHandler(handler)
