"""
Core module for playlist-mangler.

This module provides the foundational components used throughout the library:
    - exceptions: Custom exception classes for error handling
    - config: Configuration loading and validation
    - guard: Reader/writer guard protecting shared playlist state
    - logger: Logging system with console and file outputs

Usage:
    from playlist_mangler.core import (
        Config, load_config,
        ReadWriteGuard,
        setup_logging, get_logger,
        PlaylistManglerError, FormatError, ResourceError
    )
"""

from playlist_mangler.core.config import (
    Config,
    GuardConfig,
    IOConfig,
    LoggingConfig,
    load_config,
    parse_config,
)
from playlist_mangler.core.exceptions import (
    ConfigError,
    ContentionError,
    FormatError,
    PlaylistManglerError,
    ResourceError,
)
from playlist_mangler.core.guard import MetadataSlot, ReadWriteGuard
from playlist_mangler.core.logger import (
    get_logger,
    log_format_failure,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    # Config
    "Config",
    "IOConfig",
    "GuardConfig",
    "LoggingConfig",
    "load_config",
    "parse_config",
    # Guard
    "ReadWriteGuard",
    "MetadataSlot",
    # Exceptions
    "PlaylistManglerError",
    "ConfigError",
    "ContentionError",
    "FormatError",
    "ResourceError",
    # Logger
    "setup_logging",
    "get_logger",
    "log_format_failure",
    "shutdown_logging",
]
