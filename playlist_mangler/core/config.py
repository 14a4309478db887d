"""
Configuration management for playlist-mangler.

This module handles loading, validating, and providing access to the
configuration stored in playlist_mangler.yaml.

The configuration file contains:
    - Text I/O settings (encoding, newline, HTTP timeout for remote playlists)
    - Guard policy for shared playlists (blocking or fail-fast, timeout)
    - Logging settings (log directory, console level)

Configuration File Location:
    When no explicit path is given, playlist_mangler.yaml is looked up in
    the current working directory. If it is not there, built-in defaults
    are used. An explicitly given path that does not exist is an error.

Example playlist_mangler.yaml:
    io:
      encoding: utf-8
      newline: "\\n"
      request_timeout: 10

    guard:
      blocking: true
      timeout: null  # Optional: seconds to wait before ContentionError

    logging:
      directory: null  # Optional: directory for log files
      level: INFO
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from playlist_mangler.core.exceptions import ConfigError
from playlist_mangler.core.guard import ReadWriteGuard


# Default configuration file name (looked up in current working directory)
CONFIG_FILENAME = "playlist_mangler.yaml"

_VALID_NEWLINES = ("\n", "\r\n")
_VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class IOConfig:
    """
    Text I/O configuration used by format providers.

    Attributes:
        encoding: Encoding used to decode and encode playlist text.
                  A UTF-8 byte order mark is always tolerated on read.
        newline: Line terminator written on save ("\\n" or "\\r\\n").
        request_timeout: Seconds to wait for http(s) playlist downloads.
    """
    encoding: str = "utf-8"
    newline: str = "\n"
    request_timeout: float = 10.0


@dataclass(frozen=True)
class GuardConfig:
    """
    Reader/writer guard policy for playlist containers.

    Attributes:
        blocking: If True, conflicting operations wait for each other.
                  If False, they fail immediately with ContentionError.
        timeout: Maximum seconds a blocking operation waits before raising
                 ContentionError. None waits indefinitely.
    """
    blocking: bool = True
    timeout: float | None = None

    def make_guard(self) -> ReadWriteGuard:
        """Create a fresh guard with this policy."""
        return ReadWriteGuard(blocking=self.blocking, timeout=self.timeout)


@dataclass(frozen=True)
class LoggingConfig:
    """
    Logging configuration.

    Attributes:
        directory: Directory where log files are written, or None for
                   console-only logging.
        level: Console log level name.
    """
    directory: Path | None = None
    level: str = "INFO"


@dataclass(frozen=True)
class Config:
    """
    Complete library configuration.

    This is the main configuration object that aggregates all configuration
    sections. It is created by load_config() (or Config.default()) and is
    immutable.

    Attributes:
        io: Text I/O settings.
        guard: Guard policy for containers.
        logging: Logging settings.

    Example:
        config = load_config()
        playlist = open_playlist("mix.m3u8", config=config)
    """
    io: IOConfig = field(default_factory=IOConfig)
    guard: GuardConfig = field(default_factory=GuardConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def default(cls) -> "Config":
        """Return the built-in configuration."""
        return cls()


def load_config(config_path: Path | None = None) -> Config:
    """
    Load and validate configuration from playlist_mangler.yaml.

    Args:
        config_path: Optional explicit path to config file.
                     If None, looks for playlist_mangler.yaml in the current
                     working directory and falls back to defaults.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If an explicit config file is not found, the file has
                     invalid YAML syntax, or contains invalid values.

    Behavior:
        1. Locate config file (explicit path or CWD/playlist_mangler.yaml)
        2. Read and parse YAML content
        3. Validate that every present section is a dictionary
        4. Parse each section, applying defaults for missing fields
        5. Create and return frozen Config object
    """
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME
        if not config_path.exists():
            return Config.default()
    else:
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigError(
                f"Configuration file not found: {config_path}",
                details={"file_path": str(config_path)}
            )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    # An empty file is a valid "all defaults" configuration
    if raw_config is None:
        return Config.default()

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    return parse_config(raw_config)


def parse_config(raw_config: dict[str, Any]) -> Config:
    """
    Build a Config from an already-parsed dictionary.

    Args:
        raw_config: Dictionary with optional 'io', 'guard' and 'logging' sections.

    Returns:
        Config: Validated configuration.

    Raises:
        ConfigError: If a section is not a dictionary or a value is invalid.
    """
    for section in ("io", "guard", "logging"):
        value = raw_config.get(section)
        if value is not None and not isinstance(value, dict):
            raise ConfigError(
                f"Section '{section}' must be a dictionary",
                details={"section": section}
            )

    return Config(
        io=_parse_io_config(raw_config.get("io") or {}),
        guard=_parse_guard_config(raw_config.get("guard") or {}),
        logging=_parse_logging_config(raw_config.get("logging") or {}),
    )


def _parse_io_config(section: dict[str, Any]) -> IOConfig:
    defaults = IOConfig()

    encoding = section.get("encoding", defaults.encoding)
    if not isinstance(encoding, str) or not encoding.strip():
        raise ConfigError(
            "'io.encoding' must be a non-empty string",
            details={"field": "io.encoding"}
        )

    newline = section.get("newline", defaults.newline)
    if newline not in _VALID_NEWLINES:
        raise ConfigError(
            "'io.newline' must be \"\\n\" or \"\\r\\n\"",
            details={"field": "io.newline", "value": newline}
        )

    timeout = section.get("request_timeout", defaults.request_timeout)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigError(
            "'io.request_timeout' must be a positive number",
            details={"field": "io.request_timeout", "value": timeout}
        )

    return IOConfig(
        encoding=encoding.strip(),
        newline=newline,
        request_timeout=float(timeout)
    )


def _parse_guard_config(section: dict[str, Any]) -> GuardConfig:
    blocking = section.get("blocking", True)
    if not isinstance(blocking, bool):
        raise ConfigError(
            "'guard.blocking' must be true or false",
            details={"field": "guard.blocking", "value": blocking}
        )

    timeout = section.get("timeout")
    if timeout is not None:
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigError(
                "'guard.timeout' must be a positive number or null",
                details={"field": "guard.timeout", "value": timeout}
            )
        timeout = float(timeout)

    return GuardConfig(blocking=blocking, timeout=timeout)


def _parse_logging_config(section: dict[str, Any]) -> LoggingConfig:
    directory = section.get("directory")
    log_dir = None
    if directory is not None:
        if not isinstance(directory, str) or not directory.strip():
            raise ConfigError(
                "'logging.directory' must be a non-empty string or null",
                details={"field": "logging.directory"}
            )
        # Expand ~ and make absolute
        log_dir = Path(directory.strip()).expanduser().resolve()

    level = section.get("level", "INFO")
    if not isinstance(level, str) or level.upper() not in _VALID_LEVELS:
        raise ConfigError(
            f"'logging.level' must be one of {', '.join(_VALID_LEVELS)}",
            details={"field": "logging.level", "value": level}
        )

    return LoggingConfig(directory=log_dir, level=level.upper())
