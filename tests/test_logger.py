# tests/test_logger.py
"""Test logging setup and the format failures report"""

import logging

import pytest

from playlist_mangler.core import get_logger, log_format_failure, setup_logging, shutdown_logging
from playlist_mangler.core.logger import ColoredConsoleFormatter, ErrorOnlyFilter, TqdmLoggingHandler


@pytest.fixture
def log_dir(temp_dir):
    """Configure file logging into temp_dir/logs, shut it down afterwards"""
    directory = temp_dir / "logs"
    setup_logging(directory, "INFO")
    yield directory
    shutdown_logging()


class TestLogging:
    """Test setup_logging and shutdown_logging"""

    def test_console_only(self):
        """Test that no directory means a single console handler"""
        setup_logging(None, "WARNING")
        try:
            handlers = logging.getLogger().handlers
            assert len(handlers) == 1
            assert isinstance(handlers[0], TqdmLoggingHandler)
            assert handlers[0].level == logging.WARNING
        finally:
            shutdown_logging()
        assert logging.getLogger().handlers == []

    def test_log_files(self, log_dir):
        """Test that full, error and failure logs are created"""
        logger = get_logger("playlist_mangler.test")
        logger.debug("debug line")
        logger.error("error line")

        for handler in logging.getLogger().handlers:
            handler.flush()

        full_log = next(log_dir.glob("log_full_*.log")).read_text(encoding="utf-8")
        error_log = next(log_dir.glob("log_errors_*.log")).read_text(encoding="utf-8")

        assert "debug line" in full_log
        assert "error line" in full_log
        assert "error line" in error_log
        assert "debug line" not in error_log

    def test_format_failure_report(self, log_dir):
        """Test that parse failures are written to format_failures_*.log"""
        logger = get_logger("playlist_mangler.test")
        log_format_failure(
            logger, "/music/broken.m3u8", "EXTINF needs an integer duration",
            line_number=4, line="#EXTINF:abc,Song"
        )
        logger.warning("not a failure record")

        report = next(log_dir.glob("format_failures_*.log")).read_text(encoding="utf-8")
        assert report.startswith("/music/broken.m3u8\nline 4: #EXTINF:abc,Song\n")
        assert "not a failure record" not in report

    def test_error_only_filter(self):
        """Test the error log filter"""
        record = logging.LogRecord("x", logging.WARNING, __file__, 1, "msg", None, None)
        assert not ErrorOnlyFilter().filter(record)
        record.levelno = logging.CRITICAL
        assert ErrorOnlyFilter().filter(record)

    def test_console_format(self):
        """Test the short console format with and without colors"""
        record = logging.LogRecord(
            "playlist_mangler.formats.extm3u", logging.DEBUG, __file__, 1, "parsed %d", (3,), None
        )
        plain = ColoredConsoleFormatter(use_color=False)
        assert plain.format(record) == "DEBUG: [formats.extm3u] parsed 3"

        record.levelno, record.levelname = logging.WARNING, "WARNING"
        assert plain.format(record) == "WARNING: parsed 3"
        assert "\033[" in ColoredConsoleFormatter(use_color=True).format(record)
