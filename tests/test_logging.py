"""Tests for logger construction."""

import logging

from specbridge.core.logging import LOGGER_NAME, get_logger, setup_logging


class TestGetLogger:
    """Tests for get_logger."""

    def test_default_name_and_level(self):
        """Test the default logger is the package logger at WARNING."""
        logger = get_logger()
        assert logger.name == LOGGER_NAME
        assert logger.level == logging.WARNING

    def test_quiet_logger_drops_info(self, caplog):
        """Test INFO records are not emitted unless verbose."""
        logger = get_logger(name="specbridge.quiet")
        with caplog.at_level(logging.DEBUG):
            logger.info("GitHub target ready")
        assert "GitHub target ready" not in caplog.text

    def test_verbose_enables_debug(self):
        """Test verbose loggers emit DEBUG records."""
        logger = get_logger(verbose=True, name="specbridge.test")
        assert logger.isEnabledFor(logging.DEBUG)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_levels(self):
        """Test the root level follows the verbose flag."""
        root = logging.getLogger()
        original = root.level
        try:
            setup_logging(verbose=True)
            assert root.level == logging.DEBUG
            setup_logging(verbose=False)
            assert root.level == logging.WARNING
        finally:
            root.setLevel(original)
