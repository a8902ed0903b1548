"""Tests for logging configuration."""

from __future__ import annotations

import logging

from nutriopt.app_logging import configure_logging


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_single_handler(self):
        configure_logging()
        configure_logging()

        logger = logging.getLogger("nutriopt")
        assert len(logger.handlers) == 1
        assert logger.propagate is False
        assert logger.level == logging.INFO

    def test_level_can_be_raised_later(self):
        configure_logging()
        configure_logging(logging.DEBUG)

        logger = logging.getLogger("nutriopt")
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG

    def test_module_loggers_inherit(self):
        configure_logging(logging.WARNING)
        child = logging.getLogger("nutriopt.optimizer.solver")
        assert child.getEffectiveLevel() == logging.WARNING
