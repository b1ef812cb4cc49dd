"""
Tests for logging setup
"""

import logging

import pytest
from rich.logging import RichHandler

from fluxline.utils.logging import LOGGER_NAME, configure_logging


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


class TestConfigureLogging:
    """Test configure_logging()"""

    def test_level_by_name(self):
        logger = configure_logging("debug")

        assert logger.name == "fluxline"
        assert logger.level == logging.DEBUG

    def test_level_by_number(self):
        assert configure_logging(logging.ERROR).level == logging.ERROR

    def test_single_rich_handler(self):
        """Test repeated calls replace the handler instead of stacking"""
        configure_logging("INFO")
        logger = configure_logging("INFO")

        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)

    def test_module_loggers_inherit(self):
        configure_logging("WARNING")
        child = logging.getLogger("fluxline.sql.parser")

        assert child.getEffectiveLevel() == logging.WARNING

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging("LOUD")
