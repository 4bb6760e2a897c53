"""Tests for CLI helpers."""

import logging
from collections.abc import Iterator

import pytest
from rich.logging import RichHandler

from pyversioner.cli._helpers import configure_logging


@pytest.fixture
def package_logger() -> Iterator[logging.Logger]:
    """Package logger, restored after the test."""
    logger = logging.getLogger("pyversioner")
    level = logger.level
    handlers = list(logger.handlers)
    yield logger
    logger.setLevel(level)
    logger.handlers[:] = handlers


def test_configure_logging_keeps_host_level(package_logger: logging.Logger) -> None:
    """Test non-verbose commands leave the logger as configured."""
    package_logger.setLevel(logging.INFO)
    handlers = list(package_logger.handlers)
    configure_logging(False)
    assert package_logger.level == logging.INFO
    assert package_logger.handlers == handlers


def test_configure_logging_verbose(package_logger: logging.Logger) -> None:
    """Test verbose commands log debug messages through one rich handler."""
    configure_logging(True)
    configure_logging(True)
    assert package_logger.level == logging.DEBUG
    rich_handlers = [
        h for h in package_logger.handlers if isinstance(h, RichHandler)
    ]
    assert len(rich_handlers) == 1
