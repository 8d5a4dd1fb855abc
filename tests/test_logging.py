"""
Unit tests for logging setup.
"""

import io
import logging

import pytest

from safe_image.utils.logging import LOG_LEVEL_ENV, get_logger, setup_logging


@pytest.fixture
def clean_root():
    """
    Root logger, restored afterwards.

    Handlers are cleared by the tests themselves: capture handlers are
    attached after fixture setup.
    """
    root = logging.getLogger()
    package = logging.getLogger("safe_image")
    saved_handlers, saved_level = root.handlers[:], root.level
    saved_package_level = package.level
    yield root
    root.handlers = saved_handlers
    root.setLevel(saved_level)
    package.setLevel(saved_package_level)


def test_installs_handler_and_level(clean_root):
    """Test that a bare root gets one formatted handler."""
    clean_root.handlers = []
    stream = io.StringIO()
    logger = setup_logging(level=logging.DEBUG, stream=stream)

    assert logger.name == "safe_image"
    assert len(clean_root.handlers) == 1
    get_logger("safe_image.test").debug("hello")
    assert "safe_image.test - DEBUG - hello" in stream.getvalue()


def test_level_names_accepted(clean_root):
    """Test string level names."""
    logger = setup_logging(level="warning", stream=io.StringIO())
    assert logger.level == logging.WARNING


def test_level_from_environment(clean_root, monkeypatch):
    """Test the environment fallback."""
    monkeypatch.setenv(LOG_LEVEL_ENV, "ERROR")
    logger = setup_logging(stream=io.StringIO())
    assert logger.level == logging.ERROR


def test_unknown_level_rejected(clean_root):
    """Test bad level names."""
    with pytest.raises(ValueError):
        setup_logging(level="chatty")


def test_existing_handlers_reused(clean_root):
    """Test that host handlers are kept, not duplicated."""
    clean_root.handlers = []
    handler = logging.StreamHandler(io.StringIO())
    clean_root.addHandler(handler)
    setup_logging(level=logging.INFO)

    assert clean_root.handlers == [handler]
    assert handler.formatter is not None
