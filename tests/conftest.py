"""
Shared pytest fixtures for pointerprint tests.
"""

import io
import logging

import pytest


@pytest.fixture
def out() -> io.StringIO:
    """Stream that pointer_print output can be written to and read back."""
    return io.StringIO()


@pytest.fixture(autouse=True)
def reset_pointerprint_logging():
    """Reset logging state before and after each test.

    Leaves only a NullHandler on the package logger and resets its level to
    NOTSET, so logging configuration from one test never leaks into another.
    """
    logger = logging.getLogger("pointerprint")

    def reset():
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            if not isinstance(handler, logging.NullHandler):
                handler.close()
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.NOTSET)

    reset()
    yield
    reset()
