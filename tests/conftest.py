"""Fixtures and configuration for pytest."""

import sys

import pytest
from loguru import logger

from py2hlsl.sources import clear_shader_sources


@pytest.fixture(autouse=True)
def reset_logging():
    """Restore the default loguru sink after tests that reconfigure it."""
    yield
    logger.remove()
    logger.add(sys.stderr, level="DEBUG")


@pytest.fixture(autouse=True)
def clean_registry():
    """Start every test with an empty shader source registry."""
    clear_shader_sources()
    yield
    clear_shader_sources()


@pytest.fixture
def log_messages():
    """Capture loguru messages as ``LEVEL: message`` strings."""
    messages: list[str] = []
    handler_id = logger.add(
        lambda message: messages.append(str(message).rstrip("\n")),
        level="DEBUG",
        format="{level}: {message}",
    )
    yield messages
    logger.remove(handler_id)
