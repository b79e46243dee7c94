"""
Shared pytest configuration.
"""

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def silence_logs():
    """Keep test output clean of engine logs."""
    logger.remove()
    logger.add(lambda message: None, level="DEBUG")
    yield
    logger.remove()
