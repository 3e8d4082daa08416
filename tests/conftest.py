"""Root conftest — shared test configuration."""

import os

import pytest

from healthd.config import get_settings

# Keep test logs human-readable regardless of the developer's .env
os.environ.setdefault("HEALTHD_LOG_FORMAT", "text")


@pytest.fixture(autouse=True)
def fresh_settings():
    """get_settings() is lru_cached; clear it around each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
