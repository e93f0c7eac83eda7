"""
Test fixtures and configuration.
"""

from typing import Generator

import pytest

from sequestre.config.settings import reset_settings
from sequestre.di.container import reset_container


@pytest.fixture(autouse=True)
def fresh_globals() -> Generator:
    """Drop the settings and container singletons after each test."""
    yield
    reset_settings()
    reset_container()
