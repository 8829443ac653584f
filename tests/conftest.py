"""Shared pytest fixtures."""

import pytest

from tests.fakeweb import FakeWeb


@pytest.fixture
def web():
    """Create an empty fake web."""
    return FakeWeb()
