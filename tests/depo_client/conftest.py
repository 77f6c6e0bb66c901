"""Shared fixtures for depo_client tests."""

import pytest
from structlog.testing import capture_logs


@pytest.fixture(autouse=True)
def log_events():
    """Capture structlog events instead of printing them."""
    with capture_logs() as events:
        yield events
