"""Shared fixtures."""

import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo any logging configuration a test (e.g. the CLI) installed."""
    yield
    structlog.reset_defaults()
