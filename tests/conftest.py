"""Root conftest — shared test configuration."""

import os

# Pin settings before anything imports invoice_dashboard.config
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("DEMO_LATENCY_SCALE", "0")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402

from invoice_dashboard.infrastructure.cache import data_cache  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_data_cache():
    """The tag-based cache is process-wide; no test may see another's entries."""
    data_cache.clear()
    yield
    data_cache.clear()
