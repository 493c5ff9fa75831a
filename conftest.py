"""
Root conftest: puts src on the path and provides shared fixtures.
"""

import logging
import sys
from pathlib import Path

# Ensure src on path
sys.path.insert(0, str(Path(__file__).parent / "src"))

import pytest  # noqa: E402
import structlog  # noqa: E402

logger = logging.getLogger(__name__)


@pytest.fixture(autouse=True)
def reset_structlog():
    """Keep structlog at its defaults so capture_logs sees every event."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()
