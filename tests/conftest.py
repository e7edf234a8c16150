import sys
from pathlib import Path

import pytest
import structlog

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from tests.fakes import Harness  # noqa: E402


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def reset_structlog():
    """Reset structlog configuration before each test to avoid caching issues."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()


@pytest.fixture
def harness() -> Harness:
    return Harness.create()
