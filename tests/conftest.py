import sys
from pathlib import Path

import httpx
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from zstack_edge.client import EdgeClient, EdgeConfig  # noqa: E402

TEST_HOST = "edge.test"
TEST_ACCESS_KEY = "test-access-key"
TEST_SECRET_KEY = "test-secret-key"


def pytest_configure(config):
    # Register the asyncio marker so pytest doesn't warn when it's used.
    config.addinivalue_line(
        "markers", "asyncio: mark test to run in an asyncio event loop"
    )
    # Add custom markers for test organization
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch):
    """Set the environment variables read by ``Settings``.

    Tests that need a value to be missing delete it with ``monkeypatch``.
    """
    monkeypatch.setenv("ZSTACK_HOST", TEST_HOST)
    monkeypatch.setenv("ZSTACK_ACCESS_KEY", TEST_ACCESS_KEY)
    monkeypatch.setenv("ZSTACK_SECRET_KEY", TEST_SECRET_KEY)
    monkeypatch.setenv("ZSTACK_PORT", "80")
    monkeypatch.setenv("ZSTACK_CONTEXT_PATH", "/ze")

    # Logging
    monkeypatch.setenv("LOG_LEVEL", "INFO")

    yield


@pytest.fixture
def edge_config():
    """Client configuration pointing at the fake backend."""
    return EdgeConfig.default(TEST_HOST).access_key(TEST_ACCESS_KEY, TEST_SECRET_KEY)


@pytest.fixture
def make_client(edge_config):
    """Factory building an EdgeClient on top of an ``httpx.MockTransport``.

    The handler receives each ``httpx.Request`` and returns a response.
    """
    def _make(handler, **kwargs) -> EdgeClient:
        return EdgeClient(edge_config, transport=httpx.MockTransport(handler), **kwargs)

    return _make
