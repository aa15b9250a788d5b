"""
Pytest configuration for admin API client tests.

All tests run against a mocked requests.Session; no network is touched.
"""

import os

# Keep a developer's .env out of the test run
os.environ.setdefault("ADMIN_API_TEST_MODE", "true")

from pathlib import Path  # noqa: E402
from unittest.mock import MagicMock, patch  # noqa: E402

import pytest  # noqa: E402

from adminapi.client import AdminApiClient  # noqa: E402
from tests.helpers.fake_server import FakeAdminServer  # noqa: E402

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "files"


@pytest.fixture
def fixtures_dir():
    """Directory holding the license fixture files."""
    return FIXTURES_DIR


@pytest.fixture
def mock_session():
    """Patch requests.Session so every client gets this MagicMock."""
    with patch("adminapi.client.requests.Session") as mock_session_class:
        session = MagicMock()
        session.headers = {}
        mock_session_class.return_value = session
        yield session


@pytest.fixture
def fake_server(mock_session):
    """Unlicensed in-memory server wired into the mocked session."""
    server = FakeAdminServer()
    mock_session.request.side_effect = server.handle
    return server


@pytest.fixture
def client(mock_session, fixtures_dir):
    """Client bound to the mocked session."""
    return AdminApiClient(
        "http://mm.test:8065",
        token="test-token",
        fixtures_dir=fixtures_dir,
    )
