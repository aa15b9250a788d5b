"""
Pytest plugin exposing the admin API client to test suites.

Fixtures:
- admin_api: session-scoped client built from adminapi.settings
- admin_config: config snapshot restored after the test
- licensed_admin_api: admin_api with the license required by the
  requires_license marker already in place

Usage:
    @pytest.mark.requires_license("LDAP")
    def test_ldap_sync(licensed_admin_api):
        ...
"""

from __future__ import annotations

import pytest

from adminapi.client import AdminApiClient
from adminapi.dto import AdminConfig


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "requires_license(feature=None): require a server license (optionally for a feature) before the test",
    )


@pytest.fixture(scope="session")
def admin_api():
    """Admin API client shared by the whole test session."""
    client = AdminApiClient.from_settings()
    yield client
    client.close()


@pytest.fixture
def admin_config(admin_api):
    """Snapshot of the server config, written back after the test."""
    snapshot: AdminConfig = admin_api.get_config().config
    yield snapshot
    admin_api.update_config(snapshot, merge=False)


@pytest.fixture
def licensed_admin_api(request, admin_api):
    """admin_api after satisfying the test's requires_license marker."""
    marker = request.node.get_closest_marker("requires_license")
    feature = None
    if marker is not None:
        feature = marker.kwargs.get("feature") or (marker.args[0] if marker.args else None)

    if feature:
        admin_api.require_license_for_feature(feature)
    else:
        admin_api.require_license()
    return admin_api
