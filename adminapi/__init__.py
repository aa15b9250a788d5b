"""
Admin API test client.

Provides:
- AdminApiClient: helpers for the server's administrative REST endpoints
- DTOs for licenses, config, analytics and brand-image outcomes
- Exceptions surfaced to the calling test

Settings are read from adminapi.settings; the pytest plugin lives in
adminapi.pytest_plugin and is registered through the pytest11 entry point.
"""

from adminapi.client import AdminApiClient
from adminapi.dto import (
    AdminConfig,
    AnalyticsResult,
    AnalyticsRow,
    BrandImageDeletion,
    BrandImageOutcome,
    ClientLicense,
    ConfigResult,
    LicenseResult,
    StatusPayload,
)
from adminapi.errors import (
    AdminApiClientError,
    AdminApiError,
    FixtureNotFoundError,
    LicenseRequirementError,
)

__all__ = [
    "AdminApiClient",
    "AdminApiClientError",
    "AdminApiError",
    "AdminConfig",
    "AnalyticsResult",
    "AnalyticsRow",
    "BrandImageDeletion",
    "BrandImageOutcome",
    "ClientLicense",
    "ConfigResult",
    "FixtureNotFoundError",
    "LicenseRequirementError",
    "LicenseResult",
    "StatusPayload",
]
