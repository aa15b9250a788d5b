"""
Exceptions raised by the admin API client.

Every failure is surfaced to the calling test; nothing is retried or recovered
locally. Three kinds exist:
1. AdminApiError - unexpected HTTP status, or the request never completed
2. FixtureNotFoundError - upload input does not resolve under the fixtures dir
3. LicenseRequirementError - a require-license check is still unsatisfied
   after one remediation upload
"""

from __future__ import annotations

from pathlib import Path


class AdminApiClientError(Exception):
    """Base class for admin API client failures."""

    pass


class AdminApiError(AdminApiClientError):
    """Raised when the server answers with a status outside the expected set."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
        method: str | None = None,
        url: str | None = None,
    ):
        self.status_code = status_code
        self.body = body[:500] if body else None  # Trim body for logging
        self.method = method
        self.url = url
        super().__init__(message)


class FixtureNotFoundError(AdminApiClientError):
    """Raised before any request when a fixture path does not resolve."""

    def __init__(self, path: str | Path, fixtures_dir: Path):
        self.path = str(path)
        self.fixtures_dir = fixtures_dir
        super().__init__(f"Fixture file not found: {self.path} (fixtures dir: {fixtures_dir})")


class LicenseRequirementError(AdminApiClientError):
    """Raised when the server still lacks a license (or feature) after upload."""

    def __init__(self, feature: str | None = None):
        self.feature = feature
        if feature:
            message = f"Server license does not include feature {feature!r} after uploading fixture license"
        else:
            message = "Server has no valid license after uploading fixture license"
        super().__init__(message)
