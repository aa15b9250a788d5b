"""
Admin API v4 client.

Test helpers for the server's administrative REST endpoints. Each helper
issues its request(s), blocks until the response arrives, checks the status
against the documented success set and returns a typed payload. Any other
status raises AdminApiError; nothing is retried.

Endpoints (relative to {base_url}/api/v4):
- POST /users/login - obtain a session token
- GET /license/client - client-visible license fields
- POST /license - upload a license file (multipart)
- DELETE /license - remove the license
- GET /config, PUT /config - read/replace the server config
- POST /config/reload - reload config from its store
- GET /analytics/old - analytics rows
- POST /caches/invalidate - invalidate all caches
- DELETE /brand/image - delete the custom brand image (404 means absent)
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Mapping

import requests
from pydantic import ValidationError

from adminapi import settings
from adminapi.dto import (
    AdminConfig,
    AnalyticsResult,
    BrandImageDeletion,
    BrandImageOutcome,
    ClientLicense,
    ConfigResult,
    LicenseResult,
    StatusPayload,
)
from adminapi.errors import AdminApiError, LicenseRequirementError
from adminapi.fixtures import resolve_fixture
from adminapi.observability import log_api_event

logger = logging.getLogger(__name__)

API_ROOT = "/api/v4"

OK = (200,)
OK_OR_NOT_FOUND = (200, 404)


class AdminApiClient:
    """
    HTTP client for the admin API.

    One requests.Session is shared by every call so cookies and the bearer
    token obtained at login carry over between helpers.
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        *,
        timeout_s: float = 30.0,
        fixtures_dir: str | Path | None = None,
        license_fixture: str | None = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Server root URL (e.g., http://localhost:8065)
            token: Personal access or session token; omit and call login()
            timeout_s: Per-request timeout (seconds)
            fixtures_dir: Directory upload paths are resolved against
            license_fixture: Fixture file uploaded by the require-license helpers
        """
        if not base_url:
            raise ValueError("Admin API base_url is required")
        self.base_url = base_url.rstrip("/")
        self.api_url = f"{self.base_url}{API_ROOT}"
        self.timeout_s = timeout_s
        self.fixtures_dir = Path(fixtures_dir) if fixtures_dir else settings.ADMIN_API_FIXTURES_DIR
        self.license_fixture = license_fixture or settings.ADMIN_API_LICENSE_FIXTURE
        self._session = requests.Session()
        self._session.headers.update({
            "Accept": "application/json",
            # Server rejects token-less non-browser writes without this header
            "X-Requested-With": "XMLHttpRequest",
        })
        self.token: str | None = None
        if token:
            self.set_token(token)

    @classmethod
    def from_settings(cls) -> "AdminApiClient":
        """
        Build a client from adminapi.settings.

        Uses ADMIN_API_TOKEN when set, otherwise logs in with
        ADMIN_API_USERNAME / ADMIN_API_PASSWORD.
        """
        client = cls(
            settings.ADMIN_API_URL,
            token=settings.ADMIN_API_TOKEN or None,
            timeout_s=settings.ADMIN_API_TIMEOUT_SECONDS,
            fixtures_dir=settings.ADMIN_API_FIXTURES_DIR,
            license_fixture=settings.ADMIN_API_LICENSE_FIXTURE,
        )
        if not client.token:
            client.login(settings.ADMIN_API_USERNAME, settings.ADMIN_API_PASSWORD)
        return client

    def __enter__(self) -> "AdminApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._session.close()

    def set_token(self, token: str) -> None:
        self.token = token
        self._session.headers["Authorization"] = f"Bearer {token}"

    # =========================================================================
    # AUTH
    # =========================================================================

    def login(self, username: str, password: str) -> dict[str, Any]:
        """
        Log in and keep the session token for subsequent calls.

        Returns:
            The logged-in user payload

        Raises:
            AdminApiError: If login fails or the response carries no token
        """
        response = self._request(
            "POST",
            "/users/login",
            json={"login_id": username, "password": password},
        )
        token = response.headers.get("Token")
        if not token:
            raise AdminApiError(
                "Login succeeded but response carried no Token header",
                status_code=response.status_code,
                method="POST",
                url=f"{self.api_url}/users/login",
            )
        self.set_token(token)
        logger.info("Logged in to admin API: username=%s", username)
        return self._json(response, "/users/login")

    # =========================================================================
    # LICENSE
    # =========================================================================

    def get_client_license(self) -> LicenseResult:
        """GET /license/client - subset of the license visible to clients."""
        response = self._request("GET", "/license/client", params={"format": "old"})
        data = self._json(response, "/license/client")
        return LicenseResult(license=self._parse(ClientLicense, data, "/license/client"))

    def upload_license(self, file_path: str | Path) -> requests.Response:
        """
        Upload a license file from the fixtures directory.

        Args:
            file_path: Path of the license file relative to the fixtures dir

        Returns:
            Raw response (status 200)

        Raises:
            FixtureNotFoundError: If the file does not resolve; no request is sent
            AdminApiError: If the server rejects the license
        """
        path = resolve_fixture(file_path, self.fixtures_dir)
        with path.open("rb") as fh:
            return self._request("POST", "/license", files={"license": (path.name, fh)})

    def delete_license(self) -> requests.Response:
        """DELETE /license - disables all licensed features."""
        return self._request("DELETE", "/license")

    def require_license(self, fixture: str | Path | None = None) -> LicenseResult:
        """
        Ensure the server has a valid license, uploading the fixture if not.

        Args:
            fixture: License fixture to upload (default: self.license_fixture)

        Raises:
            LicenseRequirementError: If still unlicensed after the upload
        """
        return self._ensure_license(None, fixture)

    def require_license_for_feature(
        self,
        feature: str,
        fixture: str | Path | None = None,
    ) -> LicenseResult:
        """
        Ensure the server license enables `feature`, uploading the fixture if not.

        Args:
            feature: Feature flag name, e.g. "LDAP"
            fixture: License fixture to upload (default: self.license_fixture)

        Raises:
            ValueError: If feature is blank
            LicenseRequirementError: If the feature is still missing after the upload
        """
        if not feature or not feature.strip():
            raise ValueError("feature is required")
        return self._ensure_license(feature.strip(), fixture)

    def _ensure_license(
        self,
        feature: str | None,
        fixture: str | Path | None,
    ) -> LicenseResult:
        # Check, upload at most once, re-check. No loop.
        current = self.get_client_license().license
        if _license_satisfies(current, feature):
            logger.info("License requirement satisfied: feature=%s", feature or "-")
            return LicenseResult(license=current)

        fixture = fixture or self.license_fixture
        logger.info(
            "License requirement unmet, uploading fixture: feature=%s, fixture=%s",
            feature or "-",
            fixture,
        )
        self.upload_license(fixture)

        refreshed = self.get_client_license().license
        if not _license_satisfies(refreshed, feature):
            raise LicenseRequirementError(feature)
        return LicenseResult(license=refreshed)

    # =========================================================================
    # CONFIG
    # =========================================================================

    def get_config(self) -> ConfigResult:
        """GET /config."""
        response = self._request("GET", "/config")
        data = self._json(response, "/config")
        return ConfigResult(config=self._parse(AdminConfig, data, "/config"))

    def update_config(
        self,
        new_config: AdminConfig | Mapping[str, Any],
        *,
        merge: bool = True,
    ) -> ConfigResult:
        """
        Update the server config.

        With merge=True (default) the current config is fetched first and
        new_config is deep-merged over it, so callers may pass only the
        sections they change. With merge=False new_config is sent as-is.

        Returns:
            The config as persisted by the server
        """
        if isinstance(new_config, AdminConfig):
            payload = new_config.to_payload()
        else:
            payload = dict(new_config)

        if merge:
            payload = self.get_config().config.merged(payload).to_payload()

        response = self._request("PUT", "/config", json=payload)
        data = self._json(response, "/config")
        return ConfigResult(config=self._parse(AdminConfig, data, "/config"))

    def reload_config(self) -> ConfigResult:
        """POST /config/reload, then re-fetch the config."""
        self._request("POST", "/config/reload")
        return self.get_config()

    # =========================================================================
    # SYSTEM
    # =========================================================================

    def get_analytics(self) -> AnalyticsResult:
        """GET /analytics/old - rows in server order."""
        response = self._request("GET", "/analytics/old")
        data = self._json(response, "/analytics/old")
        return self._parse(AnalyticsResult, {"analytics": data or []}, "/analytics/old")

    def invalidate_cache(self) -> StatusPayload:
        """POST /caches/invalidate."""
        response = self._request("POST", "/caches/invalidate")
        data = self._json(response, "/caches/invalidate")
        return self._parse(StatusPayload, data, "/caches/invalidate")

    def delete_brand_image(self) -> BrandImageDeletion:
        """
        DELETE /brand/image.

        200 means the image was deleted, 404 means there was none. Both succeed.
        """
        response = self._request("DELETE", "/brand/image", expected=OK_OR_NOT_FOUND)
        if response.status_code == 404:
            outcome = BrandImageOutcome.ALREADY_ABSENT
        else:
            outcome = BrandImageOutcome.DELETED
        return BrandImageDeletion(outcome=outcome, response=response)

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    def _request(
        self,
        method: str,
        path: str,
        *,
        expected: tuple[int, ...] = OK,
        **kwargs: Any,
    ) -> requests.Response:
        """Issue one request and check its status against `expected`."""
        url = f"{self.api_url}{path}"
        call_start_ms = time.monotonic() * 1000
        log_api_event(method, path, "start")

        try:
            response = self._session.request(method, url, timeout=self.timeout_s, **kwargs)
        except requests.exceptions.Timeout as e:
            self._log_transport_failure(method, path, call_start_ms, "TIMEOUT")
            raise AdminApiError(
                f"{method} {path} timed out after {self.timeout_s}s",
                method=method,
                url=url,
            ) from e
        except requests.exceptions.ConnectionError as e:
            self._log_transport_failure(method, path, call_start_ms, "CONNECTION_ERROR")
            raise AdminApiError(
                f"Could not connect to admin API at {self.base_url}",
                method=method,
                url=url,
            ) from e
        except requests.RequestException as e:
            self._log_transport_failure(method, path, call_start_ms, type(e).__name__)
            raise AdminApiError(f"Request failed: {e}", method=method, url=url) from e

        duration_ms = int(time.monotonic() * 1000 - call_start_ms)
        if response.status_code not in expected:
            log_api_event(
                method,
                path,
                "failure",
                http_status=response.status_code,
                duration_ms=duration_ms,
                error_summary=response.text[:200],
            )
            raise AdminApiError(
                f"{method} {path} returned HTTP {response.status_code}, "
                f"expected {' or '.join(str(code) for code in expected)}",
                status_code=response.status_code,
                body=response.text,
                method=method,
                url=url,
            )

        log_api_event(
            method,
            path,
            "success",
            http_status=response.status_code,
            duration_ms=duration_ms,
        )
        return response

    def _log_transport_failure(
        self,
        method: str,
        path: str,
        call_start_ms: float,
        error_summary: str,
    ) -> None:
        log_api_event(
            method,
            path,
            "failure",
            duration_ms=int(time.monotonic() * 1000 - call_start_ms),
            error_summary=error_summary,
        )

    def _json(self, response: requests.Response, path: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise AdminApiError(
                f"Response from {path} is not valid JSON",
                status_code=response.status_code,
                body=response.text,
            ) from e

    def _parse(self, model: Any, data: Any, path: str) -> Any:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise AdminApiError(
                f"Unexpected response shape from {path}: {e.error_count()} validation error(s)",
                body=str(data),
            ) from e


def _license_satisfies(client_license: ClientLicense, feature: str | None) -> bool:
    if not client_license.is_licensed:
        return False
    if feature is None:
        return True
    return client_license.has_feature(feature)
