"""
Admin API DTOs.

Pydantic v2 models for the payloads exchanged with the server's admin
endpoints. The server owns these shapes; the models accept unknown fields so a
newer server never breaks parsing, and only expose typed accessors for the
fields tests actually assert on.

Result envelopes (LicenseResult, ConfigResult, AnalyticsResult) mirror the
`{license}`, `{config}` and `{analytics}` shapes test scripts destructure.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping

import requests
from pydantic import BaseModel, ConfigDict, Field

# Client license fields that are metadata, not feature flags
_LICENSE_METADATA_FIELDS = frozenset({"IsLicensed", "IsTrial"})


def deep_merge(base: Mapping[str, Any], patch: Mapping[str, Any]) -> dict[str, Any]:
    """
    Return a new dict with patch merged over base.

    Nested mappings merge key by key; any other value (lists included)
    replaces the base value. Neither input is mutated.
    """
    merged = copy.deepcopy(dict(base))
    for key, value in patch.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


# =============================================================================
# LICENSE
# =============================================================================


class ClientLicense(BaseModel):
    """
    Subset of the server license exposed to clients.

    The server encodes every value as a string: feature flags are "true" or
    "false", ExpiresAt is epoch milliseconds. Unlicensed servers answer with
    {"IsLicensed": "false"} and nothing else.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    is_licensed_raw: str = Field(default="false", alias="IsLicensed")
    sku_short_name: str | None = Field(default=None, alias="SkuShortName")
    expires_at_raw: str | None = Field(default=None, alias="ExpiresAt")

    @property
    def is_licensed(self) -> bool:
        return self.is_licensed_raw == "true"

    @property
    def expires_at(self) -> datetime | None:
        if not self.expires_at_raw:
            return None
        try:
            millis = int(self.expires_at_raw)
        except ValueError:
            return None
        return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)

    def server_fields(self) -> dict[str, Any]:
        """All license fields keyed by their server names."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def has_feature(self, feature: str) -> bool:
        """Return True if the license carries feature flag `feature` set to "true"."""
        return self.server_fields().get(feature) == "true"

    def active_features(self) -> list[str]:
        """Sorted names of every enabled feature flag."""
        return sorted(
            name
            for name, value in self.server_fields().items()
            if value == "true" and name not in _LICENSE_METADATA_FIELDS
        )


class LicenseResult(BaseModel):
    license: ClientLicense


# =============================================================================
# CONFIG
# =============================================================================


class AdminConfig(BaseModel):
    """
    Full server configuration.

    Sections (ServiceSettings, TeamSettings, ...) are kept as plain nested
    dicts. The server is the source of truth; callers read, patch and send the
    whole object back.
    """

    model_config = ConfigDict(extra="allow")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump()

    def get(self, path: str, default: Any = None) -> Any:
        """Dotted-path lookup, e.g. config.get("ServiceSettings.SiteURL")."""
        node: Any = self.to_payload()
        for part in path.split("."):
            if not isinstance(node, Mapping) or part not in node:
                return default
            node = node[part]
        return node

    def merged(self, patch: Mapping[str, Any] | "AdminConfig") -> "AdminConfig":
        """Return a new AdminConfig with patch deep-merged over this one."""
        if isinstance(patch, AdminConfig):
            patch = patch.to_payload()
        return AdminConfig.model_validate(deep_merge(self.to_payload(), patch))


class ConfigResult(BaseModel):
    config: AdminConfig


# =============================================================================
# ANALYTICS
# =============================================================================


class AnalyticsRow(BaseModel):
    """One analytics metric. Row order is defined by the server."""

    name: str
    value: float


class AnalyticsResult(BaseModel):
    analytics: list[AnalyticsRow] = Field(default_factory=list)

    def as_dict(self) -> dict[str, float]:
        return {row.name: row.value for row in self.analytics}


# =============================================================================
# STATUS / BRAND
# =============================================================================


class StatusPayload(BaseModel):
    """Generic {"status": "OK"} body returned by action endpoints."""

    model_config = ConfigDict(extra="allow")

    status: str

    @property
    def is_ok(self) -> bool:
        return self.status.upper() == "OK"


class BrandImageOutcome(str, Enum):
    DELETED = "deleted"
    ALREADY_ABSENT = "already_absent"


@dataclass(frozen=True)
class BrandImageDeletion:
    """
    Outcome of deleting the custom brand image.

    A 404 means there was no image to delete and counts as success.
    """

    outcome: BrandImageOutcome
    response: requests.Response

    @property
    def deleted(self) -> bool:
        return self.outcome is BrandImageOutcome.DELETED
