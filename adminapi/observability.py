"""
Structured logging for admin API calls.

Every request the client issues logs a "start" event and exactly one
"success" or "failure" event on the adminapi.calls logger. Fields travel in
the record's extra payload so log processors can filter on them.
"""

from __future__ import annotations

import logging
from typing import Any, Literal, Mapping

logger = logging.getLogger("adminapi.calls")

Status = Literal["start", "success", "failure"]


def log_api_event(
    method: str,
    path: str,
    status: Status,
    http_status: int | None = None,
    duration_ms: int | None = None,
    error_summary: str | None = None,
    extra: Mapping[str, Any] | None = None,
) -> None:
    """
    Log a structured API call event.

    Args:
        method: HTTP method (e.g., "GET")
        path: Endpoint path relative to the API root (e.g., "/config")
        status: Call status ("start", "success", "failure")
        http_status: Status code returned by the server, if any
        duration_ms: Wall time of the exchange, for end events
        error_summary: Short error description for failure status
        extra: Optional additional fields to include in the log
    """
    payload: dict[str, Any] = {
        "method": method,
        "path": path,
        "status": status,
    }

    if http_status is not None:
        payload["http_status"] = http_status

    if duration_ms is not None:
        payload["duration_ms"] = duration_ms

    if error_summary:
        payload["error_summary"] = error_summary

    if extra:
        payload.update(extra)

    if status == "failure":
        logger.warning("api_call", extra=payload)
    else:
        logger.info("api_call", extra=payload)
