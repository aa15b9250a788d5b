"""
Structured logging tests.

Every API call logs a start event and one success or failure event on the
adminapi.calls logger.
"""

import logging

import pytest

from adminapi.errors import AdminApiError
from adminapi.observability import log_api_event
from tests.helpers.fake_server import make_response


def _events(caplog):
    return [r for r in caplog.records if r.name == "adminapi.calls"]


class TestLogApiEvent:
    def test_payload_fields(self, caplog):
        with caplog.at_level(logging.INFO, logger="adminapi.calls"):
            log_api_event("GET", "/config", "success", http_status=200, duration_ms=12, extra={"attempt": 1})

        (record,) = _events(caplog)
        assert record.getMessage() == "api_call"
        assert record.method == "GET"
        assert record.path == "/config"
        assert record.status == "success"
        assert record.http_status == 200
        assert record.duration_ms == 12
        assert record.attempt == 1

    def test_failure_logs_warning(self, caplog):
        with caplog.at_level(logging.INFO, logger="adminapi.calls"):
            log_api_event("DELETE", "/license", "failure", http_status=403, error_summary="forbidden")

        (record,) = _events(caplog)
        assert record.levelno == logging.WARNING
        assert record.error_summary == "forbidden"

    def test_optional_fields_omitted(self, caplog):
        with caplog.at_level(logging.INFO, logger="adminapi.calls"):
            log_api_event("POST", "/caches/invalidate", "start")

        (record,) = _events(caplog)
        assert not hasattr(record, "http_status")
        assert not hasattr(record, "duration_ms")


class TestClientLogging:
    def test_success_call_logs_start_and_end(self, client, mock_session, caplog):
        mock_session.request.return_value = make_response(200, {"status": "OK"})

        with caplog.at_level(logging.INFO, logger="adminapi.calls"):
            client.invalidate_cache()

        statuses = [r.status for r in _events(caplog)]
        assert statuses == ["start", "success"]
        assert _events(caplog)[-1].http_status == 200

    def test_failed_call_logs_failure(self, client, mock_session, caplog):
        mock_session.request.return_value = make_response(500, {"message": "boom"})

        with caplog.at_level(logging.INFO, logger="adminapi.calls"):
            with pytest.raises(AdminApiError):
                client.get_config()

        end = _events(caplog)[-1]
        assert end.status == "failure"
        assert end.http_status == 500
