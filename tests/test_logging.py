from __future__ import annotations

import json
import logging

from fastapi.testclient import TestClient

from askservice.apps.api.app import create_app
from askservice.core.ai import AiServiceError, ErrorKind
from askservice.core.logging import JsonFormatter
from askservice.core.result import failure


def test_json_formatter_includes_request_fields():
    record = logging.LogRecord("askservice.requests", logging.INFO, __file__, 1, "HTTP %s %s", ("POST", "/ask"), None)
    record.status = 200
    record.duration_ms = 12.5
    record.unrelated = "skipped"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "HTTP POST /ask"
    assert payload["level"] == "INFO"
    assert payload["status"] == 200
    assert payload["duration_ms"] == 12.5
    assert "unrelated" not in payload


def test_upstream_failure_is_logged_with_code(make_settings, provider_returning, caplog):
    provider = provider_returning(failure(AiServiceError(ErrorKind.UPSTREAM_AUTH, "denied")))
    caplog.set_level(logging.INFO)

    with TestClient(create_app(make_settings(), provider=provider)) as client:
        client.post("/ask", json={"question": "What is Rust?"})

    codes = [getattr(record, "code", None) for record in caplog.records]
    assert "UPSTREAM_AUTH" in codes
    assert any("HTTP POST /ask -> 502" in record.getMessage() for record in caplog.records)
