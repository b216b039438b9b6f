# tests/sheets/test_proxy.py
"""Tests for the development proxy."""
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from src.sheets.errors import TransportError
from src.sheets.proxy import create_app
from src.sheets.settings import SheetsSettings
from src.sheets.transports import BaseTransport

SCRIPT_URL = "https://script.google.com/macros/s/test/exec"


@pytest.fixture
def upstream() -> MagicMock:
    mock = MagicMock(spec=BaseTransport)
    mock.send = AsyncMock(return_value={"data": [{"id": 1}]})
    return mock


def make_client(upstream, script_url: str = SCRIPT_URL, sheet_id: str = "sheet-1") -> TestClient:
    settings = SheetsSettings(script_url=script_url, sheet_id=sheet_id)
    return TestClient(create_app(settings, transport=upstream))


def test_forwards_envelope_and_returns_upstream_body(upstream) -> None:
    response = make_client(upstream).post(
        "/api/google-sheets", json={"action": "getTrades", "data": {}}
    )

    assert response.status_code == 200
    assert response.json() == {"data": [{"id": 1}]}
    upstream.send.assert_awaited_once_with({"action": "getTrades", "data": {}})


def test_missing_data_defaults_to_empty(upstream) -> None:
    make_client(upstream).post("/api/google-sheets", json={"action": "getStrategies"})

    upstream.send.assert_awaited_once_with({"action": "getStrategies", "data": {}})


def test_unconfigured_returns_500(upstream) -> None:
    response = make_client(upstream, script_url="").post(
        "/api/google-sheets", json={"action": "getTrades", "data": {}}
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Google Sheets not configured"}
    upstream.send.assert_not_awaited()


def test_upstream_failure_returns_502(upstream) -> None:
    upstream.send.side_effect = TransportError.from_status(500)

    response = make_client(upstream).post(
        "/api/google-sheets", json={"action": "getTrades", "data": {}}
    )

    assert response.status_code == 502
    assert response.json() == {"error": "HTTP error! status: 500"}


def test_upstream_error_body_passes_through(upstream) -> None:
    upstream.send.return_value = {"error": "Sheet not found"}

    response = make_client(upstream).post(
        "/api/google-sheets", json={"action": "getTrades", "data": {}}
    )

    assert response.status_code == 200
    assert response.json() == {"error": "Sheet not found"}
