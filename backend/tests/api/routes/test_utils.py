"""Tests for /healthz and /__debug/db-ping."""

import logging
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from certgateway.api.routes.utils import utc_timestamp
from tests.utils.fake_db import FakeDatabase, connection_lost, syntax_error


def test_healthz_no_auth(client: TestClient, db: FakeDatabase) -> None:
    r = client.get("/healthz")
    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is True
    ts = datetime.fromisoformat(body["ts"].replace("Z", "+00:00"))
    assert abs((datetime.now(timezone.utc) - ts).total_seconds()) < 60
    assert db.queries == []


def test_utc_timestamp_format() -> None:
    ts = utc_timestamp()
    assert ts.endswith("Z")
    # 2026-10-19T07:14:00.123Z
    assert len(ts) == 24
    assert ts[19] == "."


def test_db_ping_ok(
    client: TestClient,
    api_key_headers: dict[str, str],
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.INFO, logger="certgateway.api.routes.utils")
    r = client.get("/__debug/db-ping", headers=api_key_headers)
    assert r.status_code == 200
    assert r.json() == {"ok": True, "rows": [{"ok": 1}]}
    # pool stats are logged with the result
    (message,) = [
        rec.getMessage()
        for rec in caplog.records
        if rec.name == "certgateway.api.routes.utils"
    ]
    assert "'idle_connections': 1" in message
    assert "'in_use': 0" in message
    assert "'closed': False" in message


def test_db_ping_requires_api_key(client: TestClient) -> None:
    r = client.get("/__debug/db-ping")
    assert r.status_code == 403
    assert r.json() == {"error": "Acceso no autorizado"}


def test_db_ping_error(
    client: TestClient, db: FakeDatabase, api_key_headers: dict[str, str]
) -> None:
    db.fail_next(syntax_error())
    r = client.get("/__debug/db-ping", headers=api_key_headers)
    assert r.status_code == 500
    assert r.json() == {
        "error": "DB_CONN_ERROR",
        "code": 1064,
        "message": "You have an error in your SQL syntax",
    }


def test_db_ping_recovers_dead_connection(
    client: TestClient, db: FakeDatabase, api_key_headers: dict[str, str]
) -> None:
    db.fail_next(connection_lost())
    r = client.get("/__debug/db-ping", headers=api_key_headers)
    assert r.status_code == 200
