from __future__ import annotations

from fastapi.testclient import TestClient


def test_preserves_incoming_request_id_header(client: TestClient):
    incoming_id = "test-request-id-123"
    resp = client.get("/health", headers={"X-Request-ID": incoming_id})

    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID") == incoming_id


def test_generates_request_id_when_missing(client: TestClient):
    resp = client.get("/health")

    assert resp.status_code == 200
    generated = resp.headers.get("X-Request-ID")
    assert generated
    assert resp.headers.get("X-Request-Duration-ms") is not None


def test_error_body_carries_request_id(client: TestClient):
    resp = client.post(
        "/love-wall",
        json={"name": "", "message": ""},
        headers={"X-Request-ID": "req-error-1"},
    )

    assert resp.status_code == 400
    assert resp.json()["request_id"] == "req-error-1"
    assert resp.headers["X-Request-ID"] == "req-error-1"
