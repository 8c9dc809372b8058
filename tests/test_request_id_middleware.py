from __future__ import annotations

from typing import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from paramtree.core.exception_handlers import setup_exception_handlers
from paramtree.core.middleware import request_id_middleware
from paramtree.main import app


@pytest.fixture
def client() -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


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


def test_each_request_gets_its_own_id(client: TestClient):
    first = client.get("/health").headers["X-Request-ID"]
    second = client.get("/health").headers["X-Request-ID"]

    assert first != second


def test_unhandled_error_body_carries_request_id():
    failing_app = FastAPI()
    failing_app.middleware("http")(request_id_middleware)
    setup_exception_handlers(failing_app)

    @failing_app.get("/boom")
    async def boom():
        raise RuntimeError("boom")

    resp = TestClient(failing_app, raise_server_exceptions=False).get(
        "/boom", headers={"X-Request-ID": "corr-500"}
    )

    assert resp.status_code == 500
    assert resp.json()["error"]["request_id"] == "corr-500"
