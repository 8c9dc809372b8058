"""Tests for global exception handlers.

Validates that domain errors map to the right HTTP status codes with a
consistent error body, and that unexpected errors leak nothing.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from paramtree.core.errors import (
    AppError,
    MalformedPathError,
    StoreReadError,
    StoreWriteError,
    ValidationAppError,
)
from paramtree.core.exception_handlers import setup_exception_handlers, status_code_for


@pytest.fixture
def app_with_handlers() -> FastAPI:
    """Create FastAPI app with exception handlers registered."""
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/malformed")
    async def malformed():
        raise MalformedPathError(
            code="empty_path_component",
            message="Parameter path contains an empty component",
            details={"path": "a//b"},
        )

    @app.get("/store-write")
    async def store_write():
        raise StoreWriteError(code="store_put_failed", message="throttled")

    @app.get("/unexpected")
    async def unexpected():
        raise RuntimeError("secret internal detail")

    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    return TestClient(app_with_handlers, raise_server_exceptions=False)


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (ValidationAppError(code="v", message="m"), 400),
        (MalformedPathError(code="p", message="m"), 400),
        (StoreWriteError(code="w", message="m"), 502),
        (StoreReadError(code="r", message="m"), 502),
        (AppError(code="generic", message="m"), 400),
    ],
)
def test_status_code_mapping(error: AppError, expected: int) -> None:
    assert status_code_for(error) == expected


def test_malformed_path_returns_400_with_details(client: TestClient) -> None:
    resp = client.get("/malformed")

    assert resp.status_code == 400
    error = resp.json()["error"]
    assert error["code"] == "empty_path_component"
    assert error["details"] == {"path": "a//b"}
    assert "request_id" in error


def test_store_write_error_returns_502_without_details(client: TestClient) -> None:
    resp = client.get("/store-write")

    assert resp.status_code == 502
    error = resp.json()["error"]
    assert error["code"] == "store_put_failed"
    assert error["message"] == "throttled"
    assert "details" not in error


def test_unexpected_error_is_generic_500(client: TestClient) -> None:
    resp = client.get("/unexpected")

    assert resp.status_code == 500
    body = resp.json()
    assert body["error"]["code"] == "internal_server_error"
    assert "secret internal detail" not in resp.text


def test_app_error_str_is_message() -> None:
    err = StoreReadError(code="store_list_failed", message="denied")

    assert str(err) == "denied"
