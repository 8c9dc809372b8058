"""Global exception handlers for consistent error responses.

Domain errors raised by the parameter tree service or its store adapters are
turned into one JSON error shape carrying the request id. Store failures are
reported as 502 since the fault lies with the backing parameter store; any
other AppError is a client mistake (bad path, bad tree shape).
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from paramtree.core.errors import AppError, StoreReadError, StoreWriteError
from paramtree.core.logging import get_request_id

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[AppError], int], ...] = (
    (StoreWriteError, 502),
    (StoreReadError, 502),
)


def status_code_for(exc: AppError) -> int:
    """Map a domain error to its HTTP status code (400 unless listed)."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 400


def _request_id_for(request: Request) -> str | None:
    return get_request_id() or getattr(request.state, "request_id", None)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render an AppError as ``{"error": {code, message, request_id, details?}}``.

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with the mapped status code.
    """
    status_code = status_code_for(exc)
    request_id = _request_id_for(request)

    logger.warning(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_type": type(exc).__name__,
            "status_code": status_code,
            "request_path": request.url.path,
            "has_details": bool(exc.details),
        },
    )

    error_content = {
        "code": exc.code,
        "message": exc.message,
        "request_id": request_id,
    }
    if exc.details:
        error_content["details"] = exc.details

    return JSONResponse(status_code=status_code, content={"error": error_content})


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors.

    Logs the failure and returns a generic message; no stack traces or store
    responses reach the client.
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "internal_server_error",
                "message": "An unexpected error occurred. Please try again later.",
                "request_id": _request_id_for(request),
            }
        },
    )


def setup_exception_handlers(app) -> None:
    """Register the handlers on a FastAPI app.

    Example:
        >>> from fastapi import FastAPI
        >>> app = FastAPI()
        >>> setup_exception_handlers(app)
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(Exception)(general_exception_handler)
