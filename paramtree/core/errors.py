"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients.

    Fields are optional so each error only carries what is relevant to it.
    """

    code: str
    message: str
    hint: str
    name: str
    path: str
    batch_size: int
    max_batch_size: int
    backend: str
    backend_code: str
    request_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class MalformedPathError(AppError):
    """Raised when a parameter name or path has invalid syntax."""


class StoreWriteError(AppError):
    """Raised when the backing store rejects a put or delete."""


class StoreReadError(AppError):
    """Raised when the backing store rejects a listing."""


class DecodeError(AppError):
    """Raised when a stored value is not valid JSON.

    Only used inside read operations, where the offending record is skipped.
    """
