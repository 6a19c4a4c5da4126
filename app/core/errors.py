"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients.

    Fields are optional to keep backward compatibility while encouraging
    consistent shapes across the codebase.
    """

    code: str
    message: str
    hint: str
    field: str
    max_length: int
    actual_length: int
    http_status: int
    retry_after: int
    table: str
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
    """Raised when submitted content fails validation."""


class MalformedPayloadError(ValidationAppError):
    """Raised when a request body is not a JSON object."""


class StoreAppError(AppError):
    """Raised when a read or write against the hosted store fails."""


class ConfigurationAppError(AppError):
    """Raised when required store configuration is absent."""


@dataclass
class RateLimitedAppError(AppError):
    """Raised when a client exhausted its submission budget for the window."""

    retry_after_seconds: int = 0
