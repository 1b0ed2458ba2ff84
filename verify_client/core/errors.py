"""Application-level exception types.

Every failure surfaced by the client is an ``AppError``. Verification
failures additionally carry a ``kind`` discriminant so callers can branch on
rate limiting, upstream API errors and transport problems without relying on
the class hierarchy alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and callers."""

    code: str
    message: str
    hint: str
    http_status: int
    retry_after: float
    url: str
    lookup_id: str
    context: NotRequired[dict[str, Any]]


class ErrorKind(str, Enum):
    """Discriminant for verification failures."""

    RATE_LIMIT = "rate_limit"
    API_ERROR = "api_error"
    TRANSPORT = "transport"


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


@dataclass
class VerificationAppError(AppError):
    """Raised when a lookup against the verification API fails.

    Attributes:
        kind: Which family of failure this is.
        status: HTTP status associated with the failure, if any.
    """

    kind: ErrorKind = ErrorKind.TRANSPORT
    status: int | None = None


@dataclass
class RateLimitAppError(VerificationAppError):
    """Shared shape of local and remote rate-limit failures.

    Attributes:
        retry_after_seconds: Suggested wait before trying again.
        is_local: True when the local bucket refused the call before any
            network I/O, False when the remote service returned 429.
    """

    code: str = "rate_limited"
    message: str = "Too many requests"
    kind: ErrorKind = ErrorKind.RATE_LIMIT
    status: int | None = 429
    retry_after_seconds: float = 0.0
    is_local: bool = True


@dataclass
class RateLimitExceeded(RateLimitAppError):
    """Raised when a local bucket has no budget left in the current window."""

    code: str = "rate_limit_exceeded"
    is_local: bool = True


@dataclass
class RemoteRateLimit(RateLimitAppError):
    """Raised after the remote service answered 429 and the bucket was armed."""

    code: str = "remote_rate_limit"
    is_local: bool = False


@dataclass
class RemoteApiError(VerificationAppError):
    """Raised when the remote service returned an error payload."""

    code: str = "remote_api_error"
    message: str = "Verification API Error"
    kind: ErrorKind = ErrorKind.API_ERROR


@dataclass
class TransportError(VerificationAppError):
    """Raised for any failure that is neither a rate limit nor an API error."""

    code: str = "transport_error"
    message: str = "Unexpected response from verification API"
    kind: ErrorKind = ErrorKind.TRANSPORT
