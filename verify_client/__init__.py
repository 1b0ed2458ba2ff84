"""Async client for the Discord/Roblox verification API."""

from verify_client.core.client_factory import create_verification_client
from verify_client.core.config import LogSettings, Settings, VerifySettings
from verify_client.core.errors import (
    AppError,
    ErrorKind,
    RateLimitAppError,
    RateLimitExceeded,
    RemoteApiError,
    RemoteRateLimit,
    TransportError,
    ValidationAppError,
    VerificationAppError,
)
from verify_client.services.verification_service import VerificationClient

__all__ = [
    "AppError",
    "ErrorKind",
    "LogSettings",
    "RateLimitAppError",
    "RateLimitExceeded",
    "RemoteApiError",
    "RemoteRateLimit",
    "Settings",
    "TransportError",
    "ValidationAppError",
    "VerificationAppError",
    "VerificationClient",
    "VerifySettings",
    "create_verification_client",
]
