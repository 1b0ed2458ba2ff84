"""Client factory for the verification API.

Centralizes client construction (logging, transport, service) so callers get
a fully wired client from a single call.
"""

from __future__ import annotations

from verify_client.adapters.http.base import AbstractHttpClient
from verify_client.adapters.http.factory import create_http_client
from verify_client.core.config import Settings, settings as default_settings
from verify_client.core.logging import configure_logging
from verify_client.services.verification_service import VerificationClient


def create_verification_client(
    settings: Settings | None = None,
    *,
    http_client: AbstractHttpClient | None = None,
) -> VerificationClient:
    """Create and configure a verification client.

    Args:
        settings: Settings to use; defaults to the environment-loaded settings.
        http_client: Optional transport override (e.g. for tests).

    Returns:
        VerificationClient with its own cache and rate-limit buckets.
    """
    cfg = settings or default_settings

    # Logging first so subsequent init logs are formatted as desired
    configure_logging(cfg.log, enabled=cfg.verify.enable_logging)

    http = http_client or create_http_client(cfg.verify)
    return VerificationClient(http=http, verify_settings=cfg.verify)
