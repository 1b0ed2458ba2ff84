"""Factory for creating HTTP client instances."""

from verify_client.adapters.http.base import AbstractHttpClient
from verify_client.adapters.http.httpx_client import HttpxClient
from verify_client.core.config import VerifySettings


def create_http_client(verify_settings: VerifySettings) -> AbstractHttpClient:
    """Instantiate the HTTP transport configured for the verification API.

    Args:
        verify_settings: Client settings (timeout is read from here).

    Returns:
        AbstractHttpClient: Configured transport.
    """
    return HttpxClient(timeout_seconds=verify_settings.request_timeout_seconds)
