"""httpx-based HTTP adapter."""

from __future__ import annotations

import json
import logging
from typing import Mapping

import httpx

from verify_client.adapters.http.base import AbstractHttpClient, HttpResponse
from verify_client.core.errors import TransportError

logger = logging.getLogger(__name__)


class HttpxClient(AbstractHttpClient):
    """Client performing GET requests with ``httpx.AsyncClient``.

    Non-2xx responses are returned as-is; only connection-level failures
    raise.
    """

    def __init__(
        self,
        timeout_seconds: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the async transport.

        Args:
            timeout_seconds: Timeout for requests in seconds; None disables it.
            client: Preconfigured client (mainly for tests with MockTransport).
        """
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout_seconds)

    async def get(self, url: str, headers: Mapping[str, str] | None = None) -> HttpResponse:
        """Issue a GET and decode the body as JSON regardless of status.

        Args:
            url: Absolute URL to request.
            headers: Optional request headers.

        Returns:
            HttpResponse: Status code and parsed body (None if not JSON).

        Raises:
            TransportError: If the request fails before a response arrives.
        """
        try:
            response = await self.client.get(url, headers=dict(headers or {}))
        except httpx.HTTPError as exc:
            raise TransportError(
                message=f"Request to verification API failed: {exc}",
                details={"url": url},
            ) from exc

        try:
            body = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.debug(
                "http.non_json_body",
                extra={"url": url, "status_code": response.status_code},
            )
            body = None

        return HttpResponse(status=response.status_code, body=body)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()
