"""HTTP adapter layer - abstracts over the transport used to reach the API."""

from verify_client.adapters.http.base import AbstractHttpClient, HttpResponse
from verify_client.adapters.http.factory import create_http_client
from verify_client.adapters.http.httpx_client import HttpxClient

__all__ = [
    "AbstractHttpClient",
    "HttpResponse",
    "HttpxClient",
    "create_http_client",
]
