"""Verification client orchestrating cache, rate limits and API calls.

Both lookup directions follow the same protocol:
- Return a cached result (including a cached "not found") when fresh
- Otherwise consume local rate-limit budget before touching the network
- Interpret the response, arming the global bucket on a remote 429
- Cache and return the extracted id, or None when the API has no link
"""

from __future__ import annotations

import asyncio
import logging
import re
import time
import weakref
from dataclasses import asdict
from typing import Any, Callable, TypeVar

from pydantic import BaseModel, ValidationError

from verify_client.adapters.http.base import AbstractHttpClient
from verify_client.adapters.rate_limit.base import AbstractRateLimiter
from verify_client.adapters.rate_limit.in_memory import FixedWindowRateLimiter
from verify_client.core.config import VerifySettings
from verify_client.core.errors import (
    RemoteApiError,
    RemoteRateLimit,
    TransportError,
    ValidationAppError,
)
from verify_client.schemas.verification import (
    ApiErrorPayload,
    ForwardLookupResponse,
    ReverseLookupResponse,
)
from verify_client.utils.simple_cache import MISSING, SimpleTTLCache, build_cache_key

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Policy agreed with the remote service; do not make these configurable
GLOBAL_LIMIT = 60
GLOBAL_PERIOD_SECONDS = 60
REVERSE_LIMIT = 30
REVERSE_PERIOD_SECONDS = 60

# Used when a 429 arrives without a retryAfter hint
DEFAULT_REMOTE_RETRY_AFTER_SECONDS = 3000

FORWARD_CACHE_PREFIX = "d"
REVERSE_CACHE_PREFIX = "r"

_ID_PATTERN = re.compile(r"[0-9]+")


def _normalize_id(raw_id: int | str) -> str:
    """Validate an id and return it in the form used for paths and cache keys.

    Args:
        raw_id: Discord snowflake or Roblox user id, as int or decimal string.

    Returns:
        The id as a decimal string.

    Raises:
        ValidationAppError: If the id is not a non-negative decimal number.
    """
    if isinstance(raw_id, bool) or not isinstance(raw_id, (int, str)):
        raise ValidationAppError(
            code="invalid_id",
            message="Lookup id must be an int or a decimal string.",
            details={"context": {"type": type(raw_id).__name__}},
        )

    text = str(raw_id).strip()
    if not _ID_PATTERN.fullmatch(text):
        raise ValidationAppError(
            code="invalid_id",
            message="Lookup id must contain only decimal digits.",
            details={"lookup_id": text[:32]},
        )
    # "007" and 7 name the same account
    return str(int(text))


def _parse_error_payload(body: Any) -> ApiErrorPayload | None:
    """Extract the ``error`` object from a response body, if there is one."""
    if not isinstance(body, dict):
        return None

    error = body.get("error")
    if not error:
        return None
    if isinstance(error, str):
        return ApiErrorPayload(message=error)
    if not isinstance(error, dict):
        return ApiErrorPayload()

    try:
        return ApiErrorPayload.model_validate(error)
    except ValidationError:
        logger.debug("verify.malformed_error_payload", extra={"error_payload": error})
        message = error.get("message")
        return ApiErrorPayload(message=message if isinstance(message, str) else None)


class VerificationClient:
    """Client for mapping Discord ids to Roblox ids and back.

    Owns its cache and both rate-limit buckets, so separate instances never
    share state.

    Attributes:
        http: Transport used to reach the API.
        cache: TTL cache of resolved ids keyed by direction and id.
        global_limiter: Bucket applied to every request (60 per minute).
        reverse_limiter: Additional bucket for reverse lookups (30 per minute).
    """

    def __init__(
        self,
        http: AbstractHttpClient,
        verify_settings: VerifySettings,
        *,
        cache: SimpleTTLCache | None = None,
        global_limiter: AbstractRateLimiter | None = None,
        reverse_limiter: AbstractRateLimiter | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the client with its collaborators.

        Args:
            http: HTTP transport.
            verify_settings: Token, cache TTL and base URL.
            cache: Optional cache override; built from settings when omitted.
            global_limiter: Optional global bucket override.
            reverse_limiter: Optional reverse bucket override.
            clock: Time source shared by the default cache and buckets.
        """
        self.http = http
        self._base_url = verify_settings.base_url.rstrip("/")
        self._auth_token = verify_settings.auth_token
        self.cache = cache if cache is not None else SimpleTTLCache(
            ttl_seconds=verify_settings.cache_ttl_seconds,
            max_entries=verify_settings.cache_max_entries,
            clock=clock,
        )
        self.global_limiter = global_limiter if global_limiter is not None else FixedWindowRateLimiter(
            limit=GLOBAL_LIMIT,
            period_seconds=GLOBAL_PERIOD_SECONDS,
            name="global",
            clock=clock,
        )
        self.reverse_limiter = reverse_limiter if reverse_limiter is not None else FixedWindowRateLimiter(
            limit=REVERSE_LIMIT,
            period_seconds=REVERSE_PERIOD_SECONDS,
            name="reverse",
            clock=clock,
        )
        self._key_locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    async def __aenter__(self) -> "VerificationClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release the underlying HTTP transport."""
        await self.http.aclose()

    async def lookup_forward(self, discord_id: int | str) -> int | None:
        """Retrieve the Roblox id linked to a Discord account. Uses cache.

        Args:
            discord_id: Discord snowflake to resolve.

        Returns:
            Roblox user id, or None if the account is not verified.

        Raises:
            ValidationAppError: If the id is malformed.
            RateLimitExceeded: If the local global bucket is exhausted.
            RemoteRateLimit: If the API answered 429.
            RemoteApiError: If the API returned an error payload.
            TransportError: For any other failure.
        """
        lookup_id = _normalize_id(discord_id)
        return await self._lookup(
            cache_key=build_cache_key(FORWARD_CACHE_PREFIX, lookup_id),
            path=f"/api/roblox/{lookup_id}",
            schema=ForwardLookupResponse,
            extract=lambda parsed: parsed.roblox_id,
        )

    async def lookup_reverse(self, roblox_id: int | str) -> str | None:
        """Retrieve the Discord id linked to a Roblox account. Uses cache.

        Subject to the stricter 30 per minute reverse limit on top of the
        global one. Accounts that opted out of reverse search resolve to None.

        Args:
            roblox_id: Roblox user id to reverse search.

        Returns:
            Discord snowflake as a string, or None if not found.

        Raises:
            ValidationAppError: If the id is malformed.
            RateLimitExceeded: If the reverse or global bucket is exhausted.
            RemoteRateLimit: If the API answered 429.
            RemoteApiError: If the API returned an error payload.
            TransportError: For any other failure.
        """
        lookup_id = _normalize_id(roblox_id)
        return await self._lookup(
            cache_key=build_cache_key(REVERSE_CACHE_PREFIX, lookup_id),
            path=f"/api/reverse/{lookup_id}",
            schema=ReverseLookupResponse,
            extract=lambda parsed: parsed.discord_id,
            limiter=self.reverse_limiter,
        )

    def stats(self) -> dict[str, Any]:
        """Return cache metrics and the state of both buckets."""
        return {
            "cache": self.cache.stats(),
            "global_limit": asdict(self.global_limiter.snapshot()),
            "reverse_limit": asdict(self.reverse_limiter.snapshot()),
        }

    def _key_lock(self, cache_key: str) -> asyncio.Lock:
        lock = self._key_locks.get(cache_key)
        if lock is None:
            lock = asyncio.Lock()
            self._key_locks[cache_key] = lock
        return lock

    async def _lookup(
        self,
        *,
        cache_key: str,
        path: str,
        schema: type[BaseModel],
        extract: Callable[[Any], T | None],
        limiter: AbstractRateLimiter | None = None,
    ) -> T | None:
        """Serve a lookup from cache or fetch and cache it.

        Concurrent lookups of the same key wait on a per-key lock, so only
        the first one reaches the network.
        """
        async with self._key_lock(cache_key):
            cached = self.cache.get(cache_key)
            if cached is not MISSING:
                return cached

            if limiter is not None:
                limiter.run()

            body = await self._request(path)
            if body is None:
                logger.debug("verify.not_found", extra={"path": path})
                self.cache.set(cache_key, None)
                return None

            try:
                parsed = schema.model_validate(body)
            except ValidationError as exc:
                raise TransportError(
                    message="Verification API returned an unexpected payload",
                    details={"context": {"path": path, "errors": exc.error_count()}},
                ) from exc

            result = extract(parsed)
            logger.debug("verify.resolved", extra={"path": path, "resolved_id": result})
            self.cache.set(cache_key, result)
            return result

    async def _request(self, path: str) -> Any | None:
        """GET ``path`` under the global rate limit and interpret the response.

        Args:
            path: Path relative to the base URL, e.g. ``/api/roblox/123``.

        Returns:
            Parsed JSON body on success, or None when the API answered 404.

        Raises:
            RateLimitExceeded: If the global bucket is exhausted.
            RemoteRateLimit: On a 429 response, after arming the global bucket.
            RemoteApiError: If a non-2xx body carries an error payload.
            TransportError: For any other non-2xx or non-JSON response.
        """
        self.global_limiter.run()

        headers: dict[str, str] = {}
        if self._auth_token:
            headers["Authorization"] = self._auth_token

        url = self._base_url + path
        logger.debug("verify.request", extra={"path": path, "has_token": bool(self._auth_token)})
        response = await self.http.get(url, headers)
        body = response.body

        if response.ok:
            if body is None:
                raise TransportError(
                    message="Verification API returned a non-JSON body",
                    status=response.status,
                    details={"url": url},
                )
            return body

        error = _parse_error_payload(body)

        if response.status == 429:
            retry_after = (error.retry_after if error else None) or DEFAULT_REMOTE_RETRY_AFTER_SECONDS
            # A negative hint still arms the bucket for one full period
            retry_after = max(0.0, retry_after)
            logger.warning(
                "verify.remote_rate_limit",
                extra={"path": path, "retry_after_s": retry_after},
            )
            self.global_limiter.trigger(retry_after)
            raise RemoteRateLimit(
                message=(error.message if error and error.message else "Too many requests"),
                retry_after_seconds=retry_after,
                details={"retry_after": retry_after, "url": url},
            )

        if response.status == 404:
            return None

        if error is not None:
            status = error.status or response.status
            logger.warning(
                "verify.api_error",
                extra={"path": path, "status_code": status, "error_message": error.message},
            )
            raise RemoteApiError(
                message=error.message or f"{status}: Verification API Error",
                status=status,
                details={"http_status": response.status, "url": url},
            )

        raise TransportError(
            message=f"Unexpected {response.status} response from verification API",
            status=response.status,
            details={"http_status": response.status, "url": url},
        )
