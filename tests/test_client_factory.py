"""Tests for the client factory."""

import logging

import pytest

from verify_client import VerificationClient, create_verification_client
from verify_client.adapters.http.base import AbstractHttpClient, HttpResponse
from verify_client.core.config import LogSettings, Settings, VerifySettings
from verify_client.core.logging import PACKAGE_LOGGER, configure_logging


class _StaticHttp(AbstractHttpClient):
    def __init__(self) -> None:
        self.urls: list[str] = []

    async def get(self, url, headers=None) -> HttpResponse:
        self.urls.append(url)
        return HttpResponse(200, {"robloxId": 99})


@pytest.mark.asyncio
async def test_factory_wires_settings_and_transport() -> None:
    http = _StaticHttp()
    settings = Settings(
        verify=VerifySettings(base_url="https://verify.test/", cache_ttl_seconds=5),
        log=LogSettings(),
    )

    client = create_verification_client(settings, http_client=http)

    assert isinstance(client, VerificationClient)
    assert client.cache.stats()["ttl_seconds"] == 5
    assert await client.lookup_forward(1) == 99
    assert http.urls == ["https://verify.test/api/roblox/1"]


def test_factory_enables_debug_logging_when_requested() -> None:
    settings = Settings(verify=VerifySettings(enable_logging=True), log=LogSettings())

    try:
        create_verification_client(settings, http_client=_StaticHttp())
        assert logging.getLogger(PACKAGE_LOGGER).isEnabledFor(logging.DEBUG)
    finally:
        configure_logging(LogSettings(), enabled=False)
