"""Tests for settings loading."""

import pytest
from pydantic import ValidationError

from verify_client.core.config import DEFAULT_BASE_URL, Settings, VerifySettings


def test_defaults() -> None:
    cfg = VerifySettings()

    assert cfg.enable_logging is False
    assert cfg.auth_token is None
    assert cfg.cache_ttl_seconds == 60
    assert cfg.cache_max_entries is None
    assert cfg.base_url == DEFAULT_BASE_URL
    assert cfg.request_timeout_seconds is None


def test_reads_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VERIFY_AUTH_TOKEN", "internal-token")
    monkeypatch.setenv("VERIFY_CACHE_TTL_SECONDS", "120")
    monkeypatch.setenv("VERIFY_ENABLE_LOGGING", "true")

    cfg = VerifySettings()

    assert cfg.auth_token == "internal-token"
    assert cfg.cache_ttl_seconds == 120
    assert cfg.enable_logging is True


def test_container_builds_nested_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_FORMAT", "plain")

    cfg = Settings()

    assert cfg.log.format == "plain"
    assert isinstance(cfg.verify, VerifySettings)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"cache_ttl_seconds": 0},
        {"cache_max_entries": 0},
        {"request_timeout_seconds": 0},
    ],
)
def test_invalid_values_rejected(kwargs: dict) -> None:
    with pytest.raises(ValidationError):
        VerifySettings(**kwargs)
