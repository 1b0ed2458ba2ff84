"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It pins the environment so settings never pick up a developer's .env file
or a real auth token during tests.
"""

import os

import pytest

# CRITICAL: Set this before any imports that might load settings
os.environ["VERIFY_ENV"] = "testing"
os.environ.pop("VERIFY_AUTH_TOKEN", None)
os.environ.setdefault("VERIFY_ENABLE_LOGGING", "false")


class FakeClock:
    """Deterministic clock used to test windows and expiry."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
