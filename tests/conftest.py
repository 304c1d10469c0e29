"""
Shared pytest fixtures for SessionKit tests.

This module provides:
- FakeClock: controllable epoch clock for expiration tests
- Provider/registry/manager fixtures backed by the memory provider
- make_request(): build Starlette requests carrying session tokens
"""

import os
import sys
from typing import Dict, Optional
from urllib.parse import urlencode

import pytest
from fastapi import Request, Response

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sessionkit.config.provider import SessionConfig
from sessionkit.modules.registry import ProviderRegistry
from sessionkit.modules.session import SessionManager
from sessionkit.modules.storage import MemoryProvider


class FakeClock:
    """Epoch clock that only moves when told to."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_request(
    cookies: Optional[Dict[str, str]] = None,
    query: Optional[Dict[str, str]] = None,
    path: str = "/",
) -> Request:
    """Build a GET request carrying the given cookies and query parameters."""
    headers = []
    if cookies:
        cookie_header = "; ".join(f"{k}={v}" for k, v in cookies.items())
        headers.append((b"cookie", cookie_header.encode("latin-1")))

    scope = {
        "type": "http",
        "method": "GET",
        "path": path,
        "headers": headers,
        "query_string": urlencode(query or {}).encode("ascii"),
        "client": ("203.0.113.7", 51234),
        "server": ("testserver", 80),
        "scheme": "http",
    }
    return Request(scope)


def set_cookie_headers(response: Response) -> list:
    """All Set-Cookie header values staged on a response."""
    return response.headers.getlist("set-cookie")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def provider(clock):
    return MemoryProvider(clock=clock)


@pytest.fixture
def registry(provider):
    registry = ProviderRegistry()
    registry.register("memory", provider)
    return registry


@pytest.fixture
def session_config():
    return SessionConfig(provider_name="memory", cookie_name="sessionid", max_lifetime=3600)


@pytest.fixture
def manager(session_config, registry):
    return SessionManager(session_config, registry=registry)
