"""Pytest configuration and fixtures."""

import os
from typing import Callable

import pytest

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "true"
os.environ["OKX_PROXY_URL"] = "http://proxy.test/api/okx"

from helpers import ControlledFetcher, okx_transport
from xdefi.config import get_settings
from xdefi.routing.okx import OkxClient


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Reload settings for every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fetcher() -> ControlledFetcher:
    return ControlledFetcher()


@pytest.fixture
def make_client() -> Callable[[dict], OkxClient]:
    """Build an OkxClient backed by a mock proxy."""

    def _make(routes: dict) -> OkxClient:
        return OkxClient(transport=okx_transport(routes))

    return _make
