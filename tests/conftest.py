"""Shared fixtures for session tests."""

from datetime import datetime, timezone

import pytest
from unittest.mock import AsyncMock, MagicMock

from storesync.client import AuthorityClient
from storesync.models import Store
from storesync.session import SessionState


def make_store(name: str, status: str = "Active", day: int = 1) -> Store:
    return Store(name, status, datetime(2024, 1, day, tzinfo=timezone.utc))


@pytest.fixture
def authority():
    """A mock AuthorityClient with an empty store list."""
    client = MagicMock(spec=AuthorityClient)
    client.base_url = "http://authority:5000"
    client.list_stores = AsyncMock(return_value=[])
    client.provision = AsyncMock(return_value=None)
    client.delete_store = AsyncMock(return_value=None)
    client.close = AsyncMock(return_value=None)
    return client


@pytest.fixture
def state():
    return SessionState()


@pytest.fixture(name="make_store")
def make_store_fixture():
    return make_store
