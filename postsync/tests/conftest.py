"""
Pytest configuration and fixtures for pipeline tests.

The transport is replaced by an AsyncMock with ApiClient's interface, so
every test controls exactly what the "server" returns or raises.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from postsync.actions.posts import PostActions
from postsync.kernel.store import Store
from postsync.services.client import ApiClient


@pytest.fixture
def store():
    return Store()


@pytest.fixture
def client():
    mock = AsyncMock(spec=ApiClient)
    mock.clear_token = MagicMock()
    mock.get_profiles_by_ids.return_value = []
    mock.get_statuses_by_ids.return_value = []
    mock.save_preferences.return_value = None
    mock.delete_preferences.return_value = None
    mock.delete_post.return_value = None
    mock.logout.return_value = None
    return mock


@pytest.fixture
def recorded(store):
    """Every record type that reaches the store, batches expanded, in order."""
    types: list[str] = []
    original = store.dispatch

    def spy(record):
        if record.type == "batch":
            types.extend(inner.type for inner in record.data)
        else:
            types.append(record.type)
        return original(record)

    store.dispatch = spy
    return types


@pytest.fixture
def actions(store, client):
    return PostActions(store, client)
