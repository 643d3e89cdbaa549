"""
Pytest fixtures shared by the test modules.
"""

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from games import rules
from games.store import SessionStore
from web.app import create_app


@pytest.fixture
def store() -> SessionStore:
    """Create a fresh, empty session store."""
    return SessionStore()


@pytest.fixture
def game_id(store: SessionStore) -> str:
    """A game in the standard start position."""
    return store.create(rules.starting_position())


@pytest.fixture
def client(store: SessionStore) -> Iterator[TestClient]:
    """HTTP client bound to an app serving ``store``."""
    with TestClient(create_app(store)) as test_client:
        yield test_client
