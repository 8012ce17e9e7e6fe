"""Pytest configuration and shared fixtures for queue backend tests.

Every test gets its own snapshot file under pytest's ``tmp_path`` so no test
touches the working directory.
"""

import pytest
from fastapi.testclient import TestClient

from src.api.server import app, server_state
from src.c2_queue_store import PersistentQueueStore


@pytest.fixture
def storage_path(tmp_path):
    """Path of a snapshot file that does not exist yet."""
    return tmp_path / "state" / "queue_state.json"


@pytest.fixture
def store(storage_path):
    """A fresh store backed by ``storage_path``."""
    return PersistentQueueStore(storage_path)


@pytest.fixture
def client(store):
    """Test client whose server state uses the ``store`` fixture.

    The client is not entered as a context manager, so startup does not
    build a store from the environment.
    """
    previous = server_state.queue_store
    server_state.queue_store = store
    yield TestClient(app)
    server_state.queue_store = previous
