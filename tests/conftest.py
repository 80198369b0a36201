"""
pytest configuration and fixtures.
"""

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from webtour.app import create_app
from webtour.core.config import SettingsDict, load_settings
from webtour.services.counters import SharedCounters


@pytest.fixture
def settings() -> SettingsDict:
    """Default settings."""
    return load_settings()


@pytest.fixture
def shared() -> SharedCounters:
    """Process-scoped counters, fresh for each test."""
    return SharedCounters()


@pytest.fixture
def app(settings, shared):
    """A single worker replica."""
    return create_app(settings, shared, worker_id=0)


@pytest.fixture
def client(app) -> Iterator[TestClient]:
    """Test client with the replica's lifespan running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def worker_clients(settings, shared) -> Iterator[tuple]:
    """Two replicas sharing one SharedCounters, like two workers of one process."""
    app_a = create_app(settings, shared, worker_id=0)
    app_b = create_app(settings, shared, worker_id=1)
    with TestClient(app_a) as client_a, TestClient(app_b) as client_b:
        yield client_a, client_b
