"""Shared fixtures: an in-memory blob store and owner credentials."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from myvoice.config.settings import settings
from myvoice.controllers.dependencies import OWNER_PASSWORD_HEADER, get_blob_store
from myvoice.infrastructure.persistence.memory_blob_store import InMemoryBlobStore
from myvoice.main import app


@pytest.fixture
def store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture
def client(store: InMemoryBlobStore):
    """Test client whose blob store is a fresh in-memory instance."""

    app.dependency_overrides[get_blob_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def owner_headers() -> dict[str, str]:
    return {OWNER_PASSWORD_HEADER: settings.security.owner_password.get_secret_value()}
