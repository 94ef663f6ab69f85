import pytest
from fastapi.testclient import TestClient

from auth.admin import get_current_admin
from database.store import InMemoryCollectionStore
from main import app

ADMIN = {"id": "admin-1", "email": "admin@example.com", "full_name": "Administrator"}


@pytest.fixture
def store():
    return InMemoryCollectionStore()


@pytest.fixture
def client(store):
    app.store = store
    app.dependency_overrides[get_current_admin] = lambda: ADMIN
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(store):
    app.store = store
    app.dependency_overrides.clear()
    return TestClient(app)
