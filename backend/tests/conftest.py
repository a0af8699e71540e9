"""Shared fixtures: temporary store, fake model adapter and test client."""

import pytest
from fastapi.testclient import TestClient

from app.api.dependencies import get_model_adapter, get_store_service
from app.main import create_app
from app.services.storage_service import StoreService
from app.services.write_lock import WriteLock
from fakes import FakeAdapter


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def store(data_dir):
    lock = WriteLock(directory=str(data_dir / ".lock"), enabled=True, expire_seconds=5)
    service = StoreService(data_dir=str(data_dir), lock=lock)
    yield service
    lock.close()


@pytest.fixture
def fake_adapter():
    return FakeAdapter()


@pytest.fixture
def client(store, fake_adapter):
    app = create_app(testing=True)
    app.dependency_overrides[get_store_service] = lambda: store
    app.dependency_overrides[get_model_adapter] = lambda: fake_adapter
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
