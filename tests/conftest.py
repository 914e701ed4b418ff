import pathlib
import sys

import pytest
from fastapi.testclient import TestClient

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from catalog.config import CatalogSettings
from catalog.main import create_app
from catalog.state_store import InMemoryStateStore


@pytest.fixture(autouse=True)
def catalog_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("CATALOG_STATE_BACKEND", "memory")
    monkeypatch.delenv("CATALOG_MAX_PAGE_LIMIT", raising=False)
    monkeypatch.delenv("CORS_ALLOW_ORIGINS", raising=False)
    yield


@pytest.fixture
def store() -> InMemoryStateStore:
    return InMemoryStateStore()


@pytest.fixture
def client(store: InMemoryStateStore) -> TestClient:
    app = create_app(store=store, settings=CatalogSettings.from_env())
    return TestClient(app)
