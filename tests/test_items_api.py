from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from catalog.config import CatalogSettings
from catalog.main import create_app
from catalog.state_store import InMemoryStateStore


def test_items_defaults_to_first_twenty(client):
    resp = client.get("/api/items")
    assert resp.status_code == 200
    assert resp.json() == {"items": list(range(1, 21)), "hasMore": True}


def test_items_paginates_with_offset_and_limit(client):
    resp = client.get("/api/items", params={"offset": 40, "limit": 5})
    assert resp.status_code == 200
    assert resp.json() == {"items": [41, 42, 43, 44, 45], "hasMore": True}


def test_items_filters_by_query(client):
    resp = client.get("/api/items", params={"query": "77", "limit": 3})
    assert resp.json() == {"items": [77, 177, 277], "hasMore": True}


def test_items_last_partial_page_has_no_more(client):
    resp = client.get("/api/items", params={"query": "99999", "offset": 10, "limit": 20})
    body = resp.json()
    assert body["items"] == [999991, 999992, 999993, 999994, 999995, 999996, 999997, 999998, 999999]
    assert body["hasMore"] is False


@pytest.mark.parametrize(
    "params",
    [
        {"offset": "abc", "limit": "xyz"},
        {"offset": "-3", "limit": "-9"},
        {"offset": "", "limit": ""},
    ],
)
def test_malformed_window_is_coerced_to_defaults(client, params):
    resp = client.get("/api/items", params=params)
    assert resp.status_code == 200
    assert resp.json()["items"] == list(range(1, 21))


def test_non_numeric_query_returns_empty_page(client):
    resp = client.get("/api/items", params={"query": "abc"})
    assert resp.status_code == 200
    assert resp.json() == {"items": [], "hasMore": False}


def test_saved_order_is_applied_to_items(client):
    client.post("/api/state", json={"selectedIds": [], "sortedOrder": [5, 3, 9]})
    resp = client.get("/api/items", params={"limit": 9})
    assert resp.json()["items"] == [5, 3, 9, 1, 2, 4, 6, 7, 8]


def test_saved_order_outside_query_is_skipped(client):
    client.post("/api/state", json={"selectedIds": [], "sortedOrder": [3, 500000]})
    resp = client.get("/api/items", params={"limit": 10})
    assert resp.json()["items"] == [3, 1, 2, 4, 5, 6, 7, 8, 9, 10]


def test_limit_is_clamped_to_configured_maximum():
    settings = CatalogSettings.from_env({"CATALOG_MAX_PAGE_LIMIT": "7", "CORS_ALLOW_ORIGINS": ""})
    client = TestClient(create_app(store=InMemoryStateStore(), settings=settings))
    resp = client.get("/api/items", params={"limit": 500})
    assert resp.json() == {"items": [1, 2, 3, 4, 5, 6, 7], "hasMore": True}


def test_huge_offset_returns_empty_page(client):
    resp = client.get("/api/items", params={"offset": "99999999999999999999"})
    assert resp.status_code == 200
    assert resp.json() == {"items": [], "hasMore": False}
