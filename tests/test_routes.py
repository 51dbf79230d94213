"""Tests for the HTTP adapter — routes wired to the caches through the app lifespan."""

import json

import pytest
from fastapi.testclient import TestClient

from catalog.core.config import Settings
from catalog.main import create_app

RECORDS = [
    {"id": 1, "name": "Laptop Pro", "description": "14-inch laptop", "category": "Electronics", "price": 2000},
    {"id": 2, "name": "Headphones", "description": "Wireless", "category": "Electronics", "price": 300},
    {"id": 3, "name": "Chair", "description": "Ergonomic", "category": "Furniture", "price": 400},
    {"id": 4, "name": "Notebook", "category": "Stationery", "price": 5},
    {"id": 5, "name": "Gift Card", "price": "variable"},
]


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "items.json"
    path.write_text(json.dumps(RECORDS), encoding="utf-8")
    return path


@pytest.fixture
def client(data_file, watcher):
    settings = Settings(data_file=data_file, watch_enabled=False)
    with TestClient(create_app(settings, watcher=watcher)) as test_client:
        yield test_client


def test_list_items_uses_default_pagination(client):
    response = client.get("/api/items")
    assert response.status_code == 200
    body = response.json()
    assert [i["id"] for i in body["items"]] == [1, 2, 3, 4, 5]
    assert body["pagination"] == {"currentPage": 1, "totalPages": 1, "totalItems": 5, "itemsPerPage": 10}


def test_search_and_paginate(client):
    body = client.get("/api/items", params={"q": "ELECTRONICS", "limit": 1, "page": 2}).json()
    assert [i["id"] for i in body["items"]] == [2]
    assert body["pagination"]["totalItems"] == 2
    assert body["pagination"]["totalPages"] == 2


def test_page_past_end_returns_empty_items(client):
    body = client.get("/api/items", params={"limit": 2, "page": 4}).json()
    assert body["items"] == []
    assert body["pagination"]["totalPages"] == 3
    assert body["pagination"]["currentPage"] == 4


def test_garbage_pagination_params_fall_back_to_defaults(client):
    body = client.get("/api/items", params={"page": "abc", "limit": "-3"}).json()
    assert body["pagination"]["currentPage"] == 1
    assert body["pagination"]["itemsPerPage"] == 10


def test_get_item_by_id(client):
    response = client.get("/api/items/3")
    assert response.status_code == 200
    assert response.json()["name"] == "Chair"


def test_unknown_item_is_404_envelope(client):
    response = client.get("/api/items/999")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_stats(client, watcher):
    response = client.get("/api/stats")
    assert response.status_code == 200
    assert response.json() == {
        "totalItems": 5,
        "averagePrice": 676.25,
        "minPrice": 5,
        "maxPrice": 2000,
        "categories": {"Electronics": 2, "Furniture": 1, "Stationery": 1, "uncategorized": 1},
    }
    assert len(watcher.active) == 1


def test_change_event_refreshes_stats_after_item_reload(client, data_file, watcher):
    client.get("/api/stats")
    data_file.write_text(json.dumps(RECORDS[:2]), encoding="utf-8")
    watcher.fire("changed")

    assert client.get("/api/stats").json()["totalItems"] == 2


def test_health_reports_cache_states(client):
    assert client.get("/api/health").json() == {"status": "ok", "caches": {"items": "empty", "stats": "empty"}}
    client.get("/api/stats")
    assert client.get("/api/health").json()["caches"] == {"items": "valid", "stats": "valid"}


def test_unreadable_data_file_is_503(tmp_path, watcher):
    settings = Settings(data_file=tmp_path / "missing.json", watch_enabled=False)
    with TestClient(create_app(settings, watcher=watcher)) as test_client:
        response = test_client.get("/api/items")
    assert response.status_code == 503
    assert response.json()["error"]["code"] == "LOAD_ERROR"


def test_shutdown_closes_watch(data_file, watcher):
    settings = Settings(data_file=data_file, watch_enabled=False)
    with TestClient(create_app(settings, watcher=watcher)) as test_client:
        test_client.get("/api/stats")
        assert len(watcher.active) == 1
    assert watcher.active == []


def test_large_limit_is_not_clamped(tmp_path, watcher):
    path = tmp_path / "items.json"
    path.write_text(json.dumps([{"id": i, "name": f"Item {i}"} for i in range(1, 151)]), encoding="utf-8")
    settings = Settings(data_file=path, watch_enabled=False)
    with TestClient(create_app(settings, watcher=watcher)) as test_client:
        body = test_client.get("/api/items", params={"limit": 150}).json()
    assert len(body["items"]) == 150
    assert body["pagination"] == {"currentPage": 1, "totalPages": 1, "totalItems": 150, "itemsPerPage": 150}
