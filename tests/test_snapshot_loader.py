"""Tests for JsonFileLoader and parse_items — whole-file, all-or-nothing parsing."""

import json

import pytest

from catalog.core.errors import LoadError, NotFoundError
from catalog.services.snapshot_loader import JsonFileLoader, Snapshot, parse_items
from tests.conftest import FakeClock


def write_items(path, records):
    path.write_text(json.dumps(records), encoding="utf-8")


@pytest.mark.asyncio
async def test_loads_file_into_snapshot(tmp_path):
    data = tmp_path / "items.json"
    write_items(data, [
        {"id": 1, "name": "Laptop", "category": "Electronics", "price": 999},
        {"id": 2, "name": "Pen", "price": "1.50", "colour": "blue"},
    ])
    clock = FakeClock(42.0)
    snapshot = await JsonFileLoader(data, clock=clock).load()

    assert isinstance(snapshot, Snapshot)
    assert isinstance(snapshot.items, tuple)
    assert [i.id for i in snapshot] == [1, 2]
    assert snapshot.loaded_at == 42.0
    assert snapshot.items[1].description is None
    assert snapshot.items[1].price == "1.50"


@pytest.mark.asyncio
async def test_missing_file_raises_load_error(tmp_path):
    with pytest.raises(LoadError) as exc_info:
        await JsonFileLoader(tmp_path / "absent.json").load()
    assert exc_info.value.http_status == 503
    assert isinstance(exc_info.value.__cause__, OSError)


@pytest.mark.asyncio
async def test_invalid_json_raises_load_error(tmp_path):
    data = tmp_path / "items.json"
    data.write_text('[{"id": 1, "name": "Broken"', encoding="utf-8")
    with pytest.raises(LoadError):
        await JsonFileLoader(data).load()


@pytest.mark.parametrize(
    "document",
    [
        {"id": 1, "name": "Not a list"},
        [{"id": 1, "name": "Good"}, "not an object"],
        [{"id": 1, "name": "Good"}, {"id": 2}],
        [{"id": "1", "name": "String id"}],
        [{"id": 1, "name": "Negative", "price": -3}],
        [{"id": 1, "name": "Negative string", "price": "-3"}],
        [{"id": 1, "name": "Negative padded", "price": " -0.5 "}],
        [{"id": 1, "name": "First"}, {"id": 1, "name": "Duplicate"}],
    ],
)
def test_malformed_document_fails_as_a_whole(document):
    with pytest.raises(LoadError):
        parse_items(json.dumps(document).encode())


def test_empty_array_is_a_valid_catalog():
    assert parse_items(b"[]") == ()


def test_find_returns_item_or_raises_not_found():
    snapshot = Snapshot(items=parse_items(b'[{"id": 7, "name": "Seven"}]'), loaded_at=0.0)
    assert snapshot.find(7).name == "Seven"
    with pytest.raises(NotFoundError) as exc_info:
        snapshot.find(8)
    assert exc_info.value.http_status == 404
    assert exc_info.value.to_response()["error"]["code"] == "NOT_FOUND"


def test_non_numeric_string_price_is_kept_as_stored():
    items = parse_items(b'[{"id": 1, "name": "Gift Card", "price": "variable"}, {"id": 2, "name": "Free", "price": "0"}]')
    assert [item.price for item in items] == ["variable", "0"]
