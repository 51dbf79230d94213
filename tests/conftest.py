"""Shared test fixtures — fake clock, fake watcher and an instrumented loader."""

import asyncio
from typing import List, Optional

import pytest

from catalog.core.config import get_settings
from catalog.schemas.items import Item
from catalog.services.snapshot_loader import Snapshot


def make_item(item_id: int, name: str = "", **fields) -> Item:
    return Item(id=item_id, name=name or f"Item {item_id}", **fields)


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSubscription:
    def __init__(self, path, on_change) -> None:
        self.path = path
        self.on_change = on_change
        self.closed = False

    def close(self) -> None:
        self.closed = True


class FakeWatcher:
    """Records subscriptions and fires synthetic change events."""

    def __init__(self) -> None:
        self.subscriptions: List[FakeSubscription] = []

    def watch(self, path, on_change) -> FakeSubscription:
        sub = FakeSubscription(path, on_change)
        self.subscriptions.append(sub)
        return sub

    @property
    def active(self) -> List[FakeSubscription]:
        return [s for s in self.subscriptions if not s.closed]

    def fire(self, event: str = "changed") -> None:
        for sub in self.active:
            sub.on_change(event)


class CountingLoader:
    """Snapshot loader counting its calls; can be held on a gate or made to fail."""

    def __init__(self, items: List[Item], clock: FakeClock) -> None:
        self.items = items
        self.clock = clock
        self.calls = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self.gate: Optional[asyncio.Event] = None
        self.fail: Optional[Exception] = None

    async def load(self) -> Snapshot:
        self.calls += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.gate is not None:
                await self.gate.wait()
            if self.fail is not None:
                raise self.fail
            return Snapshot(items=tuple(self.items), loaded_at=self.clock())
        finally:
            self.in_flight -= 1


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def watcher():
    return FakeWatcher()


@pytest.fixture
def sample_items():
    return [
        make_item(1, "Laptop", description="Portable computer", category="Electronics", price=1200),
        make_item(2, "Desk", description="Oak standing desk", category="Furniture", price=300),
        make_item(3, "Lamp", category="Lighting", price="45.5"),
        make_item(4, "Gift card", description="Any amount", price="variable"),
    ]


@pytest.fixture
def loader(sample_items, clock):
    return CountingLoader(sample_items, clock)


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
