from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from modules.basket.deps import get_basket_store, get_order_service
from modules.basket.service import BasketStore, build_item_config
from modules.order.service import OrderService
from modules.storage.service import MemoryStorage


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc))


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage, clock):
    return BasketStore(storage, clock=clock)


@pytest.fixture
def image_ref():
    return {"path": "static/uploads/sunset.jpg", "original_width": 3000, "original_height": 2000}


@pytest.fixture
def small_config(image_ref):
    # 100x100 -> 390
    return build_item_config(image_ref, 100, 100)


@pytest.fixture
def large_config(image_ref):
    # 140x140 -> 530 (large-format surcharge)
    return build_item_config(image_ref, 140, 140)


@pytest.fixture
def orders(store, storage, clock):
    return OrderService(store, storage, clock=clock)


@pytest.fixture
def client(store, orders):
    from main import app

    app.dependency_overrides[get_basket_store] = lambda: store
    app.dependency_overrides[get_order_service] = lambda: orders
    yield TestClient(app)
    app.dependency_overrides.clear()
