from datetime import datetime

import pytest

from orderflow.clock import FixedClock
from orderflow.config import Config, load_config
from orderflow.types import InventoryEntry, LineItem, Order, User

# (year, month, day): March has no seasonal discount, December gets the winter rate.
NEUTRAL_DAY = (2024, 3, 15)
WINTER_DAY = (2024, 12, 10)


@pytest.fixture(autouse=True)
def clear_orderflow_env(monkeypatch):
    for key in ["ORDERFLOW_TAX_ENABLED", "ORDERFLOW_LOG_LEVEL"]:
        monkeypatch.delenv(key, raising=False)
    load_config.cache_clear()
    yield
    load_config.cache_clear()


@pytest.fixture
def neutral_clock():
    return FixedClock(datetime(*NEUTRAL_DAY, 12, 0))


@pytest.fixture
def winter_clock():
    return FixedClock(datetime(*WINTER_DAY, 12, 0))


@pytest.fixture
def no_tax():
    return Config(tax_enabled=False)


@pytest.fixture
def regular_user():
    return User(id="u-regular", status="active", tier="regular", state="NY", email="reg@example.com")


@pytest.fixture
def premium_user():
    return User(id="u-premium", status="active", tier="premium", state="CA", phone="+1 555 0100")


@pytest.fixture
def inventory():
    return {
        "A": InventoryEntry(quantity=10),
        "B": InventoryEntry(quantity=5),
        "C": InventoryEntry(quantity=3),
    }


def make_order(*items, order_id="o-1", payment_method="credit_card"):
    return Order(id=order_id, items=tuple(LineItem(*item) for item in items), payment_method=payment_method)


class RecordingObserver:
    def __init__(self):
        self.events = []

    def item_processed(self, item_id, user_id, price):
        self.events.append(("item_processed", item_id, user_id, price))

    def order_succeeded(self, order_id, total):
        self.events.append(("order_succeeded", order_id, total))

    def order_failed(self, order_id, error):
        self.events.append(("order_failed", order_id, error))


class RecordingTransport:
    def __init__(self):
        self.sent = []

    def send(self, notification):
        self.sent.append(notification)
