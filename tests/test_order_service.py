import json

import pytest

from common.exceptions import ContactValidationError, EmptyBasketError
from config.settings import BASKET_STORAGE_KEY, LAST_ORDER_STORAGE_KEY
from modules.order.models import ContactInfo, OrderStatus
from modules.order.service import OrderService, validate_contact_info


@pytest.fixture
def contact():
    return ContactInfo(
        full_name="  ישראל ישראלי ",
        phone="050-1234567",
        email="israel@example.com",
        address="רחוב הרצל 1, תל אביב",
        notes="להתקשר לפני",
    )


class TestValidateContactInfo:
    def test_valid(self, contact):
        assert validate_contact_info(contact) == {}

    def test_missing_fields(self):
        errors = validate_contact_info(ContactInfo(full_name=" ", phone="", email="", address=""))
        assert set(errors) == {"full_name", "phone", "email", "address"}

    @pytest.mark.parametrize("phone", ["12345", "050-12ab567", "0" * 16])
    def test_bad_phone(self, contact, phone):
        errors = validate_contact_info(ContactInfo(**{**contact.__dict__, "phone": phone}))
        assert set(errors) == {"phone"}

    @pytest.mark.parametrize("phone", ["0501234567", "+972 50 1234567", "(03) 123-4567"])
    def test_good_phone(self, contact, phone):
        assert validate_contact_info(ContactInfo(**{**contact.__dict__, "phone": phone})) == {}

    @pytest.mark.parametrize("email", ["israel", "israel@example", "a b@example.com"])
    def test_bad_email(self, contact, email):
        errors = validate_contact_info(ContactInfo(**{**contact.__dict__, "email": email}))
        assert set(errors) == {"email"}


class TestCheckout:
    def test_empty_basket_rejected(self, orders, contact):
        with pytest.raises(EmptyBasketError):
            orders.checkout(contact)

    def test_invalid_contact_keeps_basket(self, orders, store, small_config):
        store.add(small_config)
        with pytest.raises(ContactValidationError) as exc:
            orders.checkout(ContactInfo(full_name="", phone="1", email="x", address=""))
        assert set(exc.value.errors) == {"full_name", "phone", "email", "address"}
        assert len(store.items) == 1

    def test_creates_pending_order_and_clears_basket(self, orders, store, storage, clock, contact,
                                                      small_config, large_config):
        first = store.add(small_config).item
        store.add(large_config)
        store.update_quantity(first.id, 2)
        lines = store.items

        order = orders.checkout(contact)

        assert order.id.startswith("order-")
        assert order.status is OrderStatus.PENDING
        assert order.items == lines
        assert order.subtotal == 390 * 2 + 530
        assert order.total_price == order.subtotal
        assert order.created_at == clock.now
        assert order.contact_info.full_name == "ישראל ישראלי"
        assert store.items == ()
        assert BASKET_STORAGE_KEY not in storage

    def test_last_order_is_stored(self, orders, store, storage, contact, small_config):
        store.add(small_config)
        order = orders.checkout(contact)

        data = json.loads(storage.load(LAST_ORDER_STORAGE_KEY))
        assert data["id"] == order.id
        assert data["status"] == "pending"
        assert data["contact_info"]["email"] == "israel@example.com"

        assert orders.get_last_order() == order

    def test_later_basket_changes_do_not_touch_order(self, orders, store, contact, small_config):
        store.add(small_config)
        order = orders.checkout(contact)
        store.add(small_config)
        assert len(order.items) == 1
        assert len(orders.get_last_order().items) == 1


class TestLastOrder:
    def test_none_when_missing(self, orders):
        assert orders.get_last_order() is None

    def test_none_when_unreadable(self, store, storage, clock):
        storage.save(LAST_ORDER_STORAGE_KEY, "{broken")
        assert OrderService(store, storage, clock=clock).get_last_order() is None

    def test_none_when_fields_missing(self, orders, storage):
        storage.save(LAST_ORDER_STORAGE_KEY, json.dumps({"id": "order-1"}))
        assert orders.get_last_order() is None
