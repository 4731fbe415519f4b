"""
Order Module - Service Layer
===============================
Checkout: validate contact details, snapshot the basket into an order,
keep the last order in local storage, clear the basket.
"""

import json
import logging
import re
from dataclasses import asdict
from datetime import datetime
from typing import Callable, Dict, Optional

from common.exceptions import ContactValidationError, EmptyBasketError
from common.helpers import now_utc, epoch_millis, parse_iso, to_iso
from config.settings import LAST_ORDER_STORAGE_KEY
from modules.basket.serializer import clean_items, item_to_dict
from modules.basket.service import BasketStore
from modules.order.models import ContactInfo, Order, OrderStatus
from modules.storage.service import BaseStorage

logger = logging.getLogger("canvasprint.order")

_PHONE_RE = re.compile(r"^[0-9\-+\s()]{9,15}$")
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def validate_contact_info(contact: ContactInfo) -> Dict[str, str]:
    """Return {field: message} for every invalid field (empty dict = valid)."""
    errors: Dict[str, str] = {}

    if not contact.full_name.strip():
        errors["full_name"] = "שם מלא הוא שדה חובה"

    phone = contact.phone.strip()
    if not phone:
        errors["phone"] = "מספר טלפון הוא שדה חובה"
    elif not _PHONE_RE.match(phone):
        errors["phone"] = "מספר טלפון לא תקין"

    email = contact.email.strip()
    if not email:
        errors["email"] = "כתובת אימייל היא שדה חובה"
    elif not _EMAIL_RE.match(email):
        errors["email"] = "כתובת אימייל לא תקינה"

    if not contact.address.strip():
        errors["address"] = "כתובת למשלוח היא שדה חובה"

    return errors


def _clean_contact(contact: ContactInfo) -> ContactInfo:
    return ContactInfo(
        full_name=contact.full_name.strip(),
        phone=contact.phone.strip(),
        email=contact.email.strip(),
        address=contact.address.strip(),
        notes=contact.notes.strip(),
    )


def order_to_dict(order: Order) -> dict:
    return {
        "id": order.id,
        "items": [item_to_dict(it) for it in order.items],
        "subtotal": order.subtotal,
        "total_price": order.total_price,
        "contact_info": asdict(order.contact_info),
        "created_at": to_iso(order.created_at),
        "status": order.status.value,
    }


def order_from_dict(data: dict) -> Order:
    """Re-hydrate a stored order. Raises KeyError/ValueError/TypeError on bad data."""
    created_at = parse_iso(data["created_at"])
    if created_at is None:
        raise ValueError("invalid created_at")
    items, _ = clean_items(data["items"], len(data["items"]))
    return Order(
        id=data["id"],
        items=tuple(items),
        subtotal=data["subtotal"],
        total_price=data["total_price"],
        contact_info=ContactInfo(**data["contact_info"]),
        created_at=created_at,
        status=OrderStatus(data["status"]),
    )


class OrderService:

    def __init__(
        self,
        basket: BasketStore,
        storage: BaseStorage,
        storage_key: str = LAST_ORDER_STORAGE_KEY,
        clock: Callable[[], datetime] = now_utc,
    ):
        self.basket = basket
        self.storage = storage
        self.storage_key = storage_key
        self._clock = clock

    def checkout(self, contact: ContactInfo) -> Order:
        """
        Create a pending order from the basket:
        1. Reject an empty basket
        2. Validate contact details
        3. Snapshot items + summary
        4. Store as last order
        5. Clear basket

        Raises EmptyBasketError, ContactValidationError.
        """
        if not self.basket.items:
            raise EmptyBasketError()

        errors = validate_contact_info(contact)
        if errors:
            raise ContactValidationError(errors)

        summary = self.basket.summary()
        order = Order(
            id=f"order-{epoch_millis()}",
            items=self.basket.items,
            subtotal=summary.subtotal,
            total_price=summary.total_price,
            contact_info=_clean_contact(contact),
            created_at=self._clock(),
            status=OrderStatus.PENDING,
        )

        if not self.storage.save(self.storage_key, json.dumps(order_to_dict(order), ensure_ascii=False)):
            logger.warning(f"Order {order.id} was not stored locally")

        self.basket.clear()
        logger.info(f"Order {order.id} created: {len(order.items)} line(s), total {order.total_price}")
        return order

    def get_last_order(self) -> Optional[Order]:
        """Most recent order from local storage, or None."""
        raw = self.storage.load(self.storage_key)
        if not raw:
            return None
        try:
            return order_from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Stored order is unreadable: {e}")
            return None
