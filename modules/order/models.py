"""
Order Module - Models
======================
Order with a full snapshot of the basket lines at checkout time.
"""

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Tuple

from modules.basket.models import BasketItem


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    COMPLETED = "completed"


@dataclass(frozen=True)
class ContactInfo:
    full_name: str
    phone: str
    email: str
    address: str
    notes: str = ""


@dataclass(frozen=True)
class Order:
    id: str
    items: Tuple[BasketItem, ...]
    subtotal: float
    total_price: float
    contact_info: ContactInfo
    created_at: datetime
    status: OrderStatus = OrderStatus.PENDING
