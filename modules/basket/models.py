"""
Basket Module - Models
=======================
Immutable value types for the basket. The store replaces items with
modified copies instead of mutating them.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional, Tuple, Union

from config.settings import DEFAULT_SIDE_COLOR


@dataclass(frozen=True)
class CanvasSize:
    """Print dimensions in centimeters."""
    width: float
    height: float

    @classmethod
    def coerce(cls, value: Union["CanvasSize", Mapping[str, Any]]) -> "CanvasSize":
        if isinstance(value, cls):
            return value
        return cls(width=value["width"], height=value["height"])


@dataclass(frozen=True)
class CanvasOptions:
    side_color: str = DEFAULT_SIDE_COLOR      # hex, e.g. "#8B4513"
    color_upcharge: float = 0

    @classmethod
    def coerce(cls, value: Union["CanvasOptions", Mapping[str, Any]]) -> "CanvasOptions":
        if isinstance(value, cls):
            return value
        return cls(
            side_color=value.get("side_color", DEFAULT_SIDE_COLOR),
            color_upcharge=value.get("color_upcharge", 0),
        )


@dataclass(frozen=True)
class BasketItemConfig:
    """What the caller supplies to add(): everything except id, quantity, added_at."""
    image: Any                                 # opaque, JSON-compatible reference
    canvas_size: CanvasSize
    canvas_options: CanvasOptions
    base_price: float
    total_price: float


@dataclass(frozen=True)
class BasketItem:
    id: str
    image: Any
    canvas_size: CanvasSize
    canvas_options: CanvasOptions
    base_price: float
    total_price: float
    quantity: int
    added_at: datetime


@dataclass(frozen=True)
class BasketState:
    items: Tuple[BasketItem, ...]
    max_items: int
    last_updated: datetime


@dataclass(frozen=True)
class BasketSummary:
    item_count: int       # distinct lines
    total_items: int      # considering quantities
    subtotal: float
    total_price: float


@dataclass(frozen=True)
class AddResult:
    """Result of add()."""
    success: bool
    state: BasketState
    item: Optional[BasketItem] = None
    error: Optional[str] = None


# Fields update_configuration() may replace
CONFIGURABLE_FIELDS = frozenset({"image", "canvas_size", "canvas_options", "base_price", "total_price"})


def summarize(items: Tuple[BasketItem, ...]) -> BasketSummary:
    """Derive the basket summary from the current items."""
    subtotal = sum(item.total_price * item.quantity for item in items)
    return BasketSummary(
        item_count=len(items),
        total_items=sum(item.quantity for item in items),
        subtotal=subtotal,
        total_price=subtotal,  # no taxes or shipping
    )
