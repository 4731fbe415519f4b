"""
Basket Module - Serialization
===============================
JSON form of the basket for local storage, plus the integrity checks applied
to stored items before they are trusted again.

Stored layout:
    {
        "items": [{"id", "image", "canvas_size": {"width", "height"},
                   "canvas_options": {"side_color", "color_upcharge"},
                   "base_price", "total_price", "quantity", "added_at"}],
        "max_items": 100,
        "last_updated": "2026-10-19T08:00:00+00:00"
    }
"""

import json
import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from common.helpers import is_number, parse_iso, to_iso
from config.settings import MAX_ITEM_QUANTITY
from modules.basket.models import BasketItem, BasketState, CanvasOptions, CanvasSize

logger = logging.getLogger("canvasprint.basket")


# ==========================================
# Encode
# ==========================================

def item_to_dict(item: BasketItem) -> Dict[str, Any]:
    return {
        "id": item.id,
        "image": item.image,
        "canvas_size": {"width": item.canvas_size.width, "height": item.canvas_size.height},
        "canvas_options": {
            "side_color": item.canvas_options.side_color,
            "color_upcharge": item.canvas_options.color_upcharge,
        },
        "base_price": item.base_price,
        "total_price": item.total_price,
        "quantity": item.quantity,
        "added_at": to_iso(item.added_at),
    }


def encode_state(state: BasketState) -> str:
    """Serialize a basket state to a JSON string."""
    return json.dumps({
        "items": [item_to_dict(it) for it in state.items],
        "max_items": state.max_items,
        "last_updated": to_iso(state.last_updated),
    }, ensure_ascii=False)


# ==========================================
# Decode + integrity
# ==========================================

def is_valid_quantity(quantity: Any) -> bool:
    """Whole number in 1..MAX_ITEM_QUANTITY (bool excluded)."""
    return (
        isinstance(quantity, int) and not isinstance(quantity, bool)
        and 0 < quantity <= MAX_ITEM_QUANTITY
    )


def validate_basket_item(raw: Any) -> bool:
    """True if a stored item dict satisfies every BasketItem invariant."""
    if not isinstance(raw, Mapping):
        return False

    item_id = raw.get("id")
    quantity = raw.get("quantity")
    size = raw.get("canvas_size")
    options = raw.get("canvas_options")

    return (
        isinstance(item_id, str) and bool(item_id)
        and is_valid_quantity(quantity)
        and is_number(raw.get("base_price"))
        and is_number(raw.get("total_price"))
        and bool(raw.get("image"))
        and isinstance(size, Mapping) and is_number(size.get("width")) and is_number(size.get("height"))
        and isinstance(options, Mapping) and bool(options)
        and parse_iso(raw.get("added_at")) is not None
    )


def is_valid_item(item: BasketItem) -> bool:
    """Same checks as validate_basket_item, applied to an item before it is stored."""
    return validate_basket_item(item_to_dict(item))


def item_from_dict(raw: Mapping) -> BasketItem:
    """Re-hydrate a stored item. Caller must validate first."""
    return BasketItem(
        id=raw["id"],
        image=raw["image"],
        canvas_size=CanvasSize.coerce(raw["canvas_size"]),
        canvas_options=CanvasOptions.coerce(raw["canvas_options"]),
        base_price=raw["base_price"],
        total_price=raw["total_price"],
        quantity=raw["quantity"],
        added_at=parse_iso(raw["added_at"]),
    )


def clean_items(raw_items: List[Any], max_items: int) -> Tuple[List[BasketItem], int]:
    """
    Keep only valid, uniquely-identified items, at most max_items of them.

    Returns:
        (items, dropped_count)
    """
    items: List[BasketItem] = []
    seen = set()
    dropped = 0

    for raw in raw_items:
        if len(items) >= max_items or not validate_basket_item(raw) or raw["id"] in seen:
            dropped += 1
            continue
        seen.add(raw["id"])
        items.append(item_from_dict(raw))

    return items, dropped


def decode_state(raw: Optional[str], max_items: int) -> Tuple[Optional[BasketState], int]:
    """
    Parse a stored basket.

    Returns (state, dropped_count). state is None when nothing is stored or
    the blob is unreadable as a whole (bad JSON, no items list, missing or
    invalid last_updated). Individual bad items, duplicates and items over
    capacity are dropped without failing the load.
    """
    if not raw:
        return None, 0

    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning(f"Stored basket is not valid JSON: {e}")
        return None, 0

    if not isinstance(data, dict) or not isinstance(data.get("items"), list):
        logger.warning("Stored basket has no items list")
        return None, 0

    last_updated: Optional[datetime] = parse_iso(data.get("last_updated"))
    if last_updated is None:
        logger.warning("Stored basket has no valid last_updated timestamp")
        return None, 0

    items, dropped = clean_items(data["items"], max_items)
    if dropped:
        logger.warning(f"Dropped {dropped} invalid basket item(s) on load")

    return BasketState(items=tuple(items), max_items=max_items, last_updated=last_updated), dropped
