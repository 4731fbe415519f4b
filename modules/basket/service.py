"""
Basket Module - Service Layer
================================
BasketStore: the single owner of the basket state. Bounded capacity,
per-item quantity limits, persistence to local storage after every change,
staleness expiry and integrity filtering on load.

Operations never raise for ordinary conditions (full basket, unknown id,
out-of-range quantity); they report failure or do nothing.
"""

import copy
import logging
import math
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, List, Optional, Tuple

from common.helpers import now_utc, epoch_millis, random_suffix
from config.settings import (
    BASKET_STORAGE_KEY, MAX_BASKET_ITEMS, MAX_ITEM_QUANTITY, BASKET_STALE_DAYS, DEFAULT_SIDE_COLOR,
)
from modules.basket.models import (
    AddResult, BasketItem, BasketItemConfig, BasketState, BasketSummary,
    CanvasOptions, CanvasSize, CONFIGURABLE_FIELDS, summarize,
)
from modules.basket.serializer import decode_state, encode_state, is_valid_item
from modules.pricing.calculator import calculate_total_price, has_color_upgrade
from modules.storage.service import BaseStorage

logger = logging.getLogger("canvasprint.basket")

Listener = Callable[[BasketState], None]


def generate_basket_item_id() -> str:
    """Timestamp + random suffix. Collisions are unlikely, not impossible."""
    return f"basket_item_{epoch_millis()}_{random_suffix()}"


def basket_age_days(last_updated: datetime, now: datetime) -> int:
    """Age in whole days, rounded up."""
    return math.ceil(abs((now - last_updated).total_seconds()) / 86400)


def is_basket_stale(last_updated: datetime, now: datetime) -> bool:
    return basket_age_days(last_updated, now) > BASKET_STALE_DAYS


def build_item_config(image: Any, width, height, side_color: str = DEFAULT_SIDE_COLOR) -> BasketItemConfig:
    """Price a canvas configuration and package it for add()."""
    price = calculate_total_price(width, height, has_color_upgrade(side_color))
    return BasketItemConfig(
        image=image,
        canvas_size=CanvasSize(width=width, height=height),
        canvas_options=CanvasOptions(side_color=side_color, color_upcharge=price["color_upcharge"]),
        base_price=price["base_price"],
        total_price=price["total_price"],
    )


class BasketStore:

    def __init__(
        self,
        storage: BaseStorage,
        max_items: int = MAX_BASKET_ITEMS,
        clock: Callable[[], datetime] = now_utc,
        storage_key: str = BASKET_STORAGE_KEY,
    ):
        self.storage = storage
        self.storage_key = storage_key
        self._clock = clock
        self._listeners: List[Listener] = []
        self._state = BasketState(items=(), max_items=max_items, last_updated=clock())
        self._restore()

    # ==========================================
    # Read
    # ==========================================

    @property
    def state(self) -> BasketState:
        return self._state

    @property
    def items(self) -> Tuple[BasketItem, ...]:
        return self._state.items

    @property
    def max_items(self) -> int:
        return self._state.max_items

    def get(self, item_id: str) -> Optional[BasketItem]:
        """Find an item by id. Items are immutable; edit via update_configuration()."""
        for item in self._state.items:
            if item.id == item_id:
                return item
        return None

    def summary(self) -> BasketSummary:
        return summarize(self._state.items)

    def is_full(self) -> bool:
        return len(self._state.items) >= self._state.max_items

    def total_item_count(self) -> int:
        return sum(item.quantity for item in self._state.items)

    # ==========================================
    # Mutations
    # ==========================================

    def add(self, config: BasketItemConfig) -> AddResult:
        """Append a configured print with quantity 1. Fails when the basket is full or the config is malformed."""
        if self.is_full():
            return AddResult(
                success=False,
                state=self._state,
                error=f"הגעתם למקסימום של {self._state.max_items} פריטים בעגלה",
            )

        item = self._build_item(config)
        if item is None:
            return AddResult(success=False, state=self._state, error="פרטי הפריט אינם תקינים")

        state = self._commit(self._state.items + (item,))
        return AddResult(success=True, state=state, item=item)

    def remove(self, item_id: str) -> BasketState:
        """Remove an item. Unknown ids are ignored."""
        if self.get(item_id) is None:
            return self._state
        return self._commit(tuple(it for it in self._state.items if it.id != item_id))

    def update_quantity(self, item_id: str, quantity: int) -> BasketState:
        """
        Set an item's quantity.
        quantity <= 0 removes the item. Non-integers, values above
        MAX_ITEM_QUANTITY and unknown ids are a no-op.
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            return self._state
        if quantity <= 0:
            return self.remove(item_id)
        if quantity > MAX_ITEM_QUANTITY:
            return self._state

        item = self.get(item_id)
        if item is None or item.quantity == quantity:
            return self._state
        return self._replace(replace(item, quantity=quantity))

    def update_configuration(self, item_id: str, **updates) -> BasketState:
        """
        Replace any of image, canvas_size, canvas_options, base_price, total_price.
        Other keys (id, quantity, ...) are ignored. Malformed values, or a
        result that would not survive a reload, leave the item unchanged.
        """
        ignored = set(updates) - CONFIGURABLE_FIELDS
        if ignored:
            logger.warning(f"Ignoring non-configurable basket fields: {sorted(ignored)}")

        changes = {k: v for k, v in updates.items() if k in CONFIGURABLE_FIELDS}
        item = self.get(item_id)
        if item is None or not changes:
            return self._state

        if "image" in changes:
            changes["image"] = copy.deepcopy(changes["image"])
        try:
            if "canvas_size" in changes:
                changes["canvas_size"] = CanvasSize.coerce(changes["canvas_size"])
            if "canvas_options" in changes:
                changes["canvas_options"] = CanvasOptions.coerce(changes["canvas_options"])
        except (KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Ignoring malformed configuration for {item_id}: {e!r}")
            return self._state

        updated = replace(item, **changes)
        if not is_valid_item(updated):
            logger.warning(f"Ignoring invalid configuration for {item_id}")
            return self._state
        return self._replace(updated)

    def clear(self) -> BasketState:
        """Empty the basket and erase the stored copy."""
        return self._commit(())

    # ==========================================
    # Observers
    # ==========================================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener with the new state after every change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ==========================================
    # Private helpers
    # ==========================================

    def _build_item(self, config: BasketItemConfig) -> Optional[BasketItem]:
        try:
            item = BasketItem(
                id=generate_basket_item_id(),
                image=copy.deepcopy(config.image),
                canvas_size=CanvasSize.coerce(config.canvas_size),
                canvas_options=CanvasOptions.coerce(config.canvas_options),
                base_price=config.base_price,
                total_price=config.total_price,
                quantity=1,
                added_at=self._clock(),
            )
        except (KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Rejected malformed basket item: {e!r}")
            return None

        if not is_valid_item(item):
            logger.warning("Rejected basket item that fails integrity checks")
            return None
        return item

    def _replace(self, new_item: BasketItem) -> BasketState:
        return self._commit(tuple(new_item if it.id == new_item.id else it for it in self._state.items))

    def _commit(self, items: Tuple[BasketItem, ...]) -> BasketState:
        self._state = BasketState(items=items, max_items=self._state.max_items, last_updated=self._clock())
        self._persist()
        self._notify()
        return self._state

    def _persist(self) -> None:
        """Best-effort write: the in-memory state stays authoritative."""
        try:
            if self._state.items:
                self.storage.save(self.storage_key, encode_state(self._state))
            else:
                self.storage.remove(self.storage_key)
        except Exception as e:
            logger.error(f"Failed to persist basket: {e}")

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception("Basket listener failed")

    def _restore(self) -> None:
        """Load the stored basket, dropping it when stale or unreadable."""
        try:
            raw = self.storage.load(self.storage_key)
        except Exception as e:
            logger.error(f"Failed to load basket: {e}")
            return

        if not raw:
            return

        stored, dropped = decode_state(raw, self._state.max_items)
        if stored is None:
            logger.warning("Stored basket is unreadable, starting empty")
            self._persist()
            return

        if is_basket_stale(stored.last_updated, self._clock()):
            logger.info(f"Basket is older than {BASKET_STALE_DAYS} days, discarding")
            self._persist()
            return

        self._state = stored
        if dropped or not stored.items:
            self._persist()
        if stored.items:
            logger.info(f"Restored basket with {len(stored.items)} item(s)")
