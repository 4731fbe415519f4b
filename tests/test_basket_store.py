from dataclasses import FrozenInstanceError, replace

import pytest

from config.settings import BASKET_STORAGE_KEY
from modules.basket.models import CanvasOptions, CanvasSize
from modules.basket.service import BasketStore, build_item_config


def _add(store, config, quantity=1):
    result = store.add(config)
    assert result.success
    if quantity != 1:
        store.update_quantity(result.item.id, quantity)
    return result.item.id


class TestBuildItemConfig:
    def test_default_color_has_no_upcharge(self, image_ref):
        config = build_item_config(image_ref, 100, 100)
        assert config.base_price == 390
        assert config.total_price == 390
        assert config.canvas_options == CanvasOptions(side_color="#FFFFFF", color_upcharge=0)

    def test_colored_sides_priced(self, image_ref):
        config = build_item_config(image_ref, 100, 100, "#000000")
        assert config.canvas_options.color_upcharge == 39
        assert config.total_price == 425
        assert config.canvas_size == CanvasSize(width=100, height=100)


class TestAdd:
    def test_new_item_defaults(self, store, small_config, clock):
        result = store.add(small_config)

        assert result.success
        assert result.error is None
        item = result.item
        assert item.id.startswith("basket_item_")
        assert item.quantity == 1
        assert item.added_at == clock.now
        assert result.state.items == (item,)

    def test_insertion_order_preserved(self, store, small_config, large_config):
        first = _add(store, small_config)
        second = _add(store, large_config)
        assert [it.id for it in store.items] == [first, second]

    def test_ids_are_unique(self, store, small_config):
        ids = {_add(store, small_config) for _ in range(50)}
        assert len(ids) == 50

    def test_full_basket_rejects_without_raising(self, store, small_config):
        for _ in range(100):
            _add(store, small_config)

        result = store.add(small_config)

        assert not result.success
        assert result.item is None
        assert "100" in result.error
        assert len(store.items) == 100
        assert store.is_full()

    def test_custom_capacity(self, storage, clock, small_config):
        store = BasketStore(storage, max_items=2, clock=clock)
        _add(store, small_config)
        assert not store.is_full()
        _add(store, small_config)
        assert store.is_full()
        assert not store.add(small_config).success
        assert store.max_items == 2

    @pytest.mark.parametrize("changes", [
        {"image": None},
        {"image": {}},
        {"base_price": "390"},
        {"total_price": None},
        {"canvas_size": {"width": 100}},
        {"canvas_size": CanvasSize(width=None, height=100)},
        {"canvas_options": ["#000000"]},
    ])
    def test_invalid_config_rejected(self, store, storage, clock, small_config, changes):
        result = store.add(replace(small_config, **changes))

        assert not result.success
        assert result.item is None
        assert result.error
        assert store.items == ()
        assert BASKET_STORAGE_KEY not in storage

    def test_accepted_items_survive_reload(self, store, storage, clock, small_config, large_config):
        for config in (small_config, large_config):
            _add(store, config)
        assert BasketStore(storage, clock=clock).items == store.items

    def test_image_is_copied(self, store, image_ref):
        item_id = _add(store, build_item_config(image_ref, 100, 100))
        image_ref["path"] = "changed.jpg"
        assert store.get(item_id).image["path"] == "static/uploads/sunset.jpg"


class TestRemove:
    def test_remove(self, store, small_config, large_config):
        first = _add(store, small_config)
        second = _add(store, large_config)
        store.remove(first)
        assert [it.id for it in store.items] == [second]

    def test_remove_twice_is_noop(self, store, small_config):
        item_id = _add(store, small_config)
        store.remove(item_id)
        state = store.remove(item_id)
        assert state.items == ()

    def test_remove_unknown_id(self, store, small_config):
        _add(store, small_config)
        before = store.state
        assert store.remove("nope") is before


class TestUpdateQuantity:
    def test_sets_quantity(self, store, small_config):
        item_id = _add(store, small_config)
        store.update_quantity(item_id, 5)
        assert store.get(item_id).quantity == 5

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_non_positive_removes(self, store, small_config, quantity):
        item_id = _add(store, small_config)
        store.update_quantity(item_id, quantity)
        assert store.get(item_id) is None

    def test_above_max_is_ignored(self, store, small_config):
        item_id = _add(store, small_config)
        store.update_quantity(item_id, 99)
        store.update_quantity(item_id, 100)
        assert store.get(item_id).quantity == 99

    @pytest.mark.parametrize("quantity", [2.5, True, "3", None])
    def test_non_integer_is_ignored(self, store, storage, clock, small_config, quantity):
        item_id = _add(store, small_config)
        before = store.state

        assert store.update_quantity(item_id, quantity) is before
        assert store.get(item_id).quantity == 1
        assert [it.id for it in BasketStore(storage, clock=clock).items] == [item_id]

    def test_unknown_id_is_ignored(self, store, small_config):
        _add(store, small_config)
        before = store.state
        assert store.update_quantity("nope", 3) is before


class TestUpdateConfiguration:
    def test_replaces_supplied_fields_only(self, store, small_config, image_ref):
        item_id = _add(store, small_config, quantity=3)
        original = store.get(item_id)

        store.update_configuration(
            item_id,
            canvas_size={"width": 150, "height": 100},
            base_price=475,
            total_price=475,
        )

        item = store.get(item_id)
        assert item.id == item_id
        assert item.quantity == 3
        assert item.canvas_size == CanvasSize(width=150, height=100)
        assert item.base_price == 475
        assert item.total_price == 475
        assert item.image == original.image
        assert item.canvas_options == original.canvas_options
        assert item.added_at == original.added_at

    def test_id_and_quantity_cannot_change(self, store, small_config):
        item_id = _add(store, small_config)
        store.update_configuration(item_id, id="other", quantity=7, total_price=500)
        item = store.get(item_id)
        assert item.quantity == 1
        assert item.total_price == 500
        assert store.get("other") is None

    def test_unknown_id_is_ignored(self, store, small_config):
        _add(store, small_config)
        before = store.state
        assert store.update_configuration("nope", total_price=1) is before

    @pytest.mark.parametrize("updates", [
        {"canvas_size": {"width": 50}},
        {"canvas_size": "50x50"},
        {"canvas_size": {"width": "wide", "height": 50}},
        {"canvas_options": "black"},
        {"image": None},
        {"image": ""},
        {"total_price": "free"},
        {"base_price": float("nan")},
    ])
    def test_malformed_update_is_ignored(self, store, storage, clock, small_config, updates):
        item_id = _add(store, small_config)
        before = store.state

        assert store.update_configuration(item_id, **updates) is before
        assert BasketStore(storage, clock=clock).items == before.items


class TestSummary:
    def test_empty(self, store):
        summary = store.summary()
        assert (summary.item_count, summary.total_items, summary.subtotal, summary.total_price) == (0, 0, 0, 0)

    def test_tracks_every_change(self, store, small_config, large_config):
        first = _add(store, small_config, quantity=2)
        second = _add(store, large_config)

        summary = store.summary()
        assert summary.item_count == 2
        assert summary.total_items == 3
        assert summary.subtotal == 390 * 2 + 530
        assert summary.total_price == summary.subtotal
        assert store.total_item_count() == 3

        store.update_quantity(second, 0)
        assert store.summary().total_items == 2
        store.remove(first)
        assert store.summary().total_items == 0

    def test_clear(self, store, small_config):
        _add(store, small_config)
        _add(store, small_config)
        state = store.clear()
        assert state.items == ()
        assert store.summary().item_count == 0


class TestSnapshots:
    def test_items_are_immutable(self, store, small_config):
        item = store.get(_add(store, small_config))
        with pytest.raises(FrozenInstanceError):
            item.quantity = 50

    def test_returned_state_does_not_change_later(self, store, small_config):
        state = store.add(small_config).state
        store.add(small_config)
        assert len(state.items) == 1
        assert len(store.items) == 2

    def test_get_missing(self, store):
        assert store.get("missing") is None

    def test_last_updated_moves_with_changes(self, store, small_config, clock):
        item_id = _add(store, small_config)
        clock.advance(minutes=5)
        state = store.update_quantity(item_id, 2)
        assert state.last_updated == clock.now


class TestSubscribe:
    def test_listener_receives_new_state(self, store, small_config):
        seen = []
        store.subscribe(seen.append)

        result = store.add(small_config)
        store.update_quantity(result.item.id, 4)

        assert len(seen) == 2
        assert seen[0] is result.state
        assert seen[1].items[0].quantity == 4

    def test_noop_does_not_notify(self, store):
        seen = []
        store.subscribe(seen.append)
        store.remove("missing")
        store.update_quantity("missing", 2)
        assert seen == []

    def test_unsubscribe(self, store, small_config):
        seen = []
        unsubscribe = store.subscribe(seen.append)
        unsubscribe()
        store.add(small_config)
        assert seen == []

    def test_failing_listener_is_isolated(self, store, small_config):
        seen = []

        def broken(state):
            raise RuntimeError("boom")

        store.subscribe(broken)
        store.subscribe(seen.append)

        assert store.add(small_config).success
        assert len(seen) == 1
