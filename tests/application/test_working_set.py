"""Tests for the working set: scope loads, identity merges and the change feed."""

from datetime import date
from decimal import Decimal

import pytest

from vendordash.application.working_set import WorkingSet
from vendordash.domain.exceptions import EntityNotFoundError, StoreFetchError
from vendordash.domain.model.events import ChangeKind, ItemChange, OrderChange
from vendordash.domain.model.item import ItemDecision
from vendordash.domain.model.order import OrderStatus
from vendordash.domain.model.value_objects import DateWindow, Quantity
from tests.fakes import make_item, make_order

WINDOW = DateWindow.starting(date(2024, 3, 1), 5)


def _loaded():
    ws = WorkingSet()
    token = ws.begin_load(WINDOW)
    ws.commit_orders(token, [
        make_order("A", date(2024, 3, 1), [make_item("1", "A"), make_item("2", "A")]),
        make_order("B", date(2024, 3, 2)),
    ])
    return ws


class TestScopeLoading:

    def test_commit_replaces_orders(self):
        ws = _loaded()
        assert len(ws) == 2
        assert not ws.loading
        assert [o.id for o in ws.orders_on(date(2024, 3, 2))] == ["B"]

    def test_stale_load_discarded(self):
        ws = WorkingSet()
        old = ws.begin_load(WINDOW)
        new = ws.begin_load(WINDOW.shifted(5))

        assert ws.commit_orders(new, [make_order("N", date(2024, 3, 6))])
        assert not ws.commit_orders(old, [make_order("O", date(2024, 3, 1))])
        assert "N" in ws and "O" not in ws

    def test_stale_item_load_discarded(self):
        ws = _loaded()
        token = ws.generation
        ws.begin_load(WINDOW)
        assert not ws.commit_items(token, {"B": [make_item("9", "B")]})
        assert not ws.get_order("B").items_loaded

    def test_failed_load_keeps_last_good_orders(self):
        ws = _loaded()
        token = ws.begin_load(WINDOW.shifted(5))
        ws.fail_load(token, StoreFetchError("timeout"))
        assert ws.error == "timeout"
        assert len(ws) == 2

    def test_membership_version_bumps_on_commit(self):
        ws = WorkingSet()
        before = ws.membership_version
        ws.commit_orders(ws.begin_load(WINDOW), [])
        assert ws.membership_version == before + 1

    def test_unknown_order(self):
        with pytest.raises(EntityNotFoundError):
            _loaded().get_order("Z")


class TestChangeFeed:

    def test_item_change_patched_by_identity(self):
        ws = _loaded()
        ws.apply_change(ItemChange("A", "2", Quantity(Decimal("0.5")), ItemDecision.DENIED))
        assert ws.get_item("A", "2").decision is ItemDecision.DENIED
        assert ws.get_item("A", "2").actual_quantity == Quantity(Decimal("0.5"))
        assert ws.get_item("A", "1").is_pending

    def test_item_change_for_unknown_order_ignored(self):
        ws = _loaded()
        ws.apply_change(ItemChange("Z", "1", Quantity.zero(), ItemDecision.DENIED))
        assert len(ws) == 2

    def test_update_keeps_fetched_items(self):
        ws = _loaded()
        version = ws.membership_version
        updated = make_order("A", date(2024, 3, 1), status=OrderStatus.READY)
        ws.apply_change(OrderChange(ChangeKind.UPDATE, "A", updated))

        order = ws.get_order("A")
        assert order.status is OrderStatus.READY
        assert [i.id for i in order.items] == ["1", "2"]
        assert ws.membership_version == version

    def test_update_moving_out_of_window_removes_order(self):
        ws = _loaded()
        moved = make_order("A", date(2024, 4, 1))
        ws.apply_change(OrderChange(ChangeKind.UPDATE, "A", moved))
        assert "A" not in ws

    def test_insert_inside_window_added(self):
        ws = _loaded()
        version = ws.membership_version
        ws.apply_change(OrderChange(ChangeKind.INSERT, "C", make_order("C", date(2024, 3, 3))))
        assert "C" in ws
        assert ws.membership_version == version + 1

    def test_insert_outside_window_ignored(self):
        ws = _loaded()
        ws.apply_change(OrderChange(ChangeKind.INSERT, "C", make_order("C", date(2024, 5, 1))))
        assert "C" not in ws

    def test_delete_removes_order(self):
        ws = _loaded()
        ws.apply_change(OrderChange(ChangeKind.DELETE, "B"))
        assert "B" not in ws
