"""Integration tests for the buffered order detail draft and its save."""

import asyncio
from datetime import date
from decimal import Decimal

import pytest

from vendordash.application.dto import OrderDetailDTO
from vendordash.application.load_items import LoadItemsHandler
from vendordash.application.load_orders import LoadOrdersHandler
from vendordash.application.order_draft import OpenOrderDraftHandler
from vendordash.application.save_order_draft import SaveOrderDraftHandler
from vendordash.application.working_set import WorkingSet
from vendordash.domain.exceptions import EntityNotFoundError, ValidationError
from vendordash.domain.model.item import ItemDecision
from vendordash.domain.model.order import OrderStatus
from vendordash.domain.model.value_objects import DateWindow, Money, Quantity
from tests.fakes import FakeOrderStore, make_item, make_order

WINDOW = DateWindow.starting(date(2024, 3, 1), 5)


def _setup(loaded: bool = True):
    store = FakeOrderStore([
        make_order("A", date(2024, 3, 1), [
            make_item("1", "A", "Chicken", qty="2", price="10.00"),
            make_item("2", "A", "Beef", qty="1", price="15.00", decision=ItemDecision.CONFIRMED),
        ]),
    ])
    ws = WorkingSet()
    store.subscribe(ws.apply_change)
    if loaded:
        asyncio.run(LoadOrdersHandler(store, ws).handle(WINDOW))
        asyncio.run(LoadItemsHandler(store, ws).handle())
    return store, ws, OpenOrderDraftHandler(store, ws), SaveOrderDraftHandler(store, ws)


class TestOpenDraft:

    def test_opens_from_working_set(self):
        store, ws, open_draft, _ = _setup()
        draft = asyncio.run(open_draft.handle("A"))
        assert [i.id for i in draft.items] == ["1", "2"]
        assert draft.items[0] is not ws.get_item("A", "1")

    def test_opens_from_store_when_not_in_view(self):
        _, _, open_draft, _ = _setup(loaded=False)
        draft = asyncio.run(open_draft.handle("A"))
        assert draft.total == Money.of("35.00")

    def test_unknown_order(self):
        _, _, open_draft, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="not found"):
            asyncio.run(open_draft.handle("Z"))


class TestDraftEdits:

    def test_edits_stay_local(self):
        store, ws, open_draft, _ = _setup()
        draft = asyncio.run(open_draft.handle("A"))
        assert draft.adjust_quantity("1", "1.5")
        assert draft.deny("1")

        assert draft.total == Money.of("15.00")
        assert ws.get_item("A", "1").is_pending
        assert store.item_writes == []

    def test_rejections_leave_draft_unchanged(self):
        _, _, open_draft, _ = _setup()
        draft = asyncio.run(open_draft.handle("A"))
        assert not draft.adjust_quantity("2", "0.5")
        assert not draft.confirm("2")
        assert not draft.set_status("shipped")
        assert draft.item("2").actual_quantity == Quantity(Decimal("1"))
        assert draft.status is OrderStatus.PENDING

    def test_counts_and_dto(self):
        _, _, open_draft, _ = _setup()
        draft = asyncio.run(open_draft.handle("A"))
        draft.increment("1")
        dto = OrderDetailDTO.of(draft)
        assert dto.confirmed_count == 1
        assert dto.denied_count == 0
        assert dto.items[0].actual_quantity == "2.1"
        assert dto.items[0].adjusted
        assert dto.total == "$36.00"


class TestSaveDraft:

    def test_save_writes_status_and_items_then_closes(self):
        store, ws, open_draft, save = _setup()
        draft = asyncio.run(open_draft.handle("A"))
        draft.set_status("processing")
        draft.adjust_quantity("1", "1.5")
        draft.confirm("1")

        assert asyncio.run(save.handle(draft))

        assert store.status_writes == [("A", OrderStatus.PROCESSING)]
        assert ("A", "1", Quantity(Decimal("1.5")), ItemDecision.CONFIRMED) in store.item_writes
        assert draft.closed
        order = ws.get_order("A")
        assert order.status is OrderStatus.PROCESSING
        assert order.find_item("1").decision is ItemDecision.CONFIRMED
        assert order.total == Money.of("30.00")

    def test_unchanged_status_not_written(self):
        store, _, open_draft, save = _setup()
        draft = asyncio.run(open_draft.handle("A"))
        asyncio.run(save.handle(draft))
        assert store.status_writes == []
        assert len(store.item_writes) == 2

    def test_reopened_and_requantified_item_is_saved(self):
        store, _, open_draft, save = _setup()
        draft = asyncio.run(open_draft.handle("A"))
        draft.revert("2")
        draft.adjust_quantity("2", "0.5")
        draft.confirm("2")

        assert asyncio.run(save.handle(draft))
        stored = store.stored_item("A", "2")
        assert stored.actual_quantity == Quantity(Decimal("0.5"))
        assert stored.decision is ItemDecision.CONFIRMED

    def test_failure_keeps_draft_open_for_retry(self):
        store, ws, open_draft, save = _setup()
        draft = asyncio.run(open_draft.handle("A"))
        draft.deny("1")
        store.fail_writes.add(("A", "1"))

        assert not asyncio.run(save.handle(draft))
        assert not draft.closed
        assert draft.error == "write of A/1 refused"
        assert draft.item("1").decision is ItemDecision.DENIED

        store.fail_writes.clear()
        assert asyncio.run(save.handle(draft))
        assert draft.closed
        assert draft.error is None

    def test_saved_draft_cannot_be_saved_or_edited_again(self):
        _, _, open_draft, save = _setup()
        draft = asyncio.run(open_draft.handle("A"))
        asyncio.run(save.handle(draft))
        with pytest.raises(ValidationError, match="already saved"):
            asyncio.run(save.handle(draft))
        with pytest.raises(ValidationError, match="already saved"):
            draft.confirm("1")

    def test_order_outside_view_saved_without_touching_working_set(self):
        store, ws, open_draft, save = _setup(loaded=False)
        draft = asyncio.run(open_draft.handle("A"))
        draft.deny("1")
        assert asyncio.run(save.handle(draft))
        assert "A" not in ws
        assert store.stored_item("A", "1").decision is ItemDecision.DENIED
