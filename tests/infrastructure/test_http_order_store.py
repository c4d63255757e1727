"""Tests for the REST order store against a mocked transport."""

import asyncio
import json
from datetime import date
from decimal import Decimal

import httpx
import pytest

from vendordash.domain.exceptions import StoreFetchError, StoreWriteError
from vendordash.domain.model.item import ItemDecision
from vendordash.domain.model.order import OrderStatus
from vendordash.domain.model.value_objects import Money, Quantity
from vendordash.infrastructure.http.http_order_store import HttpOrderStore

ORDER = {
    "id": "A",
    "orderCode": "ORD-A",
    "customerName": "Alice",
    "deliveryDate": "2024-03-01T00:00:00.000Z",
    "status": "pending",
    "totalAmount": 35,
    "itemCount": 2,
}
ITEM = {
    "id": "1",
    "name": "Chicken",
    "unit": "kg",
    "price": 10,
    "orderedQuantity": 2,
    "actualQuantity": 1.5,
    "confirmed": None,
    "image": None,
}


def _store(handler):
    return HttpOrderStore("http://api.test/api", transport=httpx.MockTransport(handler))


class TestReads:

    def test_list_orders(self):
        seen = {}

        def handler(request):
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json=[ORDER])

        orders = asyncio.run(_store(handler).list_orders(date(2024, 3, 1), date(2024, 3, 5)))

        assert seen["params"]["startDate"].startswith("2024-03-01")
        assert seen["params"]["endDate"].startswith("2024-03-05")
        assert orders[0].delivery_date == date(2024, 3, 1)
        assert orders[0].total == Money.of("35")
        assert orders[0].item_count == 2

    def test_list_items(self):
        def handler(request):
            assert request.url.path == "/api/orders/A/items"
            return httpx.Response(200, json=[ITEM])

        items = asyncio.run(_store(handler).list_items("A"))
        assert items[0].actual_quantity == Quantity(Decimal("1.5"))
        assert items[0].decision is ItemDecision.PENDING

    def test_get_order_404_is_none(self):
        store = _store(lambda request: httpx.Response(404, json={"error": "Order not found"}))
        assert asyncio.run(store.get_order("Z")) is None

    def test_server_error_is_fetch_error(self):
        store = _store(lambda request: httpx.Response(500))
        with pytest.raises(StoreFetchError):
            asyncio.run(store.list_items("A"))

    def test_network_error_is_fetch_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(StoreFetchError):
            asyncio.run(_store(handler).list_orders(date(2024, 3, 1), date(2024, 3, 5)))


class TestWrites:

    def test_write_item_sends_quantity_before_decision(self):
        calls = []

        def handler(request):
            calls.append((request.method, request.url.path, json.loads(request.content)))
            return httpx.Response(200, json={**ITEM, "confirmed": True})

        item = asyncio.run(_store(handler).write_item(
            "A", "1", actual_quantity=Quantity(Decimal("1.5")), decision=ItemDecision.CONFIRMED,
        ))

        assert calls == [
            ("PATCH", "/api/orders/A/items/1", {"actualQuantity": 1.5}),
            ("PATCH", "/api/orders/A/items/1/confirm", {"confirmed": True}),
        ]
        assert item.decision is ItemDecision.CONFIRMED

    def test_revert_sends_null(self):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json=ITEM)

        asyncio.run(_store(handler).write_item("A", "1", decision=ItemDecision.PENDING))
        assert bodies == [{"confirmed": None}]

    def test_write_failure_is_write_error(self):
        store = _store(lambda request: httpx.Response(503))
        with pytest.raises(StoreWriteError):
            asyncio.run(store.write_order_status("A", OrderStatus.READY))

    def test_write_order_status(self):
        def handler(request):
            assert json.loads(request.content) == {"status": "ready"}
            return httpx.Response(200, json={**ORDER, "status": "ready"})

        order = asyncio.run(_store(handler).write_order_status("A", OrderStatus.READY))
        assert order.status is OrderStatus.READY
