"""REST implementation of OrderStore for the dashboard's order API.

Speaks the camelCase JSON of the API server:

    GET   /orders?startDate=..&endDate=..
    GET   /orders/{id}
    GET   /orders/{id}/items
    PATCH /orders/{id}/status                     {"status": ...}
    PATCH /orders/{orderId}/items/{itemId}         {"actualQuantity": ...}
    PATCH /orders/{orderId}/items/{itemId}/confirm {"confirmed": null|true|false}

The API has no push channel, so this store never publishes changes.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from decimal import Decimal

import httpx

from vendordash.domain.exceptions import StoreFetchError, StoreWriteError
from vendordash.domain.model.item import ItemDecision, OrderItem
from vendordash.domain.model.order import Order, OrderStatus
from vendordash.domain.model.value_objects import Money, Quantity
from vendordash.domain.store.order_store import OrderStore

logger = logging.getLogger(__name__)


class HttpOrderStore(OrderStore):

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__()
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    # --- OrderStore interface -------------------------------------------------

    async def list_orders(self, start: date, end: date) -> list[Order]:
        params = {
            "startDate": datetime.combine(start, time.min).isoformat(),
            "endDate": datetime.combine(end, time.max).isoformat(),
        }
        payload = await self._get("/orders", params=params)
        orders = [self._to_order(raw) for raw in payload]
        return [o for o in orders if start <= o.delivery_date <= end]

    async def get_order(self, order_id: str) -> Order | None:
        try:
            async with self._client() as client:
                resp = await client.get(f"/orders/{order_id}")
                if resp.status_code == 404:
                    return None
                resp.raise_for_status()
                return self._to_order(resp.json())
        except httpx.HTTPError as exc:
            raise StoreFetchError(f"GET /orders/{order_id} failed: {exc}") from exc

    async def list_items(self, order_id: str) -> list[OrderItem]:
        payload = await self._get(f"/orders/{order_id}/items")
        return [self._to_item(order_id, raw) for raw in payload]

    async def write_item(
        self,
        order_id: str,
        item_id: str,
        *,
        actual_quantity: Quantity | None = None,
        decision: ItemDecision | None = None,
    ) -> OrderItem:
        path = f"/orders/{order_id}/items/{item_id}"
        raw = None
        if actual_quantity is not None:
            raw = await self._patch(path, {"actualQuantity": float(actual_quantity.value)})
        if decision is not None:
            raw = await self._patch(f"{path}/confirm", {"confirmed": decision.confirmed})
        if raw is None:
            raise StoreWriteError(f"Nothing to write for item {order_id}/{item_id}")
        return self._to_item(order_id, raw)

    async def write_order_status(self, order_id: str, status: OrderStatus) -> Order:
        raw = await self._patch(f"/orders/{order_id}/status", {"status": status.value})
        return self._to_order(raw)

    # --- Transport helpers ----------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url, timeout=self._timeout, transport=self._transport
        )

    async def _get(self, path: str, params: dict | None = None):
        try:
            async with self._client() as client:
                resp = await client.get(path, params=params)
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPError as exc:
            raise StoreFetchError(f"GET {path} failed: {exc}") from exc

    async def _patch(self, path: str, body: dict) -> dict:
        logger.debug("PATCH %s %s", path, body)
        try:
            async with self._client() as client:
                resp = await client.patch(path, json=body)
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPError as exc:
            raise StoreWriteError(f"PATCH {path} failed: {exc}") from exc

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_order(raw: dict) -> Order:
        return Order(
            id=str(raw["id"]),
            order_code=raw["orderCode"],
            customer_name=raw["customerName"],
            # deliveryDate is an ISO timestamp at the start of the day
            delivery_date=date.fromisoformat(raw["deliveryDate"][:10]),
            status=OrderStatus(raw.get("status", OrderStatus.PENDING.value)),
            reported_total=Money.of(raw.get("totalAmount", 0)),
            reported_item_count=int(raw.get("itemCount", 0)),
        )

    @staticmethod
    def _to_item(order_id: str, raw: dict) -> OrderItem:
        ordered = Quantity(Decimal(str(raw["orderedQuantity"])))
        actual = raw.get("actualQuantity")
        return OrderItem(
            id=str(raw["id"]),
            order_id=order_id,
            name=raw["name"],
            unit=raw.get("unit", "kg"),
            price=Money.of(raw.get("price", 0)),
            ordered_quantity=ordered,
            actual_quantity=ordered if actual is None else Quantity(Decimal(str(actual))),
            decision=ItemDecision.from_confirmed(raw.get("confirmed")),
            image_url=raw.get("image"),
        )
