"""JSON-file-backed implementation of OrderStore.

Orders are kept in one file with their items embedded, using the column
names of the orders/order_items tables (``confirmed`` is the tri-state
``null``/``true``/``false``).  Totals and item counts are not stored;
they are derived from the items on every read.

Every accepted write is announced to subscribers as a change event.
"""

from __future__ import annotations

import json
from datetime import date
from decimal import Decimal
from pathlib import Path

from vendordash.domain.exceptions import (
    StoreFetchError,
    StoreWriteError,
    ValidationError,
)
from vendordash.domain.model.events import ChangeKind, ItemChange, OrderChange
from vendordash.domain.model.item import ItemDecision, OrderItem
from vendordash.domain.model.order import Order, OrderStatus
from vendordash.domain.model.value_objects import Money, Quantity
from vendordash.domain.service import aggregation
from vendordash.domain.store.order_store import OrderStore


def _decimal(value) -> Decimal:
    # Hand-edited files may hold plain JSON numbers instead of strings.
    return Decimal(str(value))


class JsonOrderStore(OrderStore):

    def __init__(self, file_path: Path) -> None:
        super().__init__()
        self._file_path = file_path
        self._ensure_file()

    # --- OrderStore interface -------------------------------------------------

    async def list_orders(self, start: date, end: date) -> list[Order]:
        orders = []
        for raw in self._load_raw(StoreFetchError):
            if start <= date.fromisoformat(raw["delivery_date"]) <= end:
                orders.append(self._to_order(raw))
        return orders

    async def get_order(self, order_id: str) -> Order | None:
        for raw in self._load_raw(StoreFetchError):
            if str(raw["id"]) == order_id:
                return self._to_order(raw)
        return None

    async def list_items(self, order_id: str) -> list[OrderItem]:
        for raw in self._load_raw(StoreFetchError):
            if str(raw["id"]) == order_id:
                return [self._to_item(order_id, i) for i in raw.get("items", [])]
        raise StoreFetchError(f"Order '{order_id}' not found")

    async def write_item(
        self,
        order_id: str,
        item_id: str,
        *,
        actual_quantity: Quantity | None = None,
        decision: ItemDecision | None = None,
    ) -> OrderItem:
        records = self._load_raw(StoreWriteError)
        raw_order = self._find_order(records, order_id)
        for index, raw_item in enumerate(raw_order.get("items", [])):
            if str(raw_item["id"]) != item_id:
                continue
            item = self._to_item(order_id, raw_item)
            try:
                item.record_write(actual_quantity=actual_quantity, decision=decision)
            except ValidationError as exc:
                raise StoreWriteError(str(exc)) from exc
            raw_order["items"][index] = self._item_to_raw(item)
            self._persist_raw(records)
            self._publish(
                ItemChange(order_id, item_id, item.actual_quantity, item.decision)
            )
            return item
        raise StoreWriteError(f"Item '{item_id}' not found in order '{order_id}'")

    async def write_order_status(self, order_id: str, status: OrderStatus) -> Order:
        records = self._load_raw(StoreWriteError)
        raw_order = self._find_order(records, order_id)
        raw_order["status"] = status.value
        self._persist_raw(records)
        order = self._to_order(raw_order)
        self._publish(OrderChange(ChangeKind.UPDATE, order.id, order))
        return order

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_order(raw: dict) -> Order:
        items = [JsonOrderStore._to_item(str(raw["id"]), i) for i in raw.get("items", [])]
        return Order(
            id=str(raw["id"]),
            order_code=raw["order_code"],
            customer_name=raw["customer_name"],
            delivery_date=date.fromisoformat(raw["delivery_date"]),
            status=OrderStatus(raw.get("status", OrderStatus.PENDING.value)),
            reported_total=aggregation.order_total(items),
            reported_item_count=len(items),
            customer_email=raw.get("customer_email"),
            store_id=raw.get("store_id"),
        )

    @staticmethod
    def _to_item(order_id: str, raw: dict) -> OrderItem:
        ordered = Quantity(_decimal(raw["ordered_quantity"]))
        actual = raw.get("actual_quantity")
        return OrderItem(
            id=str(raw["id"]),
            order_id=order_id,
            name=raw["product_name"],
            unit=raw.get("unit", "kg"),
            price=Money(_decimal(raw.get("price", "0")), raw.get("currency", "USD")),
            ordered_quantity=ordered,
            actual_quantity=ordered if actual is None else Quantity(_decimal(actual)),
            decision=ItemDecision.from_confirmed(raw.get("confirmed")),
            sku=raw.get("product_sku"),
            image_url=raw.get("image_url"),
        )

    @staticmethod
    def _item_to_raw(item: OrderItem) -> dict:
        return {
            "id": item.id,
            "product_name": item.name,
            "product_sku": item.sku,
            "unit": item.unit,
            "price": str(item.price.amount),
            "currency": item.price.currency,
            "ordered_quantity": str(item.ordered_quantity.value),
            "actual_quantity": str(item.actual_quantity.value),
            "confirmed": item.decision.confirmed,
            "image_url": item.image_url,
        }

    # --- File helpers ---------------------------------------------------------

    @staticmethod
    def _find_order(records: list[dict], order_id: str) -> dict:
        for raw in records:
            if str(raw["id"]) == order_id:
                return raw
        raise StoreWriteError(f"Order '{order_id}' not found")

    def _load_raw(self, error: type[StoreFetchError] | type[StoreWriteError]) -> list[dict]:
        try:
            return json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise error(f"Cannot read {self._file_path}: {exc}") from exc

    def _persist_raw(self, records: list[dict]) -> None:
        try:
            self._file_path.write_text(
                json.dumps(records, indent=2) + "\n", encoding="utf-8"
            )
        except OSError as exc:
            raise StoreWriteError(f"Cannot write {self._file_path}: {exc}") from exc

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
