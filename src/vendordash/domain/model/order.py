"""Order aggregate — a customer's delivery for one calendar day.

The Order owns its items once they have been fetched.  Until then only
the summary reported by the store (total and item count) is known, so
``items`` is ``None`` rather than an empty list.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from vendordash.domain.exceptions import EntityNotFoundError, ValidationError
from vendordash.domain.model.item import OrderItem
from vendordash.domain.model.value_objects import Money
from vendordash.domain.service import aggregation


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    READY = "ready"

    @staticmethod
    def parse(raw: str) -> OrderStatus:
        try:
            return OrderStatus(raw.strip().lower())
        except (ValueError, AttributeError) as exc:
            allowed = ", ".join(s.value for s in OrderStatus)
            raise ValidationError(
                f"Invalid status {raw!r}; expected one of: {allowed}"
            ) from exc


@dataclass
class Order:
    """Aggregate root for a delivery order.

    Status is a flat label: any value can follow any other.  Orders are
    created by the ingestion side with status PENDING and are never
    deleted here.
    """

    id: str
    order_code: str
    customer_name: str
    delivery_date: date
    status: OrderStatus = OrderStatus.PENDING
    items: list[OrderItem] | None = None
    reported_total: Money = Money.zero()
    reported_item_count: int = 0
    customer_email: str | None = None
    store_id: str | None = None

    # --- State transitions ----------------------------------------------------

    def change_status(self, status: OrderStatus) -> None:
        if not isinstance(status, OrderStatus):
            raise ValidationError(f"Invalid status {status!r}")
        self.status = status

    def attach_items(self, items: list[OrderItem]) -> None:
        for item in items:
            if item.order_id != self.id:
                raise ValidationError(
                    f"Item {item.id} belongs to order {item.order_id}, not {self.id}"
                )
        self.items = list(items)

    # --- Computed properties --------------------------------------------------

    @property
    def items_loaded(self) -> bool:
        return self.items is not None

    @property
    def total(self) -> Money:
        if self.items is None:
            return self.reported_total
        return aggregation.order_total(self.items)

    @property
    def item_count(self) -> int:
        if self.items is None:
            return self.reported_item_count
        return aggregation.item_count(self.items)

    # --- Lookup ---------------------------------------------------------------

    def find_item(self, item_id: str) -> OrderItem:
        if self.items is None:
            raise EntityNotFoundError(
                f"Items of order {self.order_code} have not been loaded"
            )
        for item in self.items:
            if item.id == item_id:
                return item
        raise EntityNotFoundError(
            f"Item '{item_id}' not found in order {self.order_code}"
        )
