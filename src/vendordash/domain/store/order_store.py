"""Abstract store for orders and their items.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON file, REST API) live in
the infrastructure layer; exactly one is chosen at process start.

There is no versioning on writes: concurrent writers race and the last
write to reach the store wins.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import date

from vendordash.domain.model.events import ItemChange, OrderChange
from vendordash.domain.model.item import ItemDecision, OrderItem
from vendordash.domain.model.order import Order, OrderStatus
from vendordash.domain.model.value_objects import Quantity

ChangeListener = Callable[[OrderChange | ItemChange], None]


class OrderStore(ABC):

    def __init__(self) -> None:
        self._listeners: list[ChangeListener] = []

    @abstractmethod
    async def list_orders(self, start: date, end: date) -> list[Order]:
        """Return orders delivered between *start* and *end*, both inclusive."""

    @abstractmethod
    async def get_order(self, order_id: str) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    async def list_items(self, order_id: str) -> list[OrderItem]:
        """Return the items of an order in their stored order."""

    @abstractmethod
    async def write_item(
        self,
        order_id: str,
        item_id: str,
        *,
        actual_quantity: Quantity | None = None,
        decision: ItemDecision | None = None,
    ) -> OrderItem:
        """Persist the given fields of an item (quantity applied first)."""

    @abstractmethod
    async def write_order_status(self, order_id: str, status: OrderStatus) -> Order:
        """Persist a new status for an order."""

    # --- Change feed ----------------------------------------------------------

    def subscribe(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def _publish(self, event: OrderChange | ItemChange) -> None:
        for listener in self._listeners:
            listener(event)
