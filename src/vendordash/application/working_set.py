"""The in-memory working set: orders (and fetched items) for the visible window.

Mutated from several places (user actions, loads, and the store's
change feed), so every merge is by identity (``id``), never by position.

Each load of a window receives a generation token.  A result is only
committed while its token is still the current one; a fetch overtaken by
a newer window move is dropped instead of overwriting newer state.
"""

from __future__ import annotations

import logging
from datetime import date

from vendordash.domain.exceptions import EntityNotFoundError
from vendordash.domain.model.events import ChangeKind, ItemChange, OrderChange
from vendordash.domain.model.item import OrderItem
from vendordash.domain.model.order import Order
from vendordash.domain.model.value_objects import DateWindow

logger = logging.getLogger(__name__)


class WorkingSet:

    def __init__(self) -> None:
        self._orders: dict[str, Order] = {}
        self._window: DateWindow | None = None
        self._generation = 0
        self.membership_version = 0
        self.loading = False
        self.error: str | None = None

    # --- Scope loading --------------------------------------------------------

    @property
    def window(self) -> DateWindow | None:
        return self._window

    @property
    def generation(self) -> int:
        return self._generation

    def begin_load(self, window: DateWindow) -> int:
        self._generation += 1
        self._window = window
        self.loading = True
        return self._generation

    def is_current(self, token: int) -> bool:
        return token == self._generation

    def commit_orders(self, token: int, orders: list[Order]) -> bool:
        """Replace the set with a freshly loaded window.  False if stale."""
        if not self.is_current(token):
            logger.debug("discarding stale order load (token %s)", token)
            return False
        self._orders = {order.id: order for order in orders}
        self.membership_version += 1
        self.loading = False
        self.error = None
        return True

    def commit_items(self, token: int, items_by_order: dict[str, list[OrderItem]]) -> bool:
        """Attach fetched items to their orders.  False if stale."""
        if not self.is_current(token):
            logger.debug("discarding stale item load (token %s)", token)
            return False
        for order_id, items in items_by_order.items():
            order = self._orders.get(order_id)
            if order is not None:
                order.attach_items(items)
        self.error = None
        return True

    def fail_load(self, token: int, exc: Exception) -> None:
        """Flag a failed fetch; the last-known-good orders stay untouched."""
        if not self.is_current(token):
            return
        self.loading = False
        self.error = str(exc) or type(exc).__name__

    # --- Lookup ---------------------------------------------------------------

    def orders(self) -> list[Order]:
        return list(self._orders.values())

    def orders_on(self, day: date) -> list[Order]:
        return [o for o in self._orders.values() if o.delivery_date == day]

    def get_order(self, order_id: str) -> Order:
        order = self._orders.get(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order '{order_id}' is not in the working set")
        return order

    def get_item(self, order_id: str, item_id: str) -> OrderItem:
        return self.get_order(order_id).find_item(item_id)

    def __contains__(self, order_id: str) -> bool:
        return order_id in self._orders

    def __len__(self) -> int:
        return len(self._orders)

    # --- Identity merges ------------------------------------------------------

    def replace_order(self, order: Order) -> None:
        """Swap in a re-fetched order (e.g. the baseline after a save)."""
        if order.id not in self._orders:
            self.membership_version += 1
        self._orders[order.id] = order

    def apply_change(self, event: OrderChange | ItemChange) -> None:
        """Fold a pushed store change into the set."""
        if isinstance(event, ItemChange):
            self._apply_item_change(event)
        else:
            self._apply_order_change(event)

    def _apply_order_change(self, event: OrderChange) -> None:
        existing = self._orders.get(event.order_id)

        if event.kind is ChangeKind.DELETE:
            if existing is not None:
                del self._orders[event.order_id]
                self.membership_version += 1
                logger.debug("order %s deleted remotely", event.order_id)
            return

        incoming = event.order
        if incoming is None:
            return
        in_window = self._window is None or self._window.contains(incoming.delivery_date)

        if existing is None:
            if in_window:
                self._orders[incoming.id] = incoming
                self.membership_version += 1
                logger.debug("order %s added remotely", incoming.id)
            return

        if not in_window:
            del self._orders[incoming.id]
            self.membership_version += 1
            logger.debug("order %s moved out of the window", incoming.id)
            return

        # Pushed order rows carry no items; keep the ones already fetched.
        if incoming.items is None:
            incoming.items = existing.items
        self._orders[incoming.id] = incoming

    def _apply_item_change(self, event: ItemChange) -> None:
        order = self._orders.get(event.order_id)
        if order is None or order.items is None:
            return
        for item in order.items:
            if item.id == event.item_id:
                item.actual_quantity = event.actual_quantity
                item.decision = event.decision
                logger.debug("item %s/%s updated remotely", event.order_id, event.item_id)
                return
