"""Order detail editing surface: a buffered, local-only draft.

Unlike the batch surface, nothing here touches the store.  Status and
item edits accumulate on private copies of the items until the draft is
saved by ``SaveOrderDraftHandler``.  Closing without saving simply drops
the draft.
"""

from __future__ import annotations

import logging
from copy import copy
from decimal import Decimal

from vendordash.application.working_set import WorkingSet
from vendordash.domain.exceptions import EntityNotFoundError, ValidationError
from vendordash.domain.model.item import DEFAULT_STEP, ItemState, OrderItem
from vendordash.domain.model.order import Order, OrderStatus
from vendordash.domain.model.value_objects import Money, Quantity
from vendordash.domain.service import aggregation
from vendordash.domain.store.order_store import OrderStore

logger = logging.getLogger(__name__)


class OrderDraft:
    """Uncommitted edits to one order.

    Every action returns True when applied and False when rejected by a
    business rule (e.g. editing the quantity of a confirmed item); a
    rejection leaves the draft unchanged.
    """

    def __init__(self, order: Order, items: list[OrderItem], step: Decimal = DEFAULT_STEP) -> None:
        self.order_id = order.id
        self.order_code = order.order_code
        self.customer_name = order.customer_name
        self.delivery_date = order.delivery_date
        self.committed_status = order.status
        self.status = order.status
        self.items = [copy(item) for item in items]
        self.baseline: dict[str, ItemState] = {item.id: item.snapshot() for item in items}
        self.closed = False
        self.error: str | None = None
        self._step = step

    # --- Status ---------------------------------------------------------------

    def set_status(self, raw: str | OrderStatus) -> bool:
        try:
            self.status = raw if isinstance(raw, OrderStatus) else OrderStatus.parse(raw)
        except ValidationError as exc:
            logger.info("rejected status change on %s: %s", self.order_code, exc)
            return False
        return True

    @property
    def status_changed(self) -> bool:
        return self.status != self.committed_status

    # --- Item actions ---------------------------------------------------------

    def confirm(self, item_id: str) -> bool:
        return self._act(item_id, "confirm", lambda item: item.confirm())

    def deny(self, item_id: str) -> bool:
        return self._act(item_id, "deny", lambda item: item.deny())

    def revert(self, item_id: str) -> bool:
        return self._act(item_id, "revert", lambda item: item.revert())

    def adjust_quantity(self, item_id: str, raw_quantity) -> bool:
        return self._act(
            item_id, "adjust", lambda item: item.adjust_quantity(Quantity.of(raw_quantity))
        )

    def increment(self, item_id: str) -> bool:
        return self._act(item_id, "increment", lambda item: item.increment(self._step))

    def decrement(self, item_id: str) -> bool:
        return self._act(item_id, "decrement", lambda item: item.decrement(self._step))

    def item(self, item_id: str) -> OrderItem:
        for item in self.items:
            if item.id == item_id:
                return item
        raise EntityNotFoundError(f"Item '{item_id}' not found in order {self.order_code}")

    # --- Computed properties --------------------------------------------------

    @property
    def total(self) -> Money:
        return aggregation.order_total(self.items)

    @property
    def confirmed_count(self) -> int:
        return aggregation.confirmed_count(self.items)

    @property
    def denied_count(self) -> int:
        return aggregation.denied_count(self.items)

    # --- Internal helpers -----------------------------------------------------

    def _act(self, item_id: str, action: str, change) -> bool:
        if self.closed:
            raise ValidationError(f"Draft of order {self.order_code} is already saved")
        item = self.item(item_id)
        try:
            change(item)
        except ValidationError as exc:
            logger.info("rejected %s of %s in draft %s: %s", action, item.name, self.order_code, exc)
            return False
        return True


class OpenOrderDraftHandler:

    def __init__(
        self,
        store: OrderStore,
        working_set: WorkingSet,
        step: Decimal = DEFAULT_STEP,
    ) -> None:
        self._store = store
        self._working_set = working_set
        self._step = step

    async def handle(self, order_id: str) -> OrderDraft:
        """Open a draft, fetching the order and its items if not already loaded."""
        if order_id in self._working_set:
            order = self._working_set.get_order(order_id)
        else:
            order = await self._store.get_order(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order '{order_id}' not found")

        if order.items is None:
            order.attach_items(await self._store.list_items(order_id))

        return OrderDraft(order, order.items, step=self._step)
