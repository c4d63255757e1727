"""Application service: Load Orders use case (query).

Loads the orders of a date window into the working set.  A failed load
leaves the previous orders in place and sets the working set's error
flag; retrying is simply calling ``handle`` again.
"""

from __future__ import annotations

import logging

from vendordash.application.working_set import WorkingSet
from vendordash.domain.exceptions import StoreError
from vendordash.domain.model.value_objects import DateWindow
from vendordash.domain.store.order_store import OrderStore

logger = logging.getLogger(__name__)


class LoadOrdersHandler:

    def __init__(self, store: OrderStore, working_set: WorkingSet) -> None:
        self._store = store
        self._working_set = working_set

    async def handle(self, window: DateWindow) -> bool:
        """Return True if the window's orders were committed."""
        token = self._working_set.begin_load(window)
        try:
            orders = await self._store.list_orders(window.start, window.end)
        except StoreError as exc:
            logger.warning("loading orders %s..%s failed: %s", window.start, window.end, exc)
            self._working_set.fail_load(token, exc)
            return False

        committed = self._working_set.commit_orders(token, orders)
        if committed:
            logger.info(
                "loaded %d orders for %s..%s", len(orders), window.start, window.end
            )
        return committed
