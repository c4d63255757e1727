"""Application service: Load Items use case (query).

Fetches the items of several orders concurrently.  Fetches for
different orders have no ordering dependency.  The results are committed
all together, and only if every fetch succeeded and the window has not
moved in the meantime; a partial result is never written into the
working set.
"""

from __future__ import annotations

import asyncio
import logging

from vendordash.application.working_set import WorkingSet
from vendordash.domain.exceptions import StoreError
from vendordash.domain.store.order_store import OrderStore

logger = logging.getLogger(__name__)


class LoadItemsHandler:

    def __init__(self, store: OrderStore, working_set: WorkingSet) -> None:
        self._store = store
        self._working_set = working_set

    async def handle(self, order_ids: list[str] | None = None) -> bool:
        """Fetch items for *order_ids* (default: every order still missing them)."""
        if order_ids is None:
            order_ids = [o.id for o in self._working_set.orders() if not o.items_loaded]
        if not order_ids:
            return True

        token = self._working_set.generation
        results = await asyncio.gather(
            *(self._store.list_items(order_id) for order_id in order_ids),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, BaseException)]
        for failure in failures:
            if not isinstance(failure, StoreError):
                raise failure
        if failures:
            logger.warning(
                "loading items failed for %d of %d orders: %s",
                len(failures), len(order_ids), failures[0],
            )
            self._working_set.fail_load(token, failures[0])
            return False

        return self._working_set.commit_items(token, dict(zip(order_ids, results)))
