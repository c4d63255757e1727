"""Application service: Save Order Draft use case.

Commits a detail-view draft in four steps:

1. write the status, if it differs from the last committed one;
2. write every item's (actual quantity, decision) pair;
3. re-fetch the order and its items as the new baseline;
4. only then close the draft.

Any store failure stops the save, is logged, and leaves the draft open
so the user can retry.
"""

from __future__ import annotations

import logging

from vendordash.application.order_draft import OrderDraft
from vendordash.application.working_set import WorkingSet
from vendordash.domain.exceptions import StoreError, StoreFetchError, ValidationError
from vendordash.domain.model.item import ItemDecision, OrderItem
from vendordash.domain.store.order_store import OrderStore

logger = logging.getLogger(__name__)


class SaveOrderDraftHandler:

    def __init__(self, store: OrderStore, working_set: WorkingSet) -> None:
        self._store = store
        self._working_set = working_set

    async def handle(self, draft: OrderDraft) -> bool:
        if draft.closed:
            raise ValidationError(f"Draft of order {draft.order_code} is already saved")

        try:
            if draft.status_changed:
                await self._store.write_order_status(draft.order_id, draft.status)
                draft.committed_status = draft.status

            for item in draft.items:
                await self._write_item(draft, item)

            order = await self._store.get_order(draft.order_id)
            if order is None:
                raise StoreFetchError(f"Order {draft.order_code} vanished during save")
            order.attach_items(await self._store.list_items(draft.order_id))
        except StoreError as exc:
            draft.error = str(exc) or type(exc).__name__
            logger.warning("saving order %s failed: %s", draft.order_code, exc)
            return False

        if order.id in self._working_set:
            self._working_set.replace_order(order)
        draft.error = None
        draft.closed = True
        logger.info("saved order %s (status=%s)", order.order_code, order.status.value)
        return True

    async def _write_item(self, draft: OrderDraft, item: OrderItem) -> None:
        baseline = draft.baseline[item.id]
        reopened = (
            baseline.decision is not ItemDecision.PENDING
            and item.actual_quantity != baseline.actual_quantity
        )
        if reopened and item.decision is not ItemDecision.PENDING:
            # Reverted, re-quantified and decided again within the draft: the
            # stored item must be reopened before the new quantity is accepted.
            await self._store.write_item(
                draft.order_id, item.id,
                actual_quantity=item.actual_quantity,
                decision=ItemDecision.PENDING,
            )
        await self._store.write_item(
            draft.order_id, item.id,
            actual_quantity=item.actual_quantity,
            decision=item.decision,
        )
