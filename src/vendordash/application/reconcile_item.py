"""Application service: Reconcile Item use case (immediate-write surface).

Each action changes one item in the working set and is written to the
store straight away through ``apply_optimistically``.  A rejected action
changes nothing; a failed write puts the item back exactly as it was.
"""

from __future__ import annotations

from decimal import Decimal

from vendordash.application.optimistic import MutationOutcome, apply_optimistically
from vendordash.application.working_set import WorkingSet
from vendordash.domain.model.item import DEFAULT_STEP, ItemDecision, OrderItem
from vendordash.domain.model.value_objects import Quantity
from vendordash.domain.store.order_store import OrderStore


class ReconcileItemHandler:

    def __init__(
        self,
        store: OrderStore,
        working_set: WorkingSet,
        step: Decimal = DEFAULT_STEP,
    ) -> None:
        self._store = store
        self._working_set = working_set
        self._step = step

    async def confirm(self, order_id: str, item_id: str) -> MutationOutcome:
        """Confirm availability, locking in an adjusted quantity.

        When the actual quantity differs from the ordered one it is sent
        in the same write, ahead of the decision.
        """
        item = self._working_set.get_item(order_id, item_id)

        async def commit():
            quantity = item.actual_quantity if item.has_quantity_difference else None
            return await self._store.write_item(
                order_id, item_id,
                actual_quantity=quantity,
                decision=ItemDecision.CONFIRMED,
            )

        return await self._run(item, item.confirm, commit, "confirm")

    async def deny(self, order_id: str, item_id: str) -> MutationOutcome:
        item = self._working_set.get_item(order_id, item_id)

        async def commit():
            return await self._store.write_item(
                order_id, item_id, decision=ItemDecision.DENIED
            )

        return await self._run(item, item.deny, commit, "deny")

    async def revert(self, order_id: str, item_id: str) -> MutationOutcome:
        """Return the item to PENDING, re-saving its current quantity."""
        item = self._working_set.get_item(order_id, item_id)
        if item.is_pending:
            return MutationOutcome.APPLIED

        async def commit():
            return await self._store.write_item(
                order_id, item_id,
                actual_quantity=item.actual_quantity,
                decision=ItemDecision.PENDING,
            )

        return await self._run(item, item.revert, commit, "revert")

    async def adjust_quantity(
        self, order_id: str, item_id: str, raw_quantity: str | Decimal | float
    ) -> MutationOutcome:
        item = self._working_set.get_item(order_id, item_id)

        def apply():
            item.adjust_quantity(Quantity.of(raw_quantity))

        return await self._run(item, apply, self._quantity_commit(item), "adjust")

    async def increment(self, order_id: str, item_id: str) -> MutationOutcome:
        item = self._working_set.get_item(order_id, item_id)
        return await self._run(
            item, lambda: item.increment(self._step), self._quantity_commit(item), "increment"
        )

    async def decrement(self, order_id: str, item_id: str) -> MutationOutcome:
        item = self._working_set.get_item(order_id, item_id)
        return await self._run(
            item, lambda: item.decrement(self._step), self._quantity_commit(item), "decrement"
        )

    # --- Internal helpers -----------------------------------------------------

    def _quantity_commit(self, item: OrderItem):
        async def commit():
            return await self._store.write_item(
                item.order_id, item.id, actual_quantity=item.actual_quantity
            )

        return commit

    @staticmethod
    async def _run(item: OrderItem, apply, commit, action: str) -> MutationOutcome:
        prior = item.snapshot()
        return await apply_optimistically(
            apply,
            lambda: item.restore(prior),
            commit,
            description=f"{action} of item {item.order_id}/{item.id} ({item.name})",
        )
