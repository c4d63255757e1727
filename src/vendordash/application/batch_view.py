"""Application service: Batch View use case.

Builds the product-grouped projection of the working set and routes
every action on it back to the underlying item.  The batch surface
writes immediately (see ``ReconcileItemHandler``).

Groups are derived once per working-set membership.  When an order
enters or leaves the set, or the window moves, the view reports itself
stale and must be rebuilt from scratch; within one membership, item
changes are patched into the view in place.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from vendordash.application.load_items import LoadItemsHandler
from vendordash.application.optimistic import MutationOutcome
from vendordash.application.reconcile_item import ReconcileItemHandler
from vendordash.application.working_set import WorkingSet
from vendordash.domain.exceptions import EntityNotFoundError
from vendordash.domain.model.batch import BatchGroup
from vendordash.domain.service.batch_grouping import build_batch_groups

logger = logging.getLogger(__name__)


@dataclass
class BatchView:
    groups: list[BatchGroup]
    membership_version: int

    def group(self, name: str) -> BatchGroup:
        for group in self.groups:
            if group.name == name:
                return group
        raise EntityNotFoundError(f"No batch group named '{name}'")

    def is_stale(self, working_set: WorkingSet) -> bool:
        return working_set.membership_version != self.membership_version


class BatchViewHandler:

    def __init__(
        self,
        working_set: WorkingSet,
        load_items: LoadItemsHandler,
        reconcile: ReconcileItemHandler,
    ) -> None:
        self._working_set = working_set
        self._load_items = load_items
        self._reconcile = reconcile

    async def build(self) -> BatchView | None:
        """Fetch any missing items and group them.  None if a fetch failed."""
        if not await self._load_items.handle():
            return None
        groups = build_batch_groups(self._working_set.orders())
        logger.debug("built %d batch groups", len(groups))
        return BatchView(groups, self._working_set.membership_version)

    async def confirm_all(self, view: BatchView, name: str) -> list[MutationOutcome]:
        """Confirm every pending instance of a group, each one independently.

        A failed write rolls back only its own instance; the others keep
        their confirmation.  An instance whose order has left the working
        set is reported as REJECTED.
        """
        group = view.group(name)
        pending = group.pending_instances
        results = await asyncio.gather(
            *(self._reconcile.confirm(i.order_id, i.item_id) for i in pending),
            return_exceptions=True,
        )
        for instance in pending:
            self._patch(view, instance.order_id, instance.item_id)

        outcomes: list[MutationOutcome] = []
        for instance, result in zip(pending, results):
            if isinstance(result, EntityNotFoundError):
                logger.info(
                    "confirm all '%s': %s/%s is no longer in view",
                    name, instance.order_id, instance.item_id,
                )
                outcomes.append(MutationOutcome.REJECTED)
            elif isinstance(result, BaseException):
                raise result
            else:
                outcomes.append(result)

        failed = sum(1 for o in outcomes if o is MutationOutcome.ROLLED_BACK)
        if failed:
            logger.warning(
                "confirm all '%s': %d of %d confirmations rolled back",
                name, failed, len(pending),
            )
        return outcomes

    # --- Instance actions -----------------------------------------------------

    async def confirm(self, view: BatchView, order_id: str, item_id: str) -> MutationOutcome:
        outcome = await self._reconcile.confirm(order_id, item_id)
        self._patch(view, order_id, item_id)
        return outcome

    async def deny(self, view: BatchView, order_id: str, item_id: str) -> MutationOutcome:
        outcome = await self._reconcile.deny(order_id, item_id)
        self._patch(view, order_id, item_id)
        return outcome

    async def revert(self, view: BatchView, order_id: str, item_id: str) -> MutationOutcome:
        outcome = await self._reconcile.revert(order_id, item_id)
        self._patch(view, order_id, item_id)
        return outcome

    async def adjust_quantity(
        self, view: BatchView, order_id: str, item_id: str, raw_quantity
    ) -> MutationOutcome:
        outcome = await self._reconcile.adjust_quantity(order_id, item_id, raw_quantity)
        self._patch(view, order_id, item_id)
        return outcome

    async def increment(self, view: BatchView, order_id: str, item_id: str) -> MutationOutcome:
        outcome = await self._reconcile.increment(order_id, item_id)
        self._patch(view, order_id, item_id)
        return outcome

    async def decrement(self, view: BatchView, order_id: str, item_id: str) -> MutationOutcome:
        outcome = await self._reconcile.decrement(order_id, item_id)
        self._patch(view, order_id, item_id)
        return outcome

    # --- Internal helpers -----------------------------------------------------

    def _patch(self, view: BatchView, order_id: str, item_id: str) -> None:
        try:
            item = self._working_set.get_item(order_id, item_id)
            patched = view.group(item.name).replace_instance(item)
        except EntityNotFoundError:
            patched = False
        if not patched:
            logger.info(
                "batch view out of sync at %s/%s, re-deriving groups", order_id, item_id
            )
            self._rederive(view)

    def _rederive(self, view: BatchView) -> None:
        """Regroup the loaded orders.

        Orders whose items are not fetched yet are left out, and the view
        keeps its old membership version so it still reports itself stale.
        """
        orders = self._working_set.orders()
        loaded = [o for o in orders if o.items_loaded]
        view.groups = build_batch_groups(loaded)
        if len(loaded) == len(orders):
            view.membership_version = self._working_set.membership_version
