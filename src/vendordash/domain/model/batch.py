"""Batch view projection — items of many orders grouped by product.

A BatchGroup is derived, never persisted and never a source of truth.
Its instances are value copies of the underlying items; every mutation
goes back to the item identified by ``(order_id, item_id)`` and the copy
is then refreshed.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from vendordash.domain.model.item import QUANTITY_TOLERANCE, ItemDecision, OrderItem
from vendordash.domain.model.order import Order
from vendordash.domain.model.value_objects import Money, Quantity
from vendordash.domain.service import aggregation


@dataclass(frozen=True)
class BatchInstance:
    order_id: str
    item_id: str
    order_code: str
    customer_name: str
    ordered_quantity: Quantity
    actual_quantity: Quantity
    price: Money
    decision: ItemDecision

    @staticmethod
    def of(order: Order, item: OrderItem) -> BatchInstance:
        return BatchInstance(
            order_id=order.id,
            item_id=item.id,
            order_code=order.order_code,
            customer_name=order.customer_name,
            ordered_quantity=item.ordered_quantity,
            actual_quantity=item.actual_quantity,
            price=item.price,
            decision=item.decision,
        )

    @property
    def key(self) -> tuple[str, str]:
        return self.order_id, self.item_id

    @property
    def has_quantity_difference(self) -> bool:
        return self.ordered_quantity.differs_from(
            self.actual_quantity, QUANTITY_TOLERANCE
        )

    @property
    def line_total(self) -> Money:
        return self.price * self.actual_quantity


@dataclass
class BatchGroup:
    name: str
    unit: str
    image_url: str | None = None
    instances: list[BatchInstance] = field(default_factory=list)

    @property
    def total_quantity(self) -> Quantity:
        return aggregation.group_total_quantity(self)

    @property
    def pending_instances(self) -> list[BatchInstance]:
        return [i for i in self.instances if i.decision is ItemDecision.PENDING]

    def replace_instance(self, item: OrderItem) -> bool:
        """Refresh the copy of *item*, matched by identity.  False if absent."""
        for index, instance in enumerate(self.instances):
            if instance.key == (item.order_id, item.id):
                self.instances[index] = replace(
                    instance,
                    ordered_quantity=item.ordered_quantity,
                    actual_quantity=item.actual_quantity,
                    price=item.price,
                    decision=item.decision,
                )
                return True
        return False
