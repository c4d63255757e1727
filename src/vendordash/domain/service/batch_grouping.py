"""Domain service: Batch Grouping.

Regroups the items of every in-scope order by product name so a
kitchen or warehouse can prepare each product once for all orders.

Grouping is by *exact* name.  "Ground Beef" and "Ground beef " are two
different groups; no case folding or trimming is applied.
"""

from __future__ import annotations

from collections.abc import Iterable

from vendordash.domain.exceptions import ValidationError
from vendordash.domain.model.batch import BatchGroup, BatchInstance
from vendordash.domain.model.order import Order


def build_batch_groups(orders: Iterable[Order]) -> list[BatchGroup]:
    """Group all items of *orders* by name.

    Groups come out in first-encountered order and instances in
    discovery order (orders first, then items within each order).
    Every order must already have its items loaded.
    """
    groups: dict[str, BatchGroup] = {}

    for order in orders:
        if order.items is None:
            raise ValidationError(
                f"Items of order {order.order_code} must be loaded before grouping"
            )
        for item in order.items:
            group = groups.get(item.name)
            if group is None:
                group = BatchGroup(
                    name=item.name, unit=item.unit, image_url=item.image_url
                )
                groups[item.name] = group
            group.instances.append(BatchInstance.of(order, item))

    return list(groups.values())
