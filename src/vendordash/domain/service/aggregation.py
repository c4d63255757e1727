"""Derived figures over items: order totals, counts and batch quantities.

Everything here is a pure function of its inputs and is recomputed on
every read.  Denied items never count toward a total; pending and
confirmed items count with their *actual* quantity.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from vendordash.domain.model.item import ItemDecision, OrderItem
from vendordash.domain.model.value_objects import Money, Quantity

if TYPE_CHECKING:
    from vendordash.domain.model.batch import BatchGroup


def order_total(items: Iterable[OrderItem]) -> Money:
    result = Money.zero()
    for item in items:
        if item.counts_toward_total:
            result = result + item.line_total
    return result


def item_count(items: Iterable[OrderItem]) -> int:
    return sum(1 for _ in items)


def confirmed_count(items: Iterable[OrderItem]) -> int:
    return sum(1 for item in items if item.decision is ItemDecision.CONFIRMED)


def denied_count(items: Iterable[OrderItem]) -> int:
    return sum(1 for item in items if item.decision is ItemDecision.DENIED)


def group_total_quantity(group: BatchGroup) -> Quantity:
    result = Quantity.zero()
    for instance in group.instances:
        if instance.decision is not ItemDecision.DENIED:
            result = result + instance.actual_quantity
    return result
