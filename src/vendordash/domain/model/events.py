"""Change notifications pushed by the store for rows already in view."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from vendordash.domain.model.item import ItemDecision
from vendordash.domain.model.order import Order
from vendordash.domain.model.value_objects import Quantity


class ChangeKind(Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class OrderChange:
    """An order row was inserted, updated or deleted.

    Deletes only carry the id; inserts and updates carry the new row.
    """

    kind: ChangeKind
    order_id: str
    order: Order | None = None


@dataclass(frozen=True)
class ItemChange:
    order_id: str
    item_id: str
    actual_quantity: Quantity
    decision: ItemDecision
