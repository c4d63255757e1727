"""OrderItem entity — one product line and its reconciliation state machine.

Each item starts PENDING.  Staff then confirm or deny its availability;
either decision can be reverted back to PENDING.  The fulfillable
``actual_quantity`` may only be edited while the item is PENDING, which
is what makes a decision "lock in" the quantity it was taken with.

    PENDING --confirm--> CONFIRMED
    PENDING --deny-----> DENIED
    CONFIRMED|DENIED --revert--> PENDING
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from vendordash.domain.exceptions import InvalidTransitionError, ItemLockedError
from vendordash.domain.model.value_objects import Money, Quantity

DEFAULT_STEP = Decimal("0.1")
QUANTITY_TOLERANCE = Decimal("0.01")


class ItemDecision(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    DENIED = "DENIED"

    @property
    def confirmed(self) -> bool | None:
        """The tri-state wire value: None, True or False."""
        return _TO_CONFIRMED[self]

    @staticmethod
    def from_confirmed(value: bool | None) -> ItemDecision:
        if value is None:
            return ItemDecision.PENDING
        return ItemDecision.CONFIRMED if value else ItemDecision.DENIED


_TO_CONFIRMED = {
    ItemDecision.PENDING: None,
    ItemDecision.CONFIRMED: True,
    ItemDecision.DENIED: False,
}


@dataclass(frozen=True)
class ItemState:
    """The mutable part of an item, captured for exact rollback."""

    actual_quantity: Quantity
    decision: ItemDecision


@dataclass
class OrderItem:
    """A line of an order.

    ``ordered_quantity`` is the customer's original request and is never
    modified; ``actual_quantity`` is what the vendor will really deliver.
    """

    id: str
    order_id: str
    name: str
    unit: str
    price: Money
    ordered_quantity: Quantity
    actual_quantity: Quantity
    decision: ItemDecision = ItemDecision.PENDING
    sku: str | None = None
    image_url: str | None = None

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def create(
        id: str,
        order_id: str,
        name: str,
        ordered_quantity: Quantity,
        price: Money,
        unit: str = "kg",
        **extra,
    ) -> OrderItem:
        """New items start PENDING with the ordered quantity as actual."""
        return OrderItem(
            id=id,
            order_id=order_id,
            name=name,
            unit=unit,
            price=price,
            ordered_quantity=ordered_quantity,
            actual_quantity=ordered_quantity,
            **extra,
        )

    # --- State transitions ----------------------------------------------------

    def confirm(self) -> None:
        """Transition PENDING -> CONFIRMED."""
        self._require_pending("confirm")
        self.decision = ItemDecision.CONFIRMED

    def deny(self) -> None:
        """Transition PENDING -> DENIED."""
        self._require_pending("deny")
        self.decision = ItemDecision.DENIED

    def revert(self) -> None:
        """Transition CONFIRMED|DENIED -> PENDING.  No-op when already pending."""
        self.decision = ItemDecision.PENDING

    def adjust_quantity(self, quantity: Quantity) -> None:
        if not self.is_pending:
            raise ItemLockedError(
                f"Cannot change quantity of {self.name}: item is "
                f"{self.decision.value}, revert it first"
            )
        self.actual_quantity = quantity

    def increment(self, step: Decimal = DEFAULT_STEP) -> None:
        self.adjust_quantity(self.actual_quantity.stepped(step))

    def decrement(self, step: Decimal = DEFAULT_STEP) -> None:
        self.adjust_quantity(self.actual_quantity.stepped(-step))

    # --- Store-side write application -----------------------------------------

    def record_write(
        self,
        actual_quantity: Quantity | None = None,
        decision: ItemDecision | None = None,
    ) -> None:
        """Apply a persisted write: quantity first, then decision.

        A quantity change on a decided item is refused unless the same
        write returns the item to PENDING, so a late writer can never
        silently overwrite the quantity a decision was taken with.
        """
        if actual_quantity is not None and actual_quantity != self.actual_quantity:
            if not self.is_pending and decision is not ItemDecision.PENDING:
                raise ItemLockedError(
                    f"Cannot change quantity of {self.name}: item is "
                    f"{self.decision.value}"
                )
            self.actual_quantity = actual_quantity
        if decision is not None:
            self.decision = decision

    # --- Rollback support -----------------------------------------------------

    def snapshot(self) -> ItemState:
        return ItemState(self.actual_quantity, self.decision)

    def restore(self, state: ItemState) -> None:
        self.actual_quantity = state.actual_quantity
        self.decision = state.decision

    # --- Computed properties --------------------------------------------------

    @property
    def is_pending(self) -> bool:
        return self.decision is ItemDecision.PENDING

    @property
    def counts_toward_total(self) -> bool:
        return self.decision is not ItemDecision.DENIED

    @property
    def has_quantity_difference(self) -> bool:
        """True when the vendor adjusted the quantity (display flag only)."""
        return self.ordered_quantity.differs_from(
            self.actual_quantity, QUANTITY_TOLERANCE
        )

    @property
    def line_total(self) -> Money:
        return self.price * self.actual_quantity

    # --- Internal helpers -----------------------------------------------------

    def _require_pending(self, action: str) -> None:
        if not self.is_pending:
            raise InvalidTransitionError(
                f"Cannot {action} {self.name}: current decision is "
                f"{self.decision.value}, expected PENDING"
            )
