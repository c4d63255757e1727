"""Data Transfer Objects: flat, display-ready views of orders and batches.

Money and quantities are pre-formatted strings so the CLI never touches
domain types.
"""

from __future__ import annotations

from dataclasses import dataclass

from vendordash.application.order_draft import OrderDraft
from vendordash.domain.model.batch import BatchGroup, BatchInstance
from vendordash.domain.model.item import OrderItem
from vendordash.domain.model.order import Order


@dataclass(frozen=True)
class OrderSummaryDTO:
    """Output: one order card on the board."""

    id: str
    order_code: str
    customer_name: str
    delivery_date: str  # ISO date
    status: str
    item_count: int
    total: str  # formatted, e.g. "$35.00"

    @staticmethod
    def of(order: Order) -> OrderSummaryDTO:
        return OrderSummaryDTO(
            id=order.id,
            order_code=order.order_code,
            customer_name=order.customer_name,
            delivery_date=order.delivery_date.isoformat(),
            status=order.status.value,
            item_count=order.item_count,
            total=str(order.total),
        )


@dataclass(frozen=True)
class DayColumnDTO:
    date: str
    orders: list[OrderSummaryDTO]


@dataclass(frozen=True)
class OrderBoardDTO:
    """Output: the visible window, one column per delivery day."""

    columns: list[DayColumnDTO]
    error: str | None = None


@dataclass(frozen=True)
class OrderItemDTO:
    id: str
    name: str
    unit: str
    ordered_quantity: str
    actual_quantity: str
    adjusted: bool
    unit_price: str
    line_total: str
    decision: str

    @staticmethod
    def of(item: OrderItem) -> OrderItemDTO:
        return OrderItemDTO(
            id=item.id,
            name=item.name,
            unit=item.unit,
            ordered_quantity=str(item.ordered_quantity),
            actual_quantity=str(item.actual_quantity),
            adjusted=item.has_quantity_difference,
            unit_price=str(item.price),
            line_total=str(item.line_total),
            decision=item.decision.value,
        )


@dataclass(frozen=True)
class OrderDetailDTO:
    """Output: an order as shown in the detail surface."""

    id: str
    order_code: str
    customer_name: str
    delivery_date: str
    status: str
    items: list[OrderItemDTO]
    confirmed_count: int
    denied_count: int
    total: str

    @staticmethod
    def of(draft: OrderDraft) -> OrderDetailDTO:
        return OrderDetailDTO(
            id=draft.order_id,
            order_code=draft.order_code,
            customer_name=draft.customer_name,
            delivery_date=draft.delivery_date.isoformat(),
            status=draft.status.value,
            items=[OrderItemDTO.of(item) for item in draft.items],
            confirmed_count=draft.confirmed_count,
            denied_count=draft.denied_count,
            total=str(draft.total),
        )


@dataclass(frozen=True)
class BatchInstanceDTO:
    order_id: str
    item_id: str
    order_code: str
    customer_name: str
    ordered_quantity: str
    actual_quantity: str
    adjusted: bool
    line_total: str
    decision: str

    @staticmethod
    def of(instance: BatchInstance) -> BatchInstanceDTO:
        return BatchInstanceDTO(
            order_id=instance.order_id,
            item_id=instance.item_id,
            order_code=instance.order_code,
            customer_name=instance.customer_name,
            ordered_quantity=str(instance.ordered_quantity),
            actual_quantity=str(instance.actual_quantity),
            adjusted=instance.has_quantity_difference,
            line_total=str(instance.line_total),
            decision=instance.decision.value,
        )


@dataclass(frozen=True)
class BatchGroupDTO:
    name: str
    unit: str
    image_url: str | None
    total_quantity: str
    instances: list[BatchInstanceDTO]

    @staticmethod
    def of(group: BatchGroup) -> BatchGroupDTO:
        return BatchGroupDTO(
            name=group.name,
            unit=group.unit,
            image_url=group.image_url,
            total_quantity=str(group.total_quantity),
            instances=[BatchInstanceDTO.of(i) for i in group.instances],
        )
