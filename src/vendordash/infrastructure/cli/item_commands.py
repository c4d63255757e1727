"""CLI commands for single items: each action is written immediately."""

from __future__ import annotations

import asyncio

import click

from vendordash.application.dto import OrderItemDTO
from vendordash.application.optimistic import MutationOutcome
from vendordash.domain.exceptions import DomainException, EntityNotFoundError, StoreError, StoreFetchError
from vendordash.infrastructure.bootstrap import Dashboard, dashboard


async def _focus(dash: Dashboard, order_id: str) -> None:
    """Load one order and its items into the working set."""
    order = await dash.store.get_order(order_id)
    if order is None:
        raise EntityNotFoundError(f"Order '{order_id}' not found")
    dash.working_set.replace_order(order)
    if not await dash.load_items.handle([order_id]):
        raise StoreFetchError(f"Could not load items of order '{order_id}': {dash.working_set.error}")


def _run_action(order_id: str, item_id: str, action: str, *args) -> None:
    dash = dashboard()

    async def run():
        await _focus(dash, order_id)
        outcome = await getattr(dash.reconcile, action)(order_id, item_id, *args)
        return outcome, dash.working_set.get_item(order_id, item_id)

    try:
        outcome, item = asyncio.run(run())
    except (DomainException, StoreError) as exc:
        raise click.ClickException(str(exc))

    if outcome is MutationOutcome.REJECTED:
        raise click.ClickException(
            f"Cannot {action} item {item_id} while it is {item.decision.value}."
            if not item.is_pending
            else f"Cannot {action} item {item_id}: invalid value."
        )
    if outcome is MutationOutcome.ROLLED_BACK:
        raise click.ClickException(
            f"Saving the {action} of item {item_id} failed; the change was reverted. Please retry."
        )

    dto = OrderItemDTO.of(item)
    click.echo(
        f"{dto.name}: {dto.actual_quantity} {dto.unit} "
        f"(ordered {dto.ordered_quantity}) {dto.decision}, {dto.line_total}"
    )


@click.command("confirm")
@click.option("--order", "order_id", required=True, help="Order ID.")
@click.option("--item", "item_id", required=True, help="Item ID.")
def item_confirm(order_id: str, item_id: str) -> None:
    """Confirm that an item is available."""
    _run_action(order_id, item_id, "confirm")


@click.command("deny")
@click.option("--order", "order_id", required=True, help="Order ID.")
@click.option("--item", "item_id", required=True, help="Item ID.")
def item_deny(order_id: str, item_id: str) -> None:
    """Mark an item as unavailable."""
    _run_action(order_id, item_id, "deny")


@click.command("revert")
@click.option("--order", "order_id", required=True, help="Order ID.")
@click.option("--item", "item_id", required=True, help="Item ID.")
def item_revert(order_id: str, item_id: str) -> None:
    """Return an item to pending."""
    _run_action(order_id, item_id, "revert")


@click.command("adjust")
@click.option("--order", "order_id", required=True, help="Order ID.")
@click.option("--item", "item_id", required=True, help="Item ID.")
@click.option("--quantity", required=True, help="Actual quantity available.")
def item_adjust(order_id: str, item_id: str, quantity: str) -> None:
    """Set the actual quantity of a pending item."""
    _run_action(order_id, item_id, "adjust_quantity", quantity)


@click.command("step")
@click.option("--order", "order_id", required=True, help="Order ID.")
@click.option("--item", "item_id", required=True, help="Item ID.")
@click.option("--direction", type=click.Choice(["up", "down"]), required=True)
def item_step(order_id: str, item_id: str, direction: str) -> None:
    """Step the actual quantity of a pending item up or down."""
    _run_action(order_id, item_id, "increment" if direction == "up" else "decrement")
