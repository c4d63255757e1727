"""CLI commands for orders: the board, the detail view and draft edits."""

from __future__ import annotations

import asyncio
from datetime import date, datetime

import click

from vendordash.application.dto import OrderBoardDTO, OrderDetailDTO
from vendordash.domain.exceptions import DomainException, StoreError
from vendordash.domain.model.value_objects import DateWindow
from vendordash.infrastructure.bootstrap import dashboard
from vendordash.infrastructure.config import get_settings


def window_from(start: datetime | None, days: int | None) -> DateWindow:
    """The visible window: *days* calendar days from *start* (default today)."""
    first = start.date() if start else date.today()
    return DateWindow.starting(first, days or get_settings().window_days)


def _parse_quantities(values: tuple[str, ...]) -> list[tuple[str, str]]:
    """Parse ('3:1.5', '4:0') into [(item_id, raw_quantity), ...]."""
    result: list[tuple[str, str]] = []
    for pair in values:
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ItemId:Quantity'."
            )
        item_id, qty = pair.rsplit(":", 1)
        result.append((item_id.strip(), qty.strip()))
    return result


@click.command("list")
@click.option("--start", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
              help="First visible delivery day (default: today).")
@click.option("--days", type=int, default=None, help="Number of visible days.")
def orders_list(start: datetime | None, days: int | None) -> None:
    """Show the orders of the visible window, by delivery day."""
    window = window_from(start, days)
    dash = dashboard()

    try:
        board = asyncio.run(dash.show_orders.handle(window))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_board(board)
    if board.error:
        raise click.ClickException(f"Could not load orders: {board.error}. Run again to retry.")


def _display_board(board: OrderBoardDTO) -> None:
    for column in board.columns:
        click.echo(f"{column.date}  ({len(column.orders)} orders)")
        if not column.orders:
            click.echo("  -")
        for o in column.orders:
            click.echo(
                f"  {o.order_code:<14} {o.customer_name:<20} {o.status:<11} "
                f"{o.item_count:>3} items {o.total:>10}"
            )
        click.echo()


def _display_order(dto: OrderDetailDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.order_code}  (status={dto.status})")
    click.echo(f"Customer: {dto.customer_name}")
    click.echo(f"Delivery: {dto.delivery_date}")
    click.echo()
    click.echo(
        f"  {'ID':<5} {'Product':<24} {'Ordered':>8} {'Actual':>8} "
        f"{'Price':>9} {'Total':>10}  Decision"
    )
    click.echo(f"  {'-'*80}")
    for item in dto.items:
        flag = "*" if item.adjusted else " "
        click.echo(
            f"  {item.id:<5} {item.name:<24} {item.ordered_quantity:>8} "
            f"{item.actual_quantity:>7}{flag} {item.unit_price:>9} "
            f"{item.line_total:>10}  {item.decision}"
        )
    click.echo(f"  {'-'*80}")
    click.echo(f"  {dto.confirmed_count} of {len(dto.items)} items confirmed")
    if dto.denied_count:
        click.echo(f"  {dto.denied_count} item(s) denied")
    click.echo(f"  {'Order Total':<27} {dto.total:>20}")


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID to display.")
def order_show(order_id: str) -> None:
    """Show an order with its items."""
    dash = dashboard()

    try:
        draft = asyncio.run(dash.open_draft.handle(order_id))
    except (DomainException, StoreError) as exc:
        raise click.ClickException(str(exc))

    _display_order(OrderDetailDTO.of(draft))


@click.command("edit")
@click.option("--id", "order_id", required=True, help="Order ID to edit.")
@click.option("--status", default=None, help="New status (pending, confirmed, processing, ready).")
@click.option("--revert", "revert_ids", multiple=True, help="Item ID to return to pending.")
@click.option("--set", "quantities", multiple=True, help="Actual quantity as 'ItemId:Qty'.")
@click.option("--confirm", "confirm_ids", multiple=True, help="Item ID to confirm.")
@click.option("--deny", "deny_ids", multiple=True, help="Item ID to deny.")
def order_edit(
    order_id: str,
    status: str | None,
    revert_ids: tuple[str, ...],
    quantities: tuple[str, ...],
    confirm_ids: tuple[str, ...],
    deny_ids: tuple[str, ...],
) -> None:
    """Edit an order as a draft and save it in one go.

    Edits apply in this order: reverts, quantities, confirmations,
    denials, so an item can be reopened, corrected and confirmed again
    in a single call.
    """
    quantity_specs = _parse_quantities(quantities)
    dash = dashboard()

    async def run():
        draft = await dash.open_draft.handle(order_id)
        rejected: list[str] = []
        if status is not None and not draft.set_status(status):
            rejected.append(f"status {status}")
        for item_id in revert_ids:
            draft.revert(item_id)
        for item_id, qty in quantity_specs:
            if not draft.adjust_quantity(item_id, qty):
                rejected.append(f"quantity {qty} for item {item_id}")
        for item_id in confirm_ids:
            if not draft.confirm(item_id):
                rejected.append(f"confirm item {item_id}")
        for item_id in deny_ids:
            if not draft.deny(item_id):
                rejected.append(f"deny item {item_id}")
        saved = await dash.save_draft.handle(draft)
        return draft, rejected, saved

    try:
        draft, rejected, saved = asyncio.run(run())
    except (DomainException, StoreError) as exc:
        raise click.ClickException(str(exc))

    for what in rejected:
        click.echo(f"Ignored: {what}", err=True)
    if not saved:
        raise click.ClickException(
            f"Saving order {draft.order_code} failed ({draft.error}). Please retry."
        )
    click.echo(f"Order {draft.order_code} saved (status={draft.status.value}, total={draft.total}).")
