"""CLI commands for the product-grouped batch view."""

from __future__ import annotations

import asyncio
from datetime import datetime

import click

from vendordash.application.batch_view import BatchView
from vendordash.application.dto import BatchGroupDTO
from vendordash.application.optimistic import MutationOutcome
from vendordash.domain.exceptions import DomainException, EntityNotFoundError, StoreError, StoreFetchError
from vendordash.infrastructure.bootstrap import Dashboard, dashboard
from vendordash.infrastructure.cli.order_commands import window_from

_start_option = click.option(
    "--start", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
    help="First visible delivery day (default: today).",
)
_days_option = click.option("--days", type=int, default=None, help="Number of visible days.")


async def _load_view(dash: Dashboard, start: datetime | None, days: int | None) -> BatchView:
    if not await dash.load_orders.handle(window_from(start, days)):
        raise StoreFetchError(f"Could not load orders: {dash.working_set.error}")
    view = await dash.batch.build()
    if view is None:
        raise StoreFetchError(f"Could not load items: {dash.working_set.error}")
    return view


def _display_group(dto: BatchGroupDTO) -> None:
    click.echo(f"{dto.name}  total {dto.total_quantity} {dto.unit}  ({len(dto.instances)} orders)")
    for i in dto.instances:
        flag = "*" if i.adjusted else " "
        click.echo(
            f"  {i.order_code:<14} {i.customer_name:<20} "
            f"{i.ordered_quantity:>8} {i.actual_quantity:>7}{flag} "
            f"{i.line_total:>10}  {i.decision}"
        )


@click.command("show")
@_start_option
@_days_option
def batch_show(start: datetime | None, days: int | None) -> None:
    """Show the window's items grouped by product."""
    dash = dashboard()

    try:
        view = asyncio.run(_load_view(dash, start, days))
    except (DomainException, StoreError) as exc:
        raise click.ClickException(str(exc))

    if not view.groups:
        click.echo("No items in this window.")
    for group in view.groups:
        _display_group(BatchGroupDTO.of(group))
        click.echo()


@click.command("confirm-all")
@click.option("--name", required=True, help="Exact product name of the group.")
@_start_option
@_days_option
def batch_confirm_all(name: str, start: datetime | None, days: int | None) -> None:
    """Confirm every pending instance of one product group."""
    dash = dashboard()

    async def run():
        view = await _load_view(dash, start, days)
        outcomes = await dash.batch.confirm_all(view, name)
        return view, outcomes

    try:
        view, outcomes = asyncio.run(run())
    except (DomainException, StoreError) as exc:
        raise click.ClickException(str(exc))

    try:
        _display_group(BatchGroupDTO.of(view.group(name)))
    except EntityNotFoundError:
        click.echo(f"'{name}' is no longer in this window.")
    failed = sum(1 for o in outcomes if o is MutationOutcome.ROLLED_BACK)
    if failed:
        raise click.ClickException(
            f"{failed} of {len(outcomes)} confirmations failed and were reverted. Please retry."
        )
    applied = sum(1 for o in outcomes if o is MutationOutcome.APPLIED)
    click.echo(f"Confirmed {applied} item(s) of '{name}'.")
