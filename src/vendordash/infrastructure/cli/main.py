import click

from vendordash.infrastructure.cli.batch_commands import batch_confirm_all, batch_show
from vendordash.infrastructure.cli.item_commands import (
    item_adjust,
    item_confirm,
    item_deny,
    item_revert,
    item_step,
)
from vendordash.infrastructure.cli.order_commands import order_edit, order_show, orders_list
from vendordash.infrastructure.config import get_settings
from vendordash.infrastructure.logging import configure_logging


@click.group()
def cli() -> None:
    """Vendor Dashboard: review and reconcile incoming orders"""
    configure_logging(get_settings().log_level)


@cli.group()
def orders() -> None:
    """Browse orders by delivery day."""


@cli.group()
def order() -> None:
    """Inspect and edit a single order."""


@cli.group()
def item() -> None:
    """Reconcile a single item."""


@cli.group()
def batch() -> None:
    """Work on items grouped by product."""


# Register subcommands
orders.add_command(orders_list)
order.add_command(order_show)
order.add_command(order_edit)
item.add_command(item_confirm)
item.add_command(item_deny)
item.add_command(item_revert)
item.add_command(item_adjust)
item.add_command(item_step)
batch.add_command(batch_show)
batch.add_command(batch_confirm_all)
