"""Composition root: the one place that picks concrete implementations.

The store backend is chosen here once, from settings, and injected into
every handler together with a single shared working set.
"""

from __future__ import annotations

from dataclasses import dataclass

from vendordash.application.batch_view import BatchViewHandler
from vendordash.application.load_items import LoadItemsHandler
from vendordash.application.load_orders import LoadOrdersHandler
from vendordash.application.order_draft import OpenOrderDraftHandler
from vendordash.application.reconcile_item import ReconcileItemHandler
from vendordash.application.save_order_draft import SaveOrderDraftHandler
from vendordash.application.show_orders import ShowOrdersHandler
from vendordash.application.working_set import WorkingSet
from vendordash.domain.store.order_store import OrderStore
from vendordash.infrastructure.config import Settings, get_settings
from vendordash.infrastructure.http.http_order_store import HttpOrderStore
from vendordash.infrastructure.persistence.json_order_store import JsonOrderStore


def order_store(settings: Settings | None = None) -> OrderStore:
    settings = settings or get_settings()
    if settings.store_backend == "http":
        return HttpOrderStore(settings.api_base_url, timeout=settings.http_timeout_seconds)
    return JsonOrderStore(settings.data_dir / "orders.json")


@dataclass
class Dashboard:
    """One working set and the handlers that operate on it."""

    store: OrderStore
    working_set: WorkingSet
    load_orders: LoadOrdersHandler
    load_items: LoadItemsHandler
    show_orders: ShowOrdersHandler
    reconcile: ReconcileItemHandler
    batch: BatchViewHandler
    open_draft: OpenOrderDraftHandler
    save_draft: SaveOrderDraftHandler


def build_dashboard(store: OrderStore, settings: Settings | None = None) -> Dashboard:
    settings = settings or get_settings()
    working_set = WorkingSet()
    store.subscribe(working_set.apply_change)

    load_orders = LoadOrdersHandler(store, working_set)
    load_items = LoadItemsHandler(store, working_set)
    reconcile = ReconcileItemHandler(store, working_set, step=settings.quantity_step)
    return Dashboard(
        store=store,
        working_set=working_set,
        load_orders=load_orders,
        load_items=load_items,
        show_orders=ShowOrdersHandler(working_set, load_orders),
        reconcile=reconcile,
        batch=BatchViewHandler(working_set, load_items, reconcile),
        open_draft=OpenOrderDraftHandler(store, working_set, step=settings.quantity_step),
        save_draft=SaveOrderDraftHandler(store, working_set),
    )


def dashboard() -> Dashboard:
    settings = get_settings()
    return build_dashboard(order_store(settings), settings)
