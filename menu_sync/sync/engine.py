from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Protocol

from ..catalog.models import CatalogRecord, MenuItem, Restaurant
from ..errors import SyncError
from .report import RestaurantOutcome, RestaurantState, SyncAction, SyncReport, utcnow

logger = logging.getLogger(__name__)


class Catalog(Protocol):
    async def find_by_name(self, name: str) -> CatalogRecord | None: ...

    async def create(self, restaurant: Restaurant) -> CatalogRecord: ...

    async def update(self, restaurant_id: str, restaurant: Restaurant) -> CatalogRecord: ...

    async def list_or_create_main_menu(self, restaurant_id: str) -> str: ...

    async def replace_items(self, menu_id: str, items: list[MenuItem]) -> None: ...


async def sync_restaurant(
    restaurant: Restaurant,
    items: Sequence[MenuItem],
    catalog: Catalog,
) -> RestaurantOutcome:
    """
    Upsert one restaurant, resolve its main menu and replace its items.

    Steps run strictly in order. A failure at any step marks this restaurant
    as failed and is returned in the outcome instead of being raised.
    """
    outcome = RestaurantOutcome(name=restaurant.name, local_id=restaurant.id)

    try:
        outcome.state = RestaurantState.resolving
        existing = await catalog.find_by_name(restaurant.name)

        outcome.state = RestaurantState.writing
        if existing is not None:
            await catalog.update(existing.id, restaurant)
            outcome.action = SyncAction.updated
            outcome.remote_id = existing.id
        else:
            created = await catalog.create(restaurant)
            outcome.action = SyncAction.created
            outcome.remote_id = created.id
        logger.info("%s restaurant %s (%s)", outcome.action.value.capitalize(), restaurant.name, outcome.remote_id)

        outcome.menu_id = await catalog.list_or_create_main_menu(outcome.remote_id)
        outcome.state = RestaurantState.menu_resolved

        if items:
            await catalog.replace_items(outcome.menu_id, list(items))
            outcome.items_synced = len(items)
            logger.info("Synced %d menu items for %s", len(items), restaurant.name)

        outcome.state = RestaurantState.done
    except SyncError as exc:
        _fail(outcome, str(exc))
        logger.warning("Error syncing restaurant %s at %s: %s", restaurant.name, outcome.failed_at.value, exc)
    except Exception as exc:
        _fail(outcome, f"Unexpected error: {exc}")
        logger.warning("Unexpected error syncing restaurant %s", restaurant.name, exc_info=True)

    return outcome


def _fail(outcome: RestaurantOutcome, message: str) -> None:
    outcome.failed_at = outcome.state
    outcome.state = RestaurantState.failed
    outcome.error = message


async def reconcile(
    restaurants: Sequence[Restaurant],
    menu_items: Mapping[str, Sequence[MenuItem]],
    catalog: Catalog,
) -> SyncReport:
    """
    Bring the catalog in line with a parsed snapshot.

    Restaurants are processed one at a time in input order; menu lookup-or-
    create is not safe to run concurrently for the same restaurant.
    """
    report = SyncReport()
    for restaurant in restaurants:
        outcome = await sync_restaurant(restaurant, menu_items.get(restaurant.id, []), catalog)
        report.outcomes.append(outcome)
    report.finished_at = utcnow()

    logger.info(
        "Reconciled %d restaurants: %d synced, %d failed",
        len(report.outcomes),
        report.synced_count,
        len(report.failed),
    )
    return report
