import asyncio
from unittest.mock import AsyncMock, call

from menu_sync.catalog.models import CatalogRecord, MenuItem, Restaurant
from menu_sync.errors import FailureKind, SyncError
from menu_sync.sync.engine import reconcile, sync_restaurant
from menu_sync.sync.report import RestaurantState, SyncAction

IMG = "http://img.test/placeholder.jpg"


def _restaurant(name: str, rid: str) -> Restaurant:
    return Restaurant(id=rid, name=name)


def _items(rid: str, *names: str) -> list[MenuItem]:
    return [MenuItem(id=f"{n.lower()}{rid}", name=n, price="MK 1,000", image=IMG) for n in names]


def _catalog() -> AsyncMock:
    catalog = AsyncMock()
    catalog.find_by_name.return_value = None
    catalog.create.side_effect = lambda r: CatalogRecord(id=f"srv-{r.id}", name=r.name)
    catalog.update.side_effect = lambda rid, r: CatalogRecord(id=rid, name=r.name)
    catalog.list_or_create_main_menu.side_effect = lambda rid: f"menu-{rid}"
    catalog.replace_items.return_value = None
    return catalog


def test_new_restaurant_is_created_then_menu_then_items():
    restaurant = _restaurant("Mama's Kitchen", "mamaskitchen0001")
    items = _items("0001", "Nsima")
    catalog = _catalog()

    outcome = asyncio.run(sync_restaurant(restaurant, items, catalog))

    assert catalog.mock_calls == [
        call.find_by_name("Mama's Kitchen"),
        call.create(restaurant),
        call.list_or_create_main_menu("srv-mamaskitchen0001"),
        call.replace_items("menu-srv-mamaskitchen0001", items),
    ]
    assert outcome.state == RestaurantState.done
    assert outcome.action == SyncAction.created
    assert outcome.remote_id == "srv-mamaskitchen0001"
    assert outcome.items_synced == 1


def test_existing_restaurant_is_updated_with_remote_id():
    restaurant = _restaurant("Nyama House", "nyamahouse0001")
    catalog = _catalog()
    catalog.find_by_name.return_value = CatalogRecord(id="17", name="NYAMA HOUSE")

    outcome = asyncio.run(sync_restaurant(restaurant, _items("0001", "Goat"), catalog))

    catalog.update.assert_awaited_once_with("17", restaurant)
    catalog.create.assert_not_awaited()
    catalog.list_or_create_main_menu.assert_awaited_once_with("17")
    assert outcome.action == SyncAction.updated
    assert outcome.remote_id == "17"
    assert outcome.menu_id == "menu-17"


def test_empty_item_list_skips_replace():
    catalog = _catalog()
    outcome = asyncio.run(sync_restaurant(_restaurant("Spice Garden", "sg0001"), [], catalog))

    catalog.list_or_create_main_menu.assert_awaited_once()
    catalog.replace_items.assert_not_awaited()
    assert outcome.state == RestaurantState.done
    assert outcome.items_synced == 0


def test_failure_records_state_it_happened_in():
    catalog = _catalog()
    catalog.list_or_create_main_menu.side_effect = SyncError("menu quota exceeded")

    outcome = asyncio.run(sync_restaurant(_restaurant("Lake View", "lv0001"), _items("0001", "Chambo"), catalog))

    assert outcome.state == RestaurantState.failed
    assert outcome.failed_at == RestaurantState.writing
    assert outcome.error == "menu quota exceeded"
    catalog.replace_items.assert_not_awaited()


def test_create_failure_fails_at_writing():
    catalog = _catalog()
    catalog.create.side_effect = SyncError("boom", FailureKind.transport)

    outcome = asyncio.run(sync_restaurant(_restaurant("Lake View", "lv0001"), [], catalog))

    assert outcome.failed_at == RestaurantState.writing
    catalog.list_or_create_main_menu.assert_not_awaited()


def test_unexpected_exception_is_isolated():
    catalog = _catalog()
    catalog.replace_items.side_effect = RuntimeError("socket closed")

    outcome = asyncio.run(sync_restaurant(_restaurant("Lake View", "lv0001"), _items("0001", "Chambo"), catalog))

    assert outcome.state == RestaurantState.failed
    assert outcome.failed_at == RestaurantState.menu_resolved
    assert "socket closed" in outcome.error


def test_reconcile_continues_after_a_failed_restaurant():
    restaurants = [
        _restaurant("Mama's Kitchen", "r1"),
        _restaurant("Nyama House", "r2"),
        _restaurant("Village Taste", "r3"),
    ]
    menu_items = {
        "r1": _items("r1", "Nsima"),
        "r2": _items("r2", "Goat"),
        "r3": _items("r3", "Beans"),
    }
    catalog = _catalog()

    async def replace_items(menu_id, items):
        if menu_id == "menu-srv-r2":
            raise SyncError("invalid item")

    catalog.replace_items.side_effect = replace_items

    report = asyncio.run(reconcile(restaurants, menu_items, catalog))

    assert [o.name for o in report.outcomes] == ["Mama's Kitchen", "Nyama House", "Village Taste"]
    assert report.failed == ["Nyama House"]
    assert report.created == ["Mama's Kitchen", "Village Taste"]
    assert report.synced_count == 2
    assert report.finished_at is not None
    assert catalog.replace_items.await_count == 3


def test_reconcile_processes_restaurants_in_order():
    restaurants = [_restaurant(name, f"r{i}") for i, name in enumerate(["A", "B", "C"])]
    catalog = _catalog()

    asyncio.run(reconcile(restaurants, {}, catalog))

    looked_up = [c.args[0] for c in catalog.find_by_name.await_args_list]
    assert looked_up == ["A", "B", "C"]
    catalog.replace_items.assert_not_awaited()
