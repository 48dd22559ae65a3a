import asyncio
from decimal import Decimal

from conftest import FakeAdminClient, make_variant
from shopify_sync.clients import APIError
from shopify_sync.models import SyncResult
from shopify_sync.runner import BatchRunner
from shopify_sync.updaters import InventoryUpdater


class FakeUpdater:
    def __init__(self):
        self.calls = []
    
    async def sync(self, sku, quantity, unit_cost):
        self.calls.append((sku, quantity, unit_cost))
        return SyncResult(sku=sku, status="updated")


def test_malformed_rows_never_reach_updater():
    rows = [
        {"Product Code": "A", "Inventory": "1", "Unit Cost": "1.00"},
        {"Product Code": "", "Inventory": "2", "Unit Cost": "1.00"},
        {"Product Code": "C", "Inventory": "abc", "Unit Cost": "1.00"},
        {"Product Code": "D", "Inventory": "4", "Unit Cost": ""},
        {"Product Code": "E", "Inventory": "", "Unit Cost": "3"},
    ]
    updater = FakeUpdater()
    
    results = asyncio.run(BatchRunner(updater).run(rows))
    
    assert updater.calls == [("A", 1, Decimal("1.00")), ("D", 4, None)]
    assert [r.sku for r in results] == ["A", "D"]


def test_rows_processed_in_file_order():
    rows = [{"Product Code": sku, "Inventory": "1"} for sku in ["Z", "A", "M"]]
    updater = FakeUpdater()
    
    asyncio.run(BatchRunner(updater).run(rows))
    
    assert [call[0] for call in updater.calls] == ["Z", "A", "M"]


def test_failure_of_one_sku_does_not_stop_batch(console):
    client = FakeAdminClient(
        variant=make_variant([100, 50, 7]),
        lookups=[APIError("boom")]
    )
    rows = [
        {"Product Code": "BAD", "Inventory": "1", "Unit Cost": "1"},
        {"Product Code": "ABC123", "Inventory": "10", "Unit Cost": "5.50"},
    ]
    
    results = asyncio.run(BatchRunner(InventoryUpdater(client, console)).run(rows))
    
    assert [r.status for r in results] == ["failed", "updated"]
    assert client.calls[-1] == ("adjust", "gid://shopify/InventoryItem/1", "gid://shopify/Location/3", 3)
