import sys
from decimal import Decimal
from pathlib import Path
from typing import List, Optional

import pytest
from rich.console import Console

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from shopify_sync.models import CatalogVariant, InventoryItem, InventoryLevel, Money  # noqa: E402

DEFAULT_ENV = {
    "SHOP": "test-store",
    "SHOPIFY_ACCESS_TOKEN": "shpat_test",
}


@pytest.fixture(autouse=True)
def _test_env(monkeypatch, tmp_path):
    for key, value in DEFAULT_ENV.items():
        monkeypatch.setenv(key, value)
    for key in ("SHOPIFY_SHOP", "SHOPIFY_LOCATION_ID", "SHOPIFY_API_VERSION"):
        monkeypatch.delenv(key, raising=False)
    # Keep a developer's .env out of the tests
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture
def console():
    return Console(record=True, width=200)


def make_variant(
    available: List[int],
    sku: str = "ABC123",
    unit_cost: Optional[str] = None
) -> CatalogVariant:
    levels = [
        InventoryLevel(
            id=f"gid://shopify/InventoryLevel/{i}",
            available=qty,
            location_id=f"gid://shopify/Location/{i}",
            location_name=f"Location {i}"
        )
        for i, qty in enumerate(available, start=1)
    ]
    return CatalogVariant(
        id="gid://shopify/ProductVariant/1",
        sku=sku,
        title="Default Title",
        product_title="Widget",
        inventory_item=InventoryItem(
            id="gid://shopify/InventoryItem/1",
            unit_cost=Money(amount=Decimal(unit_cost), currency_code="USD") if unit_cost else None,
            inventory_levels=levels
        )
    )


class FakeAdminClient:
    """Records calls and replays scripted responses or errors."""
    
    def __init__(self, variant=None, lookups=None, cost_results=None, adjust_results=None):
        self.variant = variant
        self.lookups = list(lookups or [])
        self.cost_results = list(cost_results or [])
        self.adjust_results = list(adjust_results or [])
        self.calls = []
    
    @staticmethod
    def _next(script, default):
        outcome = script.pop(0) if script else default
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome
    
    async def find_variant_by_sku(self, sku):
        self.calls.append(("lookup", sku))
        return self._next(self.lookups, self.variant)
    
    async def update_inventory_item_cost(self, inventory_item_id, cost):
        self.calls.append(("cost", inventory_item_id, cost))
        return self._next(self.cost_results, [])
    
    async def adjust_available_quantity(self, inventory_item_id, location_id, delta, reason="correction"):
        self.calls.append(("adjust", inventory_item_id, location_id, delta))
        return self._next(self.adjust_results, [])


class RecordingSleep:
    def __init__(self):
        self.waits = []
    
    async def __call__(self, seconds):
        self.waits.append(seconds)
