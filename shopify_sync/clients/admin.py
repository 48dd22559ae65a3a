"""Shopify Admin GraphQL API client."""

from decimal import Decimal
from typing import Dict, Any, Optional, List

from .base import BaseClient
from ..config import ShopifySettings
from ..models import CatalogVariant, InventoryItem, InventoryLevel, Money


VARIANT_BY_SKU_QUERY = """
query variantBySku($query: String!) {
  productVariants(first: 10, query: $query) {
    edges {
      node {
        id
        title
        sku
        product {
          id
          title
        }
        inventoryItem {
          id
          unitCost {
            amount
            currencyCode
          }
          inventoryLevels(first: 100) {
            edges {
              node {
                id
                quantities(names: ["available"]) {
                  name
                  quantity
                }
                location {
                  id
                  name
                }
              }
            }
          }
        }
      }
    }
  }
}
"""

INVENTORY_ITEM_UPDATE_MUTATION = """
mutation inventoryItemUpdate($id: ID!, $input: InventoryItemInput!) {
  inventoryItemUpdate(id: $id, input: $input) {
    inventoryItem {
      id
      unitCost {
        amount
      }
    }
    userErrors {
      field
      message
    }
  }
}
"""

INVENTORY_ADJUST_MUTATION = """
mutation inventoryAdjustQuantities($input: InventoryAdjustQuantitiesInput!) {
  inventoryAdjustQuantities(input: $input) {
    inventoryAdjustmentGroup {
      reason
      changes {
        name
        delta
      }
    }
    userErrors {
      field
      message
    }
  }
}
"""

SHOP_QUERY = "{ shop { name myshopifyDomain } }"


def _edges(connection: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    if not connection:
        return []
    return [edge["node"] for edge in connection.get("edges") or []]


def _format_user_errors(errors: List[Dict[str, Any]]) -> List[str]:
    formatted = []
    for error in errors:
        field = error.get("field")
        message = error.get("message", "")
        formatted.append(f"{'.'.join(field)}: {message}" if field else message)
    return formatted


def parse_inventory_level(node: Dict[str, Any]) -> InventoryLevel:
    quantities = {q["name"]: q["quantity"] for q in node.get("quantities") or []}
    available = quantities.get("available", 0)
    location = node.get("location") or {}
    return InventoryLevel(
        id=node["id"],
        available=available or 0,
        location_id=location.get("id"),
        location_name=location.get("name")
    )


def parse_variant(node: Dict[str, Any]) -> CatalogVariant:
    """Build a CatalogVariant from a productVariants node."""
    item = node.get("inventoryItem") or {}
    unit_cost = item.get("unitCost")
    product = node.get("product") or {}
    return CatalogVariant(
        id=node["id"],
        sku=node.get("sku"),
        title=node.get("title"),
        product_title=product.get("title"),
        inventory_item=InventoryItem(
            id=item["id"],
            unit_cost=Money(
                amount=Decimal(str(unit_cost["amount"])),
                currency_code=unit_cost.get("currencyCode")
            ) if unit_cost else None,
            inventory_levels=[
                parse_inventory_level(level) for level in _edges(item.get("inventoryLevels"))
            ]
        )
    )


class AdminClient(BaseClient):
    """GraphQL client for the Shopify Admin API."""
    
    def __init__(self, settings: ShopifySettings, **kwargs):
        super().__init__(settings.access_token, timeout=settings.timeout, **kwargs)
        self.settings = settings
    
    @property
    def endpoint(self) -> str:
        return self.settings.graphql_url
    
    def _get_headers(self) -> Dict[str, str]:
        return {
            "X-Shopify-Access-Token": self.access_token,
            "Content-Type": "application/json",
            "User-Agent": "Shopify-Inventory-Sync/1.0.0"
        }
    
    async def get_shop(self) -> Dict[str, Any]:
        """Fetch basic shop info; used as a connection check."""
        data = await self.execute(SHOP_QUERY)
        return data.get("shop") or {}
    
    async def find_variant_by_sku(self, sku: str) -> Optional[CatalogVariant]:
        """Find the variant for a SKU, preferring an exact SKU match."""
        escaped = sku.replace("\\", "\\\\").replace('"', '\\"')
        data = await self.execute(VARIANT_BY_SKU_QUERY, {"query": f'sku:"{escaped}"'})
        
        nodes = _edges(data.get("productVariants"))
        if not nodes:
            return None
        
        node = next((n for n in nodes if n.get("sku") == sku), nodes[0])
        return parse_variant(node)
    
    async def update_inventory_item_cost(self, inventory_item_id: str, cost: Optional[Decimal]) -> List[str]:
        """Set the unit cost of an inventory item. Returns user errors."""
        variables = {
            "id": inventory_item_id,
            "input": {"cost": format(cost, "f") if cost is not None else None}
        }
        data = await self.execute(INVENTORY_ITEM_UPDATE_MUTATION, variables)
        payload = data.get("inventoryItemUpdate") or {}
        return _format_user_errors(payload.get("userErrors") or [])
    
    async def adjust_available_quantity(
        self,
        inventory_item_id: str,
        location_id: str,
        delta: int,
        reason: str = "correction"
    ) -> List[str]:
        """Apply a relative change to the available quantity. Returns user errors."""
        variables = {
            "input": {
                "reason": reason,
                "name": "available",
                "changes": [{
                    "delta": delta,
                    "inventoryItemId": inventory_item_id,
                    "locationId": location_id
                }]
            }
        }
        data = await self.execute(INVENTORY_ADJUST_MUTATION, variables)
        payload = data.get("inventoryAdjustQuantities") or {}
        return _format_user_errors(payload.get("userErrors") or [])
