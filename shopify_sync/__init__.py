"""
Shopify Inventory Sync

Reads a CSV of SKU, quantity and unit cost and pushes each row to Shopify
through the Admin GraphQL API:
- Inventory item unit cost
- Available quantity at one location, applied as a relative adjustment

Rows are processed one at a time; throttled requests are retried from the
SKU lookup after the suggested wait.
"""

__version__ = "1.0.0"

from .config import Config, ShopifySettings

__all__ = ["Config", "ShopifySettings"]
