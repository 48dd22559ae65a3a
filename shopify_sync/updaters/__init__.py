"""Updaters that push CSV data to Shopify."""

from .inventory import InventoryUpdater, select_inventory_level

__all__ = ["InventoryUpdater", "select_inventory_level"]
