"""Pydantic models for CSV records, catalog entities and sync outcomes."""

from decimal import Decimal
from typing import List, Literal, Optional
from pydantic import BaseModel, Field


class InventoryRecord(BaseModel):
    """One parsed row of the input CSV."""
    
    sku: str = Field(..., min_length=1)
    quantity: int
    unit_cost: Optional[Decimal] = None  # None when the cost cell is not a number
    row_number: int = 0


class Money(BaseModel):
    amount: Decimal
    currency_code: Optional[str] = None


class InventoryLevel(BaseModel):
    """Stock of one inventory item at one location."""
    
    id: str
    available: int = 0
    location_id: Optional[str] = None
    location_name: Optional[str] = None


class InventoryItem(BaseModel):
    id: str
    unit_cost: Optional[Money] = None
    # Ordered as returned by Shopify
    inventory_levels: List[InventoryLevel] = Field(default_factory=list)


class CatalogVariant(BaseModel):
    """Product variant resolved by SKU."""
    
    id: str
    sku: Optional[str] = None
    title: Optional[str] = None
    product_title: Optional[str] = None
    inventory_item: InventoryItem


class SyncResult(BaseModel):
    """Result of syncing one SKU."""
    
    sku: str
    status: Literal["not_found", "insufficient_locations", "updated", "failed"]
    cost_updated: bool = False
    cost_errors: List[str] = Field(default_factory=list)
    quantity_delta: Optional[int] = None
    quantity_errors: List[str] = Field(default_factory=list)
    location_id: Optional[str] = None
    attempts: int = 1
    error: Optional[str] = None
    dry_run: bool = False
    
    @property
    def success(self) -> bool:
        return self.status == "updated" and not self.cost_errors and not self.quantity_errors
