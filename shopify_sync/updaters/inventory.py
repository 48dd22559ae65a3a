"""Inventory cost and quantity updater."""

import asyncio
import logging
from decimal import Decimal
from typing import List, Optional
from rich.console import Console
from rich.markup import escape

from ..clients import AdminClient, APIError
from ..config import DEFAULT_RETRY_AFTER_MS
from ..models import CatalogVariant, InventoryLevel, SyncResult
from ..throttle import Sleep, handle_rate_limit, is_rate_limited


logger = logging.getLogger(__name__)

SEPARATOR = "\n=========\n"


def select_inventory_level(
    levels: List[InventoryLevel],
    location_id: Optional[str] = None
) -> Optional[InventoryLevel]:
    """Pick the level whose stock gets adjusted.
    
    Without a configured location the third level is used, else the second.
    Fewer than two levels means there is nothing to adjust.
    """
    if location_id:
        return next((level for level in levels if level.location_id == location_id), None)
    
    if len(levels) >= 3:
        return levels[2]
    if len(levels) >= 2:
        return levels[1]
    return None


class InventoryUpdater:
    """Updates unit cost and available quantity for one SKU at a time."""
    
    def __init__(
        self,
        client: AdminClient,
        console: Optional[Console] = None,
        location_id: Optional[str] = None,
        dry_run: bool = False,
        default_retry_after_ms: int = DEFAULT_RETRY_AFTER_MS,
        sleep: Sleep = asyncio.sleep
    ):
        self.client = client
        self.console = console or Console()
        self.location_id = location_id
        self.dry_run = dry_run
        self.default_retry_after_ms = default_retry_after_ms
        self.sleep = sleep
    
    async def sync(self, sku: str, quantity: int, unit_cost: Optional[Decimal]) -> SyncResult:
        """Sync cost and quantity for a SKU, restarting from the lookup when throttled."""
        attempts = 0
        
        while True:
            attempts += 1
            try:
                result = await self._sync_once(sku, quantity, unit_cost)
            except Exception as e:
                if is_rate_limited(e):
                    await handle_rate_limit(e, self.sleep, self.default_retry_after_ms)
                    continue
                
                logger.debug("Sync failed for %s", sku, exc_info=True)
                self.console.print(f"[red]Error updating SKU {escape(sku)}: {escape(str(e))}[/red]")
                result = SyncResult(sku=sku, status="failed", error=str(e), dry_run=self.dry_run)
            
            result.attempts = attempts
            self.console.print(SEPARATOR)
            return result
    
    async def _sync_once(self, sku: str, quantity: int, unit_cost: Optional[Decimal]) -> SyncResult:
        variant = await self.client.find_variant_by_sku(sku)
        if variant is None:
            self.console.print(f"[yellow]SKU {escape(sku)} not found or has no variants.[/yellow]")
            return SyncResult(sku=sku, status="not_found", dry_run=self.dry_run)
        
        result = SyncResult(sku=sku, status="updated", dry_run=self.dry_run)
        await self._update_cost(variant, unit_cost, result)
        
        level = select_inventory_level(variant.inventory_item.inventory_levels, self.location_id)
        if level is None:
            self.console.print("[yellow]Not enough locations available to update inventory.[/yellow]")
            result.status = "insufficient_locations"
            return result
        
        await self._adjust_quantity(variant, level, quantity, result)
        return result
    
    async def _update_cost(self, variant: CatalogVariant, unit_cost: Optional[Decimal], result: SyncResult) -> None:
        item = variant.inventory_item
        if item.unit_cost:
            self.console.print("Current cost found!")
        else:
            self.console.print("No existing cost found.")
        
        if self.dry_run:
            self.console.print(f"[cyan]Would update inventory item cost to {unit_cost}[/cyan]")
            return
        
        # Cost and quantity are independent; only throttling aborts the attempt
        try:
            user_errors = await self.client.update_inventory_item_cost(item.id, unit_cost)
        except APIError as e:
            if is_rate_limited(e):
                raise
            self.console.print(f"[red]Cost update failed for {escape(result.sku)}: {escape(str(e))}[/red]")
            result.cost_errors.append(str(e))
            return
        
        if user_errors:
            self.console.print(f"[red]User Errors: {escape(str(user_errors))}[/red]")
            result.cost_errors.extend(user_errors)
        else:
            self.console.print("[green]Updated Inventory Item[/green]")
            result.cost_updated = True
    
    async def _adjust_quantity(
        self,
        variant: CatalogVariant,
        level: InventoryLevel,
        quantity: int,
        result: SyncResult
    ) -> None:
        delta = quantity - level.available
        result.quantity_delta = delta
        result.location_id = level.location_id
        
        if self.dry_run:
            self.console.print(
                f"[cyan]Would adjust {escape(level.location_name or str(level.location_id))} "
                f"by {delta:+d} ({level.available} -> {quantity})[/cyan]"
            )
            return
        
        user_errors = await self.client.adjust_available_quantity(
            variant.inventory_item.id, level.location_id, delta
        )
        if user_errors:
            self.console.print(f"[red]Inventory Level Update Errors: {escape(str(user_errors))}[/red]")
            result.quantity_errors.extend(user_errors)
        else:
            self.console.print("[green]Updated inventory![/green]")
