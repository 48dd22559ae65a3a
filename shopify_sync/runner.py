"""Sequential batch processing of CSV rows."""

import logging
from typing import Any, Dict, Iterable, List

from .csv_io import parse_record
from .models import SyncResult
from .updaters import InventoryUpdater


logger = logging.getLogger(__name__)


class BatchRunner:
    """Feeds valid rows to the inventory updater one at a time."""
    
    def __init__(self, updater: InventoryUpdater):
        self.updater = updater
    
    async def run(self, rows: Iterable[Dict[str, Any]]) -> List[SyncResult]:
        results = []
        
        # Header is line 1
        for row_number, row in enumerate(rows, start=2):
            record = parse_record(row, row_number)
            if record is None:
                logger.debug("Row %d skipped: missing SKU or invalid quantity", row_number)
                continue
            
            result = await self.updater.sync(record.sku, record.quantity, record.unit_cost)
            results.append(result)
        
        return results
