"""CSV input handling for inventory records."""

import re
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Dict, List, Any, Optional
import pandas as pd
from rich.console import Console

from .models import InventoryRecord


SKU_COLUMN = "Product Code"
QUANTITY_COLUMN = "Inventory"
COST_COLUMN = "Unit Cost"

REQUIRED_COLUMNS = [SKU_COLUMN, QUANTITY_COLUMN]

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_quantity(value: Any) -> Optional[int]:
    """Parse the leading integer of a cell ("12 units" -> 12, "3.9" -> 3)."""
    if value is None:
        return None
    match = _INT_PREFIX.match(str(value))
    return int(match.group(1)) if match else None


def parse_cost(value: Any) -> Optional[Decimal]:
    """Parse the leading number of a cell; None stands for not-a-number."""
    if value is None:
        return None
    match = _FLOAT_PREFIX.match(str(value))
    if not match:
        return None
    try:
        return Decimal(match.group(1))
    except InvalidOperation:
        return None


def parse_record(row: Dict[str, Any], row_number: int = 0) -> Optional[InventoryRecord]:
    """Turn a raw CSV row into an InventoryRecord, or None if it is malformed."""
    sku = str(row.get(SKU_COLUMN) or "").strip()
    if not sku:
        return None
    
    quantity = parse_quantity(row.get(QUANTITY_COLUMN))
    if quantity is None:
        return None
    
    return InventoryRecord(
        sku=sku,
        quantity=quantity,
        unit_cost=parse_cost(row.get(COST_COLUMN)),
        row_number=row_number
    )


class CSVProcessor:
    """Handles CSV reading and column validation."""
    
    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
    
    def read_csv(self, file_path: Path, limit: Optional[int] = None) -> pd.DataFrame:
        """Read the CSV keeping every cell as a string."""
        if not file_path.exists():
            raise FileNotFoundError(f"CSV file not found: {file_path}")
        
        try:
            df = pd.read_csv(file_path, encoding='utf-8-sig', dtype=str, keep_default_na=False)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise ValueError(f"Failed to read CSV file: {e}") from e
        
        df.columns = [str(col).strip() for col in df.columns]
        
        if limit:
            df = df.head(limit)
            self.console.print(f"[yellow]Limited to first {limit} rows for processing[/yellow]")
        
        self.console.print(f"[green]Loaded {len(df)} rows from {file_path}[/green]")
        return df
    
    def validate_required_columns(self, df: pd.DataFrame, required_columns: List[str] = REQUIRED_COLUMNS) -> None:
        """Validate that required columns exist."""
        missing_columns = [col for col in required_columns if col not in df.columns]
        
        if missing_columns:
            raise ValueError(
                f"Missing required columns: {missing_columns}. "
                f"Available columns: {list(df.columns)}"
            )
        
        if COST_COLUMN not in df.columns:
            self.console.print(f"[yellow]Warning: no '{COST_COLUMN}' column, costs will be cleared[/yellow]")
    
    def iter_rows(self, df: pd.DataFrame) -> List[Dict[str, Any]]:
        """Rows as plain dicts, in file order."""
        return df.to_dict(orient="records")
    
    def load_rows(self, file_path: Path, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        df = self.read_csv(file_path, limit)
        self.validate_required_columns(df)
        return self.iter_rows(df)
