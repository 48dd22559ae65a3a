"""Main CLI interface for the Shopify inventory sync tool."""

import asyncio
import logging
from pathlib import Path
from typing import Optional
import typer
from rich.console import Console
from rich.logging import RichHandler

from .config import Config, ConfigError, DEFAULT_INPUT_FILE, load_config_from_env
from .clients import AdminClient, APIError
from .csv_io import CSVProcessor
from .runner import BatchRunner
from .updaters import InventoryUpdater

app = typer.Typer(
    name="shopify-sync",
    help="Sync inventory quantities and unit costs from CSV to Shopify",
    rich_markup_mode="rich"
)

console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


@app.command()
def sync(
    input_file: Path = typer.Option(DEFAULT_INPUT_FILE, "--input", help="Path to the inventory CSV file"),
    limit: Optional[int] = typer.Option(None, "--limit", help="Process only first N rows"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Look up SKUs without making updates"),
    location_id: Optional[str] = typer.Option(None, "--location-id", help="Adjust stock at this location GID instead of by position"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Update unit cost and available quantity for every SKU in the CSV."""
    _setup_logging(verbose)
    
    try:
        config = load_config_from_env(
            input_file=input_file,
            limit=limit,
            dry_run=dry_run,
            location_id=location_id,
        )
    except ConfigError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(1)
    
    try:
        asyncio.run(_sync_main(config))
    except KeyboardInterrupt:
        console.print("\n[yellow]Sync cancelled by user[/yellow]")
        raise typer.Exit(1)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Sync failed: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def verify(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Check that the configured shop and access token work."""
    _setup_logging(verbose)
    
    try:
        config = load_config_from_env()
    except ConfigError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(1)
    
    try:
        shop = asyncio.run(_verify_main(config))
    except APIError as e:
        console.print(f"[red]Connection failed: {e}[/red]")
        raise typer.Exit(1)
    
    console.print(f"[green]✓ Connected to {shop.get('name')} ({shop.get('myshopifyDomain')})[/green]")


async def _verify_main(config: Config) -> dict:
    async with AdminClient(config.shopify) as client:
        return await client.get_shop()


async def _sync_main(config: Config) -> None:
    """Main sync logic."""
    console.print("[bold cyan]Shopify Inventory Sync[/bold cyan]\n")
    
    csv_processor = CSVProcessor(console)
    rows = csv_processor.load_rows(config.input_file, config.limit)
    
    if config.dry_run:
        console.print("[yellow]Dry run: no changes will be made[/yellow]")
    if config.location_id:
        console.print(f"[cyan]Adjusting stock at location {config.location_id}[/cyan]")
    
    async with AdminClient(config.shopify) as client:
        updater = InventoryUpdater(
            client,
            console,
            location_id=config.location_id,
            dry_run=config.dry_run,
            default_retry_after_ms=config.default_retry_after_ms
        )
        await BatchRunner(updater).run(rows)


if __name__ == "__main__":
    app()
