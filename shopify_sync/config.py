"""Configuration models and settings for Shopify API integration."""

from pathlib import Path
from typing import Optional
from pydantic import AliasChoices, BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings


DEFAULT_INPUT_FILE = Path("private_repo/clean_data/to_update.csv")
DEFAULT_RETRY_AFTER_MS = 2000


class ConfigError(Exception):
    """Required configuration is missing or invalid."""
    pass


class ShopifySettings(BaseSettings):
    """Shopify Admin API settings loaded from environment variables."""
    
    shop: str = Field(
        ...,
        validation_alias=AliasChoices("SHOPIFY_SHOP", "SHOP"),
        description="Shop name or myshopify.com domain",
    )
    access_token: str = Field(..., min_length=1, description="Admin API access token")
    api_version: str = Field(default="2024-10", description="Admin API version")
    timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")
    location_id: Optional[str] = Field(default=None, description="Pin adjustments to this location")
    
    model_config = {
        "env_prefix": "SHOPIFY_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }
    
    @property
    def shop_domain(self) -> str:
        """Full myshopify.com domain for the configured shop."""
        domain = self.shop.strip().lower()
        domain = domain.removeprefix("https://").removeprefix("http://").rstrip("/")
        if "." not in domain:
            domain = f"{domain}.myshopify.com"
        return domain
    
    @property
    def graphql_url(self) -> str:
        return f"https://{self.shop_domain}/admin/api/{self.api_version}/graphql.json"


class Config(BaseModel):
    """Main application configuration."""
    
    shopify: ShopifySettings
    
    input_file: Path = DEFAULT_INPUT_FILE
    dry_run: bool = False
    limit: Optional[int] = Field(default=None, ge=1)
    
    # Fixed delay used when a throttled response carries no retry hint
    default_retry_after_ms: int = Field(default=DEFAULT_RETRY_AFTER_MS, ge=0)
    
    @property
    def location_id(self) -> Optional[str]:
        return self.shopify.location_id


def load_config_from_env(**overrides) -> Config:
    """Load configuration from environment variables (and a .env file)."""
    from dotenv import load_dotenv
    load_dotenv()
    
    try:
        settings = ShopifySettings()
    except ValidationError as e:
        missing = [
            ".".join(str(part) for part in error["loc"])
            for error in e.errors()
        ]
        raise ConfigError(
            f"Invalid Shopify configuration ({', '.join(missing)}). "
            "Set SHOP and SHOPIFY_ACCESS_TOKEN in the environment or .env"
        ) from e
    
    location_id = overrides.pop("location_id", None)
    if location_id:
        settings.location_id = location_id
    
    return Config(shopify=settings, **{k: v for k, v in overrides.items() if v is not None})
