from pathlib import Path

import pytest

from shopify_sync.config import ConfigError, DEFAULT_INPUT_FILE, load_config_from_env


def test_load_config_from_env_defaults():
    config = load_config_from_env()
    
    assert config.shopify.shop == "test-store"
    assert config.shopify.access_token == "shpat_test"
    assert config.shopify.graphql_url == "https://test-store.myshopify.com/admin/api/2024-10/graphql.json"
    assert config.input_file == DEFAULT_INPUT_FILE
    assert config.default_retry_after_ms == 2000
    assert config.location_id is None
    assert not config.dry_run


def test_shop_domain_normalization(monkeypatch):
    monkeypatch.setenv("SHOP", "https://Test-Store.myshopify.com/")
    
    assert load_config_from_env().shopify.shop_domain == "test-store.myshopify.com"


def test_prefixed_settings(monkeypatch):
    monkeypatch.delenv("SHOP")
    monkeypatch.setenv("SHOPIFY_SHOP", "other-store")
    monkeypatch.setenv("SHOPIFY_API_VERSION", "2025-01")
    monkeypatch.setenv("SHOPIFY_LOCATION_ID", "gid://shopify/Location/9")
    
    config = load_config_from_env()
    
    assert config.shopify.graphql_url == "https://other-store.myshopify.com/admin/api/2025-01/graphql.json"
    assert config.location_id == "gid://shopify/Location/9"


def test_overrides():
    config = load_config_from_env(
        input_file=Path("stock.csv"),
        dry_run=True,
        limit=None,
        location_id="gid://shopify/Location/2",
    )
    
    assert config.input_file == Path("stock.csv")
    assert config.dry_run
    assert config.limit is None
    assert config.location_id == "gid://shopify/Location/2"


@pytest.mark.parametrize("missing", ["SHOP", "SHOPIFY_ACCESS_TOKEN"])
def test_missing_settings_raise_config_error(monkeypatch, missing):
    monkeypatch.delenv(missing)
    
    with pytest.raises(ConfigError, match="SHOPIFY_ACCESS_TOKEN"):
        load_config_from_env()
