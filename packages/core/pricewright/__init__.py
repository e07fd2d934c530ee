"""Pricewright — cached EC2 on-demand price lookups from the AWS pricing catalog."""

from pricewright.config import PricingConfig, load_config
from pricewright.errors import (
    AmbiguousMatch,
    ConfigError,
    FetchFailed,
    FetchTimeout,
    InvalidPriceFormat,
    MalformedCatalog,
    NotFound,
    PriceNotFound,
    PricewrightError,
    SkuNotFound,
    StoreIOError,
)

__version__ = "0.1.0"

__all__ = [
    "AmbiguousMatch",
    "CatalogFetcher",
    "ConfigError",
    "ContentStore",
    "FetchFailed",
    "FetchTimeout",
    "InvalidPriceFormat",
    "MalformedCatalog",
    "NotFound",
    "Offer",
    "PriceNotFound",
    "PriceQueryCache",
    "PricewrightError",
    "PricingConfig",
    "Query",
    "SkuNotFound",
    "StoreIOError",
    "decode_catalog",
    "get_ec2_price",
    "load_config",
    "resolve_price",
    "resolve_sku",
]


def __getattr__(name: str):
    # Lazy imports keep `import pricewright` free of the HTTP stack
    if name == "ContentStore":
        from pricewright.store import ContentStore

        return ContentStore
    if name == "CatalogFetcher":
        from pricewright.fetcher import CatalogFetcher

        return CatalogFetcher
    if name in ("Offer", "decode_catalog"):
        from pricewright import catalog

        return getattr(catalog, name)
    if name in ("resolve_sku", "resolve_price"):
        from pricewright import resolver

        return getattr(resolver, name)
    if name in ("PriceQueryCache", "Query", "get_ec2_price"):
        from pricewright import pricing

        return getattr(pricing, name)
    raise AttributeError(f"module 'pricewright' has no attribute {name!r}")
