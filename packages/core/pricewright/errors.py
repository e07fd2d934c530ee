"""Exception taxonomy for the price resolution pipeline.

Every error surfaces to the immediate caller unchanged. Nothing in the core
retries; the CLI turns any PricewrightError into a diagnostic and exit 1.
"""

from __future__ import annotations


class PricewrightError(Exception):
    """Base class for all pricewright failures."""


class ConfigError(PricewrightError, ValueError):
    """Configuration file or environment override is invalid."""


class StoreIOError(PricewrightError):
    """Disk read or write failure in the content store."""


class NotFound(PricewrightError, KeyError):
    """Requested key is not present in the content store."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


class FetchFailed(PricewrightError):
    """Network fetch of the catalog failed (transport error or short read)."""


class FetchTimeout(FetchFailed):
    """Network fetch did not complete within the configured timeout."""


class MalformedCatalog(PricewrightError):
    """Catalog bytes are not a well-formed offer document."""


class AmbiguousMatch(PricewrightError):
    """More than one product matches the query predicates."""

    def __init__(self, message: str, skus: list[str] | None = None):
        super().__init__(message)
        self.skus = skus or []


class SkuNotFound(PricewrightError):
    """No product matches the query predicates."""


class PriceNotFound(PricewrightError):
    """The resolved SKU has no term, price dimension or price for the term name."""


class InvalidPriceFormat(PricewrightError, ValueError):
    """The catalog's price string cannot be parsed as a number."""


__all__ = [
    "AmbiguousMatch",
    "ConfigError",
    "FetchFailed",
    "FetchTimeout",
    "InvalidPriceFormat",
    "MalformedCatalog",
    "NotFound",
    "PriceNotFound",
    "PricewrightError",
    "SkuNotFound",
    "StoreIOError",
]
