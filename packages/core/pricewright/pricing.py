"""Price query cache — memoize fetch -> decode -> resolve behind a derived key.

A successful lookup stores the price as an 8-byte little-endian double under a
SHA-256 key of the query. Within the freshness window the next identical query
is answered from that blob without touching the catalog. Failures are never
cached.
"""

from __future__ import annotations

import hashlib
import json
import logging
import math
from dataclasses import asdict, dataclass

from pricewright.config import PricingConfig
from pricewright.errors import InvalidPriceFormat, SkuNotFound
from pricewright.fetcher import CatalogFetcher
from pricewright.resolver import resolve_price, resolve_sku
from pricewright.store import ContentStore
from pricewright.transport import Transport

logger = logging.getLogger(__name__)

DEFAULT_INSTANCE_TYPE = "m4.4xlarge"
DEFAULT_TENANCY = "Shared"
DEFAULT_OPERATING_SYSTEM = "Linux"
DEFAULT_TERM = "OnDemand"


@dataclass(frozen=True)
class Query:
    instance_type: str = DEFAULT_INSTANCE_TYPE
    tenancy: str = DEFAULT_TENANCY
    operating_system: str = DEFAULT_OPERATING_SYSTEM
    term: str = DEFAULT_TERM

    def cache_key(self) -> str:
        """Hex SHA-256 of the query fields as a JSON object.

        Field values are quoted and named, so ("ab", "c") and ("a", "bc") style
        tuples can't produce the same key.
        """
        return hashlib.sha256(json.dumps(asdict(self), sort_keys=True).encode()).hexdigest()

    def __str__(self) -> str:
        return f"{self.term} {self.operating_system} {self.tenancy} {self.instance_type}"


@dataclass
class PriceResult:
    query: Query
    price: float
    cached: bool = False
    sku: str | None = None
    currency: str | None = None


def parse_price(value: str) -> float:
    """Parse a catalog price string into a finite float."""
    try:
        price = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidPriceFormat(f"Price {value!r} is not a number") from exc
    if not math.isfinite(price):
        raise InvalidPriceFormat(f"Price {value!r} is not a finite number")
    return price


class PriceQueryCache:
    """Resolve hourly prices, caching each query's result on disk."""

    def __init__(
        self,
        config: PricingConfig | None = None,
        store: ContentStore | None = None,
        fetcher: CatalogFetcher | None = None,
        transport: Transport | None = None,
    ):
        self.config = config or PricingConfig()
        self.store = store or ContentStore(self.config.cache_dir, max_age=self.config.max_age)
        self.fetcher = fetcher or CatalogFetcher(self.store, transport=transport, config=self.config)

    def lookup(self, query: Query, *, force_refresh: bool = False) -> PriceResult:
        """Resolve query, returning the price together with where it came from.

        force_refresh skips both the query cache and the catalog cache, and
        rewrites both on success.
        """
        key = query.cache_key()
        if not force_refresh and self.store.has_fresh(key, self.config.max_age):
            price = self.store.read_float(key)
            logger.info("Cache hit for %s: %s", query, self.store.path_for(key))
            return PriceResult(query=query, price=price, cached=True)

        logger.info("Cache miss for %s, resolving from catalog", query)
        catalog = self.fetcher.get_catalog(self.config.url, force_refresh=force_refresh)

        sku = resolve_sku(
            catalog,
            query.instance_type,
            query.tenancy,
            query.operating_system,
            self.config.location,
        )
        if not sku:
            raise SkuNotFound(
                f"No {query.operating_system} {query.tenancy} {query.instance_type} product in {self.config.location}"
            )

        entry = resolve_price(catalog, sku, query.term, self.config.currencies)
        price = parse_price(entry.value)

        self.store.write_float(key, price)
        logger.info("Price (%f %s) found for %s (SKU %s)", price, entry.currency, query, sku)
        return PriceResult(query=query, price=price, cached=False, sku=sku, currency=entry.currency)

    def get_price(self, query: Query, *, force_refresh: bool = False) -> float:
        return self.lookup(query, force_refresh=force_refresh).price


def get_ec2_price(
    instance_type: str = DEFAULT_INSTANCE_TYPE,
    tenancy: str = DEFAULT_TENANCY,
    operating_system: str = DEFAULT_OPERATING_SYSTEM,
    term: str = DEFAULT_TERM,
    config: PricingConfig | None = None,
) -> float:
    """Hourly price for one EC2 offering, using the default cache and transport."""
    query = Query(instance_type=instance_type, tenancy=tenancy, operating_system=operating_system, term=term)
    return PriceQueryCache(config).get_price(query)
