"""Catalog fetcher — serve the offer file from the content store or the network."""

from __future__ import annotations

import logging

from pricewright.catalog import Offer, decode_catalog
from pricewright.config import PricingConfig
from pricewright.store import ContentStore
from pricewright.transport import HTTPTransport, Transport

logger = logging.getLogger(__name__)

# Fixed key for the raw catalog. It does not depend on the source URL, so a
# cached catalog keeps being served after the URL changes until it expires.
CATALOG_KEY = "offers"


class CatalogFetcher:
    """Fetches the raw pricing catalog, using the content store as a freshness-gated cache."""

    def __init__(
        self,
        store: ContentStore,
        transport: Transport | None = None,
        config: PricingConfig | None = None,
    ):
        self.config = config or PricingConfig()
        self.store = store
        self.transport = transport or HTTPTransport(timeout=self.config.timeout)

    def get_catalog_bytes(self, source_url: str | None = None, *, force_refresh: bool = False) -> bytes:
        """Return the catalog bytes, from cache when fresh, else from source_url.

        Network bytes are persisted before they are returned. Cached bytes are not
        rewritten, so a cache hit never extends the catalog's lifetime.
        """
        url = source_url or self.config.url
        if not force_refresh and self.store.has_fresh(CATALOG_KEY, self.config.max_age):
            logger.info("Reading catalog from cache: %s", self.store.path_for(CATALOG_KEY))
            return self.store.read(CATALOG_KEY)

        body = self.transport.fetch(url)
        self.store.write(CATALOG_KEY, body)
        logger.info("Cached %d catalog bytes at %s", len(body), self.store.path_for(CATALOG_KEY))
        return body

    def get_catalog(self, source_url: str | None = None, *, force_refresh: bool = False) -> Offer:
        """Fetch (or load) and decode the catalog.

        A corrupt cached catalog raises MalformedCatalog on every call until it
        expires; pass force_refresh=True to re-fetch it.
        """
        return decode_catalog(self.get_catalog_bytes(source_url, force_refresh=force_refresh))
