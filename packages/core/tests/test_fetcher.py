"""Tests for the cache-or-network catalog fetcher."""

from __future__ import annotations

import os

import pytest
from pricewright.catalog import Offer
from pricewright.errors import FetchFailed, FetchTimeout, MalformedCatalog
from pricewright.fetcher import CATALOG_KEY, CatalogFetcher


def _expire(store, key):
    path = store.path_for(key)
    old = path.stat().st_mtime - store.max_age - 1
    os.utime(path, (old, old))


class TestCatalogFetcher:
    def test_cold_cache_fetches_and_persists(self, store, config, fake_transport, offer_bytes):
        fetcher = CatalogFetcher(store, fake_transport, config)
        body = fetcher.get_catalog_bytes()
        assert body == offer_bytes
        assert fake_transport.calls == [config.url]
        assert store.read(CATALOG_KEY) == offer_bytes

    def test_fresh_cache_skips_network(self, store, config, fake_transport, offer_bytes):
        store.write(CATALOG_KEY, offer_bytes)
        fetcher = CatalogFetcher(store, fake_transport, config)
        assert fetcher.get_catalog_bytes() == offer_bytes
        assert fake_transport.calls == []

    def test_expired_cache_refetches(self, store, config, transport_factory):
        store.write(CATALOG_KEY, b'{"products": {}}')
        _expire(store, CATALOG_KEY)
        transport = transport_factory(b'{"products": {"X": {}}}')
        fetcher = CatalogFetcher(store, transport, config)

        assert fetcher.get_catalog_bytes() == b'{"products": {"X": {}}}'
        assert len(transport.calls) == 1
        assert store.has_fresh(CATALOG_KEY)

    def test_cache_hit_does_not_extend_lifetime(self, store, config, fake_transport, offer_bytes):
        store.write(CATALOG_KEY, offer_bytes)
        path = store.path_for(CATALOG_KEY)
        old = path.stat().st_mtime - 3600
        os.utime(path, (old, old))

        CatalogFetcher(store, fake_transport, config).get_catalog_bytes()
        assert path.stat().st_mtime == pytest.approx(old)

    def test_explicit_url_used(self, store, config, fake_transport):
        CatalogFetcher(store, fake_transport, config).get_catalog_bytes("https://other.example.test/ec2.json")
        assert fake_transport.calls == ["https://other.example.test/ec2.json"]

    def test_cached_catalog_served_for_different_url(self, store, config, fake_transport, offer_bytes):
        # The cache key ignores the URL: a fresh catalog is reused as-is.
        store.write(CATALOG_KEY, offer_bytes)
        fetcher = CatalogFetcher(store, fake_transport, config)
        assert fetcher.get_catalog_bytes("https://other.example.test/ec2.json") == offer_bytes
        assert fake_transport.calls == []

    def test_force_refresh_bypasses_fresh_cache(self, store, config, transport_factory):
        store.write(CATALOG_KEY, b"stale")
        transport = transport_factory(b'{"products": {}}')
        fetcher = CatalogFetcher(store, transport, config)
        assert fetcher.get_catalog_bytes(force_refresh=True) == b'{"products": {}}'
        assert store.read(CATALOG_KEY) == b'{"products": {}}'

    def test_fetch_failure_propagates_and_writes_nothing(self, store, config, transport_factory):
        transport = transport_factory(error=FetchFailed("connection refused"))
        fetcher = CatalogFetcher(store, transport, config)
        with pytest.raises(FetchFailed, match="connection refused"):
            fetcher.get_catalog_bytes()
        assert store.keys() == []

    def test_no_retry_on_failure(self, store, config, transport_factory):
        transport = transport_factory(error=FetchTimeout("slow"))
        fetcher = CatalogFetcher(store, transport, config)
        with pytest.raises(FetchTimeout):
            fetcher.get_catalog_bytes()
        assert len(transport.calls) == 1

    def test_failed_refetch_keeps_stale_bytes(self, store, config, transport_factory, offer_bytes):
        store.write(CATALOG_KEY, offer_bytes)
        _expire(store, CATALOG_KEY)
        fetcher = CatalogFetcher(store, transport_factory(error=FetchFailed("down")), config)
        with pytest.raises(FetchFailed):
            fetcher.get_catalog_bytes()
        assert store.read(CATALOG_KEY) == offer_bytes

    def test_get_catalog_decodes(self, store, config, fake_transport):
        offer = CatalogFetcher(store, fake_transport, config).get_catalog()
        assert isinstance(offer, Offer)
        assert "ABC" in offer.products

    def test_corrupt_cache_served_until_forced(self, store, config, fake_transport):
        store.write(CATALOG_KEY, b"{truncated")
        fetcher = CatalogFetcher(store, fake_transport, config)
        with pytest.raises(MalformedCatalog):
            fetcher.get_catalog()
        with pytest.raises(MalformedCatalog):
            fetcher.get_catalog()
        assert fake_transport.calls == []

        offer = fetcher.get_catalog(force_refresh=True)
        assert "ABC" in offer.products
        assert len(fake_transport.calls) == 1

    def test_malformed_network_bytes_are_cached(self, store, config, transport_factory):
        fetcher = CatalogFetcher(store, transport_factory(b"<html>maintenance</html>"), config)
        with pytest.raises(MalformedCatalog):
            fetcher.get_catalog()
        assert store.read(CATALOG_KEY) == b"<html>maintenance</html>"

    def test_default_transport_uses_config_timeout(self, store, tmp_path):
        from pricewright.config import PricingConfig
        from pricewright.transport import HTTPTransport

        fetcher = CatalogFetcher(store, config=PricingConfig(cache_dir=tmp_path, timeout=7))
        assert isinstance(fetcher.transport, HTTPTransport)
        assert fetcher.transport._timeout == 7
