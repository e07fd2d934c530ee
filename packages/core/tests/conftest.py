"""Shared fixtures for core tests. No test touches the network."""

from __future__ import annotations

import json
from typing import Any

import pytest
from pricewright.config import PricingConfig
from pricewright.store import ContentStore

OREGON = "US West (Oregon)"


def _product(sku: str, instance_type: str, tenancy: str = "Shared", os: str = "Linux", location: str = OREGON):
    return {
        "sku": sku,
        "productFamily": "Compute Instance",
        "attributes": {
            "instanceType": instance_type,
            "location": location,
            "tenancy": tenancy,
            "operatingSystem": os,
        },
    }


def _on_demand(sku: str, prices: dict[str, str], term_id: str = "term1", dim_id: str = "dim1"):
    return {
        term_id: {
            "offerTermCode": "JRTCKXETXF",
            "sku": sku,
            "effectiveDate": "2016-06-01T00:00:00Z",
            "priceDimensions": {
                dim_id: {
                    "rateCode": f"{sku}.JRTCKXETXF.6YS6EN2CT7",
                    "description": "per On Demand Linux instance hour",
                    "unit": "Hrs",
                    "beginRange": "0",
                    "endRange": "Inf",
                    "appliesTo": [],
                    "pricePerUnit": prices,
                }
            },
        }
    }


class FakeTransport:
    """Serves fixed bytes and counts fetches."""

    def __init__(self, body: bytes = b"", error: Exception | None = None):
        self.body = body
        self.error = error
        self.calls: list[str] = []

    def fetch(self, url: str) -> bytes:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.body


@pytest.fixture
def offer_dict() -> dict[str, Any]:
    """Catalog with one m4.4xlarge Shared Linux product in Oregon, plus decoys."""
    return {
        "formatVersion": "v1.0",
        "disclaimer": "This pricing list is for informational purposes only.",
        "offerCode": "AmazonEC2",
        "version": "20160701000000",
        "publicationDate": "2016-07-01T00:00:00Z",
        "products": {
            "ABC": _product("ABC", "m4.4xlarge"),
            "WIN": _product("WIN", "m4.4xlarge", os="Windows"),
            "VIRGINIA": _product("VIRGINIA", "m4.4xlarge", location="US East (N. Virginia)"),
            "SMALL": _product("SMALL", "t2.micro"),
        },
        "terms": {
            "OnDemand": {
                "ABC": _on_demand("ABC", {"USD": "0.956"}),
                "WIN": _on_demand("WIN", {"USD": "1.660"}),
                "VIRGINIA": _on_demand("VIRGINIA", {"USD": "0.862"}),
                "SMALL": _on_demand("SMALL", {"USD": "0.0116"}),
            }
        },
    }


@pytest.fixture
def offer_bytes(offer_dict) -> bytes:
    return json.dumps(offer_dict).encode()


@pytest.fixture
def make_product():
    return _product


@pytest.fixture
def make_on_demand():
    return _on_demand


@pytest.fixture
def fake_transport(offer_bytes) -> FakeTransport:
    return FakeTransport(offer_bytes)


@pytest.fixture
def transport_factory():
    return FakeTransport


@pytest.fixture
def config(tmp_path) -> PricingConfig:
    return PricingConfig(cache_dir=tmp_path / "cache", url="https://pricing.example.test/index.json")


@pytest.fixture
def store(config) -> ContentStore:
    return ContentStore(config.cache_dir, max_age=config.max_age)
