"""Offer file models — the decoded AWS bulk pricing catalog.

Mirrors the JSON layout of ``offers/v1.0/aws/<offerCode>/current/index.json``:

    products: {sku: {sku, productFamily, attributes: {name: value}}}
    terms:    {termName: {sku: {termId: {priceDimensions: {dimId: {pricePerUnit: {currency: "0.123"}}}}}}}

Metadata fields are passed through untouched. Unknown keys are ignored.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pricewright.errors import MalformedCatalog

logger = logging.getLogger(__name__)


class _OfferModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class PriceDimension(_OfferModel):
    rate_code: str = Field(default="", alias="rateCode")
    description: str = ""
    unit: str = ""
    begin_range: str = Field(default="", alias="beginRange")
    end_range: str = Field(default="", alias="endRange")
    price_per_unit: dict[str, str] = Field(default_factory=dict, alias="pricePerUnit")


class Term(_OfferModel):
    offer_term_code: str = Field(default="", alias="offerTermCode")
    sku: str = ""
    effective_date: str = Field(default="", alias="effectiveDate")
    term_attributes_type: str = Field(default="", alias="termAttributesType")
    term_attributes: dict[str, str] = Field(default_factory=dict, alias="termAttributes")
    price_dimensions: dict[str, PriceDimension] = Field(default_factory=dict, alias="priceDimensions")


class Product(_OfferModel):
    sku: str = ""
    product_family: str = Field(default="", alias="productFamily")
    attributes: dict[str, str] = Field(default_factory=dict)


class Offer(_OfferModel):
    """A decoded pricing catalog. Never mutated after decode."""

    format_version: str = Field(default="", alias="formatVersion")
    disclaimer: str = ""
    offer_code: str = Field(default="", alias="offerCode")
    version: str = ""
    publication_date: str = Field(default="", alias="publicationDate")
    products: dict[str, Product]
    terms: dict[str, dict[str, dict[str, Term]]] = Field(default_factory=dict)


def decode_catalog(data: bytes) -> Offer:
    """Parse raw offer-file bytes into an Offer.

    Raises:
        MalformedCatalog: invalid JSON, a non-object root, or any structural mismatch.
    """
    try:
        offer = Offer.model_validate_json(data)
    except ValidationError as exc:
        raise MalformedCatalog(f"Malformed pricing catalog ({exc.error_count()} error(s)): {exc}") from exc
    logger.debug(
        "Decoded %s catalog version %s: %d products, %d term types",
        offer.offer_code or "unknown",
        offer.version or "unknown",
        len(offer.products),
        len(offer.terms),
    )
    return offer
