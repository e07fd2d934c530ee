"""Entry resolver — map query parameters to a unique SKU, then to a price."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from pricewright.catalog import Offer, PriceDimension
from pricewright.errors import AmbiguousMatch, PriceNotFound

logger = logging.getLogger(__name__)

# Product attribute names used by the EC2 offer file
ATTR_INSTANCE_TYPE = "instanceType"
ATTR_LOCATION = "location"
ATTR_TENANCY = "tenancy"
ATTR_OPERATING_SYSTEM = "operatingSystem"


@dataclass(frozen=True)
class Price:
    """A single price entry; value is the catalog's decimal string, unparsed."""

    currency: str
    value: str


def resolve_sku(
    catalog: Offer,
    instance_type: str,
    tenancy: str,
    operating_system: str,
    location: str,
) -> str:
    """Return the SKU of the one product matching all four predicates.

    Scans every product. Returns "" when nothing matches; the caller decides
    what "not found" means.

    Raises:
        AmbiguousMatch: two or more products match.
    """
    wanted = {
        ATTR_INSTANCE_TYPE: instance_type,
        ATTR_LOCATION: location,
        ATTR_TENANCY: tenancy,
        ATTR_OPERATING_SYSTEM: operating_system,
    }
    matches = [
        sku
        for sku, product in catalog.products.items()
        if all(product.attributes.get(name) == value for name, value in wanted.items())
    ]

    if len(matches) > 1:
        skus = sorted(matches)
        raise AmbiguousMatch(
            f"{len(skus)} SKUs match {instance_type}/{tenancy}/{operating_system} in {location}: {', '.join(skus)}",
            skus=skus,
        )
    if not matches:
        logger.debug("No SKU for %s/%s/%s in %s", instance_type, tenancy, operating_system, location)
        return ""
    logger.debug("Resolved %s/%s/%s in %s to SKU %s", instance_type, tenancy, operating_system, location, matches[0])
    return matches[0]


def _dimensions(catalog: Offer, sku: str, term_name: str) -> list[PriceDimension]:
    """Price dimensions for sku under term_name, in sorted term id then dimension id order."""
    sku_terms = catalog.terms.get(term_name, {}).get(sku, {})
    if not sku_terms:
        raise PriceNotFound(f"No {term_name} term for SKU {sku}")
    dims = [dim for _, term in sorted(sku_terms.items()) for _, dim in sorted(term.price_dimensions.items())]
    if not dims:
        raise PriceNotFound(f"No price dimensions in {term_name} term for SKU {sku}")
    return dims


def resolve_price(
    catalog: Offer,
    sku: str,
    term_name: str,
    currencies: Iterable[str] = ("USD",),
) -> Price:
    """Return the price for sku under term_name.

    Currencies are tried in preference order across all dimensions. If none of
    them is present, the alphabetically first currency of the first priced
    dimension is used.

    Raises:
        PriceNotFound: no term, no price dimension, or no price at all.
    """
    dims = _dimensions(catalog, sku, term_name)

    for currency in currencies:
        for dim in dims:
            if currency in dim.price_per_unit:
                return Price(currency=currency, value=dim.price_per_unit[currency])

    for dim in dims:
        if dim.price_per_unit:
            currency = min(dim.price_per_unit)
            return Price(currency=currency, value=dim.price_per_unit[currency])

    raise PriceNotFound(f"No price per unit in {term_name} term for SKU {sku}")
