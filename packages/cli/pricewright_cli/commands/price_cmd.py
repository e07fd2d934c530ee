"""Resolve the hourly price of one EC2 offering."""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Annotated

import typer
from pricewright.pricing import (
    DEFAULT_INSTANCE_TYPE,
    DEFAULT_OPERATING_SYSTEM,
    DEFAULT_TENANCY,
    DEFAULT_TERM,
    PriceQueryCache,
    Query,
)

from pricewright_cli.utils import config_from_ctx, ctx_options, handle_error


def price(
    ctx: typer.Context,
    instance_type: Annotated[str, typer.Option("--type", "-t", help="EC2 instance type")] = DEFAULT_INSTANCE_TYPE,
    tenancy: Annotated[str, typer.Option(help="EC2 tenancy (Shared, Dedicated, Host)")] = DEFAULT_TENANCY,
    operating_system: Annotated[str, typer.Option("--os", help="EC2 operating system")] = DEFAULT_OPERATING_SYSTEM,
    term: Annotated[str, typer.Option(help="Pricing term (OnDemand, Reserved)")] = DEFAULT_TERM,
    refresh: Annotated[
        bool,
        typer.Option("--refresh", help="Ignore cached catalog and price, fetch again"),
    ] = False,
) -> None:
    """Print the hourly price for an instance type, tenancy, OS and term."""
    try:
        config = config_from_ctx(ctx)
        query = Query(instance_type=instance_type, tenancy=tenancy, operating_system=operating_system, term=term)
        result = PriceQueryCache(config).lookup(query, force_refresh=refresh)
    except typer.Exit:
        raise
    except Exception as e:
        handle_error(ctx, e)
        return

    if ctx_options(ctx).get("json"):
        data = {
            "price": result.price,
            "cached": result.cached,
            "sku": result.sku,
            "currency": result.currency,
            "location": config.location,
            "query": asdict(query),
        }
        print(json.dumps(data))
        return

    print(result.price)
