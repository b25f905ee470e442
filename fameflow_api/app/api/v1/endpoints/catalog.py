"""
Catalog endpoints: the package list and price quotes.
"""

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Query

from fameflow_api.app.core.errors import InvalidInput, NotFound
from fameflow_api.app.schemas.catalog import CatalogRead, Quote, ServiceType
from fameflow_api.app.services.catalog_service import PACKAGES, CatalogService
from fameflow_api.app.services.order_service import OrderService


router = APIRouter()


@router.get("", response_model=CatalogRead)
def get_catalog() -> CatalogRead:
    """Return the packages per service, the per-unit rates and deposit presets."""
    return CatalogService.list_catalog()


@router.get("/quote", response_model=Quote)
def quote(
    type: ServiceType = Query(..., description="followers, views or likes"),
    amount: Optional[int] = Query(None, description="Quantity to price"),
    budget: Optional[Decimal] = Query(None, description="Money to spend"),
    tier: Optional[str] = Query(None, description="Catalog tier id, e.g. f2"),
) -> Quote:
    """Price a quantity, a budget or a catalog tier.

    The returned price is what ``POST /order`` would charge for the same
    request.
    """
    if tier is not None:
        if amount is not None or budget is not None:
            raise InvalidInput("Provide a tier, an amount or a budget, not several")
        found = CatalogService.get_tier(tier)
        if found is None or found not in PACKAGES[type]:
            raise NotFound(f"Tier {tier} not found for {type.value}")
        amount = found.count
    quantity, price = OrderService.resolve_quantity(type, amount, budget)
    return Quote.from_decimal(type, quantity, price)
