"""
Pydantic models for the service catalog and price quotes.
"""

from decimal import Decimal
from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, Field


class ServiceType(str, Enum):
    """Kinds of engagement the storefront sells."""

    FOLLOWERS = "followers"
    VIEWS = "views"
    LIKES = "likes"


class Tier(BaseModel):
    """A predefined (quantity, price) package shown in the storefront."""

    id: str = Field(..., example="f2")
    count: int = Field(..., example=500)
    price: float = Field(..., example=299)
    popular: bool = False


class CatalogRead(BaseModel):
    packages: Dict[ServiceType, List[Tier]]
    rates: Dict[ServiceType, float] = Field(..., description="Price per unit for custom quantities")
    deposit_presets: List[int] = Field(..., alias="depositPresets")

    model_config = {
        "populate_by_name": True,
    }


class Quote(BaseModel):
    type: ServiceType
    amount: int = Field(..., example=500, description="Quantity of engagement units")
    price: float = Field(..., example=375.0)

    @classmethod
    def from_decimal(cls, service: ServiceType, amount: int, price: Decimal) -> "Quote":
        return cls(type=service, amount=amount, price=float(price))
