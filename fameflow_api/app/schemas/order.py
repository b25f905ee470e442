"""
Pydantic models for orders and deposits.

Request bodies use the storefront's camelCase names (``userId``,
``orderId``); both the alias and the Python field name are accepted on
input.  Purchase requests may name the destination as ``target`` or,
as the storefront form does, ``username`` / ``link``.  Bounds on
quantities and amounts are checked by ``OrderService`` so that callers
inside the process get the same rules as HTTP clients.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .catalog import ServiceType


class OrderType(str, Enum):
    FOLLOWERS = "followers"
    VIEWS = "views"
    LIKES = "likes"
    DEPOSIT = "deposit"


class OrderStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class OrderCreate(BaseModel):
    """Schema for placing a purchase order.

    Exactly one of ``amount`` (quantity) or ``budget`` must be given.  A
    budget is converted into the largest quantity it can pay for.
    """

    type: ServiceType = Field(..., example="followers")
    amount: Optional[int] = Field(None, example=500, description="Quantity of engagement units")
    budget: Optional[Decimal] = Field(None, example=100, description="Amount of money to spend instead of a quantity")
    target: Optional[str] = Field(None, example="yourusername", description="Instagram handle or post link")
    username: Optional[str] = Field(None, description="Storefront alias for target")
    link: Optional[str] = Field(None, description="Storefront alias for target")
    user_id: Optional[int] = Field(None, alias="userId", description="Owning user; omit for guest checkout")

    model_config = {
        "populate_by_name": True,
    }

    @property
    def resolved_target(self) -> Optional[str]:
        for value in (self.target, self.username, self.link):
            if value and value.strip():
                return value.strip()
        return None


class DepositCreate(BaseModel):
    """Schema for topping up a wallet."""

    amount: Decimal = Field(..., example=250)
    user_id: Optional[int] = Field(None, alias="userId")

    model_config = {
        "populate_by_name": True,
    }


class OrderReceipt(BaseModel):
    """Response returned after an order or deposit is committed."""

    success: bool = True
    order_id: str = Field(..., alias="orderId", example="ORD-3F2A9C0D11B24E7A")
    message: str = "Order placed successfully"
    amount: int
    price: float

    model_config = {
        "populate_by_name": True,
    }


class OrderRead(BaseModel):
    """Schema for reading an order record."""

    id: str
    user_id: Optional[int] = None
    type: OrderType
    amount: Optional[int] = None
    price: float
    status: OrderStatus
    target: Optional[str] = None
    created_at: datetime

    model_config = {
        "from_attributes": True,
    }
