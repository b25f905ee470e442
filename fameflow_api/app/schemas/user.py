"""
Pydantic models for storefront users as seen by the back-office.

Passwords are accepted on creation only and never returned.  The
balance is reported in currency units; it is stored in minor units.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class UserStatus(str, Enum):
    ACTIVE = "Active"
    SUSPENDED = "Suspended"


class UserCreate(BaseModel):
    """Schema for an administrator creating a user account."""

    username: str = Field(..., min_length=1, example="janedoe")
    email: str = Field(..., min_length=3, example="jane@example.com")
    password: Optional[str] = Field(None, example="strongpassword")
    country: Optional[str] = Field(None, example="IN")


class UserStatusUpdate(BaseModel):
    status: UserStatus = Field(..., example="Suspended")


class UserRead(BaseModel):
    """Schema for reading a user from the API."""

    id: int
    username: str
    email: str
    country: Optional[str] = None
    balance: float = Field(0, example=250.0)
    status: UserStatus
    last_login: Optional[datetime] = None
    created_at: datetime

    model_config = {
        "from_attributes": True,
    }
