"""
Pydantic models for the administrator login, dashboard statistics and
the activity log.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class AdminLogin(BaseModel):
    email: str = Field(..., example="admin@fameflow.com")
    password: str = Field(..., example="admin123")


class AdminRead(BaseModel):
    id: int
    email: str
    role: str


class AdminLoginResult(BaseModel):
    success: bool = True
    admin: AdminRead


class GrowthPoint(BaseModel):
    name: str = Field(..., example="Mon")
    revenue: float
    users: int


class StatsRead(BaseModel):
    """Dashboard overview.  Field names follow the dashboard's JSON keys."""

    total_users: int = Field(..., alias="totalUsers")
    total_revenue: float = Field(..., alias="totalRevenue")
    total_orders: int = Field(..., alias="totalOrders")
    active_subs: int = Field(..., alias="activeSubs")
    growth: List[GrowthPoint]

    model_config = {
        "populate_by_name": True,
    }


class ActivityLogRead(BaseModel):
    id: int
    actor_type: Optional[str] = None
    actor_id: Optional[int] = None
    action: str
    details: Optional[Any] = None
    ip_address: Optional[str] = None
    created_at: datetime
