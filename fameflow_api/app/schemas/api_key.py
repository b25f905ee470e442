"""
Pydantic models for third-party API key records.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class ApiKeyCreate(BaseModel):
    name: str = Field(..., min_length=1, example="Primary SMM panel")
    key_value: str = Field(..., min_length=1, example="sk_live_xxx")
    provider: str = Field(..., min_length=1, example="smmpanel")
    usage_limit: int = Field(-1, ge=-1, description="Maximum calls; -1 means unlimited")


class ApiKeyRead(BaseModel):
    id: int
    name: str
    key_value: str
    provider: str
    status: str
    usage_limit: int
    current_usage: int
    created_at: datetime

    model_config = {
        "from_attributes": True,
    }
