from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class Service(BaseModel):
    """A digital service offered on the landing page and order form."""

    id: str
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    price: Decimal = Decimal("0")
    features: List[str] = Field(default_factory=list)
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("price", mode="before")
    def _null_price(cls, value):
        return Decimal("0") if value is None else value

    @field_validator("features", mode="before")
    def _null_features(cls, value):
        return [] if value is None else value

    @field_validator("is_active", mode="before")
    def _null_active(cls, value):
        return True if value is None else value


class ServiceCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    price: Decimal = Field(Decimal("0"), ge=0)
    features: List[str] = Field(default_factory=list)
    is_active: bool = True


class ServiceUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    features: Optional[List[str]] = None
    is_active: Optional[bool] = None


class ServiceListResponse(BaseModel):
    total: int
    items: List[Service]
