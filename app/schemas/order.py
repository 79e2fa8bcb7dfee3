from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

OrderStatus = Literal["pending", "in_progress", "completed", "cancelled"]

BUDGET_RANGES = (
    "< 5 juta",
    "5 - 10 juta",
    "10 - 25 juta",
    "25 - 50 juta",
    "> 50 juta",
)


class Order(BaseModel):
    id: str
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    service_id: Optional[str] = None
    custom_requirements: Optional[str] = None
    budget_range: Optional[str] = None
    deadline_date: Optional[date] = None
    status: OrderStatus = "pending"
    total_amount: Decimal = Decimal("0")
    downpayment_percentage: int = 0
    downpayment_amount: Decimal = Decimal("0")
    remaining_amount: Decimal = Decimal("0")
    notes: Optional[str] = None
    order_date: Optional[datetime] = None

    @field_validator(
        "total_amount", "downpayment_amount", "remaining_amount", "downpayment_percentage",
        mode="before",
    )
    def _null_amounts(cls, value):
        return 0 if value is None else value

    @field_validator("status", mode="before")
    def _null_status(cls, value):
        return "pending" if value is None else value


class OrderCreateRequest(BaseModel):
    """Customer-facing order form submission."""

    customer_name: str = ""
    customer_email: str = ""
    customer_phone: Optional[str] = None
    service_id: Optional[str] = None
    custom_requirements: Optional[str] = None
    budget_range: Optional[str] = None
    deadline_date: Optional[date] = None
    total_amount: Optional[Decimal] = Field(None, ge=0, description="Overrides the service price when set")
    use_downpayment: bool = False
    downpayment_percentage: int = 0

    @field_validator("budget_range")
    def _known_budget(cls, value):
        if value in (None, ""):
            return None
        if value not in BUDGET_RANGES:
            raise ValueError(f"budget_range must be one of {', '.join(BUDGET_RANGES)}")
        return value


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class DownpaymentPreviewRequest(BaseModel):
    base_price: Decimal = Field(..., ge=0)
    percentage: int = 0
    enabled: bool = True


class DownpaymentBreakdown(BaseModel):
    downpayment_amount: Decimal
    remaining_amount: Decimal


class OrderOut(Order):
    service_name: Optional[str] = None
    service_price: Optional[Decimal] = None


class OrderListResponse(BaseModel):
    total: int
    items: List[OrderOut]
