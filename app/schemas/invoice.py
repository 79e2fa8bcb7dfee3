from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from app.schemas.settings import CompanyInfo

InvoiceStatus = Literal["draft", "sent", "paid", "overdue"]
InvoiceType = Literal["full", "downpayment"]
AdjustmentType = Literal["discount", "additional_charge", "tax_adjustment"]
AdjustmentMode = Literal["amount", "percentage"]


class Invoice(BaseModel):
    id: str
    invoice_number: str
    order_id: Optional[str] = None
    issue_date: date
    due_date: date
    status: InvoiceStatus = "draft"
    is_downpayment: bool = False
    downpayment_percentage: int = 0
    invoice_type: InvoiceType = "full"
    subtotal: Decimal
    tax_amount: Decimal = Decimal("0")
    total_amount: Decimal
    payment_terms: Optional[str] = None
    notes: Optional[str] = None
    related_invoice_id: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("tax_amount", "downpayment_percentage", mode="before")
    def _null_numbers(cls, value):
        return 0 if value is None else value

    @field_validator("is_downpayment", mode="before")
    def _null_flag(cls, value):
        return False if value is None else value

    @field_validator("status", mode="before")
    def _null_status(cls, value):
        return "draft" if value is None else value

    @field_validator("invoice_type", mode="before")
    def _null_type(cls, value):
        return "full" if value is None else value


class InvoiceOut(Invoice):
    """Invoice as read by the dashboard, with order details and derived flags."""

    is_overdue: bool = False
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    service_name: Optional[str] = None
    order_remaining_amount: Optional[Decimal] = None


class InvoiceCreateRequest(BaseModel):
    order_id: str
    due_date: date
    issue_date: Optional[date] = None
    invoice_type: InvoiceType = "full"
    downpayment_percentage: int = 30
    tax_amount: Optional[Decimal] = Field(None, ge=0)
    payment_terms: Optional[str] = None
    notes: Optional[str] = None
    related_invoice_id: Optional[str] = None


class InvoiceCreateResponse(BaseModel):
    invoice: InvoiceOut
    order_synced: bool = True


class InvoiceStatusUpdate(BaseModel):
    status: InvoiceStatus


class InvoiceListResponse(BaseModel):
    total: int
    items: List[InvoiceOut]


class InvoiceAdjustmentRequest(BaseModel):
    type: AdjustmentType = "discount"
    apply_as: AdjustmentMode = "amount"
    amount: Decimal = Decimal("0")
    percentage: Decimal = Decimal("0")
    description: str = ""
    reason: Optional[str] = None


class AdjustmentResult(BaseModel):
    adjustment_amount: Decimal
    new_subtotal: Decimal
    new_tax_amount: Decimal
    new_total: Decimal
    notes: str


class DocumentParty(BaseModel):
    name: str
    email: str
    address: Optional[str] = None


class DocumentLineItem(BaseModel):
    description: str
    quantity: int = 1
    price: Decimal
    total: Decimal


class InvoiceDocument(BaseModel):
    """Fully resolved projection handed to the PDF renderer."""

    invoice_number: str
    issue_date: date
    due_date: date
    customer: DocumentParty
    company: CompanyInfo
    items: List[DocumentLineItem]
    subtotal: Decimal
    tax_amount: Decimal = Decimal("0")
    total_amount: Decimal
    notes: Optional[str] = None
    payment_terms: Optional[str] = None
