# app/mcp_server.py
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field
from mcp.server.fastmcp import FastMCP

from app.config import get_settings
from app.dependencies.services import get_backend_client_cached
from app.schemas.invoice import AdjustmentResult, InvoiceAdjustmentRequest
from app.schemas.order import OrderStatus
from app.services.downpayment import calculate_downpayment
from app.services.invoice_engine import compute_adjustment
from app.services.money import format_currency
from app.services.order_state import can_invoice
from app.services.repositories import OrderRepository, get_record_store

log = logging.getLogger("agency.mcp")

# Name shown to clients
mcp = FastMCP("agency_mcp")

# --------------------------
# Tool I/O models
# --------------------------
class DownpaymentPreviewInput(BaseModel):
    base_price: Decimal = Field(..., ge=0, description="Order total in rupiah")
    percentage: int = Field(30, description="Downpayment percentage, 0-100")
    enabled: bool = True


class DownpaymentPreviewOutput(BaseModel):
    downpayment_amount: Decimal
    remaining_amount: Decimal
    downpayment_display: str
    remaining_display: str


class AdjustmentPreviewInput(BaseModel):
    subtotal: Decimal = Field(..., ge=0)
    tax_amount: Decimal = Field(Decimal("0"), ge=0)
    adjustment: InvoiceAdjustmentRequest


class EligibilityInput(BaseModel):
    order_id: str = Field(..., description="Order ID, e.g. 'ORD-00001'")


class EligibilityOutput(BaseModel):
    order_id: str
    found: bool
    status: Optional[OrderStatus] = None
    can_invoice: bool = False

# --------------------------
# Tools
# --------------------------
@mcp.tool(name="downpayment_preview", description="Split an order total into downpayment and remaining balance")
async def downpayment_preview(input: DownpaymentPreviewInput) -> DownpaymentPreviewOutput:
    log.debug("downpayment_preview input=%s", input.model_dump())
    prefix = get_settings().currency_prefix
    breakdown = calculate_downpayment(input.base_price, input.percentage, enabled=input.enabled)
    out = DownpaymentPreviewOutput(
        downpayment_amount=breakdown.downpayment_amount,
        remaining_amount=breakdown.remaining_amount,
        downpayment_display=format_currency(breakdown.downpayment_amount, prefix),
        remaining_display=format_currency(breakdown.remaining_amount, prefix),
    )
    log.debug("downpayment_preview output=%s", out.model_dump())
    return out

@mcp.tool(name="invoice_adjustment_preview", description="Preview invoice amounts after a discount or surcharge")
async def invoice_adjustment_preview(input: AdjustmentPreviewInput) -> AdjustmentResult:
    log.debug("invoice_adjustment_preview input=%s", input.model_dump())
    out = compute_adjustment(
        input.subtotal,
        input.tax_amount,
        input.adjustment,
        tax_adjustment_mode=get_settings().tax_adjustment_mode,
    )
    log.debug("invoice_adjustment_preview output=%s", out.model_dump())
    return out

@mcp.tool(name="order_invoice_eligibility", description="Check whether an order can be invoiced")
async def order_invoice_eligibility(input: EligibilityInput) -> EligibilityOutput:
    log.debug("order_invoice_eligibility input=%s", input.model_dump())
    orders = OrderRepository(get_record_store(get_backend_client_cached()))
    order = await orders.get(input.order_id)
    if order is None:
        return EligibilityOutput(order_id=input.order_id, found=False)
    out = EligibilityOutput(
        order_id=order.id,
        found=True,
        status=order.status,
        can_invoice=can_invoice(order),
    )
    log.debug("order_invoice_eligibility output=%s", out.model_dump())
    return out

@mcp.tool(name="ping", description="Health check")
async def ping(message: str) -> str:
    log.debug("ping %s", message)
    return f"pong: {message}"
