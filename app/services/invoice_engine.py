"""Invoice amount rules: creation, downpayment linkage, adjustments and overdue."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional

from app.schemas.invoice import AdjustmentResult, Invoice, InvoiceAdjustmentRequest, InvoiceType
from app.schemas.order import Order
from app.services.downpayment import validate_percentage
from app.services.exceptions import ValidationError
from app.services.money import (
    HUNDRED,
    ZERO,
    Number,
    clamp_non_negative,
    clamp_percentage,
    percentage_of,
    round_currency,
    to_decimal,
)


@dataclass(frozen=True)
class InvoiceAmounts:
    invoice_type: InvoiceType
    downpayment_percentage: int
    subtotal: Decimal
    tax_amount: Decimal
    total_amount: Decimal

    @property
    def is_downpayment(self) -> bool:
        return self.invoice_type == "downpayment"


def order_base_amount(order: Order, service_price: Optional[Number] = None) -> Decimal:
    """The order's agreed total, falling back to the service list price when unset."""

    total = to_decimal(order.total_amount)
    if total > ZERO:
        return total
    return clamp_non_negative(service_price or ZERO)


def compute_invoice_amounts(
    base_amount: Number,
    invoice_type: InvoiceType,
    *,
    downpayment_percentage: int = 0,
    tax_amount: Optional[Number] = None,
    tax_rate: Number = ZERO,
) -> InvoiceAmounts:
    base = clamp_non_negative(base_amount)
    if invoice_type == "downpayment":
        validate_percentage(downpayment_percentage)
        if downpayment_percentage == 0:
            raise ValidationError(
                "A downpayment invoice needs a percentage between 1 and 100",
                field="downpayment_percentage",
            )
        subtotal = percentage_of(base, downpayment_percentage)
        percentage = downpayment_percentage
    else:
        subtotal = base
        percentage = 0

    if tax_amount is None:
        tax = percentage_of(subtotal, clamp_percentage(tax_rate))
    else:
        tax = clamp_non_negative(tax_amount)

    return InvoiceAmounts(
        invoice_type=invoice_type,
        downpayment_percentage=percentage,
        subtotal=subtotal,
        tax_amount=tax,
        total_amount=subtotal + tax,
    )


def downpayment_order_patch(
    order_total: Number, invoice_subtotal: Number, percentage: int
) -> Dict[str, Any]:
    """Order fields that keep the parent order in line with a downpayment invoice."""

    subtotal = to_decimal(invoice_subtotal)
    return {
        "downpayment_percentage": percentage,
        "downpayment_amount": subtotal,
        "remaining_amount": clamp_non_negative(to_decimal(order_total) - subtotal),
    }


def build_adjustment_note(description: str, reason: Optional[str] = None) -> str:
    description = description.strip()
    reason = (reason or "").strip()
    return f"{description} - {reason}" if reason else description


def compute_adjustment(
    subtotal: Number,
    tax_amount: Number,
    request: InvoiceAdjustmentRequest,
    *,
    tax_adjustment_mode: str = "subtotal",
) -> AdjustmentResult:
    """Work out the invoice amounts after a discount or surcharge.

    Nothing is persisted here; the caller writes ``new_subtotal``,
    ``new_tax_amount``, ``new_total`` and ``notes`` onto the invoice, replacing
    its previous notes.
    """

    if not request.description or not request.description.strip():
        raise ValidationError(
            "Please provide a description for the adjustment", field="description"
        )

    current_subtotal = to_decimal(subtotal)
    current_tax = to_decimal(tax_amount)

    if request.apply_as == "percentage":
        adjustment = percentage_of(current_subtotal, clamp_percentage(request.percentage))
    else:
        adjustment = clamp_non_negative(request.amount)

    new_subtotal = current_subtotal
    new_tax = current_tax
    if request.type == "discount":
        new_subtotal = clamp_non_negative(current_subtotal - adjustment)
    elif request.type == "additional_charge":
        new_subtotal = current_subtotal + adjustment
    elif tax_adjustment_mode == "tax_amount":
        new_tax = current_tax + adjustment
    else:
        new_subtotal = current_subtotal + adjustment

    return AdjustmentResult(
        adjustment_amount=adjustment,
        new_subtotal=new_subtotal,
        new_tax_amount=new_tax,
        new_total=new_subtotal + new_tax,
        notes=build_adjustment_note(request.description, request.reason),
    )


def is_overdue(invoice: Invoice, today: date) -> bool:
    """Derived at read time; never stored."""

    return invoice.due_date < today and invoice.status != "paid"


def tax_rate_label(subtotal: Number, tax_amount: Number) -> str:
    """Effective tax rate as a whole-percent label, e.g. ``"11%"``."""

    base = to_decimal(subtotal)
    if base <= ZERO:
        return "0%"
    rate = round_currency(to_decimal(tax_amount) * HUNDRED / base)
    return f"{rate}%"
