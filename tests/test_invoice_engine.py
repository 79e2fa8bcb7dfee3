import os
import sys
from datetime import date
from decimal import Decimal

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.schemas.invoice import Invoice, InvoiceAdjustmentRequest
from app.schemas.order import Order
from app.services.exceptions import ValidationError
from app.services.invoice_engine import (
    build_adjustment_note,
    compute_adjustment,
    compute_invoice_amounts,
    downpayment_order_patch,
    is_overdue,
    order_base_amount,
    tax_rate_label,
)


def test_full_invoice_uses_base_amount_as_subtotal() -> None:
    amounts = compute_invoice_amounts(7_500_000, "full", tax_amount=825_000)

    assert amounts.subtotal == Decimal("7500000")
    assert amounts.tax_amount == Decimal("825000")
    assert amounts.total_amount == amounts.subtotal + amounts.tax_amount
    assert amounts.downpayment_percentage == 0
    assert not amounts.is_downpayment


def test_downpayment_invoice_and_order_patch() -> None:
    amounts = compute_invoice_amounts(10_000_000, "downpayment", downpayment_percentage=30)
    patch = downpayment_order_patch(10_000_000, amounts.subtotal, amounts.downpayment_percentage)

    assert amounts.subtotal == Decimal("3000000")
    assert amounts.total_amount == Decimal("3000000")
    assert patch == {
        "downpayment_percentage": 30,
        "downpayment_amount": Decimal("3000000"),
        "remaining_amount": Decimal("7000000"),
    }


def test_tax_defaults_to_configured_rate_when_not_supplied() -> None:
    amounts = compute_invoice_amounts(2_000_000, "full", tax_rate=11)

    assert amounts.tax_amount == Decimal("220000")
    assert amounts.total_amount == Decimal("2220000")


def test_order_patch_clamps_remaining_amount() -> None:
    patch = downpayment_order_patch(1_000_000, 1_500_000, 50)
    assert patch["remaining_amount"] == Decimal("0")


def test_order_base_amount_falls_back_to_service_price() -> None:
    order = Order(id="ORD-1", customer_name="Sari", customer_email="sari@example.com", total_amount=None)

    assert order_base_amount(order, Decimal("5000000")) == Decimal("5000000")
    assert order_base_amount(order.model_copy(update={"total_amount": Decimal("8000000")}), 5) == Decimal("8000000")


def test_percentage_discount_on_one_million() -> None:
    request = InvoiceAdjustmentRequest(
        type="discount", apply_as="percentage", percentage=Decimal("10"), description="Promo"
    )
    result = compute_adjustment(1_000_000, 0, request)

    assert result.adjustment_amount == Decimal("100000")
    assert result.new_subtotal == Decimal("900000")
    assert result.new_total == Decimal("900000")
    assert result.notes == "Promo"


def test_discount_larger_than_subtotal_floors_at_zero() -> None:
    request = InvoiceAdjustmentRequest(
        type="discount", amount=Decimal("5000000"), description="Write-off", reason="Goodwill"
    )
    result = compute_adjustment(2_000_000, 220_000, request)

    assert result.new_subtotal == Decimal("0")
    assert result.new_tax_amount == Decimal("220000")
    assert result.new_total == Decimal("220000")
    assert result.notes == "Write-off - Goodwill"


def test_additional_charge_keeps_tax_untouched() -> None:
    request = InvoiceAdjustmentRequest(
        type="additional_charge", amount=Decimal("750000"), description="Extra page"
    )
    result = compute_adjustment(3_000_000, 330_000, request)

    assert result.new_subtotal == Decimal("3750000")
    assert result.new_tax_amount == Decimal("330000")
    assert result.new_total == result.new_subtotal + result.new_tax_amount


def test_tax_adjustment_modes() -> None:
    request = InvoiceAdjustmentRequest(
        type="tax_adjustment", amount=Decimal("110000"), description="PPN correction"
    )

    on_subtotal = compute_adjustment(1_000_000, 0, request)
    on_tax = compute_adjustment(1_000_000, 0, request, tax_adjustment_mode="tax_amount")

    assert on_subtotal.new_subtotal == Decimal("1110000")
    assert on_subtotal.new_tax_amount == Decimal("0")
    assert on_tax.new_subtotal == Decimal("1000000")
    assert on_tax.new_tax_amount == Decimal("110000")
    assert on_subtotal.new_total == on_tax.new_total == Decimal("1110000")


@pytest.mark.parametrize("description", ["", "   "])
def test_adjustment_requires_description(description: str) -> None:
    request = InvoiceAdjustmentRequest(amount=Decimal("1000"), description=description)

    with pytest.raises(ValidationError) as excinfo:
        compute_adjustment(1_000_000, 0, request)
    assert excinfo.value.field == "description"


def test_out_of_range_inputs_are_clamped() -> None:
    negative = InvoiceAdjustmentRequest(amount=Decimal("-500"), description="Typo")
    too_much = InvoiceAdjustmentRequest(
        apply_as="percentage", percentage=Decimal("150"), description="All"
    )

    assert compute_adjustment(1_000, 0, negative).new_subtotal == Decimal("1000")
    assert compute_adjustment(1_000, 0, too_much).new_subtotal == Decimal("0")


def test_build_adjustment_note_omits_blank_reason() -> None:
    assert build_adjustment_note(" Loyalty discount ", "  ") == "Loyalty discount"
    assert build_adjustment_note("Rush fee", "Deadline moved") == "Rush fee - Deadline moved"


def _invoice(due: date, status: str) -> Invoice:
    return Invoice(
        id="IVC-1",
        invoice_number="INV-202601-0001",
        issue_date=date(2026, 1, 1),
        due_date=due,
        status=status,
        subtotal=Decimal("1000000"),
        total_amount=Decimal("1000000"),
    )


def test_overdue_is_derived_from_due_date_and_status() -> None:
    today = date(2026, 2, 1)

    assert is_overdue(_invoice(date(2026, 1, 31), "sent"), today)
    assert is_overdue(_invoice(date(2026, 1, 31), "draft"), today)
    assert not is_overdue(_invoice(date(2026, 1, 31), "paid"), today)
    assert not is_overdue(_invoice(date(2026, 2, 1), "sent"), today)


def test_tax_rate_label() -> None:
    assert tax_rate_label(1_000_000, 110_000) == "11%"
    assert tax_rate_label(0, 0) == "0%"


def test_downpayment_invoice_requires_positive_percentage() -> None:
    with pytest.raises(ValidationError) as excinfo:
        compute_invoice_amounts(10_000_000, "downpayment", downpayment_percentage=0)
    assert excinfo.value.field == "downpayment_percentage"

    assert compute_invoice_amounts(10_000_000, "full", downpayment_percentage=0).subtotal == Decimal("10000000")
    assert compute_invoice_amounts(10_000_000, "downpayment", downpayment_percentage=100).subtotal == Decimal("10000000")
