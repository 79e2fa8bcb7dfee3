import asyncio
import os
import sys
from decimal import Decimal

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.mcp_server import (
    AdjustmentPreviewInput,
    DownpaymentPreviewInput,
    EligibilityInput,
    downpayment_preview,
    invoice_adjustment_preview,
    order_invoice_eligibility,
    ping,
)
from app.schemas.invoice import InvoiceAdjustmentRequest
from app.services.mock_store import get_mock_store, reset_mock_store


@pytest.fixture(autouse=True)
def _reset_store() -> None:
    reset_mock_store()
    yield
    reset_mock_store()


def test_downpayment_preview_tool_formats_amounts() -> None:
    out = asyncio.run(
        downpayment_preview(DownpaymentPreviewInput(base_price=Decimal("10000000"), percentage=30))
    )

    assert out.downpayment_amount == Decimal("3000000")
    assert out.remaining_display == "Rp 7.000.000"


def test_invoice_adjustment_preview_tool() -> None:
    out = asyncio.run(
        invoice_adjustment_preview(
            AdjustmentPreviewInput(
                subtotal=Decimal("1000000"),
                adjustment=InvoiceAdjustmentRequest(
                    type="discount", apply_as="percentage", percentage=Decimal("10"), description="Promo"
                ),
            )
        )
    )

    assert out.new_subtotal == Decimal("900000")
    assert out.new_total == Decimal("900000")


def test_order_invoice_eligibility_tool() -> None:
    store = get_mock_store()
    pending = asyncio.run(
        store.create("orders", {"customer_name": "A", "customer_email": "a@example.com", "status": "pending"})
    )
    completed = asyncio.run(
        store.create("orders", {"customer_name": "B", "customer_email": "b@example.com", "status": "completed"})
    )

    assert asyncio.run(order_invoice_eligibility(EligibilityInput(order_id=pending["id"]))).can_invoice is False
    assert asyncio.run(order_invoice_eligibility(EligibilityInput(order_id=completed["id"]))).can_invoice is True
    missing = asyncio.run(order_invoice_eligibility(EligibilityInput(order_id="ORD-99999")))
    assert missing.found is False


def test_ping() -> None:
    assert asyncio.run(ping("hello")) == "pong: hello"
