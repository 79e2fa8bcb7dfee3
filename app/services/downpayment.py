from __future__ import annotations

from app.schemas.order import DownpaymentBreakdown
from app.services.exceptions import ValidationError
from app.services.money import ZERO, Number, percentage_of, to_decimal

# Quick-pick values offered on the order form; other integers in 0..100 are accepted.
ALLOWED_DOWNPAYMENT_PERCENTAGES = (20, 30, 40, 50)


def validate_percentage(percentage: int) -> int:
    if percentage < 0 or percentage > 100:
        raise ValidationError(
            "Downpayment percentage must be between 0 and 100",
            field="downpayment_percentage",
        )
    return percentage


def calculate_downpayment(
    base_price: Number, percentage: int, *, enabled: bool = True
) -> DownpaymentBreakdown:
    """Split ``base_price`` into the downpayment and the remaining balance."""

    if not enabled:
        return DownpaymentBreakdown(downpayment_amount=ZERO, remaining_amount=ZERO)

    validate_percentage(percentage)
    base = to_decimal(base_price)
    downpayment = percentage_of(base, percentage)
    return DownpaymentBreakdown(
        downpayment_amount=downpayment,
        remaining_amount=base - downpayment,
    )
