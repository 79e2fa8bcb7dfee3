"""Currency arithmetic shared by the downpayment and invoice calculations.

Amounts are whole currency units (the rupiah has no minor unit on display), so
every derived amount is rounded half-up to an integral ``Decimal``.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[Decimal, int, float, str]

ZERO = Decimal("0")
HUNDRED = Decimal("100")
_WHOLE_UNIT = Decimal("1")


def to_decimal(value: Number | None) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # str() avoids binary float artefacts such as 0.1 -> 0.1000000000000000055...
        return Decimal(str(value))
    return Decimal(value)


def round_currency(value: Number) -> Decimal:
    return to_decimal(value).quantize(_WHOLE_UNIT, rounding=ROUND_HALF_UP)


def clamp_non_negative(value: Number) -> Decimal:
    amount = to_decimal(value)
    return amount if amount > ZERO else ZERO


def clamp_percentage(pct: Number) -> Decimal:
    value = to_decimal(pct)
    if value < ZERO:
        return ZERO
    if value > HUNDRED:
        return HUNDRED
    return value


def percentage_of(base: Number, pct: Number) -> Decimal:
    """Return ``pct`` percent of ``base`` rounded to whole currency units."""

    return round_currency(to_decimal(base) * to_decimal(pct) / HUNDRED)


def format_currency(amount: Number, prefix: str = "Rp") -> str:
    """Format an amount the way the id-ID locale does: ``Rp 1.234.567``."""

    value = round_currency(amount)
    sign = "-" if value < ZERO else ""
    grouped = f"{abs(int(value)):,}".replace(",", ".")
    return f"{sign}{prefix} {grouped}" if prefix else f"{sign}{grouped}"
