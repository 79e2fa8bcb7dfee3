import os
import sys
from decimal import Decimal

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.services.money import (
    clamp_non_negative,
    clamp_percentage,
    format_currency,
    percentage_of,
    round_currency,
    to_decimal,
)


def test_to_decimal_avoids_float_artefacts() -> None:
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal(None) == Decimal("0")
    assert to_decimal("2500000") == Decimal("2500000")


def test_percentage_of_rounds_half_up_to_whole_units() -> None:
    assert percentage_of(10_000_000, 30) == Decimal("3000000")
    assert percentage_of(5, 50) == Decimal("3")
    assert percentage_of(999, 33) == Decimal("330")
    assert percentage_of(0, 40) == Decimal("0")


def test_round_currency_returns_integral_decimal() -> None:
    assert round_currency(Decimal("1499.5")) == Decimal("1500")
    assert round_currency(Decimal("1499.49")) == Decimal("1499")


def test_clamps() -> None:
    assert clamp_non_negative(-250) == Decimal("0")
    assert clamp_non_negative(250) == Decimal("250")
    assert clamp_percentage(-5) == Decimal("0")
    assert clamp_percentage(150) == Decimal("100")
    assert clamp_percentage(Decimal("12.5")) == Decimal("12.5")


def test_format_currency_uses_indonesian_grouping() -> None:
    assert format_currency(1_000_000) == "Rp 1.000.000"
    assert format_currency(Decimal("950")) == "Rp 950"
    assert format_currency(-5000) == "-Rp 5.000"
    assert format_currency(1234567, prefix="") == "1.234.567"
