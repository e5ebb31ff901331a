# core/money.py

from __future__ import annotations

from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def money(v) -> Decimal:
    return Decimal(str(v if v is not None else "0.00")).quantize(
        TWOPLACES, rounding=ROUND_HALF_UP
    )


def round_half_up(v) -> int:
    """
    Round to the nearest integer; ties go toward +infinity.

    round_half_up(15.5) == 16, round_half_up(-2.5) == -2
    """
    d = Decimal(str(v))
    return int((d + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR))


def percentage_of(part, whole) -> int:
    whole = Decimal(str(whole))
    if whole == 0:
        return 0
    return round_half_up(Decimal(str(part)) / whole * 100)
