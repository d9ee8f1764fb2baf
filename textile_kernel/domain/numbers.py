"""Rounding helpers shared by the engines. Decimal arithmetic, half-up."""

from decimal import ROUND_HALF_UP, Decimal

_WHOLE = Decimal("1")
_CENTS = Decimal("0.01")


def round_half_up(numerator: int | Decimal, denominator: int | Decimal = 1) -> int:
    """``numerator / denominator`` rounded half away from zero to an int.

    A zero denominator yields 0.
    """
    if denominator == 0:
        return 0
    value = Decimal(numerator) / Decimal(denominator)
    return int(value.quantize(_WHOLE, rounding=ROUND_HALF_UP))


def percentage(part: int, whole: int) -> Decimal:
    """``part`` as a percentage of ``whole`` to two places; 0 when whole is 0."""
    if whole == 0:
        return Decimal("0.00")
    return (Decimal(part) * 100 / Decimal(whole)).quantize(_CENTS, rounding=ROUND_HALF_UP)


def whole_percentage(part: int, whole: int) -> int:
    """Rounded whole-number percentage; 0 when whole is 0."""
    if whole == 0:
        return 0
    return round_half_up(part * 100, whole)


def floor_percentage(part: int, whole: int) -> int:
    """Truncated whole-number percentage; 0 when whole is 0."""
    if whole <= 0:
        return 0
    return (part * 100) // whole
