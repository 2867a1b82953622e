from decimal import ROUND_HALF_UP, Decimal

HUNDRED = Decimal("100")
ZERO = Decimal("0")


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # floats go through str() so 0.1 stays 0.1 instead of its binary expansion
    return Decimal(str(value))


def round_currency(value: Decimal | int | float) -> int:
    """Round to a whole currency unit, half up."""
    return int(to_decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def percent_of(amount: Decimal | int, percent: Decimal | int | float) -> Decimal:
    return to_decimal(amount) * to_decimal(percent) / HUNDRED


def display_amount(value: Decimal) -> Decimal:
    """Normalize an intermediate figure to two places for display only."""
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
