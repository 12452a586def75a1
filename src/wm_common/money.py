"""Integer money utilities.

All prices, amounts and fees are int in the smallest currency unit (won).
Rates are Decimal so that fee rounding is exact.
"""

from decimal import ROUND_FLOOR, Decimal


def to_rate(rate: Decimal | float | str) -> Decimal:
    """Normalize a fee rate; floats go through str() to avoid binary noise."""
    if isinstance(rate, Decimal):
        return rate
    return Decimal(str(rate))


def floor_fee(amount: int, rate: Decimal) -> int:
    """fee = floor(amount x rate). Rounding always favours the platform."""
    if amount == 0 or rate == 0:
        return 0
    return int((Decimal(amount) * rate).to_integral_value(rounding=ROUND_FLOOR))


def won_to_display(amount: int) -> str:
    """Convert won to display string: 32000 -> '₩32,000', -1200 -> '-₩1,200'."""
    if amount < 0:
        return f"-₩{-amount:,}"
    return f"₩{amount:,}"
