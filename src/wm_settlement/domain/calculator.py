"""Settlement calculation: pure function, no I/O.

platform_fee  = floor(order_amount x rate)   (platform never loses)
seller_amount = order_amount - platform_fee  (so the two always sum exactly)
scheduled_payout_at = now + lead_days business days (Mon-Fri)
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from src.wm_common.datetime_utils import add_business_days, business_now
from src.wm_common.errors import ConfigurationError, ValidationError
from src.wm_common.money import floor_fee, to_rate


@dataclass(frozen=True)
class SettlementCalculation:
    order_amount: int
    platform_fee_rate: Decimal
    platform_fee: int
    seller_amount: int
    scheduled_payout_at: datetime


def calculate_settlement(
    order_amount: int,
    platform_fee_rate: Decimal | float | str,
    payout_lead_days: int,
    now: datetime | None = None,
) -> SettlementCalculation:
    rate = to_rate(platform_fee_rate)
    if not (Decimal(0) <= rate <= Decimal(1)):
        raise ConfigurationError(f"Platform fee rate must be within [0, 1], got {rate}")
    if order_amount < 0:
        raise ValidationError(f"Order amount must be >= 0, got {order_amount}")
    if payout_lead_days < 0:
        raise ValidationError(f"Payout lead time must be >= 0, got {payout_lead_days}")

    fee = floor_fee(order_amount, rate)
    start = now or business_now()
    return SettlementCalculation(
        order_amount=order_amount,
        platform_fee_rate=rate,
        platform_fee=fee,
        seller_amount=order_amount - fee,
        scheduled_payout_at=add_business_days(start, payout_lead_days),
    )
