"""Domain models for wm_settlement: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class Settlement:
    id: str
    order_id: str                 # unique: at most one settlement per order
    seller_id: str
    order_amount: int             # won
    platform_fee_rate: Decimal
    platform_fee: int             # won, floor(order_amount x rate)
    seller_amount: int            # won, order_amount - platform_fee
    scheduled_payout_at: datetime
    status: str = "pending"
    completed_at: datetime | None = None
    created_at: datetime | None = None


@dataclass
class Payment:
    id: str
    order_id: str
    settlement_id: str
    payment_key: str | None
    method: str
    amount: int                   # won
    status: str = "paid"
    paid_at: datetime | None = None
    created_at: datetime | None = None


@dataclass
class LedgerResult:
    settlement: Settlement
    payment: Payment | None
    created: bool                 # False: settlement already existed
    warning: str | None = None
