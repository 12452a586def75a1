# src/wm_settlement/application/schemas.py
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from src.wm_common.money import won_to_display
from src.wm_settlement.domain.models import Payment, Settlement


class PaymentResponse(BaseModel):
    id: str
    payment_key: str | None
    method: str
    amount: int
    status: str
    paid_at: datetime | None

    @classmethod
    def from_domain(cls, payment: Payment) -> "PaymentResponse":
        return cls(
            id=payment.id,
            payment_key=payment.payment_key,
            method=payment.method,
            amount=payment.amount,
            status=payment.status,
            paid_at=payment.paid_at,
        )


class SettlementResponse(BaseModel):
    id: str
    order_id: str
    seller_id: str
    order_amount: int
    order_amount_display: str
    platform_fee_rate: Decimal
    platform_fee: int
    platform_fee_display: str
    seller_amount: int
    seller_amount_display: str
    status: str
    scheduled_payout_at: datetime
    completed_at: datetime | None
    payment: PaymentResponse | None = None

    @classmethod
    def from_domain(
        cls, settlement: Settlement, payment: Payment | None = None
    ) -> "SettlementResponse":
        return cls(
            id=settlement.id,
            order_id=settlement.order_id,
            seller_id=settlement.seller_id,
            order_amount=settlement.order_amount,
            order_amount_display=won_to_display(settlement.order_amount),
            platform_fee_rate=settlement.platform_fee_rate,
            platform_fee=settlement.platform_fee,
            platform_fee_display=won_to_display(settlement.platform_fee),
            seller_amount=settlement.seller_amount,
            seller_amount_display=won_to_display(settlement.seller_amount),
            status=settlement.status,
            scheduled_payout_at=settlement.scheduled_payout_at,
            completed_at=settlement.completed_at,
            payment=PaymentResponse.from_domain(payment) if payment else None,
        )
