# src/wm_payment/application/schemas.py
from typing import Literal

from pydantic import BaseModel

from src.wm_checkout.application.schemas import CheckoutItem


class ConfirmPaymentRequest(BaseModel):
    payment_key: str
    order_group_id: str
    amount: int
    items: list[CheckoutItem]
    delivery_option: Literal["dawn", "normal"] = "normal"
    delivery_address: str = ""
    delivery_time: str | None = None
    delivery_note: str | None = None


class ConfirmPaymentResponse(BaseModel):
    order_numbers: list[str]
    order_ids: list[str]
    settlement_ids: list[str]
    payment_ids: list[str]
    warnings: list[str]
    idempotent_hit: bool
