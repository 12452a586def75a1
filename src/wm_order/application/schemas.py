# src/wm_order/application/schemas.py
from datetime import datetime

from pydantic import BaseModel

from src.wm_order.domain.models import Order


class OrderResponse(BaseModel):
    id: str
    order_number: str
    order_group_id: str
    buyer_id: str
    seller_id: str
    product_id: str
    quantity: int
    unit_price: int
    shipping_fee: int
    total_amount: int
    delivery_address: str
    delivery_option: str
    delivery_time: str | None = None
    delivery_note: str | None = None
    status: str
    paid_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            order_number=order.order_number,
            order_group_id=order.order_group_id,
            buyer_id=order.buyer_id,
            seller_id=order.seller_id,
            product_id=order.product_id,
            quantity=order.quantity,
            unit_price=order.unit_price,
            shipping_fee=order.shipping_fee,
            total_amount=order.total_amount,
            delivery_address=order.delivery_address,
            delivery_option=order.delivery_option,
            delivery_time=order.delivery_time,
            delivery_note=order.delivery_note,
            status=order.status,
            paid_at=order.paid_at,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderListResponse(BaseModel):
    items: list[OrderResponse]
    next_cursor: str | None
    has_more: bool


class CancelOrderResponse(BaseModel):
    order_id: str
    order_number: str
    status: str
    restored_quantity: int


class ConfirmPurchaseResponse(BaseModel):
    order_id: str
    settlement_id: str
    payment_id: str | None
    already_confirmed: bool
    warning: str | None = None


class UpdateOrderStatusRequest(BaseModel):
    # Checked against the state machine in the service so that bad values
    # surface as typed errors rather than FastAPI 422s.
    status: str
