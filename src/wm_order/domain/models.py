"""Order domain model: pure dataclass, no SQLAlchemy dependency.

One Order = one product line. A multi-item checkout produces several Orders
sharing payment_key and order_group_id.
"""
from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Order:
    id: str
    order_number: str        # gateway-facing, unique
    order_group_id: str      # correlation key of the checkout
    buyer_id: str
    seller_id: str
    product_id: str
    quantity: int
    unit_price: int          # won, server price at checkout
    shipping_fee: int        # won
    delivery_address: str
    delivery_option: str = "normal"
    delivery_time: str | None = None
    delivery_note: str | None = None
    payment_key: str | None = None
    paid_at: datetime | None = None
    status: str = "pending"
    total_amount: int = field(init=False)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.total_amount = self.unit_price * self.quantity + self.shipping_fee
