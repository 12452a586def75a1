"""Checkout domain models: pure dataclasses, no SQLAlchemy dependency."""
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class CartLine:
    """Client-submitted line. Never trusted; only reconciled."""
    product_id: str
    quantity: int
    unit_price: int  # client-claimed


@dataclass(frozen=True)
class ValidatedLine:
    """Server-derived line: input to order materialization, never persisted."""
    product_id: str
    product_name: str
    quantity: int
    server_unit_price: int
    claimed_unit_price: int
    seller_id: str
    shipping_fee: int
    stock_snapshot: int

    @property
    def line_amount(self) -> int:
        return self.server_unit_price * self.quantity

    @property
    def price_changed(self) -> bool:
        return self.server_unit_price != self.claimed_unit_price


@dataclass(frozen=True)
class CheckoutValidation:
    order_group_id: str
    order_name: str
    server_total: int
    lines: list[ValidatedLine]


@dataclass
class CartItem:
    id: str
    buyer_id: str
    product_id: str
    variant_id: str | None
    quantity: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
