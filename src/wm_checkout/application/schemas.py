# src/wm_checkout/application/schemas.py
from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from src.wm_checkout.domain.models import CartItem, CartLine, CheckoutValidation, ValidatedLine


class CheckoutItem(BaseModel):
    product_id: str
    quantity: int
    unit_price: int

    def to_line(self) -> CartLine:
        return CartLine(
            product_id=self.product_id, quantity=self.quantity, unit_price=self.unit_price
        )


class ValidateCheckoutRequest(BaseModel):
    # Shape rules (non-empty, positive total, UUID ids) are enforced by the
    # reconciler so they surface as typed ValidationError, not FastAPI 422s.
    items: list[CheckoutItem]
    delivery_option: Literal["dawn", "normal"] = "normal"
    delivery_address: str = ""
    total_amount: int


class ValidatedItemResponse(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    server_unit_price: int
    claimed_unit_price: int
    price_changed: bool
    seller_id: str
    shipping_fee: int
    stock_snapshot: int

    @classmethod
    def from_domain(cls, line: ValidatedLine) -> "ValidatedItemResponse":
        return cls(
            product_id=line.product_id,
            product_name=line.product_name,
            quantity=line.quantity,
            server_unit_price=line.server_unit_price,
            claimed_unit_price=line.claimed_unit_price,
            price_changed=line.price_changed,
            seller_id=line.seller_id,
            shipping_fee=line.shipping_fee,
            stock_snapshot=line.stock_snapshot,
        )


class CheckoutValidationResponse(BaseModel):
    order_group_id: str
    order_name: str
    server_total: int
    validated_items: list[ValidatedItemResponse]

    @classmethod
    def from_domain(cls, v: CheckoutValidation) -> "CheckoutValidationResponse":
        return cls(
            order_group_id=v.order_group_id,
            order_name=v.order_name,
            server_total=v.server_total,
            validated_items=[ValidatedItemResponse.from_domain(line) for line in v.lines],
        )


class AddCartItemRequest(BaseModel):
    product_id: str
    variant_id: str | None = None
    quantity: int = 1


class UpdateCartItemRequest(BaseModel):
    quantity: int


class CartItemResponse(BaseModel):
    id: str
    product_id: str
    variant_id: str | None
    quantity: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, item: CartItem) -> "CartItemResponse":
        return cls(
            id=item.id,
            product_id=item.product_id,
            variant_id=item.variant_id,
            quantity=item.quantity,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )


class CartResponse(BaseModel):
    items: list[CartItemResponse]
