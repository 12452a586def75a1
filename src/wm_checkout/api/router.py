"""Checkout validation and cart endpoints: retailer only."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.wm_checkout.application.schemas import (
    AddCartItemRequest,
    CartItemResponse,
    CartResponse,
    CheckoutValidationResponse,
    UpdateCartItemRequest,
    ValidateCheckoutRequest,
)
from src.wm_checkout.application.service import CartService, CheckoutService
from src.wm_common.database import get_db_session
from src.wm_common.response import ApiResponse, success_response
from src.wm_gateway.auth.dependencies import Principal, require_retailer

checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])
cart_router = APIRouter(prefix="/cart", tags=["cart"])

_checkout = CheckoutService()
_cart = CartService()


@checkout_router.post("/validate")
async def validate_checkout(
    body: ValidateCheckoutRequest,
    current_user: Annotated[Principal, Depends(require_retailer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    validation = await _checkout.validate(
        db,
        current_user.user_id,
        [item.to_line() for item in body.items],
        body.total_amount,
    )
    data = CheckoutValidationResponse.from_domain(validation)
    return success_response(data.model_dump(), request)


@cart_router.get("")
async def get_cart(
    current_user: Annotated[Principal, Depends(require_retailer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    items = await _cart.list_items(db, current_user.user_id)
    data = CartResponse(items=[CartItemResponse.from_domain(i) for i in items])
    return success_response(data.model_dump(mode="json"), request)


@cart_router.post("/items", status_code=201)
async def add_cart_item(
    body: AddCartItemRequest,
    current_user: Annotated[Principal, Depends(require_retailer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    item = await _cart.add_item(
        db, current_user.user_id, body.product_id, body.variant_id, body.quantity
    )
    data = CartItemResponse.from_domain(item)
    return success_response(data.model_dump(mode="json"), request)


@cart_router.patch("/items/{item_id}")
async def update_cart_item(
    item_id: str,
    body: UpdateCartItemRequest,
    current_user: Annotated[Principal, Depends(require_retailer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    item = await _cart.update_quantity(db, current_user.user_id, item_id, body.quantity)
    data = CartItemResponse.from_domain(item)
    return success_response(data.model_dump(mode="json"), request)


@cart_router.delete("/items/{item_id}")
async def remove_cart_item(
    item_id: str,
    current_user: Annotated[Principal, Depends(require_retailer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    await _cart.remove_item(db, current_user.user_id, item_id)
    return success_response({"removed": item_id}, request)


@cart_router.delete("")
async def clear_cart(
    current_user: Annotated[Principal, Depends(require_retailer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    removed = await _cart.clear(db, current_user.user_id)
    return success_response({"removed_count": removed}, request)
