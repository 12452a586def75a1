# src/wm_order/api/router.py
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.wm_common.database import get_db_session
from src.wm_common.response import ApiResponse, success_response
from src.wm_gateway.auth.dependencies import (
    Principal,
    get_current_user,
    require_retailer,
    require_wholesaler,
)
from src.wm_order.application.schemas import UpdateOrderStatusRequest
from src.wm_order.application.service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])
seller_router = APIRouter(prefix="/seller/orders", tags=["seller"])

_service = OrderService()


@router.get("")
async def list_orders(
    current_user: Annotated[Principal, Depends(require_retailer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    status: str | None = Query(None, description="Comma-separated status filter"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    cursor: str | None = Query(None, description="Pagination cursor (order ID)"),
) -> ApiResponse:
    data = await _service.list_orders(db, current_user.user_id, status, limit, cursor)
    return success_response(data.model_dump(mode="json"), request)


@router.get("/{order_id}")
async def get_order(
    order_id: str,
    current_user: Annotated[Principal, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_order(db, current_user.user_id, order_id)
    return success_response(data.model_dump(mode="json"), request)


@router.post("/{order_id}/cancel")
async def cancel_order(
    order_id: str,
    current_user: Annotated[Principal, Depends(require_retailer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.cancel_order(db, current_user.user_id, order_id)
    return success_response(data.model_dump(), request)


@router.post("/{order_id}/confirm-purchase")
async def confirm_purchase(
    order_id: str,
    current_user: Annotated[Principal, Depends(require_retailer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.confirm_purchase(db, current_user.user_id, order_id)
    return success_response(data.model_dump(), request)


@seller_router.patch("/{order_id}/status")
async def update_order_status(
    order_id: str,
    body: UpdateOrderStatusRequest,
    current_user: Annotated[Principal, Depends(require_wholesaler)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.update_status_by_seller(
        db, current_user.user_id, order_id, body.status
    )
    return success_response(data.model_dump(mode="json"), request)
