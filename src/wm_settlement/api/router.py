"""Settlement read endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.wm_common.database import get_db_session
from src.wm_common.response import ApiResponse, success_response
from src.wm_gateway.auth.dependencies import Principal, get_current_user
from src.wm_settlement.application.service import SettlementQueryService

router = APIRouter(prefix="/settlements", tags=["settlements"])

_service = SettlementQueryService()


@router.get("/orders/{order_id}")
async def get_order_settlement(
    order_id: str,
    current_user: Annotated[Principal, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_for_order(db, current_user, order_id)
    return success_response(data.model_dump(mode="json"), request)
