"""Payment confirmation endpoint: retailer only."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.wm_common.database import get_db_session
from src.wm_common.response import ApiResponse, success_response
from src.wm_gateway.auth.dependencies import Principal, require_retailer
from src.wm_payment.application.schemas import ConfirmPaymentRequest
from src.wm_payment.application.service import PaymentConfirmationService

router = APIRouter(prefix="/payments", tags=["payments"])

_service = PaymentConfirmationService()


@router.post("/confirm")
async def confirm_payment(
    body: ConfirmPaymentRequest,
    current_user: Annotated[Principal, Depends(require_retailer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.confirm(db, current_user.user_id, body)
    return success_response(data.model_dump(), request)
