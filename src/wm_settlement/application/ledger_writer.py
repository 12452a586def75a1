"""LedgerWriter: the single sink that creates an order's Settlement + Payment.

Called from two triggers:
  * payment approval (per materialized order line)
  * buyer purchase confirmation

Idempotent on order_id. The Settlement commit and the Payment commit are
separate: a failed Payment write leaves the Settlement in place and is
reported as a warning, never as an error.
"""

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.wm_common.datetime_utils import business_now
from src.wm_common.enums import PaymentStatus, SettlementStatus
from src.wm_common.errors import OrderNotFoundError, PersistenceError
from src.wm_common.id_generator import generate_id
from src.wm_order.domain.repository import OrderRepositoryProtocol
from src.wm_order.infrastructure.persistence import OrderRepository
from src.wm_settlement.domain.calculator import calculate_settlement
from src.wm_settlement.domain.models import LedgerResult, Payment, Settlement
from src.wm_settlement.domain.repository import SettlementRepositoryProtocol
from src.wm_settlement.infrastructure.persistence import SettlementRepository

logger = logging.getLogger(__name__)


class LedgerWriter:
    def __init__(
        self,
        repo: SettlementRepositoryProtocol | None = None,
        order_repo: OrderRepositoryProtocol | None = None,
    ) -> None:
        self._repo: SettlementRepositoryProtocol = repo or SettlementRepository()
        self._orders: OrderRepositoryProtocol = order_repo or OrderRepository()

    async def existing_for_order(self, db: AsyncSession, order_id: str) -> LedgerResult | None:
        """The ledger rows already recorded for an order, or None; never writes."""
        settlement = await self._repo.get_by_order_id(order_id, db)
        if settlement is None:
            return None
        payment = await self._repo.get_payment_by_order_id(order_id, db)
        return LedgerResult(settlement=settlement, payment=payment, created=False)

    async def record_for_order(
        self,
        db: AsyncSession,
        order_id: str,
        payment_method: str = "card",
        now: datetime | None = None,
    ) -> LedgerResult:
        existing = await self.existing_for_order(db, order_id)
        if existing is not None:
            logger.info(
                "Settlement already exists: order=%s settlement=%s",
                order_id,
                existing.settlement.id,
            )
            return existing

        order = await self._orders.get_by_id(order_id, db)
        if order is None:
            raise OrderNotFoundError(order_id)

        calc = calculate_settlement(
            order.total_amount,
            settings.PLATFORM_FEE_RATE,
            settings.PAYOUT_LEAD_BUSINESS_DAYS,
            now or business_now(),
        )
        candidate = Settlement(
            id=generate_id(),
            order_id=order.id,
            seller_id=order.seller_id,
            order_amount=calc.order_amount,
            platform_fee_rate=calc.platform_fee_rate,
            platform_fee=calc.platform_fee,
            seller_amount=calc.seller_amount,
            scheduled_payout_at=calc.scheduled_payout_at,
            status=SettlementStatus.PENDING.value,
        )

        try:
            settlement = await self._repo.insert_settlement(candidate, db)
            if settlement is None:
                # Lost the race on settlements.order_id
                settlement = await self._repo.get_by_order_id(order_id, db)
            await db.commit()
            if settlement is None:
                raise PersistenceError(f"Settlement for order {order_id} vanished after conflict")
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.error("Settlement insert failed: order=%s: %s", order_id, exc)
            raise PersistenceError(f"Failed to record settlement for order {order_id}") from exc

        if settlement.id != candidate.id:
            logger.info("Settlement created concurrently: order=%s", order_id)
            payment = await self._repo.get_payment_by_order_id(order_id, db)
            return LedgerResult(settlement=settlement, payment=payment, created=False)

        logger.info(
            "Settlement created: order=%s amount=%d fee=%d seller=%d payout=%s",
            order_id,
            settlement.order_amount,
            settlement.platform_fee,
            settlement.seller_amount,
            settlement.scheduled_payout_at.isoformat(),
        )

        payment = Payment(
            id=generate_id(),
            order_id=order.id,
            settlement_id=settlement.id,
            payment_key=order.payment_key,
            method=payment_method,
            amount=order.total_amount,
            status=PaymentStatus.PAID.value,
            paid_at=order.paid_at,
        )
        try:
            payment = await self._repo.insert_payment(payment, db)
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.exception("Payment record failed after settlement: order=%s", order_id)
            return LedgerResult(
                settlement=settlement,
                payment=None,
                created=True,
                warning=f"Settlement recorded but payment record failed for order {order.order_number}",
            )

        return LedgerResult(settlement=settlement, payment=payment, created=True)
