"""PaymentConfirmationService: confirm with the gateway, then materialize orders.

Flow:
  1. Orders already exist for payment_key -> idempotent short-circuit
     (re-run the ledger writer, which heals a crash before settlement;
     cancelled orders only report ledger rows they already have).
  2. Replay checkout validation with claimed_total = amount.
  3. Gateway confirm. Any failure aborts before a single write.
  4. Per validated line, a saga step of independent commits:
       a. insert Order (pending)        failure or foreign owner -> PersistenceError
       b. decrement stock               failure -> logged, returned as warning
       c. ledger writer (settlement)    payment-row failure -> warning
     Rows written by earlier steps stay committed; the order-group id
     correlates them.
"""

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.wm_checkout.application.service import CheckoutService
from src.wm_common.datetime_utils import utc_now
from src.wm_common.enums import OrderStatus
from src.wm_common.errors import AppError, ForbiddenError, PersistenceError, ValidationError
from src.wm_inventory.application.service import InventoryAdjuster
from src.wm_order.domain.materializer import DeliveryInfo, build_order, plan_steps
from src.wm_order.domain.models import Order
from src.wm_order.domain.repository import OrderRepositoryProtocol
from src.wm_order.infrastructure.persistence import OrderRepository
from src.wm_payment.application.schemas import ConfirmPaymentRequest, ConfirmPaymentResponse
from src.wm_payment.infrastructure.gateway_client import GatewayConfirmation, TossPaymentsClient
from src.wm_settlement.application.ledger_writer import LedgerWriter

logger = logging.getLogger(__name__)


def _paid_at(confirmation: GatewayConfirmation) -> datetime:
    if confirmation.approved_at:
        try:
            return datetime.fromisoformat(confirmation.approved_at)
        except ValueError:
            logger.warning("Unparseable approvedAt from gateway: %r", confirmation.approved_at)
    return utc_now()


class PaymentConfirmationService:
    def __init__(
        self,
        order_repo: OrderRepositoryProtocol | None = None,
        checkout: CheckoutService | None = None,
        gateway: TossPaymentsClient | None = None,
        adjuster: InventoryAdjuster | None = None,
        ledger_writer: LedgerWriter | None = None,
    ) -> None:
        self._orders: OrderRepositoryProtocol = order_repo or OrderRepository()
        self._checkout = checkout or CheckoutService()
        self._gateway = gateway or TossPaymentsClient()
        self._adjuster = adjuster or InventoryAdjuster()
        self._ledger = ledger_writer or LedgerWriter(order_repo=self._orders)

    async def confirm(
        self, db: AsyncSession, buyer_id: str, req: ConfirmPaymentRequest
    ) -> ConfirmPaymentResponse:
        if not req.payment_key.strip():
            raise ValidationError("payment_key is required")
        if not req.order_group_id.strip():
            raise ValidationError("order_group_id is required")

        existing = await self._orders.list_by_payment_key(req.payment_key, db)
        if existing:
            return await self._short_circuit(db, buyer_id, req.payment_key, existing)

        validation = await self._checkout.validate(
            db,
            buyer_id,
            [item.to_line() for item in req.items],
            req.amount,
            order_group_id=req.order_group_id,
        )

        confirmation = await self._gateway.confirm(
            req.payment_key, validation.order_group_id, req.amount
        )
        paid_at = _paid_at(confirmation)
        logger.info(
            "Payment confirmed: group=%s amount=%d method=%s",
            validation.order_group_id,
            confirmation.total_amount,
            confirmation.method,
        )

        delivery = DeliveryInfo(
            address=req.delivery_address,
            option=req.delivery_option,
            time=req.delivery_time,
            note=req.delivery_note,
        )
        response = ConfirmPaymentResponse(
            order_numbers=[],
            order_ids=[],
            settlement_ids=[],
            payment_ids=[],
            warnings=[],
            idempotent_hit=False,
        )

        for step in plan_steps(validation.order_group_id, validation.lines):
            candidate = build_order(
                step, validation.order_group_id, buyer_id, req.payment_key, paid_at, delivery
            )

            # a. order row
            try:
                order = await self._orders.insert(candidate, db)
                await db.commit()
            except SQLAlchemyError as exc:
                await db.rollback()
                logger.error(
                    "Order insert failed: group=%s order=%s: %s",
                    validation.order_group_id,
                    step.order_number,
                    exc,
                )
                raise PersistenceError(f"Failed to create order {step.order_number}") from exc
            if order.payment_key != candidate.payment_key or order.buyer_id != candidate.buyer_id:
                logger.error(
                    "Order number taken by another payment: order=%s payment_key=%s",
                    order.order_number,
                    req.payment_key,
                )
                raise PersistenceError(
                    f"Order number {order.order_number} already belongs to another payment"
                )
            response.order_numbers.append(order.order_number)
            response.order_ids.append(order.id)

            # b. stock; skipped when a concurrent confirmation already owns the row
            if order.id == candidate.id:
                await self._decrement(db, order, response.warnings)
            else:
                logger.info("Order already materialized: order=%s", order.order_number)

            # c. settlement + payment
            result = await self._ledger.record_for_order(
                db, order.id, payment_method=confirmation.method
            )
            response.settlement_ids.append(result.settlement.id)
            if result.payment is not None:
                response.payment_ids.append(result.payment.id)
            if result.warning:
                response.warnings.append(result.warning)

        logger.info(
            "Orders materialized: group=%s orders=%s warnings=%d",
            validation.order_group_id,
            response.order_numbers,
            len(response.warnings),
        )
        return response

    async def _decrement(self, db: AsyncSession, order: Order, warnings: list[str]) -> None:
        try:
            await self._adjuster.decrement(db, order.product_id, order.quantity)
            await db.commit()
        except (AppError, SQLAlchemyError):
            await db.rollback()
            logger.exception(
                "Stock decrement failed for paid order: order=%s product=%s qty=%d",
                order.order_number,
                order.product_id,
                order.quantity,
            )
            warnings.append(f"Stock decrement failed for order {order.order_number}")

    async def _short_circuit(
        self, db: AsyncSession, buyer_id: str, payment_key: str, orders: list[Order]
    ) -> ConfirmPaymentResponse:
        if any(o.buyer_id != buyer_id for o in orders):
            raise ForbiddenError("Payment belongs to another buyer")
        logger.info(
            "Payment already confirmed (idempotent hit): payment_key=%s orders=%s",
            payment_key,
            [o.order_number for o in orders],
        )
        response = ConfirmPaymentResponse(
            order_numbers=[o.order_number for o in orders],
            order_ids=[o.id for o in orders],
            settlement_ids=[],
            payment_ids=[],
            warnings=[],
            idempotent_hit=True,
        )
        for order in orders:
            if order.status == OrderStatus.CANCELLED.value:
                # No new ledger rows for a cancelled order; report what already exists
                result = await self._ledger.existing_for_order(db, order.id)
                if result is None:
                    logger.info(
                        "Skipping settlement for cancelled order: order=%s", order.order_number
                    )
                    continue
            else:
                result = await self._ledger.record_for_order(db, order.id)
            response.settlement_ids.append(result.settlement.id)
            if result.payment is not None:
                response.payment_ids.append(result.payment.id)
            if result.warning:
                response.warnings.append(result.warning)
        return response
