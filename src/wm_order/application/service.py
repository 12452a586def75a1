"""OrderService: buyer cancellation, purchase confirmation, seller workflow.

Cancellation is the compensation of a paid order: stock is restored and the
status is moved with a compare-and-set, both in ONE transaction. If the CAS
loses (a concurrent cancel or ship), the restock is rolled back too, so stock
is never restored twice.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.wm_common.enums import OrderStatus
from src.wm_common.errors import (
    AppError,
    ForbiddenError,
    IllegalTransitionError,
    OrderNotFoundError,
    PersistenceError,
    ValidationError,
)
from src.wm_common.id_generator import normalize_id
from src.wm_inventory.application.service import InventoryAdjuster
from src.wm_order.application.schemas import (
    CancelOrderResponse,
    ConfirmPurchaseResponse,
    OrderListResponse,
    OrderResponse,
)
from src.wm_order.domain.models import Order
from src.wm_order.domain.repository import OrderRepositoryProtocol
from src.wm_order.domain.state_machine import (
    ensure_purchase_confirmable,
    ensure_transition,
    sources_of,
)
from src.wm_order.infrastructure.persistence import OrderRepository
from src.wm_settlement.application.ledger_writer import LedgerWriter

logger = logging.getLogger(__name__)

_STATUS_VALUES = frozenset(s.value for s in OrderStatus)
SELLER_TARGETS = frozenset({OrderStatus.CONFIRMED, OrderStatus.SHIPPED, OrderStatus.COMPLETED})


class OrderService:
    def __init__(
        self,
        repo: OrderRepositoryProtocol | None = None,
        adjuster: InventoryAdjuster | None = None,
        ledger_writer: LedgerWriter | None = None,
    ) -> None:
        self._repo: OrderRepositoryProtocol = repo or OrderRepository()
        self._adjuster = adjuster or InventoryAdjuster()
        self._ledger = ledger_writer or LedgerWriter(order_repo=self._repo)

    async def _load(self, db: AsyncSession, order_id: str) -> Order:
        try:
            canonical = normalize_id(order_id)
        except ValueError:
            raise OrderNotFoundError(order_id) from None
        order = await self._repo.get_by_id(canonical, db)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    # ------------------------------------------------------------------
    # Buyer
    # ------------------------------------------------------------------

    async def cancel_order(
        self, db: AsyncSession, buyer_id: str, order_id: str
    ) -> CancelOrderResponse:
        order = await self._load(db, order_id)
        if order.buyer_id != buyer_id:
            raise ForbiddenError("Only the buyer can cancel this order")
        target = ensure_transition(order.status, OrderStatus.CANCELLED.value)

        try:
            await self._adjuster.increment(db, order.product_id, order.quantity)
            updated = await self._repo.transition_status(
                order.id, sources_of(target), target.value, db
            )
            if updated is None:
                raise IllegalTransitionError(order.status, target.value, "already cancelled")
            await db.commit()
        except AppError:
            await db.rollback()
            raise
        except SQLAlchemyError as exc:
            await db.rollback()
            raise PersistenceError(f"Failed to cancel order {order_id}") from exc

        logger.info(
            "Order cancelled: order=%s product=%s restored=%d",
            order.order_number,
            order.product_id,
            order.quantity,
        )
        return CancelOrderResponse(
            order_id=updated.id,
            order_number=updated.order_number,
            status=updated.status,
            restored_quantity=order.quantity,
        )

    async def confirm_purchase(
        self, db: AsyncSession, buyer_id: str, order_id: str
    ) -> ConfirmPurchaseResponse:
        order = await self._load(db, order_id)
        if order.buyer_id != buyer_id:
            raise ForbiddenError("Only the buyer can confirm this purchase")
        ensure_purchase_confirmable(order.status)

        result = await self._ledger.record_for_order(db, order.id)
        if not result.created:
            logger.info("Purchase already confirmed: order=%s", order.order_number)
        return ConfirmPurchaseResponse(
            order_id=order.id,
            settlement_id=result.settlement.id,
            payment_id=result.payment.id if result.payment else None,
            already_confirmed=not result.created,
            warning=result.warning,
        )

    async def get_order(self, db: AsyncSession, user_id: str, order_id: str) -> OrderResponse:
        order = await self._load(db, order_id)
        if user_id not in (order.buyer_id, order.seller_id):
            raise ForbiddenError("Not a party to this order")
        return OrderResponse.from_domain(order)

    async def list_orders(
        self,
        db: AsyncSession,
        buyer_id: str,
        status: str | None,
        limit: int,
        cursor: str | None,
    ) -> OrderListResponse:
        statuses = None
        if status:
            statuses = [s.strip() for s in status.split(",") if s.strip()]
            unknown = [s for s in statuses if s not in _STATUS_VALUES]
            if unknown:
                raise ValidationError(f"Unknown order status: {', '.join(unknown)}")
        if cursor is not None:
            try:
                cursor = normalize_id(cursor)
            except ValueError:
                raise ValidationError("Malformed cursor") from None

        rows = await self._repo.list_by_buyer(buyer_id, statuses, limit + 1, cursor, db)
        has_more = len(rows) > limit
        items = rows[:limit]
        return OrderListResponse(
            items=[OrderResponse.from_domain(o) for o in items],
            next_cursor=items[-1].id if has_more and items else None,
            has_more=has_more,
        )

    # ------------------------------------------------------------------
    # Seller
    # ------------------------------------------------------------------

    async def update_status_by_seller(
        self, db: AsyncSession, seller_id: str, order_id: str, status: str
    ) -> OrderResponse:
        if status not in _STATUS_VALUES:
            raise ValidationError(f"Unknown order status: {status}")
        order = await self._load(db, order_id)
        if order.seller_id != seller_id:
            raise ForbiddenError("Only the seller can update this order")
        if OrderStatus(status) not in SELLER_TARGETS:
            raise IllegalTransitionError(order.status, status, "invalid status change")
        target = ensure_transition(order.status, status)

        try:
            updated = await self._repo.transition_status(
                order.id, sources_of(target), target.value, db
            )
            if updated is None:
                raise IllegalTransitionError(order.status, target.value, "invalid status change")
            await db.commit()
        except AppError:
            await db.rollback()
            raise
        except SQLAlchemyError as exc:
            await db.rollback()
            raise PersistenceError(f"Failed to update order {order_id}") from exc

        logger.info(
            "Order status updated by seller: order=%s %s → %s",
            order.order_number,
            order.status,
            updated.status,
        )
        return OrderResponse.from_domain(updated)
