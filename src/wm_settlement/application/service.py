"""Read side of settlements: visible to the order's buyer and seller only."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.wm_common.errors import ForbiddenError, OrderNotFoundError, SettlementNotFoundError
from src.wm_common.id_generator import normalize_id
from src.wm_gateway.auth.dependencies import Principal
from src.wm_order.domain.repository import OrderRepositoryProtocol
from src.wm_order.infrastructure.persistence import OrderRepository
from src.wm_settlement.application.schemas import SettlementResponse
from src.wm_settlement.domain.repository import SettlementRepositoryProtocol
from src.wm_settlement.infrastructure.persistence import SettlementRepository


class SettlementQueryService:
    def __init__(
        self,
        repo: SettlementRepositoryProtocol | None = None,
        order_repo: OrderRepositoryProtocol | None = None,
    ) -> None:
        self._repo: SettlementRepositoryProtocol = repo or SettlementRepository()
        self._orders: OrderRepositoryProtocol = order_repo or OrderRepository()

    async def get_for_order(
        self, db: AsyncSession, principal: Principal, order_id: str
    ) -> SettlementResponse:
        try:
            canonical = normalize_id(order_id)
        except ValueError:
            raise OrderNotFoundError(order_id) from None
        order = await self._orders.get_by_id(canonical, db)
        if order is None:
            raise OrderNotFoundError(order_id)
        if principal.user_id not in (order.buyer_id, order.seller_id):
            raise ForbiddenError("Not a party to this order")

        settlement = await self._repo.get_by_order_id(order.id, db)
        if settlement is None:
            raise SettlementNotFoundError(order_id)
        payment = await self._repo.get_payment_by_order_id(order.id, db)
        return SettlementResponse.from_domain(settlement, payment)
