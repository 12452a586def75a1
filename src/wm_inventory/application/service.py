"""InventoryAdjuster: sole owner of stock increment/decrement.

Modes (InventoryMode):
  ATOMIC    stored function only; a missing function is an error.
  FALLBACK  read-modify-write only. NOT race-free: two concurrent adjustments
            to the same product can lose an update. Known weakness, accepted.
  AUTO      stored function first; on StockProcedureUnavailable, log and use
            the fallback for that call.

Decrements clamp at zero on both paths. Increments are unconditional, so
callers must not restock twice for one cancellation.

Transaction ownership: the CALLER commits or rolls back.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.wm_common.enums import InventoryMode, InventoryPath
from src.wm_common.errors import ConfigurationError, ProductNotFoundError, ValidationError
from src.wm_inventory.domain.models import StockAdjustment, StockProcedureUnavailable
from src.wm_inventory.domain.repository import StockRepositoryProtocol
from src.wm_inventory.infrastructure.persistence import StockRepository

logger = logging.getLogger(__name__)


def _check_quantity(quantity: int) -> None:
    if quantity <= 0:
        raise ValidationError(f"quantity must be greater than 0, got {quantity}")


class InventoryAdjuster:
    def __init__(
        self,
        repo: StockRepositoryProtocol | None = None,
        mode: InventoryMode | str | None = None,
    ) -> None:
        self._repo: StockRepositoryProtocol = repo or StockRepository()
        self.mode = InventoryMode(mode or settings.INVENTORY_MODE)

    async def increment(self, db: AsyncSession, product_id: str, quantity: int) -> StockAdjustment:
        """Restock (e.g. order cancellation)."""
        _check_quantity(quantity)
        return await self._adjust(db, product_id, quantity)

    async def decrement(self, db: AsyncSession, product_id: str, quantity: int) -> StockAdjustment:
        """Consume stock (e.g. paid order). Never drives stock below zero."""
        _check_quantity(quantity)
        return await self._adjust(db, product_id, -quantity)

    async def _adjust(self, db: AsyncSession, product_id: str, delta: int) -> StockAdjustment:
        if self.mode is InventoryMode.FALLBACK:
            return await self._read_modify_write(db, product_id, delta)

        try:
            return await self._atomic(db, product_id, delta)
        except StockProcedureUnavailable as exc:
            if self.mode is InventoryMode.ATOMIC:
                raise ConfigurationError(
                    "Stock function missing and INVENTORY_MODE=atomic"
                ) from exc
            logger.warning(
                "Stock function unavailable, using read-modify-write: product=%s delta=%d",
                product_id,
                delta,
            )
            return await self._read_modify_write(db, product_id, delta)

    async def _atomic(self, db: AsyncSession, product_id: str, delta: int) -> StockAdjustment:
        if delta > 0:
            new_stock = await self._repo.atomic_increment(product_id, delta, db)
        else:
            new_stock = await self._repo.atomic_decrement(product_id, -delta, db)
        if new_stock is None:
            raise ProductNotFoundError(product_id)
        logger.debug("Stock adjusted (atomic): product=%s delta=%d → %d", product_id, delta, new_stock)
        return StockAdjustment(product_id, delta, new_stock, InventoryPath.ATOMIC)

    async def _read_modify_write(
        self, db: AsyncSession, product_id: str, delta: int
    ) -> StockAdjustment:
        current = await self._repo.read_stock(product_id, db)
        if current is None:
            raise ProductNotFoundError(product_id)
        new_stock = max(0, current + delta)
        await self._repo.write_stock(product_id, new_stock, db)
        logger.warning(
            "Stock adjusted (fallback, not race-free): product=%s %d → %d",
            product_id,
            current,
            new_stock,
        )
        return StockAdjustment(product_id, delta, new_stock, InventoryPath.FALLBACK)
