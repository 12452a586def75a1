"""Checkout and cart application services.

CheckoutService.validate is read-only: it performs no writes and can be
replayed any number of times with the same cart. CartService mutations
commit on success and roll back on failure.
"""

import logging
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from src.wm_catalog.domain.repository import ProductRepositoryProtocol
from src.wm_catalog.infrastructure.persistence import ProductRepository
from src.wm_checkout.domain.models import CartItem, CartLine, CheckoutValidation
from src.wm_checkout.domain.reconciler import check_request, reconcile
from src.wm_checkout.domain.repository import CartRepositoryProtocol
from src.wm_checkout.infrastructure.persistence import CartRepository
from src.wm_common.errors import (
    BelowMinimumOrderError,
    InactiveProductError,
    NotFoundError,
    ProductNotFoundError,
    ValidationError,
)
from src.wm_common.id_generator import generate_order_group_id, normalize_id

logger = logging.getLogger(__name__)


def _cart_item_id(item_id: str) -> str:
    try:
        return normalize_id(item_id)
    except ValueError:
        raise NotFoundError("Cart item", item_id) from None


class CheckoutService:
    def __init__(self, product_repo: ProductRepositoryProtocol | None = None) -> None:
        self._products: ProductRepositoryProtocol = product_repo or ProductRepository()

    async def validate(
        self,
        db: AsyncSession,
        buyer_id: str,
        lines: Sequence[CartLine],
        claimed_total: int,
        order_group_id: str | None = None,
    ) -> CheckoutValidation:
        """Reconcile a cart against authoritative product rows.

        order_group_id is generated unless supplied (payment confirmation
        replays validation under the group id the gateway already knows).
        """
        distinct_ids = check_request(lines, claimed_total)
        products = await self._products.get_many(distinct_ids, db)
        validation = reconcile(
            lines,
            claimed_total,
            products,
            distinct_ids,
            order_group_id or generate_order_group_id(),
        )
        changed = [v.product_id for v in validation.lines if v.price_changed]
        if changed:
            logger.info(
                "Checkout price override: buyer=%s products=%s (server price wins)",
                buyer_id,
                changed,
            )
        logger.info(
            "Checkout validated: buyer=%s group=%s lines=%d server_total=%d",
            buyer_id,
            validation.order_group_id,
            len(validation.lines),
            validation.server_total,
        )
        return validation


class CartService:
    def __init__(
        self,
        repo: CartRepositoryProtocol | None = None,
        product_repo: ProductRepositoryProtocol | None = None,
    ) -> None:
        self._repo: CartRepositoryProtocol = repo or CartRepository()
        self._products: ProductRepositoryProtocol = product_repo or ProductRepository()

    async def add_item(
        self,
        db: AsyncSession,
        buyer_id: str,
        product_id: str,
        variant_id: str | None,
        quantity: int,
    ) -> CartItem:
        if quantity <= 0:
            raise ValidationError("Quantity must be at least 1")
        try:
            product_id = normalize_id(product_id)
        except ValueError:
            raise ValidationError(f"Malformed product id: {product_id!r}") from None
        if variant_id is not None:
            try:
                variant_id = normalize_id(variant_id)
            except ValueError:
                raise ValidationError(f"Malformed variant id: {variant_id!r}") from None
        product = await self._products.get_by_id(product_id, db)
        if product is None:
            raise ProductNotFoundError(product_id)
        if not product.is_active:
            raise InactiveProductError(product_id)
        if quantity < product.moq:
            raise BelowMinimumOrderError(product_id, quantity, product.moq)
        try:
            item = await self._repo.upsert_merge(buyer_id, product_id, variant_id, quantity, db)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return item

    async def list_items(self, db: AsyncSession, buyer_id: str) -> list[CartItem]:
        return await self._repo.list_by_buyer(buyer_id, db)

    async def update_quantity(
        self, db: AsyncSession, buyer_id: str, item_id: str, quantity: int
    ) -> CartItem:
        if quantity <= 0:
            raise ValidationError("Quantity must be at least 1")
        item_id = _cart_item_id(item_id)
        try:
            item = await self._repo.set_quantity(item_id, buyer_id, quantity, db)
            if item is None:
                raise NotFoundError("Cart item", item_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return item

    async def remove_item(self, db: AsyncSession, buyer_id: str, item_id: str) -> None:
        item_id = _cart_item_id(item_id)
        try:
            deleted = await self._repo.delete(item_id, buyer_id, db)
            if not deleted:
                raise NotFoundError("Cart item", item_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    async def clear(self, db: AsyncSession, buyer_id: str) -> int:
        try:
            removed = await self._repo.clear(buyer_id, db)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return removed
