"""Cart reconciliation: merge client lines with authoritative product rows.

Pure functions, no I/O: the application service loads products and calls
these. Running them twice on the same input gives the same answer, which is
what lets payment confirmation replay checkout validation.

Trust rules:
  - Price: the server price always wins, silently.
  - Quantity: at least the product's minimum order quantity (moq).
  - Total: sum(server_price x quantity) must be within AMOUNT_TOLERANCE of the
    claimed total (absorbs client rounding / stale display).
"""

from collections.abc import Sequence

from src.wm_catalog.domain.models import Product
from src.wm_checkout.domain.models import CartLine, CheckoutValidation, ValidatedLine
from src.wm_common.errors import (
    AmountMismatchError,
    BelowMinimumOrderError,
    InactiveProductError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from src.wm_common.id_generator import normalize_id

AMOUNT_TOLERANCE: int = 100  # won


def check_request(lines: Sequence[CartLine], claimed_total: int) -> list[str]:
    """Validate request shape; return the distinct normalized product ids in first-seen order."""
    if not lines:
        raise ValidationError("No items to order")
    if claimed_total <= 0:
        raise ValidationError(f"Total amount must be positive, got {claimed_total}")
    distinct: list[str] = []
    for line in lines:
        try:
            pid = normalize_id(line.product_id)
        except ValueError:
            raise ValidationError(f"Malformed product id: {line.product_id!r}") from None
        if line.quantity <= 0:
            raise ValidationError(f"Quantity must be at least 1 for {line.product_id}")
        if pid not in distinct:
            distinct.append(pid)
    return distinct


def build_order_name(lines: Sequence[ValidatedLine]) -> str:
    """First product name, plus ' 외 N건' ("and N more") for the remaining lines."""
    first = lines[0].product_name
    extra = len(lines) - 1
    return first if extra == 0 else f"{first} 외 {extra}건"


def reconcile(
    lines: Sequence[CartLine],
    claimed_total: int,
    products: Sequence[Product],
    distinct_ids: Sequence[str],
    order_group_id: str,
) -> CheckoutValidation:
    """Check every line against its product and compute the server total."""
    if len(products) != len(distinct_ids):
        found = {p.id for p in products}
        missing = [pid for pid in distinct_ids if pid not in found]
        raise NotFoundError("Product", ", ".join(missing) or "unknown")

    by_id = {p.id: p for p in products}
    validated: list[ValidatedLine] = []
    for line in lines:
        product = by_id[normalize_id(line.product_id)]
        if not product.is_active:
            raise InactiveProductError(product.id)
        if line.quantity < product.moq:
            raise BelowMinimumOrderError(product.id, line.quantity, product.moq)
        if product.stock_quantity < line.quantity:
            raise InsufficientStockError(product.id, line.quantity, product.stock_quantity)
        validated.append(
            ValidatedLine(
                product_id=product.id,
                product_name=product.name,
                quantity=line.quantity,
                server_unit_price=product.price,
                claimed_unit_price=line.unit_price,
                seller_id=product.seller_id,
                shipping_fee=product.shipping_fee,
                stock_snapshot=product.stock_quantity,
            )
        )

    server_total = sum(v.line_amount for v in validated)
    if abs(server_total - claimed_total) > AMOUNT_TOLERANCE:
        raise AmountMismatchError(claimed_total, server_total)

    return CheckoutValidation(
        order_group_id=order_group_id,
        order_name=build_order_name(validated),
        server_total=server_total,
        lines=validated,
    )
