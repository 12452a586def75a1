"""Order materialization plan: one saga step per validated line.

Steps keep array order. Each step is later committed on its own; the
order-group id correlates them. A single-line checkout uses the group id as
its order number, multi-line checkouts suffix -1, -2, ...
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from src.wm_checkout.domain.models import ValidatedLine
from src.wm_common.enums import DeliveryOption, OrderStatus
from src.wm_common.id_generator import generate_id
from src.wm_order.domain.models import Order


@dataclass(frozen=True)
class DeliveryInfo:
    address: str
    option: str = DeliveryOption.NORMAL.value
    time: str | None = None
    note: str | None = None


@dataclass(frozen=True)
class MaterializationStep:
    index: int  # 1-based
    order_number: str
    line: ValidatedLine


def order_number_for(order_group_id: str, index: int, line_count: int) -> str:
    return order_group_id if line_count == 1 else f"{order_group_id}-{index}"


def plan_steps(order_group_id: str, lines: Sequence[ValidatedLine]) -> list[MaterializationStep]:
    return [
        MaterializationStep(i, order_number_for(order_group_id, i, len(lines)), line)
        for i, line in enumerate(lines, start=1)
    ]


def build_order(
    step: MaterializationStep,
    order_group_id: str,
    buyer_id: str,
    payment_key: str,
    paid_at: datetime,
    delivery: DeliveryInfo,
) -> Order:
    line = step.line
    return Order(
        id=generate_id(),
        order_number=step.order_number,
        order_group_id=order_group_id,
        buyer_id=buyer_id,
        seller_id=line.seller_id,
        product_id=line.product_id,
        quantity=line.quantity,
        unit_price=line.server_unit_price,
        shipping_fee=line.shipping_fee,
        delivery_address=delivery.address,
        delivery_option=delivery.option,
        delivery_time=delivery.time,
        delivery_note=delivery.note,
        payment_key=payment_key,
        paid_at=paid_at,
        status=OrderStatus.PENDING.value,
    )
