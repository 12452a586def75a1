"""Order state machine.

    pending ──► confirmed ──► shipped ──► completed
       │            │
       └────────────┴──► cancelled

Cancellation is buyer-initiated and only possible before shipping.
Purchase confirmation is not a status: it is the settlement trigger and is
only allowed once the order is completed.
"""

from src.wm_common.enums import OrderStatus
from src.wm_common.errors import IllegalTransitionError

TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.COMPLETED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

PURCHASE_CONFIRMATION = "purchase_confirmation"


def sources_of(target: OrderStatus) -> list[str]:
    """Statuses from which target is reachable (the CAS guard for the write)."""
    return sorted(s.value for s, targets in TRANSITIONS.items() if target in targets)


def _category(current: OrderStatus, target: OrderStatus) -> str:
    if current is OrderStatus.CANCELLED:
        return "already cancelled"
    if target is OrderStatus.CANCELLED:
        return "already shipped or delivered"
    if current is target:
        return "status unchanged"
    return "invalid status change"


def ensure_transition(current: str, target: str) -> OrderStatus:
    """Return the target status, or raise IllegalTransitionError."""
    cur = OrderStatus(current)
    tgt = OrderStatus(target)
    if tgt not in TRANSITIONS[cur]:
        raise IllegalTransitionError(cur.value, tgt.value, _category(cur, tgt))
    return tgt


def ensure_purchase_confirmable(current: str) -> None:
    cur = OrderStatus(current)
    if cur is not OrderStatus.COMPLETED:
        category = "already cancelled" if cur is OrderStatus.CANCELLED else "not yet delivered"
        raise IllegalTransitionError(cur.value, PURCHASE_CONFIRMATION, category)
