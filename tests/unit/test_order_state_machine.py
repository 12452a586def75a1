"""Unit tests for the order state machine."""

import pytest

from src.wm_common.enums import OrderStatus
from src.wm_common.errors import IllegalTransitionError
from src.wm_order.domain.state_machine import (
    TRANSITIONS,
    ensure_purchase_confirmable,
    ensure_transition,
    sources_of,
)

ALLOWED = [
    ("pending", "confirmed"),
    ("pending", "cancelled"),
    ("confirmed", "shipped"),
    ("confirmed", "cancelled"),
    ("shipped", "completed"),
]


@pytest.mark.parametrize(("current", "target"), ALLOWED)
def test_allowed_transitions(current: str, target: str) -> None:
    assert ensure_transition(current, target) == OrderStatus(target)


def test_every_other_pair_rejected() -> None:
    for current in OrderStatus:
        for target in OrderStatus:
            if (current.value, target.value) in ALLOWED:
                continue
            with pytest.raises(IllegalTransitionError):
                ensure_transition(current.value, target.value)


def test_terminal_states_have_no_targets() -> None:
    assert TRANSITIONS[OrderStatus.COMPLETED] == frozenset()
    assert TRANSITIONS[OrderStatus.CANCELLED] == frozenset()


class TestCancelCategories:
    @pytest.mark.parametrize("current", ["shipped", "completed"])
    def test_after_shipping(self, current: str) -> None:
        with pytest.raises(IllegalTransitionError) as exc_info:
            ensure_transition(current, "cancelled")
        assert exc_info.value.category == "already shipped or delivered"

    def test_already_cancelled(self) -> None:
        with pytest.raises(IllegalTransitionError) as exc_info:
            ensure_transition("cancelled", "cancelled")
        assert exc_info.value.category == "already cancelled"


def test_sources_of_cancelled() -> None:
    assert sources_of(OrderStatus.CANCELLED) == ["confirmed", "pending"]


def test_sources_of_completed() -> None:
    assert sources_of(OrderStatus.COMPLETED) == ["shipped"]


class TestPurchaseConfirmation:
    def test_completed_allowed(self) -> None:
        ensure_purchase_confirmable("completed")

    @pytest.mark.parametrize("current", ["pending", "confirmed", "shipped"])
    def test_not_yet_delivered(self, current: str) -> None:
        with pytest.raises(IllegalTransitionError) as exc_info:
            ensure_purchase_confirmable(current)
        assert exc_info.value.category == "not yet delivered"

    def test_cancelled(self) -> None:
        with pytest.raises(IllegalTransitionError) as exc_info:
            ensure_purchase_confirmable("cancelled")
        assert exc_info.value.category == "already cancelled"
