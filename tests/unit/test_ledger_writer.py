"""Unit tests for LedgerWriter: the single settlement + payment sink."""

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from src.wm_common.errors import OrderNotFoundError, PersistenceError
from src.wm_order.domain.models import Order
from src.wm_settlement.application.ledger_writer import LedgerWriter
from src.wm_settlement.domain.models import Payment, Settlement

FRIDAY = datetime(2026, 10, 16, 11, 0, tzinfo=UTC)


def _make_order() -> Order:
    # total_amount = 48500 x 2 + 3000 = 100000
    return Order(
        id="order-1",
        order_number="ORD-20261016-110000-XYZ",
        order_group_id="ORD-20261016-110000-XYZ",
        buyer_id="buyer-1",
        seller_id="seller-1",
        product_id="11111111-1111-4111-8111-111111111111",
        quantity=2,
        unit_price=48500,
        shipping_fee=3000,
        delivery_address="부산시 해운대구",
        payment_key="pk_abc",
        paid_at=FRIDAY,
        status="pending",
    )


def _existing_settlement() -> Settlement:
    return Settlement(
        id="stl-existing",
        order_id="order-1",
        seller_id="seller-1",
        order_amount=100000,
        platform_fee_rate=Decimal("0.05"),
        platform_fee=5000,
        seller_amount=95000,
        scheduled_payout_at=datetime(2026, 10, 27, 11, 0, tzinfo=UTC),
    )


def _repos() -> tuple[AsyncMock, AsyncMock]:
    repo = AsyncMock()
    repo.get_by_order_id.return_value = None
    repo.get_payment_by_order_id.return_value = None
    repo.insert_settlement.side_effect = lambda s, db: s
    repo.insert_payment.side_effect = lambda p, db: p
    order_repo = AsyncMock()
    order_repo.get_by_id.return_value = _make_order()
    return repo, order_repo


class TestRecordForOrder:
    async def test_creates_settlement_then_payment(self) -> None:
        repo, order_repo = _repos()
        writer = LedgerWriter(repo=repo, order_repo=order_repo)
        db = AsyncMock()

        with patch("src.wm_settlement.application.ledger_writer.settings") as mock_settings:
            mock_settings.PLATFORM_FEE_RATE = Decimal("0.05")
            mock_settings.PAYOUT_LEAD_BUSINESS_DAYS = 7
            result = await writer.record_for_order(db, "order-1", now=FRIDAY)

        assert result.created is True
        assert result.warning is None
        s = result.settlement
        assert s.order_amount == 100000
        assert s.platform_fee == 5000
        assert s.seller_amount == 95000
        assert s.status == "pending"
        assert s.scheduled_payout_at == datetime(2026, 10, 27, 11, 0, tzinfo=UTC)

        p = result.payment
        assert isinstance(p, Payment)
        assert p.settlement_id == s.id
        assert p.amount == 100000
        assert p.payment_key == "pk_abc"
        assert p.status == "paid"
        assert p.method == "card"
        # Settlement and payment are committed separately
        assert db.commit.await_count == 2

    async def test_existing_settlement_short_circuits(self) -> None:
        repo, order_repo = _repos()
        repo.get_by_order_id.return_value = _existing_settlement()
        writer = LedgerWriter(repo=repo, order_repo=order_repo)
        db = AsyncMock()

        result = await writer.record_for_order(db, "order-1")

        assert result.created is False
        assert result.settlement.id == "stl-existing"
        repo.insert_settlement.assert_not_awaited()
        repo.insert_payment.assert_not_awaited()
        db.commit.assert_not_awaited()

    async def test_twice_yields_one_settlement(self) -> None:
        repo, order_repo = _repos()
        stored: dict[str, Settlement] = {}

        async def get_by_order_id(order_id: str, db: object) -> Settlement | None:
            return stored.get(order_id)

        async def insert_settlement(s: Settlement, db: object) -> Settlement | None:
            if s.order_id in stored:
                return None
            stored[s.order_id] = s
            return s

        repo.get_by_order_id.side_effect = get_by_order_id
        repo.insert_settlement.side_effect = insert_settlement
        writer = LedgerWriter(repo=repo, order_repo=order_repo)

        first = await writer.record_for_order(AsyncMock(), "order-1")
        second = await writer.record_for_order(AsyncMock(), "order-1")

        assert len(stored) == 1
        assert first.settlement.id == second.settlement.id
        assert first.created is True
        assert second.created is False
        assert repo.insert_payment.await_count == 1

    async def test_lost_insert_race_returns_winner(self) -> None:
        repo, order_repo = _repos()
        repo.get_by_order_id.side_effect = [None, _existing_settlement()]
        repo.insert_settlement.side_effect = None
        repo.insert_settlement.return_value = None
        writer = LedgerWriter(repo=repo, order_repo=order_repo)

        result = await writer.record_for_order(AsyncMock(), "order-1")

        assert result.created is False
        assert result.settlement.id == "stl-existing"
        repo.insert_payment.assert_not_awaited()

    async def test_payment_failure_keeps_settlement(self) -> None:
        repo, order_repo = _repos()
        repo.insert_payment.side_effect = IntegrityError("INSERT INTO payments", {}, Exception("fk"))
        writer = LedgerWriter(repo=repo, order_repo=order_repo)
        db = AsyncMock()

        result = await writer.record_for_order(db, "order-1")

        assert result.created is True
        assert result.payment is None
        assert result.warning is not None
        assert "ORD-20261016-110000-XYZ" in result.warning
        # settlement committed, payment rolled back
        db.commit.assert_awaited_once()
        db.rollback.assert_awaited_once()

    async def test_settlement_failure_raises(self) -> None:
        repo, order_repo = _repos()
        repo.insert_settlement.side_effect = OperationalError("INSERT", {}, Exception("down"))
        writer = LedgerWriter(repo=repo, order_repo=order_repo)
        db = AsyncMock()

        with pytest.raises(PersistenceError):
            await writer.record_for_order(db, "order-1")
        db.rollback.assert_awaited_once()
        repo.insert_payment.assert_not_awaited()

    async def test_missing_order(self) -> None:
        repo, order_repo = _repos()
        order_repo.get_by_id.return_value = None
        writer = LedgerWriter(repo=repo, order_repo=order_repo)

        with pytest.raises(OrderNotFoundError):
            await writer.record_for_order(AsyncMock(), "order-x")


class TestExistingForOrder:
    async def test_none_without_settlement(self) -> None:
        repo, order_repo = _repos()
        writer = LedgerWriter(repo=repo, order_repo=order_repo)
        db = AsyncMock()

        assert await writer.existing_for_order(db, "order-1") is None
        repo.insert_settlement.assert_not_awaited()
        repo.get_payment_by_order_id.assert_not_awaited()
        db.commit.assert_not_awaited()

    async def test_returns_recorded_rows(self) -> None:
        repo, order_repo = _repos()
        repo.get_by_order_id.return_value = _existing_settlement()
        writer = LedgerWriter(repo=repo, order_repo=order_repo)

        result = await writer.existing_for_order(AsyncMock(), "order-1")

        assert result is not None
        assert result.created is False
        assert result.settlement.id == _existing_settlement().id
        order_repo.get_by_id.assert_not_awaited()
