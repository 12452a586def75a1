"""Unit tests for integer money helpers."""

from decimal import Decimal

import pytest

from src.wm_common.money import floor_fee, to_rate, won_to_display


class TestFloorFee:
    def test_exact(self) -> None:
        assert floor_fee(100000, Decimal("0.05")) == 5000

    def test_rounds_down(self) -> None:
        # 333 x 0.05 = 16.65
        assert floor_fee(333, Decimal("0.05")) == 16

    def test_zero_amount(self) -> None:
        assert floor_fee(0, Decimal("0.05")) == 0

    def test_zero_rate(self) -> None:
        assert floor_fee(12345, Decimal("0")) == 0

    def test_full_rate(self) -> None:
        assert floor_fee(12345, Decimal("1")) == 12345

    def test_float_rate_has_no_binary_noise(self) -> None:
        # 0.07 as a float is 0.07000000000000000666...; via str() it is exact
        assert floor_fee(100, to_rate(0.07)) == 7


class TestToRate:
    @pytest.mark.parametrize("raw", [0.05, "0.05", Decimal("0.05")])
    def test_normalizes(self, raw: object) -> None:
        assert to_rate(raw) == Decimal("0.05")  # type: ignore[arg-type]


class TestWonToDisplay:
    def test_thousands_separator(self) -> None:
        assert won_to_display(32000) == "₩32,000"

    def test_zero(self) -> None:
        assert won_to_display(0) == "₩0"

    def test_negative(self) -> None:
        assert won_to_display(-1200) == "-₩1,200"
