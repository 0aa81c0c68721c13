"""
core/utils/number.py 테스트

Decimal 변환, precision 계산, 버림/반올림 검증
"""

from decimal import Decimal

import pytest

from core.utils.number import (
    decimal_arg,
    decimal_places,
    precision_from_string,
    round_half_up,
    to_decimal,
    truncate,
)


class TestToDecimal:
    """to_decimal 테스트"""

    def test_string(self) -> None:
        """문자열 그대로 보존"""
        assert to_decimal("0.00100000") == Decimal("0.00100000")

    def test_float_goes_through_str(self) -> None:
        """float 이진 오차 없음"""
        assert to_decimal(0.1) == Decimal("0.1")

    def test_int(self) -> None:
        assert to_decimal(5) == Decimal("5")

    @pytest.mark.parametrize("value", [None, "", "abc", True])
    def test_invalid_returns_default(self, value) -> None:
        """해석 불가 값은 default"""
        assert to_decimal(value) is None
        assert to_decimal(value, Decimal("0")) == Decimal("0")


class TestDecimalArg:
    """decimal_arg 테스트"""

    def test_float_goes_through_str(self) -> None:
        assert decimal_arg(0.3) == Decimal("0.3")

    def test_decimal_unchanged(self) -> None:
        assert decimal_arg(Decimal("1.50")) == Decimal("1.50")

    @pytest.mark.parametrize("value", [None, "", "abc", True])
    def test_invalid_raises(self, value) -> None:
        with pytest.raises(ValueError):
            decimal_arg(value)


class TestPrecisionFromString:
    """precision_from_string 테스트"""

    @pytest.mark.parametrize(
        "step,expected",
        [
            ("0.00100000", 3),
            ("0.00000100", 6),
            ("1", 0),
            ("1.00000000", 0),
            ("0.01", 2),
        ],
    )
    def test_values(self, step: str, expected: int) -> None:
        """뒤쪽 0을 제외한 소수 자리수"""
        assert precision_from_string(step) == expected


class TestRounding:
    """truncate / round_half_up 테스트"""

    def test_decimal_places(self) -> None:
        assert decimal_places(3) == Decimal("0.001")
        assert decimal_places(0) == Decimal("1")

    def test_truncate_rounds_down(self) -> None:
        """수량은 버림"""
        assert truncate(Decimal("1.23456789"), 3) == Decimal("1.234")
        assert truncate(Decimal("0.9999"), 0) == Decimal("0")

    def test_round_half_up(self) -> None:
        """가격은 반올림"""
        assert round_half_up(Decimal("1.2345"), 3) == Decimal("1.235")
        assert round_half_up(Decimal("1.2344"), 3) == Decimal("1.234")
