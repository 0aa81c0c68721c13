"""
숫자 유틸리티

거래소 응답의 문자열 숫자를 Decimal로 변환하고,
tick/step 문자열에서 소수 자리수(precision)를 계산.
"""

from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any


def to_decimal(value: Any, default: Decimal | None = None) -> Decimal | None:
    """문자열/숫자 -> Decimal

    float은 문자열로 거쳐 변환하여 이진 오차를 피함.
    None, 빈 문자열, 해석 불가 값은 default 반환.

    Example:
        >>> to_decimal("0.00100000")
        Decimal('0.00100000')
        >>> to_decimal(None) is None
        True
    """
    if value is None or value == "":
        return default
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        return default
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return default


def decimal_arg(value: Any) -> Decimal:
    """호출자 입력(수량, 가격 등) -> Decimal

    float도 문자열을 거쳐 변환하므로 0.3은 Decimal("0.3").

    Raises:
        ValueError: Decimal로 해석할 수 없는 값
    """
    result = to_decimal(value)
    if result is None:
        raise ValueError(f"invalid decimal value: {value!r}")
    return result


def precision_from_string(value: str) -> int:
    """tick/step 문자열의 유효 소수 자리수

    뒤쪽 0을 제거한 뒤 소수점 이하 자리수를 센다.

    Example:
        >>> precision_from_string("0.00100000")
        3
        >>> precision_from_string("0.00000100")
        6
        >>> precision_from_string("1")
        0
    """
    text = str(value).strip()
    if "." not in text:
        return 0
    fraction = text.split(".", 1)[1].rstrip("0")
    return len(fraction)


def decimal_places(precision: int) -> Decimal:
    """precision -> 최소 단위 (precision=3 -> Decimal('0.001'))"""
    return Decimal(1).scaleb(-precision)


def truncate(value: Decimal, precision: int) -> Decimal:
    """precision 자리까지 버림 (수량용)"""
    return value.quantize(decimal_places(precision), rounding=ROUND_DOWN)


def round_half_up(value: Decimal, precision: int) -> Decimal:
    """precision 자리까지 반올림 (가격/비용용)"""
    return value.quantize(decimal_places(precision), rounding=ROUND_HALF_UP)
