"""
타임스탬프 유틸리티

내부 표현: epoch 밀리초(int) | 외부 표시: ISO-8601 UTC 문자열 (밀리초, Z 접미사)
"""

import time
from datetime import datetime, timedelta, timezone

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)


def now_utc() -> datetime:
    """현재 UTC 시간 반환 (타임존 명시)

    Returns:
        현재 UTC 시간 (tzinfo=timezone.utc)
    """
    return datetime.now(timezone.utc)


def milliseconds() -> int:
    """현재 epoch 밀리초"""
    return int(time.time() * 1000)


def seconds() -> int:
    """현재 epoch 초"""
    return int(time.time())


def utc_from_timestamp_ms(ts_ms: int) -> datetime:
    """밀리초 타임스탬프를 UTC datetime으로 변환

    Args:
        ts_ms: Unix 타임스탬프 (밀리초)

    Returns:
        UTC datetime

    Example:
        >>> utc_from_timestamp_ms(1708444800000)
        datetime(2024, 2, 20, 16, 0, 0, tzinfo=timezone.utc)
    """
    return datetime.fromtimestamp(ts_ms / 1000, tz=timezone.utc)


def to_timestamp_ms(dt: datetime) -> int:
    """datetime을 밀리초 타임스탬프로 변환

    Args:
        dt: datetime 객체 (naive면 UTC로 간주)

    Returns:
        Unix 타임스탬프 (밀리초)
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(round(dt.timestamp() * 1000))


def iso8601(ts_ms: int | None) -> str | None:
    """밀리초 타임스탬프 -> ISO-8601 문자열

    Example:
        >>> iso8601(1517469204353)
        '2018-02-01T07:13:24.353Z'
    """
    if ts_ms is None:
        return None
    dt = utc_from_timestamp_ms(ts_ms)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts_ms % 1000:03d}Z"


def parse8601(value: str | None) -> int | None:
    """ISO-8601 문자열 -> 밀리초 타임스탬프

    Gdax 처럼 마이크로초 자릿수나 'Z' 접미사가 붙은 문자열도 처리.
    해석할 수 없으면 None.

    Example:
        >>> parse8601("2018-02-01T07:13:24.353Z")
        1517469204353
        >>> parse8601("2014-11-07T22:19:28.578544Z")
        1415398768578
    """
    if not value:
        return None

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    # fromisoformat은 소수점 이하 6자리까지만 허용
    if "." in text:
        head, _, rest = text.partition(".")
        digits = ""
        while rest and rest[0].isdigit():
            digits += rest[0]
            rest = rest[1:]
        text = f"{head}.{digits[:6].ljust(6, '0')}{rest}"

    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return (dt - _EPOCH) // _ONE_MS


def ymdhms(ts_ms: int, separator: str = "T") -> str:
    """밀리초 타임스탬프 -> 'YYYY-MM-DDTHH:MM:SS' (UTC, 밀리초 없음)"""
    return utc_from_timestamp_ms(ts_ms).strftime(f"%Y-%m-%d{separator}%H:%M:%S")
