"""
거래소 공통 응답 정규화 함수

거래소별 parsers 모듈이 공유하는 순수 함수 (상태 없음).
    - since/limit 필터: timestamp >= since 인 항목 중 앞에서부터 limit개
    - OHLCV: 지연 generator, 거래소 원래 순서 유지 (재정렬 안 함)
    - 호가창: bids 가격 내림차순, asks 가격 오름차순
    - 체결 목록: timestamp 내림차순 정렬 후 since/limit 필터
"""

from decimal import Decimal
from typing import Any, Callable, Iterable, Iterator, Mapping, Protocol, Sequence, TypeVar

from adapters.errors import MalformedResponseError
from adapters.models import OHLCV, Order, OrderBook, PriceLevel, Ticker, Trade
from core.utils.number import to_decimal
from core.utils.timestamps import iso8601, milliseconds


class _Timestamped(Protocol):
    timestamp: int


T = TypeVar("T", bound=_Timestamped)


# -----------------------------------------------------------------------------
# 필드 추출 헬퍼
# -----------------------------------------------------------------------------

def safe_value(data: Mapping[str, Any], *keys: str) -> Any:
    """keys 중 처음으로 값이 있는(None/빈 문자열 아님) 필드"""
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return None


def safe_string(data: Mapping[str, Any], *keys: str) -> str | None:
    value = safe_value(data, *keys)
    return None if value is None else str(value)


def safe_decimal(data: Mapping[str, Any], *keys: str) -> Decimal | None:
    return to_decimal(safe_value(data, *keys))


def safe_lower(value: Any) -> str | None:
    return None if value is None else str(value).lower()


def require_timestamp(value: Any, kind: str, payload: Any) -> int:
    """타임스탬프 필드 검증

    Raises:
        MalformedResponseError: 값이 없거나 정수로 해석 불가
    """
    if value is None or value == "":
        raise MalformedResponseError(f"malformed {kind}: timestamp missing", payload=payload)
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise MalformedResponseError(
            f"malformed {kind}: invalid timestamp {value!r}", payload=payload
        ) from e


def map_status(status: Any, table: Mapping[str, str]) -> str | None:
    """거래소 주문 상태 -> 표준 상태

    테이블에 없는 값은 소문자로 그대로 전달.
    """
    if status is None:
        return None
    return table.get(status, str(status).lower())


def remaining_of(amount: Decimal | None, filled: Decimal | None) -> Decimal | None:
    """미체결 수량 = max(amount - filled, 0)"""
    if amount is None:
        return None
    return max(amount - (filled or Decimal("0")), Decimal("0"))


def cost_of(price: Decimal | None, amount: Decimal | None) -> Decimal | None:
    if price is None or amount is None:
        return None
    return price * amount


# -----------------------------------------------------------------------------
# since / limit
# -----------------------------------------------------------------------------

def filter_by_since_limit(
    items: Iterable[T],
    since: int | None = None,
    limit: int | None = None,
) -> list[T]:
    """timestamp >= since 인 항목 중 앞에서부터 limit개

    입력 순서 유지, 멱등 (같은 since/limit로 두 번 적용해도 결과 동일).
    """
    result = list(items)
    if since is not None:
        result = [item for item in result if item.timestamp >= since]
    if limit is not None:
        result = result[:limit]
    return result


# -----------------------------------------------------------------------------
# OHLCV
# -----------------------------------------------------------------------------

def iter_ohlcvs(
    raw: Iterable[Any],
    parse_one: Callable[[Any], OHLCV],
    since: int | None = None,
    limit: int | None = None,
) -> Iterator[OHLCV]:
    """캔들 지연 파싱

    timestamp < since 인 캔들은 제외, 최대 limit개 후 중단.
    """
    if limit is not None and limit <= 0:
        return
    count = 0
    for item in raw:
        candle = parse_one(item)
        if since is not None and candle[0] < since:
            continue
        yield candle
        count += 1
        if limit is not None and count >= limit:
            return


def ohlcv_from_list(item: Sequence[Any]) -> OHLCV:
    """[timestamp, open, high, low, close, volume] 배열 -> OHLCV"""
    return (
        int(item[0]),
        to_decimal(item[1]),
        to_decimal(item[2]),
        to_decimal(item[3]),
        to_decimal(item[4]),
        to_decimal(item[5]),
    )


# -----------------------------------------------------------------------------
# 호가창
# -----------------------------------------------------------------------------

def parse_bid_ask(level: Sequence[Any], price_index: int = 0, amount_index: int = 1) -> PriceLevel:
    """[price, amount, ...] -> (Decimal, Decimal)"""
    return to_decimal(level[price_index]), to_decimal(level[amount_index])


def parse_order_book(
    raw: Mapping[str, Any],
    timestamp: int | None = None,
    bids_key: str = "bids",
    asks_key: str = "asks",
    price_index: int = 0,
    amount_index: int = 1,
) -> OrderBook:
    """호가창 응답 -> OrderBook

    거래소마다 정렬 여부가 달라 항상 다시 정렬:
    bids 가격 내림차순, asks 가격 오름차순.
    """
    if timestamp is None:
        timestamp = milliseconds()

    bids = [parse_bid_ask(level, price_index, amount_index) for level in raw.get(bids_key) or []]
    asks = [parse_bid_ask(level, price_index, amount_index) for level in raw.get(asks_key) or []]
    bids.sort(key=lambda level: level[0], reverse=True)
    asks.sort(key=lambda level: level[0])

    nonce = raw.get("lastUpdateId") or raw.get("sequence")

    return OrderBook(
        bids=bids,
        asks=asks,
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        nonce=int(nonce) if nonce is not None else None,
    )


# -----------------------------------------------------------------------------
# 목록
# -----------------------------------------------------------------------------

def sort_and_filter_trades(
    trades: Iterable[Trade],
    since: int | None = None,
    limit: int | None = None,
) -> list[Trade]:
    """timestamp 내림차순(최신 우선) 정렬 후 since/limit 필터"""
    ordered = sorted(trades, key=lambda trade: trade.timestamp, reverse=True)
    return filter_by_since_limit(ordered, since, limit)


def filter_orders(
    orders: Iterable[Order],
    since: int | None = None,
    limit: int | None = None,
) -> list[Order]:
    """주문 목록 since/limit 필터 (재정렬 안 함)"""
    return filter_by_since_limit(orders, since, limit)


def index_tickers(
    tickers: Iterable[Ticker],
    symbols: Iterable[str] | None = None,
) -> dict[str, Ticker]:
    """symbol -> Ticker (symbols가 주어지면 그 심볼만)"""
    by_symbol = {ticker.symbol: ticker for ticker in tickers}
    if symbols is None:
        return by_symbol
    return {symbol: by_symbol[symbol] for symbol in symbols if symbol in by_symbol}
