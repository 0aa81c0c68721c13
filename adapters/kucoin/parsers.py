"""
Kucoin API 응답 -> 공통 모델 변환

v1 응답은 {"success": true, "code": "OK", "msg": "...", "data": ...} 로 감싸져 오며
여기 함수들은 data 부분만 받음. 숫자는 JSON 숫자(float)로 오므로 문자열을 거쳐 Decimal 변환.
"""

from decimal import Decimal
from typing import Any, Iterable, Mapping

from adapters.balance import RawBalance
from adapters.catalog import MarketCatalog
from adapters.errors import MalformedResponseError
from adapters.kucoin.constants import DEFAULT_PRECISION, SIDE_BUY, SIDE_SELL
from adapters.models import (
    OHLCV,
    Currency,
    CurrencyLimits,
    Market,
    MarketLimits,
    MarketPrecision,
    MinMax,
    Order,
    Ticker,
    Trade,
)
from adapters.parsing import (
    cost_of,
    filter_orders,
    index_tickers,
    remaining_of,
    require_timestamp,
    safe_decimal,
    safe_string,
    safe_value,
    sort_and_filter_trades,
)
from core.constants import COMMON_CURRENCY_CODES
from core.types import OrderStatus, OrderType
from core.utils.number import to_decimal
from core.utils.timestamps import iso8601, milliseconds


def common_currency_code(code: str) -> str:
    return COMMON_CURRENCY_CODES.get(code, code)


def market_id_of(data: Mapping[str, Any]) -> str | None:
    """symbol 필드, 없으면 coinType-coinTypePair"""
    symbol = safe_string(data, "symbol")
    if symbol is not None:
        return symbol
    base = data.get("coinType")
    quote = data.get("coinTypePair")
    if base and quote:
        return f"{base}-{quote}"
    return None


def parse_side(value: Any) -> str | None:
    """BUY/SELL -> buy/sell"""
    if value == SIDE_BUY:
        return "buy"
    if value == SIDE_SELL:
        return "sell"
    return None


# -----------------------------------------------------------------------------
# 마켓 / 통화
# -----------------------------------------------------------------------------

def parse_market(data: dict[str, Any]) -> Market:
    """Kucoin 심볼 -> Market

    자리수 정보가 없어 price/amount 모두 8자리 고정.

    Kucoin GET /v1/market/open/symbols 응답 data 항목 예시:
    {
        "coinType": "KCS",
        "trading": true,
        "symbol": "KCS-BTC",
        "lastDealPrice": 0.00009277,
        "buy": 0.00009277,
        "sell": 0.0000929,
        "change": -0.00000046,
        "coinTypePair": "BTC",
        "sort": 0,
        "feeRate": 0.001,
        "volValue": 8.7154,
        "high": 0.0000954,
        "datetime": 1520853540000,
        "vol": 93297.8542,
        "low": 0.00009101,
        "changeRate": -0.0049
    }
    """
    base_id = data.get("coinType")
    quote_id = data.get("coinTypePair")
    if not base_id or not quote_id:
        raise MalformedResponseError("malformed symbol: coinType/coinTypePair missing", payload=data)

    base = common_currency_code(base_id)
    quote = common_currency_code(quote_id)
    step = Decimal(1).scaleb(-DEFAULT_PRECISION)

    return Market(
        id=market_id_of(data),
        symbol=f"{base}/{quote}",
        base=base,
        quote=quote,
        base_id=base_id,
        quote_id=quote_id,
        precision=MarketPrecision(amount=DEFAULT_PRECISION, price=DEFAULT_PRECISION),
        limits=MarketLimits(amount=MinMax(min=step)),
        active=bool(data.get("trading")),
        info=data,
    )


def parse_markets(symbols: Iterable[dict[str, Any]]) -> list[Market]:
    return [parse_market(s) for s in symbols]


def parse_currency(data: dict[str, Any]) -> Currency:
    """Kucoin 코인 -> Currency

    입금과 출금이 모두 가능해야 active.

    Kucoin GET /v1/market/open/coins 응답 data 항목 예시:
    {
        "withdrawMinFee": 100000,
        "coinType": "ERC20",
        "withdrawMinAmount": 200000,
        "name": "Kucoin Shares",
        "tradePrecision": 4,
        "coin": "KCS",
        "enableWithdraw": true,
        "enableDeposit": true,
        "withdrawFeeRate": 0.001
    }
    """
    currency_id = data["coin"]
    precision = data.get("tradePrecision")
    precision = int(precision) if precision is not None else DEFAULT_PRECISION
    step = Decimal(1).scaleb(-precision)
    ceiling = Decimal(1).scaleb(precision)

    return Currency(
        id=currency_id,
        code=common_currency_code(currency_id),
        precision=precision,
        active=bool(data.get("enableDeposit")) and bool(data.get("enableWithdraw")),
        limits=CurrencyLimits(
            amount=MinMax(min=step, max=ceiling),
            price=MinMax(min=step, max=ceiling),
            withdraw=MinMax(min=safe_decimal(data, "withdrawMinAmount"), max=ceiling),
        ),
        name=data.get("name"),
        fee=safe_decimal(data, "withdrawFeeRate"),
        info=data,
    )


def parse_currencies(coins: Iterable[dict[str, Any]]) -> list[Currency]:
    return [parse_currency(c) for c in coins]


# -----------------------------------------------------------------------------
# 시세
# -----------------------------------------------------------------------------

def parse_ticker(
    data: dict[str, Any],
    market: Market | None = None,
    catalog: MarketCatalog | None = None,
) -> Ticker:
    """Kucoin 티커 -> Ticker

    /open/tick, /market/open/symbols 항목 공통 형태 (parse_market 예시 참고).
    changeRate는 비율(0.0049 = 0.49%)이라 percentage로 바꿀 때 100을 곱함.
    """
    market_id = market_id_of(data)
    if market is None and catalog is not None:
        market = catalog.find_by_id(market_id)
    symbol = market.symbol if market is not None else market_id

    timestamp = data.get("datetime")
    timestamp = int(timestamp) if timestamp else milliseconds()
    last = safe_decimal(data, "lastDealPrice")
    change_rate = safe_decimal(data, "changeRate")

    return Ticker(
        symbol=symbol,
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        high=safe_decimal(data, "high"),
        low=safe_decimal(data, "low"),
        bid=safe_decimal(data, "buy"),
        ask=safe_decimal(data, "sell"),
        close=last,
        last=last,
        change=safe_decimal(data, "change"),
        percentage=change_rate * 100 if change_rate is not None else None,
        base_volume=safe_decimal(data, "vol"),
        quote_volume=safe_decimal(data, "volValue"),
        info=data,
    )


def parse_tickers(
    tickers: Iterable[dict[str, Any]],
    catalog: MarketCatalog | None = None,
    symbols: Iterable[str] | None = None,
) -> dict[str, Ticker]:
    return index_tickers((parse_ticker(t, catalog=catalog) for t in tickers), symbols)


def iter_chart_ohlcvs(data: Mapping[str, Any]) -> Iterable[list[Any]]:
    """TradingView 열 배열 {t, o, h, l, c, v} -> 행 단위 [t, o, h, l, c, v]

    Kucoin kitchen GET /open/chart/history 응답 예시:
        {"s": "ok", "t": [1520000000], "o": [0.1], "h": [0.2],
         "l": [0.05], "c": [0.15], "v": [100.0]}
    """
    columns = [data.get(key) or [] for key in ("t", "o", "h", "l", "c", "v")]
    return (list(row) for row in zip(*columns))


def parse_ohlcv(row: list[Any]) -> OHLCV:
    """[t(초), o, h, l, c, v] -> (ms, o, h, l, c, v)"""
    return (
        int(row[0]) * 1000,
        to_decimal(row[1]),
        to_decimal(row[2]),
        to_decimal(row[3]),
        to_decimal(row[4]),
        to_decimal(row[5]),
    )


# -----------------------------------------------------------------------------
# 체결
# -----------------------------------------------------------------------------

def parse_trade(data: list[Any], market: Market) -> Trade:
    """Kucoin 공개 체결 -> Trade

    [timestamp(ms), "BUY"|"SELL"(테이커 방향), price, amount, volume]
    """
    if not data or data[0] is None:
        raise MalformedResponseError("malformed trade: timestamp missing", payload=data)

    timestamp = int(data[0])
    price = to_decimal(data[2])
    amount = to_decimal(data[3])
    if price is None or amount is None:
        raise MalformedResponseError("malformed trade: price/amount missing", payload=data)

    return Trade(
        id=None,
        order=None,
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        symbol=market.symbol,
        type=OrderType.LIMIT.value,
        side=parse_side(data[1]),
        price=price,
        amount=amount,
        cost=price * amount,
        info=data,
    )


def parse_trades(
    trades: Iterable[list[Any]],
    market: Market,
    since: int | None = None,
    limit: int | None = None,
) -> list[Trade]:
    return sort_and_filter_trades((parse_trade(t, market) for t in trades), since, limit)


# -----------------------------------------------------------------------------
# 주문
# -----------------------------------------------------------------------------

def parse_order(
    data: dict[str, Any],
    status: str,
    market: Market | None = None,
    catalog: MarketCatalog | None = None,
) -> Order:
    """Kucoin 주문 -> Order

    응답에 상태 필드가 없어 조회 엔드포인트에 따라 status를 지정
    (active-map -> open, dealt -> closed).

    미체결 (GET /v1/order/active-map data.BUY / data.SELL 항목):
    {
        "oid": "59e59b279bd8d31d093d956e",
        "type": "SELL",
        "coinType": "KCS",
        "coinTypePair": "BTC",
        "direction": "SELL",
        "price": 0.1,
        "dealAmount": 0,
        "pendingAmount": 100,
        "createdAt": 1508219688000
    }

    체결 (GET /v1/order/dealt data.datas 항목):
    {
        "coinType": "KCS",
        "createdAt": 1508219688000,
        "amount": 2,
        "dealValue": 0.0002,
        "fee": 0.002,
        "dealDirection": "BUY",
        "coinTypePair": "BTC",
        "oid": "59e59b279bd8d31d093d956f",
        "dealPrice": 0.0001,
        "orderOid": "59e59b279bd8d31d093d956e",
        "feeRate": 0.001,
        "direction": "BUY"
    }
    """
    order_id = safe_string(data, "orderOid", "oid")
    if order_id is None:
        raise MalformedResponseError("malformed order: oid missing", payload=data)

    timestamp = require_timestamp(data.get("createdAt"), f"order {order_id}", data)

    if market is None and catalog is not None:
        market = catalog.find_by_id(market_id_of(data))

    price = safe_decimal(data, "price", "dealPrice")
    pending = safe_decimal(data, "pendingAmount")
    if pending is not None:
        filled = safe_decimal(data, "dealAmount") or Decimal("0")
        amount = pending + filled
    else:
        amount = safe_decimal(data, "amount")
        filled = amount if status == OrderStatus.CLOSED.value else Decimal("0")

    cost = safe_decimal(data, "dealValue")
    if cost is None:
        cost = cost_of(price, filled)

    return Order(
        id=order_id,
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        symbol=market.symbol if market else None,
        type=OrderType.LIMIT.value,
        side=parse_side(safe_value(data, "direction", "dealDirection", "type")),
        price=price,
        amount=amount,
        filled=filled,
        remaining=remaining_of(amount, filled),
        cost=cost,
        status=status,
        info=data,
    )


def parse_orders(
    orders: Iterable[dict[str, Any]],
    status: str,
    market: Market | None = None,
    catalog: MarketCatalog | None = None,
    since: int | None = None,
    limit: int | None = None,
) -> list[Order]:
    return filter_orders((parse_order(o, status, market, catalog) for o in orders), since, limit)


# -----------------------------------------------------------------------------
# 잔고
# -----------------------------------------------------------------------------

def parse_balances(balances: Iterable[dict[str, Any]]) -> dict[str, RawBalance]:
    """Kucoin 잔고 목록 -> 통화별 RawBalance

    Kucoin GET /v1/account/balance 응답 data.datas 항목 예시:
        {"coinType": "KCS", "balanceStr": "1.0", "freezeBalance": 0.5,
         "balance": 1.0, "freezeBalanceStr": "0.5"}

    freezeBalance가 used로 직접 보고됨.
    """
    result: dict[str, RawBalance] = {}
    for item in balances:
        code = common_currency_code(item["coinType"])
        result[code] = RawBalance(
            free=to_decimal(safe_value(item, "balanceStr", "balance"), Decimal("0")),
            used=to_decimal(safe_value(item, "freezeBalanceStr", "freezeBalance"), Decimal("0")),
        )
    return result
