"""
Gdax API 응답 -> 공통 모델 변환

타임스탬프는 ISO-8601 문자열로 오므로 밀리초로 변환.
"""

from decimal import Decimal
from typing import Any, Iterable

from adapters.balance import RawBalance
from adapters.catalog import MarketCatalog
from adapters.errors import MalformedResponseError
from adapters.gdax.constants import (
    AMOUNT_PRECISION,
    MARKET_STATUS_ONLINE,
    NON_BTC_BASE_ASSETS,
    NON_BTC_TAKER,
    ORDER_STATUSES,
)
from adapters.models import (
    OHLCV,
    Currency,
    CurrencyLimits,
    Fee,
    Market,
    MarketLimits,
    MarketPrecision,
    MinMax,
    Order,
    Ticker,
    Trade,
)
from adapters.parsing import (
    filter_orders,
    map_status,
    remaining_of,
    safe_decimal,
    safe_string,
    safe_value,
    sort_and_filter_trades,
)
from core.constants import COMMON_CURRENCY_CODES
from core.types import OrderSide, TakerOrMaker
from core.utils.number import precision_from_string, to_decimal
from core.utils.timestamps import iso8601, milliseconds, parse8601


def common_currency_code(code: str) -> str:
    return COMMON_CURRENCY_CODES.get(code, code)


def _resolve_market(
    product_id: str | None,
    market: Market | None,
    catalog: MarketCatalog | None,
) -> Market | None:
    if market is not None:
        return market
    if catalog is not None:
        return catalog.find_by_id(product_id)
    return None


# -----------------------------------------------------------------------------
# 마켓 / 통화
# -----------------------------------------------------------------------------

def parse_market(data: dict[str, Any]) -> Market:
    """Gdax 상품 -> Market

    Gdax GET /products 응답 항목 예시:
    {
        "id": "BTC-USD",
        "base_currency": "BTC",
        "quote_currency": "USD",
        "base_min_size": "0.001",
        "base_max_size": "10000.00",
        "quote_increment": "0.01",
        "min_market_funds": "10",
        "max_market_funds": "1000000",
        "status": "online"
    }
    """
    base_id = safe_string(data, "base_currency", "base")
    quote_id = safe_string(data, "quote_currency", "quote")
    if base_id is None or quote_id is None:
        raise MalformedResponseError("malformed product: base/quote missing", payload=data)

    base = common_currency_code(base_id)
    quote = common_currency_code(quote_id)
    quote_increment = data.get("quote_increment")

    taker = NON_BTC_TAKER if base in NON_BTC_BASE_ASSETS else None

    return Market(
        id=data["id"],
        symbol=f"{base}/{quote}",
        base=base,
        quote=quote,
        base_id=base_id,
        quote_id=quote_id,
        precision=MarketPrecision(
            amount=AMOUNT_PRECISION,
            price=precision_from_string(quote_increment) if quote_increment else None,
        ),
        limits=MarketLimits(
            amount=MinMax(
                min=safe_decimal(data, "base_min_size"),
                max=safe_decimal(data, "base_max_size"),
            ),
            price=MinMax(min=to_decimal(quote_increment)),
            cost=MinMax(
                min=safe_decimal(data, "min_market_funds"),
                max=safe_decimal(data, "max_market_funds"),
            ),
        ),
        taker=taker,
        active=data.get("status") == MARKET_STATUS_ONLINE,
        info=data,
    )


def parse_markets(products: Iterable[dict[str, Any]]) -> list[Market]:
    return [parse_market(p) for p in products]


def parse_currency(data: dict[str, Any]) -> Currency:
    """Gdax 통화 -> Currency

    Gdax GET /currencies 응답 항목 예시:
        {"id": "BTC", "name": "Bitcoin", "min_size": "0.00000001", "status": "online"}

    precision은 min_size 자리수.
    """
    currency_id = data["id"]
    min_size = data.get("min_size")
    precision = precision_from_string(min_size) if min_size else AMOUNT_PRECISION

    return Currency(
        id=currency_id,
        code=common_currency_code(currency_id),
        precision=precision,
        active=data.get("status", MARKET_STATUS_ONLINE) == MARKET_STATUS_ONLINE,
        limits=CurrencyLimits(amount=MinMax(min=to_decimal(min_size))),
        name=data.get("name"),
        info=data,
    )


def parse_currencies(currencies: Iterable[dict[str, Any]]) -> list[Currency]:
    return [parse_currency(c) for c in currencies]


# -----------------------------------------------------------------------------
# 시세
# -----------------------------------------------------------------------------

def parse_ticker(data: dict[str, Any], market: Market) -> Ticker:
    """Gdax 티커 -> Ticker

    Gdax GET /products/{id}/ticker 응답 예시:
    {
        "trade_id": 4729088,
        "price": "333.99",
        "size": "0.193",
        "bid": "333.98",
        "ask": "333.99",
        "volume": "5957.11914015",
        "time": "2015-11-14T20:46:03.511254Z"
    }
    """
    timestamp = parse8601(data.get("time")) or milliseconds()
    last = safe_decimal(data, "price")

    return Ticker(
        symbol=market.symbol,
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        bid=safe_decimal(data, "bid"),
        ask=safe_decimal(data, "ask"),
        close=last,
        last=last,
        base_volume=safe_decimal(data, "volume"),
        info=data,
    )


def parse_ohlcv(data: list[Any]) -> OHLCV:
    """Gdax 캔들 -> OHLCV

    [time(초), low, high, open, close, volume] -> (ms, open, high, low, close, volume)
    """
    return (
        int(data[0]) * 1000,
        to_decimal(data[3]),
        to_decimal(data[2]),
        to_decimal(data[1]),
        to_decimal(data[4]),
        to_decimal(data[5]),
    )


# -----------------------------------------------------------------------------
# 체결
# -----------------------------------------------------------------------------

def parse_trade(
    data: dict[str, Any],
    market: Market | None = None,
    catalog: MarketCatalog | None = None,
) -> Trade:
    """Gdax 체결 -> Trade

    공개 체결 (GET /products/{id}/trades): side는 메이커 방향이므로 반전.
        {"time": "2014-11-07T22:19:28.578544Z", "trade_id": 74,
         "price": "10.00000000", "size": "0.01000000", "side": "buy"}

    내 체결 (GET /fills): order_id가 있고 side는 내 주문 방향 그대로.
        {"trade_id": 74, "product_id": "BTC-USD", "price": "10.00", "size": "0.01",
         "order_id": "d50ec984-77a8-460a-b958-66f114b0de9b",
         "created_at": "2014-11-07T22:19:28.578544Z", "liquidity": "T",
         "fee": "0.00025", "settled": true, "side": "buy"}
    """
    timestamp = parse8601(safe_value(data, "time", "created_at"))
    if timestamp is None:
        raise MalformedResponseError("malformed trade: time/created_at missing", payload=data)

    price = safe_decimal(data, "price")
    amount = safe_decimal(data, "size")
    if price is None or amount is None:
        raise MalformedResponseError("malformed trade: price/size missing", payload=data)

    market = _resolve_market(data.get("product_id"), market, catalog)
    order_id = safe_string(data, "order_id")

    side = data.get("side")
    if order_id is None and side is not None:
        side = OrderSide.SELL.value if side == OrderSide.BUY.value else OrderSide.BUY.value

    fee = None
    fee_cost = safe_decimal(data, "fill_fees", "fee")
    if fee_cost is not None or "liquidity" in data:
        fee_type = None
        fee_rate = None
        if "liquidity" in data:
            fee_type = (
                TakerOrMaker.TAKER if data["liquidity"] == "T" else TakerOrMaker.MAKER
            ).value
            if market is not None:
                fee_rate = market.taker if fee_type == TakerOrMaker.TAKER.value else market.maker
        fee = Fee(
            cost=fee_cost,
            currency=market.quote if market else None,
            rate=fee_rate,
            type=fee_type,
        )

    return Trade(
        id=safe_string(data, "trade_id"),
        order=order_id,
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        symbol=market.symbol if market else None,
        type=None,
        side=side,
        price=price,
        amount=amount,
        cost=price * amount,
        fee=fee,
        info=data,
    )


def parse_trades(
    trades: Iterable[dict[str, Any]],
    market: Market | None = None,
    catalog: MarketCatalog | None = None,
    since: int | None = None,
    limit: int | None = None,
) -> list[Trade]:
    return sort_and_filter_trades((parse_trade(t, market, catalog) for t in trades), since, limit)


# -----------------------------------------------------------------------------
# 주문
# -----------------------------------------------------------------------------

def parse_order_status(status: str | None) -> str | None:
    """pending/active/open -> open, done -> closed, canceled -> canceled"""
    return map_status(status, ORDER_STATUSES)


def parse_order(
    data: dict[str, Any],
    market: Market | None = None,
    catalog: MarketCatalog | None = None,
) -> Order:
    """Gdax 주문 -> Order

    Gdax GET /orders/{id} 응답 예시:
    {
        "id": "68e6a28f-ae28-4788-8d4f-5ab4e5e5ae08",
        "size": "1.00000000",
        "product_id": "BTC-USD",
        "side": "buy",
        "type": "limit",
        "price": "100.00",
        "created_at": "2016-12-08T20:09:05.508883Z",
        "filled_size": "0.00000000",
        "executed_value": "0.0000000000000000",
        "fill_fees": "0.0000000000000000",
        "status": "open",
        "settled": false
    }
    """
    order_id = safe_string(data, "id")
    if order_id is None:
        raise MalformedResponseError("malformed order: id missing", payload=data)

    timestamp = parse8601(data.get("created_at"))
    if timestamp is None:
        raise MalformedResponseError(
            f"malformed order {order_id}: created_at missing", payload=data
        )

    market = _resolve_market(data.get("product_id"), market, catalog)
    amount = safe_decimal(data, "size", "funds", "specified_funds")
    filled = safe_decimal(data, "filled_size") or Decimal("0")
    fee_cost = safe_decimal(data, "fill_fees")

    return Order(
        id=order_id,
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        symbol=market.symbol if market else None,
        type=data.get("type"),
        side=data.get("side"),
        price=safe_decimal(data, "price"),
        amount=amount,
        filled=filled,
        remaining=remaining_of(amount, filled),
        cost=safe_decimal(data, "executed_value"),
        status=parse_order_status(data.get("status")),
        fee=Fee(cost=fee_cost, currency=market.quote if market else None) if fee_cost is not None else None,
        info=data,
    )


def parse_orders(
    orders: Iterable[dict[str, Any]],
    market: Market | None = None,
    catalog: MarketCatalog | None = None,
    since: int | None = None,
    limit: int | None = None,
) -> list[Order]:
    return filter_orders((parse_order(o, market, catalog) for o in orders), since, limit)


# -----------------------------------------------------------------------------
# 잔고
# -----------------------------------------------------------------------------

def parse_balances(accounts: Iterable[dict[str, Any]]) -> dict[str, RawBalance]:
    """Gdax 계좌 목록 -> 통화별 RawBalance

    Gdax GET /accounts 응답 항목 예시:
    {
        "id": "71452118-efc7-4cc4-8780-a5e22d4baa53",
        "currency": "BTC",
        "balance": "0.0000000000000000",
        "available": "0.0000000000000000",
        "hold": "0.0000000000000000",
        "profile_id": "75da88c5-05bf-4f54-bc85-5c775bd68254"
    }

    hold가 used로 직접 보고됨.
    """
    result: dict[str, RawBalance] = {}
    for account in accounts:
        code = common_currency_code(account["currency"])
        result[code] = RawBalance(
            free=to_decimal(account.get("available"), Decimal("0")),
            used=to_decimal(account.get("hold"), Decimal("0")),
            total=to_decimal(account.get("balance")),
        )
    return result
