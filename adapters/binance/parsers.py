"""
Binance API 응답 -> 공통 모델 변환

모든 금액/수량은 문자열에서 Decimal로 변환.
카탈로그가 필요한 함수는 MarketCatalog를 인자로 받음 (상태 없음).
"""

from decimal import Decimal
from typing import Any, Iterable

from adapters.balance import RawBalance
from adapters.catalog import MarketCatalog
from adapters.binance.constants import (
    COMMON_CODES,
    MARKET_STATUS_TRADING,
    NULL_ID,
    ORDER_STATUSES,
)
from adapters.errors import MalformedResponseError
from adapters.models import (
    OHLCV,
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
    cost_of,
    filter_orders,
    index_tickers,
    map_status,
    ohlcv_from_list,
    remaining_of,
    require_timestamp,
    safe_decimal,
    safe_lower,
    safe_string,
    safe_value,
    sort_and_filter_trades,
)
from core.constants import COMMON_CURRENCY_CODES
from core.types import OrderSide, TakerOrMaker
from core.utils.number import decimal_places, precision_from_string, to_decimal
from core.utils.timestamps import iso8601, milliseconds


def common_currency_code(code: str) -> str:
    """Binance 통화 코드 -> 공통 코드 (BCC -> BCH)"""
    if code in COMMON_CODES:
        return COMMON_CODES[code]
    return COMMON_CURRENCY_CODES.get(code, code)


def _symbol_for(
    market_id: str | None,
    market: Market | None,
    catalog: MarketCatalog | None,
) -> tuple[str | None, Market | None]:
    if market is not None:
        return market.symbol, market
    if catalog is not None:
        found = catalog.find_by_id(market_id)
        if found is not None:
            return found.symbol, found
    return market_id, None


# -----------------------------------------------------------------------------
# 마켓
# -----------------------------------------------------------------------------

def parse_market(data: dict[str, Any]) -> Market | None:
    """Binance 마켓 -> Market (더미 마켓이면 None)

    Binance GET /api/v1/exchangeInfo symbols[] 예시:
    {
        "symbol": "ETHBTC",
        "status": "TRADING",
        "baseAsset": "ETH",
        "baseAssetPrecision": 8,
        "quoteAsset": "BTC",
        "quotePrecision": 8,
        "filters": [
            {"filterType": "PRICE_FILTER", "minPrice": "0.00000100",
             "maxPrice": "100000.00000000", "tickSize": "0.00000100"},
            {"filterType": "LOT_SIZE", "minQty": "0.00100000",
             "maxQty": "100000.00000000", "stepSize": "0.00100000"},
            {"filterType": "MIN_NOTIONAL", "minNotional": "0.00100000"}
        ]
    }
    """
    market_id = data["symbol"]
    if market_id == NULL_ID:
        return None

    base_id = data["baseAsset"]
    quote_id = data["quoteAsset"]
    base = common_currency_code(base_id)
    quote = common_currency_code(quote_id)
    filters = {f.get("filterType"): f for f in data.get("filters") or []}

    base_precision = int(data["baseAssetPrecision"])
    quote_precision = int(data["quotePrecision"])

    # 필터가 없으면 자산 precision에서 유도한 기본값 유지
    amount_precision = base_precision
    price_precision = quote_precision
    amount_limits = MinMax(min=decimal_places(base_precision))
    price_limits = MinMax(min=decimal_places(quote_precision))
    cost_limits = MinMax()

    price_filter = filters.get("PRICE_FILTER")
    if price_filter:
        price_precision = precision_from_string(price_filter["tickSize"])
        price_limits = MinMax(
            min=to_decimal(price_filter.get("minPrice")),
            max=to_decimal(price_filter.get("maxPrice")),
        )

    lot_size = filters.get("LOT_SIZE")
    if lot_size:
        amount_precision = precision_from_string(lot_size["stepSize"])
        amount_limits = MinMax(
            min=to_decimal(lot_size.get("minQty")),
            max=to_decimal(lot_size.get("maxQty")),
        )

    min_notional = filters.get("MIN_NOTIONAL")
    if min_notional:
        cost_limits = MinMax(min=to_decimal(min_notional.get("minNotional")))

    return Market(
        id=market_id,
        symbol=f"{base}/{quote}",
        base=base,
        quote=quote,
        base_id=base_id,
        quote_id=quote_id,
        precision=MarketPrecision(
            base=base_precision,
            quote=quote_precision,
            amount=amount_precision,
            price=price_precision,
        ),
        limits=MarketLimits(amount=amount_limits, price=price_limits, cost=cost_limits),
        active=data.get("status") == MARKET_STATUS_TRADING,
        info=data,
    )


def parse_markets(markets: Iterable[dict[str, Any]]) -> list[Market]:
    result = []
    for data in markets:
        market = parse_market(data)
        if market is not None:
            result.append(market)
    return result


# -----------------------------------------------------------------------------
# 시세
# -----------------------------------------------------------------------------

def parse_ticker(
    data: dict[str, Any],
    market: Market | None = None,
    catalog: MarketCatalog | None = None,
) -> Ticker:
    """Binance 24시간 시세 -> Ticker

    closeTime이 없으면(bookTicker 등) 현재 시각 사용.

    Binance GET /api/v1/ticker/24hr 응답 예시:
    {
        "symbol": "ETHBTC",
        "priceChange": "0.00546200",
        "priceChangePercent": "5.073",
        "weightedAvgPrice": "0.11026035",
        "prevClosePrice": "0.10767300",
        "lastPrice": "0.11313500",
        "bidPrice": "0.11313500",
        "bidQty": "0.00100000",
        "askPrice": "0.11321600",
        "askQty": "7.08100000",
        "openPrice": "0.10767300",
        "highPrice": "0.11411900",
        "lowPrice": "0.10690000",
        "volume": "108008.44000000",
        "quoteVolume": "11909.04836175",
        "openTime": 1517382804353,
        "closeTime": 1517469204353
    }
    """
    close_time = data.get("closeTime")
    timestamp = int(close_time) if close_time else milliseconds()
    symbol, _ = _symbol_for(data.get("symbol"), market, catalog)
    last = safe_decimal(data, "lastPrice")

    return Ticker(
        symbol=symbol,
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        high=safe_decimal(data, "highPrice"),
        low=safe_decimal(data, "lowPrice"),
        bid=safe_decimal(data, "bidPrice"),
        bid_volume=safe_decimal(data, "bidQty"),
        ask=safe_decimal(data, "askPrice"),
        ask_volume=safe_decimal(data, "askQty"),
        vwap=safe_decimal(data, "weightedAvgPrice"),
        open=safe_decimal(data, "openPrice"),
        close=last,
        last=last,
        change=safe_decimal(data, "priceChange"),
        percentage=safe_decimal(data, "priceChangePercent"),
        base_volume=safe_decimal(data, "volume"),
        quote_volume=safe_decimal(data, "quoteVolume"),
        info=data,
    )


def parse_tickers(
    tickers: Iterable[dict[str, Any]],
    catalog: MarketCatalog | None = None,
    symbols: Iterable[str] | None = None,
) -> dict[str, Ticker]:
    return index_tickers((parse_ticker(t, catalog=catalog) for t in tickers), symbols)


def parse_ohlcv(data: list[Any]) -> OHLCV:
    """Binance kline -> OHLCV

    [openTime, open, high, low, close, volume, closeTime, ...]
    """
    return ohlcv_from_list(data)


# -----------------------------------------------------------------------------
# 주문
# -----------------------------------------------------------------------------

def parse_order_status(status: str | None) -> str | None:
    """NEW/PARTIALLY_FILLED -> open, FILLED -> closed, CANCELED -> canceled"""
    return map_status(status, ORDER_STATUSES)


def parse_order(
    data: dict[str, Any],
    market: Market | None = None,
    catalog: MarketCatalog | None = None,
) -> Order:
    """Binance 주문 -> Order

    Binance POST /api/v3/order 응답 예시:
    {
        "symbol": "ETHBTC",
        "orderId": 1740797,
        "clientOrderId": "1XZTVBTGS4K1e",
        "transactTime": 1514418413947,
        "price": "0.00020000",
        "origQty": "100.00000000",
        "executedQty": "0.00000000",
        "status": "NEW",
        "timeInForce": "GTC",
        "type": "LIMIT",
        "side": "BUY"
    }

    조회 응답은 transactTime 대신 time을 가짐. 둘 다 없으면 MalformedResponseError.
    """
    order_id = safe_string(data, "orderId")
    if order_id is None:
        raise MalformedResponseError("malformed order: orderId missing", payload=data)

    timestamp = require_timestamp(safe_value(data, "time", "transactTime"), "order", data)
    symbol, _ = _symbol_for(data.get("symbol"), market, catalog)

    price = safe_decimal(data, "price")
    amount = safe_decimal(data, "origQty")
    filled = safe_decimal(data, "executedQty") or Decimal("0")

    return Order(
        id=order_id,
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        symbol=symbol,
        type=safe_lower(data.get("type")),
        side=safe_lower(data.get("side")),
        price=price,
        amount=amount,
        filled=filled,
        remaining=remaining_of(amount, filled),
        cost=cost_of(price, amount),
        status=parse_order_status(data.get("status")),
        fee=None,
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
# 체결
# -----------------------------------------------------------------------------

def _trade_side(data: dict[str, Any]) -> str | None:
    # aggTrades의 m(isBuyerMaker)는 메이커 플래그: 매수자가 메이커면 테이커는 매도
    for maker_flag in ("m", "isBuyerMaker"):
        if maker_flag in data:
            return OrderSide.SELL.value if data[maker_flag] else OrderSide.BUY.value
    # myTrades의 isBuyer는 내 계정의 실제 방향
    if "isBuyer" in data:
        return OrderSide.BUY.value if data["isBuyer"] else OrderSide.SELL.value
    return None


def parse_trade(data: dict[str, Any], market: Market | None = None) -> Trade:
    """Binance 체결 -> Trade

    aggTrades 예시:
        {"a": 26129, "p": "0.01633102", "q": "4.70443515", "f": 27781,
         "l": 27781, "T": 1498793709153, "m": true, "M": true}

    myTrades 예시:
        {"id": 9960, "orderId": 191939, "price": "0.00138000", "qty": "10.00000000",
         "commission": "0.00001380", "commissionAsset": "ETH", "time": 1508611114735,
         "isBuyer": false, "isMaker": false, "isBestMatch": true}
    """
    timestamp = require_timestamp(safe_value(data, "T", "time", "timestamp"), "trade", data)
    price = safe_decimal(data, "p", "price")
    amount = safe_decimal(data, "q", "qty", "quantity")
    if price is None or amount is None:
        raise MalformedResponseError("malformed trade: price/amount missing", payload=data)

    fee = None
    commission = safe_decimal(data, "commission")
    if commission is not None:
        commission_asset = data.get("commissionAsset")
        fee = Fee(
            cost=commission,
            currency=common_currency_code(commission_asset) if commission_asset else None,
            type=(
                (TakerOrMaker.MAKER if data.get("isMaker") else TakerOrMaker.TAKER).value
                if "isMaker" in data
                else None
            ),
        )

    return Trade(
        id=safe_string(data, "a", "id", "aggId"),
        order=safe_string(data, "orderId"),
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        symbol=market.symbol if market else None,
        type=None,
        side=_trade_side(data),
        price=price,
        amount=amount,
        cost=price * amount,
        fee=fee,
        info=data,
    )


def parse_trades(
    trades: Iterable[dict[str, Any]],
    market: Market | None = None,
    since: int | None = None,
    limit: int | None = None,
) -> list[Trade]:
    return sort_and_filter_trades((parse_trade(t, market) for t in trades), since, limit)


# -----------------------------------------------------------------------------
# 잔고
# -----------------------------------------------------------------------------

def parse_balances(data: dict[str, Any]) -> dict[str, RawBalance]:
    """Binance 계좌 응답 -> 통화별 RawBalance

    Binance GET /api/v3/account 응답 예시:
    {
        "makerCommission": 15,
        "canTrade": true,
        "balances": [
            {"asset": "BTC", "free": "4723846.89208129", "locked": "0.00000000"},
            {"asset": "LTC", "free": "4763368.68006011", "locked": "0.00000000"}
        ]
    }

    locked가 used로 직접 보고됨.
    """
    result: dict[str, RawBalance] = {}
    for balance in data.get("balances") or []:
        code = common_currency_code(balance["asset"])
        result[code] = RawBalance(
            free=to_decimal(balance.get("free"), Decimal("0")),
            used=to_decimal(balance.get("locked"), Decimal("0")),
        )
    return result
