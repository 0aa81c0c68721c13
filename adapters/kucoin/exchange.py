"""
Kucoin v1 REST 어댑터

BaseExchange 구현. 모든 응답은 {"success", "code", "msg", "data"}로 감싸져 오며
success가 false면 ExchangeError. 지정가 주문만 지원.
"""

import logging
from decimal import Decimal
from typing import Any

from adapters.base import BaseExchange
from adapters.errors import ExchangeError, MalformedResponseError, NotSupportedError
from adapters.kucoin import parsers
from adapters.kucoin.constants import (
    BALANCE_PAGE_SIZE,
    CATALOG,
    DEFAULT_OHLCV_LIMIT,
    DEFAULT_OHLCV_LIMITS,
    FEES,
    RESOLUTION_MINUTES,
    TIMEFRAMES,
)
from adapters.kucoin.signer import KucoinSigner
from adapters.models import (
    OHLCV,
    Balance,
    Currency,
    Market,
    Order,
    OrderBook,
    Ticker,
    Trade,
)
from adapters.parsing import iter_ohlcvs, parse_order_book, safe_string
from core.types import ExchangeId, OrderStatus, OrderType
from core.utils.number import decimal_arg, truncate
from core.utils.timestamps import iso8601, milliseconds, seconds

logger = logging.getLogger(__name__)


def _unwrap(response: Any, operation: str) -> Any:
    """응답 envelope에서 data 추출

    Raises:
        ExchangeError: success가 false
        MalformedResponseError: envelope 형태가 아님
    """
    if not isinstance(response, dict):
        raise MalformedResponseError(f"Kucoin {operation}() unexpected response", payload=response)
    if response.get("success") is False:
        raise ExchangeError(
            f"Kucoin {operation}() failed: {response.get('code')} {response.get('msg')}"
        )
    return response.get("data")


class KucoinExchange(BaseExchange):
    """Kucoin 어댑터 (BaseExchange 참고)"""

    id = ExchangeId.KUCOIN.value
    name = "Kucoin"

    CATALOG = CATALOG
    FEES = FEES
    TIMEFRAMES = TIMEFRAMES
    SIGNER_CLASS = KucoinSigner

    # -------------------------------------------------------------------------
    # 계정
    # -------------------------------------------------------------------------

    async def fetch_user_info(self) -> Any:
        """계정 정보 (원본 data)"""
        response = await self.api["private", "get", "userInfo"]()
        return _unwrap(response, "fetch_user_info")

    # -------------------------------------------------------------------------
    # 마켓 / 시세
    # -------------------------------------------------------------------------

    async def fetch_markets(self) -> list[Market]:
        response = await self.api["public", "get", "marketOpenSymbols"]()
        return parsers.parse_markets(_unwrap(response, "fetch_markets"))

    async def fetch_currencies(self) -> list[Currency]:
        response = await self.api["public", "get", "marketOpenCoins"]()
        return parsers.parse_currencies(_unwrap(response, "fetch_currencies"))

    async def fetch_ticker(self, symbol: str, params: dict[str, Any] | None = None) -> Ticker:
        await self.load_markets()
        market = self.market(symbol)

        response = await self.api["public", "get", "openTick"](
            params={"symbol": market.id, **(params or {})},
        )

        return parsers.parse_ticker(_unwrap(response, "fetch_ticker"), market)

    async def fetch_tickers(
        self,
        symbols: list[str] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Ticker]:
        await self.load_markets()
        response = await self.api["public", "get", "marketOpenSymbols"](params=params)
        return parsers.parse_tickers(_unwrap(response, "fetch_tickers"), self.catalog, symbols)

    async def fetch_order_book(
        self,
        symbol: str,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> OrderBook:
        await self.load_markets()
        market = self.market(symbol)

        request: dict[str, Any] = {"symbol": market.id}
        if limit is not None:
            request["limit"] = limit

        response = await self.api["public", "get", "openOrders"](params={**request, **(params or {})})
        data = _unwrap(response, "fetch_order_book") or {}

        return parse_order_book(
            data,
            timestamp=response.get("timestamp"),
            bids_key="BUY",
            asks_key="SELL",
        )

    async def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1m",
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[OHLCV]:
        await self.load_markets()
        market = self.market(symbol)
        resolution = self.timeframe(timeframe)

        if isinstance(resolution, str):
            minutes = RESOLUTION_MINUTES[resolution]
            count = limit or DEFAULT_OHLCV_LIMITS[resolution]
        else:
            minutes = resolution
            count = limit or DEFAULT_OHLCV_LIMIT

        span = minutes * 60 * count
        if since is not None:
            start = since // 1000
            end = start + span
        else:
            end = seconds()
            start = end - span

        request = {
            "symbol": market.id,
            "type": resolution,
            "resolution": resolution,
            "from": start,
            "to": end,
        }

        response = await self.api["kitchen", "get", "openChartHistory"](
            params={**request, **(params or {})},
        )

        rows = parsers.iter_chart_ohlcvs(response)
        return list(iter_ohlcvs(rows, parsers.parse_ohlcv, since, limit))

    async def fetch_trades(
        self,
        symbol: str,
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[Trade]:
        await self.load_markets()
        market = self.market(symbol)

        response = await self.api["public", "get", "openDealOrders"](
            params={"symbol": market.id, **(params or {})},
        )

        return parsers.parse_trades(_unwrap(response, "fetch_trades") or [], market, since, limit)

    # -------------------------------------------------------------------------
    # 잔고
    # -------------------------------------------------------------------------

    async def fetch_balance(self, params: dict[str, Any] | None = None) -> Balance:
        await self.load_markets()

        response = await self.api["private", "get", "accountBalance"](
            params={"limit": BALANCE_PAGE_SIZE, "page": 1, **(params or {})},
        )
        data = _unwrap(response, "fetch_balance") or []
        # 페이지 응답이면 datas 안에 목록
        balances = data.get("datas", []) if isinstance(data, dict) else data

        return self._build_balance(parsers.parse_balances(balances), info=balances)

    # -------------------------------------------------------------------------
    # 주문
    # -------------------------------------------------------------------------

    async def create_order(
        self,
        symbol: str,
        type: str,
        side: str,
        amount: Decimal,
        price: Decimal | None = None,
        params: dict[str, Any] | None = None,
    ) -> Order:
        """지정가 주문 생성

        응답에는 orderOid만 있어 요청 값으로 open 주문을 구성.

        Raises:
            NotSupportedError: 지정가 외 주문
            ValueError: price 누락
        """
        if type != OrderType.LIMIT.value:
            raise NotSupportedError(f"{self.id} allows limit orders only")
        if price is None:
            raise ValueError("price is required for limit orders")

        await self.load_markets()
        market = self.market(symbol)
        base_precision = self.currency(market.base).precision

        request = {
            "symbol": market.id,
            "type": side.upper(),
            "price": self.price_to_precision(symbol, price),
            "amount": format(truncate(decimal_arg(amount), base_precision), "f"),
        }

        response = await self.api["private", "post", "order"](data={**request, **(params or {})})
        data = _unwrap(response, "create_order") or {}

        order_id = safe_string(data, "orderOid")
        if order_id is None:
            raise MalformedResponseError("Kucoin create_order() response has no orderOid", payload=response)

        timestamp = milliseconds()
        order_amount = Decimal(request["amount"])
        order = Order(
            id=order_id,
            timestamp=timestamp,
            datetime=iso8601(timestamp),
            symbol=market.symbol,
            type=type,
            side=side,
            price=Decimal(request["price"]),
            amount=order_amount,
            filled=Decimal("0"),
            remaining=order_amount,
            status=OrderStatus.OPEN.value,
            info=response,
        )
        self._remember([order])

        logger.info(
            "Order created",
            extra={"exchange": self.id, "order_id": order.id, "symbol": symbol, "side": side},
        )

        return order

    async def cancel_order(
        self,
        id: str,
        symbol: str | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """주문 취소

        Raises:
            ValueError: symbol 또는 params["type"] (BUY/SELL) 누락
        """
        if not symbol:
            raise ValueError(f"{self.id} cancel_order() requires a symbol argument")
        params = dict(params or {})
        if "type" not in params:
            raise ValueError(f"{self.id} cancel_order() requires a type (BUY or SELL) param")

        await self.load_markets()
        market = self.market(symbol)

        request = {
            "symbol": market.id,
            "orderOid": id,
            **params,
            "type": str(params["type"]).upper(),
        }

        response = await self.api["private", "post", "cancelOrder"](data=request)
        _unwrap(response, "cancel_order")
        return response

    async def fetch_open_orders(
        self,
        symbol: str | None = None,
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[Order]:
        if not symbol:
            raise ValueError(f"{self.id} fetch_open_orders() requires a symbol argument")

        await self.load_markets()
        market = self.market(symbol)

        response = await self.api["private", "get", "orderActiveMap"](
            params={"symbol": market.id, **(params or {})},
        )
        data = _unwrap(response, "fetch_open_orders") or {}
        raw_orders = [*(data.get("SELL") or []), *(data.get("BUY") or [])]

        return self._remember(
            parsers.parse_orders(
                raw_orders, OrderStatus.OPEN.value, market, self.catalog, since, limit
            )
        )

    async def fetch_closed_orders(
        self,
        symbol: str | None = None,
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[Order]:
        await self.load_markets()

        market = None
        request: dict[str, Any] = {}
        if symbol:
            market = self.market(symbol)
            request["symbol"] = market.id
        if since is not None:
            request["since"] = since
        if limit is not None:
            request["limit"] = limit

        response = await self.api["private", "get", "orderDealt"](params={**request, **(params or {})})
        data = _unwrap(response, "fetch_closed_orders") or {}

        return self._remember(
            parsers.parse_orders(
                data.get("datas") or [], OrderStatus.CLOSED.value, market, self.catalog, since, limit
            )
        )
