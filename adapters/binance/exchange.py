"""
Binance 현물 REST 어댑터

BaseExchange 구현. HMAC-SHA256 서명, Decimal 사용.
주문 조회 계열(fetch_order, fetch_orders, fetch_open_orders, fetch_my_trades)은 심볼 필수.
"""

import logging
from decimal import Decimal
from typing import Any

from adapters.base import BaseExchange
from adapters.binance import parsers
from adapters.binance.constants import (
    AGG_TRADES_WINDOW_MS,
    CATALOG,
    COMMON_CODES,
    DEFAULT_OHLCV_LIMIT,
    DEFAULT_ORDER_BOOK_LIMIT,
    FEES,
    TIME_IN_FORCE_GTC,
    TIMEFRAMES,
)
from adapters.binance.signer import BinanceSigner
from adapters.errors import ExchangeError, NotSupportedError
from adapters.models import (
    OHLCV,
    Balance,
    DepositAddress,
    Market,
    Order,
    OrderBook,
    Ticker,
    Trade,
    TransferResult,
)
from adapters.parsing import iter_ohlcvs, parse_order_book
from core.types import ExchangeId, OrderType
from core.utils.number import decimal_arg
from core.utils.timestamps import milliseconds

logger = logging.getLogger(__name__)


class BinanceExchange(BaseExchange):
    """Binance 어댑터

    Args:
        adjust_for_time_difference: fetch_markets 시 서버 시간 차이를 측정해
            서명 nonce에 반영
        (나머지는 BaseExchange 참고)
    """

    id = ExchangeId.BINANCE.value
    name = "Binance"

    CATALOG = CATALOG
    FEES = FEES
    TIMEFRAMES = TIMEFRAMES
    SIGNER_CLASS = BinanceSigner
    COMMON_CODES = COMMON_CODES

    def __init__(self, *args: Any, adjust_for_time_difference: bool = False, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.adjust_for_time_difference = adjust_for_time_difference
        self.time_difference: int = 0

    @staticmethod
    def _require_symbol(symbol: str | None, operation: str) -> str:
        if not symbol:
            raise ValueError(f"Binance {operation}() requires a symbol argument")
        return symbol

    # -------------------------------------------------------------------------
    # 서버 시간
    # -------------------------------------------------------------------------

    async def load_time_difference(self) -> int:
        """서버 시간과 동기화

        요청 전후 로컬 시각의 평균과 서버 시각 차이를 nonce 오프셋으로 저장.

        Returns:
            서버 - 로컬 시간 차이 (밀리초)
        """
        before = milliseconds()
        response = await self.api["public", "get", "time"]()
        after = milliseconds()

        local_time = (before + after) // 2
        self.time_difference = int(response["serverTime"]) - local_time
        self.signer.nonce_generator.offset_ms = self.time_difference

        logger.info(
            "서버 시간 동기화 완료",
            extra={"exchange": self.id, "offset_ms": self.time_difference},
        )

        return self.time_difference

    # -------------------------------------------------------------------------
    # 마켓 / 시세
    # -------------------------------------------------------------------------

    async def fetch_markets(self) -> list[Market]:
        response = await self.api["public", "get", "exchangeInfo"]()

        if self.adjust_for_time_difference:
            await self.load_time_difference()

        return parsers.parse_markets(response["symbols"])

    async def fetch_ticker(self, symbol: str, params: dict[str, Any] | None = None) -> Ticker:
        await self.load_markets()
        market = self.market(symbol)

        response = await self.api["public", "get", "ticker24Hr"](
            params={"symbol": market.id, **(params or {})},
        )

        return parsers.parse_ticker(response, market, self.catalog)

    async def fetch_tickers(
        self,
        symbols: list[str] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Ticker]:
        await self.load_markets()
        response = await self.api["public", "get", "ticker24Hr"](params=params)
        return parsers.parse_tickers(response, self.catalog, symbols)

    async def fetch_bid_asks(
        self,
        symbols: list[str] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Ticker]:
        """전 심볼 최우선 호가"""
        await self.load_markets()
        response = await self.api["public", "get", "tickerBookTicker"](params=params)
        return parsers.parse_tickers(response, self.catalog, symbols)

    async def fetch_order_book(
        self,
        symbol: str,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> OrderBook:
        await self.load_markets()
        market = self.market(symbol)

        response = await self.api["public", "get", "depth"](
            params={
                "symbol": market.id,
                "limit": limit or DEFAULT_ORDER_BOOK_LIMIT,
                **(params or {}),
            },
        )

        return parse_order_book(response)

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

        request: dict[str, Any] = {
            "symbol": market.id,
            "interval": self.timeframe(timeframe),
            "limit": limit or DEFAULT_OHLCV_LIMIT,
        }
        if since is not None:
            request["startTime"] = since

        response = await self.api["public", "get", "klines"](params={**request, **(params or {})})

        return list(iter_ohlcvs(response, parsers.parse_ohlcv, since, limit))

    async def fetch_trades(
        self,
        symbol: str,
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[Trade]:
        await self.load_markets()
        market = self.market(symbol)

        request: dict[str, Any] = {"symbol": market.id}
        if since is not None:
            request["startTime"] = since
            request["endTime"] = since + AGG_TRADES_WINDOW_MS
        if limit is not None:
            request["limit"] = limit

        response = await self.api["public", "get", "aggTrades"](params={**request, **(params or {})})

        return parsers.parse_trades(response, market, since, limit)

    # -------------------------------------------------------------------------
    # 계좌
    # -------------------------------------------------------------------------

    async def fetch_balance(self, params: dict[str, Any] | None = None) -> Balance:
        await self.load_markets()
        response = await self.api["private", "get", "account"](params=params)
        return self._build_balance(parsers.parse_balances(response), info=response)

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
        await self.load_markets()
        market = self.market(symbol)

        request: dict[str, Any] = {
            "symbol": market.id,
            "quantity": self.amount_to_precision(symbol, amount),
            "type": type.upper(),
            "side": side.upper(),
        }
        if type == OrderType.LIMIT.value:
            if price is None:
                raise ValueError("price is required for limit orders")
            request["price"] = self.price_to_precision(symbol, price)
            request["timeInForce"] = TIME_IN_FORCE_GTC

        response = await self.api["private", "post", "order"](params={**request, **(params or {})})

        order = parsers.parse_order(response, market, self.catalog)
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
        symbol = self._require_symbol(symbol, "cancel_order")
        await self.load_markets()
        market = self.market(symbol)

        return await self.api["private", "delete", "order"](
            params={"symbol": market.id, "orderId": int(id), **(params or {})},
        )

    async def fetch_order(
        self,
        id: str,
        symbol: str | None = None,
        params: dict[str, Any] | None = None,
    ) -> Order:
        symbol = self._require_symbol(symbol, "fetch_order")
        await self.load_markets()
        market = self.market(symbol)

        response = await self.api["private", "get", "order"](
            params={"symbol": market.id, "orderId": int(id), **(params or {})},
        )

        order = parsers.parse_order(response, market, self.catalog)
        self._remember([order])
        return order

    async def fetch_orders(
        self,
        symbol: str | None = None,
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[Order]:
        symbol = self._require_symbol(symbol, "fetch_orders")
        await self.load_markets()
        market = self.market(symbol)

        request: dict[str, Any] = {"symbol": market.id}
        if limit is not None:
            request["limit"] = limit

        response = await self.api["private", "get", "allOrders"](params={**request, **(params or {})})

        return self._remember(parsers.parse_orders(response, market, self.catalog, since, limit))

    async def fetch_open_orders(
        self,
        symbol: str | None = None,
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[Order]:
        symbol = self._require_symbol(symbol, "fetch_open_orders")
        await self.load_markets()
        market = self.market(symbol)

        response = await self.api["private", "get", "openOrders"](
            params={"symbol": market.id, **(params or {})},
        )

        return self._remember(parsers.parse_orders(response, market, self.catalog, since, limit))

    async def fetch_my_trades(
        self,
        symbol: str | None = None,
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[Trade]:
        symbol = self._require_symbol(symbol, "fetch_my_trades")
        await self.load_markets()
        market = self.market(symbol)

        request: dict[str, Any] = {"symbol": market.id}
        if limit is not None:
            request["limit"] = limit

        response = await self.api["private", "get", "myTrades"](params={**request, **(params or {})})

        return parsers.parse_trades(response, market, since, limit)

    # -------------------------------------------------------------------------
    # 입출금
    # -------------------------------------------------------------------------

    async def withdraw(
        self,
        currency: str,
        amount: Decimal,
        address: str | None = None,
        tag: str | None = None,
        params: dict[str, Any] | None = None,
    ) -> TransferResult:
        if not address:
            raise NotSupportedError("Binance withdraw() requires a destination address")

        request: dict[str, Any] = {
            "asset": self.currency_id(currency),
            "address": address,
            "amount": format(decimal_arg(amount), "f"),
            "name": address[:20],
        }
        if tag:
            request["addressTag"] = tag

        response = await self.api["wapi", "post", "withdraw"](params={**request, **(params or {})})

        return TransferResult(id=response.get("id"), info=response)

    async def fetch_deposit_address(
        self,
        currency: str,
        params: dict[str, Any] | None = None,
    ) -> DepositAddress:
        response = await self.api["wapi", "get", "depositAddress"](
            params={"asset": self.currency_id(currency), **(params or {})},
        )

        if not response.get("success"):
            raise ExchangeError(f"Binance fetch_deposit_address() failed: {response}")

        return DepositAddress(
            currency=currency,
            address=response.get("address"),
            tag=response.get("addressTag"),
            status="ok",
            info=response,
        )
