"""
Gdax REST 어댑터

BaseExchange 구현. 서명은 base64 secret + passphrase, 주문 본문은 JSON.
입출금은 params에 담긴 출처/대상 키(payment_method_id, coinbase_account_id)에 따라
엔드포인트가 달라짐.
"""

import logging
from decimal import Decimal
from typing import Any

from adapters.base import BaseExchange
from adapters.errors import ExchangeError, NotSupportedError
from adapters.gdax import parsers
from adapters.gdax.constants import (
    CATALOG,
    FEES,
    MAX_CANDLES,
    ORDER_BOOK_LEVEL,
    ORDER_QUERY_ALL,
    ORDER_QUERY_DONE,
    TIMEFRAMES,
)
from adapters.gdax.signer import GdaxSigner
from adapters.models import (
    OHLCV,
    Balance,
    Currency,
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
from core.utils.timestamps import parse8601, ymdhms

logger = logging.getLogger(__name__)


PAYMENT_METHOD_KEY = "payment_method_id"
COINBASE_ACCOUNT_KEY = "coinbase_account_id"


def _format_amount(amount: Decimal) -> str:
    return format(decimal_arg(amount), "f")


class GdaxExchange(BaseExchange):
    """Gdax 어댑터 (BaseExchange 참고)"""

    id = ExchangeId.GDAX.value
    name = "Gdax"

    CATALOG = CATALOG
    FEES = FEES
    TIMEFRAMES = TIMEFRAMES
    SIGNER_CLASS = GdaxSigner

    def _product_filter(self, symbol: str | None) -> tuple[Market | None, dict[str, Any]]:
        """심볼이 있으면 (market, {"product_id": id}), 없으면 (None, {})"""
        if not symbol:
            return None, {}
        market = self.market(symbol)
        return market, {"product_id": market.id}

    # -------------------------------------------------------------------------
    # 마켓 / 시세
    # -------------------------------------------------------------------------

    async def fetch_markets(self) -> list[Market]:
        response = await self.api["public", "get", "products"]()
        return parsers.parse_markets(response)

    async def fetch_currencies(self) -> list[Currency]:
        response = await self.api["public", "get", "currencies"]()
        return parsers.parse_currencies(response)

    async def fetch_time(self) -> int | None:
        """서버 시간 (밀리초)"""
        response = await self.api["public", "get", "time"]()
        return parse8601(response.get("iso"))

    async def fetch_ticker(self, symbol: str, params: dict[str, Any] | None = None) -> Ticker:
        await self.load_markets()
        market = self.market(symbol)

        response = await self.api["public", "get", "productsIdTicker"](id=market.id, params=params)

        return parsers.parse_ticker(response, market)

    async def fetch_order_book(
        self,
        symbol: str,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> OrderBook:
        await self.load_markets()

        response = await self.api["public", "get", "productsIdBook"](
            id=self.market_id(symbol),
            params={"level": ORDER_BOOK_LEVEL, **(params or {})},
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
        granularity = self.timeframe(timeframe)

        request: dict[str, Any] = {"granularity": granularity}
        if since is not None:
            # 구간을 지정하지 않으면 최근 캔들만 반환됨
            count = limit or MAX_CANDLES
            request["start"] = ymdhms(since)
            request["end"] = ymdhms(since + count * granularity * 1000)

        response = await self.api["public", "get", "productsIdCandles"](
            id=market.id,
            params={**request, **(params or {})},
        )

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

        response = await self.api["public", "get", "productsIdTrades"](id=market.id, params=params)

        return parsers.parse_trades(response, market, self.catalog, since, limit)

    # -------------------------------------------------------------------------
    # 계좌
    # -------------------------------------------------------------------------

    async def fetch_balance(self, params: dict[str, Any] | None = None) -> Balance:
        await self.load_markets()
        response = await self.api["private", "get", "accounts"](params=params)
        return self._build_balance(parsers.parse_balances(response), info=response)

    async def fetch_my_trades(
        self,
        symbol: str | None = None,
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[Trade]:
        await self.load_markets()
        market, request = self._product_filter(symbol)
        if limit is not None:
            request["limit"] = limit

        response = await self.api["private", "get", "fills"](params={**request, **(params or {})})

        return parsers.parse_trades(response, market, self.catalog, since, limit)

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

        data: dict[str, Any] = {
            "product_id": market.id,
            "side": side,
            "size": self.amount_to_precision(symbol, amount),
            "type": type,
        }
        if type == OrderType.LIMIT.value:
            if price is None:
                raise ValueError("price is required for limit orders")
            data["price"] = self.price_to_precision(symbol, price)
        data.update(params or {})

        response = await self.api["private", "post", "orders"](data=data)

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
        await self.load_markets()
        return await self.api["private", "delete", "ordersId"](id=id, params=params)

    async def fetch_order(
        self,
        id: str,
        symbol: str | None = None,
        params: dict[str, Any] | None = None,
    ) -> Order:
        await self.load_markets()

        response = await self.api["private", "get", "ordersId"](id=id, params=params)

        order = parsers.parse_order(response, catalog=self.catalog)
        self._remember([order])
        return order

    async def _fetch_orders_by_status(
        self,
        status: str | None,
        symbol: str | None,
        since: int | None,
        limit: int | None,
        params: dict[str, Any] | None,
    ) -> list[Order]:
        await self.load_markets()
        market, request = self._product_filter(symbol)
        if status is not None:
            request["status"] = status

        response = await self.api["private", "get", "orders"](params={**(params or {}), **request})

        return self._remember(parsers.parse_orders(response, market, self.catalog, since, limit))

    async def fetch_orders(
        self,
        symbol: str | None = None,
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[Order]:
        return await self._fetch_orders_by_status(ORDER_QUERY_ALL, symbol, since, limit, params)

    async def fetch_open_orders(
        self,
        symbol: str | None = None,
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[Order]:
        # status 미지정 시 open/pending/active만 반환
        return await self._fetch_orders_by_status(None, symbol, since, limit, params)

    async def fetch_closed_orders(
        self,
        symbol: str | None = None,
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[Order]:
        return await self._fetch_orders_by_status(ORDER_QUERY_DONE, symbol, since, limit, params)

    # -------------------------------------------------------------------------
    # 입출금
    # -------------------------------------------------------------------------

    async def fetch_payment_methods(self) -> Any:
        """연결된 결제 수단 목록 (원본 응답)"""
        return await self.api["private", "get", "paymentMethods"]()

    @staticmethod
    def _transfer_result(operation: str, response: Any) -> TransferResult:
        if not response:
            raise ExchangeError(f"Gdax {operation}() error: {response!r}")
        return TransferResult(id=response.get("id"), info=response)

    async def deposit(
        self,
        currency: str,
        amount: Decimal,
        params: dict[str, Any] | None = None,
    ) -> TransferResult:
        """결제 수단(은행 계좌 등) 또는 Coinbase 계좌에서 입금

        Raises:
            NotSupportedError: params에 payment_method_id, coinbase_account_id 모두 없음
        """
        params = params or {}
        if PAYMENT_METHOD_KEY in params:
            name = "depositsPaymentMethod"
        elif COINBASE_ACCOUNT_KEY in params:
            name = "depositsCoinbaseAccount"
        else:
            raise NotSupportedError(
                f"Gdax deposit() requires one of `{COINBASE_ACCOUNT_KEY}` "
                f"or `{PAYMENT_METHOD_KEY}` extra params"
            )

        await self.load_markets()
        data = {"currency": currency, "amount": _format_amount(amount), **params}
        response = await self.api["private", "post", name](data=data)

        return self._transfer_result("deposit", response)

    async def withdraw(
        self,
        currency: str,
        amount: Decimal,
        address: str | None = None,
        tag: str | None = None,
        params: dict[str, Any] | None = None,
    ) -> TransferResult:
        """결제 수단, Coinbase 계좌, 또는 암호화폐 주소로 출금

        Raises:
            NotSupportedError: 암호화폐 출금인데 address가 없음
        """
        params = params or {}
        data: dict[str, Any] = {"currency": currency, "amount": _format_amount(amount)}

        if PAYMENT_METHOD_KEY in params:
            name = "withdrawalsPaymentMethod"
        elif COINBASE_ACCOUNT_KEY in params:
            name = "withdrawalsCoinbaseAccount"
        else:
            if not address:
                raise NotSupportedError("Gdax crypto withdraw() requires a destination address")
            name = "withdrawalsCrypto"
            data["crypto_address"] = address

        await self.load_markets()
        response = await self.api["private", "post", name](data={**data, **params})

        return self._transfer_result("withdraw", response)
