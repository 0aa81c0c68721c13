"""
거래소 어댑터 기본 클래스

모든 거래소 어댑터가 공유하는 흐름:
    호출 -> load_markets()로 카탈로그 확보 -> EndpointTable 호출
    -> (서명) -> 전송 -> 거래소별 parsers로 표준 레코드 변환

하위 클래스가 정의할 것:
    id, CATALOG, FEES, TIMEFRAMES, SIGNER_CLASS, fetch_markets()
    지원하는 작업만 override (나머지는 NotSupportedError)
"""

import json
import logging
from decimal import Decimal
from typing import Any, Iterable

from adapters.balance import RawBalance, reconcile_balance
from adapters.catalog import MarketCatalog, TradingFees
from adapters.endpoints import Endpoint, EndpointCatalog, EndpointTable, compile_endpoints
from adapters.errors import ConfigurationError, MarketNotLoadedError, NotSupportedError
from adapters.interfaces import ITransport
from adapters.models import (
    OHLCV,
    Balance,
    Currency,
    DepositAddress,
    Fee,
    Market,
    Order,
    OrderBook,
    Ticker,
    Trade,
    TransferResult,
)
from adapters.order_store import OrderStore
from adapters.signing import BaseSigner, SignedRequest, SignRequest
from adapters.transport import HttpxTransport
from core.config.loader import ExchangeCredentials
from core.constants import COMMON_CURRENCY_CODES, Defaults
from core.types import OrderSide, OrderStatus, TakerOrMaker
from core.utils.nonce import NonceGenerator, nonce_generator_for
from core.utils.number import decimal_arg, round_half_up, truncate

logger = logging.getLogger(__name__)


def _format_decimal(value: Decimal) -> str:
    return format(value, "f")


class BaseExchange:
    """거래소 어댑터 기본 구현

    Args:
        credentials: API 자격증명 (None이면 공개 API만 사용 가능)
        transport: HTTP 전송 계층 (None이면 HttpxTransport 생성)
        signer: 서명 전략 (None이면 SIGNER_CLASS로 생성)
        nonce_generator: 서명 nonce 발급기 (None이면 같은 거래소와 api_key의 인스턴스끼리 공유)
        timeout: 기본 전송 계층의 요청 타임아웃 (초)

    Raises:
        ConfigurationError: 자격증명을 일부만 준 경우
    """

    id: str = ""
    name: str = ""

    CATALOG: EndpointCatalog
    FEES: TradingFees = TradingFees(maker=Decimal("0"), taker=Decimal("0"))
    TIMEFRAMES: dict[str, Any] = {}
    SIGNER_CLASS: type[BaseSigner] = BaseSigner

    # 거래소별 추가 통화 코드 치환
    COMMON_CODES: dict[str, str] = {}

    def __init__(
        self,
        credentials: ExchangeCredentials | None = None,
        transport: ITransport | None = None,
        signer: BaseSigner | None = None,
        nonce_generator: NonceGenerator | None = None,
        timeout: float = Defaults.REQUEST_TIMEOUT_SEC,
    ):
        self.credentials = credentials or ExchangeCredentials()
        self._validate_credentials()

        self._owns_transport = transport is None
        self.transport: ITransport = transport or HttpxTransport(timeout=timeout)
        if signer is None:
            if nonce_generator is None and self.credentials.api_key:
                nonce_generator = nonce_generator_for(self.id, self.credentials.api_key)
            signer = self.SIGNER_CLASS(self.credentials, nonce_generator)
        self.signer = signer

        self.orders = OrderStore()
        self._catalog: MarketCatalog | None = None

        self.api: EndpointTable = compile_endpoints(
            self.CATALOG,
            self._dispatch,
            self.signer.missing_credentials,
        )

    def _validate_credentials(self) -> None:
        """자격증명을 하나라도 주었다면 필수 필드가 모두 있어야 함"""
        if self.credentials.is_empty:
            return
        missing = self.credentials.missing(self.CATALOG.required_credentials)
        if missing:
            raise ConfigurationError(
                f"{self.id} requires {', '.join(self.CATALOG.required_credentials)} "
                f"(missing: {', '.join(missing)})"
            )

    # -------------------------------------------------------------------------
    # 리소스 관리
    # -------------------------------------------------------------------------

    async def close(self) -> None:
        """직접 만든 전송 계층 종료"""
        if self._owns_transport:
            await self.transport.close()

    async def __aenter__(self) -> "BaseExchange":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # 요청 dispatch
    # -------------------------------------------------------------------------

    def _unsigned_config(self, params: dict[str, Any], data: dict[str, Any] | None) -> SignedRequest:
        if data:
            return SignedRequest(
                headers={"Content-Type": "application/json"},
                params=params,
                body=json.dumps(data, separators=(",", ":")),
            )
        return SignedRequest(headers={}, params=params)

    async def _dispatch(
        self,
        endpoint: Endpoint,
        path: str,
        params: dict[str, Any],
        data: dict[str, Any] | None,
    ) -> Any:
        """EndpointTable이 호출하는 요청 함수"""
        method = endpoint.verb.upper()

        if endpoint.signed:
            config = self.signer.sign(
                SignRequest(
                    method=method,
                    base_url=endpoint.base_url,
                    path=path,
                    params=params,
                    data=data,
                )
            )
        else:
            config = self._unsigned_config(params, data)

        return await self.transport.request(
            method,
            endpoint.base_url,
            path,
            endpoint.signed,
            config,
        )

    # -------------------------------------------------------------------------
    # 카탈로그
    # -------------------------------------------------------------------------

    async def load_markets(self, reload: bool = False) -> MarketCatalog:
        """마켓 카탈로그 로드

        캐시가 있고 비어 있지 않으면 네트워크 호출 없이 같은 객체 반환.

        Args:
            reload: True면 항상 다시 조회

        Returns:
            MarketCatalog
        """
        if self._catalog is not None and len(self._catalog) > 0 and not reload:
            return self._catalog

        markets = await self.fetch_markets()
        currencies = await self.fetch_currencies()

        self._catalog = MarketCatalog.build(
            self.id,
            markets,
            fees=self.FEES,
            currencies=currencies,
        )
        return self._catalog

    async def fetch_markets(self) -> list[Market]:
        """거래소 마켓 목록 조회 (하위 클래스 구현)"""
        raise NotSupportedError(f"{self.id} fetch_markets() is not supported")

    async def fetch_currencies(self) -> list[Currency] | None:
        """명시적 통화 목록 (제공하지 않는 거래소는 None -> 마켓에서 유도)"""
        return None

    @property
    def catalog(self) -> MarketCatalog:
        """로드된 카탈로그

        Raises:
            MarketNotLoadedError: load_markets() 전
        """
        if self._catalog is None:
            raise MarketNotLoadedError(f"{self.id} markets not loaded")
        return self._catalog

    @property
    def markets(self) -> dict[str, Market]:
        return dict(self.catalog.markets)

    @property
    def symbols(self) -> tuple[str, ...]:
        return self.catalog.symbols

    @property
    def currencies(self) -> dict[str, Currency]:
        return dict(self.catalog.currencies)

    def market(self, symbol: str) -> Market:
        """심볼 -> Market

        Raises:
            MarketNotLoadedError: load_markets() 전
            UnknownSymbolError: 카탈로그에 없는 심볼
        """
        return self.catalog.market(symbol)

    def market_id(self, symbol: str) -> str:
        """심볼 -> 거래소 마켓 id"""
        return self.market(symbol).id

    def currency(self, code: str) -> Currency:
        return self.catalog.currency(code)

    def common_currency_code(self, code: str) -> str:
        """거래소 통화 코드 -> 공통 코드 (XBT -> BTC 등)"""
        if code in self.COMMON_CODES:
            return self.COMMON_CODES[code]
        return COMMON_CURRENCY_CODES.get(code, code)

    def currency_id(self, code: str) -> str:
        """공통 코드 -> 거래소 통화 코드"""
        for exchange_code, common in self.COMMON_CODES.items():
            if common == code:
                return exchange_code
        return code

    def timeframe(self, timeframe: str) -> Any:
        """표준 timeframe -> 거래소 값

        Raises:
            NotSupportedError: 지원하지 않는 timeframe
        """
        if timeframe not in self.TIMEFRAMES:
            raise NotSupportedError(
                f"{self.id} does not support timeframe {timeframe} "
                f"(supported: {', '.join(self.TIMEFRAMES)})"
            )
        return self.TIMEFRAMES[timeframe]

    # -------------------------------------------------------------------------
    # precision
    # -------------------------------------------------------------------------

    def amount_to_precision(self, symbol: str, amount: Decimal) -> str:
        """수량을 마켓 amount precision으로 버림"""
        precision = self.market(symbol).precision.amount
        if precision is None:
            return _format_decimal(decimal_arg(amount))
        return _format_decimal(truncate(decimal_arg(amount), precision))

    def price_to_precision(self, symbol: str, price: Decimal) -> str:
        """가격을 마켓 price precision으로 반올림"""
        precision = self.market(symbol).precision.price
        if precision is None:
            return _format_decimal(decimal_arg(price))
        return _format_decimal(round_half_up(decimal_arg(price), precision))

    def cost_to_precision(self, symbol: str, cost: Decimal) -> str:
        return self.price_to_precision(symbol, cost)

    def fee_to_precision(self, symbol: str, fee: Decimal) -> str:
        return self.price_to_precision(symbol, fee)

    def calculate_fee(
        self,
        symbol: str,
        type: str,
        side: str,
        amount: Decimal,
        price: Decimal,
        taker_or_maker: str = TakerOrMaker.TAKER.value,
    ) -> Fee:
        """예상 수수료

        매수는 받는 base 통화에서, 매도는 받는 quote 통화에서 차감.
        """
        market = self.market(symbol)
        rate = market.taker if taker_or_maker == TakerOrMaker.TAKER.value else market.maker
        rate = rate if rate is not None else Decimal("0")

        cost = decimal_arg(amount) * rate
        if side == OrderSide.SELL.value:
            cost *= decimal_arg(price)
            currency = market.quote
        else:
            currency = market.base

        return Fee(
            cost=Decimal(self.fee_to_precision(symbol, cost)),
            currency=currency,
            rate=rate,
            type=taker_or_maker,
        )

    # -------------------------------------------------------------------------
    # 주문 캐시 / 잔고
    # -------------------------------------------------------------------------

    def _remember(self, orders: Iterable[Order]) -> list[Order]:
        """조회/생성된 주문을 OrderStore에 저장하고 그대로 반환"""
        result = list(orders)
        self.orders.upsert_many(result)
        return result

    def _build_balance(
        self,
        raw: dict[str, RawBalance],
        open_orders_count: int | None = None,
        info: Any = None,
    ) -> Balance:
        """원시 잔고 -> Balance (used 누락 통화는 주문 캐시로 계산)

        open_orders_count를 주지 않으면 원본 응답의 open_orders 필드를 사용.
        """
        if open_orders_count is None and isinstance(info, dict) and info.get("open_orders") is not None:
            open_orders_count = int(info["open_orders"])

        return reconcile_balance(
            raw,
            self.orders,
            self.catalog,
            open_orders_count=open_orders_count,
            info=info,
        )

    # -------------------------------------------------------------------------
    # 표준 작업 (지원하지 않으면 NotSupportedError)
    # -------------------------------------------------------------------------

    def _not_supported(self, operation: str) -> NotSupportedError:
        return NotSupportedError(f"{self.id} {operation}() is not supported")

    async def fetch_ticker(self, symbol: str, params: dict[str, Any] | None = None) -> Ticker:
        raise self._not_supported("fetch_ticker")

    async def fetch_tickers(
        self,
        symbols: list[str] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Ticker]:
        raise self._not_supported("fetch_tickers")

    async def fetch_order_book(
        self,
        symbol: str,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> OrderBook:
        raise self._not_supported("fetch_order_book")

    async def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = Defaults.OHLCV_TIMEFRAME,
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[OHLCV]:
        raise self._not_supported("fetch_ohlcv")

    async def fetch_trades(
        self,
        symbol: str,
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[Trade]:
        raise self._not_supported("fetch_trades")

    async def fetch_balance(self, params: dict[str, Any] | None = None) -> Balance:
        raise self._not_supported("fetch_balance")

    async def create_order(
        self,
        symbol: str,
        type: str,
        side: str,
        amount: Decimal,
        price: Decimal | None = None,
        params: dict[str, Any] | None = None,
    ) -> Order:
        raise self._not_supported("create_order")

    async def cancel_order(
        self,
        id: str,
        symbol: str | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        raise self._not_supported("cancel_order")

    async def fetch_order(
        self,
        id: str,
        symbol: str | None = None,
        params: dict[str, Any] | None = None,
    ) -> Order:
        raise self._not_supported("fetch_order")

    async def fetch_orders(
        self,
        symbol: str | None = None,
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[Order]:
        raise self._not_supported("fetch_orders")

    async def fetch_open_orders(
        self,
        symbol: str | None = None,
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[Order]:
        raise self._not_supported("fetch_open_orders")

    async def fetch_closed_orders(
        self,
        symbol: str | None = None,
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[Order]:
        """체결 완료 주문 (기본: fetch_orders 결과에서 closed만)"""
        orders = await self.fetch_orders(symbol, since, limit, params)
        return [order for order in orders if order.status == OrderStatus.CLOSED.value]

    async def fetch_my_trades(
        self,
        symbol: str | None = None,
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[Trade]:
        raise self._not_supported("fetch_my_trades")

    async def withdraw(
        self,
        currency: str,
        amount: Decimal,
        address: str | None = None,
        tag: str | None = None,
        params: dict[str, Any] | None = None,
    ) -> TransferResult:
        raise self._not_supported("withdraw")

    async def deposit(
        self,
        currency: str,
        amount: Decimal,
        params: dict[str, Any] | None = None,
    ) -> TransferResult:
        raise self._not_supported("deposit")

    async def fetch_deposit_address(
        self,
        currency: str,
        params: dict[str, Any] | None = None,
    ) -> DepositAddress:
        raise self._not_supported("fetch_deposit_address")
