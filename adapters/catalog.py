"""
마켓/통화 카탈로그

파싱된 마켓 목록에서 표준 카탈로그를 구성:
    - markets (symbol 기준), markets_by_id (거래소 id 기준)
    - 정렬된 symbols / ids (결정적 순회)
    - currencies (code 기준), currencies_by_id

거래소가 별도 통화 목록을 제공하지 않으면 마켓에서 통화를 유도:
통화 precision = 해당 코드를 base 또는 quote로 참조하는 모든 마켓의 최대 precision.
같은 값이면 먼저 나온 항목 유지.
"""

import dataclasses
import logging
from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Iterable, Mapping

from adapters.errors import MalformedResponseError, UnknownSymbolError
from adapters.models import Currency, Market
from core.constants import Defaults

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TradingFees:
    """거래소 기본 수수료율 (마켓에 값이 없을 때 사용)"""

    maker: Decimal
    taker: Decimal


def _with_fee_defaults(market: Market, fees: TradingFees | None) -> Market:
    if fees is None:
        return market
    updates = {}
    if market.maker is None:
        updates["maker"] = fees.maker
    if market.taker is None:
        updates["taker"] = fees.taker
    return dataclasses.replace(market, **updates) if updates else market


def _base_precision(market: Market) -> int:
    p = market.precision
    if p.base is not None:
        return p.base
    if p.amount is not None:
        return p.amount
    return Defaults.PRECISION


def _quote_precision(market: Market) -> int:
    p = market.precision
    if p.quote is not None:
        return p.quote
    if p.price is not None:
        return p.price
    return Defaults.PRECISION


def derive_currencies(markets: Iterable[Market]) -> dict[str, Currency]:
    """마켓 목록에서 통화 유도

    모든 base 항목을 먼저, 그다음 quote 항목을 순회.
    precision이 엄격히 클 때만 교체하므로 동률이면 먼저 나온 항목이 남음.

    Returns:
        code 정렬된 code -> Currency
    """
    market_list = list(markets)
    candidates: list[Currency] = []

    for market in market_list:
        candidates.append(
            Currency(
                id=market.base_id or market.base,
                code=market.base,
                precision=_base_precision(market),
            )
        )
    for market in market_list:
        candidates.append(
            Currency(
                id=market.quote_id or market.quote,
                code=market.quote,
                precision=_quote_precision(market),
            )
        )

    best: dict[str, Currency] = {}
    for currency in candidates:
        current = best.get(currency.code)
        if current is None or currency.precision > current.precision:
            best[currency.code] = currency

    return {code: best[code] for code in sorted(best)}


class MarketCatalog:
    """불변 마켓/통화 카탈로그

    MarketCatalog.build()로 생성. 생성 후 인덱스는 읽기 전용.
    """

    def __init__(
        self,
        exchange_id: str,
        markets: dict[str, Market],
        currencies: dict[str, Currency],
    ):
        self.exchange_id = exchange_id
        self._markets = MappingProxyType(markets)
        self._markets_by_id = MappingProxyType({m.id: m for m in markets.values()})
        self._currencies = MappingProxyType(currencies)
        self._currencies_by_id = MappingProxyType({c.id: c for c in currencies.values()})
        self._symbols = tuple(sorted(markets))
        self._ids = tuple(sorted(self._markets_by_id))

    @classmethod
    def build(
        cls,
        exchange_id: str,
        markets: Iterable[Market],
        fees: TradingFees | None = None,
        currencies: Iterable[Currency] | None = None,
    ) -> "MarketCatalog":
        """파싱된 마켓(과 선택적 통화 목록)으로 카탈로그 구성

        Args:
            exchange_id: 거래소 ID
            markets: 파싱된 마켓 목록
            fees: 마켓에 수수료율이 없을 때 채울 기본값
            currencies: 거래소가 제공하는 명시적 통화 목록 (유도 결과보다 우선)

        Raises:
            MalformedResponseError: symbol 형식 불일치, symbol/id 중복
        """
        by_symbol: dict[str, Market] = {}
        seen_ids: set[str] = set()

        for market in markets:
            if market.symbol != f"{market.base}/{market.quote}":
                raise MalformedResponseError(
                    f"{exchange_id} market {market.id}: symbol {market.symbol} "
                    f"does not match {market.base}/{market.quote}",
                    payload=market.info,
                )
            if market.symbol in by_symbol:
                raise MalformedResponseError(
                    f"{exchange_id} duplicate market symbol {market.symbol}",
                    payload=market.info,
                )
            if market.id in seen_ids:
                raise MalformedResponseError(
                    f"{exchange_id} duplicate market id {market.id}",
                    payload=market.info,
                )
            seen_ids.add(market.id)
            by_symbol[market.symbol] = _with_fee_defaults(market, fees)

        merged = derive_currencies(by_symbol.values())
        if currencies is not None:
            for currency in currencies:
                merged[currency.code] = currency
            merged = {code: merged[code] for code in sorted(merged)}

        catalog = cls(exchange_id, by_symbol, merged)

        logger.info(
            "마켓 카탈로그 구성 완료",
            extra={
                "exchange": exchange_id,
                "market_count": len(catalog.markets),
                "currency_count": len(catalog.currencies),
            },
        )

        return catalog

    # -------------------------------------------------------------------------
    # 인덱스
    # -------------------------------------------------------------------------

    @property
    def markets(self) -> Mapping[str, Market]:
        return self._markets

    @property
    def markets_by_id(self) -> Mapping[str, Market]:
        return self._markets_by_id

    @property
    def symbols(self) -> tuple[str, ...]:
        return self._symbols

    @property
    def ids(self) -> tuple[str, ...]:
        return self._ids

    @property
    def currencies(self) -> Mapping[str, Currency]:
        return self._currencies

    @property
    def currencies_by_id(self) -> Mapping[str, Currency]:
        return self._currencies_by_id

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------

    def market(self, symbol: str) -> Market:
        """심볼로 마켓 조회

        Raises:
            UnknownSymbolError: 카탈로그에 없는 심볼
        """
        market = self._markets.get(symbol) if isinstance(symbol, str) else None
        if market is None:
            raise UnknownSymbolError(self.exchange_id, str(symbol))
        return market

    def find_by_id(self, market_id: str | None) -> Market | None:
        """거래소 id로 마켓 조회 (없으면 None)"""
        if market_id is None:
            return None
        return self._markets_by_id.get(market_id)

    def currency(self, code: str) -> Currency:
        """통화 코드로 조회

        Raises:
            UnknownSymbolError: 카탈로그에 없는 통화
        """
        currency = self._currencies.get(code)
        if currency is None:
            raise UnknownSymbolError(self.exchange_id, code)
        return currency

    def __len__(self) -> int:
        return len(self._markets)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._markets
