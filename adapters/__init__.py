"""
어댑터 레이어

거래소별 REST API(Binance, Gdax, Kucoin)를 공통 모델로 정규화.
Protocol 기반 인터페이스로 전송 계층/서명 전략을 Mock 교체 가능.
"""

from adapters.errors import (
    AuthenticationError,
    ConfigurationError,
    ExchangeApiError,
    ExchangeError,
    InvalidRequestError,
    MalformedResponseError,
    MarketNotLoadedError,
    NotSupportedError,
    UnknownSymbolError,
)
from adapters.interfaces import (
    IExchange,
    ISigningStrategy,
    ITransport,
)
from adapters.models import (
    Balance,
    BalanceEntry,
    Currency,
    Market,
    Order,
    OrderBook,
    Ticker,
    Trade,
)

__all__ = [
    # Interfaces
    "IExchange",
    "ISigningStrategy",
    "ITransport",
    # Models
    "Balance",
    "BalanceEntry",
    "Currency",
    "Market",
    "Order",
    "OrderBook",
    "Ticker",
    "Trade",
    # Errors
    "ExchangeError",
    "ConfigurationError",
    "AuthenticationError",
    "MarketNotLoadedError",
    "UnknownSymbolError",
    "MalformedResponseError",
    "NotSupportedError",
    "InvalidRequestError",
    "ExchangeApiError",
]
