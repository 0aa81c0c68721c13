"""
Binance 엔드포인트 카탈로그 및 고정값

공식 문서: https://github.com/binance-exchange/binance-official-api-docs/blob/master/rest-api.md
"""

from decimal import Decimal

from adapters.catalog import TradingFees
from adapters.endpoints import EndpointCatalog
from core.types import OrderStatus


URLS: dict[str, str] = {
    "web": "https://www.binance.com",
    "wapi": "https://api.binance.com/wapi/v3",
    "public": "https://api.binance.com/api/v1",
    "private": "https://api.binance.com/api/v3",
    "v3": "https://api.binance.com/api/v3",
    "v1": "https://api.binance.com/api/v1",
}

API: dict[str, dict[str, list[str]]] = {
    "web": {
        "get": ["/exchange/public/product"],
    },
    "wapi": {
        "post": ["/withdraw"],
        "get": ["/depositHistory", "/withdrawHistory", "/depositAddress"],
    },
    "v3": {
        "get": ["/ticker/price", "/ticker/bookTicker"],
    },
    "public": {
        "get": [
            "/exchangeInfo",
            "/ping",
            "/time",
            "/depth",
            "/aggTrades",
            "/klines",
            "/ticker/24hr",
            "/ticker/allPrices",
            "/ticker/allBookTickers",
            "/ticker/price",
            "/ticker/bookTicker",
        ],
    },
    "private": {
        "get": ["/order", "/openOrders", "/allOrders", "/account", "/myTrades"],
        "post": ["/order", "/order/test"],
        "delete": ["/order"],
    },
    "v1": {
        "put": ["/userDataStream"],
        "post": ["/userDataStream"],
        "delete": ["/userDataStream"],
    },
}

SIGNED_APIS = frozenset({"private", "wapi"})

REQUIRED_CREDENTIALS = ("api_key", "api_secret")

CATALOG = EndpointCatalog(
    urls=URLS,
    api=API,
    signed_namespaces=SIGNED_APIS,
    required_credentials=REQUIRED_CREDENTIALS,
)

FEES = TradingFees(maker=Decimal("0.001"), taker=Decimal("0.001"))

TIMEFRAMES: dict[str, str] = {
    "1m": "1m",
    "3m": "3m",
    "5m": "5m",
    "15m": "15m",
    "30m": "30m",
    "1h": "1h",
    "2h": "2h",
    "4h": "4h",
    "6h": "6h",
    "8h": "8h",
    "12h": "12h",
    "1d": "1d",
    "3d": "3d",
    "1w": "1w",
    "1M": "1M",
}

# 거래소가 목록에 넣는 더미 마켓
NULL_ID = "123456"

MARKET_STATUS_TRADING = "TRADING"

ORDER_STATUSES: dict[str, str] = {
    "NEW": OrderStatus.OPEN.value,
    "PARTIALLY_FILLED": OrderStatus.OPEN.value,
    "FILLED": OrderStatus.CLOSED.value,
    "CANCELED": OrderStatus.CANCELED.value,
}

TIME_IN_FORCE_GTC = "GTC"

# depth 기본 = 최대 = 100
DEFAULT_ORDER_BOOK_LIMIT = 100
# klines 기본 = 최대 = 500
DEFAULT_OHLCV_LIMIT = 500
# aggTrades startTime~endTime 최대 구간 (1시간)
AGG_TRADES_WINDOW_MS = 3_600_000

# Binance는 BCH를 BCC로 표기
COMMON_CODES: dict[str, str] = {"BCC": "BCH"}
