"""
Gdax 엔드포인트 카탈로그 및 고정값

공식 문서: https://docs.gdax.com
"""

from decimal import Decimal

from adapters.catalog import TradingFees
from adapters.endpoints import EndpointCatalog
from core.types import OrderStatus


URLS: dict[str, str] = {
    "public": "https://api.gdax.com",
    "private": "https://api.gdax.com",
}

API: dict[str, dict[str, list[str]]] = {
    "public": {
        "get": [
            "/currencies",
            "/products",
            "/products/{id}/book",
            "/products/{id}/candles",
            "/products/{id}/stats",
            "/products/{id}/ticker",
            "/products/{id}/trades",
            "/time",
        ],
    },
    "private": {
        "get": [
            "/accounts",
            "/accounts/{id}",
            "/accounts/{id}/holds",
            "/accounts/{id}/ledger",
            "/accounts/{id}/transfers",
            "/coinbase-accounts",
            "/fills",
            "/funding",
            "/orders",
            "/orders/{id}",
            "/payment-methods",
            "/position",
            "/reports/{id}",
            "/users/self/trailing-volume",
        ],
        "post": [
            "/deposits/coinbase-account",
            "/deposits/payment-method",
            "/funding/repay",
            "/orders",
            "/position/close",
            "/profiles/margin-transfer",
            "/reports",
            "/withdrawals/coinbase-account",
            "/withdrawals/crypto",
            "/withdrawals/payment-method",
        ],
        "delete": ["/orders", "/orders/{id}"],
    },
}

SIGNED_APIS = frozenset({"private"})

REQUIRED_CREDENTIALS = ("api_key", "api_secret", "password")

CATALOG = EndpointCatalog(
    urls=URLS,
    api=API,
    signed_namespaces=SIGNED_APIS,
    required_credentials=REQUIRED_CREDENTIALS,
)

# 0.25%, ETH/LTC 기준 마켓은 0.3%
FEES = TradingFees(maker=Decimal("0"), taker=Decimal("0.0025"))
NON_BTC_TAKER = Decimal("0.003")
NON_BTC_BASE_ASSETS = frozenset({"ETH", "LTC"})

# timeframe -> granularity (초)
TIMEFRAMES: dict[str, int] = {
    "1m": 60,
    "5m": 300,
    "15m": 900,
    "30m": 1800,
    "1h": 3600,
    "2h": 7200,
    "4h": 14400,
    "12h": 43200,
    "1d": 86400,
    "1w": 604800,
    "1M": 2592000,
    "1y": 31536000,
}

MARKET_STATUS_ONLINE = "online"

ORDER_STATUSES: dict[str, str] = {
    "pending": OrderStatus.OPEN.value,
    "active": OrderStatus.OPEN.value,
    "open": OrderStatus.OPEN.value,
    "done": OrderStatus.CLOSED.value,
    "canceled": OrderStatus.CANCELED.value,
}

# orders 조회 status 파라미터
ORDER_QUERY_ALL = "all"
ORDER_QUERY_DONE = "done"

# 1 = 최우선 호가, 2 = 가격대별 집계, 3 = 전체
ORDER_BOOK_LEVEL = 2

# 마켓에 수량 자리수 정보가 없어 고정
AMOUNT_PRECISION = 8

# candles 한 번에 최대 개수
MAX_CANDLES = 300
