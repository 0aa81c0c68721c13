"""
Kucoin 엔드포인트 카탈로그 및 고정값

공식 문서: https://kucoinapidocs.docs.apiary.io
"""

from decimal import Decimal

from adapters.catalog import TradingFees
from adapters.endpoints import EndpointCatalog


URLS: dict[str, str] = {
    "public": "https://api.kucoin.com/v1",
    "private": "https://api.kucoin.com/v1",
    "kitchen": "https://kitchen.kucoin.com",
}

API: dict[str, dict[str, list[str]]] = {
    "kitchen": {
        "get": ["/open/chart/history"],
    },
    "public": {
        "get": [
            "/open/chart/config",
            "/open/chart/history",
            "/open/chart/symbol",
            "/open/currencies",
            "/open/deal-orders",
            "/open/kline",
            "/open/lang-list",
            "/open/orders",
            "/open/orders-buy",
            "/open/orders-sell",
            "/open/tick",
            "/market/open/coin-info",
            "/market/open/coins",
            "/market/open/coins-trending",
            "/market/open/symbols",
        ],
    },
    "private": {
        "get": [
            "/account/balance",
            "/account/{coin}/wallet/address",
            "/account/{coin}/wallet/records",
            "/account/{coin}/balance",
            "/account/promotion/info",
            "/account/promotion/sum",
            "/deal-orders",
            "/order/active",
            "/order/active-map",
            "/order/dealt",
            "/referrer/descendant/count",
            "/user/info",
        ],
        "post": [
            "/account/{coin}/withdraw/apply",
            "/account/{coin}/withdraw/cancel",
            "/cancel-order",
            "/order",
            "/user/change-lang",
        ],
    },
}

SIGNED_APIS = frozenset({"private"})

REQUIRED_CREDENTIALS = ("api_key", "api_secret")

CATALOG = EndpointCatalog(
    urls=URLS,
    api=API,
    signed_namespaces=SIGNED_APIS,
    required_credentials=REQUIRED_CREDENTIALS,
)

FEES = TradingFees(maker=Decimal("0.001"), taker=Decimal("0.001"))

# timeframe -> resolution (분 단위 정수 또는 D/W)
TIMEFRAMES: dict[str, int | str] = {
    "1m": 1,
    "5m": 5,
    "15m": 15,
    "30m": 30,
    "1h": 60,
    "8h": 480,
    "1d": "D",
    "1w": "W",
}

# resolution -> 분
RESOLUTION_MINUTES: dict[str, int] = {"D": 1440, "W": 10080}

# limit 미지정 시 조회할 캔들 수
DEFAULT_OHLCV_LIMITS: dict[str, int] = {"D": 30, "W": 52}
DEFAULT_OHLCV_LIMIT = 1440

# 마켓 응답에 자리수 정보가 없어 고정
DEFAULT_PRECISION = 8

# account/balance 페이지 크기 (기본 12, 최대 20)
BALANCE_PAGE_SIZE = 20

# 주문 방향 (거래소 표기)
SIDE_BUY = "BUY"
SIDE_SELL = "SELL"
