"""
타입 정의 모듈

Enum 등 핵심 타입 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from enum import Enum


class ExchangeId(str, Enum):
    """지원 거래소"""

    BINANCE = "binance"
    GDAX = "gdax"
    KUCOIN = "kucoin"


class OrderSide(str, Enum):
    """주문 방향"""

    BUY = "buy"
    SELL = "sell"


class OrderType(str, Enum):
    """주문 유형"""

    MARKET = "market"
    LIMIT = "limit"


class OrderStatus(str, Enum):
    """표준 주문 상태

    거래소 상태 테이블에 없는 값은 소문자로 그대로 전달되므로
    Order.status는 이 Enum 외의 문자열일 수 있음.
    """

    OPEN = "open"
    CLOSED = "closed"
    CANCELED = "canceled"


class TakerOrMaker(str, Enum):
    """수수료 유형"""

    TAKER = "taker"
    MAKER = "maker"

