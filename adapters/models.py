"""
어댑터 공통 데이터 모델

거래소 API 응답을 표준화한 표준 레코드(canonical record).
모든 금액/수량은 Decimal 타입 사용, 타임스탬프는 epoch 밀리초.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from core.types import OrderSide, OrderStatus


# (timestamp, open, high, low, close, volume)
OHLCV = tuple[int, Decimal, Decimal, Decimal, Decimal, Decimal]

# [price, amount]
PriceLevel = tuple[Decimal, Decimal]


@dataclass(frozen=True)
class MinMax:
    """최소/최대 한도 (None = 제한 없음/미확인)"""

    min: Decimal | None = None
    max: Decimal | None = None


@dataclass(frozen=True)
class MarketPrecision:
    """마켓 소수 자리수

    Attributes:
        base: 기준 통화 자리수
        quote: 견적 통화 자리수
        amount: 주문 수량 자리수
        price: 주문 가격 자리수
    """

    base: int | None = None
    quote: int | None = None
    amount: int | None = None
    price: int | None = None

    def __post_init__(self) -> None:
        """유효성 검증"""
        for name in ("base", "quote", "amount", "price"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"precision.{name} must be non-negative: {value}")


@dataclass(frozen=True)
class MarketLimits:
    """마켓 주문 한도"""

    amount: MinMax = field(default_factory=MinMax)
    price: MinMax = field(default_factory=MinMax)
    cost: MinMax = field(default_factory=MinMax)


@dataclass(frozen=True)
class Market:
    """마켓(거래쌍) 정보

    Attributes:
        id: 거래소 고유 심볼 (예: ETHBTC, ETH-BTC)
        symbol: 표준 심볼 "BASE/QUOTE"
        base: 기준 통화 표준 코드
        quote: 견적 통화 표준 코드
        base_id: 기준 통화 거래소 코드
        quote_id: 견적 통화 거래소 코드
        precision: 소수 자리수
        limits: 수량/가격/비용 한도
        maker: 메이커 수수료율
        taker: 테이커 수수료율
        active: 거래 가능 여부
        info: 원본 응답
    """

    id: str
    symbol: str
    base: str
    quote: str
    base_id: str | None = None
    quote_id: str | None = None
    precision: MarketPrecision = field(default_factory=MarketPrecision)
    limits: MarketLimits = field(default_factory=MarketLimits)
    maker: Decimal | None = None
    taker: Decimal | None = None
    active: bool = True
    info: Any = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class CurrencyLimits:
    """통화 한도"""

    amount: MinMax = field(default_factory=MinMax)
    price: MinMax = field(default_factory=MinMax)
    cost: MinMax = field(default_factory=MinMax)
    withdraw: MinMax = field(default_factory=MinMax)


@dataclass(frozen=True)
class Currency:
    """통화 정보

    명시적 통화 목록이 없는 거래소는 마켓에서 유도.
    """

    id: str
    code: str
    precision: int
    active: bool = True
    limits: CurrencyLimits = field(default_factory=CurrencyLimits)
    name: str | None = None
    fee: Decimal | None = None
    info: Any = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class Fee:
    """수수료

    Attributes:
        cost: 수수료 금액
        currency: 수수료 통화
        rate: 수수료율
        type: taker / maker
    """

    cost: Decimal | None
    currency: str | None
    rate: Decimal | None = None
    type: str | None = None


@dataclass(frozen=True)
class Ticker:
    """24시간 시세"""

    symbol: str
    timestamp: int
    datetime: str
    high: Decimal | None = None
    low: Decimal | None = None
    bid: Decimal | None = None
    bid_volume: Decimal | None = None
    ask: Decimal | None = None
    ask_volume: Decimal | None = None
    vwap: Decimal | None = None
    open: Decimal | None = None
    close: Decimal | None = None
    last: Decimal | None = None
    change: Decimal | None = None
    percentage: Decimal | None = None
    base_volume: Decimal | None = None
    quote_volume: Decimal | None = None
    info: Any = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class Order:
    """주문 정보

    Attributes:
        id: 거래소 주문 ID
        timestamp: 주문 생성 시각 (밀리초)
        datetime: ISO-8601 생성 시각
        symbol: 표준 심볼 (카탈로그에 없으면 None)
        type: limit / market 등
        side: buy / sell
        price: 주문 가격
        amount: 주문 수량
        filled: 체결 수량
        remaining: 미체결 수량 = max(amount - filled, 0)
        cost: 체결 금액
        status: open / closed / canceled (미매핑 상태는 소문자 그대로)
        fee: 수수료
        info: 원본 응답
    """

    id: str
    timestamp: int
    datetime: str
    symbol: str | None
    type: str | None
    side: str | None
    price: Decimal | None
    amount: Decimal | None
    filled: Decimal | None = None
    remaining: Decimal | None = None
    cost: Decimal | None = None
    status: str | None = None
    fee: Fee | None = None
    info: Any = field(default=None, repr=False, compare=False)

    @property
    def is_open(self) -> bool:
        """오픈 주문 여부"""
        return self.status == OrderStatus.OPEN.value

    @property
    def is_buy(self) -> bool:
        return self.side == OrderSide.BUY.value

    @property
    def is_sell(self) -> bool:
        return self.side == OrderSide.SELL.value


@dataclass(frozen=True)
class Trade:
    """체결 정보

    side는 항상 해당 체결의 테이커(또는 내 계정) 방향.
    """

    id: str | None
    order: str | None
    timestamp: int
    datetime: str
    symbol: str | None
    type: str | None
    side: str | None
    price: Decimal
    amount: Decimal
    cost: Decimal
    fee: Fee | None = None
    info: Any = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class OrderBook:
    """호가창

    bids는 가격 내림차순, asks는 가격 오름차순.
    """

    bids: list[PriceLevel]
    asks: list[PriceLevel]
    timestamp: int
    datetime: str
    nonce: int | None = None


@dataclass(frozen=True)
class BalanceEntry:
    """통화별 잔고 (total == free + used)"""

    free: Decimal
    used: Decimal
    total: Decimal

    @classmethod
    def of(cls, free: Decimal, used: Decimal) -> "BalanceEntry":
        """free/used로 생성 (total은 항상 재계산)"""
        return cls(free=free, used=used, total=free + used)


@dataclass(frozen=True)
class Balance:
    """계좌 잔고

    Attributes:
        entries: 통화 코드 -> BalanceEntry
        info: 원본 응답
    """

    entries: dict[str, BalanceEntry]
    info: Any = field(default=None, repr=False, compare=False)

    def __getitem__(self, code: str) -> BalanceEntry:
        return self.entries[code]

    def __contains__(self, code: object) -> bool:
        return code in self.entries

    @property
    def free(self) -> dict[str, Decimal]:
        """통화별 사용 가능 잔고"""
        return {code: entry.free for code, entry in self.entries.items()}

    @property
    def used(self) -> dict[str, Decimal]:
        """통화별 주문에 묶인 잔고"""
        return {code: entry.used for code, entry in self.entries.items()}

    @property
    def total(self) -> dict[str, Decimal]:
        """통화별 총 잔고"""
        return {code: entry.total for code, entry in self.entries.items()}


@dataclass(frozen=True)
class DepositAddress:
    """입금 주소"""

    currency: str
    address: str | None
    tag: str | None = None
    status: str = "ok"
    info: Any = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class TransferResult:
    """입출금 요청 결과"""

    id: str | None
    info: Any = field(default=None, repr=False, compare=False)
