"""
잔고 Reconciliation

거래소가 "used"(주문에 묶인 금액)를 직접 주지 않을 때
로컬 주문 캐시(OrderStore)의 미체결 주문으로 계산.

규칙 (통화별):
    1. used가 보고됨 -> 그대로 신뢰, total = free + used
    2. used 없음 + 미체결 주문 수(open_orders) 보고됨:
        캐시의 open 주문 수와 같으면 캐시로 used 계산
    3. 개수가 다르면 used = 0 유지 (오래된 캐시로 값을 만들지 않음), 예외 없음
    4. used 없음 + 개수 보고 없음 -> 캐시로 계산

used 계산:
    - 매도 미체결 주문은 base 통화를 묶음: remaining 합
    - 매수 미체결 주문은 quote 통화를 묶음: cost 합 (cost가 없거나 0이면 price * remaining)
    카탈로그에 없는 심볼의 주문은 제외.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Mapping

from adapters.catalog import MarketCatalog
from adapters.models import Balance, BalanceEntry, Order
from adapters.order_store import OrderStore

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass(frozen=True)
class RawBalance:
    """거래소 응답에서 뽑아낸 통화별 원시 잔고

    Attributes:
        free: 사용 가능 잔고
        used: 주문에 묶인 잔고 (거래소가 주지 않으면 None)
        total: 총 잔고 (참고용, 항상 free + used로 재계산)
    """

    free: Decimal
    used: Decimal | None = None
    total: Decimal | None = None


def currency_used_on_open_orders(
    currency: str,
    orders: Iterable[Order],
    catalog: MarketCatalog,
) -> Decimal:
    """미체결 주문에 묶인 통화 수량

    Args:
        currency: 통화 코드
        orders: 주문 목록 (open 상태만 집계)
        catalog: 심볼 -> base/quote 확인용 카탈로그
    """
    total = ZERO

    for order in orders:
        if not order.is_open:
            continue

        market = catalog.markets.get(order.symbol) if order.symbol else None
        if market is None:
            continue

        remaining = order.remaining if order.remaining is not None else ZERO

        if order.is_sell and currency == market.base:
            total += remaining
        elif order.is_buy and currency == market.quote:
            if order.cost:
                total += order.cost
            elif order.price is not None:
                total += order.price * remaining

    return total


def reconcile_balance(
    raw: Mapping[str, RawBalance],
    store: OrderStore,
    catalog: MarketCatalog,
    open_orders_count: int | None = None,
    info: Any = None,
) -> Balance:
    """원시 잔고 + 주문 캐시 -> Balance

    Args:
        raw: 통화 코드 -> RawBalance
        store: 로컬 주문 캐시
        catalog: 마켓 카탈로그
        open_orders_count: 거래소가 보고한 미체결 주문 수 (없으면 None)
        info: 원본 응답

    Returns:
        모든 항목이 total == free + used 인 Balance
    """
    cached_open = store.open_orders()
    counts_match = open_orders_count is None or open_orders_count == len(cached_open)
    entries: dict[str, BalanceEntry] = {}
    skipped: list[str] = []

    for code, balance in raw.items():
        if balance.used is not None:
            entries[code] = BalanceEntry.of(balance.free, balance.used)
        elif counts_match:
            used = currency_used_on_open_orders(code, cached_open, catalog)
            entries[code] = BalanceEntry.of(balance.free, used)
        else:
            entries[code] = BalanceEntry.of(balance.free, ZERO)
            skipped.append(code)

    if skipped:
        logger.warning(
            "미체결 주문 수 불일치 - used 계산 생략",
            extra={
                "exchange": catalog.exchange_id,
                "reported_open_orders": open_orders_count,
                "cached_open_orders": len(cached_open),
                "currencies": skipped,
            },
        )

    return Balance(entries=entries, info=info)
