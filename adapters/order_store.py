"""
로컬 주문 캐시

주문을 조회/생성하는 모든 경로에서 upsert (insert-on-fetch),
잔고 reconciliation에서만 읽음 (read-for-reconciliation).
자동으로 정리하지 않음 - clear()로만 비움.

단일 writer 전제: 동시에 여러 fetch_orders가 캐시를 채우는 경우
reconciliation 정확성이 필요하면 호출자가 직렬화해야 함.
"""

from typing import Iterable, Iterator

from adapters.models import Order


class OrderStore:
    """주문 ID -> Order 캐시"""

    def __init__(self) -> None:
        self._orders: dict[str, Order] = {}

    def upsert(self, order: Order) -> None:
        """주문 저장 (같은 ID면 최신 값으로 교체)"""
        self._orders[order.id] = order

    def upsert_many(self, orders: Iterable[Order]) -> None:
        for order in orders:
            self.upsert(order)

    def get(self, order_id: str) -> Order | None:
        return self._orders.get(order_id)

    def values(self) -> list[Order]:
        """저장된 모든 주문 (삽입 순서)"""
        return list(self._orders.values())

    def open_orders(self) -> list[Order]:
        """status가 open인 주문"""
        return [order for order in self._orders.values() if order.is_open]

    def count_open(self) -> int:
        return sum(1 for order in self._orders.values() if order.is_open)

    def clear(self) -> None:
        self._orders.clear()

    def __len__(self) -> int:
        return len(self._orders)

    def __contains__(self, order_id: object) -> bool:
        return order_id in self._orders

    def __iter__(self) -> Iterator[Order]:
        return iter(list(self._orders.values()))
