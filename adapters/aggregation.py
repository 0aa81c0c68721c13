"""
여러 거래소 어댑터 동시 호출

같은 작업을 모든 어댑터에 asyncio.gather로 보내고 거래소 id별로 모음.
모든 호출이 끝날 때까지 기다린 뒤 한 곳이라도 실패했으면 전체가 실패 (부분 결과 없음).
실패가 여럿이면 거래소 순서상 첫 예외를 던지고 나머지는 로그로 남김.
"""

import asyncio
import logging
from typing import Any, Iterable

from adapters.base import BaseExchange
from adapters.models import Balance

logger = logging.getLogger(__name__)


class Aggregation:
    """거래소 묶음

    Args:
        exchanges: 어댑터 목록 (거래소 id는 서로 달라야 함)

    Raises:
        ValueError: 같은 거래소 id가 두 번 이상 등장
    """

    def __init__(self, exchanges: Iterable[BaseExchange] = ()):
        self.exchanges: list[BaseExchange] = list(exchanges)

        ids = [exchange.id for exchange in self.exchanges]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"duplicate exchanges in aggregation: {', '.join(duplicates)}")

    @property
    def ids(self) -> list[str]:
        return [exchange.id for exchange in self.exchanges]

    async def gather(self, method_name: str, *args: Any, **kwargs: Any) -> dict[str, Any]:
        """모든 어댑터에서 같은 메서드 호출

        Args:
            method_name: BaseExchange 메서드 이름 (예: "fetch_balance")

        Returns:
            {거래소 id: 결과}

        Raises:
            AttributeError: 메서드가 없는 어댑터
            거래소 순서상 첫 번째로 실패한 어댑터의 예외 그대로
        """
        methods = [getattr(exchange, method_name) for exchange in self.exchanges]

        logger.debug(
            "Aggregation gather",
            extra={"method": method_name, "exchanges": self.ids},
        )

        # 실패한 호출이 있어도 나머지 호출은 끝까지 기다림
        results = await asyncio.gather(
            *(method(*args, **kwargs) for method in methods),
            return_exceptions=True,
        )

        errors = [
            (exchange_id, result)
            for exchange_id, result in zip(self.ids, results)
            if isinstance(result, BaseException)
        ]
        for exchange_id, error in errors:
            logger.error(
                "Aggregation call failed",
                extra={"method": method_name, "exchange": exchange_id, "error": repr(error)},
            )
        if errors:
            raise errors[0][1]

        return dict(zip(self.ids, results))

    async def fetch_balance(self, params: dict[str, Any] | None = None) -> dict[str, Balance]:
        """거래소별 잔고"""
        return await self.gather("fetch_balance", params)

    async def close(self) -> None:
        for exchange in self.exchanges:
            await exchange.close()

    async def __aenter__(self) -> "Aggregation":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
