"""
거래소 id -> 어댑터 클래스 매핑 및 생성

credentials.yaml에서 자격증명을 읽어 어댑터를 만드는 진입점.
"""

import logging
from pathlib import Path
from typing import Any

from adapters.base import BaseExchange
from adapters.binance import BinanceExchange
from adapters.gdax import GdaxExchange
from adapters.interfaces import ITransport
from adapters.kucoin import KucoinExchange
from core.config.loader import ExchangeCredentials, load_credentials
from core.types import ExchangeId

logger = logging.getLogger(__name__)


EXCHANGES: dict[str, type[BaseExchange]] = {
    ExchangeId.BINANCE.value: BinanceExchange,
    ExchangeId.GDAX.value: GdaxExchange,
    ExchangeId.KUCOIN.value: KucoinExchange,
}


def _key(exchange_id: str | ExchangeId) -> str:
    return exchange_id.value if isinstance(exchange_id, ExchangeId) else exchange_id


def get_exchange_class(exchange_id: str | ExchangeId) -> type[BaseExchange]:
    """거래소 id -> 어댑터 클래스

    Raises:
        ValueError: 지원하지 않는 거래소
    """
    key = _key(exchange_id)
    if key not in EXCHANGES:
        raise ValueError(
            f"Unsupported exchange: {key} (supported: {', '.join(sorted(EXCHANGES))})"
        )
    return EXCHANGES[key]


def create_exchange(
    exchange_id: str | ExchangeId,
    credentials: ExchangeCredentials | None = None,
    transport: ITransport | None = None,
    **kwargs: Any,
) -> BaseExchange:
    """어댑터 생성

    Args:
        exchange_id: 거래소 id
        credentials: 자격증명 (None이면 공개 API만)
        transport: 전송 계층 (None이면 어댑터가 HttpxTransport 생성)
        **kwargs: 어댑터별 추가 인자 (예: Binance adjust_for_time_difference)

    Raises:
        ValueError: 지원하지 않는 거래소
        ConfigurationError: 자격증명 일부 누락
    """
    exchange_class = get_exchange_class(exchange_id)
    exchange = exchange_class(credentials=credentials, transport=transport, **kwargs)

    logger.debug(
        "Exchange adapter created",
        extra={"exchange": exchange.id, "authenticated": not exchange.credentials.is_empty},
    )

    return exchange


def create_configured_exchanges(
    path: Path | None = None,
    transport: ITransport | None = None,
) -> dict[str, BaseExchange]:
    """credentials.yaml의 모든 거래소 섹션으로 어댑터 생성

    Raises:
        CredentialsLoadError: 파일 없음/형식 오류
        ConfigurationError: 자격증명 일부 누락
    """
    return {
        exchange_id: create_exchange(exchange_id, credentials, transport)
        for exchange_id, credentials in load_credentials(path).items()
    }
