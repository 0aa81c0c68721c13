"""
어댑터 인터페이스 정의

Protocol 기반으로 정의하여 의존성 주입 및 Mock 교체 가능.
모든 구현체는 이 Protocol을 준수해야 함.
"""

from decimal import Decimal
from typing import Any, Protocol, runtime_checkable

from adapters.models import Balance, Order, OrderBook, Ticker, Trade
from adapters.signing import SignedRequest, SignRequest


@runtime_checkable
class ISigningStrategy(Protocol):
    """거래소별 요청 서명 전략

    자격증명 누락은 다이제스트 계산 전에 AuthenticationError.
    """

    def missing_credentials(self) -> list[str]:
        """비어 있는 필수 자격증명 필드 목록"""
        ...

    def sign(self, request: SignRequest) -> SignedRequest:
        """요청 서명

        Args:
            request: 서명 대상 요청

        Returns:
            헤더/파라미터/본문이 채워진 SignedRequest
        """
        ...


@runtime_checkable
class ITransport(Protocol):
    """HTTP 전송 계층

    HTTP 상태 4xx/5xx는 ExchangeApiError, 네트워크/타임아웃 에러는 그대로 전파.
    재시도하지 않음.
    """

    async def request(
        self,
        method: str,
        base_url: str,
        path: str,
        signed: bool,
        config: SignedRequest,
    ) -> Any:
        """요청 실행

        Args:
            method: HTTP 메서드 (GET, POST, DELETE ...)
            base_url: 네임스페이스 베이스 URL
            path: 상대 경로
            signed: 서명된 요청 여부 (로깅용)
            config: 헤더/파라미터/본문

        Returns:
            파싱된 응답 본문 (JSON)
        """
        ...

    async def close(self) -> None:
        """연결 종료"""
        ...


@runtime_checkable
class IExchange(Protocol):
    """거래소 어댑터 인터페이스

    모든 거래소 어댑터가 제공하는 표준 조회 작업.
    금액/수량은 반드시 Decimal 타입 사용.
    """

    id: str

    async def load_markets(self, reload: bool = False) -> Any:
        """마켓 카탈로그 로드 (캐시)"""
        ...

    async def fetch_ticker(self, symbol: str, params: dict[str, Any] | None = None) -> Ticker:
        """단일 심볼 시세 조회"""
        ...

    async def fetch_order_book(
        self, symbol: str, limit: int | None = None, params: dict[str, Any] | None = None
    ) -> OrderBook:
        """호가창 조회"""
        ...

    async def fetch_trades(
        self,
        symbol: str,
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[Trade]:
        """공개 체결 조회"""
        ...

    async def fetch_balance(self, params: dict[str, Any] | None = None) -> Balance:
        """잔고 조회"""
        ...

    async def create_order(
        self,
        symbol: str,
        type: str,
        side: str,
        amount: Decimal,
        price: Decimal | None = None,
        params: dict[str, Any] | None = None,
    ) -> Order:
        """주문 생성"""
        ...

    async def close(self) -> None:
        """리소스 정리"""
        ...
