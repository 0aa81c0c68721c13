"""
거래소 어댑터 에러 정의

모든 어댑터 에러는 ExchangeError를 상속.
검증 에러는 네트워크 호출 전에, 파싱 에러는 레코드를 반환하기 전에 발생.
httpx 전송 에러(타임아웃, 연결 실패)는 감싸지 않고 그대로 전파.
"""

from typing import Any


class ExchangeError(Exception):
    """거래소 어댑터 기본 에러"""

    pass


class ConfigurationError(ExchangeError):
    """어댑터 설정 에러

    자격증명 일부만 주어진 경우 등 생성 시점에 발생.
    """

    pass


class AuthenticationError(ConfigurationError):
    """서명 요청에 필요한 자격증명 누락

    서명 계산 및 네트워크 호출 전에 발생.
    """

    pass


class MarketNotLoadedError(ExchangeError):
    """load_markets() 전에 카탈로그에 접근"""

    pass


class UnknownSymbolError(ExchangeError):
    """카탈로그에 없는 심볼/통화 요청"""

    def __init__(self, exchange_id: str, symbol: str):
        self.exchange_id = exchange_id
        self.symbol = symbol
        super().__init__(f"{exchange_id} does not have market symbol {symbol}")


class MalformedResponseError(ExchangeError):
    """응답에 필수 필드(타임스탬프, ID 등)가 없음"""

    def __init__(self, message: str, payload: Any = None):
        self.payload = payload
        super().__init__(message)


class NotSupportedError(ExchangeError):
    """거래소가 지원하지 않는 작업 또는 파라미터 조합"""

    pass


class InvalidRequestError(ExchangeError):
    """요청 기술자 검증 실패 (경로 placeholder 누락 등)"""

    pass


class ExchangeApiError(ExchangeError):
    """거래소 API 에러 응답 (HTTP 4xx/5xx)

    Args:
        status: HTTP 상태 코드
        message: 응답 본문에서 추출한 에러 메시지
        body: 원본 응답 본문
    """

    def __init__(self, status: int, message: str, body: Any = None):
        self.status = status
        self.message = message
        self.body = body
        super().__init__(f"Exchange API Error [{status}]: {message}")
