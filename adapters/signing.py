"""
요청 서명 공통 구조

거래소별 서명 전략(SigningStrategy)은 SignRequest를 받아 SignedRequest를 반환.
자격증명 누락은 다이제스트 계산 전에 AuthenticationError로 거부.
nonce를 주입하면 그대로 사용 (결정적 서명), 없으면 NonceGenerator에서 발급.
"""

from dataclasses import dataclass, field
from typing import Any

from adapters.errors import AuthenticationError
from core.config.loader import ExchangeCredentials
from core.utils.nonce import NonceGenerator


@dataclass(frozen=True)
class SignRequest:
    """서명 대상 요청

    Attributes:
        method: HTTP 메서드 (대문자)
        base_url: 네임스페이스 베이스 URL
        path: placeholder 치환이 끝난 상대 경로
        params: 쿼리 파라미터
        data: 요청 본문 (JSON 직렬화 대상)
        nonce: 주입 nonce (None이면 발급)
    """

    method: str
    base_url: str
    path: str
    params: dict[str, Any] = field(default_factory=dict)
    data: dict[str, Any] | None = None
    nonce: int | None = None


@dataclass(frozen=True)
class SignedRequest:
    """서명 결과 (전송 계층에 그대로 전달)"""

    headers: dict[str, str]
    params: dict[str, Any]
    body: str | None = None


class BaseSigner:
    """서명 전략 기본 클래스

    하위 클래스는 REQUIRED_CREDENTIALS와 _sign()을 정의.

    Args:
        credentials: 거래소 자격증명
        nonce_generator: nonce 발급기 (자격증명 세트당 하나)
    """

    REQUIRED_CREDENTIALS: tuple[str, ...] = ("api_key", "api_secret")

    def __init__(
        self,
        credentials: ExchangeCredentials,
        nonce_generator: NonceGenerator | None = None,
    ):
        self.credentials = credentials
        self.nonce_generator = nonce_generator or NonceGenerator()

    def missing_credentials(self) -> list[str]:
        """서명에 필요한데 비어 있는 자격증명 필드"""
        return self.credentials.missing(self.REQUIRED_CREDENTIALS)

    def sign(self, request: SignRequest) -> SignedRequest:
        """요청 서명

        Raises:
            AuthenticationError: 필수 자격증명 누락
        """
        missing = self.missing_credentials()
        if missing:
            raise AuthenticationError(
                f"Cannot sign request as {', '.join(self.REQUIRED_CREDENTIALS)} required "
                f"(missing: {', '.join(missing)})"
            )

        nonce = request.nonce if request.nonce is not None else self.nonce_generator.next()
        return self._sign(request, nonce)

    def _sign(self, request: SignRequest, nonce: int) -> SignedRequest:
        raise NotImplementedError


def stringify_params(values: dict[str, Any]) -> dict[str, str]:
    """서명과 전송에 같은 문자열 값을 쓰도록 변환

    bool은 "true"/"false", None 값은 제외, 나머지는 str().
    """
    result: dict[str, str] = {}
    for key, value in values.items():
        if value is None:
            continue
        if isinstance(value, bool):
            result[key] = "true" if value else "false"
        else:
            result[key] = str(value)
    return result
