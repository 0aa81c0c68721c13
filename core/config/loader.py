"""
설정 로더

credentials.yaml 로드 및 거래소별 자격증명 생성

credentials.yaml 예시:
    binance:
      api_key: "..."
      api_secret: "..."
    gdax:
      api_key: "..."
      api_secret: "..."
      password: "..."
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from core.constants import Paths
from core.types import ExchangeId


@dataclass(frozen=True)
class ExchangeCredentials:
    """거래소 API 자격증명

    불변 데이터 구조로 설정 변경 방지.
    거래소마다 필요한 필드 조합이 다름 (Gdax는 password 필요).
    """

    api_key: str | None = None
    api_secret: str | None = None
    uid: str | None = None
    password: str | None = None

    @property
    def is_empty(self) -> bool:
        """모든 필드가 비어 있는지"""
        return not any(getattr(self, f.name) for f in fields(self))

    def missing(self, required: list[str] | tuple[str, ...]) -> list[str]:
        """required 중 비어 있는 필드 이름 목록"""
        return [name for name in required if not getattr(self, name, None)]


class CredentialsLoadError(Exception):
    """Credentials 로드 실패 예외"""

    pass


CREDENTIAL_FIELDS = ("api_key", "api_secret", "uid", "password")


def _parse_section(exchange_id: str, section: Any) -> ExchangeCredentials:
    if not isinstance(section, dict):
        raise CredentialsLoadError(
            f"credentials.yaml의 '{exchange_id}' 섹션 형식이 잘못되었습니다"
        )

    unknown = set(section) - set(CREDENTIAL_FIELDS)
    if unknown:
        raise CredentialsLoadError(
            f"credentials.yaml의 '{exchange_id}' 섹션에 알 수 없는 필드: {sorted(unknown)}"
        )

    values = {
        name: (str(section[name]) if section.get(name) is not None else None)
        for name in CREDENTIAL_FIELDS
    }
    return ExchangeCredentials(**values)


def load_credentials(path: Path | None = None) -> dict[str, ExchangeCredentials]:
    """credentials.yaml 파일 로드

    Args:
        path: credentials.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        거래소 ID -> ExchangeCredentials

    Raises:
        CredentialsLoadError: 파일이 없거나 형식이 잘못된 경우
    """
    if path is None:
        path = Paths.CREDENTIALS_FILE

    if not path.exists():
        raise CredentialsLoadError(f"credentials.yaml 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise CredentialsLoadError(f"credentials.yaml 파싱 실패: {e}") from e

    if data is None:
        raise CredentialsLoadError("credentials.yaml이 비어 있습니다")

    if not isinstance(data, dict):
        raise CredentialsLoadError("credentials.yaml 최상위는 매핑이어야 합니다")

    valid_ids = [e.value for e in ExchangeId]
    result: dict[str, ExchangeCredentials] = {}

    for exchange_id, section in data.items():
        if exchange_id not in valid_ids:
            raise CredentialsLoadError(
                f"지원하지 않는 거래소입니다: '{exchange_id}'. "
                f"유효한 값: {valid_ids}"
            )
        result[exchange_id] = _parse_section(exchange_id, section)

    return result


def get_credentials(
    exchange_id: str | ExchangeId,
    path: Path | None = None,
) -> ExchangeCredentials:
    """특정 거래소의 자격증명 반환

    Args:
        exchange_id: 거래소 ID
        path: credentials.yaml 경로 (None이면 기본 경로 사용)

    Raises:
        CredentialsLoadError: 해당 거래소 섹션이 없는 경우
    """
    key = exchange_id.value if isinstance(exchange_id, ExchangeId) else exchange_id
    credentials = load_credentials(path)

    if key not in credentials:
        raise CredentialsLoadError(f"credentials.yaml에 '{key}' 설정이 없습니다")

    return credentials[key]
