"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → unifex/)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class Defaults:
    """기본값 상수"""

    REQUEST_TIMEOUT_SEC: float = 10.0

    # 마켓에 precision 정보가 없을 때 사용하는 소수 자리수
    PRECISION: int = 8

    OHLCV_TIMEFRAME: str = "1m"


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"

    # 설정 파일
    CREDENTIALS_FILE: Path = CONFIG_DIR / "credentials.yaml"


# 거래소별 비표준 통화 코드 -> 공통 코드
COMMON_CURRENCY_CODES: dict[str, str] = {
    "XBT": "BTC",
    "BCC": "BCH",
    "DRK": "DASH",
}
