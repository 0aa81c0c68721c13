"""
pytest 공통 fixture 정의

임시 디렉토리 및 credentials.yaml 샘플
"""

import tempfile
from pathlib import Path

import pytest

from core.utils.nonce import reset_nonce_generators


@pytest.fixture(autouse=True)
def _isolated_nonce_generators():
    """테스트마다 공유 nonce 발급기 초기화"""
    reset_nonce_generators()
    yield
    reset_nonce_generators()


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_credentials_file(temp_dir: Path) -> Path:
    """테스트용 credentials.yaml 파일 생성"""
    content = """# 테스트용 credentials.yaml
binance:
  api_key: "binance_key_12345"
  api_secret: "binance_secret_67890"

gdax:
  api_key: "gdax_key_abcde"
  api_secret: "c2VjcmV0LWtleQ=="
  password: "gdax_passphrase"

kucoin:
  api_key: "kucoin_key"
  api_secret: "kucoin_secret"
"""
    path = temp_dir / "credentials.yaml"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def temp_credentials_file_unknown_exchange(temp_dir: Path) -> Path:
    """지원하지 않는 거래소 섹션이 있는 credentials.yaml"""
    content = """binance:
  api_key: "key"
  api_secret: "secret"

bitfinex:
  api_key: "key"
  api_secret: "secret"
"""
    path = temp_dir / "credentials_unknown.yaml"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def temp_credentials_file_unknown_field(temp_dir: Path) -> Path:
    """알 수 없는 필드가 있는 credentials.yaml"""
    content = """binance:
  api_key: "key"
  api_secret: "secret"
  secret_key: "typo"
"""
    path = temp_dir / "credentials_field.yaml"
    path.write_text(content, encoding="utf-8")
    return path
