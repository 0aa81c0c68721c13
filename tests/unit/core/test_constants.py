"""
core/constants.py 테스트

모든 경로가 pathlib.Path 타입이고, 상수가 정상적으로 접근 가능한지 확인
"""

from pathlib import Path

from core.constants import (
    COMMON_CURRENCY_CODES,
    PROJECT_ROOT,
    Defaults,
    Paths,
)


class TestProjectRoot:
    """PROJECT_ROOT 테스트"""

    def test_project_root_is_path(self) -> None:
        """PROJECT_ROOT가 Path 타입인지 확인"""
        assert isinstance(PROJECT_ROOT, Path)

    def test_project_root_is_absolute(self) -> None:
        """PROJECT_ROOT가 절대 경로인지 확인"""
        assert PROJECT_ROOT.is_absolute()

    def test_project_root_contains_core_directory(self) -> None:
        """PROJECT_ROOT에 core 디렉토리가 있는지 확인"""
        assert (PROJECT_ROOT / "core").is_dir()


class TestPaths:
    """Paths 테스트"""

    def test_all_paths_are_path_type(self) -> None:
        """모든 경로가 Path 타입"""
        assert isinstance(Paths.CONFIG_DIR, Path)
        assert isinstance(Paths.LOGS_DIR, Path)
        assert isinstance(Paths.CREDENTIALS_FILE, Path)

    def test_credentials_file_in_config_dir(self) -> None:
        """credentials.yaml은 config 디렉토리 아래"""
        assert Paths.CREDENTIALS_FILE.parent == Paths.CONFIG_DIR
        assert Paths.CREDENTIALS_FILE.name == "credentials.yaml"


class TestDefaults:
    """Defaults 테스트"""

    def test_values(self) -> None:
        """기본값 확인"""
        assert Defaults.REQUEST_TIMEOUT_SEC > 0
        assert Defaults.PRECISION == 8
        assert Defaults.OHLCV_TIMEFRAME == "1m"


class TestCommonCurrencyCodes:
    """COMMON_CURRENCY_CODES 테스트"""

    def test_known_aliases(self) -> None:
        """비표준 코드 치환 테이블"""
        assert COMMON_CURRENCY_CODES["XBT"] == "BTC"
        assert COMMON_CURRENCY_CODES["BCC"] == "BCH"
        assert COMMON_CURRENCY_CODES["DRK"] == "DASH"
