"""
Nonce 생성기

서명 요청마다 사용하는 단조 증가 값.
같은 자격증명으로 동시에 여러 요청을 보내도 값이 겹치거나 역행하지 않도록
잠금 아래에서 max(현재 시각 + 오프셋, 직전 값 + 1)을 발급.
"""

import threading
from typing import Callable

from core.utils.timestamps import milliseconds


class NonceGenerator:
    """밀리초 기반 단조 증가 nonce 발급기

    Args:
        clock: 현재 시각(밀리초) 함수 (테스트에서 고정 시계 주입)
        offset_ms: 서버 시간 보정값 (밀리초)
    """

    def __init__(
        self,
        clock: Callable[[], int] = milliseconds,
        offset_ms: int = 0,
    ):
        self._clock = clock
        self._lock = threading.Lock()
        self._last: int = 0
        self.offset_ms = offset_ms

    def next(self) -> int:
        """다음 nonce 발급 (항상 직전 값보다 큼)"""
        with self._lock:
            candidate = self._clock() + self.offset_ms
            if candidate <= self._last:
                candidate = self._last + 1
            self._last = candidate
            return candidate

    @property
    def last(self) -> int:
        """마지막으로 발급한 nonce (발급 전이면 0)"""
        return self._last


# ---------------------------------------------------------------------------
# 자격증명 세트별 공유 발급기
# ---------------------------------------------------------------------------

_registry_lock = threading.Lock()
_generators: dict[tuple[str, str], NonceGenerator] = {}


def nonce_generator_for(exchange_id: str, api_key: str) -> NonceGenerator:
    """(거래소, api_key)당 하나의 NonceGenerator

    같은 자격증명으로 만든 어댑터 인스턴스들은 같은 발급기를 공유하므로
    인스턴스가 여러 개여도 nonce가 겹치지 않음.
    """
    key = (exchange_id, api_key)
    with _registry_lock:
        generator = _generators.get(key)
        if generator is None:
            generator = NonceGenerator()
            _generators[key] = generator
        return generator


def reset_nonce_generators() -> None:
    """공유 발급기 초기화 (테스트용)"""
    with _registry_lock:
        _generators.clear()
