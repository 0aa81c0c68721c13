"""
httpx 기반 HTTP 전송 계층

ITransport Protocol 구현.
고정 타임아웃, 재시도 없음. HTTP 4xx/5xx는 ExchangeApiError,
httpx.TimeoutException / httpx.RequestError는 그대로 전파.
"""

import json
import logging
from typing import Any

import httpx

from adapters.errors import ExchangeApiError
from adapters.signing import SignedRequest
from core.constants import Defaults

logger = logging.getLogger(__name__)


class HttpxTransport:
    """httpx.AsyncClient 전송 계층

    Args:
        timeout: 요청 타임아웃 (초)
    """

    def __init__(self, timeout: float = Defaults.REQUEST_TIMEOUT_SEC):
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """HTTP 클라이언트 가져오기 (lazy initialization)"""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """HTTP 클라이언트 종료"""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def request(
        self,
        method: str,
        base_url: str,
        path: str,
        signed: bool,
        config: SignedRequest,
    ) -> Any:
        """API 요청 실행

        Args:
            method: HTTP 메서드 (GET, POST, PUT, DELETE)
            base_url: 베이스 URL
            path: 상대 경로
            signed: 서명 요청 여부
            config: 헤더/파라미터/본문

        Returns:
            JSON 응답 (JSON이 아니면 텍스트)

        Raises:
            ExchangeApiError: HTTP 4xx/5xx 응답
            httpx.TimeoutException: 타임아웃
            httpx.RequestError: 연결 실패 등 전송 에러
        """
        url = f"{base_url}{path}"
        client = await self._get_client()

        if signed:
            logger.debug(
                "Signed request",
                extra={"method": method, "url": url},
            )

        response = await client.request(
            method,
            url,
            params=config.params or None,
            headers=config.headers,
            content=config.body,
        )

        body = self._decode(response)

        if response.status_code >= 400:
            message = self._error_message(body)
            logger.error(
                "Exchange API error",
                extra={
                    "method": method,
                    "url": url,
                    "status": response.status_code,
                    "error_message": message,
                },
            )
            raise ExchangeApiError(response.status_code, message, body)

        return body

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except (json.JSONDecodeError, ValueError):
            return response.text

    @staticmethod
    def _error_message(body: Any) -> str:
        if isinstance(body, dict):
            for key in ("msg", "message", "error"):
                if body.get(key):
                    return str(body[key])
        if body is None:
            return "Unknown error"
        return str(body)
