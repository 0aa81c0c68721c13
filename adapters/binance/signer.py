"""
Binance 요청 서명

HMAC-SHA256(urlencode(params + timestamp), secret) hex.
timestamp(밀리초)가 nonce 역할, API 키는 X-MBX-APIKEY 헤더.
"""

import hashlib
import hmac
from urllib.parse import urlencode

from adapters.signing import BaseSigner, SignedRequest, SignRequest, stringify_params


class BinanceSigner(BaseSigner):
    """Binance 서명 전략"""

    REQUIRED_CREDENTIALS = ("api_key", "api_secret")

    def _generate_signature(self, query_string: str) -> str:
        """HMAC-SHA256 서명 생성

        Args:
            query_string: URL 인코딩된 파라미터 문자열

        Returns:
            16진수 서명 문자열
        """
        return hmac.new(
            self.credentials.api_secret.encode("utf-8"),
            query_string.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()

    def _sign(self, request: SignRequest, nonce: int) -> SignedRequest:
        values = dict(request.params)
        if request.data:
            values.update(request.data)
        values["timestamp"] = nonce
        params = stringify_params(values)

        query_string = urlencode(params)
        params["signature"] = self._generate_signature(query_string)

        return SignedRequest(
            headers={"X-MBX-APIKEY": self.credentials.api_key},
            params=params,
        )
