"""
Gdax 요청 서명

prehash = timestamp(초, 밀리초 해상도) + METHOD + request_path(쿼리 포함) + body
signature = base64(HMAC-SHA256(prehash, base64decode(secret)))
CB-ACCESS-KEY / SIGN / TIMESTAMP / PASSPHRASE 헤더.
"""

import base64
import binascii
import hashlib
import hmac
import json
from urllib.parse import urlencode, urlsplit

from adapters.errors import AuthenticationError
from adapters.signing import BaseSigner, SignedRequest, SignRequest, stringify_params


class GdaxSigner(BaseSigner):
    """Gdax 서명 전략"""

    REQUIRED_CREDENTIALS = ("api_key", "api_secret", "password")

    @staticmethod
    def format_timestamp(nonce: int) -> str:
        """밀리초 nonce -> 'seconds.mmm'"""
        return f"{nonce // 1000}.{nonce % 1000:03d}"

    def _generate_signature(self, prehash: str) -> str:
        try:
            key = base64.b64decode(self.credentials.api_secret, validate=True)
        except (binascii.Error, ValueError) as e:
            raise AuthenticationError("Gdax api_secret must be base64 encoded") from e

        digest = hmac.new(key, prehash.encode("utf-8"), hashlib.sha256).digest()
        return base64.b64encode(digest).decode("ascii")

    def _sign(self, request: SignRequest, nonce: int) -> SignedRequest:
        timestamp = self.format_timestamp(nonce)

        params = stringify_params(request.params)
        request_path = urlsplit(request.base_url).path + request.path
        if params:
            request_path += "?" + urlencode(params)

        body = json.dumps(request.data, separators=(",", ":")) if request.data else ""
        prehash = timestamp + request.method.upper() + request_path + body

        headers = {
            "CB-ACCESS-KEY": self.credentials.api_key,
            "CB-ACCESS-SIGN": self._generate_signature(prehash),
            "CB-ACCESS-TIMESTAMP": timestamp,
            "CB-ACCESS-PASSPHRASE": self.credentials.password,
        }
        if body:
            headers["Content-Type"] = "application/json"

        return SignedRequest(
            headers=headers,
            params=params,
            body=body or None,
        )
