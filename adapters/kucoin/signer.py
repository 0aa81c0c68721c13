"""
Kucoin 요청 서명

string_to_sign = "{endpoint}/{nonce}/{query_string}"
signature = HMAC-SHA256(base64(string_to_sign), secret) hex
endpoint는 API 버전 접두사 포함 (/v1/order), query_string은 키 정렬.
"""

import base64
import hashlib
import hmac
from urllib.parse import urlencode, urlsplit

from adapters.signing import BaseSigner, SignedRequest, SignRequest, stringify_params


FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class KucoinSigner(BaseSigner):
    """Kucoin 서명 전략"""

    REQUIRED_CREDENTIALS = ("api_key", "api_secret")

    @staticmethod
    def build_query_string(values: dict) -> str:
        """키 정렬된 URL 인코딩 문자열"""
        return urlencode(sorted(values.items()))

    def _generate_signature(self, endpoint: str, query_string: str, nonce: int) -> str:
        string_to_sign = f"{endpoint}/{nonce}/{query_string}"
        encoded = base64.b64encode(string_to_sign.encode("utf-8"))
        return hmac.new(
            self.credentials.api_secret.encode("utf-8"),
            encoded,
            hashlib.sha256,
        ).hexdigest()

    def _sign(self, request: SignRequest, nonce: int) -> SignedRequest:
        endpoint = urlsplit(request.base_url).path + request.path

        raw = dict(request.params)
        if request.data:
            raw.update(request.data)
        values = stringify_params(raw)
        query_string = self.build_query_string(values)

        headers = {
            "KC-API-KEY": self.credentials.api_key,
            "KC-API-NONCE": str(nonce),
            "KC-API-SIGNATURE": self._generate_signature(endpoint, query_string, nonce),
        }

        # GET은 쿼리로, 나머지는 같은 문자열을 form 본문으로 전송
        if request.method.upper() == "GET":
            return SignedRequest(headers=headers, params=dict(sorted(values.items())))

        headers["Content-Type"] = FORM_CONTENT_TYPE
        return SignedRequest(headers=headers, params={}, body=query_string or None)
