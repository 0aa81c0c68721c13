"""
거래소별 요청 서명 테스트

nonce를 주입하면 서명이 결정적이어야 하고,
자격증명이 없으면 다이제스트 계산 전에 AuthenticationError.
"""

import base64
import hashlib
import hmac
import json
from decimal import Decimal
from unittest.mock import patch
from urllib.parse import urlencode

import pytest

from adapters.binance.signer import BinanceSigner
from adapters.errors import AuthenticationError
from adapters.gdax.signer import GdaxSigner
from adapters.kucoin.signer import KucoinSigner
from adapters.signing import BaseSigner, SignRequest, stringify_params
from core.config.loader import ExchangeCredentials
from core.utils.nonce import NonceGenerator


NONCE = 1514418413947


class TestBaseSigner:
    """공통 서명 흐름 테스트"""

    def test_missing_credentials(self) -> None:
        signer = BaseSigner(ExchangeCredentials(api_key="key"))

        assert signer.missing_credentials() == ["api_secret"]

    def test_uses_nonce_generator_when_not_injected(self, binance_credentials) -> None:
        """nonce 미주입 시 NonceGenerator에서 발급"""
        generator = NonceGenerator(clock=lambda: 1000)
        signer = BinanceSigner(binance_credentials, generator)

        first = signer.sign(SignRequest("GET", "https://api.binance.com/api/v3", "/account"))
        second = signer.sign(SignRequest("GET", "https://api.binance.com/api/v3", "/account"))

        assert first.params["timestamp"] == "1000"
        assert second.params["timestamp"] == "1001"
        assert generator.last == 1001

    def test_base_sign_not_implemented(self, binance_credentials) -> None:
        signer = BaseSigner(binance_credentials)

        with pytest.raises(NotImplementedError):
            signer.sign(SignRequest("GET", "https://example.com", "/", nonce=NONCE))


class TestBinanceSigner:
    """Binance HMAC-SHA256 서명 테스트"""

    def test_signature_matches_hmac(self, binance_credentials) -> None:
        """urlencode(params + timestamp)의 HMAC hex"""
        signer = BinanceSigner(binance_credentials)

        signed = signer.sign(
            SignRequest(
                method="GET",
                base_url="https://api.binance.com/api/v3",
                path="/order",
                params={"symbol": "ETHBTC", "orderId": 1740797},
                nonce=NONCE,
            )
        )

        expected = hmac.new(
            b"binance_secret",
            f"symbol=ETHBTC&orderId=1740797&timestamp={NONCE}".encode(),
            hashlib.sha256,
        ).hexdigest()
        assert signed.params["signature"] == expected
        assert signed.params["timestamp"] == str(NONCE)
        assert signed.headers == {"X-MBX-APIKEY": "binance_key"}
        assert signed.body is None

    def test_deterministic_with_same_nonce(self, binance_credentials) -> None:
        signer = BinanceSigner(binance_credentials)
        request = SignRequest("POST", "https://api.binance.com/api/v3", "/order", {"a": 1}, nonce=NONCE)

        assert signer.sign(request) == signer.sign(request)

    def test_different_nonce_different_signature(self, binance_credentials) -> None:
        signer = BinanceSigner(binance_credentials)

        first = signer.sign(SignRequest("GET", "https://x", "/account", nonce=NONCE))
        second = signer.sign(SignRequest("GET", "https://x", "/account", nonce=NONCE + 1))

        assert first.params["signature"] != second.params["signature"]

    def test_data_merged_into_params(self, binance_credentials) -> None:
        signer = BinanceSigner(binance_credentials)

        signed = signer.sign(
            SignRequest("POST", "https://x", "/order", {"symbol": "ETHBTC"}, {"side": "BUY"}, nonce=NONCE)
        )

        assert signed.params["side"] == "BUY"
        assert signed.params["symbol"] == "ETHBTC"

    def test_missing_credentials_before_digest(self) -> None:
        """자격증명 누락 시 다이제스트 계산 전에 거부"""
        signer = BinanceSigner(ExchangeCredentials())

        with patch.object(BinanceSigner, "_generate_signature") as mock_signature:
            with pytest.raises(AuthenticationError, match="api_key"):
                signer.sign(SignRequest("GET", "https://x", "/account", nonce=NONCE))

        mock_signature.assert_not_called()

    def test_bool_param_sent_as_signed(self, binance_credentials) -> None:
        """bool은 "true"로 서명하고 같은 값을 전송"""
        signer = BinanceSigner(binance_credentials)

        signed = signer.sign(
            SignRequest("GET", "https://x", "/allOrders", {"symbol": "ETHBTC", "fromId": 5, "stop": True}, nonce=NONCE)
        )

        assert signed.params["stop"] == "true"
        assert signed.params["fromId"] == "5"
        sent = {k: v for k, v in signed.params.items() if k != "signature"}
        expected = hmac.new(b"binance_secret", urlencode(sent).encode(), hashlib.sha256).hexdigest()
        assert signed.params["signature"] == expected


class TestGdaxSigner:
    """Gdax base64 HMAC 서명 테스트"""

    def test_format_timestamp(self) -> None:
        """밀리초 -> 'seconds.mmm'"""
        assert GdaxSigner.format_timestamp(1514418413947) == "1514418413.947"
        assert GdaxSigner.format_timestamp(1514418413005) == "1514418413.005"

    def test_headers_and_signature(self, gdax_credentials) -> None:
        """prehash = timestamp + METHOD + path + body"""
        signer = GdaxSigner(gdax_credentials)
        data = {"product_id": "BTC-USD", "side": "buy", "size": "0.01", "type": "market"}

        signed = signer.sign(
            SignRequest("POST", "https://api.gdax.com", "/orders", data=data, nonce=NONCE)
        )

        body = json.dumps(data, separators=(",", ":"))
        prehash = "1514418413.947" + "POST" + "/orders" + body
        expected = base64.b64encode(
            hmac.new(base64.b64decode("Z2RheC1zZWNyZXQta2V5"), prehash.encode(), hashlib.sha256).digest()
        ).decode()

        assert signed.body == body
        assert signed.headers["CB-ACCESS-SIGN"] == expected
        assert signed.headers["CB-ACCESS-KEY"] == "gdax_key"
        assert signed.headers["CB-ACCESS-TIMESTAMP"] == "1514418413.947"
        assert signed.headers["CB-ACCESS-PASSPHRASE"] == "gdax_passphrase"
        assert signed.headers["Content-Type"] == "application/json"

    def test_query_included_in_prehash(self, gdax_credentials) -> None:
        """GET 쿼리는 request_path에 포함, 본문 없음"""
        signer = GdaxSigner(gdax_credentials)

        with_query = signer.sign(
            SignRequest("GET", "https://api.gdax.com", "/orders", {"status": "all"}, nonce=NONCE)
        )
        without_query = signer.sign(SignRequest("GET", "https://api.gdax.com", "/orders", nonce=NONCE))

        assert with_query.headers["CB-ACCESS-SIGN"] != without_query.headers["CB-ACCESS-SIGN"]
        assert with_query.params == {"status": "all"}
        assert with_query.body is None
        assert "Content-Type" not in with_query.headers

    def test_bool_query_in_prehash(self, gdax_credentials) -> None:
        """prehash 쿼리와 전송 쿼리가 같은 문자열 값"""
        signer = GdaxSigner(gdax_credentials)

        signed = signer.sign(
            SignRequest("GET", "https://api.gdax.com", "/fills", {"product_id": "BTC-USD", "before": True}, nonce=NONCE)
        )

        prehash = "1514418413.947" + "GET" + "/fills?product_id=BTC-USD&before=true"
        expected = base64.b64encode(
            hmac.new(base64.b64decode("Z2RheC1zZWNyZXQta2V5"), prehash.encode(), hashlib.sha256).digest()
        ).decode()
        assert signed.params == {"product_id": "BTC-USD", "before": "true"}
        assert signed.headers["CB-ACCESS-SIGN"] == expected

    def test_missing_password(self) -> None:
        """passphrase 누락 시 AuthenticationError"""
        signer = GdaxSigner(ExchangeCredentials(api_key="k", api_secret="Z2RheC1zZWNyZXQta2V5"))

        with pytest.raises(AuthenticationError, match="password"):
            signer.sign(SignRequest("GET", "https://api.gdax.com", "/accounts", nonce=NONCE))

    def test_secret_not_base64(self) -> None:
        signer = GdaxSigner(ExchangeCredentials(api_key="k", api_secret="not base64!", password="p"))

        with pytest.raises(AuthenticationError, match="base64"):
            signer.sign(SignRequest("GET", "https://api.gdax.com", "/accounts", nonce=NONCE))


class TestKucoinSigner:
    """Kucoin 서명 테스트"""

    def test_build_query_string_sorted(self) -> None:
        assert KucoinSigner.build_query_string({"symbol": "KCS-BTC", "amount": 1}) == "amount=1&symbol=KCS-BTC"

    def test_get_signature(self, kucoin_credentials) -> None:
        """endpoint에 버전 접두사 포함, 쿼리 정렬"""
        signer = KucoinSigner(kucoin_credentials)

        signed = signer.sign(
            SignRequest(
                "GET",
                "https://api.kucoin.com/v1",
                "/order/active-map",
                {"symbol": "KCS-BTC", "limit": 10},
                nonce=NONCE,
            )
        )

        string_to_sign = f"/v1/order/active-map/{NONCE}/limit=10&symbol=KCS-BTC"
        expected = hmac.new(
            b"kucoin_secret",
            base64.b64encode(string_to_sign.encode()),
            hashlib.sha256,
        ).hexdigest()

        assert signed.headers == {
            "KC-API-KEY": "kucoin_key",
            "KC-API-NONCE": str(NONCE),
            "KC-API-SIGNATURE": expected,
        }
        assert list(signed.params) == ["limit", "symbol"]
        assert signed.body is None

    def test_post_sends_form_body(self, kucoin_credentials) -> None:
        """POST는 정렬된 쿼리 문자열을 form 본문으로"""
        signer = KucoinSigner(kucoin_credentials)

        signed = signer.sign(
            SignRequest(
                "POST",
                "https://api.kucoin.com/v1",
                "/order",
                data={"type": "BUY", "symbol": "KCS-BTC", "price": "0.0001", "amount": "10"},
                nonce=NONCE,
            )
        )

        assert signed.body == "amount=10&price=0.0001&symbol=KCS-BTC&type=BUY"
        assert signed.params == {}
        assert signed.headers["Content-Type"] == "application/x-www-form-urlencoded"

    def test_deterministic(self, kucoin_credentials) -> None:
        signer = KucoinSigner(kucoin_credentials)
        request = SignRequest("GET", "https://api.kucoin.com/v1", "/user/info", nonce=NONCE)

        assert signer.sign(request) == signer.sign(request)

    def test_bool_param_in_query(self, kucoin_credentials) -> None:
        signer = KucoinSigner(kucoin_credentials)

        signed = signer.sign(
            SignRequest("GET", "https://api.kucoin.com/v1", "/order/dealt", {"symbol": "KCS-BTC", "hidden": False}, nonce=NONCE)
        )

        string_to_sign = f"/v1/order/dealt/{NONCE}/hidden=false&symbol=KCS-BTC"
        expected = hmac.new(b"kucoin_secret", base64.b64encode(string_to_sign.encode()), hashlib.sha256).hexdigest()
        assert signed.params == {"hidden": "false", "symbol": "KCS-BTC"}
        assert signed.headers["KC-API-SIGNATURE"] == expected


class TestStringifyParams:
    """서명/전송 공용 파라미터 문자열화"""

    def test_values(self) -> None:
        assert stringify_params({"a": True, "b": False, "c": 10, "d": Decimal("0.10"), "e": "x"}) == {
            "a": "true",
            "b": "false",
            "c": "10",
            "d": "0.10",
            "e": "x",
        }

    def test_none_dropped(self) -> None:
        assert stringify_params({"a": None, "b": 1}) == {"b": "1"}
