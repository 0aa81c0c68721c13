"""
엔드포인트 테이블 컴파일러 테스트
"""

from unittest.mock import AsyncMock

import pytest

from adapters.binance.constants import CATALOG as BINANCE_CATALOG
from adapters.endpoints import (
    EndpointCatalog,
    EndpointTable,
    camel_case,
    compile_endpoints,
)
from adapters.errors import AuthenticationError, InvalidRequestError, NotSupportedError
from adapters.gdax.constants import CATALOG as GDAX_CATALOG
from adapters.kucoin.constants import CATALOG as KUCOIN_CATALOG


def _no_missing() -> list[str]:
    return []


@pytest.fixture
def endpoint_catalog() -> EndpointCatalog:
    return EndpointCatalog(
        urls={"public": "https://api.example.com/", "private": "https://api.example.com/v1"},
        api={
            "public": {"get": ["/products", "/products/{id}/book"]},
            "private": {"GET": ["/orders/{id}"], "delete": ["/orders/{id}"]},
        },
        signed_namespaces=frozenset({"private"}),
    )


class TestCamelCase:
    """경로 -> 이름 변환 테스트"""

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("/ticker/24hr", "ticker24Hr"),
            ("/products/{id}/book", "productsIdBook"),
            ("/market/open/symbols", "marketOpenSymbols"),
            ("/deposits/payment-method", "depositsPaymentMethod"),
            ("/open/deal-orders", "openDealOrders"),
            ("/account/{coin}/wallet/address", "accountCoinWalletAddress"),
            ("/exchangeInfo", "exchangeInfo"),
            ("/users/self/trailing-volume", "usersSelfTrailingVolume"),
        ],
    )
    def test_camel_case(self, path: str, expected: str) -> None:
        """대표 경로 변환"""
        assert camel_case(path) == expected

    def test_empty_path(self) -> None:
        """단어가 없는 경로는 빈 문자열"""
        assert camel_case("/") == ""


class TestCompileEndpoints:
    """카탈로그 컴파일 테스트"""

    def test_keys(self, endpoint_catalog: EndpointCatalog) -> None:
        """(namespace, verb 소문자, name) 키"""
        table = compile_endpoints(endpoint_catalog, AsyncMock(), _no_missing)

        assert set(table) == {
            ("public", "get", "products"),
            ("public", "get", "productsIdBook"),
            ("private", "get", "ordersId"),
            ("private", "delete", "ordersId"),
        }
        assert len(table) == 4

    def test_endpoint_metadata(self, endpoint_catalog: EndpointCatalog) -> None:
        """베이스 URL 끝 슬래시 제거, 서명 여부, placeholder"""
        table = compile_endpoints(endpoint_catalog, AsyncMock(), _no_missing)

        public = table["public", "get", "productsIdBook"].endpoint
        assert public.base_url == "https://api.example.com"
        assert public.signed is False
        assert public.placeholders == ("id",)

        private = table["private", "delete", "ordersId"].endpoint
        assert private.signed is True
        assert private.base_url == "https://api.example.com/v1"

    def test_missing_base_url(self) -> None:
        """베이스 URL이 없는 namespace는 ValueError"""
        catalog = EndpointCatalog(urls={}, api={"public": {"get": ["/time"]}})

        with pytest.raises(ValueError, match="has no base URL"):
            compile_endpoints(catalog, AsyncMock(), _no_missing)

    def test_duplicate_name(self) -> None:
        """같은 이름으로 충돌하는 경로는 ValueError"""
        catalog = EndpointCatalog(
            urls={"public": "https://api.example.com"},
            api={"public": {"get": ["/open/orders", "/open-orders"]}},
        )

        with pytest.raises(ValueError, match="duplicate endpoint name"):
            compile_endpoints(catalog, AsyncMock(), _no_missing)

    @pytest.mark.parametrize("catalog", [BINANCE_CATALOG, GDAX_CATALOG, KUCOIN_CATALOG])
    def test_exchange_catalogs_compile(self, catalog: EndpointCatalog) -> None:
        """거래소 카탈로그는 충돌 없이 컴파일"""
        table = compile_endpoints(catalog, AsyncMock(), _no_missing)

        assert len(table) > 0


class TestEndpointTable:
    """EndpointTable 조회 테스트"""

    def test_unknown_key_raises_not_supported(self, endpoint_catalog: EndpointCatalog) -> None:
        """없는 엔드포인트는 NotSupportedError"""
        table = compile_endpoints(endpoint_catalog, AsyncMock(), _no_missing)

        with pytest.raises(NotSupportedError, match="public.post.products"):
            table["public", "post", "products"]

    def test_contains_and_get(self, endpoint_catalog: EndpointCatalog) -> None:
        table = compile_endpoints(endpoint_catalog, AsyncMock(), _no_missing)

        assert ("public", "get", "products") in table
        assert ("public", "get", "time") not in table
        assert table.get(("public", "get", "time")) is None

    def test_immutable(self, endpoint_catalog: EndpointCatalog) -> None:
        """생성 후 항목 추가 불가"""
        table = compile_endpoints(endpoint_catalog, AsyncMock(), _no_missing)

        with pytest.raises(TypeError):
            table["public", "get", "time"] = table["public", "get", "products"]  # type: ignore[index]

    def test_namespace_view(self, endpoint_catalog: EndpointCatalog) -> None:
        table = compile_endpoints(endpoint_catalog, AsyncMock(), _no_missing)

        private = table.namespace("private")

        assert set(private) == {("private", "get", "ordersId"), ("private", "delete", "ordersId")}
        assert isinstance(table, EndpointTable)


class TestCompiledEndpointCall:
    """엔드포인트 호출 테스트"""

    @pytest.mark.asyncio
    async def test_renders_path_and_dispatches(self, endpoint_catalog: EndpointCatalog) -> None:
        """placeholder 치환 후 dispatch 호출"""
        dispatch = AsyncMock(return_value={"ok": True})
        table = compile_endpoints(endpoint_catalog, dispatch, _no_missing)

        result = await table["public", "get", "productsIdBook"](id="BTC-USD", params={"level": 2})

        assert result == {"ok": True}
        endpoint, path, params, data = dispatch.call_args.args
        assert endpoint.name == "productsIdBook"
        assert path == "/products/BTC-USD/book"
        assert params == {"level": 2}
        assert data is None

    @pytest.mark.asyncio
    async def test_missing_placeholder(self, endpoint_catalog: EndpointCatalog) -> None:
        """placeholder 필드 누락 시 InvalidRequestError (dispatch 안 함)"""
        dispatch = AsyncMock()
        table = compile_endpoints(endpoint_catalog, dispatch, _no_missing)

        with pytest.raises(InvalidRequestError, match="id"):
            await table["public", "get", "productsIdBook"]()

        dispatch.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_placeholder(self, endpoint_catalog: EndpointCatalog) -> None:
        """빈 문자열 id도 누락으로 처리 (/orders/ 로 보내지 않음)"""
        dispatch = AsyncMock()
        table = compile_endpoints(endpoint_catalog, dispatch, _no_missing)

        with pytest.raises(InvalidRequestError, match="id"):
            await table["private", "delete", "ordersId"](id="")

        dispatch.assert_not_called()

    @pytest.mark.asyncio
    async def test_path_value_quoted(self, endpoint_catalog: EndpointCatalog) -> None:
        """경로 값의 / ? 는 인코딩되어 경로 구조를 바꾸지 않음"""
        dispatch = AsyncMock()
        table = compile_endpoints(endpoint_catalog, dispatch, _no_missing)

        await table["private", "get", "ordersId"](id="a/b?c=1")

        _, path, _, _ = dispatch.call_args.args
        assert path == "/orders/a%2Fb%3Fc%3D1"

    @pytest.mark.asyncio
    async def test_signed_without_credentials(self, endpoint_catalog: EndpointCatalog) -> None:
        """서명 namespace인데 자격증명 없으면 AuthenticationError (dispatch 안 함)"""
        dispatch = AsyncMock()
        table = compile_endpoints(endpoint_catalog, dispatch, lambda: ["api_key", "api_secret"])

        with pytest.raises(AuthenticationError, match="api_key"):
            await table["private", "get", "ordersId"](id="1")

        dispatch.assert_not_called()

    @pytest.mark.asyncio
    async def test_public_without_credentials(self, endpoint_catalog: EndpointCatalog) -> None:
        """공개 namespace는 자격증명 없이 호출 가능"""
        dispatch = AsyncMock(return_value=[])
        table = compile_endpoints(endpoint_catalog, dispatch, lambda: ["api_key"])

        assert await table["public", "get", "products"]() == []

    @pytest.mark.asyncio
    async def test_params_copied(self, endpoint_catalog: EndpointCatalog) -> None:
        """호출자의 params dict는 변경되지 않음"""
        dispatch = AsyncMock()
        table = compile_endpoints(endpoint_catalog, dispatch, _no_missing)
        params = {"level": 1}

        await table["public", "get", "products"](params=params)

        assert dispatch.call_args.args[2] is not params
