"""
엔드포인트 테이블 컴파일러

거래소별 선언적 REST 경로 카탈로그 {namespace: {verb: [path, ...]}}를
(namespace, verb, name) -> CompiledEndpoint 불변 테이블로 변환.

name은 경로를 camelCase로 바꾼 값:
    /ticker/24hr          -> ticker24Hr
    /products/{id}/book   -> productsIdBook
    /market/open/symbols  -> marketOpenSymbols

호출 예:
    table = compile_endpoints(catalog, dispatch, signer.missing_credentials)
    await table["public", "get", "productsIdBook"](id="BTC-USD", params={"level": 2})
"""

import logging
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Iterator, Mapping
from urllib.parse import quote

from adapters.errors import AuthenticationError, InvalidRequestError, NotSupportedError

logger = logging.getLogger(__name__)


PLACEHOLDER_PATTERN = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")
_WORDS = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")


def camel_case(path: str) -> str:
    """REST 경로 -> camelCase 이름

    Example:
        >>> camel_case("/products/{id}/book")
        'productsIdBook'
        >>> camel_case("/open/deal-orders")
        'openDealOrders'
    """
    words = _WORDS.findall(path)
    if not words:
        return ""
    head, *rest = words
    return head.lower() + "".join(w[:1].upper() + w[1:].lower() for w in rest)


@dataclass(frozen=True)
class EndpointCatalog:
    """거래소 엔드포인트 카탈로그 (정적 설정 데이터)

    Attributes:
        urls: namespace -> 베이스 URL
        api: namespace -> {verb -> [상대 경로]}
        signed_namespaces: 서명이 필요한 namespace
        required_credentials: 서명 요청에 필요한 자격증명 필드 이름
    """

    urls: Mapping[str, str]
    api: Mapping[str, Mapping[str, list[str]]]
    signed_namespaces: frozenset[str] = frozenset()
    required_credentials: tuple[str, ...] = ("api_key", "api_secret")


@dataclass(frozen=True)
class Endpoint:
    """카탈로그의 단일 엔드포인트"""

    namespace: str
    verb: str
    path: str
    name: str
    base_url: str
    signed: bool
    placeholders: tuple[str, ...] = field(default=())

    def render(self, fields: Mapping[str, Any]) -> str:
        """경로 placeholder 치환

        Raises:
            InvalidRequestError: placeholder에 대응하는 필드가 없음
        """
        missing = [name for name in self.placeholders if fields.get(name) in (None, "")]
        if missing:
            raise InvalidRequestError(
                f"{self.verb.upper()} {self.path} requires path field(s): {', '.join(missing)}"
            )
        return PLACEHOLDER_PATTERN.sub(lambda m: quote(str(fields[m.group(1)]), safe=""), self.path)


# (endpoint, 치환된 경로, params, data) -> 응답 본문
Dispatch = Callable[[Endpoint, str, dict[str, Any], dict[str, Any] | None], Awaitable[Any]]


class CompiledEndpoint:
    """호출 가능한 엔드포인트

    호출 시 검증 순서:
        1. 경로 placeholder 치환 (누락 -> InvalidRequestError)
        2. 서명 namespace면 자격증명 확인 (누락 -> AuthenticationError)
        3. dispatch 호출
    """

    def __init__(
        self,
        endpoint: Endpoint,
        dispatch: Dispatch,
        missing_credentials: Callable[[], list[str]],
    ):
        self.endpoint = endpoint
        self._dispatch = dispatch
        self._missing_credentials = missing_credentials

    async def __call__(
        self,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        **fields: Any,
    ) -> Any:
        path = self.endpoint.render(fields)

        if self.endpoint.signed:
            missing = self._missing_credentials()
            if missing:
                raise AuthenticationError(
                    f"{self.endpoint.namespace}.{self.endpoint.name} requires credentials: "
                    f"{', '.join(missing)}"
                )

        return await self._dispatch(self.endpoint, path, dict(params or {}), data)

    def __repr__(self) -> str:
        e = self.endpoint
        return f"<CompiledEndpoint {e.namespace}.{e.verb}.{e.name} {e.path}>"


class EndpointTable(Mapping[tuple[str, str, str], CompiledEndpoint]):
    """(namespace, verb, name) -> CompiledEndpoint 불변 매핑

    생성 후 변경 불가. 없는 키 조회는 NotSupportedError.
    """

    def __init__(self, entries: dict[tuple[str, str, str], CompiledEndpoint]):
        self._entries = MappingProxyType(dict(entries))

    def __getitem__(self, key: tuple[str, str, str]) -> CompiledEndpoint:
        try:
            return self._entries[key]
        except KeyError:
            namespace, verb, name = key
            raise NotSupportedError(
                f"endpoint {namespace}.{verb}.{name} is not in the catalog"
            ) from None

    def __iter__(self) -> Iterator[tuple[str, str, str]]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def get(self, key: Any, default: Any = None) -> Any:
        return self._entries.get(key, default)

    def namespace(self, namespace: str) -> Mapping[tuple[str, str, str], CompiledEndpoint]:
        """특정 namespace의 엔드포인트만"""
        return MappingProxyType(
            {key: value for key, value in self._entries.items() if key[0] == namespace}
        )


def compile_endpoints(
    catalog: EndpointCatalog,
    dispatch: Dispatch,
    missing_credentials: Callable[[], list[str]],
) -> EndpointTable:
    """카탈로그 -> EndpointTable

    Args:
        catalog: 엔드포인트 카탈로그
        dispatch: 실제 요청 함수
        missing_credentials: 비어 있는 필수 자격증명을 반환하는 함수

    Raises:
        ValueError: 베이스 URL이 없는 namespace, 또는 같은 이름으로 충돌하는 경로
    """
    entries: dict[tuple[str, str, str], CompiledEndpoint] = {}

    for namespace, verbs in catalog.api.items():
        base_url = catalog.urls.get(namespace)
        if base_url is None:
            raise ValueError(f"namespace '{namespace}' has no base URL")

        signed = namespace in catalog.signed_namespaces

        for verb, paths in verbs.items():
            verb = verb.lower()
            for path in paths:
                name = camel_case(path)
                key = (namespace, verb, name)
                if key in entries:
                    raise ValueError(
                        f"duplicate endpoint name {namespace}.{verb}.{name} ({path})"
                    )

                endpoint = Endpoint(
                    namespace=namespace,
                    verb=verb,
                    path=path,
                    name=name,
                    base_url=base_url.rstrip("/"),
                    signed=signed,
                    placeholders=tuple(PLACEHOLDER_PATTERN.findall(path)),
                )
                entries[key] = CompiledEndpoint(endpoint, dispatch, missing_credentials)

    logger.debug(
        "엔드포인트 테이블 컴파일 완료",
        extra={"endpoint_count": len(entries)},
    )

    return EndpointTable(entries)
