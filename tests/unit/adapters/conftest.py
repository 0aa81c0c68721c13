"""
어댑터 테스트 픽스처

거래소 원본 응답 샘플과 경로별 응답을 돌려주는 Mock 전송 계층 제공.
"""

from decimal import Decimal
from typing import Any, Callable
from unittest.mock import AsyncMock

import pytest

from adapters.catalog import MarketCatalog, TradingFees
from adapters.models import Market, MarketPrecision, Order
from core.config.loader import ExchangeCredentials
from core.types import OrderSide, OrderStatus, OrderType


# -------------------------------------------------------------------------
# Mock 전송 계층
# -------------------------------------------------------------------------

def make_transport(routes: dict[tuple[str, str], Any]) -> AsyncMock:
    """(METHOD, path) -> 응답 매핑으로 동작하는 AsyncMock 전송 계층

    응답이 callable이면 (params, body)로 호출한 결과, Exception이면 raise.
    매핑에 없는 경로는 AssertionError.
    """
    transport = AsyncMock()

    async def request(method, base_url, path, signed, config):
        key = (method, path)
        if key not in routes:
            raise AssertionError(f"unexpected request {method} {base_url}{path}")
        response = routes[key]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(config.params, config.body)
        return response

    transport.request.side_effect = request
    return transport


@pytest.fixture
def transport_factory() -> Callable[[dict[tuple[str, str], Any]], AsyncMock]:
    """routes -> Mock 전송 계층"""
    return make_transport


def last_call_config(transport: AsyncMock, path: str):
    """path로 보낸 마지막 요청의 SignedRequest"""
    for call in reversed(transport.request.call_args_list):
        if call.args[2] == path:
            return call.args[4]
    raise AssertionError(f"no request to {path}")


@pytest.fixture
def request_config() -> Callable[[AsyncMock, str], Any]:
    """마지막 요청 설정 조회 헬퍼"""
    return last_call_config


# -------------------------------------------------------------------------
# 자격증명
# -------------------------------------------------------------------------

@pytest.fixture
def binance_credentials() -> ExchangeCredentials:
    return ExchangeCredentials(api_key="binance_key", api_secret="binance_secret")


@pytest.fixture
def gdax_credentials() -> ExchangeCredentials:
    # api_secret은 base64("gdax-secret-key")
    return ExchangeCredentials(
        api_key="gdax_key",
        api_secret="Z2RheC1zZWNyZXQta2V5",
        password="gdax_passphrase",
    )


@pytest.fixture
def kucoin_credentials() -> ExchangeCredentials:
    return ExchangeCredentials(api_key="kucoin_key", api_secret="kucoin_secret")


# -------------------------------------------------------------------------
# 공통 카탈로그 / 주문
# -------------------------------------------------------------------------

@pytest.fixture
def eth_btc_market() -> Market:
    """ETH/BTC 마켓"""
    return Market(
        id="ETHBTC",
        symbol="ETH/BTC",
        base="ETH",
        quote="BTC",
        base_id="ETH",
        quote_id="BTC",
        precision=MarketPrecision(base=8, quote=8, amount=3, price=6),
        maker=Decimal("0.001"),
        taker=Decimal("0.001"),
    )


@pytest.fixture
def ltc_btc_market() -> Market:
    """LTC/BTC 마켓"""
    return Market(
        id="LTCBTC",
        symbol="LTC/BTC",
        base="LTC",
        quote="BTC",
        base_id="LTC",
        quote_id="BTC",
        precision=MarketPrecision(base=8, quote=8, amount=2, price=6),
    )


@pytest.fixture
def sample_catalog(eth_btc_market: Market, ltc_btc_market: Market) -> MarketCatalog:
    """ETH/BTC + LTC/BTC 카탈로그"""
    return MarketCatalog.build(
        "binance",
        [eth_btc_market, ltc_btc_market],
        fees=TradingFees(maker=Decimal("0.001"), taker=Decimal("0.002")),
    )


def make_order(
    id: str,
    side: str,
    remaining: str,
    price: str = "0.05",
    symbol: str = "ETH/BTC",
    status: str = OrderStatus.OPEN.value,
    cost: str | None = None,
) -> Order:
    amount = Decimal(remaining)
    return Order(
        id=id,
        timestamp=1517469204353,
        datetime="2018-02-01T07:13:24.353Z",
        symbol=symbol,
        type=OrderType.LIMIT.value,
        side=side,
        price=Decimal(price),
        amount=amount,
        filled=Decimal("0"),
        remaining=amount,
        cost=Decimal(cost) if cost is not None else None,
        status=status,
    )


@pytest.fixture
def order_factory() -> Callable[..., Order]:
    """테스트용 주문 생성 함수"""
    return make_order


@pytest.fixture
def sample_sell_order() -> Order:
    """ETH 3개 매도 미체결 주문"""
    return make_order("sell-1", OrderSide.SELL.value, "3")


# -------------------------------------------------------------------------
# Binance 응답 샘플
# -------------------------------------------------------------------------

@pytest.fixture
def binance_exchange_info() -> dict[str, Any]:
    """GET /api/v1/exchangeInfo"""
    return {
        "timezone": "UTC",
        "serverTime": 1517469204353,
        "symbols": [
            {
                "symbol": "ETHBTC",
                "status": "TRADING",
                "baseAsset": "ETH",
                "baseAssetPrecision": 8,
                "quoteAsset": "BTC",
                "quotePrecision": 8,
                "filters": [
                    {
                        "filterType": "PRICE_FILTER",
                        "minPrice": "0.00000100",
                        "maxPrice": "100000.00000000",
                        "tickSize": "0.00000100",
                    },
                    {
                        "filterType": "LOT_SIZE",
                        "minQty": "0.00100000",
                        "maxQty": "100000.00000000",
                        "stepSize": "0.00100000",
                    },
                    {"filterType": "MIN_NOTIONAL", "minNotional": "0.00100000"},
                ],
            },
            {
                "symbol": "BCCBTC",
                "status": "BREAK",
                "baseAsset": "BCC",
                "baseAssetPrecision": 8,
                "quoteAsset": "BTC",
                "quotePrecision": 8,
                "filters": [],
            },
            {
                "symbol": "123456",
                "status": "TRADING",
                "baseAsset": "123",
                "baseAssetPrecision": 8,
                "quoteAsset": "456",
                "quotePrecision": 8,
                "filters": [],
            },
        ],
    }


@pytest.fixture
def binance_ticker() -> dict[str, Any]:
    """GET /api/v1/ticker/24hr?symbol=ETHBTC"""
    return {
        "symbol": "ETHBTC",
        "priceChange": "0.00546200",
        "priceChangePercent": "5.073",
        "weightedAvgPrice": "0.11026035",
        "prevClosePrice": "0.10767300",
        "lastPrice": "0.11313500",
        "bidPrice": "0.11313500",
        "bidQty": "0.00100000",
        "askPrice": "0.11321600",
        "askQty": "7.08100000",
        "openPrice": "0.10767300",
        "highPrice": "0.11411900",
        "lowPrice": "0.10690000",
        "volume": "108008.44000000",
        "quoteVolume": "11909.04836175",
        "openTime": 1517382804353,
        "closeTime": 1517469204353,
    }


@pytest.fixture
def binance_order() -> dict[str, Any]:
    """POST /api/v3/order 응답"""
    return {
        "symbol": "ETHBTC",
        "orderId": 1740797,
        "clientOrderId": "1XZTVBTGS4K1e",
        "transactTime": 1514418413947,
        "price": "0.10000000",
        "origQty": "2.00000000",
        "executedQty": "0.50000000",
        "status": "PARTIALLY_FILLED",
        "timeInForce": "GTC",
        "type": "LIMIT",
        "side": "SELL",
    }


@pytest.fixture
def binance_agg_trades() -> list[dict[str, Any]]:
    """GET /api/v1/aggTrades (시간 오름차순)"""
    return [
        {"a": 1, "p": "0.01", "q": "1.0", "f": 1, "l": 1, "T": 1000, "m": True, "M": True},
        {"a": 2, "p": "0.02", "q": "2.0", "f": 2, "l": 2, "T": 2000, "m": False, "M": True},
        {"a": 3, "p": "0.03", "q": "3.0", "f": 3, "l": 3, "T": 3000, "m": True, "M": True},
    ]


@pytest.fixture
def binance_my_trade() -> dict[str, Any]:
    """GET /api/v3/myTrades 항목"""
    return {
        "id": 9960,
        "orderId": 191939,
        "price": "0.00138000",
        "qty": "10.00000000",
        "commission": "0.00001380",
        "commissionAsset": "ETH",
        "time": 1508611114735,
        "isBuyer": True,
        "isMaker": False,
        "isBestMatch": True,
    }


@pytest.fixture
def binance_account() -> dict[str, Any]:
    """GET /api/v3/account"""
    return {
        "makerCommission": 15,
        "canTrade": True,
        "balances": [
            {"asset": "BTC", "free": "1.50000000", "locked": "0.25000000"},
            {"asset": "ETH", "free": "10.00000000", "locked": "0.00000000"},
            {"asset": "BCC", "free": "2.00000000", "locked": "1.00000000"},
        ],
    }


# -------------------------------------------------------------------------
# Gdax 응답 샘플
# -------------------------------------------------------------------------

@pytest.fixture
def gdax_products() -> list[dict[str, Any]]:
    """GET /products"""
    return [
        {
            "id": "BTC-USD",
            "base_currency": "BTC",
            "quote_currency": "USD",
            "base_min_size": "0.001",
            "base_max_size": "10000.00",
            "quote_increment": "0.01",
            "min_market_funds": "10",
            "max_market_funds": "1000000",
            "status": "online",
        },
        {
            "id": "ETH-BTC",
            "base_currency": "ETH",
            "quote_currency": "BTC",
            "base_min_size": "0.01",
            "base_max_size": "1000000",
            "quote_increment": "0.00001",
            "status": "online",
        },
    ]


@pytest.fixture
def gdax_currencies() -> list[dict[str, Any]]:
    """GET /currencies"""
    return [
        {"id": "BTC", "name": "Bitcoin", "min_size": "0.00000001", "status": "online"},
        {"id": "ETH", "name": "Ether", "min_size": "0.00000001", "status": "online"},
        {"id": "USD", "name": "United States Dollar", "min_size": "0.01000000", "status": "online"},
    ]


@pytest.fixture
def gdax_ticker() -> dict[str, Any]:
    """GET /products/BTC-USD/ticker"""
    return {
        "trade_id": 4729088,
        "price": "333.99",
        "size": "0.193",
        "bid": "333.98",
        "ask": "333.99",
        "volume": "5957.11914015",
        "time": "2015-11-14T20:46:03.511254Z",
    }


@pytest.fixture
def gdax_order() -> dict[str, Any]:
    """GET /orders/{id}"""
    return {
        "id": "68e6a28f-ae28-4788-8d4f-5ab4e5e5ae08",
        "size": "1.00000000",
        "product_id": "BTC-USD",
        "side": "buy",
        "type": "limit",
        "price": "100.00",
        "created_at": "2016-12-08T20:09:05.508883Z",
        "filled_size": "0.25000000",
        "executed_value": "25.0000000000000000",
        "fill_fees": "0.0625000000000000",
        "status": "open",
        "settled": False,
    }


@pytest.fixture
def gdax_public_trades() -> list[dict[str, Any]]:
    """GET /products/BTC-USD/trades (최신순)"""
    return [
        {"time": "2014-11-07T22:19:28.578544Z", "trade_id": 74, "price": "10.00", "size": "0.01", "side": "buy"},
        {"time": "2014-11-07T01:08:43.642366Z", "trade_id": 73, "price": "11.00", "size": "0.02", "side": "sell"},
    ]


@pytest.fixture
def gdax_fill() -> dict[str, Any]:
    """GET /fills 항목"""
    return {
        "trade_id": 74,
        "product_id": "BTC-USD",
        "price": "10.00",
        "size": "0.01",
        "order_id": "d50ec984-77a8-460a-b958-66f114b0de9b",
        "created_at": "2014-11-07T22:19:28.578544Z",
        "liquidity": "T",
        "fee": "0.00025",
        "settled": True,
        "side": "buy",
    }


@pytest.fixture
def gdax_accounts() -> list[dict[str, Any]]:
    """GET /accounts"""
    return [
        {
            "id": "71452118-efc7-4cc4-8780-a5e22d4baa53",
            "currency": "BTC",
            "balance": "1.5000000000000000",
            "available": "1.0000000000000000",
            "hold": "0.5000000000000000",
            "profile_id": "75da88c5-05bf-4f54-bc85-5c775bd68254",
        },
        {
            "id": "e316cb9a-0808-4fd7-8914-97829c1925de",
            "currency": "USD",
            "balance": "80.2301373066930000",
            "available": "79.2266348066930000",
            "hold": "1.0035025000000000",
            "profile_id": "75da88c5-05bf-4f54-bc85-5c775bd68254",
        },
    ]


# -------------------------------------------------------------------------
# Kucoin 응답 샘플 (v1 envelope 포함)
# -------------------------------------------------------------------------

def kucoin_envelope(data: Any, success: bool = True) -> dict[str, Any]:
    return {
        "success": success,
        "code": "OK" if success else "ERROR",
        "msg": "Operation succeeded." if success else "Operation failed.",
        "timestamp": 1520853540000,
        "data": data,
    }


@pytest.fixture
def kucoin_symbols() -> dict[str, Any]:
    """GET /v1/market/open/symbols"""
    return kucoin_envelope(
        [
            {
                "coinType": "KCS",
                "trading": True,
                "symbol": "KCS-BTC",
                "lastDealPrice": 0.00009277,
                "buy": 0.00009277,
                "sell": 0.0000929,
                "change": -0.00000046,
                "coinTypePair": "BTC",
                "sort": 0,
                "feeRate": 0.001,
                "volValue": 8.7154,
                "high": 0.0000954,
                "datetime": 1520853540000,
                "vol": 93297.8542,
                "low": 0.00009101,
                "changeRate": -0.0049,
            },
            {
                "coinType": "ETH",
                "trading": False,
                "symbol": "ETH-BTC",
                "lastDealPrice": 0.08,
                "buy": 0.0799,
                "sell": 0.0801,
                "change": 0.001,
                "coinTypePair": "BTC",
                "sort": 0,
                "feeRate": 0.001,
                "volValue": 10.5,
                "high": 0.081,
                "datetime": 1520853540000,
                "vol": 130.2,
                "low": 0.078,
                "changeRate": 0.0125,
            },
        ]
    )


@pytest.fixture
def kucoin_coins() -> dict[str, Any]:
    """GET /v1/market/open/coins"""
    return kucoin_envelope(
        [
            {
                "withdrawMinFee": 1,
                "coinType": "ERC20",
                "withdrawMinAmount": 10,
                "name": "Kucoin Shares",
                "tradePrecision": 4,
                "coin": "KCS",
                "enableWithdraw": True,
                "enableDeposit": True,
                "withdrawFeeRate": 0.001,
            },
            {
                "withdrawMinFee": 0.0005,
                "coinType": None,
                "withdrawMinAmount": 0.002,
                "name": "Bitcoin",
                "tradePrecision": 8,
                "coin": "BTC",
                "enableWithdraw": False,
                "enableDeposit": True,
                "withdrawFeeRate": 0.001,
            },
        ]
    )


@pytest.fixture
def kucoin_active_map() -> dict[str, Any]:
    """GET /v1/order/active-map?symbol=KCS-BTC"""
    return kucoin_envelope(
        {
            "SELL": [
                {
                    "oid": "59e59b279bd8d31d093d956e",
                    "type": "SELL",
                    "coinType": "KCS",
                    "coinTypePair": "BTC",
                    "direction": "SELL",
                    "price": 0.1,
                    "dealAmount": 40,
                    "pendingAmount": 60,
                    "createdAt": 1508219688000,
                    "updatedAt": 1508219688000,
                }
            ],
            "BUY": [
                {
                    "oid": "59e59b279bd8d31d093d9570",
                    "type": "BUY",
                    "coinType": "KCS",
                    "coinTypePair": "BTC",
                    "direction": "BUY",
                    "price": 0.00005,
                    "dealAmount": 0,
                    "pendingAmount": 20,
                    "createdAt": 1508219690000,
                    "updatedAt": 1508219690000,
                }
            ],
        }
    )


@pytest.fixture
def kucoin_dealt() -> dict[str, Any]:
    """GET /v1/order/dealt"""
    return kucoin_envelope(
        {
            "total": 1,
            "firstPage": True,
            "lastPage": True,
            "currPageNo": 1,
            "limit": 12,
            "pageNos": 1,
            "datas": [
                {
                    "coinType": "KCS",
                    "createdAt": 1508219688000,
                    "amount": 2,
                    "dealValue": 0.0002,
                    "fee": 0.002,
                    "dealDirection": "BUY",
                    "coinTypePair": "BTC",
                    "oid": "59e59b279bd8d31d093d956f",
                    "dealPrice": 0.0001,
                    "orderOid": "59e59b279bd8d31d093d956a",
                    "feeRate": 0.001,
                    "direction": "BUY",
                }
            ],
        }
    )


@pytest.fixture
def kucoin_balance() -> dict[str, Any]:
    """GET /v1/account/balance"""
    return kucoin_envelope(
        [
            {"coinType": "KCS", "balance": 100.5, "freezeBalance": 60, "balanceStr": "100.5", "freezeBalanceStr": "60.0"},
            {"coinType": "BTC", "balance": 0.01, "freezeBalance": 0.001, "balanceStr": "0.01", "freezeBalanceStr": "0.001"},
        ]
    )


@pytest.fixture
def kucoin_envelope_factory() -> Callable[..., dict[str, Any]]:
    return kucoin_envelope
