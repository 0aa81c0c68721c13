"""
Binance 어댑터

Binance 현물 REST API 연동을 담당.
"""

from adapters.binance.exchange import BinanceExchange
from adapters.binance.signer import BinanceSigner
from adapters.binance.parsers import (
    parse_market,
    parse_ticker,
    parse_order,
    parse_trade,
    parse_balances,
)

__all__ = [
    "BinanceExchange",
    "BinanceSigner",
    "parse_market",
    "parse_ticker",
    "parse_order",
    "parse_trade",
    "parse_balances",
]
