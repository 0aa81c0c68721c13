"""
Gdax 어댑터

Gdax(Coinbase Pro 전신) REST API 연동을 담당.
"""

from adapters.gdax.exchange import GdaxExchange
from adapters.gdax.signer import GdaxSigner
from adapters.gdax.parsers import (
    parse_market,
    parse_currency,
    parse_ticker,
    parse_order,
    parse_trade,
    parse_balances,
)

__all__ = [
    "GdaxExchange",
    "GdaxSigner",
    "parse_market",
    "parse_currency",
    "parse_ticker",
    "parse_order",
    "parse_trade",
    "parse_balances",
]
