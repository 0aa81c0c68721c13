"""
Kucoin 어댑터

Kucoin v1 REST API 연동을 담당.
"""

from adapters.kucoin.exchange import KucoinExchange
from adapters.kucoin.signer import KucoinSigner

__all__ = [
    "KucoinExchange",
    "KucoinSigner",
]
