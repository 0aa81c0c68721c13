"""
유틸리티 패키지

타임스탬프 변환, Decimal/precision 처리, nonce 발급 등 공통 유틸리티
"""

from core.utils.timestamps import (
    now_utc,
    milliseconds,
    seconds,
    iso8601,
    parse8601,
    ymdhms,
    utc_from_timestamp_ms,
    to_timestamp_ms,
)
from core.utils.number import (
    to_decimal,
    decimal_arg,
    precision_from_string,
    truncate,
    round_half_up,
)
from core.utils.nonce import NonceGenerator, nonce_generator_for, reset_nonce_generators

__all__ = [
    "now_utc",
    "milliseconds",
    "seconds",
    "iso8601",
    "parse8601",
    "ymdhms",
    "utc_from_timestamp_ms",
    "to_timestamp_ms",
    "to_decimal",
    "decimal_arg",
    "precision_from_string",
    "truncate",
    "round_half_up",
    "NonceGenerator",
    "nonce_generator_for",
    "reset_nonce_generators",
]
