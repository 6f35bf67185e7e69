"""Price rendering.

Three formats exist on purpose, each bound to the endpoints that use it:

- ``format_compact_price``: product serialization, two decimals with
  trailing zeros stripped (``12.99`` -> ``"12.99"``, ``1.50`` -> ``"1.5"``).
- ``format_menu_price``: option prices inside the nested menu, one decimal
  with a trailing ``.0`` dropped (``1.50`` -> ``"1.5"``, ``2.00`` -> ``"2"``).
- ``format_price_2dp``: modifier detail and option endpoints, always two
  decimals (``1.5`` -> ``"1.50"``).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[Decimal, float, int, str, None]

CENTS = Decimal("0.01")
TENTHS = Decimal("0.1")


def to_decimal(value: Number) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    # float passa por str para não carregar o erro binário (1.1 -> 1.100000000000000088...)
    return Decimal(str(value))


def quantize_price(value: Number) -> Decimal:
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_price_2dp(value: Number) -> str:
    return f"{quantize_price(value):.2f}"


def format_compact_price(value: Number) -> str:
    formatted = format_price_2dp(value)
    if formatted.endswith(".00"):
        return formatted[:-3]
    if formatted.endswith("0"):
        return formatted[:-1]
    return formatted


def format_menu_price(value: Number) -> str:
    formatted = f"{to_decimal(value).quantize(TENTHS, rounding=ROUND_HALF_UP):.1f}"
    if formatted.endswith(".0"):
        return formatted[:-2]
    return formatted
