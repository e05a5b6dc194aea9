"""Conversions between human prices, market caps and Q64.64 sqrt prices.

    price = (sqrt_price / 2^64)^2 * 10^(base_decimals - quote_decimals)

The inverse floors to the nearest representable sqrt price so repeated
forward/inverse application never exceeds the target price.
"""

from __future__ import annotations

import decimal
from collections.abc import Iterable
from decimal import Decimal

from bonding_curve.errors import InvalidParameter
from bonding_curve.math.decimal_utils import (
    DECIMAL_HIGH_PREC_CONTEXT,
    Numeric,
    floor_to_int,
    to_decimal,
)

__all__ = [
    "price_from_sqrt_price",
    "sqrt_price_from_price",
    "sqrt_price_from_market_cap",
    "create_sqrt_prices",
]

_TWO_POW_64 = Decimal(2**64)
_TWO_POW_128 = Decimal(2**128)


def price_from_sqrt_price(sqrt_price: int, base_decimals: int, quote_decimals: int) -> Decimal:
    """Convert a Q64.64 sqrt price to a human price (quote per base token).

    Args:
        sqrt_price: Q64.64 sqrt price
        base_decimals: Base mint decimals
        quote_decimals: Quote mint decimals

    Returns:
        Price in whole quote tokens per whole base token
    """
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        sqrt_decimal = Decimal(sqrt_price)
        lamport_price = sqrt_decimal * sqrt_decimal / _TWO_POW_128
        return lamport_price * (Decimal(10) ** (base_decimals - quote_decimals))


def sqrt_price_from_price(price: Numeric, base_decimals: int, quote_decimals: int) -> int:
    """Convert a human price to a Q64.64 sqrt price, flooring.

    Raises:
        InvalidParameter: If price is negative
    """
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        decimal_price = to_decimal(price)
        if decimal_price < 0:
            raise InvalidParameter(f"Price must be non-negative, got {decimal_price}")
        adjusted = decimal_price / (Decimal(10) ** (base_decimals - quote_decimals))
        return floor_to_int(adjusted.sqrt() * _TWO_POW_64)


def sqrt_price_from_market_cap(
    market_cap: Numeric,
    total_supply: Numeric,
    base_decimals: int,
    quote_decimals: int,
) -> int:
    """Sqrt price at which total_supply tokens are worth market_cap.

    Raises:
        InvalidParameter: If total_supply is not positive
    """
    supply = to_decimal(total_supply)
    if supply <= 0:
        raise InvalidParameter(f"Total supply must be greater than 0, got {supply}")
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        price = to_decimal(market_cap) / supply
    return sqrt_price_from_price(price, base_decimals, quote_decimals)


def create_sqrt_prices(
    prices: Iterable[Numeric], base_decimals: int, quote_decimals: int
) -> list[int]:
    """Convert a sequence of human prices to sqrt prices."""
    return [sqrt_price_from_price(price, base_decimals, quote_decimals) for price in prices]
