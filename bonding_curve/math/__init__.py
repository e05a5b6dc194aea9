"""Fixed-point math for the bonding curve.

This package provides the integer and Decimal primitives every solver uses:
- Q64.64 helpers (mul_div, pow_q64) matching the on-chain program
- Conversions between human prices, market caps and sqrt prices
- Reserve integrals over a constant-liquidity segment
"""

from bonding_curve.math.curve import (
    get_delta_amount_base_unsigned,
    get_delta_amount_quote_unsigned,
    get_initial_liquidity_from_delta_base,
    get_initial_liquidity_from_delta_quote,
    get_liquidity,
    get_next_sqrt_price_from_input,
)
from bonding_curve.math.fixed_point import ONE_Q64, mul_div, pow_q64, sqrt_int
from bonding_curve.math.price import (
    create_sqrt_prices,
    price_from_sqrt_price,
    sqrt_price_from_market_cap,
    sqrt_price_from_price,
)

__all__ = [
    # Fixed point
    "ONE_Q64",
    "mul_div",
    "pow_q64",
    "sqrt_int",
    # Prices
    "price_from_sqrt_price",
    "sqrt_price_from_price",
    "sqrt_price_from_market_cap",
    "create_sqrt_prices",
    # Segment integrals
    "get_delta_amount_base_unsigned",
    "get_delta_amount_quote_unsigned",
    "get_next_sqrt_price_from_input",
    "get_initial_liquidity_from_delta_quote",
    "get_initial_liquidity_from_delta_base",
    "get_liquidity",
]
