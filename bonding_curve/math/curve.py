"""Reserve integrals over a single constant-liquidity segment.

Within a segment [lower, upper] of constant liquidity L:

    base  = L * (1/lower - 1/upper) = L * (upper - lower) / (lower * upper)
    quote = L * (upper - lower) / 2^128

Sqrt prices are Q64.64, so quote deltas shift by 128 bits. Committed
reserve amounts round up; derived amounts round down.
"""

from __future__ import annotations

from bonding_curve.constants import RESOLUTION, U128_MAX
from bonding_curve.errors import InvalidParameter
from bonding_curve.math.fixed_point import mul_div
from bonding_curve.models.enums import Rounding
from bonding_curve.safe_int import S, DivisionByZero

__all__ = [
    "get_delta_amount_base_unsigned",
    "get_delta_amount_quote_unsigned",
    "get_next_sqrt_price_from_input",
    "get_initial_liquidity_from_delta_quote",
    "get_initial_liquidity_from_delta_base",
    "get_liquidity",
]


# =============================================================================
# Deltas
# =============================================================================


def get_delta_amount_base_unsigned(
    lower_sqrt_price: int, upper_sqrt_price: int, liquidity: int, rounding: Rounding
) -> int:
    """Base token amount spanned by a segment.

    Args:
        lower_sqrt_price: Lower Q64.64 sqrt price
        upper_sqrt_price: Upper Q64.64 sqrt price
        liquidity: Segment liquidity
        rounding: Rounding direction of the division

    Returns:
        Base amount in lamports

    Raises:
        Underflow: If upper < lower
        DivisionByZero: If either bound is zero
    """
    price_delta = S(upper_sqrt_price) - lower_sqrt_price
    denominator = S(lower_sqrt_price) * upper_sqrt_price
    if not denominator:
        raise DivisionByZero("Denominator cannot be zero")
    return mul_div(liquidity, price_delta.value, denominator.value, rounding)


def get_delta_amount_quote_unsigned(
    lower_sqrt_price: int, upper_sqrt_price: int, liquidity: int, rounding: Rounding
) -> int:
    """Quote token amount spanned by a segment.

    Raises:
        Underflow: If upper < lower
    """
    prod = S(liquidity) * (S(upper_sqrt_price) - lower_sqrt_price)
    if rounding is Rounding.UP:
        return prod.ceiling_div(1 << (RESOLUTION * 2)).value
    return (prod >> (RESOLUTION * 2)).value


# =============================================================================
# Price movement
# =============================================================================


def get_next_sqrt_price_from_input(
    sqrt_price: int, liquidity: int, amount_in: int, base_for_quote: bool
) -> int:
    """Sqrt price reached after swapping amount_in into a single segment.

    Base input moves the price down and rounds up; quote input moves it up
    and rounds down. Either way the result never passes the true price.

    Args:
        sqrt_price: Current Q64.64 sqrt price
        liquidity: Segment liquidity
        amount_in: Input amount in lamports
        base_for_quote: True when the input is the base token

    Returns:
        Next Q64.64 sqrt price

    Raises:
        InvalidParameter: If sqrt_price or liquidity is zero
    """
    if sqrt_price == 0:
        raise InvalidParameter("sqrt_price must be greater than 0")
    if liquidity == 0:
        raise InvalidParameter("liquidity must be greater than 0")

    if base_for_quote:
        return _next_sqrt_price_from_base_amount_in_rounding_up(sqrt_price, liquidity, amount_in)
    return _next_sqrt_price_from_quote_amount_in_rounding_down(sqrt_price, liquidity, amount_in)


def _next_sqrt_price_from_base_amount_in_rounding_up(
    sqrt_price: int, liquidity: int, amount: int
) -> int:
    # sqrt' = sqrt * L / (L + amount * sqrt)
    if amount == 0:
        return sqrt_price

    product = S(amount) * sqrt_price
    if product > U128_MAX:
        # Alternate form sqrt' = L / (L / sqrt + amount)
        denominator = S(liquidity) // sqrt_price + amount
        return (S(liquidity) // denominator).value

    denominator = S(liquidity) + product
    return mul_div(liquidity, sqrt_price, denominator.value, Rounding.UP)


def _next_sqrt_price_from_quote_amount_in_rounding_down(
    sqrt_price: int, liquidity: int, amount: int
) -> int:
    # sqrt' = sqrt + amount / L
    quotient = (S(amount) << (RESOLUTION * 2)) // liquidity
    return (quotient + sqrt_price).value


# =============================================================================
# Liquidity from amounts
# =============================================================================


def get_initial_liquidity_from_delta_quote(
    quote_amount: int, sqrt_min_price: int, sqrt_price: int
) -> int:
    """Liquidity that spans quote_amount over [sqrt_min_price, sqrt_price], rounded down."""
    price_delta = S(sqrt_price) - sqrt_min_price
    return ((S(quote_amount) << (RESOLUTION * 2)) // price_delta).value


def get_initial_liquidity_from_delta_base(
    base_amount: int, sqrt_max_price: int, sqrt_price: int
) -> int:
    """Liquidity that spans base_amount over [sqrt_price, sqrt_max_price], rounded down."""
    price_delta = S(sqrt_max_price) - sqrt_price
    prod = S(base_amount) * sqrt_price * sqrt_max_price
    return (prod // price_delta).value


def get_liquidity(
    base_amount: int, quote_amount: int, min_sqrt_price: int, max_sqrt_price: int
) -> int:
    """Conservative single-segment liquidity for a base/quote pair.

    The smaller of the two implied liquidities guarantees that neither
    reserve is oversubscribed at the upper price.
    """
    liquidity_from_base = get_initial_liquidity_from_delta_base(
        base_amount, max_sqrt_price, min_sqrt_price
    )
    liquidity_from_quote = get_initial_liquidity_from_delta_quote(
        quote_amount, min_sqrt_price, max_sqrt_price
    )
    return min(liquidity_from_base, liquidity_from_quote)
