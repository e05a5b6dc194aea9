"""Integer fixed-point primitives matching the on-chain program.

Prices are Q64.64 integers (value * 2^64). All helpers operate on plain
Python ints so results are bit-exact with the program's u128/u256 math.
"""

from __future__ import annotations

from math import isqrt

from bonding_curve.constants import ONE_Q64, RESOLUTION, U128_MAX
from bonding_curve.models.enums import Rounding
from bonding_curve.safe_int import DivisionByZero, U128Overflow

__all__ = [
    "ONE_Q64",
    "RESOLUTION",
    "mul_div",
    "mul_shr",
    "sqrt_int",
    "pow_q64",
]


def mul_div(x: int, y: int, denominator: int, rounding: Rounding) -> int:
    """Compute x * y / denominator with explicit rounding.

    Args:
        x: First factor
        y: Second factor
        denominator: Divisor
        rounding: UP for ceiling division, DOWN for floor

    Returns:
        The rounded quotient

    Raises:
        DivisionByZero: If denominator is zero
    """
    if denominator == 0:
        raise DivisionByZero(f"mul_div: division by zero ({x} * {y} / 0)")

    prod = x * y
    if denominator == 1 or prod == 0:
        return prod

    if rounding is Rounding.UP:
        return (prod + denominator - 1) // denominator
    return prod // denominator


def mul_shr(x: int, y: int, offset: int) -> int:
    """Compute (x * y) >> offset."""
    return (x * y) >> offset


def sqrt_int(value: int) -> int:
    """Integer square root (floor)."""
    if value < 0:
        raise ValueError(f"sqrt of negative value: {value}")
    return isqrt(value)


def pow_q64(base: int, exponent: int) -> int:
    """Raise a Q64.64 number to a non-negative integer power.

    Exponentiation by squaring with each intermediate truncated back to
    Q64.64. Bases above one are inverted first so intermediates shrink
    instead of overflowing, then the result is inverted back.

    Args:
        base: Q64.64 base
        exponent: Integer exponent (the program caps it at u16)

    Returns:
        base ** exponent in Q64.64

    Raises:
        U128Overflow: If the result does not fit u128
    """
    if exponent == 0:
        return ONE_Q64
    if base == 0:
        return 0

    invert = base > ONE_Q64
    squared_base = U128_MAX // base if invert else base
    result = ONE_Q64

    while exponent > 0:
        if exponent & 1:
            result = (result * squared_base) >> RESOLUTION
        squared_base = (squared_base * squared_base) >> RESOLUTION
        exponent >>= 1

    if result == 0:
        return 0
    if invert:
        result = U128_MAX // result
    if result > U128_MAX:
        raise U128Overflow(f"pow_q64 result exceeds u128: {result}")
    return result
