"""Shared high-precision Decimal utilities.

Human-facing quantities (prices, market caps, token counts) are handled as
Decimal. Squared Q64.64 prices reach ~10^58, so every Decimal computation
runs in a 78-digit context to keep the integer part exact.
"""

from __future__ import annotations

import decimal
from decimal import ROUND_FLOOR, Decimal

# 78 digits of precision, enough for 256-bit intermediates (~10^77)
DECIMAL_HIGH_PREC_CONTEXT = decimal.Context(prec=78)

Numeric = int | float | str | Decimal


def to_decimal(value: Numeric) -> Decimal:
    """Convert a human-facing number to Decimal.

    Floats go through their shortest repr so that 0.001 stays 0.001
    instead of its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def floor_to_int(value: Decimal) -> int:
    """Floor a Decimal to an int."""
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return int(value.to_integral_value(rounding=ROUND_FLOOR))


def convert_to_lamports(amount: Numeric, decimals: int) -> int:
    """Convert a token amount to base units, flooring any sub-unit dust.

    Args:
        amount: Amount in whole tokens (may be fractional)
        decimals: Mint decimals

    Returns:
        Amount in the smallest unit of the mint
    """
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return floor_to_int(to_decimal(amount) * (Decimal(10) ** decimals))


def decimal_sqrt(value: Decimal) -> Decimal:
    """Square root with high precision."""
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return value.sqrt()


def decimal_pow(base: Decimal, exponent: Decimal) -> Decimal:
    """base ** exponent with high precision (exponent may be fractional)."""
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return base**exponent


__all__ = [
    "DECIMAL_HIGH_PREC_CONTEXT",
    "Numeric",
    "to_decimal",
    "floor_to_int",
    "convert_to_lamports",
    "decimal_sqrt",
    "decimal_pow",
]
