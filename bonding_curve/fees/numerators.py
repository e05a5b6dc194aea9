"""Basis point and fee numerator conversions."""

from __future__ import annotations

from bonding_curve.constants import FEE_DENOMINATOR, MAX_BASIS_POINT

__all__ = ["bps_to_fee_numerator", "fee_numerator_to_bps"]


def bps_to_fee_numerator(bps: int) -> int:
    """Convert basis points to a numerator over FEE_DENOMINATOR."""
    return bps * FEE_DENOMINATOR // MAX_BASIS_POINT


def fee_numerator_to_bps(fee_numerator: int) -> int:
    """Convert a numerator over FEE_DENOMINATOR to basis points, rounding down."""
    return fee_numerator * MAX_BASIS_POINT // FEE_DENOMINATOR
