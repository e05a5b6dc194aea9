"""Error hierarchy for curve and configuration synthesis.

Every error is raised synchronously where the problem is detected. Nothing is
retried and no partial configuration is ever returned.
"""

from __future__ import annotations

__all__ = [
    "BondingCurveError",
    "InvalidParameter",
    "InfeasibleCurve",
    "InsufficientLiquidity",
    "ArithmeticOverflow",
    "InconsistentConfiguration",
]


class BondingCurveError(Exception):
    """Base class for all bonding curve errors."""

    pass


class InvalidParameter(BondingCurveError, ValueError):
    """An input is out of range, missing, or of the wrong shape."""

    pass


class InfeasibleCurve(BondingCurveError):
    """No non-negative liquidity solution exists for the requested curve shape."""

    pass


class InsufficientLiquidity(BondingCurveError):
    """The curve segments cannot absorb the required quote amount."""

    pass


class ArithmeticOverflow(BondingCurveError, ArithmeticError):
    """A derived quantity does not fit its on-chain integer domain."""

    pass


class InconsistentConfiguration(BondingCurveError):
    """Assembled totals violate a cross-field invariant."""

    pass
