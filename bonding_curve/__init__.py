"""Bonding curve configuration synthesis for dynamic bonding curve launches."""

from bonding_curve.builder import (
    build_curve,
    build_curve_with_custom_sqrt_prices,
    build_curve_with_liquidity_weights,
    build_curve_with_market_cap,
    build_curve_with_mid_price,
    build_curve_with_three_segments,
    build_curve_with_two_segments,
)
from bonding_curve.config import DEFAULT_PROTOCOL_CONFIG, ProtocolConfig
from bonding_curve.errors import (
    ArithmeticOverflow,
    BondingCurveError,
    InconsistentConfiguration,
    InfeasibleCurve,
    InsufficientLiquidity,
    InvalidParameter,
)
from bonding_curve.models.params import ConfigParameters, CurvePoint
from bonding_curve.validation import validate_config_parameters

__version__ = "0.1.0"
__all__ = [
    # Builders
    "build_curve",
    "build_curve_with_market_cap",
    "build_curve_with_two_segments",
    "build_curve_with_mid_price",
    "build_curve_with_liquidity_weights",
    "build_curve_with_custom_sqrt_prices",
    "build_curve_with_three_segments",
    "validate_config_parameters",
    # Records
    "ConfigParameters",
    "CurvePoint",
    # Configuration
    "ProtocolConfig",
    "DEFAULT_PROTOCOL_CONFIG",
    # Errors
    "BondingCurveError",
    "InvalidParameter",
    "InfeasibleCurve",
    "InsufficientLiquidity",
    "ArithmeticOverflow",
    "InconsistentConfiguration",
    "__version__",
]
