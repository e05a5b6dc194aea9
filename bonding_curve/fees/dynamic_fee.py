"""Volatility-based dynamic fee overlay.

The variable fee grows with the square of recent price movement:

    variable_fee = ceil((volatility_accumulator * bin_step)^2 * variable_fee_control / 1e11)

Derivation picks the accumulator ceiling from a tolerated per-swap price
change, then sizes variable_fee_control so the fee at that ceiling equals
max_price_change_percentage percent of the base fee.
"""

from __future__ import annotations

import decimal
from decimal import Decimal

from bonding_curve.config import DEFAULT_PROTOCOL_CONFIG, ProtocolConfig
from bonding_curve.constants import (
    DYNAMIC_FEE_ROUNDING_OFFSET,
    DYNAMIC_FEE_SCALING_FACTOR,
    ONE_Q64,
)
from bonding_curve.errors import InvalidParameter
from bonding_curve.fees.numerators import bps_to_fee_numerator
from bonding_curve.math.decimal_utils import DECIMAL_HIGH_PREC_CONTEXT, floor_to_int
from bonding_curve.models.params import DynamicFeeParams

__all__ = ["get_dynamic_fee_params", "get_variable_fee"]


def get_dynamic_fee_params(
    base_fee_bps: int,
    max_price_change_percentage: int | None = None,
    config: ProtocolConfig | None = None,
) -> DynamicFeeParams:
    """Derive the dynamic fee overlay for a base fee.

    Args:
        base_fee_bps: Base fee the overlay is sized against (the ending
            scheduler fee or the rate limiter cliff)
        max_price_change_percentage: Tolerated price change per swap;
            defaults to config.max_price_change_percentage
        config: Protocol bounds and dynamic fee defaults

    Raises:
        InvalidParameter: If max_price_change_percentage exceeds the default cap
    """
    config = config or DEFAULT_PROTOCOL_CONFIG
    if max_price_change_percentage is None:
        max_price_change_percentage = config.max_price_change_percentage
    if max_price_change_percentage > config.max_price_change_percentage:
        raise InvalidParameter(
            f"maxPriceChangePercentage ({max_price_change_percentage}%) must be less than "
            f"or equal to {config.max_price_change_percentage}"
        )

    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        price_ratio = Decimal(max_price_change_percentage) / config.max_basis_point + 1
        sqrt_price_ratio_q64 = floor_to_int(price_ratio.sqrt() * ONE_Q64)

    delta_bin_id = (sqrt_price_ratio_q64 - ONE_Q64) // config.bin_step_bps_u128 * 2
    max_volatility_accumulator = delta_bin_id * config.max_basis_point
    square_vfa_bin = (max_volatility_accumulator * config.bin_step_bps) ** 2

    max_dynamic_fee_numerator = (
        bps_to_fee_numerator(base_fee_bps) * max_price_change_percentage // 100
    )
    # Subtract the rounding offset so the ceiling in get_variable_fee lands on the target
    v_fee = max_dynamic_fee_numerator * DYNAMIC_FEE_SCALING_FACTOR - DYNAMIC_FEE_ROUNDING_OFFSET

    return DynamicFeeParams(
        bin_step=config.bin_step_bps,
        bin_step_u128=config.bin_step_bps_u128,
        filter_period=config.dynamic_fee_filter_period,
        decay_period=config.dynamic_fee_decay_period,
        reduction_factor=config.dynamic_fee_reduction_factor,
        max_volatility_accumulator=max_volatility_accumulator,
        variable_fee_control=v_fee // square_vfa_bin,
    )


def get_variable_fee(dynamic_fee: DynamicFeeParams | None, volatility_accumulator: int) -> int:
    """Variable fee numerator at a given volatility accumulator."""
    if dynamic_fee is None:
        return 0

    volatility_times_bin_step = volatility_accumulator * dynamic_fee.bin_step
    v_fee = volatility_times_bin_step**2 * dynamic_fee.variable_fee_control
    return (v_fee + DYNAMIC_FEE_ROUNDING_OFFSET) // DYNAMIC_FEE_SCALING_FACTOR
