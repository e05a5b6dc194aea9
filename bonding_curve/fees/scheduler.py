"""Time-decay base fee scheduler.

The fee starts at the cliff numerator and steps down once per period:

    linear:      fee(n) = cliff - n * reduction_factor
    exponential: fee(n) = cliff * (1 - reduction_factor / 10_000)^n

Derivation works in Decimal; on-chain evaluation works in integer Q64.64 so
results are bit-exact with the program.
"""

from __future__ import annotations

import decimal
from decimal import Decimal

import structlog

from bonding_curve.config import DEFAULT_PROTOCOL_CONFIG, ProtocolConfig
from bonding_curve.constants import MAX_BASIS_POINT, U16_MAX
from bonding_curve.errors import InvalidParameter
from bonding_curve.fees.numerators import bps_to_fee_numerator
from bonding_curve.math.decimal_utils import DECIMAL_HIGH_PREC_CONTEXT, floor_to_int
from bonding_curve.math.fixed_point import ONE_Q64, RESOLUTION, pow_q64
from bonding_curve.models.enums import BaseFeeMode
from bonding_curve.models.params import FeeSchedulerParams
from bonding_curve.safe_int import S, U64Overflow

logger = structlog.get_logger()

__all__ = [
    "get_fee_scheduler_params",
    "get_reduction_factor",
    "calculate_fee_scheduler_ending_base_fee_bps",
    "get_fee_numerator_on_linear_fee_scheduler",
    "get_fee_numerator_on_exponential_fee_scheduler",
    "get_base_fee_numerator_by_period",
    "get_fee_scheduler_base_fee_numerator",
    "get_fee_scheduler_min_base_fee_numerator",
    "get_fee_scheduler_max_base_fee_numerator",
]

_SCHEDULER_MODES = (BaseFeeMode.FEE_SCHEDULER_LINEAR, BaseFeeMode.FEE_SCHEDULER_EXPONENTIAL)


# =============================================================================
# Derivation
# =============================================================================


def get_reduction_factor(
    max_fee_numerator: int, min_fee_numerator: int, number_of_period: int, linear: bool
) -> int:
    """Per-period reduction that decays max_fee_numerator to min_fee_numerator.

    Linear returns a numerator decrement; exponential returns the per-period
    decay in basis points, floor(10_000 * (1 - (min/max)^(1/n))).
    """
    if linear:
        return (max_fee_numerator - min_fee_numerator) // number_of_period

    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        ratio = Decimal(min_fee_numerator) / Decimal(max_fee_numerator)
        decay_base = ratio ** (Decimal(1) / Decimal(number_of_period))
        return floor_to_int(MAX_BASIS_POINT * (1 - decay_base))


def get_fee_scheduler_params(
    starting_fee_bps: int,
    ending_fee_bps: int,
    mode: BaseFeeMode,
    number_of_period: int,
    total_duration: int,
    config: ProtocolConfig | None = None,
) -> FeeSchedulerParams:
    """Derive scheduler parameters from a starting and ending fee.

    Args:
        starting_fee_bps: Fee at activation, in basis points
        ending_fee_bps: Fee after the last period, in basis points
        mode: FEE_SCHEDULER_LINEAR or FEE_SCHEDULER_EXPONENTIAL
        number_of_period: Number of decay steps
        total_duration: Duration of the whole decay (slots or seconds)
        config: Protocol bounds (defaults to DEFAULT_PROTOCOL_CONFIG)

    Returns:
        FeeSchedulerParams; a fixed fee when start equals end

    Raises:
        InvalidParameter: If any bound or shape constraint is violated
    """
    config = config or DEFAULT_PROTOCOL_CONFIG

    if mode not in _SCHEDULER_MODES:
        raise InvalidParameter(f"Invalid fee scheduler mode: {mode}")

    if starting_fee_bps == ending_fee_bps:
        if number_of_period != 0 or total_duration != 0:
            raise InvalidParameter("numberOfPeriod and totalDuration must both be zero")
        return FeeSchedulerParams(
            cliff_fee_numerator=bps_to_fee_numerator(starting_fee_bps),
            number_of_period=0,
            period_frequency=0,
            reduction_factor=0,
            mode=BaseFeeMode.FEE_SCHEDULER_LINEAR,
        )

    if number_of_period <= 0:
        raise InvalidParameter("Total periods must be greater than zero")
    if starting_fee_bps > config.max_fee_bps:
        raise InvalidParameter(
            f"startingBaseFeeBps ({starting_fee_bps} bps) exceeds maximum allowed value "
            f"of {config.max_fee_bps} bps"
        )
    if ending_fee_bps < config.min_fee_bps:
        raise InvalidParameter(
            f"endingBaseFeeBps ({ending_fee_bps} bps) is less than minimum allowed value "
            f"of {config.min_fee_bps} bps"
        )
    if ending_fee_bps > starting_fee_bps:
        raise InvalidParameter(
            f"endingBaseFeeBps ({ending_fee_bps} bps) must be less than or equal to "
            f"startingBaseFeeBps ({starting_fee_bps} bps)"
        )
    if total_duration <= 0:
        raise InvalidParameter("numberOfPeriod and totalDuration must both be greater than zero")

    max_fee_numerator = bps_to_fee_numerator(starting_fee_bps)
    min_fee_numerator = bps_to_fee_numerator(ending_fee_bps)
    reduction_factor = get_reduction_factor(
        max_fee_numerator,
        min_fee_numerator,
        number_of_period,
        linear=mode == BaseFeeMode.FEE_SCHEDULER_LINEAR,
    )

    logger.debug(
        "fee_scheduler_derived",
        mode=mode.name,
        cliff_fee_numerator=max_fee_numerator,
        reduction_factor=reduction_factor,
    )
    return FeeSchedulerParams(
        cliff_fee_numerator=max_fee_numerator,
        number_of_period=number_of_period,
        period_frequency=total_duration // number_of_period,
        reduction_factor=reduction_factor,
        mode=mode,
    )


def calculate_fee_scheduler_ending_base_fee_bps(
    cliff_fee_numerator: int,
    number_of_period: int,
    period_frequency: int,
    reduction_factor: int,
    mode: BaseFeeMode,
    config: ProtocolConfig | None = None,
) -> Decimal:
    """Ending fee in basis points realized by a set of scheduler parameters.

    The inverse of get_fee_scheduler_params, floored at zero.
    """
    config = config or DEFAULT_PROTOCOL_CONFIG
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        to_bps = Decimal(config.max_basis_point) / Decimal(config.fee_denominator)
        if number_of_period == 0 or period_frequency == 0:
            return Decimal(cliff_fee_numerator) * to_bps

        if mode == BaseFeeMode.FEE_SCHEDULER_LINEAR:
            fee_numerator = Decimal(cliff_fee_numerator - number_of_period * reduction_factor)
        else:
            decay_rate = 1 - Decimal(reduction_factor) / MAX_BASIS_POINT
            fee_numerator = Decimal(cliff_fee_numerator) * decay_rate**number_of_period

        return max(Decimal(0), fee_numerator * to_bps)


# =============================================================================
# On-chain evaluation
# =============================================================================


def get_fee_numerator_on_linear_fee_scheduler(
    cliff_fee_numerator: int, reduction_factor: int, period: int
) -> int:
    reduction = period * reduction_factor
    if reduction > cliff_fee_numerator:
        return 0
    return cliff_fee_numerator - reduction


def get_fee_numerator_on_exponential_fee_scheduler(
    cliff_fee_numerator: int, reduction_factor: int, period: int
) -> int:
    """cliff * (1 - reduction_factor / 10_000)^period in Q64.64."""
    if period == 0:
        return cliff_fee_numerator

    bps = (S(reduction_factor) << RESOLUTION) // MAX_BASIS_POINT
    base = S(ONE_Q64) - bps
    result = pow_q64(base.value, period)
    return ((S(cliff_fee_numerator) * result) // ONE_Q64).value


def get_base_fee_numerator_by_period(
    cliff_fee_numerator: int,
    number_of_period: int,
    period: int,
    reduction_factor: int,
    mode: BaseFeeMode,
) -> int:
    """Fee numerator after `period` periods, clamped to the last period.

    Raises:
        U64Overflow: If the clamped period exceeds u16
        InvalidParameter: If mode is not a scheduler mode
    """
    period = min(period, number_of_period)
    if period > U16_MAX:
        raise U64Overflow(f"Fee scheduler period {period} exceeds u16")

    if mode == BaseFeeMode.FEE_SCHEDULER_LINEAR:
        return get_fee_numerator_on_linear_fee_scheduler(
            cliff_fee_numerator, reduction_factor, period
        )
    if mode == BaseFeeMode.FEE_SCHEDULER_EXPONENTIAL:
        return get_fee_numerator_on_exponential_fee_scheduler(
            cliff_fee_numerator, reduction_factor, period
        )
    raise InvalidParameter(f"Invalid fee scheduler mode: {mode}")


def get_fee_scheduler_base_fee_numerator(
    params: FeeSchedulerParams, current_point: int, activation_point: int
) -> int:
    """Fee numerator in effect at current_point."""
    if params.period_frequency == 0:
        return params.cliff_fee_numerator

    period = (current_point - activation_point) // params.period_frequency
    return get_base_fee_numerator_by_period(
        params.cliff_fee_numerator,
        params.number_of_period,
        period,
        params.reduction_factor,
        params.mode,
    )


def get_fee_scheduler_min_base_fee_numerator(params: FeeSchedulerParams) -> int:
    """Fee numerator after the last period."""
    return get_base_fee_numerator_by_period(
        params.cliff_fee_numerator,
        params.number_of_period,
        params.number_of_period,
        params.reduction_factor,
        params.mode,
    )


def get_fee_scheduler_max_base_fee_numerator(params: FeeSchedulerParams) -> int:
    return params.cliff_fee_numerator
