"""Trade-size dependent base fee (rate limiter).

Within the limiter window, a quote-to-base trade pays the cliff fee on its
first reference_amount, cliff + i on the next, cliff + 2i on the one after,
and so on until the rate reaches MAX_FEE_NUMERATOR:

    amount = x0 + a * x0 + b         (x0 = reference_amount, b < x0)
    fee    = x0 * (c + c*a + i*a*(a+1)/2) + b * (c + i*(a+1))

where c is the cliff numerator and i the increment numerator. Past
max_index steps the marginal rate is capped at MAX_FEE_NUMERATOR.
"""

from __future__ import annotations

import structlog

from bonding_curve.config import DEFAULT_PROTOCOL_CONFIG, ProtocolConfig
from bonding_curve.constants import U64_MAX
from bonding_curve.errors import InvalidParameter
from bonding_curve.fees.numerators import bps_to_fee_numerator
from bonding_curve.math.decimal_utils import Numeric, convert_to_lamports
from bonding_curve.math.fixed_point import mul_div, sqrt_int
from bonding_curve.models.enums import ActivationType, Rounding, TradeDirection
from bonding_curve.models.params import RateLimiterParams

logger = structlog.get_logger()

__all__ = [
    "get_rate_limiter_params",
    "get_max_index",
    "get_fee_numerator_from_included_amount",
    "get_rate_limiter_excluded_fee_amount",
    "get_fee_numerator_from_excluded_amount",
    "get_checked_amounts",
    "is_rate_limiter_applied",
    "get_rate_limiter_min_base_fee_numerator",
]


def _max_duration(activation_type: ActivationType, config: ProtocolConfig) -> int:
    if activation_type == ActivationType.SLOT:
        return config.max_rate_limiter_duration_in_slots
    return config.max_rate_limiter_duration_in_seconds


# =============================================================================
# Derivation
# =============================================================================


def get_rate_limiter_params(
    base_fee_bps: int,
    fee_increment_bps: int,
    reference_amount: Numeric,
    max_limiter_duration: int,
    quote_decimals: int,
    activation_type: ActivationType,
    config: ProtocolConfig | None = None,
) -> RateLimiterParams:
    """Derive rate limiter parameters.

    Args:
        base_fee_bps: Cliff fee in basis points
        fee_increment_bps: Fee increase per reference_amount step
        reference_amount: Step size in whole quote tokens
        max_limiter_duration: Window length (slots or seconds)
        quote_decimals: Quote mint decimals
        activation_type: Unit of max_limiter_duration
        config: Protocol bounds (defaults to DEFAULT_PROTOCOL_CONFIG)

    Raises:
        InvalidParameter: If any input is out of range
    """
    config = config or DEFAULT_PROTOCOL_CONFIG

    if base_fee_bps <= 0 or fee_increment_bps <= 0 or max_limiter_duration <= 0:
        raise InvalidParameter("All rate limiter parameters must be greater than zero")
    reference_amount_lamports = convert_to_lamports(reference_amount, quote_decimals)
    if reference_amount_lamports <= 0:
        raise InvalidParameter("All rate limiter parameters must be greater than zero")

    if base_fee_bps > config.max_fee_bps:
        raise InvalidParameter(
            f"Base fee ({base_fee_bps} bps) exceeds maximum allowed value of "
            f"{config.max_fee_bps} bps"
        )
    if base_fee_bps < config.min_fee_bps:
        raise InvalidParameter(
            f"Base fee ({base_fee_bps} bps) is less than minimum allowed value of "
            f"{config.min_fee_bps} bps"
        )
    if fee_increment_bps > config.max_fee_bps:
        raise InvalidParameter(
            f"Fee increment ({fee_increment_bps} bps) exceeds maximum allowed value of "
            f"{config.max_fee_bps} bps"
        )

    cliff_fee_numerator = bps_to_fee_numerator(base_fee_bps)
    fee_increment_numerator = bps_to_fee_numerator(fee_increment_bps)
    if fee_increment_numerator >= config.fee_denominator:
        raise InvalidParameter("Fee increment numerator must be less than FEE_DENOMINATOR")

    max_index = (config.max_fee_numerator - cliff_fee_numerator) // fee_increment_numerator
    if max_index < 1:
        raise InvalidParameter(
            f"Fee increment ({fee_increment_bps} bps) is too large for base fee "
            f"({base_fee_bps} bps)"
        )

    max_duration = _max_duration(activation_type, config)
    if max_limiter_duration > max_duration:
        raise InvalidParameter(
            f"Max duration ({max_limiter_duration}) exceeds maximum allowed value of {max_duration}"
        )

    logger.debug(
        "rate_limiter_derived",
        cliff_fee_numerator=cliff_fee_numerator,
        max_index=max_index,
        reference_amount=reference_amount_lamports,
    )
    return RateLimiterParams(
        cliff_fee_numerator=cliff_fee_numerator,
        fee_increment_bps=fee_increment_bps,
        max_limiter_duration=max_limiter_duration,
        reference_amount=reference_amount_lamports,
    )


# =============================================================================
# On-chain evaluation
# =============================================================================


def get_max_index(
    cliff_fee_numerator: int, fee_increment_bps: int, config: ProtocolConfig | None = None
) -> int:
    """Number of increments before the marginal rate hits the maximum fee.

    Raises:
        InvalidParameter: If the cliff exceeds the maximum fee or the
            increment is zero
    """
    config = config or DEFAULT_PROTOCOL_CONFIG
    if cliff_fee_numerator > config.max_fee_numerator:
        raise InvalidParameter("Cliff fee numerator exceeds maximum fee numerator")
    fee_increment_numerator = bps_to_fee_numerator(fee_increment_bps)
    if fee_increment_numerator == 0:
        raise InvalidParameter("Fee increment numerator cannot be zero")
    return (config.max_fee_numerator - cliff_fee_numerator) // fee_increment_numerator


def get_fee_numerator_from_included_amount(
    cliff_fee_numerator: int,
    reference_amount: int,
    fee_increment_bps: int,
    included_fee_amount: int,
    config: ProtocolConfig | None = None,
) -> int:
    """Average fee numerator charged on a fee-inclusive input amount."""
    config = config or DEFAULT_PROTOCOL_CONFIG
    if included_fee_amount <= reference_amount:
        return cliff_fee_numerator

    c = cliff_fee_numerator
    x0 = reference_amount
    a, b = divmod(included_fee_amount - reference_amount, reference_amount)
    max_index = get_max_index(cliff_fee_numerator, fee_increment_bps, config)
    i = bps_to_fee_numerator(fee_increment_bps)

    if a < max_index:
        numerator1 = c + c * a + i * a * (a + 1) // 2
        numerator2 = c + i * (a + 1)
        trading_fee_numerator = x0 * numerator1 + b * numerator2
    else:
        numerator1 = c + c * max_index + i * max_index * (max_index + 1) // 2
        left_amount = (a - max_index) * x0 + b
        trading_fee_numerator = x0 * numerator1 + left_amount * config.max_fee_numerator

    denominator = config.fee_denominator
    trading_fee = (trading_fee_numerator + denominator - 1) // denominator

    # amount * numerator / FEE_DENOMINATOR = trading_fee
    return mul_div(trading_fee, denominator, included_fee_amount, Rounding.UP)


def get_rate_limiter_excluded_fee_amount(
    cliff_fee_numerator: int,
    reference_amount: int,
    fee_increment_bps: int,
    included_fee_amount: int,
    config: ProtocolConfig | None = None,
) -> int:
    """Amount left after the rate limiter fee is taken from included_fee_amount."""
    config = config or DEFAULT_PROTOCOL_CONFIG
    fee_numerator = get_fee_numerator_from_included_amount(
        cliff_fee_numerator, reference_amount, fee_increment_bps, included_fee_amount, config
    )
    trading_fee = mul_div(
        included_fee_amount, fee_numerator, config.fee_denominator, Rounding.UP
    )
    return included_fee_amount - trading_fee


def get_fee_numerator_from_excluded_amount(
    cliff_fee_numerator: int,
    reference_amount: int,
    fee_increment_bps: int,
    excluded_fee_amount: int,
    config: ProtocolConfig | None = None,
) -> int:
    """Average fee numerator for a trade that must net excluded_fee_amount.

    Inside the quadratic region the included amount solves

        i*x^2 - (2*d*x0 + i*x0 - 2*c*x0)*x + 2*ex*d*x0 = 0

    with d the fee denominator; the smaller root is taken.
    """
    config = config or DEFAULT_PROTOCOL_CONFIG
    denominator = config.fee_denominator

    excluded_reference_amount = get_rate_limiter_excluded_fee_amount(
        cliff_fee_numerator, reference_amount, fee_increment_bps, reference_amount, config
    )
    if excluded_fee_amount <= excluded_reference_amount:
        return cliff_fee_numerator

    x0 = reference_amount
    max_index = get_max_index(cliff_fee_numerator, fee_increment_bps, config)
    max_index_input_amount = (max_index + 1) * x0
    max_index_excluded_amount = get_rate_limiter_excluded_fee_amount(
        cliff_fee_numerator, reference_amount, fee_increment_bps, max_index_input_amount, config
    )

    if excluded_fee_amount < max_index_excluded_amount:
        i = bps_to_fee_numerator(fee_increment_bps)
        c = cliff_fee_numerator
        x = i
        y = 2 * denominator * x0 + i * x0 - 2 * c * x0
        z = 2 * excluded_fee_amount * denominator * x0

        discriminant = y * y - 4 * x * z
        included_fee_amount = (y - sqrt_int(discriminant)) // (2 * x)

        # The remainder falls in the next step
        a_plus_one = included_fee_amount // x0
        first_excluded_amount = get_rate_limiter_excluded_fee_amount(
            cliff_fee_numerator, reference_amount, fee_increment_bps, included_fee_amount, config
        )
        excluded_remaining_amount = excluded_fee_amount - first_excluded_amount
        if excluded_remaining_amount > 0:
            remaining_fee_numerator = c + i * a_plus_one
            included_fee_amount += mul_div(
                excluded_remaining_amount,
                denominator,
                denominator - remaining_fee_numerator,
                Rounding.UP,
            )
    else:
        excluded_remaining_amount = excluded_fee_amount - max_index_excluded_amount
        included_fee_amount = max_index_input_amount + mul_div(
            excluded_remaining_amount,
            denominator,
            denominator - config.max_fee_numerator,
            Rounding.UP,
        )

    trading_fee = included_fee_amount - excluded_fee_amount
    fee_numerator = mul_div(trading_fee, denominator, included_fee_amount, Rounding.UP)
    return max(fee_numerator, cliff_fee_numerator)


def get_checked_amounts(
    cliff_fee_numerator: int,
    reference_amount: int,
    fee_increment_bps: int,
    config: ProtocolConfig | None = None,
) -> tuple[int, int, bool]:
    """Largest amounts the limiter math handles without leaving u64.

    Returns:
        (checked_excluded_fee_amount, checked_included_fee_amount, is_overflow)
    """
    max_index = get_max_index(cliff_fee_numerator, fee_increment_bps, config)
    max_index_input_amount = (max_index + 1) * reference_amount

    if max_index_input_amount <= U64_MAX:
        excluded = get_rate_limiter_excluded_fee_amount(
            cliff_fee_numerator, reference_amount, fee_increment_bps, max_index_input_amount, config
        )
        return excluded, max_index_input_amount, False

    excluded = get_rate_limiter_excluded_fee_amount(
        cliff_fee_numerator, reference_amount, fee_increment_bps, U64_MAX, config
    )
    return excluded, U64_MAX, True


def is_rate_limiter_applied(
    params: RateLimiterParams,
    current_point: int,
    activation_point: int,
    trade_direction: TradeDirection,
) -> bool:
    """Whether the limiter prices a trade at current_point.

    Only quote-to-base trades inside the window are limited.
    """
    if params.is_zero:
        return False
    if trade_direction == TradeDirection.BASE_TO_QUOTE:
        return False
    return current_point <= activation_point + params.max_limiter_duration


def get_rate_limiter_min_base_fee_numerator(cliff_fee_numerator: int) -> int:
    return cliff_fee_numerator
