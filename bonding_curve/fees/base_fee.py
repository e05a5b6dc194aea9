"""Base fee derivation and per-variant handlers.

A base fee is either a time-decay scheduler or a rate limiter
(see models.params.BaseFee). Derivation dispatches on the request's mode;
everything downstream dispatches on the variant type through
get_base_fee_handler, so adding a variant means adding a handler.
"""

from __future__ import annotations

from typing import Protocol

from bonding_curve.config import DEFAULT_PROTOCOL_CONFIG, ProtocolConfig
from bonding_curve.constants import RATE_LIMITER_MAX_CHECK_AMOUNT
from bonding_curve.errors import InvalidParameter
from bonding_curve.fees.numerators import bps_to_fee_numerator, fee_numerator_to_bps
from bonding_curve.fees.rate_limiter import (
    get_fee_numerator_from_excluded_amount,
    get_fee_numerator_from_included_amount,
    get_rate_limiter_params,
    is_rate_limiter_applied,
)
from bonding_curve.fees.scheduler import (
    get_fee_scheduler_base_fee_numerator,
    get_fee_scheduler_max_base_fee_numerator,
    get_fee_scheduler_min_base_fee_numerator,
    get_fee_scheduler_params,
)
from bonding_curve.models.enums import (
    ActivationType,
    BaseFeeMode,
    CollectFeeMode,
    TradeDirection,
)
from bonding_curve.models.params import BaseFee, FeeSchedulerParams, RateLimiterParams
from bonding_curve.models.requests import BaseFeeRequest

__all__ = [
    "bps_to_fee_numerator",
    "fee_numerator_to_bps",
    "get_base_fee_params",
    "get_starting_base_fee_bps",
    "BaseFeeHandler",
    "FeeSchedulerHandler",
    "RateLimiterHandler",
    "get_base_fee_handler",
]


# =============================================================================
# Derivation
# =============================================================================


def get_base_fee_params(
    request: BaseFeeRequest,
    quote_decimals: int,
    activation_type: ActivationType,
    config: ProtocolConfig | None = None,
) -> BaseFee:
    """Derive the base fee variant a request asks for.

    Raises:
        InvalidParameter: If the parameters of the requested mode are missing
            or out of range
    """
    if request.base_fee_mode == BaseFeeMode.RATE_LIMITER:
        param = request.rate_limiter_param
        if param is None:
            raise InvalidParameter("Rate limiter parameters are required for RateLimiter mode")
        return get_rate_limiter_params(
            param.base_fee_bps,
            param.fee_increment_bps,
            param.reference_amount,
            param.max_limiter_duration,
            quote_decimals,
            activation_type,
            config,
        )

    scheduler = request.fee_scheduler_param
    if scheduler is None:
        raise InvalidParameter("Fee scheduler parameters are required for FeeScheduler mode")
    return get_fee_scheduler_params(
        scheduler.starting_fee_bps,
        scheduler.ending_fee_bps,
        request.base_fee_mode,
        scheduler.number_of_period,
        scheduler.total_duration,
        config,
    )


def get_starting_base_fee_bps(request: BaseFeeRequest) -> int:
    """Fee the bonding curve ends at: the scheduler's ending fee or the limiter's cliff.

    This is also what dynamic fees are sized against and where the migrated
    pool's market-cap scheduler starts.
    """
    if request.base_fee_mode == BaseFeeMode.RATE_LIMITER:
        if request.rate_limiter_param is None:
            raise InvalidParameter("Rate limiter parameters are required for RateLimiter mode")
        return request.rate_limiter_param.base_fee_bps

    if request.fee_scheduler_param is None:
        raise InvalidParameter("Fee scheduler parameters are required for FeeScheduler mode")
    return request.fee_scheduler_param.ending_fee_bps


# =============================================================================
# Handlers
# =============================================================================


class BaseFeeHandler(Protocol):
    """Protocol for evaluating and checking one base fee variant."""

    def check(
        self,
        collect_fee_mode: CollectFeeMode,
        activation_type: ActivationType,
        config: ProtocolConfig | None = None,
    ) -> str | None:
        """Return why the parameters are invalid, or None when they are valid."""
        ...

    def validate(
        self,
        collect_fee_mode: CollectFeeMode,
        activation_type: ActivationType,
        config: ProtocolConfig | None = None,
    ) -> bool:
        ...

    def get_base_fee_numerator_from_included_fee_amount(
        self,
        current_point: int,
        activation_point: int,
        trade_direction: TradeDirection,
        included_fee_amount: int,
    ) -> int:
        """Fee numerator charged on a fee-inclusive input amount."""
        ...

    def get_base_fee_numerator_from_excluded_fee_amount(
        self,
        current_point: int,
        activation_point: int,
        trade_direction: TradeDirection,
        excluded_fee_amount: int,
    ) -> int:
        """Fee numerator charged for a trade that must net excluded_fee_amount."""
        ...


class FeeSchedulerHandler:
    """Handler for the time-decay scheduler."""

    def __init__(self, params: FeeSchedulerParams) -> None:
        self.params = params

    def check(
        self,
        collect_fee_mode: CollectFeeMode,
        activation_type: ActivationType,
        config: ProtocolConfig | None = None,
    ) -> str | None:
        config = config or DEFAULT_PROTOCOL_CONFIG
        params = self.params

        is_fixed = (
            params.number_of_period == 0
            and params.period_frequency == 0
            and params.reduction_factor == 0
        )
        if not is_fixed and (
            params.number_of_period == 0
            or params.period_frequency == 0
            or params.reduction_factor == 0
        ):
            return (
                "Fee scheduler numberOfPeriod, periodFrequency and reductionFactor must be "
                f"all zero or all non-zero, got {params.number_of_period}, "
                f"{params.period_frequency}, {params.reduction_factor}"
            )

        min_fee_numerator = get_fee_scheduler_min_base_fee_numerator(params)
        max_fee_numerator = get_fee_scheduler_max_base_fee_numerator(params)
        if min_fee_numerator < config.min_fee_numerator:
            return (
                f"Fee scheduler minimum fee numerator {min_fee_numerator} is below "
                f"{config.min_fee_numerator}"
            )
        if max_fee_numerator > config.max_fee_numerator:
            return (
                f"Fee scheduler maximum fee numerator {max_fee_numerator} exceeds "
                f"{config.max_fee_numerator}"
            )
        return None

    def validate(
        self,
        collect_fee_mode: CollectFeeMode,
        activation_type: ActivationType,
        config: ProtocolConfig | None = None,
    ) -> bool:
        return self.check(collect_fee_mode, activation_type, config) is None

    def get_base_fee_numerator_from_included_fee_amount(
        self,
        current_point: int,
        activation_point: int,
        trade_direction: TradeDirection,
        included_fee_amount: int,
    ) -> int:
        return get_fee_scheduler_base_fee_numerator(self.params, current_point, activation_point)

    def get_base_fee_numerator_from_excluded_fee_amount(
        self,
        current_point: int,
        activation_point: int,
        trade_direction: TradeDirection,
        excluded_fee_amount: int,
    ) -> int:
        return get_fee_scheduler_base_fee_numerator(self.params, current_point, activation_point)


class RateLimiterHandler:
    """Handler for the trade-size rate limiter."""

    def __init__(self, params: RateLimiterParams) -> None:
        self.params = params

    def check(
        self,
        collect_fee_mode: CollectFeeMode,
        activation_type: ActivationType,
        config: ProtocolConfig | None = None,
    ) -> str | None:
        config = config or DEFAULT_PROTOCOL_CONFIG
        params = self.params

        if collect_fee_mode != CollectFeeMode.QUOTE_TOKEN:
            return (
                "Rate limiter requires the QuoteToken collect fee mode, "
                f"got {CollectFeeMode(collect_fee_mode).name}"
            )
        if params.is_zero:
            return None
        if (
            params.reference_amount <= 0
            or params.max_limiter_duration <= 0
            or params.fee_increment_bps <= 0
        ):
            return (
                "Rate limiter referenceAmount, maxLimiterDuration and feeIncrementBps must be "
                f"all zero or all positive, got {params.reference_amount}, "
                f"{params.max_limiter_duration}, {params.fee_increment_bps}"
            )

        if activation_type == ActivationType.SLOT:
            max_duration = config.max_rate_limiter_duration_in_slots
        else:
            max_duration = config.max_rate_limiter_duration_in_seconds
        if params.max_limiter_duration > max_duration:
            return (
                f"Rate limiter duration {params.max_limiter_duration} exceeds maximum "
                f"{max_duration}"
            )

        fee_increment_numerator = bps_to_fee_numerator(params.fee_increment_bps)
        if fee_increment_numerator >= config.fee_denominator:
            return (
                f"Rate limiter fee increment numerator {fee_increment_numerator} must be "
                f"less than {config.fee_denominator}"
            )
        if not (
            config.min_fee_numerator <= params.cliff_fee_numerator <= config.max_fee_numerator
        ):
            return (
                f"Rate limiter cliff fee numerator {params.cliff_fee_numerator} must be between "
                f"{config.min_fee_numerator} and {config.max_fee_numerator}"
            )

        min_fee_numerator = get_fee_numerator_from_included_amount(
            params.cliff_fee_numerator,
            params.reference_amount,
            params.fee_increment_bps,
            0,
            config,
        )
        max_fee_numerator = get_fee_numerator_from_included_amount(
            params.cliff_fee_numerator,
            params.reference_amount,
            params.fee_increment_bps,
            RATE_LIMITER_MAX_CHECK_AMOUNT,
            config,
        )
        if min_fee_numerator < config.min_fee_numerator:
            return (
                f"Rate limiter minimum fee numerator {min_fee_numerator} is below "
                f"{config.min_fee_numerator}"
            )
        if max_fee_numerator > config.max_fee_numerator:
            return (
                f"Rate limiter maximum fee numerator {max_fee_numerator} exceeds "
                f"{config.max_fee_numerator}"
            )
        return None

    def validate(
        self,
        collect_fee_mode: CollectFeeMode,
        activation_type: ActivationType,
        config: ProtocolConfig | None = None,
    ) -> bool:
        return self.check(collect_fee_mode, activation_type, config) is None

    def get_base_fee_numerator_from_included_fee_amount(
        self,
        current_point: int,
        activation_point: int,
        trade_direction: TradeDirection,
        included_fee_amount: int,
    ) -> int:
        params = self.params
        if not is_rate_limiter_applied(params, current_point, activation_point, trade_direction):
            return params.cliff_fee_numerator
        return get_fee_numerator_from_included_amount(
            params.cliff_fee_numerator,
            params.reference_amount,
            params.fee_increment_bps,
            included_fee_amount,
        )

    def get_base_fee_numerator_from_excluded_fee_amount(
        self,
        current_point: int,
        activation_point: int,
        trade_direction: TradeDirection,
        excluded_fee_amount: int,
    ) -> int:
        params = self.params
        if not is_rate_limiter_applied(params, current_point, activation_point, trade_direction):
            return params.cliff_fee_numerator
        return get_fee_numerator_from_excluded_amount(
            params.cliff_fee_numerator,
            params.reference_amount,
            params.fee_increment_bps,
            excluded_fee_amount,
        )


def get_base_fee_handler(base_fee: BaseFee) -> BaseFeeHandler:
    """Handler for a base fee variant.

    Raises:
        TypeError: If base_fee is not a known variant
    """
    if isinstance(base_fee, FeeSchedulerParams):
        return FeeSchedulerHandler(base_fee)
    if isinstance(base_fee, RateLimiterParams):
        return RateLimiterHandler(base_fee)
    raise TypeError(f"Unknown base fee variant: {type(base_fee).__name__}")
