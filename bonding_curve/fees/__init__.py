"""Fee schedule derivation.

This package provides:
- Time-decay fee scheduler (linear and exponential)
- Trade-size rate limiter
- Volatility-based dynamic fee overlay
- Fees of the migrated pool
- Base fee dispatch and per-variant handlers
"""

from bonding_curve.fees.base_fee import (
    BaseFeeHandler,
    FeeSchedulerHandler,
    RateLimiterHandler,
    get_base_fee_handler,
    get_base_fee_params,
    get_starting_base_fee_bps,
)
from bonding_curve.fees.dynamic_fee import get_dynamic_fee_params, get_variable_fee
from bonding_curve.fees.migrated_pool import (
    get_migrated_pool_fee_params,
    get_migrated_pool_market_cap_fee_scheduler_params,
)
from bonding_curve.fees.numerators import bps_to_fee_numerator, fee_numerator_to_bps
from bonding_curve.fees.rate_limiter import (
    get_checked_amounts,
    get_fee_numerator_from_excluded_amount,
    get_fee_numerator_from_included_amount,
    get_max_index,
    get_rate_limiter_excluded_fee_amount,
    get_rate_limiter_params,
    is_rate_limiter_applied,
)
from bonding_curve.fees.scheduler import (
    calculate_fee_scheduler_ending_base_fee_bps,
    get_base_fee_numerator_by_period,
    get_fee_scheduler_base_fee_numerator,
    get_fee_scheduler_max_base_fee_numerator,
    get_fee_scheduler_min_base_fee_numerator,
    get_fee_scheduler_params,
)

__all__ = [
    # Conversions
    "bps_to_fee_numerator",
    "fee_numerator_to_bps",
    # Base fee
    "get_base_fee_params",
    "get_starting_base_fee_bps",
    "BaseFeeHandler",
    "FeeSchedulerHandler",
    "RateLimiterHandler",
    "get_base_fee_handler",
    # Fee scheduler
    "get_fee_scheduler_params",
    "calculate_fee_scheduler_ending_base_fee_bps",
    "get_base_fee_numerator_by_period",
    "get_fee_scheduler_base_fee_numerator",
    "get_fee_scheduler_min_base_fee_numerator",
    "get_fee_scheduler_max_base_fee_numerator",
    # Rate limiter
    "get_rate_limiter_params",
    "get_max_index",
    "get_fee_numerator_from_included_amount",
    "get_rate_limiter_excluded_fee_amount",
    "get_fee_numerator_from_excluded_amount",
    "get_checked_amounts",
    "is_rate_limiter_applied",
    # Dynamic fee
    "get_dynamic_fee_params",
    "get_variable_fee",
    # Migrated pool
    "get_migrated_pool_market_cap_fee_scheduler_params",
    "get_migrated_pool_fee_params",
]
