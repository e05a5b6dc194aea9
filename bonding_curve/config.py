"""Protocol configuration for curve synthesis and validation."""

from dataclasses import dataclass

from bonding_curve.constants import (
    BIN_STEP_BPS_DEFAULT,
    BIN_STEP_BPS_U128_DEFAULT,
    DYNAMIC_FEE_DECAY_PERIOD_DEFAULT,
    DYNAMIC_FEE_FILTER_PERIOD_DEFAULT,
    DYNAMIC_FEE_REDUCTION_FACTOR_DEFAULT,
    FEE_DENOMINATOR,
    MAX_BASIS_POINT,
    MAX_CREATOR_MIGRATION_FEE_PERCENTAGE,
    MAX_CURVE_POINT,
    MAX_FEE_BPS,
    MAX_FEE_NUMERATOR,
    MAX_LOCK_DURATION_IN_SECONDS,
    MAX_MIGRATED_POOL_FEE_BPS,
    MAX_MIGRATION_FEE_PERCENTAGE,
    MAX_POOL_CREATION_FEE,
    MAX_PRICE_CHANGE_PERCENTAGE_DEFAULT,
    MAX_RATE_LIMITER_DURATION_IN_SECONDS,
    MAX_RATE_LIMITER_DURATION_IN_SLOTS,
    MAX_SQRT_PRICE,
    MIN_FEE_BPS,
    MIN_FEE_NUMERATOR,
    MIN_LOCKED_LIQUIDITY_BPS,
    MIN_MIGRATED_POOL_FEE_BPS,
    MIN_POOL_CREATION_FEE,
    MIN_SQRT_PRICE,
    SECONDS_PER_DAY,
    SWAP_BUFFER_PERCENTAGE,
)


@dataclass(frozen=True)
class ProtocolConfig:
    """Centralized bounds and defaults of the on-chain program.

    Solvers, fee derivations and the validator take an optional
    ProtocolConfig instead of reading module globals, which keeps every
    function pure and lets tests tighten or relax individual bounds.

    Attributes:
        fee_denominator: Denominator of every fee numerator (1e9)
        min_fee_bps / max_fee_bps: Base fee bounds in basis points
        min_fee_numerator / max_fee_numerator: Base fee bounds as numerators
        min_sqrt_price / max_sqrt_price: Representable Q64.64 sqrt price range
        max_curve_point: Maximum number of curve segments
        swap_buffer_percentage: Safety inflation of the swap amount
        max_rate_limiter_duration_in_slots / _in_seconds: Rate limiter window caps
        max_price_change_percentage: Default input of the dynamic fee derivation
        min_locked_liquidity_bps: Locked LP floor checked at locked_liquidity_horizon
        locked_liquidity_horizon: Seconds after migration the floor applies to
    """

    # Fees
    fee_denominator: int = FEE_DENOMINATOR
    max_basis_point: int = MAX_BASIS_POINT
    min_fee_bps: int = MIN_FEE_BPS
    max_fee_bps: int = MAX_FEE_BPS
    min_fee_numerator: int = MIN_FEE_NUMERATOR
    max_fee_numerator: int = MAX_FEE_NUMERATOR
    max_rate_limiter_duration_in_slots: int = MAX_RATE_LIMITER_DURATION_IN_SLOTS
    max_rate_limiter_duration_in_seconds: int = MAX_RATE_LIMITER_DURATION_IN_SECONDS

    # Dynamic fee defaults
    bin_step_bps: int = BIN_STEP_BPS_DEFAULT
    bin_step_bps_u128: int = BIN_STEP_BPS_U128_DEFAULT
    dynamic_fee_filter_period: int = DYNAMIC_FEE_FILTER_PERIOD_DEFAULT
    dynamic_fee_decay_period: int = DYNAMIC_FEE_DECAY_PERIOD_DEFAULT
    dynamic_fee_reduction_factor: int = DYNAMIC_FEE_REDUCTION_FACTOR_DEFAULT
    max_price_change_percentage: int = MAX_PRICE_CHANGE_PERCENTAGE_DEFAULT

    # Curve
    min_sqrt_price: int = MIN_SQRT_PRICE
    max_sqrt_price: int = MAX_SQRT_PRICE
    max_curve_point: int = MAX_CURVE_POINT
    swap_buffer_percentage: int = SWAP_BUFFER_PERCENTAGE

    # Migration
    max_migration_fee_percentage: int = MAX_MIGRATION_FEE_PERCENTAGE
    max_creator_migration_fee_percentage: int = MAX_CREATOR_MIGRATION_FEE_PERCENTAGE
    min_migrated_pool_fee_bps: int = MIN_MIGRATED_POOL_FEE_BPS
    max_migrated_pool_fee_bps: int = MAX_MIGRATED_POOL_FEE_BPS
    min_locked_liquidity_bps: int = MIN_LOCKED_LIQUIDITY_BPS
    locked_liquidity_horizon: int = SECONDS_PER_DAY
    max_lock_duration: int = MAX_LOCK_DURATION_IN_SECONDS

    # Pool creation fee (lamports)
    min_pool_creation_fee: int = MIN_POOL_CREATION_FEE
    max_pool_creation_fee: int = MAX_POOL_CREATION_FEE


# Default configuration instance
DEFAULT_PROTOCOL_CONFIG = ProtocolConfig()
