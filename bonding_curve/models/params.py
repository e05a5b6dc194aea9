"""Output records of curve and configuration synthesis.

Every record is a frozen dataclass holding integers in the on-chain
program's domains (u128 for prices and liquidity, u64 for amounts). A
ConfigParameters is assembled once by a builder and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypeAlias

from bonding_curve.models.enums import (
    ActivationType,
    BaseFeeMode,
    CollectFeeMode,
    DammV2BaseFeeMode,
    DammV2DynamicFeeMode,
    MigrationFeeOption,
    MigrationOption,
    TokenType,
    TokenUpdateAuthorityOption,
)

__all__ = [
    "CurvePoint",
    "Curve",
    "FeeSchedulerParams",
    "RateLimiterParams",
    "BaseFee",
    "DynamicFeeParams",
    "PoolFees",
    "LockedVesting",
    "LiquidityVestingInfo",
    "MigrationFee",
    "MigratedPoolFee",
    "MigratedPoolMarketCapFeeSchedulerParams",
    "TokenSupply",
    "ConfigParameters",
]


# =============================================================================
# Curve
# =============================================================================


@dataclass(frozen=True)
class CurvePoint:
    """One constant-liquidity segment of the bonding curve.

    The segment spans from the previous point's sqrt price (or the start
    price for the first point) up to sqrt_price.

    Attributes:
        sqrt_price: Upper Q64.64 sqrt price of the segment
        liquidity: Constant liquidity within the segment
    """

    sqrt_price: int
    liquidity: int


Curve: TypeAlias = tuple[CurvePoint, ...]


# =============================================================================
# Base fee
# =============================================================================


@dataclass(frozen=True)
class FeeSchedulerParams:
    """Time-decay base fee.

    Attributes:
        cliff_fee_numerator: Fee numerator at activation
        number_of_period: Number of decay steps
        period_frequency: Length of one step (slots or seconds)
        reduction_factor: Linear numerator decrement, or exponential bps decay
        mode: FEE_SCHEDULER_LINEAR or FEE_SCHEDULER_EXPONENTIAL
    """

    cliff_fee_numerator: int
    number_of_period: int
    period_frequency: int
    reduction_factor: int
    mode: BaseFeeMode = BaseFeeMode.FEE_SCHEDULER_LINEAR

    def to_factors(self) -> tuple[int, int, int, int, BaseFeeMode]:
        """Encode as (cliff, first, second, third, mode)."""
        return (
            self.cliff_fee_numerator,
            self.number_of_period,
            self.period_frequency,
            self.reduction_factor,
            self.mode,
        )


@dataclass(frozen=True)
class RateLimiterParams:
    """Trade-size dependent base fee.

    Attributes:
        cliff_fee_numerator: Fee numerator up to reference_amount
        fee_increment_bps: Fee increase per reference_amount step
        max_limiter_duration: Window after activation the limiter applies in
        reference_amount: Step size in quote lamports
    """

    cliff_fee_numerator: int
    fee_increment_bps: int
    max_limiter_duration: int
    reference_amount: int

    @property
    def mode(self) -> BaseFeeMode:
        return BaseFeeMode.RATE_LIMITER

    @property
    def is_zero(self) -> bool:
        """True when the limiter degenerates to a flat cliff fee."""
        return (
            self.fee_increment_bps == 0
            and self.max_limiter_duration == 0
            and self.reference_amount == 0
        )

    def to_factors(self) -> tuple[int, int, int, int, BaseFeeMode]:
        """Encode as (cliff, first, second, third, mode)."""
        return (
            self.cliff_fee_numerator,
            self.fee_increment_bps,
            self.max_limiter_duration,
            self.reference_amount,
            self.mode,
        )


# Union type for every base fee variant
BaseFee: TypeAlias = FeeSchedulerParams | RateLimiterParams


@dataclass(frozen=True)
class DynamicFeeParams:
    """Volatility-based fee overlay."""

    bin_step: int
    bin_step_u128: int
    filter_period: int
    decay_period: int
    reduction_factor: int
    max_volatility_accumulator: int
    variable_fee_control: int


@dataclass(frozen=True)
class PoolFees:
    """Base fee plus optional dynamic fee of the bonding curve pool."""

    base_fee: BaseFee
    dynamic_fee: DynamicFeeParams | None = None


# =============================================================================
# Vesting
# =============================================================================


@dataclass(frozen=True)
class LockedVesting:
    """Token vesting schedule, in base lamports.

    cliff_unlock_amount + amount_per_period * number_of_period always equals
    the requested locked total.
    """

    amount_per_period: int = 0
    cliff_duration_from_migration_time: int = 0
    frequency: int = 0
    number_of_period: int = 0
    cliff_unlock_amount: int = 0

    @property
    def total_amount(self) -> int:
        return self.cliff_unlock_amount + self.amount_per_period * self.number_of_period

    @property
    def is_default(self) -> bool:
        """True for the all-zero (no vesting) schedule."""
        return (
            self.amount_per_period == 0
            and self.cliff_duration_from_migration_time == 0
            and self.frequency == 0
            and self.number_of_period == 0
            and self.cliff_unlock_amount == 0
        )


@dataclass(frozen=True)
class LiquidityVestingInfo:
    """Post-migration LP vesting for one beneficiary.

    Attributes:
        vesting_percentage: Share of total LP that vests (0-100)
        bps_per_period: Share of the vested LP released per period
        number_of_periods: Number of periodic releases
        cliff_duration_from_migration_time: Seconds before the cliff release
        frequency: Seconds between periodic releases
    """

    vesting_percentage: int = 0
    bps_per_period: int = 0
    number_of_periods: int = 0
    cliff_duration_from_migration_time: int = 0
    frequency: int = 0

    @classmethod
    def zero(cls) -> LiquidityVestingInfo:
        """The canonical no-vesting record."""
        return cls()

    @property
    def is_zero(self) -> bool:
        return self == LiquidityVestingInfo()


# =============================================================================
# Migration
# =============================================================================


@dataclass(frozen=True)
class MigrationFee:
    """Share of the migration quote amount taken as fee, and the creator's cut of it."""

    fee_percentage: int = 0
    creator_fee_percentage: int = 0


@dataclass(frozen=True)
class MigratedPoolFee:
    """Fee configuration of the migrated DAMM v2 pool."""

    collect_fee_mode: CollectFeeMode = CollectFeeMode.QUOTE_TOKEN
    dynamic_fee: DammV2DynamicFeeMode = DammV2DynamicFeeMode.DISABLED
    pool_fee_bps: int = 0

    @property
    def is_empty(self) -> bool:
        return self.collect_fee_mode == 0 and self.dynamic_fee == 0 and self.pool_fee_bps == 0


@dataclass(frozen=True)
class MigratedPoolMarketCapFeeSchedulerParams:
    """Market-cap driven fee decay of the migrated pool.

    All-zero means a fixed fee.
    """

    number_of_period: int = 0
    sqrt_price_step_bps: int = 0
    scheduler_expiration_duration: int = 0
    reduction_factor: int = 0

    @property
    def is_fixed_fee(self) -> bool:
        return (
            self.number_of_period == 0
            and self.sqrt_price_step_bps == 0
            and self.scheduler_expiration_duration == 0
            and self.reduction_factor == 0
        )


@dataclass(frozen=True)
class TokenSupply:
    """Base token supply before and after migration, in lamports."""

    pre_migration_token_supply: int
    post_migration_token_supply: int


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class ConfigParameters:
    """Fully assembled configuration handed to a transaction builder."""

    pool_fees: PoolFees
    collect_fee_mode: CollectFeeMode
    activation_type: ActivationType
    migration_option: MigrationOption
    token_type: TokenType
    token_decimal: int
    migration_quote_threshold: int
    partner_liquidity_percentage: int
    partner_permanent_locked_liquidity_percentage: int
    creator_liquidity_percentage: int
    creator_permanent_locked_liquidity_percentage: int
    sqrt_start_price: int
    locked_vesting: LockedVesting
    migration_fee_option: MigrationFeeOption
    token_supply: TokenSupply | None
    creator_trading_fee_percentage: int
    token_update_authority: TokenUpdateAuthorityOption
    migration_fee: MigrationFee
    migrated_pool_fee: MigratedPoolFee
    curve: Curve
    pool_creation_fee: int = 0
    enable_first_swap_with_min_fee: bool = False
    migrated_pool_base_fee_mode: DammV2BaseFeeMode = DammV2BaseFeeMode.FEE_TIME_SCHEDULER_LINEAR
    migrated_pool_market_cap_fee_scheduler_params: MigratedPoolMarketCapFeeSchedulerParams = field(
        default_factory=MigratedPoolMarketCapFeeSchedulerParams
    )
    partner_liquidity_vesting_info: LiquidityVestingInfo = field(
        default_factory=LiquidityVestingInfo
    )
    creator_liquidity_vesting_info: LiquidityVestingInfo = field(
        default_factory=LiquidityVestingInfo
    )

    def to_dict(self) -> dict[str, Any]:
        """Plain int/bool dict keyed by the on-chain instruction field names."""
        base_fee = self.pool_fees.base_fee
        cliff, first, second, third, mode = base_fee.to_factors()
        dynamic_fee = self.pool_fees.dynamic_fee
        vesting = self.locked_vesting
        scheduler = self.migrated_pool_market_cap_fee_scheduler_params

        return {
            "poolFees": {
                "baseFee": {
                    "cliffFeeNumerator": cliff,
                    "firstFactor": first,
                    "secondFactor": second,
                    "thirdFactor": third,
                    "baseFeeMode": int(mode),
                },
                "dynamicFee": None
                if dynamic_fee is None
                else {
                    "binStep": dynamic_fee.bin_step,
                    "binStepU128": dynamic_fee.bin_step_u128,
                    "filterPeriod": dynamic_fee.filter_period,
                    "decayPeriod": dynamic_fee.decay_period,
                    "reductionFactor": dynamic_fee.reduction_factor,
                    "maxVolatilityAccumulator": dynamic_fee.max_volatility_accumulator,
                    "variableFeeControl": dynamic_fee.variable_fee_control,
                },
            },
            "collectFeeMode": int(self.collect_fee_mode),
            "activationType": int(self.activation_type),
            "migrationOption": int(self.migration_option),
            "tokenType": int(self.token_type),
            "tokenDecimal": int(self.token_decimal),
            "migrationQuoteThreshold": self.migration_quote_threshold,
            "partnerLiquidityPercentage": self.partner_liquidity_percentage,
            "partnerPermanentLockedLiquidityPercentage": (
                self.partner_permanent_locked_liquidity_percentage
            ),
            "creatorLiquidityPercentage": self.creator_liquidity_percentage,
            "creatorPermanentLockedLiquidityPercentage": (
                self.creator_permanent_locked_liquidity_percentage
            ),
            "sqrtStartPrice": self.sqrt_start_price,
            "lockedVesting": {
                "amountPerPeriod": vesting.amount_per_period,
                "cliffDurationFromMigrationTime": vesting.cliff_duration_from_migration_time,
                "frequency": vesting.frequency,
                "numberOfPeriod": vesting.number_of_period,
                "cliffUnlockAmount": vesting.cliff_unlock_amount,
            },
            "migrationFeeOption": int(self.migration_fee_option),
            "tokenSupply": None
            if self.token_supply is None
            else {
                "preMigrationTokenSupply": self.token_supply.pre_migration_token_supply,
                "postMigrationTokenSupply": self.token_supply.post_migration_token_supply,
            },
            "creatorTradingFeePercentage": self.creator_trading_fee_percentage,
            "tokenUpdateAuthority": int(self.token_update_authority),
            "migrationFee": {
                "feePercentage": self.migration_fee.fee_percentage,
                "creatorFeePercentage": self.migration_fee.creator_fee_percentage,
            },
            "migratedPoolFee": {
                "collectFeeMode": int(self.migrated_pool_fee.collect_fee_mode),
                "dynamicFee": int(self.migrated_pool_fee.dynamic_fee),
                "poolFeeBps": self.migrated_pool_fee.pool_fee_bps,
            },
            "poolCreationFee": self.pool_creation_fee,
            "enableFirstSwapWithMinFee": self.enable_first_swap_with_min_fee,
            "migratedPoolBaseFeeMode": int(self.migrated_pool_base_fee_mode),
            "migratedPoolMarketCapFeeSchedulerParams": {
                "numberOfPeriod": scheduler.number_of_period,
                "sqrtPriceStepBps": scheduler.sqrt_price_step_bps,
                "schedulerExpirationDuration": scheduler.scheduler_expiration_duration,
                "reductionFactor": scheduler.reduction_factor,
            },
            "partnerLiquidityVestingInfo": _liquidity_vesting_to_dict(
                self.partner_liquidity_vesting_info
            ),
            "creatorLiquidityVestingInfo": _liquidity_vesting_to_dict(
                self.creator_liquidity_vesting_info
            ),
            "curve": [
                {"sqrtPrice": point.sqrt_price, "liquidity": point.liquidity}
                for point in self.curve
            ],
        }


def _liquidity_vesting_to_dict(info: LiquidityVestingInfo) -> dict[str, int]:
    return {
        "vestingPercentage": info.vesting_percentage,
        "bpsPerPeriod": info.bps_per_period,
        "numberOfPeriods": info.number_of_periods,
        "cliffDurationFromMigrationTime": info.cliff_duration_from_migration_time,
        "frequency": info.frequency,
    }
