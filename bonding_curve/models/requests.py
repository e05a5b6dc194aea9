"""Pydantic models for curve build requests.

Field aliases follow the camelCase names used by existing launch tooling, so
request JSON produced elsewhere loads directly:

    request = BuildCurveWithMarketCapRequest.model_validate(payload)

Human-facing quantities (token counts, prices, market caps) are Decimal and
accept int, float or str input. The models only check shapes and types;
range checks happen in the builders and raise bonding_curve.errors types.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from bonding_curve.models.enums import (
    ActivationType,
    BaseFeeMode,
    CollectFeeMode,
    DammV2BaseFeeMode,
    DammV2DynamicFeeMode,
    MigrationFeeOption,
    MigrationOption,
    TokenDecimal,
    TokenType,
    TokenUpdateAuthorityOption,
)

__all__ = [
    "LockedVestingRequest",
    "FeeSchedulerRequest",
    "RateLimiterRequest",
    "BaseFeeRequest",
    "LiquidityVestingRequest",
    "MigratedPoolFeeRequest",
    "MigratedPoolMarketCapFeeSchedulerRequest",
    "MigrationFeeRequest",
    "BuildCurveBaseRequest",
    "BuildCurveRequest",
    "BuildCurveWithMarketCapRequest",
    "BuildCurveWithTwoSegmentsRequest",
    "BuildCurveWithMidPriceRequest",
    "BuildCurveWithLiquidityWeightsRequest",
    "BuildCurveWithCustomSqrtPricesRequest",
    "BuildCurveWithThreeSegmentsRequest",
]


# =============================================================================
# Component requests
# =============================================================================


class LockedVestingRequest(BaseModel):
    """Token vesting targets, in whole base tokens and seconds."""

    total_locked_vesting_amount: Decimal = Field(
        default=Decimal(0), alias="totalLockedVestingAmount"
    )
    number_of_vesting_period: int = Field(default=0, alias="numberOfVestingPeriod")
    cliff_unlock_amount: Decimal = Field(default=Decimal(0), alias="cliffUnlockAmount")
    total_vesting_duration: int = Field(default=0, alias="totalVestingDuration")
    cliff_duration_from_migration_time: int = Field(
        default=0, alias="cliffDurationFromMigrationTime"
    )

    model_config = {"populate_by_name": True}


class FeeSchedulerRequest(BaseModel):
    """Time-decay base fee targets."""

    starting_fee_bps: int = Field(alias="startingFeeBps")
    ending_fee_bps: int = Field(alias="endingFeeBps")
    number_of_period: int = Field(default=0, alias="numberOfPeriod")
    total_duration: int = Field(default=0, alias="totalDuration")

    model_config = {"populate_by_name": True}


class RateLimiterRequest(BaseModel):
    """Rate limiter targets; reference_amount is in whole quote tokens."""

    base_fee_bps: int = Field(alias="baseFeeBps")
    fee_increment_bps: int = Field(alias="feeIncrementBps")
    reference_amount: Decimal = Field(alias="referenceAmount")
    max_limiter_duration: int = Field(alias="maxLimiterDuration")

    model_config = {"populate_by_name": True}


class BaseFeeRequest(BaseModel):
    """Base fee mode plus the parameters of that mode."""

    base_fee_mode: BaseFeeMode = Field(alias="baseFeeMode")
    fee_scheduler_param: FeeSchedulerRequest | None = Field(
        default=None, alias="feeSchedulerParam"
    )
    rate_limiter_param: RateLimiterRequest | None = Field(default=None, alias="rateLimiterParam")

    model_config = {"populate_by_name": True}


class LiquidityVestingRequest(BaseModel):
    """Post-migration LP vesting targets for one beneficiary."""

    vesting_percentage: int = Field(default=0, alias="vestingPercentage")
    bps_per_period: int = Field(default=0, alias="bpsPerPeriod")
    number_of_periods: int = Field(default=0, alias="numberOfPeriods")
    cliff_duration_from_migration_time: int = Field(
        default=0, alias="cliffDurationFromMigrationTime"
    )
    total_duration: int = Field(default=0, alias="totalDuration")

    model_config = {"populate_by_name": True}


class MigratedPoolFeeRequest(BaseModel):
    """Custom fee of the migrated DAMM v2 pool (Customizable fee option only)."""

    collect_fee_mode: CollectFeeMode = Field(
        default=CollectFeeMode.QUOTE_TOKEN, alias="collectFeeMode"
    )
    dynamic_fee: DammV2DynamicFeeMode = Field(
        default=DammV2DynamicFeeMode.DISABLED, alias="dynamicFee"
    )
    pool_fee_bps: int = Field(default=0, alias="poolFeeBps")

    model_config = {"populate_by_name": True}


class MigratedPoolMarketCapFeeSchedulerRequest(BaseModel):
    """Market-cap fee scheduler targets of the migrated pool.

    The scheduler starts at the bonding curve's ending base fee.
    """

    ending_base_fee_bps: int = Field(alias="endingBaseFeeBps")
    number_of_period: int = Field(alias="numberOfPeriod")
    sqrt_price_step_bps: int = Field(alias="sqrtPriceStepBps")
    scheduler_expiration_duration: int = Field(alias="schedulerExpirationDuration")

    model_config = {"populate_by_name": True}


class MigrationFeeRequest(BaseModel):
    """Migration fee percentages (whole numbers)."""

    fee_percentage: int = Field(default=0, alias="feePercentage")
    creator_fee_percentage: int = Field(default=0, alias="creatorFeePercentage")

    model_config = {"populate_by_name": True}


# =============================================================================
# Build requests
# =============================================================================


class BuildCurveBaseRequest(BaseModel):
    """Fields shared by every curve build variant."""

    total_token_supply: Decimal = Field(alias="totalTokenSupply")
    token_type: TokenType = Field(default=TokenType.SPL, alias="tokenType")
    token_base_decimal: TokenDecimal = Field(alias="tokenBaseDecimal")
    token_quote_decimal: TokenDecimal = Field(alias="tokenQuoteDecimal")
    token_update_authority: TokenUpdateAuthorityOption = Field(
        default=TokenUpdateAuthorityOption.IMMUTABLE, alias="tokenUpdateAuthority"
    )
    locked_vesting_param: LockedVestingRequest = Field(
        default_factory=LockedVestingRequest, alias="lockedVestingParam"
    )
    leftover: Decimal = Decimal(0)
    base_fee_params: BaseFeeRequest = Field(alias="baseFeeParams")
    dynamic_fee_enabled: bool = Field(default=False, alias="dynamicFeeEnabled")
    activation_type: ActivationType = Field(default=ActivationType.SLOT, alias="activationType")
    collect_fee_mode: CollectFeeMode = Field(
        default=CollectFeeMode.QUOTE_TOKEN, alias="collectFeeMode"
    )
    creator_trading_fee_percentage: int = Field(default=0, alias="creatorTradingFeePercentage")
    pool_creation_fee: int = Field(default=0, alias="poolCreationFee")
    migration_option: MigrationOption = Field(
        default=MigrationOption.MET_DAMM_V2, alias="migrationOption"
    )
    migration_fee_option: MigrationFeeOption = Field(
        default=MigrationFeeOption.FIXED_BPS_25, alias="migrationFeeOption"
    )
    migration_fee: MigrationFeeRequest = Field(
        default_factory=MigrationFeeRequest, alias="migrationFee"
    )
    partner_liquidity_percentage: int = Field(default=0, alias="partnerLiquidityPercentage")
    partner_permanent_locked_liquidity_percentage: int = Field(
        default=0, alias="partnerPermanentLockedLiquidityPercentage"
    )
    creator_liquidity_percentage: int = Field(default=0, alias="creatorLiquidityPercentage")
    creator_permanent_locked_liquidity_percentage: int = Field(
        default=0, alias="creatorPermanentLockedLiquidityPercentage"
    )
    enable_first_swap_with_min_fee: bool = Field(
        default=False, alias="enableFirstSwapWithMinFee"
    )
    partner_liquidity_vesting_info_params: LiquidityVestingRequest | None = Field(
        default=None, alias="partnerLiquidityVestingInfoParams"
    )
    creator_liquidity_vesting_info_params: LiquidityVestingRequest | None = Field(
        default=None, alias="creatorLiquidityVestingInfoParams"
    )
    migrated_pool_fee: MigratedPoolFeeRequest | None = Field(
        default=None, alias="migratedPoolFee"
    )
    migrated_pool_base_fee_mode: DammV2BaseFeeMode = Field(
        default=DammV2BaseFeeMode.FEE_TIME_SCHEDULER_LINEAR, alias="migratedPoolBaseFeeMode"
    )
    migrated_pool_market_cap_fee_scheduler_params: (
        MigratedPoolMarketCapFeeSchedulerRequest | None
    ) = Field(default=None, alias="migratedPoolMarketCapFeeSchedulerParams")

    model_config = {"populate_by_name": True}


class BuildCurveRequest(BuildCurveBaseRequest):
    """Single segment from a migration percentage and quote threshold."""

    percentage_supply_on_migration: Decimal = Field(alias="percentageSupplyOnMigration")
    migration_quote_threshold: Decimal = Field(alias="migrationQuoteThreshold")


class BuildCurveWithMarketCapRequest(BuildCurveBaseRequest):
    """Single segment from initial and migration market caps."""

    initial_market_cap: Decimal = Field(alias="initialMarketCap")
    migration_market_cap: Decimal = Field(alias="migrationMarketCap")


class BuildCurveWithTwoSegmentsRequest(BuildCurveBaseRequest):
    """Two segments with a heuristically chosen midpoint."""

    initial_market_cap: Decimal = Field(alias="initialMarketCap")
    migration_market_cap: Decimal = Field(alias="migrationMarketCap")
    percentage_supply_on_migration: Decimal = Field(alias="percentageSupplyOnMigration")


class BuildCurveWithMidPriceRequest(BuildCurveWithTwoSegmentsRequest):
    """Two segments split at an explicit mid price."""

    mid_price: Decimal = Field(alias="midPrice")


class BuildCurveWithLiquidityWeightsRequest(BuildCurveBaseRequest):
    """Sixteen geometric segments with relative liquidity weights."""

    initial_market_cap: Decimal = Field(alias="initialMarketCap")
    migration_market_cap: Decimal = Field(alias="migrationMarketCap")
    liquidity_weights: list[Decimal] = Field(alias="liquidityWeights")


class BuildCurveWithCustomSqrtPricesRequest(BuildCurveBaseRequest):
    """Segments over explicit ascending sqrt price checkpoints."""

    sqrt_prices: list[int] = Field(alias="sqrtPrices")
    liquidity_weights: list[Decimal] | None = Field(default=None, alias="liquidityWeights")


class BuildCurveWithThreeSegmentsRequest(BuildCurveBaseRequest):
    """Three phases with explicit end prices and per-phase token allocation."""

    initial_market_cap: Decimal = Field(alias="initialMarketCap")
    migration_market_cap: Decimal = Field(alias="migrationMarketCap")
    phase1_end_price: Decimal = Field(alias="phase1EndPrice")
    phase2_end_price: Decimal = Field(alias="phase2EndPrice")
    token_allocation: tuple[int, int, int] = Field(alias="tokenAllocation")
