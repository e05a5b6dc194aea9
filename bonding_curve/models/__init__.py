"""Enums, output records and build requests."""

from bonding_curve.models.enums import (
    ActivationType,
    BaseFeeMode,
    CollectFeeMode,
    DammV2BaseFeeMode,
    DammV2DynamicFeeMode,
    MigrationFeeOption,
    MigrationOption,
    Rounding,
    TokenDecimal,
    TokenType,
    TokenUpdateAuthorityOption,
    TradeDirection,
)
from bonding_curve.models.params import (
    BaseFee,
    ConfigParameters,
    Curve,
    CurvePoint,
    DynamicFeeParams,
    FeeSchedulerParams,
    LiquidityVestingInfo,
    LockedVesting,
    MigratedPoolFee,
    MigratedPoolMarketCapFeeSchedulerParams,
    MigrationFee,
    PoolFees,
    RateLimiterParams,
    TokenSupply,
)
from bonding_curve.models.requests import (
    BaseFeeRequest,
    BuildCurveBaseRequest,
    BuildCurveRequest,
    BuildCurveWithCustomSqrtPricesRequest,
    BuildCurveWithLiquidityWeightsRequest,
    BuildCurveWithMarketCapRequest,
    BuildCurveWithMidPriceRequest,
    BuildCurveWithThreeSegmentsRequest,
    BuildCurveWithTwoSegmentsRequest,
    FeeSchedulerRequest,
    LiquidityVestingRequest,
    LockedVestingRequest,
    MigratedPoolFeeRequest,
    MigratedPoolMarketCapFeeSchedulerRequest,
    MigrationFeeRequest,
    RateLimiterRequest,
)

__all__ = [
    # Enums
    "ActivationType",
    "BaseFeeMode",
    "CollectFeeMode",
    "DammV2BaseFeeMode",
    "DammV2DynamicFeeMode",
    "MigrationFeeOption",
    "MigrationOption",
    "Rounding",
    "TokenDecimal",
    "TokenType",
    "TokenUpdateAuthorityOption",
    "TradeDirection",
    # Output records
    "BaseFee",
    "ConfigParameters",
    "Curve",
    "CurvePoint",
    "DynamicFeeParams",
    "FeeSchedulerParams",
    "LiquidityVestingInfo",
    "LockedVesting",
    "MigratedPoolFee",
    "MigratedPoolMarketCapFeeSchedulerParams",
    "MigrationFee",
    "PoolFees",
    "RateLimiterParams",
    "TokenSupply",
    # Requests
    "BaseFeeRequest",
    "BuildCurveBaseRequest",
    "BuildCurveRequest",
    "BuildCurveWithCustomSqrtPricesRequest",
    "BuildCurveWithLiquidityWeightsRequest",
    "BuildCurveWithMarketCapRequest",
    "BuildCurveWithMidPriceRequest",
    "BuildCurveWithThreeSegmentsRequest",
    "BuildCurveWithTwoSegmentsRequest",
    "FeeSchedulerRequest",
    "LiquidityVestingRequest",
    "LockedVestingRequest",
    "MigratedPoolFeeRequest",
    "MigratedPoolMarketCapFeeSchedulerRequest",
    "MigrationFeeRequest",
    "RateLimiterRequest",
]
