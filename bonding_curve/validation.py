"""Validation of assembled configurations.

Each invariant exists as a boolean validate_* function, and
validate_config_parameters runs them in a fixed order and raises on the
first failure. The order matters: callers and tests rely on which error
surfaces when several invariants are broken at once.
"""

from __future__ import annotations

import decimal
from enum import Enum

import structlog

from bonding_curve.config import DEFAULT_PROTOCOL_CONFIG, ProtocolConfig
from bonding_curve.constants import U24_MAX
from bonding_curve.curves.supply import (
    get_base_token_for_swap,
    get_migration_base_token,
    get_migration_quote_amount_from_migration_quote_threshold,
    get_migration_threshold_price,
    get_swap_amount_with_buffer,
    get_total_token_supply,
)
from bonding_curve.errors import InconsistentConfiguration, InvalidParameter
from bonding_curve.fees.base_fee import get_base_fee_handler
from bonding_curve.math.decimal_utils import DECIMAL_HIGH_PREC_CONTEXT, floor_to_int
from bonding_curve.models.enums import (
    ActivationType,
    CollectFeeMode,
    DammV2BaseFeeMode,
    DammV2DynamicFeeMode,
    MigrationFeeOption,
    MigrationOption,
    TokenDecimal,
    TokenType,
    TokenUpdateAuthorityOption,
)
from bonding_curve.models.params import (
    ConfigParameters,
    Curve,
    DynamicFeeParams,
    LiquidityVestingInfo,
    LockedVesting,
    MigratedPoolFee,
    MigratedPoolMarketCapFeeSchedulerParams,
    MigrationFee,
    PoolFees,
    TokenSupply,
)
from bonding_curve.vesting.liquidity import calculate_locked_liquidity_bps_at_time

logger = structlog.get_logger()

__all__ = [
    "get_pool_fees_error",
    "validate_pool_fees",
    "validate_dynamic_fee",
    "validate_collect_fee_mode",
    "validate_token_update_authority_option",
    "validate_migration_and_token_type",
    "validate_activation_type",
    "validate_migration_fee_option",
    "validate_migration_fee",
    "validate_token_decimals",
    "validate_lp_percentages",
    "validate_pool_creation_fee",
    "get_liquidity_vesting_info_error",
    "validate_liquidity_vesting_info",
    "validate_minimum_locked_liquidity",
    "get_migrated_pool_fee_error",
    "validate_migrated_pool_fee",
    "validate_migrated_pool_base_fee_mode",
    "get_curve_error",
    "validate_curve",
    "validate_locked_vesting",
    "validate_token_supply",
    "validate_config_parameters",
]

_MIGRATION_FEE_FIXED_OPTIONS = (
    MigrationFeeOption.FIXED_BPS_25,
    MigrationFeeOption.FIXED_BPS_30,
    MigrationFeeOption.FIXED_BPS_100,
    MigrationFeeOption.FIXED_BPS_200,
    MigrationFeeOption.FIXED_BPS_400,
    MigrationFeeOption.FIXED_BPS_600,
)


def _describe(value: object) -> str:
    """Render an option as NAME (value), or the raw value if it is not a known member."""
    if isinstance(value, Enum):
        return f"{value.name} ({int(value)})"
    return repr(value)


# =============================================================================
# Pool fees
# =============================================================================


def validate_dynamic_fee(
    dynamic_fee: DynamicFeeParams | None, config: ProtocolConfig | None = None
) -> bool:
    """Dynamic fee is optional; when present it must use the program defaults."""
    config = config or DEFAULT_PROTOCOL_CONFIG
    if dynamic_fee is None:
        return True
    return (
        dynamic_fee.bin_step == config.bin_step_bps
        and dynamic_fee.bin_step_u128 == config.bin_step_bps_u128
        and dynamic_fee.filter_period < dynamic_fee.decay_period
        and dynamic_fee.reduction_factor <= config.max_basis_point
        and dynamic_fee.variable_fee_control <= U24_MAX
        and dynamic_fee.max_volatility_accumulator <= U24_MAX
    )


def get_pool_fees_error(
    pool_fees: PoolFees,
    collect_fee_mode: CollectFeeMode,
    activation_type: ActivationType,
    config: ProtocolConfig | None = None,
) -> str | None:
    """Why the pool fees are invalid, or None when they are valid."""
    config = config or DEFAULT_PROTOCOL_CONFIG
    base_fee = pool_fees.base_fee

    if base_fee.cliff_fee_numerator < config.min_fee_numerator:
        return (
            f"cliff fee numerator {base_fee.cliff_fee_numerator} is below "
            f"{config.min_fee_numerator}"
        )

    reason = get_base_fee_handler(base_fee).check(collect_fee_mode, activation_type, config)
    if reason is not None:
        return reason

    if not validate_dynamic_fee(pool_fees.dynamic_fee, config):
        dynamic_fee = pool_fees.dynamic_fee
        return (
            f"dynamic fee out of range: variableFeeControl={dynamic_fee.variable_fee_control} "
            f"maxVolatilityAccumulator={dynamic_fee.max_volatility_accumulator} "
            f"filterPeriod={dynamic_fee.filter_period} decayPeriod={dynamic_fee.decay_period}"
        )
    return None


def validate_pool_fees(
    pool_fees: PoolFees,
    collect_fee_mode: CollectFeeMode,
    activation_type: ActivationType,
    config: ProtocolConfig | None = None,
) -> bool:
    return get_pool_fees_error(pool_fees, collect_fee_mode, activation_type, config) is None


# =============================================================================
# Enumerated options
# =============================================================================


def validate_collect_fee_mode(collect_fee_mode: CollectFeeMode) -> bool:
    return collect_fee_mode in (CollectFeeMode.QUOTE_TOKEN, CollectFeeMode.OUTPUT_TOKEN)


def validate_token_update_authority_option(option: TokenUpdateAuthorityOption) -> bool:
    return option in tuple(TokenUpdateAuthorityOption)


def validate_migration_and_token_type(
    migration_option: MigrationOption, token_type: TokenType
) -> bool:
    """DAMM v1 only accepts SPL tokens."""
    if migration_option == MigrationOption.MET_DAMM:
        return token_type == TokenType.SPL
    return True


def validate_activation_type(activation_type: ActivationType) -> bool:
    return activation_type in (ActivationType.SLOT, ActivationType.TIMESTAMP)


def validate_migration_fee_option(
    migration_fee_option: MigrationFeeOption, migration_option: MigrationOption | None = None
) -> bool:
    """Fixed options are always valid; Customizable is DAMM v2 only."""
    if migration_fee_option == MigrationFeeOption.CUSTOMIZABLE:
        return migration_option == MigrationOption.MET_DAMM_V2
    return migration_fee_option in _MIGRATION_FEE_FIXED_OPTIONS


def validate_token_decimals(token_decimal: int) -> bool:
    return TokenDecimal.SIX <= token_decimal <= TokenDecimal.NINE


# =============================================================================
# Migration and liquidity split
# =============================================================================


def _migration_fee_error(migration_fee: MigrationFee, config: ProtocolConfig) -> str | None:
    if not 0 <= migration_fee.fee_percentage <= config.max_migration_fee_percentage:
        return (
            f"Migration fee percentage must be between 0 and "
            f"{config.max_migration_fee_percentage}, got {migration_fee.fee_percentage}"
        )
    if not 0 <= migration_fee.creator_fee_percentage <= config.max_creator_migration_fee_percentage:
        return (
            f"Migration creator fee percentage must be between 0 and "
            f"{config.max_creator_migration_fee_percentage}, "
            f"got {migration_fee.creator_fee_percentage}"
        )
    return None


def validate_migration_fee(
    migration_fee: MigrationFee, config: ProtocolConfig | None = None
) -> bool:
    return _migration_fee_error(migration_fee, config or DEFAULT_PROTOCOL_CONFIG) is None


def validate_lp_percentages(
    partner_liquidity_percentage: int,
    partner_permanent_locked_liquidity_percentage: int,
    creator_liquidity_percentage: int,
    creator_permanent_locked_liquidity_percentage: int,
    partner_vesting_percentage: int = 0,
    creator_vesting_percentage: int = 0,
) -> bool:
    """The six LP shares must account for exactly 100%."""
    total = (
        partner_liquidity_percentage
        + partner_permanent_locked_liquidity_percentage
        + creator_liquidity_percentage
        + creator_permanent_locked_liquidity_percentage
        + partner_vesting_percentage
        + creator_vesting_percentage
    )
    return total == 100


def validate_pool_creation_fee(pool_creation_fee: int, config: ProtocolConfig | None = None) -> bool:
    """Zero, or within the protocol's lamport bounds."""
    config = config or DEFAULT_PROTOCOL_CONFIG
    if pool_creation_fee == 0:
        return True
    return config.min_pool_creation_fee <= pool_creation_fee <= config.max_pool_creation_fee


def get_liquidity_vesting_info_error(vesting_info: LiquidityVestingInfo) -> str | None:
    """Why an LP vesting record is invalid, or None when it is valid."""
    if vesting_info.is_zero:
        return None
    if not 0 <= vesting_info.vesting_percentage <= 100:
        return (
            "vestingPercentage must be between 0 and 100, "
            f"got {vesting_info.vesting_percentage}"
        )
    if vesting_info.vesting_percentage > 0 and vesting_info.frequency == 0:
        return (
            "frequency must be greater than 0 when vestingPercentage is "
            f"{vesting_info.vesting_percentage}"
        )
    return None


def validate_liquidity_vesting_info(vesting_info: LiquidityVestingInfo) -> bool:
    return get_liquidity_vesting_info_error(vesting_info) is None


def validate_minimum_locked_liquidity(
    partner_permanent_locked_liquidity_percentage: int,
    creator_permanent_locked_liquidity_percentage: int,
    partner_liquidity_vesting_info: LiquidityVestingInfo | None,
    creator_liquidity_vesting_info: LiquidityVestingInfo | None,
    config: ProtocolConfig | None = None,
) -> bool:
    """At least min_locked_liquidity_bps of LP must still be locked one day after migration."""
    config = config or DEFAULT_PROTOCOL_CONFIG
    locked_bps = calculate_locked_liquidity_bps_at_time(
        partner_permanent_locked_liquidity_percentage,
        creator_permanent_locked_liquidity_percentage,
        partner_liquidity_vesting_info,
        creator_liquidity_vesting_info,
        config.locked_liquidity_horizon,
    )
    return locked_bps >= config.min_locked_liquidity_bps


def get_migrated_pool_fee_error(
    migrated_pool_fee: MigratedPoolFee,
    migration_option: MigrationOption | None = None,
    migration_fee_option: MigrationFeeOption | None = None,
    config: ProtocolConfig | None = None,
) -> str | None:
    """Why a migrated pool fee is invalid, or None when it is valid.

    Custom migrated pool fees are only allowed for DAMM v2 with the
    Customizable option.
    """
    config = config or DEFAULT_PROTOCOL_CONFIG

    if migration_option is not None and migration_fee_option is not None:
        custom_allowed = (
            migration_option == MigrationOption.MET_DAMM_V2
            and migration_fee_option == MigrationFeeOption.CUSTOMIZABLE
        )
        if not custom_allowed and not migrated_pool_fee.is_empty:
            return (
                f"a custom fee (poolFeeBps={migrated_pool_fee.pool_fee_bps}) requires "
                f"MET_DAMM_V2 with CUSTOMIZABLE, got migration option "
                f"{_describe(migration_option)} and fee option {_describe(migration_fee_option)}"
            )
        if not custom_allowed:
            return None

    if migrated_pool_fee.is_empty:
        return None

    if not (
        config.min_migrated_pool_fee_bps
        <= migrated_pool_fee.pool_fee_bps
        <= config.max_migrated_pool_fee_bps
    ):
        return (
            f"poolFeeBps must be between {config.min_migrated_pool_fee_bps} and "
            f"{config.max_migrated_pool_fee_bps}, got {migrated_pool_fee.pool_fee_bps}"
        )
    if not validate_collect_fee_mode(migrated_pool_fee.collect_fee_mode):
        return f"invalid collect fee mode, got {_describe(migrated_pool_fee.collect_fee_mode)}"
    if migrated_pool_fee.dynamic_fee not in (
        DammV2DynamicFeeMode.DISABLED,
        DammV2DynamicFeeMode.ENABLED,
    ):
        return f"invalid dynamic fee mode, got {_describe(migrated_pool_fee.dynamic_fee)}"
    return None


def validate_migrated_pool_fee(
    migrated_pool_fee: MigratedPoolFee,
    migration_option: MigrationOption | None = None,
    migration_fee_option: MigrationFeeOption | None = None,
    config: ProtocolConfig | None = None,
) -> bool:
    return (
        get_migrated_pool_fee_error(
            migrated_pool_fee, migration_option, migration_fee_option, config
        )
        is None
    )


def validate_migrated_pool_base_fee_mode(
    base_fee_mode: DammV2BaseFeeMode,
    scheduler_params: MigratedPoolMarketCapFeeSchedulerParams,
    migration_option: MigrationOption | None = None,
) -> bool:
    """Check the migrated pool's base fee mode against its scheduler parameters.

    Time-scheduler modes only work as a fixed fee after migration, and the
    rate limiter is not available at all. Market-cap modes either run as a
    fixed fee or need every scheduler parameter set.

    Raises:
        InvalidParameter: With the reason, when the combination is invalid
    """
    if migration_option is not None and migration_option != MigrationOption.MET_DAMM_V2:
        return True

    if base_fee_mode == DammV2BaseFeeMode.RATE_LIMITER:
        raise InvalidParameter(
            "RateLimiter (mode 2) is not supported for DAMM V2 migration. Use "
            "FeeTimeSchedulerLinear (0), FeeTimeSchedulerExponential (1), "
            "FeeMarketCapSchedulerLinear (3), or FeeMarketCapSchedulerExponential (4) instead."
        )

    if base_fee_mode in (
        DammV2BaseFeeMode.FEE_TIME_SCHEDULER_LINEAR,
        DammV2BaseFeeMode.FEE_TIME_SCHEDULER_EXPONENTIAL,
    ):
        if not scheduler_params.is_fixed_fee:
            raise InvalidParameter(
                "FeeTimeSchedulerLinear (0) and FeeTimeSchedulerExponential (1) modes only work "
                "as fixed fee for migrated pools. All market cap fee scheduler params must be 0: "
                "numberOfPeriod, sqrtPriceStepBps, schedulerExpirationDuration, and "
                "reductionFactor."
            )
        return True

    if base_fee_mode in (
        DammV2BaseFeeMode.FEE_MARKET_CAP_SCHEDULER_LINEAR,
        DammV2BaseFeeMode.FEE_MARKET_CAP_SCHEDULER_EXPONENTIAL,
    ):
        if scheduler_params.is_fixed_fee:
            return True
        if (
            scheduler_params.number_of_period <= 0
            or scheduler_params.sqrt_price_step_bps <= 0
            or scheduler_params.scheduler_expiration_duration <= 0
        ):
            raise InvalidParameter(
                "For FeeMarketCapSchedulerLinear (3) and FeeMarketCapSchedulerExponential (4) "
                "modes, if using dynamic fee scheduling, numberOfPeriod, sqrtPriceStepBps, and "
                "schedulerExpirationDuration must all be greater than 0."
            )
        return True

    raise InvalidParameter(f"Unknown migratedPoolBaseFeeMode: {base_fee_mode}")


# =============================================================================
# Curve and supply
# =============================================================================


def get_curve_error(
    curve: Curve, sqrt_start_price: int, config: ProtocolConfig | None = None
) -> str | None:
    """Why a curve is malformed, naming the first offending segment, or None."""
    config = config or DEFAULT_PROTOCOL_CONFIG
    if not curve:
        return "curve has no segments"
    if len(curve) > config.max_curve_point:
        return f"curve has {len(curve)} segments, at most {config.max_curve_point} allowed"

    lower = sqrt_start_price
    for index, point in enumerate(curve):
        if point.sqrt_price <= lower:
            return (
                f"segment {index} sqrt price {point.sqrt_price} must be greater than "
                f"its lower bound {lower}"
            )
        if point.liquidity <= 0:
            return (
                f"segment {index} (sqrt price {point.sqrt_price}) liquidity must be "
                f"greater than 0, got {point.liquidity}"
            )
        if point.sqrt_price > config.max_sqrt_price:
            return (
                f"segment {index} sqrt price {point.sqrt_price} exceeds max sqrt price "
                f"{config.max_sqrt_price}"
            )
        lower = point.sqrt_price
    return None


def validate_curve(
    curve: Curve, sqrt_start_price: int, config: ProtocolConfig | None = None
) -> bool:
    """Curve has 1..max_curve_point segments, strictly ascending, all with positive liquidity."""
    return get_curve_error(curve, sqrt_start_price, config) is None


def validate_locked_vesting(locked_vesting: LockedVesting) -> bool:
    """A non-default schedule needs a frequency and something to release."""
    if locked_vesting.is_default:
        return True
    return locked_vesting.frequency != 0 and locked_vesting.total_amount != 0


def validate_token_supply(
    token_supply: TokenSupply | None,
    swap_base_amount: int,
    migration_base_amount: int,
    locked_vesting: LockedVesting,
    swap_base_amount_buffer: int,
) -> bool:
    """min_without_buffer <= post <= pre and min_with_buffer <= pre."""
    if token_supply is None:
        return True

    minimum_with_buffer = get_total_token_supply(
        swap_base_amount_buffer, migration_base_amount, locked_vesting
    )
    minimum_without_buffer = get_total_token_supply(
        swap_base_amount, migration_base_amount, locked_vesting
    )
    pre = token_supply.pre_migration_token_supply
    post = token_supply.post_migration_token_supply
    return minimum_without_buffer <= post <= pre and minimum_with_buffer <= pre


# =============================================================================
# Entry point
# =============================================================================


def validate_config_parameters(
    config: ConfigParameters, protocol_config: ProtocolConfig | None = None
) -> None:
    """Raise on the first invariant an assembled configuration violates.

    Args:
        config: Configuration to check
        protocol_config: Protocol bounds (defaults to DEFAULT_PROTOCOL_CONFIG)

    Raises:
        InvalidParameter: On a field-level violation
        InconsistentConfiguration: On a total or supply chain violation
        InsufficientLiquidity: If the curve cannot reach the migration threshold
    """
    protocol = protocol_config or DEFAULT_PROTOCOL_CONFIG

    reason = get_pool_fees_error(
        config.pool_fees, config.collect_fee_mode, config.activation_type, protocol
    )
    if reason is not None:
        raise InvalidParameter(f"Invalid pool fees: {reason}")

    if not validate_collect_fee_mode(config.collect_fee_mode):
        raise InvalidParameter(
            f"Invalid collect fee mode, got {_describe(config.collect_fee_mode)}"
        )

    if not validate_token_update_authority_option(config.token_update_authority):
        raise InvalidParameter(
            "Invalid option for token update authority, "
            f"got {_describe(config.token_update_authority)}"
        )

    if not validate_migration_and_token_type(config.migration_option, config.token_type):
        raise InvalidParameter(
            "Token type must be SPL for MeteoraDamm migration, "
            f"got {_describe(config.token_type)}"
        )

    if not validate_activation_type(config.activation_type):
        raise InvalidParameter(
            f"Invalid activation type, got {_describe(config.activation_type)}"
        )

    if not validate_migration_fee_option(config.migration_fee_option, config.migration_option):
        raise InvalidParameter(
            f"Invalid migration fee option {_describe(config.migration_fee_option)} "
            f"for migration option {_describe(config.migration_option)}"
        )

    reason = _migration_fee_error(config.migration_fee, protocol)
    if reason is not None:
        raise InvalidParameter(reason)

    if not 0 <= config.creator_trading_fee_percentage <= 100:
        raise InvalidParameter(
            f"Creator trading fee percentage must be between 0 and 100, "
            f"got {config.creator_trading_fee_percentage}"
        )

    if not validate_token_decimals(config.token_decimal):
        raise InvalidParameter(
            f"Token decimal must be between 6 and 9, got {config.token_decimal}"
        )

    partner_vesting = config.partner_liquidity_vesting_info
    creator_vesting = config.creator_liquidity_vesting_info
    lp_values = (
        config.partner_liquidity_percentage,
        config.partner_permanent_locked_liquidity_percentage,
        config.creator_liquidity_percentage,
        config.creator_permanent_locked_liquidity_percentage,
        partner_vesting.vesting_percentage,
        creator_vesting.vesting_percentage,
    )
    if not validate_lp_percentages(*lp_values):
        raise InconsistentConfiguration(
            f"Sum of LP percentages must equal 100, got {sum(lp_values)}"
        )

    if not validate_pool_creation_fee(config.pool_creation_fee, protocol):
        raise InvalidParameter(
            f"Pool creation fee must be 0 or between {protocol.min_pool_creation_fee} and "
            f"{protocol.max_pool_creation_fee} lamports, got {config.pool_creation_fee}"
        )

    if config.migration_option == MigrationOption.MET_DAMM:
        if not (partner_vesting.is_zero and creator_vesting.is_zero):
            raise InvalidParameter(
                "Liquidity vesting is not supported for MeteoraDamm migration"
            )
    else:
        for side, vesting in (("partner", partner_vesting), ("creator", creator_vesting)):
            reason = get_liquidity_vesting_info_error(vesting)
            if reason is not None:
                raise InvalidParameter(f"Invalid {side} liquidity vesting info: {reason}")

    sqrt_migration_price = get_migration_threshold_price(
        config.migration_quote_threshold, config.sqrt_start_price, config.curve
    )
    if sqrt_migration_price >= protocol.max_sqrt_price:
        raise InvalidParameter(
            f"Migration sqrt price exceeds maximum, got {sqrt_migration_price}"
        )

    if not validate_minimum_locked_liquidity(
        config.partner_permanent_locked_liquidity_percentage,
        config.creator_permanent_locked_liquidity_percentage,
        partner_vesting,
        creator_vesting,
        protocol,
    ):
        locked_bps = calculate_locked_liquidity_bps_at_time(
            config.partner_permanent_locked_liquidity_percentage,
            config.creator_permanent_locked_liquidity_percentage,
            partner_vesting,
            creator_vesting,
            protocol.locked_liquidity_horizon,
        )
        raise InvalidParameter(
            f"Invalid migration locked liquidity. At least {protocol.min_locked_liquidity_bps} "
            f"BPS (10%) must be locked at day 1. Current locked liquidity at day 1: "
            f"{locked_bps} BPS. Consider increasing permanent locked liquidity percentage "
            f"or extending vesting duration/cliff."
        )

    if config.migration_quote_threshold <= 0:
        raise InvalidParameter("Migration quote threshold must be greater than 0")

    if not protocol.min_sqrt_price <= config.sqrt_start_price < protocol.max_sqrt_price:
        raise InvalidParameter(f"Invalid sqrt start price, got {config.sqrt_start_price}")

    reason = get_migrated_pool_fee_error(
        config.migrated_pool_fee, config.migration_option, config.migration_fee_option, protocol
    )
    if reason is not None:
        raise InvalidParameter(f"Invalid migrated pool fee parameters: {reason}")

    if config.migration_option == MigrationOption.MET_DAMM_V2:
        validate_migrated_pool_base_fee_mode(
            config.migrated_pool_base_fee_mode,
            config.migrated_pool_market_cap_fee_scheduler_params,
            config.migration_option,
        )

    reason = get_curve_error(config.curve, config.sqrt_start_price, protocol)
    if reason is not None:
        raise InvalidParameter(f"Invalid curve: {reason}")

    if not validate_locked_vesting(config.locked_vesting):
        raise InvalidParameter(
            f"Invalid vesting parameters: frequency={config.locked_vesting.frequency} "
            f"total={config.locked_vesting.total_amount}"
        )

    if config.token_supply is not None:
        swap_base_amount = get_base_token_for_swap(
            config.sqrt_start_price, sqrt_migration_price, config.curve
        )
        with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
            migration_quote_amount = floor_to_int(
                get_migration_quote_amount_from_migration_quote_threshold(
                    config.migration_quote_threshold, config.migration_fee.fee_percentage
                )
            )
        migration_base_amount = get_migration_base_token(
            migration_quote_amount, sqrt_migration_price, config.migration_option, protocol
        )
        swap_base_amount_buffer = get_swap_amount_with_buffer(
            swap_base_amount, config.sqrt_start_price, config.curve, protocol
        )
        if not validate_token_supply(
            config.token_supply,
            swap_base_amount,
            migration_base_amount,
            config.locked_vesting,
            swap_base_amount_buffer,
        ):
            raise InconsistentConfiguration(
                f"Invalid token supply: pre={config.token_supply.pre_migration_token_supply} "
                f"post={config.token_supply.post_migration_token_supply} "
                f"swap={swap_base_amount} swapWithBuffer={swap_base_amount_buffer} "
                f"migration={migration_base_amount} vesting={config.locked_vesting.total_amount}"
            )

    logger.debug(
        "config_validated",
        segments=len(config.curve),
        migration_quote_threshold=config.migration_quote_threshold,
    )
