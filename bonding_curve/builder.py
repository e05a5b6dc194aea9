"""Curve builders: turn launch targets into a complete ConfigParameters.

Every builder follows the same pipeline:

    draft -> solve curve -> derive fees -> derive vesting -> recompute totals

and either returns an immutable ConfigParameters or raises the first
bonding_curve.errors exception it hits. The builders differ only in how
the curve is shaped:

- build_curve: one segment from a migration percentage and threshold
- build_curve_with_market_cap: one segment from two market caps
- build_curve_with_two_segments: two segments, midpoint chosen heuristically
- build_curve_with_mid_price: two segments split at an explicit price
- build_curve_with_liquidity_weights: sixteen geometric segments
- build_curve_with_custom_sqrt_prices: explicit segment boundaries
- build_curve_with_three_segments: three phases with a token allocation
"""

from __future__ import annotations

import decimal
from dataclasses import dataclass
from decimal import Decimal

import structlog

from bonding_curve.config import DEFAULT_PROTOCOL_CONFIG, ProtocolConfig
from bonding_curve.curves.solvers import (
    get_first_curve,
    get_three_curve,
    get_two_curve,
    get_weighted_curve,
    select_two_curve,
)
from bonding_curve.curves.supply import (
    get_base_token_for_swap,
    get_migration_base_token,
    get_migration_quote_amount,
    get_migration_quote_amount_from_migration_quote_threshold,
    get_migration_quote_threshold_from_migration_quote_amount,
    get_percentage_supply_on_migration,
    get_swap_amount_with_buffer,
    get_total_supply_from_curve,
    get_total_vesting_amount,
)
from bonding_curve.errors import InconsistentConfiguration, InfeasibleCurve, InvalidParameter
from bonding_curve.fees.base_fee import get_base_fee_params, get_starting_base_fee_bps
from bonding_curve.fees.dynamic_fee import get_dynamic_fee_params
from bonding_curve.fees.migrated_pool import (
    get_migrated_pool_fee_params,
    get_migrated_pool_market_cap_fee_scheduler_params,
)
from bonding_curve.math.curve import get_initial_liquidity_from_delta_base
from bonding_curve.math.decimal_utils import (
    DECIMAL_HIGH_PREC_CONTEXT,
    convert_to_lamports,
    decimal_pow,
    floor_to_int,
    to_decimal,
)
from bonding_curve.math.fixed_point import mul_shr
from bonding_curve.math.price import sqrt_price_from_market_cap, sqrt_price_from_price
from bonding_curve.models.enums import DammV2BaseFeeMode
from bonding_curve.models.params import (
    BaseFee,
    ConfigParameters,
    Curve,
    CurvePoint,
    LiquidityVestingInfo,
    LockedVesting,
    MigratedPoolFee,
    MigratedPoolMarketCapFeeSchedulerParams,
    MigrationFee,
    PoolFees,
    TokenSupply,
)
from bonding_curve.models.requests import (
    BuildCurveBaseRequest,
    BuildCurveRequest,
    BuildCurveWithCustomSqrtPricesRequest,
    BuildCurveWithLiquidityWeightsRequest,
    BuildCurveWithMarketCapRequest,
    BuildCurveWithMidPriceRequest,
    BuildCurveWithThreeSegmentsRequest,
    BuildCurveWithTwoSegmentsRequest,
    LiquidityVestingRequest,
)
from bonding_curve.validation import validate_config_parameters
from bonding_curve.vesting.liquidity import get_liquidity_vesting_info_params
from bonding_curve.vesting.locked import get_locked_vesting_params

logger = structlog.get_logger()

__all__ = [
    "build_curve",
    "build_curve_with_market_cap",
    "build_curve_with_two_segments",
    "build_curve_with_mid_price",
    "build_curve_with_liquidity_weights",
    "build_curve_with_custom_sqrt_prices",
    "build_curve_with_three_segments",
]

LIQUIDITY_WEIGHT_SEGMENTS = 16

_MARKET_CAP_SCHEDULER_MODES = (
    DammV2BaseFeeMode.FEE_MARKET_CAP_SCHEDULER_LINEAR,
    DammV2BaseFeeMode.FEE_MARKET_CAP_SCHEDULER_EXPONENTIAL,
)


# =============================================================================
# Shared derivations
# =============================================================================


@dataclass(frozen=True)
class _Draft:
    """Everything a builder derives before shaping the curve."""

    base_fee: BaseFee
    locked_vesting: LockedVesting
    migrated_pool_fee: MigratedPoolFee
    total_supply: int
    total_leftover: int
    total_vesting_amount: int

    @property
    def total_swap_and_migration_amount(self) -> int:
        return self.total_supply - self.total_vesting_amount - self.total_leftover


def _draft(request: BuildCurveBaseRequest, config: ProtocolConfig) -> _Draft:
    base_fee = get_base_fee_params(
        request.base_fee_params,
        request.token_quote_decimal,
        request.activation_type,
        config,
    )
    vesting = request.locked_vesting_param
    locked_vesting = get_locked_vesting_params(
        vesting.total_locked_vesting_amount,
        vesting.number_of_vesting_period,
        vesting.cliff_unlock_amount,
        vesting.total_vesting_duration,
        vesting.cliff_duration_from_migration_time,
        request.token_base_decimal,
    )
    migrated_pool_fee = get_migrated_pool_fee_params(
        request.migration_option, request.migration_fee_option, request.migrated_pool_fee
    )
    return _Draft(
        base_fee=base_fee,
        locked_vesting=locked_vesting,
        migrated_pool_fee=migrated_pool_fee,
        total_supply=convert_to_lamports(request.total_token_supply, request.token_base_decimal),
        total_leftover=convert_to_lamports(request.leftover, request.token_base_decimal),
        total_vesting_amount=get_total_vesting_amount(locked_vesting),
    )


def _liquidity_vesting(
    request: LiquidityVestingRequest | None, config: ProtocolConfig
) -> LiquidityVestingInfo:
    if request is None:
        return LiquidityVestingInfo.zero()
    return get_liquidity_vesting_info_params(
        request.vesting_percentage,
        request.bps_per_period,
        request.number_of_periods,
        request.cliff_duration_from_migration_time,
        request.total_duration,
        config,
    )


def _migrated_pool_scheduler(
    request: BuildCurveBaseRequest, config: ProtocolConfig
) -> MigratedPoolMarketCapFeeSchedulerParams:
    mode = request.migrated_pool_base_fee_mode
    starting_bps = get_starting_base_fee_bps(request.base_fee_params)
    scheduler = request.migrated_pool_market_cap_fee_scheduler_params

    if scheduler is None:
        if mode in _MARKET_CAP_SCHEDULER_MODES:
            raise InvalidParameter(
                f"migratedPoolMarketCapFeeSchedulerParams are required for "
                f"migratedPoolBaseFeeMode {mode.name}"
            )
        # Time modes resolve to the fixed-fee record; the rate limiter raises
        return get_migrated_pool_market_cap_fee_scheduler_params(
            starting_bps, starting_bps, mode, 0, 0, 0, config
        )

    return get_migrated_pool_market_cap_fee_scheduler_params(
        starting_bps,
        scheduler.ending_base_fee_bps,
        mode,
        scheduler.number_of_period,
        scheduler.sqrt_price_step_bps,
        scheduler.scheduler_expiration_duration,
        config,
    )


def _migration_base_amount(
    request: BuildCurveBaseRequest,
    migration_quote_amount: Decimal,
    migration_sqrt_price: int,
    config: ProtocolConfig,
) -> int:
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        quote_lamports = floor_to_int(
            migration_quote_amount * (Decimal(10) ** request.token_quote_decimal)
        )
    return get_migration_base_token(
        quote_lamports, migration_sqrt_price, request.migration_option, config
    )


def _check_leftover(
    request: BuildCurveBaseRequest,
    draft: _Draft,
    migration_quote_threshold: int,
    sqrt_start_price: int,
    curve: Curve,
    config: ProtocolConfig,
) -> int:
    """Recompute the supply the solved curve implies and bound the rounding excess.

    Returns:
        The implied total supply, in base lamports

    Raises:
        InconsistentConfiguration: If the curve needs at least the whole
            leftover more than the requested supply
    """
    total_dynamic_supply = get_total_supply_from_curve(
        migration_quote_threshold,
        sqrt_start_price,
        curve,
        draft.locked_vesting,
        request.migration_option,
        draft.total_leftover,
        request.migration_fee.fee_percentage,
        config,
    )

    if total_dynamic_supply > draft.total_supply:
        leftover_delta = total_dynamic_supply - draft.total_supply
        if leftover_delta >= draft.total_leftover:
            raise InconsistentConfiguration(
                f"leftOverDelta must be less than totalLeftover, got leftOverDelta="
                f"{leftover_delta} totalLeftover={draft.total_leftover}"
            )
        logger.debug(
            "leftover_delta_within_tolerance",
            leftover_delta=leftover_delta,
            total_leftover=draft.total_leftover,
        )
    return total_dynamic_supply


def _assemble(
    request: BuildCurveBaseRequest,
    draft: _Draft,
    sqrt_start_price: int,
    curve: Curve,
    migration_quote_threshold: int,
    builder: str,
    validate: bool,
    config: ProtocolConfig,
) -> ConfigParameters:
    dynamic_fee = None
    if request.dynamic_fee_enabled:
        dynamic_fee = get_dynamic_fee_params(
            get_starting_base_fee_bps(request.base_fee_params), config=config
        )

    result = ConfigParameters(
        pool_fees=PoolFees(base_fee=draft.base_fee, dynamic_fee=dynamic_fee),
        collect_fee_mode=request.collect_fee_mode,
        activation_type=request.activation_type,
        migration_option=request.migration_option,
        token_type=request.token_type,
        token_decimal=int(request.token_base_decimal),
        migration_quote_threshold=migration_quote_threshold,
        partner_liquidity_percentage=request.partner_liquidity_percentage,
        partner_permanent_locked_liquidity_percentage=(
            request.partner_permanent_locked_liquidity_percentage
        ),
        creator_liquidity_percentage=request.creator_liquidity_percentage,
        creator_permanent_locked_liquidity_percentage=(
            request.creator_permanent_locked_liquidity_percentage
        ),
        sqrt_start_price=sqrt_start_price,
        locked_vesting=draft.locked_vesting,
        migration_fee_option=request.migration_fee_option,
        token_supply=TokenSupply(
            pre_migration_token_supply=draft.total_supply,
            post_migration_token_supply=draft.total_supply,
        ),
        creator_trading_fee_percentage=request.creator_trading_fee_percentage,
        token_update_authority=request.token_update_authority,
        migration_fee=MigrationFee(
            fee_percentage=request.migration_fee.fee_percentage,
            creator_fee_percentage=request.migration_fee.creator_fee_percentage,
        ),
        migrated_pool_fee=draft.migrated_pool_fee,
        curve=tuple(curve),
        pool_creation_fee=request.pool_creation_fee,
        enable_first_swap_with_min_fee=request.enable_first_swap_with_min_fee,
        migrated_pool_base_fee_mode=request.migrated_pool_base_fee_mode,
        migrated_pool_market_cap_fee_scheduler_params=_migrated_pool_scheduler(request, config),
        partner_liquidity_vesting_info=_liquidity_vesting(
            request.partner_liquidity_vesting_info_params, config
        ),
        creator_liquidity_vesting_info=_liquidity_vesting(
            request.creator_liquidity_vesting_info_params, config
        ),
    )

    if validate:
        validate_config_parameters(result, config)

    logger.debug(
        "config_built",
        builder=builder,
        segments=len(result.curve),
        sqrt_start_price=sqrt_start_price,
        migration_quote_threshold=migration_quote_threshold,
        validated=validate,
    )
    return result


# =============================================================================
# Single segment
# =============================================================================


def build_curve(
    request: BuildCurveRequest,
    validate: bool = False,
    config: ProtocolConfig | None = None,
) -> ConfigParameters:
    """Build a single-segment curve from a migration percentage and threshold.

    The migration price is the quote left after the migration fee divided
    by the base supply reserved for migration. Supply the single segment
    cannot absorb goes into a tail segment up to MAX_SQRT_PRICE.

    Args:
        request: Build targets
        validate: Run validate_config_parameters on the result
        config: Protocol bounds (defaults to DEFAULT_PROTOCOL_CONFIG)

    Returns:
        Assembled ConfigParameters

    Raises:
        InvalidParameter: On out-of-range inputs
        InconsistentConfiguration: If the curve implies more supply than requested
    """
    config = config or DEFAULT_PROTOCOL_CONFIG
    draft = _draft(request, config)
    fee_percentage = request.migration_fee.fee_percentage

    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        migration_base_supply = (
            request.total_token_supply * request.percentage_supply_on_migration / 100
        )
        if migration_base_supply <= 0:
            raise InvalidParameter(
                f"percentageSupplyOnMigration must be greater than 0, "
                f"got {request.percentage_supply_on_migration}"
            )
        migration_quote_amount = get_migration_quote_amount_from_migration_quote_threshold(
            request.migration_quote_threshold, fee_percentage
        )
        migration_price = migration_quote_amount / migration_base_supply

    migration_quote_threshold = convert_to_lamports(
        request.migration_quote_threshold, request.token_quote_decimal
    )
    migration_sqrt_price = sqrt_price_from_price(
        migration_price, request.token_base_decimal, request.token_quote_decimal
    )
    migration_base_amount = _migration_base_amount(
        request, migration_quote_amount, migration_sqrt_price, config
    )
    swap_amount = draft.total_swap_and_migration_amount - migration_base_amount

    solution = get_first_curve(
        migration_sqrt_price,
        migration_base_amount,
        swap_amount,
        migration_quote_threshold,
        fee_percentage,
    )
    curve = list(solution.curve)

    total_dynamic_supply = get_total_supply_from_curve(
        migration_quote_threshold,
        solution.sqrt_start_price,
        solution.curve,
        draft.locked_vesting,
        request.migration_option,
        draft.total_leftover,
        fee_percentage,
        config,
    )
    remaining_amount = draft.total_supply - total_dynamic_supply

    if remaining_amount > 0:
        last_liquidity = get_initial_liquidity_from_delta_base(
            remaining_amount, config.max_sqrt_price, migration_sqrt_price
        )
        if last_liquidity != 0:
            curve.append(CurvePoint(config.max_sqrt_price, last_liquidity))
    elif remaining_amount < 0:
        _check_leftover(
            request, draft, migration_quote_threshold, solution.sqrt_start_price,
            solution.curve, config,
        )

    return _assemble(
        request,
        draft,
        solution.sqrt_start_price,
        tuple(curve),
        migration_quote_threshold,
        "build_curve",
        validate,
        config,
    )


def build_curve_with_market_cap(
    request: BuildCurveWithMarketCapRequest,
    validate: bool = False,
    config: ProtocolConfig | None = None,
) -> ConfigParameters:
    """Build a single-segment curve from initial and migration market caps.

    The migration percentage and quote threshold are derived so that the
    curve starts at initial_market_cap and migrates at migration_market_cap,
    then build_curve does the rest.
    """
    config = config or DEFAULT_PROTOCOL_CONFIG
    vesting = request.locked_vesting_param
    locked_vesting = get_locked_vesting_params(
        vesting.total_locked_vesting_amount,
        vesting.number_of_vesting_period,
        vesting.cliff_unlock_amount,
        vesting.total_vesting_duration,
        vesting.cliff_duration_from_migration_time,
        request.token_base_decimal,
    )

    percentage_supply_on_migration = get_percentage_supply_on_migration(
        request.initial_market_cap,
        request.migration_market_cap,
        locked_vesting,
        convert_to_lamports(request.leftover, request.token_base_decimal),
        convert_to_lamports(request.total_token_supply, request.token_base_decimal),
    )
    migration_quote_amount = get_migration_quote_amount(
        request.migration_market_cap, percentage_supply_on_migration
    )
    migration_quote_threshold = get_migration_quote_threshold_from_migration_quote_amount(
        migration_quote_amount, request.migration_fee.fee_percentage
    )

    logger.debug(
        "market_cap_targets_derived",
        percentage_supply_on_migration=str(percentage_supply_on_migration),
        migration_quote_threshold=str(migration_quote_threshold),
    )

    fields = request.model_dump(exclude={"initial_market_cap", "migration_market_cap"})
    curve_request = BuildCurveRequest.model_validate(
        {
            **fields,
            "percentage_supply_on_migration": percentage_supply_on_migration,
            "migration_quote_threshold": migration_quote_threshold,
        }
    )
    return build_curve(curve_request, validate=validate, config=config)


# =============================================================================
# Two segments
# =============================================================================


@dataclass(frozen=True)
class _MarketCapTargets:
    migration_quote_threshold: int
    migration_sqrt_price: int
    initial_sqrt_price: int
    swap_amount: int


def _two_segment_targets(
    request: BuildCurveWithTwoSegmentsRequest, draft: _Draft, config: ProtocolConfig
) -> _MarketCapTargets:
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        migration_base_supply = floor_to_int(
            request.total_token_supply * request.percentage_supply_on_migration / 100
        )
        if migration_base_supply <= 0:
            raise InvalidParameter(
                f"percentageSupplyOnMigration must be greater than 0, "
                f"got {request.percentage_supply_on_migration}"
            )
        migration_quote_amount = get_migration_quote_amount(
            request.migration_market_cap, request.percentage_supply_on_migration
        )
        migration_quote_threshold = get_migration_quote_threshold_from_migration_quote_amount(
            migration_quote_amount, request.migration_fee.fee_percentage
        )
        migration_price = migration_quote_amount / migration_base_supply
        threshold_lamports = floor_to_int(
            migration_quote_threshold * (Decimal(10) ** request.token_quote_decimal)
        )

    migration_sqrt_price = sqrt_price_from_price(
        migration_price, request.token_base_decimal, request.token_quote_decimal
    )
    migration_base_amount = _migration_base_amount(
        request, migration_quote_amount, migration_sqrt_price, config
    )
    initial_sqrt_price = sqrt_price_from_market_cap(
        request.initial_market_cap,
        request.total_token_supply,
        request.token_base_decimal,
        request.token_quote_decimal,
    )
    return _MarketCapTargets(
        migration_quote_threshold=threshold_lamports,
        migration_sqrt_price=migration_sqrt_price,
        initial_sqrt_price=initial_sqrt_price,
        swap_amount=draft.total_swap_and_migration_amount - migration_base_amount,
    )


def build_curve_with_two_segments(
    request: BuildCurveWithTwoSegmentsRequest,
    validate: bool = False,
    config: ProtocolConfig | None = None,
) -> ConfigParameters:
    """Build a two-segment curve between the initial and migration market caps.

    The midpoint is the first feasible of three geometric candidates
    between the two prices.

    Raises:
        InfeasibleCurve: If no candidate midpoint gives non-negative liquidities
        InconsistentConfiguration: If the curve implies more supply than requested
    """
    config = config or DEFAULT_PROTOCOL_CONFIG
    draft = _draft(request, config)
    targets = _two_segment_targets(request, draft, config)

    solution = select_two_curve(
        targets.migration_sqrt_price,
        targets.initial_sqrt_price,
        targets.swap_amount,
        targets.migration_quote_threshold,
    )
    _check_leftover(
        request, draft, targets.migration_quote_threshold, solution.sqrt_start_price,
        solution.curve, config,
    )
    return _assemble(
        request,
        draft,
        solution.sqrt_start_price,
        solution.curve,
        targets.migration_quote_threshold,
        "build_curve_with_two_segments",
        validate,
        config,
    )


def build_curve_with_mid_price(
    request: BuildCurveWithMidPriceRequest,
    validate: bool = False,
    config: ProtocolConfig | None = None,
) -> ConfigParameters:
    """Build a two-segment curve split at an explicit mid price.

    Raises:
        InfeasibleCurve: If the mid price forces a negative liquidity
        InconsistentConfiguration: If the curve implies more supply than requested
    """
    config = config or DEFAULT_PROTOCOL_CONFIG
    draft = _draft(request, config)
    targets = _two_segment_targets(request, draft, config)

    mid_sqrt_price = sqrt_price_from_price(
        request.mid_price, request.token_base_decimal, request.token_quote_decimal
    )
    solution = get_two_curve(
        targets.migration_sqrt_price,
        mid_sqrt_price,
        targets.initial_sqrt_price,
        targets.swap_amount,
        targets.migration_quote_threshold,
    )
    if not solution.is_ok:
        raise InfeasibleCurve(
            f"No feasible two-segment curve at mid price {request.mid_price}: {solution.error}"
        )

    _check_leftover(
        request, draft, targets.migration_quote_threshold, solution.sqrt_start_price,
        solution.curve, config,
    )
    return _assemble(
        request,
        draft,
        solution.sqrt_start_price,
        solution.curve,
        targets.migration_quote_threshold,
        "build_curve_with_mid_price",
        validate,
        config,
    )


# =============================================================================
# Weighted segments
# =============================================================================


def _build_weighted(
    request: BuildCurveBaseRequest,
    sqrt_prices: list[int],
    liquidity_weights: list[Decimal],
    builder: str,
    validate: bool,
    config: ProtocolConfig,
    migration_sqrt_price: int | None = None,
) -> ConfigParameters:
    """Shared tail of the weighted builders.

    The curve is solved for the combined swap and migration amount; the
    threshold then follows from what is left for migration after the
    buffered swap amount, priced at the last boundary.
    """
    draft = _draft(request, config)
    total_swap_and_migration_amount = draft.total_swap_and_migration_amount
    fee_percentage = request.migration_fee.fee_percentage
    p_min = sqrt_prices[0]
    p_max = sqrt_prices[-1] if migration_sqrt_price is None else migration_sqrt_price

    solution = get_weighted_curve(
        sqrt_prices,
        liquidity_weights,
        total_swap_and_migration_amount,
        fee_percentage,
        migration_sqrt_price=p_max,
    )

    swap_base_amount = get_base_token_for_swap(p_min, p_max, solution.curve)
    swap_base_amount_buffer = get_swap_amount_with_buffer(
        swap_base_amount, p_min, solution.curve, config
    )
    migration_amount = total_swap_and_migration_amount - swap_base_amount_buffer
    if migration_amount <= 0:
        raise InconsistentConfiguration(
            f"Buffered swap amount ({swap_base_amount_buffer}) leaves no base tokens "
            f"for migration out of {total_swap_and_migration_amount}"
        )

    migration_quote_amount = mul_shr(migration_amount, p_max * p_max, 128)
    migration_quote_threshold = floor_to_int(
        get_migration_quote_threshold_from_migration_quote_amount(
            migration_quote_amount, fee_percentage
        )
    )

    _check_leftover(request, draft, migration_quote_threshold, p_min, solution.curve, config)
    return _assemble(
        request,
        draft,
        p_min,
        solution.curve,
        migration_quote_threshold,
        builder,
        validate,
        config,
    )


def build_curve_with_liquidity_weights(
    request: BuildCurveWithLiquidityWeightsRequest,
    validate: bool = False,
    config: ProtocolConfig | None = None,
) -> ConfigParameters:
    """Build sixteen geometric segments with relative liquidity weights.

    Boundaries are p_min * q^i with q = (p_max / p_min)^(1/16), floored at
    each step. The computed boundaries shape the weighted sum; the last
    segment is emitted at p_max itself.

    Raises:
        InvalidParameter: Unless exactly sixteen positive weights are given
    """
    config = config or DEFAULT_PROTOCOL_CONFIG
    if len(request.liquidity_weights) != LIQUIDITY_WEIGHT_SEGMENTS:
        raise InvalidParameter(
            f"liquidityWeights must have exactly {LIQUIDITY_WEIGHT_SEGMENTS} entries, "
            f"got {len(request.liquidity_weights)}"
        )

    p_min = sqrt_price_from_market_cap(
        request.initial_market_cap,
        request.total_token_supply,
        request.token_base_decimal,
        request.token_quote_decimal,
    )
    p_max = sqrt_price_from_market_cap(
        request.migration_market_cap,
        request.total_token_supply,
        request.token_base_decimal,
        request.token_quote_decimal,
    )
    if p_max <= p_min:
        raise InvalidParameter(
            f"migrationMarketCap ({request.migration_market_cap}) must be greater than "
            f"initialMarketCap ({request.initial_market_cap})"
        )

    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        q = decimal_pow(Decimal(p_max) / Decimal(p_min), Decimal(1) / LIQUIDITY_WEIGHT_SEGMENTS)
        sqrt_prices = [p_min]
        for _ in range(LIQUIDITY_WEIGHT_SEGMENTS):
            sqrt_prices.append(floor_to_int(q * sqrt_prices[-1]))

    return _build_weighted(
        request,
        sqrt_prices,
        list(request.liquidity_weights),
        "build_curve_with_liquidity_weights",
        validate,
        config,
        migration_sqrt_price=p_max,
    )


def build_curve_with_custom_sqrt_prices(
    request: BuildCurveWithCustomSqrtPricesRequest,
    validate: bool = False,
    config: ProtocolConfig | None = None,
) -> ConfigParameters:
    """Build segments over explicit sqrt price boundaries.

    The first price is the start price and the last is where migration
    happens. Without weights, liquidity is spread evenly.

    Raises:
        InvalidParameter: On fewer than two prices, a non-ascending price,
            or a weight count other than len(sqrt_prices) - 1
    """
    config = config or DEFAULT_PROTOCOL_CONFIG
    sqrt_prices = list(request.sqrt_prices)

    if len(sqrt_prices) < 2:
        raise InvalidParameter("sqrtPrices array must have at least 2 elements")
    for i in range(1, len(sqrt_prices)):
        if sqrt_prices[i] <= sqrt_prices[i - 1]:
            raise InvalidParameter("sqrtPrices must be in ascending order")

    if request.liquidity_weights is None:
        liquidity_weights = [Decimal(1)] * (len(sqrt_prices) - 1)
    elif len(request.liquidity_weights) != len(sqrt_prices) - 1:
        raise InvalidParameter("liquidityWeights length must equal sqrtPrices.length - 1")
    else:
        liquidity_weights = list(request.liquidity_weights)

    return _build_weighted(
        request,
        sqrt_prices,
        liquidity_weights,
        "build_curve_with_custom_sqrt_prices",
        validate,
        config,
    )


# =============================================================================
# Three segments
# =============================================================================


def build_curve_with_three_segments(
    request: BuildCurveWithThreeSegmentsRequest,
    validate: bool = False,
    config: ProtocolConfig | None = None,
) -> ConfigParameters:
    """Build three phases with explicit end prices and a token allocation.

    Phase boundaries are the initial price, phase1_end_price,
    phase2_end_price and the migration price. token_allocation gives the
    percentage of supply sold in each phase and must sum to 100.

    Raises:
        InvalidParameter: On a bad allocation or non-ascending phase prices
        InfeasibleCurve: If the phases cannot all carry positive liquidity
        InconsistentConfiguration: If the curve implies more supply than requested
    """
    config = config or DEFAULT_PROTOCOL_CONFIG

    allocation = list(request.token_allocation)
    if sum(allocation) != 100:
        raise InvalidParameter(f"Token allocation must sum to 100, got {sum(allocation)}")
    if any(share <= 0 for share in allocation):
        raise InvalidParameter(
            f"Token allocation entries must be greater than 0, got {allocation}"
        )

    if request.total_token_supply <= 0:
        raise InvalidParameter(
            f"Total token supply must be greater than 0, got {request.total_token_supply}"
        )
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        initial_price = request.initial_market_cap / request.total_token_supply
        migration_price = request.migration_market_cap / request.total_token_supply
    phase1_end_price = to_decimal(request.phase1_end_price)
    phase2_end_price = to_decimal(request.phase2_end_price)

    if phase1_end_price <= initial_price:
        raise InvalidParameter(
            f"phase1EndPrice ({phase1_end_price}) must be greater than initial price "
            f"({initial_price})"
        )
    if phase2_end_price <= phase1_end_price:
        raise InvalidParameter(
            f"phase2EndPrice ({phase2_end_price}) must be greater than phase1EndPrice "
            f"({phase1_end_price})"
        )
    if phase2_end_price >= migration_price:
        raise InvalidParameter(
            f"phase2EndPrice ({phase2_end_price}) must be less than migration price "
            f"({migration_price}). Increase migrationMarketCap or decrease phase2EndPrice."
        )

    draft = _draft(request, config)
    base_decimals = request.token_base_decimal
    quote_decimals = request.token_quote_decimal

    initial_sqrt_price = sqrt_price_from_market_cap(
        request.initial_market_cap, request.total_token_supply, base_decimals, quote_decimals
    )
    migration_sqrt_price = sqrt_price_from_market_cap(
        request.migration_market_cap, request.total_token_supply, base_decimals, quote_decimals
    )
    phase1_sqrt_price = sqrt_price_from_price(phase1_end_price, base_decimals, quote_decimals)
    phase2_sqrt_price = sqrt_price_from_price(phase2_end_price, base_decimals, quote_decimals)

    percentage_supply_on_migration = get_percentage_supply_on_migration(
        request.initial_market_cap,
        request.migration_market_cap,
        draft.locked_vesting,
        draft.total_leftover,
        draft.total_supply,
    )
    migration_quote_amount = get_migration_quote_amount(
        request.migration_market_cap, percentage_supply_on_migration
    )
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        migration_quote_threshold = floor_to_int(
            get_migration_quote_threshold_from_migration_quote_amount(
                migration_quote_amount, request.migration_fee.fee_percentage
            )
            * (Decimal(10) ** quote_decimals)
        )
    migration_base_amount = _migration_base_amount(
        request, migration_quote_amount, migration_sqrt_price, config
    )
    swap_amount = draft.total_swap_and_migration_amount - migration_base_amount

    solution = get_three_curve(
        initial_sqrt_price,
        phase1_sqrt_price,
        phase2_sqrt_price,
        migration_sqrt_price,
        swap_amount,
        migration_quote_threshold,
        allocation,
    )
    if not solution.is_ok:
        raise InfeasibleCurve(f"Failed to build 3-phase curve: {solution.error}")

    _check_leftover(
        request, draft, migration_quote_threshold, solution.sqrt_start_price,
        solution.curve, config,
    )
    return _assemble(
        request,
        draft,
        solution.sqrt_start_price,
        solution.curve,
        migration_quote_threshold,
        "build_curve_with_three_segments",
        validate,
        config,
    )
