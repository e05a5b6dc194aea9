"""Supply and migration accounting over a solved curve.

These functions re-derive every dependent quantity of a configuration from
the curve itself: how much base the curve sells up to the migration price,
how much base the migrated pool needs, and the resulting total supply.
Builders use them to size the curve and validators use them to reconcile
totals.

Amounts are lamports (int) unless the name says otherwise; human-facing
quantities (market caps, percentages, whole-token quote amounts) are Decimal.
"""

from __future__ import annotations

import decimal
from dataclasses import dataclass
from decimal import Decimal

from bonding_curve.config import DEFAULT_PROTOCOL_CONFIG, ProtocolConfig
from bonding_curve.constants import MAX_BASIS_POINT
from bonding_curve.errors import InsufficientLiquidity, InvalidParameter
from bonding_curve.math.curve import (
    get_delta_amount_base_unsigned,
    get_delta_amount_quote_unsigned,
    get_initial_liquidity_from_delta_quote,
    get_next_sqrt_price_from_input,
)
from bonding_curve.math.decimal_utils import (
    DECIMAL_HIGH_PREC_CONTEXT,
    Numeric,
    floor_to_int,
    to_decimal,
)
from bonding_curve.math.fixed_point import mul_div
from bonding_curve.models.enums import MigrationOption, Rounding
from bonding_curve.models.params import CurvePoint, LockedVesting
from bonding_curve.safe_int import S

__all__ = [
    "CurveBreakdown",
    "Tokenomics",
    "get_base_token_for_swap",
    "get_migration_quote_amount_from_migration_quote_threshold",
    "get_migration_quote_threshold_from_migration_quote_amount",
    "get_protocol_migration_fee",
    "get_migration_base_token",
    "get_total_vesting_amount",
    "get_total_token_supply",
    "get_swap_amount_with_buffer",
    "get_migration_threshold_price",
    "get_total_supply_from_curve",
    "get_percentage_supply_on_migration",
    "calculate_adjusted_percentage_supply_on_migration",
    "get_migration_quote_amount",
    "get_curve_breakdown",
    "get_tokenomics",
    "get_quote_reserve_from_next_sqrt_price",
]


@dataclass(frozen=True)
class CurveBreakdown:
    """Quote amount absorbed by each segment up to the migration threshold.

    Attributes:
        segment_amounts: Quote lamports per segment (zero past the migration point)
        final_sqrt_price: Sqrt price at which the threshold is reached
        total_amount: Sum of segment_amounts
    """

    segment_amounts: tuple[int, ...]
    final_sqrt_price: int
    total_amount: int


@dataclass(frozen=True)
class Tokenomics:
    """Split of the total supply between curve, migration, leftover and vesting."""

    bonding_curve_supply: int
    migration_supply: int
    leftover_supply: int
    locked_vesting_supply: int


# =============================================================================
# Curve walks
# =============================================================================


def get_base_token_for_swap(
    sqrt_start_price: int, sqrt_migration_price: int, curve: tuple[CurvePoint, ...]
) -> int:
    """Base lamports the curve sells between the start and migration price.

    Segment amounts round up; the walk stops at the segment containing
    the migration price.
    """
    total = 0
    for i, point in enumerate(curve):
        lower = sqrt_start_price if i == 0 else curve[i - 1].sqrt_price
        if point.sqrt_price > sqrt_migration_price:
            total += get_delta_amount_base_unsigned(
                lower, sqrt_migration_price, point.liquidity, Rounding.UP
            )
            break
        total += get_delta_amount_base_unsigned(
            lower, point.sqrt_price, point.liquidity, Rounding.UP
        )
    return total


def get_migration_threshold_price(
    migration_threshold: int, sqrt_start_price: int, curve: tuple[CurvePoint, ...]
) -> int:
    """Sqrt price at which the curve has absorbed migration_threshold quote.

    Args:
        migration_threshold: Quote lamports needed to migrate
        sqrt_start_price: Curve start price
        curve: Curve segments

    Returns:
        The migration sqrt price

    Raises:
        InvalidParameter: If the curve is empty
        InsufficientLiquidity: If the curve cannot absorb the threshold
    """
    if not curve:
        raise InvalidParameter("Curve is empty")

    next_sqrt_price = sqrt_start_price
    first = curve[0]
    total_amount = get_delta_amount_quote_unsigned(
        next_sqrt_price, first.sqrt_price, first.liquidity, Rounding.UP
    )
    if total_amount > migration_threshold:
        return get_next_sqrt_price_from_input(
            next_sqrt_price, first.liquidity, migration_threshold, False
        )

    amount_left = migration_threshold - total_amount
    next_sqrt_price = first.sqrt_price
    for point in curve[1:]:
        max_amount = get_delta_amount_quote_unsigned(
            next_sqrt_price, point.sqrt_price, point.liquidity, Rounding.UP
        )
        if max_amount > amount_left:
            next_sqrt_price = get_next_sqrt_price_from_input(
                next_sqrt_price, point.liquidity, amount_left, False
            )
            amount_left = 0
            break
        amount_left -= max_amount
        next_sqrt_price = point.sqrt_price

    if amount_left != 0:
        raise InsufficientLiquidity(
            f"Not enough liquidity, migrationThreshold: {migration_threshold} "
            f"amountLeft: {amount_left}"
        )
    return next_sqrt_price


def get_curve_breakdown(
    migration_quote_threshold: int, sqrt_start_price: int, curve: tuple[CurvePoint, ...]
) -> CurveBreakdown:
    """Allocate the migration threshold across curve segments.

    Raises:
        InvalidParameter: If the curve is empty
        InsufficientLiquidity: If the segments cannot absorb the threshold
    """
    if not curve:
        raise InvalidParameter("Curve is empty")

    amounts: list[int] = []
    allocated = 0
    current = sqrt_start_price
    final_sqrt_price = sqrt_start_price

    for point in curve:
        remaining = migration_quote_threshold - allocated
        max_segment_amount = get_delta_amount_quote_unsigned(
            current, point.sqrt_price, point.liquidity, Rounding.UP
        )
        if max_segment_amount >= remaining:
            amounts.append(remaining)
            allocated += remaining
            final_sqrt_price = get_next_sqrt_price_from_input(
                current, point.liquidity, remaining, False
            )
            break
        amounts.append(max_segment_amount)
        allocated += max_segment_amount
        current = point.sqrt_price
        final_sqrt_price = current

    if allocated < migration_quote_threshold:
        shortfall = migration_quote_threshold - allocated
        raise InsufficientLiquidity(
            f"Not enough liquidity in curve. Total allocated: {allocated}, "
            f"Required: {migration_quote_threshold}, Shortfall: {shortfall}"
        )

    amounts.extend([0] * (len(curve) - len(amounts)))
    return CurveBreakdown(
        segment_amounts=tuple(amounts),
        final_sqrt_price=final_sqrt_price,
        total_amount=allocated,
    )


def get_quote_reserve_from_next_sqrt_price(
    next_sqrt_price: int, sqrt_start_price: int, curve: tuple[CurvePoint, ...]
) -> int:
    """Quote lamports held by the pool once the price reaches next_sqrt_price."""
    total = 0
    for i, point in enumerate(curve):
        lower = sqrt_start_price if i == 0 else curve[i - 1].sqrt_price
        if next_sqrt_price > lower:
            upper = min(next_sqrt_price, point.sqrt_price)
            total += get_delta_amount_quote_unsigned(lower, upper, point.liquidity, Rounding.UP)
    return total


# =============================================================================
# Migration amounts
# =============================================================================


def get_migration_quote_amount_from_migration_quote_threshold(
    migration_quote_threshold: Numeric, migration_fee_percent: Numeric
) -> Decimal:
    """Quote deposited into the migrated pool after the migration fee."""
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return (
            to_decimal(migration_quote_threshold)
            * (100 - to_decimal(migration_fee_percent))
            / 100
        )


def get_migration_quote_threshold_from_migration_quote_amount(
    migration_quote_amount: Numeric, migration_fee_percent: Numeric
) -> Decimal:
    """Curve threshold that leaves migration_quote_amount after the migration fee."""
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return (
            to_decimal(migration_quote_amount)
            * 100
            / (100 - to_decimal(migration_fee_percent))
        )


def get_migration_quote_amount(
    migration_market_cap: Numeric, percentage_supply_on_migration: Numeric
) -> Decimal:
    """Quote value of the migrated supply at the migration market cap."""
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return to_decimal(migration_market_cap) * to_decimal(percentage_supply_on_migration) / 100


def get_migration_base_token(
    migration_quote_amount: int,
    sqrt_migration_price: int,
    migration_option: MigrationOption,
    config: ProtocolConfig | None = None,
) -> int:
    """Base lamports the migrated pool needs to pair with migration_quote_amount.

    DAMM v1 pairs at the spot price, rounding up. DAMM v2 provisions full
    range liquidity from the quote side and takes the base delta above the
    migration price.

    Raises:
        InvalidParameter: If migration_option is unknown
    """
    config = config or DEFAULT_PROTOCOL_CONFIG

    if migration_option == MigrationOption.MET_DAMM:
        price = S(sqrt_migration_price) * sqrt_migration_price
        return (S(migration_quote_amount) << 128).ceiling_div(price).value

    if migration_option == MigrationOption.MET_DAMM_V2:
        liquidity = get_initial_liquidity_from_delta_quote(
            migration_quote_amount, config.min_sqrt_price, sqrt_migration_price
        )
        return get_delta_amount_base_unsigned(
            sqrt_migration_price, config.max_sqrt_price, liquidity, Rounding.UP
        )

    raise InvalidParameter(f"Invalid migration option: {migration_option}")


def get_protocol_migration_fee(
    deposit_base_amount: int,
    deposit_quote_amount: int,
    migration_sqrt_price: int,
    migration_fee_bps: int,
    migration_option: MigrationOption,
    config: ProtocolConfig | None = None,
) -> tuple[int, int]:
    """Protocol fee taken from the migration deposit.

    Returns:
        (base_fee_amount, quote_fee_amount), both rounded down

    Raises:
        InvalidParameter: If migration_option is unknown
    """
    config = config or DEFAULT_PROTOCOL_CONFIG
    quote_fee = mul_div(deposit_quote_amount, migration_fee_bps, MAX_BASIS_POINT, Rounding.DOWN)

    if migration_option == MigrationOption.MET_DAMM:
        base_fee = mul_div(deposit_base_amount, migration_fee_bps, MAX_BASIS_POINT, Rounding.DOWN)
        return base_fee, quote_fee

    if migration_option == MigrationOption.MET_DAMM_V2:
        fee_liquidity = get_initial_liquidity_from_delta_quote(
            quote_fee, config.min_sqrt_price, migration_sqrt_price
        )
        base_fee = get_delta_amount_base_unsigned(
            migration_sqrt_price, config.max_sqrt_price, fee_liquidity, Rounding.DOWN
        )
        return base_fee, quote_fee

    raise InvalidParameter(f"Invalid migration option: {migration_option}")


# =============================================================================
# Supply totals
# =============================================================================


def get_total_vesting_amount(locked_vesting: LockedVesting) -> int:
    return locked_vesting.cliff_unlock_amount + (
        locked_vesting.amount_per_period * locked_vesting.number_of_period
    )


def get_total_token_supply(
    swap_base_amount: int, migration_base_threshold: int, locked_vesting: LockedVesting
) -> int:
    """Swap, migration and vesting amounts summed.

    Raises:
        U64Overflow: If the total does not fit u64
    """
    total = S(swap_base_amount) + migration_base_threshold + get_total_vesting_amount(
        locked_vesting
    )
    return total.to_u64()


def get_swap_amount_with_buffer(
    swap_base_amount: int,
    sqrt_start_price: int,
    curve: tuple[CurvePoint, ...],
    config: ProtocolConfig | None = None,
) -> int:
    """Swap amount inflated by the safety buffer, capped at what the curve can sell."""
    config = config or DEFAULT_PROTOCOL_CONFIG
    buffered = swap_base_amount + swap_base_amount * config.swap_buffer_percentage // 100
    max_base_on_curve = get_base_token_for_swap(sqrt_start_price, config.max_sqrt_price, curve)
    return min(buffered, max_base_on_curve)


def get_total_supply_from_curve(
    migration_quote_threshold: int,
    sqrt_start_price: int,
    curve: tuple[CurvePoint, ...],
    locked_vesting: LockedVesting,
    migration_option: MigrationOption,
    leftover: int,
    migration_fee_percent: Numeric,
    config: ProtocolConfig | None = None,
) -> int:
    """Minimum total supply (buffered swap + migration + vesting + leftover) a curve implies."""
    sqrt_migration_price = get_migration_threshold_price(
        migration_quote_threshold, sqrt_start_price, curve
    )
    swap_base_amount = get_base_token_for_swap(sqrt_start_price, sqrt_migration_price, curve)
    swap_base_amount_buffer = get_swap_amount_with_buffer(
        swap_base_amount, sqrt_start_price, curve, config
    )
    migration_quote_amount = get_migration_quote_amount_from_migration_quote_threshold(
        migration_quote_threshold, migration_fee_percent
    )
    migration_base_amount = get_migration_base_token(
        floor_to_int(migration_quote_amount), sqrt_migration_price, migration_option, config
    )
    return (
        swap_base_amount_buffer
        + migration_base_amount
        + get_total_vesting_amount(locked_vesting)
        + leftover
    )


# =============================================================================
# Market cap splits
# =============================================================================


def _supply_percentages(
    total_vesting_amount: int, total_leftover: int, total_token_supply: int
) -> tuple[Decimal, Decimal]:
    if total_token_supply <= 0:
        raise InvalidParameter(f"Total token supply must be greater than 0, got {total_token_supply}")
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        supply = Decimal(total_token_supply)
        return (
            Decimal(total_vesting_amount) * 100 / supply,
            Decimal(total_leftover) * 100 / supply,
        )


def get_percentage_supply_on_migration(
    initial_market_cap: Numeric,
    migration_market_cap: Numeric,
    locked_vesting: LockedVesting,
    total_leftover: int,
    total_token_supply: int,
) -> Decimal:
    """Percentage of supply paired in the migrated pool.

    With r = sqrt(initial_mc / migration_mc), the curve and the migrated
    pool price the same supply consistently when

        x = r * (100 - vesting% - leftover%) / (1 + r)
    """
    vesting_pct, leftover_pct = _supply_percentages(
        get_total_vesting_amount(locked_vesting), total_leftover, total_token_supply
    )
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        sqrt_ratio = (to_decimal(initial_market_cap) / to_decimal(migration_market_cap)).sqrt()
        numerator = 100 * sqrt_ratio - (vesting_pct + leftover_pct) * sqrt_ratio
        return numerator / (1 + sqrt_ratio)


def calculate_adjusted_percentage_supply_on_migration(
    initial_market_cap: Numeric,
    migration_market_cap: Numeric,
    migration_fee_percentage: Numeric,
    locked_vesting: LockedVesting,
    total_leftover: int,
    total_token_supply: int,
) -> Decimal:
    """Migration percentage that still reaches initial_market_cap after the migration fee.

        x = r * (1 - f) * (100 - V - L) / (1 + r * (1 - f))
    """
    vesting_pct, leftover_pct = _supply_percentages(
        get_total_vesting_amount(locked_vesting), total_leftover, total_token_supply
    )
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        required_ratio = (to_decimal(initial_market_cap) / to_decimal(migration_market_cap)).sqrt()
        one_minus_fee = 1 - to_decimal(migration_fee_percentage) / 100
        available = 100 - vesting_pct - leftover_pct
        return (required_ratio * one_minus_fee * available) / (1 + required_ratio * one_minus_fee)


def get_tokenomics(
    initial_market_cap: Numeric,
    migration_market_cap: Numeric,
    total_locked_vesting_amount: int,
    total_leftover: int,
    total_token_supply: int,
) -> Tokenomics:
    """Split total_token_supply (lamports) using the market cap ratio."""
    vesting_pct, leftover_pct = _supply_percentages(
        total_locked_vesting_amount, total_leftover, total_token_supply
    )
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        sqrt_ratio = (to_decimal(initial_market_cap) / to_decimal(migration_market_cap)).sqrt()
        percentage = 100 * sqrt_ratio - (vesting_pct + leftover_pct) * sqrt_ratio
        migration_supply = floor_to_int(
            percentage / (1 + sqrt_ratio) * Decimal(total_token_supply) / 100
        )

    bonding_curve_supply = (
        S(total_token_supply) - migration_supply - total_leftover - total_locked_vesting_amount
    )
    return Tokenomics(
        bonding_curve_supply=bonding_curve_supply.value,
        migration_supply=migration_supply,
        leftover_supply=total_leftover,
        locked_vesting_supply=total_locked_vesting_amount,
    )
