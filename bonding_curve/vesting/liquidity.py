"""Post-migration LP vesting and the locked-liquidity floor.

Locked liquidity is evaluated the way the program does it: against a
notional total of U128_MAX with floor division at every step. A 10% vested
share that is fully locked therefore reports 999 bps, not 1000.
"""

from __future__ import annotations

import decimal
from decimal import ROUND_HALF_UP, Decimal

from bonding_curve.config import DEFAULT_PROTOCOL_CONFIG, ProtocolConfig
from bonding_curve.constants import MAX_BASIS_POINT, U128_MAX
from bonding_curve.errors import InvalidParameter
from bonding_curve.math.decimal_utils import DECIMAL_HIGH_PREC_CONTEXT
from bonding_curve.models.params import LiquidityVestingInfo

__all__ = [
    "get_liquidity_vesting_info_params",
    "get_vesting_locked_liquidity_bps_at_n_seconds",
    "calculate_locked_liquidity_bps_at_time",
]


def get_liquidity_vesting_info_params(
    vesting_percentage: int,
    bps_per_period: int,
    number_of_periods: int,
    cliff_duration_from_migration_time: int,
    total_duration: int,
    config: ProtocolConfig | None = None,
) -> LiquidityVestingInfo:
    """Derive LP vesting for one beneficiary.

    Args:
        vesting_percentage: Share of total LP that vests (0-100)
        bps_per_period: Share of the vested LP released per period
        number_of_periods: Number of periodic releases
        cliff_duration_from_migration_time: Seconds before the cliff release
        total_duration: Seconds spanned by the periodic releases
        config: Protocol bounds (defaults to DEFAULT_PROTOCOL_CONFIG)

    Returns:
        LiquidityVestingInfo with frequency = round(total_duration / number_of_periods)

    Raises:
        InvalidParameter: If any input is out of range
    """
    config = config or DEFAULT_PROTOCOL_CONFIG

    if not 0 <= vesting_percentage <= 100:
        raise InvalidParameter(
            f"vestingPercentage must be between 0 and 100, got {vesting_percentage}"
        )

    if vesting_percentage == 0:
        if (
            bps_per_period != 0
            or number_of_periods != 0
            or cliff_duration_from_migration_time != 0
            or total_duration != 0
        ):
            raise InvalidParameter("If vestingPercentage is 0, all other parameters must be 0")
        return LiquidityVestingInfo.zero()

    if not 0 <= bps_per_period <= config.max_basis_point:
        raise InvalidParameter(
            f"bpsPerPeriod must be between 0 and {config.max_basis_point}, got {bps_per_period}"
        )
    if number_of_periods <= 0:
        raise InvalidParameter(
            "numberOfPeriods must be greater than zero when vestingPercentage > 0"
        )
    if cliff_duration_from_migration_time < 0:
        raise InvalidParameter("cliffDurationFromMigrationTime must be >= 0")
    if total_duration <= 0:
        raise InvalidParameter("totalDuration must be greater than zero")

    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        frequency = Decimal(total_duration) / number_of_periods
        if frequency <= 0:
            raise InvalidParameter(
                "frequency must be greater than zero "
                "(totalDuration / numberOfPeriods must be > 0)"
            )

        total_bps = bps_per_period * number_of_periods
        if total_bps > config.max_basis_point:
            raise InvalidParameter(
                f"Total BPS (bpsPerPeriod * numberOfPeriods = {total_bps}) must not exceed "
                f"{config.max_basis_point}"
            )

        total_vesting_duration = cliff_duration_from_migration_time + number_of_periods * frequency
        if total_vesting_duration > config.max_lock_duration:
            raise InvalidParameter(
                f"Total vesting duration ({total_vesting_duration}s) must not exceed "
                f"{config.max_lock_duration}s (2 years)"
            )

        rounded_frequency = int(frequency.to_integral_value(rounding=ROUND_HALF_UP))

    return LiquidityVestingInfo(
        vesting_percentage=vesting_percentage,
        bps_per_period=bps_per_period,
        number_of_periods=number_of_periods,
        cliff_duration_from_migration_time=cliff_duration_from_migration_time,
        frequency=rounded_frequency,
    )


def get_vesting_locked_liquidity_bps_at_n_seconds(
    vesting_info: LiquidityVestingInfo | None, n_seconds: int
) -> int:
    """Basis points of total LP still locked by one vesting record n_seconds after migration."""
    if vesting_info is None or vesting_info.vesting_percentage == 0:
        return 0

    total_liquidity = U128_MAX
    total_vested_liquidity = total_liquidity * vesting_info.vesting_percentage // 100

    number_of_periods = vesting_info.number_of_periods
    frequency = vesting_info.frequency
    cliff_duration = vesting_info.cliff_duration_from_migration_time

    total_bps_after_cliff = vesting_info.bps_per_period * number_of_periods
    total_vesting_liquidity_after_cliff = (
        total_vested_liquidity * total_bps_after_cliff // MAX_BASIS_POINT
    )

    liquidity_per_period = 0
    if number_of_periods > 0:
        liquidity_per_period = total_vesting_liquidity_after_cliff // number_of_periods

    # Precision loss leaves nothing per period: the program degrades to a cliff-only lock
    if liquidity_per_period == 0:
        number_of_periods = 0
        frequency = 0
        cliff_duration = max(cliff_duration, 1)

    cliff_unlock_liquidity = total_vested_liquidity - liquidity_per_period * number_of_periods

    unlocked_liquidity = 0
    if n_seconds >= cliff_duration:
        unlocked_liquidity = cliff_unlock_liquidity
        if frequency > 0 and number_of_periods > 0:
            periods_elapsed = min((n_seconds - cliff_duration) // frequency, number_of_periods)
            unlocked_liquidity += liquidity_per_period * periods_elapsed

    locked_liquidity = total_vested_liquidity - unlocked_liquidity
    return locked_liquidity * MAX_BASIS_POINT // total_liquidity


def calculate_locked_liquidity_bps_at_time(
    partner_permanent_locked_liquidity_percentage: int,
    creator_permanent_locked_liquidity_percentage: int,
    partner_liquidity_vesting_info: LiquidityVestingInfo | None,
    creator_liquidity_vesting_info: LiquidityVestingInfo | None,
    elapsed_seconds: int,
) -> int:
    """Permanently locked plus still-vesting LP, in basis points, for both beneficiaries."""
    partner_vested_bps = get_vesting_locked_liquidity_bps_at_n_seconds(
        partner_liquidity_vesting_info, elapsed_seconds
    )
    creator_vested_bps = get_vesting_locked_liquidity_bps_at_n_seconds(
        creator_liquidity_vesting_info, elapsed_seconds
    )
    return (
        partner_vested_bps
        + partner_permanent_locked_liquidity_percentage * 100
        + creator_vested_bps
        + creator_permanent_locked_liquidity_percentage * 100
    )
