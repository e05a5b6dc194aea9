"""Token vesting of the locked base supply."""

from __future__ import annotations

import structlog

from bonding_curve.errors import InvalidParameter
from bonding_curve.math.decimal_utils import Numeric, convert_to_lamports, to_decimal
from bonding_curve.models.params import LockedVesting

logger = structlog.get_logger()

__all__ = ["get_locked_vesting_params"]


def get_locked_vesting_params(
    total_locked_vesting_amount: Numeric,
    number_of_vesting_period: int,
    cliff_unlock_amount: Numeric,
    total_vesting_duration: int,
    cliff_duration_from_migration_time: int,
    base_decimals: int,
) -> LockedVesting:
    """Derive a vesting schedule that releases exactly the locked total.

    The per-period amount is rounded down in lamports and the remainder is
    folded into the cliff release, so

        cliff_unlock_amount + amount_per_period * number_of_period == total

    holds exactly. When the whole amount unlocks at the cliff, the program
    still needs one period, so one whole token is moved into a single
    one-unit-long period.

    Args:
        total_locked_vesting_amount: Locked total, in whole base tokens
        number_of_vesting_period: Number of periodic releases
        cliff_unlock_amount: Released at the cliff, in whole base tokens
        total_vesting_duration: Duration of the periodic releases
        cliff_duration_from_migration_time: Delay of the cliff after migration
        base_decimals: Base mint decimals

    Returns:
        LockedVesting in lamports; the zero record when nothing is locked

    Raises:
        InvalidParameter: On negative amounts, missing periods or duration,
            or a cliff larger than the total
    """
    total = to_decimal(total_locked_vesting_amount)
    cliff = to_decimal(cliff_unlock_amount)

    if total < 0 or cliff < 0:
        raise InvalidParameter(
            f"Vesting amounts must be non-negative, got total={total} cliff={cliff}"
        )
    if total == 0:
        return LockedVesting()

    if total == cliff:
        if total < 1:
            raise InvalidParameter(
                f"Total locked vesting amount must be at least 1 token when fully "
                f"unlocked at the cliff, got {total}"
            )
        return LockedVesting(
            amount_per_period=convert_to_lamports(1, base_decimals),
            cliff_duration_from_migration_time=cliff_duration_from_migration_time,
            frequency=1,
            number_of_period=1,
            cliff_unlock_amount=convert_to_lamports(total - 1, base_decimals),
        )

    if number_of_vesting_period <= 0:
        raise InvalidParameter("Total periods must be greater than zero")
    if total_vesting_duration <= 0:
        raise InvalidParameter(
            "numberOfPeriod and totalVestingDuration must both be greater than zero"
        )
    if cliff > total:
        raise InvalidParameter(
            f"Cliff unlock amount ({cliff}) cannot be greater than total locked vesting "
            f"amount ({total})"
        )

    total_lamports = convert_to_lamports(total, base_decimals)
    cliff_lamports = convert_to_lamports(cliff, base_decimals)
    amount_per_period = (total_lamports - cliff_lamports) // number_of_vesting_period
    adjusted_cliff = total_lamports - amount_per_period * number_of_vesting_period

    logger.debug(
        "locked_vesting_derived",
        amount_per_period=amount_per_period,
        cliff_unlock_amount=adjusted_cliff,
        remainder=adjusted_cliff - cliff_lamports,
    )
    return LockedVesting(
        amount_per_period=amount_per_period,
        cliff_duration_from_migration_time=cliff_duration_from_migration_time,
        frequency=total_vesting_duration // number_of_vesting_period,
        number_of_period=number_of_vesting_period,
        cliff_unlock_amount=adjusted_cliff,
    )
