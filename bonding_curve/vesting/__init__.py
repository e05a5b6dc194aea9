"""Token vesting and post-migration liquidity vesting."""

from bonding_curve.vesting.liquidity import (
    calculate_locked_liquidity_bps_at_time,
    get_liquidity_vesting_info_params,
    get_vesting_locked_liquidity_bps_at_n_seconds,
)
from bonding_curve.vesting.locked import get_locked_vesting_params

__all__ = [
    "get_locked_vesting_params",
    "get_liquidity_vesting_info_params",
    "get_vesting_locked_liquidity_bps_at_n_seconds",
    "calculate_locked_liquidity_bps_at_time",
]
