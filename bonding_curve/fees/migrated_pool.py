"""Fees of the pool the curve migrates into."""

from __future__ import annotations

from bonding_curve.config import DEFAULT_PROTOCOL_CONFIG, ProtocolConfig
from bonding_curve.errors import InvalidParameter
from bonding_curve.fees.numerators import bps_to_fee_numerator
from bonding_curve.fees.scheduler import get_reduction_factor
from bonding_curve.models.enums import DammV2BaseFeeMode, MigrationFeeOption, MigrationOption
from bonding_curve.models.params import MigratedPoolFee, MigratedPoolMarketCapFeeSchedulerParams
from bonding_curve.models.requests import MigratedPoolFeeRequest

__all__ = [
    "get_migrated_pool_market_cap_fee_scheduler_params",
    "get_migrated_pool_fee_params",
]

_TIME_SCHEDULER_MODES = (
    DammV2BaseFeeMode.FEE_TIME_SCHEDULER_LINEAR,
    DammV2BaseFeeMode.FEE_TIME_SCHEDULER_EXPONENTIAL,
)


def get_migrated_pool_market_cap_fee_scheduler_params(
    starting_base_fee_bps: int,
    ending_base_fee_bps: int,
    base_fee_mode: DammV2BaseFeeMode,
    number_of_period: int,
    sqrt_price_step_bps: int,
    scheduler_expiration_duration: int,
    config: ProtocolConfig | None = None,
) -> MigratedPoolMarketCapFeeSchedulerParams:
    """Market-cap fee scheduler of the migrated DAMM v2 pool.

    The fee steps down each time the sqrt price rises by sqrt_price_step_bps,
    using the same linear or exponential reduction as the time scheduler.

    Returns:
        The all-zero record for the time-scheduler modes

    Raises:
        InvalidParameter: For the rate limiter mode or out-of-range inputs
    """
    config = config or DEFAULT_PROTOCOL_CONFIG

    if base_fee_mode in _TIME_SCHEDULER_MODES:
        return MigratedPoolMarketCapFeeSchedulerParams()

    if base_fee_mode == DammV2BaseFeeMode.RATE_LIMITER:
        raise InvalidParameter(
            "RateLimiter is not supported for DAMM v2 migration. Use either "
            "FeeMarketCapSchedulerLinear or FeeMarketCapSchedulerExponential instead."
        )

    if number_of_period <= 0:
        raise InvalidParameter("Total periods must be greater than zero")
    if starting_base_fee_bps <= ending_base_fee_bps:
        raise InvalidParameter(
            f"startingBaseFeeBps ({starting_base_fee_bps} bps) must be greater than "
            f"endingBaseFeeBps ({ending_base_fee_bps} bps)"
        )
    if starting_base_fee_bps > config.max_fee_bps:
        raise InvalidParameter(
            f"startingBaseFeeBps ({starting_base_fee_bps} bps) exceeds maximum allowed value "
            f"of {config.max_fee_bps} bps"
        )
    if sqrt_price_step_bps <= 0 or scheduler_expiration_duration <= 0:
        raise InvalidParameter(
            "numberOfPeriod, sqrtPriceStepBps, and schedulerExpirationDuration must be "
            "greater than zero"
        )

    reduction_factor = get_reduction_factor(
        bps_to_fee_numerator(starting_base_fee_bps),
        bps_to_fee_numerator(ending_base_fee_bps),
        number_of_period,
        linear=base_fee_mode == DammV2BaseFeeMode.FEE_MARKET_CAP_SCHEDULER_LINEAR,
    )
    return MigratedPoolMarketCapFeeSchedulerParams(
        number_of_period=number_of_period,
        sqrt_price_step_bps=sqrt_price_step_bps,
        scheduler_expiration_duration=scheduler_expiration_duration,
        reduction_factor=reduction_factor,
    )


def get_migrated_pool_fee_params(
    migration_option: MigrationOption,
    migration_fee_option: MigrationFeeOption,
    migrated_pool_fee: MigratedPoolFeeRequest | None = None,
) -> MigratedPoolFee:
    """Migrated pool fee; custom values apply only to DAMM v2 with the Customizable option.

    Raises:
        InvalidParameter: If Customizable is chosen for DAMM v2 without a fee
    """
    if (
        migration_option == MigrationOption.MET_DAMM_V2
        and migration_fee_option == MigrationFeeOption.CUSTOMIZABLE
    ):
        if migrated_pool_fee is None:
            raise InvalidParameter(
                "migratedPoolFee is required for the Customizable migration fee option"
            )
        return MigratedPoolFee(
            collect_fee_mode=migrated_pool_fee.collect_fee_mode,
            dynamic_fee=migrated_pool_fee.dynamic_fee,
            pool_fee_bps=migrated_pool_fee.pool_fee_bps,
        )
    return MigratedPoolFee()
