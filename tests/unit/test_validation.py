"""Tests for configuration validation.

validate_config_parameters is exercised by breaking one field at a time on
a configuration that is known to validate.
"""

import re
from dataclasses import replace

import pytest

from bonding_curve import build_curve_with_market_cap
from bonding_curve.constants import MAX_SQRT_PRICE
from bonding_curve.errors import (
    InconsistentConfiguration,
    InsufficientLiquidity,
    InvalidParameter,
)
from bonding_curve.models.enums import (
    CollectFeeMode,
    DammV2BaseFeeMode,
    DammV2DynamicFeeMode,
    MigrationFeeOption,
    MigrationOption,
    TokenType,
)
from bonding_curve.models.params import (
    CurvePoint,
    DynamicFeeParams,
    FeeSchedulerParams,
    LiquidityVestingInfo,
    LockedVesting,
    MigratedPoolFee,
    MigratedPoolMarketCapFeeSchedulerParams,
    MigrationFee,
    PoolFees,
    TokenSupply,
)
from bonding_curve.validation import (
    get_curve_error,
    get_liquidity_vesting_info_error,
    get_migrated_pool_fee_error,
    validate_config_parameters,
    validate_curve,
    validate_dynamic_fee,
    validate_liquidity_vesting_info,
    validate_locked_vesting,
    validate_lp_percentages,
    validate_migrated_pool_base_fee_mode,
    validate_migrated_pool_fee,
    validate_migration_and_token_type,
    validate_migration_fee_option,
    validate_minimum_locked_liquidity,
    validate_pool_creation_fee,
    validate_token_decimals,
    validate_token_supply,
)
from tests.helpers import make_market_cap_request

# 10% of LP vesting in ten steps that only start after day one
VESTING_ONLY_LOCK = LiquidityVestingInfo(
    vesting_percentage=10,
    bps_per_period=1000,
    number_of_periods=10,
    cliff_duration_from_migration_time=86_401,
    frequency=100,
)


@pytest.fixture(scope="module")
def valid_config():
    """A market cap configuration that passes every check."""
    return build_curve_with_market_cap(make_market_cap_request())


class TestValidConfig:
    """The baseline validates."""

    def test_baseline(self, valid_config):
        validate_config_parameters(valid_config)


class TestFieldChecks:
    """Each broken field surfaces its own error."""

    def test_pool_fees(self, valid_config):
        config = replace(valid_config, pool_fees=PoolFees(FeeSchedulerParams(1_000_000, 0, 0, 0)))
        with pytest.raises(InvalidParameter, match="Invalid pool fees: cliff fee numerator"):
            validate_config_parameters(config)

    def test_dynamic_fee_out_of_range(self, valid_config):
        dynamic_fee = replace(valid_config.pool_fees.dynamic_fee, variable_fee_control=2**24)
        config = replace(
            valid_config, pool_fees=replace(valid_config.pool_fees, dynamic_fee=dynamic_fee)
        )
        with pytest.raises(InvalidParameter, match="dynamic fee out of range"):
            validate_config_parameters(config)

    def test_damm_v1_requires_spl(self, valid_config):
        config = replace(
            valid_config,
            migration_option=MigrationOption.MET_DAMM,
            token_type=TokenType.TOKEN_2022,
        )
        with pytest.raises(InvalidParameter, match=re.escape("got TOKEN_2022 (1)")):
            validate_config_parameters(config)

    def test_customizable_fee_requires_damm_v2(self, valid_config):
        config = replace(
            valid_config,
            migration_option=MigrationOption.MET_DAMM,
            migration_fee_option=MigrationFeeOption.CUSTOMIZABLE,
        )
        message = "Invalid migration fee option CUSTOMIZABLE (6) for migration option MET_DAMM (0)"
        with pytest.raises(InvalidParameter, match=re.escape(message)):
            validate_config_parameters(config)

    def test_token_update_authority(self, valid_config):
        """An out-of-range option is named in the error."""
        config = replace(valid_config, token_update_authority=7)
        with pytest.raises(InvalidParameter, match="token update authority, got 7$"):
            validate_config_parameters(config)

    def test_migration_fee_percentage(self, valid_config):
        config = replace(valid_config, migration_fee=MigrationFee(fee_percentage=100))
        with pytest.raises(InvalidParameter, match="Migration fee percentage"):
            validate_config_parameters(config)

    def test_creator_trading_fee(self, valid_config):
        config = replace(valid_config, creator_trading_fee_percentage=101)
        with pytest.raises(InvalidParameter, match="Creator trading fee"):
            validate_config_parameters(config)

    def test_token_decimal(self, valid_config):
        config = replace(valid_config, token_decimal=5)
        with pytest.raises(InvalidParameter, match="Token decimal must be between 6 and 9"):
            validate_config_parameters(config)

    def test_lp_percentages(self, valid_config):
        config = replace(valid_config, partner_liquidity_percentage=10)
        with pytest.raises(InconsistentConfiguration, match="must equal 100, got 110"):
            validate_config_parameters(config)

    def test_pool_creation_fee(self, valid_config):
        config = replace(valid_config, pool_creation_fee=10)
        with pytest.raises(InvalidParameter, match="Pool creation fee"):
            validate_config_parameters(config)

    def test_liquidity_vesting_on_damm_v1(self, valid_config):
        config = replace(
            valid_config,
            migration_option=MigrationOption.MET_DAMM,
            partner_permanent_locked_liquidity_percentage=90,
            partner_liquidity_vesting_info=VESTING_ONLY_LOCK,
        )
        with pytest.raises(InvalidParameter, match="not supported for MeteoraDamm"):
            validate_config_parameters(config)

    def test_insufficient_liquidity(self, valid_config):
        config = replace(valid_config, migration_quote_threshold=10**30)
        with pytest.raises(InsufficientLiquidity):
            validate_config_parameters(config)

    def test_locked_liquidity_floor(self, valid_config):
        """A fully locked 10% vesting share floors to 999 bps, one short of the minimum."""
        config = replace(
            valid_config,
            partner_permanent_locked_liquidity_percentage=0,
            partner_liquidity_percentage=90,
            partner_liquidity_vesting_info=VESTING_ONLY_LOCK,
        )
        with pytest.raises(InvalidParameter, match="Current locked liquidity at day 1: 999 BPS"):
            validate_config_parameters(config)

    def test_zero_threshold(self, valid_config):
        config = replace(valid_config, migration_quote_threshold=0)
        with pytest.raises(InvalidParameter, match="Migration quote threshold"):
            validate_config_parameters(config)

    def test_sqrt_start_price_below_min(self, valid_config):
        config = replace(valid_config, sqrt_start_price=1)
        with pytest.raises(InvalidParameter, match="Invalid sqrt start price"):
            validate_config_parameters(config)

    def test_custom_migrated_pool_fee_with_fixed_option(self, valid_config):
        config = replace(valid_config, migrated_pool_fee=MigratedPoolFee(pool_fee_bps=100))
        with pytest.raises(InvalidParameter, match=r"Invalid migrated pool fee parameters: .*poolFeeBps=100"):
            validate_config_parameters(config)

    def test_time_mode_with_market_cap_scheduler(self, valid_config):
        config = replace(
            valid_config,
            migrated_pool_market_cap_fee_scheduler_params=MigratedPoolMarketCapFeeSchedulerParams(
                number_of_period=10,
                sqrt_price_step_bps=100,
                scheduler_expiration_duration=3600,
                reduction_factor=1,
            ),
        )
        with pytest.raises(InvalidParameter, match="only work as fixed fee"):
            validate_config_parameters(config)

    def test_invalid_curve(self, valid_config):
        config = replace(
            valid_config, curve=valid_config.curve + (CurvePoint(MAX_SQRT_PRICE, 0),)
        )
        index = len(valid_config.curve)
        with pytest.raises(InvalidParameter, match=rf"Invalid curve: segment {index}\b"):
            validate_config_parameters(config)

    def test_zero_liquidity_segment_is_named(self, valid_config):
        """The error carries the segment index, its sqrt price and its liquidity."""
        first = valid_config.curve[0]
        config = replace(
            valid_config,
            curve=(replace(first, liquidity=0),) + valid_config.curve[1:],
        )
        message = (
            f"Invalid curve: segment 0 (sqrt price {first.sqrt_price}) "
            f"liquidity must be greater than 0, got 0"
        )
        with pytest.raises(InvalidParameter, match=re.escape(message)):
            validate_config_parameters(config)

    def test_partner_vesting_reason(self, valid_config):
        vesting = replace(VESTING_ONLY_LOCK, frequency=0)
        config = replace(
            valid_config,
            partner_permanent_locked_liquidity_percentage=90,
            partner_liquidity_vesting_info=vesting,
        )
        with pytest.raises(
            InvalidParameter,
            match="Invalid partner liquidity vesting info: frequency must be greater than 0",
        ):
            validate_config_parameters(config)

    def test_locked_vesting(self, valid_config):
        config = replace(
            valid_config, locked_vesting=LockedVesting(amount_per_period=1, number_of_period=1)
        )
        with pytest.raises(InvalidParameter, match="Invalid vesting parameters"):
            validate_config_parameters(config)

    def test_token_supply(self, valid_config):
        config = replace(valid_config, token_supply=TokenSupply(1, 1))
        with pytest.raises(InconsistentConfiguration, match="Invalid token supply"):
            validate_config_parameters(config)

    def test_token_supply_optional(self, valid_config):
        validate_config_parameters(replace(valid_config, token_supply=None))


class TestCheckOrder:
    """The first broken invariant in check order is the one reported."""

    def test_pool_fees_before_decimals(self, valid_config):
        config = replace(
            valid_config,
            pool_fees=PoolFees(FeeSchedulerParams(1_000_000, 0, 0, 0)),
            token_decimal=5,
        )
        with pytest.raises(InvalidParameter, match="Invalid pool fees"):
            validate_config_parameters(config)

    def test_decimals_before_lp_percentages(self, valid_config):
        config = replace(valid_config, token_decimal=5, partner_liquidity_percentage=10)
        with pytest.raises(InvalidParameter, match="Token decimal"):
            validate_config_parameters(config)

    def test_lock_floor_before_threshold(self, valid_config):
        config = replace(
            valid_config,
            partner_permanent_locked_liquidity_percentage=0,
            partner_liquidity_percentage=90,
            partner_liquidity_vesting_info=VESTING_ONLY_LOCK,
            migration_quote_threshold=0,
        )
        with pytest.raises(InvalidParameter, match="locked liquidity"):
            validate_config_parameters(config)


class TestPredicates:
    """Tests for the individual validate_* predicates."""

    def test_dynamic_fee(self):
        assert validate_dynamic_fee(None)
        params = DynamicFeeParams(1, 1_844_674_407_370_955, 10, 120, 5000, 180_000, 617_280)
        assert validate_dynamic_fee(params)
        assert not validate_dynamic_fee(replace(params, filter_period=120))
        assert not validate_dynamic_fee(replace(params, bin_step=2))

    def test_migration_and_token_type(self):
        assert validate_migration_and_token_type(MigrationOption.MET_DAMM, TokenType.SPL)
        assert not validate_migration_and_token_type(MigrationOption.MET_DAMM, TokenType.TOKEN_2022)
        assert validate_migration_and_token_type(MigrationOption.MET_DAMM_V2, TokenType.TOKEN_2022)

    def test_migration_fee_option(self):
        assert validate_migration_fee_option(MigrationFeeOption.FIXED_BPS_25)
        assert validate_migration_fee_option(
            MigrationFeeOption.CUSTOMIZABLE, MigrationOption.MET_DAMM_V2
        )
        assert not validate_migration_fee_option(
            MigrationFeeOption.CUSTOMIZABLE, MigrationOption.MET_DAMM
        )

    def test_token_decimals(self):
        assert validate_token_decimals(6)
        assert validate_token_decimals(9)
        assert not validate_token_decimals(10)

    def test_lp_percentages(self):
        assert validate_lp_percentages(25, 25, 25, 25)
        assert validate_lp_percentages(0, 80, 0, 0, 10, 10)
        assert not validate_lp_percentages(0, 80, 0, 0)

    def test_pool_creation_fee(self):
        assert validate_pool_creation_fee(0)
        assert validate_pool_creation_fee(1_000_000)
        assert not validate_pool_creation_fee(999_999)
        assert not validate_pool_creation_fee(100_000_000_001)

    def test_liquidity_vesting_info(self):
        assert validate_liquidity_vesting_info(LiquidityVestingInfo())
        assert validate_liquidity_vesting_info(VESTING_ONLY_LOCK)
        assert not validate_liquidity_vesting_info(
            LiquidityVestingInfo(vesting_percentage=10, bps_per_period=100, number_of_periods=1)
        )

    def test_minimum_locked_liquidity(self):
        assert validate_minimum_locked_liquidity(10, 0, None, None)
        assert not validate_minimum_locked_liquidity(0, 0, VESTING_ONLY_LOCK, None)
        assert validate_minimum_locked_liquidity(1, 0, VESTING_ONLY_LOCK, None)

    def test_migrated_pool_fee(self):
        custom = MigratedPoolFee(pool_fee_bps=100)
        v2 = MigrationOption.MET_DAMM_V2
        assert validate_migrated_pool_fee(custom, v2, MigrationFeeOption.CUSTOMIZABLE)
        assert not validate_migrated_pool_fee(custom, v2, MigrationFeeOption.FIXED_BPS_100)
        assert not validate_migrated_pool_fee(
            MigratedPoolFee(pool_fee_bps=5), v2, MigrationFeeOption.CUSTOMIZABLE
        )
        assert validate_migrated_pool_fee(MigratedPoolFee())

    def test_migrated_pool_base_fee_mode(self):
        fixed = MigratedPoolMarketCapFeeSchedulerParams()
        assert validate_migrated_pool_base_fee_mode(
            DammV2BaseFeeMode.FEE_TIME_SCHEDULER_LINEAR, fixed
        )
        assert validate_migrated_pool_base_fee_mode(
            DammV2BaseFeeMode.FEE_MARKET_CAP_SCHEDULER_LINEAR, fixed
        )
        assert validate_migrated_pool_base_fee_mode(
            DammV2BaseFeeMode.RATE_LIMITER, fixed, MigrationOption.MET_DAMM
        )
        with pytest.raises(InvalidParameter, match="RateLimiter"):
            validate_migrated_pool_base_fee_mode(DammV2BaseFeeMode.RATE_LIMITER, fixed)

    def test_market_cap_mode_needs_all_params(self):
        partial = MigratedPoolMarketCapFeeSchedulerParams(number_of_period=10, reduction_factor=1)
        with pytest.raises(InvalidParameter, match="must all be greater than 0"):
            validate_migrated_pool_base_fee_mode(
                DammV2BaseFeeMode.FEE_MARKET_CAP_SCHEDULER_EXPONENTIAL, partial
            )

    def test_curve(self):
        curve = (CurvePoint(200, 1), CurvePoint(300, 1))
        assert validate_curve(curve, 100)
        assert not validate_curve((), 100)
        assert not validate_curve(curve, 200)
        assert not validate_curve((CurvePoint(300, 1), CurvePoint(200, 1)), 100)
        assert not validate_curve((CurvePoint(200, 0),), 100)
        assert not validate_curve((CurvePoint(200, 1),) * 17, 100)
        assert not validate_curve((CurvePoint(MAX_SQRT_PRICE + 1, 1),), 100)

    def test_curve_error(self):
        """Each reason names the first offending segment."""
        assert get_curve_error((CurvePoint(200, 1),), 100) is None
        assert get_curve_error((), 100) == "curve has no segments"
        assert get_curve_error((CurvePoint(200, 1),) * 17, 100) == (
            "curve has 17 segments, at most 16 allowed"
        )
        assert get_curve_error((CurvePoint(300, 1), CurvePoint(200, 1)), 100) == (
            "segment 1 sqrt price 200 must be greater than its lower bound 300"
        )
        assert get_curve_error((CurvePoint(200, 5), CurvePoint(300, 0)), 100) == (
            "segment 1 (sqrt price 300) liquidity must be greater than 0, got 0"
        )
        assert get_curve_error((CurvePoint(MAX_SQRT_PRICE + 1, 1),), 100) == (
            f"segment 0 sqrt price {MAX_SQRT_PRICE + 1} exceeds max sqrt price {MAX_SQRT_PRICE}"
        )

    def test_liquidity_vesting_info_error(self):
        assert get_liquidity_vesting_info_error(VESTING_ONLY_LOCK) is None
        assert get_liquidity_vesting_info_error(
            LiquidityVestingInfo(vesting_percentage=101, frequency=1)
        ) == "vestingPercentage must be between 0 and 100, got 101"
        assert get_liquidity_vesting_info_error(
            LiquidityVestingInfo(vesting_percentage=10)
        ) == "frequency must be greater than 0 when vestingPercentage is 10"

    def test_migrated_pool_fee_error(self):
        v2 = MigrationOption.MET_DAMM_V2
        custom = MigrationFeeOption.CUSTOMIZABLE
        reason = get_migrated_pool_fee_error(
            MigratedPoolFee(pool_fee_bps=100), v2, MigrationFeeOption.FIXED_BPS_100
        )
        assert "poolFeeBps=100" in reason
        assert "FIXED_BPS_100 (2)" in reason
        assert get_migrated_pool_fee_error(MigratedPoolFee(pool_fee_bps=5), v2, custom) == (
            "poolFeeBps must be between 10 and 1000, got 5"
        )
        assert get_migrated_pool_fee_error(
            MigratedPoolFee(collect_fee_mode=CollectFeeMode.QUOTE_TOKEN, pool_fee_bps=100,
                            dynamic_fee=DammV2DynamicFeeMode.ENABLED),
            v2,
            custom,
        ) is None
        assert get_migrated_pool_fee_error(
            MigratedPoolFee(collect_fee_mode=3, pool_fee_bps=100), v2, custom
        ) == "invalid collect fee mode, got 3"

    def test_locked_vesting(self):
        assert validate_locked_vesting(LockedVesting())
        assert validate_locked_vesting(LockedVesting(amount_per_period=1, frequency=1, number_of_period=1))
        assert not validate_locked_vesting(LockedVesting(frequency=1))

    def test_token_supply(self):
        vesting = LockedVesting()
        assert validate_token_supply(None, 10, 10, vesting, 12)
        assert validate_token_supply(TokenSupply(25, 20), 10, 10, vesting, 12)
        assert not validate_token_supply(TokenSupply(21, 20), 10, 10, vesting, 12)
        assert not validate_token_supply(TokenSupply(25, 19), 10, 10, vesting, 12)
        assert not validate_token_supply(TokenSupply(25, 26), 10, 10, vesting, 12)
