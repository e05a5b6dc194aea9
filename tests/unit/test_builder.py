"""Tests for the curve builders.

Every builder is run end to end on the default factory requests; most
tests also run the full validator on the result.
"""

from decimal import Decimal

import pytest

from bonding_curve import (
    InfeasibleCurve,
    InvalidParameter,
    build_curve,
    build_curve_with_custom_sqrt_prices,
    build_curve_with_liquidity_weights,
    build_curve_with_market_cap,
    build_curve_with_mid_price,
    build_curve_with_three_segments,
    build_curve_with_two_segments,
)
from bonding_curve.constants import MAX_SQRT_PRICE
from bonding_curve.math.price import sqrt_price_from_market_cap, sqrt_price_from_price
from bonding_curve.models.enums import BaseFeeMode, DammV2BaseFeeMode
from bonding_curve.models.params import (
    ConfigParameters,
    FeeSchedulerParams,
    LiquidityVestingInfo,
    RateLimiterParams,
)
from bonding_curve.models.requests import (
    LiquidityVestingRequest,
    LockedVestingRequest,
    MigratedPoolMarketCapFeeSchedulerRequest,
)
from tests.helpers import (
    BASE_DECIMALS,
    QUOTE_DECIMALS,
    make_build_curve_request,
    make_custom_sqrt_prices_request,
    make_liquidity_weights_request,
    make_market_cap_request,
    make_mid_price_request,
    make_rate_limiter_request,
    make_three_segments_request,
    make_two_segments_request,
)


def assert_well_formed(config: ConfigParameters) -> None:
    """Segments ascend from above the start price and all carry liquidity."""
    assert config.curve
    assert config.curve[0].sqrt_price > config.sqrt_start_price
    for previous, current in zip(config.curve, config.curve[1:]):
        assert current.sqrt_price > previous.sqrt_price
    assert all(point.liquidity > 0 for point in config.curve)
    assert config.migration_quote_threshold > 0
    supply = config.token_supply
    assert supply.pre_migration_token_supply == supply.post_migration_token_supply


def sqrt_price(price: str) -> int:
    return sqrt_price_from_price(Decimal(price), BASE_DECIMALS, QUOTE_DECIMALS)


class TestBuildCurve:
    """Tests for build_curve."""

    def test_builds_and_validates(self):
        config = build_curve(make_build_curve_request(), validate=True)
        assert_well_formed(config)

    def test_threshold_in_lamports(self):
        config = build_curve(make_build_curve_request())
        assert config.migration_quote_threshold == 95_076_407_914

    def test_zero_percentage_raises(self):
        with pytest.raises(InvalidParameter, match="percentageSupplyOnMigration"):
            build_curve(make_build_curve_request(percentage_supply_on_migration=Decimal(0)))

    def test_fixed_fee_and_dynamic_overlay(self):
        config = build_curve(make_build_curve_request())
        assert config.pool_fees.base_fee == FeeSchedulerParams(10_000_000, 0, 0, 0)
        assert config.pool_fees.dynamic_fee is not None
        assert config.pool_fees.dynamic_fee.max_volatility_accumulator == 180_000

    def test_dynamic_fee_disabled(self):
        config = build_curve(make_build_curve_request(dynamic_fee_enabled=False))
        assert config.pool_fees.dynamic_fee is None


class TestBuildCurveWithMarketCap:
    """Tests for build_curve_with_market_cap."""

    def test_builds_and_validates(self):
        config = build_curve_with_market_cap(make_market_cap_request(), validate=True)
        assert_well_formed(config)

    def test_starts_at_initial_market_cap(self, initial_sqrt_price):
        config = build_curve_with_market_cap(make_market_cap_request())
        assert config.sqrt_start_price == pytest.approx(initial_sqrt_price, rel=1e-3)

    def test_first_segment_ends_at_migration_market_cap(self, migration_sqrt_price):
        config = build_curve_with_market_cap(make_market_cap_request())
        assert config.curve[0].sqrt_price == pytest.approx(migration_sqrt_price, rel=1e-6)

    def test_excess_supply_goes_to_tail_segment(self):
        """Any tail segment runs up to the maximum sqrt price."""
        config = build_curve_with_market_cap(make_market_cap_request())
        assert len(config.curve) <= 2
        if len(config.curve) == 2:
            assert config.curve[1].sqrt_price == MAX_SQRT_PRICE

    def test_zero_leftover_validates(self):
        """With no leftover the curve still starts above zero and keeps supply fixed."""
        config = build_curve_with_market_cap(
            make_market_cap_request(leftover=Decimal(0)), validate=True
        )
        assert config.sqrt_start_price > 0
        assert config.curve[0].liquidity > 0
        supply = config.token_supply
        assert supply.pre_migration_token_supply == supply.post_migration_token_supply

    def test_locked_vesting(self):
        vesting = LockedVestingRequest(
            total_locked_vesting_amount=Decimal(10_000_000),
            number_of_vesting_period=10,
            total_vesting_duration=1000,
        )
        config = build_curve_with_market_cap(
            make_market_cap_request(locked_vesting_param=vesting), validate=True
        )
        assert config.locked_vesting.amount_per_period == 10**12
        assert config.locked_vesting.frequency == 100
        assert config.locked_vesting.total_amount == 10**13

    def test_rate_limiter_base_fee(self):
        config = build_curve_with_market_cap(
            make_market_cap_request(base_fee_params=make_rate_limiter_request()), validate=True
        )
        assert config.pool_fees.base_fee == RateLimiterParams(
            cliff_fee_numerator=10_000_000,
            fee_increment_bps=10,
            max_limiter_duration=100_000,
            reference_amount=200_000_000,
        )

    def test_liquidity_vesting(self):
        request = make_market_cap_request(
            partner_permanent_locked_liquidity_percentage=90,
            partner_liquidity_vesting_info_params=LiquidityVestingRequest(
                vesting_percentage=10, bps_per_period=1000, number_of_periods=10, total_duration=1000
            ),
        )
        config = build_curve_with_market_cap(request, validate=True)
        assert config.partner_liquidity_vesting_info == LiquidityVestingInfo(
            vesting_percentage=10, bps_per_period=1000, number_of_periods=10, frequency=100
        )
        assert config.creator_liquidity_vesting_info.is_zero

    def test_market_cap_fee_scheduler(self):
        """The migrated pool's scheduler starts at the curve's 1% fee."""
        request = make_market_cap_request(
            migrated_pool_base_fee_mode=DammV2BaseFeeMode.FEE_MARKET_CAP_SCHEDULER_LINEAR,
            migrated_pool_market_cap_fee_scheduler_params=MigratedPoolMarketCapFeeSchedulerRequest(
                ending_base_fee_bps=25,
                number_of_period=10,
                sqrt_price_step_bps=100,
                scheduler_expiration_duration=3600,
            ),
        )
        config = build_curve_with_market_cap(request, validate=True)
        assert config.migrated_pool_market_cap_fee_scheduler_params.reduction_factor == 750_000

    def test_market_cap_scheduler_without_params_raises(self):
        request = make_market_cap_request(
            migrated_pool_base_fee_mode=DammV2BaseFeeMode.FEE_MARKET_CAP_SCHEDULER_EXPONENTIAL
        )
        with pytest.raises(InvalidParameter, match="are required"):
            build_curve_with_market_cap(request)

    def test_migrated_rate_limiter_raises(self):
        request = make_market_cap_request(migrated_pool_base_fee_mode=DammV2BaseFeeMode.RATE_LIMITER)
        with pytest.raises(InvalidParameter, match="RateLimiter is not supported"):
            build_curve_with_market_cap(request)

    def test_to_dict_uses_instruction_names(self):
        data = build_curve_with_market_cap(make_market_cap_request()).to_dict()
        assert data["poolFees"]["baseFee"]["cliffFeeNumerator"] == 10_000_000
        assert data["poolFees"]["baseFee"]["baseFeeMode"] == BaseFeeMode.FEE_SCHEDULER_LINEAR
        assert data["tokenDecimal"] == 6
        assert data["tokenSupply"]["preMigrationTokenSupply"] == 10**15
        assert set(data["curve"][0]) == {"sqrtPrice", "liquidity"}
        assert "sqrtStartPrice" in data
        assert "migratedPoolMarketCapFeeSchedulerParams" in data


class TestBuildCurveWithTwoSegments:
    """Tests for the two-segment builders."""

    def test_builds_and_validates(self):
        config = build_curve_with_two_segments(make_two_segments_request(), validate=True)
        assert_well_formed(config)
        assert len(config.curve) == 2

    def test_mid_price(self):
        config = build_curve_with_mid_price(make_mid_price_request(), validate=True)
        assert len(config.curve) == 2
        assert config.curve[0].sqrt_price == sqrt_price_from_price(Decimal("0.0004"), 9, 9)

    def test_infeasible_mid_price_raises(self):
        """Splitting at the geometric mean of 2e-5 and 1e-3 asks for negative liquidity."""
        request = make_mid_price_request(mid_price=Decimal("0.0001414213562"))
        with pytest.raises(InfeasibleCurve, match="mid price"):
            build_curve_with_mid_price(request)

    def test_zero_percentage_raises(self):
        request = make_two_segments_request(percentage_supply_on_migration=Decimal(0))
        with pytest.raises(InvalidParameter):
            build_curve_with_two_segments(request)


class TestBuildCurveWithLiquidityWeights:
    """Tests for build_curve_with_liquidity_weights."""

    def test_builds_and_validates(self):
        config = build_curve_with_liquidity_weights(make_liquidity_weights_request(), validate=True)
        assert_well_formed(config)
        assert len(config.curve) == 16

    def test_weights_shape_liquidity(self):
        """Growing weights give growing liquidity."""
        config = build_curve_with_liquidity_weights(make_liquidity_weights_request())
        liquidities = [point.liquidity for point in config.curve]
        assert liquidities == sorted(liquidities)

    def test_last_segment_ends_at_migration_market_cap(self):
        """The final boundary is the migration price itself, not the rounded geometric step."""
        request = make_liquidity_weights_request()
        config = build_curve_with_liquidity_weights(request)
        expected = sqrt_price_from_market_cap(
            request.migration_market_cap,
            request.total_token_supply,
            request.token_base_decimal,
            request.token_quote_decimal,
        )
        assert config.curve[-1].sqrt_price == expected

    def test_wrong_weight_count_raises(self):
        request = make_liquidity_weights_request(liquidity_weights=[Decimal(1)] * 15)
        with pytest.raises(InvalidParameter, match="exactly 16"):
            build_curve_with_liquidity_weights(request)

    def test_market_caps_must_increase(self):
        request = make_liquidity_weights_request(migration_market_cap=Decimal(30))
        with pytest.raises(InvalidParameter, match="must be greater than"):
            build_curve_with_liquidity_weights(request)


class TestBuildCurveWithCustomSqrtPrices:
    """Tests for build_curve_with_custom_sqrt_prices."""

    def test_two_prices_one_segment(self):
        prices = [sqrt_price("0.001"), sqrt_price("0.01")]
        config = build_curve_with_custom_sqrt_prices(
            make_custom_sqrt_prices_request(prices), validate=True
        )
        assert config.sqrt_start_price == prices[0]
        assert [point.sqrt_price for point in config.curve] == prices[1:]

    def test_three_prices_two_segments(self):
        prices = [sqrt_price("0.001"), sqrt_price("0.004"), sqrt_price("0.01")]
        config = build_curve_with_custom_sqrt_prices(make_custom_sqrt_prices_request(prices))
        assert len(config.curve) == 2

    def test_explicit_weights(self):
        prices = [sqrt_price("0.001"), sqrt_price("0.004"), sqrt_price("0.01")]
        even = build_curve_with_custom_sqrt_prices(make_custom_sqrt_prices_request(prices))
        skewed = build_curve_with_custom_sqrt_prices(
            make_custom_sqrt_prices_request(prices, liquidity_weights=[Decimal(1), Decimal(2)])
        )
        assert skewed.curve[1].liquidity / skewed.curve[0].liquidity == pytest.approx(2)
        assert even.curve[0].liquidity == even.curve[1].liquidity

    def test_single_price_raises(self):
        with pytest.raises(InvalidParameter, match="at least 2"):
            build_curve_with_custom_sqrt_prices(make_custom_sqrt_prices_request([sqrt_price("0.001")]))

    def test_descending_prices_raise(self):
        prices = [sqrt_price("0.01"), sqrt_price("0.001")]
        with pytest.raises(InvalidParameter, match="ascending"):
            build_curve_with_custom_sqrt_prices(make_custom_sqrt_prices_request(prices))

    def test_zero_weight_raises(self):
        """A zero weight is rejected by index before anything is solved."""
        prices = [sqrt_price("0.001"), sqrt_price("0.002"), sqrt_price("0.004"), sqrt_price("0.01")]
        request = make_custom_sqrt_prices_request(
            prices, liquidity_weights=[Decimal(0), Decimal(1), Decimal(1)]
        )
        with pytest.raises(
            InvalidParameter, match="Liquidity weight at index 0 must be greater than 0, got 0"
        ):
            build_curve_with_custom_sqrt_prices(request)

    def test_weight_count_mismatch_raises(self):
        prices = [sqrt_price("0.001"), sqrt_price("0.01")]
        request = make_custom_sqrt_prices_request(prices, liquidity_weights=[Decimal(1)] * 2)
        with pytest.raises(InvalidParameter, match="length"):
            build_curve_with_custom_sqrt_prices(request)


class TestBuildCurveWithThreeSegments:
    """Tests for build_curve_with_three_segments."""

    def test_builds_and_validates(self):
        config = build_curve_with_three_segments(make_three_segments_request(), validate=True)
        assert_well_formed(config)
        assert [point.sqrt_price for point in config.curve[:2]] == [
            sqrt_price("0.0001"),
            sqrt_price("0.0003"),
        ]
        assert len(config.curve) == 3

    def test_allocation_must_sum_to_100(self):
        with pytest.raises(InvalidParameter, match="sum to 100"):
            build_curve_with_three_segments(make_three_segments_request(token_allocation=(50, 50, 10)))

    def test_allocation_must_be_positive(self):
        with pytest.raises(InvalidParameter, match="greater than 0"):
            build_curve_with_three_segments(make_three_segments_request(token_allocation=(0, 20, 80)))

    def test_phase1_above_initial_price(self):
        request = make_three_segments_request(phase1_end_price=Decimal("0.00002"))
        with pytest.raises(InvalidParameter, match="phase1EndPrice"):
            build_curve_with_three_segments(request)

    def test_phases_ascend(self):
        request = make_three_segments_request(phase2_end_price=Decimal("0.0001"))
        with pytest.raises(InvalidParameter, match="greater than phase1EndPrice"):
            build_curve_with_three_segments(request)

    def test_phase2_below_migration_price(self):
        request = make_three_segments_request(phase2_end_price=Decimal("0.0006"))
        with pytest.raises(InvalidParameter, match="less than migration price"):
            build_curve_with_three_segments(request)

