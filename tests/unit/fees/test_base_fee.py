"""Tests for base fee derivation and the per-variant handlers."""

import pytest

from bonding_curve.errors import InvalidParameter
from bonding_curve.fees.base_fee import (
    FeeSchedulerHandler,
    RateLimiterHandler,
    get_base_fee_handler,
    get_base_fee_params,
    get_starting_base_fee_bps,
)
from bonding_curve.models.enums import (
    ActivationType,
    BaseFeeMode,
    CollectFeeMode,
    TradeDirection,
)
from bonding_curve.models.params import FeeSchedulerParams, RateLimiterParams
from bonding_curve.models.requests import (
    BaseFeeRequest,
    FeeSchedulerRequest,
    RateLimiterRequest,
)

QUOTE = CollectFeeMode.QUOTE_TOKEN
SLOT = ActivationType.SLOT
BUY = TradeDirection.QUOTE_TO_BASE

SCHEDULER_REQUEST = BaseFeeRequest(
    base_fee_mode=BaseFeeMode.FEE_SCHEDULER_LINEAR,
    fee_scheduler_param=FeeSchedulerRequest(
        starting_fee_bps=5000, ending_fee_bps=100, number_of_period=100, total_duration=1000
    ),
)
RATE_LIMITER_REQUEST = BaseFeeRequest(
    base_fee_mode=BaseFeeMode.RATE_LIMITER,
    rate_limiter_param=RateLimiterRequest(
        base_fee_bps=100, fee_increment_bps=10, reference_amount=1, max_limiter_duration=10
    ),
)


class TestBaseFeeParams:
    """Tests for get_base_fee_params and get_starting_base_fee_bps."""

    def test_scheduler_variant(self):
        base_fee = get_base_fee_params(SCHEDULER_REQUEST, 9, SLOT)
        assert isinstance(base_fee, FeeSchedulerParams)
        assert base_fee.reduction_factor == 4_900_000

    def test_rate_limiter_variant(self):
        base_fee = get_base_fee_params(RATE_LIMITER_REQUEST, 9, SLOT)
        assert base_fee == RateLimiterParams(10_000_000, 10, 10, 10**9)

    def test_missing_scheduler_raises(self):
        request = BaseFeeRequest(base_fee_mode=BaseFeeMode.FEE_SCHEDULER_EXPONENTIAL)
        with pytest.raises(InvalidParameter, match="Fee scheduler parameters are required"):
            get_base_fee_params(request, 9, SLOT)

    def test_missing_rate_limiter_raises(self):
        request = BaseFeeRequest(base_fee_mode=BaseFeeMode.RATE_LIMITER)
        with pytest.raises(InvalidParameter, match="Rate limiter parameters are required"):
            get_base_fee_params(request, 9, SLOT)

    def test_starting_fee_is_where_the_curve_ends(self):
        """The scheduler's ending fee, or the limiter's cliff."""
        assert get_starting_base_fee_bps(SCHEDULER_REQUEST) == 100
        assert get_starting_base_fee_bps(RATE_LIMITER_REQUEST) == 100


class TestFeeSchedulerHandler:
    """Tests for FeeSchedulerHandler."""

    def test_derived_params_are_valid(self):
        handler = FeeSchedulerHandler(get_base_fee_params(SCHEDULER_REQUEST, 9, SLOT))
        assert handler.check(QUOTE, SLOT) is None
        assert handler.validate(QUOTE, SLOT)

    def test_fixed_fee_is_valid(self):
        assert FeeSchedulerHandler(FeeSchedulerParams(10_000_000, 0, 0, 0)).validate(QUOTE, SLOT)

    def test_mixed_zero_factors(self):
        handler = FeeSchedulerHandler(FeeSchedulerParams(500_000_000, 10, 0, 1))
        assert "all zero or all non-zero" in handler.check(QUOTE, SLOT)
        assert not handler.validate(QUOTE, SLOT)

    def test_decays_below_minimum(self):
        """Linear decay of 5e6 over 100 periods reaches zero."""
        handler = FeeSchedulerHandler(FeeSchedulerParams(500_000_000, 100, 10, 5_000_000))
        assert "is below" in handler.check(QUOTE, SLOT)

    def test_cliff_above_maximum(self):
        handler = FeeSchedulerHandler(FeeSchedulerParams(995_000_000, 0, 0, 0))
        assert "exceeds" in handler.check(QUOTE, SLOT)

    def test_numerator_follows_time(self):
        handler = FeeSchedulerHandler(FeeSchedulerParams(500_000_000, 100, 10, 4_900_000))
        assert handler.get_base_fee_numerator_from_included_fee_amount(0, 0, BUY, 1) == 500_000_000
        assert handler.get_base_fee_numerator_from_excluded_fee_amount(20, 0, BUY, 1) == 490_200_000


class TestRateLimiterHandler:
    """Tests for RateLimiterHandler."""

    PARAMS = RateLimiterParams(10_000_000, 10, 10, 10**9)

    def test_valid(self):
        assert RateLimiterHandler(self.PARAMS).check(QUOTE, SLOT) is None

    def test_requires_quote_collect_mode(self):
        message = RateLimiterHandler(self.PARAMS).check(CollectFeeMode.OUTPUT_TOKEN, SLOT)
        assert "QuoteToken" in message

    def test_zero_limiter_is_valid(self):
        assert RateLimiterHandler(RateLimiterParams(10_000_000, 0, 0, 0)).validate(QUOTE, SLOT)

    def test_partial_zero_factors(self):
        handler = RateLimiterHandler(RateLimiterParams(10_000_000, 10, 0, 10**9))
        assert "all zero or all positive" in handler.check(QUOTE, SLOT)

    def test_duration_above_timestamp_cap(self):
        handler = RateLimiterHandler(RateLimiterParams(10_000_000, 10, 50_000, 10**9))
        assert handler.validate(QUOTE, SLOT)
        assert "exceeds maximum" in handler.check(QUOTE, ActivationType.TIMESTAMP)

    def test_cliff_out_of_range(self):
        handler = RateLimiterHandler(RateLimiterParams(1_000_000, 10, 10, 10**9))
        assert "cliff fee numerator" in handler.check(QUOTE, SLOT)

    def test_numerator_inside_window(self):
        handler = RateLimiterHandler(self.PARAMS)
        assert handler.get_base_fee_numerator_from_included_fee_amount(5, 0, BUY, 2 * 10**9) == 10_500_000
        assert handler.get_base_fee_numerator_from_excluded_fee_amount(5, 0, BUY, 1_979_000_000) == 10_500_000

    def test_cliff_outside_window(self):
        handler = RateLimiterHandler(self.PARAMS)
        assert handler.get_base_fee_numerator_from_included_fee_amount(11, 0, BUY, 2 * 10**9) == 10_000_000
        sell = TradeDirection.BASE_TO_QUOTE
        assert handler.get_base_fee_numerator_from_included_fee_amount(5, 0, sell, 2 * 10**9) == 10_000_000


class TestGetBaseFeeHandler:
    """Tests for handler dispatch."""

    def test_dispatch(self):
        assert isinstance(get_base_fee_handler(FeeSchedulerParams(1, 0, 0, 0)), FeeSchedulerHandler)
        assert isinstance(get_base_fee_handler(RateLimiterParams(1, 0, 0, 0)), RateLimiterHandler)

    def test_unknown_variant_raises(self):
        with pytest.raises(TypeError, match="Unknown base fee variant"):
            get_base_fee_handler(object())  # type: ignore
