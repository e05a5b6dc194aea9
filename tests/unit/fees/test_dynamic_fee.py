"""Tests for the dynamic fee overlay."""

import pytest

from bonding_curve.errors import InvalidParameter
from bonding_curve.fees.dynamic_fee import get_dynamic_fee_params, get_variable_fee


class TestDynamicFeeParams:
    """Tests for get_dynamic_fee_params."""

    def test_defaults(self):
        """A 20% price change spans 9 bins each way: 18 bins * 10_000."""
        params = get_dynamic_fee_params(100)
        assert params.bin_step == 1
        assert params.bin_step_u128 == 1_844_674_407_370_955
        assert params.filter_period == 10
        assert params.decay_period == 120
        assert params.reduction_factor == 5000
        assert params.max_volatility_accumulator == 180_000

    def test_variable_fee_control(self):
        """(0.2 * 1e6 * 1e11 - offset) // 180_000^2."""
        assert get_dynamic_fee_params(10).variable_fee_control == 617_280

    def test_control_scales_with_base_fee(self):
        assert get_dynamic_fee_params(100).variable_fee_control == 6_172_836

    def test_smaller_price_change(self):
        params = get_dynamic_fee_params(100, max_price_change_percentage=10)
        assert params.max_volatility_accumulator == 80_000

    def test_price_change_above_cap_raises(self):
        with pytest.raises(InvalidParameter, match="maxPriceChangePercentage"):
            get_dynamic_fee_params(100, max_price_change_percentage=21)


class TestVariableFee:
    """Tests for get_variable_fee."""

    def test_at_max_accumulator(self):
        """The fee at the ceiling lands just under 20% of the base fee."""
        params = get_dynamic_fee_params(10)
        assert get_variable_fee(params, params.max_volatility_accumulator) == 199_999

    def test_zero_accumulator(self):
        assert get_variable_fee(get_dynamic_fee_params(100), 0) == 0

    def test_disabled(self):
        assert get_variable_fee(None, 180_000) == 0
