"""Tests for single-segment reserve integrals.

The fixtures use a segment from sqrt price 1 to 2 (Q64.64) with liquidity
1e9 * 2^64, which spans exactly 5e8 base and 1e9 quote lamports.
"""

import pytest

from bonding_curve.constants import ONE_Q64
from bonding_curve.errors import InvalidParameter
from bonding_curve.math.curve import (
    get_delta_amount_base_unsigned,
    get_delta_amount_quote_unsigned,
    get_initial_liquidity_from_delta_base,
    get_initial_liquidity_from_delta_quote,
    get_liquidity,
    get_next_sqrt_price_from_input,
)
from bonding_curve.models.enums import Rounding
from bonding_curve.safe_int import Underflow

LOWER = ONE_Q64
UPPER = 2 * ONE_Q64
LIQUIDITY = 10**9 * ONE_Q64


class TestDeltaAmounts:
    """Tests for base and quote deltas."""

    def test_base_delta_exact(self):
        for rounding in Rounding:
            assert get_delta_amount_base_unsigned(LOWER, UPPER, LIQUIDITY, rounding) == 5 * 10**8

    def test_quote_delta_exact(self):
        for rounding in Rounding:
            assert get_delta_amount_quote_unsigned(LOWER, UPPER, LIQUIDITY, rounding) == 10**9

    def test_base_delta_rounding(self):
        """One extra unit of liquidity leaves a fractional lamport."""
        assert get_delta_amount_base_unsigned(LOWER, UPPER, LIQUIDITY + 1, Rounding.DOWN) == 5 * 10**8
        assert get_delta_amount_base_unsigned(LOWER, UPPER, LIQUIDITY + 1, Rounding.UP) == 5 * 10**8 + 1

    def test_quote_delta_rounding(self):
        assert get_delta_amount_quote_unsigned(LOWER, UPPER, LIQUIDITY + 1, Rounding.DOWN) == 10**9
        assert get_delta_amount_quote_unsigned(LOWER, UPPER, LIQUIDITY + 1, Rounding.UP) == 10**9 + 1

    def test_inverted_bounds_raise(self):
        """upper < lower underflows."""
        with pytest.raises(Underflow):
            get_delta_amount_quote_unsigned(UPPER, LOWER, LIQUIDITY, Rounding.DOWN)
        with pytest.raises(Underflow):
            get_delta_amount_base_unsigned(UPPER, LOWER, LIQUIDITY, Rounding.DOWN)


class TestLiquidityFromAmounts:
    """Tests for liquidity recovered from amounts."""

    def test_from_quote(self):
        assert get_initial_liquidity_from_delta_quote(10**9, LOWER, UPPER) == LIQUIDITY

    def test_from_base(self):
        assert get_initial_liquidity_from_delta_base(5 * 10**8, UPPER, LOWER) == LIQUIDITY

    def test_get_liquidity_takes_smaller(self):
        """The binding side determines the liquidity."""
        assert get_liquidity(5 * 10**8, 10**9, LOWER, UPPER) == LIQUIDITY
        assert get_liquidity(5 * 10**8, 5 * 10**8, LOWER, UPPER) == LIQUIDITY // 2


class TestNextSqrtPrice:
    """Tests for price movement from an input amount."""

    def test_quote_in_moves_price_up(self):
        """Spending the whole quote span reaches the upper bound."""
        assert get_next_sqrt_price_from_input(LOWER, LIQUIDITY, 10**9, False) == UPPER

    def test_base_in_moves_price_down(self):
        """Selling the whole base span returns to the lower bound."""
        assert get_next_sqrt_price_from_input(UPPER, LIQUIDITY, 5 * 10**8, True) == LOWER

    def test_zero_amount_keeps_price(self):
        assert get_next_sqrt_price_from_input(UPPER, LIQUIDITY, 0, True) == UPPER

    def test_zero_liquidity_raises(self):
        with pytest.raises(InvalidParameter, match="liquidity"):
            get_next_sqrt_price_from_input(LOWER, 0, 1, False)

    def test_zero_price_raises(self):
        with pytest.raises(InvalidParameter, match="sqrt_price"):
            get_next_sqrt_price_from_input(0, LIQUIDITY, 1, False)
