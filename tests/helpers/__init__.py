"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Token setup and market cap targets
- factories: Build request factory functions
"""

from tests.helpers.constants import (
    BASE_DECIMALS,
    INITIAL_MARKET_CAP,
    MIGRATION_MARKET_CAP,
    QUOTE_DECIMALS,
    SECONDS_PER_DAY,
    SECONDS_PER_YEAR,
    TOTAL_TOKEN_SUPPLY,
)
from tests.helpers.factories import (
    make_base_fields,
    make_build_curve_request,
    make_custom_sqrt_prices_request,
    make_fee_scheduler_request,
    make_liquidity_weights_request,
    make_market_cap_request,
    make_mid_price_request,
    make_rate_limiter_request,
    make_three_segments_request,
    make_two_segments_request,
)

__all__ = [
    # Constants
    "TOTAL_TOKEN_SUPPLY",
    "BASE_DECIMALS",
    "QUOTE_DECIMALS",
    "INITIAL_MARKET_CAP",
    "MIGRATION_MARKET_CAP",
    "SECONDS_PER_DAY",
    "SECONDS_PER_YEAR",
    # Factories
    "make_fee_scheduler_request",
    "make_rate_limiter_request",
    "make_base_fields",
    "make_build_curve_request",
    "make_market_cap_request",
    "make_two_segments_request",
    "make_mid_price_request",
    "make_liquidity_weights_request",
    "make_custom_sqrt_prices_request",
    "make_three_segments_request",
]
