"""Pytest configuration and fixtures."""

import pytest

from bonding_curve.config import DEFAULT_PROTOCOL_CONFIG, ProtocolConfig
from bonding_curve.math.price import sqrt_price_from_market_cap
from tests.helpers import (
    BASE_DECIMALS,
    INITIAL_MARKET_CAP,
    MIGRATION_MARKET_CAP,
    QUOTE_DECIMALS,
    TOTAL_TOKEN_SUPPLY,
)


@pytest.fixture
def protocol_config() -> ProtocolConfig:
    """Return the default protocol configuration."""
    return DEFAULT_PROTOCOL_CONFIG


@pytest.fixture
def initial_sqrt_price() -> int:
    """Sqrt price of the default initial market cap."""
    return sqrt_price_from_market_cap(
        INITIAL_MARKET_CAP, TOTAL_TOKEN_SUPPLY, BASE_DECIMALS, QUOTE_DECIMALS
    )


@pytest.fixture
def migration_sqrt_price() -> int:
    """Sqrt price of the default migration market cap."""
    return sqrt_price_from_market_cap(
        MIGRATION_MARKET_CAP, TOTAL_TOKEN_SUPPLY, BASE_DECIMALS, QUOTE_DECIMALS
    )
