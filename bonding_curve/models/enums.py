"""Enumerations shared by requests, output records and the math layer.

Integer values are the discriminants the on-chain program expects.
"""

from enum import Enum, IntEnum

__all__ = [
    "ActivationType",
    "TokenType",
    "CollectFeeMode",
    "MigrationOption",
    "BaseFeeMode",
    "MigrationFeeOption",
    "TokenDecimal",
    "TradeDirection",
    "Rounding",
    "TokenUpdateAuthorityOption",
    "DammV2DynamicFeeMode",
    "DammV2BaseFeeMode",
]


class ActivationType(IntEnum):
    """Unit in which activation points and durations are measured."""

    SLOT = 0
    TIMESTAMP = 1


class TokenType(IntEnum):
    """Token program of the base mint."""

    SPL = 0
    TOKEN_2022 = 1


class CollectFeeMode(IntEnum):
    """Which side of a trade the pool collects its fee in."""

    QUOTE_TOKEN = 0
    OUTPUT_TOKEN = 1


class MigrationOption(IntEnum):
    """Constant-product pool the curve migrates into."""

    MET_DAMM = 0
    MET_DAMM_V2 = 1


class BaseFeeMode(IntEnum):
    """Base fee policy of the bonding curve pool."""

    FEE_SCHEDULER_LINEAR = 0
    FEE_SCHEDULER_EXPONENTIAL = 1
    RATE_LIMITER = 2


class MigrationFeeOption(IntEnum):
    """Fee tier of the migrated pool."""

    FIXED_BPS_25 = 0
    FIXED_BPS_30 = 1
    FIXED_BPS_100 = 2
    FIXED_BPS_200 = 3
    FIXED_BPS_400 = 4
    FIXED_BPS_600 = 5
    # DAMM v2 only
    CUSTOMIZABLE = 6


class TokenDecimal(IntEnum):
    """Supported mint decimals."""

    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9


class TradeDirection(IntEnum):
    """Swap direction relative to the base token."""

    BASE_TO_QUOTE = 0
    QUOTE_TO_BASE = 1


class Rounding(str, Enum):
    """Integer division rounding mode.

    Committed reserve amounts round up (protocol-favoring); derived or
    query amounts round down.
    """

    UP = "up"
    DOWN = "down"


class TokenUpdateAuthorityOption(IntEnum):
    """Who keeps update (and optionally mint) authority over the base token."""

    CREATOR_UPDATE_AUTHORITY = 0
    IMMUTABLE = 1
    PARTNER_UPDATE_AUTHORITY = 2
    CREATOR_UPDATE_AND_MINT_AUTHORITY = 3
    PARTNER_UPDATE_AND_MINT_AUTHORITY = 4


class DammV2DynamicFeeMode(IntEnum):
    """Whether the migrated DAMM v2 pool uses a dynamic fee."""

    DISABLED = 0
    ENABLED = 1


class DammV2BaseFeeMode(IntEnum):
    """Base fee policy of the migrated DAMM v2 pool."""

    FEE_TIME_SCHEDULER_LINEAR = 0
    FEE_TIME_SCHEDULER_EXPONENTIAL = 1
    RATE_LIMITER = 2
    FEE_MARKET_CAP_SCHEDULER_LINEAR = 3
    FEE_MARKET_CAP_SCHEDULER_EXPONENTIAL = 4
