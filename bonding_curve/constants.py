"""Protocol constants for the dynamic bonding curve program.

Centralizes integer domains, fee bounds and defaults. Values must match the
on-chain program exactly; most of them are re-exposed through ProtocolConfig
so callers can inject alternative bounds in tests.
"""

# =============================================================================
# Integer domains
# =============================================================================

U16_MAX = 65_535
U24_MAX = 16_777_215
U64_MAX = 2**64 - 1
U128_MAX = 2**128 - 1

# Q64.64 fixed point
RESOLUTION = 64
ONE_Q64 = 1 << RESOLUTION

# =============================================================================
# Curve
# =============================================================================

MAX_CURVE_POINT = 16

MIN_SQRT_PRICE = 4_295_048_016
MAX_SQRT_PRICE = 79_226_673_521_066_979_257_578_248_091

# Swap amount is inflated by this percentage to absorb rounding drift
SWAP_BUFFER_PERCENTAGE = 25

# =============================================================================
# Base fee
# =============================================================================

FEE_DENOMINATOR = 1_000_000_000
MAX_BASIS_POINT = 10_000

MIN_FEE_BPS = 25  # 0.25%
MAX_FEE_BPS = 9900  # 99%
MIN_FEE_NUMERATOR = 2_500_000  # 0.25%
MAX_FEE_NUMERATOR = 990_000_000  # 99%

# Rate limiter window caps (12 hours)
MAX_RATE_LIMITER_DURATION_IN_SECONDS = 43_200
MAX_RATE_LIMITER_DURATION_IN_SLOTS = 108_000

# Largest trade size the rate limiter max-fee check extrapolates to (2^53 - 1)
RATE_LIMITER_MAX_CHECK_AMOUNT = 9_007_199_254_740_991

# =============================================================================
# Dynamic fee
# =============================================================================

DYNAMIC_FEE_FILTER_PERIOD_DEFAULT = 10  # seconds
DYNAMIC_FEE_DECAY_PERIOD_DEFAULT = 120  # seconds
DYNAMIC_FEE_REDUCTION_FACTOR_DEFAULT = 5000  # 50%
DYNAMIC_FEE_SCALING_FACTOR = 100_000_000_000
DYNAMIC_FEE_ROUNDING_OFFSET = 99_999_999_999
BIN_STEP_BPS_DEFAULT = 1
# bin_step << 64 / MAX_BASIS_POINT
BIN_STEP_BPS_U128_DEFAULT = 1_844_674_407_370_955
MAX_PRICE_CHANGE_PERCENTAGE_DEFAULT = 20

# =============================================================================
# Protocol and referral fees
# =============================================================================

PROTOCOL_FEE_PERCENT = 20
HOST_FEE_PERCENT = 20

# =============================================================================
# Migration
# =============================================================================

MAX_MIGRATION_FEE_PERCENTAGE = 99
MAX_CREATOR_MIGRATION_FEE_PERCENTAGE = 100

# At least this much LP must still be locked SECONDS_PER_DAY after migration
MIN_LOCKED_LIQUIDITY_BPS = 1000
SECONDS_PER_DAY = 86_400
# Two years; cliff points are relative to the migration time
MAX_LOCK_DURATION_IN_SECONDS = 63_072_000

MIN_MIGRATED_POOL_FEE_BPS = 10  # 0.1%
MAX_MIGRATED_POOL_FEE_BPS = 1000  # 10%

# =============================================================================
# Pool creation fee (lamports)
# =============================================================================

MIN_POOL_CREATION_FEE = 1_000_000
MAX_POOL_CREATION_FEE = 100_000_000_000
