"""Curve solvers and supply accounting."""

from bonding_curve.curves.solvers import (
    CandidateResult,
    CurveSolution,
    get_first_curve,
    get_three_curve,
    get_two_curve,
    get_weighted_curve,
    select_two_curve,
    try_two_curve_candidates,
    two_curve_mid_price_candidates,
)
from bonding_curve.curves.supply import (
    CurveBreakdown,
    Tokenomics,
    calculate_adjusted_percentage_supply_on_migration,
    get_base_token_for_swap,
    get_curve_breakdown,
    get_migration_base_token,
    get_migration_quote_amount,
    get_migration_quote_amount_from_migration_quote_threshold,
    get_migration_quote_threshold_from_migration_quote_amount,
    get_migration_threshold_price,
    get_percentage_supply_on_migration,
    get_protocol_migration_fee,
    get_quote_reserve_from_next_sqrt_price,
    get_swap_amount_with_buffer,
    get_tokenomics,
    get_total_supply_from_curve,
    get_total_token_supply,
    get_total_vesting_amount,
)

__all__ = [
    # Solvers
    "CurveSolution",
    "CandidateResult",
    "get_first_curve",
    "get_two_curve",
    "two_curve_mid_price_candidates",
    "try_two_curve_candidates",
    "select_two_curve",
    "get_three_curve",
    "get_weighted_curve",
    # Supply accounting
    "CurveBreakdown",
    "Tokenomics",
    "get_base_token_for_swap",
    "get_migration_threshold_price",
    "get_curve_breakdown",
    "get_quote_reserve_from_next_sqrt_price",
    "get_migration_quote_amount_from_migration_quote_threshold",
    "get_migration_quote_threshold_from_migration_quote_amount",
    "get_migration_quote_amount",
    "get_migration_base_token",
    "get_protocol_migration_fee",
    "get_total_vesting_amount",
    "get_total_token_supply",
    "get_swap_amount_with_buffer",
    "get_total_supply_from_curve",
    "get_percentage_supply_on_migration",
    "calculate_adjusted_percentage_supply_on_migration",
    "get_tokenomics",
]
