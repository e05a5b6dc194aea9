"""Curve solvers: turn supply and price targets into segment liquidities.

Each solver answers an inverse problem. Given the boundaries of the
segments and the amounts the curve must sell (base) and raise (quote), it
finds the constant liquidity of every segment. Over a segment [p_i, p_i+1]:

    base_i  = l_i * (1/p_i - 1/p_i+1)
    quote_i = l_i * (p_i+1 - p_i) / 2^128

so the two conservation laws are linear in the liquidities and small
systems are solved exactly with Cramer's rule in high-precision Decimal.
"""

from __future__ import annotations

import decimal
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

import structlog

from bonding_curve.errors import InfeasibleCurve, InvalidParameter
from bonding_curve.math.curve import get_liquidity
from bonding_curve.math.decimal_utils import (
    DECIMAL_HIGH_PREC_CONTEXT,
    Numeric,
    decimal_pow,
    decimal_sqrt,
    floor_to_int,
    to_decimal,
)
from bonding_curve.models.params import Curve, CurvePoint

logger = structlog.get_logger()

__all__ = [
    "CurveSolution",
    "CandidateResult",
    "get_first_curve",
    "get_two_curve",
    "two_curve_mid_price_candidates",
    "try_two_curve_candidates",
    "select_two_curve",
    "get_three_curve",
    "get_weighted_curve",
]

_TWO_POW_128 = Decimal(2**128)


@dataclass(frozen=True)
class CurveSolution:
    """Outcome of a curve solve.

    Attributes:
        is_ok: Whether a non-negative solution was found
        sqrt_start_price: Q64.64 start price (0 when the solve failed)
        curve: Solved segments (empty when the solve failed)
        error: Why the solve failed, None on success
    """

    is_ok: bool
    sqrt_start_price: int
    curve: Curve
    error: str | None = None

    @classmethod
    def ok(cls, sqrt_start_price: int, curve: Sequence[CurvePoint]) -> CurveSolution:
        return cls(is_ok=True, sqrt_start_price=sqrt_start_price, curve=tuple(curve))

    @classmethod
    def failed(cls, error: str) -> CurveSolution:
        return cls(is_ok=False, sqrt_start_price=0, curve=(), error=error)


@dataclass(frozen=True)
class CandidateResult:
    """One tried midpoint of the two-segment solver."""

    mid_sqrt_price: int
    solution: CurveSolution


# =============================================================================
# Single segment
# =============================================================================


def get_first_curve(
    migration_sqrt_price: int,
    migration_base_amount: int,
    swap_amount: int,
    migration_quote_threshold: int,
    migration_fee_percent: Numeric,
) -> CurveSolution:
    """Single segment ending at the migration price.

    The start price follows from the migrated pool pricing its deposit at
    the migration price:

        p_min = p_max * migration_base / (swap * (1 - fee/100))

    Args:
        migration_sqrt_price: Q64.64 sqrt price at migration
        migration_base_amount: Base lamports deposited in the migrated pool
        swap_amount: Base lamports sold on the curve
        migration_quote_threshold: Quote lamports raised on the curve
        migration_fee_percent: Migration fee in whole percent

    Returns:
        CurveSolution with one segment

    Raises:
        InvalidParameter: If the swap amount after fees is not positive
    """
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        fee = to_decimal(migration_fee_percent)
        denominator = Decimal(swap_amount) * (100 - fee) / 100
        if denominator <= 0:
            raise InvalidParameter(
                f"Swap amount after migration fee must be greater than 0, got {denominator}"
            )
        sqrt_start_price = floor_to_int(
            Decimal(migration_sqrt_price) * Decimal(migration_base_amount) / denominator
        )

    liquidity = get_liquidity(
        swap_amount, migration_quote_threshold, sqrt_start_price, migration_sqrt_price
    )
    logger.debug(
        "curve_solved",
        solver="first_curve",
        sqrt_start_price=sqrt_start_price,
        liquidity=liquidity,
    )
    return CurveSolution.ok(sqrt_start_price, [CurvePoint(migration_sqrt_price, liquidity)])


# =============================================================================
# Two segments
# =============================================================================


def get_two_curve(
    migration_sqrt_price: int,
    mid_sqrt_price: int,
    initial_sqrt_price: int,
    swap_amount: int,
    migration_quote_threshold: int,
) -> CurveSolution:
    """Two segments [initial, mid] and [mid, migration].

    Solves
        l0 * a1 + l1 * b1 = swap_amount
        l0 * a2 + l1 * b2 = migration_quote_threshold * 2^128

    with a1 = 1/p0 - 1/p1, b1 = 1/p1 - 1/p2, a2 = p1 - p0, b2 = p2 - p1.

    Returns:
        CurveSolution, failed when either liquidity comes out negative
    """
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        p0 = Decimal(initial_sqrt_price)
        p1 = Decimal(mid_sqrt_price)
        p2 = Decimal(migration_sqrt_price)

        a1 = 1 / p0 - 1 / p1
        b1 = 1 / p1 - 1 / p2
        c1 = Decimal(swap_amount)

        a2 = p1 - p0
        b2 = p2 - p1
        c2 = Decimal(migration_quote_threshold) * _TWO_POW_128

        determinant = a1 * b2 - a2 * b1
        if determinant == 0:
            return CurveSolution.failed("Two-segment system is singular")

        l0 = (c1 * b2 - c2 * b1) / determinant
        l1 = (c2 * a1 - c1 * a2) / determinant

        if l0 < 0 or l1 < 0:
            return CurveSolution.failed(
                f"Negative liquidity for mid sqrt price {mid_sqrt_price}: l0={l0:.6E}, l1={l1:.6E}"
            )

        curve = [
            CurvePoint(mid_sqrt_price, floor_to_int(l0)),
            CurvePoint(migration_sqrt_price, floor_to_int(l1)),
        ]

    return CurveSolution.ok(initial_sqrt_price, curve)


def two_curve_mid_price_candidates(
    initial_sqrt_price: int, migration_sqrt_price: int
) -> list[int]:
    """Midpoints tried by the two-segment solver, in order.

    Geometric points skewed toward the start, skewed toward the end, then
    the plain geometric mean.
    """
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        p0 = Decimal(initial_sqrt_price)
        p2 = Decimal(migration_sqrt_price)
        quarter = Decimal("0.25")
        return [
            floor_to_int(decimal_pow(p0 * p0 * p0 * p2, quarter)),
            floor_to_int(decimal_pow(p0 * p2 * p2 * p2, quarter)),
            floor_to_int(decimal_sqrt(p0 * p2)),
        ]


def try_two_curve_candidates(
    migration_sqrt_price: int,
    initial_sqrt_price: int,
    swap_amount: int,
    migration_quote_threshold: int,
) -> list[CandidateResult]:
    """Try each candidate midpoint until one yields a feasible curve.

    Returns:
        Every candidate tried, in order; only the last can be feasible
    """
    results: list[CandidateResult] = []
    for mid_sqrt_price in two_curve_mid_price_candidates(
        initial_sqrt_price, migration_sqrt_price
    ):
        solution = get_two_curve(
            migration_sqrt_price,
            mid_sqrt_price,
            initial_sqrt_price,
            swap_amount,
            migration_quote_threshold,
        )
        results.append(CandidateResult(mid_sqrt_price=mid_sqrt_price, solution=solution))
        if solution.is_ok:
            break
        logger.warning(
            "two_curve_candidate_rejected",
            mid_sqrt_price=mid_sqrt_price,
            reason=solution.error,
        )
    return results


def select_two_curve(
    migration_sqrt_price: int,
    initial_sqrt_price: int,
    swap_amount: int,
    migration_quote_threshold: int,
) -> CurveSolution:
    """First feasible two-segment curve over the candidate midpoints.

    Raises:
        InfeasibleCurve: If no candidate midpoint is feasible
    """
    results = try_two_curve_candidates(
        migration_sqrt_price, initial_sqrt_price, swap_amount, migration_quote_threshold
    )
    accepted = results[-1]
    if not accepted.solution.is_ok:
        raise InfeasibleCurve(
            f"No feasible two-segment curve between sqrt prices {initial_sqrt_price} "
            f"and {migration_sqrt_price} for swap amount {swap_amount} "
            f"and migration quote threshold {migration_quote_threshold}"
        )

    logger.debug(
        "curve_solved",
        solver="two_curve",
        mid_sqrt_price=accepted.mid_sqrt_price,
        candidates_tried=len(results),
    )
    return accepted.solution


# =============================================================================
# Three segments
# =============================================================================


def _det3(m: list[list[Decimal]]) -> Decimal:
    return (
        m[0][0] * (m[1][1] * m[2][2] - m[1][2] * m[2][1])
        - m[0][1] * (m[1][0] * m[2][2] - m[1][2] * m[2][0])
        + m[0][2] * (m[1][0] * m[2][1] - m[1][1] * m[2][0])
    )


def get_three_curve(
    initial_sqrt_price: int,
    phase1_sqrt_price: int,
    phase2_sqrt_price: int,
    migration_sqrt_price: int,
    swap_amount: int,
    migration_quote_threshold: int,
    token_allocation: Sequence[int],
) -> CurveSolution:
    """Three segments over p0 < p1 < p2 < p3.

    Solves, with a_i = 1/p_i - 1/p_i+1 and b_i = p_i+1 - p_i:

        l0*a0 + l1*a1 + l2*a2 = swap_amount
        l0*b0 + l1*b1 + l2*b2 = migration_quote_threshold * 2^128
        alloc1 * l0*a0 - alloc0 * l1*a1 = 0

    The last row keeps the first two phases at their relative share of
    the base tokens sold.

    Returns:
        CurveSolution, failed when any liquidity comes out negative or
        floors to zero

    Raises:
        InvalidParameter: If the prices are not strictly ascending or the
            allocation is not three positive entries
    """
    prices = [initial_sqrt_price, phase1_sqrt_price, phase2_sqrt_price, migration_sqrt_price]
    if any(lower >= upper for lower, upper in zip(prices, prices[1:])):
        raise InvalidParameter(f"Sqrt prices must be strictly ascending, got {prices}")
    if len(token_allocation) != 3 or any(share <= 0 for share in token_allocation):
        raise InvalidParameter(
            f"Token allocation must be three positive values, got {list(token_allocation)}"
        )

    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        p = [Decimal(price) for price in prices]
        a = [1 / p[i] - 1 / p[i + 1] for i in range(3)]
        b = [p[i + 1] - p[i] for i in range(3)]
        alloc0 = Decimal(token_allocation[0])
        alloc1 = Decimal(token_allocation[1])

        matrix = [
            a,
            b,
            [alloc1 * a[0], -alloc0 * a[1], Decimal(0)],
        ]
        rhs = [
            Decimal(swap_amount),
            Decimal(migration_quote_threshold) * _TWO_POW_128,
            Decimal(0),
        ]

        determinant = _det3(matrix)
        if determinant == 0:
            return CurveSolution.failed("Three-segment system is singular")

        liquidities: list[Decimal] = []
        for column in range(3):
            replaced = [
                [rhs[row] if col == column else matrix[row][col] for col in range(3)]
                for row in range(3)
            ]
            liquidities.append(_det3(replaced) / determinant)

        if any(liquidity < 0 for liquidity in liquidities):
            return CurveSolution.failed(
                "Negative liquidity for phase boundaries "
                f"{prices}: " + ", ".join(f"l{i}={l:.6E}" for i, l in enumerate(liquidities))
            )

        curve = [
            CurvePoint(prices[i + 1], floor_to_int(liquidities[i])) for i in range(3)
        ]

    # A phase whose liquidity floors to zero cannot be traded through
    empty = [index for index, point in enumerate(curve) if point.liquidity <= 0]
    if empty:
        return CurveSolution.failed(
            f"Zero liquidity in phases {empty} for phase boundaries {prices}"
        )

    logger.debug(
        "curve_solved",
        solver="three_curve",
        sqrt_start_price=initial_sqrt_price,
        liquidities=[point.liquidity for point in curve],
    )
    return CurveSolution.ok(initial_sqrt_price, curve)


# =============================================================================
# Weighted segments
# =============================================================================


def get_weighted_curve(
    sqrt_prices: Sequence[int],
    liquidity_weights: Sequence[Numeric],
    total_swap_and_migration_amount: int,
    migration_fee_percent: Numeric,
    migration_sqrt_price: int | None = None,
) -> CurveSolution:
    """Segments over fixed boundaries with liquidity proportional to weights.

    Every segment gets l * k_i. The swap amount plus the base the migrated
    pool needs at the migration price must equal total_swap_and_migration_amount:

        l * sum(k_i * (w1_i + w2_i)) = total
        w1_i = (p_i - p_i-1) / (p_i * p_i-1)
        w2_i = (p_i - p_i-1) * (1 - fee/100) / p_max^2

    Args:
        sqrt_prices: Ascending segment boundaries; the first is the start price
        liquidity_weights: One positive weight per segment
        total_swap_and_migration_amount: Base lamports for curve plus migration
        migration_fee_percent: Migration fee in whole percent
        migration_sqrt_price: p_max, and the upper bound of the last segment.
            Defaults to sqrt_prices[-1]; geometric boundaries pass the exact
            target here while the sum keeps the computed last boundary.

    Returns:
        CurveSolution with len(sqrt_prices) - 1 segments

    Raises:
        InvalidParameter: On a weight count mismatch or a non-positive weight
    """
    if len(liquidity_weights) != len(sqrt_prices) - 1:
        raise InvalidParameter(
            f"Expected {len(sqrt_prices) - 1} liquidity weights, got {len(liquidity_weights)}"
        )

    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        weights = [to_decimal(weight) for weight in liquidity_weights]
        for index, weight in enumerate(weights):
            if weight <= 0:
                raise InvalidParameter(
                    f"Liquidity weight at index {index} must be greater than 0, got {weight}"
                )

        if migration_sqrt_price is None:
            migration_sqrt_price = sqrt_prices[-1]
        p_max = Decimal(migration_sqrt_price)
        fee_factor = (100 - to_decimal(migration_fee_percent)) / 100

        sum_factor = Decimal(0)
        for i in range(1, len(sqrt_prices)):
            p_i = Decimal(sqrt_prices[i])
            p_prev = Decimal(sqrt_prices[i - 1])
            w1 = (p_i - p_prev) / (p_i * p_prev)
            w2 = (p_i - p_prev) * fee_factor / (p_max * p_max)
            sum_factor += weights[i - 1] * (w1 + w2)

        if sum_factor <= 0:
            raise InvalidParameter("Sqrt prices must be strictly ascending")

        scale = Decimal(total_swap_and_migration_amount) / sum_factor
        upper_bounds = [*sqrt_prices[1:-1], migration_sqrt_price]
        curve = [
            CurvePoint(upper_bounds[i], floor_to_int(scale * weights[i]))
            for i in range(len(weights))
        ]

    logger.debug(
        "curve_solved",
        solver="weighted_curve",
        segments=len(curve),
        sqrt_start_price=sqrt_prices[0],
    )
    return CurveSolution.ok(sqrt_prices[0], curve)
