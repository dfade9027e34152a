"""
allowance_split Tax Engine
Pure Python, deterministic. Same input → same output.

Finds the split of the dependent allowance pool between two co-parents that
minimises the household's combined tax under a fixed two-bracket schedule.

Household cost H(x) is piecewise linear in the split x (pool amount given to
parent A), so its minimum over [0, pool] sits on one of six critical points.
The continuous optimum is then quantized into per-dependent claim fractions
(optimizer.py) and the final taxes are recomputed from those fractions.
"""
from __future__ import annotations

import logging
from typing import Optional

from allowance_split.config import settings
from allowance_split.engine.schemas import (
    AllocationEntry, CandidatePoint, SplitReport,
)
from allowance_split.household.schemas import (
    Disability, HouseholdInput, ParentProfile, TaxRates,
)
from allowance_split.household.validator import validate_business_rules

logger = logging.getLogger(__name__)

# ===========================================================================
# SCHEDULE CONSTANTS
# ===========================================================================

BASIC_ALLOWANCE  = 7_200     # Exemption floor unit and per-coefficient pool unit
BRACKET_BOUNDARY = 60_000    # Lower bracket ceiling: fixed, not a parameter

# ===========================================================================
# DEPENDENT COEFFICIENTS
# ===========================================================================

# Children in claim order. Gaps: 0.2, 0.3, 0.4, ... 0.9
CHILD_COEFFICIENTS: tuple[float, ...] = (0.5, 0.7, 1.0, 1.4, 1.9, 2.5, 3.2, 4.0, 4.9)
DEPENDENT_COEFFICIENT = 0.5  # Every non-child dependent, regardless of position

# ===========================================================================
# FLOOR AND RATE ADJUSTMENTS
# ===========================================================================

PARTIAL_DISABILITY_SHARE = 0.3   # partial → 0.3 × 7200 added to the floor
YOUNG_PARENT_MAX_AGE     = 25    # age <= 25: lower rate 0
REDUCED_RATE_MAX_AGE     = 30    # 25 < age <= 30: lower rate halved

# Costs closer than this are treated as equal (argmin and rounding correction)
TIE_TOLERANCE = 1e-9


# ===========================================================================
# LEAF FUNCTIONS (pure: no side effects, no I/O)
# ===========================================================================

def calculate_bracket_tax(taxable: float, rate_low: float, rate_high: float) -> float:
    """
    Two-bracket progressive tax.
    Non-positive taxable amounts owe nothing; continuous at BRACKET_BOUNDARY.
    """
    if taxable <= 0:
        return 0.0
    if taxable <= BRACKET_BOUNDARY:
        return taxable * rate_low
    return BRACKET_BOUNDARY * rate_low + (taxable - BRACKET_BOUNDARY) * rate_high


def child_coefficient(position: int) -> float:
    """
    Weight of the child at 1-indexed claim position.

    Positions 1-9 come from CHILD_COEFFICIENTS. Past the table, each further
    position p adds p × 0.1 to a running total seeded from the 9th entry, and
    the total is rounded to one decimal.
    """
    if position <= 0:
        return 0.0
    if position <= len(CHILD_COEFFICIENTS):
        return CHILD_COEFFICIENTS[position - 1]
    coefficient = CHILD_COEFFICIENTS[-1]
    for p in range(len(CHILD_COEFFICIENTS) + 1, position + 1):
        coefficient += p * 0.1
    return round(coefficient, 1)


def build_coefficients(child_count: int, dep_count: int) -> list[float]:
    """Children first (by claim position), then one flat weight per other dependent."""
    children = [child_coefficient(n) for n in range(1, child_count + 1)]
    return children + [DEPENDENT_COEFFICIENT] * dep_count


def deduction_pool(coefficients: list[float]) -> float:
    return sum(c * BASIC_ALLOWANCE for c in coefficients)


def effective_lower_rate(
    birth_year: int,
    nominal_rate: float,
    tax_year: Optional[int] = None,
) -> float:
    """
    Lower-bracket rate after the young-parent reduction.
    The higher-bracket rate is never adjusted.
    """
    age = (tax_year or settings.tax_year) - birth_year
    if age <= YOUNG_PARENT_MAX_AGE:
        return 0.0
    if age <= REDUCED_RATE_MAX_AGE:
        return nominal_rate * 0.5
    return nominal_rate


def disability_bonus(disability: Optional[Disability]) -> float:
    if disability == Disability.full:
        return float(BASIC_ALLOWANCE)
    if disability == Disability.partial:
        return PARTIAL_DISABILITY_SHARE * BASIC_ALLOWANCE
    return 0.0


def exemption_floor(parent: ParentProfile) -> float:
    return BASIC_ALLOWANCE + disability_bonus(parent.disability)


# ===========================================================================
# HOUSEHOLD COST AND CRITICAL POINTS
# ===========================================================================

def household_cost(
    x: float,
    a: float,
    b: float,
    pool: float,
    rate_low_a: float,
    rate_low_b: float,
    rate_high: float,
) -> float:
    """
    Combined tax when parent A takes x of the pool and parent B takes pool - x.
    Each parent's exposure floors at 0.
    """
    exposure_a = max(0.0, a - x)
    exposure_b = max(0.0, b - (pool - x))
    return (
        calculate_bracket_tax(exposure_a, rate_low_a, rate_high)
        + calculate_bracket_tax(exposure_b, rate_low_b, rate_high)
    )


def critical_points(a: float, b: float, pool: float) -> list[tuple[str, float]]:
    """
    The six x-values where either exposure crosses 0 or BRACKET_BOUNDARY,
    plus both domain ends. Every point is clamped into [0, pool]; duplicates
    after clamping are kept.
    """
    raw = [
        ("x_0", 0.0),
        ("x_1", a - BRACKET_BOUNDARY),
        ("x_2", a),
        ("x_3", pool - b),
        ("x_4", pool - b + BRACKET_BOUNDARY),
        ("x_5", pool),
    ]
    return [(label, max(0.0, min(pool, x))) for label, x in raw]


def evaluate_candidates(
    a: float,
    b: float,
    pool: float,
    rate_low_a: float,
    rate_low_b: float,
    rate_high: float,
) -> list[CandidatePoint]:
    candidates = []
    for label, x in critical_points(a, b, pool):
        cost = household_cost(x, a, b, pool, rate_low_a, rate_low_b, rate_high)
        logger.debug("Candidate %s x=%.2f cost=%.2f", label, x, cost)
        candidates.append(CandidatePoint(label=label, x=x, cost=cost))
    return candidates


def find_optimal_split(candidates: list[CandidatePoint]) -> CandidatePoint:
    """
    Stable argmin: a later candidate only wins if strictly cheaper (beyond
    TIE_TOLERANCE) than the best seen so far.
    """
    best = candidates[0]
    for candidate in candidates[1:]:
        if candidate.cost < best.cost - TIE_TOLERANCE:
            best = candidate
    return best


# ===========================================================================
# SOLVE: public API
# ===========================================================================

def solve(
    parent_a: ParentProfile,
    parent_b: ParentProfile,
    rates: TaxRates,
    child_count: int = 0,
    dep_count: int = 0,
    tax_year: Optional[int] = None,
) -> SplitReport:
    """
    Optimal allowance split for one household.

    Uses a local import of optimizer to avoid circular import at module level
    (optimizer.py imports constants from this module).
    """
    # Local import breaks the cycle tax_engine → optimizer → tax_engine(constants)
    from allowance_split.engine.optimizer import (
        allocate_split,
        claimed_amount,
        correct_rounding,
    )

    year = tax_year or settings.tax_year

    # Step 1: Coefficients and pool
    coefficients = build_coefficients(child_count, dep_count)
    pool = deduction_pool(coefficients)

    # Step 2: Floors and thresholds
    floor_a = exemption_floor(parent_a)
    floor_b = exemption_floor(parent_b)
    a = max(0.0, parent_a.income_annual - floor_a)
    b = max(0.0, parent_b.income_annual - floor_b)

    # Step 3: Rates
    rate_low_a = effective_lower_rate(parent_a.birth_year, rates.lower, year)
    rate_low_b = effective_lower_rate(parent_b.birth_year, rates.lower, year)
    rate_high = rates.higher

    # Step 4: Continuous optimum over the critical points
    candidates = evaluate_candidates(a, b, pool, rate_low_a, rate_low_b, rate_high)
    best = find_optimal_split(candidates)

    # Step 5: Quantize, then repair rounding loss
    def cost_of(fractions: list[float]) -> float:
        x = claimed_amount(fractions, coefficients)
        return household_cost(x, a, b, pool, rate_low_a, rate_low_b, rate_high)

    fractions = correct_rounding(allocate_split(best.x, coefficients), cost_of)

    # Step 6: Final figures from the corrected fractions
    allocated_a = claimed_amount(fractions, coefficients)
    exposure_a = max(0.0, a - allocated_a)
    exposure_b = max(0.0, b - (pool - allocated_a))
    tax_a = calculate_bracket_tax(exposure_a, rate_low_a, rate_high)
    tax_b = calculate_bracket_tax(exposure_b, rate_low_b, rate_high)

    logger.info(
        "Split solved dependents=%d pool=%.2f x_star=%s allocated_a=%.2f h_min=%.2f",
        len(coefficients),
        pool,
        best.label,
        allocated_a,
        tax_a + tax_b,
    )

    return SplitReport(
        tax_year=year,
        x_star=best.x,
        pool=pool,
        allocated_a=allocated_a,
        threshold_a=a,
        threshold_b=b,
        floor_a=floor_a,
        floor_b=floor_b,
        h_min=tax_a + tax_b,
        tax_a=tax_a,
        tax_b=tax_b,
        delta_a=parent_a.tax_paid - tax_a,
        delta_b=parent_b.tax_paid - tax_b,
        exposure_a=exposure_a,
        exposure_b=exposure_b,
        allocation=[
            AllocationEntry(index=i, coefficient=c, fraction_a=f)
            for i, (c, f) in enumerate(zip(coefficients, fractions))
        ],
        candidates=candidates,
    )


def solve_household(household: HouseholdInput) -> SplitReport:
    """
    Validate business rules, then solve.

    Raises:
        ValueError: JSON-encoded list of {field, issue} violations.
    """
    validate_business_rules(household)
    return solve(
        household.parent_a,
        household.parent_b,
        household.rates,
        child_count=household.child_count,
        dep_count=household.dep_count,
        tax_year=household.tax_year,
    )
