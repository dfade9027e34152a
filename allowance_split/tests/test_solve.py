"""
End-to-end solve() tests against hand-computed demo households.

Expected values are in demo_households.py: do NOT change them to match engine
output. If one of these fails, the ENGINE is wrong, not the expected value.
Tolerance: ±0.01 on all monetary assertions.
"""
from __future__ import annotations

import random

import pytest

from allowance_split.engine.tax_engine import (
    effective_lower_rate, household_cost, solve, solve_household,
)
from allowance_split.household.schemas import TaxRates
from allowance_split.tests.demo_households import DEMO_HOUSEHOLDS

MONEY = dict(abs=0.01)


# ===========================================================================
# TEST GROUP 1: Demo household expected figures
# ===========================================================================

@pytest.mark.parametrize("name", list(DEMO_HOUSEHOLDS))
def test_demo_household_expected_figures(demo_household, name: str) -> None:
    household, expected = demo_household(name)
    report = solve_household(household)

    for key, value in expected.items():
        assert getattr(report, key) == pytest.approx(value, **MONEY), (
            f"{name}: {key} expected {value:,.2f}, got {getattr(report, key):,.2f}"
        )


def test_symmetric_parents_equal_cost_at_both_ends(demo_household) -> None:
    household, _ = demo_household("symmetric")
    report = solve_household(household)
    costs = {c.label: c.cost for c in report.candidates}
    assert costs["x_0"] == pytest.approx(costs["x_5"], **MONEY)


def test_young_parent_b_whole_pool_to_a(demo_household) -> None:
    household, _ = demo_household("young_parent_b")
    report = solve_household(household)
    assert report.x_star == pytest.approx(report.pool, **MONEY)
    assert all(entry.fraction_a == 1.0 for entry in report.allocation)


def test_both_exposures_zero_refund_everything(demo_household) -> None:
    household, _ = demo_household("low_incomes")
    report = solve_household(household)
    assert report.h_min == pytest.approx(0, **MONEY)
    assert report.delta_a == pytest.approx(household.parent_a.tax_paid, **MONEY)
    assert report.delta_b == pytest.approx(household.parent_b.tax_paid, **MONEY)


def test_large_income_gap_higher_earner_takes_pool(demo_household) -> None:
    household, _ = demo_household("large_gap")
    report = solve_household(household)
    assert report.x_star == pytest.approx(report.pool, **MONEY)
    assert report.exposure_b > 0
    assert [e.fraction_a for e in report.allocation] == [1.0, 1.0, 1.0]


def test_partial_disability_floor(demo_household) -> None:
    household, _ = demo_household("partial_disability")
    report = solve_household(household)
    assert report.floor_a == pytest.approx(9_360, **MONEY)
    assert report.floor_b == pytest.approx(7_200, **MONEY)


def test_delta_is_tax_paid_minus_tax(make_parent, rates) -> None:
    parent = make_parent(income_annual=100_000, tax_paid=20_000)
    report = solve(parent, parent, rates, child_count=3, tax_year=2025)
    assert report.delta_a == pytest.approx(20_000 - report.tax_a, **MONEY)
    assert report.delta_b == pytest.approx(20_000 - report.tax_b, **MONEY)
    assert report.h_min == pytest.approx(report.tax_a + report.tax_b, **MONEY)


# ===========================================================================
# TEST GROUP 2: Report structure
# ===========================================================================

def test_report_allocation_matches_coefficients(demo_household) -> None:
    household, _ = demo_household("mixed_dependents")
    report = solve_household(household)
    assert [e.index for e in report.allocation] == [0, 1, 2, 3]
    assert [e.coefficient for e in report.allocation] == pytest.approx([0.5, 0.7, 1.0, 0.5])


def test_report_candidates_within_pool(demo_household) -> None:
    for name in DEMO_HOUSEHOLDS:
        household, _ = demo_household(name)
        report = solve_household(household)
        assert len(report.candidates) == 6
        for c in report.candidates:
            assert 0 <= c.x <= report.pool


def test_report_allocated_amount_matches_fractions(demo_household) -> None:
    household, _ = demo_household("five_children")
    report = solve_household(household)
    claimed = sum(e.fraction_a * e.coefficient * 7_200 for e in report.allocation)
    assert report.allocated_a == pytest.approx(claimed, **MONEY)
    assert report.exposure_a == pytest.approx(max(0, report.threshold_a - claimed), **MONEY)


def test_no_dependents_degenerate_report(make_parent, rates) -> None:
    """No dependents → pool 0, every candidate at x=0, empty allocation. Valid, not an error."""
    report = solve(make_parent(), make_parent(income_annual=30_000), rates, tax_year=2025)
    assert report.pool == 0
    assert {c.x for c in report.candidates} == {0}
    assert report.allocation == []
    # a=12800 → 2560, b=22800 → 4560
    assert report.h_min == pytest.approx(7_120, **MONEY)


def test_report_records_tax_year(make_parent, rates) -> None:
    report = solve(make_parent(), make_parent(), rates, child_count=1, tax_year=2031)
    assert report.tax_year == 2031


# ===========================================================================
# TEST GROUP 3: Optimality over the whole domain
# ===========================================================================

@pytest.mark.parametrize("name", list(DEMO_HOUSEHOLDS))
def test_no_random_split_beats_reported_minimum(demo_household, name: str) -> None:
    """
    H(x) >= h_min - ε for 1000 random x in [0, pool].
    The quantized allocation may sit on a slope next to x_star, so ε covers
    one hundredth of the largest share at the highest marginal rate.
    """
    household, _ = demo_household(name)
    report = solve_household(household)
    rates: TaxRates = household.rates
    rate_low_a = effective_lower_rate(household.parent_a.birth_year, rates.lower, 2025)
    rate_low_b = effective_lower_rate(household.parent_b.birth_year, rates.lower, 2025)

    largest_share = max((e.coefficient for e in report.allocation), default=0) * 7_200
    epsilon = 0.01 + 0.01 * largest_share * 2 * rates.higher

    rng = random.Random(name)
    for _ in range(1_000):
        x = rng.uniform(0, report.pool)
        h = household_cost(
            x, report.threshold_a, report.threshold_b, report.pool,
            rate_low_a, rate_low_b, rates.higher,
        )
        assert h >= report.h_min - epsilon


def test_mixed_dependents_exact_optimum(demo_household) -> None:
    """x_star = pool fills every share exactly, so no quantization slack at all."""
    household, _ = demo_household("mixed_dependents")
    report = solve_household(household)
    rates = household.rates
    rate_low_a = effective_lower_rate(1987, rates.lower, 2025)
    rate_low_b = effective_lower_rate(1997, rates.lower, 2025)

    rng = random.Random(42)
    for _ in range(1_000):
        x = rng.uniform(0, report.pool)
        h = household_cost(
            x, report.threshold_a, report.threshold_b, report.pool,
            rate_low_a, rate_low_b, rates.higher,
        )
        assert h >= report.h_min - 0.01
