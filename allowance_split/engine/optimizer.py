"""
allowance_split Optimizer
Turns the continuous optimal split into per-dependent claim fractions.
Pure functions. No I/O.

Called by solve() in tax_engine.py via local import to avoid circular import.
(optimizer.py imports constants from tax_engine, so tax_engine must NOT import this at module level.)
"""
from __future__ import annotations

import logging
from typing import Callable

from allowance_split.engine.tax_engine import BASIC_ALLOWANCE, TIE_TOLERANCE

logger = logging.getLogger(__name__)

FRACTION_STEP = 0.01   # Claim fractions are quantized to hundredths


def _quantize(fraction: float) -> float:
    return round(fraction, 2)


def claimed_amount(fractions: list[float], coefficients: list[float]) -> float:
    """Pool amount parent A claims: Σ fraction × coefficient × BASIC_ALLOWANCE."""
    return sum(f * c * BASIC_ALLOWANCE for f, c in zip(fractions, coefficients))


def allocate_split(x_star: float, coefficients: list[float]) -> list[float]:
    """
    Greedy quantized allocation of x_star across dependents.

    Dependents are filled largest coefficient first (ties keep original order),
    each taking min(1, remaining / share) rounded to hundredths. remaining never
    goes below 0. Returned fractions are in original dependent order and always
    lie in [0, 1].
    """
    order = sorted(range(len(coefficients)), key=lambda i: coefficients[i], reverse=True)

    fractions = [0.0] * len(coefficients)
    remaining = x_star

    for i in order:
        share = coefficients[i] * BASIC_ALLOWANCE
        raw = min(1.0, remaining / share) if share > 0 else 0.0
        fractions[i] = _quantize(raw)
        remaining = max(0.0, remaining - fractions[i] * share)

    return fractions


def correct_rounding(
    fractions: list[float],
    cost_of: Callable[[list[float]], float],
) -> list[float]:
    """
    Single pass of independent ±FRACTION_STEP nudges.

    Every trial changes exactly one coordinate of the ORIGINAL vector; the
    cheapest strictly-improving trial is returned. Never returns a vector
    costlier than the input.
    """
    best = list(fractions)
    best_cost = cost_of(fractions)

    for i, fraction in enumerate(fractions):
        for step in (-FRACTION_STEP, FRACTION_STEP):
            nudged = _quantize(fraction + step)
            if nudged < 0 or nudged > 1:
                continue
            trial = list(fractions)
            trial[i] = nudged
            cost = cost_of(trial)
            if cost < best_cost - TIE_TOLERANCE:
                logger.debug("Rounding correction index=%d fraction=%.2f cost=%.2f", i, nudged, cost)
                best_cost = cost
                best = trial

    return best
