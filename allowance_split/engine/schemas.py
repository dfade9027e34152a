"""
schemas.py: engine output data contracts (pydantic v2).

Defines:
  - AllocationEntry  (per-dependent claim fraction for parent A)
  - CandidatePoint   (one critical point with its evaluated household cost)
  - SplitReport      (full solve output: public API of the engine)
"""
from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# AllocationEntry: one dependent's quantized claim fraction
# ---------------------------------------------------------------------------

class AllocationEntry(BaseModel):
    """
    fraction_a is the share of this dependent's weighted allowance claimed by
    parent A, in hundredths. Parent B implicitly claims 1 - fraction_a.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    index: int                                   # Position in the coefficient sequence
    coefficient: float
    fraction_a: float = Field(..., ge=0, le=1)


# ---------------------------------------------------------------------------
# CandidatePoint: evaluated critical point
# ---------------------------------------------------------------------------

class CandidatePoint(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    label: str       # x_0 .. x_5, in generation order
    x: float         # Clamped into [0, pool]
    cost: float      # Household cost at x


# ---------------------------------------------------------------------------
# SplitReport: solve() output
# ---------------------------------------------------------------------------

class SplitReport(BaseModel):
    """
    Output of solve().

    Computation sequence:
      1. coefficients → pool = Σ coefficient × 7200
      2. floor = 7200 + disability bonus; threshold = max(0, income - floor)
      3. critical points → x_star (argmin of household cost)
      4. x_star → greedy fractions → single-pass rounding correction
      5. allocated_a = Σ fraction × coefficient × 7200
      6. exposure, tax and delta per parent recomputed from allocated_a

    h_min, tax_*, delta_* and exposure_* all reflect the CORRECTED allocation,
    not x_star itself.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    tax_year: int

    x_star: float            # Continuous optimal split (amount of pool to parent A)
    pool: float              # D
    allocated_a: float       # Pool amount actually claimed by A after quantization

    threshold_a: float       # a = max(0, income_a - floor_a)
    threshold_b: float       # b = max(0, income_b - floor_b)
    floor_a: float
    floor_b: float

    h_min: float             # tax_a + tax_b
    tax_a: float
    tax_b: float
    delta_a: float           # tax_paid_a - tax_a (positive = refund)
    delta_b: float
    exposure_a: float        # Income still exposed to tax after A's share
    exposure_b: float

    allocation: List[AllocationEntry] = Field(default_factory=list)
    candidates: List[CandidatePoint] = Field(default_factory=list)


__all__ = [
    "AllocationEntry",
    "CandidatePoint",
    "SplitReport",
]
