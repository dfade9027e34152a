"""
schemas.py: household input data contracts (pydantic v2).

Defines:
  - Disability enum
  - ParentProfile   (one co-parent: consumed read-only by the engine)
  - TaxRates        (shared two-bracket schedule rates)
  - HouseholdInput  (the complete solve request)
  - ErrorDetail, ErrorBody, ErrorResponse  (cross-cutting error envelope)

The two parents are kept as separate fields, never a list: the split variable
allocates directly to parent A and by complement to parent B.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Disability(str, Enum):
    partial = "partial"
    full = "full"


# ---------------------------------------------------------------------------
# Parent and schedule inputs
# ---------------------------------------------------------------------------

class ParentProfile(BaseModel):
    """
    One co-parent's inputs for the period.

    All monetary fields are ANNUAL amounts in the same currency unit as the
    basic allowance (7200) and the bracket boundary (60000).
    disability=None means no disability.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    income_annual: float = Field(
        ..., ge=0,
        description="Annual income before the exemption floor is applied.",
    )
    tax_paid: float = Field(
        default=0, ge=0,
        description="Tax already paid this period (withheld or prepaid).",
    )
    birth_year: int = Field(
        ...,
        description="Birth year: drives the young-parent lower-rate reduction.",
    )
    disability: Optional[Disability] = Field(
        default=None,
        description="'partial' adds 30% of the basic allowance to the floor, 'full' adds 100%.",
    )


class TaxRates(BaseModel):
    """Nominal two-bracket rates as fractions (0.2 = 20%)."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    lower: float = Field(..., ge=0, le=1, description="Nominal rate up to the bracket boundary.")
    higher: float = Field(..., ge=0, le=1, description="Rate above the bracket boundary.")


class HouseholdInput(BaseModel):
    """Complete solve request: both parents, the schedule, and dependent counts."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    parent_a: ParentProfile
    parent_b: ParentProfile
    rates: TaxRates
    child_count: int = Field(default=0, ge=0, description="Children, in claim order.")
    dep_count: int = Field(default=0, ge=0, description="Other (non-child) dependents.")
    tax_year: Optional[int] = Field(
        default=None,
        description="Reference year for parent ages. Falls back to settings.tax_year.",
    )


# ---------------------------------------------------------------------------
# Error response models: used by tools.py (cross-cutting)
# ---------------------------------------------------------------------------

class ErrorDetail(BaseModel):
    """Single field-level validation or business-rule error."""
    model_config = ConfigDict(extra="forbid")

    field: Optional[str] = None   # Dot-notation field path, e.g. "parent_a.birth_year"
    issue: str                     # Human-readable description of the problem


class ErrorBody(BaseModel):
    """Error envelope body."""
    model_config = ConfigDict(extra="forbid")

    code: str                                      # VALIDATION_ERROR, BUSINESS_RULE_ERROR, ...
    message: str                                   # High-level error description
    details: List[ErrorDetail] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """
    Standard error format returned by the boundary wrapper.

    Structure: {"error": {"code": "...", "message": "...", "details": [...]}}
    """
    model_config = ConfigDict(extra="forbid")

    error: ErrorBody


__all__ = [
    "Disability",
    "ParentProfile",
    "TaxRates",
    "HouseholdInput",
    "ErrorDetail",
    "ErrorBody",
    "ErrorResponse",
]
