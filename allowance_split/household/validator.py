"""
Household business-rule validator.

Validates HouseholdInput against business rules AFTER pydantic structural
validation has already passed. Collects all violations in a single pass and
raises ValueError with a JSON-encoded list of {field, issue} dicts so the
boundary wrapper can build the standard error envelope.

Rules enforced:
  1. parent birth_year  <= reference tax year
  2. parent birth_year  >= reference tax year - 120
  3. parent tax_paid    <= parent income_annual
  4. rates.higher       >= rates.lower (progressive schedule)

Note: non-negative amounts/counts and rates within [0, 1] are already enforced
by Field constraints in schemas.py. Do NOT re-enforce here.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional

from allowance_split.config import settings
from allowance_split.household.schemas import HouseholdInput, ParentProfile

logger = logging.getLogger(__name__)

_MAX_PARENT_AGE = 120


def _parent_violations(
    role: str,
    parent: ParentProfile,
    tax_year: int,
) -> list[dict[str, Any]]:
    violations: list[dict[str, Any]] = []

    # ---- 1/2. Birth year within a plausible window --------------------------
    if parent.birth_year > tax_year:
        violations.append({
            "field": f"{role}.birth_year",
            "issue": (
                f"Birth year {parent.birth_year} is after the reference tax year {tax_year}."
            ),
        })
    elif parent.birth_year < tax_year - _MAX_PARENT_AGE:
        violations.append({
            "field": f"{role}.birth_year",
            "issue": (
                f"Birth year {parent.birth_year} implies an age above {_MAX_PARENT_AGE} "
                f"in tax year {tax_year}."
            ),
        })

    # ---- 3. Tax already paid cannot exceed income ---------------------------
    if parent.tax_paid > parent.income_annual:
        violations.append({
            "field": f"{role}.tax_paid",
            "issue": (
                f"Tax paid {parent.tax_paid:,.2f} exceeds annual income "
                f"{parent.income_annual:,.2f}."
            ),
        })

    return violations


def validate_business_rules(
    household: HouseholdInput,
    tax_year: Optional[int] = None,
) -> None:
    """
    Validate a household against all business rules.

    Collects every violation before raising, so callers receive all errors in
    one response rather than discovering them one at a time.

    Args:
        household: A structurally-valid HouseholdInput (pydantic already ran).
        tax_year: Reference year; defaults to household.tax_year, then settings.tax_year.

    Raises:
        ValueError: If any business rule is violated. The message is a JSON string
            containing a list of {"field": str, "issue": str} dicts.
    """
    year = tax_year or household.tax_year or settings.tax_year

    violations: list[dict[str, Any]] = []
    violations += _parent_violations("parent_a", household.parent_a, year)
    violations += _parent_violations("parent_b", household.parent_b, year)

    # ---- 4. Progressive schedule --------------------------------------------
    if household.rates.higher < household.rates.lower:
        violations.append({
            "field": "rates.higher",
            "issue": (
                f"Higher-bracket rate {household.rates.higher} is below the "
                f"lower-bracket rate {household.rates.lower}; the schedule must be progressive."
            ),
        })

    if violations:
        # Log only the count: no incomes or birth years
        logger.info("Business-rule validation failed: %d violation(s)", len(violations))
        raise ValueError(json.dumps(violations))
