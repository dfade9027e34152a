"""
tools.py: dict-in / dict-out wrapper around the deterministic split engine.

The engine never raises for numeric inputs; this wrapper is where structural
(pydantic) and business-rule validation failures are turned into the standard
error envelope instead of exceptions.

Return shape:
  {"success": bool, "result": dict | None, "error": dict | None}
"""
from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from allowance_split.engine.tax_engine import solve_household
from allowance_split.household.schemas import (
    ErrorBody,
    ErrorDetail,
    ErrorResponse,
    HouseholdInput,
)

logger = logging.getLogger(__name__)


def _error_envelope(code: str, message: str, details: list[ErrorDetail]) -> dict:
    return ErrorResponse(
        error=ErrorBody(code=code, message=message, details=details)
    ).model_dump()


def _details_from_validation_error(exc: ValidationError) -> list[ErrorDetail]:
    return [
        ErrorDetail(
            field=".".join(str(part) for part in err["loc"]) or None,
            issue=err["msg"],
        )
        for err in exc.errors()
    ]


def _details_from_violations(violations_json: str) -> list[ErrorDetail]:
    """Parse JSON-encoded violations raised by validate_business_rules."""
    try:
        violations: list[dict] = json.loads(violations_json)
    except (json.JSONDecodeError, ValueError):
        violations = [{"field": None, "issue": violations_json}]
    return [ErrorDetail(field=v.get("field"), issue=v["issue"]) for v in violations]


def solve_household_tool(payload: dict) -> dict:
    """
    Solves the allowance split for a HouseholdInput serialized as dict.

    Args:
        payload: HouseholdInput fields (parent_a, parent_b, rates, child_count,
            dep_count, optional tax_year).

    Returns:
        dict with keys:
          - success (bool)
          - result (dict | None): SplitReport fields
          - error (dict | None): ErrorResponse fields
    """
    try:
        household = HouseholdInput.model_validate(payload)
    except ValidationError as exc:
        logger.error("solve_household_tool rejected payload: %d schema error(s)", exc.error_count())
        return {
            "success": False,
            "result": None,
            "error": _error_envelope(
                "VALIDATION_ERROR",
                "Household input failed schema validation",
                _details_from_validation_error(exc),
            ),
        }

    try:
        report = solve_household(household)
    except ValueError as exc:
        logger.error("solve_household_tool rejected household: business rules")
        return {
            "success": False,
            "result": None,
            "error": _error_envelope(
                "BUSINESS_RULE_ERROR",
                "Household input failed business-rule validation",
                _details_from_violations(str(exc)),
            ),
        }

    logger.info("Allowance split solved pool=%.2f h_min=%.2f", report.pool, report.h_min)
    return {"success": True, "result": report.model_dump(), "error": None}
