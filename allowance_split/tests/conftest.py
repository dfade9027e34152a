"""
Shared fixtures for the allowance_split test suite.

Every fixture pins tax_year=2025 so the young-parent age bands do not depend
on the environment's settings.
"""
from __future__ import annotations

from typing import Any, Callable

import pytest

from allowance_split.household.schemas import HouseholdInput, ParentProfile, TaxRates
from allowance_split.tests.demo_households import DEMO_HOUSEHOLDS

TAX_YEAR = 2025


@pytest.fixture
def rates() -> TaxRates:
    return TaxRates(lower=0.2, higher=0.3)


@pytest.fixture
def make_parent() -> Callable[..., ParentProfile]:
    """Factory for ParentProfile with sensible defaults (age 35, no disability)."""
    def _make(
        income_annual: float = 20_000,
        tax_paid: float = 0,
        birth_year: int = 1990,
        disability: str | None = None,
    ) -> ParentProfile:
        return ParentProfile(
            income_annual=income_annual,
            tax_paid=tax_paid,
            birth_year=birth_year,
            disability=disability,
        )
    return _make


@pytest.fixture
def demo_household() -> Callable[[str], tuple[HouseholdInput, dict[str, Any]]]:
    """Look up a demo household by name → (HouseholdInput, expected figures)."""
    def _load(name: str) -> tuple[HouseholdInput, dict[str, Any]]:
        data = DEMO_HOUSEHOLDS[name]
        return HouseholdInput.model_validate(data["payload"]), data["expected"]
    return _load
