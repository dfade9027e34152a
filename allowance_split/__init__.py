"""
allowance_split: optimal split of the dependent allowance between two co-parents.

Public entry points:
    solve(parent_a, parent_b, rates, child_count, dep_count) : typed engine call
    solve_household(household)                               : validated typed call
    solve_household_tool(payload)                            : dict in / dict out
"""
from allowance_split.engine.tax_engine import solve, solve_household
from allowance_split.tools import solve_household_tool

__all__ = ["solve", "solve_household", "solve_household_tool"]
