"""Initial basic feasible plan: north-west-corner rule and degeneracy repair."""

from __future__ import annotations

from .balance import NormalizedProblem
from .plan import CellIndex, TransportPlan


def north_west_corner(problem: NormalizedProblem) -> TransportPlan:
    """Build a feasible starting plan with the north-west-corner rule.

    Providers are visited in order; each one greedily covers the remaining
    demand of consumers from left to right. A cell becomes basic only when it
    receives a positive amount, so the result may be degenerate.

    Time Complexity:
        O(P * C)
    """
    rows, columns = problem.shape
    plan = TransportPlan.empty(rows, columns, problem.costs.dtype)
    remaining_demand = [int(amount) for amount in problem.demand]

    for row in range(rows):
        remaining_supply = int(problem.supply[row])
        for column in range(columns):
            if remaining_demand[column] == 0:
                continue
            amount = min(remaining_supply, remaining_demand[column])
            remaining_supply -= amount
            remaining_demand[column] -= amount
            if amount > 0:
                plan.set(row, column, amount)

    return plan


def _plant_below(plan: TransportPlan, row: int, column: int) -> bool:
    rows, columns = plan.shape
    if column == columns - 1:
        return True
    if row == rows - 1:
        return False
    # Head for the next basic cell in row-major order; the staircase must pass it.
    for next_row in range(row, rows):
        start = column + 1 if next_row == row else 0
        for next_column in range(start, columns):
            if plan.is_basic(next_row, next_column):
                return next_column <= column
    return False


def fix_degeneracy(plan: TransportPlan) -> list[CellIndex]:
    """Zero-fill cells until the plan has ``rows + columns - 1`` basic cells.

    Walks from the top-left cell to the bottom-right cell, moving right through
    basic cells first and down second. Whenever neither move is possible a
    zero-valued basic cell is planted immediately to the right (below, on the
    last column or when the remaining basic cells continue in this column) and
    the walk continues from it. The walk forms a monotone staircase that covers
    every row and column, so the resulting basis is a spanning tree. Flows are
    unchanged.

    Returns:
        Planted cells in the order they were added.
    """
    planted: list[CellIndex] = []
    if not plan.is_degenerate():
        return planted

    rows, columns = plan.shape
    row, column = 0, 0
    if not plan.is_basic(row, column):
        plan.set(row, column, 0)
        planted.append((row, column))

    while (row, column) != (rows - 1, columns - 1):
        if column + 1 < columns and plan.is_basic(row, column + 1):
            column += 1
            continue
        if row + 1 < rows and plan.is_basic(row + 1, column):
            row += 1
            continue

        if _plant_below(plan, row, column):
            row += 1
        else:
            column += 1
        plan.set(row, column, 0)
        planted.append((row, column))

    return planted
