"""Utility functions for validating transportation plans independently of the solver."""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from dataclasses import dataclass

from .balance import normalize_problem
from .data import Cell, SolverOptions, TransportProblem, TransportResult
from .exceptions import MalformedBasisError
from .numeric import IntegerBounds
from .plan import TransportPlan
from .potentials import compute_potentials, reduced_costs


@dataclass
class ValidationResult:
    """Results from validating a plan against supply and demand.

    Attributes:
        is_valid: True if every balance holds and the objective matches.
        errors: List of validation error messages (empty if valid).
        supply_balance: Provider -> supply minus shipped quantity (0 when satisfied).
        demand_balance: Consumer -> demand minus received quantity (0 when satisfied).
        objective: Objective recomputed from the allocation.
    """

    is_valid: bool
    errors: list[str]
    supply_balance: dict[Hashable, int]
    demand_balance: dict[Hashable, int]
    objective: int


@dataclass
class OptimalityCertificate:
    """Dual check of a returned plan.

    Attributes:
        is_optimal: True if no violations were found.
        basis_violations: Basic cells where u + v != cost.
        improving_cells: Non-basic cells where u + v - cost > 0.
        row_potentials: Recomputed provider potentials.
        column_potentials: Recomputed consumer potentials.
    """

    is_optimal: bool
    basis_violations: list[Cell]
    improving_cells: list[Cell]
    row_potentials: dict[Hashable, int]
    column_potentials: dict[Hashable, int]


def compute_objective(
    allocation: Mapping[Cell, int],
    costs: Mapping[Cell, int],
) -> int:
    """Sum of cost * amount over the allocation; cells without a cost entry cost 0."""
    return sum(costs.get(cell, 0) * amount for cell, amount in allocation.items())


def validate_plan(result: TransportResult, costs: Mapping[Cell, int]) -> ValidationResult:
    """Validate that a result ships exactly the balanced supply and demand.

    Checks:
    - Every provider ships exactly its (balanced) supply
    - Every consumer receives exactly its (balanced) demand
    - No allocation is negative
    - The reported objective equals the recomputed one

    Args:
        result: Solution to validate; balances use ``result.supply`` and
            ``result.demand`` (dummy nodes included).
        costs: Original cost table; dummy routes are treated as zero cost.
    """
    errors: list[str] = []
    supply_balance = dict(result.supply)
    demand_balance = dict(result.demand)

    for (provider, consumer), amount in result.allocation.items():
        if amount < 0:
            errors.append(f"Cell ({provider}, {consumer}): negative allocation {amount}")
        if provider not in supply_balance:
            errors.append(f"Cell ({provider}, {consumer}): unknown provider")
            continue
        if consumer not in demand_balance:
            errors.append(f"Cell ({provider}, {consumer}): unknown consumer")
            continue
        supply_balance[provider] -= amount
        demand_balance[consumer] -= amount

    for provider, balance in supply_balance.items():
        if balance != 0:
            errors.append(f"Provider {provider}: shipped quantity off by {balance}")
    for consumer, balance in demand_balance.items():
        if balance != 0:
            errors.append(f"Consumer {consumer}: received quantity off by {balance}")

    objective = compute_objective(result.allocation, costs)
    if objective != result.objective:
        errors.append(f"Reported objective {result.objective} differs from recomputed {objective}")

    return ValidationResult(
        is_valid=not errors,
        errors=errors,
        supply_balance=supply_balance,
        demand_balance=demand_balance,
        objective=objective,
    )


def check_optimality(
    problem: TransportProblem,
    result: TransportResult,
    options: SolverOptions | None = None,
) -> OptimalityCertificate:
    """Recompute potentials for the returned basis and test the optimality conditions.

    Raises:
        MalformedBasisError: If the returned basic cells do not span the problem.
    """
    options = options if options is not None else SolverOptions()
    bounds = IntegerBounds.for_dtype(options.dtype)
    normalized = normalize_problem(problem, bounds)
    row_index = {provider: idx for idx, provider in enumerate(normalized.providers)}
    column_index = {consumer: idx for idx, consumer in enumerate(normalized.consumers)}

    rows, columns = normalized.shape
    plan = TransportPlan.empty(rows, columns, bounds.dtype)
    for (provider, consumer), amount in result.allocation.items():
        if provider not in row_index or consumer not in column_index:
            raise MalformedBasisError(
                f"Allocation cell ({provider}, {consumer}) is not part of the problem."
            )
        plan.set(row_index[provider], column_index[consumer], amount)

    potentials = compute_potentials(plan, normalized.costs, bounds)
    deltas = reduced_costs(potentials, normalized.costs, bounds)

    basis_violations: list[Cell] = []
    improving_cells: list[Cell] = []
    for row in range(rows):
        for column in range(columns):
            cell = (normalized.providers[row], normalized.consumers[column])
            if plan.is_basic(row, column):
                if deltas[row, column] != 0:
                    basis_violations.append(cell)
            elif deltas[row, column] > 0:
                improving_cells.append(cell)

    return OptimalityCertificate(
        is_optimal=not basis_violations and not improving_cells,
        basis_violations=basis_violations,
        improving_cells=improving_cells,
        row_potentials={
            provider: int(value) for provider, value in zip(normalized.providers, potentials.rows)
        },
        column_potentials={
            consumer: int(value)
            for consumer, value in zip(normalized.consumers, potentials.columns)
        },
    )
