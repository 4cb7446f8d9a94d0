import sys
from pathlib import Path
from typing import Dict, Tuple

import pytest

hypothesis = pytest.importorskip("hypothesis")
nx = pytest.importorskip("networkx")
from hypothesis import HealthCheck, given, settings  # type: ignore  # noqa: E402
from hypothesis import strategies as st  # type: ignore  # noqa: E402

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from transport_solver.data import build_problem  # noqa: E402
from transport_solver.solver import solve_transportation  # noqa: E402
from transport_solver.utils import check_optimality, validate_plan  # noqa: E402


@st.composite
def _transport_instances(
    draw,
) -> Tuple[Dict[str, int], Dict[str, int], Dict[Tuple[str, str], int]]:
    # Small grids keep the exhaustive degenerate search cheap while still hitting ties.
    # Zero quantities are allowed: empty rows and columns are the most degenerate case.
    provider_count = draw(st.integers(min_value=1, max_value=4))
    consumer_count = draw(st.integers(min_value=1, max_value=4))

    supply = {
        f"p{idx}": draw(st.integers(min_value=0, max_value=15)) for idx in range(provider_count)
    }
    demand = {
        f"c{idx}": draw(st.integers(min_value=0, max_value=15)) for idx in range(consumer_count)
    }
    costs = {
        (provider, consumer): draw(st.integers(min_value=0, max_value=9))
        for provider in supply
        for consumer in demand
    }
    return supply, demand, costs


def _reference_cost(supply, demand, costs) -> int:
    # Balanced min-cost-flow formulation; the dummy node absorbs any imbalance at zero cost.
    graph = nx.DiGraph()
    for provider, amount in supply.items():
        graph.add_node(("p", provider), demand=-amount)
    for consumer, amount in demand.items():
        graph.add_node(("c", consumer), demand=amount)
    for (provider, consumer), cost in costs.items():
        graph.add_edge(("p", provider), ("c", consumer), weight=cost)

    surplus = sum(supply.values()) - sum(demand.values())
    if surplus > 0:
        graph.add_node("dummy", demand=surplus)
        for provider in supply:
            graph.add_edge(("p", provider), "dummy", weight=0)
    elif surplus < 0:
        graph.add_node("dummy", demand=surplus)
        for consumer in demand:
            graph.add_edge("dummy", ("c", consumer), weight=0)

    return nx.min_cost_flow_cost(graph)


@settings(max_examples=60, suppress_health_check=[HealthCheck.too_slow], deadline=None)
@given(_transport_instances())
def test_objective_matches_min_cost_flow(instance):
    # Property: every returned plan is feasible, certified optimal and as cheap as the reference.
    supply, demand, costs = instance
    problem = build_problem(supply=supply, demand=demand, costs=costs)

    result = solve_transportation(problem)

    validation = validate_plan(result, problem.costs)
    assert validation.is_valid, validation.errors
    assert check_optimality(problem, result).is_optimal
    assert result.objective == _reference_cost(supply, demand, costs)


@settings(max_examples=40, suppress_health_check=[HealthCheck.too_slow], deadline=None)
@given(_transport_instances())
def test_basis_is_spanning_tree(instance):
    # Property: the returned basis always holds providers + consumers - 1 cells.
    supply, demand, costs = instance
    problem = build_problem(supply=supply, demand=demand, costs=costs)

    result = solve_transportation(problem)

    assert len(result.allocation) == len(result.supply) + len(result.demand) - 1
    assert result.status in ("optimal", "exhausted")


@settings(max_examples=30, suppress_health_check=[HealthCheck.too_slow], deadline=None)
@given(_transport_instances())
def test_repeat_solves_agree(instance):
    supply, demand, costs = instance
    problem = build_problem(supply=supply, demand=demand, costs=costs)

    first = solve_transportation(problem)
    second = solve_transportation(problem)

    assert first == second


def test_sparse_zero_heavy_instance_terminates():
    # Zero-supply providers and zero-demand consumers make most pivots move nothing.
    supply = {"p0": 5, "p1": 2, "p2": 0, "p3": 4, "p4": 3}
    demand = {"c0": 1, "c1": 0, "c2": 1, "c3": 1, "c4": 3, "c5": 0}
    costs = {
        (provider, consumer): (2 * i + j) % 4
        for i, provider in enumerate(supply)
        for j, consumer in enumerate(demand)
    }
    problem = build_problem(supply=supply, demand=demand, costs=costs)

    result = solve_transportation(problem)

    assert validate_plan(result, problem.costs).is_valid
    assert check_optimality(problem, result).is_optimal
    assert result.objective == _reference_cost(supply, demand, costs)
