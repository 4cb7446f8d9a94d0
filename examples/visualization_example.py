"""Visualization examples for transportation problems.

Requires optional visualization dependencies:
    pip install 'transport_solver[visualization]'

Examples demonstrated:
1. Route and cost structure of a problem
2. Solved plan, including the dummy consumer of an unbalanced instance
"""

import sys

try:
    import matplotlib

    matplotlib.use("Agg")

    from transport_solver import (
        build_problem,
        solve_transportation,
        visualize_plan,
        visualize_problem,
    )
except ImportError as e:
    print("Error: Visualization dependencies not installed")
    print("Install with: pip install 'transport_solver[visualization]'")
    print(f"Details: {e}")
    sys.exit(1)


def print_section_header(title: str) -> None:
    """Print a formatted section header."""
    print("\n" + "=" * 80)
    print(title.center(80))
    print("=" * 80 + "\n")


def example_1_problem_structure():
    """Example 1: Routes and unit costs."""
    print_section_header("Example 1: Problem Structure")

    problem = build_problem(
        supply={"plant_a": 7, "plant_b": 9, "plant_c": 18},
        demand={"d1": 5, "d2": 8, "d3": 7, "d4": 14},
        costs={
            "plant_a": {"d1": 19, "d2": 30, "d3": 50, "d4": 10},
            "plant_b": {"d1": 70, "d2": 30, "d3": 40, "d4": 60},
            "plant_c": {"d1": 40, "d2": 8, "d3": 70, "d4": 20},
        },
    )
    fig = visualize_problem(problem)
    fig.savefig("transport_problem.png", dpi=150, bbox_inches="tight")
    print("Saved: transport_problem.png")
    return problem


def example_2_solved_plan(problem):
    """Example 2: Allocation of the optimal plan."""
    print_section_header("Example 2: Solved Plan")

    result = solve_transportation(problem)
    print(f"Status: {result.status}, objective: {result.objective}")
    fig = visualize_plan(problem, result)
    fig.savefig("transport_plan.png", dpi=150, bbox_inches="tight")
    print("Saved: transport_plan.png")

    # Surplus supply goes to a dummy consumer drawn in gray
    unbalanced = build_problem(
        supply={"S1": 7, "S2": 8, "S3": 15},
        demand={"C1": 6, "C2": 5, "C3": 7, "C4": 4, "C5": 5},
        costs={
            "S1": {"C1": 2, "C2": 4, "C3": 6, "C4": 3, "C5": 1},
            "S2": {"C1": 3, "C2": 5, "C3": 2, "C4": 7, "C5": 3},
            "S3": {"C1": 2, "C2": 1, "C3": 3, "C4": 1, "C5": 5},
        },
        dummy_key="surplus",
    )
    result = solve_transportation(unbalanced)
    fig = visualize_plan(unbalanced, result, show_zero_cells=False)
    fig.savefig("transport_plan_unbalanced.png", dpi=150, bbox_inches="tight")
    print("Saved: transport_plan_unbalanced.png")


def main():
    problem = example_1_problem_structure()
    example_2_solved_plan(problem)


if __name__ == "__main__":
    main()
