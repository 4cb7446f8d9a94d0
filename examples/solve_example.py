"""Example script demonstrating usage of the transportation simplex solver."""

from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from transport_solver import load_problem, save_result, solve_transportation  # noqa: E402


def main() -> None:
    base_dir = Path(__file__).resolve().parent
    problem_path = base_dir / "sample_problem.json"
    output_path = base_dir / "sample_solution.json"

    problem = load_problem(problem_path)
    result = solve_transportation(problem)
    save_result(output_path, result)

    print(f"Solved {problem_path.name}: status={result.status}, objective={result.objective}")

    # Shipments between real providers and consumers
    print("\nShipments:")
    for (provider, consumer), amount in result.shipments().items():
        print(f"  {provider} -> {consumer}: {amount}")

    # Potentials (dual values) certify optimality of the plan
    print("\nRow potentials:")
    for provider, value in result.row_potentials.items():
        print(f"  {provider}: {value}")
    print("Column potentials:")
    for consumer, value in result.column_potentials.items():
        print(f"  {consumer}: {value}")


if __name__ == "__main__":
    main()
