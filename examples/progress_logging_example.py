"""Example demonstrating progress callbacks and verbose trace logging."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from transport_solver import (  # noqa: E402
    ProgressInfo,
    SolverOptions,
    build_problem,
    solve_transportation,
)


def main() -> None:
    """Demonstrate progress reporting and the solver trace."""

    print("=" * 70)
    print("PROGRESS LOGGING DEMONSTRATION")
    print("=" * 70)

    # Cost grows with distance between supplier and customer index
    print("\nBuilding transportation problem...")
    print("  8 suppliers, 10 customers")

    supply = {f"supplier_{i}": 50 + 5 * i for i in range(8)}
    demand = {f"customer_{j}": 40 + 3 * j for j in range(10)}
    costs = {
        supplier: {customer: abs(i - j) + 1 for j, customer in enumerate(demand)}
        for i, supplier in enumerate(supply)
    }
    problem = build_problem(supply=supply, demand=demand, costs=costs)

    print(f"  Total supply: {sum(supply.values())}")
    print(f"  Total demand: {sum(demand.values())}")

    def progress_callback(info: ProgressInfo) -> None:
        percent = int(100 * info.iteration / info.max_iterations)
        print(
            f"\rIter: {info.iteration:5d}/{info.max_iterations} ({percent:3d}%) | "
            f"Objective: {info.objective:8d} | "
            f"Branches: {info.snapshot_depth:3d} | "
            f"Time: {info.elapsed_time:6.2f}s",
            end="",
            flush=True,
        )

    print("\nSolving with progress logging...")
    print("-" * 70)

    result = solve_transportation(
        problem,
        progress_callback=progress_callback,
        progress_interval=5,
    )

    print()
    print("-" * 70)
    print("\nSolution found:")
    print(f"  Status: {result.status}")
    print(f"  Objective: {result.objective}")
    print(f"  Iterations: {result.iterations}")
    print(f"  Plans explored: {result.solutions_explored}")
    print(f"  Shipping routes: {len(result.shipments())}")

    # Verbose mode promotes the solver trace to INFO
    print("\n" + "=" * 70)
    print("VERBOSE TRACE (small instance)")
    print("=" * 70)
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s", stream=sys.stdout)
    small = build_problem(
        supply={"A": 10, "B": 20},
        demand={"X": 10, "Y": 20},
        costs={"A": {"X": 2, "Y": 3}, "B": {"X": 1, "Y": 4}},
    )
    solve_transportation(small, options=SolverOptions(verbose=True))


if __name__ == "__main__":
    main()
