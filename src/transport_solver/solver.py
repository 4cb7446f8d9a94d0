"""Public solver entrypoints."""

from __future__ import annotations

from pathlib import Path

from .data import ProgressCallback, SolverOptions, TransportProblem, TransportResult
from .io import load_problem as load_problem_file
from .io import save_result as save_result_file
from .simplex import TransportSimplex


def solve_transportation(
    problem: TransportProblem,
    options: SolverOptions | None = None,
    max_iterations: int | None = None,
    progress_callback: ProgressCallback | None = None,
    progress_interval: int = 1,
) -> TransportResult:
    """Solve a transportation problem with the transportation simplex method.

    This is the main entry point. Unbalanced problems are closed with a
    zero-cost dummy provider or consumer, an initial plan is built with the
    north-west-corner rule, and the potential (MODI) method with stepping-stone
    cycles improves it until no cell has a positive reduced cost. Degenerate
    pivots that empty several cells at once are explored exhaustively, so the
    returned plan is the cheapest among all explored branches.

    Args:
        problem: The transportation problem to solve.
        options: Solver configuration options. If None, uses defaults.
        max_iterations: Iteration ceiling; overrides options.max_iterations if provided.
        progress_callback: Optional callback receiving ProgressInfo updates.
        progress_interval: Number of iterations between progress callbacks (default: 1).

    Returns:
        TransportResult containing:
        - objective: Total cost of the plan
        - allocation: Basic cells of the plan (including zero-valued basic cells
          and any dummy node)
        - status: 'optimal' or 'exhausted' (both carry the minimum-cost plan)
        - iterations: Number of iterations performed
        - row_potentials / column_potentials: Dual values of the returned plan

    Raises:
        InvalidProblemError: If the problem is malformed (negative values, missing
            costs, dummy key collision, values too large for the integer type).
        MalformedBasisError: If potentials cannot be resolved (internal invariant).
        NoImprovingCycleError: If no improving move can be made and no branch remains.
        IterationLimitError: If the iteration ceiling is exceeded.

    Examples:
        >>> from transport_solver import build_problem, solve_transportation
        >>> problem = build_problem(
        ...     supply={"A": 10, "B": 20},
        ...     demand={"X": 10, "Y": 20},
        ...     costs={"A": {"X": 2, "Y": 3}, "B": {"X": 1, "Y": 4}},
        ... )
        >>> result = solve_transportation(problem)
        >>> print(f"Status: {result.status}, Cost: {result.objective}")
        Status: optimal, Cost: 80

    See Also:
        - TransportProblem: Problem definition structure
        - SolverOptions: Configuration parameters
        - TransportResult: Solution output format
    """
    # Instantiate a fresh solver each call to avoid cross-run state sharing.
    solver = TransportSimplex(problem, options=options)
    return solver.solve(
        max_iterations=max_iterations,
        progress_callback=progress_callback,
        progress_interval=progress_interval,
    )


def load_problem(path: str | Path) -> TransportProblem:
    """Load a transportation problem from a JSON file.

    Args:
        path: Path to JSON file containing problem definition.

    Returns:
        TransportProblem instance ready to solve.

    Raises:
        FileNotFoundError: If file does not exist.
        InvalidProblemError: If JSON is malformed or problem is invalid.

    Examples:
        >>> from transport_solver import load_problem, solve_transportation
        >>> problem = load_problem("examples/sample_problem.json")
        >>> result = solve_transportation(problem)
    """
    return load_problem_file(path)


def save_result(path: str | Path, result: TransportResult) -> None:
    """Save a transportation result to a JSON file.

    Args:
        path: Path where JSON file will be written.
        result: TransportResult from solve_transportation().

    Raises:
        OSError: If file cannot be written.
    """
    save_result_file(path, result)
