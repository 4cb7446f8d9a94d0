import json
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from transport_solver import check_optimality, validate_plan  # noqa: E402
from transport_solver.solver import load_problem, save_result, solve_transportation  # noqa: E402


def _write(tmp_path: Path, payload: dict) -> Path:
    problem_path = tmp_path / "problem.json"
    problem_path.write_text(json.dumps(payload), encoding="utf-8")
    return problem_path


def test_solver_end_to_end(tmp_path: Path):
    # Exercise the public solver facade by round-tripping a JSON instance.
    problem_path = _write(
        tmp_path,
        {
            "supply": {"A": 10, "B": 20},
            "demand": {"X": 10, "Y": 20},
            "costs": {"A": {"X": 2, "Y": 3}, "B": {"X": 1, "Y": 4}},
        },
    )

    problem = load_problem(problem_path)
    result = solve_transportation(problem)

    assert result.status == "optimal"
    assert result.objective == 80
    assert result.shipments() == {("A", "Y"): 10, ("B", "X"): 10, ("B", "Y"): 10}

    output_path = tmp_path / "solution.json"
    save_result(output_path, result)
    saved = json.loads(output_path.read_text(encoding="utf-8"))
    assert saved["objective"] == 80
    assert saved["status"] == "optimal"


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        (
            {
                "supply": {"S1": 12, "S2": 10, "S3": 14},
                "demand": {"C1": 4, "C2": 18, "C3": 8, "C4": 6},
                "costs": {
                    "S1": {"C1": 2, "C2": 4, "C3": 6, "C4": 3},
                    "S2": {"C1": 3, "C2": 5, "C3": 2, "C4": 7},
                    "S3": {"C1": 2, "C2": 1, "C3": 3, "C4": 1},
                },
            },
            74,
        ),
        (
            {
                "supply": {"P1": 10, "P2": 15},
                "demand": {"C1": 10, "C2": 10, "C3": 10},
                "costs": {
                    "P1": {"C1": 1, "C2": 2, "C3": 3},
                    "P2": {"C1": 4, "C2": 1, "C3": 2},
                },
            },
            30,
        ),
        (
            {
                "supply": {"A": 10, "B": 10},
                "demand": {"X": 10, "Y": 10},
                "costs": {"A": {"X": 5, "Y": 1}, "B": {"X": 1, "Y": 5}},
            },
            20,
        ),
        (
            {
                "supply": {"S1": 4, "S2": 0, "S3": 6},
                "demand": {"D1": 5, "D2": 0, "D3": 5},
                "costs": {
                    "S1": {"D1": 1, "D2": 7, "D3": 4},
                    "S2": {"D1": 2, "D2": 3, "D3": 5},
                    "S3": {"D1": 3, "D2": 2, "D3": 2},
                },
            },
            17,
        ),
        (
            {
                "supply": {"S1": 4, "S2": 0, "S3": 6},
                "demand": {"D1": 5, "D2": 0, "D3": 3},
                "costs": {
                    "S1": {"D1": 1, "D2": 7, "D3": 4},
                    "S2": {"D1": 2, "D2": 3, "D3": 5},
                    "S3": {"D1": 3, "D2": 2, "D3": 2},
                },
            },
            13,
        ),
    ],
    ids=[
        "balanced",
        "dummy-provider",
        "ambiguous-pivot",
        "zero-row-and-column",
        "zero-row-and-column-with-dummy",
    ],
)
def test_solved_plans_are_feasible_and_certified(tmp_path: Path, payload, expected):
    problem = load_problem(_write(tmp_path, payload))
    result = solve_transportation(problem)

    assert result.objective == expected
    assert validate_plan(result, problem.costs).is_valid
    certificate = check_optimality(problem, result)
    assert certificate.is_optimal
    assert certificate.row_potentials == result.row_potentials
    assert certificate.column_potentials == result.column_potentials


def test_results_are_deterministic(tmp_path: Path):
    payload = {
        "supply": {"A": 7, "B": 9, "C": 18},
        "demand": {"D1": 5, "D2": 8, "D3": 7, "D4": 14},
        "costs": {
            "A": {"D1": 19, "D2": 30, "D3": 50, "D4": 10},
            "B": {"D1": 70, "D2": 30, "D3": 40, "D4": 60},
            "C": {"D1": 40, "D2": 8, "D3": 70, "D4": 20},
        },
    }
    problem = load_problem(_write(tmp_path, payload))

    first = solve_transportation(problem)
    second = solve_transportation(problem)

    assert first.allocation == second.allocation
    assert first.iterations == second.iterations == 3
    assert first.status == "optimal"
