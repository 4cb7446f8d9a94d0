import json
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from transport_solver.data import TransportResult, build_problem  # noqa: E402
from transport_solver.exceptions import InvalidProblemError  # noqa: E402
from transport_solver.io import load_problem, save_result  # noqa: E402
from transport_solver.solver import solve_transportation  # noqa: E402

# These tests pin the JSON contract implemented by transport_solver.io.


def _write_payload(tmp_path: Path, payload) -> Path:
    path = tmp_path / "problem.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_load_problem_reads_nested_costs(tmp_path: Path):
    payload = {
        "supply": {"A": 7, "B": 9},
        "demand": {"X": 10, "Y": 6},
        "costs": {"A": {"X": 3, "Y": 1}, "B": {"X": 2, "Y": 5}},
    }
    problem = load_problem(_write_payload(tmp_path, payload))

    assert problem.providers == ["A", "B"]
    assert problem.consumers == ["X", "Y"]
    assert problem.cost("B", "Y") == 5
    assert problem.dummy_key == "__dummy__"


def test_load_problem_custom_dummy(tmp_path: Path):
    payload = {
        "supply": {"A": 7},
        "demand": {"X": 5},
        "costs": {"A": {"X": 3}},
        "dummy": "Surplus",
    }
    problem = load_problem(_write_payload(tmp_path, payload))

    assert problem.dummy_key == "Surplus"


def test_load_problem_keeps_key_order(tmp_path: Path):
    # JSON object order becomes the enumeration order used by the initial plan.
    payload = {
        "supply": {"Z": 1, "A": 1},
        "demand": {"Q": 2},
        "costs": {"Z": {"Q": 1}, "A": {"Q": 1}},
    }
    problem = load_problem(_write_payload(tmp_path, payload))

    assert problem.providers == ["Z", "A"]


def test_load_problem_requires_supply(tmp_path: Path):
    payload = {"demand": {"X": 1}, "costs": {}}

    with pytest.raises(InvalidProblemError, match="'supply'"):
        load_problem(_write_payload(tmp_path, payload))


def test_load_problem_rejects_non_object_cost_row(tmp_path: Path):
    payload = {"supply": {"A": 1}, "demand": {"X": 1}, "costs": {"A": [1]}}

    with pytest.raises(InvalidProblemError, match="cost row"):
        load_problem(_write_payload(tmp_path, payload))


def test_load_problem_rejects_top_level_array(tmp_path: Path):
    with pytest.raises(InvalidProblemError, match="top-level"):
        load_problem(_write_payload(tmp_path, [1, 2, 3]))


def test_load_problem_malformed_json(tmp_path: Path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(InvalidProblemError, match="Malformed JSON"):
        load_problem(path)


def test_load_problem_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_problem(tmp_path / "missing.json")


def test_load_problem_validates_values(tmp_path: Path):
    payload = {"supply": {"A": -1}, "demand": {"X": 1}, "costs": {"A": {"X": 1}}}

    with pytest.raises(InvalidProblemError, match="negative"):
        load_problem(_write_payload(tmp_path, payload))


def test_save_result_writes_expected_payload(tmp_path: Path):
    result = TransportResult(
        objective=80,
        allocation={("B", "Y"): 10, ("A", "Y"): 10, ("B", "X"): 10},
        status="optimal",
        iterations=2,
        row_potentials={"A": 0, "B": 1},
        column_potentials={"X": 0, "Y": 3},
        solutions_explored=1,
    )
    destination = tmp_path / "solution.json"

    save_result(destination, result)
    payload = json.loads(destination.read_text(encoding="utf-8"))

    assert payload["status"] == "optimal"
    assert payload["objective"] == 80
    assert payload["iterations"] == 2
    assert payload["solutions_explored"] == 1
    assert payload["allocation"] == [
        {"provider": "A", "consumer": "Y", "amount": 10},
        {"provider": "B", "consumer": "X", "amount": 10},
        {"provider": "B", "consumer": "Y", "amount": 10},
    ]
    assert payload["row_potentials"] == {"A": 0, "B": 1}
    assert payload["column_potentials"] == {"X": 0, "Y": 3}
    assert payload["dummy_provider"] is None
    assert payload["dummy_consumer"] is None


def test_save_result_stringifies_potential_keys(tmp_path: Path):
    problem = build_problem(
        supply={1: 4, 2: 6},
        demand={10: 10},
        costs={1: {10: 2}, 2: {10: 3}},
    )
    result = solve_transportation(problem)
    destination = tmp_path / "solution.json"

    save_result(destination, result)
    payload = json.loads(destination.read_text(encoding="utf-8"))

    assert payload["objective"] == 26
    assert set(payload["row_potentials"]) == {"1", "2"}
    assert payload["allocation"][0]["provider"] == 1


def test_round_trip_through_files(tmp_path: Path):
    payload = {
        "supply": {"P1": 10, "P2": 15},
        "demand": {"C1": 10, "C2": 10, "C3": 10},
        "costs": {"P1": {"C1": 1, "C2": 2, "C3": 3}, "P2": {"C1": 4, "C2": 1, "C3": 2}},
        "dummy": "shortfall",
    }
    problem = load_problem(_write_payload(tmp_path, payload))
    result = solve_transportation(problem)
    destination = tmp_path / "solution.json"
    save_result(destination, result)

    saved = json.loads(destination.read_text(encoding="utf-8"))
    assert saved["objective"] == 30
    assert saved["dummy_provider"] == "shortfall"
    assert sum(entry["amount"] for entry in saved["allocation"]) == 30
