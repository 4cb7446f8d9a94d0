"""Tests for progress callbacks and solver trace logging."""

import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from transport_solver import (  # noqa: E402
    ProgressInfo,
    SolverOptions,
    build_problem,
    solve_transportation,
)


def _degenerate_problem():
    return build_problem(
        supply={"A": 10, "B": 20},
        demand={"X": 10, "Y": 20},
        costs={"A": {"X": 2, "Y": 3}, "B": {"X": 1, "Y": 4}},
    )


def _ambiguous_problem():
    return build_problem(
        supply={"A": 10, "B": 10},
        demand={"X": 10, "Y": 10},
        costs={"A": {"X": 5, "Y": 1}, "B": {"X": 1, "Y": 5}},
    )


def test_progress_callback_called():
    """Test that progress callback is invoked once per iteration."""
    progress_calls = []

    def callback(info: ProgressInfo) -> None:
        progress_calls.append(info)

    result = solve_transportation(
        _degenerate_problem(), progress_callback=callback, progress_interval=1
    )

    assert result.status == "optimal"
    assert [info.iteration for info in progress_calls] == [1, 2]


def test_progress_info_fields():
    """Test that ProgressInfo reports the live plan and search state."""
    progress_calls = []

    def callback(info: ProgressInfo) -> None:
        progress_calls.append(info)

    solve_transportation(_ambiguous_problem(), progress_callback=callback)

    first = progress_calls[0]
    assert first.max_iterations == 1000
    assert first.objective == 20
    assert first.snapshot_depth == 1
    assert first.solutions_found == 0
    assert first.elapsed_time >= 0

    last = progress_calls[-1]
    assert last.iteration == 3
    assert last.solutions_found == 2


def test_progress_interval():
    """Test that progress_interval controls callback frequency."""
    progress_calls = []

    solve_transportation(
        _ambiguous_problem(),
        progress_callback=progress_calls.append,
        progress_interval=2,
    )

    assert [info.iteration for info in progress_calls] == [2]


def test_verbose_trace_logged_at_info(caplog):
    """Test verbose mode emits the human-readable trace at INFO."""
    caplog.set_level(logging.INFO, logger="transport_solver")

    solve_transportation(_degenerate_problem(), options=SolverOptions(verbose=True))

    messages = [record.getMessage() for record in caplog.records]
    assert any(message.startswith("Initial plan is degenerate") for message in messages)
    assert any(message.startswith("Set zero at cell") for message in messages)
    assert any(message.startswith("Function value") for message in messages)
    assert any(message.startswith("Resource reallocation cycle") for message in messages)
    assert any(message.startswith("Resource reallocation value") for message in messages)


def test_trace_records_carry_structured_fields(caplog):
    caplog.set_level(logging.INFO, logger="transport_solver")

    solve_transportation(_degenerate_problem(), options=SolverOptions(verbose=True))

    values = [
        record.objective
        for record in caplog.records
        if record.getMessage().startswith("Function value")
    ]
    assert values == [100, 80]


def test_trace_hidden_at_info_without_verbose(caplog):
    """Test the trace drops to DEBUG when verbose is off."""
    caplog.set_level(logging.INFO, logger="transport_solver")

    solve_transportation(_degenerate_problem())

    messages = [record.getMessage() for record in caplog.records]
    assert not any(message.startswith("Function value") for message in messages)
    assert any(message == "Solver complete" for message in messages)


def test_trace_available_at_debug(caplog):
    caplog.set_level(logging.DEBUG, logger="transport_solver")

    solve_transportation(_degenerate_problem())

    debug_messages = [
        record.getMessage() for record in caplog.records if record.levelno == logging.DEBUG
    ]
    assert any(message.startswith("Function value") for message in debug_messages)


def test_dummy_node_traced(caplog):
    caplog.set_level(logging.INFO, logger="transport_solver")
    problem = build_problem(supply={"A": 8}, demand={"X": 5}, costs={"A": {"X": 1}})

    solve_transportation(problem, options=SolverOptions(verbose=True))

    messages = [record.getMessage() for record in caplog.records]
    assert any(message.startswith("Added dummy consumer") for message in messages)


def test_snapshot_trace(caplog):
    caplog.set_level(logging.INFO, logger="transport_solver")

    solve_transportation(_ambiguous_problem(), options=SolverOptions(verbose=True))

    messages = [record.getMessage() for record in caplog.records]
    assert any(message.startswith("Plan degeneracy detected") for message in messages)
    assert any(message.startswith("Applying zero-fill combination") for message in messages)
    assert any(message.startswith("Out of saved branches") for message in messages)
