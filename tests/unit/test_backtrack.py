"""Tests for the snapshot stack used to explore degenerate pivots."""

import sys
from pathlib import Path

import numpy as np

PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from transport_solver.backtrack import BacktrackManager, Snapshot  # noqa: E402
from transport_solver.plan import TransportPlan  # noqa: E402


def _plan():
    plan = TransportPlan.empty(2, 2, np.dtype("int64"))
    plan.set(0, 1, 10)
    plan.set(1, 0, 10)
    return plan


class TestSnapshot:
    def test_exhausted_after_every_cursor(self):
        snapshot = Snapshot(plan=_plan(), depleted=((0, 0), (1, 1)))
        assert not snapshot.exhausted
        snapshot.cursor = 2
        assert snapshot.exhausted

    def test_state_key_includes_cursor(self):
        first = Snapshot(plan=_plan(), depleted=((0, 0), (1, 1)))
        second = Snapshot(plan=_plan(), depleted=((0, 0), (1, 1)), cursor=1)
        assert first.state_key() != second.state_key()
        second.cursor = 0
        assert first.state_key() == second.state_key()


class TestBacktrackManager:
    """Tests for snapshot push/retry/pop behavior."""

    def test_push_copies_plan(self):
        manager = BacktrackManager()
        plan = _plan()
        manager.push(plan, [(0, 0), (1, 1)])

        plan.set(0, 0, 99)

        assert not manager.snapshots[0].plan.is_basic(0, 0)
        assert manager.depth == 1
        assert manager.snapshots_pushed == 1

    def test_combinations_rotate_excluded_cell(self):
        manager = BacktrackManager()
        manager.push(_plan(), [(0, 0), (1, 1)])

        plan, zero_filled = manager.next_combination()
        assert zero_filled == [(1, 1)]
        assert plan.basic_cells() == [(0, 1), (1, 0), (1, 1)]
        assert plan.get(1, 1) == 0

        plan, zero_filled = manager.next_combination()
        assert zero_filled == [(0, 0)]
        assert plan.basic_cells() == [(0, 0), (0, 1), (1, 0)]

        assert manager.next_combination() is None
        assert manager.depth == 0

    def test_three_depleted_cells(self):
        plan = TransportPlan.empty(3, 3, np.dtype("int64"))
        manager = BacktrackManager()
        manager.push(plan, [(0, 0), (1, 1), (2, 2)])

        combos = []
        restored = manager.next_combination()
        while restored is not None:
            combos.append(restored[1])
            restored = manager.next_combination()

        assert combos == [
            [(1, 1), (2, 2)],
            [(0, 0), (2, 2)],
            [(0, 0), (1, 1)],
        ]

    def test_exhausted_snapshots_are_popped(self):
        manager = BacktrackManager()
        manager.push(_plan(), [(0, 0), (1, 1)])
        manager.push(_plan(), [(0, 0), (1, 1)])
        manager.snapshots[-1].cursor = 2

        restored = manager.next_combination()

        assert restored is not None
        assert manager.depth == 1
        assert manager.snapshots[0].cursor == 1

    def test_restored_plan_is_independent(self):
        manager = BacktrackManager()
        manager.push(_plan(), [(0, 0), (1, 1)])

        plan, _ = manager.next_combination()
        plan.set(0, 0, 42)

        assert not manager.snapshots[0].plan.is_basic(0, 0)

    def test_find_and_discard_repetition(self):
        manager = BacktrackManager()
        manager.push(_plan(), [(0, 0), (1, 1)])
        other = _plan()
        other.set(0, 0, 3)
        manager.push(other, [(1, 1), (0, 0)])
        manager.push(_plan(), [(0, 0), (1, 1)])

        repetition = manager.find_repetition()

        assert repetition == (0, 2)
        assert manager.discard_repetition(repetition) == 2
        assert manager.depth == 1
        assert manager.loops_detected == 1

    def test_discard_keeps_older_combinations(self):
        manager = BacktrackManager()
        manager.push(_plan(), [(0, 0), (1, 1)])
        manager.push(_plan(), [(0, 0), (1, 1)])

        manager.discard_repetition(manager.find_repetition())

        _, zero_filled = manager.next_combination()
        assert zero_filled == [(1, 1)]
        _, zero_filled = manager.next_combination()
        assert zero_filled == [(0, 0)]
        assert manager.next_combination() is None

    def test_no_repetition_with_distinct_cursors(self):
        manager = BacktrackManager()
        manager.push(_plan(), [(0, 0), (1, 1)])
        manager.push(_plan(), [(0, 0), (1, 1)])
        manager.snapshots[0].cursor = 1

        assert manager.find_repetition() is None

    def test_record_keeps_strictly_cheaper(self):
        manager = BacktrackManager()
        rows = np.array([0, 1])
        columns = np.array([0, 2])

        assert manager.record(_plan(), 20, rows, columns) is True
        first = manager.best

        assert manager.record(_plan(), 20, rows, columns) is False
        assert manager.best is first

        assert manager.record(_plan(), 15, rows, columns) is True
        assert manager.best.objective == 15
        assert manager.solutions_found == 3

    def test_record_copies_inputs(self):
        manager = BacktrackManager()
        plan = _plan()
        rows = np.array([0, 1])
        manager.record(plan, 20, rows, np.array([0, 2]))

        plan.set(0, 0, 7)
        rows[0] = 99

        assert not manager.best.plan.is_basic(0, 0)
        assert manager.best.row_potentials.tolist() == [0, 1]
