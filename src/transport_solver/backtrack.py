"""Snapshot stack for exploring degenerate pivot resolutions.

A pivot that empties several cells at once leaves the plan short of basic
cells, and which of the emptied cells should stay basic at zero changes the
rest of the search. Every choice is therefore tried: the post-pivot plan is
saved once, and each retry restores it and zero-fills all emptied cells but
one, rotating the excluded cell with a cursor.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from .plan import CellIndex, TransportPlan


@dataclass
class Snapshot:
    """Saved post-pivot plan awaiting degenerate-resolution retries.

    Attributes:
        plan: Independent copy of the plan with every depleted cell non-basic.
        depleted: Cells emptied simultaneously by the pivot.
        cursor: Index of the depleted cell left out on the next retry.
    """

    plan: TransportPlan
    depleted: tuple[CellIndex, ...]
    cursor: int = 0

    @property
    def exhausted(self) -> bool:
        return self.cursor >= len(self.depleted)

    def state_key(self) -> tuple:
        return self.plan.state_key(), self.depleted, self.cursor


@dataclass
class Solution:
    """A locally optimal plan recorded during the search."""

    plan: TransportPlan
    objective: int
    row_potentials: NDArray[np.integer]
    column_potentials: NDArray[np.integer]


class BacktrackManager:
    """Owns the snapshot stack and the best solution found so far.

    Examples:
        >>> manager = BacktrackManager()
        >>> manager.push(plan, [(0, 1), (1, 0)])
        >>> restored, zero_filled = manager.next_combination()
        >>> zero_filled
        [(1, 0)]
    """

    def __init__(self) -> None:
        self.snapshots: list[Snapshot] = []
        self.best: Solution | None = None
        self.solutions_found = 0
        self.snapshots_pushed = 0
        self.loops_detected = 0

    @property
    def depth(self) -> int:
        return len(self.snapshots)

    def push(self, plan: TransportPlan, depleted: list[CellIndex]) -> Snapshot:
        snapshot = Snapshot(plan=plan.copy(), depleted=tuple(depleted))
        self.snapshots.append(snapshot)
        self.snapshots_pushed += 1
        return snapshot

    def find_repetition(self) -> tuple[int, int] | None:
        """Return stack indices (older, newer) of the first repeated state, if any."""
        seen: dict[tuple, int] = {}
        for index, snapshot in enumerate(self.snapshots):
            key = snapshot.state_key()
            if key in seen:
                return seen[key], index
            seen[key] = index
        return None

    def discard_repetition(self, repetition: tuple[int, int]) -> int:
        """Pop every snapshot above the older repeated entry.

        The older entry stays on the stack so its remaining zero-fill
        combinations are still tried.

        Returns:
            Number of snapshots discarded.
        """
        older, _ = repetition
        discarded = len(self.snapshots) - older - 1
        del self.snapshots[older + 1 :]
        self.loops_detected += 1
        return discarded

    def next_combination(self) -> tuple[TransportPlan, list[CellIndex]] | None:
        """Restore the top snapshot with its next zero-fill combination.

        Exhausted snapshots are popped until one with a remaining combination is
        found.

        Returns:
            (plan, zero-filled cells) to continue iterating from, or None once the
            stack is empty.
        """
        while self.snapshots:
            snapshot = self.snapshots[-1]
            if snapshot.exhausted:
                self.snapshots.pop()
                continue

            plan = snapshot.plan.copy()
            zero_filled = [
                cell for index, cell in enumerate(snapshot.depleted) if index != snapshot.cursor
            ]
            for row, column in zero_filled:
                plan.set(row, column, 0)
            snapshot.cursor += 1
            return plan, zero_filled
        return None

    def record(
        self,
        plan: TransportPlan,
        objective: int,
        row_potentials: NDArray[np.integer],
        column_potentials: NDArray[np.integer],
    ) -> bool:
        """Record a locally optimal plan; keep it only if strictly cheaper.

        Returns:
            True if the plan became the new best solution.
        """
        self.solutions_found += 1
        if self.best is not None and objective >= self.best.objective:
            return False
        self.best = Solution(
            plan=plan.copy(),
            objective=objective,
            row_potentials=row_potentials.copy(),
            column_potentials=column_potentials.copy(),
        )
        return True
