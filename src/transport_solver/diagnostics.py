"""Convergence diagnostics for the transportation simplex.

Tracks the objective across pivots and counts degenerate pivots (zero
reallocation value), ambiguous pivots (several cells emptied at once) and
detected reallocation loops. The summary is attached to every TransportResult.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field


@dataclass
class ConvergenceMonitor:
    """Monitors pivot progress and detects stalling.

    Attributes:
        window_size: Number of recent pivots kept in the objective history
        degeneracy_threshold: Ratio above which the run counts as highly degenerate

    Examples:
        >>> monitor = ConvergenceMonitor(window_size=20)
        >>> monitor.record_pivot(objective=120, reallocated=5)
        >>> monitor.record_pivot(objective=110, reallocated=0)
        >>> monitor.get_degeneracy_ratio()
        0.5
    """

    window_size: int = 50
    degeneracy_threshold: float = 0.5

    objective_history: deque[int] = field(default_factory=lambda: deque(maxlen=50))
    total_pivots: int = 0
    degenerate_pivots: int = 0
    ambiguous_pivots: int = 0
    loops_detected: int = 0
    consecutive_no_improvement: int = 0

    def __post_init__(self) -> None:
        """Initialize history with correct maxlen."""
        self.objective_history = deque(maxlen=self.window_size)

    def record_pivot(self, objective: int, reallocated: int, ambiguous: bool = False) -> None:
        """Record a pivot taken from a plan with the given objective.

        Args:
            objective: Objective of the plan the pivot started from
            reallocated: Quantity shifted around the cycle
            ambiguous: Whether more than one cell left the basis
        """
        self.objective_history.append(objective)
        self.total_pivots += 1
        if reallocated == 0:
            self.degenerate_pivots += 1
        if ambiguous:
            self.ambiguous_pivots += 1

        if len(self.objective_history) >= 2 and (
            self.objective_history[-1] >= self.objective_history[-2]
        ):
            self.consecutive_no_improvement += 1
        else:
            self.consecutive_no_improvement = 0

    def record_loop(self) -> None:
        self.loops_detected += 1

    def start_branch(self) -> None:
        """Forget the objective trend when the search jumps to a saved branch.

        A restored snapshot carries its own objective, so comparing it with the
        last pivot of the abandoned branch would misreport stalling.
        """
        self.objective_history.clear()
        self.consecutive_no_improvement = 0

    def is_stalled(self, min_consecutive: int = 10) -> bool:
        """Check if the objective has not dropped for ``min_consecutive`` pivots."""
        return self.consecutive_no_improvement >= min_consecutive

    def get_degeneracy_ratio(self) -> float:
        if self.total_pivots == 0:
            return 0.0
        return self.degenerate_pivots / self.total_pivots

    def is_highly_degenerate(self) -> bool:
        if self.total_pivots < 10:
            return False
        return self.get_degeneracy_ratio() > self.degeneracy_threshold

    def get_recent_improvement(self) -> int | None:
        """Objective decrease over the monitoring window, or None with too little data."""
        if len(self.objective_history) < 2:
            return None
        return self.objective_history[0] - self.objective_history[-1]

    def get_diagnostic_summary(self) -> dict[str, float | bool | int]:
        """Get summary of convergence diagnostics.

        Returns:
            Dictionary with diagnostic metrics
        """
        return {
            'total_pivots': self.total_pivots,
            'degenerate_pivots': self.degenerate_pivots,
            'ambiguous_pivots': self.ambiguous_pivots,
            'loops_detected': self.loops_detected,
            'degeneracy_ratio': self.get_degeneracy_ratio(),
            'is_stalled': self.is_stalled(),
            'is_highly_degenerate': self.is_highly_degenerate(),
            'recent_improvement': self.get_recent_improvement() or 0,
        }
