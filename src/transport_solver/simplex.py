"""Transportation simplex (potential / stepping-stone method) driver."""

from __future__ import annotations

import logging
import time
from collections.abc import Hashable
from enum import Enum
from typing import Any

from .backtrack import BacktrackManager
from .balance import normalize_problem
from .cycles import find_cycle, find_improving_cycle
from .data import ProgressCallback, ProgressInfo, SolverOptions, TransportProblem, TransportResult
from .diagnostics import ConvergenceMonitor
from .exceptions import IterationLimitError, NoImprovingCycleError
from .initial import fix_degeneracy, north_west_corner
from .numeric import IntegerBounds
from .pivot import reallocate
from .plan import CellIndex, TransportPlan
from .potentials import compute_potentials, improving_origins, reduced_costs


class SolverState(Enum):
    ITERATING = "iterating"
    APPLYING_SNAPSHOT = "applying_snapshot"
    OPTIMAL = "optimal"
    EXHAUSTED = "exhausted"


class TransportSimplex:
    """Transportation simplex solver with exhaustive degenerate backtracking.

    Construction balances the problem, builds a north-west-corner plan and
    repairs its degeneracy. ``solve()`` then alternates potentials, pricing,
    cycle search and pivoting. Pivots that empty several cells at once are
    saved on a snapshot stack and every resolution is explored, so a plan left
    locally optimal by a degenerate tie does not hide a cheaper one.

    State machine:
        - ITERATING: potentials, objective, loop check, pricing, pivot. A plan
          already explored on any branch ends the current branch.
        - APPLYING_SNAPSHOT: restore the top snapshot with its next zero-fill
          combination, popping exhausted snapshots.
        - OPTIMAL / EXHAUSTED: terminal; the cheapest recorded plan is returned.
          If no branch completed a plan, a smallest-index descent from the
          initial plan supplies one.

    Attributes:
        problem: The TransportProblem being solved.
        options: Solver configuration.
        normalized: Balanced, index-based form of the problem.
        initial_plan: Plan after north-west corner and degeneracy repair.

    See Also:
        - solve_transportation(): Public API wrapper
    """

    def __init__(self, problem: TransportProblem, options: SolverOptions | None = None):
        self.options = options if options is not None else SolverOptions()
        self.logger = logging.getLogger(__name__)
        self.bounds = IntegerBounds.for_dtype(self.options.dtype)
        self.problem = problem

        self.normalized = normalize_problem(problem, self.bounds)
        if self.normalized.dummy_consumer is not None:
            self._trace(
                "Added dummy consumer to close the problem",
                dummy=self.normalized.dummy_consumer,
                quantity=int(self.normalized.demand[-1]),
            )
        elif self.normalized.dummy_provider is not None:
            self._trace(
                "Added dummy provider to close the problem",
                dummy=self.normalized.dummy_provider,
                quantity=int(self.normalized.supply[-1]),
            )

        self.initial_plan = north_west_corner(self.normalized)
        if self.initial_plan.is_degenerate():
            self._trace(
                "Initial plan is degenerate, zero-filling",
                basic_cells=self.initial_plan.basic_count(),
            )
            for cell in fix_degeneracy(self.initial_plan):
                self._trace("Set zero at cell", cell=self._label(cell))

        rows, columns = self.normalized.shape
        self.max_iterations = self.options.max_iterations or max(1000, 50 * rows * columns)

        self.plan: TransportPlan = self.initial_plan.copy()
        self.backtrack = BacktrackManager()
        self.monitor = ConvergenceMonitor()
        self.visited: set[tuple[bytes, bytes]] = set()
        self.iterations = 0

    def _trace(self, message: str, **fields: Any) -> None:
        level = logging.INFO if self.options.verbose else logging.DEBUG
        self.logger.log(level, message, extra=fields)

    def _label(self, cell: CellIndex) -> tuple[Hashable, Hashable]:
        row, column = cell
        return self.normalized.providers[row], self.normalized.consumers[column]

    def solve(
        self,
        max_iterations: int | None = None,
        progress_callback: ProgressCallback | None = None,
        progress_interval: int = 1,
    ) -> TransportResult:
        """Run the transportation simplex to completion.

        Args:
            max_iterations: Overrides the configured iteration ceiling.
            progress_callback: Called with ProgressInfo every ``progress_interval``
                iterations.
            progress_interval: Iterations between progress callbacks.

        Returns:
            TransportResult carrying the minimum-cost plan across all explored
            branches.

        Raises:
            MalformedBasisError: If potentials cannot be resolved.
            NoImprovingCycleError: If no cycle closes for any improving cell and no
                snapshot remains.
            IterationLimitError: If the iteration ceiling is exceeded.
        """
        if max_iterations is not None:
            self.max_iterations = max_iterations
        start_time = time.time()

        # Fresh state every call so repeated solves are independent.
        self.plan = self.initial_plan.copy()
        self.backtrack = BacktrackManager()
        self.monitor = ConvergenceMonitor()
        self.visited = set()
        self.iterations = 0

        rows, columns = self.normalized.shape
        self.logger.info(
            "Starting transportation simplex",
            extra={
                "providers": rows,
                "consumers": columns,
                "basic_cells": self.plan.basic_count(),
                "max_iterations": self.max_iterations,
            },
        )

        state = SolverState.ITERATING
        while state in (SolverState.ITERATING, SolverState.APPLYING_SNAPSHOT):
            if state is SolverState.APPLYING_SNAPSHOT:
                state = self._apply_snapshot()
                continue

            self._count_iteration()
            state = self._iterate()

            if progress_callback is not None and self.iterations % progress_interval == 0:
                progress_callback(
                    ProgressInfo(
                        iteration=self.iterations,
                        max_iterations=self.max_iterations,
                        objective=self.plan.objective(self.normalized.costs),
                        snapshot_depth=self.backtrack.depth,
                        solutions_found=self.backtrack.solutions_found,
                        elapsed_time=time.time() - start_time,
                    )
                )

        if self.backtrack.best is None:
            self._smallest_index_descent()
        return self._build_result(state, start_time)

    def _count_iteration(self) -> None:
        self.iterations += 1
        if self.iterations <= self.max_iterations:
            return
        best = self.backtrack.best
        self.logger.warning(
            "Iteration limit reached before the search completed",
            extra={"iterations": self.iterations - 1, "max_iterations": self.max_iterations},
        )
        raise IterationLimitError(
            f"Iteration limit reached: {self.max_iterations} iterations completed "
            f"with {self.backtrack.depth} degenerate branches still pending.",
            iterations=self.max_iterations,
            objective=best.objective if best is not None else None,
        )

    def _iterate(self) -> SolverState:
        costs = self.normalized.costs
        potentials = compute_potentials(self.plan, costs, self.bounds)
        objective = self.plan.objective(costs)
        self._trace("Function value", iteration=self.iterations, objective=objective)

        repetition = self.backtrack.find_repetition()
        if repetition is not None:
            discarded = self.backtrack.discard_repetition(repetition)
            self.monitor.record_loop()
            self.logger.warning(
                "Cycling detected, discarding repeated snapshots",
                extra={"discarded": discarded, "iteration": self.iterations},
            )
            return SolverState.APPLYING_SNAPSHOT

        # Pivoting is deterministic, so a plan seen before leads nowhere new.
        key = self.plan.state_key()
        if key in self.visited:
            self.monitor.record_loop()
            self._trace(
                "Plan already explored, abandoning branch",
                iteration=self.iterations,
                pending_snapshots=self.backtrack.depth,
            )
            return SolverState.APPLYING_SNAPSHOT
        self.visited.add(key)

        deltas = reduced_costs(potentials, costs, self.bounds)
        origins = improving_origins(self.plan, deltas)
        if not origins:
            improved = self.backtrack.record(
                self.plan, objective, potentials.rows, potentials.columns
            )
            self._trace(
                "Plan is locally optimal",
                objective=objective,
                new_best=improved,
                pending_snapshots=self.backtrack.depth,
            )
            if self.backtrack.depth:
                return SolverState.APPLYING_SNAPSHOT
            return SolverState.OPTIMAL

        found = find_improving_cycle(self.plan, origins)
        if found is None:
            if self.backtrack.depth:
                self._trace(
                    "No reallocation cycle for any origin, retrying saved branch",
                    origins=len(origins),
                )
                return SolverState.APPLYING_SNAPSHOT
            raise NoImprovingCycleError(
                f"No feasible improving move: none of {len(origins)} improving cells closes "
                f"a reallocation cycle and no saved branch remains; instance may be malformed.",
                iterations=self.iterations,
            )

        origin, cycle = found
        self._trace(
            "Resource reallocation cycle",
            origin=self._label(origin),
            cycle=[self._label(cell) for cell in cycle],
        )
        outcome = reallocate(self.plan, cycle, self.bounds)
        self.monitor.record_pivot(objective, outcome.value, ambiguous=outcome.is_ambiguous)
        self._trace("Resource reallocation value", value=outcome.value)

        if outcome.is_ambiguous:
            self.backtrack.push(self.plan, outcome.depleted)
            self._trace(
                "Plan degeneracy detected, saving snapshot",
                depleted=[self._label(cell) for cell in outcome.depleted],
                depth=self.backtrack.depth,
            )
            return SolverState.APPLYING_SNAPSHOT
        return SolverState.ITERATING

    def _apply_snapshot(self) -> SolverState:
        depth_before = self.backtrack.depth
        while True:
            restored = self.backtrack.next_combination()
            if restored is None:
                self._trace("Out of saved branches", popped=depth_before)
                return SolverState.EXHAUSTED
            plan, zero_filled = restored
            if plan.state_key() not in self.visited:
                break
            self._trace(
                "Skipping zero-fill combination already explored",
                cells=[self._label(cell) for cell in zero_filled],
            )

        popped = depth_before - self.backtrack.depth
        if popped:
            self._trace("Out of zero-fill combinations, popped snapshots", popped=popped)
        self._trace(
            "Applying zero-fill combination",
            cells=[self._label(cell) for cell in zero_filled],
            depth=self.backtrack.depth,
        )
        self.plan = plan
        self.monitor.start_branch()
        return SolverState.ITERATING

    def _smallest_index_descent(self) -> None:
        """Re-solve from the initial plan using smallest-index pivoting.

        Used when every branch of the snapshot search ended in an already
        explored plan. Taking the first improving cell in row-major order as the
        entering cell and the first tied donor as the leaving cell is Bland's
        rule, which cannot cycle, so a locally optimal plan is always reached.

        Raises:
            NoImprovingCycleError: If an improving cell closes no cycle.
            IterationLimitError: If the iteration ceiling is exceeded.
        """
        self.logger.warning(
            "Search ended without a completed plan, switching to smallest-index pivoting",
            extra={"iterations": self.iterations, "loops_detected": self.monitor.loops_detected},
        )
        costs = self.normalized.costs
        self.plan = self.initial_plan.copy()
        self.monitor.start_branch()

        while True:
            self._count_iteration()
            potentials = compute_potentials(self.plan, costs, self.bounds)
            objective = self.plan.objective(costs)
            self._trace("Function value", iteration=self.iterations, objective=objective)

            origins = improving_origins(self.plan, reduced_costs(potentials, costs, self.bounds))
            if not origins:
                self.backtrack.record(self.plan, objective, potentials.rows, potentials.columns)
                self._trace("Plan is locally optimal", objective=objective)
                return

            origin = min(origins)
            cycle = find_cycle(self.plan, origin)
            if cycle is None:
                raise NoImprovingCycleError(
                    f"No feasible improving move: improving cell {self._label(origin)} closes "
                    f"no reallocation cycle; instance may be malformed.",
                    iterations=self.iterations,
                )
            outcome = reallocate(self.plan, cycle, self.bounds)
            self.monitor.record_pivot(objective, outcome.value, ambiguous=outcome.is_ambiguous)
            if outcome.is_ambiguous:
                leaving = min(outcome.depleted)
                for row, column in outcome.depleted:
                    if (row, column) != leaving:
                        self.plan.set(row, column, 0)

    def _build_result(self, state: SolverState, start_time: float) -> TransportResult:
        best = self.backtrack.best
        if best is None:
            raise NoImprovingCycleError(
                "Search finished without completing a plan; no feasible improving move "
                "was found on any branch. Instance may be malformed.",
                iterations=self.iterations,
            )

        providers = self.normalized.providers
        consumers = self.normalized.consumers
        elapsed_ms = (time.time() - start_time) * 1000
        status = "optimal" if state is SolverState.OPTIMAL else "exhausted"

        self.logger.info(
            "Solver complete",
            extra={
                "status": status,
                "objective": best.objective,
                "iterations": self.iterations,
                "elapsed_ms": elapsed_ms,
                "solutions_explored": self.backtrack.solutions_found,
                "snapshots_pushed": self.backtrack.snapshots_pushed,
            },
        )

        return TransportResult(
            objective=best.objective,
            allocation=best.plan.to_mapping(providers, consumers),
            status=status,
            iterations=self.iterations,
            row_potentials={
                provider: int(value) for provider, value in zip(providers, best.row_potentials)
            },
            column_potentials={
                consumer: int(value) for consumer, value in zip(consumers, best.column_potentials)
            },
            supply=self.normalized.supply_map(),
            demand=self.normalized.demand_map(),
            dummy_provider=self.normalized.dummy_provider,
            dummy_consumer=self.normalized.dummy_consumer,
            solutions_explored=self.backtrack.solutions_found,
            diagnostics=self.monitor.get_diagnostic_summary(),
        )
