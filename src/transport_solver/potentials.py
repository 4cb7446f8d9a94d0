"""Row/column potentials (dual values) and reduced costs."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from .exceptions import MalformedBasisError
from .numeric import IntegerBounds
from .plan import CellIndex, TransportPlan


@dataclass
class Potentials:
    """Dual values satisfying ``rows[i] + columns[j] == cost[i, j]`` on basic cells.

    Attributes:
        rows: Provider potentials (u), one per row.
        columns: Consumer potentials (v), one per column. ``columns[0]`` is 0.
    """

    rows: NDArray[np.integer]
    columns: NDArray[np.integer]


def compute_potentials(
    plan: TransportPlan,
    costs: NDArray[np.integer],
    bounds: IntegerBounds,
) -> Potentials:
    """Propagate potentials across the basic cells.

    Seeds the first consumer's potential with 0, then drains a queue holding
    every basic cell: when exactly one side of a cell is known the other is
    derived from ``u + v == cost``; when neither is known the cell goes back to
    the end of the queue.

    Raises:
        MalformedBasisError: If a full pass over the queue makes no progress, or
            the queue runs dry with unresolved rows or columns. Either means the
            basic cells do not span every provider and consumer.
    """
    row_count, column_count = plan.shape
    rows = np.zeros(row_count, dtype=bounds.dtype)
    columns = np.zeros(column_count, dtype=bounds.dtype)
    row_known = np.zeros(row_count, dtype=bool)
    column_known = np.zeros(column_count, dtype=bool)
    column_known[0] = True

    pending: deque[CellIndex] = deque(plan.basic_cells())
    stalled = 0
    while pending and not (row_known.all() and column_known.all()):
        row, column = pending.popleft()
        cost = costs[row, column]
        if column_known[column] and not row_known[row]:
            rows[row] = bounds.sub(cost, columns[column])
            row_known[row] = True
            stalled = 0
        elif row_known[row] and not column_known[column]:
            columns[column] = bounds.sub(cost, rows[row])
            column_known[column] = True
            stalled = 0
        elif not row_known[row] and not column_known[column]:
            pending.append((row, column))
            stalled += 1
            if stalled > len(pending):
                break

    if not (row_known.all() and column_known.all()):
        unresolved_rows = [int(idx) for idx in np.flatnonzero(~row_known)]
        unresolved_columns = [int(idx) for idx in np.flatnonzero(~column_known)]
        raise MalformedBasisError(
            f"Unable to resolve potentials for rows {unresolved_rows} and columns "
            f"{unresolved_columns}: the {plan.basic_count()} basic cells do not form a "
            f"spanning tree over {row_count} providers and {column_count} consumers.",
            unresolved_providers=unresolved_rows,
            unresolved_consumers=unresolved_columns,
        )

    return Potentials(rows=rows, columns=columns)


def reduced_costs(
    potentials: Potentials,
    costs: NDArray[np.integer],
    bounds: IntegerBounds,
) -> NDArray[np.integer]:
    """Return ``u_i + v_j - cost_ij`` for every cell.

    A positive entry on a non-basic cell means shipping through that cell
    lowers the total cost.
    """
    sums = bounds.add_arrays(potentials.rows[:, np.newaxis], potentials.columns[np.newaxis, :])
    return bounds.sub_arrays(sums, costs)


def improving_origins(plan: TransportPlan, deltas: NDArray[np.integer]) -> list[CellIndex]:
    """Non-basic cells with positive reduced cost, best first.

    Ties keep row-major order so the search is deterministic.
    """
    candidates = np.flatnonzero(~plan.basic & (deltas > 0))
    if candidates.size == 0:
        return []
    # Values are positive here, so negation cannot overflow.
    order = np.argsort(-deltas.ravel()[candidates], kind="stable")
    columns = plan.shape[1]
    return [divmod(int(idx), columns) for idx in candidates[order]]
