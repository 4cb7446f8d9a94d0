"""Stepping-stone cycle search.

Given a non-basic entering cell (the *origin*), the search looks for a closed
loop that leaves the origin, hops between basic cells with alternating
horizontal (same provider) and vertical (same consumer) moves, and returns to
the origin. Shifting flow around that loop keeps every row and column sum
intact, which is what a transportation simplex pivot needs.

The search is an iterative depth-first traversal over an explicit stack of
segments. Each segment remembers which directions it may still explore and
how far it has scanned in the current one, so popping a dead end resumes the
parent exactly where it stopped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from .plan import CellIndex, TransportPlan

logger = logging.getLogger(__name__)

RIGHT, DOWN, LEFT, UP = 0, 1, 2, 3
HORIZONTAL = (RIGHT, LEFT)
# Directions are popped from the end of the list: first entry is tried last.
_ORIGIN_DIRECTIONS = (UP, LEFT, DOWN, RIGHT)
_AFTER_HORIZONTAL = (UP, DOWN)
_AFTER_VERTICAL = (LEFT, RIGHT)


@dataclass
class _Segment:
    row: int
    column: int
    directions: list[int] = field(default_factory=list)
    cursor: int | None = None

    @property
    def cell(self) -> CellIndex:
        return self.row, self.column


def _scan(
    plan: TransportPlan,
    segment: _Segment,
    direction: int,
    origin: CellIndex,
    on_path: set[CellIndex],
    path_length: int,
) -> CellIndex | None:
    rows, columns = plan.shape
    step = 1 if direction in (RIGHT, DOWN) else -1
    horizontal = direction in HORIZONTAL

    if segment.cursor is None:
        start = (segment.column if horizontal else segment.row) + step
    else:
        start = segment.cursor + step
    stop = (columns if horizontal else rows) if step > 0 else -1

    for position in range(start, stop, step):
        cell = (segment.row, position) if horizontal else (position, segment.column)
        if cell == origin:
            # Closing move must be perpendicular to the first move, i.e. an even cycle.
            if path_length % 2 == 0:
                segment.cursor = position
                return cell
            continue
        if plan.is_basic(*cell) and cell not in on_path:
            segment.cursor = position
            return cell
    return None


def find_cycle(plan: TransportPlan, origin: CellIndex) -> list[CellIndex] | None:
    """Find a stepping-stone cycle through ``origin``.

    Args:
        plan: Current plan; only its basic mask is consulted.
        origin: Non-basic entering cell (row, column).

    Returns:
        The cycle as a list of cells starting and ending with ``origin``. Even
        positions receive flow, odd positions donate it. None when the origin
        cannot be closed through the current basic cells.
    """
    stack = [_Segment(origin[0], origin[1], list(_ORIGIN_DIRECTIONS))]
    on_path: set[CellIndex] = {origin}

    while stack:
        segment = stack[-1]
        if not segment.directions:
            if len(stack) == 1:
                return None
            stack.pop()
            on_path.discard(segment.cell)
            continue

        direction = segment.directions[-1]
        found = _scan(plan, segment, direction, origin, on_path, len(stack))
        if found is None:
            segment.directions.pop()
            segment.cursor = None
            continue

        if found == origin:
            return [item.cell for item in stack] + [origin]

        following = _AFTER_HORIZONTAL if direction in HORIZONTAL else _AFTER_VERTICAL
        stack.append(_Segment(found[0], found[1], list(following)))
        on_path.add(found)

    return None


def find_improving_cycle(
    plan: TransportPlan,
    origins: Iterable[CellIndex],
) -> tuple[CellIndex, list[CellIndex]] | None:
    """Try entering cells in priority order and return the first closed cycle.

    Returns:
        (origin, cycle) for the first origin that closes, or None if none does.
    """
    for origin in origins:
        cycle = find_cycle(plan, origin)
        if cycle is not None:
            return origin, cycle
        logger.debug("No reallocation cycle for origin", extra={"origin": origin})
    return None
