"""Flow reallocation along a stepping-stone cycle."""

from __future__ import annotations

from dataclasses import dataclass, field

from .exceptions import MalformedBasisError
from .numeric import IntegerBounds
from .plan import CellIndex, TransportPlan


@dataclass
class PivotOutcome:
    """Result of one pivot.

    Attributes:
        value: Quantity shifted around the cycle.
        depleted: Donating cells that reached zero and left the basis, in cycle
                  order. More than one entry marks an ambiguous degenerate pivot.
    """

    value: int
    depleted: list[CellIndex] = field(default_factory=list)

    @property
    def is_ambiguous(self) -> bool:
        return len(self.depleted) > 1


def reallocation_value(plan: TransportPlan, cycle: list[CellIndex]) -> int:
    """Smallest allocation among donating (odd-position) cells of the cycle."""
    donors = []
    for row, column in cycle[1:-1:2]:
        amount = plan.get(row, column)
        if amount is None:
            raise MalformedBasisError(
                f"Donating cell {(row, column)} of the reallocation cycle is not basic."
            )
        donors.append(amount)
    if not donors:
        raise MalformedBasisError(f"Reallocation cycle {cycle} has no donating cells.")
    return min(donors)


def apply_pivot(
    plan: TransportPlan,
    cycle: list[CellIndex],
    value: int,
    bounds: IntegerBounds,
) -> list[CellIndex]:
    """Shift ``value`` around the cycle in place.

    Receiving cells gain ``value`` and donating cells lose it. The origin enters
    the basis; every donating cell that ends at exactly zero is removed from it.
    Receiving cells never shrink, so a receiving cell already at zero stays
    basic when ``value`` is zero.

    Returns:
        The depleted cells, in cycle order.
    """
    origin = cycle[0]
    if not plan.is_basic(*origin):
        plan.set(origin[0], origin[1], 0)

    depleted: list[CellIndex] = []
    for position, (row, column) in enumerate(cycle[:-1]):
        current = plan.get(row, column)
        if current is None:
            raise MalformedBasisError(
                f"Reallocation cycle cell {(row, column)} is not basic."
            )
        if position % 2 == 0:
            updated = bounds.add(current, value)
        else:
            updated = bounds.sub(current, value)
        plan.set(row, column, updated)

        if position % 2 == 1 and updated == 0:
            plan.clear(row, column)
            depleted.append((row, column))

    return depleted


def reallocate(plan: TransportPlan, cycle: list[CellIndex], bounds: IntegerBounds) -> PivotOutcome:
    """Compute the reallocation value and apply the pivot."""
    value = reallocation_value(plan, cycle)
    depleted = apply_pivot(plan, cycle, value, bounds)
    return PivotOutcome(value=value, depleted=depleted)
