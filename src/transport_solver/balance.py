"""Supply/demand balancing with zero-cost dummy nodes."""

from __future__ import annotations

import logging
from collections.abc import Hashable
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from .data import TransportProblem
from .exceptions import InvalidProblemError
from .numeric import IntegerBounds

logger = logging.getLogger(__name__)


@dataclass
class NormalizedProblem:
    """Balanced, index-based view of a TransportProblem.

    Rows follow provider enumeration order and columns follow consumer
    enumeration order; an inserted dummy node is always last.

    Attributes:
        providers: Provider ids by row index.
        consumers: Consumer ids by column index.
        supply: Supply per row.
        demand: Demand per column.
        costs: Unit cost matrix, shape (providers, consumers).
        dummy_provider: Key of the inserted dummy provider, or None.
        dummy_consumer: Key of the inserted dummy consumer, or None.
    """

    providers: list[Hashable]
    consumers: list[Hashable]
    supply: NDArray[np.integer]
    demand: NDArray[np.integer]
    costs: NDArray[np.integer]
    dummy_provider: Hashable | None = None
    dummy_consumer: Hashable | None = None

    @property
    def shape(self) -> tuple[int, int]:
        return len(self.providers), len(self.consumers)

    def supply_map(self) -> dict[Hashable, int]:
        return {provider: int(amount) for provider, amount in zip(self.providers, self.supply)}

    def demand_map(self) -> dict[Hashable, int]:
        return {consumer: int(amount) for consumer, amount in zip(self.consumers, self.demand)}


def _checked(value: int, bounds: IntegerBounds, label: str) -> int:
    if not bounds.contains(value):
        raise InvalidProblemError(
            f"{label} ({value}) does not fit the solver integer type {bounds.dtype} "
            f"[{bounds.minimum}, {bounds.maximum}]. Use a wider dtype in SolverOptions."
        )
    return value


def normalize_problem(problem: TransportProblem, bounds: IntegerBounds) -> NormalizedProblem:
    """Balance total supply and demand by inserting a zero-cost dummy node.

    Surplus supply becomes a dummy consumer with demand equal to the surplus;
    surplus demand becomes a dummy provider. Balanced problems are returned
    unchanged apart from the switch to dense arrays.

    Raises:
        InvalidProblemError: If the problem fails validation or any value (including
            the totals) does not fit the configured integer type.
    """
    problem.validate()

    providers = problem.providers
    consumers = problem.consumers
    supply = [_checked(int(problem.supply[p]), bounds, f"Supply of {p!r}") for p in providers]
    demand = [_checked(int(problem.demand[c]), bounds, f"Demand of {c!r}") for c in consumers]
    costs = [
        [_checked(int(problem.cost(p, c)), bounds, f"Cost {p!r} -> {c!r}") for c in consumers]
        for p in providers
    ]

    total_supply = _checked(sum(supply), bounds, "Total supply")
    total_demand = _checked(sum(demand), bounds, "Total demand")

    dummy_provider = None
    dummy_consumer = None
    if total_supply > total_demand:
        surplus = total_supply - total_demand
        logger.debug(
            "Adding dummy consumer to close the problem",
            extra={"dummy": problem.dummy_key, "quantity": surplus},
        )
        consumers = consumers + [problem.dummy_key]
        demand.append(surplus)
        for row in costs:
            row.append(0)
        dummy_consumer = problem.dummy_key
    elif total_demand > total_supply:
        shortfall = total_demand - total_supply
        logger.debug(
            "Adding dummy provider to close the problem",
            extra={"dummy": problem.dummy_key, "quantity": shortfall},
        )
        providers = providers + [problem.dummy_key]
        supply.append(shortfall)
        costs.append([0] * len(consumers))
        dummy_provider = problem.dummy_key

    return NormalizedProblem(
        providers=providers,
        consumers=consumers,
        supply=np.array(supply, dtype=bounds.dtype),
        demand=np.array(demand, dtype=bounds.dtype),
        costs=np.array(costs, dtype=bounds.dtype).reshape(len(providers), len(consumers)),
        dummy_provider=dummy_provider,
        dummy_consumer=dummy_consumer,
    )
