"""Core data structures for balanced transportation problems."""

from __future__ import annotations

import numbers
from collections.abc import Callable, Hashable, Mapping
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from .exceptions import InvalidProblemError, SolverConfigurationError

DEFAULT_DUMMY_KEY = "__dummy__"

Cell = tuple[Hashable, Hashable]


def _as_quantity(value: Any, label: str) -> int:
    # Accept Python and numpy integers plus integral floats; anything else is rejected.
    if isinstance(value, bool):
        raise InvalidProblemError(f"{label} must be an integer, got boolean {value!r}.")
    if isinstance(value, numbers.Integral):
        quantity = int(value)
    elif isinstance(value, numbers.Real) and float(value).is_integer():
        quantity = int(value)
    else:
        raise InvalidProblemError(
            f"{label} must be a non-negative integer, got {value!r}. "
            f"The transportation simplex works on integral quantities and costs."
        )
    if quantity < 0:
        raise InvalidProblemError(f"{label} is negative ({quantity}). Values must be >= 0.")
    return quantity


@dataclass
class TransportProblem:
    """Encapsulates a transportation problem instance.

    Providers ship integral quantities to consumers; every provider/consumer pair
    carries a unit cost. The instance does not need to be balanced: the solver
    inserts a zero-cost dummy provider or consumer (keyed by ``dummy_key``) to
    absorb the difference.

    Attributes:
        supply: Mapping provider id -> available quantity (>= 0).
        demand: Mapping consumer id -> required quantity (>= 0).
        costs: Mapping (provider id, consumer id) -> unit cost (>= 0). Must hold
               an entry for every provider/consumer pair.
        dummy_key: Identifier used for an inserted dummy node. Must not collide
                   with a real provider or consumer id.

    Examples:
        >>> problem = TransportProblem(
        ...     supply={"A": 10, "B": 20},
        ...     demand={"X": 10, "Y": 20},
        ...     costs={("A", "X"): 2, ("A", "Y"): 3, ("B", "X"): 1, ("B", "Y"): 4},
        ... )
        >>> problem.validate()

    Note:
        Provider and consumer enumeration order is the insertion order of
        ``supply`` and ``demand``. The initial plan, and therefore the search
        path, depend on it.
    """

    supply: dict[Hashable, int]
    demand: dict[Hashable, int]
    costs: dict[Cell, int]
    dummy_key: Hashable = DEFAULT_DUMMY_KEY

    @property
    def providers(self) -> list[Hashable]:
        return list(self.supply)

    @property
    def consumers(self) -> list[Hashable]:
        return list(self.demand)

    def cost(self, provider: Hashable, consumer: Hashable) -> int:
        return self.costs[(provider, consumer)]

    def validate(self) -> None:
        if not self.supply:
            raise InvalidProblemError(
                "Problem has no providers. At least one provider with a supply entry is required."
            )
        if not self.demand:
            raise InvalidProblemError(
                "Problem has no consumers. At least one consumer with a demand entry is required."
            )
        for provider, amount in self.supply.items():
            _as_quantity(amount, f"Supply of provider {provider!r}")
        for consumer, amount in self.demand.items():
            _as_quantity(amount, f"Demand of consumer {consumer!r}")
        if self.dummy_key in self.supply or self.dummy_key in self.demand:
            raise InvalidProblemError(
                f"Dummy key {self.dummy_key!r} collides with a real provider or consumer id. "
                f"Choose a dummy identifier that is not used by the instance."
            )
        for provider in self.supply:
            for consumer in self.demand:
                if (provider, consumer) not in self.costs:
                    raise InvalidProblemError(
                        f"Missing cost for route {provider!r} -> {consumer!r}. "
                        f"The cost table must cover every provider/consumer pair."
                    )
                _as_quantity(
                    self.costs[(provider, consumer)],
                    f"Cost of route {provider!r} -> {consumer!r}",
                )
        for provider, consumer in self.costs:
            if provider not in self.supply or consumer not in self.demand:
                raise InvalidProblemError(
                    f"Cost entry {provider!r} -> {consumer!r} references an unknown "
                    f"provider or consumer."
                )


@dataclass
class TransportResult:
    """Represents the output of a transportation simplex computation.

    Attributes:
        objective: Total cost of the plan (sum of cost * allocation).
        allocation: Basic cells of the best plan, mapping (provider, consumer) to
                    the allocated quantity. Zero-valued entries are basic cells kept
                    to preserve the spanning tree. Includes the dummy node when one
                    was inserted.
        status: 'optimal' when the search finished with no saved degenerate branch
                left, 'exhausted' when it finished by exhausting the saved branches.
                Both carry the minimum-cost plan among all explored branches.
        iterations: Number of potential/pricing iterations performed.
        row_potentials: Provider potentials (u) for the returned plan.
        column_potentials: Consumer potentials (v) for the returned plan.
        supply: Supply after balancing (includes the dummy provider, if any).
        demand: Demand after balancing (includes the dummy consumer, if any).
        dummy_provider: Key of the inserted dummy provider, or None.
        dummy_consumer: Key of the inserted dummy consumer, or None.
        solutions_explored: Locally optimal plans found across all branches.
        diagnostics: Convergence summary from ConvergenceMonitor.

    Examples:
        >>> result = solve_transportation(problem)
        >>> print(result.status, result.objective)
        optimal 80
        >>> result.shipments()
        {('A', 'Y'): 10, ('B', 'X'): 10, ('B', 'Y'): 10}
    """

    objective: int
    allocation: dict[Cell, int] = field(default_factory=dict)
    status: str = "optimal"
    iterations: int = 0
    row_potentials: dict[Hashable, int] = field(default_factory=dict)
    column_potentials: dict[Hashable, int] = field(default_factory=dict)
    supply: dict[Hashable, int] = field(default_factory=dict)
    demand: dict[Hashable, int] = field(default_factory=dict)
    dummy_provider: Hashable | None = None
    dummy_consumer: Hashable | None = None
    solutions_explored: int = 0
    diagnostics: dict[str, Any] = field(default_factory=dict)

    def shipments(self) -> dict[Cell, int]:
        """Return positive allocations between real providers and consumers."""
        return {
            (provider, consumer): amount
            for (provider, consumer), amount in self.allocation.items()
            if amount > 0
            and (self.dummy_provider is None or provider != self.dummy_provider)
            and (self.dummy_consumer is None or consumer != self.dummy_consumer)
        }


@dataclass(frozen=True)
class ProgressInfo:
    """Progress information provided during solver execution.

    Attributes:
        iteration: Current iteration number.
        max_iterations: Maximum allowed iterations.
        objective: Objective value of the live plan.
        snapshot_depth: Number of saved degenerate branches awaiting retry.
        solutions_found: Locally optimal plans recorded so far.
        elapsed_time: Elapsed time in seconds since solve started.
    """

    iteration: int
    max_iterations: int
    objective: int
    snapshot_depth: int
    solutions_found: int
    elapsed_time: float


# Type alias for progress callback function
ProgressCallback = Callable[[ProgressInfo], None]


@dataclass
class SolverOptions:
    """Configuration options for the transportation simplex solver.

    Attributes:
        max_iterations: Ceiling on potential/pricing iterations across all branches.
                       If None, defaults to max(1000, 50 * providers * consumers)
                       measured on the balanced problem. Exceeding it raises
                       IterationLimitError.
        dtype: Name of the numpy signed integer type used for quantities, costs
               and potentials (default: "int64"). Arithmetic saturates at the
               type's bounds instead of wrapping.
        verbose: Emit human-readable trace lines (objective per iteration, chosen
                 cycles, degeneracy fixes, detected loops) at INFO level on the
                 ``transport_solver.simplex`` logger. When False the same lines are
                 logged at DEBUG. Results are unaffected.

    Examples:
        >>> options = SolverOptions()
        >>> options = SolverOptions(max_iterations=200, verbose=True)
        >>> options = SolverOptions(dtype="int32")

    See Also:
        - solve_transportation(): Pass options to control solver behavior.
    """

    max_iterations: int | None = None
    dtype: str = "int64"
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.max_iterations is not None and self.max_iterations <= 0:
            raise SolverConfigurationError(
                f"max_iterations must be positive, got {self.max_iterations}."
            )
        try:
            resolved = np.dtype(self.dtype)
        except TypeError as exc:
            raise SolverConfigurationError(
                f"Unknown integer type '{self.dtype}'. Use a numpy signed integer name "
                f"such as 'int32' or 'int64'."
            ) from exc
        if resolved.kind != "i":
            raise SolverConfigurationError(
                f"dtype must be a signed integer type, got '{self.dtype}'. Potentials can be "
                f"negative, so unsigned and floating types are not supported."
            )


def _flatten_costs(
    costs: Mapping[Any, Any],
) -> dict[Cell, Any]:
    flat: dict[Cell, Any] = {}
    for key, value in costs.items():
        if isinstance(value, Mapping):
            # Nested {provider: {consumer: cost}} layout.
            for consumer, cost in value.items():
                flat[(key, consumer)] = cost
        elif isinstance(key, tuple) and len(key) == 2:
            flat[key] = value
        else:
            raise InvalidProblemError(
                f"Invalid cost entry {key!r}: {value!r}. Use either a nested mapping "
                f"{{provider: {{consumer: cost}}}} or (provider, consumer) tuple keys."
            )
    return flat


def build_problem(
    supply: Mapping[Hashable, Any],
    demand: Mapping[Hashable, Any],
    costs: Mapping[Any, Any],
    dummy_key: Hashable = DEFAULT_DUMMY_KEY,
) -> TransportProblem:
    """Factory helper used by the IO layer to assemble a TransportProblem.

    Quantities and costs are converted to ``int`` and the problem is validated.
    Insertion order of ``supply`` and ``demand`` is preserved.
    """
    flat_costs = _flatten_costs(costs)
    problem = TransportProblem(
        supply={
            provider: _as_quantity(amount, f"Supply of provider {provider!r}")
            for provider, amount in supply.items()
        },
        demand={
            consumer: _as_quantity(amount, f"Demand of consumer {consumer!r}")
            for consumer, amount in demand.items()
        },
        costs={
            cell: _as_quantity(cost, f"Cost of route {cell[0]!r} -> {cell[1]!r}")
            for cell, cost in flat_costs.items()
        },
        dummy_key=dummy_key,
    )
    problem.validate()
    return problem
