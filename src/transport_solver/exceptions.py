"""Custom exceptions for the transportation solver library."""

from __future__ import annotations


class TransportSolverError(Exception):
    """Base exception for all transportation solver errors.

    All custom exceptions in the transport_solver package inherit from this class,
    allowing users to catch all solver-related errors with a single except clause.

    Example:
        try:
            result = solve_transportation(problem)
        except TransportSolverError as e:
            print(f"Solver error: {e}")
    """


class InvalidProblemError(TransportSolverError):
    """Raised when a problem definition is invalid or malformed.

    This includes:
    - Negative supply, demand or unit cost
    - Missing cost entries (every provider needs a cost to every consumer)
    - Empty provider or consumer sets
    - Dummy identifier colliding with a real provider or consumer
    - Values that do not fit the configured integer type
    - Malformed JSON input

    Example:
        InvalidProblemError("Supply of provider 'A' is negative (-5)")
    """


class MalformedBasisError(TransportSolverError):
    """Raised when potentials cannot be derived from the basic cells.

    Potential propagation only resolves every row and column when the basic
    cells form a spanning tree over providers and consumers. Degeneracy repair
    and pivoting keep that property, so this error signals a broken internal
    invariant rather than a bad input.

    Example:
        MalformedBasisError(
            "Unable to resolve potentials for providers ['B']",
            unresolved_providers=["B"],
        )
    """

    def __init__(
        self,
        message: str,
        unresolved_providers: list | None = None,
        unresolved_consumers: list | None = None,
    ):
        """Initialize with message and the rows/columns left without a potential."""
        super().__init__(message)
        self.unresolved_providers = list(unresolved_providers or [])
        self.unresolved_consumers = list(unresolved_consumers or [])


class NoImprovingCycleError(TransportSolverError):
    """Raised when improving cells exist but none of them closes a cycle.

    The stepping-stone search failed for every candidate entering cell and no
    saved degenerate branch is left to retry. The instance may be malformed.

    Example:
        NoImprovingCycleError(
            "No feasible improving move; instance may be malformed",
            iterations=12,
        )
    """

    def __init__(self, message: str, iterations: int = 0):
        """Initialize with message and iteration count."""
        super().__init__(message)
        self.iterations = iterations


class IterationLimitError(TransportSolverError):
    """Raised when the solver exceeds its iteration ceiling.

    The ceiling bounds pathological instances whose degenerate pivots keep the
    search going. The best objective found so far (if any) is attached for
    diagnostics, but no partial plan is returned.

    Example:
        IterationLimitError(
            "Iteration limit reached: 1000 iterations completed",
            iterations=1000,
            objective=743,
        )
    """

    def __init__(
        self,
        message: str,
        iterations: int = 0,
        objective: int | None = None,
    ):
        """Initialize with message and solver state."""
        super().__init__(message)
        self.iterations = iterations
        self.objective = objective


class SolverConfigurationError(TransportSolverError):
    """Raised when solver configuration or options are invalid.

    This includes:
    - Non-positive iteration limits
    - Integer types that numpy does not know or that are unsigned

    Example:
        SolverConfigurationError("max_iterations must be positive, got -1")
    """
