"""File I/O helpers for transportation problems."""

from __future__ import annotations

import json
from collections.abc import Mapping, MutableMapping
from pathlib import Path
from typing import Any

from .data import DEFAULT_DUMMY_KEY, TransportProblem, TransportResult, build_problem
from .exceptions import InvalidProblemError


def _require_mapping(payload: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = payload.get(key)
    if not isinstance(value, Mapping):
        raise InvalidProblemError(
            f"Invalid problem format: JSON must include a '{key}' object. "
            f"Got {type(value).__name__}."
        )
    return value


def load_problem(path: str | Path) -> TransportProblem:
    """Load a transportation instance from a JSON file.

    Expected layout::

        {
          "supply": {"A": 7, "B": 9},
          "demand": {"X": 10, "Y": 6},
          "costs": {"A": {"X": 3, "Y": 1}, "B": {"X": 2, "Y": 5}},
          "dummy": "Dummy"
        }

    JSON objects keep their key order, which becomes the enumeration order.
    """
    with Path(path).open("r", encoding="utf-8") as fh:
        try:
            payload: MutableMapping[str, Any] = json.load(fh)
        except json.JSONDecodeError as exc:
            raise InvalidProblemError(f"Malformed JSON in {path}: {exc}") from exc
    if not isinstance(payload, Mapping):
        raise InvalidProblemError("Invalid problem format: top-level JSON value must be an object.")

    supply = _require_mapping(payload, "supply")
    demand = _require_mapping(payload, "demand")
    costs = _require_mapping(payload, "costs")
    for provider, row in costs.items():
        if not isinstance(row, Mapping):
            raise InvalidProblemError(
                f"Invalid cost row for provider '{provider}': expected an object mapping "
                f"consumer ids to costs."
            )
    # Defer to the core builder so validation rules remain centralized in one place.
    return build_problem(
        supply=supply,
        demand=demand,
        costs=costs,
        dummy_key=payload.get("dummy", DEFAULT_DUMMY_KEY),
    )


def save_result(path: str | Path, result: TransportResult) -> None:
    """Persist a solver result to JSON."""
    # Keys are stringified so non-string ids still produce valid JSON objects.
    data = {
        "status": result.status,
        "objective": result.objective,
        "iterations": result.iterations,
        "solutions_explored": result.solutions_explored,
        "allocation": [
            {"provider": provider, "consumer": consumer, "amount": amount}
            for (provider, consumer), amount in sorted(
                result.allocation.items(), key=lambda item: (str(item[0][0]), str(item[0][1]))
            )
        ],
        "row_potentials": {str(key): value for key, value in result.row_potentials.items()},
        "column_potentials": {str(key): value for key, value in result.column_potentials.items()},
        "dummy_provider": result.dummy_provider,
        "dummy_consumer": result.dummy_consumer,
    }
    with Path(path).open("w", encoding="utf-8") as fh:
        json.dump(data, fh, indent=2, sort_keys=False)
