"""Maximum flow with interchangeable augmenting-path strategies."""

from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from transport_solver import (  # noqa: E402
    BreadthFirstPathFinder,
    DepthFirstPathFinder,
    max_flow,
)


def main() -> None:
    graph = {
        "s": {"a": 10, "b": 5},
        "a": {"b": 15, "t": 7},
        "b": {"t": 8},
        "t": {},
    }

    for finder in (BreadthFirstPathFinder(), DepthFirstPathFinder()):
        result = max_flow(graph, "s", "t", path_finder=finder)
        print(f"{type(finder).__name__}: max flow = {result.value}")
        for path in result.paths:
            print(f"  {' -> '.join(path.nodes)} carries {path.flow}")


if __name__ == "__main__":
    main()
