"""Augmenting-path maximum flow with pluggable path finders.

The max-flow driver only needs one capability from a path finder: given a
residual-capacity graph and a source/sink pair, return the nodes of a path
from source to sink together with the smallest residual capacity along it, or
None when the sink is unreachable. Strategies are passed in as values.

Example:
    >>> graph = {"s": {"a": 10, "b": 5}, "a": {"t": 7}, "b": {"t": 8}, "t": {}}
    >>> result = max_flow(graph, "s", "t", path_finder=DepthFirstPathFinder())
    >>> result.value
    12
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Hashable, Mapping
from dataclasses import dataclass, field
from typing import Protocol

from .exceptions import InvalidProblemError
from .numeric import IntegerBounds

logger = logging.getLogger(__name__)

Graph = Mapping[Hashable, Mapping[Hashable, int]]


class PathFinder(Protocol):
    """Capability interface for augmenting-path search."""

    def find_path(
        self, graph: Graph, source: Hashable, sink: Hashable
    ) -> tuple[list[Hashable], int] | None:
        """Return (nodes from source to sink, bottleneck capacity) or None."""
        ...


def _trace_path(
    graph: Graph,
    parents: dict[Hashable, Hashable | None],
    source: Hashable,
    sink: Hashable,
) -> tuple[list[Hashable], int] | None:
    if sink not in parents:
        return None
    path = [sink]
    while path[-1] != source:
        path.append(parents[path[-1]])
    path.reverse()
    capacity = min(graph[tail][head] for tail, head in zip(path, path[1:]))
    return path, capacity


class BreadthFirstPathFinder:
    """Fewest-edges augmenting path (Edmonds-Karp)."""

    def find_path(
        self, graph: Graph, source: Hashable, sink: Hashable
    ) -> tuple[list[Hashable], int] | None:
        parents: dict[Hashable, Hashable | None] = {source: None}
        queue: deque[Hashable] = deque([source])
        while queue:
            node = queue.popleft()
            if node == sink:
                break
            for neighbor, capacity in graph.get(node, {}).items():
                if capacity > 0 and neighbor not in parents:
                    parents[neighbor] = node
                    queue.append(neighbor)
        return _trace_path(graph, parents, source, sink)


class DepthFirstPathFinder:
    """First augmenting path reached by depth-first search."""

    def find_path(
        self, graph: Graph, source: Hashable, sink: Hashable
    ) -> tuple[list[Hashable], int] | None:
        parents: dict[Hashable, Hashable | None] = {source: None}
        stack: list[Hashable] = [source]
        while stack:
            node = stack.pop()
            if node == sink:
                break
            for neighbor, capacity in graph.get(node, {}).items():
                if capacity > 0 and neighbor not in parents:
                    parents[neighbor] = node
                    stack.append(neighbor)
        return _trace_path(graph, parents, source, sink)


@dataclass
class AugmentingPath:
    """One augmentation: the nodes traversed and the flow pushed along them."""

    nodes: list[Hashable]
    flow: int


@dataclass
class MaxFlowResult:
    """Maximum flow value, the augmentations that built it and the arc flows.

    Attributes:
        value: Total flow from source to sink.
        paths: Augmenting paths in the order they were applied.
        flows: (tail, head) -> net flow on each original arc carrying flow.
    """

    value: int
    paths: list[AugmentingPath] = field(default_factory=list)
    flows: dict[tuple[Hashable, Hashable], int] = field(default_factory=dict)


def max_flow(
    graph: Graph,
    source: Hashable,
    sink: Hashable,
    path_finder: PathFinder | None = None,
    dtype: str = "int64",
) -> MaxFlowResult:
    """Compute a maximum source-sink flow by repeated path augmentation.

    Args:
        graph: Arc capacities as ``{tail: {head: capacity}}``; capacities must be
            non-negative integers.
        source: Source node.
        sink: Sink node.
        path_finder: Strategy used to find augmenting paths (default: breadth-first).
        dtype: Integer type whose bounds clamp residual updates.

    Raises:
        InvalidProblemError: If source or sink is unknown, they coincide, or a
            capacity is negative.
    """
    finder = path_finder if path_finder is not None else BreadthFirstPathFinder()
    bounds = IntegerBounds.for_dtype(dtype)

    nodes = set(graph)
    for neighbors in graph.values():
        nodes.update(neighbors)
    if source not in nodes:
        raise InvalidProblemError(f"Source node '{source}' not found in graph")
    if sink not in nodes:
        raise InvalidProblemError(f"Sink node '{sink}' not found in graph")
    if source == sink:
        raise InvalidProblemError("Source and sink must be different nodes")

    residual: dict[Hashable, dict[Hashable, int]] = {node: {} for node in nodes}
    for tail, neighbors in graph.items():
        for head, capacity in neighbors.items():
            if capacity < 0:
                raise InvalidProblemError(
                    f"Arc {tail} -> {head} has negative capacity ({capacity})"
                )
            residual[tail][head] = bounds.add(residual[tail].get(head, 0), capacity)
            residual[head].setdefault(tail, 0)

    value = 0
    paths: list[AugmentingPath] = []
    while True:
        found = finder.find_path(residual, source, sink)
        if found is None or found[1] == 0:
            break
        path, capacity = found
        for tail, head in zip(path, path[1:]):
            residual[tail][head] = bounds.sub(residual[tail][head], capacity)
            residual[head][tail] = bounds.add(residual[head][tail], capacity)
        value = bounds.add(value, capacity)
        paths.append(AugmentingPath(nodes=path, flow=capacity))
        logger.debug(
            "Augmented along path",
            extra={"path": path, "flow": capacity, "total": value},
        )

    flows: dict[tuple[Hashable, Hashable], int] = {}
    for tail, neighbors in graph.items():
        for head, capacity in neighbors.items():
            pushed = capacity - residual[tail][head]
            if pushed > 0:
                flows[(tail, head)] = pushed

    return MaxFlowResult(value=value, paths=paths, flows=flows)
