"""Visualization utilities for transportation problems and plans.

Providers are drawn in a left column and consumers in a right column; routes
are drawn between them. Requires matplotlib and networkx.

Example:
    >>> from transport_solver import visualize_problem, visualize_plan
    >>>
    >>> fig = visualize_problem(problem)
    >>> fig.savefig("routes.png")
    >>>
    >>> fig = visualize_plan(problem, result)
    >>> fig.savefig("plan.png")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .data import TransportProblem, TransportResult

logger = logging.getLogger(__name__)

# Check for optional dependencies
try:
    import matplotlib.pyplot as plt
    import networkx as nx  # type: ignore[import-untyped,unused-ignore]
    from matplotlib.figure import Figure

    _HAS_VISUALIZATION_DEPS = True
except ImportError:
    _HAS_VISUALIZATION_DEPS = False
    Figure = Any  # type: ignore[misc, assignment]


def _check_dependencies() -> None:
    """Check if visualization dependencies are installed."""
    if not _HAS_VISUALIZATION_DEPS:
        msg = (
            "Visualization requires optional dependencies. "
            "Install with: pip install 'transport_solver[visualization]'"
        )
        raise ImportError(msg)


def _bipartite_graph(providers: list, consumers: list) -> tuple[Any, dict]:
    # Providers and consumers may share ids, so nodes are tagged by side.
    G = nx.DiGraph()
    G.add_nodes_from((("provider", p) for p in providers), side=0)
    G.add_nodes_from((("consumer", c) for c in consumers), side=1)
    pos = nx.bipartite_layout(G, [("provider", p) for p in providers], align="vertical")
    return G, pos


def _draw_nodes(
    G: Any,
    pos: dict,
    ax: Any,
    supply: dict,
    demand: dict,
    dummies: set,
    node_size: int,
    font_size: int,
) -> None:
    providers = [("provider", p) for p in supply]
    consumers = [("consumer", c) for c in demand]
    dummy_nodes = [node for node in providers + consumers if node[1] in dummies]

    nx.draw_networkx_nodes(
        G,
        pos,
        nodelist=[n for n in providers if n not in dummy_nodes],
        node_color="lightgreen",
        node_size=node_size,
        ax=ax,
        label="Providers",
    )
    nx.draw_networkx_nodes(
        G,
        pos,
        nodelist=[n for n in consumers if n not in dummy_nodes],
        node_color="lightcoral",
        node_size=node_size,
        ax=ax,
        label="Consumers",
    )
    if dummy_nodes:
        nx.draw_networkx_nodes(
            G,
            pos,
            nodelist=dummy_nodes,
            node_color="lightgray",
            node_size=node_size,
            ax=ax,
            label="Dummy",
        )

    labels = {("provider", p): f"{p}\n({amount})" for p, amount in supply.items()}
    labels.update({("consumer", c): f"{c}\n({amount})" for c, amount in demand.items()})
    nx.draw_networkx_labels(G, pos, labels=labels, font_size=font_size, ax=ax)


def visualize_problem(
    problem: TransportProblem,
    figsize: tuple[float, float] = (10, 8),
    node_size: int = 1200,
    font_size: int = 10,
    title: str | None = None,
) -> Figure:
    """Draw every provider/consumer route labeled with its unit cost.

    Args:
        problem: Transportation problem to visualize
        figsize: Figure size (width, height) in inches
        node_size: Size of node markers
        font_size: Font size for labels
        title: Custom title for the plot (default: "Transportation Problem")

    Returns:
        matplotlib Figure object

    Raises:
        ImportError: If matplotlib or networkx are not installed
    """
    _check_dependencies()

    G, pos = _bipartite_graph(problem.providers, problem.consumers)
    for (provider, consumer), cost in problem.costs.items():
        G.add_edge(("provider", provider), ("consumer", consumer), cost=cost)

    fig, ax = plt.subplots(figsize=figsize)
    _draw_nodes(G, pos, ax, problem.supply, problem.demand, set(), node_size, font_size)
    nx.draw_networkx_edges(G, pos, edge_color="gray", arrows=True, arrowsize=15, ax=ax, alpha=0.5)
    edge_labels = {(tail, head): str(data["cost"]) for tail, head, data in G.edges(data=True)}
    nx.draw_networkx_edge_labels(
        G, pos, edge_labels=edge_labels, font_size=font_size - 2, label_pos=0.3, ax=ax
    )

    ax.set_title(title or "Transportation Problem", fontsize=14, fontweight="bold")
    ax.legend(loc="upper left", fontsize=font_size)
    ax.axis("off")
    plt.tight_layout()
    return fig


def visualize_plan(
    problem: TransportProblem,
    result: TransportResult,
    figsize: tuple[float, float] = (10, 8),
    node_size: int = 1200,
    font_size: int = 10,
    show_zero_cells: bool = True,
    title: str | None = None,
) -> Figure:
    """Draw the allocation of a solved plan.

    Creates a bipartite drawing showing:
    - Shipped quantity and unit cost on each allocated route
    - Edge width proportional to the shipped quantity
    - Zero-valued basic cells as dashed edges (when ``show_zero_cells``)
    - Dummy nodes in gray

    Args:
        problem: Transportation problem that was solved
        result: Plan from solve_transportation()
        figsize: Figure size (width, height) in inches
        node_size: Size of node markers
        font_size: Font size for labels
        show_zero_cells: Whether to draw basic cells carrying no flow
        title: Custom title for the plot (default: "Transportation Plan (Cost: ...)")

    Returns:
        matplotlib Figure object

    Raises:
        ImportError: If matplotlib or networkx are not installed

    Example:
        >>> result = solve_transportation(problem)
        >>> fig = visualize_plan(problem, result, show_zero_cells=False)
        >>> fig.savefig("plan.png")
    """
    _check_dependencies()

    G, pos = _bipartite_graph(list(result.supply), list(result.demand))
    dummies = {key for key in (result.dummy_provider, result.dummy_consumer) if key is not None}

    shipped = []
    zero_cells = []
    for (provider, consumer), amount in result.allocation.items():
        edge = (("provider", provider), ("consumer", consumer))
        if amount > 0:
            shipped.append((edge, amount))
        elif show_zero_cells:
            zero_cells.append(edge)
        else:
            continue
        G.add_edge(*edge, amount=amount)

    fig, ax = plt.subplots(figsize=figsize)
    _draw_nodes(G, pos, ax, result.supply, result.demand, dummies, node_size, font_size)

    largest = max((amount for _, amount in shipped), default=1)
    if shipped:
        nx.draw_networkx_edges(
            G,
            pos,
            edgelist=[edge for edge, _ in shipped],
            width=[1.0 + 5.0 * amount / largest for _, amount in shipped],
            edge_color="steelblue",
            arrows=True,
            arrowsize=20,
            ax=ax,
            alpha=0.8,
        )
    if zero_cells:
        nx.draw_networkx_edges(
            G,
            pos,
            edgelist=zero_cells,
            style="dashed",
            edge_color="gray",
            arrows=True,
            arrowsize=15,
            ax=ax,
            alpha=0.6,
        )

    edge_labels = {}
    for (tail, head), amount in shipped:
        cost = problem.costs.get((tail[1], head[1]), 0)
        edge_labels[(tail, head)] = f"{amount} @ {cost}"
    for tail, head in zero_cells:
        edge_labels[(tail, head)] = "0"
    nx.draw_networkx_edge_labels(
        G, pos, edge_labels=edge_labels, font_size=font_size - 1, label_pos=0.3, ax=ax
    )

    ax.set_title(
        title or f"Transportation Plan (Cost: {result.objective})",
        fontsize=14,
        fontweight="bold",
    )
    ax.legend(loc="upper left", fontsize=font_size)
    ax.axis("off")

    stats_text = (
        f"Status: {result.status}\n"
        f"Iterations: {result.iterations}\n"
        f"Plans explored: {result.solutions_explored}"
    )
    ax.text(
        0.02,
        0.02,
        stats_text,
        transform=ax.transAxes,
        fontsize=font_size - 1,
        verticalalignment="bottom",
        bbox={"boxstyle": "round", "facecolor": "wheat", "alpha": 0.5},
    )

    plt.tight_layout()
    logger.debug(
        "Rendered transportation plan",
        extra={"shipped_routes": len(shipped), "zero_cells": len(zero_cells)},
    )
    return fig
