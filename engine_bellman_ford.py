"""
Bellman-Ford Relaxation Engine

Runs Bellman-Ford from a source currency over a CurrencyGraph and emits
every discrete event of the run as an immutable step record:

  init → relax* → check-negative* → (negative-cycle-found | complete)

Steps are produced lazily, one per pull, so a consumer can stop early
(e.g. while scrubbing a playback) without paying for the rest of the run.
Each call to run() owns its own distance/predecessor state.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from engine_graph import CurrencyGraph, GraphEdge, find_edge
from errors import InvalidSource

logger = logging.getLogger(__name__)

INF = float("inf")


class StepType(str, Enum):
    INIT = "init"
    RELAX = "relax"
    CHECK_NEGATIVE = "check-negative"
    NEGATIVE_CYCLE_FOUND = "negative-cycle-found"
    COMPLETE = "complete"


TERMINAL_STEP_TYPES = (StepType.NEGATIVE_CYCLE_FOUND, StepType.COMPLETE)


def _json_distance(value: Optional[float]) -> Optional[float]:
    """Infinite distances serialize as null"""
    if value is None or math.isinf(value):
        return None
    return value


def _fmt(value: float) -> str:
    return "∞" if math.isinf(value) else f"{value:.4f}"


@dataclass(frozen=True)
class BellmanFordStep:
    """One event of a Bellman-Ford run"""
    index: int  # Position in the run's step sequence
    type: StepType
    distances: Dict[str, float]  # Copy of every node's distance after this step
    message: str
    iteration: Optional[int] = None  # Relaxation round, 1-based
    edge: Optional[GraphEdge] = None
    old_distance: Optional[float] = None
    new_distance: Optional[float] = None
    relaxed: Optional[bool] = None
    negative_cycle: Optional[Tuple[str, ...]] = None
    profit_percent: Optional[float] = None

    @property
    def from_node(self) -> Optional[str]:
        return self.edge.from_node if self.edge else None

    @property
    def to_node(self) -> Optional[str]:
        return self.edge.to_node if self.edge else None

    @property
    def is_terminal(self) -> bool:
        return self.type in TERMINAL_STEP_TYPES

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "type": self.type.value,
            "iteration": self.iteration,
            "edge": self.edge.to_dict() if self.edge else None,
            "from_node": self.from_node,
            "to_node": self.to_node,
            "old_distance": _json_distance(self.old_distance),
            "new_distance": _json_distance(self.new_distance),
            "relaxed": self.relaxed,
            "distances": {node: _json_distance(d) for node, d in self.distances.items()},
            "negative_cycle": list(self.negative_cycle) if self.negative_cycle is not None else None,
            "profit_percent": round(self.profit_percent, 4) if self.profit_percent is not None else None,
            "message": self.message,
        }


def find_cycle(evidence: Sequence[GraphEdge], predecessors: Dict[str, Optional[str]]) -> List[str]:
    """
    Recover a witness cycle by walking predecessor links backward from the
    first evidence edge's source node.

    Returns the cyclic suffix of the walk (first repeated node onward), in
    predecessor order. When the chain ends before any node repeats, the
    whole walked path is returned instead; that path is not guaranteed to
    be a cycle.
    """
    if not evidence:
        return []

    visited = set()
    walked: List[str] = []
    current: Optional[str] = evidence[0].from_node

    while current is not None and current not in visited:
        visited.add(current)
        walked.append(current)
        current = predecessors.get(current)

    if current is None:
        logger.warning(f"Predecessor chain ended without closing a cycle: {walked}")
        return walked

    return walked[walked.index(current):]


def to_trading_order(cycle: Sequence[str]) -> List[str]:
    """Predecessor-walk order → conversion order, keeping the first node first"""
    if len(cycle) < 2:
        return list(cycle)
    return [cycle[0]] + list(reversed(cycle[1:]))


def calculate_cycle_profit(
    cycle: Sequence[str],
    edges: Sequence[GraphEdge],
    predecessor_edges: Optional[Dict[str, GraphEdge]] = None,
) -> float:
    """
    Product of rates around the loop cycle[0] → cycle[1] → ... → cycle[0].

    When predecessor_edges is given, a leg into node v is priced with the
    edge that last relaxed v, so parallel edges resolve to the one the run
    actually used. Other legs take the first matching edge. A leg with no
    matching edge counts as rate 1.
    """
    predecessor_edges = predecessor_edges or {}
    product = 1.0
    for i, from_node in enumerate(cycle):
        to_node = cycle[(i + 1) % len(cycle)]
        edge = predecessor_edges.get(to_node)
        if edge is None or edge.from_node != from_node:
            edge = find_edge(edges, from_node, to_node)
        if edge:
            product *= edge.rate
        else:
            logger.warning(f"No edge for cycle leg {from_node} → {to_node}, treating rate as 1")
    return product


def run(graph: CurrencyGraph, source: str) -> Iterator[BellmanFordStep]:
    """
    Start a Bellman-Ford run.

    Raises:
        InvalidSource: source is not a node of the graph (raised here,
            before any step is produced)
    """
    if source not in graph.nodes:
        raise InvalidSource(f"Source '{source}' is not in the graph ({', '.join(graph.nodes)})")

    logger.debug(f"Bellman-Ford run from {source}: {len(graph.nodes)} nodes, {len(graph.edges)} edges")
    return _run_steps(graph, source)


def _run_steps(graph: CurrencyGraph, source: str) -> Iterator[BellmanFordStep]:
    nodes = graph.nodes
    edges = graph.edges

    distances: Dict[str, float] = {}
    predecessors: Dict[str, Optional[str]] = {}
    predecessor_edges: Dict[str, GraphEdge] = {}
    counter = 0

    def step(step_type: StepType, message: str, **kwargs) -> BellmanFordStep:
        nonlocal counter
        record = BellmanFordStep(
            index=counter,
            type=step_type,
            distances=dict(distances),
            message=message,
            **kwargs
        )
        counter += 1
        return record

    # Initialize
    for node in nodes:
        distances[node] = 0.0 if node == source else INF
        predecessors[node] = None

    yield step(StepType.INIT, f"Initialized: {source} distance = 0, all others = ∞")

    # Relax edges up to |V| - 1 times
    for i in range(len(nodes) - 1):
        iteration = i + 1
        relaxed_any = False

        for edge in edges:
            old_distance = distances[edge.to_node]
            from_distance = distances[edge.from_node]
            candidate = from_distance + edge.weight

            if not math.isinf(from_distance) and candidate < old_distance:
                distances[edge.to_node] = candidate
                predecessors[edge.to_node] = edge.from_node
                predecessor_edges[edge.to_node] = edge
                relaxed_any = True

                yield step(
                    StepType.RELAX,
                    f"Iteration {iteration}: Relaxed {edge}. Distance updated: "
                    f"{_fmt(old_distance)} → {_fmt(candidate)} (rate: {edge.rate:.4f})",
                    iteration=iteration,
                    edge=edge,
                    old_distance=old_distance,
                    new_distance=candidate,
                    relaxed=True,
                )
            else:
                yield step(
                    StepType.RELAX,
                    f"Iteration {iteration}: Checked {edge}. No update needed "
                    f"({_fmt(candidate)} ≥ {_fmt(old_distance)})",
                    iteration=iteration,
                    edge=edge,
                    old_distance=old_distance,
                    new_distance=candidate,
                    relaxed=False,
                )

        if not relaxed_any:
            yield step(
                StepType.RELAX,
                f"Iteration {iteration}: No edges relaxed. Early termination.",
                iteration=iteration,
                relaxed=False,
            )
            break

    # Any edge still relaxable after |V| - 1 rounds lies on a path through a negative cycle
    evidence: List[GraphEdge] = []
    for edge in edges:
        from_distance = distances[edge.from_node]
        if not math.isinf(from_distance) and from_distance + edge.weight < distances[edge.to_node]:
            evidence.append(edge)
            yield step(
                StepType.CHECK_NEGATIVE,
                f"Negative cycle check: Edge {edge} can still be relaxed!",
                edge=edge,
                old_distance=distances[edge.to_node],
                new_distance=from_distance + edge.weight,
            )

    if evidence:
        cycle = to_trading_order(find_cycle(evidence, predecessors))
        profit_percent = (calculate_cycle_profit(cycle, edges, predecessor_edges) - 1) * 100
        route = " → ".join(cycle + cycle[:1])

        logger.info(f"🎯 ARBITRAGE: {route} | Profit: {profit_percent:.3f}%")
        yield step(
            StepType.NEGATIVE_CYCLE_FOUND,
            f"🎯 ARBITRAGE FOUND! Cycle: {route}. Profit: {profit_percent:.2f}%",
            negative_cycle=tuple(cycle),
            profit_percent=profit_percent,
        )
    else:
        logger.info(f"No arbitrage reachable from {source}")
        yield step(StepType.COMPLETE, "Algorithm complete. No arbitrage opportunities found.")


def run_to_completion(graph: CurrencyGraph, source: str) -> List[BellmanFordStep]:
    """Drain a run into a list"""
    return list(run(graph, source))


def detect_arbitrage(graph: CurrencyGraph, source: str) -> Optional[BellmanFordStep]:
    """Return the negative-cycle-found step of a run, or None"""
    last = None
    for last in run(graph, source):
        pass
    if last is not None and last.type == StepType.NEGATIVE_CYCLE_FOUND:
        return last
    return None
