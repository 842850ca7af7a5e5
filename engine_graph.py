"""
Currency Graph Builder

Turns a set of currencies and pairwise exchange rates into a weighted
directed graph suitable for shortest-path search.

Each rate becomes an edge with weight -ln(rate). Summing weights along a
path gives -ln(product of rates), so:

  product of rates around a loop > 1  <=>  loop weight < 0

and a profitable conversion loop is exactly a negative-weight cycle.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from exchanges.base import ExchangeRate
from errors import InvalidInput

logger = logging.getLogger(__name__)

RateInput = Union[ExchangeRate, Tuple[str, str, float]]


@dataclass(frozen=True)
class GraphEdge:
    """Directed conversion from one currency to another"""
    from_node: str
    to_node: str
    rate: float    # Units of to_node per unit of from_node
    weight: float  # -ln(rate)

    def __str__(self):
        return f"{self.from_node} → {self.to_node}"

    def to_dict(self) -> dict:
        return {
            "from": self.from_node,
            "to": self.to_node,
            "rate": self.rate,
            "weight": self.weight,
        }


@dataclass(frozen=True)
class CurrencyGraph:
    """Immutable node/edge set produced by build_graph"""
    nodes: Tuple[str, ...]
    edges: Tuple[GraphEdge, ...]

    def __contains__(self, node: str) -> bool:
        return node in self.nodes

    def edges_between(self, from_node: str, to_node: str) -> List[GraphEdge]:
        """All parallel edges for a (from, to) pair, in construction order"""
        return [e for e in self.edges if e.from_node == from_node and e.to_node == to_node]

    def find_edge(self, from_node: str, to_node: str) -> Optional[GraphEdge]:
        """First edge for a (from, to) pair, or None"""
        return find_edge(self.edges, from_node, to_node)

    def to_dict(self) -> dict:
        return {
            "nodes": list(self.nodes),
            "edges": [e.to_dict() for e in self.edges],
        }


def find_edge(edges: Iterable[GraphEdge], from_node: str, to_node: str) -> Optional[GraphEdge]:
    for edge in edges:
        if edge.from_node == from_node and edge.to_node == to_node:
            return edge
    return None


def _unpack_rate(rate: RateInput) -> Tuple[str, str, float]:
    if isinstance(rate, ExchangeRate):
        return rate.as_tuple()
    try:
        from_node, to_node, value = rate
    except (TypeError, ValueError):
        raise InvalidInput(f"Rate must be an ExchangeRate or (from, to, rate) tuple, got {rate!r}")
    return from_node, to_node, value


def build_graph(nodes: Iterable[str], rates: Iterable[RateInput]) -> CurrencyGraph:
    """
    Build the weighted conversion graph.

    Args:
        nodes: Distinct currency codes, in display order
        rates: ExchangeRate objects or (from, to, rate) tuples

    Returns:
        CurrencyGraph with one edge per rate, in input order. Duplicate
        (from, to) observations are kept as parallel edges.

    Raises:
        InvalidInput: empty or duplicated node set, unknown currency, or
            a rate that is not a finite positive number
    """
    node_list = list(nodes)
    if not node_list:
        raise InvalidInput("Node set must not be empty")
    if len(set(node_list)) != len(node_list):
        raise InvalidInput(f"Node set contains duplicates: {node_list}")

    known = set(node_list)
    edges: List[GraphEdge] = []

    for raw in rates:
        from_node, to_node, value = _unpack_rate(raw)

        if from_node not in known or to_node not in known:
            raise InvalidInput(f"Rate {from_node} → {to_node} references an unknown currency")
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidInput(f"Rate {from_node} → {to_node} is not a number: {value!r}")
        if not math.isfinite(value) or value <= 0:
            raise InvalidInput(f"Rate {from_node} → {to_node} must be finite and > 0, got {value}")

        edges.append(GraphEdge(
            from_node=from_node,
            to_node=to_node,
            rate=float(value),
            weight=-math.log(value),
        ))

    logger.debug(f"Built graph with {len(node_list)} nodes and {len(edges)} edges")
    return CurrencyGraph(nodes=tuple(node_list), edges=tuple(edges))
